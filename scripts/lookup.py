#!/usr/bin/env python3
"""Look up one or more registrations against the live MOT history API.

Prints the mapped record for each registration, and optionally the raw
upstream document, so fields the mapper ignores are easy to spot.

Usage
-----
Set environment variables and run::

    export MOT_CLIENT_ID=...
    export MOT_CLIENT_SECRET=...
    export MOT_API_KEY=...
    export MOT_TOKEN_URL=https://login.microsoftonline.com/<tenant>/oauth2/v2.0/token
    export MOT_SCOPE_URL=https://tapi.dvsa.gov.uk/.default
    export MOT_BASE_URL=https://history.mot.api.gov.uk
    python scripts/lookup.py AB12CDE "LB 11 WXA"

Options::

    --raw            Also print the raw upstream JSON
    --verbose, -v    Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from motcheck import MotCheckConfig, MotCheckError, VehicleLookupProxy  # noqa: E402


async def main() -> int:
    parser = argparse.ArgumentParser(description="Look up vehicles on the MOT history API.")
    parser.add_argument("registrations", nargs="+", help="Registration plates to look up")
    parser.add_argument("--raw", action="store_true", help="Also print the raw upstream JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        config = MotCheckConfig.from_env()
    except MotCheckError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    failures = 0
    async with VehicleLookupProxy(config) as proxy:
        for registration in args.registrations:
            try:
                record = await proxy.get_vehicle_details(registration)
            except MotCheckError as exc:
                failures += 1
                print(f"!! {registration}: {type(exc).__name__}: {exc}", file=sys.stderr)
                continue
            print(json.dumps(record.to_json_dict(), indent=2))
            if args.raw:
                document = await proxy.fetch_raw_document(registration)
                print(json.dumps(document, indent=2, ensure_ascii=False))

    return 1 if failures else 0


if __name__ == "__main__":
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nInterrupted.")
        raise SystemExit(130) from None
