"""
tlsframe.dump
Command line record dump: decode a captured buffer and print every record.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .chain import parse_chain
from .errors import TlsFrameError

logger = logging.getLogger("tlsframe.dump")


def read_input(path: str, as_hex: bool) -> bytes:
    if path == "-":
        raw = sys.stdin.buffer.read()
    else:
        with open(path, "rb") as f:
            raw = f.read()
    if as_hex:
        return bytes.fromhex("".join(raw.decode("ascii").split()))
    return raw


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="tlsframe-dump", description="decode a buffer of TLS records")
    ap.add_argument("path", help="capture buffer file, or - for stdin")
    ap.add_argument("--hex", action="store_true", help="input is hex text (whitespace ignored)")
    ap.add_argument("--offset", type=int, default=0, help="first byte of the record stream")
    ap.add_argument("--length", type=int, default=None, help="bytes to decode (default: to end)")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        data = read_input(args.path, args.hex)
    except OSError as e:
        ap.error(f"cannot read {args.path}: {e}")
    except ValueError as e:
        ap.error(f"invalid hex input: {e}")

    try:
        chain = parse_chain(data, args.offset, args.length)
    except TlsFrameError as e:
        logger.error("decode failed: %s", e)
        return 1

    print(chain.describe())
    print(f"{len(chain)} record(s), {chain.total_length} bytes")
    return 0


if __name__ == "__main__":
    sys.exit(main())
