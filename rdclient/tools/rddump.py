#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import argparse

from cffdump.rd import CaptureDumper

parser = argparse.ArgumentParser(description='Disassemble the command streams in an a2xx .rd capture')
parser.add_argument('-v', '--verbose', action="store_true",
                    help="trace decoding to stderr")
parser.add_argument('--max-depth', type=int, default=None,
                    help="indirect buffer nesting limit (default: $CFFDUMP_MAX_DEPTH or 64)")
parser.add_argument('--no-hexdump', action="store_true",
                    help="do not dump the raw dwords of each packet")
parser.add_argument('rd', type=pathlib.Path)
args = parser.parse_args()

dumper = CaptureDumper(max_depth=args.max_depth, hexdump=not args.no_hexdump,
                       verbose=args.verbose)

try:
    fd = open(args.rd, "rb")
except OSError as e:
    print(f"could not open: {args.rd} ({e.strerror})", file=sys.stderr)
    sys.exit(1)

with fd:
    dumper.dump(fd)

if args.verbose:
    dumper.log(f"{dumper.units} command streams, {len(dumper.errors)} errors")
