# SPDX-License-Identifier: MIT
"""
.rd capture files.

A capture is a flat sequence of sections, each a little-endian type and
size followed by ``size`` bytes of data. Buffer snapshots arrive as a
GPUADDR section (address, length) followed by BUFFER_CONTENTS; a
CMDSTREAM_ADDR section then names the command stream to decode against
everything captured since the previous one.
"""
import sys
from enum import IntEnum
from io import BytesIO

from construct import Struct, Int32ul, Hex, Bytes, StreamError, this

from .errors import RegistrationFailure
from .registry import AddressRegistry
from .cmdstream import StreamDecoder
from .events import DecodeError
from .formatter import TextFormatter

__all__ = ["RD", "RDSection", "RDAddrInfo", "iter_sections", "CaptureDumper", "dump_file"]

class RD(IntEnum):
    NONE            = 0
    TEST            = 1
    CMD             = 2
    GPUADDR         = 3
    CONTEXT         = 4
    CMDSTREAM       = 5
    CMDSTREAM_ADDR  = 6
    PARAM           = 7
    FLUSH           = 8
    PROGRAM         = 9
    VERT_SHADER     = 10
    FRAG_SHADER     = 11
    BUFFER_CONTENTS = 12
    GPU_ID          = 13

RDSection = Struct(
    "type" / Int32ul,
    "size" / Int32ul,
    "data" / Bytes(this.size),
)

# GPUADDR: buffer address and byte length; CMDSTREAM_ADDR: address and dword count
RDAddrInfo = Struct(
    "gpuaddr" / Hex(Int32ul),
    "size" / Int32ul,
)

def iter_sections(fd):
    """Yield sections until the end of the file. A truncated trailing
    section ends the capture."""
    while True:
        try:
            sect = RDSection.parse_stream(fd)
        except StreamError:
            return
        yield sect

def _text(data):
    return data.split(b"\0", 1)[0].decode("utf-8", "replace")

class CaptureDumper:
    def __init__(self, print_fn=print, max_depth=None, hexdump=True, verbose=False):
        self.print_fn = print_fn
        self.verbose = verbose
        self.registry = AddressRegistry()
        self.decoder = StreamDecoder(self.registry, max_depth=max_depth,
                                     hexdump=hexdump, verbose=verbose)
        self.formatter = TextFormatter(print_fn)
        self.pending = None
        self.unit_failed = False
        self.errors = []
        self.units = 0

        self._handlers = {
            RD.TEST:            self.handle_test,
            RD.CMD:             self.handle_cmd,
            RD.VERT_SHADER:     self.handle_vert_shader,
            RD.FRAG_SHADER:     self.handle_frag_shader,
            RD.GPUADDR:         self.handle_gpuaddr,
            RD.BUFFER_CONTENTS: self.handle_buffer_contents,
            RD.CMDSTREAM_ADDR:  self.handle_cmdstream_addr,
        }

    def log(self, msg):
        print(f"[cffdump] {msg}", file=sys.stderr)

    def handle(self, sect):
        try:
            stype = RD(sect.type)
        except ValueError:
            if self.verbose:
                self.log(f"skipping unknown section type {sect.type} ({sect.size} bytes)")
            return

        handler = self._handlers.get(stype, None)
        if handler is None:
            if self.verbose:
                self.log(f"skipping {stype.name} section ({sect.size} bytes)")
            return
        handler(sect.data)

    def handle_test(self, data):
        self.print_fn(f"test: {_text(data)}")

    def handle_cmd(self, data):
        self.print_fn(f"cmd: {_text(data)}")

    def handle_vert_shader(self, data):
        self.print_fn(f"vertex shader:\n{_text(data)}")

    def handle_frag_shader(self, data):
        self.print_fn(f"fragment shader:\n{_text(data)}")

    def handle_gpuaddr(self, data):
        try:
            self.pending = RDAddrInfo.parse(data)
        except StreamError:
            self.log(f"short GPUADDR section ({len(data)} bytes)")
            self.pending = None

    def handle_buffer_contents(self, data):
        if self.pending is None:
            self.log(f"BUFFER_CONTENTS ({len(data)} bytes) without GPUADDR, skipped")
            return
        gpuaddr, length = self.pending.gpuaddr, self.pending.size
        self.pending = None

        if self.unit_failed:
            return
        if len(data) < length and self.verbose:
            self.log(f"buffer {gpuaddr:08x}: {len(data)} of {length} bytes captured")
        try:
            self.registry.register(gpuaddr, length, data)
        except RegistrationFailure as e:
            self.log(f"dropping capture unit: {e}")
            self.errors.append(e)
            self.unit_failed = True
            self.registry.clear()

    def handle_cmdstream_addr(self, data):
        try:
            info = RDAddrInfo.parse(data)
        except StreamError:
            self.log(f"short CMDSTREAM_ADDR section ({len(data)} bytes)")
            return

        self.print_fn(f"cmdstream: {info.size} dwords")
        self.units += 1
        try:
            if self.unit_failed:
                self.log(f"cmdstream {info.gpuaddr:08x} not decoded, buffer registration failed")
                return
            for ev in self.decoder.iter_events(info.gpuaddr, info.size):
                if isinstance(ev, DecodeError):
                    self.errors.append(ev.error)
                self.formatter.emit(ev)
        finally:
            self.registry.clear()
            self.unit_failed = False

    def dump(self, fd):
        for sect in iter_sections(fd):
            self.handle(sect)

    def dump_bytes(self, data):
        self.dump(BytesIO(data))

def dump_file(path, **kwargs):
    dumper = CaptureDumper(**kwargs)
    with open(path, "rb") as fd:
        dumper.dump(fd)
    return dumper
