# SPDX-License-Identifier: MIT
from .utils import dwdump
from .errors import MalformedPacket, TruncatedStream, UnresolvedAddress
from .events import *

__all__ = ["indent", "error_message", "TextFormatter"]

def indent(level):
    return "\t" * (level + 1)

def _name(name):
    return "<unknown>" if name is None else name

def error_message(e):
    if isinstance(e, UnresolvedAddress) and e.size is not None:
        return f"could not find: {e.gpuaddr:08x} ({e.size})"
    if isinstance(e, TruncatedStream) and e.dwords_left < 0:
        return f"this ain't right!! dwords_left={e.dwords_left}"
    if isinstance(e, MalformedPacket):
        return f"bad type! ({e})"
    return f"{type(e).__name__}: {e}"

class TextFormatter:
    """Renders decode events as cffdump text, one print_fn call per line."""

    def __init__(self, print_fn=print):
        self.print_fn = print_fn
        self._handlers = {
            RegisterWrite:      self.fmt_register_write,
            Type1Write:         self.fmt_type1_write,
            OpcodePacket:       self.fmt_opcode,
            HexDump:            self.fmt_hexdump,
            ShaderLoad:         self.fmt_shader_load,
            TexConst:           self.fmt_tex_const,
            ShaderConst:        self.fmt_shader_const,
            ShaderConstData:    self.fmt_shader_const_data,
            BoolConst:          self.fmt_bool_const,
            LoopConst:          self.fmt_loop_const,
            SetRegister:        self.fmt_set_register,
            UnknownConst:       self.fmt_unknown_const,
            EventWrite:         self.fmt_event_write,
            IndirectBuffer:     self.fmt_indirect_buffer,
            DecodeError:        self.fmt_error,
        }

    def emit(self, ev):
        self._handlers[type(ev)](ev)

    def format(self, events):
        for ev in events:
            self.emit(ev)

    def line(self, level, s):
        self.print_fn(indent(level) + s)

    def fmt_register_write(self, ev):
        rng = ""
        if len(ev.regs) > 1:
            rng = f" [{ev.regs[0]:04x}-{ev.regs[-1]:04x}]"
        self.line(ev.level, f"\twrite: {_name(ev.name)} ({ev.base:04x}){rng} ({ev.count} dwords)")

    def fmt_type1_write(self, ev):
        self.line(ev.level, f"\twrite1: {_name(ev.name0)} ({ev.reg0:04x}), "
                            f"{_name(ev.name1)} ({ev.reg1:04x})")

    def fmt_opcode(self, ev):
        self.line(ev.level, f"\topcode: {_name(ev.name)} ({ev.opcode:02x}) ({ev.count} dwords)")

    def fmt_hexdump(self, ev):
        dwdump(ev.words, ev.gpuaddr, indent(ev.level), print_fn=self.print_fn)

    def fmt_shader_load(self, ev):
        self.line(ev.level, f"{_name(ev.name)} shader, start={ev.start:04x}, size={ev.size:04x}")

    def fmt_tex_const(self, ev):
        self.line(ev.level, f"set texture const {ev.index:04x}")
        self.line(ev.level + 1, f"addr={ev.gpuaddr:08x} (flags={ev.flags:03x}), "
                                f"size={ev.width}x{ev.height}, pitch={ev.pitch}, "
                                f"format={_name(ev.format)}")
        self.line(ev.level + 1, f"mipaddr={ev.mip_gpuaddr:08x} (flags={ev.mip_flags:03x})")

    def fmt_shader_const(self, ev):
        self.line(ev.level, f"set shader const {ev.index:04x}")

    def fmt_shader_const_data(self, ev):
        self.line(ev.level, f"addr={ev.gpuaddr:08x}, size={ev.size}, format={_name(ev.format)}")

    def fmt_bool_const(self, ev):
        self.line(ev.level, f"set bool const {ev.index:04x}")

    def fmt_loop_const(self, ev):
        self.line(ev.level, f"set loop const {ev.index:04x}")

    def fmt_set_register(self, ev):
        self.line(ev.level, f"set register {_name(ev.name)}")

    def fmt_unknown_const(self, ev):
        self.line(ev.level, f"unknown constant namespace {ev.namespace:04x}, index {ev.index:04x}")

    def fmt_event_write(self, ev):
        self.line(ev.level, f"event {_name(ev.name)}")

    def fmt_indirect_buffer(self, ev):
        self.line(ev.level, f"ibaddr:{ev.ibaddr:08x}")
        self.line(ev.level, f"ibsize:{ev.ibsize:08x}")

    def fmt_error(self, ev):
        self.line(ev.level, f"**** {error_message(ev.error)}")
