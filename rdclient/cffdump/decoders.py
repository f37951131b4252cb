# SPDX-License-Identifier: MIT
"""
Type-3 packet decoding.

OPCODES maps each known CP opcode to an OpcodeDescriptor. Opcodes with a
specialized decoder get their payload interpreted; every other opcode is
only named. Decoders are generators of events and receive the stream
decoder (for address lookups and indirect-buffer recursion), the current
DecodeContext, the packet and the nesting level to report at.
"""
from collections import namedtuple

from construct import StreamError

from .utils import align_up, words_to_bytes
from .errors import CffDumpError, OutOfRange, ShortPayload, UnresolvedAddress
from .events import *
from .fw.pm4 import *
from .hw.a2xx import reg_name, event_name, format_name

__all__ = ["OpcodeDescriptor", "OPCODES", "UNKNOWN_OPCODE", "lookup_opcode", "dispatch"]

OpcodeDescriptor = namedtuple("OpcodeDescriptor", "opcode name decoder")

UNKNOWN_OPCODE = OpcodeDescriptor(None, None, None)

def parse_payload(subcon, words, name):
    try:
        return subcon.parse(words_to_bytes(words))
    except StreamError as e:
        raise ShortPayload(name, len(words), subcon.sizeof() // 4) from e

def decode_im_load_immediate(sd, ctx, pkt, level):
    p = parse_payload(IMLoadImmediatePayload, pkt.payload, "IM_LOAD_IMMEDIATE")
    try:
        name = SHADER(p.shader).name.lower()
    except ValueError:
        name = None
    yield ShaderLoad(level, p.shader, name, p.size.START, p.size.SIZE)

def decode_tex_const(sd, index, words, level):
    tex = parse_payload(TexConstPayload, words, "texture const")
    yield TexConst(level, index,
                   gpuaddr=tex.base.gpuaddr,
                   flags=tex.base.FLAGS,
                   width=tex.size.WIDTH + 1,
                   height=tex.size.HEIGHT + 1,
                   pitch=tex.word0.PITCH << 5,
                   format=format_name(tex.base.FORMAT),
                   mip_gpuaddr=tex.mip.gpuaddr,
                   mip_flags=tex.mip.FLAGS)

def decode_shader_const(sd, index, words, level):
    yield ShaderConst(level, index)
    for entry in ShaderConstPayload.parse(words_to_bytes(words)):
        gpuaddr = entry.base.gpuaddr
        nbytes = align_up(entry.size)
        overrun = None
        try:
            ptr = sd.registry.translate_to_host_range(gpuaddr, nbytes)
        except OutOfRange as e:
            overrun = e
            ptr = e.buffer.hostptr(gpuaddr - e.buffer.gpuaddr)
        if ptr is None:
            if sd.verbose:
                sd.log(f"shader const {index:04x}: {gpuaddr:08x} not captured")
            continue
        yield ShaderConstData(level + 1, gpuaddr, entry.size, format_name(entry.base.FORMAT))
        # dumped up to the end of the buffer even when it overruns
        data = ptr.words(nbytes // 4)
        yield HexDump(level + 1, sd.registry.translate_to_device(ptr), data)
        if overrun is not None:
            sd.log(f"shader const {index:04x}: {overrun}")
            yield DecodeError(level + 1, overrun)

def decode_set_constant(sd, ctx, pkt, level):
    p = parse_payload(SetConstantPayload, pkt.payload, "SET_CONSTANT")
    ns, index = p.index.NAMESPACE, p.index.INDEX
    words = pkt.payload[1:]

    if ns == CONST_NS.ALU:
        if index == 0x000:
            yield from decode_tex_const(sd, index, words, level)
        else:
            yield from decode_shader_const(sd, index, words, level)
    elif ns == CONST_NS.BOOL:
        yield BoolConst(level, index)
    elif ns == CONST_NS.LOOP:
        yield LoopConst(level, index)
    elif ns == CONST_NS.REGISTER:
        yield SetRegister(level, index, reg_name(index + 0x2000))
    else:
        yield UnknownConst(level, ns, index)

def decode_event_write(sd, ctx, pkt, level):
    p = parse_payload(EventWritePayload, pkt.payload, "EVENT_WRITE")
    yield EventWrite(level, p.event, event_name(p.event))

def decode_indirect_buffer(sd, ctx, pkt, level):
    ib = parse_payload(IndirectBufferPayload, pkt.payload, "INDIRECT_BUFFER")
    ptr = sd.registry.translate_to_host(ib.ibaddr)
    yield IndirectBuffer(level, ib.ibaddr, ib.ibsize, ptr is not None)

    if ptr is None:
        sd.log(f"could not find: {ib.ibaddr:08x} ({ib.ibsize})")
        yield DecodeError(level, UnresolvedAddress(ib.ibaddr, ib.ibsize))
        return

    try:
        yield from sd.decode(ib.ibaddr, ib.ibsize, ctx.child())
    except CffDumpError as e:
        sd.log(f"IB {ib.ibaddr:08x}: {e}")
        yield DecodeError(level, e)

_DECODERS = {
    CP.IM_LOAD_IMMEDIATE:   decode_im_load_immediate,
    CP.SET_CONSTANT:        decode_set_constant,
    CP.EVENT_WRITE:         decode_event_write,
    CP.INDIRECT_BUFFER:     decode_indirect_buffer,
    CP.INDIRECT_BUFFER_PFD: decode_indirect_buffer,
}

OPCODES = {op.value: OpcodeDescriptor(op.value, op.name, _DECODERS.get(op)) for op in CP}

def lookup_opcode(opcode):
    if not isinstance(opcode, int) or not 0 <= opcode <= 0xff:
        return UNKNOWN_OPCODE
    return OPCODES.get(opcode, UNKNOWN_OPCODE)

def dispatch(sd, ctx, pkt, level):
    desc = lookup_opcode(pkt.opcode)
    if desc.decoder is None:
        return
    try:
        yield from desc.decoder(sd, ctx, pkt, level)
    except ShortPayload as e:
        sd.log(str(e))
        yield DecodeError(level, e)
