# SPDX-License-Identifier: MIT
"""
PM4 packets, as consumed by the a2xx command processor (CP).

Every packet starts with a header dword whose top two bits select the
packet type:

  type 0: write COUNT+1 consecutive registers starting at BASE_INDEX
  type 1: write two registers whose indices are packed in the header
  type 2: filler, not expected in captured streams
  type 3: CP opcode with COUNT+1 payload dwords
"""
from ..utils import *

from construct import Struct, Int32ul, Hex
from enum import IntEnum

__all__ = []

class PacketType(IntEnum):
    TYPE0 = 0
    TYPE1 = 1
    TYPE2 = 2
    TYPE3 = 3

class PM4Header(Register32):
    TYPE        = 31, 30, PacketType

class Type0Header(PM4Header):
    COUNT       = 29, 16
    ONE_REG_WR  = 15
    BASE_INDEX  = 14, 0

class Type1Header(PM4Header):
    REG1        = 21, 11
    REG0        = 10, 0

class Type3Header(PM4Header):
    COUNT       = 29, 16
    OPCODE      = 15, 8

class CP(IntEnum):
    NOP                     = 0x10
    REG_RMW                 = 0x21
    DRAW_INDX               = 0x22
    VIZ_QUERY               = 0x23
    SET_STATE               = 0x25
    WAIT_FOR_IDLE           = 0x26
    IM_LOAD                 = 0x27
    IM_LOAD_IMMEDIATE       = 0x2b
    IM_STORE                = 0x2c
    SET_CONSTANT            = 0x2d
    LOAD_CONSTANT_CONTEXT   = 0x2e
    DRAW_INDX_BIN           = 0x34
    DRAW_INDX_2_BIN         = 0x35
    DRAW_INDX_2             = 0x36
    INDIRECT_BUFFER_PFD     = 0x37
    INVALIDATE_STATE        = 0x3b
    WAIT_REG_MEM            = 0x3c
    MEM_WRITE               = 0x3d
    REG_TO_MEM              = 0x3e
    INDIRECT_BUFFER         = 0x3f
    INTERRUPT               = 0x40
    COND_EXEC               = 0x44
    COND_WRITE              = 0x45
    EVENT_WRITE             = 0x46
    ME_INIT                 = 0x48
    SET_SHADER_BASES        = 0x4a
    # SET_BIN_BASE_OFFSET on a20x
    SET_DRAW_INIT_FLAGS     = 0x4b
    MEM_WRITE_CNTR          = 0x4f
    SET_BIN_MASK            = 0x50
    SET_BIN_SELECT          = 0x51
    WAIT_REG_EQ             = 0x52
    WAT_REG_GTE             = 0x53
    EVENT_WRITE_SHD         = 0x58
    EVENT_WRITE_CFL         = 0x59
    EVENT_WRITE_ZPD         = 0x5b
    WAIT_UNTIL_READ         = 0x5c
    WAIT_IB_PFD_COMPLETE    = 0x5d
    CONTEXT_UPDATE          = 0x5e
    SET_PROTECTED_MODE      = 0x5f

class SHADER(IntEnum):
    VERTEX      = 0
    FRAGMENT    = 1

class CONST_NS(IntEnum):
    ALU         = 0x1   # index 0 selects the texture fetch constant
    BOOL        = 0x2
    LOOP        = 0x3
    REGISTER    = 0x4

class GPUAddrDword(Register32):
    ADDR        = 31, 12
    FLAGS       = 11, 0
    FORMAT      = 3, 0

    @property
    def gpuaddr(self):
        return self._value & ~0xfff

class IMLoadSize(Register32):
    START       = 31, 16
    SIZE        = 15, 0

class SetConstantIndex(Register32):
    NAMESPACE   = 31, 16
    INDEX       = 15, 0

class TexConst0(Register32):
    PITCH       = 31, 22

class TexConstSize(Register32):
    HEIGHT      = 25, 13
    WIDTH       = 12, 0

IndirectBufferPayload = Struct(
    "ibaddr" / Hex(Int32ul),
    "ibsize" / Int32ul,
)

IMLoadImmediatePayload = Struct(
    "shader" / Int32ul,
    "size" / RegAdapter(IMLoadSize),
)

SetConstantPayload = Struct(
    "index" / RegAdapter(SetConstantIndex),
)

# see sys2gmem_tex_const[] in the kgsl a2xx driver
TexConstPayload = Struct(
    "word0" / RegAdapter(TexConst0),
    "base" / RegAdapter(GPUAddrDword),
    "size" / RegAdapter(TexConstSize),
    "word3" / Hex(Int32ul),
    "word4" / Hex(Int32ul),
    "mip" / RegAdapter(GPUAddrDword),
)

ShaderConstEntry = Struct(
    "base" / RegAdapter(GPUAddrDword),
    "size" / Int32ul,
)

ShaderConstPayload = SafeGreedyRange(ShaderConstEntry)

EventWritePayload = Struct(
    "event" / Int32ul,
)

# largest packet a header can declare, header included
MAX_PACKET_DWORDS = 0x3fff + 2

def packet_count(header):
    """Dword count of the packet starting with ``header``, header included."""
    hdr = PM4Header(header)
    if hdr.TYPE == PacketType.TYPE1:
        return 2
    return ((header >> 16) & 0x3fff) + 2

__all__.extend(k for k, v in globals().items()
               if (callable(v) or isinstance(v, type)) and v.__module__ == __name__)
__all__.extend(["IndirectBufferPayload", "IMLoadImmediatePayload", "SetConstantPayload",
                "TexConstPayload", "ShaderConstEntry", "ShaderConstPayload", "EventWritePayload",
                "MAX_PACKET_DWORDS"])
