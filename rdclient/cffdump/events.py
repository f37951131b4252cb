# SPDX-License-Identifier: MIT
"""
Structured output of the stream decoder.

Each event carries the nesting ``level`` it was produced at; the formatter
turns that into indentation. Name fields are None when a value has no entry
in the corresponding table.
"""
from dataclasses import dataclass, field
from typing import Optional

__all__ = [
    "DecodeEvent", "RegisterWrite", "Type1Write", "OpcodePacket", "HexDump",
    "ShaderLoad", "TexConst", "ShaderConst", "ShaderConstData", "BoolConst",
    "LoopConst", "SetRegister", "UnknownConst", "EventWrite", "IndirectBuffer",
    "DecodeError",
]

@dataclass
class DecodeEvent:
    level: int

@dataclass
class RegisterWrite(DecodeEvent):
    gpuaddr: Optional[int]
    base: int
    count: int
    name: Optional[str]
    regs: range = field(default_factory=lambda: range(0))

@dataclass
class Type1Write(DecodeEvent):
    gpuaddr: Optional[int]
    reg0: int
    reg1: int
    name0: Optional[str]
    name1: Optional[str]

@dataclass
class OpcodePacket(DecodeEvent):
    gpuaddr: Optional[int]
    opcode: int
    name: Optional[str]
    count: int

@dataclass
class HexDump(DecodeEvent):
    gpuaddr: Optional[int]
    words: list

@dataclass
class ShaderLoad(DecodeEvent):
    shader: int
    name: Optional[str]
    start: int
    size: int

@dataclass
class TexConst(DecodeEvent):
    index: int
    gpuaddr: int
    flags: int
    width: int
    height: int
    pitch: int
    format: Optional[str]
    mip_gpuaddr: int
    mip_flags: int

@dataclass
class ShaderConst(DecodeEvent):
    index: int

@dataclass
class ShaderConstData(DecodeEvent):
    gpuaddr: int
    size: int
    format: Optional[str]

@dataclass
class BoolConst(DecodeEvent):
    index: int

@dataclass
class LoopConst(DecodeEvent):
    index: int

@dataclass
class SetRegister(DecodeEvent):
    index: int
    name: Optional[str]

@dataclass
class UnknownConst(DecodeEvent):
    namespace: int
    index: int

@dataclass
class EventWrite(DecodeEvent):
    event: int
    name: Optional[str]

@dataclass
class IndirectBuffer(DecodeEvent):
    ibaddr: int
    ibsize: int
    resolved: bool

@dataclass
class DecodeError(DecodeEvent):
    error: Exception
