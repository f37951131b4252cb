# SPDX-License-Identifier: MIT
"""cffdump tests common fixtures"""

import struct

import pytest

from rdclient.cffdump.registry import AddressRegistry
from rdclient.cffdump.cmdstream import StreamDecoder
from rdclient.cffdump.utils import words_to_bytes

IB_BASE = 0x00100000
RB_BASE = 0x00200000


class PM4Builder:
    """Assembles PM4 packets as lists of dwords"""

    @staticmethod
    def type0(base, *values, one_reg=False):
        hdr = ((len(values) - 1) << 16) | (int(one_reg) << 15) | base
        return [hdr, *values]

    @staticmethod
    def type1(reg0, reg1, value):
        return [(1 << 30) | (reg1 << 11) | reg0, value]

    @staticmethod
    def type3(opcode, *payload):
        return [(3 << 30) | ((len(payload) - 1) << 16) | (opcode << 8), *payload]

    @staticmethod
    def stream(*packets):
        words = []
        for pkt in packets:
            words.extend(pkt)
        return words


@pytest.fixture
def fx_pm4():
    """Return packet builder"""
    return PM4Builder()


@pytest.fixture
def fx_registry():
    """Return an empty address registry"""
    return AddressRegistry()


@pytest.fixture
def fx_add_stream(fx_registry):
    """Return a function registering a list of dwords at a GPU address"""
    def add(gpuaddr, words, length=None):
        data = words_to_bytes(words)
        return fx_registry.register(gpuaddr, len(data) if length is None else length, data)
    return add


@pytest.fixture
def fx_decoder(fx_registry):
    """Return a stream decoder over fx_registry"""
    return StreamDecoder(fx_registry, max_depth=8)


@pytest.fixture
def fx_lines():
    """Return a print_fn sink collecting output lines"""
    class Lines(list):
        def __call__(self, s=""):
            self.extend(s.split("\n"))
    return Lines()


@pytest.fixture
def fx_rd():
    """Return a function building an .rd capture from (type, data) sections"""
    def build(*sections):
        out = b""
        for stype, data in sections:
            out += struct.pack("<II", int(stype), len(data)) + data
        return out
    return build


@pytest.fixture
def fx_ib_base():
    """Return the address indirect buffers are placed at"""
    return IB_BASE


@pytest.fixture
def fx_rb_base():
    """Return the address top-level streams are placed at"""
    return RB_BASE
