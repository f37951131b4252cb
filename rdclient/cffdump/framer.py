# SPDX-License-Identifier: MIT
from .fw.pm4 import *
from .errors import MalformedPacket, TruncatedStream

__all__ = ["Packet", "frame_packet"]

class Packet:
    """One PM4 packet inside a word sequence.

    ``words`` holds the packet's dwords (header included) as far as they are
    present in the captured data; ``truncated`` is set when the header
    declares more dwords than are available.
    """
    def __init__(self, kind, count, header, words, ptr=None):
        self.kind = kind
        self.count = count
        self.header = header
        self.words = words
        self.ptr = ptr

    @property
    def truncated(self):
        return len(self.words) < self.count

    @property
    def payload(self):
        return self.words[1:]

    @property
    def opcode(self):
        if self.kind != PacketType.TYPE3:
            return None
        return self.header.OPCODE

    @property
    def base_index(self):
        if self.kind != PacketType.TYPE0:
            return None
        return self.header.BASE_INDEX

    @property
    def reg_range(self):
        """Register indices written by a type-0 packet, one per value."""
        if self.kind != PacketType.TYPE0:
            return range(0)
        nvals = self.count - 1
        if self.header.ONE_REG_WR:
            return range(self.base_index, self.base_index + 1)
        return range(self.base_index, self.base_index + nvals)

    def __repr__(self):
        return f"Packet({self.kind.name}, count={self.count}, header={int(self.header):08x})"

def frame_packet(words, offset, ptr=None):
    """Classify and size the packet starting at ``words[offset]``."""
    if not 0 <= offset < len(words):
        raise TruncatedStream(len(words) - offset,
                              f"no packet header at dword {offset} ({len(words)} available)")

    raw = words[offset]
    kind = PM4Header(raw).TYPE

    if kind == PacketType.TYPE0:
        header = Type0Header(raw)
    elif kind == PacketType.TYPE1:
        header = Type1Header(raw)
    elif kind == PacketType.TYPE3:
        header = Type3Header(raw)
    else:
        raise MalformedPacket(None, raw)

    count = packet_count(raw)
    return Packet(kind, count, header, words[offset:offset + count], ptr)
