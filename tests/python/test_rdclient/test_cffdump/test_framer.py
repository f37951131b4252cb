# SPDX-License-Identifier: MIT
"""Tests for rdclient/cffdump/framer.py"""

import pytest

from rdclient.cffdump.errors import MalformedPacket, TruncatedStream
from rdclient.cffdump.framer import frame_packet
from rdclient.cffdump.fw.pm4 import PacketType, CP, packet_count


class TestFramePacket:
    """rdclient.cffdump.framer.frame_packet tests"""

    def test_type0(self, fx_pm4):
        """Register writes cover COUNT+1 registers from the base index"""
        words = fx_pm4.type0(0x2000, 1, 2, 3)
        pkt = frame_packet(words, 0)
        assert pkt.kind == PacketType.TYPE0
        assert pkt.count == 4
        assert pkt.base_index == 0x2000
        assert pkt.reg_range == range(0x2000, 0x2003)
        assert pkt.payload == [1, 2, 3]
        assert pkt.opcode is None
        assert not pkt.truncated

    def test_type0_one_reg(self, fx_pm4):
        """ONE_REG_WR sends every value to the base register"""
        pkt = frame_packet(fx_pm4.type0(0x0010, 1, 2, one_reg=True), 0)
        assert pkt.base_index == 0x0010
        assert pkt.reg_range == range(0x0010, 0x0011)

    @pytest.mark.parametrize("count_field", [0, 1, 0xff])
    def test_type1_count(self, count_field):
        """Type 1 packets are always two dwords, whatever the header says"""
        hdr = (1 << 30) | (count_field << 22) | (0x12 << 11) | 0x34
        pkt = frame_packet([hdr, 0, 0, 0], 0)
        assert pkt.kind == PacketType.TYPE1
        assert pkt.count == 2
        assert pkt.header.REG0 == 0x34
        assert pkt.header.REG1 == 0x12
        assert packet_count(hdr) == 2

    def test_type3(self, fx_pm4):
        """Opcode packets carry COUNT+1 payload dwords"""
        words = fx_pm4.type3(CP.INDIRECT_BUFFER, 0x1000, 4)
        pkt = frame_packet(words, 0)
        assert pkt.kind == PacketType.TYPE3
        assert pkt.count == 3
        assert pkt.opcode == 0x3f
        assert pkt.payload == [0x1000, 4]

    def test_offset(self, fx_pm4):
        """Packets are framed from the given offset"""
        words = fx_pm4.stream(fx_pm4.type3(CP.NOP, 0), fx_pm4.type0(0x2000, 7))
        pkt = frame_packet(words, 2)
        assert pkt.kind == PacketType.TYPE0
        assert pkt.words == [0x2000, 7]

    def test_type2(self):
        """Type 2 headers are malformed"""
        with pytest.raises(MalformedPacket) as exc:
            frame_packet([0x80000000], 0)
        assert exc.value.header == 0x80000000

    def test_truncated(self, fx_pm4):
        """A packet running past the words is returned partially"""
        words = fx_pm4.type0(0x2000, 1, 2, 3)[:2]
        pkt = frame_packet(words, 0)
        assert pkt.count == 4
        assert pkt.truncated
        assert pkt.words == words

    def test_past_end(self):
        """Framing past the end of the words fails"""
        with pytest.raises(TruncatedStream):
            frame_packet([0x2000, 0], 2)
