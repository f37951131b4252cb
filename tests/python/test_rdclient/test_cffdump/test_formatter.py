# SPDX-License-Identifier: MIT
"""Tests for rdclient/cffdump/formatter.py"""

from rdclient.cffdump.errors import *
from rdclient.cffdump.events import *
from rdclient.cffdump.formatter import TextFormatter, indent, error_message
from rdclient.cffdump.fw.pm4 import CP


class TestTextFormatter:
    """rdclient.cffdump.formatter.TextFormatter tests"""

    def test_indent(self):
        """Level n is n+1 tabs, without limit"""
        assert indent(0) == "\t"
        assert indent(3) == "\t\t\t\t"
        assert indent(12) == "\t" * 13

    def test_register_write(self, fx_lines):
        """Single register writes show the base index only"""
        TextFormatter(fx_lines).format([
            RegisterWrite(0, 0x1000, 0x0010, 2, None, range(0x0010, 0x0011)),
            HexDump(1, 0x1000, [0x00000010, 0xdeadbeef]),
        ])
        assert fx_lines == [
            "\t\twrite: <unknown> (0010) (2 dwords)",
            "00001000:\t\t00000010 deadbeef",
        ]

    def test_register_range(self, fx_lines):
        """Block writes show the register range"""
        TextFormatter(fx_lines).emit(
            RegisterWrite(0, 0, 0x2000, 4, "RB_SURFACE_INFO", range(0x2000, 0x2003)))
        assert fx_lines == ["\t\twrite: RB_SURFACE_INFO (2000) [2000-2002] (4 dwords)"]

    def test_opcode(self, fx_lines):
        """Unknown opcodes render as <unknown>"""
        fmt = TextFormatter(fx_lines)
        fmt.emit(OpcodePacket(0, 0, 0x2d, "SET_CONSTANT", 3))
        fmt.emit(OpcodePacket(2, 0, 0xff, None, 2))
        assert fx_lines == [
            "\t\topcode: SET_CONSTANT (2d) (3 dwords)",
            "\t\t\t\topcode: <unknown> (ff) (2 dwords)",
        ]

    def test_hexdump_rows(self, fx_lines):
        """Dumps hold eight dwords per line, addressed by their first dword"""
        TextFormatter(fx_lines).emit(HexDump(0, 0x2000, list(range(9))))
        assert fx_lines == [
            "00002000:\t" + " ".join("%08x" % i for i in range(8)),
            "00002020:\t00000008",
        ]

    def test_hexdump_unknown_address(self, fx_lines):
        """Dumps without a device address start at zero"""
        TextFormatter(fx_lines).emit(HexDump(1, None, [1]))
        assert fx_lines == ["00000000:\t\t00000001"]

    def test_tex_const(self, fx_lines):
        """Texture constants span three lines"""
        TextFormatter(fx_lines).emit(
            TexConst(1, 0, gpuaddr=0x00345000, flags=0x006, width=128, height=64, pitch=96,
                     format="COLORX_S8_8_8_8", mip_gpuaddr=0x00400000, mip_flags=0x00a))
        assert fx_lines == [
            "\t\tset texture const 0000",
            "\t\t\taddr=00345000 (flags=006), size=128x64, pitch=96, format=COLORX_S8_8_8_8",
            "\t\t\tmipaddr=00400000 (flags=00a)",
        ]

    def test_constants(self, fx_lines):
        """One line per constant event"""
        TextFormatter(fx_lines).format([
            ShaderLoad(1, 0, "vertex", 0, 0x40),
            ShaderConst(1, 0x10),
            ShaderConstData(2, 0x00300000, 16, None),
            BoolConst(1, 5),
            LoopConst(1, 6),
            SetRegister(1, 0x184, "SQ_WRAPPING_1"),
            SetRegister(1, 0xffff, None),
            EventWrite(1, 5, "CONTEXT_DONE"),
        ])
        assert fx_lines == [
            "\t\tvertex shader, start=0000, size=0040",
            "\t\tset shader const 0010",
            "\t\t\taddr=00300000, size=16, format=<unknown>",
            "\t\tset bool const 0005",
            "\t\tset loop const 0006",
            "\t\tset register SQ_WRAPPING_1",
            "\t\tset register <unknown>",
            "\t\tevent CONTEXT_DONE",
        ]

    def test_errors(self, fx_lines):
        """Errors are flagged with asterisks"""
        TextFormatter(fx_lines).format([
            DecodeError(1, UnresolvedAddress(0x00900000, 4)),
            DecodeError(0, TruncatedStream(-2)),
        ])
        assert fx_lines == [
            "\t\t**** could not find: 00900000 (4)",
            "\t**** this ain't right!! dwords_left=-2",
        ]

    def test_error_messages(self):
        """Other errors carry their type"""
        assert error_message(MalformedPacket(0x1000, 0x80000000)).startswith("bad type!")
        assert error_message(CycleDetected(0x1000)) == \
            "CycleDetected: indirect buffer loop at 00001000"

    def test_indirect_buffer(self, fx_pm4, fx_add_stream, fx_decoder, fx_lines):
        """Nested streams are indented below their indirect buffer"""
        fx_add_stream(0x1000, fx_pm4.type0(0x2000, 7))
        fx_add_stream(0x2000, fx_pm4.type3(CP.INDIRECT_BUFFER, 0x1000, 2))
        TextFormatter(fx_lines).format(fx_decoder.run(0x2000, 3).events)
        assert fx_lines == [
            "\t\topcode: INDIRECT_BUFFER (3f) (3 dwords)",
            "00002000:\t\tc0013f00 00001000 00000002",
            "\t\tibaddr:00001000",
            "\t\tibsize:00000002",
            "\t\t\twrite: RB_SURFACE_INFO (2000) (2 dwords)",
            "00001000:\t\t\t00002000 00000007",
        ]
