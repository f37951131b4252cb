# SPDX-License-Identifier: MIT
"""Tests for rdclient/cffdump/registry.py"""

import pytest

from rdclient.cffdump.errors import OutOfRange, RegistrationFailure


class TestAddressRegistry:
    """rdclient.cffdump.registry.AddressRegistry tests"""

    def test_empty(self, fx_registry):
        """Lookups in an empty registry find nothing"""
        assert len(fx_registry) == 0
        assert fx_registry.translate_to_host(0) is None
        assert fx_registry.translate_to_host(0x1000) is None

    def test_round_trip(self, fx_registry):
        """Host pointers map back to the device address they came from"""
        fx_registry.register(0x1000, 0x100, bytes(0x100))
        fx_registry.register(0x8000, 0x40, bytes(0x40))
        for addr in (0x1000, 0x1004, 0x10fc, 0x8000, 0x803c):
            ptr = fx_registry.translate_to_host(addr)
            assert ptr is not None
            assert fx_registry.translate_to_device(ptr) == addr

    def test_offset(self, fx_registry):
        """Pointers are offsets into the containing buffer"""
        buf = fx_registry.register(0x1000, 0x100, bytes(range(0x100)))
        ptr = fx_registry.translate_to_host(0x1010)
        assert ptr.buffer is buf
        assert ptr.offset == 0x10
        assert ptr.read(4) == bytes([0x10, 0x11, 0x12, 0x13])
        assert ptr.words(1) == [0x13121110]

    def test_bounds(self, fx_registry):
        """The end of a buffer is exclusive"""
        fx_registry.register(0x1000, 0x100, bytes(0x100))
        assert fx_registry.translate_to_host(0x0ffc) is None
        assert fx_registry.translate_to_host(0x10ff) is not None
        assert fx_registry.translate_to_host(0x1100) is None

    def test_first_match(self, fx_registry):
        """Overlapping buffers resolve to the first one registered"""
        first = fx_registry.register(0x1000, 0x100, bytes(0x100))
        fx_registry.register(0x1080, 0x100, bytes(0x100))
        assert fx_registry.translate_to_host(0x10c0).buffer is first
        assert fx_registry.translate_to_host(0x1100).offset == 0x80

    def test_device_of_foreign_pointer(self, fx_registry):
        """Pointers into buffers that are no longer registered do not resolve"""
        fx_registry.register(0x1000, 0x100, bytes(0x100))
        ptr = fx_registry.translate_to_host(0x1000)
        fx_registry.clear()
        assert len(fx_registry) == 0
        assert fx_registry.translate_to_device(ptr) is None
        assert fx_registry.translate_to_host(0x1000) is None

    def test_range(self, fx_registry):
        """Range lookups refuse to overrun the buffer"""
        fx_registry.register(0x1000, 0x100, bytes(0x100))
        assert fx_registry.translate_to_host_range(0x1000, 0x100).offset == 0
        assert fx_registry.translate_to_host_range(0x2000, 4) is None
        with pytest.raises(OutOfRange):
            fx_registry.translate_to_host_range(0x10f0, 0x20)

    def test_short_data(self, fx_registry):
        """Reads stop at the end of the captured bytes"""
        fx_registry.register(0x1000, 0x100, bytes(8))
        ptr = fx_registry.translate_to_host(0x1004)
        assert ptr.available == 4
        assert ptr.words(4) == [0]

    @pytest.mark.parametrize("gpuaddr,length", [(-4, 0x10), (1 << 32, 0x10), (0x1000, -1)])
    def test_bad_registration(self, fx_registry, gpuaddr, length):
        """Invalid buffers are rejected"""
        with pytest.raises(RegistrationFailure):
            fx_registry.register(gpuaddr, length, b"")
        assert len(fx_registry) == 0

    def test_no_slot_limit(self, fx_registry):
        """Any number of buffers can be registered"""
        for i in range(1000):
            fx_registry.register(i * 0x1000, 0x10, bytes(0x10))
        assert len(fx_registry) == 1000
        assert fx_registry.translate_to_host(999 * 0x1000 + 4).offset == 4
