# SPDX-License-Identifier: MIT
"""
Captured GPU memory, as recorded by the rd capture tool.

Each snapshot is a copy of a GPU-visible buffer taken at submit time. The
registry maps GPU addresses found in the command stream back to those copies,
and host locations (buffer + offset) back to GPU addresses for display.

Ranges are not checked for overlap: lookups return the first buffer, in
registration order, that contains the address.
"""
from collections import namedtuple

from .utils import bytes_to_words
from .errors import OutOfRange, RegistrationFailure

__all__ = ["CapturedBuffer", "HostPointer", "AddressRegistry"]

class CapturedBuffer:
    __slots__ = ("gpuaddr", "length", "data")

    def __init__(self, gpuaddr, length, data):
        self.gpuaddr = gpuaddr
        self.length = length
        self.data = bytes(data)

    @property
    def end(self):
        return self.gpuaddr + self.length

    def contains(self, gpuaddr):
        return self.gpuaddr <= gpuaddr < self.end

    def hostptr(self, offset=0):
        return HostPointer(self, offset)

    def __repr__(self):
        return f"CapturedBuffer({self.gpuaddr:#010x}, {self.length:#x})"

class HostPointer(namedtuple("HostPointer", "buffer offset")):
    """A byte offset into a captured buffer."""

    def __add__(self, off):
        return HostPointer(self.buffer, self.offset + off)

    @property
    def available(self):
        return max(0, min(self.buffer.length, len(self.buffer.data)) - self.offset)

    def read(self, size):
        size = max(0, min(size, self.available))
        return self.buffer.data[self.offset:self.offset + size]

    def words(self, count):
        return bytes_to_words(self.read(count * 4))

class AddressRegistry:
    def __init__(self):
        self.buffers = []

    def __len__(self):
        return len(self.buffers)

    def __iter__(self):
        return iter(self.buffers)

    def register(self, gpuaddr, length, data):
        if not (0 <= gpuaddr <= 0xffffffff) or length < 0:
            raise RegistrationFailure(f"bad buffer {gpuaddr:#x}+{length:#x}")
        try:
            buf = CapturedBuffer(gpuaddr, length, data)
            self.buffers.append(buf)
        except MemoryError as e:
            raise RegistrationFailure(f"out of memory registering {gpuaddr:08x}+{length:#x}") from e
        return buf

    def find(self, gpuaddr):
        for buf in self.buffers:
            if buf.contains(gpuaddr):
                return buf
        return None

    def translate_to_host(self, gpuaddr):
        if not self.buffers:
            return None
        buf = self.find(gpuaddr)
        if buf is None:
            return None
        return buf.hostptr(gpuaddr - buf.gpuaddr)

    def translate_to_host_range(self, gpuaddr, length):
        ptr = self.translate_to_host(gpuaddr)
        if ptr is None:
            return None
        if gpuaddr + length > ptr.buffer.end:
            raise OutOfRange(gpuaddr, length, ptr.buffer)
        return ptr

    def translate_to_device(self, hostptr):
        for buf in self.buffers:
            if buf is hostptr.buffer and 0 <= hostptr.offset < buf.length:
                return buf.gpuaddr + hostptr.offset
        return None

    def clear(self):
        self.buffers = []
