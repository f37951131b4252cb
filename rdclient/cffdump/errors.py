# SPDX-License-Identifier: MIT

__all__ = [
    "CffDumpError", "MalformedPacket", "TruncatedStream", "UnresolvedAddress",
    "OutOfRange", "ShortPayload", "RecursionLimitExceeded", "CycleDetected",
    "RegistrationFailure",
]

class CffDumpError(Exception):
    pass

class MalformedPacket(CffDumpError):
    def __init__(self, gpuaddr, header):
        self.gpuaddr = gpuaddr
        self.header = header
        super().__init__(f"bad packet type {header >> 30} in header {header:08x}")

class TruncatedStream(CffDumpError):
    def __init__(self, dwords_left, msg=None):
        self.dwords_left = dwords_left
        super().__init__(msg or f"stream truncated, dwords_left={dwords_left}")

class UnresolvedAddress(CffDumpError):
    def __init__(self, gpuaddr, size=None):
        self.gpuaddr = gpuaddr
        self.size = size
        super().__init__(f"could not resolve address {gpuaddr:08x}")

class OutOfRange(CffDumpError):
    def __init__(self, gpuaddr, length, buffer):
        self.gpuaddr = gpuaddr
        self.length = length
        self.buffer = buffer
        super().__init__(f"{gpuaddr:08x}+{length:#x} overruns buffer "
                         f"{buffer.gpuaddr:08x}+{buffer.length:#x}")

class ShortPayload(CffDumpError):
    def __init__(self, name, have, need):
        self.name = name
        self.have = have
        self.need = need
        super().__init__(f"{name}: payload has {have} dwords, need {need}")

class RecursionLimitExceeded(CffDumpError):
    def __init__(self, gpuaddr, depth):
        self.gpuaddr = gpuaddr
        self.depth = depth
        super().__init__(f"indirect buffer nesting too deep at {gpuaddr:08x} (depth {depth})")

class CycleDetected(CffDumpError):
    def __init__(self, gpuaddr):
        self.gpuaddr = gpuaddr
        super().__init__(f"indirect buffer loop at {gpuaddr:08x}")

class RegistrationFailure(CffDumpError):
    pass
