# SPDX-License-Identifier: MIT
import os, sys

from .errors import *
from .events import *
from .framer import frame_packet
from .fw.pm4 import PacketType, MAX_PACKET_DWORDS
from .hw.a2xx import reg_name
from .decoders import lookup_opcode, dispatch

__all__ = ["MAX_DEPTH", "depth_ceiling", "DecodeContext", "DecodeResult", "StreamDecoder"]

MAX_DEPTH = int(os.environ.get("CFFDUMP_MAX_DEPTH", "64"))

# generator frames each indirect-buffer level keeps on the stack
FRAMES_PER_LEVEL = 6

def depth_ceiling():
    """Deepest nesting the interpreter recursion limit leaves room for."""
    return max(0, (sys.getrecursionlimit() - 100) // FRAMES_PER_LEVEL)

class DecodeContext:
    """Per call-chain state: nesting depth and the addresses being decoded."""

    def __init__(self, depth=0, in_progress=None, max_depth=MAX_DEPTH):
        self.depth = depth
        self.in_progress = set() if in_progress is None else in_progress
        self.max_depth = max_depth

    def child(self):
        return DecodeContext(self.depth + 1, self.in_progress, self.max_depth)

class DecodeResult:
    def __init__(self, events):
        self.events = events

    @property
    def errors(self):
        return [ev.error for ev in self.events if isinstance(ev, DecodeError)]

    @property
    def ok(self):
        return not self.errors

class StreamDecoder:
    """
    Walks a command stream in captured memory and produces decode events.

    Indirect buffers are followed depth-first. Each call chain refuses to
    re-enter an address it is already decoding and gives up past
    ``max_depth`` levels of nesting.
    """

    def __init__(self, registry, max_depth=None, hexdump=True, verbose=False):
        self.registry = registry
        self.max_depth = MAX_DEPTH if max_depth is None else max_depth
        self.hexdump = hexdump
        self.verbose = verbose

    def log(self, msg):
        print(f"[cffdump] {msg}", file=sys.stderr)

    def decode(self, gpuaddr, sizedwords, ctx):
        if ctx.depth > ctx.max_depth:
            raise RecursionLimitExceeded(gpuaddr, ctx.depth)
        if gpuaddr in ctx.in_progress:
            raise CycleDetected(gpuaddr)

        ptr = self.registry.translate_to_host(gpuaddr)
        if ptr is None:
            raise UnresolvedAddress(gpuaddr, sizedwords)

        if self.verbose:
            self.log(f"decoding {gpuaddr:08x} ({sizedwords} dwords) at depth {ctx.depth}")

        ctx.in_progress.add(gpuaddr)
        try:
            yield from self._walk(ptr, sizedwords, ctx)
        finally:
            ctx.in_progress.discard(gpuaddr)

    def _walk(self, ptr, sizedwords, ctx):
        # the last packet may run past sizedwords by up to one full packet
        words = ptr.words(min(ptr.available // 4, max(sizedwords, 0) + MAX_PACKET_DWORDS))
        offset = 0
        dwords_left = sizedwords

        while dwords_left > 0:
            pkt_ptr = ptr + offset * 4
            try:
                pkt = frame_packet(words, offset, pkt_ptr)
            except MalformedPacket as e:
                e.gpuaddr = self.registry.translate_to_device(pkt_ptr)
                raise
            except TruncatedStream:
                raise TruncatedStream(dwords_left,
                                      f"stream ends {dwords_left} dwords early at "
                                      f"{ptr.buffer.gpuaddr + pkt_ptr.offset:08x}") from None

            if pkt.truncated:
                raise TruncatedStream(dwords_left,
                                      f"packet at {ptr.buffer.gpuaddr + pkt_ptr.offset:08x} "
                                      f"needs {pkt.count} dwords, {len(pkt.words)} captured")

            yield from self.decode_packet(pkt, ctx)

            offset += pkt.count
            dwords_left -= pkt.count

        if dwords_left < 0:
            raise TruncatedStream(dwords_left)

    def decode_packet(self, pkt, ctx):
        level = ctx.depth
        gpuaddr = self.registry.translate_to_device(pkt.ptr) if pkt.ptr is not None else None

        if self.verbose:
            self.log(f"{gpuaddr or 0:08x}: {pkt.header}")

        if pkt.kind == PacketType.TYPE0:
            base = pkt.base_index
            yield RegisterWrite(level, gpuaddr, base, pkt.count, reg_name(base), pkt.reg_range)
        elif pkt.kind == PacketType.TYPE1:
            r0, r1 = pkt.header.REG0, pkt.header.REG1
            yield Type1Write(level, gpuaddr, r0, r1, reg_name(r0), reg_name(r1))
        else:
            desc = lookup_opcode(pkt.opcode)
            yield OpcodePacket(level, gpuaddr, pkt.opcode, desc.name, pkt.count)

        if self.hexdump:
            yield HexDump(level + 1, gpuaddr, pkt.words)

        if pkt.kind == PacketType.TYPE3:
            yield from dispatch(self, ctx, pkt, level + 1)

    def iter_events(self, gpuaddr, sizedwords):
        """Decode a top-level stream, turning a fatal error into a final
        DecodeError event instead of raising it."""
        max_depth = min(self.max_depth, depth_ceiling())
        if max_depth < self.max_depth and self.verbose:
            self.log(f"nesting limited to {max_depth} by the recursion limit")

        ctx = DecodeContext(max_depth=max_depth)
        try:
            yield from self.decode(gpuaddr, sizedwords, ctx)
        except CffDumpError as e:
            self.log(f"cmdstream {gpuaddr:08x}: {e}")
            yield DecodeError(ctx.depth, e)
        except RecursionError:
            e = RecursionLimitExceeded(gpuaddr, max_depth)
            self.log(f"cmdstream {gpuaddr:08x}: {e}")
            yield DecodeError(ctx.depth, e)

    def run(self, gpuaddr, sizedwords):
        return DecodeResult(list(self.iter_events(gpuaddr, sizedwords)))
