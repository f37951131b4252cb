# SPDX-License-Identifier: MIT
from enum import Enum
import itertools, struct
from construct import Adapter, Int32ul, GreedyRange, ListContainer, StreamError

__all__ = []

def align_up(v, a=4):
    return (v + a - 1) & ~(a - 1)

def words_to_bytes(words):
    return struct.pack("<%dI" % len(words), *words)

def bytes_to_words(data):
    return list(struct.unpack_from("<%dI" % (len(data) // 4), data))

def dwdump(words, st=None, indent="", row=8, print_fn=print):
    """Print dwords eight to a line, each line prefixed with the device
    address of its first dword (0 when the address is unknown)."""
    for i in range(0, len(words), row):
        addr = 0 if st is None else st + i * 4
        print_fn(f"{addr:08x}:{indent}" + " ".join("%08x" % w for w in words[i:i+row]))

class SafeGreedyRange(GreedyRange):
    """GreedyRange that stops quietly at a partial trailing record."""

    def _parse(self, stream, context, path):
        obj = ListContainer()
        try:
            for i in itertools.count():
                context._index = i
                obj.append(self.subcon._parsereport(stream, context, path))
        except StreamError:
            pass
        return obj

class RegisterMeta(type):
    def __new__(cls, name, bases, dct):
        m = super().__new__(cls, name, bases, dct)

        f = {}

        if bases and bases[0] is not object:
            for cls in bases[0].mro():
                if cls is Register:
                    break
                f.update({k: None for k,v in cls.__dict__.items()
                          if not k.startswith("_") and isinstance(v, (int, tuple))})

        f.update({k: None for k, v in dct.items()
                 if not k.startswith("_") and isinstance(v, (int, tuple))})

        m._fields_list = list(f.keys())
        m._fields = set(f.keys())

        return m

class Register(metaclass=RegisterMeta):
    """Read-only bitfield view of a captured register value.

    Fields are declared as ``NAME = bit`` or ``NAME = msb, lsb[, type]``.
    """
    def __init__(self, v):
        self._value = v
        for k in self._fields_list:
            getattr(self, k) # validate

    def __getattribute__(self, attr):
        if attr.startswith("_") or attr not in self._fields:
            return object.__getattribute__(self, attr)

        field = getattr(self.__class__, attr)
        value = self._value

        if isinstance(field, int):
            return (value >> field) & 1
        elif isinstance(field, tuple):
            if len(field) == 2:
                msb, lsb = field
                ftype = int
            else:
                msb, lsb, ftype = field
            return ftype((value >> lsb) & ((1 << ((msb + 1) - lsb)) - 1))
        else:
            raise AttributeError(f"Invalid field definition {attr} = {field!r}")

    def __int__(self):
        return self._value

    def _field_val(self, field_name):
        field = getattr(self.__class__, field_name)
        val = getattr(self, field_name)
        if isinstance(val, Enum):
            return f"{val.value}({val.name})"
        elif isinstance(field, tuple):
            msb, lsb = field[:2]
            if (msb - lsb + 1) > 3:
                return f"0x{val:x}"
        return val

    def str_fields(self):
        return ', '.join(f'{k}={self._field_val(k)}' for k in self._fields_list)

    def __str__(self):
        return f"0x{self._value:x} ({self.str_fields()})"

class Register32(Register):
    __WIDTH__ = 32

class RegAdapter(Adapter):
    """Parse-only adapter producing a Register32 view."""
    def __init__(self, register):
        if register.__WIDTH__ != 32:
            raise ValueError("Invalid reg width")

        self.reg = register
        super().__init__(Int32ul)

    def _decode(self, obj, context, path):
        return self.reg(obj)

class RegMapMeta(type):
    def __new__(cls, name, bases, dct):
        m = super().__new__(cls, name, bases, dct)
        if getattr(m, "_addrmap", None) is None:
            m._addrmap = {}
            m._rngmap = []
            m._namemap = {}
        else:
            m._addrmap = dict(m._addrmap)
            m._rngmap = list(m._rngmap)
            m._namemap = dict(m._namemap)

        for k, v in dct.items():
            if k.startswith("_") or not isinstance(v, tuple):
                continue
            addr, rtype = v

            if isinstance(addr, int):
                m._addrmap[addr] = k, rtype
            else:
                m._rngmap.append((addr, k, rtype))

            m._namemap[k] = addr, rtype

        return m

class RegMap(metaclass=RegMapMeta):
    """Static register space: maps register offsets to names.

    Scalar registers are declared as ``NAME = offset, RegisterClass``,
    register arrays as ``NAME = irange(start, count), RegisterClass``.
    When two declarations share an offset, the later one wins.
    """

    @classmethod
    def lookup_offset(cls, offset):
        reg = cls._addrmap.get(offset, None)
        if reg is not None:
            name, rcls = reg
            return name, None, rcls
        for rng, name, rcls in cls._rngmap:
            if offset in rng:
                return name, rng.index(offset), rcls
        return None, None, None

    @classmethod
    def get_name(cls, offset):
        name, index, rcls = cls.lookup_offset(offset)
        if index is not None:
            return f"{name}[{index}]"
        else:
            return name

    @classmethod
    def lookup_name(cls, name):
        return cls._namemap.get(name, None)

def irange(start, count, step=1):
    return range(start, start + count * step, step)

__all__.extend(k for k, v in globals().items()
               if (callable(v) or isinstance(v, type)) and v.__module__ == __name__)
