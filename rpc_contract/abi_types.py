from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional, Sequence, Tuple

from rpc_contract.errors import UnsupportedType


_ARRAY_RE = re.compile(r"^(.+)\[([0-9]*)\]$")
_UINT_RE = re.compile(r"^uint([0-9]*)$")
_INT_RE = re.compile(r"^int([0-9]*)$")
_FIXED_BYTES_RE = re.compile(r"^bytes([0-9]+)$")


class Kind(str, Enum):
    ADDRESS = "address"
    BOOL = "bool"
    UINT = "uint"
    INT = "int"
    FIXED_BYTES = "bytesN"
    BYTES = "bytes"
    STRING = "string"
    ARRAY = "array"


@dataclass(frozen=True)
class AbiType:
    """
    One parsed ABI parameter type.

    `bits` is set for the integer kinds, `size` (in bytes) for `bytes<N>`.
    Arrays carry their element type in `item`; `length` is None for `T[]`
    and K for `T[K]`.
    """

    kind: Kind
    bits: Optional[int] = None
    size: Optional[int] = None
    item: Optional["AbiType"] = None
    length: Optional[int] = None

    @property
    def is_dynamic(self) -> bool:
        if self.kind in (Kind.BYTES, Kind.STRING):
            return True
        if self.kind is Kind.ARRAY:
            assert self.item is not None
            return self.length is None or self.item.is_dynamic
        return False

    @property
    def head_words(self) -> int:
        # Static fixed-size arrays are laid out inline, one word per element.
        if self.kind is Kind.ARRAY and not self.is_dynamic:
            assert self.item is not None and self.length is not None
            return self.length * self.item.head_words
        return 1

    def __str__(self) -> str:
        if self.kind in (Kind.UINT, Kind.INT):
            return f"{self.kind.value}{self.bits}"
        if self.kind is Kind.FIXED_BYTES:
            return f"bytes{self.size}"
        if self.kind is Kind.ARRAY:
            dim = "" if self.length is None else str(self.length)
            return f"{self.item}[{dim}]"
        return self.kind.value


def _int_bits(raw: str, digits: str) -> int:
    if not digits:
        return 256
    bits = int(digits)
    if bits < 8 or bits > 256 or bits % 8 != 0:
        raise UnsupportedType(raw)
    return bits


@lru_cache(maxsize=512)
def parse_type(type_str: str) -> AbiType:
    t = str(type_str).strip()
    if not t:
        raise UnsupportedType(type_str)

    m = _ARRAY_RE.match(t)
    if m:
        inner, dim = m.group(1), m.group(2)
        length = None
        if dim:
            length = int(dim)
            if length == 0:
                raise UnsupportedType(type_str)
        return AbiType(kind=Kind.ARRAY, item=parse_type(inner), length=length)

    if t == "address":
        return AbiType(kind=Kind.ADDRESS)
    if t == "bool":
        return AbiType(kind=Kind.BOOL)
    if t == "string":
        return AbiType(kind=Kind.STRING)
    if t == "bytes":
        return AbiType(kind=Kind.BYTES)

    m = _UINT_RE.match(t)
    if m:
        return AbiType(kind=Kind.UINT, bits=_int_bits(type_str, m.group(1)))
    m = _INT_RE.match(t)
    if m:
        return AbiType(kind=Kind.INT, bits=_int_bits(type_str, m.group(1)))
    m = _FIXED_BYTES_RE.match(t)
    if m:
        size = int(m.group(1))
        if size < 1 or size > 32:
            raise UnsupportedType(type_str)
        return AbiType(kind=Kind.FIXED_BYTES, size=size)

    # Tuples, fixed-point and function types are not handled.
    raise UnsupportedType(type_str)


def parse_types(types: Sequence[str]) -> Tuple[AbiType, ...]:
    return tuple(parse_type(t) for t in types)
