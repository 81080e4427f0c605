"""
Head/tail ABI codec.

Every parameter owns one slot in the head of its block (a static `T[K]` owns
K slots). Static values are written into the slot directly; dynamic values
write a byte offset, relative to the start of the block, and append their
payload to the tail. Array elements form a nested block of their own, so
offsets inside an array are relative to the first word after the count.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Sequence, Tuple, Union

from eth_utils import to_checksum_address

from rpc_contract.abi_types import AbiType, Kind, parse_type
from rpc_contract.errors import TypeMismatch


WORD_BYTES = 32
WORD_HEX = WORD_BYTES * 2
UINT256_MOD = 2**256
MAX_WORD_DIGITS = 78

_HEX_RE = re.compile(r"^0x[0-9a-fA-F]*$")
_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{1,40}$")
_HEX_QUANTITY_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")

TypeLike = Union[str, AbiType]


@dataclass(frozen=True)
class EncodedBlock:
    head: Tuple[str, ...]
    tail: Tuple[str, ...]

    @property
    def words(self) -> Tuple[str, ...]:
        return self.head + self.tail

    def __len__(self) -> int:
        return len(self.head) + len(self.tail)

    def to_hex(self) -> str:
        return "".join(self.words)


def int_word(value: int) -> str:
    if value < 0 or value >= UINT256_MOD:
        raise TypeMismatch(f"Value does not fit in a word: {value}")
    return format(value, f"0{WORD_HEX}x")


def _as_abi_type(t: TypeLike) -> AbiType:
    return t if isinstance(t, AbiType) else parse_type(t)


def _pad_right(data: bytes) -> Tuple[str, ...]:
    padded = data + b"\x00" * (-len(data) % WORD_BYTES)
    h = padded.hex()
    return tuple(h[i : i + WORD_HEX] for i in range(0, len(h), WORD_HEX))


def _hex_to_bytes(value: str) -> bytes:
    body = value[2:]
    if len(body) % 2:
        raise TypeMismatch(f"Hex string has an odd number of digits: {value!r}")
    return bytes.fromhex(body)


def _decimal_to_int(d: Decimal) -> Optional[int]:
    if not d.is_finite():
        return None
    # 2**256 has 78 digits; wider values map to a sentinel the range check rejects.
    if d.adjusted() >= MAX_WORD_DIGITS:
        return UINT256_MOD if d > 0 else -UINT256_MOD
    if d != d.to_integral_value():
        return None
    return int(d)


def _to_int(value: Any, abi_type: AbiType) -> int:
    if isinstance(value, bool):
        if abi_type.kind is not Kind.BOOL:
            raise TypeMismatch(f"Expected a number for {abi_type}, got {value!r}")
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # repr keeps the literal the caller wrote, so 1e30 stays exactly 10**30.
        n = _decimal_to_int(Decimal(repr(value)))
        if n is None:
            raise TypeMismatch(f"Expected an integer for {abi_type}, got {value!r}")
        return n
    if isinstance(value, str):
        s = value.strip()
        neg = s.startswith("-")
        body = s[1:] if neg else s
        n = None
        if _HEX_QUANTITY_RE.match(body):
            n = int(body[2:], 16)
        elif body[:1].isdigit():
            try:
                n = _decimal_to_int(Decimal(body))
            except InvalidOperation:
                n = None
        if n is None:
            raise TypeMismatch(f"Expected an integer for {abi_type}, got {value!r}")
        return -n if neg else n
    raise TypeMismatch(f"Expected a number for {abi_type}, got {value!r}")


def _numeric_word(abi_type: AbiType, value: Any) -> str:
    n = _to_int(value, abi_type)
    if abi_type.kind is Kind.BOOL:
        if n not in (0, 1):
            raise TypeMismatch(f"bool must be 0 or 1, got {value!r}")
        return int_word(n)
    bits = abi_type.bits or 256
    if abi_type.kind is Kind.UINT:
        if n < 0 or n >= 2**bits:
            raise TypeMismatch(f"{value!r} out of range for {abi_type}")
        return int_word(n)
    bound = 2 ** (bits - 1)
    if n < -bound or n >= bound:
        raise TypeMismatch(f"{value!r} out of range for {abi_type}")
    # Two's complement over the whole word.
    return int_word(n % UINT256_MOD)


def _address_word(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)) and len(value) == 20:
        return int_word(int.from_bytes(value, "big"))
    if isinstance(value, str) and _ADDRESS_RE.match(value):
        return int_word(int(value[2:], 16))
    raise TypeMismatch(f"Expected a 0x-prefixed address, got {value!r}")


def _to_bytes(abi_type: AbiType, value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str) and _HEX_RE.match(value):
        return _hex_to_bytes(value)
    raise TypeMismatch(f"Expected bytes or a 0x-prefixed hex string for {abi_type}, got {value!r}")


def _to_items(abi_type: AbiType, value: Any) -> List[Any]:
    if not isinstance(value, (list, tuple)):
        raise TypeMismatch(f"Expected a list for {abi_type}, got {value!r}")
    if abi_type.length is not None and len(value) != abi_type.length:
        raise TypeMismatch(f"{abi_type} needs exactly {abi_type.length} elements, got {len(value)}")
    return list(value)


def encode_value(abi_type: TypeLike, value: Any) -> Tuple[str, ...]:
    """
    Encode one value on its own.

    For static types the result is what goes into the head; for dynamic
    types it is the tail payload the head offset will point at.
    """
    t = _as_abi_type(abi_type)
    kind = t.kind

    if kind is Kind.ADDRESS:
        return (_address_word(value),)
    if kind in (Kind.UINT, Kind.INT, Kind.BOOL):
        return (_numeric_word(t, value),)
    if kind is Kind.FIXED_BYTES:
        data = _to_bytes(t, value)
        assert t.size is not None
        if len(data) > t.size:
            raise TypeMismatch(f"{len(data)} bytes do not fit in {t}")
        return _pad_right(data.ljust(WORD_BYTES, b"\x00"))
    if kind in (Kind.BYTES, Kind.STRING):
        if kind is Kind.STRING:
            if not isinstance(value, str):
                raise TypeMismatch(f"Expected str for string, got {value!r}")
            data = value.encode("utf-8")
        else:
            data = _to_bytes(t, value)
        return (int_word(len(data)),) + _pad_right(data)
    if kind is Kind.ARRAY:
        assert t.item is not None
        items = _to_items(t, value)
        block = encode_block([t.item] * len(items), items)
        if t.length is None:
            return (int_word(len(items)),) + block.words
        return block.words

    raise TypeMismatch(f"Cannot encode {t}")


def encode_block(types: Sequence[TypeLike], values: Sequence[Any]) -> EncodedBlock:
    abi_types = [_as_abi_type(t) for t in types]
    if len(abi_types) != len(values):
        raise TypeMismatch(f"Expected {len(abi_types)} value(s), got {len(values)}")

    head_size = sum(t.head_words for t in abi_types)
    head: List[str] = []
    tail: List[str] = []
    for t, v in zip(abi_types, values):
        words = encode_value(t, v)
        if t.is_dynamic:
            head.append(int_word((head_size + len(tail)) * WORD_BYTES))
            tail.extend(words)
        else:
            head.extend(words)
    return EncodedBlock(head=tuple(head), tail=tuple(tail))


def encode_params(types: Sequence[TypeLike], values: Sequence[Any]) -> str:
    return encode_block(types, values).to_hex()


# --- Decoding


def _read_word(data: bytes, pos: int) -> bytes:
    if pos < 0 or pos + WORD_BYTES > len(data):
        raise TypeMismatch(f"Data too short: need a word at byte {pos}, have {len(data)} bytes")
    return data[pos : pos + WORD_BYTES]


def _read_uint(data: bytes, pos: int) -> int:
    return int.from_bytes(_read_word(data, pos), "big")


def _decode_value(t: AbiType, data: bytes, pos: int) -> Any:
    kind = t.kind

    if kind is Kind.ADDRESS:
        return to_checksum_address("0x" + _read_word(data, pos)[12:].hex())
    if kind is Kind.UINT:
        return _read_uint(data, pos)
    if kind is Kind.INT:
        return int.from_bytes(_read_word(data, pos), "big", signed=True)
    if kind is Kind.BOOL:
        n = _read_uint(data, pos)
        if n not in (0, 1):
            raise TypeMismatch(f"Invalid bool word at byte {pos}: {n}")
        return bool(n)
    if kind is Kind.FIXED_BYTES:
        return _read_word(data, pos)[: t.size]
    if kind in (Kind.BYTES, Kind.STRING):
        length = _read_uint(data, pos)
        start = pos + WORD_BYTES
        if start + length > len(data):
            raise TypeMismatch(f"Payload of {length} bytes at byte {start} runs past the data")
        payload = data[start : start + length]
        if kind is Kind.BYTES:
            return payload
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TypeMismatch(f"string at byte {pos} is not valid UTF-8") from e
    if kind is Kind.ARRAY:
        assert t.item is not None
        if t.length is None:
            count = _read_uint(data, pos)
            pos += WORD_BYTES
        else:
            count = t.length
        if count * WORD_BYTES > len(data) - pos:
            raise TypeMismatch(f"Array of {count} elements at byte {pos} runs past the data")
        return _decode_block([t.item] * count, data, pos)

    raise TypeMismatch(f"Cannot decode {t}")


def _decode_block(types: Sequence[AbiType], data: bytes, start: int) -> List[Any]:
    out: List[Any] = []
    pos = start
    for t in types:
        if t.is_dynamic:
            offset = _read_uint(data, pos)
            out.append(_decode_value(t, data, start + offset))
            pos += WORD_BYTES
        else:
            out.append(_decode_value(t, data, pos))
            pos += t.head_words * WORD_BYTES
    return out


def decode_params(types: Sequence[TypeLike], data: Union[str, bytes]) -> Tuple[Any, ...]:
    if isinstance(data, str):
        if not _HEX_RE.match(data):
            raise TypeMismatch(f"Invalid hex data: {data!r}")
        raw = _hex_to_bytes(data)
    else:
        raw = bytes(data)
    return tuple(_decode_block([_as_abi_type(t) for t in types], raw, 0))
