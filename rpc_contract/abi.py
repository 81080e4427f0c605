from __future__ import annotations

from typing import Any, Callable, Sequence, Tuple

from eth_utils import keccak, remove_0x_prefix

from rpc_contract.codec import TypeLike, decode_params, encode_params


# Hex in, hex out: takes the 0x-prefixed bytes to hash, returns the 0x-prefixed digest.
Hasher = Callable[[str], str]

SELECTOR_HEX_LEN = 10  # "0x" + 4 bytes


def keccak_hex(hexstr: str) -> str:
    return "0x" + keccak(hexstr=hexstr).hex()


def append_prefix(s: str) -> str:
    return s if s.startswith("0x") else "0x" + s


def build_signature(name: str, types: Sequence[str]) -> str:
    return f"{name}({','.join(str(t) for t in types if t)})"


def signature_hash(signature: str, hasher: Hasher = keccak_hex) -> str:
    digest = hasher("0x" + signature.encode("utf-8").hex())
    return append_prefix(digest.lower())


def derive_selector(signature: str, hasher: Hasher = keccak_hex) -> str:
    return signature_hash(signature, hasher)[:SELECTOR_HEX_LEN]


def assemble(prefix: str, encoded: str) -> str:
    return "0x" + remove_0x_prefix(prefix).lower() + remove_0x_prefix(encoded).lower()


def encode_calldata(
    signature: str,
    arg_types: Sequence[TypeLike],
    args: Sequence[Any],
    hasher: Hasher = keccak_hex,
) -> str:
    return assemble(derive_selector(signature, hasher), encode_params(list(arg_types), list(args)))


def decode_call_result(output_hex: str, out_types: Sequence[TypeLike]) -> Tuple[Any, ...]:
    if output_hex is None:
        raise ValueError("Missing output")
    if not isinstance(output_hex, str) or not output_hex.startswith("0x"):
        raise ValueError(f"Invalid output hex: {output_hex!r}")
    if len(output_hex) == 2:
        return tuple()
    return decode_params(list(out_types), output_hex)
