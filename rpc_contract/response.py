from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from rpc_contract.abi import decode_call_result
from rpc_contract.codec import TypeLike


@dataclass(frozen=True)
class ContractResponse:
    """Raw `eth_call` output with helpers to read it back."""

    response: Optional[str]

    def to_hex(self) -> str:
        if not isinstance(self.response, str) or not self.response.startswith("0x"):
            raise ValueError(f"Invalid output hex: {self.response!r}")
        return self.response.lower()

    def to_big_int(self) -> int:
        h = self.to_hex()
        return int(h, 16) if len(h) > 2 else 0

    def to_string(self) -> str:
        (value,) = self.decode(["string"])
        return value

    def decode(self, types: Sequence[TypeLike]) -> Tuple[Any, ...]:
        return decode_call_result(self.response, types)
