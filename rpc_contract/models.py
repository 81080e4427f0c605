from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt


class AbiInput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    name: str = ""


class AbiEntry(BaseModel):
    # Compiler output carries outputs, stateMutability, anonymous, ... which are not needed here.
    model_config = ConfigDict(extra="ignore")

    type: str
    name: Optional[str] = None
    inputs: List[AbiInput] = Field(default_factory=list)


class LogFilter(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    address: Optional[str] = None
    from_block: Union[str, NonNegativeInt] = Field(default="latest", alias="fromBlock")
    topics: List[str] = Field(default_factory=list)

    def to_rpc(self) -> dict:
        out = self.model_dump(by_alias=True)
        if isinstance(self.from_block, int):
            out["fromBlock"] = hex(self.from_block)
        if out["address"] is None:
            del out["address"]
        return out
