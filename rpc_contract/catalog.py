from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Tuple, Union

from pydantic import ValidationError

from rpc_contract.errors import AmbiguousOrMissingOverload, MalformedInterface, UnknownMember
from rpc_contract.models import AbiEntry


CONSTRUCTOR = ""

ParameterTypeList = Tuple[str, ...]


class MemberKind(str, Enum):
    FUNCTION = "function"
    EVENT = "event"
    CONSTRUCTOR = "constructor"


@dataclass(frozen=True)
class InterfaceMember:
    name: str
    kind: MemberKind
    overloads: Tuple[ParameterTypeList, ...]


class InterfaceCatalog:
    """
    Functions, events and the constructor of one contract interface, keyed by name.

    Built once from the interface document and never mutated afterwards, so a
    single catalog can be shared between callers.
    """

    def __init__(self, members: Mapping[str, InterfaceMember]):
        self._members = MappingProxyType(dict(members))

    @classmethod
    def load(cls, document: Union[str, bytes, List[Any]]) -> "InterfaceCatalog":
        if isinstance(document, (str, bytes)):
            try:
                document = json.loads(document)
            except ValueError as e:
                raise MalformedInterface(f"Interface document is not valid JSON: {e}") from e
        if not isinstance(document, list):
            raise MalformedInterface(f"Interface document must be a JSON array, got {type(document).__name__}")

        kinds: Dict[str, MemberKind] = {}
        overloads: Dict[str, List[ParameterTypeList]] = {}
        for idx, raw in enumerate(document):
            if not isinstance(raw, dict):
                raise MalformedInterface(f"Entry {idx} is not an object: {raw!r}")
            try:
                entry = AbiEntry.model_validate(raw)
            except ValidationError as e:
                raise MalformedInterface(f"Entry {idx} is malformed: {e}") from e

            if entry.type in (MemberKind.FUNCTION.value, MemberKind.EVENT.value):
                if not entry.name:
                    raise MalformedInterface(f"Entry {idx} ({entry.type}) has no name")
                name = entry.name
            elif entry.type == MemberKind.CONSTRUCTOR.value:
                name = CONSTRUCTOR
            else:
                continue

            kinds.setdefault(name, MemberKind(entry.type))
            types = tuple(i.type for i in entry.inputs)
            known = overloads.setdefault(name, [])
            if types not in known:
                known.append(types)

        members = {
            name: InterfaceMember(name=name, kind=kinds[name], overloads=tuple(lists))
            for name, lists in overloads.items()
        }
        return cls(members)

    def __contains__(self, name: object) -> bool:
        return name in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def names(self) -> List[str]:
        return list(self._members)

    def member(self, name: str) -> InterfaceMember:
        try:
            return self._members[name]
        except KeyError:
            raise UnknownMember(name) from None

    def lookup(self, name: str, arity: int) -> ParameterTypeList:
        member = self.member(name)
        matches = [types for types in member.overloads if len(types) == arity]
        if len(matches) == 1:
            return matches[0]
        if not matches and arity == 0:
            # A member called without arguments resolves to the empty overload.
            return ()
        raise AmbiguousOrMissingOverload(name, arity, len(matches))
