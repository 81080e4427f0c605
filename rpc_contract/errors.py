from __future__ import annotations


class AbiError(ValueError):
    pass


class MalformedInterface(AbiError):
    """The interface document could not be parsed into members."""


class UnknownMember(AbiError):
    def __init__(self, name: str):
        super().__init__(f"Unknown contract member: {name!r}")
        self.name = name


class AmbiguousOrMissingOverload(AbiError):
    def __init__(self, name: str, arity: int, matches: int = 0):
        if matches:
            msg = f"{matches} overloads of {name!r} take {arity} argument(s)"
        else:
            msg = f"No overload of {name!r} takes {arity} argument(s)"
        super().__init__(msg)
        self.name = name
        self.arity = arity


class TypeMismatch(AbiError):
    pass


class UnsupportedType(AbiError):
    def __init__(self, type_str: str):
        super().__init__(f"Unsupported ABI type: {type_str!r}")
        self.type_str = type_str
