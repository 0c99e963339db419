"""
Intermediate representation shared by the segmenter, the inference layer and
the emitter.

Type expressions have a compact text form used by the JSON dump:

    int64            scalar
    [Message]        array of a reference
    [[PhotoSize]]    nested arrays
    raw:InputFile    opaque (unknown) type, original token kept
    InputFile | str  union, members in document order
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from apigen.errors import ParseStructureError

SCALARS = ("bool", "int", "int64", "float", "string")

OPAQUE_PREFIX = "raw:"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class Scalar:
    name: str

    def __post_init__(self):
        if self.name not in SCALARS:
            raise ParseStructureError(f"unknown scalar: {self.name}")

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ArrayOf:
    item: "TypeExpr"

    def __str__(self) -> str:
        return f"[{self.item}]"


@dataclass(frozen=True)
class UnionOf:
    members: Tuple["TypeExpr", ...]

    def __str__(self) -> str:
        return " | ".join(str(member) for member in self.members)


@dataclass(frozen=True)
class Reference:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Opaque:
    """A capitalized type token that is not a known data type."""

    token: str

    def __str__(self) -> str:
        return f"{OPAQUE_PREFIX}{self.token}"


TypeExpr = Union[Scalar, ArrayOf, UnionOf, Reference, Opaque]


def array_of(item: TypeExpr, depth: int) -> TypeExpr:
    """Wrap a type expression in `depth` levels of ArrayOf."""
    for _ in range(depth):
        item = ArrayOf(item)
    return item


def _split_union(text: str) -> List[str]:
    parts = []
    depth = 0
    start = 0
    i = 0
    while i < len(text):
        char = text[i]
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        elif depth == 0 and text.startswith(" | ", i):
            parts.append(text[start:i])
            start = i + 3
            i += 3
            continue
        i += 1
    parts.append(text[start:])
    return parts


def parse_type_expr(text: str) -> TypeExpr:
    """Parse the compact text form produced by ``str(expr)``."""
    text = text.strip()
    if not text:
        raise ParseStructureError("empty type expression")

    parts = _split_union(text)
    if len(parts) > 1:
        return UnionOf(tuple(parse_type_expr(part) for part in parts))

    if text.startswith("[") and text.endswith("]"):
        return ArrayOf(parse_type_expr(text[1:-1]))

    if text.startswith(OPAQUE_PREFIX):
        return Opaque(text[len(OPAQUE_PREFIX):])

    if text in SCALARS:
        return Scalar(text)

    if _IDENTIFIER.match(text):
        return Reference(text)

    raise ParseStructureError(f"invalid type expression: {text}")


class EntryKind(Enum):
    DATA_TYPE = "data_type"
    OPERATION = "operation"


@dataclass(frozen=True)
class RawEntry:
    """One heading section before type inference."""

    title: str
    description: str
    additional_notes: str
    table: Optional[Any]
    is_callable_heuristic: bool
    kind: EntryKind


@dataclass(frozen=True)
class FieldSpec:
    name: str
    type: TypeExpr
    optional: bool = False
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = {"field": self.name, "type": str(self.type)}
        if self.description:
            data["description"] = self.description
        if self.optional:
            data["optional"] = True
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldSpec":
        return cls(
            name=data["field"],
            type=parse_type_expr(data["type"]),
            optional=bool(data.get("optional", False)),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class ParameterSpec:
    name: str
    type: TypeExpr
    required: bool = False
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name, "type": str(self.type)}
        if self.required:
            data["required"] = True
        if self.description:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParameterSpec":
        return cls(
            name=data["name"],
            type=parse_type_expr(data["type"]),
            required=bool(data.get("required", False)),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class DataTypeEntry:
    name: str
    description: str = ""
    additional_notes: str = ""
    fields: Tuple[FieldSpec, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name}
        if self.description:
            data["description"] = self.description
        if self.additional_notes:
            data["additional"] = self.additional_notes
        if self.fields:
            data["fields"] = [f.to_dict() for f in self.fields]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DataTypeEntry":
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            additional_notes=data.get("additional", ""),
            fields=tuple(FieldSpec.from_dict(f) for f in data.get("fields", [])),
        )


@dataclass(frozen=True)
class OperationEntry:
    name: str
    return_type: TypeExpr
    description: str = ""
    additional_notes: str = ""
    parameters: Tuple[ParameterSpec, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name}
        if self.description:
            data["description"] = self.description
        if self.additional_notes:
            data["additional"] = self.additional_notes
        if self.parameters:
            data["params"] = [p.to_dict() for p in self.parameters]
        data["return"] = str(self.return_type)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OperationEntry":
        return cls(
            name=data["name"],
            return_type=parse_type_expr(data["return"]),
            description=data.get("description", ""),
            additional_notes=data.get("additional", ""),
            parameters=tuple(ParameterSpec.from_dict(p) for p in data.get("params", [])),
        )


class TypeRegistry:
    """Immutable set of known data-type names, built before resolution."""

    def __init__(self, names: Iterable[str] = ()):
        self._names: FrozenSet[str] = frozenset(names)

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def resolve(self, token: str) -> TypeExpr:
        """Reference for a registered name, Opaque otherwise."""
        if token in self._names:
            return Reference(token)
        return Opaque(token)
