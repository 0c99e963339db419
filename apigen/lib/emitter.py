#!/usr/bin/env python3
"""
Artifact Emitter

Renders the JSON dump, the data-model module and the operation-binding module
from the same entries. All three share the field naming rule
(`to_field_name`) and the type renderer, so the Python sources can be rebuilt
byte-for-byte from a frozen dump.
"""

import json
import textwrap
from typing import Dict, Iterable, List, Sequence, Set

from apigen.schema import (
    ArrayOf,
    DataTypeEntry,
    Opaque,
    OperationEntry,
    Reference,
    Scalar,
    TypeExpr,
    UnionOf,
)

GENERATED_HEADER = "# Code generated by apigen. DO NOT EDIT."

COMMENT_WIDTH = 80

PYTHON_SCALARS = {
    "bool": "bool",
    "int": "int",
    "int64": "int",
    "float": "float",
    "string": "str",
}


def to_field_name(name: str) -> str:
    """`chat_id` -> `ChatId`, `getMe` -> `GetMe`."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_"))


def render_type(expr: TypeExpr) -> str:
    """Python annotation for a type expression."""
    if isinstance(expr, Scalar):
        return PYTHON_SCALARS[expr.name]
    if isinstance(expr, ArrayOf):
        return f"List[{render_type(expr.item)}]"
    if isinstance(expr, UnionOf):
        return f"Union[{', '.join(render_type(m) for m in expr.members)}]"
    if isinstance(expr, Reference):
        return expr.name
    if isinstance(expr, Opaque):
        return "Any"
    raise TypeError(f"not a type expression: {expr!r}")


def referenced_names(expr: TypeExpr) -> Set[str]:
    if isinstance(expr, Reference):
        return {expr.name}
    if isinstance(expr, ArrayOf):
        return referenced_names(expr.item)
    if isinstance(expr, UnionOf):
        names = set()
        for member in expr.members:
            names |= referenced_names(member)
        return names
    return set()


def _wrap(text: str) -> List[str]:
    lines = []
    for line in text.split("\n"):
        wrapped = textwrap.wrap(
            line, width=COMMENT_WIDTH, break_long_words=False, break_on_hyphens=False
        )
        lines.extend(wrapped or [""])
    return lines


def _comment(text: str, indent: str) -> List[str]:
    if not text:
        return []
    return [f"{indent}# {line}".rstrip() for line in _wrap(text)]


def _docstring(parts: Sequence[str], indent: str) -> List[str]:
    text = "\n\n".join(part for part in parts if part)
    if not text:
        return []

    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    lines = [f'{indent}"""']
    lines.extend(f"{indent}{line}".rstrip() for line in _wrap(text))
    lines.append(f'{indent}"""')
    return lines


def _field_line(wire_name: str, expr: TypeExpr, optional: bool, indent: str) -> str:
    name = to_field_name(wire_name)
    annotation = render_type(expr)
    if optional:
        return (
            f"{indent}{name}: Optional[{annotation}] = field("
            f'default=None, metadata={{"json": {json.dumps(wire_name)}, "omitempty": True}})'
        )
    return f'{indent}{name}: {annotation} = field(metadata={{"json": {json.dumps(wire_name)}}})'


class ArtifactEmitter:
    def __init__(self, client_class: str = "Bot", models_module: str = "models"):
        self.client_class = client_class
        self.models_module = models_module

    def render_all(
        self, data_types: List[DataTypeEntry], operations: List[OperationEntry]
    ) -> Dict[str, str]:
        """Render every artifact; nothing is written here."""
        return {
            "models_json": self.render_dump(data_types),
            "methods_json": self.render_dump(operations),
            "models_module": self.render_models(data_types),
            "methods_module": self.render_methods(operations),
        }

    def render_dump(self, entries: Iterable) -> str:
        data = [entry.to_dict() for entry in entries]
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    def render_models(self, data_types: List[DataTypeEntry]) -> str:
        lines = [
            GENERATED_HEADER,
            "",
            "from __future__ import annotations",
            "",
            "from dataclasses import dataclass, field",
            "from typing import Any, List, Optional, Union",
        ]

        for entry in data_types:
            lines.extend(["", ""])
            lines.extend(self._record(
                entry.name,
                [entry.description, entry.additional_notes],
                [(f.name, f.type, f.optional, f.description) for f in entry.fields],
            ))

        return "\n".join(lines) + "\n"

    def render_methods(self, operations: List[OperationEntry]) -> str:
        names = set()
        for op in operations:
            names |= referenced_names(op.return_type)
            for param in op.parameters:
                names |= referenced_names(param.type)

        lines = [
            GENERATED_HEADER,
            "",
            "from __future__ import annotations",
            "",
            "from dataclasses import dataclass, field",
            "from typing import Any, Callable, List, Optional, Union",
        ]
        if names:
            lines.append("")
            lines.append(f"from .{self.models_module} import (")
            lines.extend(f"    {name}," for name in sorted(names))
            lines.append(")")

        for op in operations:
            lines.extend(["", ""])
            lines.extend(self._record(
                self.request_name(op),
                [f"Parameters of {op.name}."],
                [(p.name, p.type, not p.required, p.description) for p in op.parameters],
            ))

        lines.extend(["", ""])
        lines.extend(self._client(operations))
        return "\n".join(lines) + "\n"

    @staticmethod
    def request_name(op: OperationEntry) -> str:
        return f"{to_field_name(op.name)}Request"

    def _record(self, name: str, doc: Sequence[str], fields) -> List[str]:
        lines = ["@dataclass(kw_only=True)", f"class {name}:"]
        body = _docstring(doc, "    ")

        for wire_name, expr, optional, description in fields:
            if body:
                body.append("")
            body.extend(_comment(description, "    "))
            body.append(_field_line(wire_name, expr, optional, "    "))

        lines.extend(body or ["    pass"])
        return lines

    def _client(self, operations: List[OperationEntry]) -> List[str]:
        lines = [
            f"class {self.client_class}:",
            '    """',
            "    Typed bindings over a transport callable",
            "    `perform(method, payload, result_type)` that sends `payload` (or nothing)",
            "    to the named remote method and returns the decoded result.",
            '    """',
            "",
            "    def __init__(self, perform: Callable[[str, Any, Any], Any]):",
            "        self._perform = perform",
        ]

        for op in operations:
            result = render_type(op.return_type)
            method = to_field_name(op.name)
            lines.append("")

            if op.parameters:
                lines.append(f"    def {method}(self, request: {self.request_name(op)}) -> {result}:")
                payload = "request"
            else:
                lines.append(f"    def {method}(self) -> {result}:")
                payload = "None"

            lines.extend(_docstring([op.description, op.additional_notes], "        "))
            lines.append(f"        return self._perform({json.dumps(op.name)}, {payload}, {result})")

        return lines
