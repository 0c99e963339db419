#!/usr/bin/env python3
"""
Type Inference

Maps the documentation's type vocabulary ("Integer", "Array of X",
"X or Y") and the prose of method descriptions onto TypeExpr values. Data
type names are resolved against a TypeRegistry built before inference.
"""

import re
import logging
from typing import List, Optional, Pattern, Tuple

from apigen.errors import ParseStructureError, ReturnTypeError
from apigen.htmlutil import DomNode
from apigen.schema import ArrayOf, Scalar, TypeExpr, TypeRegistry, UnionOf, array_of

logger = logging.getLogger("apigen")

# Tried in order, first match wins. The first group (when there are two) is
# the array marker, the last group is the type token.
RETURN_PATTERNS: Tuple[Pattern, ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"([aA]n [aA]rray of).+?([A-Z][a-zA-Z]+).+?is returned",
        r"[rR]eturns ([aA]rray of )?([a-zA-Z*]+) on success",
        r"[oO]n success, returns[^A-Z]+?(\*?[aA]rray\*? of )?([A-Z][a-zA-Z]+)",
        r"[oO]n success,[^A-Z]+?(\*?[aA]rray\*? of )?([A-Z][a-zA-Z*]+).+?is returned",
        r"[rR]eturns.+?([A-Z][a-zA-Z]+)",
    )
)

SCALAR_WORDS = {
    "integer": "int",
    "int": "int",
    "int64": "int64",
    "boolean": "bool",
    "true": "bool",
    "float": "float",
    "float number": "float",
    "string": "string",
}

ARRAY_PREFIX = "array of "

_MEMBER_SEPARATOR = re.compile(r"\s*,\s*|\s+or\s+|\s+and\s+", re.IGNORECASE)


def is_wide_integer(name: str) -> bool:
    """Identifiers may exceed 32 bits."""
    return name == "id" or "_id" in name


class TypeInferrer:
    def __init__(self, registry: TypeRegistry):
        self.registry = registry

    def canonical(self, token: str, name: str = "") -> TypeExpr:
        """Map a single type token through the canonical table."""
        token = token.strip().strip("*").strip()
        lowered = token.lower()

        if lowered == "integer" and is_wide_integer(name):
            return Scalar("int64")

        if lowered in SCALAR_WORDS:
            return Scalar(SCALAR_WORDS[lowered])

        if lowered == "array":
            raise ParseStructureError(f"type parsed as bare array: {token}")

        if token[:1].isupper():
            return self.registry.resolve(token)

        raise ParseStructureError(f"unknown type: {token!r}")

    def infer_field(self, cell: DomNode, name: str) -> TypeExpr:
        """Infer the type of a field or parameter from its table cell."""
        text = " ".join(cell.inner_text().split())
        links = [" ".join(a.inner_text().split()) for a in cell.query_selector_all("a")]
        return self.infer_text(text, name, links)

    def infer_text(self, text: str, name: str = "", links: Optional[List[str]] = None) -> TypeExpr:
        links = [link for link in (links or []) if link]

        depth = 0
        while text.lower().startswith(ARRAY_PREFIX):
            text = text[len(ARRAY_PREFIX):]
            depth += 1

        if not text:
            raise ParseStructureError(f"empty type for {name!r}")

        if text.lower() in SCALAR_WORDS:
            return array_of(self.canonical(text, name), depth)

        if len(links) > 1 or " or " in text.lower():
            tokens = [token for token in _MEMBER_SEPARATOR.split(text) if token]
            members = tuple(self.canonical(token, name) for token in tokens)
            base = members[0] if len(members) == 1 else UnionOf(members)
            return array_of(base, depth)

        token = links[0] if len(links) == 1 else text
        return array_of(self.canonical(token, name), depth)

    def infer_return(self, description: str) -> TypeExpr:
        """
        Infer an operation's result type from its description.

        Raises:
            ReturnTypeError: No pattern in RETURN_PATTERNS matched
        """
        for pattern in RETURN_PATTERNS:
            match = pattern.search(description)
            if not match:
                continue

            groups = match.groups()
            token = groups[-1]
            is_array = len(groups) > 1 and bool(groups[0])
            result = self.canonical(token)
            logger.debug(f"Return type {result} from pattern {pattern.pattern!r}")
            return ArrayOf(result) if is_array else result

        raise ReturnTypeError(description)
