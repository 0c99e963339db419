"""
Selector

Compiles the narrow selector dialect used by the documentation parser:

    tag?( '#' id | '.' class | '[' attr ('=' value)? ']' )*

Suffixes are split off right-to-left until only the tag name remains. There
are no combinators; nesting is expressed by chaining selectors in
DomNode.query_selector_all.
"""

from functools import lru_cache
from typing import FrozenSet, List, Mapping, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from apigen.errors import SelectorSyntaxError

# Predicate value for `[attr]`: any value matches, and so does absence.
ANY_VALUE = object()


class Selector:
    """Immutable compiled selector."""

    __slots__ = ("source", "tag", "classes", "attributes")

    def __init__(
        self,
        source: str,
        tag: Optional[str],
        classes: FrozenSet[str],
        attributes: Mapping[str, object],
    ):
        self.source = source
        self.tag = tag
        self.classes = classes
        self.attributes = dict(attributes)

    @classmethod
    def parse(cls, source: str) -> "Selector":
        rest = source.strip()
        classes: List[str] = []
        attributes = {}

        while rest:
            if rest.endswith("]"):
                start = rest.rfind("[")
                if start < 0:
                    raise SelectorSyntaxError(source, "']' without matching '['")
                name, value = _parse_attribute(source, rest[start + 1:-1])
                attributes.setdefault(name, value)
                rest = rest[:start]
                continue

            idx = max(rest.rfind("#"), rest.rfind("."), rest.rfind("["))
            if idx < 0:
                break

            marker, token = rest[idx], rest[idx + 1:]
            if marker == "[":
                raise SelectorSyntaxError(source, "end of attribute ']' not found")
            if not token:
                raise SelectorSyntaxError(source, f"empty name after '{marker}'")

            if marker == "#":
                attributes.setdefault("id", token)
            else:
                classes.append(token)
            rest = rest[:idx]

        tag = rest.lower() or None
        return cls(source, tag, frozenset(classes), attributes)

    def matches(self, node) -> bool:
        """Return True if the bs4 node satisfies every part of the selector."""
        if not isinstance(node, Tag) or isinstance(node, BeautifulSoup):
            return False

        if self.tag and (node.name or "").lower() != self.tag:
            return False

        if self.classes:
            value = node.get("class")
            if value is None:
                return False
            node_classes = set(value.split() if isinstance(value, str) else value)
            if not self.classes.issubset(node_classes):
                return False

        for name, expected in self.attributes.items():
            actual = _attribute(node, name)
            if actual is None:
                if expected is ANY_VALUE:
                    continue
                return False
            if expected is not ANY_VALUE and actual != expected:
                return False

        return True

    def __repr__(self) -> str:
        return f"Selector({self.source!r})"


def _parse_attribute(source: str, data: str) -> Tuple[str, object]:
    if "=" not in data:
        name = data.strip().lower()
        if not name:
            raise SelectorSyntaxError(source, "empty attribute name")
        return name, ANY_VALUE

    name, value = data.split("=", 1)
    name = name.strip().lower()
    if not name:
        raise SelectorSyntaxError(source, "empty attribute name")

    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return name, value


def _attribute(node: Tag, name: str) -> Optional[str]:
    for key, value in node.attrs.items():
        if key.lower() == name:
            if isinstance(value, (list, tuple)):
                return " ".join(value)
            return value
    return None


@lru_cache(maxsize=256)
def compile_selector(source: str) -> Selector:
    """Compile a selector string, reusing previously compiled selectors."""
    return Selector.parse(source)
