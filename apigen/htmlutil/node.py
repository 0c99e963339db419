"""
DOM Node

Read-only wrapper around a BeautifulSoup tree. A DomNode never mutates the
underlying tree; two wrappers are equal when they wrap the very same node.
"""

from collections import deque
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from apigen.htmlutil.selector import compile_selector


def parse_document(markup: str) -> "DomNode":
    """Parse an HTML document and return its root node."""
    return DomNode(BeautifulSoup(markup, "html.parser"))


def _wrap(node) -> Optional["DomNode"]:
    if node is None:
        return None
    return DomNode(node)


def _is_text(node) -> bool:
    # Comments, doctypes and CDATA are PreformattedString subclasses.
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def _is_container(node) -> bool:
    return isinstance(node, Tag)


def _first_child(node):
    if isinstance(node, Tag) and node.contents:
        return node.contents[0]
    return None


class DomNode:
    __slots__ = ("node",)

    def __init__(self, node):
        self.node = node

    def __eq__(self, other) -> bool:
        return isinstance(other, DomNode) and other.node is self.node

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return id(self.node)

    def __str__(self) -> str:
        return self.outer_html()

    def __repr__(self) -> str:
        return f"DomNode(<{self.tag_name or type(self.node).__name__}>)"

    # ---------- Markup ----------

    def outer_html(self) -> str:
        if isinstance(self.node, BeautifulSoup):
            return self.inner_html()
        if _is_text(self.node):
            return self.node.output_ready()
        return str(self.node)

    def inner_html(self) -> str:
        if not isinstance(self.node, Tag):
            return ""
        return self.node.decode_contents()

    def inner_text(self) -> str:
        """Concatenated text of every descendant text node, in document order."""
        if _is_text(self.node):
            return str(self.node)

        parts = []
        child = _first_child(self.node)
        while child is not None:
            if _is_text(child):
                parts.append(str(child))
            elif isinstance(child, Tag):
                parts.append(DomNode(child).inner_text())
            child = child.next_sibling
        return "".join(parts)

    # ---------- Node info ----------

    @property
    def is_element(self) -> bool:
        return isinstance(self.node, Tag) and not isinstance(self.node, BeautifulSoup)

    @property
    def is_text(self) -> bool:
        return _is_text(self.node)

    @property
    def tag_name(self) -> str:
        if self.is_element:
            return self.node.name.lower()
        return ""

    def attribute(self, name: str) -> str:
        """Attribute value (multi-valued attributes joined by spaces), or ''."""
        if not self.is_element:
            return ""
        name = name.lower()
        for key, value in self.node.attrs.items():
            if key.lower() == name:
                if isinstance(value, (list, tuple)):
                    return " ".join(value)
                return value
        return ""

    def matches(self, selector: str) -> bool:
        return compile_selector(selector).matches(self.node)

    # ---------- Relations ----------

    @property
    def parent(self) -> Optional["DomNode"]:
        return _wrap(self.node.parent)

    @property
    def first_child(self) -> Optional["DomNode"]:
        return _wrap(_first_child(self.node))

    @property
    def next_sibling(self) -> Optional["DomNode"]:
        return _wrap(self.node.next_sibling)

    @property
    def prev_sibling(self) -> Optional["DomNode"]:
        return _wrap(self.node.previous_sibling)

    def children(self) -> List["DomNode"]:
        if not isinstance(self.node, Tag):
            return []
        return [DomNode(child) for child in self.node.contents]

    def next_element(self) -> Optional["DomNode"]:
        sibling = self.node.next_sibling
        while sibling is not None:
            if isinstance(sibling, Tag):
                return DomNode(sibling)
            sibling = sibling.next_sibling
        return None

    def prev_element(self) -> Optional["DomNode"]:
        sibling = self.node.previous_sibling
        while sibling is not None:
            if isinstance(sibling, Tag):
                return DomNode(sibling)
            sibling = sibling.previous_sibling
        return None

    def parents(self, selector: str) -> Optional["DomNode"]:
        """Closest ancestor matching the selector."""
        s = compile_selector(selector)
        ancestor = self.node.parent
        while ancestor is not None:
            if s.matches(ancestor):
                return DomNode(ancestor)
            ancestor = ancestor.parent
        return None

    def next(self, selector: str) -> Optional["DomNode"]:
        """Nearest following sibling matching the selector."""
        s = compile_selector(selector)
        sibling = self.node.next_sibling
        while sibling is not None:
            if s.matches(sibling):
                return DomNode(sibling)
            sibling = sibling.next_sibling
        return None

    def previous(self, selector: str) -> Optional["DomNode"]:
        """Nearest preceding sibling matching the selector."""
        s = compile_selector(selector)
        sibling = self.node.previous_sibling
        while sibling is not None:
            if s.matches(sibling):
                return DomNode(sibling)
            sibling = sibling.previous_sibling
        return None

    def between(self, start: Optional["DomNode"], end: Optional["DomNode"] = None) -> bool:
        """
        True if this node is a sibling strictly after `start` and, when `end`
        is given, strictly before `end`.
        """
        if start is None:
            return False

        sibling = start.node.next_sibling
        while sibling is not None:
            if end is not None and sibling is end.node:
                return False
            if sibling is self.node:
                return True
            sibling = sibling.next_sibling
        return False

    # ---------- Queries ----------

    def _iter_matches(self, selector: str, nested) -> Iterator["DomNode"]:
        s = compile_selector(selector)
        queue = deque([_first_child(self.node)])

        while queue:
            sibling = queue.popleft()
            while sibling is not None:
                if _is_container(sibling):
                    if s.matches(sibling):
                        if nested:
                            yield from DomNode(sibling)._iter_matches(nested[0], nested[1:])
                        else:
                            yield DomNode(sibling)
                    queue.append(_first_child(sibling))
                sibling = sibling.next_sibling

    def query_selector_all(self, selector: str, *nested: str) -> List["DomNode"]:
        """
        Every descendant matching `selector`; with `nested` selectors each
        match is searched again with the remaining chain.

        Sibling chains are visited breadth-first, children of each level are
        queued behind the current level.
        """
        return list(self._iter_matches(selector, nested))

    def query_selector(self, selector: str, *nested: str) -> Optional["DomNode"]:
        return next(self._iter_matches(selector, nested), None)
