"""Minimal read-only DOM and selector engine over BeautifulSoup trees."""

from .node import DomNode, parse_document
from .selector import ANY_VALUE, Selector, compile_selector

__all__ = [
    "DomNode",
    "parse_document",
    "ANY_VALUE",
    "Selector",
    "compile_selector",
]
