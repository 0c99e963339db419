#!/usr/bin/env python3
"""
Prose Extractor

Turns the inline markup of description paragraphs, callouts and table cells
into Markdown-flavoured plain text for docstrings and the JSON dump.
"""

import logging

from apigen.htmlutil import DomNode

logger = logging.getLogger("apigen")

_QUOTES = {
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
}


class ProseExtractor:
    def extract(self, node: DomNode) -> str:
        """Convert the children of `node` to text, trimmed."""
        text = self._convert(node)
        for curly, straight in _QUOTES.items():
            text = text.replace(curly, straight)
        return text.strip()

    def _convert(self, node: DomNode) -> str:
        parts = []

        child = node.first_child
        while child is not None:
            if child.is_text:
                parts.append(child.inner_text())
            elif child.is_element:
                parts.append(self._convert_element(child))
            child = child.next_sibling

        return "".join(parts)

    def _convert_element(self, node: DomNode) -> str:
        tag = node.tag_name

        if tag == "em" or tag == "i":
            return f"*{self._convert(node)}*"
        if tag == "strong" or tag == "b":
            return f"**{self._convert(node)}**"
        if tag == "code":
            return f"`{self._convert(node)}`"
        if tag == "br":
            return "\n"
        if tag == "img":
            alt = node.attribute("alt")
            return alt if alt else f"[{node.attribute('src')}]"
        if tag == "li":
            return f"\n  - {self._convert(node)}"
        if tag in ("a", "p", "span", "ul", "ol", "blockquote"):
            return self._convert(node)

        logger.debug(f"Keeping unsupported inline markup as-is: {node.outer_html()}")
        return node.outer_html()
