#!/usr/bin/env python3
"""
Entry Segmenter

Splits the reference page into heading-anchored entries and turns them into
typed data-type and operation entries in two passes:

1. segment every heading and register the names of all data types that own a
   field table;
2. resolve field, parameter and return types against that registry, so that
   types documented further down the page are still recognized.
"""

import re
import logging
from typing import List, Optional, Tuple

from apigen.errors import ParseStructureError
from apigen.htmlutil import DomNode
from apigen.lib.inference import TypeInferrer
from apigen.lib.prose import ProseExtractor
from apigen.schema import (
    DataTypeEntry,
    EntryKind,
    FieldSpec,
    OperationEntry,
    ParameterSpec,
    RawEntry,
    TypeRegistry,
)

logger = logging.getLogger("apigen")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class EntrySegmenter:
    def __init__(
        self,
        heading_selector: str = "h4",
        anchor_selector: Optional[str] = None,
        prose: Optional[ProseExtractor] = None,
    ):
        self.heading_selector = heading_selector
        self.anchor_selector = anchor_selector
        self.prose = prose or ProseExtractor()

    # ---------- Public API ----------

    def parse(self, body: DomNode) -> Tuple[List[DataTypeEntry], List[OperationEntry]]:
        """Segment `body` and return its data types and operations in document order."""
        raw_entries = self.segment(body)
        registry = self.build_registry(raw_entries)
        logger.info(f"Registered {len(registry)} data types")

        inferrer = TypeInferrer(registry)
        data_types = []
        operations = []

        for raw in raw_entries:
            if raw.kind is EntryKind.DATA_TYPE:
                data_types.append(self._build_data_type(raw, inferrer))
            else:
                operations.append(self._build_operation(raw, inferrer))

        return data_types, operations

    def headings(self, body: DomNode) -> List[DomNode]:
        headings = body.query_selector_all(self.heading_selector)
        if self.anchor_selector:
            headings = [h for h in headings if h.query_selector(self.anchor_selector)]
        return headings

    def segment(self, body: DomNode) -> List[RawEntry]:
        """First pass: one RawEntry per usable heading."""
        entries = []
        for heading in self.headings(body):
            entry = self.segment_heading(heading)
            if entry is not None:
                entries.append(entry)
        return entries

    @staticmethod
    def build_registry(entries: List[RawEntry]) -> TypeRegistry:
        return TypeRegistry(e.title for e in entries if e.kind is EntryKind.DATA_TYPE)

    def segment_heading(self, heading: DomNode) -> Optional[RawEntry]:
        """Build the RawEntry owned by a heading, or None if it is not an entry."""
        next_heading = heading.next(self.heading_selector)
        title = heading.inner_text().strip()

        if not title:
            logger.debug("Skipping heading without text")
            return None

        is_callable = title[0].islower()
        kind = EntryKind.OPERATION if is_callable else EntryKind.DATA_TYPE

        description = self._owned(heading, next_heading, "p")
        quote = self._owned(heading, next_heading, "blockquote")
        table = self._owned(heading, next_heading, "table")

        if table is not None:
            th = table.query_selector("th")
            if th is not None and th.inner_text().strip().lower() == "field":
                if kind is EntryKind.OPERATION:
                    logger.warning(
                        f"'{title}' looks like a method but its table lists fields, "
                        "treating it as a data type"
                    )
                kind = EntryKind.DATA_TYPE

        if kind is EntryKind.DATA_TYPE and table is None:
            logger.debug(f"Skipping '{title}': no field table")
            return None

        if not _IDENTIFIER.match(title):
            logger.warning(f"Skipping '{title}': not a valid identifier")
            return None

        return RawEntry(
            title=title,
            description=self.prose.extract(description) if description else "",
            additional_notes=self.prose.extract(quote) if quote else "",
            table=table,
            is_callable_heuristic=is_callable,
            kind=kind,
        )

    # ---------- Helpers ----------

    @staticmethod
    def _owned(heading: DomNode, next_heading: Optional[DomNode], selector: str) -> Optional[DomNode]:
        node = heading.next(selector)
        if node is not None and node.between(heading, next_heading):
            return node
        return None

    @staticmethod
    def _rows(table: DomNode) -> List[List[DomNode]]:
        rows = []
        for row in table.query_selector_all("tr"):
            cells = row.query_selector_all("td")
            if cells:
                rows.append(cells)
        return rows

    @staticmethod
    def _require_columns(entry: str, cells: List[DomNode], count: int) -> None:
        if len(cells) < count:
            row = " | ".join(c.inner_text().strip() for c in cells)
            raise ParseStructureError(
                f"'{entry}': expected at least {count} columns, got {len(cells)}: {row}"
            )

    def _is_optional(self, cell: DomNode) -> bool:
        if cell.inner_text().strip().lower().startswith("optional"):
            return True
        first = cell.first_child
        while first is not None and first.is_text and not first.inner_text().strip():
            first = first.next_sibling
        return first is not None and first.tag_name == "em"

    def _build_data_type(self, raw: RawEntry, inferrer: TypeInferrer) -> DataTypeEntry:
        fields = []

        for cells in self._rows(raw.table):
            self._require_columns(raw.title, cells, 3)
            name = cells[0].inner_text().strip()
            doc_cell = cells[3] if len(cells) > 3 else cells[2]

            fields.append(FieldSpec(
                name=name,
                type=inferrer.infer_field(cells[1], name),
                optional=self._is_optional(cells[2]),
                description=self.prose.extract(doc_cell),
            ))

        return DataTypeEntry(
            name=raw.title,
            description=raw.description,
            additional_notes=raw.additional_notes,
            fields=tuple(fields),
        )

    def _build_operation(self, raw: RawEntry, inferrer: TypeInferrer) -> OperationEntry:
        parameters = []

        if raw.table is not None:
            for cells in self._rows(raw.table):
                self._require_columns(raw.title, cells, 4)
                name = cells[0].inner_text().strip()

                parameters.append(ParameterSpec(
                    name=name,
                    type=inferrer.infer_field(cells[1], name),
                    required=cells[2].inner_text().strip().lower() == "yes",
                    description=self.prose.extract(cells[3]),
                ))

        return OperationEntry(
            name=raw.title,
            return_type=inferrer.infer_return(raw.description),
            description=raw.description,
            additional_notes=raw.additional_notes,
            parameters=tuple(parameters),
        )
