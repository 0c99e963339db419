import os
import logging
from typing import Dict, List, Optional, Tuple

from apigen.errors import ParseStructureError
from apigen.htmlutil import DomNode, parse_document
from apigen.lib import ArtifactEmitter, EntrySegmenter, SnapshotStore
from apigen.schema import DataTypeEntry, OperationEntry
from apigen.utils.config import ConfigManager
from apigen.utils.http import HTTPClient
from apigen.utils.logging import log_with_context

logger = logging.getLogger('apigen')


class ApiGenerator:
    def __init__(self, config_path: Optional[str] = "config.yaml", output_dir: Optional[str] = None):
        """Initialize the generator with configuration."""
        self.config_manager = ConfigManager(config_path)
        self.config = self.config_manager.get_config()

        self.source = self.config_manager.get_section('source')
        parser = self.config_manager.get_section('parser')
        output = self.config_manager.get_section('output')

        self.output_dir = os.path.abspath(output_dir or output['dir'])
        self.body_selector = parser['body_selector']

        self.segmenter = EntrySegmenter(
            heading_selector=parser['heading_selector'],
            anchor_selector=parser.get('anchor_selector'),
        )
        self.emitter = ArtifactEmitter(
            client_class=output['client_class'],
            models_module=os.path.splitext(output['models_module'])[0],
        )
        self.store = SnapshotStore(self.output_dir, self.config_manager.output_filenames())

    def fetch(self, url: Optional[str] = None) -> str:
        """Fetch the documentation page."""
        url = url or self.source['url']
        logger.info(f"Fetching documentation: {url}")

        headers = {'User-Agent': self.source['user_agent']} if self.source.get('user_agent') else None
        with HTTPClient(retry_attempts=self.source['retry_attempts'],
                        timeout=self.source['timeout'],
                        headers=headers) as client:
            return client.get_text(url)

    def read(self, path: str) -> str:
        """Read a previously saved documentation page."""
        logger.info(f"Reading documentation from {path}")
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def parse(self, html: str) -> Tuple[List[DataTypeEntry], List[OperationEntry]]:
        """Parse the page into data types and operations."""
        root = parse_document(html)
        body = self._body(root)

        data_types, operations = self.segmenter.parse(body)
        if not data_types and not operations:
            raise ParseStructureError(
                f"No entries found under '{self.body_selector}' "
                f"with headings '{self.segmenter.heading_selector}'"
            )

        logger.info(f"Parsed {len(data_types)} data types and {len(operations)} methods")
        return data_types, operations

    def emit(self, data_types: List[DataTypeEntry], operations: List[OperationEntry]) -> Dict[str, str]:
        """Render every artifact in memory."""
        return self.emitter.render_all(data_types, operations)

    def write(self, artifacts: Dict[str, str]) -> List[str]:
        return self.store.write(artifacts)

    def run(self, url: Optional[str] = None, input_path: Optional[str] = None) -> List[str]:
        """Run the full pipeline: fetch (or read), parse, emit and write."""
        html = self.read(input_path) if input_path else self.fetch(url)
        data_types, operations = self.parse(html)
        written = self.write(self.emit(data_types, operations))

        log_with_context(logger, logging.INFO, "--- Generation Summary ---", {
            'data_types': len(data_types),
            'methods': len(operations),
            'output_dir': self.output_dir,
            'files': written,
        })
        return written

    def regenerate(self, snapshot_dir: Optional[str] = None) -> List[str]:
        """Rebuild every artifact from a frozen JSON dump without fetching."""
        data_types, operations = self.store.load(snapshot_dir)
        written = self.write(self.emit(data_types, operations))

        log_with_context(logger, logging.INFO, "--- Regeneration Summary ---", {
            'snapshot': snapshot_dir or self.output_dir,
            'data_types': len(data_types),
            'methods': len(operations),
            'files': written,
        })
        return written

    def _body(self, root: DomNode) -> DomNode:
        body = root.query_selector(self.body_selector)
        if body is None:
            logger.warning(f"Content element not found with selector: {self.body_selector}, "
                           "using the whole document")
            return root
        return body
