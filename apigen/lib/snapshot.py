#!/usr/bin/env python3
"""
Snapshot Store

Writes the rendered artifacts to the output directory and reads a previous
JSON dump back into entries, so bindings can be regenerated without
re-scraping the documentation.
"""

import os
import json
import logging
from typing import Dict, List, Tuple

from apigen.errors import ParseStructureError
from apigen.schema import DataTypeEntry, OperationEntry

logger = logging.getLogger("apigen")

PACKAGE_INIT = '"""Generated API bindings."""\n'


class SnapshotStore:
    def __init__(self, output_dir: str, filenames: Dict[str, str]):
        """
        Args:
            output_dir: Directory receiving the artifacts
            filenames: Artifact key (models_json, methods_json, models_module,
                methods_module) to file name
        """
        self.output_dir = output_dir
        self.filenames = filenames

    def path(self, key: str, directory: str = None) -> str:
        return os.path.join(directory or self.output_dir, self.filenames[key])

    def write(self, artifacts: Dict[str, str]) -> List[str]:
        """
        Write every artifact, replacing previous versions.

        Each file is first written next to its target and only moved into
        place once all of them were written.
        """
        os.makedirs(self.output_dir, exist_ok=True)

        staged = []
        try:
            for key, content in artifacts.items():
                target = self.path(key)
                temp = target + ".tmp"
                with open(temp, "w", encoding="utf-8") as f:
                    f.write(content)
                staged.append((temp, target))
        except OSError:
            for temp, _ in staged:
                os.remove(temp)
            raise

        written = []
        for temp, target in staged:
            os.replace(temp, target)
            logger.info(f"Wrote {target}")
            written.append(target)

        init_path = os.path.join(self.output_dir, "__init__.py")
        if not os.path.exists(init_path):
            with open(init_path, "w", encoding="utf-8") as f:
                f.write(PACKAGE_INIT)

        return written

    def load(self, directory: str = None) -> Tuple[List[DataTypeEntry], List[OperationEntry]]:
        """Read the JSON dump from `directory` (defaults to the output directory)."""
        models = self._read(self.path("models_json", directory))
        methods = self._read(self.path("methods_json", directory))

        try:
            data_types = [DataTypeEntry.from_dict(item) for item in models]
            operations = [OperationEntry.from_dict(item) for item in methods]
        except KeyError as e:
            raise ParseStructureError(f"snapshot entry is missing key {e}") from e
        except (TypeError, ValueError, AttributeError) as e:
            raise ParseStructureError(f"malformed snapshot entry: {e}") from e

        logger.info(f"Loaded {len(data_types)} data types and {len(operations)} methods from snapshot")
        return data_types, operations

    @staticmethod
    def _read(path: str) -> list:
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except ValueError as e:
                raise ParseStructureError(f"{path}: invalid JSON: {e}") from e
        if not isinstance(data, list):
            raise ParseStructureError(f"{path}: expected a JSON list")
        return data
