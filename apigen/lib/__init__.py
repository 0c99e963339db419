#!/usr/bin/env python3
"""
Generator Module Library

The stages of the documentation-to-bindings pipeline.
"""

from .prose import ProseExtractor
from .inference import TypeInferrer, RETURN_PATTERNS
from .segmenter import EntrySegmenter
from .emitter import ArtifactEmitter, to_field_name, render_type
from .snapshot import SnapshotStore

__all__ = [
    "ProseExtractor",
    "TypeInferrer",
    "RETURN_PATTERNS",
    "EntrySegmenter",
    "ArtifactEmitter",
    "to_field_name",
    "render_type",
    "SnapshotStore",
]
