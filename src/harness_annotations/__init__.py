"""Harness annotations: per-step status notes for pipeline executions.

Each pipeline step records an annotation keyed by context. Annotations
from every step are merged into one JSON file that the reporting system
reads after the run.
"""

from harness_annotations._version import __version__

# Models
from harness_annotations.models.annotations import (
    AnnotateRequest,
    AnnotateResult,
    AnnotationMode,
    AnnotationRecord,
    StoreEnvelope,
)

# Configuration
from harness_annotations.models.config import (
    MAX_SUMMARY_FILE_BYTES,
    AnnotatorConfig,
    HarnessContext,
)

# Stores
from harness_annotations.storage.json_file import JsonFileEnvelopeStore
from harness_annotations.storage.memory import InMemoryEnvelopeStore
from harness_annotations.storage.repositories import EnvelopeStore

# Merge engine and operations
from harness_annotations.engine.merge import MergeEngine, normalize_mode
from harness_annotations.operations.annotate import annotate
from harness_annotations.summary import read_summary_file

# Exceptions
from harness_annotations.exceptions import (
    AnnotationsError,
    DirectoryCreateError,
    MalformedStoreError,
    MissingRequiredArgumentError,
    PersistError,
    StoreReadError,
    SummaryReadError,
    SummaryTooLargeError,
)

__all__ = [
    "__version__",
    # Models
    "AnnotateRequest",
    "AnnotateResult",
    "AnnotationMode",
    "AnnotationRecord",
    "StoreEnvelope",
    # Configuration
    "MAX_SUMMARY_FILE_BYTES",
    "AnnotatorConfig",
    "HarnessContext",
    # Stores
    "EnvelopeStore",
    "InMemoryEnvelopeStore",
    "JsonFileEnvelopeStore",
    # Merge engine and operations
    "MergeEngine",
    "normalize_mode",
    "annotate",
    "read_summary_file",
    # Exceptions
    "AnnotationsError",
    "DirectoryCreateError",
    "MalformedStoreError",
    "MissingRequiredArgumentError",
    "PersistError",
    "StoreReadError",
    "SummaryReadError",
    "SummaryTooLargeError",
]
