"""Annotations exception hierarchy.

All annotations-specific exceptions inherit from AnnotationsError.
"""

from __future__ import annotations


class AnnotationsError(Exception):
    """Base exception for all annotations errors."""


class SummaryReadError(AnnotationsError):
    """Raised when a summary file is missing or cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read summary file '{path}': {reason}")


class SummaryTooLargeError(AnnotationsError):
    """Raised when a summary file exceeds the size limit.

    Detected from the file size alone; the content is never read.
    """

    def __init__(self, path: str, size: int, limit: int) -> None:
        self.path = path
        self.size = size
        self.limit = limit
        super().__init__(
            f"Summary file '{path}' exceeds {limit} bytes "
            f"with size {size} bytes"
        )


class StoreReadError(AnnotationsError):
    """Raised when an existing annotations file cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read annotations file '{path}': {reason}")


class MalformedStoreError(AnnotationsError):
    """Raised when an annotations file does not hold a valid envelope.

    The file is left untouched so that its content can be inspected
    instead of being overwritten.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid annotations file format '{path}': {reason}")


class DirectoryCreateError(AnnotationsError):
    """Raised when the parent directory of the annotations file cannot be created."""

    def __init__(self, directory: str, reason: str) -> None:
        self.directory = directory
        self.reason = reason
        super().__init__(f"Failed to create parent dir '{directory}': {reason}")


class PersistError(AnnotationsError):
    """Raised when the envelope cannot be written and moved into place."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to finalize write of '{path}': {reason}")


class MissingRequiredArgumentError(AnnotationsError):
    """Raised when a required command-line option is absent."""

    def __init__(self, option: str) -> None:
        self.option = option
        super().__init__(f"{option} is required")
