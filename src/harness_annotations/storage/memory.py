"""In-memory envelope store, used by tests and embedding callers."""

from __future__ import annotations

from typing import Optional

from harness_annotations.models.annotations import StoreEnvelope
from harness_annotations.storage.repositories import EnvelopeStore


class InMemoryEnvelopeStore(EnvelopeStore):
    """Keeps a private copy of the last saved envelope.

    ``load()`` hands out a deep copy, so mutating a loaded envelope has
    no effect until it is saved.
    """

    def __init__(self, envelope: Optional[StoreEnvelope] = None) -> None:
        self._envelope = envelope.model_copy(deep=True) if envelope is not None else None
        self.save_count = 0

    def load(self) -> StoreEnvelope:
        if self._envelope is None:
            return StoreEnvelope()
        return self._envelope.model_copy(deep=True)

    def save(self, envelope: StoreEnvelope) -> None:
        self._envelope = envelope.model_copy(deep=True)
        self.save_count += 1

    @property
    def envelope(self) -> Optional[StoreEnvelope]:
        """The stored envelope, or None if nothing was saved."""
        return self._envelope
