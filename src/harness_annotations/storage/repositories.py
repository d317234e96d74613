"""Abstract store interface for annotation envelopes.

No file-system code here -- pure abstract contract.

Concrete implementations are in json_file.py and memory.py.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harness_annotations.models.annotations import StoreEnvelope


class EnvelopeStore(ABC):
    """Abstract interface for loading and saving the whole envelope."""

    @abstractmethod
    def load(self) -> StoreEnvelope:
        """Load the envelope. Returns an empty envelope if nothing is stored yet."""
        ...

    @abstractmethod
    def save(self, envelope: StoreEnvelope) -> None:
        """Persist the envelope, replacing whatever was stored before.

        Either the complete new envelope is stored or the previous one
        is left intact.
        """
        ...
