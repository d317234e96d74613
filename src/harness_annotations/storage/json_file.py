"""JSON file implementation of the envelope store.

The whole envelope lives in one pretty-printed UTF-8 JSON file. Saves go
through a sibling ``.tmp`` file that is renamed onto the target, so a
reader sees either the previous or the new document, never a partial one.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from harness_annotations.exceptions import (
    DirectoryCreateError,
    MalformedStoreError,
    PersistError,
    StoreReadError,
)
from harness_annotations.models.annotations import StoreEnvelope
from harness_annotations.storage.repositories import EnvelopeStore

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"


class JsonFileEnvelopeStore(EnvelopeStore):
    """Envelope store backed by a single JSON file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    @property
    def tmp_path(self) -> Path:
        return self.path.with_name(self.path.name + TMP_SUFFIX)

    def load(self) -> StoreEnvelope:
        """Load the envelope from disk.

        A missing or zero-byte file yields an empty envelope.

        Raises:
            StoreReadError: If the file exists but cannot be read.
            MalformedStoreError: If the content is not a valid envelope.
        """
        if not self.path.exists():
            logger.debug("Annotations file %s not found; starting empty", self.path)
            return StoreEnvelope()

        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise StoreReadError(str(self.path), e.strerror or str(e)) from e

        if not raw:
            return StoreEnvelope()

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise MalformedStoreError(str(self.path), str(e)) from e

        if not isinstance(data, dict):
            raise MalformedStoreError(
                str(self.path), f"expected a JSON object, got {type(data).__name__}"
            )

        try:
            envelope = StoreEnvelope.model_validate(data)
        except ValidationError as e:
            raise MalformedStoreError(str(self.path), str(e)) from e

        logger.debug(
            "Loaded %d annotation(s) from %s", len(envelope.annotations), self.path
        )
        return envelope

    def save(self, envelope: StoreEnvelope) -> None:
        """Write the envelope atomically.

        Raises:
            DirectoryCreateError: If the parent directory cannot be created.
            PersistError: If the temp file cannot be written or moved into place.
        """
        content = json.dumps(envelope.to_document(), indent=2, ensure_ascii=False) + "\n"
        # Lone surrogates (e.g. from undecodable argv bytes) cannot be encoded.
        data = content.encode("utf-8", errors="replace")

        parent = self.path.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateError(str(parent), e.strerror or str(e)) from e

        tmp = self.tmp_path
        try:
            with open(tmp, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            _discard(tmp)
            raise PersistError(str(self.path), f"failed to write temp file: {e}") from e

        try:
            os.replace(tmp, self.path)
        except OSError as first:
            # Some platforms refuse to rename over an existing file.
            logger.warning(
                "Rename %s -> %s failed (%s); removing destination and retrying",
                tmp,
                self.path,
                first,
            )
            try:
                os.remove(self.path)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.debug("Could not remove %s before retry: %s", self.path, e)
            try:
                os.replace(tmp, self.path)
            except OSError as second:
                _discard(tmp)
                raise PersistError(str(self.path), str(second)) from second

        logger.debug(
            "Saved %d annotation(s) to %s", len(envelope.annotations), self.path
        )


def _discard(path: Path) -> None:
    """Best-effort removal of a leftover temp file."""
    try:
        os.remove(path)
    except OSError as e:
        logger.debug("Could not remove temp file %s: %s", path, e)
