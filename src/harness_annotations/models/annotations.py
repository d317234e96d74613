"""Annotation domain models.

AnnotationRecord is one entry per context. StoreEnvelope is the whole
on-disk document read by the reporting system, so the JSON keys
(``summary_file``, ``planExecutionId``) must not change.
AnnotateRequest and AnnotateResult carry a single invocation's input
and output.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator


class AnnotationMode(str, enum.Enum):
    """Reconciliation policy applied to an existing record."""

    REPLACE = "replace"
    APPEND = "append"
    DELETE = "delete"

    def __str__(self) -> str:
        return self.value


class AnnotationRecord(BaseModel):
    """A single annotation, unique by ``context_name`` within an envelope."""

    model_config = ConfigDict(populate_by_name=True)

    context_name: StrictStr = ""
    timestamp: StrictStr = ""
    style: StrictStr = ""
    summary: StrictStr = ""
    summary_source_path: StrictStr = Field(default="", alias="summary_file")
    priority: StrictInt = 0  # 0 = no explicit priority
    mode: StrictStr = ""

    def to_document(self) -> dict[str, Any]:
        """Return the on-disk JSON object for this record."""
        data = self.model_dump(by_alias=True)
        if not self.mode:
            del data["mode"]
        return data


class StoreEnvelope(BaseModel):
    """The persisted document: execution identity plus ordered records."""

    model_config = ConfigDict(populate_by_name=True)

    plan_execution_id: StrictStr = Field(default="", alias="planExecutionId")
    annotations: list[AnnotationRecord] = Field(default_factory=list)

    @field_validator("plan_execution_id", mode="before")
    @classmethod
    def _null_execution_id(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("annotations", mode="before")
    @classmethod
    def _null_annotations(cls, v: object) -> object:
        return [] if v is None else v

    def find(self, context_name: str) -> Optional[tuple[int, AnnotationRecord]]:
        """Return ``(index, record)`` for an exact context match, or None."""
        for i, record in enumerate(self.annotations):
            if record.context_name == context_name:
                return i, record
        return None

    def contexts(self) -> list[str]:
        """Context names in insertion order."""
        return [record.context_name for record in self.annotations]

    def to_document(self) -> dict[str, Any]:
        """Return the on-disk JSON object.

        ``planExecutionId`` is omitted while unset; ``annotations`` is
        always present.
        """
        data: dict[str, Any] = {}
        if self.plan_execution_id:
            data["planExecutionId"] = self.plan_execution_id
        data["annotations"] = [record.to_document() for record in self.annotations]
        return data


class AnnotateRequest(BaseModel):
    """One annotate call, with the summary already resolved to text.

    ``priority`` is None when the caller did not ask for a priority.
    Zero is treated the same way by the merge engine.
    """

    context_name: str
    style: str = ""
    summary_text: str = ""
    summary_source_path: str = ""
    priority: Optional[int] = None
    mode: str = ""


class AnnotateResult(BaseModel):
    """Outcome of a successful annotate call, printed by the CLI."""

    context: str
    stepid: str = ""

    @property
    def message(self) -> str:
        return (
            f"Annotation stored for context '{self.context}' "
            f"with step ID '{self.stepid}'"
        )

    def to_document(self) -> dict[str, str]:
        return {
            "context": self.context,
            "stepid": self.stepid,
            "message": self.message,
        }
