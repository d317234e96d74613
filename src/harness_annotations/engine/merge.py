"""Merge engine for annotations.

Applies one AnnotateRequest to a StoreEnvelope in memory: stamps the
execution identity, finds or creates the record for the request's
context and reconciles it according to the requested mode.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Optional

from harness_annotations.models.annotations import AnnotationMode, AnnotationRecord

if TYPE_CHECKING:
    from harness_annotations.models.annotations import AnnotateRequest, StoreEnvelope

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as RFC 3339 with second precision.

    Naive datetimes are taken to be UTC. UTC is rendered with a ``Z``
    suffix, other offsets as ``+HH:MM``.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.replace(microsecond=0).isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def normalize_mode(mode: str | AnnotationMode | None) -> AnnotationMode:
    """Map a requested mode onto a known policy.

    Anything other than ``replace``, ``append`` or ``delete`` (including an
    empty value) becomes ``replace``.
    """
    if isinstance(mode, AnnotationMode):
        return mode
    try:
        return AnnotationMode(mode or "")
    except ValueError:
        if mode:
            logger.debug("Unknown annotation mode %r; using replace", mode)
        return AnnotationMode.REPLACE


class MergeEngine:
    """Reconciles annotate requests with stored records.

    The engine only mutates the envelope it is given. Persisting the
    result is the caller's responsibility.

    Rules for an existing record:
    - delete clears style, summary and priority
    - replace overwrites the summary, even with an empty one
    - append joins a non-empty summary onto the stored one with a newline
    - a non-empty style or source path always overwrites
    - a priority only overwrites when it is greater than zero
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or _utc_now

    def apply(
        self,
        envelope: StoreEnvelope,
        request: AnnotateRequest,
        *,
        execution_id: str = "",
    ) -> AnnotationRecord:
        """Apply ``request`` to ``envelope`` in place.

        Args:
            envelope: The envelope to mutate.
            request: The annotate request, summary already loaded.
            execution_id: Pipeline execution identity. Stored only if the
                envelope has none yet.

        Returns:
            The record as stored after the merge.
        """
        if not envelope.plan_execution_id.strip() and execution_id.strip():
            envelope.plan_execution_id = execution_id

        mode = normalize_mode(request.mode)
        timestamp = format_timestamp(self._clock())

        found = envelope.find(request.context_name)
        if found is None:
            record = AnnotationRecord(
                context_name=request.context_name,
                timestamp=timestamp,
                style=request.style,
                summary=request.summary_text,
                summary_source_path=request.summary_source_path,
                priority=request.priority or 0,
                mode=mode.value,
            )
            envelope.annotations.append(record)
            logger.debug("Created annotation %r (%s)", request.context_name, mode)
            return record

        index, existing = found
        record = existing.model_copy()
        record.timestamp = timestamp

        if mode is AnnotationMode.DELETE:
            record.style = ""
            record.summary = ""
            record.priority = 0
        else:
            if request.style:
                record.style = request.style
            if mode is AnnotationMode.REPLACE:
                record.summary = request.summary_text
            elif request.summary_text:
                if record.summary:
                    record.summary = record.summary + "\n" + request.summary_text
                else:
                    record.summary = request.summary_text
            if request.priority is not None and request.priority > 0:
                record.priority = request.priority
            if request.summary_source_path:
                record.summary_source_path = request.summary_source_path
        record.mode = mode.value

        envelope.annotations[index] = record
        logger.debug("Merged annotation %r (%s)", request.context_name, mode)
        return record
