"""The annotate operation: one load -> merge -> save cycle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from harness_annotations.engine.merge import MergeEngine
from harness_annotations.models.annotations import AnnotateRequest, AnnotateResult
from harness_annotations.models.config import MAX_SUMMARY_FILE_BYTES, HarnessContext
from harness_annotations.summary import read_summary_file

if TYPE_CHECKING:
    from harness_annotations.storage.repositories import EnvelopeStore

logger = logging.getLogger(__name__)


def annotate(
    store: EnvelopeStore,
    context_name: str,
    *,
    style: str = "",
    summary_path: str = "",
    mode: str = "",
    priority: Optional[int] = None,
    harness: Optional[HarnessContext] = None,
    engine: Optional[MergeEngine] = None,
    max_summary_bytes: int = MAX_SUMMARY_FILE_BYTES,
) -> AnnotateResult:
    """Record an annotation for ``context_name`` in ``store``.

    The summary file is read before the store is loaded, so a bad summary
    aborts the call without touching stored data. Any error from loading
    or saving propagates; nothing is persisted in that case.

    Args:
        store: Where the envelope is loaded from and saved to.
        context_name: Identity of the annotation to create or update.
        style: Style tag; empty keeps the stored style.
        summary_path: Markdown file to use as summary text; empty for none.
        mode: ``replace``, ``append`` or ``delete``; anything else means replace.
        priority: New priority. None or 0 keeps the stored priority.
        harness: Pipeline identity; read from the environment when omitted.
        engine: Merge engine to use; a default one when omitted.
        max_summary_bytes: Size limit for the summary file.

    Returns:
        An AnnotateResult describing the stored annotation.
    """
    harness = harness if harness is not None else HarnessContext.from_env()
    engine = engine if engine is not None else MergeEngine()

    summary_text = read_summary_file(summary_path, max_bytes=max_summary_bytes)
    request = AnnotateRequest(
        context_name=context_name,
        style=style,
        summary_text=summary_text,
        summary_source_path=summary_path,
        priority=priority,
        mode=mode,
    )

    envelope = store.load()
    engine.apply(envelope, request, execution_id=harness.execution_id)
    store.save(envelope)

    logger.info("Annotation stored for context %r", context_name)
    return AnnotateResult(context=context_name, stepid=harness.step_id)
