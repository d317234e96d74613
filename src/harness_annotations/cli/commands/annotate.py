"""harness-annotate annotate -- store an annotation for a pipeline step."""

from __future__ import annotations

import json

import click

from harness_annotations.exceptions import AnnotationsError, MissingRequiredArgumentError


@click.command()
@click.option("--context", "context_name", default="", help="Context of the step (used as ID). Required.")
@click.option("--style", default="", help="Annotation style (info|success|warning|error).")
@click.option("--summary", "summary_path", default="", help="Path to summary file (markdown content).")
@click.option("--mode", default="replace", show_default=True, help="Annotation mode (append|replace|delete).")
@click.option("--priority", default=0, type=int, help="Annotation priority; 0 keeps the stored value.")
@click.pass_context
def annotate(
    ctx: click.Context,
    context_name: str,
    style: str,
    summary_path: str,
    mode: str,
    priority: int,
) -> None:
    """Create or update the annotation for a context.

    The summary file is read, merged into the stored annotation for
    --context according to --mode, and the annotations file is rewritten.
    """
    from harness_annotations.cli import _report_failure
    from harness_annotations.models.config import HarnessContext
    from harness_annotations.operations.annotate import annotate as run_annotate
    from harness_annotations.storage.json_file import JsonFileEnvelopeStore

    if not context_name:
        _report_failure(ctx, str(MissingRequiredArgumentError("--context")))

    config = ctx.obj["config"]
    store = JsonFileEnvelopeStore(config.annotations_file)
    try:
        result = run_annotate(
            store,
            context_name,
            style=style,
            summary_path=summary_path,
            mode=mode,
            priority=priority or None,
            harness=HarnessContext.from_env(),
            max_summary_bytes=config.max_summary_bytes,
        )
    except AnnotationsError as e:
        _report_failure(ctx, str(e))

    click.echo(json.dumps(result.to_document(), indent=2))
