"""harness-annotate show -- display stored annotations."""

from __future__ import annotations

import json

import click

from harness_annotations.cli.formatting import (
    format_annotation_detail,
    format_annotations_table,
    format_error,
    get_console,
    get_error_console,
)


@click.command()
@click.option("--context", "context_name", default=None, help="Show only this context, with its full summary.")
@click.option("--json", "as_json", is_flag=True, help="Print the raw annotations document.")
@click.pass_context
def show(ctx: click.Context, context_name: str | None, as_json: bool) -> None:
    """Show annotations recorded so far."""
    from harness_annotations.exceptions import AnnotationsError
    from harness_annotations.storage.json_file import JsonFileEnvelopeStore

    console = get_console()
    try:
        envelope = JsonFileEnvelopeStore(ctx.obj["config"].annotations_file).load()
    except AnnotationsError as e:
        format_error(str(e), get_error_console())
        raise SystemExit(1) from None

    if context_name is not None:
        found = envelope.find(context_name)
        if found is None:
            format_error(f"No annotation for context '{context_name}'", get_error_console())
            raise SystemExit(1)
        _, record = found
        if as_json:
            click.echo(json.dumps(record.to_document(), indent=2, ensure_ascii=False))
        else:
            format_annotation_detail(record, console)
        return

    if as_json:
        click.echo(json.dumps(envelope.to_document(), indent=2, ensure_ascii=False))
    else:
        format_annotations_table(envelope, console)
