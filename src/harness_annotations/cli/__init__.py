"""Annotations CLI -- records pipeline step annotations from the shell.

This module is never imported from harness_annotations/__init__.py.
It is only loaded via the ``harness-annotate`` entry point defined in
pyproject.toml.
"""

from __future__ import annotations

import logging
from typing import NoReturn

import click
from rich.logging import RichHandler

from harness_annotations.cli.formatting import (
    format_error,
    format_warning,
    get_error_console,
)
from harness_annotations.models.config import (
    ANNOTATIONS_FILE_ENV,
    DEFAULT_ANNOTATIONS_FILE,
    STRICT_ENV,
    AnnotatorConfig,
)


class AnnotationsGroup(click.Group):
    """Click group that applies the soft/strict policy to usage errors.

    Under ``--strict`` (or ``HARNESS_ANNOTATIONS_STRICT``) a usage error
    keeps click's report and exit status 2. Otherwise it is printed as a
    warning and the process exits 0.
    """

    def make_context(self, info_name, args, parent=None, **extra):
        # Errors in the group's own options come before --strict is known.
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            if AnnotatorConfig.from_env().strict:
                raise
            _warn_usage_error(e, self)

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            if ctx.params.get("strict"):
                raise
            _warn_usage_error(e, self)


def _warn_usage_error(error: click.UsageError, group: click.Group) -> NoReturn:
    console = get_error_console()
    if error.ctx is not None and error.ctx.command is group:
        click.echo(error.ctx.get_usage(), err=True)
        format_warning(error.format_message(), console)
    else:
        format_warning(f"failed to parse flags: {error.format_message()}", console)
    raise SystemExit(0)


@click.group(cls=AnnotationsGroup, invoke_without_command=True)
@click.option(
    "--file",
    "annotations_file",
    default=DEFAULT_ANNOTATIONS_FILE,
    envvar=ANNOTATIONS_FILE_ENV,
    show_default=True,
    help="Path to the annotations file.",
)
@click.option(
    "--strict/--no-strict",
    default=False,
    envvar=STRICT_ENV,
    help="Exit non-zero on failure instead of warning.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, annotations_file: str, strict: bool, verbose: bool) -> None:
    """Record annotations for pipeline steps."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = AnnotatorConfig(
        annotations_file=annotations_file or DEFAULT_ANNOTATIONS_FILE,
        strict=strict,
    )

    if verbose:
        _configure_logging()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


def _configure_logging() -> None:
    handler = RichHandler(console=get_error_console(), show_path=False)
    logger = logging.getLogger("harness_annotations")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG)


def _report_failure(ctx: click.Context, message: str) -> NoReturn:
    """Report a failed invocation according to the strict/soft policy.

    Strict mode prints an error and exits with status 1. Soft mode prints
    a warning and exits 0 so a misconfigured annotation step never fails
    the surrounding pipeline.
    """
    console = get_error_console()
    if ctx.obj["config"].strict:
        format_error(message, console)
        raise SystemExit(1)
    format_warning(message, console)
    raise SystemExit(0)


# Register subcommands after cli group is defined
from harness_annotations.cli.commands.annotate import annotate  # noqa: E402
from harness_annotations.cli.commands.show import show  # noqa: E402

cli.add_command(annotate)
cli.add_command(show)
