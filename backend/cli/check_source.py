#!/usr/bin/env python3
"""CLI tool for checking source files for tabs, non-Unix newlines, control characters and bad UTF-8."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from srccheck.config import settings
from srccheck.scanner import check_paths


@click.command()
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Exit 2 when any file has content violations (default: SRCCHECK_STRICT).",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print a JSON report with per-category counts instead of incident lines.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Diagnostic log level on stderr (default: SRCCHECK_LOG_LEVEL).",
)
def main(
    paths: Tuple[Path, ...],
    strict: Optional[bool],
    as_json: bool,
    log_level: Optional[str],
):
    """
    Check each PATH byte by byte against the source conventions:
    no tabs, LF-only newlines, no stray control characters, well-formed
    UTF-8 and a final end-of-line.

    Only the first incident of each kind is printed per file. The exit code
    is 1 when a file could not be read; content violations only change it
    with --strict (exit 2).

    Example:
        srccheck src/*.c include/*.h
        srccheck --json --strict README.md
    """
    level = (log_level or settings.LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise click.ClickException(f"Unknown log level: {level}")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if strict is None:
        strict = settings.STRICT

    results = check_paths(paths, echo=not as_json)

    if as_json:
        payload = [r.to_report().model_dump(mode="json") for r in results]
        click.echo(json.dumps(payload, indent=settings.JSON_INDENT))

    if not all(r.ok for r in results):
        sys.exit(1)
    if strict and not all(r.clean for r in results):
        sys.exit(2)


if __name__ == "__main__":
    main()
