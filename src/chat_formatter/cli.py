"""Click CLI for the chat formatter.

Commands:
    convert    Full chat text → .docx / .html conversion
    inspect    Parse chat text to IR JSON (for debugging)
    from-ir    Generate a document from a saved IR JSON file
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from chat_formatter.config import Config
from chat_formatter.exceptions import ChatFormatterError
from chat_formatter.generators.factory import FORMATS, create_generator, format_for_path
from chat_formatter.pipeline import Pipeline

FORMAT_CHOICE = click.Choice(FORMATS, case_sensitive=False)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to a YAML configuration file.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """Convert chat-style text (headings, bullets, tables, math) to documents."""
    try:
        config = Config.load(config_path)
    except ChatFormatterError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)
    if verbose:
        config.verbose = True

    level = logging.DEBUG if config.verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["pipeline"] = Pipeline(config)


def _resolve_output(input_path: Path, output: Path | None, fmt: str | None) -> tuple[Path, str]:
    """Pick the output path and format from whichever of the two is given."""
    if output is None:
        fmt = fmt or "docx"
        output = input_path.with_suffix(create_generator(fmt).extension)
    else:
        fmt = fmt or format_for_path(output)
    return output, fmt.lower()


@main.command()
@click.argument("input_text", type=click.Path(exists=True, path_type=Path))
@click.argument("output", type=click.Path(path_type=Path), required=False)
@click.option("--format", "fmt", type=FORMAT_CHOICE, default=None, help="Output format.")
@click.option("--title", default=None, help="Document title.")
@click.option("--save-ir", is_flag=True, help="Save IR JSON checkpoint alongside output.")
@click.option(
    "--ir-path",
    type=click.Path(path_type=Path),
    default=None,
    help="Custom path for the IR JSON file.",
)
@click.option("--report", is_flag=True, help="Save conversion report JSON alongside output.")
@click.option(
    "--report-path",
    type=click.Path(path_type=Path),
    default=None,
    help="Custom path for the report JSON file.",
)
@click.pass_context
def convert(
    ctx: click.Context,
    input_text: Path,
    output: Path | None,
    fmt: str | None,
    title: str | None,
    save_ir: bool,
    ir_path: Path | None,
    report: bool,
    report_path: Path | None,
) -> None:
    """Convert a chat text file to a Word or HTML document."""
    pipeline: Pipeline = ctx.obj["pipeline"]

    if title is not None:
        pipeline.config.title = title

    try:
        output, fmt = _resolve_output(input_text, output, fmt)
        result = pipeline.convert(
            input_text,
            output,
            fmt=fmt,
            save_ir=save_ir,
            ir_path=ir_path,
            save_report=report,
            report_path=report_path,
        )
        click.echo(f"Generated: {result}")

        if report and pipeline.last_report:
            rpt = pipeline.last_report
            click.echo(
                f"Report: {rpt.heading_count} headings, "
                f"{rpt.table_count} tables, {rpt.math_count} equations, "
                f"{len(rpt.warnings)} warnings"
            )
    except ChatFormatterError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)


@main.command()
@click.argument("input_text", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def inspect(ctx: click.Context, input_text: Path) -> None:
    """Parse a chat text file and output its IR as JSON (for debugging)."""
    pipeline: Pipeline = ctx.obj["pipeline"]

    try:
        json_str = pipeline.inspect(input_text)
        click.echo(json_str)
    except ChatFormatterError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)


@main.command("from-ir")
@click.argument("ir_json", type=click.Path(exists=True, path_type=Path))
@click.argument("output", type=click.Path(path_type=Path))
@click.option("--format", "fmt", type=FORMAT_CHOICE, default=None, help="Output format.")
@click.pass_context
def from_ir(ctx: click.Context, ir_json: Path, output: Path, fmt: str | None) -> None:
    """Generate a document from a saved IR JSON file."""
    pipeline: Pipeline = ctx.obj["pipeline"]

    try:
        result = pipeline.from_ir(ir_json, output, fmt=fmt)
        click.echo(f"Generated: {result}")
    except ChatFormatterError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)
