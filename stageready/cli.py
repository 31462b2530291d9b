"""StageReady CLI entry point."""

import logging
import sys
from pathlib import Path
from typing import TextIO

import click

from stageready import __version__
from stageready.chord_models import FormatOptions, ViewportSpec
from stageready.config import Config
from stageready.formatter_service import FormatterService
from stageready.sheet_exporter import SUPPORTED_FORMATS, SheetExporter


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _write_output(content: str, output: str | None) -> None:
    """Write *content* to *output*, or to stdout when no path is given."""
    if output is None:
        click.echo(content)
        return
    try:
        Path(output).write_text(content if content.endswith("\n") else f"{content}\n", encoding="utf-8")
    except OSError as exc:
        click.echo(f"  ERROR: Could not write output file — {exc}", err=True)
        sys.exit(1)
    click.echo(f"Done!  Wrote '{output}'.", err=True)


output_option = click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file. Defaults to standard output.",
)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="stageready")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    default=None,
    help="JSON file overriding formatter and AI settings.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: str | None) -> None:
    """StageReady — ChordPro formatting, transposition and reflow."""
    _setup_logging(verbose)
    try:
        ctx.obj = Config.load(config_path)
    except (OSError, ValueError) as exc:
        click.echo(f"  ERROR: Could not load configuration — {exc}", err=True)
        sys.exit(1)


# ── format subcommand ──────────────────────────────────────────────────────────

@main.command("format")
@click.argument("input_file", metavar="INPUT", type=click.File("r", encoding="utf-8"))
@click.option("--chords-only", is_flag=True, help="Emit only the distinct chords of each section.")
@click.option(
    "--instructions",
    default=None,
    metavar="TEXT",
    help="Extra instructions passed to the AI formatter (ignored by the rules).",
)
@click.option(
    "--ai/--no-ai",
    "use_ai",
    default=True,
    show_default=True,
    help="Try the AI formatter first when it is configured.",
)
@output_option
@click.pass_obj
def format_command(
    config: Config,
    input_file: TextIO,
    chords_only: bool,
    instructions: str | None,
    use_ai: bool,
    output: str | None,
) -> None:
    """
    Convert pasted lyrics and chords into ChordPro.

    INPUT is a text file, or - for standard input.

    \b
    Examples:
      stageready format song.txt -o song.cho
      stageready format song.txt --chords-only
      pbpaste | stageready format - --no-ai
    """
    if not use_ai:
        config.ai.enabled = False
    with FormatterService(config) as service:
        formatted = service.format(input_file.read(), chords_only, instructions)
    _write_output(formatted, output)


# ── transpose subcommand ───────────────────────────────────────────────────────

@main.command()
@click.argument("input_file", metavar="INPUT", type=click.File("r", encoding="utf-8"))
@click.option(
    "--semitones",
    "-s",
    type=int,
    default=0,
    show_default=True,
    help="Semitones to shift, negative to go down.",
)
@click.option("--nashville", is_flag=True, help="Show chords as Nashville numbers (relative to C).")
@output_option
@click.pass_obj
def transpose(
    config: Config,
    input_file: TextIO,
    semitones: int,
    nashville: bool,
    output: str | None,
) -> None:
    """
    Transpose the bracketed chords of a ChordPro sheet.

    The {key: ...} directive is left as entered.

    \b
    Examples:
      stageready transpose song.cho -s 2
      stageready transpose song.cho -s -3 -o lower.cho
      stageready transpose song.cho --nashville
    """
    with FormatterService(config) as service:
        transposed = service.transpose(input_file.read(), semitones, nashville)
    _write_output(transposed, output)


# ── reflow subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("input_file", metavar="INPUT", type=click.File("r", encoding="utf-8"))
@click.option("--width", type=click.IntRange(min=1), default=None, help="Viewport width in pixels.")
@click.option("--height", type=click.IntRange(min=1), default=None, help="Viewport height in pixels.")
@click.option("--dpi", type=click.IntRange(min=1), default=96, show_default=True, help="Viewport DPI.")
@click.option(
    "--font-scale",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Font scale relative to the default size.",
)
@output_option
@click.pass_obj
def reflow(
    config: Config,
    input_file: TextIO,
    width: int | None,
    height: int | None,
    dpi: int,
    font_scale: float | None,
    output: str | None,
) -> None:
    """
    Word-wrap a ChordPro sheet to fit a screen.

    \b
    Examples:
      stageready reflow song.cho --width 400
      stageready reflow song.cho --width 1024 --height 768 --font-scale 1.5
    """
    viewport = None
    if width is not None:
        viewport = ViewportSpec(width_px=width, height_px=height or width, dpi=dpi)
    options = FormatOptions(font_scale=font_scale) if font_scale is not None else None

    with FormatterService(config) as service:
        result = service.format_for_viewport(input_file.read(), viewport, options)
        columns = service.chars_per_line(viewport, options)

    click.echo(
        f"  Columns: {columns}  |  "
        f"Lines: {result.line_count}  |  Pages: {result.estimated_page_count}",
        err=True,
    )
    _write_output(result.text, output)


# ── export subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("input_file", metavar="INPUT", type=click.File("r", encoding="utf-8"))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(sorted(SUPPORTED_FORMATS), case_sensitive=False),
    default="html",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--title",
    default=None,
    metavar="TEXT",
    help="Title shown in the output header. Defaults to the sheet's {title} directive.",
)
@output_option
@click.pass_obj
def export(
    config: Config,
    input_file: TextIO,
    output_format: str,
    title: str | None,
    output: str | None,
) -> None:
    """
    Render a ChordPro sheet as ChordPro, plain text or HTML.

    \b
    Examples:
      stageready export song.cho -o song.html
      stageready export song.cho --format text
    """
    chordpro = input_file.read()
    with FormatterService(config) as service:
        metadata = service.extract_metadata(chordpro)
    resolved_title = title if title is not None else metadata.title or ""

    try:
        exporter = SheetExporter(
            title=resolved_title,
            output_format=output_format,
            lines_per_page=config.formatter.lines_per_page,
        )
    except ValueError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)

    if output is None:
        click.echo(exporter.render(chordpro))
        return

    try:
        exporter.export(chordpro, output)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write output file — {exc}", err=True)
        sys.exit(1)
    click.echo(f"Done!  Wrote '{output}'.", err=True)
