"""Viewport reflow: word-wraps ChordPro text to the width of a display."""

import math

from stageready.bracketer import is_directive
from stageready.chord_models import FormatOptions, FormatResult, ViewportSpec

# Layout constants (empirical, tuned for the mobile reader; not font metrics)
GLYPH_WIDTH_PX = 8            # average glyph width at font scale 1.0
LINES_PER_PAGE = 40           # lines counted as one printed/screen page
DEFAULT_VIEWPORT_WIDTH_PX = 800
DEFAULT_FONT_SCALE = 1.0


def chars_per_line(
    viewport: ViewportSpec | None = None,
    options: FormatOptions | None = None,
    glyph_width_px: float = GLYPH_WIDTH_PX,
    default_width_px: int = DEFAULT_VIEWPORT_WIDTH_PX,
    default_font_scale: float = DEFAULT_FONT_SCALE,
) -> int:
    """
    Number of character columns that fit across *viewport*.

    ``floor(width / (glyph_width * font_scale))``, never less than 1. DPI is
    part of the viewport but does not enter the estimate.
    """
    width = viewport.width_px if viewport is not None else default_width_px
    font_scale = options.font_scale if options is not None and options.font_scale else None
    if font_scale is None or font_scale <= 0:
        font_scale = default_font_scale
    return max(1, math.floor(width / (glyph_width_px * font_scale)))


def wrap_line(line: str, width: int) -> list[str]:
    """
    Greedily wrap *line* on whitespace so no output line exceeds *width*.

    Words are never split; a single word wider than *width* gets a line of
    its own.
    """
    wrapped: list[str] = []
    current = ""
    for word in line.split():
        candidate = f"{current} {word}" if current else word
        if current and len(candidate) > width:
            wrapped.append(current)
            current = word
        else:
            current = candidate
    if current:
        wrapped.append(current)
    return wrapped


def reflow(text: str, width: int) -> str:
    """Wrap every non-directive line of *text* longer than *width* columns."""
    output: list[str] = []
    for line in text.split("\n"):
        if is_directive(line) or len(line) <= width:
            output.append(line)
        else:
            output.extend(wrap_line(line, width) or [""])
    return "\n".join(output)


def measure(text: str, lines_per_page: int = LINES_PER_PAGE) -> FormatResult:
    """Line count and estimated page count for already formatted *text*."""
    line_count = len(text.split("\n"))
    return FormatResult(
        text=text,
        line_count=line_count,
        estimated_page_count=math.ceil(line_count / lines_per_page),
    )
