"""Renderer implementations for displaying and exporting ChordPro sheets."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from stageready.bracketer import is_directive
from stageready.viewport import LINES_PER_PAGE

# Directives shown in the sheet header rather than in the body
METADATA_DIRECTIVES = {"title", "t", "subtitle", "st", "artist", "key"}

_DIRECTIVE_RE = re.compile(r"^\s*\{\s*([\w-]+)\s*(?::\s*(.*?))?\s*\}\s*$")
_CHORD_RE = re.compile(r"\[([^\]]+)\]")


def _escape_html(text: str) -> str:
    """Escape the three characters that are unsafe in HTML text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def parse_directive(line: str) -> tuple[str, str] | None:
    """Split ``{name: value}`` into (lowercased name, value); None for other lines."""
    match = _DIRECTIVE_RE.match(line)
    if not match:
        return None
    return match.group(1).lower(), (match.group(2) or "").strip()


class SheetRenderer(ABC):
    """Abstract sheet renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(self, *, title: str, chordpro: str) -> str:
        """Render output into a file content string."""


class ChordProRenderer(SheetRenderer):
    """Write the ChordPro source itself, newline terminated."""

    @property
    def default_extension(self) -> str:
        return ".cho"

    def render(self, *, title: str, chordpro: str) -> str:
        return chordpro if chordpro.endswith("\n") else f"{chordpro}\n"


class PlainTextRenderer(SheetRenderer):
    """
    Plain text for quick reading: metadata directives are dropped and
    ``[C]`` chord markers are unwrapped to ``C`` in place.
    """

    @property
    def default_extension(self) -> str:
        return ".txt"

    def render(self, *, title: str, chordpro: str) -> str:
        lines: list[str] = []
        for line in chordpro.split("\n"):
            directive = parse_directive(line)
            if directive is not None and directive[0] in METADATA_DIRECTIVES:
                continue
            lines.append(_CHORD_RE.sub(r"\1", line))
        return "\n".join(lines)


class HtmlRenderer(SheetRenderer):
    """Render ChordPro into a self-contained HTML document, chords above lyrics."""

    def __init__(self, lines_per_page: int = LINES_PER_PAGE) -> None:
        if lines_per_page <= 0:
            raise ValueError("lines_per_page must be positive.")
        self.lines_per_page = lines_per_page

    @property
    def default_extension(self) -> str:
        return ".html"

    def render(self, *, title: str, chordpro: str) -> str:
        rendered = [self.render_line(line) for line in chordpro.split("\n")]
        body_lines = [line for line in rendered if line is not None]
        pages = [
            "\n".join(body_lines[start:start + self.lines_per_page])
            for start in range(0, len(body_lines), self.lines_per_page)
        ]
        return self.build_html(title, pages or [""])

    def render_line(self, line: str) -> str | None:
        """
        Render one ChordPro line as HTML, or None if it is not displayed.

        Section starts become labels, comments become notes, metadata and
        section ends are dropped.
        """
        if is_directive(line):
            directive = parse_directive(line)
            if directive is None:
                return None
            name, value = directive
            if name.startswith("start_of_"):
                label = value or name[len("start_of_"):].replace("_", " ").title()
                return f'<div class="section">{_escape_html(label)}</div>'
            if name in ("comment", "c"):
                return f'<div class="comment">{_escape_html(value)}</div>'
            return None

        if not line.strip():
            return '<div class="line">&nbsp;</div>'

        segments: list[str] = []
        position = 0
        chord = ""
        for match in _CHORD_RE.finditer(line):
            lyric = line[position:match.start()]
            if chord or lyric:
                segments.append(self._segment(chord, lyric))
            chord = match.group(1)
            position = match.end()
        segments.append(self._segment(chord, line[position:]))
        return f'<div class="line">{"".join(segments)}</div>'

    def _segment(self, chord: str, lyric: str) -> str:
        chord_html = _escape_html(chord) if chord else "&nbsp;"
        lyric_html = _escape_html(lyric).replace(" ", "&nbsp;") if lyric else "&nbsp;"
        return (
            '<span class="segment">'
            f'<span class="chord">{chord_html}</span>'
            f'<span class="lyric">{lyric_html}</span>'
            "</span>"
        )

    def build_html(self, title: str, pages: list[str]) -> str:
        """
        Wrap rendered pages in a self-contained HTML document.

        Each page is placed in its own ``.page`` div. The stylesheet includes
        both screen styles (white cards on a grey background) and print styles
        (``page-break-after: always`` per page, no drop shadows).
        """
        title_safe = _escape_html(title)
        heading = f"  <h1>{title_safe}</h1>\n" if title else ""
        body = "\n".join(f'  <div class="page">\n{page}\n  </div>' for page in pages)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title_safe}</title>
  <style>
    *, *::before, *::after {{ box-sizing: border-box; }}
    body {{
      font-family: Menlo, Consolas, monospace;
      background: #f0f0f0;
      margin: 0;
      padding: 2rem;
    }}
    h1 {{
      text-align: center;
      font-size: 1.6rem;
      margin-bottom: 2rem;
      color: #222;
    }}
    .page {{
      background: #fff;
      box-shadow: 0 2px 8px rgba(0, 0, 0, 0.15);
      margin: 0 auto 3rem;
      max-width: 860px;
      padding: 1rem 1.5rem;
    }}
    .line {{ white-space: nowrap; margin-bottom: 0.25rem; }}
    .segment {{ display: inline-flex; flex-direction: column; }}
    .chord {{ color: #b0301c; font-weight: bold; }}
    .section {{ font-weight: bold; margin-top: 1rem; }}
    .comment {{ font-style: italic; color: #555; }}
    @media print {{
      body {{
        background: #fff;
        padding: 0;
        margin: 0;
      }}
      h1 {{
        margin-top: 1rem;
      }}
      .page {{
        box-shadow: none;
        page-break-after: always;
        max-width: 100%;
        padding: 0;
        margin: 0;
      }}
      .page:last-child {{
        page-break-after: avoid;
      }}
    }}
  </style>
</head>
<body>
{heading}{body}
</body>
</html>"""
