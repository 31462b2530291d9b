"""SheetExporter: writes a ChordPro sheet as ChordPro, plain text or HTML."""

from __future__ import annotations

import logging
from typing import Final

from stageready.sheet_renderers import (
    ChordProRenderer,
    HtmlRenderer,
    PlainTextRenderer,
    SheetRenderer,
)
from stageready.viewport import LINES_PER_PAGE

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS: Final[set[str]] = {"chordpro", "text", "html"}


class SheetExporter:
    """
    Convert a ChordPro sheet into an output file via a pluggable renderer.

    Supported formats:
    - ``chordpro``: the ChordPro source, newline terminated.
    - ``text``: plain text with chords unwrapped and metadata dropped.
    - ``html``: self-contained HTML with chords above the lyrics, paged.
    """

    def __init__(
        self,
        title: str = "",
        output_format: str = "html",
        lines_per_page: int = LINES_PER_PAGE,
    ) -> None:
        self.title = title
        normalized = output_format.strip().lower()
        if normalized not in SUPPORTED_FORMATS:
            supported = ", ".join(sorted(SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
        self.output_format = normalized
        self.renderer = self._build_renderer(normalized, lines_per_page)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_renderer(self, output_format: str, lines_per_page: int) -> SheetRenderer:
        if output_format == "html":
            return HtmlRenderer(lines_per_page=lines_per_page)
        if output_format == "text":
            return PlainTextRenderer()
        return ChordProRenderer()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def default_extension(self) -> str:
        return self.renderer.default_extension

    def render(self, chordpro: str) -> str:
        """Render *chordpro* in the configured output format."""
        return self.renderer.render(title=self.title, chordpro=chordpro)

    def export(self, chordpro: str, output_path: str) -> None:
        """
        Render *chordpro* and write it to *output_path* as UTF-8.

        Raises:
            OSError: If the output file cannot be written.
        """
        content = self.render(chordpro)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)
        logger.info("Wrote %s sheet to %s", self.output_format, output_path)
