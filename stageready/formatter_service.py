"""FormatterService: the formatting operations offered to the sheet backend."""

import logging
import re

from stageready.ai_delegate import AiDelegate
from stageready.bracketer import ChordProBracketer
from stageready.chord_models import (
    FormatOptions,
    FormatRequest,
    FormatResult,
    SheetMetadata,
    ViewportSpec,
)
from stageready.chord_recognizer import ChordRecognizer
from stageready.config import Config
from stageready.formatting_strategy import (
    AiFormattingStrategy,
    FallbackFormatter,
    FormattingStrategy,
    RulesFormattingStrategy,
)
from stageready.transposer import ChordTransposer, transpose_key
from stageready.viewport import chars_per_line, measure, reflow

logger = logging.getLogger(__name__)

_METADATA_RE = {
    name: re.compile(rf"\{{{name}:\s*(.+?)\}}", re.IGNORECASE)
    for name in ("title", "artist", "key")
}


class FormatterService:
    """
    Stateless facade over the chord formatting engine.

    Every operation is a pure text transformation and always returns a
    string; the only I/O is the optional AI backend, whose failures fall
    back to the rules-based formatter.
    """

    def __init__(
        self,
        config: Config | None = None,
        ai_delegate: AiDelegate | None = None,
    ) -> None:
        """
        Args:
            config:      Formatter and AI settings. Defaults to ``Config()``.
            ai_delegate: AI backend to try before the rules. When omitted one
                         is created if the configuration enables it.
        """
        self.config = config if config is not None else Config()
        settings = self.config.formatter

        self.recognizer = ChordRecognizer(threshold=settings.chord_line_threshold)
        self.bracketer = ChordProBracketer(self.recognizer, default_title=settings.default_title)
        self.transposer = ChordTransposer(self.recognizer)

        self._owns_delegate = ai_delegate is None and self.config.ai.is_usable
        if self._owns_delegate:
            ai_delegate = AiDelegate(self.config.ai)
        self.ai_delegate = ai_delegate

        strategies: list[FormattingStrategy] = []
        if ai_delegate is not None:
            strategies.append(AiFormattingStrategy(ai_delegate))
        self.formatter = FallbackFormatter(strategies, RulesFormattingStrategy(self.bracketer))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def format(
        self,
        text: str,
        chords_only: bool = False,
        custom_instructions: str | None = None,
    ) -> str:
        """Convert pasted sheet text into ChordPro (AI first when configured)."""
        return self.formatter.format(text, chords_only, custom_instructions)

    def transpose(self, chordpro: str, semitones: int, use_nashville: bool = False) -> str:
        """Shift bracketed chords by *semitones*, or render them as Nashville numbers."""
        return self.transposer.transpose(chordpro, semitones, use_nashville)

    def chars_per_line(
        self,
        viewport: ViewportSpec | None = None,
        options: FormatOptions | None = None,
    ) -> int:
        settings = self.config.formatter
        return chars_per_line(
            viewport,
            options,
            glyph_width_px=settings.glyph_width_px,
            default_width_px=settings.default_viewport_width_px,
            default_font_scale=settings.default_font_scale,
        )

    def reflow(
        self,
        chordpro: str,
        viewport: ViewportSpec | None = None,
        options: FormatOptions | None = None,
    ) -> str:
        """Word-wrap *chordpro* to the character width of *viewport*."""
        return reflow(chordpro, self.chars_per_line(viewport, options))

    def format_for_viewport(
        self,
        chordpro: str,
        viewport: ViewportSpec | None = None,
        options: FormatOptions | None = None,
    ) -> FormatResult:
        """Reflow *chordpro* and report its line and page counts."""
        reflowed = self.reflow(chordpro, viewport, options)
        return measure(reflowed, self.config.formatter.lines_per_page)

    def process(self, request: FormatRequest) -> FormatResult:
        """Run a whole request: format, transpose, reflow, then measure."""
        text = self.format(request.text, request.chords_only, request.custom_instructions)
        text = self.transpose(text, request.semitones, request.use_nashville)
        return self.format_for_viewport(text, request.viewport, request.options)

    def chord_root(self, token: str) -> str:
        """Root and accidental of a chord, e.g. ``"[G#m]"`` -> ``"G#"``."""
        return self.recognizer.chord_root(token)

    def extract_metadata(self, chordpro: str) -> SheetMetadata:
        """Read the title, artist and key directives of a ChordPro sheet."""
        values: dict[str, str | None] = {}
        for name, pattern in _METADATA_RE.items():
            match = pattern.search(chordpro)
            values[name] = match.group(1).strip() if match else None
        return SheetMetadata(**values)

    def transpose_key(self, key: str, semitones: int) -> str:
        """Move a stored key name along with a transposed sheet body."""
        return transpose_key(key, semitones)

    def close(self) -> None:
        """Release the AI backend's HTTP session if this service created it."""
        if self._owns_delegate and self.ai_delegate is not None:
            self.ai_delegate.close()

    def __enter__(self) -> "FormatterService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
