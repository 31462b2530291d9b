"""ChordProBracketer: turns pasted lyrics and chords into inline ChordPro."""

import logging
import re

from stageready.chord_models import ChordMatch
from stageready.chord_recognizer import ChordRecognizer

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"

# Input carrying either directive is treated as ChordPro already
_TITLE_DIRECTIVES = ("{title:", "{t:")

_SECTION_HEADER_RE = re.compile(
    r"^\[?(Verse|Chorus|Bridge|Intro|Outro|Pre-?Chorus|Interlude|Solo)(?![A-Za-z])\]?",
    re.IGNORECASE,
)


def is_directive(line: str) -> bool:
    """True for ChordPro metadata lines such as ``{title: ...}``."""
    return line.lstrip().startswith("{")


class ChordProBracketer:
    """
    Rules-based conversion of free-form sheet text into bracketed ChordPro.

    Three modes, chosen per document
    --------------------------------
    - **Chords only**: collect the distinct chords of every section
      (Verse, Chorus, Bridge, ...) and emit one bracketed chord list per
      section between ``{start_of_...}``/``{end_of_...}`` directives.
    - **Already ChordPro** (a ``{title:`` or ``{t:`` directive is present):
      bracket any bare chord left in non-directive lines.
    - **Free form**: the first non-blank line becomes the title, a chord line
      followed by a lyric line is merged into one inline line, other lines get
      their bare chords bracketed.

    Lines the recognizer cannot make sense of are passed through unchanged;
    conversion never raises.
    """

    def __init__(
        self,
        recognizer: ChordRecognizer | None = None,
        default_title: str = DEFAULT_TITLE,
    ) -> None:
        """
        Args:
            recognizer:    Chord recognizer to classify tokens and lines.
            default_title: Title used when the first line cannot serve as one.
        """
        self.recognizer = recognizer if recognizer is not None else ChordRecognizer()
        self.default_title = default_title

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _is_lyric_line(self, line: str) -> bool:
        return (
            bool(line.strip())
            and not is_directive(line)
            and not self.recognizer.is_chord_line(line)
        )

    def _bracket_existing(self, lines: list[str]) -> str:
        output = [line if is_directive(line) else self.recognizer.bracket_chords(line) for line in lines]
        return "\n".join(output)

    def _convert_free_form(self, lines: list[str]) -> str:
        title_index = next((i for i, line in enumerate(lines) if line.strip()), None)
        if title_index is None:
            return "\n".join(lines)

        title_line = lines[title_index]
        if is_directive(title_line) or self.recognizer.is_chord_line(title_line):
            output = [f"{{title: {self.default_title}}}"]
            index = title_index
        else:
            output = [f"{{title: {title_line.strip()}}}"]
            index = title_index + 1

        while index < len(lines):
            line = lines[index]

            if not line.strip():
                output.append("")
            elif is_directive(line):
                output.append(line)
            elif self.recognizer.is_chord_line(line):
                next_line = lines[index + 1] if index + 1 < len(lines) else None
                if next_line is not None and self._is_lyric_line(next_line):
                    output.append(self.merge_chord_and_lyrics(line, next_line))
                    index += 2
                    continue
                output.append(self.recognizer.bracket_chords(line))
            else:
                output.append(self.recognizer.bracket_chords(line))

            index += 1

        return "\n".join(output)

    def _collect_section_chords(self, text: str, chords: list[str]) -> None:
        chord_line = self.recognizer.is_chord_line(text)
        for match in self.recognizer.tokenize(text):
            if not (match.bracketed or chord_line):
                continue
            name = match.token.name
            if name not in chords:
                chords.append(name)

    def _convert_chords_only(self, lines: list[str]) -> str:
        # (section name or None for chords before any header, chords in first-seen order)
        sections: list[tuple[str | None, list[str]]] = [(None, [])]

        for line in lines:
            stripped = line.strip()
            header = _SECTION_HEADER_RE.match(stripped)
            if header:
                sections.append((header.group(1).lower(), []))
                self._collect_section_chords(stripped[header.end():], sections[-1][1])
            elif stripped and not is_directive(stripped):
                self._collect_section_chords(line, sections[-1][1])

        blocks: list[str] = []
        for name, chords in sections:
            if not chords:
                continue
            chord_list = " ".join(f"[{chord}]" for chord in chords)
            if name is None:
                blocks.append(chord_list)
            else:
                blocks.append(f"{{start_of_{name}}}\n{chord_list}\n{{end_of_{name}}}")

        return "\n\n".join(blocks)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def merge_chord_and_lyrics(self, chord_line: str, lyric_line: str) -> str:
        """
        Insert the chords of *chord_line* into *lyric_line* at matching offsets.

        Chords are inserted right to left so earlier offsets stay valid. A
        lyric shorter than a chord's offset is padded with spaces.
        """
        matches: list[ChordMatch] = self.recognizer.tokenize(chord_line)
        result = lyric_line
        for match in reversed(matches):
            position = match.start
            if position > len(result):
                result = result.ljust(position)
            result = f"{result[:position]}[{match.token.name}]{result[position:]}"
        return result

    def to_chordpro(
        self,
        text: str,
        chords_only: bool = False,
        custom_instructions: str | None = None,
    ) -> str:
        """
        Convert *text* into bracketed ChordPro.

        Args:
            text:                Sheet body as pasted by the user.
            chords_only:         Emit only the distinct chords per section.
            custom_instructions: Free-text hints; only an AI formatter uses them.

        Returns:
            ChordPro text with ``\\n`` line endings.
        """
        if custom_instructions:
            logger.debug("Rules-based formatting ignores custom instructions")

        lines = text.replace("\r\n", "\n").split("\n")

        if chords_only:
            return self._convert_chords_only(lines)

        if any(directive in text for directive in _TITLE_DIRECTIVES):
            return self._bracket_existing(lines)

        return self._convert_free_form(lines)
