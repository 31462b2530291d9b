"""ChordRecognizer: the one tokenizer deciding what counts as a chord symbol."""

import re

from stageready.chord_models import ChordMatch, ChordToken

#: A line is a chord line when chord tokens cover more than this share of it.
#: Empirical heuristic kept for compatibility with existing sheets.
CHORD_LINE_THRESHOLD = 0.3

ROOT_LETTERS = "ABCDEFG"
ACCIDENTALS = "#b"

# Quality vocabulary: a named quality with optional digits, or bare digits ("7", "9")
_QUALITY = r"(?:(?:maj|min|m|M|sus|dim|aug|add)\d*|\d+)?"
_CHORD_SYMBOL = rf"[A-Ga-g][#b]?{_QUALITY}"

# Bracketed groups are alternated first so their whole span is consumed and no
# bare token can be matched inside an existing [...] group.
_TOKEN_RE = re.compile(
    r"\[(?P<bracketed>[^\[\]\n]*)\]"
    rf"|(?<![\w#\[\]])(?P<bare>{_CHORD_SYMBOL})(?![\w#\[\]])"
)
_CHORD_SYMBOL_RE = re.compile(_CHORD_SYMBOL)
# Inside brackets the root must already be uppercase: [Chorus] and [bridge] are labels
_BRACKETED_CHORD_RE = re.compile(rf"[A-G][#b]?{_QUALITY}")


def parse_chord(text: str, allow_lowercase: bool = True) -> ChordToken | None:
    """
    Split a chord symbol into root, accidental and suffix by position.

    The first character is the root, an optional ``#``/``b`` after it is the
    accidental and everything else is kept verbatim as the suffix.

    Args:
        text:            Chord text without brackets, e.g. ``"G#m7"``.
        allow_lowercase: Accept a lowercase root letter (capitalized on output).

    Returns:
        The parsed ChordToken, or None if *text* does not start with A-G or
        contains whitespace.
    """
    text = text.strip()
    if not text or any(ch.isspace() for ch in text):
        return None

    root = text[0]
    if root.upper() not in ROOT_LETTERS:
        return None
    if root.islower() and not allow_lowercase:
        return None

    accidental = text[1] if len(text) > 1 and text[1] in ACCIDENTALS else ""
    suffix = text[1 + len(accidental):]
    return ChordToken(root=root.upper(), accidental=accidental, suffix=suffix)


def parse_bracketed_chord(content: str) -> ChordToken | None:
    """Parse the content of a ``[...]`` group, or None if it is not a chord symbol."""
    if _BRACKETED_CHORD_RE.fullmatch(content) is None:
        return None
    return parse_chord(content, allow_lowercase=False)


class ChordRecognizer:
    """
    Classifies tokens and lines of sheet text as chords or lyrics.

    Algorithm overview
    ------------------
    1. **Tokenizing** – One left-to-right regex pass yields two variants:
       bracketed groups (``[G#m]``) and bare chord symbols (``G#m``). A bare
       symbol may not touch a word character, ``#`` or a bracket on either
       side, so words like "Bad" and chords already in brackets are skipped.

    2. **Line classification** – A line is a chord line when the characters
       consumed by bare chord symbols exceed *threshold* times the line
       length. Spaces count toward the length, so "C   G   Am" still passes
       while "Amazing grace" does not.
    """

    def __init__(self, threshold: float = CHORD_LINE_THRESHOLD) -> None:
        """
        Args:
            threshold: Share of the line (0-1) chord symbols must exceed for
                       the line to count as a chord line.
        """
        self.threshold = threshold

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def tokenize(self, line: str) -> list[ChordMatch]:
        """
        Return every chord in *line*, bare and bracketed, in order.

        Bracketed groups whose content is not a chord symbol (``[x2]``, ``[Chorus]``,
        ``[G/B]``) are skipped but still shield their content from bare matching.
        """
        matches: list[ChordMatch] = []
        for match in _TOKEN_RE.finditer(line):
            bracketed = match.group("bracketed")
            if bracketed is not None:
                token = parse_bracketed_chord(bracketed)
            else:
                token = parse_chord(match.group("bare"))
            if token is None:
                continue
            matches.append(
                ChordMatch(
                    token=token,
                    text=match.group(0),
                    start=match.start(),
                    end=match.end(),
                    bracketed=bracketed is not None,
                )
            )
        return matches

    def bare_chords(self, line: str) -> list[ChordMatch]:
        """Return only the chord symbols not yet wrapped in brackets."""
        return [match for match in self.tokenize(line) if not match.bracketed]

    def is_chord_token(self, text: str) -> bool:
        """True when the whole of *text* is a single chord symbol."""
        return _CHORD_SYMBOL_RE.fullmatch(text.strip()) is not None

    def is_chord_line(self, line: str | None) -> bool:
        """True when *line* is made up mostly of chord symbols (no lyrics)."""
        if line is None or not line.strip():
            return False
        chord_chars = sum(match.length for match in self.bare_chords(line))
        return chord_chars > len(line) * self.threshold

    def bracket_chords(self, line: str) -> str:
        """Wrap every bare chord symbol in *line* in brackets, root capitalized."""

        def _replace(match: re.Match[str]) -> str:
            bare = match.group("bare")
            if bare is None:
                return match.group(0)
            return f"[{bare[0].upper()}{bare[1:]}]"

        return _TOKEN_RE.sub(_replace, line)

    def chord_root(self, token: str) -> str:
        """
        Return the root and accidental of a bare or bracketed chord.

        ``"C"`` gives ``"C"``, ``"[G#m]"`` gives ``"G#"``. Anything that is not
        a chord gives an empty string.
        """
        text = token.strip()
        if text.startswith("[") and text.endswith("]"):
            parsed = parse_bracketed_chord(text[1:-1])
        elif self.is_chord_token(text):
            parsed = parse_chord(text)
        else:
            parsed = None
        return parsed.root_name if parsed is not None else ""


_default_recognizer = ChordRecognizer()


def is_chord_token(text: str) -> bool:
    return _default_recognizer.is_chord_token(text)


def is_chord_line(line: str | None) -> bool:
    return _default_recognizer.is_chord_line(line)


def chord_root(token: str) -> str:
    return _default_recognizer.chord_root(token)
