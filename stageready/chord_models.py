"""Value types passed through the formatting pipeline."""

from dataclasses import dataclass

# Chromatic pitch class names (index 0 = C), sharps are the canonical spelling
NOTE_NAMES: list[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Pitch class of each natural letter
NATURAL_PITCH_CLASSES: dict[str, int] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}

ACCIDENTAL_OFFSETS: dict[str, int] = {"": 0, "#": 1, "b": -1}


@dataclass(frozen=True)
class ChordToken:
    """
    A single chord symbol split into its parts.

    Attributes:
        root:       Natural letter, always uppercase (A-G).
        accidental: "", "#" or "b".
        suffix:     Free-form quality/extension, e.g. "m", "maj7", "sus4", "/B".
    """

    root: str
    accidental: str = ""
    suffix: str = ""

    @property
    def root_name(self) -> str:
        """Root with its accidental, e.g. 'G#' or 'Bb'."""
        return f"{self.root}{self.accidental}"

    @property
    def name(self) -> str:
        """Full chord symbol as it should be printed, e.g. 'G#m'."""
        return f"{self.root_name}{self.suffix}"

    @property
    def pitch_class(self) -> int:
        """Pitch class of the root (0=C, ..., 11=B); enharmonics share a class."""
        natural = NATURAL_PITCH_CLASSES[self.root]
        return (natural + ACCIDENTAL_OFFSETS[self.accidental]) % 12

    @property
    def is_natural(self) -> bool:
        return self.accidental == ""


@dataclass(frozen=True)
class ChordMatch:
    """
    One chord found by the tokenizer.

    ``bracketed`` tells the two token variants apart: a bare token written in
    running text (``C``) or a ``[C]`` group already in ChordPro notation.
    ``start``/``end`` cover the brackets for the bracketed variant.
    """

    token: ChordToken
    text: str
    start: int
    end: int
    bracketed: bool

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ViewportSpec:
    """Display surface the sheet is laid out for. Never mutated."""

    width_px: int
    height_px: int
    dpi: int


@dataclass(frozen=True)
class FormatOptions:
    """Optional per-user display preferences."""

    font_scale: float | None = None
    avoid_scroll: bool | None = None


@dataclass(frozen=True)
class FormatRequest:
    """Everything a single format/transpose/reflow call needs."""

    text: str
    chords_only: bool = False
    custom_instructions: str | None = None
    semitones: int = 0
    use_nashville: bool = False
    viewport: ViewportSpec | None = None
    options: FormatOptions | None = None


@dataclass(frozen=True)
class FormatResult:
    """Formatted text plus the metrics shown next to it."""

    text: str
    line_count: int
    estimated_page_count: int


@dataclass(frozen=True)
class SheetMetadata:
    """Metadata read back out of a sheet's directives."""

    title: str | None = None
    artist: str | None = None
    key: str | None = None
