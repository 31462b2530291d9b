"""Unit tests for ChordTransposer and key transposition."""

import pytest

from stageready.chord_models import ChordToken
from stageready.transposer import (
    NASHVILLE_NUMBERS,
    ChordTransposer,
    nashville_token,
    transpose_key,
    transpose_token,
)

SAMPLES = [
    "[C] [Am] [F] [G]",
    "{title: Song}\n{key: E}\n[E]Hello [B7]darkness my [C#m]old [A]friend",
    "[F#m7]Some [Dsus4]words [G/B]here [N.C.]",
    "no chords at all",
    "",
]


@pytest.fixture
def transposer() -> ChordTransposer:
    return ChordTransposer()


# ---------------------------------------------------------------------------
# Laws
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("text", SAMPLES)
def test_zero_semitones_is_identity(transposer: ChordTransposer, text: str) -> None:
    assert transposer.transpose(text, 0, False) is text


@pytest.mark.parametrize("text", SAMPLES)
def test_octave_shift_is_identity(transposer: ChordTransposer, text: str) -> None:
    assert transposer.transpose(text, 12, False) == text
    assert transposer.transpose(text, -12, False) == text


@pytest.mark.parametrize("semitones", range(-13, 14))
def test_transposition_is_periodic(transposer: ChordTransposer, semitones: int) -> None:
    text = SAMPLES[1]
    assert transposer.transpose(text, semitones) == transposer.transpose(text, semitones + 12)


# ---------------------------------------------------------------------------
# Semitone shifts
# ---------------------------------------------------------------------------

def test_transpose_up_one(transposer: ChordTransposer) -> None:
    assert transposer.transpose("[C] [Am] [F] [G]", 1) == "[C#] [A#m] [F#] [G#]"


def test_transpose_down_one(transposer: ChordTransposer) -> None:
    assert transposer.transpose("[C] [Am] [F] [G]", -1) == "[B] [G#m] [E] [F#]"


def test_flats_are_respelled_with_sharps(transposer: ChordTransposer) -> None:
    assert transposer.transpose("[Bb] [Eb7] [Db]", 2) == "[C] [F7] [D#]"


def test_suffix_is_preserved(transposer: ChordTransposer) -> None:
    assert transposer.transpose("[F#m7]a [Dsus4]b [Cmaj7]c", 2) == "[G#m7]a [Esus4]b [Dmaj7]c"


def test_slash_chords_are_kept_verbatim(transposer: ChordTransposer) -> None:
    assert transposer.transpose("[G/B] [Am/G] [C]", 2) == "[G/B] [Am/G] [D]"


def test_section_labels_are_not_transposed(transposer: ChordTransposer) -> None:
    text = "[Chorus]\n[C]Hello\n[Bridge]\n[Em]Bye [Ending]"
    assert transposer.transpose(text, 2) == "[Chorus]\n[D]Hello\n[Bridge]\n[F#m]Bye [Ending]"


def test_unrecognized_brackets_are_kept(transposer: ChordTransposer) -> None:
    assert transposer.transpose("[N.C.] [x2] [C] [bridge]", 2) == "[N.C.] [x2] [D] [bridge]"


def test_key_directive_is_not_updated(transposer: ChordTransposer) -> None:
    text = "{title: Song}\n{key: C}\n[C]Hello"
    assert transposer.transpose(text, 2) == "{title: Song}\n{key: C}\n[D]Hello"


def test_directive_lines_are_untouched(transposer: ChordTransposer) -> None:
    text = "{comment: start on [C] softly}\n[C]Go"
    assert transposer.transpose(text, 5) == "{comment: start on [C] softly}\n[F]Go"


def test_large_shifts_wrap(transposer: ChordTransposer) -> None:
    assert transposer.transpose("[A]", 27) == "[C]"
    assert transposer.transpose("[A]", -30) == "[D#]"


# ---------------------------------------------------------------------------
# Nashville numbers
# ---------------------------------------------------------------------------

def test_nashville_numbers_table() -> None:
    assert NASHVILLE_NUMBERS == {"C": "1", "D": "2", "E": "3", "F": "4", "G": "5", "A": "6", "B": "7"}


def test_nashville_conversion(transposer: ChordTransposer) -> None:
    text = "[C] [Dm] [Em7] [F] [G7] [Am] [Bdim]"
    assert transposer.transpose(text, 0, use_nashville=True) == "[1] [2m] [3m7] [4] [57] [6m] [7dim]"


def test_nashville_keeps_sharp_and_flat_roots(transposer: ChordTransposer) -> None:
    assert transposer.transpose("[C#m] [Bb] [G]", 0, use_nashville=True) == "[C#m] [Bb] [5]"


def test_nashville_keeps_section_labels(transposer: ChordTransposer) -> None:
    assert transposer.transpose("[Bridge] [G]", 0, use_nashville=True) == "[Bridge] [5]"


def test_nashville_ignores_semitones(transposer: ChordTransposer) -> None:
    assert transposer.transpose("[C]", 3, use_nashville=True) == "[1]"


def test_nashville_token_for_accidental_is_none() -> None:
    assert nashville_token(ChordToken("F", "#")) is None
    assert nashville_token(ChordToken("A", "", "m")) == "6m"


def test_transpose_token() -> None:
    assert transpose_token(ChordToken("B", "", "7"), 1) == "C7"
    assert transpose_token(ChordToken("E", "b", "m"), -3) == "Cm"


# ---------------------------------------------------------------------------
# Key names
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    ("key", "semitones", "expected"),
    [
        ("G", 2, "A"),
        ("Bb", 1, "B"),
        ("F#m", -1, "Fm"),
        ("C", 12, "C"),
        ("Unknown", 3, "Unknown"),
        ("", 2, ""),
    ],
)
def test_transpose_key(key: str, semitones: int, expected: str) -> None:
    assert transpose_key(key, semitones) == expected
