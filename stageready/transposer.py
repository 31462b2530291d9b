"""ChordTransposer: shifts bracketed chords by semitones or to Nashville numbers."""

import logging

from stageready.bracketer import is_directive
from stageready.chord_models import NOTE_NAMES, ChordToken
from stageready.chord_recognizer import ChordRecognizer, parse_chord

logger = logging.getLogger(__name__)

SEMITONES_PER_OCTAVE = 12

#: Scale degrees of the natural roots, relative to C major
NASHVILLE_NUMBERS: dict[str, str] = {
    "C": "1",
    "D": "2",
    "E": "3",
    "F": "4",
    "G": "5",
    "A": "6",
    "B": "7",
}


def transpose_token(token: ChordToken, semitones: int) -> str:
    """Return *token* moved by *semitones*, spelled with sharps, suffix kept."""
    new_index = (token.pitch_class + semitones) % SEMITONES_PER_OCTAVE
    return f"{NOTE_NAMES[new_index]}{token.suffix}"


def nashville_token(token: ChordToken) -> str | None:
    """
    Return *token* as a Nashville number in C major, e.g. ``Am7`` -> ``6m7``.

    Sharp and flat roots have no natural scale degree here, so None is
    returned for them and the caller keeps the original symbol.
    """
    if not token.is_natural:
        return None
    return f"{NASHVILLE_NUMBERS[token.root]}{token.suffix}"


class ChordTransposer:
    """
    Rewrites every bracketed chord of a ChordPro document.

    Directive lines are left alone, which also means a ``{key: ...}``
    directive keeps the key it was entered in after transposing; callers
    that store the key separately should move it with :func:`transpose_key`.
    Bracketed groups that are not chord symbols (``[N.C.]``, ``[Chorus]``,
    slash chords such as ``[G/B]``) are kept verbatim.
    """

    def __init__(self, recognizer: ChordRecognizer | None = None) -> None:
        self.recognizer = recognizer if recognizer is not None else ChordRecognizer()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _rewrite(self, token: ChordToken, semitones: int, use_nashville: bool) -> str:
        if use_nashville:
            number = nashville_token(token)
            return number if number is not None else token.name
        return transpose_token(token, semitones)

    def _transpose_line(self, line: str, semitones: int, use_nashville: bool) -> str:
        if is_directive(line) or "[" not in line:
            return line

        result = line
        for match in reversed(self.recognizer.tokenize(line)):
            if not match.bracketed:
                continue
            chord = self._rewrite(match.token, semitones, use_nashville)
            result = f"{result[:match.start]}[{chord}]{result[match.end:]}"
        return result

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def transpose(self, chordpro: str, semitones: int, use_nashville: bool = False) -> str:
        """
        Transpose every bracketed chord in *chordpro*.

        Args:
            chordpro:      ChordPro text with ``[Chord]`` markers.
            semitones:     Shift, positive = up; any integer, taken modulo 12.
            use_nashville: Render chords as C-major scale degrees instead;
                           *semitones* is then ignored.

        Returns:
            The transposed text. With ``semitones == 0`` and no Nashville
            conversion the input is returned as-is.
        """
        if semitones == 0 and not use_nashville:
            return chordpro

        logger.debug("Transposing by %d semitone(s), nashville=%s", semitones, use_nashville)
        lines = chordpro.split("\n")
        return "\n".join(self._transpose_line(line, semitones, use_nashville) for line in lines)


def transpose_key(key: str, semitones: int) -> str:
    """
    Transpose a stored key name such as ``G``, ``Bb`` or ``F#m``.

    Unrecognized keys are returned unchanged.
    """
    token = parse_chord(key)
    if token is None:
        return key
    return transpose_token(token, semitones)
