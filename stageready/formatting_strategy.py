"""FormattingStrategy: Strategy pattern for turning pasted text into ChordPro."""

import logging
from abc import ABC, abstractmethod

from stageready.ai_delegate import AiDelegate
from stageready.bracketer import ChordProBracketer

logger = logging.getLogger(__name__)


# ── Abstract base ────────────────────────────────────────────────────────────

class FormattingStrategy(ABC):
    """
    Abstract Strategy for formatting sheet text as ChordPro.

    A strategy may decline by returning None; :class:`FallbackFormatter`
    then moves on to the next one.
    """

    name = "abstract"

    @abstractmethod
    def try_format(
        self,
        text: str,
        chords_only: bool,
        custom_instructions: str | None,
    ) -> str | None:
        """
        Format *text*, or return None if this strategy is unavailable.

        Args:
            text:                Raw sheet body.
            chords_only:         Only the chords of each section are wanted.
            custom_instructions: Free-text hints from the user.
        """


# ── Concrete strategies ──────────────────────────────────────────────────────

class RulesFormattingStrategy(FormattingStrategy):
    """Regex and heuristic based formatting. Always produces a result."""

    name = "rules"

    def __init__(self, bracketer: ChordProBracketer | None = None) -> None:
        self.bracketer = bracketer if bracketer is not None else ChordProBracketer()

    def try_format(
        self,
        text: str,
        chords_only: bool,
        custom_instructions: str | None,
    ) -> str:
        return self.bracketer.to_chordpro(text, chords_only, custom_instructions)


class AiFormattingStrategy(FormattingStrategy):
    """Formatting through the optional AI backend; None when it is unavailable."""

    name = "ai"

    def __init__(self, delegate: AiDelegate) -> None:
        self.delegate = delegate

    def try_format(
        self,
        text: str,
        chords_only: bool,
        custom_instructions: str | None,
    ) -> str | None:
        return self.delegate.try_format(text, chords_only, custom_instructions)


# ── Composition ─────────────────────────────────────────────────────────────

class FallbackFormatter:
    """
    Tries optional strategies in order, then always falls back to the rules.

    Any exception raised by an optional strategy is logged and treated the
    same as it declining, so formatting never fails for the caller.
    """

    def __init__(
        self,
        strategies: list[FormattingStrategy] | None = None,
        rules: RulesFormattingStrategy | None = None,
    ) -> None:
        self.strategies = list(strategies) if strategies is not None else []
        self.rules = rules if rules is not None else RulesFormattingStrategy()

    def format(
        self,
        text: str,
        chords_only: bool = False,
        custom_instructions: str | None = None,
    ) -> str:
        for strategy in self.strategies:
            try:
                result = strategy.try_format(text, chords_only, custom_instructions)
            except Exception:
                logger.warning("Formatting strategy '%s' failed, falling back", strategy.name, exc_info=True)
                continue
            if result:
                logger.info("Formatted with the '%s' strategy", strategy.name)
                return result
            logger.debug("Formatting strategy '%s' unavailable", strategy.name)

        return self.rules.try_format(text, chords_only, custom_instructions)
