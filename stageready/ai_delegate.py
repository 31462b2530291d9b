"""AiDelegate: optional chat-completion backend for ChordPro formatting."""

import logging
import re

import requests

from stageready.config import AiConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You convert song sheets into ChordPro. "
    "Start with a {title: ...} directive. "
    "Place every chord inline in square brackets directly before the syllable it is played on "
    "(e.g. [G]Amazing [C]grace). "
    "Keep the lyrics, line order and section order exactly as given. "
    "Mark sections with {start_of_verse}/{end_of_verse}, {start_of_chorus}/{end_of_chorus} "
    "and {start_of_bridge}/{end_of_bridge} where they are labelled. "
    "Never invent lyrics, sections or chord names. "
    "Return only the ChordPro text, without Markdown fences or explanations."
)

CHORDS_ONLY_PROMPT = (
    "Return only the chords: for each labelled section emit {start_of_<section>}, "
    "one line of the distinct bracketed chords in the order they first appear, "
    "and {end_of_<section>}. Drop all lyrics."
)

_FENCE_OPEN_RE = re.compile(r"^```[a-zA-Z0-9_-]*\n")
_FENCE_CLOSE_RE = re.compile(r"\n```$")


def strip_code_fences(content: str) -> str:
    """Remove a Markdown code fence wrapped around a model reply."""
    text = content.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN_RE.sub("", text)
        text = _FENCE_CLOSE_RE.sub("", text).strip()
    return text


class AiDelegate:
    """
    Sends sheet text to a chat-completion endpoint and returns its ChordPro.

    Every failure (disabled configuration, network error, timeout, bad
    credentials, malformed or empty reply) is logged and reported as None so
    the caller can fall back to the rules-based formatter.

    Usage as a context manager closes the HTTP session:

        with AiDelegate(AiConfig.from_env()) as delegate:
            chordpro = delegate.try_format(text, chords_only=False, custom_instructions=None)
    """

    def __init__(self, config: AiConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self._session = session if session is not None else requests.Session()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_payload(
        self,
        text: str,
        chords_only: bool,
        custom_instructions: str | None,
    ) -> dict:
        system_prompt = SYSTEM_PROMPT
        if chords_only:
            system_prompt = f"{system_prompt} {CHORDS_ONLY_PROMPT}"
        if custom_instructions:
            system_prompt = f"{system_prompt}\n\nAdditional instructions: {custom_instructions.strip()}"

        return {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": text},
            ],
            "temperature": self.config.temperature,
        }

    def _redact(self, message: str) -> str:
        if self.config.api_key:
            message = message.replace(self.config.api_key, "[secure]")
        return message

    def _extract_content(self, response: requests.Response) -> str | None:
        try:
            payload = response.json()
            content = payload["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.warning("AI formatter returned a malformed response: %s", exc)
            return None

        if not isinstance(content, str):
            logger.warning("AI formatter returned non-text content")
            return None

        text = strip_code_fences(content)
        if not text:
            logger.warning("AI formatter returned an empty response")
            return None
        return text

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def try_format(
        self,
        text: str,
        chords_only: bool = False,
        custom_instructions: str | None = None,
    ) -> str | None:
        """
        Ask the backend to format *text* as ChordPro.

        Returns:
            The formatted text, or None when the backend is disabled or the
            call failed for any reason.
        """
        if not self.config.is_usable:
            logger.debug("AI formatter disabled or not configured")
            return None

        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = self._session.post(
                str(self.config.endpoint),
                headers=headers,
                json=self._build_payload(text, chords_only, custom_instructions),
                timeout=self.config.timeout_seconds,
            )
        except requests.Timeout:
            logger.warning("AI formatter timed out after %.1f s", self.config.timeout_seconds)
            return None
        except requests.RequestException as exc:
            logger.warning("AI formatter request failed: %s", self._redact(str(exc)))
            return None

        if response.status_code != 200:
            logger.warning(
                "AI formatter error %d: %s",
                response.status_code,
                self._redact(response.text[:200]),
            )
            return None

        return self._extract_content(response)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> "AiDelegate":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
