"""
Configuration module for StageReady.

Holds the tunable layout/heuristic constants of the formatter and the
settings of the optional AI formatting backend.
"""

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path

from stageready.bracketer import DEFAULT_TITLE
from stageready.chord_recognizer import CHORD_LINE_THRESHOLD
from stageready.viewport import (
    DEFAULT_FONT_SCALE,
    DEFAULT_VIEWPORT_WIDTH_PX,
    GLYPH_WIDTH_PX,
    LINES_PER_PAGE,
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class FormatterConfig:
    """Heuristics and layout constants of the rules-based formatter."""
    chord_line_threshold: float = CHORD_LINE_THRESHOLD
    glyph_width_px: float = GLYPH_WIDTH_PX
    lines_per_page: int = LINES_PER_PAGE
    default_viewport_width_px: int = DEFAULT_VIEWPORT_WIDTH_PX
    default_font_scale: float = DEFAULT_FONT_SCALE
    default_title: str = DEFAULT_TITLE

    def __post_init__(self) -> None:
        if not 0 <= self.chord_line_threshold < 1:
            raise ValueError("chord_line_threshold must be in [0, 1).")
        if self.glyph_width_px <= 0:
            raise ValueError("glyph_width_px must be positive.")
        if self.lines_per_page <= 0:
            raise ValueError("lines_per_page must be positive.")
        if self.default_viewport_width_px <= 0:
            raise ValueError("default_viewport_width_px must be positive.")
        if self.default_font_scale <= 0:
            raise ValueError("default_font_scale must be positive.")


@dataclass
class AiConfig:
    """Settings for the optional chat-completion formatting backend."""
    enabled: bool = False
    endpoint: str | None = None  # full chat-completions URL
    api_key: str | None = None
    model: str = "gpt-4o-mini"
    timeout_seconds: float = 30.0
    temperature: float = 0.2

    @property
    def is_usable(self) -> bool:
        """Enabled and has everything needed to send a request."""
        return self.enabled and bool(self.endpoint) and bool(self.api_key)

    @classmethod
    def from_env(cls) -> "AiConfig":
        """Build the AI settings from ``STAGEREADY_AI_*`` environment variables."""
        config = cls()
        config.enabled = os.getenv("STAGEREADY_AI_ENABLED", "").strip().lower() in _TRUE_VALUES
        config.endpoint = os.getenv("STAGEREADY_AI_ENDPOINT") or None
        config.api_key = os.getenv("STAGEREADY_AI_API_KEY") or None
        config.model = os.getenv("STAGEREADY_AI_MODEL") or config.model

        timeout = os.getenv("STAGEREADY_AI_TIMEOUT")
        if timeout:
            try:
                config.timeout_seconds = float(timeout)
            except ValueError as exc:
                raise ValueError(f"STAGEREADY_AI_TIMEOUT must be a number, got '{timeout}'.") from exc

        return config


@dataclass
class Config:
    """
    Main configuration for the formatter service.

    ``Config.load(path)`` reads a JSON file with optional ``formatter`` and
    ``ai`` sections; missing keys keep their defaults. AI settings start from
    the environment so secrets need not be written to the file.
    """
    formatter: FormatterConfig = field(default_factory=FormatterConfig)
    ai: AiConfig = field(default_factory=AiConfig.from_env)

    def to_dict(self) -> dict:
        """Serializable form, with the API key left out."""
        ai = asdict(self.ai)
        ai.pop("api_key", None)
        return {"formatter": asdict(self.formatter), "ai": ai}

    def save(self, path: str | Path) -> None:
        """Write the configuration to *path* as JSON."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "Config":
        """
        Load configuration from *path*, or defaults when *path* is None.

        Raises:
            ValueError: If the file is not valid JSON or has unknown keys.
            OSError:    If the file cannot be read.
        """
        config = cls()
        if path is None:
            return config

        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Could not parse config file '{path}': {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError(f"Config file '{path}' must contain a JSON object.")

        try:
            if "formatter" in data:
                config.formatter = FormatterConfig(**data["formatter"])
            if "ai" in data:
                config.ai = AiConfig(**{**asdict(config.ai), **data["ai"]})
        except TypeError as exc:
            raise ValueError(f"Invalid setting in config file '{path}': {exc}") from exc

        return config
