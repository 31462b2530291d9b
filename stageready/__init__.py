"""StageReady: ChordPro formatting, transposition and viewport reflow."""

__version__ = "0.1.0"

from stageready.chord_models import (
    ChordToken,
    FormatOptions,
    FormatRequest,
    FormatResult,
    SheetMetadata,
    ViewportSpec,
)
from stageready.formatter_service import FormatterService

__all__ = [
    "ChordToken",
    "FormatOptions",
    "FormatRequest",
    "FormatResult",
    "FormatterService",
    "SheetMetadata",
    "ViewportSpec",
    "__version__",
]
