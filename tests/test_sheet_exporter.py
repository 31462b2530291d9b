"""Unit tests for SheetExporter."""

from pathlib import Path

import pytest

from stageready.sheet_exporter import SUPPORTED_FORMATS, SheetExporter

SHEET = "{title: Song}\n[C]Hello [G]world"


def test_supported_formats() -> None:
    assert SUPPORTED_FORMATS == {"chordpro", "text", "html"}


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="chordpro, html, text"):
        SheetExporter(output_format="pdf")


def test_format_is_normalized() -> None:
    exporter = SheetExporter(output_format="  HTML ")
    assert exporter.output_format == "html"
    assert exporter.default_extension == ".html"


def test_render_text() -> None:
    assert SheetExporter(output_format="text").render(SHEET) == "CHello Gworld"


def test_render_chordpro() -> None:
    assert SheetExporter(output_format="chordpro").render(SHEET) == f"{SHEET}\n"


def test_export_writes_utf8_file(tmp_path: Path) -> None:
    out = tmp_path / "song.html"
    SheetExporter(title="Canción", output_format="html").export(SHEET, str(out))

    content = out.read_text(encoding="utf-8")
    assert content.startswith("<!DOCTYPE html>")
    assert "<h1>Canción</h1>" in content


def test_export_to_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        SheetExporter(output_format="text").export(SHEET, str(tmp_path / "missing" / "song.txt"))
