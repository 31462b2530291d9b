"""Tests for the stageready command-line interface."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from stageready import __version__
from stageready.cli import main


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    monkeypatch.delenv("STAGEREADY_AI_ENABLED", raising=False)
    return CliRunner()


@pytest.fixture
def sheet_file(tmp_path: Path) -> Path:
    path = tmp_path / "song.cho"
    path.write_text("{title: Song}\n{key: C}\n[C]Hello [Am]there\n", encoding="utf-8")
    return path


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_format_from_stdin(runner: CliRunner) -> None:
    result = runner.invoke(main, ["format", "-", "--no-ai"], input="C Am F G\n")
    assert result.exit_code == 0
    assert "[C] [Am] [F] [G]" in result.stdout


def test_format_chords_only(runner: CliRunner) -> None:
    result = runner.invoke(main, ["format", "-", "--chords-only"], input="Verse\nC G Am\n")
    assert result.exit_code == 0
    assert "{start_of_verse}\n[C] [G] [Am]\n{end_of_verse}" in result.stdout


def test_format_writes_output_file(runner: CliRunner, tmp_path: Path) -> None:
    out = tmp_path / "out.cho"
    result = runner.invoke(main, ["format", "-", "-o", str(out)], input="Song\nC G\nHello\n")
    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8").startswith("{title: Song}\n[C]He[G]llo")


def test_transpose(runner: CliRunner, sheet_file: Path) -> None:
    result = runner.invoke(main, ["transpose", str(sheet_file), "-s", "2"])
    assert result.exit_code == 0
    assert "[D]Hello [Bm]there" in result.stdout
    assert "{key: C}" in result.stdout


def test_transpose_nashville(runner: CliRunner, sheet_file: Path) -> None:
    result = runner.invoke(main, ["transpose", str(sheet_file), "--nashville"])
    assert result.exit_code == 0
    assert "[1]Hello [6m]there" in result.stdout


def test_reflow_wraps_and_reports_metrics(runner: CliRunner) -> None:
    text = " ".join(["lyric"] * 40)
    result = runner.invoke(main, ["reflow", "-", "--width", "400"], input=text)
    assert result.exit_code == 0
    assert all(len(line) <= 50 for line in result.stdout.splitlines())
    assert "Columns: 50" in result.output


def test_export_html_uses_title_directive(runner: CliRunner, sheet_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "song.html"
    result = runner.invoke(main, ["export", str(sheet_file), "-o", str(out)])
    assert result.exit_code == 0
    assert "<h1>Song</h1>" in out.read_text(encoding="utf-8")


def test_export_text_to_stdout(runner: CliRunner, sheet_file: Path) -> None:
    result = runner.invoke(main, ["export", str(sheet_file), "--format", "text"])
    assert result.exit_code == 0
    assert "CHello Amthere" in result.stdout


def test_config_file_overrides_layout(runner: CliRunner, tmp_path: Path) -> None:
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"formatter": {"glyph_width_px": 16}}), encoding="utf-8")
    text = " ".join(["lyric"] * 40)

    result = runner.invoke(main, ["--config", str(config), "reflow", "-", "--width", "400"], input=text)

    assert result.exit_code == 0
    assert "Columns: 25" in result.output


def test_bad_config_file_exits_with_error(runner: CliRunner, tmp_path: Path) -> None:
    config = tmp_path / "config.json"
    config.write_text("{broken", encoding="utf-8")
    result = runner.invoke(main, ["--config", str(config), "format", "-"], input="C G")
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_unwritable_output_exits_with_error(runner: CliRunner, tmp_path: Path) -> None:
    out = tmp_path / "missing" / "out.cho"
    result = runner.invoke(main, ["format", "-", "-o", str(out)], input="C G")
    assert result.exit_code == 1
    assert "ERROR" in result.output
