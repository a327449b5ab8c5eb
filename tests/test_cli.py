from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from photocal.main import SUGGESTION_FAILED, app

runner = CliRunner()


def test_render_command(out_dir: Path) -> None:
    result = runner.invoke(
        app,
        ["render", "--year", "2025", "--month", "7", "--layout", "side_by_side", "--out", str(out_dir)],
    )
    assert result.exit_code == 0, result.output
    assert "READY: 1" in result.output
    assert (out_dir / "2025-07-side-by-side-standard" / "sheet.pdf").exists()


def test_render_rejects_bad_color(out_dir: Path) -> None:
    result = runner.invoke(app, ["render", "--year", "2025", "--month", "7", "--primary", "blue", "--out", str(out_dir)])
    assert result.exit_code != 0
    assert not (out_dir / "2025-07-split-standard").exists()


def test_render_rejects_bad_month(out_dir: Path) -> None:
    result = runner.invoke(app, ["render", "--year", "2025", "--month", "13", "--out", str(out_dir)])
    assert result.exit_code != 0


def test_failed_suggestion_keeps_rendering(out_dir: Path, photo: Path, monkeypatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    result = runner.invoke(
        app,
        [
            "render", "--year", "2025", "--month", "1",
            "--image", str(photo), "--caption", "Keep me", "--suggest", "--out", str(out_dir),
        ],
    )
    assert result.exit_code == 0, result.output
    assert SUGGESTION_FAILED in result.output
    assert "READY: 1" in result.output
    saved = (out_dir / "2025-01-split-standard" / "sheet.json").read_text(encoding="utf-8")
    assert "Keep me" in saved


def test_holidays_command() -> None:
    result = runner.invoke(app, ["holidays", "2025", "7"])
    assert result.exit_code == 0
    assert "2025-07-01  HKSAR Establishment Day" in result.output


def test_history_command(out_dir: Path) -> None:
    runner.invoke(app, ["render", "--year", "2025", "--month", "2", "--out", str(out_dir)])
    result = runner.invoke(app, ["history", "--out", str(out_dir)])
    assert result.exit_code == 0
    assert "2025-02-split-standard" in result.output
    assert "READY" in result.output
