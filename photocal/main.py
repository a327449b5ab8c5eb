from __future__ import annotations

from datetime import date
import logging
from pathlib import Path
from typing import Optional

import typer

from . import config
from .models import SheetStatus, reset_engine
from .pipeline.holidays import holidays_in_month
from .pipeline.layouts import GridStyle, LayoutMode, SheetConfig
from .pipeline.run import list_sheets, run_sheets, run_year
from .pipeline.suggest import SuggestionError, apply_suggestion, request_suggestion

app = typer.Typer(help="Printable photo month calendars")

SUGGESTION_FAILED = "Failed to analyze image. Check your API key or try again."


def _setup(out: Optional[Path], verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if out:
        config.set_out_dir(out)
        reset_engine()


def _build_config(
    year: int,
    month: int,
    image: Optional[Path],
    caption: str,
    layout: LayoutMode,
    style: GridStyle,
    primary: str,
    secondary: str,
    caption_color: str,
    font: str,
    caption_size: int,
    lunar: bool,
) -> SheetConfig:
    try:
        return SheetConfig(
            year=year,
            month=month,
            image_path=image,
            caption=caption,
            layout=layout,
            grid_style=style,
            primary_color=primary,
            secondary_color=secondary,
            caption_color=caption_color,
            font=font,
            caption_size=caption_size,
            show_lunar=lunar,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _with_suggestion(cfg: SheetConfig) -> SheetConfig:
    try:
        suggestion = request_suggestion(cfg)
    except SuggestionError as exc:
        logging.getLogger(__name__).warning("Suggestion failed: %s", exc)
        typer.echo(SUGGESTION_FAILED, err=True)
        return cfg
    return apply_suggestion(cfg, suggestion)


def _report(results: dict[str, list[str]]) -> None:
    typer.echo(f"READY: {len(results['READY'])}")
    typer.echo(f"FAILED: {len(results['FAILED'])}")
    for slug in results["FAILED"]:
        typer.echo(f"FAILED: {slug}")


@app.command()
def render(
    year: int = typer.Option(date.today().year, "--year", help="Calendar year"),
    month: int = typer.Option(date.today().month, "--month", help="Month 1-12"),
    image: Optional[Path] = typer.Option(None, "--image", help="Background photo"),
    caption: str = typer.Option("", "--caption", help="Caption text"),
    layout: LayoutMode = typer.Option(LayoutMode.SPLIT, "--layout", help="Sheet layout"),
    style: GridStyle = typer.Option(GridStyle.STANDARD, "--style", help="Grid cell style"),
    primary: str = typer.Option(config.DEFAULT_PRIMARY_COLOR, "--primary", help="Text color"),
    secondary: str = typer.Option(config.DEFAULT_SECONDARY_COLOR, "--secondary", help="Accent color"),
    caption_color: str = typer.Option(config.DEFAULT_CAPTION_COLOR, "--caption-color", help="Caption color"),
    font: str = typer.Option("sans", "--font", help="Font: " + ", ".join(config.FONT_CHOICES)),
    caption_size: int = typer.Option(18, "--caption-size", help="Caption size 12-64"),
    lunar: bool = typer.Option(True, "--lunar/--no-lunar", help="Show lunar dates"),
    suggest: bool = typer.Option(False, "--suggest", help="Ask AI for caption and colors"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    verbose: bool = typer.Option(False, "--verbose", help="Log progress"),
) -> None:
    _setup(out, verbose)
    cfg = _build_config(
        year, month, image, caption, layout, style,
        primary, secondary, caption_color, font, caption_size, lunar,
    )
    if suggest:
        cfg = _with_suggestion(cfg)
    results = run_sheets([cfg])
    _report(results)
    for slug in results["READY"]:
        typer.echo(f"PDF: {config.OUT_DIR / slug / 'sheet.pdf'}")
    if results["FAILED"]:
        raise typer.Exit(code=1)


@app.command()
def year(
    year: int = typer.Argument(..., help="Calendar year"),
    image: Optional[Path] = typer.Option(None, "--image", help="Background photo"),
    layout: LayoutMode = typer.Option(LayoutMode.SPLIT, "--layout", help="Sheet layout"),
    style: GridStyle = typer.Option(GridStyle.STANDARD, "--style", help="Grid cell style"),
    primary: str = typer.Option(config.DEFAULT_PRIMARY_COLOR, "--primary", help="Text color"),
    secondary: str = typer.Option(config.DEFAULT_SECONDARY_COLOR, "--secondary", help="Accent color"),
    font: str = typer.Option("sans", "--font", help="Font: " + ", ".join(config.FONT_CHOICES)),
    lunar: bool = typer.Option(True, "--lunar/--no-lunar", help="Show lunar dates"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    verbose: bool = typer.Option(False, "--verbose", help="Log progress"),
) -> None:
    _setup(out, verbose)
    base = _build_config(
        year, 1, image, "", layout, style,
        primary, secondary, config.DEFAULT_CAPTION_COLOR, font, 18, lunar,
    )
    _report(run_year(base))


@app.command()
def suggest(
    image: Path = typer.Argument(..., help="Background photo"),
    year: int = typer.Option(date.today().year, "--year", help="Calendar year"),
    month: int = typer.Option(date.today().month, "--month", help="Month 1-12"),
) -> None:
    cfg = _build_config(
        year, month, image, "", LayoutMode.SPLIT, GridStyle.STANDARD,
        config.DEFAULT_PRIMARY_COLOR, config.DEFAULT_SECONDARY_COLOR,
        config.DEFAULT_CAPTION_COLOR, "sans", 18, True,
    )
    try:
        suggestion = request_suggestion(cfg)
    except SuggestionError as exc:
        typer.echo(f"{SUGGESTION_FAILED} ({exc})", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Caption: {suggestion.caption}")
    typer.echo(f"Primary: {suggestion.primary_color}")
    typer.echo(f"Secondary: {suggestion.secondary_color}")


@app.command()
def holidays(
    year: int = typer.Argument(..., help="Calendar year"),
    month: int = typer.Argument(..., help="Month 1-12"),
) -> None:
    labels = holidays_in_month(year, month)
    if not labels:
        typer.echo("No holidays")
        return
    for label in labels:
        typer.echo(f"{label.iso_date}  {label.name}")


@app.command()
def history(
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    failed: bool = typer.Option(False, "--failed", help="Only failed sheets"),
) -> None:
    _setup(out, False)
    sheets = list_sheets(SheetStatus.FAILED if failed else None)
    if not sheets:
        typer.echo("No sheets rendered")
        return
    for sheet in sheets:
        line = f"{sheet.created_at:%Y-%m-%d %H:%M} {sheet.status.value:<6} {sheet.slug}"
        if sheet.fail_code:
            line += f" ({sheet.fail_code}: {sheet.fail_detail})"
        typer.echo(line)


if __name__ == "__main__":
    app()
