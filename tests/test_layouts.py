from __future__ import annotations

from datetime import date

import pytest

from photocal import config
from photocal.pipeline.grid import build_month_grid
from photocal.pipeline.layouts import (
    FULL_BLEED_ACCENT,
    FULL_BLEED_TEXT,
    Box,
    CaptionMode,
    GridStyle,
    LayoutMode,
    SheetConfig,
    cell_color,
    cover_box,
    page_size_for,
    plan_sheet,
)

TODAY = date(2025, 7, 15)


def _plan(**overrides):
    cfg = SheetConfig(**{"year": 2025, "month": 7, **overrides})
    grid = build_month_grid(cfg.year, cfg.month, show_lunar=cfg.show_lunar, today=TODAY)
    return grid, cfg, plan_sheet(grid, cfg)


def test_page_orientation() -> None:
    w, h = page_size_for(LayoutMode.SIDE_BY_SIDE)
    assert w > h
    for layout in (LayoutMode.SPLIT, LayoutMode.FULL_BLEED):
        w, h = page_size_for(layout)
        assert h > w
        assert w == pytest.approx(595.28, abs=0.01)
        assert h == pytest.approx(841.89, abs=0.01)


def test_plan_is_deterministic() -> None:
    for layout in LayoutMode:
        _, _, first = _plan(layout=layout, caption="Summer rain")
        _, _, second = _plan(layout=layout, caption="Summer rain")
        assert first == second


def test_cell_colors() -> None:
    grid, cfg, plan = _plan(primary_color="#111111", secondary_color="#ff0000")
    by_date = {cell.date: paint for cell, paint in zip(grid, plan.cells)}
    assert by_date[date(2025, 7, 6)].text_color == "#ff0000"  # Sunday
    assert by_date[date(2025, 7, 1)].text_color == "#ff0000"  # holiday
    assert by_date[date(2025, 7, 2)].text_color == "#111111"
    assert by_date[date(2025, 6, 29)].text_color == config.MUTED_COLOR  # padding Sunday
    assert by_date[date(2025, 8, 1)].text_color == config.MUTED_COLOR


def test_cell_color_helper_ignores_accent_for_padding() -> None:
    grid = build_month_grid(2025, 1, today=TODAY)
    assert cell_color(grid[0], "#000000", "#ff0000") == config.MUTED_COLOR
    assert cell_color(grid[3], "#000000", "#ff0000") == "#ff0000"  # New Year's Day


def test_today_highlight_only_in_current_month() -> None:
    grid, _, plan = _plan()
    highlighted = [cell.date for cell, paint in zip(grid, plan.cells) if paint.highlight_today]
    assert highlighted == [TODAY]
    labels = [paint.show_labels for paint in plan.cells]
    assert labels == [cell.is_current_month for cell in grid]


def test_cells_fill_grid_box() -> None:
    for layout in LayoutMode:
        _, _, plan = _plan(layout=layout)
        assert len(plan.cells) == 42
        for paint in plan.cells:
            assert paint.box.x >= plan.grid.x - 1e-6
            assert paint.box.right <= plan.grid.right + 1e-6
            assert paint.box.y >= plan.grid.y - 1e-6
            assert paint.box.top <= plan.grid.top + 1e-6


def test_split_plan() -> None:
    _, _, plan = _plan(layout=LayoutMode.SPLIT)
    pw, ph = plan.page_size
    assert plan.photo == Box(0, ph / 2, pw, ph / 2)
    assert plan.grid.top < plan.photo.y
    assert plan.caption is None
    assert plan.title_text == "JULY"
    assert plan.subtitle_text == "2025"

    _, _, captioned = _plan(layout=LayoutMode.SPLIT, caption="Hello")
    assert captioned.caption_mode == CaptionMode.OVERLAY
    assert captioned.caption.y == pytest.approx(ph / 2)


def test_full_bleed_plan() -> None:
    _, _, plan = _plan(layout=LayoutMode.FULL_BLEED, caption="Hello", primary_color="#123456")
    pw, ph = plan.page_size
    assert plan.photo == Box(0, 0, pw, ph)
    assert plan.panel[0] == pytest.approx((0.0, ph * 0.55))
    assert plan.panel[1] == pytest.approx((pw, ph * 0.65))
    assert plan.text_color == FULL_BLEED_TEXT
    assert plan.accent_color == FULL_BLEED_ACCENT
    assert plan.caption_mode == CaptionMode.CARD
    assert plan.caption.top <= ph
    assert plan.title_text == "07"
    assert plan.grid.top < ph * 0.65


def test_side_by_side_plan() -> None:
    _, _, plan = _plan(layout=LayoutMode.SIDE_BY_SIDE)
    pw, ph = plan.page_size
    assert plan.is_landscape
    assert plan.photo.w == pytest.approx(pw * 0.45)
    assert plan.grid.x > plan.photo.right
    assert plan.grid.right <= pw


def test_cover_box_fills_and_centres() -> None:
    target = cover_box(200, 100, Box(0, 0, 100, 100))
    assert target == Box(-50, 0, 200, 100)
    assert cover_box(0, 0, Box(1, 2, 3, 4)) == Box(1, 2, 3, 4)


def test_config_accepts_strings() -> None:
    cfg = SheetConfig(year=2025, month=1, layout="full_bleed", grid_style="rounded")
    assert cfg.layout is LayoutMode.FULL_BLEED
    assert cfg.grid_style is GridStyle.ROUNDED
    assert cfg.to_dict()["layout"] == "full_bleed"


@pytest.mark.parametrize(
    "overrides",
    [
        {"month": 0},
        {"month": 13},
        {"primary_color": "red"},
        {"secondary_color": "#12345"},
        {"font": "comic"},
        {"caption_size": 11},
        {"caption_size": 65},
        {"layout": "diagonal"},
    ],
)
def test_config_rejects_bad_values(overrides: dict) -> None:
    with pytest.raises(ValueError):
        SheetConfig(**{"year": 2025, "month": 1, **overrides})


def test_short_hex_colors_are_expanded() -> None:
    cfg = SheetConfig(year=2025, month=7, primary_color="#ABC", secondary_color="#f00", caption_color="#FFF")
    assert cfg.primary_color == "#aabbcc"
    assert cfg.secondary_color == "#ff0000"
    assert cfg.caption_color == "#ffffff"
