from __future__ import annotations

import calendar
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from reportlab.lib.pagesizes import A4, landscape

from .. import config
from .grid import DayCell, check_year_month


HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def normalize_hex(value: str) -> str:
    """Return ``value`` as ``#rrggbb``; ``#rgb`` shorthand is expanded."""
    text = str(value).strip()
    if not HEX_COLOR.match(text):
        raise ValueError(f"expected a hex color like #1e293b, got {value!r}")
    digits = text[1:].lower()
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return "#" + digits


FULL_BLEED_TEXT = "#334155"
FULL_BLEED_ACCENT = "#dc2626"


class LayoutMode(str, Enum):
    SPLIT = "split"
    FULL_BLEED = "full_bleed"
    SIDE_BY_SIDE = "side_by_side"


class GridStyle(str, Enum):
    STANDARD = "standard"
    MINIMAL = "minimal"
    BOXED = "boxed"
    ROUNDED = "rounded"


class CaptionMode(str, Enum):
    OVERLAY = "overlay"  # gradient band along the bottom of the photo
    CARD = "card"        # floating card over the image area


@dataclass(frozen=True)
class SheetConfig:
    year: int
    month: int
    image_path: Optional[Path] = None
    caption: str = ""
    layout: LayoutMode = LayoutMode.SPLIT
    grid_style: GridStyle = GridStyle.STANDARD
    primary_color: str = config.DEFAULT_PRIMARY_COLOR
    secondary_color: str = config.DEFAULT_SECONDARY_COLOR
    caption_color: str = config.DEFAULT_CAPTION_COLOR
    font: str = "sans"
    caption_size: int = 18
    show_lunar: bool = True

    def __post_init__(self) -> None:
        check_year_month(self.year, self.month)
        # accept plain strings from the CLI or JSON
        object.__setattr__(self, "layout", LayoutMode(self.layout))
        object.__setattr__(self, "grid_style", GridStyle(self.grid_style))
        if self.image_path is not None:
            object.__setattr__(self, "image_path", Path(self.image_path))
        for name in ("primary_color", "secondary_color", "caption_color"):
            try:
                object.__setattr__(self, name, normalize_hex(getattr(self, name)))
            except ValueError as exc:
                raise ValueError(f"{name}: {exc}") from exc
        if self.font not in config.FONT_CHOICES:
            choices = ", ".join(sorted(config.FONT_CHOICES))
            raise ValueError(f"Unsupported font {self.font!r}; choose one of: {choices}")
        if not config.CAPTION_SIZE_MIN <= self.caption_size <= config.CAPTION_SIZE_MAX:
            raise ValueError(
                f"caption_size must be between {config.CAPTION_SIZE_MIN} and "
                f"{config.CAPTION_SIZE_MAX}, got {self.caption_size}"
            )

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "image_path": str(self.image_path) if self.image_path else None,
            "caption": self.caption,
            "layout": self.layout.value,
            "grid_style": self.grid_style.value,
            "primary_color": self.primary_color,
            "secondary_color": self.secondary_color,
            "caption_color": self.caption_color,
            "font": self.font,
            "caption_size": self.caption_size,
            "show_lunar": self.show_lunar,
        }


@dataclass(frozen=True)
class Box:
    """Rectangle in PDF points, origin at the bottom-left of the page."""

    x: float
    y: float
    w: float
    h: float

    @property
    def top(self) -> float:
        return self.y + self.h

    @property
    def right(self) -> float:
        return self.x + self.w


@dataclass(frozen=True)
class CellPaint:
    box: Box
    text_color: str
    highlight_today: bool
    show_labels: bool


@dataclass(frozen=True)
class SheetPlan:
    layout: LayoutMode
    page_size: Tuple[float, float]
    photo: Box
    title: Box
    grid: Box
    title_text: str
    subtitle_text: str
    text_color: str
    accent_color: str
    caption_mode: CaptionMode
    caption: Optional[Box] = None
    panel: Optional[Tuple[Tuple[float, float], ...]] = None
    weekday_colors: Tuple[str, ...] = ()
    cells: Tuple[CellPaint, ...] = field(default_factory=tuple)

    @property
    def is_landscape(self) -> bool:
        return self.page_size[0] > self.page_size[1]


def page_size_for(layout: LayoutMode) -> Tuple[float, float]:
    if LayoutMode(layout) == LayoutMode.SIDE_BY_SIDE:
        return landscape(A4)
    return A4


def cell_color(cell: DayCell, text_color: str, accent_color: str) -> str:
    if not cell.is_current_month:
        return config.MUTED_COLOR
    if cell.is_sunday or cell.holiday is not None:
        return accent_color
    return text_color


def cover_box(image_w: float, image_h: float, box: Box) -> Box:
    """Scale an image to fill ``box`` keeping its aspect ratio; overflow is centred."""
    if image_w <= 0 or image_h <= 0:
        return box
    scale = max(box.w / image_w, box.h / image_h)
    w = image_w * scale
    h = image_h * scale
    return Box(box.x + (box.w - w) / 2, box.y + (box.h - h) / 2, w, h)


def _grid_cells(
    grid: List[DayCell],
    area: Box,
    text_color: str,
    accent_color: str,
    header_h: float,
    gap: float,
) -> Tuple[CellPaint, ...]:
    rows = max(1, len(grid) // 7)
    body_h = area.h - header_h
    cell_w = (area.w - 6 * gap) / 7
    cell_h = (body_h - (rows - 1) * gap) / rows

    paints: List[CellPaint] = []
    for idx, cell in enumerate(grid):
        row, col = divmod(idx, 7)
        x = area.x + col * (cell_w + gap)
        y = area.y + body_h - (row + 1) * cell_h - row * gap
        paints.append(
            CellPaint(
                box=Box(x, y, cell_w, cell_h),
                text_color=cell_color(cell, text_color, accent_color),
                highlight_today=cell.is_today and cell.is_current_month,
                show_labels=cell.is_current_month,
            )
        )
    return tuple(paints)


def _weekday_colors(text_color: str, accent_color: str) -> Tuple[str, ...]:
    # weekend headers use the accent
    return tuple(accent_color if idx in (0, 6) else text_color for idx in range(7))


def _plan_split(grid: List[DayCell], cfg: SheetConfig, style: dict) -> SheetPlan:
    pw, ph = page_size_for(cfg.layout)
    margin = float(style.get("margin", 24))
    half = ph / 2
    title_h = 64.0

    photo = Box(0, half, pw, half)
    title = Box(margin, half - margin - title_h, pw - 2 * margin, title_h)
    grid_area = Box(margin, margin, pw - 2 * margin, title.y - 12 - margin)
    caption_h = cfg.caption_size * 2.6 + 2 * float(style.get("caption_pad", 16))
    text, accent = cfg.primary_color, cfg.secondary_color

    return SheetPlan(
        layout=cfg.layout,
        page_size=(pw, ph),
        photo=photo,
        title=title,
        grid=grid_area,
        title_text=cfg.month_name.upper(),
        subtitle_text=str(cfg.year),
        text_color=text,
        accent_color=accent,
        caption_mode=CaptionMode.OVERLAY,
        caption=Box(0, half, pw, min(caption_h, half)) if cfg.caption else None,
        weekday_colors=_weekday_colors(text, accent),
        cells=_grid_cells(
            grid, grid_area, text, accent,
            float(style.get("weekday_header_h", 18)), float(style.get("cell_gap", 3)),
        ),
    )


def _plan_full_bleed(grid: List[DayCell], cfg: SheetConfig, style: dict) -> SheetPlan:
    pw, ph = page_size_for(cfg.layout)
    margin = float(style.get("margin", 24)) + 8
    content_h = ph - 2 * margin
    region_top = margin + content_h * 0.55
    title_h = 72.0

    title = Box(margin, region_top - title_h, pw - 2 * margin, title_h)
    grid_area = Box(margin, margin, pw - 2 * margin, title.y - 12 - margin)
    # (0,45%) (100%,35%) (100%,100%) (0,100%) measured from the top edge
    panel = ((0.0, ph * 0.55), (pw, ph * 0.65), (pw, 0.0), (0.0, 0.0))
    card_w = min(300.0, pw - 2 * margin)
    card_h = cfg.caption_size * 3.2 + 2 * float(style.get("caption_pad", 16))
    caption = Box(pw - margin - card_w, ph - margin - 24 - card_h, card_w, card_h)
    text, accent = FULL_BLEED_TEXT, FULL_BLEED_ACCENT

    return SheetPlan(
        layout=cfg.layout,
        page_size=(pw, ph),
        photo=Box(0, 0, pw, ph),
        title=title,
        grid=grid_area,
        title_text=f"{cfg.month:02d}",
        subtitle_text=f"{cfg.month_name.upper()} {cfg.year}",
        text_color=text,
        accent_color=accent,
        caption_mode=CaptionMode.CARD,
        caption=caption if cfg.caption else None,
        panel=panel,
        weekday_colors=_weekday_colors(text, accent),
        cells=_grid_cells(
            grid, grid_area, text, accent,
            float(style.get("weekday_header_h", 18)), float(style.get("cell_gap", 3)),
        ),
    )


def _plan_side_by_side(grid: List[DayCell], cfg: SheetConfig, style: dict) -> SheetPlan:
    pw, ph = page_size_for(cfg.layout)
    margin = float(style.get("margin", 24))
    split_x = pw * 0.45
    title_h = 60.0

    photo = Box(0, 0, split_x, ph)
    right_x = split_x + margin
    right_w = pw - split_x - 2 * margin
    title = Box(right_x, ph - margin - title_h, right_w, title_h)
    grid_area = Box(right_x, margin, right_w, title.y - 12 - margin)
    caption_h = cfg.caption_size * 2.6 + 2 * float(style.get("caption_pad", 16))
    text, accent = cfg.primary_color, cfg.secondary_color

    return SheetPlan(
        layout=cfg.layout,
        page_size=(pw, ph),
        photo=photo,
        title=title,
        grid=grid_area,
        title_text=cfg.month_name.upper(),
        subtitle_text=str(cfg.year),
        text_color=text,
        accent_color=accent,
        caption_mode=CaptionMode.OVERLAY,
        caption=Box(0, 0, split_x, min(caption_h, ph / 2)) if cfg.caption else None,
        weekday_colors=_weekday_colors(text, accent),
        cells=_grid_cells(
            grid, grid_area, text, accent,
            float(style.get("weekday_header_h", 18)), float(style.get("cell_gap", 3)),
        ),
    )


LAYOUT_PLANNERS: Dict[LayoutMode, Callable[[List[DayCell], SheetConfig, dict], SheetPlan]] = {
    LayoutMode.SPLIT: _plan_split,
    LayoutMode.FULL_BLEED: _plan_full_bleed,
    LayoutMode.SIDE_BY_SIDE: _plan_side_by_side,
}


def plan_sheet(grid: List[DayCell], cfg: SheetConfig, style: Optional[dict] = None) -> SheetPlan:
    if style is None:
        style = config.load_style_preset()
    return LAYOUT_PLANNERS[cfg.layout](grid, cfg, style)
