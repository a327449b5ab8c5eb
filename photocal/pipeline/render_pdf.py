from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional

from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfgen import canvas

from .. import config
from ..config import load_style_preset
from .grid import WEEKDAY_NAMES, DayCell
from .layouts import (
    Box,
    CaptionMode,
    CellPaint,
    GridStyle,
    LayoutMode,
    SheetConfig,
    SheetPlan,
    cover_box,
    normalize_hex,
    plan_sheet,
)


pdfmetrics.registerFont(UnicodeCIDFont(config.CJK_FONT))


def _hex(value: str, default=colors.black) -> colors.Color:
    if not value:
        return default
    try:
        return colors.HexColor(normalize_hex("#" + str(value).lstrip("#")))
    except ValueError:
        return default


def _s(style: dict, key: str, default):
    return style.get(key, default)


def _fonts(cfg: SheetConfig):
    return config.FONT_CHOICES.get(cfg.font, config.FONT_CHOICES["sans"])


def _font_for(text: str, font_name: str) -> str:
    # built-in Type1 fonts only cover Latin-1
    if any(ord(ch) > 0xFF for ch in text or ""):
        return config.CJK_FONT
    return font_name


def _fit_font(canv: canvas.Canvas, text: str, font_name: str, base_size: float, max_width: float) -> float:
    """
    Shrink the font until the text fits ``max_width``.
    """
    size = float(base_size)
    while size > 5.0:
        if canv.stringWidth(text, font_name, size) <= max_width:
            return size
        size -= 0.5
    return 5.0


def _wrap_words(canv: canvas.Canvas, text: str, font_name: str, font_size: float, max_width: float) -> List[str]:
    words = (text or "").split()
    if not words:
        return [""]

    # CJK text has no spaces; wrap per character instead
    if len(words) == 1 and font_name == config.CJK_FONT:
        words = list(words[0])
        joiner = ""
    else:
        joiner = " "

    lines: List[str] = []
    cur: List[str] = []

    for w in words:
        test = joiner.join(cur + [w]).strip()
        if canv.stringWidth(test, font_name, font_size) <= max_width:
            cur.append(w)
            continue

        if cur:
            lines.append(joiner.join(cur))
            cur = [w]
        else:
            # single word wider than the line
            lines.append(w)

    if cur:
        lines.append(joiner.join(cur))

    return lines


def _quoted(caption: str) -> str:
    return f"“{caption}”"


# -------------------- Photo --------------------
def _draw_photo(canv: canvas.Canvas, cfg: SheetConfig, box: Box, style: dict) -> None:
    canv.saveState()
    path = canv.beginPath()
    path.rect(box.x, box.y, box.w, box.h)
    canv.clipPath(path, stroke=0, fill=0)

    if cfg.image_path is None:
        canv.setFillColor(_hex(_s(style, "placeholder_fill", "#F3F4F6")))
        canv.rect(box.x, box.y, box.w, box.h, stroke=0, fill=1)
        canv.setFillColor(_hex(_s(style, "placeholder_text", "#9CA3AF")))
        canv.setFont(_fonts(cfg)[0], 16)
        canv.drawCentredString(box.x + box.w / 2, box.y + box.h / 2, "Select an image")
        canv.restoreState()
        return

    if not cfg.image_path.exists():
        canv.restoreState()
        raise FileNotFoundError(f"Image not found: {cfg.image_path}")

    reader = ImageReader(str(cfg.image_path))
    iw, ih = reader.getSize()
    target = cover_box(iw, ih, box)
    canv.drawImage(reader, target.x, target.y, width=target.w, height=target.h, mask="auto")
    canv.restoreState()


def _draw_panel(canv: canvas.Canvas, plan: SheetPlan, style: dict) -> None:
    if not plan.panel:
        return
    canv.saveState()
    canv.setFillColor(colors.white)
    canv.setFillAlpha(float(_s(style, "panel_alpha", 0.8)))
    path = canv.beginPath()
    path.moveTo(*plan.panel[0])
    for point in plan.panel[1:]:
        path.lineTo(*point)
    path.close()
    canv.drawPath(path, stroke=0, fill=1)
    canv.restoreState()


# -------------------- Caption --------------------
def _draw_caption_overlay(canv: canvas.Canvas, plan: SheetPlan, cfg: SheetConfig, style: dict) -> None:
    box = plan.caption
    if box is None or not cfg.caption:
        return
    pad = float(_s(style, "caption_pad", 16))
    top_alpha = float(_s(style, "overlay_alpha", 0.55))

    # dark at the bottom edge, fading upward
    canv.saveState()
    canv.setFillColor(colors.black)
    bands = 12
    band_h = box.h / bands
    for i in range(bands):
        canv.setFillAlpha(top_alpha * (1 - i / bands))
        canv.rect(box.x, box.y + i * band_h, box.w, band_h + 0.5, stroke=0, fill=1)
    canv.restoreState()

    text = _quoted(cfg.caption)
    font = _font_for(cfg.caption, _fonts(cfg)[0])
    size = float(cfg.caption_size)
    lines = _wrap_words(canv, text, font, size, box.w - 2 * pad)

    canv.setFillColor(_hex(cfg.caption_color, colors.white))
    canv.setFont(font, size)
    yy = box.y + pad + (len(lines) - 1) * size * 1.2
    for line in lines:
        canv.drawRightString(box.right - pad, yy, line)
        yy -= size * 1.2


def _draw_caption_card(canv: canvas.Canvas, plan: SheetPlan, cfg: SheetConfig, style: dict) -> None:
    box = plan.caption
    if box is None or not cfg.caption:
        return
    pad = float(_s(style, "caption_pad", 16))
    text = _quoted(cfg.caption)
    font = _font_for(cfg.caption, _fonts(cfg)[0])
    size = float(cfg.caption_size)
    lines = _wrap_words(canv, text, font, size, box.w - 2 * pad)

    # card grows downward from its top edge to fit the text
    card_h = max(box.h, len(lines) * size * 1.2 + 2 * pad)
    card_y = box.top - card_h

    canv.saveState()
    canv.setFillColor(colors.white)
    canv.setFillAlpha(float(_s(style, "panel_alpha", 0.8)))
    canv.roundRect(box.x, card_y, box.w, card_h, radius=float(_s(style, "card_radius", 10)), stroke=0, fill=1)
    canv.restoreState()

    canv.setFillColor(_hex(plan.text_color))
    canv.setFont(font, size)
    yy = box.top - pad - size
    for line in lines:
        canv.drawString(box.x + pad, yy, line)
        yy -= size * 1.2


CAPTION_RENDERERS: Dict[CaptionMode, Callable[[canvas.Canvas, SheetPlan, SheetConfig, dict], None]] = {
    CaptionMode.OVERLAY: _draw_caption_overlay,
    CaptionMode.CARD: _draw_caption_card,
}


# -------------------- Title --------------------
def _draw_month_title(canv: canvas.Canvas, plan: SheetPlan, cfg: SheetConfig, style: dict) -> None:
    regular, bold = _fonts(cfg)
    box = plan.title
    primary = _hex(plan.text_color)

    year_size = float(_s(style, "year_size", 28))
    canv.setFont(bold, year_size)
    year_w = canv.stringWidth(plan.subtitle_text, bold, year_size)
    canv.setFillColor(_hex("#D1D5DB"))
    canv.drawRightString(box.right, box.y + 10, plan.subtitle_text)

    size = _fit_font(canv, plan.title_text, regular, float(_s(style, "title_size", 44)), box.w - year_w - 16)
    canv.setFillColor(primary)
    canv.setFont(regular, size)
    canv.drawString(box.x, box.y + 10, plan.title_text)

    canv.setStrokeColor(primary)
    canv.setLineWidth(2)
    canv.line(box.x, box.y, box.right, box.y)


def _draw_number_title(canv: canvas.Canvas, plan: SheetPlan, cfg: SheetConfig, style: dict) -> None:
    regular, bold = _fonts(cfg)
    box = plan.title

    canv.setFillColor(_hex("#1E293B"))
    canv.setFont(bold, float(_s(style, "title_size", 44)) * 1.4)
    canv.drawString(box.x, box.y + 8, plan.title_text)

    month_text, _, year_text = plan.subtitle_text.rpartition(" ")
    canv.setFillColor(_hex("#475569"))
    canv.setFont(regular, 22)
    canv.drawRightString(box.right, box.y + 34, month_text)
    canv.setFillColor(_hex("#94A3B8"))
    canv.setFont(bold, 15)
    canv.drawRightString(box.right, box.y + 12, year_text)


# -------------------- Grid --------------------
def _frame_standard(canv: canvas.Canvas, paint: CellPaint, cell: DayCell, style: dict) -> None:
    if not cell.is_current_month:
        return
    canv.setStrokeColor(_hex(_s(style, "grid_rule_color", "#E5E7EB")))
    canv.setLineWidth(0.8)
    canv.line(paint.box.x, paint.box.top, paint.box.right, paint.box.top)


def _frame_minimal(canv: canvas.Canvas, paint: CellPaint, cell: DayCell, style: dict) -> None:
    return None


def _frame_boxed(canv: canvas.Canvas, paint: CellPaint, cell: DayCell, style: dict) -> None:
    canv.setStrokeColor(_hex(_s(style, "grid_rule_color", "#E5E7EB")))
    canv.setLineWidth(0.8)
    canv.rect(paint.box.x, paint.box.y, paint.box.w, paint.box.h, stroke=1, fill=0)


def _frame_rounded(canv: canvas.Canvas, paint: CellPaint, cell: DayCell, style: dict) -> None:
    fill = "#F8FAFC" if cell.is_current_month else "#FCFCFD"
    canv.setFillColor(_hex(fill))
    canv.roundRect(paint.box.x, paint.box.y, paint.box.w, paint.box.h, radius=6, stroke=0, fill=1)


CELL_FRAMES: Dict[GridStyle, Callable[[canvas.Canvas, CellPaint, DayCell, dict], None]] = {
    GridStyle.STANDARD: _frame_standard,
    GridStyle.MINIMAL: _frame_minimal,
    GridStyle.BOXED: _frame_boxed,
    GridStyle.ROUNDED: _frame_rounded,
}


def _draw_weekday_header(canv: canvas.Canvas, plan: SheetPlan, cfg: SheetConfig, style: dict) -> None:
    bold = _fonts(cfg)[1]
    size = float(_s(style, "weekday_size", 9))
    header_h = float(_s(style, "weekday_header_h", 18))
    gap = float(_s(style, "cell_gap", 3))
    col_w = (plan.grid.w - 6 * gap) / 7
    y = plan.grid.top - header_h + (header_h - size) / 2

    canv.setFont(bold, size)
    for idx, name in enumerate(WEEKDAY_NAMES):
        canv.setFillColor(_hex(plan.weekday_colors[idx]))
        canv.drawCentredString(plan.grid.x + idx * (col_w + gap) + col_w / 2, y, name.upper())


def _draw_cell(canv: canvas.Canvas, paint: CellPaint, cell: DayCell, cfg: SheetConfig, plan: SheetPlan, style: dict) -> None:
    regular, bold = _fonts(cfg)
    box = paint.box
    CELL_FRAMES[cfg.grid_style](canv, paint, cell, style)

    day_size = min(float(_s(style, "day_size", 13)), box.h * 0.35)
    number = str(cell.date.day)
    nx = box.x + 4
    ny = box.top - 4 - day_size

    if paint.highlight_today:
        num_w = canv.stringWidth(number, bold, day_size)
        canv.setFillColor(_hex(_s(style, "today_fill", "#DBEAFE")))
        canv.roundRect(nx - 3, ny - 3, num_w + 6, day_size + 5, radius=(day_size + 5) / 2, stroke=0, fill=1)

    canv.setFillColor(_hex(paint.text_color))
    canv.setFont(bold, day_size)
    canv.drawString(nx, ny, number)

    if not paint.show_labels:
        return

    # lunar label top-right, holiday name along the bottom; long pairs may overlap
    if cell.lunar_label:
        lunar_size = float(_s(style, "lunar_size", 6.5))
        canv.setFillColor(_hex(_s(style, "lunar_color", "#64748B")))
        canv.setFont(config.CJK_FONT, lunar_size)
        canv.drawRightString(box.right - 3, box.top - 4 - lunar_size, cell.lunar_label)

    if cell.holiday is not None:
        label_size = float(_s(style, "label_size", 6))
        font = _font_for(cell.holiday.name, regular)
        lines = _wrap_words(canv, cell.holiday.name, font, label_size, box.w - 6)
        canv.setFillColor(_hex(plan.accent_color))
        canv.setFont(font, label_size)
        yy = box.y + 3 + (len(lines) - 1) * (label_size + 1)
        for line in lines:
            canv.drawString(box.x + 3, yy, line)
            yy -= label_size + 1


def _draw_grid(canv: canvas.Canvas, plan: SheetPlan, grid: List[DayCell], cfg: SheetConfig, style: dict) -> None:
    _draw_weekday_header(canv, plan, cfg, style)
    for paint, cell in zip(plan.cells, grid):
        _draw_cell(canv, paint, cell, cfg, plan, style)


# -------------------- Sheets --------------------
def _sheet_photo_and_grid(canv: canvas.Canvas, plan: SheetPlan, grid: List[DayCell], cfg: SheetConfig, style: dict) -> None:
    _draw_photo(canv, cfg, plan.photo, style)
    CAPTION_RENDERERS[plan.caption_mode](canv, plan, cfg, style)
    _draw_month_title(canv, plan, cfg, style)
    _draw_grid(canv, plan, grid, cfg, style)


def _sheet_full_bleed(canv: canvas.Canvas, plan: SheetPlan, grid: List[DayCell], cfg: SheetConfig, style: dict) -> None:
    _draw_photo(canv, cfg, plan.photo, style)
    _draw_panel(canv, plan, style)
    CAPTION_RENDERERS[plan.caption_mode](canv, plan, cfg, style)
    _draw_number_title(canv, plan, cfg, style)
    _draw_grid(canv, plan, grid, cfg, style)


SHEET_RENDERERS: Dict[LayoutMode, Callable[[canvas.Canvas, SheetPlan, List[DayCell], SheetConfig, dict], None]] = {
    LayoutMode.SPLIT: _sheet_photo_and_grid,
    LayoutMode.FULL_BLEED: _sheet_full_bleed,
    LayoutMode.SIDE_BY_SIDE: _sheet_photo_and_grid,
}


def render_pdf(
    grid: List[DayCell],
    cfg: SheetConfig,
    output_path: Path,
    style: Optional[dict] = None,
) -> SheetPlan:
    if style is None:
        style = load_style_preset()
    plan = plan_sheet(grid, cfg, style)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    # page size is exactly the planned sheet, no printer margin
    canv = canvas.Canvas(str(output_path), pagesize=plan.page_size, invariant=1)
    canv.setTitle(f"{cfg.month_name} {cfg.year}")
    SHEET_RENDERERS[cfg.layout](canv, plan, grid, cfg, style)
    canv.showPage()
    canv.save()
    return plan
