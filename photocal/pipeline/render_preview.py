from __future__ import annotations

from pathlib import Path
from typing import Optional

import fitz  # PyMuPDF

from ..storage import artifact_path


def _render_page_to_png(doc: fitz.Document, page_index: int, out_path: Path, min_px: int = 1600) -> None:
    page = doc.load_page(page_index)

    # scale so the short side of the raster is at least min_px
    rect = page.rect
    short_side = min(rect.width, rect.height)
    zoom = max(2.0, min_px / float(short_side))
    mat = fitz.Matrix(zoom, zoom)

    pix = page.get_pixmap(matrix=mat, alpha=False)
    pix.save(str(out_path))


def render_preview(pdf_path: Path, out_dir: Optional[Path] = None) -> Path:
    """Rasterise page 1 of ``pdf_path`` to ``preview.png`` beside it (or in ``out_dir``)."""
    out_path = artifact_path(out_dir or pdf_path.parent, "preview")
    with fitz.open(pdf_path) as doc:
        _render_page_to_png(doc, 0, out_path)
    return out_path
