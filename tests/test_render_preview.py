from __future__ import annotations

from datetime import date
import tempfile
from pathlib import Path

from photocal.pipeline.grid import build_month_grid
from photocal.pipeline.layouts import LayoutMode, SheetConfig
from photocal.pipeline.render_pdf import render_pdf
from photocal.pipeline.render_preview import render_preview


class DummyPixmap:
    def save(self, path: str) -> None:
        Path(path).write_text("preview", encoding="utf-8")


class DummyPage:
    rect = type("Rect", (), {"width": 595.0, "height": 842.0})()

    def get_pixmap(self, matrix=None, alpha=False) -> DummyPixmap:  # noqa: ARG002 - signature matches fitz
        return DummyPixmap()


class DummyDoc:
    def __init__(self) -> None:
        self.page_count = 1
        self.closed = False
        self.loaded: list[int] = []

    def __enter__(self) -> "DummyDoc":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001 - test helper
        self.closed = True

    def load_page(self, index: int) -> DummyPage:
        self.loaded.append(index)
        return DummyPage()


def test_render_preview_closes_document(monkeypatch) -> None:
    doc = DummyDoc()

    def fake_open(path: str) -> DummyDoc:  # noqa: ARG001 - test helper
        return doc

    with tempfile.TemporaryDirectory() as temp_dir:
        monkeypatch.setattr("photocal.pipeline.render_preview.fitz.open", fake_open)
        preview = render_preview(Path("sheet.pdf"), out_dir=Path(temp_dir) / "sample")
        assert doc.closed is True
        assert doc.loaded == [0]
        assert preview.exists()
        assert preview.name == "preview.png"


def test_render_preview_from_real_pdf(tmp_path: Path) -> None:
    cfg = SheetConfig(year=2025, month=2, layout=LayoutMode.SIDE_BY_SIDE)
    grid = build_month_grid(2025, 2, today=date(2025, 2, 3))
    pdf_path = tmp_path / "sheet.pdf"
    render_pdf(grid, cfg, pdf_path)

    preview = render_preview(pdf_path)
    assert preview == tmp_path / "preview.png"
    assert preview.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
