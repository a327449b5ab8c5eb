from __future__ import annotations

from pathlib import Path

import fitz  # PyMuPDF
import pytest

from photocal import config
from photocal.models import reset_engine


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    previous = config.OUT_DIR
    path = tmp_path / "out"
    config.set_out_dir(path)
    reset_engine()
    yield path
    config.set_out_dir(previous)
    reset_engine()


@pytest.fixture
def photo(tmp_path: Path) -> Path:
    path = tmp_path / "photo.png"
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, 64, 40), False)
    pix.clear_with(180)
    pix.save(str(path))
    return path
