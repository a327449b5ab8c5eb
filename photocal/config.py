from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple
import json
import os


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = BASE_DIR / "out"
DB_PATH = OUT_DIR / "photocal.db"
STYLE_PRESET_PATH = Path(__file__).resolve().parent / "assets" / "sheet_style.json"

GEMINI_API_KEY_ENV = "GEMINI_API_KEY"
GEMINI_MODEL = "gemini-2.5-flash"
REQUEST_TIMEOUT_S = 60

# key -> (regular, bold)
FONT_CHOICES: Dict[str, Tuple[str, str]] = {
    "sans": ("Helvetica", "Helvetica-Bold"),
    "serif": ("Times-Roman", "Times-Bold"),
    "mono": ("Courier", "Courier-Bold"),
    "song": ("MSung-Light", "MSung-Light"),
}
CJK_FONT = "MSung-Light"

CAPTION_SIZE_MIN = 12
CAPTION_SIZE_MAX = 64

DEFAULT_PRIMARY_COLOR = "#1e293b"
DEFAULT_SECONDARY_COLOR = "#ef4444"
DEFAULT_CAPTION_COLOR = "#ffffff"
MUTED_COLOR = "#cbd5e1"


def load_style_preset() -> dict:
    with STYLE_PRESET_PATH.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def gemini_api_key() -> str:
    return os.environ.get(GEMINI_API_KEY_ENV, "").strip()


def set_out_dir(path: Path) -> None:
    global OUT_DIR, DB_PATH
    OUT_DIR = path
    DB_PATH = OUT_DIR / "photocal.db"
