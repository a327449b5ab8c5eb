from __future__ import annotations

import hashlib
import json
import logging
import mimetypes
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from google import genai
from google.genai import types

from .. import config
from .layouts import SheetConfig, normalize_hex

logger = logging.getLogger(__name__)

QUOTE_CHARS = "\"'“”‘’「」『』«»`"

RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "quote": types.Schema(type=types.Type.STRING),
        "primaryColor": types.Schema(type=types.Type.STRING),
        "secondaryColor": types.Schema(type=types.Type.STRING),
    },
    required=["quote", "primaryColor", "secondaryColor"],
)


class SuggestionError(RuntimeError):
    """The caption/color suggestion could not be obtained."""


@dataclass(frozen=True)
class ThemeSuggestion:
    caption: str
    primary_color: str
    secondary_color: str
    snapshot: str = ""


def sanitize_caption(text: str) -> str:
    return (text or "").strip().strip(QUOTE_CHARS).strip()


def config_snapshot(cfg: SheetConfig) -> str:
    """Fingerprint of the inputs a suggestion was requested for."""
    image_digest = ""
    if cfg.image_path is not None and cfg.image_path.exists():
        image_digest = hashlib.sha256(cfg.image_path.read_bytes()).hexdigest()
    key = "|".join(
        [
            f"year={cfg.year}",
            f"month={cfg.month}",
            f"image={cfg.image_path}",
            f"digest={image_digest}",
        ]
    )
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def _prompt(month_name: str, year: int) -> str:
    return (
        f"This image is for a calendar background for {month_name} {year} in Hong Kong.\n"
        "1. Provide a short, uplifting, or poetic quote (max 15 words) that fits the mood "
        "of the image and the season. English or Traditional Chinese is fine.\n"
        "2. Suggest a primary color (hex code) extracted from the image that is dark enough "
        "to be readable text on a light background.\n"
        "3. Suggest a secondary accent color (hex code) from the image."
    )


def _parse_response(text: Optional[str]) -> ThemeSuggestion:
    if not text:
        raise SuggestionError("Empty suggestion response")
    try:
        payload = json.loads(text)
        caption = sanitize_caption(str(payload["quote"]))
        primary = normalize_hex(payload["primaryColor"])
        secondary = normalize_hex(payload["secondaryColor"])
    except (KeyError, TypeError, ValueError) as exc:
        raise SuggestionError(f"Unexpected suggestion response: {exc}") from exc
    return ThemeSuggestion(caption=caption, primary_color=primary, secondary_color=secondary)


def suggest_theme(
    image_bytes: bytes,
    month_name: str,
    year: int,
    mime_type: str = "image/jpeg",
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    timeout_s: Optional[int] = None,
) -> ThemeSuggestion:
    api_key = api_key if api_key is not None else config.gemini_api_key()
    if not api_key:
        raise SuggestionError(f"Missing API key; set {config.GEMINI_API_KEY_ENV}")

    timeout_ms = int((timeout_s or config.REQUEST_TIMEOUT_S) * 1000)
    try:
        client = genai.Client(api_key=api_key, http_options=types.HttpOptions(timeout=timeout_ms))
        response = client.models.generate_content(
            model=model or config.GEMINI_MODEL,
            contents=[
                types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                _prompt(month_name, year),
            ],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=RESPONSE_SCHEMA,
            ),
        )
        text = response.text
    except Exception as exc:
        # SDK API errors and transport errors alike
        raise SuggestionError(f"Suggestion request failed: {exc}") from exc

    return _parse_response(text)


def request_suggestion(cfg: SheetConfig, **kwargs) -> ThemeSuggestion:
    """Ask for a theme for ``cfg``'s photo; the result is bound to this config."""
    if cfg.image_path is None:
        raise SuggestionError("Please provide an image first.")
    image_path = Path(cfg.image_path)
    try:
        image_bytes = image_path.read_bytes()
    except OSError as exc:
        raise SuggestionError(f"Cannot read image {image_path}: {exc}") from exc
    mime_type = mimetypes.guess_type(image_path.name)[0] or "image/jpeg"

    suggestion = suggest_theme(image_bytes, cfg.month_name, cfg.year, mime_type=mime_type, **kwargs)
    return replace(suggestion, snapshot=config_snapshot(cfg))


def apply_suggestion(cfg: SheetConfig, suggestion: ThemeSuggestion) -> SheetConfig:
    """
    Return ``cfg`` with caption and both colors taken from ``suggestion``.

    All three fields change together or not at all. A suggestion requested for
    a different year, month or photo is discarded.
    """
    if suggestion.snapshot and suggestion.snapshot != config_snapshot(cfg):
        logger.warning("Discarding stale suggestion for %s %s", cfg.month_name, cfg.year)
        return cfg
    return replace(
        cfg,
        caption=suggestion.caption,
        primary_color=suggestion.primary_color,
        secondary_color=suggestion.secondary_color,
    )
