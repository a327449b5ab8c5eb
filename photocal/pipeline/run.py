from __future__ import annotations

from dataclasses import replace
from datetime import date
from pathlib import Path
import json
import logging
import shutil
from typing import Iterable, List, Optional

from slugify import slugify
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .. import config
from ..models import Sheet, SheetStatus, get_session, init_db
from ..storage import artifact_path, record_artifacts
from .grid import build_month_grid
from .layouts import SheetConfig
from .render_pdf import render_pdf
from .render_preview import render_preview


logger = logging.getLogger(__name__)


def sheet_slug(cfg: SheetConfig) -> str:
    return slugify(f"{cfg.year}-{cfg.month:02d}-{cfg.layout.value}-{cfg.grid_style.value}")


def _write_error(slug: str, message: str) -> None:
    # output from an earlier successful run must not sit beside the error
    final_dir = config.OUT_DIR / slug
    if final_dir.exists():
        shutil.rmtree(final_dir)
    error_path = artifact_path(final_dir, "error")
    error_path.write_text(message, encoding="utf-8")


def _prepare_temp_dir(slug: str) -> Path:
    temp_dir = config.OUT_DIR / f"{slug}.tmp"
    if temp_dir.exists():
        shutil.rmtree(temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


def _finalize_artifacts(
    temp_dir: Path,
    final_dir: Path,
    artifacts: List[tuple[str, Path]],
) -> List[tuple[str, Path]]:
    if final_dir.exists():
        shutil.rmtree(final_dir)
    temp_dir.replace(final_dir)
    finalized: List[tuple[str, Path]] = []
    for artifact_type, path in artifacts:
        finalized.append((artifact_type, final_dir / path.relative_to(temp_dir)))
    return finalized


def process_sheet(cfg: SheetConfig, today: Optional[date] = None) -> List[tuple[str, Path]]:
    slug = sheet_slug(cfg)
    temp_dir = _prepare_temp_dir(slug)
    artifacts: List[tuple[str, Path]] = []
    try:
        grid = build_month_grid(cfg.year, cfg.month, show_lunar=cfg.show_lunar, today=today)

        pdf_path = artifact_path(temp_dir, "pdf")
        render_pdf(grid, cfg, pdf_path)
        artifacts.append(("pdf", pdf_path))

        preview_path = render_preview(pdf_path)
        artifacts.append(("preview", preview_path))

        config_path = artifact_path(temp_dir, "config")
        config_path.write_text(json.dumps(cfg.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        artifacts.append(("config", config_path))
    except Exception:
        shutil.rmtree(temp_dir, ignore_errors=True)
        raise

    final_dir = config.OUT_DIR / slug
    return _finalize_artifacts(temp_dir, final_dir, artifacts)


def _record(session: Session, sheet: Sheet, artifacts: List[tuple[str, Path]]) -> None:
    session.add(sheet)
    session.flush()
    record_artifacts(session, sheet, artifacts)
    session.commit()
    session.refresh(sheet)


def run_sheets(configs: Iterable[SheetConfig], today: Optional[date] = None) -> dict[str, list[str]]:
    init_db()
    results: dict[str, list[str]] = {"READY": [], "FAILED": []}
    with get_session() as session:
        for cfg in configs:
            slug = sheet_slug(cfg)
            sheet = Sheet(
                slug=slug,
                year=cfg.year,
                month=cfg.month,
                layout=cfg.layout.value,
                grid_style=cfg.grid_style.value,
            )
            try:
                artifacts = process_sheet(cfg, today=today)
                sheet.status = SheetStatus.READY
            except FileNotFoundError as exc:
                logger.exception("Missing input for %s", slug)
                artifacts = []
                sheet.status = SheetStatus.FAILED
                sheet.fail_code = "MISSING_INPUT"
                sheet.fail_detail = str(exc)
            except Exception as exc:
                logger.exception("Render error for %s", slug)
                artifacts = []
                sheet.status = SheetStatus.FAILED
                sheet.fail_code = "RENDER_ERROR"
                sheet.fail_detail = str(exc) or exc.__class__.__name__

            try:
                _record(session, sheet, artifacts)
            except SQLAlchemyError as exc:
                session.rollback()
                logger.exception("Could not record %s", slug)
                _write_error(slug, f"RECORD_ERROR: {exc}")
                results["FAILED"].append(slug)
                continue

            if sheet.status == SheetStatus.READY:
                logger.info("Rendered %s", slug)
                results["READY"].append(slug)
            else:
                _write_error(slug, sheet.fail_detail or "Unknown error")
                results["FAILED"].append(slug)
    return results


def run_year(base: SheetConfig, months: Iterable[int] = range(1, 13), today: Optional[date] = None) -> dict[str, list[str]]:
    """Render one sheet per month of ``base.year`` sharing every other setting."""
    return run_sheets((replace(base, month=month) for month in months), today=today)


def list_sheets(status: Optional[SheetStatus] = None) -> List[Sheet]:
    init_db()
    with get_session() as session:
        statement = select(Sheet).order_by(Sheet.created_at)
        if status is not None:
            statement = statement.where(Sheet.status == status)
        return list(session.exec(statement))
