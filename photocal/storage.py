from __future__ import annotations

from pathlib import Path
from typing import Iterable

from sqlmodel import Session

from . import config
from .models import Artifact, Sheet


ARTIFACT_NAMES = {
    "pdf": "sheet.pdf",
    "preview": "preview.png",
    "config": "sheet.json",
    "error": "error.log",
}


def artifact_path(directory: Path, artifact_type: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    return directory / ARTIFACT_NAMES[artifact_type]


def record_artifacts(session: Session, sheet: Sheet, artifacts: Iterable[tuple[str, Path]]) -> None:
    """Stage artifact rows for ``sheet``; the caller commits."""
    for artifact_type, path in artifacts:
        session.add(
            Artifact(
                sheet_id=sheet.id,
                type=artifact_type,
                path=str(path.relative_to(config.OUT_DIR)),
            )
        )
