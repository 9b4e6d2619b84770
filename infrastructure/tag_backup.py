"""JSON backup files for tag snapshots."""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from core.models import TagExportData


def export_tags(path: str | Path, data: TagExportData) -> bool:
    """Write `data` as pretty-printed JSON to `path`; return False on failure."""
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8") as f:
            json.dump(data.to_dict(), f, ensure_ascii=False, indent=2)
    except (OSError, TypeError, ValueError):
        logger.exception("Tag export to {} failed", target)
        return False
    logger.info("Tag backup written to {}", target)
    return True


def import_tags(path: str | Path) -> TagExportData | None:
    """Read a tag snapshot from `path`; return None if it cannot be read."""
    source = Path(path)
    try:
        with source.open("r", encoding="utf-8") as f:
            raw = json.load(f)
        return TagExportData.from_dict(raw)
    except (OSError, ValueError, TypeError) as ex:
        logger.error("Tag import from {} failed: {}", source, ex)
        return None
