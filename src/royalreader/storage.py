"""Tracked-fiction list on disk: one decimal fiction ID per line."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .errors import PersistenceError, ReaderError
from .models import Fiction
from .service import FictionService

logger = logging.getLogger(__name__)


def save_fiction_ids(path: Path, ids: Iterable[int]) -> Path:
    payload = "\n".join(str(int(fiction_id)) for fiction_id in ids)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload, encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Failed to write {path}: {exc}") from exc
    return path


def load_fiction_ids(path: Path) -> list[int]:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError) as exc:
        raise PersistenceError(f"Failed to read {path}: {exc}") from exc
    ids: list[int] = []
    for lineno, line in enumerate(raw.splitlines(), start=1):
        stripped = line.strip()
        if not stripped:
            continue
        if not (stripped.isascii() and stripped.isdigit()):
            logger.debug("Skipping malformed fiction id on line %d of %s: %r", lineno, path, line)
            continue
        ids.append(int(stripped))
    return ids


def save_fictions(path: Path, fictions: Iterable[Fiction]) -> Path:
    return save_fiction_ids(path, (fiction.id for fiction in fictions))


def load_fictions(path: Path, service: FictionService) -> list[Fiction]:
    fictions: list[Fiction] = []
    for fiction_id in load_fiction_ids(path):
        try:
            fictions.append(service.fetch_fiction(fiction_id))
        except ReaderError as exc:
            logger.warning("Dropping fiction %s: %s", fiction_id, exc)
    return fictions
