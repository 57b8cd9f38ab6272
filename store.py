"""Whole-document JSON persistence.

Every document is loaded in full, mutated in memory and written back in full.
Reads never raise: a missing file is created from the default and a corrupt
one degrades to the default after logging. Writes raise ``StorageError``.
"""
from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator

import config
from errors import StorageError

logger = logging.getLogger(__name__)

ABOUT_DEFAULT = {"text": "", "email": "", "social": {}}

_locks: Dict[str, threading.RLock] = {}
_locks_guard = threading.Lock()


def now_iso() -> str:
    """UTC timestamp in the ``2024-01-31T12:00:00.000Z`` form stored on records."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def load(path: Path, default: Any) -> Any:
    path = Path(path)
    if not path.exists():
        with document_lock(path):
            if not path.exists():
                try:
                    save(path, default)
                except StorageError:
                    pass  # already logged by save()
                return copy.deepcopy(default)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = fh.read()
        if not raw.strip():
            return copy.deepcopy(default)
        return json.loads(raw)
    except (OSError, ValueError):
        logger.exception("Could not read %s, using default", path)
        return copy.deepcopy(default)


def save(path: Path, document: Any) -> None:
    path = Path(path)
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(document, fh, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except OSError as err:
        logger.error("Could not write %s: %s", path, err)
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise StorageError() from err


@contextmanager
def document_lock(path: Path) -> Iterator[None]:
    """Serialise read-modify-write cycles on one document within this process."""
    key = str(Path(path).resolve())
    with _locks_guard:
        lock = _locks.setdefault(key, threading.RLock())
    with lock:
        yield


def ensure_data_files() -> None:
    """Make sure every document and the uploads directory exist."""
    load(config.POSTS_PATH, [])
    load(config.COMMENTS_PATH, [])
    load(config.ABOUT_PATH, ABOUT_DEFAULT)
    if not Path(config.ADMIN_PATH).exists():
        save(config.ADMIN_PATH, {"password": config.ADMIN_PASSWORD})
    Path(config.UPLOADS_DIR).mkdir(parents=True, exist_ok=True)
