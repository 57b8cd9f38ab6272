from __future__ import annotations

import logging
import secrets
import string
import time
from pathlib import Path
from typing import List, Optional

from slugify import slugify
from werkzeug.datastructures import FileStorage

import config
from errors import StorageError

logger = logging.getLogger(__name__)

_ALPHABET = string.ascii_lowercase + string.digits


def upload_name(original: str) -> str:
    """``<epoch-ms>-<random>[-<slug>]<ext>`` for an uploaded file name."""
    path = Path(original or "")
    ext = "".join(c for c in path.suffix.lower() if c.isalnum() or c == ".")
    token = "".join(secrets.choice(_ALPHABET) for _ in range(6))
    stem = slugify(path.stem, max_length=40)
    name = f"{int(time.time() * 1000)}-{token}"
    if stem:
        name = f"{name}-{stem}"
    return name + ext


def save_upload(file: FileStorage) -> str:
    """Store the uploaded bytes and return the public ``/uploads/...`` path."""
    name = upload_name(file.filename)
    target = Path(config.UPLOADS_DIR)
    try:
        target.mkdir(parents=True, exist_ok=True)
        file.save(target / name)
    except OSError as err:
        logger.error("Could not store upload %s: %s", name, err)
        raise StorageError() from err
    logger.info("Stored upload %s", name)
    return f"{config.UPLOADS_URL_PREFIX}/{name}"


def save_optional(file: Optional[FileStorage]) -> Optional[str]:
    if file is None or not file.filename:
        return None
    return save_upload(file)


def save_many(files: List[FileStorage]) -> List[str]:
    return [url for url in (save_optional(f) for f in files) if url]
