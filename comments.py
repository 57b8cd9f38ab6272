"""Comments live in one document and reference posts by ``postId``.

Anyone may comment. Editing is allowed to the visitor whose address created
the comment, or to a caller holding the admin secret. Deleting is admin only
and is enforced by the route.
"""
from __future__ import annotations

import logging
import uuid
from typing import Dict, List, Optional

import config
import store
from errors import Forbidden, NotFound, ValidationError

logger = logging.getLogger(__name__)


def _load() -> List[Dict]:
    return store.load(config.COMMENTS_PATH, [])


def _save(items: List[Dict]) -> None:
    store.save(config.COMMENTS_PATH, items)


def _post_exists(post_id: str) -> bool:
    return any(p.get("id") == post_id for p in store.load(config.POSTS_PATH, []))


def list_all() -> List[Dict]:
    return _load()


def list_for_post(post_id: str) -> List[Dict]:
    return [c for c in _load() if c.get("postId") == post_id]


def create_comment(
    post_id: str, text: Optional[str], visitor: str, name: Optional[str] = None
) -> Dict:
    if not text:
        raise ValidationError("Text required")

    now = store.now_iso()
    comment = {
        "id": str(uuid.uuid4()),
        "postId": post_id,
        "name": name or config.DEFAULT_COMMENT_NAME,
        "text": text,
        "ip": visitor,
        "createdAt": now,
        "updatedAt": now,
    }
    with store.document_lock(config.COMMENTS_PATH):
        if not _post_exists(post_id):
            raise ValidationError("Invalid postId")
        items = _load()
        items.append(comment)
        _save(items)
    logger.info("Created comment %s on post %s", comment["id"], post_id)
    return comment


def update_comment(
    comment_id: str, text: Optional[str], visitor: str, is_admin: bool = False
) -> Dict:
    if not text:
        raise ValidationError("Text required")
    with store.document_lock(config.COMMENTS_PATH):
        items = _load()
        comment = next((c for c in items if c.get("id") == comment_id), None)
        if comment is None:
            raise NotFound("Comment not found")
        if comment.get("ip") != visitor and not is_admin:
            raise Forbidden()
        comment["text"] = text
        comment["updatedAt"] = store.now_iso()
        _save(items)
    logger.info("Updated comment %s", comment_id)
    return comment


def delete_comment(comment_id: str) -> None:
    with store.document_lock(config.COMMENTS_PATH):
        items = _load()
        kept = [c for c in items if c.get("id") != comment_id]
        if len(kept) == len(items):
            raise NotFound("Comment not found")
        _save(kept)
    logger.info("Deleted comment %s", comment_id)


def delete_for_post(post_id: str) -> int:
    """Remove every comment attached to ``post_id``; returns how many went."""
    with store.document_lock(config.COMMENTS_PATH):
        items = _load()
        kept = [c for c in items if c.get("postId") != post_id]
        removed = len(items) - len(kept)
        if removed:
            _save(kept)
    return removed
