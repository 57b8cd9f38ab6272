from __future__ import annotations

import logging
import re
import uuid
from typing import Dict, Iterable, List, Optional, Tuple, Union

from markdown import markdown

import comments
import config
import store
from errors import NotFound, ValidationError

logger = logging.getLogger(__name__)


def _load() -> List[Dict]:
    return store.load(config.POSTS_PATH, [])


def _save(posts: List[Dict]) -> None:
    store.save(config.POSTS_PATH, posts)


def _find_index(posts: List[Dict], post_id: str) -> int:
    for idx, post in enumerate(posts):
        if post.get("id") == post_id:
            return idx
    raise NotFound("Post not found")


def parse_tags(raw: Union[str, Iterable[str], None]) -> List[str]:
    """Split a comma separated tag string, trimming and dropping empties."""
    if not raw:
        return []
    parts = raw.split(",") if isinstance(raw, str) else raw
    return [t.strip() for t in parts if t and t.strip()]


def render_markdown(md_text: str) -> str:
    return markdown(
        md_text or "",
        extensions=["fenced_code", "tables", "sane_lists"],
        output_format="html5",
    )


def plain_text(html: str) -> str:
    return re.sub(r"<[^>]+>", "", html or "").strip()


def list_posts(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    query: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[Dict]:
    """Posts in stored order (newest first), optionally filtered and paged."""
    posts = _load()
    if category:
        posts = [
            p for p in posts
            if (p.get("category") or config.DEFAULT_CATEGORY) == category
        ]
    if tag:
        posts = [p for p in posts if tag in (p.get("tags") or [])]
    if query:
        needle = query.lower()
        posts = [
            p for p in posts
            if needle in (p.get("title") or "").lower()
            or needle in plain_text(p.get("content")).lower()
        ]
    if limit and limit > 0:
        start = (max(page or 1, 1) - 1) * limit
        posts = posts[start:start + limit]
    return posts


def get_post(post_id: str) -> Dict:
    posts = _load()
    return posts[_find_index(posts, post_id)]


def validate_post_fields(
    title: Optional[str],
    content: Optional[str],
    content_markdown: Optional[str] = None,
) -> Tuple[str, str]:
    """Return the stored ``(title, content)`` or raise ``ValidationError``."""
    title = (title or "").strip()
    if content_markdown:
        content = render_markdown(content_markdown)
    if not title or not (content or "").strip():
        raise ValidationError("Missing fields")
    return title, content


def create_post(
    title: Optional[str],
    content: Optional[str],
    category: Optional[str] = None,
    tags: Union[str, Iterable[str], None] = None,
    main_image: Optional[str] = "",
    extra_images: Optional[List[str]] = None,
    content_markdown: Optional[str] = None,
) -> Dict:
    title, content = validate_post_fields(title, content, content_markdown)

    now = store.now_iso()
    post = {
        "id": str(uuid.uuid4()),
        "title": title,
        "content": content,
        "category": category or config.DEFAULT_CATEGORY,
        "tags": parse_tags(tags),
        "mainImage": main_image or "",
        "extraImages": list(extra_images or []),
        "likes": [],
        "createdAt": now,
        "updatedAt": now,
    }
    if content_markdown:
        post["contentMarkdown"] = content_markdown

    with store.document_lock(config.POSTS_PATH):
        posts = _load()
        posts.insert(0, post)
        _save(posts)
    logger.info("Created post %s", post["id"])
    return post


def update_post(post_id: str, fields: Dict) -> Dict:
    """Overwrite only the supplied fields; ``updatedAt`` is always refreshed."""
    with store.document_lock(config.POSTS_PATH):
        posts = _load()
        post = posts[_find_index(posts, post_id)]

        if fields.get("title"):
            post["title"] = fields["title"]
        if fields.get("contentMarkdown"):
            post["contentMarkdown"] = fields["contentMarkdown"]
            post["content"] = render_markdown(fields["contentMarkdown"])
        elif fields.get("content"):
            post["content"] = fields["content"]
            post.pop("contentMarkdown", None)
        if fields.get("category"):
            post["category"] = fields["category"]
        if "tags" in fields and fields["tags"] is not None:
            post["tags"] = parse_tags(fields["tags"])
        if fields.get("mainImage"):
            post["mainImage"] = fields["mainImage"]
        post["updatedAt"] = store.now_iso()

        _save(posts)
    logger.info("Updated post %s", post_id)
    return post


def delete_post(post_id: str) -> None:
    with store.document_lock(config.POSTS_PATH):
        posts = _load()
        del posts[_find_index(posts, post_id)]
        _save(posts)
    removed = comments.delete_for_post(post_id)
    logger.info("Deleted post %s and %d comment(s)", post_id, removed)


def toggle_like(post_id: str, visitor: str) -> int:
    """Add or remove ``visitor`` from the post's likes and return the new count."""
    with store.document_lock(config.POSTS_PATH):
        posts = _load()
        post = posts[_find_index(posts, post_id)]
        likes = post.get("likes") or []
        if visitor in likes:
            post["likes"] = [ip for ip in likes if ip != visitor]
        else:
            post["likes"] = likes + [visitor]
        _save(posts)
    return len(post["likes"])


def _distinct(values: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def list_categories() -> List[str]:
    return _distinct(p.get("category") or config.DEFAULT_CATEGORY for p in _load())


def list_tags() -> List[str]:
    return _distinct(t for p in _load() for t in (p.get("tags") or []))
