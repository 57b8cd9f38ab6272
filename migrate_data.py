"""
Bootstrap the data directory and upgrade older posts/comments records
in place so every field the API returns is present.

Usage:
    python migrate_data.py
"""

from typing import Dict, List, Tuple

import config
import store


def normalise_post(post: Dict) -> bool:
    """Fill missing post fields. Returns True when the record changed."""
    before = dict(post)
    likes = post.get("likes")
    if not isinstance(likes, list):
        # Older records kept a bare counter; the visitors behind it are unknown.
        post["likes"] = []
    post.setdefault("tags", [])
    if isinstance(post["tags"], str):
        post["tags"] = [t.strip() for t in post["tags"].split(",") if t.strip()]
    post.setdefault("extraImages", [])
    post.setdefault("mainImage", "")
    if not post.get("category"):
        post["category"] = config.DEFAULT_CATEGORY
    stamp = post.get("createdAt") or post.get("updatedAt") or store.now_iso()
    post.setdefault("createdAt", stamp)
    post.setdefault("updatedAt", stamp)
    return post != before


def normalise_comment(comment: Dict) -> bool:
    before = dict(comment)
    if not comment.get("name"):
        comment["name"] = config.DEFAULT_COMMENT_NAME
    comment.setdefault("ip", "")
    stamp = comment.get("createdAt") or store.now_iso()
    comment.setdefault("createdAt", stamp)
    comment.setdefault("updatedAt", stamp)
    return comment != before


def migrate() -> Tuple[int, int]:
    store.ensure_data_files()

    with store.document_lock(config.POSTS_PATH):
        posts: List[Dict] = store.load(config.POSTS_PATH, [])
        changed_posts = sum(normalise_post(p) for p in posts)
        if changed_posts:
            store.save(config.POSTS_PATH, posts)

    with store.document_lock(config.COMMENTS_PATH):
        comments: List[Dict] = store.load(config.COMMENTS_PATH, [])
        changed_comments = sum(normalise_comment(c) for c in comments)
        if changed_comments:
            store.save(config.COMMENTS_PATH, comments)

    return changed_posts, changed_comments


def main():
    changed_posts, changed_comments = migrate()
    print(
        f"Migrated data at {config.DATA_DIR}: "
        f"{changed_posts} posts, {changed_comments} comments updated."
    )


if __name__ == "__main__":
    main()
