from __future__ import annotations

import logging
from typing import Dict, Optional

import config
import store

logger = logging.getLogger(__name__)


def get_about() -> Dict:
    about = store.load(config.ABOUT_PATH, store.ABOUT_DEFAULT)
    if not isinstance(about, dict):
        about = {}
    about.setdefault("text", "")
    about.setdefault("email", "")
    about.setdefault("social", {})
    return about


def clean_social(social: Optional[Dict]) -> Dict[str, str]:
    """Keep known platform keys that carry a non-empty value."""
    links: Dict[str, str] = {}
    for key in config.SOCIAL_KEYS:
        value = (social or {}).get(key)
        if isinstance(value, str) and value.strip():
            links[key] = value.strip()
    return links


def set_about(
    text: Optional[str], email: Optional[str], social: Optional[Dict]
) -> Dict:
    """Replace the whole document; earlier social links are not merged in."""
    about = {
        "text": text or "",
        "email": email or "",
        "social": clean_social(social),
    }
    with store.document_lock(config.ABOUT_PATH):
        store.save(config.ABOUT_PATH, about)
    logger.info("Saved about info")
    return about
