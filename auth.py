"""Shared-secret admin gate.

The secret is compared by plain equality on every call. There is no hashing,
session, token or rate limiting.
"""
from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import request

import config
from errors import Unauthorized

logger = logging.getLogger(__name__)


def check(supplied: Optional[str]) -> bool:
    return bool(supplied) and supplied == config.ADMIN_PASSWORD


def is_admin_request() -> bool:
    return check(request.headers.get(config.ADMIN_HEADER))


def visitor_identity() -> str:
    """Caller address, preferring the first ``X-Forwarded-For`` hop."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    first = forwarded.split(",")[0].strip()
    return first or request.remote_addr or ""


def admin_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        supplied = request.headers.get(config.ADMIN_HEADER)
        if not supplied:
            logger.warning("Admin header missing from %s", visitor_identity())
            raise Unauthorized("Missing admin password header")
        if not check(supplied):
            logger.warning("Bad admin password from %s", visitor_identity())
            raise Unauthorized("Invalid admin password")
        return view(*args, **kwargs)

    return wrapped
