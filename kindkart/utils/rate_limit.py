"""
Simple in-memory rate limiter.

Enabled by RATE_LIMIT_ENABLED (default: 1). Auth endpoints use
RATE_LIMIT_AUTH_PER_MINUTE (default: 10), contact/feedback forms use
RATE_LIMIT_FORMS_PER_MINUTE (default: 5).
"""

from __future__ import annotations
import logging
import time
from functools import wraps
from threading import Lock

from flask import current_app, jsonify, request

logger = logging.getLogger(__name__)

_lock = Lock()
_counts: dict[str, list[float]] = {}
_window = 60  # seconds
_last_sweep = 0.0


def _clean_old(ts_list: list[float], window: int) -> None:
    cutoff = time.time() - window
    while ts_list and ts_list[0] < cutoff:
        ts_list.pop(0)


def _sweep() -> None:
    """Drop clients with no hits left in the window. Caller holds _lock."""
    global _last_sweep
    now = time.time()
    if now - _last_sweep < _window:
        return
    _last_sweep = now
    for key in list(_counts):
        _clean_old(_counts[key], _window)
        if not _counts[key]:
            del _counts[key]


def is_rate_limited(key: str, limit: int) -> bool:
    """Return True if the key has exceeded the limit within the window."""
    if limit <= 0:
        return False
    with _lock:
        _sweep()
        hits = _counts.setdefault(key, [])
        _clean_old(hits, _window)
        if len(hits) >= limit:
            return True
        hits.append(time.time())
        return False


def tracked_keys() -> int:
    with _lock:
        return len(_counts)


def reset() -> None:
    global _last_sweep
    with _lock:
        _counts.clear()
        _last_sweep = 0.0


def rate_limit_key() -> str:
    """Client IP, honouring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def rate_limited(config_key: str, key_prefix: str):
    """Limit a route to app.config[config_key] requests per minute per client."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not current_app.config.get("RATE_LIMIT_ENABLED", True):
                return fn(*args, **kwargs)
            limit = int(current_app.config.get(config_key, 0))
            key = f"{key_prefix}:{rate_limit_key()}"
            if is_rate_limited(key, limit):
                logger.warning("rate limit exceeded for %s", key)
                return jsonify({"error": "rate limit exceeded", "retry_after": _window}), 429
            return fn(*args, **kwargs)

        return wrapper

    return decorator
