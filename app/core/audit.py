"""Audit logging utilities.

Sign-in and MFA events are emitted as compact JSON lines on the ``audit``
logger and, when ``AUDIT_LOG_FILE`` is set, appended to that file as well.
"""
from __future__ import annotations

import json
import logging
import os
import time
from typing import Any

_logger = logging.getLogger("audit")


def log_audit_event(action: str, user_id: str | None = None, status: str = "success", **metadata: Any) -> None:
    """Record an audit event.

    Parameters:
        action: A machine-readable action key (e.g. 'auth.login', 'auth.mfa.verify').
        user_id: The acting user's ID (if available).
        status: 'success' | 'failure' | 'denied'.
        **metadata: Additional context fields (ids, counts, etc.).
    """
    event = {
        "ts": int(time.time()),
        "action": action,
        "user_id": user_id,
        "status": status,
        **metadata,
    }
    line = json.dumps(event, separators=(",", ":"), default=str)
    path = os.getenv("AUDIT_LOG_FILE")
    if path:
        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError:
            _logger.warning("Failed to write audit event to %s", path)
    _logger.info(line)


def log_failure(action: str, user_id: str | None = None, error: str | None = None, **extra: Any) -> None:
    log_audit_event(action, user_id=user_id, status="failure", error=error, **extra)
