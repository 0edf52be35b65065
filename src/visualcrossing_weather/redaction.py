"""Helpers for redacting the API key from URLs, log lines and error text."""

from __future__ import annotations

import re
from typing import Any

REDACTED = "[REDACTED]"

_SENSITIVE_KEY_RE = re.compile(
    r"^(key|api[_-]?key|token|secret|authorization)$",
    re.IGNORECASE,
)
# Visual Crossing takes the credential as the ``key`` query parameter.
_QUERY_KEY_RE = re.compile(r"([?&](?:key|api[_-]?key)=)[^&#\s]*", re.IGNORECASE)
_KEY_VALUE_SECRET_RE = re.compile(
    r"""(?ix)
    \b
    (
      api[_-]?key|
      token|
      secret|
      authorization
    )
    \s*[:=]\s*
    ([^\s,;&]+)
    """
)


def sanitize_text(text: str) -> str:
    """Redact credentials embedded in plain text or request URLs."""
    sanitized = _QUERY_KEY_RE.sub(lambda m: f"{m.group(1)}{REDACTED}", text)
    sanitized = _KEY_VALUE_SECRET_RE.sub(lambda m: f"{m.group(1)}={REDACTED}", sanitized)
    return sanitized


def sanitize_params(params: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of query parameters with credential values replaced."""
    return {
        name: REDACTED if _SENSITIVE_KEY_RE.search(str(name)) else value
        for name, value in params.items()
    }
