"""Error taxonomy & redaction helpers.

Failures absorbed by the reconciler (label fetch, conflicting-label cleanup,
label add) are logged rather than raised; this module turns the exception
into a small, safely loggable record.

Public API:
- classify_error(exc) -> ErrorInfo
- redact(text) -> str
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"ghp_[A-Za-z0-9]{20,40}"),  # GitHub classic tokens
    re.compile(r"github_pat_\w{20,}"),  # GitHub fine-grained tokens
    re.compile(r"ghs_[A-Za-z0-9]{20,40}"),  # GitHub App installation tokens
    re.compile(r"(?i)bearer\s+[A-Za-z0-9_\-.]{16,}"),
]

_REDACTION_PLACEHOLDER = "<redacted>"

HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
HTTP_TOO_MANY_REQUESTS = 429
HTTP_SERVER_ERROR = 500


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    transient: bool = False
    details: dict[str, Any] | None = None

    def as_log_fields(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "transient": self.transient,
            "error_type": self.original_type,
        }


def redact(text: str) -> str:
    """Replace sensitive token matches with a placeholder."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def _classify_status(status: int, low: str) -> tuple[str, bool] | None:
    if status == HTTP_TOO_MANY_REQUESTS:
        return "github.rate_limit", True
    if status == HTTP_FORBIDDEN and "rate limit" in low:
        return "github.rate_limit", True
    if status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
        return "github.auth", False
    if status == HTTP_NOT_FOUND:
        return "github.not_found", False
    if status >= HTTP_SERVER_ERROR:
        return "github.server", True
    return None


def classify_error(exc: BaseException) -> ErrorInfo:
    """Best-effort classification of an exception.

    - HTTP status carried on the exception (``status`` attribute) wins
    - rate limit / abuse wording -> 'github.rate_limit' / 'github.abuse', transient
    - network-y keywords -> 'network', transient
    - fallback -> 'generic'
    """
    msg = str(exc) if exc else ""
    low = msg.lower()
    name = exc.__class__.__name__
    status = getattr(exc, "status", None)

    if isinstance(status, int):
        hit = _classify_status(status, low + " " + str(getattr(exc, "response_text", "")).lower())
        if hit is not None:
            category, transient = hit
            return ErrorInfo(category, redact(msg), name, transient=transient, details={"status": status})
    if "rate limit" in low or "secondary rate" in low:
        return ErrorInfo("github.rate_limit", redact(msg), name, transient=True)
    if "abuse" in low:
        return ErrorInfo("github.abuse", redact(msg), name, transient=True)
    if any(k in low for k in ("timeout", "timed out", "connection reset", "temporarily unavailable")):
        return ErrorInfo("network", redact(msg), name, transient=True)
    return ErrorInfo("generic", redact(msg), name)


__all__ = ["ErrorInfo", "classify_error", "redact"]
