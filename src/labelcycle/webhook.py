"""Normalize GitHub webhook payloads into ``CommentEvent`` values.

Supported events:

* ``issue_comment``               - comments on issues and pull requests
* ``pull_request_review_comment`` - inline review comments
* ``pull_request_review``         - review bodies (``submitted`` -> ``created``)

Payloads are validated against a deliberately shallow JSON Schema; only the
fields this package reads are required.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, cast

from jsonschema import Draft7Validator

from .models import CommentEvent, ItemRef

_REPOSITORY = {
    "type": "object",
    "required": ["name", "owner"],
    "properties": {
        "name": {"type": "string"},
        "owner": {
            "type": "object",
            "required": ["login"],
            "properties": {"login": {"type": "string"}},
        },
    },
}
_TEXT_HOLDER = {
    "type": "object",
    "required": ["user"],
    "properties": {
        "body": {"type": ["string", "null"]},
        "user": {
            "type": "object",
            "required": ["login"],
            "properties": {"login": {"type": "string"}},
        },
    },
}
_NUMBERED = {
    "type": "object",
    "required": ["number"],
    "properties": {"number": {"type": "integer"}},
}


def _schema(holder: str, container: str) -> dict[str, Any]:
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "type": "object",
        "required": ["action", "repository", holder, container],
        "properties": {
            "action": {"type": "string"},
            "repository": _REPOSITORY,
            holder: _TEXT_HOLDER,
            container: _NUMBERED,
        },
    }


# event name -> (text holder key, item container key)
_EVENT_SHAPES: dict[str, tuple[str, str]] = {
    "issue_comment": ("comment", "issue"),
    "pull_request_review_comment": ("comment", "pull_request"),
    "pull_request_review": ("review", "pull_request"),
}
_VALIDATORS = {
    name: Draft7Validator(_schema(holder, container))
    for name, (holder, container) in _EVENT_SHAPES.items()
}
_ACTION_ALIASES = {"submitted": "created"}


class WebhookPayloadError(ValueError):
    """Raised when a webhook payload does not have the expected shape."""

    def __init__(self, event_name: str, problems: list[str]):
        super().__init__(f"Invalid {event_name} payload: " + "; ".join(problems))
        self.event_name = event_name
        self.problems = problems


def supported_events() -> list[str]:
    return sorted(_EVENT_SHAPES)


def _validate(event_name: str, payload: Any) -> None:
    validator = _VALIDATORS[event_name]
    problems = []
    for err in sorted(validator.iter_errors(payload), key=lambda e: list(e.path)):
        location = "/".join(str(p) for p in err.path) or "<root>"
        problems.append(f"{location}: {err.message}")
    if problems:
        raise WebhookPayloadError(event_name, problems)


def parse_event(event_name: str, payload: Any) -> CommentEvent | None:
    """Return the comment event carried by ``payload`` or None if unsupported."""
    shape = _EVENT_SHAPES.get(event_name)
    if shape is None:
        return None
    _validate(event_name, payload)
    holder_key, container_key = shape
    data = cast(dict[str, Any], payload)
    holder = cast(dict[str, Any], data[holder_key])
    container = cast(dict[str, Any], data[container_key])
    repository = cast(dict[str, Any], data["repository"])
    is_pr = container_key == "pull_request" or "pull_request" in container
    item = ItemRef(
        owner=repository["owner"]["login"],
        repo=repository["name"],
        number=int(container["number"]),
        is_pr=is_pr,
    )
    action = str(data["action"])
    return CommentEvent(
        item=item,
        body=holder.get("body") or "",
        actor=holder["user"]["login"],
        action=_ACTION_ALIASES.get(action, action),
    )


def load_event_file(path: str | Path, event_name: str | None = None) -> CommentEvent | None:
    """Load a webhook payload file (e.g. ``$GITHUB_EVENT_PATH``)."""
    name = event_name or os.environ.get("GITHUB_EVENT_NAME")
    if not name:
        raise WebhookPayloadError("<unknown>", ["event name not given and GITHUB_EVENT_NAME unset"])
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise WebhookPayloadError(name, [f"invalid JSON: {exc}"]) from exc
    return parse_event(name, payload)


__all__ = ["WebhookPayloadError", "parse_event", "load_event_file", "supported_events"]
