"""Lifecycle command extraction from free-form comment text.

Recognised lines (one command per line, case-insensitive):

    /lifecycle <active|frozen|stale|rotten>
    /remove-lifecycle <active|frozen|stale|rotten>
    /lh-lifecycle ...          (provider alias prefix)

Anything else is ignored; extraction is best effort and never raises on
unrecognised input.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Any

from .models import Command, Intent, LifecycleLabel

DEFAULT_ALIAS = "lh-"


def build_pattern(alias: str = DEFAULT_ALIAS) -> re.Pattern[str]:
    names = "|".join(member.value for member in LifecycleLabel)
    alias_part = f"(?:{re.escape(alias)})?" if alias else ""
    return re.compile(
        rf"^/{alias_part}(remove-)?lifecycle ({names})\s*$",
        re.MULTILINE | re.IGNORECASE,
    )


LIFECYCLE_PATTERN = build_pattern()


def extract_commands(
    body: str | None, pattern: re.Pattern[str] = LIFECYCLE_PATTERN
) -> Iterator[Command]:
    if not body:
        return
    for match in pattern.finditer(body):
        intent = Intent.REMOVE if match.group(1) else Intent.ADD
        yield Command(label=LifecycleLabel.parse(match.group(2)), intent=intent)


COMMAND_HELP: list[dict[str, Any]] = [
    {
        "usage": "/[remove-]lifecycle <active|frozen|stale|rotten>",
        "description": "Flags an issue or PR as active/frozen/stale/rotten, "
        "or clears the flag.",
        "who_can_use": "Anyone can trigger this command.",
        "examples": [
            "/lifecycle frozen",
            "/remove-lifecycle stale",
            "/lh-lifecycle rotten",
        ],
    }
]


def render_help(alias: str = DEFAULT_ALIAS) -> str:
    lines: list[str] = []
    for entry in COMMAND_HELP:
        lines.append(entry['usage'])
        lines.append(f"  {entry['description']}")
        lines.append(f"  {entry['who_can_use']}")
        examples = [
            ex.replace("/lh-", f"/{alias}") if alias else ex
            for ex in entry["examples"]
            if alias or "/lh-" not in ex
        ]
        lines.append("  Examples: " + ", ".join(examples))
    return "\n".join(lines)


__all__ = [
    "DEFAULT_ALIAS",
    "LIFECYCLE_PATTERN",
    "COMMAND_HELP",
    "build_pattern",
    "extract_commands",
    "render_help",
]
