"""Lifecycle label reconciliation.

One command is reconciled against the item's current labels, fetched fresh
for every command:

* target present + remove  -> remove target; failure propagates unchanged
* target absent  + add     -> remove every other lifecycle label present,
                              then add target; failures are logged only
* anything else            -> no-op

A label fetch failure is logged and treated as "no labels present".

``handle_comment`` runs the extractor over a comment event and reconciles
each command in document order. Commands from one comment must not be
applied concurrently: each step relies on the labels left by the previous
one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from .client import LabelClient
from .commands import build_pattern, extract_commands
from .config import LifecycleSettings
from .errors import ErrorInfo, classify_error
from .logging import StructuredLogger, get_logger
from .models import DEFAULT_LABEL_PREFIX, Command, CommentEvent, ItemRef, LifecycleLabel

HANDLED_ACTIONS = frozenset({"created"})


@dataclass
class ReconcileResult:
    command: Command
    outcome: str  # added | removed | noop
    evicted: list[str] = field(default_factory=list)
    failures: list[ErrorInfo] = field(default_factory=list)

    def to_dict(self, prefix: str) -> dict[str, Any]:
        return {
            "label": self.command.label_token(prefix),
            "intent": self.command.intent.value,
            "outcome": self.outcome,
            "evicted": list(self.evicted),
            "failures": [
                {"category": f.category, "message": f.message} for f in self.failures
            ],
        }


def _log_failure(
    logger: StructuredLogger,
    message: str,
    exc: BaseException,
    item: ItemRef,
    label: str | None,
) -> ErrorInfo:
    info = classify_error(exc)
    fields: dict[str, Any] = {"item": str(item), **info.as_log_fields()}
    if label is not None:
        fields["label"] = label
    logger.log_error(message, error=info.message, **fields)
    return info


def reconcile_command(
    client: LabelClient,
    item: ItemRef,
    command: Command,
    *,
    prefix: str = DEFAULT_LABEL_PREFIX,
    logger: StructuredLogger | None = None,
) -> ReconcileResult:
    log = logger or get_logger()
    target = command.label_token(prefix)
    result = ReconcileResult(command=command, outcome="noop")

    try:
        fetched = client.fetch_labels(item)
    except Exception as exc:
        result.failures.append(_log_failure(log, "Failed to get labels.", exc, item, None))
        fetched = set()

    # GitHub label names are case-insensitive; keep the stored spelling for removals
    current = {name.casefold(): name for name in fetched}
    present = target.casefold() in current

    if present and command.remove:
        stored = current[target.casefold()]
        client.remove_label(item, stored)
        log.log_label_action("remove", item, stored)
        result.outcome = "removed"
        return result

    if not present and not command.remove:
        for member in LifecycleLabel:
            key = member.token(prefix).casefold()
            if key == target.casefold() or key not in current:
                continue
            other = current[key]
            try:
                client.remove_label(item, other)
            except Exception as exc:
                result.failures.append(
                    _log_failure(
                        log, f"GitHub failed to remove the following label: {other}", exc, item, other
                    )
                )
                continue
            result.evicted.append(other)
            log.log_label_action("remove", item, other, reason="exclusive")
        try:
            client.add_label(item, target)
        except Exception as exc:
            result.failures.append(
                _log_failure(
                    log, f"GitHub failed to add the following label: {target}", exc, item, target
                )
            )
        else:
            log.log_label_action("add", item, target)
        result.outcome = "added"
        return result

    log.debug("lifecycle command is a no-op", item=str(item), label=target)
    return result


@lru_cache(maxsize=8)
def _pattern(alias: str) -> re.Pattern[str]:
    return build_pattern(alias)


def handle_comment(
    client: LabelClient,
    event: CommentEvent,
    *,
    settings: LifecycleSettings | None = None,
    logger: StructuredLogger | None = None,
) -> list[ReconcileResult]:
    """Apply every lifecycle command in ``event.body`` in document order.

    Returns one result per command. The only exception raised is a failed
    removal of a label that was present when a remove command asked for it;
    later commands in the same comment are then not processed.
    """
    settings = settings or LifecycleSettings()
    log = logger or get_logger()
    if event.action not in HANDLED_ACTIONS:
        log.debug("ignoring comment event", action=event.action, item=str(event.item))
        return []
    results: list[ReconcileResult] = []
    for command in extract_commands(event.body, _pattern(settings.alias)):
        log.log_command(command, event.item, event.actor)
        results.append(
            reconcile_command(
                client, event.item, command, prefix=settings.prefix, logger=log
            )
        )
    return results


__all__ = ["HANDLED_ACTIONS", "ReconcileResult", "reconcile_command", "handle_comment"]
