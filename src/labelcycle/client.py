"""Label store clients.

``LabelClient`` is the only surface the reconciler talks to. Every method
raises on failure; the reconciler decides which failures are absorbed.

Besides the REST implementation in :mod:`labelcycle.github_rest` two
helpers live here:

* ``InMemoryLabelClient`` - dict-backed store used for mock mode and tests.
  Records every call and supports injected failures.
* ``DryRunLabelClient`` - passes reads through to a wrapped client and logs
  writes without performing them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol

from .logging import get_logger
from .models import ItemRef


class LabelClient(Protocol):
    def fetch_labels(self, item: ItemRef) -> set[str]: ...

    def add_label(self, item: ItemRef, label: str) -> None: ...

    def remove_label(self, item: ItemRef, label: str) -> None: ...


class InMemoryLabelClient:
    def __init__(
        self,
        labels: Mapping[ItemRef, Iterable[str]] | None = None,
        *,
        fail_on: Mapping[str, BaseException] | None = None,
        fail_labels: Mapping[tuple[str, str], BaseException] | None = None,
    ) -> None:
        self._labels: dict[ItemRef, set[str]] = {
            item: set(names) for item, names in (labels or {}).items()
        }
        # op -> exception raised for every call of that op
        self.fail_on: dict[str, BaseException] = dict(fail_on or {})
        # (op, label) -> exception raised only for that label
        self.fail_labels: dict[tuple[str, str], BaseException] = dict(fail_labels or {})
        self.calls: list[tuple[str, ItemRef, str | None]] = []

    def _maybe_fail(self, op: str, label: str | None = None) -> None:
        exc = self.fail_on.get(op)
        if exc is None and label is not None:
            exc = self.fail_labels.get((op, label))
        if exc is not None:
            raise exc

    def labels_for(self, item: ItemRef) -> set[str]:
        return set(self._labels.get(item, set()))

    def mutations(self) -> list[tuple[str, ItemRef, str | None]]:
        return [call for call in self.calls if call[0] != "fetch"]

    def fetch_labels(self, item: ItemRef) -> set[str]:
        self.calls.append(("fetch", item, None))
        self._maybe_fail("fetch")
        return self.labels_for(item)

    def add_label(self, item: ItemRef, label: str) -> None:
        self.calls.append(("add", item, label))
        self._maybe_fail("add", label)
        self._labels.setdefault(item, set()).add(label)

    def remove_label(self, item: ItemRef, label: str) -> None:
        self.calls.append(("remove", item, label))
        self._maybe_fail("remove", label)
        self._labels.setdefault(item, set()).discard(label)


class DryRunLabelClient:
    def __init__(self, inner: LabelClient) -> None:
        self.inner = inner
        self.logger = get_logger()

    def fetch_labels(self, item: ItemRef) -> set[str]:
        return self.inner.fetch_labels(item)

    def add_label(self, item: ItemRef, label: str) -> None:
        self.logger.log_label_action("add", item, label, dry_run=True)

    def remove_label(self, item: ItemRef, label: str) -> None:
        self.logger.log_label_action("remove", item, label, dry_run=True)


__all__ = ["LabelClient", "InMemoryLabelClient", "DryRunLabelClient"]
