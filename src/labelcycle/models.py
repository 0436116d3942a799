from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_LABEL_PREFIX = "lifecycle/"


class LifecycleLabel(Enum):
    """Mutually exclusive lifecycle states an issue or pull request can carry."""

    ACTIVE = "active"
    FROZEN = "frozen"
    STALE = "stale"
    ROTTEN = "rotten"

    def token(self, prefix: str = DEFAULT_LABEL_PREFIX) -> str:
        return f"{prefix}{self.value}"

    @classmethod
    def parse(cls, name: str) -> LifecycleLabel:
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"unknown lifecycle label: {name!r}") from None


class Intent(Enum):
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class Command:
    label: LifecycleLabel
    intent: Intent

    @property
    def remove(self) -> bool:
        return self.intent is Intent.REMOVE

    def label_token(self, prefix: str = DEFAULT_LABEL_PREFIX) -> str:
        return self.label.token(prefix)


@dataclass(frozen=True)
class ItemRef:
    """Identity of an issue or pull request; labels live remotely."""

    owner: str
    repo: str
    number: int
    is_pr: bool = False

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return f"{self.slug}#{self.number}"


@dataclass(frozen=True)
class CommentEvent:
    item: ItemRef
    body: str
    actor: str
    action: str = "created"


__all__ = [
    "DEFAULT_LABEL_PREFIX",
    "LifecycleLabel",
    "Intent",
    "Command",
    "ItemRef",
    "CommentEvent",
]
