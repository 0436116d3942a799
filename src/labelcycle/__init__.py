"""labelcycle - comment-driven lifecycle labels for issues and pull requests.

High-level public API:

from labelcycle import CommentEvent, ItemRef, handle_comment
from labelcycle.github_rest import GitHubRestClient

client = GitHubRestClient(token=token)
event = CommentEvent(item=ItemRef("acme", "widgets", 12), body="/lifecycle stale", actor="octocat")
handle_comment(client, event)

Comments may carry any number of ``/lifecycle <state>`` and
``/remove-lifecycle <state>`` lines; each is applied in order and the
``lifecycle/*`` labels stay mutually exclusive.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .commands import extract_commands  # noqa: E402
from .config import LabelcycleConfig, LifecycleSettings, load_config  # noqa: E402
from .models import Command, CommentEvent, Intent, ItemRef, LifecycleLabel  # noqa: E402
from .reconcile import ReconcileResult, handle_comment, reconcile_command  # noqa: E402

__all__ = [
    "Command",
    "CommentEvent",
    "Intent",
    "ItemRef",
    "LabelcycleConfig",
    "LifecycleLabel",
    "LifecycleSettings",
    "ReconcileResult",
    "extract_commands",
    "handle_comment",
    "load_config",
    "reconcile_command",
    "__version__",
]
