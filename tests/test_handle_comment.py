from __future__ import annotations

import pytest

from labelcycle import CommentEvent, ItemRef, LifecycleSettings, handle_comment
from labelcycle.client import InMemoryLabelClient
from labelcycle.github_rest import GitHubAPIError

ITEM = ItemRef("acme", "widgets", 42, is_pr=True)


def _event(body: str, action: str = "created") -> CommentEvent:
    return CommentEvent(item=ITEM, body=body, actor="octocat", action=action)


def test_comment_without_commands_makes_no_calls():
    client = InMemoryLabelClient({ITEM: ["lifecycle/stale"]})
    assert handle_comment(client, _event("LGTM, thanks!")) == []
    assert client.calls == []


def test_stale_on_unlabeled_item():
    client = InMemoryLabelClient({ITEM: []})
    handle_comment(client, _event("/lifecycle stale"))
    assert client.mutations() == [("add", ITEM, "lifecycle/stale")]


def test_rotten_replaces_stale():
    client = InMemoryLabelClient({ITEM: ["lifecycle/stale"]})
    handle_comment(client, _event("/lifecycle rotten"))
    assert client.mutations() == [
        ("remove", ITEM, "lifecycle/stale"),
        ("add", ITEM, "lifecycle/rotten"),
    ]


def test_remove_frozen_failure_is_returned_to_caller():
    boom = GitHubAPIError("server error", status=502)
    client = InMemoryLabelClient({ITEM: ["lifecycle/frozen"]}, fail_on={"remove": boom})
    with pytest.raises(GitHubAPIError) as excinfo:
        handle_comment(client, _event("/remove-lifecycle frozen"))
    assert excinfo.value is boom
    assert client.mutations() == [("remove", ITEM, "lifecycle/frozen")]


def test_remove_failure_stops_later_commands():
    client = InMemoryLabelClient(
        {ITEM: ["lifecycle/frozen"]}, fail_on={"remove": RuntimeError("boom")}
    )
    with pytest.raises(RuntimeError):
        handle_comment(client, _event("/remove-lifecycle frozen\n/lifecycle stale"))
    assert [c[0] for c in client.mutations()] == ["remove"]


def test_add_then_remove_in_one_comment():
    client = InMemoryLabelClient({ITEM: []})
    results = handle_comment(client, _event("/lifecycle active\n/remove-lifecycle active"))

    assert client.mutations() == [
        ("add", ITEM, "lifecycle/active"),
        ("remove", ITEM, "lifecycle/active"),
    ]
    assert [r.outcome for r in results] == ["added", "removed"]
    assert client.labels_for(ITEM) == set()


def test_same_add_twice_issues_one_add():
    client = InMemoryLabelClient({ITEM: []})
    handle_comment(client, _event("/lifecycle frozen\n/LH-LIFECYCLE FROZEN"))
    assert client.mutations() == [("add", ITEM, "lifecycle/frozen")]


@pytest.mark.parametrize("action", ["edited", "deleted"])
def test_non_created_actions_are_ignored(action):
    client = InMemoryLabelClient({ITEM: []})
    assert handle_comment(client, _event("/lifecycle stale", action=action)) == []
    assert client.calls == []


def test_settings_control_prefix_and_alias():
    client = InMemoryLabelClient({ITEM: []})
    settings = LifecycleSettings(prefix="state/", alias="bot-")
    handle_comment(client, _event("/bot-lifecycle stale\n/lh-lifecycle rotten"), settings=settings)
    assert client.mutations() == [("add", ITEM, "state/stale")]
