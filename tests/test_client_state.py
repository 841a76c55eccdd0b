# tests/test_client_state.py

from __future__ import annotations

import pytest

from task_manager.client.state import (
    ComposeChanged,
    ErrorDismissed,
    FilterChanged,
    MutationFailed,
    MutationSucceeded,
    QueryFailed,
    QueryStarted,
    QuerySucceeded,
    SearchChanged,
    StatsLoaded,
    ViewState,
    can_submit,
    reduce,
)
from task_manager.client.view import render

from .fakes import task


@pytest.fixture()
def loaded() -> ViewState:
    return reduce(ViewState(), QuerySucceeded((task("1", "one"), task("2", "two"), task("3", "three"))))


def ids(state: ViewState) -> list[str]:
    return [t["id"] for t in state.tasks]


def test_query_lifecycle_toggles_loading():
    state = reduce(ViewState(error="old"), QueryStarted())
    assert state.loading is True
    state = reduce(state, QuerySucceeded((task("1", "one"),)))
    assert state.loading is False
    assert state.error is None
    assert ids(state) == ["1"]


def test_query_result_replaces_mirror(loaded):
    state = reduce(loaded, QuerySucceeded((task("9", "nine"),)))
    assert ids(state) == ["9"]


def test_failed_query_keeps_mirror(loaded):
    state = reduce(reduce(loaded, QueryStarted()), QueryFailed("Failed to load tasks. Please try again."))
    assert ids(state) == ids(loaded)
    assert state.loading is False
    assert state.error == "Failed to load tasks. Please try again."


def test_create_prepends_server_record_and_clears_compose(loaded):
    created = task("4", "four", important=True)
    state = reduce(reduce(loaded, ComposeChanged("four")), MutationSucceeded("create", "4", created))
    assert ids(state) == ["4", "1", "2", "3"]
    assert state.tasks[0] is created
    assert state.compose == ""


def test_update_replaces_in_place(loaded):
    updated = task("2", "two", completed=True)
    state = reduce(loaded, MutationSucceeded("update", "2", updated))
    assert ids(state) == ["1", "2", "3"]
    assert state.tasks[1] == updated


def test_update_is_not_refiltered_locally(loaded):
    # A pending view keeps a task that was just completed until the next query
    pending_view = reduce(loaded, FilterChanged("pending"))
    state = reduce(pending_view, MutationSucceeded("update", "1", task("1", "one", completed=True)))
    assert ids(state) == ["1", "2", "3"]


def test_delete_removes_matching_id(loaded):
    state = reduce(loaded, MutationSucceeded("delete", "2"))
    assert ids(state) == ["1", "3"]


def test_failed_mutation_only_sets_error(loaded):
    state = reduce(reduce(loaded, ComposeChanged("draft")), MutationFailed("Failed to create task. Please try again."))
    assert state.tasks == loaded.tasks
    assert state.compose == "draft"
    assert state.error == "Failed to create task. Please try again."
    assert reduce(state, ErrorDismissed()).error is None


def test_stats_loaded_replaces_stats():
    stats = {"total": 3, "completed": 1, "pending": 2, "important": 0}
    assert reduce(ViewState(), StatsLoaded(stats)).stats == stats


def test_filter_and_search_changes(loaded):
    state = reduce(reduce(loaded, FilterChanged("important")), SearchChanged("tw"))
    assert (state.filter, state.search) == ("important", "tw")
    assert state.tasks == loaded.tasks
    with pytest.raises(ValueError):
        reduce(loaded, FilterChanged("archived"))


def test_can_submit_requires_text_and_idle():
    assert can_submit(ViewState(compose="milk")) is True
    assert can_submit(ViewState(compose="   ")) is False
    assert can_submit(ViewState(compose="milk", loading=True)) is False


def test_render_shows_markers_and_banner(loaded):
    state = reduce(loaded, MutationSucceeded("update", "1", task("1", "one", completed=True, important=True)))
    state = reduce(state, MutationFailed("Failed to delete task. Please try again."))
    text = render(state)
    assert "[x]* one  (1)" in text
    assert "[ ]  two  (2)" in text
    assert "! Failed to delete task. Please try again." in text


def test_render_empty_states():
    assert "No tasks yet" in render(ViewState())
    assert "No tasks match your criteria" in render(ViewState(search="zzz"))
    assert "Loading tasks..." in render(ViewState(loading=True))
