from typing import Callable, Optional

from loguru import logger

from task_manager.client.api import ClientRequestError, TaskApiClient
from task_manager.client.state import (
    ComposeChanged,
    ErrorDismissed,
    FilterChanged,
    Message,
    MutationFailed,
    MutationSucceeded,
    QueryFailed,
    QueryStarted,
    QuerySucceeded,
    SearchChanged,
    StatsLoaded,
    ViewState,
    can_submit,
    find_task,
    reduce,
)

LOAD_ERROR = "Failed to load tasks. Please try again."
CREATE_ERROR = "Failed to create task. Please try again."
UPDATE_ERROR = "Failed to update task. Please try again."
DELETE_ERROR = "Failed to delete task. Please try again."


class TaskController:
    """Turns user intents into API calls and reducer messages.

    One request per action, no retries and no de-duplication: responses are
    applied in the order they arrive.
    """

    def __init__(self, api: TaskApiClient, on_change: Optional[Callable[[ViewState], None]] = None):
        self.api = api
        self.state = ViewState()
        self.on_change = on_change

    def dispatch(self, msg: Message) -> ViewState:
        self.state = reduce(self.state, msg)
        if self.on_change:
            self.on_change(self.state)
        return self.state

    # --- reads ---

    def fetch_tasks(self) -> None:
        self.dispatch(QueryStarted())
        try:
            tasks = self.api.list_tasks(self.state.filter, self.state.search)
        except ClientRequestError:
            self.dispatch(QueryFailed(LOAD_ERROR))
            return
        self.dispatch(QuerySucceeded(tuple(tasks)))

    def fetch_stats(self) -> None:
        # Stats failures are logged only; the error banner is left alone
        try:
            stats = self.api.get_stats()
        except ClientRequestError as e:
            logger.error(f"Error fetching stats: {e}")
            return
        self.dispatch(StatsLoaded(stats))

    def load(self) -> None:
        self.fetch_tasks()
        self.fetch_stats()

    refresh = load

    # --- view-state changes ---

    def set_filter(self, task_filter: str) -> None:
        self.dispatch(FilterChanged(task_filter))
        self.fetch_tasks()

    def set_search(self, search: str) -> None:
        self.dispatch(SearchChanged(search))
        self.fetch_tasks()

    def set_compose(self, text: str) -> None:
        self.dispatch(ComposeChanged(text))

    def dismiss_error(self) -> None:
        self.dispatch(ErrorDismissed())

    # --- mutations ---

    def submit(self) -> bool:
        """Create a task from the compose text; returns False when nothing was sent."""
        if not can_submit(self.state):
            return False
        return self.create(self.state.compose.strip())

    def create(self, text: str, important: bool = False) -> bool:
        try:
            task = self.api.create_task(text, important=important)
        except ClientRequestError:
            self.dispatch(MutationFailed(CREATE_ERROR))
            return False
        self.dispatch(MutationSucceeded("create", task["id"], task))
        self.fetch_stats()
        return True

    def update(self, task_id: str, **changes) -> bool:
        try:
            task = self.api.update_task(task_id, **changes)
        except ClientRequestError:
            self.dispatch(MutationFailed(UPDATE_ERROR))
            return False
        self.dispatch(MutationSucceeded("update", task_id, task))
        self.fetch_stats()
        return True

    def toggle_completed(self, task_id: str) -> bool:
        task = find_task(self.state, task_id)
        if task is None:
            return False
        return self.update(task_id, completed=not task.get("completed", False))

    def toggle_important(self, task_id: str) -> bool:
        task = find_task(self.state, task_id)
        if task is None:
            return False
        return self.update(task_id, important=not task.get("important", False))

    def delete(self, task_id: str) -> bool:
        try:
            self.api.delete_task(task_id)
        except ClientRequestError:
            self.dispatch(MutationFailed(DELETE_ERROR))
            return False
        self.dispatch(MutationSucceeded("delete", task_id))
        self.fetch_stats()
        return True
