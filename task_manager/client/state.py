"""Client view-state and the reducer that reconciles it with the service.

The local mirror is only ever *replaced* by a query result or patched by the
canonical record a mutation returned. Filtering and searching are never
re-applied locally: the service is the sole judge of what matches.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple, Union

Task = Dict[str, Any]

EMPTY_STATS = {"total": 0, "completed": 0, "pending": 0, "important": 0}

FILTERS = ("all", "completed", "pending", "important")


@dataclass(frozen=True)
class ViewState:
    tasks: Tuple[Task, ...] = ()
    stats: Dict[str, int] = field(default_factory=lambda: dict(EMPTY_STATS))
    filter: str = "all"
    search: str = ""
    compose: str = ""
    loading: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class QueryStarted:
    pass


@dataclass(frozen=True)
class QuerySucceeded:
    tasks: Tuple[Task, ...]


@dataclass(frozen=True)
class QueryFailed:
    error: str


@dataclass(frozen=True)
class StatsLoaded:
    stats: Dict[str, int]


@dataclass(frozen=True)
class MutationSucceeded:
    kind: str  # "create", "update" or "delete"
    task_id: str
    task: Optional[Task] = None


@dataclass(frozen=True)
class MutationFailed:
    error: str


@dataclass(frozen=True)
class FilterChanged:
    filter: str


@dataclass(frozen=True)
class SearchChanged:
    search: str


@dataclass(frozen=True)
class ComposeChanged:
    text: str


@dataclass(frozen=True)
class ErrorDismissed:
    pass


Message = Union[
    QueryStarted,
    QuerySucceeded,
    QueryFailed,
    StatsLoaded,
    MutationSucceeded,
    MutationFailed,
    FilterChanged,
    SearchChanged,
    ComposeChanged,
    ErrorDismissed,
]


def _apply_mutation(tasks: Tuple[Task, ...], msg: MutationSucceeded) -> Tuple[Task, ...]:
    if msg.kind == "create":
        return (msg.task,) + tasks
    if msg.kind == "update":
        return tuple(msg.task if t.get("id") == msg.task_id else t for t in tasks)
    if msg.kind == "delete":
        return tuple(t for t in tasks if t.get("id") != msg.task_id)
    raise ValueError(f"Unknown mutation kind: {msg.kind}")


def reduce(state: ViewState, msg: Message) -> ViewState:
    if isinstance(msg, QueryStarted):
        return replace(state, loading=True)
    if isinstance(msg, QuerySucceeded):
        return replace(state, tasks=tuple(msg.tasks), loading=False, error=None)
    if isinstance(msg, QueryFailed):
        return replace(state, loading=False, error=msg.error)
    if isinstance(msg, StatsLoaded):
        return replace(state, stats=dict(msg.stats))
    if isinstance(msg, MutationSucceeded):
        new_state = replace(state, tasks=_apply_mutation(state.tasks, msg))
        if msg.kind == "create":
            new_state = replace(new_state, compose="")
        return new_state
    if isinstance(msg, MutationFailed):
        return replace(state, error=msg.error)
    if isinstance(msg, FilterChanged):
        if msg.filter not in FILTERS:
            raise ValueError(f"Unknown filter: {msg.filter}")
        return replace(state, filter=msg.filter)
    if isinstance(msg, SearchChanged):
        return replace(state, search=msg.search)
    if isinstance(msg, ComposeChanged):
        return replace(state, compose=msg.text)
    if isinstance(msg, ErrorDismissed):
        return replace(state, error=None)
    raise TypeError(f"Unsupported message: {msg!r}")


def can_submit(state: ViewState) -> bool:
    return bool(state.compose.strip()) and not state.loading


def find_task(state: ViewState, task_id: str) -> Optional[Task]:
    return next((t for t in state.tasks if t.get("id") == task_id), None)
