"""Filter/search evaluation and count aggregation over task records.

Both operate on full snapshots of the collection: nothing here is cached or
maintained incrementally.
"""
from typing import Iterable, List, Optional

from task_manager.schemas.task import TaskFilter, TaskResponse, TaskStats


def matches_filter(task: TaskResponse, task_filter: TaskFilter) -> bool:
    if task_filter is TaskFilter.COMPLETED:
        return task.completed
    if task_filter is TaskFilter.PENDING:
        return not task.completed
    if task_filter is TaskFilter.IMPORTANT:
        return task.important
    return True


def matches_search(task: TaskResponse, search: Optional[str]) -> bool:
    # Literal, case-insensitive substring; an empty term matches everything
    if not search:
        return True
    return search.casefold() in task.text.casefold()


def select_tasks(
    tasks: Iterable[TaskResponse],
    task_filter: TaskFilter = TaskFilter.ALL,
    search: Optional[str] = None,
) -> List[TaskResponse]:
    """Return the tasks matching both predicates, newest created first.

    ``tasks`` must be in insertion order; ``sorted`` is stable so records with
    equal ``created_at`` keep that order.
    """
    selected = [t for t in tasks if matches_filter(t, task_filter) and matches_search(t, search)]
    return sorted(selected, key=lambda t: t.created_at, reverse=True)


def compute_stats(tasks: Iterable[TaskResponse]) -> TaskStats:
    stats = TaskStats()
    for task in tasks:
        stats.total += 1
        if task.completed:
            stats.completed += 1
        else:
            stats.pending += 1
        if task.important:
            stats.important += 1
    return stats
