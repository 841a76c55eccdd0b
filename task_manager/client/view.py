from task_manager.client.state import ViewState, can_submit


def render_task(task) -> str:
    check = "x" if task.get("completed") else " "
    star = "*" if task.get("important") else " "
    return f"[{check}]{star} {task.get('text', '')}  ({task.get('id')})"


def render(state: ViewState) -> str:
    """Pure text rendering of the current view-state."""
    stats = state.stats
    lines = [
        "Task Manager",
        f"Total: {stats.get('total', 0)} | Pending: {stats.get('pending', 0)} | "
        f"Completed: {stats.get('completed', 0)} | Important: {stats.get('important', 0)}",
        f"Filter: {state.filter}" + (f" | Search: {state.search!r}" if state.search else ""),
    ]
    if state.error:
        lines.append(f"! {state.error} (dismiss to clear)")
    if state.loading:
        lines.append("Loading tasks...")
    elif not state.tasks:
        if state.search or state.filter != "all":
            lines.append("No tasks match your criteria")
        else:
            lines.append("No tasks yet. Add your first task above!")
    else:
        lines.extend(render_task(t) for t in state.tasks)
    lines.append(f"Add: {'enabled' if can_submit(state) else 'disabled'}")
    return "\n".join(lines)
