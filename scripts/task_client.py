"""
Command-line front end for the task service.

* Loads the current view (tasks + stats) before every command.
* Applies one action through the TaskController and prints the rendered view.
* Exits non-zero when the action left an error on screen.
"""

from __future__ import annotations

import argparse
import json
import sys

from task_manager.client.api import ClientRequestError, TaskApiClient
from task_manager.client.controller import TaskController
from task_manager.client.state import FILTERS, FilterChanged, SearchChanged, find_task
from task_manager.client.view import render
from task_manager.core.config import settings


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage tasks on a running task service.")
    parser.add_argument(
        "--api-url",
        type=str,
        default=settings.TASKS_API_URL,
        help="Base URL of the task API (ending in /api).",
    )
    parser.add_argument(
        "--filter",
        type=str,
        default="all",
        choices=FILTERS,
        help="Filter applied to the listed tasks.",
    )
    parser.add_argument(
        "--search",
        type=str,
        default="",
        help="Case-insensitive substring the listed tasks must contain.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Show tasks and stats.")
    add = sub.add_parser("add", help="Create a task.")
    add.add_argument("text", type=str)
    add.add_argument("--important", action="store_true")
    for name, help_text in (
        ("toggle", "Flip a task's completed flag."),
        ("star", "Flip a task's important flag."),
        ("delete", "Delete a task."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("task_id", type=str)
    sub.add_parser("stats", help="Print the aggregate counts as JSON.")
    sub.add_parser("health", help="Print the service health as JSON.")
    return parser.parse_args(argv)


def run_command(args: argparse.Namespace, api: TaskApiClient) -> int:
    if args.command in ("stats", "health"):
        try:
            result = api.get_stats() if args.command == "stats" else api.health()
        except ClientRequestError as e:
            print(f"Request failed: {e}", file=sys.stderr)
            return 1
        print(json.dumps(result, indent=2))
        return 0

    controller = TaskController(api)
    controller.dispatch(FilterChanged(args.filter))
    controller.dispatch(SearchChanged(args.search))
    controller.load()

    if args.command == "add":
        controller.create(args.text, important=args.important)
    elif args.command in ("toggle", "star", "delete") and find_task(controller.state, args.task_id) is None:
        print(f"Task {args.task_id} is not in the current view", file=sys.stderr)
    elif args.command == "toggle":
        controller.toggle_completed(args.task_id)
    elif args.command == "star":
        controller.toggle_important(args.task_id)
    elif args.command == "delete":
        controller.delete(args.task_id)

    print(render(controller.state))
    return 1 if controller.state.error else 0


def main(argv=None, api: TaskApiClient = None) -> int:
    args = parse_args(argv)
    api = api or TaskApiClient(base_url=args.api_url)
    try:
        return run_command(args, api)
    finally:
        api.close()


if __name__ == "__main__":
    sys.exit(main())
