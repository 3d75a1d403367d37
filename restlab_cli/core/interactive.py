"""Interactive helpers using InquirerPy.

Used when a command needs a folder or request and none was given on the
command line.
"""

from __future__ import annotations

import sys
from typing import Optional

from InquirerPy import inquirer

from .tree import Workspace
from .utils import walk_with_depth


def _execute(prompt):
    """Execute a prompt and handle ``Ctrl-C`` gracefully."""
    try:
        return prompt.execute()
    except KeyboardInterrupt:
        print("\nCancelled by user", file=sys.stderr)
        sys.exit(1)


def _require_folders(workspace: Workspace) -> None:
    if not workspace.roots:
        print("No collections yet. Create one with: restlab folders create <name>", file=sys.stderr)
        sys.exit(2)


def interactive_pick_folder(workspace: Workspace, message: str = "Select a folder:") -> str:
    """Pick a folder from the whole forest and return its id."""
    _require_folders(workspace)
    choices = [
        {"name": f"{'  ' * depth}{folder.name}  [{folder.id}]", "value": folder.id}
        for depth, folder in walk_with_depth(workspace.roots)
    ]
    prompt = inquirer.fuzzy(
        message=message,
        choices=choices,
        instruction="↑/↓, type to filter, Enter",
        height="90%",
    )
    return _execute(prompt)


def interactive_pick_request(workspace: Workspace, message: str = "Select a request:") -> Optional[str]:
    """Pick a request, shown with its folder path, and return its id."""
    _require_folders(workspace)
    index = workspace.index
    choices = []
    for req_id, summary in index.requests.items():
        path = index.path(index.request_owner[req_id])
        choices.append({"name": f"{summary.method:<7} {path} / {summary.name}  [{req_id}]", "value": req_id})
    if not choices:
        print("No requests yet. Create one with: restlab requests create <folder> <name>", file=sys.stderr)
        sys.exit(2)
    choices.sort(key=lambda x: x["name"].lower())
    prompt = inquirer.fuzzy(
        message=message,
        choices=choices,
        instruction="↑/↓, type to filter, Enter",
        height="90%",
    )
    return _execute(prompt)


def interactive_confirm(message: str, default: bool = False) -> bool:
    return bool(_execute(inquirer.confirm(message=message, default=default)))
