"""Implementation of the ``restlab import`` command."""

from __future__ import annotations

import sys
from pathlib import Path

from ..core import import_collection, open_workspace


def cmd_import(args):
    """Entry point for the ``import`` sub-command."""

    path = Path(args.file).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return 2

    result = import_collection(text, args.format)
    workspace = open_workspace()
    roots = workspace.merge_import(result)

    folders = sum(1 for root in roots for _ in root.walk())
    requests = sum(len(f.requests) for root in roots for f in root.walk())
    for root in roots:
        print(f"Imported \"{root.name}\"  [{root.id}]")
    print(f"{folders} folders, {requests} requests")
    return 0
