"""Store management commands."""

from __future__ import annotations

import json

from ..core import get_store_path, open_workspace


def store_info(_args):
    p = get_store_path()
    if p.exists():
        print(f"Store file: {p}  ({p.stat().st_size} bytes)")
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except ValueError as e:
            print(f"Cannot parse store: {e}")
            return
        workspace = open_workspace()
        print(f"Keys: {len(data)}")
        print(f"Collections: {len(workspace.roots)}")
        print(f"Folders: {len(workspace.index.folders)}")
        print(f"Requests: {len(workspace.index.requests)}")
    else:
        print(f"No store file at: {p}")


def store_clear(_args):
    p = get_store_path()
    if p.exists():
        p.unlink()
        print(f"Removed {p}")
    else:
        print("Nothing to clear.")
