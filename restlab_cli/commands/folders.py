"""Folder (collection) commands."""

from __future__ import annotations

import json
import sys

from ..core import (
    FolderConfig,
    format_rows,
    interactive_confirm,
    interactive_pick_folder,
    open_workspace,
    walk_with_depth,
)
from ..core.resolver import merge_headers_into


def cmd_folders_list(args):
    workspace = open_workspace()
    if not workspace.roots:
        print("(no collections)")
        return 0
    roots = [workspace.folder(args.folder)] if args.folder else workspace.roots
    for depth, folder in walk_with_depth(roots):
        indent = "  " * depth
        print(f"{indent}{folder.name}/  [{folder.id}]")
        if args.requests:
            for req in folder.requests:
                print(f"{indent}  {req.method:<7} {req.name}  [{req.id}]")
    return 0


def cmd_folders_create(args):
    workspace = open_workspace()
    folder = workspace.create_folder(args.name, args.parent)
    print(f"created {folder.name}  [{folder.id}]")
    return 0


def cmd_folders_rename(args):
    workspace = open_workspace()
    workspace.rename_folder(args.folder, args.name)
    print(f"renamed {args.folder} -> {args.name}")
    return 0


def cmd_folders_move(args):
    workspace = open_workspace()
    workspace.move_folder(args.folder, args.parent)
    print(f"moved {args.folder} -> {args.parent or '(root)'}")
    return 0


def cmd_folders_duplicate(args):
    workspace = open_workspace()
    copy = workspace.duplicate_folder(args.folder)
    print(f"duplicated {args.folder} -> {copy.name}  [{copy.id}]")
    return 0


def cmd_folders_delete(args):
    workspace = open_workspace()
    folder = workspace.folder(args.folder)
    if not args.yes and not interactive_confirm(
        f"Delete \"{folder.name}\" and everything inside it?", default=False
    ):
        print("Aborted", file=sys.stderr)
        return 1
    workspace.delete_folder(folder.id)
    print(f"deleted {folder.name}  [{folder.id}]")
    return 0


def cmd_folders_config(args):
    """Show or edit a folder's own settings.

    Without edit flags this prints the folder's own config, what it inherits
    from its parents and the resulting effective config.
    """
    workspace = open_workspace()
    folder_id = args.folder or interactive_pick_folder(workspace)
    own = workspace.folder_config(folder_id) or FolderConfig()

    changed = False
    if args.base_url is not None:
        own.base_url = args.base_url or None
        changed = True
    if args.header:
        own.headers = merge_headers_into(own.headers or [], args.header)
        changed = True
    if args.remove_header:
        drop = {k.lower() for k in args.remove_header}
        own.headers = [h for h in own.headers or [] if h.key.lower() not in drop]
        changed = True
    if changed:
        workspace.set_folder_config(folder_id, own)

    inherited = workspace.resolver().resolve_inherited(folder_id)
    effective = workspace.resolve(folder_id)
    if args.json:
        print(
            json.dumps(
                {
                    "own": own.to_json_dict(),
                    "inherited": inherited.to_json_dict(),
                    "effective": effective.to_json_dict(),
                },
                ensure_ascii=False,
                indent=2,
            )
        )
        return 0

    print(f"Folder: {workspace.index.path(folder_id)}  [{folder_id}]")
    source = "" if own.base_url or not effective.base_url else "  (inherited)"
    print(f"Base URL: {effective.base_url or '(none)'}{source}")
    own_keys = {h.key.lower() for h in own.headers or []}
    rows = [
        {"key": h.key, "value": h.value, "source": "own" if h.key.lower() in own_keys else "inherited"}
        for h in effective.headers or []
    ]
    format_rows(rows, ["key", "value", "source"])
    return 0
