"""Implementation of the ``restlab export`` command."""

from __future__ import annotations

from pathlib import Path

from ..core import export_collection, interactive_pick_folder, open_workspace, safe_name

EXTENSIONS = {
    "native": ".restlab.json",
    "postman": ".postman_collection.json",
    "thunder": ".thunder-collection.json",
}


def cmd_export(args):
    workspace = open_workspace()
    folder_id = args.folder or interactive_pick_folder(workspace, "Select a folder to export:")
    text = export_collection(workspace.store, folder_id, args.format)

    if args.out:
        out = Path(args.out).expanduser()
    else:
        name = safe_name(workspace.folder(folder_id).name)
        out = Path.cwd() / f"{name}{EXTENSIONS.get(args.format, '.json')}"
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    print(f"Exported {folder_id} to {out}")
    return 0
