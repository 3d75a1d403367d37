"""Request commands."""

from __future__ import annotations

import base64
import json
import sys
from pathlib import Path

from ..core import (
    FormDataItem,
    interactive_confirm,
    interactive_pick_request,
    open_workspace,
)
from ..core.resolver import merge_headers_into


def parse_form_field(text: str) -> tuple[str, str]:
    if "=" not in text:
        raise ValueError(f"Invalid form field {text!r}, expected key=value")
    key, value = text.split("=", 1)
    return key.strip(), value


def cmd_requests_create(args):
    workspace = open_workspace()
    summary = workspace.create_request(args.folder, args.name, args.method)
    if args.url:
        config = workspace.request_config(summary.id)
        config.url = args.url
        workspace.save_request_config(summary.id, config)
    print(f"created {summary.method} {summary.name}  [{summary.id}]")
    return 0


def cmd_requests_rename(args):
    workspace = open_workspace()
    workspace.rename_request(args.request, args.name)
    print(f"renamed {args.request} -> {args.name}")
    return 0


def cmd_requests_move(args):
    workspace = open_workspace()
    workspace.move_request(args.request, args.folder)
    print(f"moved {args.request} -> {args.folder}")
    return 0


def cmd_requests_duplicate(args):
    workspace = open_workspace()
    copy = workspace.duplicate_request(args.request)
    print(f"duplicated {args.request} -> {copy.name}  [{copy.id}]")
    return 0


def cmd_requests_delete(args):
    workspace = open_workspace()
    summary = workspace.request(args.request)
    if not args.yes and not interactive_confirm(f"Delete request \"{summary.name}\"?", default=False):
        print("Aborted", file=sys.stderr)
        return 1
    workspace.delete_request(summary.id)
    print(f"deleted {summary.name}  [{summary.id}]")
    return 0


def cmd_requests_show(args):
    workspace = open_workspace()
    request_id = args.request or interactive_pick_request(workspace)
    config = workspace.request_config(request_id)
    print(json.dumps(config.to_json_dict(), ensure_ascii=False, indent=2))
    return 0


def cmd_requests_set(args):
    """Edit the stored definition of a request.

    Only the options given on the command line are changed; headers are merged
    by key so ``--header`` can both add and replace.
    """
    workspace = open_workspace()
    config = workspace.request_config(args.request)

    if args.method:
        config.method = args.method.upper()
    if args.url is not None:
        config.url = args.url
    if args.header:
        config.headers = merge_headers_into(config.headers or [], args.header)
    if args.remove_header:
        drop = {k.lower() for k in args.remove_header}
        config.headers = [h for h in config.headers or [] if h.key.lower() not in drop] or None
    if args.content_type is not None:
        config.content_type = args.content_type or None
    if args.body_file:
        path = Path(args.body_file).expanduser()
        try:
            config.body = path.read_text(encoding="utf-8")
        except OSError as e:
            print(f"Cannot read {path}: {e}", file=sys.stderr)
            return 2
    elif args.body is not None:
        config.body = args.body or None

    if args.clear_form:
        config.form_data = None
    fields = list(config.form_data or [])
    for key, value in args.form or []:
        fields.append(FormDataItem(key=key, value=value, type="text"))
    for key, value in args.form_file or []:
        path = Path(value).expanduser()
        try:
            data = path.read_bytes()
        except OSError as e:
            print(f"Cannot read {path}: {e}", file=sys.stderr)
            return 2
        fields.append(
            FormDataItem(
                key=key,
                value=path.name,
                type="file",
                file_name=path.name,
                file_data=base64.b64encode(data).decode("ascii"),
            )
        )
    if fields:
        config.form_data = fields

    workspace.save_request_config(args.request, config)
    print(f"saved {config.method} {config.name}  [{args.request}]")
    return 0
