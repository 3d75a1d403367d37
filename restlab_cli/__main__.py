"""Command line entry point for restlab CLI."""

from __future__ import annotations

import argparse
import sys

from restlab_cli.core import DEFAULT_STORE_PATH, DEFAULT_TIMEOUT_MS, RestLabError, parse_header
from restlab_cli.commands import (
    cmd_config_set,
    cmd_config_info,
    store_info,
    store_clear,
    cmd_export,
    cmd_import,
    cmd_folders_list,
    cmd_folders_create,
    cmd_folders_rename,
    cmd_folders_move,
    cmd_folders_duplicate,
    cmd_folders_delete,
    cmd_folders_config,
    cmd_requests_create,
    cmd_requests_rename,
    cmd_requests_move,
    cmd_requests_duplicate,
    cmd_requests_delete,
    cmd_requests_show,
    cmd_requests_set,
    parse_form_field,
    cmd_send,
    cmd_curl,
    cmd_run,
)

FORMATS = ["native", "postman", "thunder"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="restlab", description="RESTLab API collections CLI")
    sub = parser.add_subparsers(dest="cmd")

    # config
    p_config = sub.add_parser("config", help="Configuration")
    sub_config = p_config.add_subparsers(dest="config_cmd")

    p_config_set = sub_config.add_parser("set", help="Save store path and timeout to ~/.restlab.json")
    p_config_set.add_argument("--store", help=f"Store file (default: {DEFAULT_STORE_PATH})")
    p_config_set.add_argument("--timeout-ms", type=int, help=f"Request timeout (default: {DEFAULT_TIMEOUT_MS})")
    p_config_set.set_defaults(func=cmd_config_set)

    p_config_info = sub_config.add_parser("info", help="Show effective configuration")
    p_config_info.set_defaults(func=cmd_config_info)

    # store utils
    p_store = sub.add_parser("store", help="Store utilities")
    sub_store = p_store.add_subparsers(dest="store_cmd")
    p_store_info = sub_store.add_parser("info", help="Show store location and summary")
    p_store_info.set_defaults(func=store_info)
    p_store_clear = sub_store.add_parser("clear", help="Delete store file")
    p_store_clear.set_defaults(func=store_clear)

    # import / export
    p_imp = sub.add_parser("import", help="Import a RESTLab, Postman or Thunder Client collection")
    p_imp.add_argument("file", help="Collection JSON file")
    p_imp.add_argument("--format", choices=FORMATS, help="Skip auto-detection and parse as this format")
    p_imp.set_defaults(func=cmd_import)

    p_exp = sub.add_parser("export", help="Export a folder as a collection file")
    p_exp.add_argument("--folder", help="Folder id (interactive picker when omitted)")
    p_exp.add_argument("--format", choices=FORMATS, default="native", help="Output schema")
    p_exp.add_argument("--out", help="Output file (default: <folder name>.<format>.json)")
    p_exp.set_defaults(func=cmd_export)

    # folders
    p_folders = sub.add_parser("folders", help="Manage folders")
    sub_folders = p_folders.add_subparsers(dest="folders_cmd")

    p_f_list = sub_folders.add_parser("list", help="Show the folder tree")
    p_f_list.add_argument("--folder", help="Only show this subtree")
    p_f_list.add_argument("--requests", action="store_true", help="Include requests")
    p_f_list.set_defaults(func=cmd_folders_list)

    p_f_create = sub_folders.add_parser("create", help="Create a folder")
    p_f_create.add_argument("name")
    p_f_create.add_argument("--parent", help="Parent folder id (default: new collection)")
    p_f_create.set_defaults(func=cmd_folders_create)

    p_f_rename = sub_folders.add_parser("rename", help="Rename a folder")
    p_f_rename.add_argument("folder")
    p_f_rename.add_argument("name")
    p_f_rename.set_defaults(func=cmd_folders_rename)

    p_f_move = sub_folders.add_parser("move", help="Move a folder")
    p_f_move.add_argument("folder")
    p_f_move.add_argument("--parent", help="New parent folder id (default: top level)")
    p_f_move.set_defaults(func=cmd_folders_move)

    p_f_dup = sub_folders.add_parser("duplicate", help="Duplicate a folder with its contents")
    p_f_dup.add_argument("folder")
    p_f_dup.set_defaults(func=cmd_folders_duplicate)

    p_f_delete = sub_folders.add_parser("delete", help="Delete a folder with its contents")
    p_f_delete.add_argument("folder")
    p_f_delete.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    p_f_delete.set_defaults(func=cmd_folders_delete)

    p_f_config = sub_folders.add_parser("config", help="Show or edit folder settings")
    p_f_config.add_argument("folder", nargs="?")
    p_f_config.add_argument("--base-url", help="Set base URL (empty string clears it)")
    p_f_config.add_argument("--header", action="append", type=parse_header, help="'Key: value', repeatable")
    p_f_config.add_argument("--remove-header", action="append", metavar="KEY")
    p_f_config.add_argument("--json", action="store_true", help="Print own/inherited/effective as JSON")
    p_f_config.set_defaults(func=cmd_folders_config)

    # requests
    p_requests = sub.add_parser("requests", help="Manage requests")
    sub_requests = p_requests.add_subparsers(dest="requests_cmd")

    p_r_create = sub_requests.add_parser("create", help="Create a request")
    p_r_create.add_argument("folder")
    p_r_create.add_argument("name")
    p_r_create.add_argument("--method", default="GET")
    p_r_create.add_argument("--url")
    p_r_create.set_defaults(func=cmd_requests_create)

    p_r_rename = sub_requests.add_parser("rename", help="Rename a request")
    p_r_rename.add_argument("request")
    p_r_rename.add_argument("name")
    p_r_rename.set_defaults(func=cmd_requests_rename)

    p_r_move = sub_requests.add_parser("move", help="Move a request to another folder")
    p_r_move.add_argument("request")
    p_r_move.add_argument("folder")
    p_r_move.set_defaults(func=cmd_requests_move)

    p_r_dup = sub_requests.add_parser("duplicate", help="Duplicate a request")
    p_r_dup.add_argument("request")
    p_r_dup.set_defaults(func=cmd_requests_duplicate)

    p_r_delete = sub_requests.add_parser("delete", help="Delete a request")
    p_r_delete.add_argument("request")
    p_r_delete.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    p_r_delete.set_defaults(func=cmd_requests_delete)

    p_r_show = sub_requests.add_parser("show", help="Print the stored request definition")
    p_r_show.add_argument("request", nargs="?")
    p_r_show.set_defaults(func=cmd_requests_show)

    p_r_set = sub_requests.add_parser("set", help="Edit a request definition")
    p_r_set.add_argument("request")
    p_r_set.add_argument("--method")
    p_r_set.add_argument("--url")
    p_r_set.add_argument("--header", action="append", type=parse_header, help="'Key: value', repeatable")
    p_r_set.add_argument("--remove-header", action="append", metavar="KEY")
    p_r_set.add_argument("--content-type", help="Body content type (empty string clears it)")
    body = p_r_set.add_mutually_exclusive_group()
    body.add_argument("--body", help="Raw body text; lines starting with // are not sent")
    body.add_argument("--body-file", help="Read raw body from file")
    p_r_set.add_argument("--form", action="append", type=parse_form_field, metavar="KEY=VALUE")
    p_r_set.add_argument("--form-file", action="append", type=parse_form_field, metavar="KEY=PATH")
    p_r_set.add_argument("--clear-form", action="store_true", help="Drop existing form fields first")
    p_r_set.set_defaults(func=cmd_requests_set)

    # execution
    p_send = sub.add_parser("send", help="Send a request")
    p_send.add_argument("request", nargs="?")
    p_send.add_argument("--timeout-ms", type=int)
    p_send.add_argument("-i", "--include-headers", action="store_true", help="Print response headers")
    p_send.set_defaults(func=cmd_send)

    p_curl = sub.add_parser("curl", help="Print a request as a curl command")
    p_curl.add_argument("request", nargs="?")
    p_curl.set_defaults(func=cmd_curl)

    p_run = sub.add_parser("run", help="Send every request in a folder")
    p_run.add_argument("folder")
    p_run.add_argument("-r", "--recursive", action="store_true", help="Include subfolders")
    p_run.add_argument("--timeout-ms", type=int)
    p_run.set_defaults(func=cmd_run)

    # sub-command groups that only print help when called bare
    parser.groups = {
        "config": (p_config, "config_cmd"),
        "store": (p_store, "store_cmd"),
        "folders": (p_folders, "folders_cmd"),
        "requests": (p_requests, "requests_cmd"),
    }
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return 0
    if args.cmd in parser.groups:
        group, attr = parser.groups[args.cmd]
        if not getattr(args, attr, None):
            group.print_help()
            return 0
    try:
        return args.func(args) or 0
    except RestLabError as e:
        print(str(e), file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
