"""Command handlers for restlab CLI."""

from .config_cmd import cmd_config_set, cmd_config_info
from .store import store_info, store_clear
from .export import cmd_export
from .import_cmd import cmd_import
from .folders import (
    cmd_folders_list,
    cmd_folders_create,
    cmd_folders_rename,
    cmd_folders_move,
    cmd_folders_duplicate,
    cmd_folders_delete,
    cmd_folders_config,
)
from .requests import (
    cmd_requests_create,
    cmd_requests_rename,
    cmd_requests_move,
    cmd_requests_duplicate,
    cmd_requests_delete,
    cmd_requests_show,
    cmd_requests_set,
    parse_form_field,
)
from .send import cmd_send, cmd_curl, cmd_run

__all__ = [
    "cmd_config_set",
    "cmd_config_info",
    "store_info",
    "store_clear",
    "cmd_export",
    "cmd_import",
    "cmd_folders_list",
    "cmd_folders_create",
    "cmd_folders_rename",
    "cmd_folders_move",
    "cmd_folders_duplicate",
    "cmd_folders_delete",
    "cmd_folders_config",
    "cmd_requests_create",
    "cmd_requests_rename",
    "cmd_requests_move",
    "cmd_requests_duplicate",
    "cmd_requests_delete",
    "cmd_requests_show",
    "cmd_requests_set",
    "parse_form_field",
    "cmd_send",
    "cmd_curl",
    "cmd_run",
]
