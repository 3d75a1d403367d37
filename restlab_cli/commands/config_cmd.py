"""Configuration commands."""

from __future__ import annotations

import json

from ..core import CONFIG_PATH, get_store_path, get_timeout_ms, load_config, save_config


def cmd_config_set(args):
    save_config(args.store, args.timeout_ms)


def cmd_config_info(_args):
    info = {
        "config_file": str(CONFIG_PATH),
        "store_path": str(get_store_path()),
        "timeout_ms": get_timeout_ms(),
        "raw": load_config(),
    }
    print(json.dumps(info, ensure_ascii=False, indent=2))
