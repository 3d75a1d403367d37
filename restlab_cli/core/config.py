"""Configuration helpers for restlab CLI."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

CONFIG_PATH = Path(os.path.expanduser("~")) / ".restlab.json"
# Store file used when neither the config nor the environment name one
DEFAULT_STORE_PATH = Path(os.path.expanduser("~")) / ".restlab-store.json"
# Key prefix for every entry the core writes to the store
NAMESPACE = "restlab"
DEFAULT_TIMEOUT_MS = 30000


def load_config() -> Dict[str, Any]:
    """Load configuration from disk and environment."""
    cfg: Dict[str, Any] = {}
    if CONFIG_PATH.exists():
        try:
            cfg = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            cfg = {}
    if os.getenv("RESTLAB_STORE"):
        cfg["store_path"] = os.getenv("RESTLAB_STORE")
    if os.getenv("RESTLAB_TIMEOUT_MS"):
        cfg["timeout_ms"] = os.getenv("RESTLAB_TIMEOUT_MS")
    return cfg


def save_config(store_path: str | None, timeout_ms: int | None) -> None:
    """Persist configuration to CONFIG_PATH."""
    cfg = load_config()
    if store_path is not None:
        cfg["store_path"] = str(Path(store_path).expanduser())
    if timeout_ms is not None:
        cfg["timeout_ms"] = int(timeout_ms)
    CONFIG_PATH.write_text(json.dumps(cfg, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"Saved config to {CONFIG_PATH}")


def get_store_path() -> Path:
    cfg = load_config()
    raw = cfg.get("store_path")
    return Path(raw).expanduser() if raw else DEFAULT_STORE_PATH


def get_timeout_ms() -> int:
    """Return the request timeout, falling back to the default on bad values."""
    raw = load_config().get("timeout_ms")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT_MS
    return value if value > 0 else DEFAULT_TIMEOUT_MS
