"""Utility functions for restlab CLI."""

from __future__ import annotations

import re
from typing import Any, Dict, List

from tqdm import tqdm

from .models import Folder, Header

__all__ = [
    "format_rows",
    "safe_name",
    "walk_with_depth",
    "parse_header",
    "tqdm",
]


def format_rows(rows: List[Dict[str, Any]], fields: List[str]) -> None:
    if not rows:
        print("(no data)")
        return
    widths = [max(len(str(r.get(f, ""))) for r in rows + [dict(zip(fields, fields))]) for f in fields]
    header = " | ".join(f.ljust(w) for f, w in zip(fields, widths))
    sep = "-+-".join("-" * w for w in widths)
    print(header)
    print(sep)
    for r in rows:
        print(" | ".join(str(r.get(f, "")).ljust(w) for f, w in zip(fields, widths)))


def safe_name(name: str, maxlen: int = 120) -> str:
    """Return a filesystem-safe representation of *name*."""
    name = (name or "").strip()
    name = re.sub(r"[\\/:*?\"<>|]", "_", name)
    name = re.sub(r"\s+", " ", name)
    if len(name) > maxlen:
        name = name[:maxlen].rstrip()
    return name or "untitled"


def walk_with_depth(folders: List[Folder], depth: int = 0):
    """Yield ``(depth, folder)`` pairs for a forest, depth first."""
    for folder in folders:
        yield depth, folder
        yield from walk_with_depth(folder.subfolders, depth + 1)


def parse_header(text: str) -> Header:
    """Parse ``"Key: value"`` (or ``"Key=value"``) into a :class:`Header`."""
    for sep in (":", "="):
        if sep in text:
            key, value = text.split(sep, 1)
            return Header(key=key.strip(), value=value.strip())
    raise ValueError(f"Invalid header {text!r}, expected 'Key: value'")
