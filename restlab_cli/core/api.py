"""Entry points used by the command layer and by embedding hosts."""

from __future__ import annotations

import asyncio
from typing import Optional

import httpx

from .builder import build_request
from .config import DEFAULT_TIMEOUT_MS
from .curl import format_curl
from .errors import ExportError, TreeError
from .exporter import export_folder
from .http import execute
from .importer import parse_collection
from .models import FolderConfig, ImportResult, RequestConfig, ResponseData
from .tree import Workspace


def import_collection(raw_text: str, format_hint: Optional[str] = None) -> ImportResult:
    return parse_collection(raw_text, format_hint)


def export_collection(store, folder_id: str, fmt: str) -> str:
    workspace = Workspace(store)
    try:
        folder = workspace.folder(folder_id)
    except TreeError as e:
        raise ExportError(str(e)) from None
    return export_folder(folder, store, fmt)


async def send_request(
    request: RequestConfig,
    resolved: FolderConfig,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    *,
    cancel: Optional[asyncio.Event] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ResponseData:
    return await execute(build_request(request, resolved), timeout_ms, cancel=cancel, transport=transport)


def to_curl(request: RequestConfig, resolved: FolderConfig) -> str:
    return format_curl(request, resolved)
