"""Render a folder subtree into one of the supported collection schemas.

The folder tree holds only request summaries; full request definitions and
folder settings are read from the store side tables.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .errors import ExportError, UnknownFormatError
from .importer import NATIVE_MARKER, DetectedFormat, normalize_hint
from .models import Folder, FolderConfig, RequestConfig
from .store import folder_key, request_key

NATIVE_VERSION = "1.0.0"
POSTMAN_SCHEMA = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"


def _folder_config(store, folder_id: str) -> Optional[FolderConfig]:
    raw = store.get(folder_key(folder_id))
    return FolderConfig.model_validate(raw) if raw else None


def _request_config(store, request_id: str) -> Optional[RequestConfig]:
    raw = store.get(request_key(request_id))
    return RequestConfig.model_validate(raw) if raw else None


def _isoformat_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def export_native(folder: Folder, store) -> Dict[str, Any]:
    folder_configs: Dict[str, Any] = {}
    request_configs: Dict[str, Any] = {}
    for node in folder.walk():
        raw = store.get(folder_key(node.id))
        if raw:
            folder_configs[node.id] = raw
        for req in node.requests:
            raw = store.get(request_key(req.id))
            if raw:
                request_configs[req.id] = raw
    return {
        "version": NATIVE_VERSION,
        "exportedAt": _isoformat_now(),
        "type": NATIVE_MARKER,
        "folder": folder.to_json_dict(),
        "folderConfigs": folder_configs,
        "requestConfigs": request_configs,
    }


def _body_language(content_type: Optional[str]) -> str:
    if content_type in ("application/xml", "xml"):
        return "xml"
    if content_type in ("text/plain", "text"):
        return "text"
    if content_type in ("text/html", "html"):
        return "html"
    return "json"


def _postman_items(folder: Folder, store) -> List[Dict[str, Any]]:
    items: List[Dict[str, Any]] = []
    for sub in folder.subfolders:
        items.append({"name": sub.name, "item": _postman_items(sub, store)})
    for req in folder.requests:
        config = _request_config(store, req.id) or RequestConfig(method=req.method or "GET")
        request: Dict[str, Any] = {
            "method": config.method or "GET",
            "header": [{"key": h.key, "value": h.value, "type": "text"} for h in config.headers or []],
            "url": {"raw": config.url or ""},
        }
        if config.body:
            request["body"] = {
                "mode": "raw",
                "raw": config.body,
                "options": {"raw": {"language": _body_language(config.content_type)}},
            }
        items.append({"name": req.name, "request": request})
    return items


def export_postman(folder: Folder, store) -> Dict[str, Any]:
    config = _folder_config(store, folder.id)
    variables = []
    if config and config.base_url:
        variables.append({"key": "baseUrl", "value": config.base_url, "type": "string"})
    return {
        "info": {"name": folder.name, "schema": POSTMAN_SCHEMA, "_postman_id": folder.id},
        "item": _postman_items(folder, store),
        "variable": variables,
    }


def _thunder_fill(folder: Folder, target: Dict[str, Any], store) -> None:
    for sub in folder.subfolders:
        node: Dict[str, Any] = {"name": sub.name, "folders": [], "requests": []}
        _thunder_fill(sub, node, store)
        target["folders"].append(node)
    for req in folder.requests:
        config = _request_config(store, req.id) or RequestConfig(method=req.method or "GET")
        entry: Dict[str, Any] = {
            "name": req.name,
            "method": config.method or "GET",
            "url": config.url or "",
        }
        if config.headers:
            entry["headers"] = [{"name": h.key, "value": h.value} for h in config.headers]
        if config.body:
            entry["body"] = {"type": config.content_type or "json", "raw": config.body}
        target["requests"].append(entry)


def export_thunder(folder: Folder, store) -> Dict[str, Any]:
    collection: Dict[str, Any] = {"collectionName": folder.name, "folders": [], "requests": []}
    _thunder_fill(folder, collection, store)
    return collection


EXPORTERS = {
    DetectedFormat.NATIVE: export_native,
    DetectedFormat.POSTMAN: export_postman,
    DetectedFormat.THUNDER: export_thunder,
}


def export_folder(folder: Folder, store, fmt: str) -> str:
    """Serialize ``folder`` as ``fmt`` and return pretty-printed JSON."""
    try:
        target = normalize_hint(fmt)
    except UnknownFormatError:
        target = None
    if target is None:
        raise ExportError(f"Unsupported export format: {fmt}")
    return json.dumps(EXPORTERS[target](folder, store), ensure_ascii=False, indent=2)
