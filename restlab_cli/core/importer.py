"""Parse external collection files into fresh model instances.

Three schemas are understood: the native RESTLab export, Postman v2.1 and
Thunder Client.  Detection walks :data:`DETECTORS` in order and the first
matching shape wins.  Every folder and request gets a newly minted id so an
import can always be merged into an existing forest.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from pydantic import ValidationError

from .builder import FORM_URLENCODED, MULTIPART_FORM, encode_pairs
from .errors import FormatMismatchError, ParseError, UnknownFormatError
from .models import (
    Folder,
    FolderConfig,
    Header,
    ImportResult,
    RequestConfig,
    RequestSummary,
    new_id,
)

NATIVE_MARKER = "restlab-collection"
DEFAULT_COLLECTION_NAME = "Imported Collection"
BASE_URL_VARIABLES = ("baseUrl", "base_url", "host")

_PLACEHOLDER_RE = re.compile(r"\{\{[^}]+\}\}")


class DetectedFormat(str, Enum):
    NATIVE = "native"
    POSTMAN = "postman"
    THUNDER = "thunder"
    UNKNOWN = "unknown"


FORMAT_LABELS = {
    DetectedFormat.NATIVE: "RESTLab",
    DetectedFormat.POSTMAN: "Postman",
    DetectedFormat.THUNDER: "Thunder Client",
}

_HINT_ALIASES = {
    "native": DetectedFormat.NATIVE,
    "restlab": DetectedFormat.NATIVE,
    "postman": DetectedFormat.POSTMAN,
    "thunder": DetectedFormat.THUNDER,
    "thunder-client": DetectedFormat.THUNDER,
}


def _new_folder(name: str, parent_id: Optional[str] = None) -> Folder:
    return Folder(id=new_id("folder"), name=name, parent_id=parent_id)


def _add_request(folder: Folder, config: RequestConfig, result: ImportResult) -> None:
    folder.requests.append(
        RequestSummary(id=config.id, name=config.name, folder_id=folder.id, method=config.method)
    )
    result.requests[config.id] = config


def _request_config(
    name: str,
    folder_id: str,
    method: Optional[str],
    url: str,
    headers: List[Header],
    body: str,
    content_type: str,
) -> RequestConfig:
    return RequestConfig(
        id=new_id("request"),
        name=name,
        folder_id=folder_id,
        method=method or "GET",
        url=url,
        headers=headers or None,
        body=body or None,
        content_type=content_type or None,
    )


# --- native ---------------------------------------------------------------


def is_native(obj: Any) -> bool:
    return isinstance(obj, dict) and obj.get("type") == NATIVE_MARKER and "folder" in obj


def parse_native(obj: Dict[str, Any]) -> ImportResult:
    result = ImportResult()
    request_configs = obj.get("requestConfigs") or {}
    folder_configs = obj.get("folderConfigs") or {}

    def remap(node: Dict[str, Any], parent_id: Optional[str]) -> Folder:
        folder = _new_folder(node.get("name") or "", parent_id)
        for req in node.get("requests") or []:
            req_id = new_id("request")
            method = req.get("method") or "GET"
            folder.requests.append(
                RequestSummary(id=req_id, name=req.get("name") or "", folder_id=folder.id, method=method)
            )
            old = request_configs.get(req.get("id"))
            if old:
                config = RequestConfig.model_validate(old)
                result.requests[req_id] = config.model_copy(
                    update={
                        "id": req_id,
                        "name": req.get("name") or "",
                        "folder_id": folder.id,
                        "method": old.get("method") or method,
                        "url": old.get("url") or "",
                    }
                )
        for sub in node.get("subfolders") or []:
            folder.subfolders.append(remap(sub, folder.id))
        old_cfg = folder_configs.get(node.get("id"))
        if old_cfg:
            result.folder_configs[folder.id] = FolderConfig.model_validate(old_cfg)
        return folder

    result.folders.append(remap(obj["folder"], None))
    return result


# --- postman --------------------------------------------------------------


def is_postman(obj: Any) -> bool:
    return isinstance(obj, dict) and "info" in obj and "item" in obj


def _postman_base_url(variables: List[Dict[str, Any]]) -> str:
    for var in variables or []:
        if isinstance(var, dict) and var.get("key") in BASE_URL_VARIABLES:
            return str(var.get("value") or "")
    return ""


def _postman_url(url: Any) -> str:
    if isinstance(url, str):
        return url
    if isinstance(url, dict):
        return url.get("raw") or ""
    return ""


def _postman_request(item: Dict[str, Any], folder_id: str, base_url: str) -> RequestConfig:
    req = item["request"]
    if isinstance(req, str):
        # shorthand form: the request is just its URL
        req = {"url": req}
    url = _postman_url(req.get("url"))
    if base_url and url.startswith(base_url):
        url = url[len(base_url):]
    url = _PLACEHOLDER_RE.sub("", url)

    headers = [
        Header(key=h.get("key") or "", value=h.get("value") or "")
        for h in req.get("header") or []
        if isinstance(h, dict) and not h.get("disabled")
    ]

    body = ""
    content_type = ""
    payload = req.get("body") or {}
    mode = payload.get("mode")
    if mode == "raw":
        body = payload.get("raw") or ""
        ct = next((h.value for h in headers if h.key.lower() == "content-type"), None)
        if ct:
            content_type = ct
        elif body.strip().startswith(("{", "[")):
            content_type = "application/json"
    elif mode == "urlencoded":
        content_type = FORM_URLENCODED
        pairs = payload.get("urlencoded") or []
        body = encode_pairs((p.get("key") or "", p.get("value") or "") for p in pairs)
    elif mode == "formdata":
        # fields are not reconstructed; imported with an empty field list
        content_type = MULTIPART_FORM

    return _request_config(item.get("name") or "", folder_id, req.get("method"), url, headers, body, content_type)


def _postman_items(items: List[Dict[str, Any]], parent: Folder, result: ImportResult, base_url: str) -> None:
    for item in items or []:
        if not isinstance(item, dict):
            continue
        if item.get("item"):
            sub = _new_folder(item.get("name") or "", parent.id)
            parent.subfolders.append(sub)
            _postman_items(item["item"], sub, result, base_url)
        elif item.get("request"):
            _add_request(parent, _postman_request(item, parent.id, base_url), result)


def parse_postman(obj: Dict[str, Any]) -> ImportResult:
    result = ImportResult()
    info = obj.get("info") or {}
    root = _new_folder(info.get("name") or DEFAULT_COLLECTION_NAME)
    base_url = _postman_base_url(obj.get("variable"))
    if base_url:
        result.folder_configs[root.id] = FolderConfig(base_url=base_url)
    _postman_items(obj.get("item"), root, result, base_url)
    result.folders.append(root)
    return result


# --- thunder client -------------------------------------------------------


def is_thunder(obj: Any) -> bool:
    return isinstance(obj, dict) and (
        "collectionName" in obj or "colName" in obj or isinstance(obj.get("requests"), list)
    )


def _thunder_request(req: Dict[str, Any], folder_id: str) -> RequestConfig:
    headers = [
        Header(key=h.get("name") or "", value=h.get("value") or "")
        for h in req.get("headers") or []
        if isinstance(h, dict)
    ]
    body = ""
    content_type = ""
    payload = req.get("body") or {}
    kind = payload.get("type")
    if kind in ("json", "text"):
        body = payload.get("raw") or ""
        content_type = "application/json" if kind == "json" else "text/plain"
    elif kind == "formencoded" and payload.get("form"):
        content_type = FORM_URLENCODED
        body = encode_pairs((p.get("name") or "", p.get("value") or "") for p in payload["form"])
    elif kind == "formdata":
        content_type = MULTIPART_FORM
    return _request_config(
        req.get("name") or "", folder_id, req.get("method"), req.get("url") or "", headers, body, content_type
    )


def _thunder_folder(node: Dict[str, Any], parent: Folder, result: ImportResult) -> None:
    folder = _new_folder(node.get("name") or "", parent.id)
    parent.subfolders.append(folder)
    for req in node.get("requests") or []:
        _add_request(folder, _thunder_request(req, folder.id), result)
    for sub in node.get("folders") or []:
        _thunder_folder(sub, folder, result)


def parse_thunder(obj: Dict[str, Any]) -> ImportResult:
    result = ImportResult()
    root = _new_folder(obj.get("collectionName") or obj.get("colName") or DEFAULT_COLLECTION_NAME)
    for req in obj.get("requests") or []:
        _add_request(root, _thunder_request(req, root.id), result)
    for node in obj.get("folders") or []:
        _thunder_folder(node, root, result)
    result.folders.append(root)
    return result


# --- detection ------------------------------------------------------------


class Detector(NamedTuple):
    format: DetectedFormat
    matches: Callable[[Any], bool]
    parse: Callable[[Dict[str, Any]], ImportResult]


DETECTORS = (
    Detector(DetectedFormat.NATIVE, is_native, parse_native),
    Detector(DetectedFormat.POSTMAN, is_postman, parse_postman),
    Detector(DetectedFormat.THUNDER, is_thunder, parse_thunder),
)


def detect_format(obj: Any) -> DetectedFormat:
    for detector in DETECTORS:
        if detector.matches(obj):
            return detector.format
    return DetectedFormat.UNKNOWN


def normalize_hint(hint: Optional[str]) -> Optional[DetectedFormat]:
    if hint is None or hint == "":
        return None
    try:
        return _HINT_ALIASES[hint.lower()]
    except KeyError:
        raise UnknownFormatError(f"Unsupported import format: {hint}") from None


def parse_collection(text: str, hint: Optional[str] = None) -> ImportResult:
    """Parse ``text`` into an :class:`ImportResult`.

    Raises :class:`ParseError` for invalid JSON, :class:`FormatMismatchError`
    when ``hint`` names a format the data does not match or when a detected
    document holds values of the wrong type, and
    :class:`UnknownFormatError` when auto-detection finds nothing.
    """
    try:
        obj = json.loads(text)
    except ValueError:
        raise ParseError() from None

    wanted = normalize_hint(hint)
    for detector in DETECTORS:
        if wanted is not None and detector.format is not wanted:
            continue
        if detector.matches(obj):
            try:
                return detector.parse(obj)
            except (AttributeError, KeyError, TypeError, ValidationError):
                # right outer shape, wrong values inside
                raise FormatMismatchError(FORMAT_LABELS[detector.format]) from None
        if wanted is not None:
            raise FormatMismatchError(FORMAT_LABELS[wanted])
    raise UnknownFormatError()
