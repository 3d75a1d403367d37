"""Compose an :class:`ExecutableRequest` from a request and its folder config.

The URL and header helpers here are the single source of truth for both the
executor path and the curl renderer.
"""

from __future__ import annotations

from typing import Iterable, List, Optional
from urllib.parse import quote

from .models import ExecutableRequest, FolderConfig, FormDataItem, Header, RequestConfig

FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART_FORM = "multipart/form-data"
FORM_CONTENT_TYPES = (FORM_URLENCODED, MULTIPART_FORM)
METHODS_WITH_BODY = ("POST", "PUT", "PATCH")

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def encode_pairs(pairs: Iterable[tuple[str, str]]) -> str:
    return "&".join(f"{encode_uri_component(k)}={encode_uri_component(v)}" for k, v in pairs)


def is_form_content_type(content_type: Optional[str]) -> bool:
    return content_type in FORM_CONTENT_TYPES


def has_file_fields(form_data: Optional[List[FormDataItem]]) -> bool:
    return any(item.type == "file" and item.file_data for item in form_data or [])


def form_data_to_body(form_data: Optional[List[FormDataItem]]) -> str:
    """URL-encode the text fields of ``form_data``, skipping blank keys."""
    items = [i for i in form_data or [] if i.key.strip() and i.type != "file"]
    return encode_pairs((i.key, i.value) for i in items)


def strip_comment_lines(body: Optional[str]) -> Optional[str]:
    """Drop every line whose first non-blank characters are ``//``."""
    if not body:
        return body
    return "\n".join(line for line in body.split("\n") if not line.lstrip().startswith("//"))


def merge_url(request: RequestConfig, folder: FolderConfig) -> str:
    return f"{folder.base_url}{request.url}" if folder.base_url else request.url


def merge_headers(request: RequestConfig, folder: FolderConfig) -> List[Header]:
    """Folder headers, then request headers, with Content-Type injected first
    when the request names one and no header already sets it."""
    headers = [h.model_copy() for h in (folder.headers or [])]
    headers += [h.model_copy() for h in (request.headers or [])]
    if request.content_type and not any(h.key.lower() == "content-type" for h in headers):
        headers.insert(0, Header(key="Content-Type", value=request.content_type))
    return headers


def sendable_headers(headers: Iterable[Header]) -> List[Header]:
    """Headers that actually go on the wire: blank keys or values are skipped."""
    return [h for h in headers if h.key and h.value]


def carries_body(method: str) -> bool:
    return (method or "").upper() in METHODS_WITH_BODY


def build_request(request: RequestConfig, folder: FolderConfig) -> ExecutableRequest:
    body: Optional[str] = None
    form_data: Optional[List[FormDataItem]] = None
    if is_form_content_type(request.content_type):
        if has_file_fields(request.form_data):
            # multipart encoding needs a boundary, the executor does it
            form_data = [item.model_copy() for item in request.form_data]
        else:
            body = form_data_to_body(request.form_data)
    else:
        body = strip_comment_lines(request.body or "")
    return ExecutableRequest(
        method=(request.method or "GET").upper(),
        url=merge_url(request, folder),
        headers=merge_headers(request, folder),
        body=body,
        form_data=form_data,
    )
