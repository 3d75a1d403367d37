"""Canonical collection model.

Every entity is a pydantic model whose Python attributes are snake_case and
whose JSON form is camelCase, so the same classes serialize straight into the
native wire format and into the store.
"""

from __future__ import annotations

import time
import uuid
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def new_id(prefix: str) -> str:
    """Return a fresh ``<prefix>-<uuid4>`` identifier."""
    return f"{prefix}-{uuid.uuid4().hex}"


def now_ms() -> int:
    return int(time.time() * 1000)


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump to the camelCase dict used on the wire and in the store."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Header(_Model):
    key: str = ""
    value: str = ""


class FormDataItem(_Model):
    key: str = ""
    value: str = ""
    type: Literal["text", "file"] = "text"
    file_name: Optional[str] = None
    file_data: Optional[str] = None  # base64


class FolderConfig(_Model):
    base_url: Optional[str] = None
    headers: Optional[List[Header]] = None


class RequestSummary(_Model):
    """Request node as it appears in the folder tree."""

    id: str
    name: str
    folder_id: str
    method: str = "GET"


class RequestConfig(_Model):
    """Full request definition kept in the request side table."""

    id: Optional[str] = None
    name: Optional[str] = None
    folder_id: Optional[str] = None
    method: str = "GET"
    url: str = ""
    headers: Optional[List[Header]] = None
    body: Optional[str] = None
    content_type: Optional[str] = None
    form_data: Optional[List[FormDataItem]] = None


class Folder(_Model):
    id: str
    name: str
    created_at: int = Field(default_factory=now_ms)
    parent_id: Optional[str] = None
    requests: List[RequestSummary] = Field(default_factory=list)
    subfolders: List["Folder"] = Field(default_factory=list)

    def walk(self):
        """Yield this folder and every descendant, depth first."""
        yield self
        for sub in self.subfolders:
            yield from sub.walk()


Folder.model_rebuild()


class ExecutableRequest(_Model):
    """Fully merged request ready to hand to the executor."""

    method: str
    url: str
    headers: List[Header] = Field(default_factory=list)
    body: Optional[str] = None
    form_data: Optional[List[FormDataItem]] = None


class ResponseData(_Model):
    status: int
    status_text: str
    headers: Dict[str, str] = Field(default_factory=dict)
    data: str = ""
    time: int = 0
    size: int = 0


class ImportResult(_Model):
    folders: List[Folder] = Field(default_factory=list)
    requests: Dict[str, RequestConfig] = Field(default_factory=dict)
    folder_configs: Dict[str, FolderConfig] = Field(default_factory=dict)
