"""Core utilities for restlab CLI."""

from .config import (
    CONFIG_PATH,
    DEFAULT_STORE_PATH,
    DEFAULT_TIMEOUT_MS,
    NAMESPACE,
    get_store_path,
    get_timeout_ms,
    load_config,
    save_config,
)
from .errors import (
    CollectionImportError,
    ExportError,
    FormatMismatchError,
    NetworkErrorKind,
    ParseError,
    RestLabError,
    TreeError,
    UnknownFormatError,
)
from .models import (
    ExecutableRequest,
    Folder,
    FolderConfig,
    FormDataItem,
    Header,
    ImportResult,
    RequestConfig,
    RequestSummary,
    ResponseData,
)
from .store import JsonStore, MemoryStore, folder_key, request_key
from .tree import Workspace
from .resolver import ConfigResolver
from .builder import build_request
from .http import execute, execute_sync
from .curl import format_curl
from .api import export_collection, import_collection, send_request, to_curl
from .utils import format_rows, parse_header, safe_name, tqdm, walk_with_depth
from .interactive import interactive_confirm, interactive_pick_folder, interactive_pick_request


def open_workspace() -> Workspace:
    """Workspace over the configured store file."""
    return Workspace(JsonStore(get_store_path()))


__all__ = [
    "CONFIG_PATH", "DEFAULT_STORE_PATH", "DEFAULT_TIMEOUT_MS", "NAMESPACE",
    "get_store_path", "get_timeout_ms", "load_config", "save_config",
    "CollectionImportError", "ExportError", "FormatMismatchError", "NetworkErrorKind",
    "ParseError", "RestLabError", "TreeError", "UnknownFormatError",
    "ExecutableRequest", "Folder", "FolderConfig", "FormDataItem", "Header",
    "ImportResult", "RequestConfig", "RequestSummary", "ResponseData",
    "JsonStore", "MemoryStore", "folder_key", "request_key",
    "Workspace", "ConfigResolver", "open_workspace",
    "build_request", "execute", "execute_sync", "format_curl",
    "export_collection", "import_collection", "send_request", "to_curl",
    "format_rows", "parse_header", "safe_name", "tqdm", "walk_with_depth",
    "interactive_confirm", "interactive_pick_folder", "interactive_pick_request",
]
