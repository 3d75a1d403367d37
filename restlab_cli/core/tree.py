"""Folder forest management on top of the store.

The forest is persisted in its nested form under ``restlab.folders``.
:class:`FolderIndex` flattens it into id-indexed maps with parent pointers so
lookups, inheritance walks and cycle checks do not have to search the tree.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .errors import TreeError
from .models import (
    Folder,
    FolderConfig,
    ImportResult,
    RequestConfig,
    RequestSummary,
    new_id,
    now_ms,
)
from .resolver import ConfigResolver
from .store import FOLDERS_KEY, folder_key, request_key

COPY_SUFFIX = " (copy)"


class FolderIndex:
    def __init__(self, roots: List[Folder]):
        self.roots = roots
        self.folders: Dict[str, Folder] = {}
        self.parent_of: Dict[str, Optional[str]] = {}
        self.requests: Dict[str, RequestSummary] = {}
        self.request_owner: Dict[str, str] = {}
        for root in roots:
            self._add(root, None)

    def _add(self, folder: Folder, parent_id: Optional[str]) -> None:
        self.folders[folder.id] = folder
        self.parent_of[folder.id] = parent_id
        for req in folder.requests:
            self.requests[req.id] = req
            self.request_owner[req.id] = folder.id
        for sub in folder.subfolders:
            self._add(sub, folder.id)

    def ancestors(self, folder_id: str) -> List[str]:
        """Ids from the parent of ``folder_id`` up to its root."""
        chain = []
        cur = self.parent_of.get(folder_id)
        while cur:
            chain.append(cur)
            cur = self.parent_of.get(cur)
        return chain

    def path(self, folder_id: str) -> str:
        names = [self.folders[fid].name for fid in reversed(self.ancestors(folder_id))]
        names.append(self.folders[folder_id].name)
        return " / ".join(names)

    def siblings(self, folder_id: str) -> List[Folder]:
        parent_id = self.parent_of.get(folder_id)
        return self.folders[parent_id].subfolders if parent_id else self.roots


class Workspace:
    """Collections stored in ``store`` plus the operations that edit them."""

    def __init__(self, store):
        self.store = store
        raw = store.get(FOLDERS_KEY) or []
        self.index = FolderIndex([Folder.model_validate(f) for f in raw])

    @property
    def roots(self) -> List[Folder]:
        return self.index.roots

    def _save(self) -> None:
        self.store.update(FOLDERS_KEY, [f.to_json_dict() for f in self.roots])
        self.index = FolderIndex(self.roots)

    # --- lookups ----------------------------------------------------------

    def folder(self, folder_id: str) -> Folder:
        try:
            return self.index.folders[folder_id]
        except KeyError:
            raise TreeError(f"Folder not found: {folder_id}") from None

    def request(self, request_id: str) -> RequestSummary:
        try:
            return self.index.requests[request_id]
        except KeyError:
            raise TreeError(f"Request not found: {request_id}") from None

    def folder_config(self, folder_id: str) -> Optional[FolderConfig]:
        raw = self.store.get(folder_key(folder_id))
        return FolderConfig.model_validate(raw) if raw else None

    def set_folder_config(self, folder_id: str, config: FolderConfig) -> None:
        self.folder(folder_id)
        self.store.update(folder_key(folder_id), config.to_json_dict())

    def request_config(self, request_id: str) -> RequestConfig:
        """Stored request definition, or defaults built from the tree node."""
        summary = self.request(request_id)
        raw = self.store.get(request_key(request_id))
        config = RequestConfig.model_validate(raw) if raw else RequestConfig(method=summary.method)
        return config.model_copy(
            update={"id": summary.id, "name": summary.name, "folder_id": summary.folder_id}
        )

    def save_request_config(self, request_id: str, config: RequestConfig) -> None:
        summary = self.request(request_id)
        config = config.model_copy(
            update={"id": summary.id, "name": summary.name, "folder_id": summary.folder_id}
        )
        self.store.update(request_key(request_id), config.to_json_dict())
        if config.method and config.method != summary.method:
            summary.method = config.method
            self._save()

    def resolver(self) -> ConfigResolver:
        return ConfigResolver(self.index.parent_of, self.folder_config)

    def resolve(self, folder_id: str) -> FolderConfig:
        self.folder(folder_id)
        return self.resolver().resolve(folder_id)

    # --- creation ---------------------------------------------------------

    def create_folder(self, name: str, parent_id: Optional[str] = None) -> Folder:
        folder = Folder(id=new_id("folder"), name=name, parent_id=parent_id)
        if parent_id:
            self.folder(parent_id).subfolders.append(folder)
        else:
            self.roots.append(folder)
        self._save()
        return folder

    def create_request(self, folder_id: str, name: str, method: str = "GET") -> RequestSummary:
        folder = self.folder(folder_id)
        summary = RequestSummary(id=new_id("request"), name=name, folder_id=folder_id, method=method.upper())
        folder.requests.append(summary)
        self._save()
        self.store.update(
            request_key(summary.id),
            RequestConfig(id=summary.id, name=name, folder_id=folder_id, method=summary.method).to_json_dict(),
        )
        return summary

    def merge_import(self, result: ImportResult) -> List[Folder]:
        """Add imported roots to the forest and write their side tables."""
        for folder_id, config in result.folder_configs.items():
            self.store.update(folder_key(folder_id), config.to_json_dict())
        for request_id, config in result.requests.items():
            self.store.update(request_key(request_id), config.to_json_dict())
        self.roots.extend(result.folders)
        self._save()
        return result.folders

    # --- rename -----------------------------------------------------------

    def rename_folder(self, folder_id: str, name: str) -> None:
        self.folder(folder_id).name = name
        self._save()

    def rename_request(self, request_id: str, name: str) -> None:
        self.request(request_id).name = name
        self._save()
        raw = self.store.get(request_key(request_id))
        if raw:
            self.store.update(request_key(request_id), {**raw, "name": name})

    # --- move -------------------------------------------------------------

    def move_folder(self, folder_id: str, target_parent_id: Optional[str]) -> None:
        folder = self.folder(folder_id)
        if target_parent_id is not None:
            target = self.folder(target_parent_id)
            if target_parent_id == folder_id or folder_id in self.index.ancestors(target_parent_id):
                raise TreeError("Cannot move a folder into itself or one of its subfolders")
        if self.index.parent_of.get(folder_id) == target_parent_id:
            return
        self.index.siblings(folder_id).remove(folder)
        folder.parent_id = target_parent_id
        if target_parent_id is None:
            self.roots.append(folder)
        else:
            target.subfolders.append(folder)
        self._save()

    def move_request(self, request_id: str, target_folder_id: str) -> None:
        summary = self.request(request_id)
        target = self.folder(target_folder_id)
        source = self.folder(self.index.request_owner[request_id])
        if source.id == target.id:
            return
        source.requests.remove(summary)
        summary.folder_id = target.id
        target.requests.append(summary)
        self._save()
        raw = self.store.get(request_key(request_id))
        if raw:
            self.store.update(request_key(request_id), {**raw, "folderId": target.id})

    # --- duplicate --------------------------------------------------------

    def _copy_request(self, summary: RequestSummary, folder_id: str, name: str) -> RequestSummary:
        copy = RequestSummary(id=new_id("request"), name=name, folder_id=folder_id, method=summary.method)
        raw = self.store.get(request_key(summary.id))
        if raw:
            self.store.update(
                request_key(copy.id), {**raw, "id": copy.id, "name": name, "folderId": folder_id}
            )
        return copy

    def _copy_folder(self, folder: Folder, parent_id: Optional[str], name: str) -> Folder:
        copy = Folder(id=new_id("folder"), name=name, created_at=now_ms(), parent_id=parent_id)
        raw = self.store.get(folder_key(folder.id))
        if raw:
            self.store.update(folder_key(copy.id), raw)
        copy.requests = [self._copy_request(r, copy.id, r.name) for r in folder.requests]
        copy.subfolders = [self._copy_folder(s, copy.id, s.name) for s in folder.subfolders]
        return copy

    def duplicate_folder(self, folder_id: str) -> Folder:
        folder = self.folder(folder_id)
        siblings = self.index.siblings(folder_id)
        copy = self._copy_folder(folder, folder.parent_id, folder.name + COPY_SUFFIX)
        siblings.insert(siblings.index(folder) + 1, copy)
        self._save()
        return copy

    def duplicate_request(self, request_id: str) -> RequestSummary:
        summary = self.request(request_id)
        folder = self.folder(self.index.request_owner[request_id])
        copy = self._copy_request(summary, folder.id, summary.name + COPY_SUFFIX)
        folder.requests.insert(folder.requests.index(summary) + 1, copy)
        self._save()
        return copy

    # --- delete -----------------------------------------------------------

    def delete_folder(self, folder_id: str) -> None:
        folder = self.folder(folder_id)
        for node in folder.walk():
            self.store.delete(folder_key(node.id))
            for req in node.requests:
                self.store.delete(request_key(req.id))
        self.index.siblings(folder_id).remove(folder)
        self._save()

    def delete_request(self, request_id: str) -> None:
        summary = self.request(request_id)
        self.folder(self.index.request_owner[request_id]).requests.remove(summary)
        self.store.delete(request_key(request_id))
        self._save()
