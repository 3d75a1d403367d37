"""Effective folder configuration by inheritance."""

from __future__ import annotations

from typing import Callable, List, Mapping, Optional

from .models import FolderConfig, Header


def merge_headers_into(base: List[Header], overrides: List[Header]) -> List[Header]:
    """Return ``base`` with ``overrides`` applied.

    A header whose key already exists (case-insensitive) replaces the value in
    place; any other header is appended.  Neither input list is modified.
    """
    merged = [h.model_copy() for h in base]
    for header in overrides:
        key = header.key.lower()
        for i, existing in enumerate(merged):
            if existing.key.lower() == key:
                merged[i] = Header(key=existing.key, value=header.value)
                break
        else:
            merged.append(header.model_copy())
    return merged


def merge_folder_configs(parent: FolderConfig, own: FolderConfig) -> FolderConfig:
    base_url = own.base_url if own.base_url is not None else parent.base_url
    headers = merge_headers_into(parent.headers or [], own.headers or [])
    return FolderConfig(base_url=base_url, headers=headers)


class ConfigResolver:
    """Compute a folder's effective configuration.

    ``parent_of`` maps folder id to parent id (``None`` for roots) and
    ``load_config`` returns the folder's own stored config or ``None``.
    Nothing is cached, so every call reflects the current snapshot.
    """

    def __init__(
        self,
        parent_of: Mapping[str, Optional[str]],
        load_config: Callable[[str], Optional[FolderConfig]],
    ):
        self._parent_of = parent_of
        self._load_config = load_config

    def own_config(self, folder_id: str) -> FolderConfig:
        cfg = self._load_config(folder_id)
        return cfg.model_copy(deep=True) if cfg is not None else FolderConfig()

    def resolve(self, folder_id: str) -> FolderConfig:
        parent_id = self._parent_of.get(folder_id)
        own = self.own_config(folder_id)
        if not parent_id:
            return own
        return merge_folder_configs(self.resolve(parent_id), own)

    def resolve_inherited(self, folder_id: str) -> FolderConfig:
        """Return what ``folder_id`` inherits, excluding its own settings."""
        parent_id = self._parent_of.get(folder_id)
        return self.resolve(parent_id) if parent_id else FolderConfig()


def resolve_folder_config(
    folder_id: str,
    parent_of: Mapping[str, Optional[str]],
    load_config: Callable[[str], Optional[FolderConfig]],
) -> FolderConfig:
    return ConfigResolver(parent_of, load_config).resolve(folder_id)
