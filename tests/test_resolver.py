import pathlib
import sys

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))
from restlab_cli.core.models import FolderConfig, Header
from restlab_cli.core.resolver import ConfigResolver, merge_headers_into


def _resolver(parents, configs):
    return ConfigResolver(parents, lambda fid: configs.get(fid))


def _pairs(cfg):
    return [(h.key, h.value) for h in cfg.headers or []]


CHAIN = {"A": None, "B": "A", "C": "B"}


def test_three_level_header_merge():
    configs = {
        "A": FolderConfig(headers=[Header(key="Z", value="4")]),
        "B": FolderConfig(headers=[Header(key="Y", value="3"), Header(key="X", value="2")]),
        "C": FolderConfig(headers=[Header(key="X", value="1")]),
    }
    resolved = _resolver(CHAIN, configs).resolve("C")
    assert _pairs(resolved) == [("Z", "4"), ("Y", "3"), ("X", "1")]


def test_child_override_keeps_parent_position_and_case():
    merged = merge_headers_into(
        [Header(key="Accept", value="a"), Header(key="X-Token", value="old")],
        [Header(key="x-token", value="new"), Header(key="X-New", value="n")],
    )
    assert [(h.key, h.value) for h in merged] == [("Accept", "a"), ("X-Token", "new"), ("X-New", "n")]


def test_root_returns_own_config_or_empty():
    configs = {"A": FolderConfig(base_url="https://a", headers=[Header(key="K", value="v")])}
    resolver = _resolver({"A": None, "R": None}, configs)
    assert resolver.resolve("A") == configs["A"]
    assert resolver.resolve("R") == FolderConfig()


def test_resolve_is_idempotent_and_does_not_mutate_store():
    configs = {
        "A": FolderConfig(headers=[Header(key="X", value="1")]),
        "B": FolderConfig(headers=[Header(key="X", value="2")]),
    }
    resolver = _resolver({"A": None, "B": "A"}, configs)
    first = resolver.resolve("B")
    second = resolver.resolve("B")
    assert first.model_dump() == second.model_dump()
    first.headers[0].value = "mutated"
    assert configs["A"].headers[0].value == "1"
    assert resolver.resolve("A").headers[0].value == "1"


def test_base_url_precedence():
    configs = {
        "A": FolderConfig(base_url="https://root"),
        "B": FolderConfig(base_url="https://child"),
    }
    resolver = _resolver(CHAIN, configs)
    assert resolver.resolve("B").base_url == "https://child"
    assert resolver.resolve("C").base_url == "https://child"

    configs["B"] = FolderConfig()
    assert resolver.resolve("C").base_url == "https://root"

    del configs["A"]
    assert resolver.resolve("C").base_url is None


def test_resolve_inherited_excludes_own_settings():
    configs = {
        "A": FolderConfig(base_url="https://root"),
        "B": FolderConfig(base_url="https://child"),
    }
    resolver = _resolver(CHAIN, configs)
    assert resolver.resolve_inherited("B").base_url == "https://root"
    assert resolver.resolve_inherited("A") == FolderConfig()
