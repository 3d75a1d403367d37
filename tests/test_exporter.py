import json
import pathlib
import sys

import pytest

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))
from restlab_cli.core.api import export_collection, import_collection
from restlab_cli.core.errors import ExportError
from restlab_cli.core.models import FolderConfig, Header, RequestConfig
from restlab_cli.core.store import MemoryStore
from restlab_cli.core.tree import Workspace


def _sample_workspace():
    ws = Workspace(MemoryStore())
    root = ws.create_folder("Shop")
    ws.set_folder_config(
        root.id, FolderConfig(base_url="https://shop.io", headers=[Header(key="Accept", value="application/json")])
    )
    orders = ws.create_folder("Orders", root.id)
    items = ws.create_folder("Items", orders.id)
    ws.set_folder_config(items.id, FolderConfig(headers=[Header(key="X-Items", value="1")]))

    ping = ws.create_request(root.id, "Ping")
    ws.save_request_config(ping.id, RequestConfig(method="GET", url="/ping"))
    create = ws.create_request(orders.id, "Create order", "POST")
    ws.save_request_config(
        create.id,
        RequestConfig(
            method="POST",
            url="/orders",
            headers=[Header(key="X-Req", value="r")],
            body='{"qty": 1}',
            content_type="application/json",
        ),
    )
    xml = ws.create_request(items.id, "Put xml", "PUT")
    ws.save_request_config(xml.id, RequestConfig(method="PUT", url="/items", body="<i/>", content_type="application/xml"))
    return ws, root


def _shape(folder, ws_requests):
    return (
        folder.name,
        [(r.name, r.method, ws_requests(r)) for r in folder.requests],
        [_shape(sub, ws_requests) for sub in folder.subfolders],
    )


def test_native_round_trip_is_isomorphic():
    ws, root = _sample_workspace()
    text = export_collection(ws.store, root.id, "native")
    result = import_collection(text, "native")

    imported = Workspace(MemoryStore())
    imported.merge_import(result)
    new_root = imported.roots[0]

    def original_url(r):
        return ws.request_config(r.id).url

    def imported_url(r):
        return imported.request_config(r.id).url

    assert _shape(new_root, imported_url) == _shape(root, original_url)
    assert new_root.id != root.id
    assert imported.resolve(new_root.subfolders[0].subfolders[0].id) == ws.resolve(
        root.subfolders[0].subfolders[0].id
    )


def test_native_document_shape():
    ws, root = _sample_workspace()
    doc = json.loads(export_collection(ws.store, root.id, "native"))
    assert doc["version"] == "1.0.0"
    assert doc["type"] == "restlab-collection"
    assert doc["exportedAt"].endswith("Z")
    assert doc["folder"]["name"] == "Shop"
    assert doc["folder"]["subfolders"][0]["parentId"] == root.id
    assert len(doc["folderConfigs"]) == 2
    assert len(doc["requestConfigs"]) == 3
    assert doc["folderConfigs"][root.id]["baseUrl"] == "https://shop.io"


def test_postman_export():
    ws, root = _sample_workspace()
    doc = json.loads(export_collection(ws.store, root.id, "postman"))
    assert doc["info"]["name"] == "Shop"
    assert doc["info"]["schema"].endswith("v2.1.0/collection.json")
    assert doc["variable"] == [{"key": "baseUrl", "value": "https://shop.io", "type": "string"}]

    orders, ping = doc["item"]
    assert orders["name"] == "Orders"
    assert ping == {"name": "Ping", "request": {"method": "GET", "header": [], "url": {"raw": "/ping"}}}

    items_folder, create = orders["item"]
    assert create["request"]["header"] == [{"key": "X-Req", "value": "r", "type": "text"}]
    assert create["request"]["body"]["raw"] == '{"qty": 1}'
    assert create["request"]["body"]["options"]["raw"]["language"] == "json"
    assert items_folder["item"][0]["request"]["body"]["options"]["raw"]["language"] == "xml"


def test_postman_export_reimports_with_base_url():
    ws, root = _sample_workspace()
    result = import_collection(export_collection(ws.store, root.id, "postman"))
    new_root = result.folders[0]
    assert result.folder_configs[new_root.id].base_url == "https://shop.io"
    names = {cfg.name: cfg for cfg in result.requests.values()}
    assert names["Ping"].url == "/ping"
    assert names["Create order"].content_type == "application/json"


def test_thunder_export():
    ws, root = _sample_workspace()
    doc = json.loads(export_collection(ws.store, root.id, "thunder"))
    assert doc["collectionName"] == "Shop"
    assert doc["requests"] == [{"name": "Ping", "method": "GET", "url": "/ping"}]
    orders = doc["folders"][0]
    create = orders["requests"][0]
    assert create["headers"] == [{"name": "X-Req", "value": "r"}]
    assert create["body"] == {"type": "application/json", "raw": '{"qty": 1}'}
    assert orders["folders"][0]["name"] == "Items"


def test_request_without_stored_config_uses_tree_method():
    ws = Workspace(MemoryStore())
    root = ws.create_folder("R")
    req = ws.create_request(root.id, "bare", "DELETE")
    ws.store.delete(f"restlab.request.{req.id}")
    doc = json.loads(export_collection(ws.store, root.id, "thunder"))
    assert doc["requests"] == [{"name": "bare", "method": "DELETE", "url": ""}]


def test_export_errors():
    ws, root = _sample_workspace()
    with pytest.raises(ExportError):
        export_collection(ws.store, "folder-missing", "native")
    with pytest.raises(ExportError):
        export_collection(ws.store, root.id, "insomnia")
