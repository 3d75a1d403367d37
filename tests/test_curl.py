import asyncio
import pathlib
import shlex
import sys

import httpx

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))
from restlab_cli.core.api import send_request, to_curl
from restlab_cli.core.curl import format_curl, shell_quote
from restlab_cli.core.models import FolderConfig, FormDataItem, Header, RequestConfig


def _argv(command):
    return shlex.split(command.replace(" \\\n  ", " "))


def _flags(argv, flag):
    return [argv[i + 1] for i, arg in enumerate(argv) if arg == flag]


def test_shell_quote_escapes_single_quotes():
    assert shell_quote("plain") == "'plain'"
    assert shell_quote("it's") == "'it'\\''s'"
    assert shlex.split(shell_quote("it's")) == ["it's"]


def test_post_with_json_body():
    folder = FolderConfig(base_url="https://api.x.com", headers=[Header(key="Accept", value="*/*")])
    req = RequestConfig(
        method="POST",
        url="/users",
        headers=[Header(key="X-Empty", value=""), Header(key="X-Name", value="O'Brien")],
        content_type="application/json",
        body='// new user\n{"name": "O\'Brien"}',
    )
    out = format_curl(req, folder)
    assert out.split(" \\\n  ") == [
        "curl -X POST 'https://api.x.com/users'",
        "-H 'Content-Type: application/json'",
        "-H 'Accept: */*'",
        "-H 'X-Name: O'\\''Brien'",
        "-d '{\"name\": \"O'\\''Brien\"}'",
    ]


def test_get_never_renders_body():
    req = RequestConfig(method="get", url="http://h/x", body="payload", content_type="text/plain")
    out = format_curl(req, FolderConfig())
    assert out == "curl -X GET 'http://h/x' \\\n  -H 'Content-Type: text/plain'"
    assert "-d" not in _argv(out)


def test_urlencoded_form_is_rendered_as_data():
    req = RequestConfig(
        method="PATCH",
        url="http://h",
        content_type="application/x-www-form-urlencoded",
        form_data=[FormDataItem(key="a b", value="c")],
    )
    assert _flags(_argv(format_curl(req, FolderConfig())), "-d") == ["a%20b=c"]


def test_multipart_with_files_uses_form_flags():
    req = RequestConfig(
        method="POST",
        url="http://h/upload",
        content_type="multipart/form-data",
        form_data=[
            FormDataItem(key="title", value="cat"),
            FormDataItem(key="", value="skipped"),
            FormDataItem(key="img", value="cat.png", type="file", file_name="cat.png", file_data="aGk="),
        ],
    )
    argv = _argv(format_curl(req, FolderConfig()))
    assert _flags(argv, "--form-string") == ["title=cat"]
    assert _flags(argv, "-F") == ["img=@cat.png"]
    assert _flags(argv, "-d") == []
    assert _flags(argv, "-H") == ["Content-Type: multipart/form-data"]


def test_curl_agrees_with_executor():
    folder = FolderConfig(
        base_url="https://api.x.com/v1",
        headers=[Header(key="Authorization", value="Bearer t"), Header(key="X-Blank", value="")],
    )
    req = RequestConfig(
        method="PUT",
        url="/things/7",
        headers=[Header(key="X-Trace", value="abc")],
        content_type="application/json",
        body='{\n  // not sent\n  "qty": 3\n}',
    )
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["headers"] = {k: v for k, v in request.headers.items()}
        seen["body"] = request.content.decode("utf-8")
        return httpx.Response(204)

    response = asyncio.run(send_request(req, folder, transport=httpx.MockTransport(handler)))
    assert response.status == 204

    argv = _argv(to_curl(req, folder))
    assert argv[:4] == ["curl", "-X", seen["method"], seen["url"]]
    for line in _flags(argv, "-H"):
        key, value = line.split(": ", 1)
        assert seen["headers"][key.lower()] == value
    assert len(_flags(argv, "-H")) == 3
    assert "x-blank" not in seen["headers"]
    assert _flags(argv, "-d") == [seen["body"]]
    assert seen["body"] == '{\n  "qty": 3\n}'


def test_text_field_starting_with_at_sign_stays_literal():
    req = RequestConfig(
        method="POST",
        url="http://h",
        content_type="multipart/form-data",
        form_data=[
            FormDataItem(key="handle", value="@me"),
            FormDataItem(key="f", value="a.txt", type="file", file_name="a.txt", file_data="aGk="),
        ],
    )
    argv = _argv(format_curl(req, FolderConfig()))
    assert _flags(argv, "--form-string") == ["handle=@me"]
    assert _flags(argv, "-F") == ["f=@a.txt"]


def _capture(seen):
    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["headers"] = dict(request.headers.items())
        seen["body"] = request.content
        return httpx.Response(200)

    return httpx.MockTransport(handler)


def test_curl_agrees_with_executor_for_urlencoded_form():
    req = RequestConfig(
        method="POST",
        url="http://h/login",
        content_type="application/x-www-form-urlencoded",
        form_data=[FormDataItem(key="user name", value="a&b"), FormDataItem(key="pw", value="@secret")],
    )
    seen = {}
    asyncio.run(send_request(req, FolderConfig(), transport=_capture(seen)))

    argv = _argv(to_curl(req, FolderConfig()))
    assert argv[:4] == ["curl", "-X", seen["method"], seen["url"]]
    assert _flags(argv, "-H") == ["Content-Type: application/x-www-form-urlencoded"]
    assert seen["headers"]["content-type"] == "application/x-www-form-urlencoded"
    assert _flags(argv, "-d") == [seen["body"].decode("utf-8")]
    assert seen["body"] == b"user%20name=a%26b&pw=%40secret"


def test_curl_agrees_with_executor_for_multipart_with_file():
    req = RequestConfig(
        method="POST",
        url="http://h/upload",
        headers=[Header(key="X-Trace", value="1")],
        content_type="multipart/form-data",
        form_data=[
            FormDataItem(key="title", value="@cat"),
            FormDataItem(key="img", value="cat.png", type="file", file_name="cat.png", file_data="aGk="),
        ],
    )
    seen = {}
    asyncio.run(send_request(req, FolderConfig(), transport=_capture(seen)))
    argv = _argv(to_curl(req, FolderConfig()))
    body = seen["body"]

    assert argv[:4] == ["curl", "-X", seen["method"], seen["url"]]
    assert seen["headers"]["x-trace"] == "1"
    assert "X-Trace: 1" in _flags(argv, "-H")
    assert seen["headers"]["content-type"].startswith("multipart/form-data; boundary=")

    for field in _flags(argv, "--form-string"):
        key, value = field.split("=", 1)
        assert f'name="{key}"\r\n\r\n{value}\r\n'.encode() in body
    for field in _flags(argv, "-F"):
        key, file_name = field.split("=@", 1)
        assert f'name="{key}"; filename="{file_name}"\r\n'.encode() in body
    assert b"\r\n\r\nhi\r\n" in body
    assert len(_flags(argv, "--form-string")) + len(_flags(argv, "-F")) == body.count(b"Content-Disposition")
