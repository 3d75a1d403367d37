"""Request execution.

:func:`execute` performs one HTTP round trip with :mod:`httpx` and always
returns a :class:`ResponseData`.  Transport failures are classified into a
:class:`NetworkErrorKind` and reported as a ``status == 0`` response so
callers only ever deal with one result shape.
"""

from __future__ import annotations

import asyncio
import base64
import errno
import socket
import ssl
import time
import uuid
from typing import Iterable, List, Optional, Tuple

import httpx

from .builder import carries_body, sendable_headers
from .config import DEFAULT_TIMEOUT_MS
from .errors import NETWORK_ERROR_MESSAGES, NetworkErrorKind
from .models import ExecutableRequest, FormDataItem, Header, ResponseData


def new_boundary() -> str:
    return f"----RESTLabBoundary{uuid.uuid4().hex}"


def encode_multipart(fields: Iterable[FormDataItem], boundary: str) -> bytes:
    """Encode ``fields`` as a multipart/form-data body.

    File fields carry base64 ``file_data`` which is decoded to raw bytes; a
    file field without data is sent as text.
    """
    parts: List[bytes] = []
    for field in fields:
        if not field.key.strip():
            continue
        if field.type == "file" and field.file_data:
            parts.append(
                (
                    f"--{boundary}\r\n"
                    f'Content-Disposition: form-data; name="{field.key}"; '
                    f'filename="{field.file_name or "file"}"\r\n'
                    "Content-Type: application/octet-stream\r\n\r\n"
                ).encode("utf-8")
            )
            parts.append(base64.b64decode(field.file_data))
            parts.append(b"\r\n")
        else:
            parts.append(
                f'--{boundary}\r\nContent-Disposition: form-data; name="{field.key}"\r\n\r\n'.encode("utf-8")
            )
            parts.append(field.value.encode("utf-8"))
            parts.append(b"\r\n")
    parts.append(f"--{boundary}--\r\n".encode("utf-8"))
    return b"".join(parts)


def prepare_payload(executable: ExecutableRequest) -> Tuple[List[Header], Optional[bytes]]:
    """Return the headers and body bytes that go on the wire."""
    headers = sendable_headers(executable.headers)
    if not carries_body(executable.method):
        return headers, None
    if executable.form_data:
        boundary = new_boundary()
        headers = [h for h in headers if h.key.lower() != "content-type"]
        headers.append(Header(key="Content-Type", value=f"multipart/form-data; boundary={boundary}"))
        return headers, encode_multipart(executable.form_data, boundary)
    if executable.body:
        return headers, executable.body.encode("utf-8")
    return headers, None


# --- error classification -------------------------------------------------

_DNS_MARKERS = ("name or service not known", "nodename nor servname", "getaddrinfo", "no address associated")
_TLS_MARKERS = ("certificate", "ssl", "tls")


def _error_chain(exc: BaseException):
    seen = set()
    cur: Optional[BaseException] = exc
    while cur is not None and id(cur) not in seen:
        seen.add(id(cur))
        yield cur
        cur = cur.__cause__ or cur.__context__


def classify_network_error(exc: BaseException) -> NetworkErrorKind:
    """Map a transport exception to a :class:`NetworkErrorKind`."""
    chain = list(_error_chain(exc))
    for err in chain:
        if isinstance(err, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
            return NetworkErrorKind.INVALID_URL
        if isinstance(err, (httpx.TimeoutException, asyncio.TimeoutError, socket.timeout)):
            return NetworkErrorKind.TIMEOUT
        if isinstance(err, socket.gaierror):
            return NetworkErrorKind.DNS
        if isinstance(err, ssl.SSLError):
            return NetworkErrorKind.TLS
        if isinstance(err, ConnectionRefusedError):
            return NetworkErrorKind.CONNECTION_REFUSED
        if isinstance(err, ConnectionResetError):
            return NetworkErrorKind.CONNECTION_RESET
        code = getattr(err, "errno", None)
        if code == errno.ECONNREFUSED:
            return NetworkErrorKind.CONNECTION_REFUSED
        if code == errno.ECONNRESET:
            return NetworkErrorKind.CONNECTION_RESET
    # httpcore often flattens the original OSError into the message only
    text = " ".join(str(err) for err in chain).lower()
    if any(marker in text for marker in _DNS_MARKERS):
        return NetworkErrorKind.DNS
    if "connection refused" in text:
        return NetworkErrorKind.CONNECTION_REFUSED
    if "connection reset" in text:
        return NetworkErrorKind.CONNECTION_RESET
    if any(marker in text for marker in _TLS_MARKERS):
        return NetworkErrorKind.TLS
    return NetworkErrorKind.UNKNOWN


def error_response(kind: NetworkErrorKind, elapsed_ms: int = 0) -> ResponseData:
    message = NETWORK_ERROR_MESSAGES[kind]
    return ResponseData(
        status=0,
        status_text="Error",
        headers={},
        data=message,
        time=elapsed_ms,
        size=len(message.encode("utf-8")),
    )


# --- execution ------------------------------------------------------------


def _collapse_headers(headers: httpx.Headers) -> dict:
    collapsed: dict = {}
    for key, value in headers.multi_items():
        key = key.lower()
        collapsed[key] = f"{collapsed[key]}, {value}" if key in collapsed else value
    return collapsed


async def _round_trip(client: httpx.AsyncClient, executable: ExecutableRequest) -> httpx.Response:
    headers, content = prepare_payload(executable)
    request = client.build_request(
        executable.method,
        executable.url,
        headers=[(h.key, h.value) for h in headers],
        content=content,
    )
    return await client.send(request)


async def execute(
    executable: ExecutableRequest,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    *,
    cancel: Optional[asyncio.Event] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ResponseData:
    """Send ``executable`` and return the response; never raises.

    ``timeout_ms`` bounds the whole round trip.  Setting ``cancel`` aborts
    the call.  In both cases the client is closed, dropping the connection.
    A ``timeout_ms`` that is not positive falls back to the default.
    """
    if not timeout_ms or timeout_ms <= 0:
        timeout_ms = DEFAULT_TIMEOUT_MS
    start = time.monotonic()

    def elapsed() -> int:
        return int((time.monotonic() - start) * 1000)

    try:
        async with httpx.AsyncClient(transport=transport, timeout=timeout_ms / 1000) as client:
            call = asyncio.ensure_future(_round_trip(client, executable))
            waiters = {call}
            cancelled = None
            if cancel is not None:
                cancelled = asyncio.ensure_future(cancel.wait())
                waiters.add(cancelled)
            try:
                done, _ = await asyncio.wait(
                    waiters, timeout=timeout_ms / 1000, return_when=asyncio.FIRST_COMPLETED
                )
            finally:
                if cancelled is not None:
                    cancelled.cancel()
            if call not in done:
                call.cancel()
                await asyncio.gather(call, return_exceptions=True)
                if cancelled is not None and cancelled in done:
                    return error_response(NetworkErrorKind.CANCELLED, elapsed())
                return error_response(NetworkErrorKind.TIMEOUT, elapsed())
            response = call.result()
    except Exception as exc:
        return error_response(classify_network_error(exc), elapsed())

    data = response.text
    return ResponseData(
        status=response.status_code,
        status_text=response.reason_phrase,
        headers=_collapse_headers(response.headers),
        data=data,
        time=elapsed(),
        size=len(data.encode("utf-8")),
    )


def execute_sync(executable: ExecutableRequest, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> ResponseData:
    return asyncio.run(execute(executable, timeout_ms))
