"""Render a request as an equivalent ``curl`` command."""

from __future__ import annotations

from .builder import build_request, carries_body, sendable_headers
from .models import FolderConfig, RequestConfig


def shell_quote(value: str) -> str:
    """Single-quote ``value`` for a POSIX shell."""
    return "'" + value.replace("'", "'\\''") + "'"


def format_curl(request: RequestConfig, folder: FolderConfig) -> str:
    """Return the curl command matching what the executor sends.

    URL, headers and body all come from :func:`build_request` so the two
    paths cannot drift apart.
    """
    executable = build_request(request, folder)
    lines = [f"curl -X {executable.method} {shell_quote(executable.url)}"]
    for header in sendable_headers(executable.headers):
        lines.append("-H " + shell_quote(f"{header.key}: {header.value}"))
    if carries_body(executable.method):
        if executable.form_data:
            for item in executable.form_data:
                if not item.key.strip():
                    continue
                if item.type == "file" and item.file_data:
                    field = f"{item.key}=@{item.file_name or 'file'}"
                    lines.append(f"-F {shell_quote(field)}")
                else:
                    # curl reads @ and < in -F values as file references
                    field = f"{item.key}={item.value}"
                    lines.append(f"--form-string {shell_quote(field)}")
        elif executable.body:
            lines.append(f"-d {shell_quote(executable.body)}")
    return " \\\n  ".join(lines)
