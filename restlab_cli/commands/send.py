"""Commands that execute requests or render them as curl."""

from __future__ import annotations

import asyncio
import sys
from typing import List, Tuple

from ..core import (
    ResponseData,
    format_rows,
    get_timeout_ms,
    interactive_pick_request,
    open_workspace,
    send_request,
    to_curl,
    tqdm,
)


def cmd_send(args):
    workspace = open_workspace()
    request_id = args.request or interactive_pick_request(workspace, "Select a request to send:")
    config = workspace.request_config(request_id)
    resolved = workspace.resolve(config.folder_id)
    timeout_ms = args.timeout_ms or get_timeout_ms()

    response = asyncio.run(send_request(config, resolved, timeout_ms))
    if response.status == 0:
        print(f"Network error: {response.data}", file=sys.stderr)
        return 2

    print(f"HTTP {response.status} {response.status_text}  ({response.time} ms, {response.size} bytes)")
    if args.include_headers:
        for key, value in response.headers.items():
            print(f"{key}: {value}")
        print()
    print(response.data)
    return 0


def cmd_curl(args):
    workspace = open_workspace()
    request_id = args.request or interactive_pick_request(workspace, "Select a request:")
    config = workspace.request_config(request_id)
    print(to_curl(config, workspace.resolve(config.folder_id)))
    return 0


def cmd_run(args):
    """Send every request of a folder concurrently and print a summary."""

    workspace = open_workspace()
    folder = workspace.folder(args.folder)
    nodes = list(folder.walk()) if args.recursive else [folder]
    request_ids = [req.id for node in nodes for req in node.requests]
    if not request_ids:
        print("No requests in folder")
        return 0

    timeout_ms = args.timeout_ms or get_timeout_ms()
    resolver = workspace.resolver()

    async def run_one(request_id: str) -> Tuple[str, ResponseData]:
        config = workspace.request_config(request_id)
        return request_id, await send_request(config, resolver.resolve(config.folder_id), timeout_ms)

    async def run_all() -> List[Tuple[str, ResponseData]]:
        results = []
        with tqdm(total=len(request_ids), unit="req", desc="Running") as bar:
            for fut in asyncio.as_completed([run_one(rid) for rid in request_ids]):
                results.append(await fut)
                bar.update(1)
        return results

    results = dict(asyncio.run(run_all()))
    rows = []
    for request_id in request_ids:
        summary = workspace.request(request_id)
        response = results[request_id]
        rows.append(
            {
                "method": summary.method,
                "name": summary.name,
                "status": response.status or "ERR",
                "time_ms": response.time,
                "size": response.size,
            }
        )
    format_rows(rows, ["method", "name", "status", "time_ms", "size"])
    failed = [r for r in results.values() if r.status == 0]
    if failed:
        print(f"Errors ({len(failed)}):", file=sys.stderr)
        for response in failed[:10]:
            print(f"  {response.data}", file=sys.stderr)
        return 2
    return 0
