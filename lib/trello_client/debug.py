from __future__ import annotations

import json
from typing import Any

import httpx
from rich.console import Console
from rich.markup import escape

console = Console()

MASKED_PARAMS = ("key", "token")
MASK = "hidden"


def masked_url(url: httpx.URL) -> str:
    for name in MASKED_PARAMS:
        if name in url.params:
            url = url.copy_set_param(name, MASK)
    return str(url)


def _render_body(body: Any) -> str:
    if body is None or body == b"" or body == "":
        return ""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except ValueError:
            return body
    return json.dumps(body, indent=2, ensure_ascii=False)


def dump_request(request: httpx.Request) -> None:
    console.print(f"[bold cyan]>[/] {request.method} {escape(masked_url(request.url))}")
    for name, value in request.headers.items():
        console.print(f"[dim]> {escape(name)}: {escape(value)}[/]")
    text = _render_body(request.content)
    if text:
        console.print(escape(text))


def dump_response(response: httpx.Response) -> None:
    style = "bold red" if response.status_code >= 400 else "bold green"
    console.print(f"[{style}]<[/] {response.status_code} {escape(response.reason_phrase)}")
    text = _render_body(response.content)
    if text:
        console.print(escape(text))
