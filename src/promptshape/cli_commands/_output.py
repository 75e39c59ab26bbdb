"""Shared CLI output formatters."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from promptshape.core.request import ProviderRequest  # noqa: TC001

console = Console()


def print_request(request: ProviderRequest) -> None:
    """Pretty-print a request summary followed by its JSON body."""
    console.print(f"[bold]Format:[/bold] {request.api_format}")
    console.print(f"[bold]Model:[/bold] {request.model or '(unset)'}")
    console.print(f"[bold]Path:[/bold] {request.path}")

    table = Table(title="Converted Messages")
    table.add_column("#", justify="right")
    table.add_column("Role", style="cyan")
    table.add_column("Parts", justify="right")
    table.add_column("Preview")

    for index, (role, parts) in enumerate(_turns(request)):
        table.add_row(str(index), role, str(len(parts)), escape(_truncate(_preview(parts))))

    console.print(table)
    console.print_json(data=request.body)


def _turns(request: ProviderRequest) -> list[tuple[str, list[dict[str, Any]]]]:
    if request.api_format == "google":
        return [(entry["role"], entry["parts"]) for entry in request.body["contents"]]
    turns: list[tuple[str, list[dict[str, Any]]]] = []
    for message in request.body["messages"]:
        content = message.get("content")
        if isinstance(content, str):
            content = [{"text": content}]
        turns.append((message["role"], content or []))
    return turns


def _preview(parts: list[dict[str, Any]]) -> str:
    for part in parts:
        if isinstance(part.get("text"), str):
            return part["text"].replace("\n", " ")
    return "-"


def _truncate(text: str, max_len: int = 60) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
