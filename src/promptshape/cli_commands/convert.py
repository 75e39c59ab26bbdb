"""``promptshape convert`` — convert a messages file into a provider request."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.markup import escape

from promptshape.cli_commands._output import console, print_request
from promptshape.core.config import ConversionSettings, SettingsLoader
from promptshape.core.detector import API_FORMATS
from promptshape.core.errors import FormatConversionError, SettingsError
from promptshape.core.request import build_request
from promptshape.utils.telemetry import configure_telemetry


def _read_list(path: Path, key: str) -> list[Any]:
    """Read a JSON file holding a list, or a mapping with the list under *key*."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict) and key in data:
        data = data[key]
    if not isinstance(data, list):
        raise ValueError(f"{path.name} must contain a JSON list or an object with '{key}'")
    return data


@click.command()
@click.argument("messages_file", type=click.Path(exists=True))
@click.option("--model", "-m", default=None, help="Target model name.")
@click.option(
    "--format",
    "api_format",
    type=click.Choice(API_FORMATS),
    default=None,
    help="Force a format instead of detecting it from the model.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True),
    default=None,
    help="Settings YAML file.",
)
@click.option("--prefill", default=None, help="Assistant prefill text (claude only).")
@click.option("--no-system-prompt", is_flag=True, help="Keep system messages inline.")
@click.option("--tool-calling", is_flag=True, help="Convert for tool-calling mode.")
@click.option(
    "--tools",
    "tools_file",
    type=click.Path(exists=True),
    default=None,
    help="JSON file with OpenAI-style tool definitions.",
)
@click.option("--json", "as_json", is_flag=True, help="Output the request body only, as JSON.")
@click.option("--trace", is_flag=True, help="Print OpenTelemetry spans to the console.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def convert(
    messages_file: str,
    model: str | None,
    api_format: str | None,
    config_file: str | None,
    prefill: str | None,
    no_system_prompt: bool,
    tool_calling: bool,
    tools_file: str | None,
    as_json: bool,
    trace: bool,
    verbose: bool,
) -> None:
    """Convert the chat messages in MESSAGES_FILE into a provider request.

    MESSAGES_FILE is a JSON list of OpenAI-style messages, or an object with
    a ``messages`` list.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if trace:
        try:
            configure_telemetry(service_name="promptshape")
        except ImportError as exc:
            console.print(f"[red]Error:[/red] {escape(str(exc))}")
            sys.exit(1)

    try:
        settings = (
            SettingsLoader(Path(config_file)).load() if config_file else ConversionSettings()
        )
        overrides: dict[str, Any] = {}
        if model is not None:
            overrides["model"] = model
        if api_format is not None:
            overrides["format"] = api_format
        if prefill is not None:
            overrides["prefill"] = prefill
        if no_system_prompt:
            overrides["use_system_prompt"] = False
        if tool_calling:
            overrides["use_tool_calling"] = True
        settings = settings.model_copy(update=overrides)

        messages = _read_list(Path(messages_file), "messages")
        tools = _read_list(Path(tools_file), "tools") if tools_file else None
        request = build_request(messages, settings, tools=tools)
    except (OSError, ValueError, SettingsError, FormatConversionError) as exc:
        console.print(f"[red]Conversion error:[/red] {escape(str(exc))}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(request.body, indent=2, ensure_ascii=False))
    else:
        print_request(request)
