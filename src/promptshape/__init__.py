"""promptshape — reshape one chat-message list for Gemini, Claude and OpenAI."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from promptshape.core.detector import detect_format_from_model as detect_format_from_model
    from promptshape.core.request import build_request as build_request
    from promptshape.core.transpilers.claude import convert_claude_messages as convert_claude_messages
    from promptshape.core.transpilers.gemini import convert_google_messages as convert_google_messages
    from promptshape.utils.parsing import try_parse_json as try_parse_json

_EXPORTS = {
    "build_request": "promptshape.core.request",
    "convert_claude_messages": "promptshape.core.transpilers.claude",
    "convert_google_messages": "promptshape.core.transpilers.gemini",
    "detect_format_from_model": "promptshape.core.detector",
    "try_parse_json": "promptshape.utils.parsing",
}


def __getattr__(name: str) -> object:
    module_path = _EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'promptshape' has no attribute {name!r}")
