"""Smoke test to verify the project scaffolding works."""

from __future__ import annotations


def test_import() -> None:
    import promptshape

    assert promptshape.__version__ == "0.1.0"


def test_cli_entrypoint() -> None:
    from promptshape.cli import main

    assert callable(main)


def test_core_imports() -> None:
    from promptshape.core import (
        CanonicalMessage,
        ConversionSettings,
        NamesContext,
        build_request,
        convert_claude_messages,
        convert_google_messages,
        detect_format_from_model,
    )

    assert CanonicalMessage is not None
    assert ConversionSettings is not None
    assert NamesContext is not None
    assert callable(build_request)
    assert callable(convert_claude_messages)
    assert callable(convert_google_messages)
    assert callable(detect_format_from_model)


def test_lazy_import_from_promptshape() -> None:
    import promptshape

    assert promptshape.detect_format_from_model("gemini-pro") == "google"
    assert promptshape.try_parse_json("not json") is None
