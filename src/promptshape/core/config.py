"""Conversion settings — target model, format override, prompt options."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from promptshape.core.detector import ApiFormat, detect_format_from_model
from promptshape.core.errors import SettingsError
from promptshape.core.models import NamesContext


# Sampling parameters each provider accepts. Anything else is left out of the body.
FORMAT_PARAMS: dict[ApiFormat, tuple[str, ...]] = {
    "openai": ("temperature", "frequency_penalty", "presence_penalty", "top_p", "max_tokens"),
    "claude": ("temperature", "top_k", "top_p", "max_tokens"),
    "google": ("temperature", "top_k", "top_p", "max_tokens"),
}


class GenerationParams(BaseModel):
    """Sampling parameters sent alongside the converted messages.

    ``temperature`` and ``max_tokens`` always have a value; the rest are only
    sent when set.
    """

    temperature: float = 0.8
    max_tokens: int = 8000
    top_p: float | None = None
    top_k: int | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None

    def for_format(self, api_format: ApiFormat) -> dict[str, Any]:
        """Return the set parameters that *api_format* supports."""
        values = self.model_dump(exclude_none=True)
        return {key: values[key] for key in FORMAT_PARAMS[api_format] if key in values}


class ConversionSettings(BaseModel):
    """Options for turning a message list into a provider request.

    ``format`` overrides detection from the model name when set.
    """

    model: str = ""
    format: ApiFormat | None = None
    use_system_prompt: bool = True
    use_tool_calling: bool = False
    prefill: str = ""
    names: NamesContext = Field(default_factory=NamesContext)
    params: GenerationParams = Field(default_factory=GenerationParams)

    @property
    def api_format(self) -> ApiFormat:
        """The explicit format, or the one detected from ``model``."""
        return self.format or detect_format_from_model(self.model)


class SettingsLoader:
    """Load and validate a settings YAML file into :class:`ConversionSettings`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> ConversionSettings:
        """Read YAML, interpolate env vars, and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing. An empty file
        yields default settings.

        Raises:
            SettingsError: On read errors, YAML parse errors or schema
                validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SettingsError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise SettingsError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SettingsError("Settings YAML must be a mapping")

        try:
            return ConversionSettings.model_validate(data)
        except ValidationError as exc:
            raise SettingsError(str(exc)) from exc
