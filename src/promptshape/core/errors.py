"""Shared error types for the conversion layer."""


class FormatConversionError(Exception):
    """Base error for all prompt conversion failures."""


class InvalidMessageError(FormatConversionError):
    """The caller supplied messages that do not match the canonical schema."""

    def __init__(self, detail: str, index: int | None = None) -> None:
        self.detail = detail
        self.index = index
        where = f" at index {index}" if index is not None else ""
        super().__init__(f"Invalid message{where}: {detail}")


class ResponseParseError(FormatConversionError):
    """A provider response is missing the structure needed to read it."""

    def __init__(self, provider: str, detail: str = "") -> None:
        self.provider = provider
        self.detail = detail
        super().__init__(f"Cannot parse {provider} response" + (f": {detail}" if detail else ""))


class SettingsError(Exception):
    """Raised when a settings file fails parsing or validation."""
