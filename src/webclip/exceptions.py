"""Exceptions raised by webclip.

Every error carries a short correlation ID so a failed clip can be matched
with its log lines, plus a context dict describing the offending input.
"""

import uuid
from typing import Any

# Longest input value copied into an error context; page locations can be data: URLs
MAX_CONTEXT_VALUE_LENGTH = 200


def generate_correlation_id() -> str:
    """Return an 8-character correlation ID taken from a random UUID."""
    return str(uuid.uuid4())[:8]


class WebclipError(Exception):
    """Base exception for clip conversion and configuration failures."""

    def __init__(
        self,
        message: str,
        correlation_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialise the error.

        Args:
            message: Human-readable description, shown by the CLI.
            correlation_id: ID to reuse; a new one is generated when omitted.
            context: Details about the clip input that caused the failure.
        """
        self.message = message
        self.correlation_id = correlation_id or generate_correlation_id()
        self.context = context or {}
        super().__init__(f"{message} [correlation_id={self.correlation_id}]")


class ValidationError(WebclipError):
    """Raised when the page location or other host-supplied input is unusable."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        correlation_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialise the error, recording which input was rejected.

        Args:
            message: Human-readable description.
            field: Name of the rejected input, e.g. ``location``.
            value: The rejected value; stored as text, cut to ``MAX_CONTEXT_VALUE_LENGTH``.
            correlation_id: ID to reuse; a new one is generated when omitted.
            context: Extra details.
        """
        context = dict(context or {})
        if field is not None:
            context["field"] = field
        if value is not None:
            context["value"] = str(value)[:MAX_CONTEXT_VALUE_LENGTH]
        super().__init__(message, correlation_id=correlation_id, context=context)


class ConfigurationError(WebclipError):
    """Raised when webclip settings are invalid or the entry template cannot be read."""

    def __init__(
        self,
        message: str,
        template_path: str | None = None,
        fields: list[str] | None = None,
        correlation_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialise the error with the settings that caused it.

        Args:
            message: Human-readable description.
            template_path: Entry template file that could not be read.
            fields: Names of the settings that failed validation.
            correlation_id: ID to reuse; a new one is generated when omitted.
            context: Extra details.
        """
        context = dict(context or {})
        if template_path is not None:
            context["template_path"] = str(template_path)
        if fields:
            context["fields"] = list(fields)
        super().__init__(message, correlation_id=correlation_id, context=context)
