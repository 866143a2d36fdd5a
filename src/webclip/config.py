"""
Configuration for webclip.

Uses Pydantic Settings for type-safe environment variable loading.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from webclip.exceptions import ConfigurationError
from webclip.models import LINK_TEXT_LIMIT

load_dotenv()

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class WebclipSettings(BaseSettings):
    """Webclip settings."""

    model_config = SettingsConfigDict(
        env_prefix="WEBCLIP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Entry template
    entry_template: str | None = Field(default=None, description="Entry template text; overrides the built-in one")
    entry_template_file: Path | None = Field(default=None, description="File holding the entry template")

    # Selection context
    text_fragment_links: bool = Field(
        default=True,
        description="Regenerate a #:~:text= link pointing at the selected text",
    )
    link_text_limit: int = Field(
        default=LINK_TEXT_LIMIT,
        ge=1,
        le=LINK_TEXT_LIMIT,
        description="Maximum characters kept from a link's text",
    )

    # Conversion
    max_data_uri_length: int | None = Field(
        default=None,
        ge=0,
        description="Longest data: image source embedded in the output (unset = unbounded)",
    )
    table_alignment: Literal["attributes", "none"] = Field(
        default="attributes",
        description="Derive table column alignment from cell attributes, or never align",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        upper = v.upper()
        if upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return upper

    @field_validator("entry_template_file")
    @classmethod
    def expand_template_path(cls, v: Path | None) -> Path | None:
        """Expand ~ in the template path."""
        return v.expanduser() if v is not None else None

    def get_entry_template(self) -> str:
        """
        Resolve the entry template: inline text, then file, then the built-in default.

        Raises:
            ConfigurationError: If the template file cannot be read.
        """
        from webclip.services.template import DEFAULT_ENTRY_TEMPLATE

        if self.entry_template:
            return self.entry_template
        if self.entry_template_file is not None:
            try:
                return self.entry_template_file.read_text(encoding="utf-8")
            except OSError as e:
                raise ConfigurationError(
                    f"Cannot read entry template: {e}",
                    template_path=str(self.entry_template_file),
                ) from e
        return DEFAULT_ENTRY_TEMPLATE


def load_settings(**overrides: Any) -> WebclipSettings:
    """
    Load settings from the environment, applying explicit overrides.

    Args:
        **overrides: Field values taking precedence over the environment.

    Returns:
        Validated settings.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    try:
        return WebclipSettings(**overrides)
    except PydanticValidationError as e:
        fields = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
        raise ConfigurationError(
            f"Invalid webclip settings: {', '.join(fields) or 'unknown field'}",
            fields=fields,
            context={"errors": [error["msg"] for error in e.errors()]},
        ) from e


@lru_cache
def get_settings() -> WebclipSettings:
    """Get cached settings instance."""
    return load_settings()
