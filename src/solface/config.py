"""
solface configuration loaded from environment variables.

Uses ``pydantic-settings``. Every value can be set through a ``SOLFACE_``
prefixed environment variable (or a ``.env`` file) and is overridden by the
matching command-line flag.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SolfaceSettings(BaseSettings):
    """Defaults for interface generation and logging."""

    model_config = SettingsConfigDict(
        env_prefix="SOLFACE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    license: str = Field(
        default="",
        description="SPDX license identifier written at the top of generated interfaces.",
    )
    pragma: str = Field(
        default="",
        description="Solidity version pragma written at the top of generated interfaces, e.g. '^0.8.17'.",
    )
    annotations: bool = Field(
        default=False,
        description="Whether to annotate interfaces with their interface ID and method selectors.",
    )
    log_level: str = Field(
        default="warning",
        description="Minimum log level emitted on stderr.",
    )
