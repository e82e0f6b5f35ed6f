"""Parser settings.

Values come from ``DEVFILE_PARSER_*`` environment variables (or a ``.env``
file); every public entry point also accepts an explicit ``settings=``.
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParserSettings(BaseSettings):
    """Settings for loading and flattening devfiles."""

    model_config = SettingsConfigDict(
        env_prefix="DEVFILE_PARSER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    http_timeout: float = 30.0  # seconds, per URL fetch
    max_document_bytes: int = 10 * 1024 * 1024
    max_reference_depth: int = 32  # nested parent/plugin references
    supported_api_versions: List[str] = Field(
        default_factory=lambda: ["2.0.0", "2.1.0", "2.2.0", "2.2.1", "2.2.2"]
    )
    log_level: str = "WARNING"
    log_format: str = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"


@lru_cache(maxsize=1)
def get_settings() -> ParserSettings:
    """Return the process-wide settings, read once from the environment."""
    return ParserSettings()
