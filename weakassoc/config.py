"""Settings for weakassoc, read from WEAKASSOC_* variables or a .env file."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE_LOCATIONS = (
    Path(".env"),
    Path.home() / ".weakassoc" / ".env",
    Path(__file__).parent.parent / ".env",
)


def _find_env_file() -> Optional[str]:
    """First existing .env: working directory, ~/.weakassoc, then the install."""
    for candidate in ENV_FILE_LOCATIONS:
        if candidate.exists():
            return str(candidate)
    return None


class Settings(BaseSettings):
    """Application settings loaded from WEAKASSOC_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WEAKASSOC_",
        env_file=_find_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level for the command line tool"
    )

    # Matching behaviour
    include_unique_indexes: bool = Field(
        default=True,
        description="Treat single-column unique indexes as candidate parent keys"
    )
    check_data_types: bool = Field(
        default=True,
        description="Only associate columns with the same standard data type"
    )
    foreign_key_name_prefix: str = Field(
        default="WEAKFK",
        description="Prefix for synthesized weak association names"
    )
    max_table_prefixes: int = Field(
        default=5,
        description="Number of most common table name prefixes stripped when matching table names"
    )


settings = Settings()
