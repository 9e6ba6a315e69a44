"""Import engine configuration via Pydantic Settings.

Every value can be set from the environment with the ``TXN_IMPORT_`` prefix,
e.g. ``TXN_IMPORT_DAY_FIRST=true``.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ImportSettings(BaseSettings):
    """Tunables for parsing and diagnostics."""

    DAY_FIRST: bool = Field(
        default=False,
        description="Try dd/MM patterns before MM/dd when a date is ambiguous",
    )
    MAX_DATE_SAMPLES: int = Field(
        default=10,
        ge=0,
        description="How many distinct unparsed date strings diagnostics keep",
    )
    PREVIEW_ROWS: int = Field(default=10, ge=0, description="Rows shown by preview")
    DEFAULT_ICON: str = Field(default="💵", min_length=1)
    DELIMITER: str = Field(default=",", min_length=1, max_length=1)
    ENCODINGS: List[str] = Field(
        default_factory=lambda: ["utf-8-sig", "ascii", "cp1252", "latin-1"],
        description="Decoding attempts for raw uploads, in order",
    )

    model_config = SettingsConfigDict(env_prefix="TXN_IMPORT_", extra="ignore")

    @field_validator("ENCODINGS")
    @classmethod
    def _at_least_one_encoding(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("ENCODINGS must list at least one codec")
        return value


def get_settings() -> ImportSettings:
    """Factory for ImportSettings; allows test override."""
    return ImportSettings()
