"""
Engine configuration, read from LEDGER_* environment variables by pydantic-settings.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EngineConfig(BaseSettings):
    """Ledger engine configuration"""

    model_config = SettingsConfigDict(env_prefix="LEDGER_", frozen=True)

    # Skip rows the reader rejects instead of aborting the run
    skip_invalid_rows: bool = False

    # Fractional digits printed for amounts
    precision: int = 4

    log_level: str = "WARNING"

    @field_validator("precision")
    @classmethod
    def check_precision(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"precision must be >= 0, got {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got '{value}'")
        return level
