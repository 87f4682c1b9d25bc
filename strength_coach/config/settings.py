from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DATA_DIR = Path(__file__).parent.parent / "data"


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="COACH_LOG_LEVEL")
    log_file: str | None = Field(
        default=None,
        validation_alias="COACH_LOG_FILE",
        description="Optional rotating log file path (console only when unset)",
    )
    log_json: bool = Field(
        default=False,
        validation_alias="COACH_LOG_JSON",
        description="Serialize console records as JSON lines",
    )
    catalog_path: Path = Field(
        default=_DATA_DIR / "exercises.yaml",
        validation_alias="COACH_CATALOG_PATH",
        description="YAML exercise catalog",
    )
    tuning_path: Path = Field(
        default=_DATA_DIR / "tuning.yaml",
        validation_alias="COACH_TUNING_PATH",
        description="YAML tuning tables (muscle targets, equipment map, slot budgets)",
    )
    default_readiness_score: int = Field(
        default=4,
        ge=1,
        le=5,
        validation_alias="COACH_DEFAULT_READINESS",
        description="Readiness used when the user skipped the self-report",
    )
    strict_duration_validation: bool = Field(
        default=False,
        validation_alias="COACH_STRICT_DURATION",
        description="Raise on unsupported session durations instead of using the default budget",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid COACH_LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value


settings = Settings()
