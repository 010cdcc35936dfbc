from typing import Literal

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CapEnforcement = Literal["hard", "soft"]
MondayPolicy = Literal["warn", "normalize"]


class Settings(BaseSettings):
    weekly_assignment_cap: int = Field(
        default=4,
        ge=1,
        validation_alias="WEEKLY_ASSIGNMENT_CAP",
        description="Maximum segment assignments per staff member per programme week",
    )
    cap_enforcement: CapEnforcement = Field(
        default="hard",
        validation_alias="CAP_ENFORCEMENT",
        description="hard: toggle-on is rejected at cap; soft: cap only surfaced via disabled staff",
    )
    monday_policy: MondayPolicy = Field(
        default="warn",
        validation_alias="MONDAY_POLICY",
        description="warn: keep the literal start date; normalize: force it to the next Monday",
    )
    symmetric_availability_check: bool = Field(
        default=False,
        validation_alias="SYMMETRIC_AVAILABILITY_CHECK",
        description="Also require the staff availability end to fall on or after the programme start",
    )
    persist_on_change: bool = Field(
        default=True,
        validation_alias="PERSIST_ON_CHANGE",
        description="Serialize planning state to the blob store after every mutation",
    )
    database_url: str = Field(
        default="sqlite:///workshop_scheduler.db",
        validation_alias="DATABASE_URL",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

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
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value


settings = Settings()
