"""
Application configuration module.

This module defines all application settings using Pydantic for validation.
Settings are loaded from environment variables with appropriate type conversion
and validation.
"""

import json
from typing import Annotated, Dict, List, Optional
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


# Track initialization state
_settings_initialized = False
_settings_instance = None

# Shared climb descriptors. Kept in one place so vote validation, insights
# bucketing and test data agree.
DEFAULT_DESCRIPTORS: List[str] = [
    "reachy",
    "balance",
    "slopey",
    "crimpy",
    "slippery",
    "static",
    "technical",
    "dyno",
    "coordination",
    "explosive",
    "endurance",
    "powerful",
    "must-try",
    "dangerous",
    "overhang",
    "pockety",
    "dual-tex",
    "compression",
    "campusy",
    "shouldery",
    "slab",
    "juggy",
    "pinchy",
]

# Each descriptor maps to one or more high-level style buckets.
DEFAULT_DESCRIPTOR_BUCKETS: Dict[str, List[str]] = {
    # power
    "explosive": ["power"],
    "powerful": ["power"],
    "overhang": ["power"],
    "compression": ["power"],
    "campusy": ["power"],
    "shouldery": ["power"],
    "juggy": ["power"],
    # grip
    "crimpy": ["gripStrength"],
    "pockety": ["gripStrength"],
    "pinchy": ["gripStrength"],
    "slopey": ["gripStrength"],
    # technique / footwork
    "balance": ["technique"],
    "slippery": ["technique"],
    "static": ["technique"],
    "technical": ["technique"],
    "dual-tex": ["technique"],
    "slab": ["technique"],
    # timing
    "coordination": ["coordination"],
    "dyno": ["coordination"],
    # not style related
    "must-try": ["other"],
    "dangerous": ["other"],
    "reachy": ["other"],
    "endurance": ["other"],
}


class Settings(BaseSettings):
    """
    Application settings with validation and documentation.

    Settings are loaded from environment variables and validated using Pydantic.
    Default values are provided where appropriate.
    """

    # Core Settings
    PROJECT_NAME: str = "BoulderLog"
    VERSION: str = "1.0.0"

    # Environment Settings
    ENVIRONMENT: str = Field(
        default="development",
        description="Application environment (development, testing, production)"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Console log level outside the testing environment"
    )
    LOG_TO_FILE: bool = Field(
        default=False,
        description="Also write logs to rotating files under LOG_DIR"
    )
    LOG_DIR: Path = Field(
        default=Path("logs"),
        description="Directory for rotating log files"
    )

    # Insights gates and thresholds (percentages)
    INSIGHTS_MIN_SESSIONS: int = Field(
        default=5,
        ge=1,
        description="Completed sessions required before insights are computed"
    )
    COMFORT_ZONE_THRESHOLD: float = Field(default=70.0, ge=0, le=100)
    CHALLENGING_ZONE_THRESHOLD: float = Field(default=50.0, ge=0, le=100)
    PROJECT_ZONE_THRESHOLD: float = Field(default=30.0, ge=0, le=100)
    TOO_HARD_THRESHOLD: float = Field(default=20.0, ge=0, le=100)
    STRENGTH_THRESHOLD: float = Field(default=60.0, ge=0, le=100)
    WEAKNESS_THRESHOLD: float = Field(default=40.0, ge=0, le=100)
    WEAKNESS_MIN_ROUTES: int = Field(
        default=2,
        ge=1,
        description="Minimum routes before a descriptor can be labelled a weakness"
    )

    # Votes
    MAX_DESCRIPTORS_PER_VOTE: int = Field(default=10, ge=1)
    DESCRIPTORS: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_DESCRIPTORS),
        description="Vocabulary of accepted style descriptors"
    )
    DESCRIPTOR_BUCKETS: Optional[Dict[str, List[str]]] = Field(
        default=None,
        description="Descriptor to style bucket mapping; defaults to the built-in table"
    )

    @field_validator("DESCRIPTORS", mode="before")
    @classmethod
    def assemble_descriptors(cls, v: str | List[str]) -> List[str]:
        """Accept a comma separated string, a JSON list or a list.

        Environment values arrive undecoded (NoDecode), so JSON lists are
        parsed here.
        """
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return [str(i).strip().lower() for i in json.loads(v)]
            return [i.strip().lower() for i in v.split(",") if i.strip()]
        return v

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_settings() -> Settings:
    """
    Get or create settings instance with initialization tracking.

    Returns:
        Settings instance
    """
    global _settings_initialized, _settings_instance

    if not _settings_initialized:
        _settings_instance = Settings()
        _settings_initialized = True

    return _settings_instance


# Create settings instance through getter
settings = get_settings()
