"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Dict, List

import pendulum
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .domain.exceptions import ConfigError
from .domain.models import BusinessHours, DayHours


class DayHoursConfig(BaseModel):
    """Opening window of one business day."""
    open_hour: int
    close_hour: int

    @field_validator("open_hour", "close_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 24."""
        if not 0 <= v <= 24:
            raise ValueError(f"Hour must be between 0 and 24, got {v}")
        return v

    @model_validator(mode="after")
    def validate_hours_order(self) -> "DayHoursConfig":
        """Ensure the configured window opens before it closes."""
        if self.close_hour <= self.open_hour:
            raise ValueError("close_hour must be later than open_hour")
        return self


def _reference_business_hours() -> Dict[int, DayHoursConfig]:
    return {
        index: DayHoursConfig(open_hour=day.open_hour, close_hour=day.close_hour)
        for index, day in BusinessHours.reference().days.items()
    }


class CalendarConfig(BaseModel):
    """Google Calendar that holds the shop's appointments."""
    calendar_id: str = ""
    api_key: str = ""
    timeout_seconds: float = 30

    def is_configured(self) -> bool:
        return bool(self.calendar_id and self.api_key)


class BusinessConfig(BaseModel):
    """Business details used in booking messages."""
    name: str = ""
    email: str = ""
    services: List[str] = Field(default_factory=list)


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    business: BusinessConfig = Field(default_factory=BusinessConfig)
    business_hours: Dict[int, DayHoursConfig] = Field(default_factory=_reference_business_hours)
    calendar: CalendarConfig = Field(default_factory=CalendarConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("business_hours")
    @classmethod
    def validate_business_days(cls, value: Dict[int, DayHoursConfig]) -> Dict[int, DayHoursConfig]:
        """Ensure days are Monday..Saturday and at least one is open."""
        if not value:
            raise ValueError("business_hours must configure at least one day")
        invalid_days = sorted(day for day in value if day not in range(6))
        if invalid_days:
            raise ValueError(f"business_hours days must be between 0 and 5, got {invalid_days}")
        return dict(sorted(value.items()))

    def to_business_hours(self) -> BusinessHours:
        """Build the immutable domain value used by the slot grid."""
        return BusinessHours(
            days={
                index: DayHours(open_hour=day.open_hour, close_hour=day.close_hour)
                for index, day in self.business_hours.items()
            }
        )

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            ConfigError: If the file is missing, not YAML, or fails validation
        """
        if not config_path.exists():
            raise ConfigError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping at the root level.")

        try:
            return cls(**data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration in {config_path}:\n{exc}") from exc


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
