"""
Configuration management using Pydantic models loaded from YAML.
"""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import WorkingHoursConfig, validate_timezone
from .domain.window_generator import DEFAULT_LOOKAHEAD_DAYS

DEFAULT_PROMPT = "Give me my free slots for the next 5 working days"


class DefaultsConfig(BaseModel):
    """Default working-hours settings used when a request does not set them."""
    working_days: List[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])  # Monday-Friday
    start_hour: int = 9
    end_hour: int = 18
    timezone: str = "UTC"
    prompt: str = DEFAULT_PROMPT

    @field_validator("working_days")
    @classmethod
    def validate_working_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        if not value:
            raise ValueError("working_days must contain at least one day")
        invalid_days = [day for day in value if day not in range(1, 8)]
        if invalid_days:
            raise ValueError(f"working_days must be between 1 and 7, got {invalid_days}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    @field_validator("start_hour")
    @classmethod
    def validate_start_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"start_hour must be between 0 and 23, got {v}")
        return v

    @field_validator("end_hour")
    @classmethod
    def validate_end_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 24 (24 = midnight of the next day)."""
        if not 0 <= v <= 24:
            raise ValueError(f"end_hour must be between 0 and 24, got {v}")
        return v

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        return validate_timezone(value)

    def working_hours(self) -> WorkingHoursConfig:
        """Build the domain working-hours configuration."""
        return WorkingHoursConfig(
            working_days=self.working_days,
            start_hour=self.start_hour,
            end_hour=self.end_hour,
            timezone=self.timezone,
        )


class CalendarConfig(BaseModel):
    """Settings for fetching the calendar feed."""
    timeout_seconds: float = 30.0

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Ensure the timeout is positive."""
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value


class AssistantConfig(BaseModel):
    """Settings for the LLM that formats the free slots."""
    model: str = "gpt-4o-mini"
    temperature: float = 0.0
    timeout_seconds: float = 30.0
    api_key: Optional[str] = None
    api_key_env: str = "OPENAI_API_KEY"

    def get_api_key(self) -> Optional[str]:
        """Return the configured API key, falling back to the environment."""
        return self.api_key or os.environ.get(self.api_key_env)


class UsageLogConfig(BaseModel):
    """Settings for the append-only usage log."""
    enabled: bool = True
    path: Path = Path("usage_log.jsonl")


class ServerConfig(BaseModel):
    """Settings for the HTTP server."""
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False


class AppConfig(BaseModel):
    """Application configuration."""
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS
    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    assistant: AssistantConfig = Field(default_factory=AssistantConfig)
    usage_log: UsageLogConfig = Field(default_factory=UsageLogConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @model_validator(mode="after")
    def validate_lookahead(self) -> "AppConfig":
        """Ensure the lookahead horizon covers at least one day."""
        if self.lookahead_days <= 0:
            raise ValueError("lookahead_days must be greater than zero")
        return self

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "AppConfig":
        """
        Load configuration, falling back to defaults when no file exists.

        An explicitly given path must exist.
        """
        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)
        return cls()


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
