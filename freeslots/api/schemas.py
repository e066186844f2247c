"""
Request and response schemas for the HTTP API.
"""

from typing import Annotated, List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from ..domain.models import WorkingHoursConfig, validate_timezone

ALLOWED_URL_SCHEMES = ("http", "https", "webcal")

Weekday = Annotated[StrictInt, Field(ge=1, le=7)]


class WorkingHoursPayload(BaseModel):
    """Working hours as sent by the client; ``end`` 24 means midnight."""
    start: StrictInt = Field(ge=0, le=23)
    end: StrictInt = Field(ge=0, le=24)


class GenerateSlotsRequest(BaseModel):
    """Body of ``POST /api/generate-slots``."""
    model_config = ConfigDict(populate_by_name=True)

    ics_link: str = Field(alias="icsLink")
    working_days: List[Weekday] = Field(alias="workingDays")
    working_hours: WorkingHoursPayload = Field(alias="workingHours")
    timezone: str
    prompt: str

    @field_validator("ics_link")
    @classmethod
    def validate_ics_link(cls, value: str) -> str:
        """Require an absolute http(s) or webcal URL."""
        parsed = urlparse(value.strip())
        if parsed.scheme.lower() not in ALLOWED_URL_SCHEMES or not parsed.netloc:
            raise ValueError("Must be a valid URL")
        return value.strip()

    @field_validator("working_days")
    @classmethod
    def validate_working_days(cls, value: List[int]) -> List[int]:
        """Require at least one ISO weekday (1=Monday, 7=Sunday)."""
        if not value:
            raise ValueError("Select at least one working day")
        return value

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        return validate_timezone(value)

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, value: str) -> str:
        if not value:
            raise ValueError("Prompt is required")
        return value

    def to_working_hours(self) -> WorkingHoursConfig:
        """Build the domain working-hours configuration."""
        return WorkingHoursConfig(
            working_days=self.working_days,
            start_hour=self.working_hours.start,
            end_hour=self.working_hours.end,
            timezone=self.timezone,
        )


class GenerateSlotsResponse(BaseModel):
    slots: str


class ValidationErrorResponse(BaseModel):
    message: str
    field: Optional[str] = None


class InternalErrorResponse(BaseModel):
    message: str
