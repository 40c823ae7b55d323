"""Pydantic request bodies.

Field aliases keep the camelCase names existing front-ends already send.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.config import CALENDAR_TIME_ZONE


def as_calendar_time(value: datetime) -> datetime:
    """Naive datetimes are wall-clock times in the calendar time zone."""
    if value.tzinfo is None:
        return value.replace(tzinfo=ZoneInfo(CALENDAR_TIME_ZONE))
    return value


class EventScheduleRequest(BaseModel):
    """New start/end for an event."""

    model_config = ConfigDict(populate_by_name=True)

    start: datetime = Field(alias="eventStart")
    end: datetime = Field(alias="eventEnd")

    @model_validator(mode="after")
    def check_end_after_start(self):
        if as_calendar_time(self.end) < as_calendar_time(self.start):
            raise ValueError("eventEnd must not be before eventStart")
        return self


class EventCreateRequest(EventScheduleRequest):
    summary: str = Field(alias="eventSummary", min_length=1)
    location: str = Field(alias="eventLocation")
    description: str = Field(alias="eventDescription")


class MailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: str = Field(min_length=1)
    subject: str = Field(min_length=1)

    @field_validator("to", "subject")
    @classmethod
    def reject_line_breaks(cls, value: str) -> str:
        # Both end up in mail headers
        if "\r" in value or "\n" in value:
            raise ValueError("must not contain line breaks")
        return value


class NewRequestMail(MailRequest):
    request_type: str = Field(alias="type", min_length=1)
    link: str


class CertificateAvailableMail(MailRequest):
    request_type: str = Field(alias="type", min_length=1)
    location: str
    klant: str
    link: str


class VisitDateChangedMail(MailRequest):
    request_types: list[str] = Field(alias="type", min_length=1)
    location: str
    klant: str
    date: str = Field(min_length=1)

    @field_validator("request_types", mode="before")
    @classmethod
    def wrap_single_type(cls, value):
        if isinstance(value, str):
            return [value]
        return value
