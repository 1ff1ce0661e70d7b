from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator

DAY_VALUES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

INPUT_MODEL_CONFIG = {"populate_by_name": True, "frozen": True}


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class Faculty(BaseModel):
    model_config = INPUT_MODEL_CONFIG

    id: str = Field(min_length=1)
    name: str = ""
    initial: str = ""
    max_sections: int = Field(default=0, alias="maxSections")
    max_overload: int = Field(default=0, alias="maxOverload")
    can_overload: bool = Field(default=False, alias="canOverload")


class Subject(BaseModel):
    model_config = INPUT_MODEL_CONFIG

    id: str = Field(min_length=1)
    code: str = ""
    name: str = ""


class Section(BaseModel):
    model_config = INPUT_MODEL_CONFIG

    id: str = Field(min_length=1)
    subject_id: str = Field(alias="subjectId")
    timeslot_id: str | None = Field(default=None, alias="timeslotId")
    room_id: str | None = Field(default=None, alias="roomId")
    capacity: int = Field(default=0, ge=0)
    course_shortcode: str | None = Field(default=None, alias="courseShortcode")
    section_identifier: str | None = Field(default=None, alias="sectionIdentifier")

    @field_validator("timeslot_id", "room_id")
    @classmethod
    def normalize_optional_reference(cls, value: str | None) -> str | None:
        return _blank_to_none(value)


class Timeslot(BaseModel):
    model_config = INPUT_MODEL_CONFIG

    id: str = Field(min_length=1)
    label: str = ""
    day: str
    start: str
    end: str

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        day = value.strip()
        if day not in DAY_VALUES:
            raise ValueError("Invalid day value")
        return day

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @model_validator(mode="after")
    def validate_time_order(self) -> "Timeslot":
        if parse_time_to_minutes(self.end) <= parse_time_to_minutes(self.start):
            raise ValueError("end must be after start")
        return self

    @property
    def start_minutes(self) -> int:
        return parse_time_to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return parse_time_to_minutes(self.end)


class Room(BaseModel):
    model_config = INPUT_MODEL_CONFIG

    id: str = Field(min_length=1)
    label: str = ""
    building_id: str | None = Field(default=None, alias="buildingId")
    capacity: int = Field(default=0, ge=0)

    @field_validator("building_id")
    @classmethod
    def normalize_building(cls, value: str | None) -> str | None:
        return _blank_to_none(value)


class Building(BaseModel):
    model_config = INPUT_MODEL_CONFIG

    id: str = Field(min_length=1)
    label: str = ""


class ConfigData(BaseModel):
    """Read-only domain snapshot supplied wholesale to every optimizer run."""

    model_config = INPUT_MODEL_CONFIG

    faculty: list[Faculty] = Field(default_factory=list)
    subjects: list[Subject] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)
    timeslots: list[Timeslot] = Field(default_factory=list)
    rooms: list[Room] = Field(default_factory=list)
    buildings: list[Building] = Field(default_factory=list)
