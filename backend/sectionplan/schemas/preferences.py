from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, field_validator

PreferenceLevel = Annotated[int, Field(ge=-3, le=3)]
PenaltyMultiplier = Annotated[float, Field(ge=0)]


class Preferences(BaseModel):
    """Per-faculty preference maps.

    Every lookup is optional: an absent faculty/key pair means level 0 for
    the three level maps and a mobility multiplier of 0. The consecutive
    multiplier defaults to 1 for a faculty member with no entry at all.
    """

    model_config = {"populate_by_name": True}

    faculty_subject: dict[str, dict[str, PreferenceLevel]] = Field(default_factory=dict, alias="facultySubject")
    faculty_timeslot: dict[str, dict[str, PreferenceLevel]] = Field(default_factory=dict, alias="facultyTimeslot")
    faculty_building: dict[str, dict[str, PreferenceLevel]] = Field(default_factory=dict, alias="facultyBuilding")
    mobility: dict[str, PenaltyMultiplier] = Field(default_factory=dict)
    consecutive: dict[str, PenaltyMultiplier] = Field(default_factory=dict)

    @field_validator("faculty_subject", "faculty_timeslot", "faculty_building", "mobility", "consecutive", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return {} if value is None else value

    def subject_level(self, faculty_id: str, subject_id: str | None) -> int:
        if not subject_id:
            return 0
        return self.faculty_subject.get(faculty_id, {}).get(subject_id, 0)

    def timeslot_level(self, faculty_id: str, timeslot_id: str | None) -> int:
        if not timeslot_id:
            return 0
        return self.faculty_timeslot.get(faculty_id, {}).get(timeslot_id, 0)

    def building_level(self, faculty_id: str, building_id: str | None) -> int:
        if not building_id:
            return 0
        return self.faculty_building.get(faculty_id, {}).get(building_id, 0)

    def mobility_value(self, faculty_id: str) -> float:
        return self.mobility.get(faculty_id, 0)

    def consecutive_value(self, faculty_id: str) -> float:
        return self.consecutive.get(faculty_id, 1)
