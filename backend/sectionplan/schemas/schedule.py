from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class WeightedScores(BaseModel):
    """Component scores after multiplying by their configured weight."""

    preference: float = 0.0
    mobility: float = 0.0
    seniority: float = 0.0
    consecutive: float = 0.0


class ScoreBreakdown(BaseModel):
    model_config = {"populate_by_name": True}

    preference: float = 0.0
    mobility: float = 0.0
    seniority: float = 0.0
    consecutive: float = 0.0
    capacity_penalty: float = Field(default=0.0, alias="capacityPenalty")
    total: float = 0.0
    weighted: WeightedScores | None = None


class ScheduleEntry(BaseModel):
    model_config = {"populate_by_name": True}

    section_id: str = Field(alias="sectionId")
    faculty_id: str = Field(alias="facultyId")
    timeslot_id: str = Field(default="", alias="timeslotId")
    room_id: str = Field(default="", alias="roomId")
    locked: bool = False
    score_breakdown: ScoreBreakdown | None = Field(default=None, alias="scoreBreakdown")

    @field_validator("timeslot_id", "room_id", mode="before")
    @classmethod
    def none_as_blank(cls, value: str | None) -> str:
        return "" if value is None else value
