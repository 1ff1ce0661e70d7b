from __future__ import annotations

from pydantic import BaseModel, Field


class ScheduleScoreSummary(BaseModel):
    total: float = 0.0
    average: float = 0.0


class PreferenceBreakdown(BaseModel):
    subject: int = 0
    timeslot: int = 0
    building: int = 0
    total: int = 0


class ConfigValidationIssue(BaseModel):
    field: str
    message: str
    context: str | None = None


class ConfigValidationResult(BaseModel):
    valid: bool
    errors: list[ConfigValidationIssue] = Field(default_factory=list)
