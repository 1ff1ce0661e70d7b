from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from sectionplan.schemas.config import ConfigData
from sectionplan.schemas.schedule import ScheduleEntry

ConflictSeverity = Literal["info", "warning", "critical"]

SEVERITY_RANK: dict[str, int] = {
    "info": 0,
    "warning": 1,
    "critical": 2,
}


class AffectedCell(BaseModel):
    model_config = {"populate_by_name": True}

    faculty_id: str = Field(alias="facultyId")
    timeslot_id: str = Field(alias="timeslotId")


class Conflict(BaseModel):
    model_config = {"populate_by_name": True}

    id: str
    title: str
    description: str
    severity: ConflictSeverity
    related_faculty_ids: list[str] = Field(default_factory=list, alias="relatedFacultyIds")
    related_section_ids: list[str] = Field(default_factory=list, alias="relatedSectionIds")
    related_room_ids: list[str] = Field(default_factory=list, alias="relatedRoomIds")
    related_timeslot_ids: list[str] = Field(default_factory=list, alias="relatedTimeslotIds")
    affected_cells: list[AffectedCell] = Field(default_factory=list, alias="affectedCells")


class CellConflictSummary(BaseModel):
    model_config = {"populate_by_name": True}

    severity: ConflictSeverity
    conflict_ids: list[str] = Field(default_factory=list, alias="conflictIds")


class ConflictAnalysis(BaseModel):
    model_config = {"populate_by_name": True}

    conflicts: list[Conflict] = Field(default_factory=list)
    by_cell: dict[str, dict[str, CellConflictSummary]] = Field(default_factory=dict, alias="byCell")
    by_section: dict[str, CellConflictSummary] = Field(default_factory=dict, alias="bySection")


class ConflictAnalysisRequest(BaseModel):
    config: ConfigData
    schedule: list[ScheduleEntry] = Field(default_factory=list)
