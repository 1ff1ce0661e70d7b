from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from sectionplan.schemas.config import ConfigData
from sectionplan.schemas.insights import ScheduleScoreSummary
from sectionplan.schemas.preferences import Preferences
from sectionplan.schemas.schedule import ScheduleEntry

OptimizerPhase = Literal["initialization", "analysis", "assignment", "complete"]


class ScoringWeights(BaseModel):
    preference: float = Field(default=1.0, ge=0.0, le=10.0)
    mobility: float = Field(default=1.0, ge=0.0, le=10.0)
    seniority: float = Field(default=1.0, ge=0.0, le=10.0)
    consecutive: float = Field(default=1.0, ge=0.0, le=10.0)


class OptimizerProgress(BaseModel):
    model_config = {"populate_by_name": True, "frozen": True}

    total_sections: int = Field(alias="totalSections")
    processed_sections: int = Field(default=0, alias="processedSections")
    assigned_sections: int = Field(default=0, alias="assignedSections")
    skipped_sections: int = Field(default=0, alias="skippedSections")
    current_phase: OptimizerPhase = Field(alias="currentPhase")


class SectionFeasibility(BaseModel):
    model_config = {"populate_by_name": True, "frozen": True}

    section_id: str = Field(alias="sectionId")
    feasible_count: int = Field(ge=0, alias="feasibleCount")


class OptimizeRequest(BaseModel):
    model_config = {"populate_by_name": True}

    config: ConfigData
    preferences: Preferences = Field(default_factory=Preferences)
    schedule: list[ScheduleEntry] = Field(default_factory=list)
    seed: int | None = None
    weights: ScoringWeights | None = None
    validate_config: bool = Field(default=False, alias="validateConfig")


class OptimizeResponse(BaseModel):
    model_config = {"populate_by_name": True}

    schedule: list[ScheduleEntry]
    summary: ScheduleScoreSummary
    progress: OptimizerProgress | None = None
    seed: int
    runtime_ms: int = Field(alias="runtimeMs")


class FeasibilityRequest(BaseModel):
    config: ConfigData
    schedule: list[ScheduleEntry] = Field(default_factory=list)
