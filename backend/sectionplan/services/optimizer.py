from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Mapping, Sequence

from sectionplan.schemas.config import ConfigData, Section
from sectionplan.schemas.optimizer import OptimizerPhase, OptimizerProgress, ScoringWeights
from sectionplan.schemas.preferences import Preferences
from sectionplan.schemas.schedule import ScheduleEntry, ScoreBreakdown
from sectionplan.services.conflict_tracker import ConflictTracker
from sectionplan.services.determinism import normalize_seed, tie_break_hash
from sectionplan.services.feasibility import analyze_feasibility, order_by_scarcity
from sectionplan.services.scoring import Assignment, RankedFaculty, SchedulingContext, score_assignment
from sectionplan.services.workload import has_remaining_capacity

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[OptimizerProgress], None]

MIN_WEIGHT = 0.0
MAX_WEIGHT = 10.0


@dataclass
class OptimizerOptions:
    seed: int | None = None
    weights: ScoringWeights | Mapping[str, float] | None = None
    on_progress: ProgressCallback | None = None


@dataclass
class SchedulingState:
    """Mutable bookkeeping owned by one optimizer run."""

    tracker: ConflictTracker = field(default_factory=ConflictTracker)
    loads: dict[str, int] = field(default_factory=dict)
    assigned_sections: set[str] = field(default_factory=set)
    assignments_by_faculty: dict[str, list[Assignment]] = field(default_factory=lambda: defaultdict(list))
    entries: list[ScheduleEntry] = field(default_factory=list)
    skipped_sections: list[str] = field(default_factory=list)
    processed_sections: int = 0

    def load_of(self, faculty_id: str) -> int:
        return self.loads.get(faculty_id, 0)

    def committed_for(self, faculty_id: str) -> list[Assignment]:
        return self.assignments_by_faculty.get(faculty_id, [])

    def commit(self, assignment: Assignment, breakdown: ScoreBreakdown, *, locked: bool) -> ScheduleEntry:
        entry = ScheduleEntry(
            section_id=assignment.section_id,
            faculty_id=assignment.faculty_id,
            timeslot_id=assignment.timeslot_id or "",
            room_id=assignment.room_id or "",
            locked=locked,
            score_breakdown=breakdown,
        )
        self.entries.append(entry)
        self.assigned_sections.add(assignment.section_id)
        self.loads[assignment.faculty_id] = self.load_of(assignment.faculty_id) + 1
        self.assignments_by_faculty[assignment.faculty_id].append(assignment)
        if assignment.timeslot_id:
            self.tracker.add_assignment(assignment.faculty_id, assignment.timeslot_id)
        return entry


@dataclass(frozen=True)
class Candidate:
    faculty: RankedFaculty
    timeslot_id: str | None
    breakdown: ScoreBreakdown
    load: int
    tie_break: int

    def sort_key(self) -> tuple[float, int, int, int]:
        return (-self.breakdown.total, self.load, -self.faculty.capacity, self.tie_break)


def _coerce_weights(weights: ScoringWeights | Mapping[str, float] | None) -> ScoringWeights:
    if weights is None:
        return ScoringWeights()
    if isinstance(weights, ScoringWeights):
        return weights
    clamped = {
        key: min(MAX_WEIGHT, max(MIN_WEIGHT, float(value)))
        for key, value in weights.items()
        if key in ScoringWeights.model_fields
    }
    return ScoringWeights(**clamped)


class AssignmentDriver:
    def __init__(
        self,
        *,
        config: ConfigData,
        preferences: Preferences,
        seed: int,
        weights: ScoringWeights,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.context = SchedulingContext.build(config, preferences, weights)
        self.seed = seed
        self.on_progress = on_progress
        self.state = SchedulingState()
        self.dropped_locked = 0

    def _report(self, phase: OptimizerPhase) -> None:
        if self.on_progress is None:
            return
        self.on_progress(
            OptimizerProgress(
                total_sections=len(self.context.config.sections),
                processed_sections=self.state.processed_sections,
                assigned_sections=len(self.state.entries),
                skipped_sections=len(self.state.skipped_sections),
                current_phase=phase,
            )
        )

    def run(self, current_schedule: Sequence[ScheduleEntry]) -> list[ScheduleEntry]:
        self._report("initialization")
        self.seed_locked_entries(current_schedule)

        self._report("analysis")
        pending = [
            section_id
            for section_id in self.context.sections_by_id
            if section_id not in self.state.assigned_sections
        ]
        feasibility = analyze_feasibility(self.context, pending, self.state.loads, self.state.tracker)

        self._report("assignment")
        for section_id in order_by_scarcity(feasibility):
            self.assign_section(self.context.sections_by_id[section_id])
            self.state.processed_sections += 1
            self._report("assignment")

        self._report("complete")
        return list(self.state.entries)

    def seed_locked_entries(self, current_schedule: Sequence[ScheduleEntry]) -> None:
        for entry in current_schedule:
            if not entry.locked:
                continue
            section = self.context.sections_by_id.get(entry.section_id)
            ranked = self.context.faculty_by_id.get(entry.faculty_id)
            timeslot_id = entry.timeslot_id or (section.timeslot_id if section is not None else None)
            if (
                section is None
                or ranked is None
                or timeslot_id not in self.context.timeslots_by_id
                or section.id in self.state.assigned_sections
                or self.state.tracker.has_conflict(ranked.id, timeslot_id)
            ):
                self.dropped_locked += 1
                logger.debug(
                    "LOCKED ENTRY DROPPED | section_id=%s | faculty_id=%s | timeslot_id=%s",
                    entry.section_id,
                    entry.faculty_id,
                    entry.timeslot_id,
                )
                continue

            assignment = Assignment(
                section_id=section.id,
                faculty_id=ranked.id,
                timeslot_id=timeslot_id,
                room_id=entry.room_id,
            )
            breakdown = score_assignment(
                self.context,
                self.state.committed_for(ranked.id),
                assignment,
                self.state.load_of(ranked.id),
            )
            self.state.commit(assignment, breakdown, locked=True)

    def resolve_timeslot(self, faculty_id: str, section: Section) -> str | None:
        tracker = self.state.tracker
        if section.timeslot_id is not None:
            if section.timeslot_id not in self.context.timeslots_by_id:
                return None
            if tracker.has_conflict(faculty_id, section.timeslot_id):
                return None
            return section.timeslot_id

        best_id: str | None = None
        best_level = 0
        for slot in self.context.timeslots_by_id.values():
            if tracker.has_conflict(faculty_id, slot.id):
                continue
            level = self.context.preferences.timeslot_level(faculty_id, slot.id)
            if best_id is None or level > best_level:
                best_id = slot.id
                best_level = level
        return best_id

    def rank_candidates(self, section: Section) -> list[Candidate]:
        candidates: list[Candidate] = []
        for ranked in self.context.faculty:
            timeslot_id = self.resolve_timeslot(ranked.id, section)
            load = self.state.load_of(ranked.id)
            prospective = Assignment(
                section_id=section.id,
                faculty_id=ranked.id,
                timeslot_id=timeslot_id or section.timeslot_id,
                room_id=section.room_id,
            )
            candidates.append(
                Candidate(
                    faculty=ranked,
                    timeslot_id=timeslot_id,
                    breakdown=score_assignment(self.context, self.state.committed_for(ranked.id), prospective, load),
                    load=load,
                    tie_break=tie_break_hash(self.seed, ranked.id, section.id),
                )
            )
        candidates.sort(key=Candidate.sort_key)
        return candidates

    def assign_section(self, section: Section) -> ScheduleEntry | None:
        selected: Candidate | None = None
        for candidate in self.rank_candidates(section):
            if not has_remaining_capacity(candidate.load, candidate.faculty.capacity):
                continue
            if candidate.timeslot_id is None:
                continue
            selected = candidate
            break

        if selected is None:
            self.state.skipped_sections.append(section.id)
            logger.debug("SECTION SKIPPED | section_id=%s | reason=no usable faculty/timeslot", section.id)
            return None

        assignment = Assignment(
            section_id=section.id,
            faculty_id=selected.faculty.id,
            timeslot_id=selected.timeslot_id,
            room_id=section.room_id,
        )
        breakdown = score_assignment(
            self.context,
            self.state.committed_for(selected.faculty.id),
            assignment,
            self.state.load_of(selected.faculty.id),
        )
        return self.state.commit(assignment, breakdown, locked=False)


def run_optimizer(
    config: ConfigData,
    preferences: Preferences | None = None,
    current_schedule: Sequence[ScheduleEntry] | None = None,
    options: OptimizerOptions | None = None,
) -> list[ScheduleEntry]:
    """Greedily assign every unassigned section to a faculty member and timeslot.

    Locked entries of ``current_schedule`` are kept as they are; unlocked
    entries are ignored. Sections nobody can take are left out of the
    result instead of raising.
    """
    options = options or OptimizerOptions()
    seed = normalize_seed(options.seed)
    driver = AssignmentDriver(
        config=config,
        preferences=preferences or Preferences(),
        seed=seed,
        weights=_coerce_weights(options.weights),
        on_progress=options.on_progress,
    )
    logger.info(
        "OPTIMIZER RUN START | sections=%s | faculty=%s | timeslots=%s | seed=%s",
        len(config.sections),
        len(config.faculty),
        len(config.timeslots),
        seed,
    )
    entries = driver.run(current_schedule or [])
    logger.info(
        "OPTIMIZER RUN COMPLETE | entries=%s | skipped=%s | dropped_locked=%s",
        len(entries),
        len(driver.state.skipped_sections),
        driver.dropped_locked,
    )
    return entries
