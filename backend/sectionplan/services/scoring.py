from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Sequence

from sectionplan.schemas.config import ConfigData, Faculty, Room, Section, Timeslot
from sectionplan.schemas.optimizer import ScoringWeights
from sectionplan.schemas.preferences import Preferences
from sectionplan.schemas.schedule import ScoreBreakdown, WeightedScores
from sectionplan.services.workload import capacity_penalty, faculty_capacity

LUNCH_PRIOR_END_WINDOW = (11 * 60, 13 * 60)
LUNCH_NEXT_START_WINDOW = (11 * 60, 14 * 60)


@dataclass(frozen=True)
class RankedFaculty:
    faculty: Faculty
    # Higher is more senior: the first faculty member in the input list
    # gets len(faculty), the last one gets 1.
    seniority_rank: int
    capacity: int

    @property
    def id(self) -> str:
        return self.faculty.id


@dataclass(frozen=True)
class Assignment:
    section_id: str
    faculty_id: str
    timeslot_id: str | None
    room_id: str | None


@dataclass(frozen=True)
class SchedulingContext:
    """Lookup tables derived once per run from the input snapshot."""

    config: ConfigData
    preferences: Preferences
    weights: ScoringWeights
    faculty: tuple[RankedFaculty, ...]
    faculty_by_id: dict[str, RankedFaculty]
    sections_by_id: dict[str, Section]
    timeslots_by_id: dict[str, Timeslot]
    rooms_by_id: dict[str, Room]
    timeslot_order: dict[str, int]
    day_slot_index: dict[str, int]

    @classmethod
    def build(
        cls,
        config: ConfigData,
        preferences: Preferences,
        weights: ScoringWeights | None = None,
    ) -> "SchedulingContext":
        unique_faculty: dict[str, Faculty] = {}
        for item in config.faculty:
            unique_faculty.setdefault(item.id, item)
        total = len(unique_faculty)
        ranked = tuple(
            RankedFaculty(
                faculty=item,
                seniority_rank=total - index,
                capacity=faculty_capacity(item.max_sections, item.max_overload, item.can_overload),
            )
            for index, item in enumerate(unique_faculty.values())
        )

        timeslots_by_id: dict[str, Timeslot] = {}
        timeslot_order: dict[str, int] = {}
        for index, slot in enumerate(config.timeslots):
            if slot.id in timeslots_by_id:
                continue
            timeslots_by_id[slot.id] = slot
            timeslot_order[slot.id] = index

        return cls(
            config=config,
            preferences=preferences,
            weights=weights or ScoringWeights(),
            faculty=ranked,
            faculty_by_id={item.id: item for item in ranked},
            sections_by_id=_first_by_id(config.sections),
            timeslots_by_id=timeslots_by_id,
            rooms_by_id=_first_by_id(config.rooms),
            timeslot_order=timeslot_order,
            day_slot_index=_build_day_slot_index(timeslots_by_id.values(), timeslot_order),
        )

    def building_for_room(self, room_id: str | None) -> str | None:
        if not room_id:
            return None
        room = self.rooms_by_id.get(room_id)
        return room.building_id if room is not None else None


def _first_by_id(items: Iterable) -> dict:
    indexed: dict = {}
    for item in items:
        indexed.setdefault(item.id, item)
    return indexed


def _build_day_slot_index(timeslots: Iterable[Timeslot], timeslot_order: dict[str, int]) -> dict[str, int]:
    by_day: dict[str, list[Timeslot]] = defaultdict(list)
    for slot in timeslots:
        by_day[slot.day].append(slot)
    index: dict[str, int] = {}
    for day_slots in by_day.values():
        day_slots.sort(key=lambda slot: (slot.start_minutes, slot.end_minutes, timeslot_order[slot.id]))
        for position, slot in enumerate(day_slots):
            index[slot.id] = position
    return index


def preference_score(context: SchedulingContext, assignment: Assignment) -> int:
    prefs = context.preferences
    section = context.sections_by_id.get(assignment.section_id)
    subject_id = section.subject_id if section is not None else None
    building_id = context.building_for_room(assignment.room_id)
    return (
        prefs.subject_level(assignment.faculty_id, subject_id)
        + prefs.timeslot_level(assignment.faculty_id, assignment.timeslot_id)
        + prefs.building_level(assignment.faculty_id, building_id)
    )


def seniority_score(context: SchedulingContext, faculty_id: str) -> int:
    ranked = context.faculty_by_id.get(faculty_id)
    return ranked.seniority_rank if ranked is not None else 0


def mobility_score(context: SchedulingContext, faculty_id: str, assignments: Sequence[Assignment]) -> float:
    mobility_value = context.preferences.mobility_value(faculty_id)
    if mobility_value <= 0:
        return 0.0

    ordered = sorted(
        (item for item in assignments if item.timeslot_id in context.timeslot_order),
        key=lambda item: context.timeslot_order[item.timeslot_id],
    )
    transitions = 0
    for previous, current in zip(ordered, ordered[1:]):
        previous_building = context.building_for_room(previous.room_id)
        current_building = context.building_for_room(current.room_id)
        if previous_building and current_building and previous_building != current_building:
            transitions += 1
    return -1 * mobility_value * transitions


def _spans_lunch(previous: Timeslot, following: Timeslot) -> bool:
    prior_end = previous.end_minutes
    next_start = following.start_minutes
    return (
        LUNCH_PRIOR_END_WINDOW[0] <= prior_end <= LUNCH_PRIOR_END_WINDOW[1]
        and LUNCH_NEXT_START_WINDOW[0] <= next_start <= LUNCH_NEXT_START_WINDOW[1]
    )


def consecutive_score(context: SchedulingContext, faculty_id: str, assignments: Sequence[Assignment]) -> float:
    consecutive_value = context.preferences.consecutive_value(faculty_id)
    if consecutive_value <= 0:
        return 0.0

    slots_by_day: dict[str, list[Timeslot]] = defaultdict(list)
    for item in assignments:
        slot = context.timeslots_by_id.get(item.timeslot_id) if item.timeslot_id else None
        if slot is not None:
            slots_by_day[slot.day].append(slot)

    counter = 0
    for day_slots in slots_by_day.values():
        day_slots.sort(key=lambda slot: context.day_slot_index[slot.id])
        for previous, following in zip(day_slots, day_slots[1:]):
            if context.day_slot_index[following.id] - context.day_slot_index[previous.id] != 1:
                continue
            counter += 2 if _spans_lunch(previous, following) else 1
    return -1 * consecutive_value * counter


def score_assignment(
    context: SchedulingContext,
    committed: Sequence[Assignment],
    candidate: Assignment,
    current_load: int,
) -> ScoreBreakdown:
    """Score ``candidate`` against the faculty member's ``committed`` assignments.

    ``committed`` must hold only assignments already committed for the
    candidate's faculty member; ``current_load`` is that member's load
    before the candidate is added. Locked seeding and free assignment both
    go through this function.
    """
    ranked = context.faculty_by_id.get(candidate.faculty_id)
    with_candidate = [*committed, candidate]

    preference = preference_score(context, candidate)
    seniority = seniority_score(context, candidate.faculty_id)
    mobility = mobility_score(context, candidate.faculty_id, with_candidate)
    consecutive = consecutive_score(context, candidate.faculty_id, with_candidate)
    if ranked is not None:
        faculty = ranked.faculty
        penalty = capacity_penalty(current_load, faculty.max_sections, faculty.max_overload, faculty.can_overload)
    else:
        penalty = 0

    weights = context.weights
    weighted = WeightedScores(
        preference=preference * weights.preference,
        mobility=mobility * weights.mobility,
        seniority=seniority * weights.seniority,
        consecutive=consecutive * weights.consecutive,
    )
    total = weighted.preference + weighted.mobility + weighted.seniority + weighted.consecutive + penalty
    return ScoreBreakdown(
        preference=preference,
        mobility=mobility,
        seniority=seniority,
        consecutive=consecutive,
        capacity_penalty=penalty,
        total=total,
        weighted=weighted,
    )
