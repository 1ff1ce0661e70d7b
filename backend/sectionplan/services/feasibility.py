from __future__ import annotations

from typing import Iterable, Mapping

from sectionplan.schemas.optimizer import SectionFeasibility
from sectionplan.services.conflict_tracker import ConflictTracker
from sectionplan.services.scoring import SchedulingContext
from sectionplan.services.workload import has_remaining_capacity


def count_feasible_faculty(
    context: SchedulingContext,
    section_id: str,
    loads: Mapping[str, int],
    tracker: ConflictTracker,
) -> int:
    section = context.sections_by_id.get(section_id)
    if section is None:
        return 0

    fixed_timeslot = section.timeslot_id
    if fixed_timeslot is not None and fixed_timeslot not in context.timeslots_by_id:
        return 0

    count = 0
    for ranked in context.faculty:
        if not has_remaining_capacity(loads.get(ranked.id, 0), ranked.capacity):
            continue
        # Unpinned sections are only capacity-checked here; the timeslot is
        # resolved per candidate during assignment.
        if fixed_timeslot is not None and tracker.has_conflict(ranked.id, fixed_timeslot):
            continue
        count += 1
    return count


def analyze_feasibility(
    context: SchedulingContext,
    section_ids: Iterable[str],
    loads: Mapping[str, int],
    tracker: ConflictTracker,
) -> list[SectionFeasibility]:
    return [
        SectionFeasibility(
            section_id=section_id,
            feasible_count=count_feasible_faculty(context, section_id, loads, tracker),
        )
        for section_id in section_ids
    ]


def order_by_scarcity(feasibility: Iterable[SectionFeasibility]) -> list[str]:
    """Most-constrained sections first, ties broken by section id."""
    ranked = sorted(feasibility, key=lambda item: (item.feasible_count, item.section_id))
    return [item.section_id for item in ranked]
