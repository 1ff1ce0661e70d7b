from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from sectionplan.schemas.config import ConfigData
from sectionplan.schemas.insights import PreferenceBreakdown, ScheduleScoreSummary
from sectionplan.schemas.preferences import Preferences
from sectionplan.schemas.schedule import ScheduleEntry, ScoreBreakdown


def calculate_score(schedule: Sequence[ScheduleEntry]) -> ScheduleScoreSummary:
    if not schedule:
        return ScheduleScoreSummary(total=0.0, average=0.0)
    total = sum(entry.score_breakdown.total if entry.score_breakdown else 0.0 for entry in schedule)
    return ScheduleScoreSummary(total=total, average=total / len(schedule))


def calculate_preference_breakdown(
    faculty_id: str,
    section_id: str,
    timeslot_id: str,
    building_id: str | None,
    preferences: Preferences,
    config: ConfigData,
) -> PreferenceBreakdown:
    section = next((item for item in config.sections if item.id == section_id), None)
    subject = preferences.subject_level(faculty_id, section.subject_id if section else None)
    timeslot = preferences.timeslot_level(faculty_id, timeslot_id)
    building = preferences.building_level(faculty_id, building_id)
    return PreferenceBreakdown(
        subject=subject,
        timeslot=timeslot,
        building=building,
        total=subject + timeslot + building,
    )


def format_score(value: float) -> str:
    rounded = Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    if rounded == 0:
        return "0.0"
    return f"+{rounded}" if rounded > 0 else f"{rounded}"


def describe_score(breakdown: ScoreBreakdown | None) -> list[str]:
    if breakdown is None:
        return ["Score breakdown not available"]

    lines = ["Score Breakdown:"]
    components = (
        ("Preference", breakdown.preference),
        ("Mobility", breakdown.mobility),
        ("Seniority", breakdown.seniority),
        ("Consecutive", breakdown.consecutive),
    )
    for label, raw in components:
        if breakdown.weighted is not None:
            weighted = getattr(breakdown.weighted, label.lower())
            lines.append(f"  {label}: {format_score(weighted)} ({format_score(raw)} × weight)")
        else:
            lines.append(f"  {label}: {format_score(raw)}")
    lines.append(f"  Capacity Penalty: {format_score(breakdown.capacity_penalty)}")
    lines.append(f"  Total: {format_score(breakdown.total)}")
    return lines
