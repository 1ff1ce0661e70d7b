from __future__ import annotations

from collections import defaultdict
from typing import Sequence

from sectionplan.schemas.config import ConfigData
from sectionplan.schemas.conflict import (
    SEVERITY_RANK,
    AffectedCell,
    CellConflictSummary,
    Conflict,
    ConflictAnalysis,
    ConflictSeverity,
)
from sectionplan.schemas.schedule import ScheduleEntry
from sectionplan.services.workload import faculty_capacity


def _dedupe(values: Sequence[str]) -> list[str]:
    return list(dict.fromkeys(value for value in values if value))


def _dedupe_cells(entries: Sequence[ScheduleEntry]) -> list[AffectedCell]:
    seen: set[tuple[str, str]] = set()
    cells: list[AffectedCell] = []
    for entry in entries:
        key = (entry.faculty_id, entry.timeslot_id)
        if key in seen:
            continue
        seen.add(key)
        cells.append(AffectedCell(faculty_id=entry.faculty_id, timeslot_id=entry.timeslot_id))
    return cells


def _merge(summary: CellConflictSummary | None, severity: ConflictSeverity, conflict_id: str) -> CellConflictSummary:
    if summary is None:
        return CellConflictSummary(severity=severity, conflict_ids=[conflict_id])
    if conflict_id not in summary.conflict_ids:
        summary.conflict_ids.append(conflict_id)
    if SEVERITY_RANK[severity] > SEVERITY_RANK[summary.severity]:
        summary.severity = severity
    return summary


class ConflictService:
    """User-facing conflict report for a schedule that may have been edited by hand.

    The optimizer never produces these conflicts itself; this is for
    schedules that were imported or changed manually.
    """

    def __init__(self, config: ConfigData, schedule: Sequence[ScheduleEntry]):
        self.config = config
        self.schedule = list(schedule)
        self.faculty_map = {item.id: item for item in config.faculty}
        self.timeslot_map = {item.id: item for item in config.timeslots}
        self.room_map = {item.id: item for item in config.rooms}
        self.section_map = {item.id: item for item in config.sections}
        self.subject_map = {item.id: item for item in config.subjects}

        self._conflicts: list[Conflict] = []
        self._by_cell: dict[str, dict[str, CellConflictSummary]] = {}
        self._by_section: dict[str, CellConflictSummary] = {}

    def _faculty_name(self, faculty_id: str) -> str:
        faculty = self.faculty_map.get(faculty_id)
        return faculty.name if faculty is not None and faculty.name else faculty_id

    def _timeslot_label(self, timeslot_id: str) -> str:
        slot = self.timeslot_map.get(timeslot_id)
        return slot.label if slot is not None and slot.label else timeslot_id

    def _register(
        self,
        *,
        conflict_id: str,
        title: str,
        description: str,
        severity: ConflictSeverity,
        entries: Sequence[ScheduleEntry],
    ) -> None:
        conflict = Conflict(
            id=conflict_id,
            title=title,
            description=description,
            severity=severity,
            related_faculty_ids=_dedupe([entry.faculty_id for entry in entries]),
            related_section_ids=_dedupe([entry.section_id for entry in entries]),
            related_room_ids=_dedupe([entry.room_id for entry in entries]),
            related_timeslot_ids=_dedupe([entry.timeslot_id for entry in entries]),
            affected_cells=_dedupe_cells(entries),
        )
        self._conflicts.append(conflict)
        for entry in entries:
            if entry.faculty_id and entry.timeslot_id:
                row = self._by_cell.setdefault(entry.faculty_id, {})
                row[entry.timeslot_id] = _merge(row.get(entry.timeslot_id), severity, conflict_id)
            if entry.section_id:
                self._by_section[entry.section_id] = _merge(
                    self._by_section.get(entry.section_id), severity, conflict_id
                )

    def detect_conflicts(self) -> ConflictAnalysis:
        self._conflicts = []
        self._by_cell = {}
        self._by_section = {}
        if not self.schedule:
            return ConflictAnalysis()

        faculty_slots: dict[tuple[str, str], list[ScheduleEntry]] = defaultdict(list)
        room_slots: dict[tuple[str, str], list[ScheduleEntry]] = defaultdict(list)
        section_entries: dict[str, list[ScheduleEntry]] = defaultdict(list)
        faculty_entries: dict[str, list[ScheduleEntry]] = defaultdict(list)

        for entry in self.schedule:
            faculty_slots[(entry.faculty_id, entry.timeslot_id)].append(entry)
            if entry.room_id:
                room_slots[(entry.room_id, entry.timeslot_id)].append(entry)
            section_entries[entry.section_id].append(entry)
            faculty_entries[entry.faculty_id].append(entry)

        for (faculty_id, timeslot_id), entries in faculty_slots.items():
            if len(entries) <= 1:
                continue
            self._register(
                conflict_id=f"faculty-double:{faculty_id}:{timeslot_id}",
                title="Faculty double-booked",
                description=(
                    f"{self._faculty_name(faculty_id)} is assigned to {len(entries)} sections "
                    f"during {self._timeslot_label(timeslot_id)}."
                ),
                severity="critical",
                entries=entries,
            )

        for (room_id, timeslot_id), entries in room_slots.items():
            if len(entries) <= 1:
                continue
            room = self.room_map.get(room_id)
            room_label = room.label if room is not None and room.label else room_id
            self._register(
                conflict_id=f"room-double:{room_id}:{timeslot_id}",
                title="Room double-booked",
                description=f"{room_label} hosts {len(entries)} sections during {self._timeslot_label(timeslot_id)}.",
                severity="warning",
                entries=entries,
            )

        for section_id, entries in section_entries.items():
            if len(entries) <= 1:
                continue
            section = self.section_map.get(section_id)
            subject = self.subject_map.get(section.subject_id) if section is not None else None
            label = subject.code if subject is not None and subject.code else section_id
            faculty_list = ", ".join(self._faculty_name(entry.faculty_id) for entry in entries)
            self._register(
                conflict_id=f"section-multiple:{section_id}",
                title="Section assigned multiple times",
                description=f"{label} is assigned to multiple faculty: {faculty_list}.",
                severity="critical",
                entries=entries,
            )

        for faculty_id, entries in faculty_entries.items():
            faculty = self.faculty_map.get(faculty_id)
            if faculty is None:
                continue
            hard_limit = faculty_capacity(faculty.max_sections, faculty.max_overload, faculty.can_overload)
            if len(entries) > hard_limit:
                self._register(
                    conflict_id=f"faculty-load:{faculty_id}:critical",
                    title="Faculty overload (limit exceeded)",
                    description=(
                        f"{self._faculty_name(faculty_id)} has {len(entries)} sections, "
                        f"exceeding the allowed maximum of {hard_limit}."
                    ),
                    severity="critical",
                    entries=entries,
                )

        conflicts = sorted(self._conflicts, key=lambda item: (-SEVERITY_RANK[item.severity], item.title))
        return ConflictAnalysis(conflicts=conflicts, by_cell=self._by_cell, by_section=self._by_section)


def analyze_conflicts(config: ConfigData, schedule: Sequence[ScheduleEntry]) -> ConflictAnalysis:
    return ConflictService(config, schedule).detect_conflicts()


def find_conflicts(config: ConfigData, schedule: Sequence[ScheduleEntry]) -> list[Conflict]:
    return analyze_conflicts(config, schedule).conflicts
