from __future__ import annotations

from collections import defaultdict


class ConflictTracker:
    """Occupied timeslots per faculty member for a single optimizer run.

    The tracker only grows: there is no removal, so every registered
    occupancy stays visible to all later candidate evaluations.
    """

    def __init__(self) -> None:
        self._occupied: dict[str, set[str]] = defaultdict(set)

    def has_conflict(self, faculty_id: str, timeslot_id: str) -> bool:
        occupied = self._occupied.get(faculty_id)
        return bool(occupied) and timeslot_id in occupied

    def add_assignment(self, faculty_id: str, timeslot_id: str) -> None:
        self._occupied[faculty_id].add(timeslot_id)

    def occupied_timeslots(self, faculty_id: str) -> frozenset[str]:
        return frozenset(self._occupied.get(faculty_id, ()))
