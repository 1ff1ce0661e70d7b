from __future__ import annotations

DISQUALIFYING_PENALTY = -1000
OVERLOAD_STEP_PENALTY = -50


def faculty_capacity(max_sections: int, max_overload: int, can_overload: bool) -> int:
    extra = max_overload if can_overload else 0
    return max(0, max_sections + extra)


def capacity_penalty(current_load: int, max_sections: int, max_overload: int, can_overload: bool) -> int:
    """Penalty for giving one more section to a faculty member at ``current_load``.

    Within the base load the penalty is 0. Each overloaded section costs
    50 more than the previous one, and anything past the overload ceiling
    (or any overload at all when overloading is not allowed) scores
    -1000 so it always loses to a feasible alternative.
    """
    if current_load < max_sections:
        return 0
    if not can_overload:
        return DISQUALIFYING_PENALTY
    overload_amount = current_load - max_sections
    if overload_amount >= max_overload:
        return DISQUALIFYING_PENALTY
    return OVERLOAD_STEP_PENALTY * (overload_amount + 1)


def has_remaining_capacity(current_load: int, capacity: int) -> bool:
    return current_load < capacity
