from sectionplan.schemas.optimizer import SectionFeasibility
from sectionplan.schemas.preferences import Preferences
from sectionplan.services.conflict_tracker import ConflictTracker
from sectionplan.services.feasibility import analyze_feasibility, count_feasible_faculty, order_by_scarcity
from sectionplan.services.scoring import SchedulingContext


def _context(config):
    return SchedulingContext.build(config, Preferences())


def test_every_faculty_with_room_is_feasible(make_config):
    context = _context(make_config())
    assert count_feasible_faculty(context, "sec1", {}, ConflictTracker()) == 2


def test_busy_faculty_is_not_counted(make_config):
    context = _context(make_config())
    tracker = ConflictTracker()
    tracker.add_assignment("f1", "ts1")

    assert count_feasible_faculty(context, "sec1", {}, tracker) == 1
    assert count_feasible_faculty(context, "sec2", {}, tracker) == 2


def test_faculty_at_capacity_is_not_counted(make_config):
    context = _context(make_config())
    assert count_feasible_faculty(context, "sec1", {"f1": 4}, ConflictTracker()) == 1
    assert count_feasible_faculty(context, "sec1", {"f1": 4, "f2": 4}, ConflictTracker()) == 0


def test_missing_fixed_timeslot_makes_section_infeasible(make_config, section):
    context = _context(make_config(sections=[section("sec1", "ts-missing")]))
    assert count_feasible_faculty(context, "sec1", {}, ConflictTracker()) == 0


def test_unknown_section_is_infeasible(make_config):
    context = _context(make_config())
    assert count_feasible_faculty(context, "nope", {}, ConflictTracker()) == 0


def test_unpinned_section_ignores_tracker(make_config, section):
    context = _context(make_config(sections=[section("sec1", None)]))
    tracker = ConflictTracker()
    tracker.add_assignment("f1", "ts1")
    tracker.add_assignment("f1", "ts2")

    assert count_feasible_faculty(context, "sec1", {}, tracker) == 2


def test_analyze_feasibility_keeps_input_order(make_config):
    context = _context(make_config())
    tracker = ConflictTracker()
    tracker.add_assignment("f2", "ts2")

    result = analyze_feasibility(context, ["sec2", "sec1"], {}, tracker)

    assert result == [
        SectionFeasibility(section_id="sec2", feasible_count=1),
        SectionFeasibility(section_id="sec1", feasible_count=2),
    ]


def test_order_by_scarcity_breaks_ties_by_section_id():
    feasibility = [
        SectionFeasibility(section_id="c", feasible_count=2),
        SectionFeasibility(section_id="b", feasible_count=0),
        SectionFeasibility(section_id="a", feasible_count=2),
        SectionFeasibility(section_id="d", feasible_count=1),
    ]
    assert order_by_scarcity(feasibility) == ["b", "d", "a", "c"]
