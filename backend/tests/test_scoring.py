import pytest

from sectionplan.schemas.config import ConfigData
from sectionplan.schemas.optimizer import ScoringWeights
from sectionplan.services.scoring import (
    Assignment,
    SchedulingContext,
    consecutive_score,
    mobility_score,
    preference_score,
    score_assignment,
    seniority_score,
)


@pytest.fixture()
def two_buildings(config_payload, section):
    return config_payload(
        sections=[section("sec1", "ts1", "r1"), section("sec2", "ts2", "r2")],
        rooms=[
            {"id": "r1", "label": "Room 1", "buildingId": "b1", "capacity": 30},
            {"id": "r2", "label": "Room 2", "buildingId": "b2", "capacity": 30},
            {"id": "r3", "label": "Room 3", "buildingId": "b1", "capacity": 30},
            {"id": "r4", "label": "Room 4", "capacity": 30},
        ],
        buildings=[{"id": "b1", "label": "Building 1"}, {"id": "b2", "label": "Building 2"}],
    )


def _context(make_config, preferences, config=None, weights=None, **config_overrides):
    data = ConfigData.model_validate(config) if config is not None else make_config(**config_overrides)
    return SchedulingContext.build(data, preferences, weights)


def test_seniority_follows_faculty_order(make_config, make_preferences, faculty):
    context = _context(
        make_config,
        make_preferences(),
        faculty=[faculty("f1"), faculty("f2"), faculty("f3")],
    )
    assert seniority_score(context, "f1") == 3
    assert seniority_score(context, "f2") == 2
    assert seniority_score(context, "f3") == 1
    assert seniority_score(context, "unknown") == 0


def test_duplicate_faculty_ids_keep_first_occurrence(make_config, make_preferences, faculty):
    context = _context(
        make_config,
        make_preferences(),
        faculty=[faculty("f1", max_sections=5), faculty("f2"), faculty("f1", max_sections=1)],
    )
    assert len(context.faculty) == 2
    assert context.faculty_by_id["f1"].capacity == 6
    assert seniority_score(context, "f1") == 2


def test_preference_sums_subject_timeslot_and_building(make_config, make_preferences):
    prefs = make_preferences(
        facultySubject={"f1": {"subj1": 3}},
        facultyTimeslot={"f1": {"ts1": 2}},
        facultyBuilding={"f1": {"b1": -1}},
    )
    context = _context(make_config, prefs)

    assert preference_score(context, Assignment("sec1", "f1", "ts1", "r1")) == 4
    assert preference_score(context, Assignment("sec1", "f2", "ts1", "r1")) == 0


def test_preference_ignores_unknown_room(make_config, make_preferences):
    prefs = make_preferences(facultyBuilding={"f1": {"b1": 3}})
    context = _context(make_config, prefs)

    assert preference_score(context, Assignment("sec1", "f1", "ts1", "missing")) == 0
    assert preference_score(context, Assignment("sec1", "f1", "ts1", None)) == 0


def test_mobility_penalises_building_transitions(make_config, make_preferences, two_buildings):
    context = _context(make_config, make_preferences(mobility={"f1": 5}), config=two_buildings)
    assignments = [Assignment("sec1", "f1", "ts1", "r1"), Assignment("sec2", "f1", "ts2", "r2")]

    assert mobility_score(context, "f1", assignments) == -5


def test_mobility_scales_with_multiplier(make_config, make_preferences, two_buildings):
    assignments = [Assignment("sec1", "f1", "ts1", "r1"), Assignment("sec2", "f1", "ts2", "r2")]
    low = _context(make_config, make_preferences(mobility={"f1": 2}), config=two_buildings)
    high = _context(make_config, make_preferences(mobility={"f1": 10}), config=two_buildings)

    assert mobility_score(high, "f1", assignments) < mobility_score(low, "f1", assignments)


def test_mobility_zero_within_one_building(make_config, make_preferences, two_buildings):
    context = _context(make_config, make_preferences(mobility={"f1": 5}), config=two_buildings)
    assignments = [Assignment("sec1", "f1", "ts1", "r1"), Assignment("sec2", "f1", "ts2", "r3")]

    assert mobility_score(context, "f1", assignments) == 0


def test_mobility_skips_rooms_without_building(make_config, make_preferences, two_buildings):
    context = _context(make_config, make_preferences(mobility={"f1": 5}), config=two_buildings)
    assignments = [Assignment("sec1", "f1", "ts1", "r1"), Assignment("sec2", "f1", "ts2", "r4")]

    assert mobility_score(context, "f1", assignments) == 0


def test_mobility_without_preference_is_zero(make_config, make_preferences, two_buildings):
    context = _context(make_config, make_preferences(), config=two_buildings)
    assignments = [Assignment("sec1", "f1", "ts1", "r1"), Assignment("sec2", "f1", "ts2", "r2")]

    assert mobility_score(context, "f1", assignments) == 0


def test_mobility_orders_by_configured_timeslot_position(make_config, make_preferences, two_buildings):
    context = _context(make_config, make_preferences(mobility={"f1": 1}), config=two_buildings)
    assignments = [
        Assignment("sec2", "f1", "ts2", "r2"),
        Assignment("sec1", "f1", "ts1", "r1"),
        Assignment("sec3", "f1", "ts2", "r2"),
    ]

    # ts1(b1) -> ts2(b2) -> ts2(b2): one transition.
    assert mobility_score(context, "f1", assignments) == -1


def test_consecutive_defaults_to_one_per_pair(make_config, make_preferences):
    context = _context(make_config, make_preferences())
    assignments = [Assignment("sec1", "f1", "ts1", "r1"), Assignment("sec2", "f1", "ts2", "r1")]

    assert consecutive_score(context, "f1", assignments) == -1


def test_consecutive_explicit_zero_disables_penalty(make_config, make_preferences):
    context = _context(make_config, make_preferences(consecutive={"f1": 0}))
    assignments = [Assignment("sec1", "f1", "ts1", "r1"), Assignment("sec2", "f1", "ts2", "r1")]

    assert consecutive_score(context, "f1", assignments) == 0


def test_consecutive_multiplier_scales_penalty(make_config, make_preferences):
    context = _context(make_config, make_preferences(consecutive={"f1": 2}))
    assignments = [Assignment("sec1", "f1", "ts1", "r1"), Assignment("sec2", "f1", "ts2", "r1")]

    assert consecutive_score(context, "f1", assignments) == -2


def test_consecutive_across_lunch_counts_double(make_config, make_preferences, timeslot):
    context = _context(
        make_config,
        make_preferences(),
        timeslots=[timeslot("ts1", "11:00", "12:00"), timeslot("ts2", "12:00", "13:00")],
    )
    assignments = [Assignment("sec1", "f1", "ts1", "r1"), Assignment("sec2", "f1", "ts2", "r1")]

    assert consecutive_score(context, "f1", assignments) == -2


def test_consecutive_ignores_gaps_between_configured_slots(make_config, make_preferences, timeslot):
    context = _context(
        make_config,
        make_preferences(),
        timeslots=[
            timeslot("ts1", "09:00", "10:00"),
            timeslot("ts2", "10:00", "11:00"),
            timeslot("ts3", "11:00", "12:00"),
        ],
    )
    assignments = [Assignment("sec1", "f1", "ts1", "r1"), Assignment("sec3", "f1", "ts3", "r1")]

    assert consecutive_score(context, "f1", assignments) == 0


def test_consecutive_only_within_the_same_day(make_config, make_preferences, timeslot):
    context = _context(
        make_config,
        make_preferences(),
        timeslots=[timeslot("ts1", "09:00", "10:00"), timeslot("ts2", "10:00", "11:00", day="Tuesday")],
    )
    assignments = [Assignment("sec1", "f1", "ts1", "r1"), Assignment("sec2", "f1", "ts2", "r1")]

    assert consecutive_score(context, "f1", assignments) == 0


def test_consecutive_uses_start_time_not_input_order(make_config, make_preferences, timeslot):
    context = _context(
        make_config,
        make_preferences(),
        timeslots=[timeslot("late", "10:00", "11:00"), timeslot("early", "09:00", "10:00")],
    )
    assignments = [Assignment("sec1", "f1", "late", "r1"), Assignment("sec2", "f1", "early", "r1")]

    assert context.day_slot_index == {"early": 0, "late": 1}
    assert consecutive_score(context, "f1", assignments) == -1


def test_score_assignment_weights_components_but_not_capacity(make_config, make_preferences, faculty):
    prefs = make_preferences(facultySubject={"f2": {"subj1": 2}})
    context = _context(
        make_config,
        prefs,
        weights=ScoringWeights(preference=2.0, seniority=0.5),
        faculty=[faculty("f1"), faculty("f2", max_sections=0, max_overload=0, can_overload=False)],
    )

    breakdown = score_assignment(context, [], Assignment("sec1", "f2", "ts1", "r1"), current_load=0)

    assert breakdown.preference == 2
    assert breakdown.seniority == 1
    assert breakdown.capacity_penalty == -1000
    assert breakdown.weighted.preference == 4.0
    assert breakdown.weighted.seniority == 0.5
    assert breakdown.total == pytest.approx(4.0 + 0.5 - 1000)


def test_score_assignment_counts_committed_pairs(make_config, make_preferences):
    context = _context(make_config, make_preferences())
    committed = [Assignment("sec1", "f1", "ts1", "r1")]

    breakdown = score_assignment(context, committed, Assignment("sec2", "f1", "ts2", "r1"), current_load=1)

    assert breakdown.consecutive == -1
    assert breakdown.mobility == 0
    assert breakdown.total == pytest.approx(2 - 1)
