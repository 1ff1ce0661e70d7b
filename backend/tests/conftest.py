import pytest
from fastapi.testclient import TestClient

from sectionplan.main import app
from sectionplan.schemas.config import ConfigData
from sectionplan.schemas.preferences import Preferences


def _faculty(faculty_id, max_sections=3, max_overload=1, can_overload=True, name=None):
    return {
        "id": faculty_id,
        "name": name or f"Faculty {faculty_id}",
        "initial": faculty_id.upper(),
        "maxSections": max_sections,
        "maxOverload": max_overload,
        "canOverload": can_overload,
    }


def _section(section_id, timeslot_id="ts1", room_id="r1", subject_id="subj1"):
    return {
        "id": section_id,
        "subjectId": subject_id,
        "timeslotId": timeslot_id,
        "roomId": room_id,
        "capacity": 30,
    }


def _timeslot(timeslot_id, start, end, day="Monday"):
    return {"id": timeslot_id, "label": f"{day[:3]} {start}-{end}", "day": day, "start": start, "end": end}


def _base_config() -> dict:
    return {
        "faculty": [_faculty("f1"), _faculty("f2")],
        "subjects": [{"id": "subj1", "name": "Subject 1", "code": "S1"}],
        "sections": [_section("sec1", "ts1"), _section("sec2", "ts2")],
        "timeslots": [_timeslot("ts1", "09:00", "10:00"), _timeslot("ts2", "10:00", "11:00")],
        "rooms": [{"id": "r1", "label": "Room 1", "buildingId": "b1", "capacity": 30}],
        "buildings": [{"id": "b1", "label": "Building 1"}],
    }


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def config_payload():
    """Plain JSON-shaped config; tweak keys before calling make_config."""

    def build(**overrides) -> dict:
        payload = _base_config()
        payload.update(overrides)
        return payload

    return build


@pytest.fixture()
def make_config(config_payload):
    def build(**overrides) -> ConfigData:
        return ConfigData.model_validate(config_payload(**overrides))

    return build


@pytest.fixture()
def make_preferences():
    def build(**overrides) -> Preferences:
        return Preferences.model_validate(overrides)

    return build


@pytest.fixture()
def faculty():
    return _faculty


@pytest.fixture()
def section():
    return _section


@pytest.fixture()
def timeslot():
    return _timeslot
