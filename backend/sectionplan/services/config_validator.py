from __future__ import annotations

from sectionplan.schemas.config import ConfigData
from sectionplan.schemas.insights import ConfigValidationIssue, ConfigValidationResult

REQUIRED_COLLECTIONS = ("faculty", "subjects", "timeslots", "buildings", "rooms", "sections")


def validate_config_data(config: ConfigData) -> ConfigValidationResult:
    """Check a configuration snapshot for empty collections and dangling references.

    Advisory only: the optimizer tolerates every problem reported here by
    skipping what it cannot resolve.
    """
    errors: list[ConfigValidationIssue] = []

    for name in REQUIRED_COLLECTIONS:
        if not getattr(config, name):
            errors.append(ConfigValidationIssue(field=name, message=f"{name.capitalize()} array is empty"))

    if errors:
        return ConfigValidationResult(valid=False, errors=errors)

    subject_ids = {item.id for item in config.subjects}
    timeslot_ids = {item.id for item in config.timeslots}
    room_ids = {item.id for item in config.rooms}
    building_ids = {item.id for item in config.buildings}

    for section in config.sections:
        if section.subject_id not in subject_ids:
            errors.append(
                ConfigValidationIssue(
                    field="sections",
                    message="Section references non-existent subject",
                    context=f"Section ID: {section.id}, Subject ID: {section.subject_id}",
                )
            )
        if section.timeslot_id is not None and section.timeslot_id not in timeslot_ids:
            errors.append(
                ConfigValidationIssue(
                    field="sections",
                    message="Section references non-existent timeslot",
                    context=f"Section ID: {section.id}, Timeslot ID: {section.timeslot_id}",
                )
            )
        if section.room_id is not None and section.room_id not in room_ids:
            errors.append(
                ConfigValidationIssue(
                    field="sections",
                    message="Section references non-existent room",
                    context=f"Section ID: {section.id}, Room ID: {section.room_id}",
                )
            )

    for room in config.rooms:
        if room.building_id not in building_ids:
            errors.append(
                ConfigValidationIssue(
                    field="rooms",
                    message="Room references non-existent building",
                    context=f"Room ID: {room.id}, Building ID: {room.building_id}",
                )
            )

    return ConfigValidationResult(valid=not errors, errors=errors)
