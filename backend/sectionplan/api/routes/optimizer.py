from __future__ import annotations

import logging
from time import perf_counter

from fastapi import APIRouter
from pydantic import ValidationError

from sectionplan.core.config import get_settings
from sectionplan.core.exceptions import ConfigurationError, InvalidConfigError
from sectionplan.schemas.optimizer import (
    FeasibilityRequest,
    OptimizeRequest,
    OptimizeResponse,
    OptimizerProgress,
    ScoringWeights,
    SectionFeasibility,
)
from sectionplan.schemas.preferences import Preferences
from sectionplan.services.config_validator import validate_config_data
from sectionplan.services.determinism import normalize_seed
from sectionplan.services.feasibility import analyze_feasibility
from sectionplan.services.optimizer import AssignmentDriver, OptimizerOptions, run_optimizer
from sectionplan.services.score_summary import calculate_score

logger = logging.getLogger(__name__)

router = APIRouter()

settings = get_settings()


def _default_weights() -> ScoringWeights:
    try:
        return ScoringWeights.model_validate(settings.optimizer_default_weights)
    except ValidationError as exc:
        raise ConfigurationError(
            "Default optimizer weights are out of range",
            details={"weights": settings.optimizer_default_weights},
        ) from exc


@router.post("/run", response_model=OptimizeResponse)
def run_optimizer_route(payload: OptimizeRequest) -> OptimizeResponse:
    started = perf_counter()
    if payload.validate_config:
        validation = validate_config_data(payload.config)
        if not validation.valid:
            raise InvalidConfigError([issue.model_dump() for issue in validation.errors])

    seed = normalize_seed(payload.seed if payload.seed is not None else settings.optimizer_default_seed)
    weights = payload.weights or _default_weights()
    snapshots: list[OptimizerProgress] = []
    logger.info(
        "OPTIMIZER REQUEST | sections=%s | faculty=%s | locked=%s | seed=%s",
        len(payload.config.sections),
        len(payload.config.faculty),
        sum(1 for entry in payload.schedule if entry.locked),
        seed,
    )

    schedule = run_optimizer(
        payload.config,
        payload.preferences,
        payload.schedule,
        OptimizerOptions(seed=seed, weights=weights, on_progress=snapshots.append),
    )
    return OptimizeResponse(
        schedule=schedule,
        summary=calculate_score(schedule),
        progress=snapshots[-1] if snapshots else None,
        seed=seed,
        runtime_ms=int((perf_counter() - started) * 1000),
    )

@router.post("/feasibility", response_model=list[SectionFeasibility])
def feasibility_route(payload: FeasibilityRequest) -> list[SectionFeasibility]:
    driver = AssignmentDriver(
        config=payload.config,
        preferences=Preferences(),
        seed=normalize_seed(settings.optimizer_default_seed),
        weights=ScoringWeights(),
    )
    driver.seed_locked_entries(payload.schedule)
    state = driver.state
    pending = [section_id for section_id in driver.context.sections_by_id if section_id not in state.assigned_sections]
    return analyze_feasibility(driver.context, pending, state.loads, state.tracker)
