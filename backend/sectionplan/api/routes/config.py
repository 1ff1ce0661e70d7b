import logging

from fastapi import APIRouter

from sectionplan.schemas.config import ConfigData
from sectionplan.schemas.insights import ConfigValidationResult
from sectionplan.services.config_validator import validate_config_data

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/validate", response_model=ConfigValidationResult)
def validate_config(payload: ConfigData):
    result = validate_config_data(payload)
    if not result.valid:
        logger.info("CONFIG VALIDATION FAILED | errors=%s", len(result.errors))
    return result
