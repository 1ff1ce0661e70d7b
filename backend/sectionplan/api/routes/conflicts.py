from fastapi import APIRouter

from sectionplan.schemas.conflict import ConflictAnalysis, ConflictAnalysisRequest
from sectionplan.services.conflict_service import ConflictService

router = APIRouter()


@router.post("/analyze", response_model=ConflictAnalysis)
def analyze_conflicts(payload: ConflictAnalysisRequest):
    service = ConflictService(payload.config, payload.schedule)
    return service.detect_conflicts()
