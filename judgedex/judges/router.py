from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from judgedex.core.exceptions import InvalidQuery
from judgedex.core.rate_limit import judge_profile_limiter
from judgedex.courtlistener.schemas import SearchFilters
from judgedex.judges.dependencies import get_profile_service
from judgedex.judges.schemas import (
    AIAnalysis,
    BasicJudgeInfo,
    CourtListResponse,
    HealthResponse,
    JudgeRecord,
    JudgeSearchResponse,
    JudgeWithPositions,
)
from judgedex.judges.service import JudgeProfileService, is_numeric_id

profile_router = APIRouter(prefix="/judge-profile", tags=["judge-profile"])
judges_router = APIRouter(prefix="/judges", tags=["judges"])


# ---------------------------------------------------------------------------
# AI-enriched profile
# ---------------------------------------------------------------------------

@profile_router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        service="judge-profile-api",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@profile_router.get(
    "/{judge_id}",
    response_model=AIAnalysis,
    dependencies=[Depends(judge_profile_limiter)],
)
async def get_judge_profile(
    judge_id: str,
    service: JudgeProfileService = Depends(get_profile_service),
):
    return await service.get_judge_profile(judge_id)


@profile_router.get(
    "/{judge_id}/basic",
    response_model=BasicJudgeInfo,
    dependencies=[Depends(judge_profile_limiter)],
)
async def get_basic_judge_info(
    judge_id: str,
    service: JudgeProfileService = Depends(get_profile_service),
):
    return await service.get_basic_judge_info(judge_id)


# ---------------------------------------------------------------------------
# Directory lookups
# ---------------------------------------------------------------------------

@judges_router.get("/search-courtlistener", response_model=JudgeSearchResponse)
async def search_judges(
    q: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    court_type: Optional[str] = None,
    position_type: Optional[str] = None,
    is_active: Optional[bool] = None,
    state: Optional[str] = None,
    has_photo: Optional[bool] = None,
    service: JudgeProfileService = Depends(get_profile_service),
):
    if not q or not q.strip():
        raise InvalidQuery('Query parameter "q" is required')

    filters = SearchFilters(
        court_type=court_type,
        position_type=position_type,
        is_active=is_active,
        state=state,
        has_photo=has_photo,
    )
    return await service.search_judges(q, filters, limit, offset)


@judges_router.get("/judge/slug/{slug}", response_model=JudgeWithPositions)
async def get_judge_by_slug(
    slug: str,
    service: JudgeProfileService = Depends(get_profile_service),
):
    return await service.get_judge_by_slug(slug)


@judges_router.get("/judge/{judge_id}", response_model=JudgeRecord)
async def get_judge(
    judge_id: str,
    service: JudgeProfileService = Depends(get_profile_service),
):
    return await service.get_judge_record(judge_id)


@judges_router.get("/courts", response_model=CourtListResponse)
async def list_courts(service: JudgeProfileService = Depends(get_profile_service)):
    return await service.list_courts()


@judges_router.get("/search-by-court/{court_id}", response_model=JudgeSearchResponse)
async def search_by_court(
    court_id: str,
    limit: int = Query(20, ge=1, le=100),
    service: JudgeProfileService = Depends(get_profile_service),
):
    if not is_numeric_id(court_id):
        raise InvalidQuery("Invalid court ID")
    return await service.search_by_court(int(court_id), limit)


@judges_router.post("/clear-cache")
async def clear_cache(service: JudgeProfileService = Depends(get_profile_service)):
    await service.clear_cache()
    return {"message": "Cache cleared successfully"}
