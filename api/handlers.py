import asyncio
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from engine.matcher import SCORING_VERSION
from engine.similarity import to_number
from schemas.schemas import (
    ErrorResponse,
    HealthCheckResponse,
    MatchProbabilityResponse,
    ScoreRequest,
    ScoreResponse,
)
from services.match_service import FETCH_FAILURE_COUNTER, REQUEST_COUNTER, run_score, run_single
from settings import get_settings
from supabase_client import SupabaseNotConfigured, get_anon_client, get_service_client
from utils.fetch_profiles import ProfileRepository
from utils.supabase_utils import ProfileFetchError

log = structlog.get_logger()

router = APIRouter()


def get_profile_repository() -> Optional[ProfileRepository]:
    """Repository over the service-role client, checking tokens with the anon client.

    None when Supabase is not configured.
    """
    settings = get_settings()
    try:
        client = get_service_client()
        auth_client = get_anon_client()
    except SupabaseNotConfigured as e:
        log.error("Profile repository unavailable", error=str(e))
        return None
    return ProfileRepository(client, auth_client=auth_client, retries=settings.fetch_retries, delay=settings.fetch_retry_delay)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[len("Bearer "):].strip() or None


def error(status_code: int, message: str, info=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(status="error", message=message, info=info).model_dump(),
    )


@router.get("/", response_model=HealthCheckResponse)
async def healthcheck():
    settings = get_settings()
    return HealthCheckResponse(
        status="ok",
        message="NightMatch match probability engine live",
        version=settings.version,
    )


@router.post("/match-probability/score", response_model=ScoreResponse)
async def score(request: ScoreRequest):
    REQUEST_COUNTER.labels("score").inc()
    result = run_score(request)
    return ScoreResponse(
        matchProbability=result.match_probability,
        breakdown=result.breakdown,
        scoringVersion=SCORING_VERSION,
    )


@router.get(
    "/match-probability/single",
    response_model=MatchProbabilityResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def match_probability_single(
    target_id: Optional[str] = None,
    target_email: Optional[str] = None,
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    authorization: Optional[str] = Header(None),
    repo: Optional[ProfileRepository] = Depends(get_profile_repository),
):
    REQUEST_COUNTER.labels("single").inc()

    if repo is None:
        return error(500, "Database not configured")

    token = bearer_token(authorization)
    if not token:
        return error(401, "Missing authorization token")

    auth_user = await repo.authenticate(token)
    if auth_user is None:
        return error(401, "Invalid token")

    if not target_id and not target_email:
        return error(400, "target_id or target_email required")

    try:
        viewer = await repo.get_viewer(auth_user)
        if not viewer:
            return error(404, "User profile not found")

        target = await repo.get_user(target_id=target_id, target_email=target_email)
        if not target:
            return error(404, "Target user not found")

        if viewer.get("id") == target.get("id"):
            return MatchProbabilityResponse(message="Cannot compute match probability for self")

        viewer_bundle, target_bundle = await asyncio.gather(repo.get_bundle(viewer), repo.get_bundle(target))
    except ProfileFetchError as e:
        FETCH_FAILURE_COUNTER.inc()
        log.error("Profile fetch failed", target_id=target_id, error=str(e))
        return error(500, "Failed to load profiles.", info=str(e))

    return run_single(viewer_bundle, target_bundle, lat=to_number(lat), lng=to_number(lng))
