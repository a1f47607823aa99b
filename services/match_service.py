# 📦 /services/match_service.py

import structlog
from prometheus_client import Counter

from engine.matcher import SCORING_VERSION, MatchResult, calculate_match_probability, select_weights
from schemas.schemas import MatchProbabilityResponse, ScoreRequest
from settings import get_settings
from utils.fetch_profiles import ProfileBundle
from utils.geo import approximate_travel_minutes, distance_km

log = structlog.get_logger()

REQUEST_COUNTER = Counter("nightmatch_match_probability_requests_total", "Total match probability requests", ["endpoint"])
SCORES_COMPUTED_COUNTER = Counter("nightmatch_scores_computed_total", "Match probabilities computed")
HARD_CONFLICT_COUNTER = Counter("nightmatch_hard_conflicts_total", "Scored pairs with a hard-limit conflict")
FETCH_FAILURE_COUNTER = Counter("nightmatch_profile_fetch_failures_total", "Profile lookups that failed after retries")


def _score(**kwargs) -> MatchResult:
    result = calculate_match_probability(weights=select_weights(get_settings().weights_profile), **kwargs)
    SCORES_COMPUTED_COUNTER.inc()
    if result.details.has_hard_conflict:
        HARD_CONFLICT_COUNTER.inc()
    return result


def run_score(request: ScoreRequest) -> MatchResult:
    """Score a fully supplied input bundle."""
    return _score(
        travel_time_minutes=request.travel_time_minutes,
        user_profile=request.user_profile,
        match_profile=request.match_profile,
        user_private_profile=request.user_private_profile,
        match_private_profile=request.match_private_profile,
        user_embedding=request.user_embedding,
        match_embedding=request.match_embedding,
    )


def run_single(viewer: ProfileBundle, target: ProfileBundle, lat=None, lng=None) -> MatchProbabilityResponse:
    """Score viewer against target, estimating travel time from coordinates."""
    viewer_lat = lat if lat is not None else viewer.public.get("last_lat")
    viewer_lng = lng if lng is not None else viewer.public.get("last_lng")
    km = distance_km(viewer_lat, viewer_lng, target.public.get("last_lat"), target.public.get("last_lng"))
    travel_minutes = approximate_travel_minutes(km)

    result = _score(
        travel_time_minutes=travel_minutes,
        user_profile=viewer.public,
        match_profile=target.public,
        user_private_profile=viewer.private,
        match_private_profile=target.private,
        user_embedding=viewer.embedding,
        match_embedding=target.embedding,
    )
    log.info(
        "Match probability computed",
        viewer_id=viewer.public.get("id"),
        target_id=target.public.get("id"),
        match_probability=result.match_probability,
        hard_conflict=result.details.has_hard_conflict,
    )
    return MatchProbabilityResponse(
        matchProbability=result.match_probability,
        matchBreakdown=result.breakdown,
        travelTimeMinutes=travel_minutes,
        distanceKm=round(km, 1) if km is not None else None,
        scoringVersion=SCORING_VERSION,
    )
