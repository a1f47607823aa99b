# 📦 engine/matcher.py
# ─────────────────────────────
# Combines the ten dimension scorers into one match probability

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

import structlog
import yaml

from engine import scorers, tables
from engine.similarity import clamp, round_half_up, to_number

config_path = Path(__file__).resolve().parent.parent / "config" / "weights.yml"

log = structlog.get_logger()

SCORING_VERSION = "1.0"


@dataclass(frozen=True)
class DimensionScore:
    key: str
    score: int
    included: bool = True


@dataclass(frozen=True)
class MatchDetails:
    kink_conflicts: list[str] = field(default_factory=list)
    kink_overlaps: list[str] = field(default_factory=list)
    has_hard_conflict: bool = False
    matched_intents: list[str] = field(default_factory=list)
    matched_lifestyle: list[str] = field(default_factory=list)
    hosting_compatible: Optional[bool] = None


@dataclass(frozen=True)
class MatchResult:
    match_probability: int
    breakdown: dict[str, int]
    details: MatchDetails = field(default_factory=MatchDetails)

    def to_dict(self) -> dict[str, Any]:
        return {"matchProbability": self.match_probability, "breakdown": dict(self.breakdown)}


# ─────────────────────────────
# Weight profiles

@lru_cache(maxsize=None)
def load_weight_profiles(path: Path = config_path) -> dict[str, dict[str, float]]:
    """Read named weight profiles from YAML. Missing file → no profiles."""
    try:
        with open(path, "r") as f:
            profiles = yaml.safe_load(f) or {}
    except FileNotFoundError:
        log.warning("Weights config not found, using dimension maxima", path=str(path))
        return {}
    return {name: dict(weights or {}) for name, weights in profiles.items()}


def select_weights(profile: str = "default") -> dict[str, float]:
    profiles = load_weight_profiles()
    if profile not in profiles:
        log.warning("Unknown weights profile, using dimension maxima", profile=profile)
        return default_weights()
    return resolve_weights(profiles[profile])


def default_weights() -> dict[str, float]:
    return {key: float(tables.DIMENSION_MAX[key]) for key in tables.ALWAYS_ON_DIMENSIONS}


def resolve_weights(weights: Optional[Mapping[str, Any]]) -> dict[str, float]:
    """Fill gaps and drop invalid entries so every always-on dimension has a weight."""
    resolved = default_weights()
    if not isinstance(weights, Mapping):
        return resolved
    for key, value in weights.items():
        number = to_number(value)
        if key in resolved and number is not None and number >= 0:
            resolved[key] = number
    return resolved


# ─────────────────────────────
# Input helpers

def _as_dict(obj: Any) -> dict[str, Any]:
    """Profiles arrive as dicts, pydantic models or None."""
    if obj is None:
        return {}
    if isinstance(obj, Mapping):
        return dict(obj)
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    return dict(getattr(obj, "__dict__", {}))


def _merge(public: dict[str, Any], private: dict[str, Any]) -> dict[str, Any]:
    merged = dict(public)
    merged.update({k: v for k, v in private.items() if v is not None})
    return merged


def _guarded(key: str, fallback: Any, fn: Callable[..., Any], *args: Any) -> Any:
    """Run a scorer; malformed input falls back to the dimension's neutral value."""
    try:
        return fn(*args)
    except (TypeError, ValueError, AttributeError, OverflowError) as e:
        log.warning("Scorer fell back to neutral default", dimension=key, error=str(e))
        return fallback


# ─────────────────────────────
# Combinator

def calculate_match_probability(
    travel_time_minutes=None,
    user_profile=None,
    match_profile=None,
    user_private_profile=None,
    match_private_profile=None,
    user_embedding=None,
    match_embedding=None,
    weights: Optional[Mapping[str, Any]] = None,
    now=None,
) -> MatchResult:
    """
    Score one user/match pair.

    The eight always-on dimensions are always present in the breakdown.
    Chemistry and hosting are added only when both sides supplied the data
    they need; an excluded optional dimension contributes nothing.
    """
    user_public = _as_dict(user_profile)
    match_public = _as_dict(match_profile)
    user_private = _as_dict(user_private_profile)
    match_private = _as_dict(match_private_profile)

    # private fields win over public ones with the same name
    user_all = _merge(user_public, user_private)
    match_all = _merge(match_public, match_private)

    kink = _guarded(
        "kinkOverlap", scorers.KinkResult(score=0), scorers.calculate_kink_overlap_score,
        user_private.get("kinks"), match_private.get("kinks"),
        user_private.get("hard_limits"), match_private.get("hard_limits"),
        user_private.get("soft_limits"), match_private.get("soft_limits"),
    )

    dimensions = [
        DimensionScore("travelTime", _guarded(
            "travelTime", tables.DEFAULT_TRAVEL_SCORE,
            scorers.calculate_travel_time_score, travel_time_minutes)),
        DimensionScore("roleCompat", _guarded(
            "roleCompat", tables.DEFAULT_ROLE_SCORE,
            scorers.calculate_role_compatibility_score, user_all.get("position"), match_all.get("position"))),
        DimensionScore("kinkOverlap", kink.score),
        DimensionScore("intent", _guarded(
            "intent", 0, scorers.calculate_intent_alignment_score, user_all, match_all)),
        DimensionScore("semantic", _guarded(
            "semantic", tables.DEFAULT_SEMANTIC_SCORE,
            scorers.calculate_semantic_text_score, user_embedding, match_embedding)),
        DimensionScore("lifestyle", _guarded(
            "lifestyle", 0, scorers.calculate_lifestyle_match_score, user_all, match_all)),
        DimensionScore("activity", _guarded(
            "activity", tables.DEFAULT_ACTIVITY_SCORE, scorers.calculate_activity_recency_score,
            match_public.get("last_seen") or match_public.get("updated_at"), now)),
        DimensionScore("completeness", _guarded(
            "completeness", 0, scorers.calculate_profile_completeness_score, match_all)),
    ]

    chem = _guarded(
        "chem", scorers.ChemResult(score=0, applicable=False),
        scorers.calculate_chem_score, user_private, match_private)
    dimensions.append(DimensionScore("chem", chem.score, included=chem.applicable))

    hosting_present = (
        scorers.classify_hosting(user_private.get("hosting")) is not None
        and scorers.classify_hosting(match_private.get("hosting")) is not None
    )
    hosting = _guarded(
        "hosting", scorers.HostingResult(score=0, compatible=True),
        scorers.calculate_hosting_compatibility_score, user_private, match_private)
    dimensions.append(DimensionScore("hosting", hosting.score, included=hosting_present))

    resolved = resolve_weights(weights)
    breakdown: dict[str, int] = {}
    raw_total = 0.0
    for dim in dimensions:
        if not dim.included:
            continue
        score = clamp(dim.score, 0, tables.DIMENSION_MAX[dim.key])
        breakdown[dim.key] = score
        if dim.key in resolved:
            raw_total += score * resolved[dim.key] / tables.DIMENSION_MAX[dim.key]
        else:
            raw_total += score

    match_probability = clamp(round_half_up(raw_total), 0, 100)

    details = MatchDetails(
        kink_conflicts=list(kink.conflicts),
        kink_overlaps=list(kink.overlaps),
        has_hard_conflict=kink.has_hard_conflict,
        matched_intents=_guarded("intent", [], scorers.matched_intents, user_all, match_all),
        matched_lifestyle=_guarded("lifestyle", [], scorers.matched_lifestyle_factors, user_all, match_all),
        hosting_compatible=hosting.compatible if hosting_present else None,
    )
    return MatchResult(match_probability=match_probability, breakdown=breakdown, details=details)
