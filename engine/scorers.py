# 📦 engine/scorers.py
# ─────────────────────────────
# The ten dimension scorers for NightMatch match probability.
# Each scorer is pure: same input, same output, no I/O, bounded by its max.

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from engine import tables
from engine.similarity import (
    as_vector,
    clamp,
    cosine_similarity,
    jaccard,
    normalize_tags,
    normalize_text,
    round_half_up,
    to_number,
)


@dataclass(frozen=True)
class KinkResult:
    score: int
    overlaps: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)
    has_hard_conflict: bool = False


@dataclass(frozen=True)
class ChemResult:
    score: int
    applicable: bool


@dataclass(frozen=True)
class HostingResult:
    score: int
    compatible: bool


def get_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read a field from a dict, a pydantic model or any attribute bag."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


# ─────────────────────────────
# 1. Travel time (0-20)

def calculate_travel_time_score(travel_time_minutes) -> int:
    """Bucketed by minutes; unknown, negative or non-finite input scores 10."""
    minutes = to_number(travel_time_minutes)
    if minutes is None or minutes < 0:
        return tables.DEFAULT_TRAVEL_SCORE
    for max_minutes, score in tables.TRAVEL_TIME_BUCKETS:
        if minutes <= max_minutes:
            return score
    return tables.TRAVEL_TIME_FAR_SCORE


# ─────────────────────────────
# 2. Role compatibility (0-15)

def normalize_role(role: Any) -> str:
    key = normalize_text(role)
    return tables.ROLE_ALIASES.get(key, key)


def calculate_role_compatibility_score(user_role, match_role) -> int:
    """Symmetric matrix lookup on position labels."""
    a, b = normalize_role(user_role), normalize_role(match_role)
    if not a or not b:
        return tables.DEFAULT_ROLE_SCORE
    if a in tables.FLEXIBLE_ROLES or b in tables.FLEXIBLE_ROLES:
        return tables.FLEXIBLE_ROLE_SCORE
    return tables.ROLE_COMPATIBILITY_MATRIX.get(frozenset((a, b)), tables.DEFAULT_ROLE_SCORE)


# ─────────────────────────────
# 3. Kink overlap (0-15)

def calculate_kink_overlap_score(
    user_kinks=None,
    match_kinks=None,
    user_hard_limits=None,
    match_hard_limits=None,
    user_soft_limits=None,
    match_soft_limits=None,
) -> KinkResult:
    """
    Jaccard overlap of kinks scaled to 15. A kink that sits in the other
    party's hard limits caps the score at HARD_CONFLICT_CAP.

    Soft limits are accepted but not scored yet.
    """
    mine = normalize_tags(user_kinks)
    theirs = normalize_tags(match_kinks)
    my_limits = normalize_tags(user_hard_limits)
    their_limits = normalize_tags(match_hard_limits)

    overlaps = sorted(mine & theirs)
    conflicts = sorted((mine & their_limits) | (theirs & my_limits))

    score = round_half_up(tables.DIMENSION_MAX["kinkOverlap"] * jaccard(mine, theirs))
    if conflicts:
        score = min(score, tables.HARD_CONFLICT_CAP)

    return KinkResult(
        score=clamp(score, 0, tables.DIMENSION_MAX["kinkOverlap"]),
        overlaps=overlaps,
        conflicts=conflicts,
        has_hard_conflict=bool(conflicts),
    )


# ─────────────────────────────
# 4. Intent alignment (0-12)

def _same(a: Any, b: Any) -> bool:
    """Both present and equal after normalisation."""
    left, right = normalize_text(a), normalize_text(b)
    return bool(left) and left == right


def matched_intents(user, match) -> list[str]:
    return sorted(
        normalize_tags(get_field(user, "looking_for"))
        & normalize_tags(get_field(match, "looking_for"))
    )


def calculate_intent_alignment_score(user, match) -> int:
    looking = jaccard(
        normalize_tags(get_field(user, "looking_for")),
        normalize_tags(get_field(match, "looking_for")),
    )
    score = round_half_up(6 * looking)
    if _same(get_field(user, "relationship_status"), get_field(match, "relationship_status")):
        score += 3
    if _same(get_field(user, "time_horizon"), get_field(match, "time_horizon")):
        score += 3
    return min(score, tables.DIMENSION_MAX["intent"])


# ─────────────────────────────
# 5. Semantic text (0-12)

def calculate_semantic_text_score(user_embedding, match_embedding) -> int:
    """Cosine similarity of profile embeddings; missing or mismatched vectors score 6."""
    a, b = as_vector(user_embedding), as_vector(match_embedding)
    if a is None or b is None or a.shape != b.shape:
        return tables.DEFAULT_SEMANTIC_SCORE
    similarity = max(0.0, cosine_similarity(a, b))
    return clamp(round_half_up(tables.DIMENSION_MAX["semantic"] * similarity), 0, tables.DIMENSION_MAX["semantic"])


# ─────────────────────────────
# 6. Lifestyle match (0-10)

LIFESTYLE_FIELDS = (("smoking", 3), ("drinking", 3), ("fitness", 2))


def matched_lifestyle_factors(user, match) -> list[str]:
    factors = [name for name, _ in LIFESTYLE_FIELDS if _same(get_field(user, name), get_field(match, name))]
    scenes = jaccard(
        normalize_tags(get_field(user, "scene_affinity")),
        normalize_tags(get_field(match, "scene_affinity")),
    )
    if round_half_up(2 * scenes) == 2:
        factors.append("scene_affinity")
    return factors


def calculate_lifestyle_match_score(user, match) -> int:
    score = sum(points for name, points in LIFESTYLE_FIELDS if _same(get_field(user, name), get_field(match, name)))
    scenes = jaccard(
        normalize_tags(get_field(user, "scene_affinity")),
        normalize_tags(get_field(match, "scene_affinity")),
    )
    score += round_half_up(2 * scenes)
    return min(score, tables.DIMENSION_MAX["lifestyle"])


# ─────────────────────────────
# 7. Chemistry (0-3, optional)

def _leans_yes(value: str) -> bool:
    return "yes" in value or "often" in value or value == "friendly"


def _leans_no(value: str) -> bool:
    return "no" in value or "never" in value or value == "sober"


def calculate_chem_score(user, match) -> ChemResult:
    """Only scored when both parties enabled chem visibility and answered."""
    if get_field(user, "chem_visibility_enabled") is not True or get_field(match, "chem_visibility_enabled") is not True:
        return ChemResult(score=0, applicable=False)

    mine = normalize_text(get_field(user, "chem_friendly"))
    theirs = normalize_text(get_field(match, "chem_friendly"))
    if not mine or not theirs:
        return ChemResult(score=0, applicable=False)

    if mine == theirs:
        return ChemResult(score=3, applicable=True)
    if "flexible" in (mine, theirs):
        return ChemResult(score=2, applicable=True)
    if (_leans_yes(mine) and _leans_no(theirs)) or (_leans_no(mine) and _leans_yes(theirs)):
        return ChemResult(score=0, applicable=True)
    return ChemResult(score=1, applicable=True)


# ─────────────────────────────
# 8. Activity recency (0-8)

def parse_timestamp(value: Any) -> Optional[datetime]:
    """datetime, ISO-8601 string or epoch seconds → aware UTC datetime."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        seconds = to_number(value)
        if seconds is None:
            return None
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def calculate_activity_recency_score(last_seen, now: Optional[datetime] = None) -> int:
    seen = parse_timestamp(last_seen)
    if seen is None:
        return tables.DEFAULT_ACTIVITY_SCORE
    now = parse_timestamp(now) or datetime.now(timezone.utc)

    # whole minutes, so "exactly N days ago" stays inside its tier
    elapsed_minutes = max(0, int((now - seen).total_seconds() // 60))
    for max_minutes, score in tables.ACTIVITY_TIERS:
        if elapsed_minutes <= max_minutes:
            return score
    return tables.DEFAULT_ACTIVITY_SCORE


# ─────────────────────────────
# 9. Profile completeness (0-8)

def _has_items(value: Any) -> bool:
    return bool(normalize_tags(value))


def _photo_count(photos: Any) -> int:
    """Photos may be URLs or dict records; count non-empty entries."""
    if not isinstance(photos, (list, tuple)):
        return 0
    return sum(1 for photo in photos if photo)


def calculate_profile_completeness_score(profile) -> int:
    bio = get_field(profile, "bio")
    checks = (
        _photo_count(get_field(profile, "photos")) > 0,
        isinstance(bio, str) and len(bio.strip()) >= tables.MIN_BIO_LENGTH,
        bool(normalize_text(get_field(profile, "city"))),
        _has_items(get_field(profile, "tags")),
        _has_items(get_field(profile, "looking_for")),
        get_field(profile, "verified") is True,
        _has_items(get_field(profile, "kinks")),
        bool(normalize_text(get_field(profile, "position"))),
    )
    return min(sum(1 for passed in checks if passed), tables.DIMENSION_MAX["completeness"])


# ─────────────────────────────
# 10. Hosting compatibility (0-3, optional)

def classify_hosting(statement: Any) -> Optional[str]:
    """Map a free-text hosting statement to host / guest / flexible."""
    text = normalize_text(statement)
    if not text:
        return None
    if "cannot" in text or "can't" in text or "cant host" in text or "no hosting" in text:
        return "guest"
    if "can host" in text or text in {"host", "hosting"}:
        return "host"
    if "flexible" in text or "either" in text:
        return "flexible"
    if "travel" in text:
        return "guest"
    return "unknown"


def calculate_hosting_compatibility_score(user, match) -> HostingResult:
    mine = classify_hosting(get_field(user, "hosting"))
    theirs = classify_hosting(get_field(match, "hosting"))
    if mine is None or theirs is None:
        return HostingResult(score=0, compatible=True)

    pair = {mine, theirs}
    if pair == {"host", "guest"}:
        return HostingResult(score=3, compatible=True)
    if pair in ({"host"}, {"host", "flexible"}):
        return HostingResult(score=2, compatible=True)
    if pair == {"flexible"}:
        return HostingResult(score=1, compatible=True)
    if pair == {"guest"}:
        return HostingResult(score=0, compatible=False)
    return HostingResult(score=0, compatible=True)
