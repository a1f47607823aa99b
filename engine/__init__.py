# engine/__init__.py
# ─────────────────────────────
# Init file for the NightMatch scoring engine package
# Exposes core components

from .matcher import MatchResult, calculate_match_probability, select_weights
from .scorers import (
    calculate_activity_recency_score,
    calculate_chem_score,
    calculate_hosting_compatibility_score,
    calculate_intent_alignment_score,
    calculate_kink_overlap_score,
    calculate_lifestyle_match_score,
    calculate_profile_completeness_score,
    calculate_role_compatibility_score,
    calculate_semantic_text_score,
    calculate_travel_time_score,
)

__all__ = [
    "MatchResult",
    "calculate_match_probability",
    "select_weights",
    "calculate_activity_recency_score",
    "calculate_chem_score",
    "calculate_hosting_compatibility_score",
    "calculate_intent_alignment_score",
    "calculate_kink_overlap_score",
    "calculate_lifestyle_match_score",
    "calculate_profile_completeness_score",
    "calculate_role_compatibility_score",
    "calculate_semantic_text_score",
    "calculate_travel_time_score",
]
