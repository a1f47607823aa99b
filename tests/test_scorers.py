# 📦 /tests/test_scorers.py

from datetime import datetime, timedelta, timezone
import math

import pytest

from engine import tables
from engine.scorers import (
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
    classify_hosting,
)
from tests.utils.dummies import LONG_BIO

NOW = datetime(2026, 10, 19, 22, 30, tzinfo=timezone.utc)

# ---------------------- Travel time ----------------------

@pytest.mark.parametrize("minutes, expected", [
    (3, 20), (5, 20), (10, 18), (25, 15), (45, 10), (90, 5), (120, 5), (180, 2),
])
def test_travel_time_buckets(minutes, expected):
    assert calculate_travel_time_score(minutes) == expected


@pytest.mark.parametrize("minutes", [None, float("nan"), float("inf"), -4, "soon", True])
def test_travel_time_unknown_is_neutral(minutes):
    assert calculate_travel_time_score(minutes) == 10


def test_travel_time_never_increases_with_distance():
    scores = [calculate_travel_time_score(m) for m in range(0, 300)]
    assert all(a >= b for a, b in zip(scores, scores[1:]))


# ---------------------- Role compatibility ----------------------

def test_role_complementary_and_same():
    assert calculate_role_compatibility_score("top", "bottom") == 15
    assert calculate_role_compatibility_score("bottom", "top") == 15
    assert calculate_role_compatibility_score("vers", "vers") == 15
    assert calculate_role_compatibility_score("top", "top") == 5
    assert calculate_role_compatibility_score("bottom", "bottom") == 5


def test_role_flexible_and_unknown():
    assert calculate_role_compatibility_score("flexible", "bottom") == 12
    assert calculate_role_compatibility_score("top", "open") == 12
    assert calculate_role_compatibility_score(None, "top") == 10
    assert calculate_role_compatibility_score("top", "") == 10
    assert calculate_role_compatibility_score("top", "astronaut") == 10


def test_role_normalises_labels():
    assert calculate_role_compatibility_score(" TOP ", "Bottom") == 15
    assert calculate_role_compatibility_score("Vers Top", "vers-bottom") == 15
    assert calculate_role_compatibility_score("versatile", "vers") == 15


def test_role_matrix_is_symmetric():
    roles = sorted(tables.KNOWN_ROLES | tables.FLEXIBLE_ROLES | {"unknown", ""})
    for a in roles:
        for b in roles:
            assert calculate_role_compatibility_score(a, b) == calculate_role_compatibility_score(b, a)
            assert 0 <= calculate_role_compatibility_score(a, b) <= 15


# ---------------------- Kink overlap ----------------------

def test_kink_identical_sets_score_max():
    result = calculate_kink_overlap_score(["bondage", "leather"], ["bondage", "leather"], [], [])
    assert result.score == 15
    assert "bondage" in result.overlaps
    assert result.has_hard_conflict is False


def test_kink_hard_limit_conflict_caps_score():
    result = calculate_kink_overlap_score(["bondage"], ["leather"], [], ["bondage"])
    assert result.has_hard_conflict is True
    assert result.score < 5
    assert result.conflicts == ["bondage"]


def test_kink_conflict_caps_even_with_full_overlap():
    result = calculate_kink_overlap_score(["bondage", "leather"], ["bondage", "leather"], ["leather"], [])
    assert result.has_hard_conflict is True
    assert result.score == 4


def test_kink_partial_overlap_is_jaccard():
    # 1 shared out of 4 distinct → round(3.75)
    result = calculate_kink_overlap_score(["bondage", "leather", "puppy"], ["bondage", "dom"], [], [])
    assert result.score == 4
    assert result.overlaps == ["bondage"]


def test_kink_empty_and_malformed_inputs():
    assert calculate_kink_overlap_score([], [], [], []).score == 0
    assert calculate_kink_overlap_score(None, None, None, None).score == 0
    assert calculate_kink_overlap_score("bondage", {"a": 1}, 7, None).score == 0


def test_kink_soft_limits_are_ignored():
    with_soft = calculate_kink_overlap_score(["rope"], ["rope"], [], [], ["rope"], ["rope"])
    assert with_soft.score == 15
    assert with_soft.has_hard_conflict is False


def test_kink_normalises_case_and_whitespace():
    result = calculate_kink_overlap_score([" Rope ", "LEATHER"], ["rope", "leather", ""], [], [])
    assert result.score == 15


# ---------------------- Intent alignment ----------------------

def test_intent_matching():
    score = calculate_intent_alignment_score(
        {"looking_for": ["hookup", "fwb"], "relationship_status": "single", "time_horizon": "right now"},
        {"looking_for": ["hookup", "dates"], "relationship_status": "single", "time_horizon": "right now"},
    )
    # round(6 * 1/3) + 3 + 3
    assert score == 8


def test_intent_full_alignment_hits_max():
    user = {"looking_for": ["dates"], "relationship_status": "open", "time_horizon": "tonight"}
    assert calculate_intent_alignment_score(user, dict(user)) == 12


def test_intent_mismatch_and_missing_fields():
    assert calculate_intent_alignment_score({"looking_for": ["relationship"]}, {"looking_for": ["hookup"]}) == 0
    assert calculate_intent_alignment_score({}, {}) == 0
    assert calculate_intent_alignment_score({"relationship_status": None}, {"relationship_status": None}) == 0


# ---------------------- Semantic text ----------------------

def test_semantic_identical_orthogonal_missing():
    vec = [0.1, 0.2, 0.3, 0.4, 0.5]
    assert calculate_semantic_text_score(vec, vec) == 12
    assert calculate_semantic_text_score([1, 0, 0, 0, 0], [0, 1, 0, 0, 0]) == 0
    assert calculate_semantic_text_score(None, None) == 6
    assert calculate_semantic_text_score(vec, None) == 6
    assert calculate_semantic_text_score([], []) == 6


def test_semantic_negative_similarity_floors_at_zero():
    assert calculate_semantic_text_score([1.0, 2.0], [-1.0, -2.0]) == 0
    assert calculate_semantic_text_score([1e200, 1e200], [-1e200, -1e200]) == 0
    assert calculate_semantic_text_score([1e200, 1e200], [1e200, 1e200]) == 12


def test_semantic_mismatched_or_degenerate_vectors():
    assert calculate_semantic_text_score([1, 0, 0], [1, 0]) == 6
    assert calculate_semantic_text_score([1, float("nan")], [1, 0]) == 6
    assert calculate_semantic_text_score([0, 0], [1, 0]) == 0


# ---------------------- Lifestyle ----------------------

def test_lifestyle_identical_is_max():
    user = {"smoking": "no", "drinking": "occasional", "fitness": "gym", "scene_affinity": ["leather"]}
    assert calculate_lifestyle_match_score(user, dict(user)) == 10


def test_lifestyle_mismatch_is_low():
    assert calculate_lifestyle_match_score(
        {"smoking": "yes", "drinking": "heavy"},
        {"smoking": "no", "drinking": "never"},
    ) == 0


def test_lifestyle_partial():
    score = calculate_lifestyle_match_score(
        {"smoking": "No", "fitness": "gym", "scene_affinity": ["leather", "techno"]},
        {"smoking": "no", "fitness": "yoga", "scene_affinity": ["leather"]},
    )
    # smoking 3 + round(2 * 1/2)
    assert score == 4


# ---------------------- Chemistry ----------------------

def test_chem_requires_both_opt_in():
    result = calculate_chem_score(
        {"chem_visibility_enabled": False},
        {"chem_visibility_enabled": True, "chem_friendly": "friendly"},
    )
    assert result.applicable is False
    assert result.score == 0


def test_chem_grading():
    def chem(a, b):
        return calculate_chem_score(
            {"chem_visibility_enabled": True, "chem_friendly": a},
            {"chem_visibility_enabled": True, "chem_friendly": b},
        )

    assert chem("friendly", "friendly").score == 3
    assert chem("friendly", "friendly").applicable is True
    assert chem("flexible", "sober").score == 2
    assert chem("friendly", "sober").score == 0
    assert chem("friendly", "sometimes").score == 1
    assert chem("friendly", None).applicable is False


# ---------------------- Activity recency ----------------------

@pytest.mark.parametrize("delta, expected", [
    (timedelta(minutes=2), 8),
    (timedelta(minutes=15), 8),
    (timedelta(minutes=40), 6),
    (timedelta(hours=5), 4),
    (timedelta(days=3), 2),
    (timedelta(days=6), 1),
])
def test_activity_tiers(delta, expected):
    assert calculate_activity_recency_score(NOW - delta, now=NOW) == expected


def test_activity_against_wall_clock():
    recent = datetime.now(timezone.utc) - timedelta(minutes=2)
    three_days = datetime.now(timezone.utc) - timedelta(days=3)
    assert calculate_activity_recency_score(recent) == 8
    assert calculate_activity_recency_score(three_days) == 2


def test_activity_accepts_strings_and_epoch():
    assert calculate_activity_recency_score("2026-10-19T22:20:00Z", now=NOW) == 8
    assert calculate_activity_recency_score("2026-10-19T20:00:00", now=NOW) == 4
    assert calculate_activity_recency_score((NOW - timedelta(minutes=30)).timestamp(), now=NOW) == 6


def test_activity_missing_or_garbage_is_lowest():
    assert calculate_activity_recency_score(None, now=NOW) == 1
    assert calculate_activity_recency_score("yesterday-ish", now=NOW) == 1
    assert calculate_activity_recency_score(NOW + timedelta(hours=1), now=NOW) == 8


# ---------------------- Completeness ----------------------

def test_completeness_full_profile():
    assert calculate_profile_completeness_score({
        "photos": ["a.jpg", "b.jpg", "c.jpg"],
        "bio": LONG_BIO,
        "city": "London",
        "tags": ["tag1"],
        "looking_for": ["hookup"],
        "verified": True,
        "kinks": ["bondage"],
        "position": "vers",
    }) == 8


def test_completeness_sparse_profile():
    assert calculate_profile_completeness_score({"photos": [], "bio": "Hi"}) == 0
    assert calculate_profile_completeness_score({}) == 0
    assert calculate_profile_completeness_score({"bio": "x" * 99, "verified": "true"}) == 0


# ---------------------- Hosting ----------------------

def test_hosting_classification():
    assert classify_hosting("Can host") == "host"
    assert classify_hosting("cannot host, can travel") == "guest"
    assert classify_hosting("either") == "flexible"
    assert classify_hosting(None) is None


def test_hosting_complementary_pair():
    result = calculate_hosting_compatibility_score({"hosting": "can host"}, {"hosting": "cannot host, can travel"})
    assert result.score == 3
    assert result.compatible is True
    flipped = calculate_hosting_compatibility_score({"hosting": "cannot host, can travel"}, {"hosting": "can host"})
    assert flipped == result


def test_hosting_neither_can_host():
    result = calculate_hosting_compatibility_score({"hosting": "cannot host"}, {"hosting": "cannot host"})
    assert result.compatible is False
    assert result.score == 0


def test_hosting_partial_grades():
    assert calculate_hosting_compatibility_score({"hosting": "can host"}, {"hosting": "can host"}).score == 2
    assert calculate_hosting_compatibility_score({"hosting": "can host"}, {"hosting": "flexible"}).score == 2
    assert calculate_hosting_compatibility_score({"hosting": "either"}, {"hosting": "flexible"}).score == 1
    assert calculate_hosting_compatibility_score({}, {"hosting": "can host"}).compatible is True


# ---------------------- Bounds ----------------------

def test_all_scores_within_bounds_for_sparse_input():
    empties = [None, {}, {"looking_for": [], "scene_affinity": None}]
    for a in empties:
        for b in empties:
            assert 0 <= calculate_intent_alignment_score(a, b) <= 12
            assert 0 <= calculate_lifestyle_match_score(a, b) <= 10
            assert 0 <= calculate_chem_score(a, b).score <= 3
            assert 0 <= calculate_hosting_compatibility_score(a, b).score <= 3
        assert 0 <= calculate_profile_completeness_score(a) <= 8
    assert not math.isnan(calculate_semantic_text_score([0.0], [0.0]))
