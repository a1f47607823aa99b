# 📦 engine/tables.py
# ─────────────────────────────
# Static lookup tables for the NightMatch scoring engine

from types import MappingProxyType

# ─────────────────────────────
# Dimension maxima

DIMENSION_MAX = MappingProxyType({
    "travelTime": 20,
    "roleCompat": 15,
    "kinkOverlap": 15,
    "intent": 12,
    "semantic": 12,
    "lifestyle": 10,
    "activity": 8,
    "completeness": 8,
    # optional dimensions
    "chem": 3,
    "hosting": 3,
})

ALWAYS_ON_DIMENSIONS = (
    "travelTime",
    "roleCompat",
    "kinkOverlap",
    "intent",
    "semantic",
    "lifestyle",
    "activity",
    "completeness",
)

OPTIONAL_DIMENSIONS = ("chem", "hosting")

# ─────────────────────────────
# Neutral defaults (unknown / malformed input)

DEFAULT_TRAVEL_SCORE = 10
DEFAULT_ROLE_SCORE = 10
FLEXIBLE_ROLE_SCORE = 12
DEFAULT_SEMANTIC_SCORE = 6
DEFAULT_ACTIVITY_SCORE = 1

# Kink score ceiling when a hard limit is hit
HARD_CONFLICT_CAP = 4

# ─────────────────────────────
# Travel time buckets: (max minutes inclusive, score), ascending

TRAVEL_TIME_BUCKETS = (
    (5, 20),     # walking
    (15, 18),    # quick
    (30, 15),    # reasonable
    (60, 10),    # committed
    (120, 5),    # long
)
TRAVEL_TIME_FAR_SCORE = 2

# ─────────────────────────────
# Activity recency tiers: (max elapsed minutes inclusive, score), ascending

ACTIVITY_TIERS = (
    (15, 8),
    (60, 6),
    (24 * 60, 4),
    (72 * 60, 2),
)

# ─────────────────────────────
# Role compatibility

FLEXIBLE_ROLES = frozenset({"flexible", "open"})

ROLE_ALIASES = MappingProxyType({
    "versatile": "vers",
    "vers top": "vers_top",
    "vers-top": "vers_top",
    "verstop": "vers_top",
    "vers bottom": "vers_bottom",
    "vers-bottom": "vers_bottom",
    "versbottom": "vers_bottom",
})


def _pairs(table):
    return MappingProxyType({frozenset(pair): score for pair, score in table.items()})


# Unordered pairs, so lookups are symmetric by construction
ROLE_COMPATIBILITY_MATRIX = _pairs({
    ("top", "bottom"): 15,
    ("top", "top"): 5,
    ("top", "vers"): 12,
    ("top", "vers_top"): 8,
    ("top", "vers_bottom"): 12,
    ("top", "side"): 7,
    ("top", "oral"): 10,
    ("bottom", "bottom"): 5,
    ("bottom", "vers"): 12,
    ("bottom", "vers_top"): 12,
    ("bottom", "vers_bottom"): 8,
    ("bottom", "side"): 7,
    ("bottom", "oral"): 10,
    ("vers", "vers"): 15,
    ("vers", "vers_top"): 10,
    ("vers", "vers_bottom"): 10,
    ("vers", "side"): 8,
    ("vers", "oral"): 10,
    ("vers_top", "vers_bottom"): 15,
    ("vers_top", "vers_top"): 8,
    ("vers_top", "side"): 7,
    ("vers_top", "oral"): 9,
    ("vers_bottom", "vers_bottom"): 8,
    ("vers_bottom", "side"): 7,
    ("vers_bottom", "oral"): 9,
    ("side", "side"): 15,
    ("side", "oral"): 10,
    ("oral", "oral"): 15,
})

KNOWN_ROLES = frozenset(role for pair in ROLE_COMPATIBILITY_MATRIX for role in pair)

# ─────────────────────────────
# Completeness

MIN_BIO_LENGTH = 100
