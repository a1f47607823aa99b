# 📦 engine/similarity.py
# ─────────────────────────────
# Vector / set math and input coercion shared by all scorers

import math
from typing import Any, Iterable, Optional

import numpy as np


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def clamp(value, low, high):
    return max(low, min(high, value))


def normalize_text(value: Any) -> str:
    """Lower-cased, stripped string; empty for None."""
    if value is None:
        return ""
    return str(value).strip().lower()


def normalize_tags(values: Any) -> set[str]:
    """Turn a list-ish of tags into a clean set. Non-lists count as empty."""
    if values is None or isinstance(values, (str, bytes, dict)):
        return set()
    try:
        items = list(values)
    except TypeError:
        return set()
    return {t for t in (normalize_text(v) for v in items) if t}


def to_number(value: Any) -> Optional[float]:
    """Finite float or None. Booleans are not numbers here."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    """|A ∩ B| / |A ∪ B|, 0.0 when both are empty."""
    set_a, set_b = set(a), set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def as_vector(values: Any) -> Optional[np.ndarray]:
    """1-D float vector, or None when missing, empty or non-numeric."""
    if values is None or isinstance(values, (str, bytes, dict)):
        return None
    try:
        vec = np.asarray(values, dtype=float)
    except (TypeError, ValueError):
        return None
    if vec.ndim != 1 or vec.size == 0 or not np.all(np.isfinite(vec)):
        return None
    return vec


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity in [-1, 1]; 0.0 for zero-magnitude or degenerate vectors."""
    scale_a = float(np.max(np.abs(a)))
    scale_b = float(np.max(np.abs(b)))
    if scale_a == 0.0 or scale_b == 0.0:
        return 0.0
    # scaled to max-abs 1 so dot and norms cannot overflow float64
    a, b = a / scale_a, b / scale_b
    mag_a = float(np.linalg.norm(a))
    mag_b = float(np.linalg.norm(b))
    sim = float(np.dot(a, b)) / (mag_a * mag_b)
    if not math.isfinite(sim):
        return 0.0
    return clamp(sim, -1.0, 1.0)
