"""Score normalization, leader selection and comment banding."""

from typing import Dict, Mapping, Tuple

from .categories import CATEGORIES

EPSILON = 0.0001

HIGH_BAND = 85.0
MID_BAND = 60.0


def normalize(raw: Mapping[str, float]) -> Dict[str, float]:
    """Rescale raw scores so the strongest category reads 100.

    All-zero input stays all-zero; the epsilon floor keeps the division safe.
    """
    peak = max([EPSILON] + [raw.get(c, 0.0) for c in CATEGORIES])
    return {c: raw.get(c, 0.0) / peak * 100 for c in CATEGORIES}


def select_leaders(normalized: Mapping[str, float], text: str) -> Tuple[str, ...]:
    """Return the categories tied for the top normalized score.

    Blank text and all-zero scores have no leaders.
    """
    if not text.strip():
        return ()
    top = max(normalized.get(c, 0.0) for c in CATEGORIES)
    if top <= 0:
        return ()
    return tuple(c for c in CATEGORIES if abs(normalized.get(c, 0.0) - top) <= EPSILON)


def comment_band(score: float) -> str:
    """Map a normalized score to the comment tier: high, mid or soft."""
    if score >= HIGH_BAND:
        return "high"
    if score >= MID_BAND:
        return "mid"
    return "soft"
