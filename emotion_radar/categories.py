"""The five emotion categories scored by emotion-radar."""

from typing import Dict, Optional, Tuple

AFFECTION = "affection"
LONGING = "longing"
SADNESS = "sadness"
AMAE = "amae"
DESIRE = "desire"

# Canonical order: radar axes, CSV rows and the history normalized tuple.
CATEGORIES: Tuple[str, ...] = (AFFECTION, LONGING, SADNESS, AMAE, DESIRE)

CATEGORY_LABELS: Dict[str, str] = {
    AFFECTION: "愛情",
    LONGING: "切なさ",
    SADNESS: "悲しみ",
    AMAE: "甘え",
    DESIRE: "欲",
}

_LABEL_TO_CATEGORY = {label: cat for cat, label in CATEGORY_LABELS.items()}


def resolve_category(name: str) -> Optional[str]:
    """Map an identifier or its Japanese label to the identifier, else None."""
    if name in CATEGORY_LABELS:
        return name
    return _LABEL_TO_CATEGORY.get(name)


def zero_scores() -> Dict[str, float]:
    return {c: 0.0 for c in CATEGORIES}
