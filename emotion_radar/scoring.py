"""Keyword scoring engine.

Turns text plus a lexicon into per-category scores.  Each term occurrence is
weighted by its context:

- an intensifier in the 8 characters before the match multiplies it by 1.5
- a diminisher in the same window multiplies it by 0.7
- a negation in the 6 characters after the match zeroes it

Emoji glyphs and (optionally) relationship words add flat bonuses, then the
totals are scaled up for exclamation marks and down for long texts before
normalization.  The engine is pure; it only reads its inputs.
"""

from typing import Dict, List, Optional, Tuple

from .categories import AFFECTION, CATEGORIES, zero_scores
from .lexicon import (
    DIMINISHERS, EMOJI_BOOST, INTENSIFIERS, NEGATIONS, RELATION_TERMS,
    Lexicon, default_lexicon, iter_lexemes,
)
from .normalize import normalize, select_leaders

LEFT_WINDOW = 8
RIGHT_WINDOW = 6

INTENSIFIER_FACTOR = 1.5
DIMINISHER_FACTOR = 0.7
RELATION_BONUS = 0.6
EMOJI_BONUS = 1.2

EXCLAMATION_STEP = 0.05
EXCLAMATION_CAP = 0.5

# Length normalization: texts up to 180 chars keep full weight, longer ones
# are damped down to 0.7.
LENGTH_REFERENCE = 180
LENGTH_FLOOR_CHARS = 60
LENGTH_NORM_MIN = 0.7

RELATION_KEY = "relation"


class AnalysisResult:
    """Scores for one text.

    Attributes:
        text: The trimmed input.
        raw: Category -> non-negative raw score.
        normalized: Category -> score in [0, 100].
        visible_contributions: Category -> {term: contribution}.
        meta_adjustments: Category -> {adjustment name: amount}; holds
            bonuses that are not lexicon terms (the relation boost).
        leaders: Categories tied for the top normalized score.
    """

    __slots__ = ("text", "raw", "normalized", "visible_contributions",
                 "meta_adjustments", "leaders")

    def __init__(self, text: str, raw: Dict[str, float],
                 visible_contributions: Dict[str, Dict[str, float]] = None,
                 meta_adjustments: Dict[str, Dict[str, float]] = None):
        self.text = text
        self.raw = raw
        self.normalized = normalize(raw)
        self.visible_contributions = visible_contributions or {}
        self.meta_adjustments = meta_adjustments or {}
        self.leaders: Tuple[str, ...] = select_leaders(self.normalized, text)

    def top_terms(self, category: str, limit: int = 6) -> List[Tuple[str, float]]:
        """Strongest contributing terms for *category*, descending."""
        terms = self.visible_contributions.get(category, {})
        ranked = sorted(terms.items(), key=lambda kv: kv[1], reverse=True)
        return ranked[:limit]

    @property
    def is_blank(self) -> bool:
        return not self.text

    def to_dict(self) -> Dict:
        return {
            "raw": {c: round(self.raw[c], 4) for c in CATEGORIES},
            "normalized": {c: round(self.normalized[c], 2) for c in CATEGORIES},
            "leaders": list(self.leaders),
            "top_terms": {
                c: [[t, round(v, 2)] for t, v in self.top_terms(c)]
                for c in CATEGORIES
            },
            "meta_adjustments": self.meta_adjustments,
        }

    def __repr__(self) -> str:
        lead = ",".join(self.leaders) or "-"
        return f"<AnalysisResult leaders={lead} len={len(self.text)}>"


def find_occurrences(text: str, term: str) -> List[int]:
    """Start indices of *term* in *text*, scanning left to right.

    The cursor moves past each match, so occurrences never overlap.
    """
    if not term:
        return []
    indices = []
    start = 0
    while True:
        idx = text.find(term, start)
        if idx == -1:
            return indices
        indices.append(idx)
        start = idx + len(term)


def _window_has(words, window: str) -> bool:
    return any(w in window for w in words)


def context_factor(text: str, idx: int, term_len: int) -> float:
    """Multiplier for the match of length *term_len* at *idx*."""
    left = text[max(0, idx - LEFT_WINDOW):idx]
    end = idx + term_len
    right = text[end:end + RIGHT_WINDOW]
    if _window_has(NEGATIONS, right):
        return 0.0
    factor = 1.0
    if _window_has(INTENSIFIERS, left):
        factor *= INTENSIFIER_FACTOR
    if _window_has(DIMINISHERS, left):
        factor *= DIMINISHER_FACTOR
    return factor


def exclamation_amp(text: str) -> float:
    marks = text.count("!") + text.count("！")
    return 1 + min(EXCLAMATION_CAP, marks * EXCLAMATION_STEP)


def length_norm(text: str) -> float:
    ratio = LENGTH_REFERENCE / max(LENGTH_FLOOR_CHARS, len(text))
    return max(LENGTH_NORM_MIN, min(1.0, ratio))


def emoji_bonus(text: str, category: str) -> float:
    return sum(text.count(e) for e in EMOJI_BOOST.get(category, ())) * EMOJI_BONUS


def relation_bonus(text: str) -> float:
    return sum(text.count(w) for w in RELATION_TERMS) * RELATION_BONUS


def analyze(text: str, lexicon: Lexicon, relation_boost: bool = True) -> AnalysisResult:
    """Score *text* against *lexicon*."""
    t = text.strip()
    if not t:
        return AnalysisResult("", zero_scores())

    raw = zero_scores()
    visible: Dict[str, Dict[str, float]] = {c: {} for c in CATEGORIES}
    meta: Dict[str, Dict[str, float]] = {}

    if relation_boost:
        bonus = relation_bonus(t)
        raw[AFFECTION] += bonus
        if bonus:
            meta[AFFECTION] = {RELATION_KEY: bonus}

    for owner, lx in iter_lexemes(lexicon):
        for idx in find_occurrences(t, lx.term):
            delta = lx.weight * context_factor(t, idx, len(lx.term))
            for cat in lx.targets(owner):
                raw[cat] += delta
                ledger = visible[cat]
                ledger[lx.term] = ledger.get(lx.term, 0.0) + delta

    for c in CATEGORIES:
        raw[c] += emoji_bonus(t, c)

    scale = exclamation_amp(t) * length_norm(t)
    for c in CATEGORIES:
        raw[c] *= scale

    return AnalysisResult(t, raw, visible, meta)


class EmotionAnalyzer:
    """Scores texts against a fixed lexicon.

    Parameters
    ----------
    lexicon : Lexicon | None
        Lexicon to match against; the built-in one when omitted.
    relation_boost : bool
        Whether relationship words add to affection (default True).
    """

    def __init__(self, lexicon: Optional[Lexicon] = None, relation_boost: bool = True):
        self.lexicon = lexicon if lexicon is not None else default_lexicon()
        self.relation_boost = relation_boost

    def analyze(self, text: str) -> AnalysisResult:
        return analyze(text, self.lexicon, self.relation_boost)
