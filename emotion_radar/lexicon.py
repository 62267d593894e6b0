"""Lexicon: weighted terms per category, plus the modifier word lists.

The lexicon exchange format is a JSON object with exactly the five category
keys, each mapping to an array of ``{"term", "weight"?, "categories"?}``.
Keys and category references may be given either as identifiers
(``"affection"``) or as the Japanese labels (``"愛情"``).
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

from .categories import (
    AFFECTION, AMAE, CATEGORIES, DESIRE, LONGING, SADNESS, resolve_category,
)

# Contextual modifiers. Intensifiers/diminishers are looked for in the
# window *before* a match, negations in the window *after* it.
INTENSIFIERS: Tuple[str, ...] = (
    "とても", "すごく", "めっちゃ", "超絶", "超",
    "かなり", "本当に", "ほんとに", "めちゃくちゃ",
)
DIMINISHERS: Tuple[str, ...] = ("少し", "ちょっと", "やや", "まあまあ", "すこし")
NEGATIONS: Tuple[str, ...] = ("じゃない", "ではない", "ない", "ぬ", "ず")

# Relationship words that lend a small bonus to affection
RELATION_TERMS: Tuple[str, ...] = (
    "あなた", "君", "妻", "夫", "二人", "ずっと一緒", "約束", "誓い",
)

EMOJI_BOOST: Dict[str, Tuple[str, ...]] = {
    AFFECTION: ("❤️", "💕", "😘", "💖", "🥰"),
    LONGING: ("🥺", "😢"),
    SADNESS: ("😢", "😭"),
    AMAE: ("🤲", "🤗"),
    DESIRE: ("🔥", "💦", "😏"),
}


class LexiconError(ValueError):
    """Raised when a lexicon payload does not have the expected shape."""
    pass


class Lexeme:
    """A weighted term contributing to one or more categories.

    ``categories`` empty means the lexeme scores for whichever category
    owns it in the lexicon.
    """

    __slots__ = ("term", "weight", "categories")

    def __init__(self, term: str, weight: float = 1.0,
                 categories: Sequence[str] = ()):
        self.term = term
        self.weight = float(weight)
        self.categories: Tuple[str, ...] = tuple(categories)

    def targets(self, owner: str) -> Tuple[str, ...]:
        """Categories this lexeme's contribution is routed to."""
        return self.categories or (owner,)

    def to_dict(self) -> Dict:
        d = {"term": self.term, "weight": self.weight}
        if self.categories:
            d["categories"] = list(self.categories)
        return d

    @classmethod
    def from_dict(cls, d: Dict) -> "Lexeme":
        if not isinstance(d, dict):
            raise LexiconError(f"lexeme must be an object, got {type(d).__name__}")
        term = d.get("term")
        if not isinstance(term, str) or not term:
            raise LexiconError(f"lexeme term must be a non-empty string: {term!r}")
        weight = d.get("weight")
        if weight is None:
            weight = 1.0
        elif isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise LexiconError(f"weight of {term!r} must be a number: {weight!r}")
        elif not math.isfinite(weight) or weight < 0:
            raise LexiconError(f"weight of {term!r} must be finite and non-negative: {weight!r}")
        raw_cats = d.get("categories") or []
        if not isinstance(raw_cats, list):
            raise LexiconError(f"categories of {term!r} must be an array")
        cats: List[str] = []
        for name in raw_cats:
            cat = resolve_category(name) if isinstance(name, str) else None
            if cat is None:
                raise LexiconError(f"unknown category {name!r} on {term!r}")
            if cat not in cats:
                cats.append(cat)
        return cls(term, weight, cats)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Lexeme):
            return NotImplemented
        return (self.term, self.weight, self.categories) == (
            other.term, other.weight, other.categories)

    def __repr__(self) -> str:
        cats = f" cats={','.join(self.categories)}" if self.categories else ""
        return f"<Lexeme {self.term!r} w={self.weight:g}{cats}>"


Lexicon = Dict[str, List[Lexeme]]


def _lex(term: str, weight: float, *categories: str) -> Lexeme:
    return Lexeme(term, weight, categories)


_DEFAULT_LEXICON_SPEC: Dict[str, List[Lexeme]] = {
    AFFECTION: [
        _lex("愛してる", 3), _lex("愛してるよ", 3), _lex("好き", 2),
        _lex("大好き", 3), _lex("いとしい", 2), _lex("大切", 2),
        _lex("ずっと", 1.5), _lex("抱きしめ", 2), _lex("ぎゅ", 1.8),
        _lex("キス", 1.6), _lex("そばに", 1.4), _lex("一緒に", 1.2),
        _lex("誓う", 1.8),
    ],
    LONGING: [
        _lex("切ない", 3),
        _lex("恋しい", 2.2, AFFECTION, LONGING),
        _lex("会いたい", 2.4, AFFECTION, LONGING),
        _lex("まだ", 1), _lex("もし", 1.2), _lex("いつか", 1.2),
        _lex("届か", 1.4), _lex("足りない", 1.6), _lex("ため息", 1.6),
    ],
    SADNESS: [
        _lex("悲しい", 3), _lex("涙", 2.4), _lex("辛い", 2.4),
        _lex("苦しい", 2.2), _lex("寂しい", 2.2), _lex("痛い", 1.6),
        _lex("泣", 2.0), _lex("喪失", 2.2),
    ],
    AMAE: [
        _lex("ねえ", 1.4), _lex("お願い", 1.8), _lex("だっこ", 2.0),
        _lex("撫でて", 1.8), _lex("よしよし", 1.6), _lex("そばにいて", 2.0),
        _lex("ぎゅー", 1.8), _lex("甘え", 2.0), _lex("頼って", 1.6),
    ],
    DESIRE: [
        _lex("欲しい", 2.0), _lex("欲", 2.2), _lex("もっと", 1.8),
        _lex("求め", 2.0), _lex("ください", 1.2), _lex("して", 1.1),
        _lex("触れ", 1.6, AFFECTION, DESIRE),
        _lex("抱い", 1.6, AFFECTION, DESIRE),
        _lex("熱", 1.4),
    ],
}


def default_lexicon() -> Lexicon:
    """Return a fresh copy of the built-in lexicon."""
    return {cat: list(terms) for cat, terms in _DEFAULT_LEXICON_SPEC.items()}


def lexicon_to_dict(lexicon: Lexicon) -> Dict[str, List[Dict]]:
    return {cat: [lx.to_dict() for lx in lexicon.get(cat, [])] for cat in CATEGORIES}


def parse_lexicon(data) -> Lexicon:
    """Validate a decoded lexicon payload and build a :data:`Lexicon`.

    The whole payload is rejected on the first problem; nothing is partially
    accepted.

    Raises:
        LexiconError: if *data* is not an object with an array for every
            category, or any entry is malformed.
    """
    if not isinstance(data, dict):
        raise LexiconError("lexicon must be a JSON object")
    by_cat: Dict[str, list] = {}
    for key, value in data.items():
        cat = resolve_category(key) if isinstance(key, str) else None
        if cat is None:
            raise LexiconError(f"unknown category key {key!r}")
        by_cat[cat] = value
    lexicon: Lexicon = {}
    for cat in CATEGORIES:
        entries = by_cat.get(cat)
        if not isinstance(entries, list):
            raise LexiconError(f"category {cat!r} must map to an array")
        lexicon[cat] = [Lexeme.from_dict(e) for e in entries]
    return lexicon


def iter_lexemes(lexicon: Lexicon, category: Optional[str] = None):
    """Yield ``(owner, lexeme)`` pairs, optionally for a single owner."""
    cats = (category,) if category else CATEGORIES
    for cat in cats:
        for lx in lexicon.get(cat, []):
            yield cat, lx
