"""Short commentary for the leading categories of an analysis.

Each category has three tiers of templates (soft / mid / high, see
:func:`~emotion_radar.normalize.comment_band`).  The template is chosen with
:func:`~emotion_radar.hashing.seeded_pick` seeded by the analysed text, so the
same text always gets the same comment.
"""

from typing import Dict, List, Optional, Tuple

from .categories import AFFECTION, AMAE, DESIRE, LONGING, SADNESS
from .hashing import seeded_pick
from .normalize import comment_band

# A top term must contribute more than this to be named in the comment
TOP_TERM_THRESHOLD = 0.7

COMMENT_BANK: Dict[str, Dict[str, List[str]]] = {
    AFFECTION: {
        "soft": [
            "あたたかさが感じられます。思いやりの語が散見されます。",
            "穏やかな好意のニュアンスが強めです。",
            "親近感を示す語が目立ちます。",
        ],
        "mid": [
            "明確な好意・肯定の表現が複数見られます。",
            "関係性を重んじる語が重なり、愛情が優勢です。",
            "安心・保護のニュアンスが増えています。",
        ],
        "high": [
            "強い愛情のサインが集中しています。",
            "好意表現が高密度です。文の主眼が愛情に寄っています。",
            "肯定・絆の語が主要因となっています。",
        ],
    },
    LONGING: {
        "soft": [
            "距離や未充足を示す語が少し見られます。",
            "控えめな物足りなさのニュアンスです。",
            "待機・保留の雰囲気が含まれます。",
        ],
        "mid": [
            "会いたさ・届かなさの表現が増えています。",
            "願望と現状のギャップが目立ちます。",
            "恋しさの語が主要因です。",
        ],
        "high": [
            "強い希求や距離感がテキストの中心になっています。",
            "未達・不足の表現が高密度です。",
            "切実なトーンが最大要因となっています。",
        ],
    },
    SADNESS: {
        "soft": [
            "軽い落ち込み・不安の語が見られます。",
            "弱い否定的情動のサインがあります。",
            "ため息・疲労感の含みがあります。",
        ],
        "mid": [
            "寂しさ・痛みの表現が複数確認できます。",
            "涙・喪失に関する語が寄与しています。",
            "ネガティブな心情の記述が増えています。",
        ],
        "high": [
            "悲嘆・喪失を示す強い語が集中しています。",
            "否定的情動が主役です。",
            "痛み・涙の語が主要因です。",
        ],
    },
    AMAE: {
        "soft": [
            "小さな依頼・依存の語が見られます。",
            "安心を求める穏やかな表現です。",
            "近接を望む語が含まれます。",
        ],
        "mid": [
            "依頼や呼びかけが増えており、甘えが優勢です。",
            "寄り添い・接触の要望が複数あります。",
            "相手への委ねが明確です。",
        ],
        "high": [
            "強い依頼・密接の要望が中心です。",
            "保護・安心への欲求が高密度です。",
            "近接・接触の語が主要因です。",
        ],
    },
    DESIRE: {
        "soft": [
            "控えめな要求や希求の語が見られます。",
            "もう少し、を示す語が含まれます。",
            "軽い前向きな欲求です。",
        ],
        "mid": [
            "明確な要求・希望が複数あります。",
            "『もっと』『求める』などの語が寄与しています。",
            "行動への志向性が強まっています。",
        ],
        "high": [
            "強い希求の表現が中心です。",
            "欲求の語が高密度に出現しています。",
            "積極的な獲得志向が主要因です。",
        ],
    },
}

TOP_TERM_TAIL = "主要寄与語:“{term}”"


def comment_for(category: str, result, bank: Optional[Dict] = None) -> str:
    """Comment on *category* for an :class:`AnalysisResult`.

    Only leader categories get a comment; anything else returns ``""``.
    When the category's strongest term contributes more than
    ``TOP_TERM_THRESHOLD`` it is named at the end.
    """
    if result.is_blank or category not in result.leaders:
        return ""
    bank = bank or COMMENT_BANK
    pool = bank.get(category, {}).get(comment_band(result.normalized[category]), [])
    base = seeded_pick(pool, result.text) or ""

    top = result.top_terms(category, limit=1)
    if top and top[0][1] > TOP_TERM_THRESHOLD:
        tail = TOP_TERM_TAIL.format(term=top[0][0])
        base = f"{base} {tail}" if base else tail
    return base


def leader_comments(result, bank: Optional[Dict] = None) -> List[Tuple[str, str]]:
    """``(category, comment)`` for every leader with a non-empty comment."""
    pairs = [(c, comment_for(c, result, bank)) for c in result.leaders]
    return [(c, text) for c, text in pairs if text]
