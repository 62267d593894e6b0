"""History of committed analyses.

Items are appended in commit order and identified by the content hash of
their (truncated) text.  The store:

- refuses an item whose text is already anywhere in the history
- keeps at most ``max_retained`` items, evicting the oldest *unpinned* one
  first; when only pinned items remain the cap is allowed to overflow
- never removes a pinned item through eviction, :meth:`HistoryStore.clear`
  or :meth:`HistoryStore.delete`

The whole list round-trips through a single JSON array (``history.json``,
or :meth:`HistoryStore.export_json` / :meth:`HistoryStore.import_json`).
"""

import json
import logging
import math
import os
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional, Tuple

from .categories import CATEGORIES
from .hashing import hash_base36, hash_lexicon, to_base36
from .stores import JsonStore

logger = logging.getLogger("emotion_radar")

MAX_RETAINED_DEFAULT = 500
FULL_TEXT_LIMIT = 1000
SNIPPET_LIMIT = 120
TOP_TERMS_PER_CATEGORY = 3


class HistoryImportError(ValueError):
    """Raised when a history payload fails structural validation."""
    pass


class PinnedItemError(Exception):
    """Raised when an explicit delete targets a pinned item."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"History item {item_id} is pinned; unpin it before deleting")


def round1(n: float) -> float:
    """Round half up to one decimal."""
    return math.floor(n * 10 + 0.5) / 10


def content_hash(text: str) -> str:
    """Identity of a history text; callers pass the truncated full text."""
    return hash_base36(text)


class HistoryItem:
    """One committed analysis."""

    __slots__ = (
        "id", "ts", "snippet", "full_text", "normalized", "leaders",
        "top_terms", "schema_version", "lexicon_hash", "pinned",
    )

    def __init__(
        self,
        id: str,
        ts: str,
        full_text: str,
        snippet: str = None,
        normalized: Tuple[float, ...] = None,
        leaders: Tuple[str, ...] = (),
        top_terms: Dict[str, List[Tuple[str, float]]] = None,
        schema_version: str = "",
        lexicon_hash: str = "",
        pinned: bool = False,
    ):
        self.id = id
        self.ts = ts
        self.full_text = full_text
        self.snippet = snippet if snippet is not None else full_text[:SNIPPET_LIMIT]
        self.normalized = tuple(normalized) if normalized else (0.0,) * len(CATEGORIES)
        self.leaders = tuple(leaders)
        self.top_terms = top_terms or {}
        self.schema_version = schema_version
        self.lexicon_hash = lexicon_hash
        self.pinned = pinned

    @property
    def content_hash(self) -> str:
        return content_hash(self.full_text)

    # -- serialisation --------------------------------------------------------

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "ts": self.ts,
            "snippet": self.snippet,
            "fullText": self.full_text,
            "normalized": list(self.normalized),
            "leaders": list(self.leaders),
            "topTerms": {
                c: [[term, value] for term, value in pairs]
                for c, pairs in self.top_terms.items()
            },
            "schemaVersion": self.schema_version,
            "lexiconHash": self.lexicon_hash,
            "pinned": self.pinned,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "HistoryItem":
        top = d.get("topTerms") or {}
        return cls(
            id=d["id"],
            ts=d["ts"],
            full_text=d["fullText"],
            snippet=d.get("snippet"),
            normalized=d.get("normalized"),
            leaders=d.get("leaders") or (),
            top_terms={
                c: [tuple(pair) for pair in pairs]
                for c, pairs in top.items() if isinstance(pairs, list)
            } if isinstance(top, dict) else {},
            schema_version=d.get("schemaVersion", ""),
            lexicon_hash=d.get("lexiconHash", ""),
            pinned=d.get("pinned") is True,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, HistoryItem):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        pin = " pinned" if self.pinned else ""
        return f"<HistoryItem {self.id}{pin} {self.snippet[:20]!r}>"


def build_history_item(text: str, result, lexicon, now: Optional[datetime] = None) -> HistoryItem:
    """Build a history item from an :class:`AnalysisResult` of *text*."""
    from . import __version__ as _pkg_version

    now = now or datetime.now(timezone.utc)
    clean = text.strip()
    full = clean[:FULL_TEXT_LIMIT]
    millis = int(now.timestamp() * 1000)
    top = {
        c: [(term, round1(value))
            for term, value in result.top_terms(c, TOP_TERMS_PER_CATEGORY)]
        for c in CATEGORIES
    }
    return HistoryItem(
        id=f"{to_base36(millis)}-{content_hash(full)}",
        ts=now.isoformat(),
        full_text=full,
        snippet=clean[:SNIPPET_LIMIT],
        normalized=tuple(round1(result.normalized[c]) for c in CATEGORIES),
        leaders=result.leaders,
        top_terms=top,
        schema_version=_pkg_version,
        lexicon_hash=hash_lexicon(lexicon),
    )


def parse_history(data) -> List[HistoryItem]:
    """Validate a decoded history payload.

    Every element must be an object with string ``id``, ``ts`` and
    ``fullText``; other fields are taken as-is.

    Raises:
        HistoryImportError: on the first malformed element.
    """
    if not isinstance(data, list):
        raise HistoryImportError("history must be a JSON array")
    for i, d in enumerate(data):
        if not isinstance(d, dict) or not all(
            isinstance(d.get(k), str) for k in ("id", "ts", "fullText")
        ):
            raise HistoryImportError(
                f"history item {i} needs string id, ts and fullText fields")
    try:
        return [HistoryItem.from_dict(d) for d in data]
    except (TypeError, ValueError) as e:
        raise HistoryImportError(f"history item could not be read: {e}") from e


class _HistoryFile(JsonStore):
    def default(self) -> List[HistoryItem]:
        return []

    def decode(self, data) -> List[HistoryItem]:
        return parse_history(data)

    def encode(self, items: List[HistoryItem]):
        return [it.to_dict() for it in items]


class HistoryStore:
    """Bounded, de-duplicated, pin-aware history.

    Parameters
    ----------
    workspace : str | None
        Directory holding ``history.json``.  ``None`` with no *path* keeps
        the history in memory only.
    path : str | None
        Explicit file path, overriding *workspace*.
    max_retained : int
        Retention cap (default 500).  Pinned items may push the list past it.
    """

    FILENAME = "history.json"

    def __init__(
        self,
        workspace: Optional[str] = None,
        path: Optional[str] = None,
        max_retained: int = MAX_RETAINED_DEFAULT,
    ):
        if path is None and workspace is not None:
            path = os.path.join(workspace, self.FILENAME)
        self._file = _HistoryFile(path) if path else None
        self.max_retained = max_retained
        self.items: List[HistoryItem] = []
        self._hashes: Counter = Counter()

    @property
    def path(self) -> Optional[str]:
        return self._file.path if self._file else None

    # ── persistence ─────────────────────────────────────────────────────

    def load(self) -> int:
        """Load from disk. Returns count loaded (0 on a missing or bad file)."""
        if self._file is None:
            return len(self.items)
        self._replace(self._file.load())
        return len(self.items)

    def save(self) -> Optional[str]:
        if self._file is None:
            return None
        return self._file.save(self.items)

    # ── queries ─────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[HistoryItem]:
        return iter(self.items)

    def get(self, item_id: str) -> HistoryItem:
        """Return the item with *item_id*; ``KeyError`` if absent."""
        for it in self.items:
            if it.id == item_id:
                return it
        raise KeyError(item_id)

    def last(self) -> Optional[HistoryItem]:
        return self.items[-1] if self.items else None

    def contains_hash(self, h: str) -> bool:
        return self._hashes[h] > 0

    def estimate_size_mb(self) -> float:
        """Approximate serialized size in MB, two decimals."""
        payload = json.dumps([it.to_dict() for it in self.items], ensure_ascii=False)
        return round(len(payload.encode("utf-8")) / 1048576, 2)

    # ── mutation ────────────────────────────────────────────────────────

    def append(self, item: HistoryItem) -> bool:
        """Append *item* unless its text is already in the history.

        Returns True if the item was added and survived eviction.
        """
        h = item.content_hash
        if self.contains_hash(h):
            logger.debug(f"History: duplicate text {h}, not appended")
            return False
        self.items.append(item)
        self._hashes[h] += 1
        self._evict()
        return self.items[-1] is item if self.items else False

    def _evict(self) -> List[HistoryItem]:
        evicted = []
        while len(self.items) > self.max_retained:
            idx = next((i for i, it in enumerate(self.items) if not it.pinned), None)
            if idx is None:
                logger.debug(
                    f"History: {len(self.items)} items over cap {self.max_retained}, "
                    f"all pinned")
                break
            gone = self.items.pop(idx)
            self._forget_hash(gone)
            evicted.append(gone)
        if evicted:
            logger.debug(f"History: evicted {len(evicted)} unpinned item(s)")
        return evicted

    def toggle_pin(self, item_id: str) -> bool:
        """Flip the pin flag of an item. Returns the new state."""
        item = self.get(item_id)
        item.pinned = not item.pinned
        return item.pinned

    def delete(self, item_id: str) -> HistoryItem:
        """Remove one item.

        Raises:
            PinnedItemError: if the item is pinned (it is left untouched).
            KeyError: if no item has *item_id*.
        """
        item = self.get(item_id)
        if item.pinned:
            raise PinnedItemError(item_id)
        self.items.remove(item)
        self._forget_hash(item)
        return item

    def clear(self) -> int:
        """Remove every unpinned item. Returns how many were removed."""
        kept = [it for it in self.items if it.pinned]
        removed = len(self.items) - len(kept)
        self._replace(kept)
        return removed

    # ── exchange ────────────────────────────────────────────────────────

    def export_json(self, indent: int = 2) -> str:
        return json.dumps([it.to_dict() for it in self.items],
                          ensure_ascii=False, indent=indent)

    def import_json(self, payload) -> int:
        """Replace the whole history with *payload*.

        *payload* is a JSON string or an already-decoded list.  Nothing is
        merged; on any validation failure the current history is kept.

        Raises:
            HistoryImportError: if the payload is not valid history JSON.
        """
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except ValueError as e:
                raise HistoryImportError(f"history is not valid JSON: {e}") from e
        self._replace(parse_history(payload))
        return len(self.items)

    # ── private ─────────────────────────────────────────────────────────

    def _replace(self, items: List[HistoryItem]) -> None:
        self.items = list(items)
        self._hashes = Counter(it.content_hash for it in self.items)

    def _forget_hash(self, item: HistoryItem) -> None:
        h = item.content_hash
        self._hashes[h] -= 1
        if self._hashes[h] <= 0:
            del self._hashes[h]
