"""
EmotionRadar — the main interface to emotion-radar.

Usage:
    from emotion_radar import EmotionRadar

    radar = EmotionRadar("./workspace")
    result = radar.analyze("会いたい！")
    result.normalized    # {"affection": 100.0, "longing": 100.0, ...}
    radar.commit("会いたい！")   # append to the history
    radar.export_csv(result)
"""

import json
import logging
import os
import time
from typing import Dict, List, Optional, Tuple

from .comments import leader_comments
from .commit import DEBOUNCE_SECONDS, MIN_COMMIT_CHARS, CommitController
from .export import scores_to_csv
from .history import MAX_RETAINED_DEFAULT, HistoryImportError, HistoryItem, HistoryStore, PinnedItemError
from .lexicon import Lexicon, LexiconError, default_lexicon, lexicon_to_dict, parse_lexicon
from .scoring import AnalysisResult, EmotionAnalyzer
from .stores import LexiconStore

logger = logging.getLogger("emotion_radar")


class EmotionRadar:
    """Analyzer, lexicon and history bound to one workspace directory.

    Parameters
    ----------
    workspace : str
        Directory for ``lexicon.json`` and ``history.json``.
    relation_boost : bool
        Whether relationship words add to affection (default True).
    max_retained : int
        History retention cap (default 500).
    debounce_seconds : float
        Idle time before an edit is committed by the timer.
    min_commit_chars : int
        Minimum trimmed length of a committed text.
    """

    def __init__(
        self,
        workspace: str = ".",
        relation_boost: bool = True,
        max_retained: int = MAX_RETAINED_DEFAULT,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        min_commit_chars: int = MIN_COMMIT_CHARS,
        clock=None,
    ):
        self.workspace = os.path.abspath(workspace)

        self.lexicon_store = LexiconStore(self.workspace)
        self.history = HistoryStore(self.workspace, max_retained=max_retained)
        self.analyzer = EmotionAnalyzer(self.lexicon_store.load(), relation_boost)
        self.history.load()

        self.commits = CommitController(
            self.history, self.analyzer,
            debounce_seconds=debounce_seconds,
            min_chars=min_commit_chars,
            clock=clock or time.monotonic,
        )

    # ── analysis ────────────────────────────────────────────────────────

    @property
    def lexicon(self) -> Lexicon:
        return self.analyzer.lexicon

    @property
    def relation_boost(self) -> bool:
        return self.analyzer.relation_boost

    @relation_boost.setter
    def relation_boost(self, value: bool) -> None:
        self.analyzer.relation_boost = bool(value)

    def analyze(self, text: str) -> AnalysisResult:
        return self.analyzer.analyze(text)

    def comments(self, result: AnalysisResult) -> List[Tuple[str, str]]:
        return leader_comments(result)

    def export_csv(self, result: AnalysisResult, labels: bool = True) -> str:
        return scores_to_csv(result, labels=labels)

    # ── lexicon ─────────────────────────────────────────────────────────

    def set_lexicon(self, lexicon: Lexicon) -> None:
        self.analyzer.lexicon = lexicon
        self.lexicon_store.save(lexicon)

    def import_lexicon(self, payload) -> Dict:
        """Replace the lexicon from a JSON string or decoded object.

        Returns ``{"ok": True, "terms": N}`` or, when the payload is rejected,
        ``{"ok": False, "error": ...}`` with the current lexicon unchanged.
        """
        try:
            if isinstance(payload, (str, bytes)):
                payload = json.loads(payload)
            lexicon = parse_lexicon(payload)
        except (LexiconError, ValueError) as e:
            logger.warning(f"Lexicon import rejected: {e}")
            return {"ok": False, "error": str(e)}
        self.set_lexicon(lexicon)
        return {"ok": True, "terms": sum(len(v) for v in lexicon.values())}

    def export_lexicon(self) -> str:
        return json.dumps(lexicon_to_dict(self.lexicon), ensure_ascii=False, indent=2)

    def reset_lexicon(self) -> None:
        """Go back to the built-in lexicon and drop the stored one."""
        self.analyzer.lexicon = default_lexicon()
        self.lexicon_store.reset()

    # ── history ─────────────────────────────────────────────────────────

    def on_input(self, text: str) -> None:
        self.commits.on_input(text)

    def poll(self) -> Optional[HistoryItem]:
        return self.commits.poll()

    def on_blur(self) -> Optional[HistoryItem]:
        return self.commits.on_blur()

    def commit(self, text: str) -> Optional[HistoryItem]:
        """Commit *text* right away (an input followed by a blur)."""
        self.commits.on_input(text)
        return self.commits.on_blur()

    def reanalyze(self, item_id: str) -> AnalysisResult:
        """Load a history item's full text back as the current input and
        score it with the current lexicon.  Unknown ids raise ``KeyError``.

        Any pending debounce is dropped; the restored text is already in the
        history, so a later blur on it does not append a duplicate.
        """
        item = self.history.get(item_id)
        self.commits.cancel()
        self.commits.text = item.full_text
        return self.analyze(item.full_text)

    def toggle_pin(self, item_id: str) -> bool:
        pinned = self.history.toggle_pin(item_id)
        self.history.save()
        return pinned

    def delete_history_item(self, item_id: str) -> Dict:
        """Delete one history item.

        Returns ``{"deleted": True}``, or ``{"deleted": False, "blocked":
        "pinned"}`` when the item is pinned.  Unknown ids raise ``KeyError``.
        """
        try:
            self.history.delete(item_id)
        except PinnedItemError as e:
            logger.info(str(e))
            return {"deleted": False, "blocked": "pinned"}
        self.history.save()
        return {"deleted": True}

    def clear_history(self) -> int:
        """Remove every unpinned item. Returns how many were removed."""
        removed = self.history.clear()
        self.history.save()
        self.commits.reset()
        return removed

    def export_history(self) -> str:
        return self.history.export_json()

    def import_history(self, payload) -> Dict:
        """Replace the history wholesale; see :meth:`HistoryStore.import_json`."""
        try:
            count = self.history.import_json(payload)
        except HistoryImportError as e:
            logger.warning(f"History import rejected: {e}")
            return {"ok": False, "error": str(e)}
        self.history.save()
        self.commits.reset()
        return {"ok": True, "items": count}

    def stats(self) -> Dict:
        pinned = sum(1 for it in self.history if it.pinned)
        return {
            "history_items": len(self.history),
            "pinned": pinned,
            "max_retained": self.history.max_retained,
            "size_mb": self.history.estimate_size_mb(),
            "lexicon_terms": sum(len(v) for v in self.lexicon.values()),
            "relation_boost": self.relation_boost,
        }
