"""Commit of edited text into the history.

Two triggers commit the text being edited: an idle timer (debounce) that is
re-armed on every keystroke, and a blur event that commits straight away.
Both go through one guard, the hash of the last committed text, so the same
edit session is appended at most once whichever trigger fires first.

States::

    idle --on_input--> pending --poll (deadline passed)--> committed
                          |  ^                                  |
                          |  +-----------on_input---------------+
                          +--on_blur--> committed

The timer is a deadline checked by :meth:`CommitController.poll`, so the
controller runs inside whatever event loop drives it; no threads.
"""

import logging
import time
from typing import Callable, Optional

from .history import FULL_TEXT_LIMIT, HistoryItem, HistoryStore, build_history_item, content_hash

logger = logging.getLogger("emotion_radar")

IDLE = "idle"
PENDING = "pending"
COMMITTED = "committed"

DEBOUNCE_SECONDS = 0.8
MIN_COMMIT_CHARS = 1


class CommitController:
    """Debounce/blur commit state machine for one text input.

    Parameters
    ----------
    history : HistoryStore
        Destination of committed items.  Saved after each append.
    analyzer : EmotionAnalyzer
        Scores the text at commit time.
    debounce_seconds : float
        Idle time after the last input before the timer commits.
    min_chars : int
        Minimum length of the trimmed text for a commit.
    clock : callable
        Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        history: HistoryStore,
        analyzer,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        min_chars: int = MIN_COMMIT_CHARS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.history = history
        self.analyzer = analyzer
        self.debounce_seconds = debounce_seconds
        self.min_chars = min_chars
        self.clock = clock

        self.state = IDLE
        self.text = ""
        self._deadline: Optional[float] = None
        last = history.last()
        self.last_committed_hash: Optional[str] = last.content_hash if last else None

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def on_input(self, text: str) -> None:
        """Record an edit and re-arm the debounce timer."""
        self.text = text
        self._deadline = self.clock() + self.debounce_seconds
        self.state = PENDING

    def poll(self) -> Optional[HistoryItem]:
        """Fire the debounce timer if it is due. Returns the appended item."""
        if self.state != PENDING or self._deadline is None:
            return None
        if self.clock() < self._deadline:
            return None
        return self._commit("debounce")

    def on_blur(self) -> Optional[HistoryItem]:
        """Cancel the timer and commit immediately. Returns the appended item."""
        return self._commit("blur")

    def cancel(self) -> None:
        """Drop a pending timer without committing."""
        self._deadline = None
        if self.state == PENDING:
            self.state = IDLE

    def reset(self) -> None:
        """Forget the last committed hash (after the history was cleared)."""
        self.cancel()
        last = self.history.last()
        self.last_committed_hash = last.content_hash if last else None

    def _commit(self, reason: str) -> Optional[HistoryItem]:
        self._deadline = None
        clean = self.text.strip()
        if len(clean) < self.min_chars:
            self.state = IDLE
            return None
        h = content_hash(clean[:FULL_TEXT_LIMIT])
        if h == self.last_committed_hash:
            self.state = COMMITTED
            return None

        # Claim the guard before appending so the other trigger sees it
        self.last_committed_hash = h
        self.state = COMMITTED

        result = self.analyzer.analyze(clean)
        item = build_history_item(clean, result, self.analyzer.lexicon)
        if not self.history.append(item):
            logger.debug(f"Commit ({reason}): {h} already in history")
            return None
        self.history.save()
        logger.debug(f"Commit ({reason}): appended {item.id}")
        return item
