"""Tests for the debounce/blur commit state machine.

A fake clock drives the debounce deadline so no test sleeps.
"""

import pytest

from emotion_radar import CommitController, EmotionAnalyzer, HistoryStore
from emotion_radar.commit import COMMITTED, IDLE, PENDING


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def history():
    return HistoryStore()


@pytest.fixture
def controller(history, clock):
    return CommitController(history, EmotionAnalyzer(), debounce_seconds=0.8, clock=clock)


class TestDebounce:
    def test_waits_for_deadline(self, controller, clock, history):
        controller.on_input("会いたい")
        assert controller.state == PENDING
        assert controller.poll() is None
        clock.advance(0.7)
        assert controller.poll() is None
        clock.advance(0.2)
        item = controller.poll()
        assert item is not None
        assert item.full_text == "会いたい"
        assert controller.state == COMMITTED
        assert len(history) == 1

    def test_keystroke_rearms_timer(self, controller, clock, history):
        controller.on_input("会い")
        clock.advance(0.5)
        controller.on_input("会いたい")
        clock.advance(0.5)
        assert controller.poll() is None
        clock.advance(0.4)
        assert controller.poll().full_text == "会いたい"
        assert len(history) == 1

    def test_poll_when_idle(self, controller):
        assert controller.state == IDLE
        assert controller.poll() is None

    def test_cancel(self, controller, clock, history):
        controller.on_input("会いたい")
        controller.cancel()
        clock.advance(5)
        assert controller.poll() is None
        assert controller.state == IDLE
        assert len(history) == 0


class TestBlur:
    def test_blur_commits_immediately(self, controller, history):
        controller.on_input("悲しい")
        assert controller.on_blur().full_text == "悲しい"
        assert controller.deadline is None
        assert len(history) == 1

    def test_blur_then_timer_commits_once(self, controller, clock, history):
        controller.on_input("悲しい")
        controller.on_blur()
        clock.advance(1)
        assert controller.poll() is None
        assert len(history) == 1

    def test_timer_then_blur_commits_once(self, controller, clock, history):
        controller.on_input("悲しい")
        clock.advance(1)
        controller.poll()
        assert controller.on_blur() is None
        assert controller.state == COMMITTED
        assert len(history) == 1

    def test_blank_text_not_committed(self, controller, history):
        controller.on_input("   ")
        assert controller.on_blur() is None
        assert controller.state == IDLE
        assert len(history) == 0

    def test_min_chars(self, history, clock):
        controller = CommitController(history, EmotionAnalyzer(), min_chars=3, clock=clock)
        controller.on_input("涙")
        assert controller.on_blur() is None
        controller.on_input("涙が出る")
        assert controller.on_blur() is not None


class TestGuard:
    def test_new_text_after_commit(self, controller, history):
        controller.on_input("会いたい")
        controller.on_blur()
        controller.on_input("悲しい")
        controller.on_blur()
        assert [it.full_text for it in history] == ["会いたい", "悲しい"]

    def test_older_duplicate_refused_by_history(self, controller, history):
        for text in ("会いたい", "悲しい", "会いたい"):
            controller.on_input(text)
            controller.on_blur()
        assert len(history) == 2

    def test_guard_seeded_from_existing_history(self, history, clock):
        first = CommitController(history, EmotionAnalyzer(), clock=clock)
        first.on_input("会いたい")
        first.on_blur()

        second = CommitController(history, EmotionAnalyzer(), clock=clock)
        assert second.last_committed_hash == history.last().content_hash

    def test_reset_after_clear(self, controller, history):
        controller.on_input("会いたい")
        controller.on_blur()
        history.clear()
        controller.reset()
        assert controller.last_committed_hash is None
        controller.on_input("会いたい")
        assert controller.on_blur() is not None
        assert len(history) == 1
