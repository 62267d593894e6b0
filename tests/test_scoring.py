"""Tests for the scoring engine: term matching, context modifiers, bonuses
and the text-level scaling factors."""

import pytest

from emotion_radar import EmotionAnalyzer, analyze, default_lexicon
from emotion_radar.categories import CATEGORIES
from emotion_radar.scoring import (
    context_factor, exclamation_amp, find_occurrences, length_norm,
)


@pytest.fixture
def lexicon():
    return default_lexicon()


# ── matching ─────────────────────────────────────────────────────────────────

class TestFindOccurrences:
    def test_non_overlapping(self):
        assert find_occurrences("aaaa", "aa") == [0, 2]
        assert find_occurrences("aaa", "aa") == [0]

    def test_repeated_term(self):
        assert find_occurrences("ぎゅぎゅぎゅ", "ぎゅ") == [0, 2, 4]

    def test_no_match_and_empty_term(self):
        assert find_occurrences("会いたい", "涙") == []
        assert find_occurrences("会いたい", "") == []


class TestBasicScoring:
    def test_multi_category_term_scores_both(self, lexicon):
        result = analyze("会いたい", lexicon, relation_boost=False)
        assert result.raw["affection"] == pytest.approx(2.4)
        assert result.raw["longing"] == pytest.approx(2.4)
        assert result.normalized["affection"] == pytest.approx(100)
        assert result.normalized["longing"] == pytest.approx(100)
        for c in ("sadness", "amae", "desire"):
            assert result.normalized[c] == 0
        assert result.leaders == ("affection", "longing")

    def test_overlapping_terms_each_count(self, lexicon):
        # 大好き (3) and 好き (2) are separate lexemes
        result = analyze("大好き", lexicon)
        assert result.raw["affection"] == pytest.approx(5.0)
        assert result.visible_contributions["affection"] == {
            "大好き": pytest.approx(3.0), "好き": pytest.approx(2.0)}

    def test_contributions_accumulate_per_term(self, lexicon):
        result = analyze("涙、涙", lexicon)
        assert result.visible_contributions["sadness"]["涙"] == pytest.approx(4.8)

    def test_top_terms_sorted_descending(self, lexicon):
        result = analyze("悲しい涙", lexicon)
        terms = result.top_terms("sadness")
        assert [t for t, _ in terms] == ["悲しい", "涙"]

    def test_blank_text(self, lexicon):
        result = analyze("   \n", lexicon)
        assert result.text == ""
        assert result.is_blank
        assert all(result.raw[c] == 0 for c in CATEGORIES)
        assert all(result.normalized[c] == 0 for c in CATEGORIES)
        assert result.leaders == ()

    def test_no_matches_has_no_leaders(self, lexicon):
        result = analyze("天気予報", lexicon)
        assert result.leaders == ()
        assert all(v == 0 for v in result.normalized.values())

    def test_input_is_trimmed(self, lexicon):
        assert analyze("  会いたい  ", lexicon).text == "会いたい"


# ── context modifiers ───────────────────────────────────────────────────────

class TestContextModifiers:
    def test_negation_zeroes_occurrence(self, lexicon):
        result = analyze("好きじゃない", lexicon)
        assert result.raw["affection"] == 0
        assert result.normalized["affection"] == 0
        assert result.leaders == ()

    def test_negation_outside_right_window_ignored(self, lexicon):
        result = analyze("会いたいああああああない", lexicon, relation_boost=False)
        assert result.raw["longing"] == pytest.approx(2.4)

    def test_intensifier(self, lexicon):
        assert analyze("とても好き", lexicon).raw["affection"] == pytest.approx(3.0)

    def test_diminisher(self, lexicon):
        assert analyze("少し好き", lexicon).raw["affection"] == pytest.approx(1.4)

    def test_intensifier_and_diminisher_stack(self, lexicon):
        assert analyze("とても少し好き", lexicon).raw["affection"] == pytest.approx(2.1)

    def test_left_window_is_eight_chars(self, lexicon):
        near = analyze("とてもあああああ好き", lexicon)
        far = analyze("とてもあああああああ好き", lexicon)
        assert near.raw["affection"] == pytest.approx(3.0)
        assert far.raw["affection"] == pytest.approx(2.0)

    def test_context_factor_direct(self):
        assert context_factor("好き", 0, 2) == 1.0
        assert context_factor("好きではない", 0, 2) == 0.0


# ── bonuses and scaling ─────────────────────────────────────────────────────

class TestBonuses:
    def test_relation_boost_goes_to_meta(self, lexicon):
        result = analyze("あなた", lexicon)
        assert result.raw["affection"] == pytest.approx(0.6)
        assert result.meta_adjustments == {"affection": {"relation": pytest.approx(0.6)}}
        assert result.visible_contributions["affection"] == {}
        assert result.top_terms("affection") == []

    def test_relation_boost_disabled(self, lexicon):
        result = analyze("あなた", lexicon, relation_boost=False)
        assert result.raw["affection"] == 0
        assert result.meta_adjustments == {}

    def test_emoji_boost(self, lexicon):
        result = analyze("🔥🔥", lexicon)
        assert result.raw["desire"] == pytest.approx(2.4)
        assert result.leaders == ("desire",)

    def test_shared_emoji(self, lexicon):
        result = analyze("😢", lexicon)
        assert result.raw["longing"] == pytest.approx(1.2)
        assert result.raw["sadness"] == pytest.approx(1.2)
        assert result.leaders == ("longing", "sadness")

    def test_exclamation_amp(self):
        assert exclamation_amp("会いたい") == 1.0
        assert exclamation_amp("!!!") == pytest.approx(1.15)
        assert exclamation_amp("！！") == pytest.approx(1.1)
        assert exclamation_amp("!" * 30) == pytest.approx(1.5)

    def test_exclamation_scales_raw(self, lexicon):
        result = analyze("会いたい！", lexicon, relation_boost=False)
        assert result.raw["longing"] == pytest.approx(2.4 * 1.05)
        assert result.normalized["longing"] == pytest.approx(100)

    def test_length_norm(self):
        assert length_norm("a") == 1.0
        assert length_norm("a" * 180) == 1.0
        assert length_norm("a" * 200) == pytest.approx(0.9)
        assert length_norm("a" * 1000) == pytest.approx(0.7)

    def test_long_text_damped(self, lexicon):
        text = "涙" + "。" * 359
        assert analyze(text, lexicon).raw["sadness"] == pytest.approx(2.4 * 0.7)


class TestEmotionAnalyzer:
    def test_defaults_to_builtin_lexicon(self):
        analyzer = EmotionAnalyzer()
        assert analyzer.analyze("悲しい").leaders == ("sadness",)

    def test_relation_flag_is_used(self):
        assert EmotionAnalyzer(relation_boost=False).analyze("君").leaders == ()
        assert EmotionAnalyzer().analyze("君").leaders == ("affection",)

    def test_to_dict_shape(self):
        data = EmotionAnalyzer().analyze("会いたい").to_dict()
        assert set(data) == {"raw", "normalized", "leaders", "top_terms", "meta_adjustments"}
        assert data["leaders"] == ["affection", "longing"]
        assert data["top_terms"]["longing"] == [["会いたい", 2.4]]


class TestNegationPrecedence:
    def test_negation_beats_intensifier(self, lexicon):
        result = analyze("とても好きじゃない", lexicon)
        assert result.raw["affection"] == 0
        assert result.leaders == ()

    def test_negation_ending_on_sixth_char(self, lexicon):
        assert analyze("好きああない", lexicon).raw["affection"] == 0
        assert analyze("好きああああない", lexicon).raw["affection"] == 0

    def test_negation_on_seventh_char_ignored(self, lexicon):
        assert analyze("好きあああああない", lexicon).raw["affection"] == pytest.approx(2.0)
