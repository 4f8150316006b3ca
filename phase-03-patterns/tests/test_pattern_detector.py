"""
test_pattern_detector.py — Unit tests for Phase 03: Pattern Detection
-----------------------------------------------------------------------
Pure functions, no I/O.

Test coverage:
  word_frequency:
    1. Counts across texts, ties in first-seen order
    2. Stop words, 1-char tokens and non-Hangul characters removed
    3. Capped at top_n
  detect_repetitive_themes:
    4. At most +1 per text per theme
    5. Counts accumulate across texts; unseen themes omitted
  calculate_diversity_score:
    6. 0 for empty / single-theme distributions
    7. 1 for a uniform distribution, exact entropy otherwise
  calculate_theme_percentages
  extract_behavior_patterns:
    8. Trigger vs response classification; connective endings match bare (no "~")
    9. De-duplication and cap of 10
   10. Empty input → empty outputs
"""

import math
import sys
import unittest
from pathlib import Path

_TESTS_DIR    = Path(__file__).resolve().parent
_PHASE_DIR    = _TESTS_DIR.parent
_PROJECT_ROOT = _PHASE_DIR.parent
for _p in [str(_PROJECT_ROOT), str(_PHASE_DIR), str(_PROJECT_ROOT / "phase-00-orchestration")]:
    if _p not in sys.path:
        sys.path.insert(0, _p)

from pattern_detector import (  # noqa: E402
    MAX_BEHAVIOR_SENTENCES,
    calculate_diversity_score,
    calculate_theme_percentages,
    detect_repetitive_themes,
    extract_behavior_patterns,
    word_frequency,
)


def _distinct_words(n: int) -> list[str]:
    """n distinct two-syllable Hangul words (가각, 갂갃, ...)."""
    return [chr(0xAC00 + 2 * i) + chr(0xAC00 + 2 * i + 1) for i in range(n)]


# ── Word frequency ──────────────────────────────────────────────────────────

class TestWordFrequency(unittest.TestCase):

    def test_counts_across_texts(self):
        result = word_frequency(["아이가 웃었다 아이가 울었다", "아이가 잠들었다"])
        self.assertEqual(result["아이가"], 3)
        self.assertEqual(result["웃었다"], 1)
        self.assertEqual(list(result)[0], "아이가")

    def test_ties_keep_first_seen_order(self):
        result = word_frequency(["나무 바다 바다 하늘"])
        self.assertEqual(list(result), ["바다", "나무", "하늘"])

    def test_filters_stop_words_short_tokens_and_other_scripts(self):
        result = word_frequency(["그리고 정말 이 아이!! hello 123 abc아이"])
        self.assertEqual(result, {"아이": 2})

    def test_capped_at_top_n(self):
        words = _distinct_words(25)
        result = word_frequency([" ".join(words)], top_n=20)
        self.assertEqual(len(result), 20)
        self.assertEqual(list(result), words[:20])

    def test_empty_input(self):
        self.assertEqual(word_frequency([]), {})
        self.assertEqual(word_frequency(["", None]), {})


# ── Themes ──────────────────────────────────────────────────────────────────

class TestRepetitiveThemes(unittest.TestCase):

    def test_one_count_per_text_per_theme(self):
        text = "오늘 소리 질렀다. 화냈다. 고함을 쳤다. 욱했다"
        self.assertEqual(detect_repetitive_themes([text]), {"shouting": 1})

    def test_counts_accumulate_across_texts(self):
        texts = ["너무 피곤하다", "지쳐서 잠들었다", "힘들고 녹초가 됐다"]
        self.assertEqual(detect_repetitive_themes(texts), {"exhaustion": 3})

    def test_multiple_themes_in_one_text(self):
        result = detect_repetitive_themes(["혼자 있으니 미안하고 피곤하다"])
        self.assertEqual(result, {"guilt": 1, "exhaustion": 1, "loneliness": 1})

    def test_unseen_themes_omitted(self):
        self.assertEqual(detect_repetitive_themes(["공원에 갔다"]), {})
        self.assertEqual(detect_repetitive_themes([]), {})

    def test_keys_come_from_fixed_vocabulary(self):
        vocabulary = {
            "shouting", "corporal-punishment", "guilt", "exhaustion",
            "time-scarcity", "perfectionism", "social-comparison", "loneliness",
        }
        result = detect_repetitive_themes([
            "소리 때렸 미안 피곤 시간 완벽 비교 혼자", "아무 일도 없었다",
        ])
        self.assertEqual(set(result), vocabulary)


# ── Diversity ───────────────────────────────────────────────────────────────

class TestDiversityScore(unittest.TestCase):

    def test_empty_and_single_theme_are_zero(self):
        self.assertEqual(calculate_diversity_score({}), 0.0)
        self.assertEqual(calculate_diversity_score({"guilt": 5}), 0.0)
        self.assertEqual(calculate_diversity_score({"guilt": 3, "shouting": 0}), 0.0)
        self.assertEqual(calculate_diversity_score({"guilt": 0, "shouting": 0}), 0.0)

    def test_uniform_distribution_is_one(self):
        self.assertAlmostEqual(calculate_diversity_score({"a": 2, "b": 2}), 1.0)
        self.assertAlmostEqual(calculate_diversity_score({"a": 1, "b": 1, "c": 1, "d": 1}), 1.0)

    def test_skewed_distribution(self):
        expected = -(0.75 * math.log2(0.75) + 0.25 * math.log2(0.25))
        self.assertAlmostEqual(calculate_diversity_score({"a": 3, "b": 1}), expected)

    def test_bounded(self):
        score = calculate_diversity_score({"a": 10, "b": 1, "c": 4})
        self.assertGreaterEqual(score, 0.0)
        self.assertLessEqual(score, 1.0)


class TestThemePercentages(unittest.TestCase):

    def test_sorted_by_count(self):
        rows = calculate_theme_percentages({"guilt": 2, "shouting": 4}, 8)
        self.assertEqual([r["theme"] for r in rows], ["shouting", "guilt"])
        self.assertAlmostEqual(rows[0]["percentage"], 50.0)
        self.assertAlmostEqual(rows[1]["percentage"], 25.0)

    def test_zero_total(self):
        self.assertEqual(calculate_theme_percentages({"guilt": 2}, 0), [])


# ── Behaviour patterns ──────────────────────────────────────────────────────

class TestBehaviorPatterns(unittest.TestCase):

    def test_triggers_and_responses(self):
        result = extract_behavior_patterns(["아이가 울었기 때문에 화가 났다. 그래서 소리를 질렀다!"])
        self.assertEqual(result["triggers"], ["아이가 울었기 때문에 화가 났다"])
        self.assertEqual(result["responses"], ["그래서 소리를 질렀다"])

    def test_connective_endings_trigger_without_tilde(self):
        result = extract_behavior_patterns(["피곤해서 소리를 질렀다. 늦었으니까 서둘렀다. 공원에 갔다"])
        self.assertEqual(result["triggers"], ["피곤해서 소리를 질렀다", "늦었으니까 서둘렀다"])
        self.assertEqual(result["responses"], ["피곤해서 소리를 질렀다"])

    def test_deduplicated_and_capped(self):
        texts = [f"{w} 때문에 힘들었다" for w in _distinct_words(12)]
        texts.append(texts[0])
        result = extract_behavior_patterns(texts)
        self.assertEqual(len(result["triggers"]), MAX_BEHAVIOR_SENTENCES)
        self.assertEqual(len(set(result["triggers"])), MAX_BEHAVIOR_SENTENCES)
        self.assertEqual(result["responses"], [])

    def test_empty(self):
        self.assertEqual(extract_behavior_patterns([]), {"triggers": [], "responses": []})


if __name__ == "__main__":
    unittest.main(verbosity=2)
