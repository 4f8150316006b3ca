"""
pattern_detector.py — Phase 03: Pattern Detection
---------------------------------------------------
Aggregate text analytics over a batch of reflection texts.
Pure functions — no I/O, no state.

  word_frequency            — top-N content words (script-filtered, stop words removed)
  detect_repetitive_themes  — per-theme count of texts mentioning ANY theme keyword
  calculate_theme_percentages
  calculate_diversity_score — normalised Shannon entropy over theme counts, in [0, 1]
  extract_behavior_patterns — trigger / reaction sentences

Empty input always yields empty mappings or 0 — never an error.
"""

import math
import re
import sys
from collections import Counter
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

# Path bootstrap
_PHASE_DIR    = Path(__file__).resolve().parent
_PROJECT_ROOT = _PHASE_DIR.parent
for _p in [str(_PROJECT_ROOT), str(_PHASE_DIR), str(_PROJECT_ROOT / "phase-00-orchestration")]:
    if _p not in sys.path:
        sys.path.insert(0, _p)

try:
    from phase_00_orchestration.config_loader import default_lexicon
    from phase_00_orchestration.engine_settings import Lexicon
except ImportError:
    from config_loader import default_lexicon
    from engine_settings import Lexicon


MIN_WORD_LENGTH = 2
MAX_BEHAVIOR_SENTENCES = 10

_SENTENCE_SPLIT = re.compile(r"[.!?]")


# ---------------------------------------------------------------------------
# Word frequency
# ---------------------------------------------------------------------------

def word_frequency(
    texts: Iterable[Optional[str]],
    top_n: int = 20,
    lexicon: Optional[Lexicon] = None,
) -> dict[str, int]:
    """
    Count content words across texts and return the top_n by count.

    Ties keep first-encountered order.
    """
    lexicon = lexicon or default_lexicon()
    strip = re.compile(lexicon.strip_pattern)

    counts: Counter = Counter()
    for text in texts:
        for word in strip.sub("", text or "").split():
            if len(word) < MIN_WORD_LENGTH or word in lexicon.stop_words:
                continue
            counts[word] += 1

    return dict(counts.most_common(top_n)) if top_n > 0 else {}


# ---------------------------------------------------------------------------
# Themes
# ---------------------------------------------------------------------------

def detect_repetitive_themes(
    texts: Iterable[Optional[str]],
    lexicon: Optional[Lexicon] = None,
) -> dict[str, int]:
    """
    Count, per theme, how many texts contain at least one of its keywords.

    A text contributes at most 1 per theme. Themes never seen are omitted;
    keys follow the lexicon's theme-table order.
    """
    lexicon = lexicon or default_lexicon()
    counts = {theme: 0 for theme in lexicon.themes}

    for text in texts:
        text = text or ""
        for theme, keywords in lexicon.themes.items():
            if any(k in text for k in keywords):
                counts[theme] += 1

    return {theme: n for theme, n in counts.items() if n > 0}


def calculate_theme_percentages(
    theme_counts: Mapping[str, int],
    total_reflections: int,
) -> list[dict[str, Any]]:
    """Share of reflections mentioning each theme, highest count first."""
    if total_reflections <= 0:
        return []
    rows = [
        {
            "theme":      theme,
            "count":      count,
            "percentage": count / total_reflections * 100,
        }
        for theme, count in theme_counts.items()
    ]
    return sorted(rows, key=lambda r: r["count"], reverse=True)


def calculate_diversity_score(theme_counts: Mapping[str, int]) -> float:
    """
    Normalised Shannon entropy of the theme distribution.

    H = -sum(p_i * log2 p_i) over nonzero counts, divided by log2(k) where k
    is the number of nonzero themes. 0 when k <= 1 or the total is 0.
    """
    values = [c for c in theme_counts.values() if c > 0]
    if len(values) < 2:
        return 0.0

    total = sum(values)
    entropy = 0.0
    for count in values:
        p = count / total
        entropy -= p * math.log2(p)

    return max(0.0, min(1.0, entropy / math.log2(len(values))))


# ---------------------------------------------------------------------------
# Behaviour patterns
# ---------------------------------------------------------------------------

def extract_behavior_patterns(
    texts: Iterable[Optional[str]],
    lexicon: Optional[Lexicon] = None,
) -> dict[str, list[str]]:
    """
    Pull out sentences that name a cause ("triggers") or a reaction
    ("responses"). Each list is de-duplicated in first-seen order and
    capped at MAX_BEHAVIOR_SENTENCES.
    """
    lexicon = lexicon or default_lexicon()
    trigger_res  = [re.compile(p) for p in lexicon.trigger_patterns]
    response_res = [re.compile(p) for p in lexicon.response_patterns]

    triggers: list[str] = []
    responses: list[str] = []

    for text in texts:
        for sentence in _SENTENCE_SPLIT.split(text or ""):
            sentence = sentence.strip()
            if not sentence:
                continue
            if any(r.search(sentence) for r in trigger_res):
                triggers.append(sentence)
            if any(r.search(sentence) for r in response_res):
                responses.append(sentence)

    return {
        "triggers":  list(dict.fromkeys(triggers))[:MAX_BEHAVIOR_SENTENCES],
        "responses": list(dict.fromkeys(responses))[:MAX_BEHAVIOR_SENTENCES],
    }
