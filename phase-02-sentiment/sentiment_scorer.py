"""
sentiment_scorer.py — Phase 02: Lexicon Sentiment Scoring
-----------------------------------------------------------
Derives a negativity rate and a signed sentiment score from a single text
by keyword matching against the closed lexicon lists.
Pure functions — no I/O, no state. Easily unit-testable.

Tokenisation: whitespace split. A token "matches" a lexicon when ANY of
its keywords occurs inside the token (case-sensitive substring). A token
counts at most once per lexicon, but may count for both lexicons.

  negativity_rate = negative_tokens / total_tokens            (0 if no tokens)
  sentiment_score = (pos - neg) / (pos + neg)                 (0 if pos + neg == 0)

analyze_sentiment() additionally runs VADER, a generic English
lexicon-based analyzer, as an independent cross-check figure. It never
feeds the Mind Weather score.
"""

import sys
from pathlib import Path
from typing import Iterable, Optional

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

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


_analyzer = SentimentIntensityAnalyzer()

# Compound score beyond which VADER output is labelled positive/negative
LABEL_CUTOFF = 0.1


# ---------------------------------------------------------------------------
# Lexicon scoring
# ---------------------------------------------------------------------------

def negativity_rate(text: Optional[str], lexicon: Optional[Lexicon] = None) -> float:
    """Fraction of whitespace tokens that contain a negative keyword, in [0, 1]."""
    lexicon = lexicon or default_lexicon()
    tokens = _tokenize(text)
    if not tokens:
        return 0.0
    negative = _count_matching(tokens, lexicon.negative_keywords)
    return negative / len(tokens)


def sentiment_score(text: Optional[str], lexicon: Optional[Lexicon] = None) -> float:
    """Signed balance of positive vs. negative tokens, in [-1, 1]."""
    lexicon = lexicon or default_lexicon()
    tokens = _tokenize(text)
    negative = _count_matching(tokens, lexicon.negative_keywords)
    positive = _count_matching(tokens, lexicon.positive_keywords)

    total = negative + positive
    if total == 0:
        return 0.0
    return (positive - negative) / total


# ---------------------------------------------------------------------------
# Generic analyzer (VADER)
# ---------------------------------------------------------------------------

def analyze_sentiment(text: Optional[str], lexicon: Optional[Lexicon] = None) -> dict:
    """
    Run the generic analyzer on one text.

    Returns:
        dict with keys:
          score           — VADER compound scaled to [-5, 5]
          comparative     — VADER compound in [-1, 1]
          label           — "positive" | "negative" | "neutral"
          negativity_rate — lexicon negativity rate of the same text
    """
    text = text or ""
    if not text.strip():
        return {"score": 0.0, "comparative": 0.0, "label": "neutral", "negativity_rate": 0.0}

    compound = _analyzer.polarity_scores(text.strip())["compound"]
    label = "neutral"
    if compound > LABEL_CUTOFF:
        label = "positive"
    elif compound < -LABEL_CUTOFF:
        label = "negative"

    return {
        "score":           compound * 5,
        "comparative":     compound,
        "label":           label,
        "negativity_rate": negativity_rate(text, lexicon),
    }


def calculate_average_sentiment(texts: Iterable[Optional[str]]) -> float:
    """Mean VADER comparative over texts; 0 for an empty collection."""
    texts = list(texts)
    if not texts:
        return 0.0
    return sum(analyze_sentiment(t)["comparative"] for t in texts) / len(texts)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _tokenize(text: Optional[str]) -> list[str]:
    return (text or "").split()


def _count_matching(tokens: list[str], keywords: tuple[str, ...]) -> int:
    return sum(1 for token in tokens if any(k in token for k in keywords))
