"""
weather_calculator.py — Phase 04: Mind Weather
------------------------------------------------
Computes the Mind Weather score from a window of journal entries.
Pure math — no LLM, no I/O, no state. Easily unit-testable.

Score formula (weights from WeatherSettings, defaults shown):
  negativity  = (1 - min(avg_negativity_rate, 1)) * 40
  sentiment   = ((sentiment_average + 1) / 2) * 30
  diversity   = diversity_score * 20
  frequency   = 10 for 3–5 entries in the last 7 days
                 7 for 1–2 or 6–7
                 4 for more than 7
                 2 for none
  overall     = clamp(negativity + sentiment + diversity + frequency, 0, 100)

Burnout risk (first match wins), high_risk_count = exhaustion + shouting + guilt:
  critical  score < 30 or high_risk_count >= 5
  high      score < 50 or high_risk_count >= 3
  medium    score < 70
  low       otherwise

Trend: stable without a previous score, else improving / declining beyond ±5.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence

# Path bootstrap
_PHASE_DIR    = Path(__file__).resolve().parent
_PROJECT_ROOT = _PHASE_DIR.parent
for _p in [
    str(_PROJECT_ROOT),
    str(_PHASE_DIR),
    str(_PROJECT_ROOT / "phase-00-orchestration"),
    str(_PROJECT_ROOT / "phase-02-sentiment"),
    str(_PROJECT_ROOT / "phase-03-patterns"),
]:
    if _p not in sys.path:
        sys.path.insert(0, _p)

try:
    from phase_00_orchestration.config_loader import default_lexicon, default_settings
    from phase_00_orchestration.engine_settings import (
        Lexicon, WeatherSettings,
        THEME_EXHAUSTION, THEME_GUILT, THEME_LONELINESS, THEME_SHOUTING,
    )
    from phase_02_sentiment.sentiment_scorer import negativity_rate, sentiment_score
    from phase_03_patterns.pattern_detector import (
        calculate_diversity_score, detect_repetitive_themes, word_frequency,
    )
    from phase_04_weather.weather_schema import (
        BURNOUT_CRITICAL, BURNOUT_HIGH, BURNOUT_LOW, BURNOUT_MEDIUM,
        TREND_DECLINING, TREND_IMPROVING, TREND_STABLE, MindWeatherScore,
    )
except ImportError:
    from config_loader import default_lexicon, default_settings
    from engine_settings import (
        Lexicon, WeatherSettings,
        THEME_EXHAUSTION, THEME_GUILT, THEME_LONELINESS, THEME_SHOUTING,
    )
    from sentiment_scorer import negativity_rate, sentiment_score
    from pattern_detector import (
        calculate_diversity_score, detect_repetitive_themes, word_frequency,
    )
    from weather_schema import (
        BURNOUT_CRITICAL, BURNOUT_HIGH, BURNOUT_LOW, BURNOUT_MEDIUM,
        TREND_DECLINING, TREND_IMPROVING, TREND_STABLE, MindWeatherScore,
    )


DEFAULT_OVERALL_SCORE = 50.0


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_mind_weather(
    entries: Iterable,
    previous_score: Optional[MindWeatherScore] = None,
    now: Optional[datetime] = None,
    lexicon: Optional[Lexicon] = None,
    settings: Optional[WeatherSettings] = None,
) -> MindWeatherScore:
    """
    Compute the Mind Weather score for a window of entries.

    Args:
        entries:        JournalEntry-like objects (.text, .created_at); any iterable.
        previous_score: Most recent earlier score, used only for the trend.
        now:            Reference instant for the frequency window (UTC if naive).
                        Defaults to the current time.
        lexicon:        Keyword asset; defaults to the shipped Korean lexicon.
        settings:       Tuning constants; defaults to the production values.

    Returns:
        A new MindWeatherScore. Empty entries yield default_score().
    """
    lexicon = lexicon or default_lexicon()
    settings = settings or default_settings()

    # Read twice below (texts, frequency window); accept one-shot iterables
    entries = list(entries)
    if not entries:
        return default_score(lexicon)

    texts = [e.text or "" for e in entries]

    avg_negativity = sum(negativity_rate(t, lexicon) for t in texts) / len(texts)
    sentiment_average = sum(sentiment_score(t, lexicon) for t in texts) / len(texts)

    themes = detect_repetitive_themes(texts, lexicon)
    diversity = calculate_diversity_score(themes)

    frequency = count_recent_entries(entries, now, settings.frequency_window_days)

    overall = calculate_overall_score(
        negativity_rate=avg_negativity,
        sentiment_average=sentiment_average,
        diversity_score=diversity,
        reflection_frequency=frequency,
        settings=settings,
    )
    burnout = calculate_burnout_risk(overall, themes, lexicon, settings)
    trend = calculate_trend_direction(
        overall,
        previous_score.overall_score if previous_score is not None else None,
        settings,
    )

    recommendations = generate_recommendations(
        overall_score=overall,
        burnout_risk=burnout,
        themes=themes,
        diversity_score=diversity,
        reflection_frequency=frequency,
        lexicon=lexicon,
        settings=settings,
    )

    return MindWeatherScore(
        overall_score=overall,
        burnout_risk=burnout,
        negativity_rate=avg_negativity,
        sentiment_average=sentiment_average,
        diversity_score=diversity,
        reflection_frequency=frequency,
        repetitive_themes=themes,
        word_frequency=word_frequency(texts, settings.top_words, lexicon),
        recommendations=recommendations,
        trend_direction=trend,
    )


def default_score(lexicon: Optional[Lexicon] = None) -> MindWeatherScore:
    """Neutral starting state for users with no reflections yet."""
    lexicon = lexicon or default_lexicon()
    return MindWeatherScore(
        overall_score=DEFAULT_OVERALL_SCORE,
        burnout_risk=BURNOUT_MEDIUM,
        negativity_rate=0.0,
        sentiment_average=0.0,
        diversity_score=0.0,
        reflection_frequency=0,
        repetitive_themes={},
        word_frequency={},
        recommendations=[lexicon.recommendations["getting_started"]],
        trend_direction=TREND_STABLE,
    )


# ---------------------------------------------------------------------------
# Score components
# ---------------------------------------------------------------------------

def count_recent_entries(entries: Sequence, now: Optional[datetime], days: int) -> int:
    """Entries created at or after now - days."""
    cutoff = _as_utc(now or datetime.now(tz=timezone.utc)) - timedelta(days=days)
    return sum(1 for e in entries if _as_utc(e.created_at) >= cutoff)


def frequency_points(reflection_frequency: int, settings: Optional[WeatherSettings] = None) -> float:
    s = settings or default_settings()
    if s.frequency_ideal_min <= reflection_frequency <= s.frequency_ideal_max:
        return s.frequency_points_ideal
    if 1 <= reflection_frequency <= s.frequency_acceptable_max:
        return s.frequency_points_acceptable
    if reflection_frequency > s.frequency_acceptable_max:
        return s.frequency_points_over
    return s.frequency_points_none


def calculate_overall_score(
    negativity_rate: float,
    sentiment_average: float,
    diversity_score: float,
    reflection_frequency: int,
    settings: Optional[WeatherSettings] = None,
) -> float:
    s = settings or default_settings()

    negativity_points = (1 - min(negativity_rate, 1)) * s.negativity_weight
    sentiment_points  = ((sentiment_average + 1) / 2) * s.sentiment_weight
    diversity_points  = diversity_score * s.diversity_weight

    total = (
        negativity_points
        + sentiment_points
        + diversity_points
        + frequency_points(reflection_frequency, s)
    )
    return max(0.0, min(100.0, total))


def calculate_burnout_risk(
    overall_score: float,
    themes: Mapping[str, int],
    lexicon: Optional[Lexicon] = None,
    settings: Optional[WeatherSettings] = None,
) -> str:
    lexicon = lexicon or default_lexicon()
    s = settings or default_settings()

    high_risk_count = sum(themes.get(t, 0) for t in lexicon.high_risk_themes)

    if overall_score < s.critical_score_below or high_risk_count >= s.critical_high_risk_count:
        return BURNOUT_CRITICAL
    if overall_score < s.high_score_below or high_risk_count >= s.high_high_risk_count:
        return BURNOUT_HIGH
    if overall_score < s.medium_score_below:
        return BURNOUT_MEDIUM
    return BURNOUT_LOW


def calculate_trend_direction(
    current_score: float,
    previous_score: Optional[float],
    settings: Optional[WeatherSettings] = None,
) -> str:
    if previous_score is None:
        return TREND_STABLE

    s = settings or default_settings()
    diff = current_score - previous_score
    if diff > s.trend_band:
        return TREND_IMPROVING
    if diff < -s.trend_band:
        return TREND_DECLINING
    return TREND_STABLE


def generate_recommendations(
    overall_score: float,
    burnout_risk: str,
    themes: Mapping[str, int],
    diversity_score: float,
    reflection_frequency: int,
    lexicon: Optional[Lexicon] = None,
    settings: Optional[WeatherSettings] = None,
) -> list[str]:
    """Rule-based messages in fixed priority order, capped at max_recommendations."""
    lexicon = lexicon or default_lexicon()
    s = settings or default_settings()
    messages = lexicon.recommendations

    ids: list[str] = []

    if burnout_risk == BURNOUT_CRITICAL:
        ids += ["urgent_help", "reach_out"]
    elif burnout_risk == BURNOUT_HIGH:
        ids.append("stress_management")

    if themes.get(THEME_SHOUTING, 0) >= s.shouting_threshold:
        ids.append("de_escalation")
    if themes.get(THEME_GUILT, 0) >= s.guilt_threshold:
        ids.append("growth_reframe")
    if themes.get(THEME_EXHAUSTION, 0) >= s.exhaustion_threshold:
        ids.append("rest")
    if themes.get(THEME_LONELINESS, 0) >= s.loneliness_threshold:
        ids.append("community")

    if diversity_score < s.low_diversity_below:
        ids.append("small_change")
    if reflection_frequency > s.over_journaling_above:
        ids.append("journaling_overload")
    if reflection_frequency < s.under_journaling_below:
        ids.append("journaling_cadence")

    if overall_score >= s.positive_score_at_least:
        ids.append("positive_reinforcement")

    return [messages[i] for i in ids[: s.max_recommendations]]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
