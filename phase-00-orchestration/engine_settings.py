"""
engine_settings.py — Phase 00: Orchestration
----------------------------------------------
Immutable data contracts for the Mind Weather engine's static assets.

  Lexicon         — keyword lists, stop words, theme table, behavior patterns
                    and recommendation messages (loaded from lexicon_*.yaml).
  WeatherSettings — product-tuning constants of the scoring formula. The
                    defaults below ARE the production values; engine_config.yaml
                    may override individual keys but never the formula shape.

Both are built once by config_loader and passed by value into the pure
engine functions. Nothing here is mutated after construction.
"""

from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, Mapping


# ---------------------------------------------------------------------------
# Theme names the calculator reads directly
# ---------------------------------------------------------------------------

THEME_SHOUTING   = "shouting"
THEME_GUILT      = "guilt"
THEME_EXHAUSTION = "exhaustion"
THEME_LONELINESS = "loneliness"

REQUIRED_THEMES = (THEME_SHOUTING, THEME_GUILT, THEME_EXHAUSTION, THEME_LONELINESS)

REQUIRED_RECOMMENDATIONS = (
    "getting_started",
    "urgent_help",
    "reach_out",
    "stress_management",
    "de_escalation",
    "growth_reframe",
    "rest",
    "community",
    "small_change",
    "journaling_overload",
    "journaling_cadence",
    "positive_reinforcement",
)


# ---------------------------------------------------------------------------
# Lexicon
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Lexicon:
    """Closed word lists and message catalogue for one language/domain."""

    negative_keywords: tuple[str, ...]
    positive_keywords: tuple[str, ...]
    stop_words: frozenset[str]
    strip_pattern: str                          # regex of characters removed before word counting
    themes: Mapping[str, tuple[str, ...]]       # theme name -> keywords, in table order
    high_risk_themes: tuple[str, ...]
    trigger_patterns: tuple[str, ...]
    response_patterns: tuple[str, ...]
    recommendations: Mapping[str, str]          # message id -> text
    language: str = "ko"
    version: int = 1

    # Read-only mappings are not hashable, so neither is the lexicon
    __hash__ = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Lexicon":
        behavior = raw.get("behavior_patterns") or {}
        themes = {
            str(name): tuple(str(k) for k in keywords)
            for name, keywords in (raw.get("themes") or {}).items()
        }
        return cls(
            negative_keywords=tuple(str(w) for w in raw.get("negative_keywords", [])),
            positive_keywords=tuple(str(w) for w in raw.get("positive_keywords", [])),
            stop_words=frozenset(str(w) for w in raw.get("stop_words", [])),
            strip_pattern=str(raw.get("strip_pattern", r"[^\w\s]")),
            themes=MappingProxyType(themes),
            high_risk_themes=tuple(str(t) for t in raw.get("high_risk_themes", [])),
            trigger_patterns=tuple(str(p) for p in behavior.get("triggers", [])),
            response_patterns=tuple(str(p) for p in behavior.get("responses", [])),
            recommendations=MappingProxyType(
                {str(k): str(v) for k, v in (raw.get("recommendations") or {}).items()}
            ),
            language=str(raw.get("language", "ko")),
            version=int(raw.get("version", 1)),
        )


# ---------------------------------------------------------------------------
# Weather scoring constants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WeatherSettings:
    # Overall score weights (frequency is expressed through its point table)
    negativity_weight: float = 40.0
    sentiment_weight: float = 30.0
    diversity_weight: float = 20.0

    # Reflection frequency
    frequency_window_days: int = 7
    frequency_ideal_min: int = 3
    frequency_ideal_max: int = 5
    frequency_acceptable_max: int = 7
    frequency_points_ideal: float = 10.0
    frequency_points_acceptable: float = 7.0
    frequency_points_over: float = 4.0
    frequency_points_none: float = 2.0

    # Burnout risk
    critical_score_below: float = 30.0
    high_score_below: float = 50.0
    medium_score_below: float = 70.0
    critical_high_risk_count: int = 5
    high_high_risk_count: int = 3

    # Trend
    trend_band: float = 5.0

    # Output caps
    top_words: int = 20
    max_recommendations: int = 5

    # Recommendation rules
    shouting_threshold: int = 3
    guilt_threshold: int = 3
    exhaustion_threshold: int = 4
    loneliness_threshold: int = 2
    low_diversity_below: float = 0.3
    over_journaling_above: int = 10
    under_journaling_below: int = 1
    positive_score_at_least: float = 70.0

    @classmethod
    def from_dict(cls, overrides: dict[str, Any] | None) -> "WeatherSettings":
        """Build settings from a (possibly partial) mapping. Unknown keys raise ValueError."""
        overrides = overrides or {}
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(overrides) - set(known))
        if unknown:
            raise ValueError(f"Unknown weather setting(s): {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for name, value in overrides.items():
            try:
                number = float(value)
            except (TypeError, ValueError):
                raise ValueError(f"Weather setting '{name}' must be numeric, got {value!r}.")
            if isinstance(known[name].default, int):
                if not number.is_integer():
                    raise ValueError(f"Weather setting '{name}' must be an integer, got {value!r}.")
                values[name] = int(number)
            else:
                values[name] = number
        return cls(**values)
