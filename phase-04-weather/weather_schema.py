"""
weather_schema.py — Phase 04: Mind Weather
--------------------------------------------
Defines the MindWeatherScore dataclass returned by the calculator.

Serialised with camelCase keys (overallScore, burnoutRisk, ...) so the
stored and served JSON matches what the web client reads.
"""

from dataclasses import dataclass, field
from typing import Any


BURNOUT_LOW      = "low"
BURNOUT_MEDIUM   = "medium"
BURNOUT_HIGH     = "high"
BURNOUT_CRITICAL = "critical"
BURNOUT_LEVELS   = (BURNOUT_LOW, BURNOUT_MEDIUM, BURNOUT_HIGH, BURNOUT_CRITICAL)

TREND_IMPROVING = "improving"
TREND_STABLE    = "stable"
TREND_DECLINING = "declining"
TREND_DIRECTIONS = (TREND_IMPROVING, TREND_STABLE, TREND_DECLINING)


@dataclass
class MindWeatherScore:
    """Wellbeing snapshot derived from a window of reflections."""

    overall_score: float                # 0–100, higher is better
    burnout_risk: str                   # one of BURNOUT_LEVELS
    negativity_rate: float              # 0–1
    sentiment_average: float            # -1–1
    diversity_score: float              # 0–1
    reflection_frequency: int           # entries in the last 7 days
    repetitive_themes: dict[str, int] = field(default_factory=dict)
    word_frequency: dict[str, int] = field(default_factory=dict)
    recommendations: list[str] = field(default_factory=list)
    trend_direction: str = TREND_STABLE  # one of TREND_DIRECTIONS

    def to_dict(self) -> dict[str, Any]:
        return {
            "overallScore":        self.overall_score,
            "burnoutRisk":         self.burnout_risk,
            "negativityRate":      self.negativity_rate,
            "sentimentAverage":    self.sentiment_average,
            "diversityScore":      self.diversity_score,
            "reflectionFrequency": self.reflection_frequency,
            "repetitiveThemes":    dict(self.repetitive_themes),
            "wordFrequency":       dict(self.word_frequency),
            "recommendations":     list(self.recommendations),
            "trendDirection":      self.trend_direction,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "MindWeatherScore":
        """Rebuild a score from to_dict() output. Missing numeric fields default to 0."""
        return cls(
            overall_score=float(raw["overallScore"]),
            burnout_risk=str(raw.get("burnoutRisk", BURNOUT_MEDIUM)),
            negativity_rate=float(raw.get("negativityRate", 0.0)),
            sentiment_average=float(raw.get("sentimentAverage", 0.0)),
            diversity_score=float(raw.get("diversityScore", 0.0)),
            reflection_frequency=int(raw.get("reflectionFrequency", 0)),
            repetitive_themes=dict(raw.get("repetitiveThemes") or {}),
            word_frequency=dict(raw.get("wordFrequency") or {}),
            recommendations=list(raw.get("recommendations") or []),
            trend_direction=str(raw.get("trendDirection", TREND_STABLE)),
        )
