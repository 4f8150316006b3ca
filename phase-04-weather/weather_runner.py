"""
weather_runner.py — Phase 04: Mind Weather
--------------------------------------------
Entry point for the Mind Weather phase.

Responsibilities:
  1. Load entries.json from Phase 01.
  2. Load the most recent stored score BEFORE this run's date (Phase 05
     history) to drive the trend direction.
  3. Compute the score (weather_calculator — pure, no I/O).
  4. Write mind_weather.json to data/{run_label}/04-weather/ together with
     the theme breakdown, behaviour patterns and a sentiment cross-check.

Idempotency: mind_weather.json records a SHA-256 digest of the entries.json
it was computed from. The phase is skipped only when that digest matches the
current entries.json, unless the run config carries force=true.
"""

import hashlib
import json
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Path bootstrap
_PHASE_DIR    = Path(__file__).resolve().parent
_PROJECT_ROOT = _PHASE_DIR.parent
for _p in [
    str(_PROJECT_ROOT),
    str(_PHASE_DIR),
    str(_PROJECT_ROOT / "phase-00-orchestration"),
    str(_PROJECT_ROOT / "phase-01-ingestion"),
    str(_PROJECT_ROOT / "phase-02-sentiment"),
    str(_PROJECT_ROOT / "phase-03-patterns"),
    str(_PROJECT_ROOT / "phase-05-storage"),
]:
    if _p not in sys.path:
        sys.path.insert(0, _p)

try:
    from phase_00_orchestration.config_loader import lexicon_path_for, load_lexicon, settings_from_config
    from phase_01_ingestion.entry_schema import entries_from_json, parse_timestamp
    from phase_02_sentiment.sentiment_scorer import calculate_average_sentiment
    from phase_03_patterns.pattern_detector import calculate_theme_percentages, extract_behavior_patterns
    from phase_04_weather.weather_calculator import compute_mind_weather
    from phase_05_storage.score_history import get_latest_score
except ImportError:
    from config_loader import lexicon_path_for, load_lexicon, settings_from_config
    from entry_schema import entries_from_json, parse_timestamp
    from sentiment_scorer import calculate_average_sentiment
    from pattern_detector import calculate_theme_percentages, extract_behavior_patterns
    from weather_calculator import compute_mind_weather
    from score_history import get_latest_score


WEATHER_RELPATH = Path("04-weather") / "mind_weather.json"


# ---------------------------------------------------------------------------
# Phase entry point (called by Phase 00 dispatcher)
# ---------------------------------------------------------------------------

def run(run_label: str, config: dict[str, Any], logger: logging.Logger) -> None:
    """
    Execute the Mind Weather phase.

    Args:
        run_label: '<user_id>/<YYYY-MM-DD>'.
        config:    Run config dict (user_id, run_date, now, data_root, weather, ...).
        logger:    Bound logger.

    Raises:
        RuntimeError: If Phase 01 output is missing or unreadable.
    """
    logger.info("Phase 04 — Mind Weather: starting.")
    start = time.monotonic()

    data_root    = Path(config.get("data_root", "data"))
    entries_path = data_root / run_label / "01-entries" / "entries.json"
    weather_path = data_root / run_label / WEATHER_RELPATH
    weather_path.parent.mkdir(parents=True, exist_ok=True)

    if not entries_path.exists():
        raise RuntimeError(f"Phase 04: input not found: {entries_path}")

    entries_digest = hashlib.sha256(entries_path.read_bytes()).hexdigest()

    # ── Idempotency guard: same entries, same score ──────────────────────────
    if not config.get("force") and _stored_digest(weather_path) == entries_digest:
        logger.info(f"  mind_weather.json is current for these entries — skipping. ({weather_path})")
        return

    # ── Load entries ─────────────────────────────────────────────────────────
    try:
        entries = entries_from_json(str(entries_path))
    except (json.JSONDecodeError, ValueError) as exc:
        raise RuntimeError(f"Phase 04: could not read entries: {exc}")

    logger.info(f"  Loaded {len(entries)} entries.")

    # ── Static assets + previous score ───────────────────────────────────────
    lexicon  = load_lexicon(lexicon_path_for(config))
    settings = settings_from_config(config)

    user_id  = config.get("user_id") or run_label.split("/")[0]
    run_date = config.get("run_date") or run_label.split("/")[-1]
    previous = get_latest_score(str(data_root), user_id, before=run_date)
    if previous is None:
        logger.info("  No earlier score on record — trend will be 'stable'.")
    else:
        logger.info(f"  Previous score: {previous.overall_score:.1f}")

    now = parse_timestamp(config["now"]) if config.get("now") else datetime.now(tz=timezone.utc)

    # ── Compute ──────────────────────────────────────────────────────────────
    score = compute_mind_weather(
        entries,
        previous_score=previous,
        now=now,
        lexicon=lexicon,
        settings=settings,
    )
    logger.info(
        f"  Score {score.overall_score:.1f} | risk={score.burnout_risk} "
        f"| trend={score.trend_direction} | {len(score.recommendations)} recommendation(s)"
    )

    texts = [e.text for e in entries]
    external = [e.external_sentiment for e in entries if e.external_sentiment is not None]

    output = {
        "run_label":   run_label,
        "user_id":     user_id,
        "run_date":    run_date,
        "computed_at": datetime.now(tz=timezone.utc).isoformat(),
        "now":         now.isoformat(),
        "entry_count": len(entries),
        "entries_digest": entries_digest,
        "previous_overall_score": previous.overall_score if previous else None,
        "score":       score.to_dict(),
        "theme_breakdown":   calculate_theme_percentages(score.repetitive_themes, len(entries)),
        "behavior_patterns": extract_behavior_patterns(texts, lexicon),
        "sentiment_cross_check": {
            "lexicon_average":  score.sentiment_average,
            "generic_average":  calculate_average_sentiment(texts),
            "external_average": sum(external) / len(external) if external else None,
        },
    }

    with open(weather_path, "w", encoding="utf-8") as f:
        json.dump(output, f, indent=2, ensure_ascii=False)
    logger.info(f"  Mind weather written → {weather_path}")

    elapsed = time.monotonic() - start
    logger.info(f"Phase 04 — Mind Weather: complete in {elapsed:.1f}s.")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _stored_digest(weather_path: Path) -> str | None:
    """entries_digest of an existing mind_weather.json, or None."""
    if not weather_path.exists():
        return None
    try:
        with open(weather_path, encoding="utf-8") as f:
            return json.load(f).get("entries_digest")
    except (json.JSONDecodeError, AttributeError):
        return None
