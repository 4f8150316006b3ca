"""
score_history.py — Phase 05: Score History
--------------------------------------------
Maintains the per-user history of computed Mind Weather scores.

Responsibilities:
  1. Read the run's 04-weather/mind_weather.json.
  2. Upsert a record into data/history/{user_id}/index.json (keyed by date).
  3. Write data/history/{user_id}/latest.json (the newest dated record).
  4. Serve reads for other phases and callers:
       get_latest_score(data_root, user_id, before=None)
       get_score_trend(data_root, user_id, limit=30)

Design:
  - One record per user per calendar day; re-runs on the same day replace it.
  - Idempotency: an unchanged record (ignoring archived_at) is not rewritten.
  - No scoring here — pure file I/O and JSON.

index.json schema:
{
  "user_id": str,
  "scores": {
    "<YYYY-MM-DD>": {
      "date":        "<YYYY-MM-DD>",
      "archived_at": ISO-8601,
      "entry_count": int,
      "score":       MindWeatherScore.to_dict()
    }
  },
  "updated_at": ISO-8601
}
"""

import json
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

# Path bootstrap
_PHASE_DIR    = Path(__file__).resolve().parent
_PROJECT_ROOT = _PHASE_DIR.parent
for _p in [str(_PROJECT_ROOT), str(_PHASE_DIR), str(_PROJECT_ROOT / "phase-04-weather")]:
    if _p not in sys.path:
        sys.path.insert(0, _p)

try:
    from phase_04_weather.weather_schema import MindWeatherScore
except ImportError:
    from weather_schema import MindWeatherScore


DEFAULT_TREND_LIMIT = 30


# ---------------------------------------------------------------------------
# Phase entry point
# ---------------------------------------------------------------------------

def run(run_label: str, config: dict[str, Any], logger: logging.Logger) -> None:
    """Archive the run's score into the user's history index."""
    logger.info("Phase 05 — Score History: starting.")
    start = time.monotonic()

    data_root    = Path(config.get("data_root", "data"))
    weather_path = data_root / run_label / "04-weather" / "mind_weather.json"

    if not weather_path.exists():
        raise RuntimeError(f"Phase 05: input not found: {weather_path}")

    with open(weather_path, encoding="utf-8") as f:
        weather: dict = json.load(f)

    user_id  = config.get("user_id") or weather.get("user_id") or run_label.split("/")[0]
    run_date = config.get("run_date") or weather.get("run_date") or run_label.split("/")[-1]

    record = {
        "date":        run_date,
        "archived_at": datetime.now(tz=timezone.utc).isoformat(),
        "entry_count": weather.get("entry_count", 0),
        "score":       weather["score"],
    }

    user_dir = _user_dir(data_root, user_id)
    user_dir.mkdir(parents=True, exist_ok=True)
    index = _load_index(data_root, user_id)

    # ── Idempotency: skip if record unchanged ────────────────────────────────
    existing = index["scores"].get(run_date)
    if existing and _records_equal(existing, record):
        logger.info(f"  Record for '{user_id}' on {run_date} unchanged — skipping write.")
        elapsed = time.monotonic() - start
        logger.info(f"Phase 05 — Score History: complete in {elapsed:.1f}s.")
        return

    # ── Upsert and save ──────────────────────────────────────────────────────
    index["scores"][run_date] = record
    index["updated_at"]       = datetime.now(tz=timezone.utc).isoformat()

    index_path = user_dir / "index.json"
    with open(index_path, "w", encoding="utf-8") as f:
        json.dump(index, f, indent=2, ensure_ascii=False)
    logger.info(f"  index.json updated -> {index_path}  ({len(index['scores'])} days total)")

    # ── Write latest pointer (newest date, not necessarily this run) ─────────
    newest_date = max(index["scores"])
    latest = {"user_id": user_id, "updated_at": index["updated_at"], **index["scores"][newest_date]}
    latest_path = user_dir / "latest.json"
    with open(latest_path, "w", encoding="utf-8") as f:
        json.dump(latest, f, indent=2, ensure_ascii=False)
    logger.info(f"  latest.json updated -> {latest_path} ({newest_date})")

    elapsed = time.monotonic() - start
    logger.info(f"Phase 05 — Score History: complete in {elapsed:.1f}s.")


# ---------------------------------------------------------------------------
# Read API
# ---------------------------------------------------------------------------

def get_latest_score(
    data_root: str,
    user_id: str,
    before: Optional[str] = None,
) -> Optional[MindWeatherScore]:
    """
    Most recent stored score for a user, or None when there is none.

    Args:
        before: Optional 'YYYY-MM-DD'; only records strictly earlier count.
    """
    scores = _load_index(Path(data_root), user_id)["scores"]
    dates = sorted(d for d in scores if before is None or d < before)
    if not dates:
        return None
    return MindWeatherScore.from_dict(scores[dates[-1]]["score"])


def get_score_trend(
    data_root: str,
    user_id: str,
    limit: int = DEFAULT_TREND_LIMIT,
) -> list[dict[str, Any]]:
    """
    The last `limit` stored scores, oldest first, reduced to the fields a
    trend chart needs.
    """
    if limit <= 0:
        return []
    scores = _load_index(Path(data_root), user_id)["scores"]
    dates = sorted(scores)[-limit:]
    return [
        {
            "date":           d,
            "overallScore":   scores[d]["score"]["overallScore"],
            "burnoutRisk":    scores[d]["score"]["burnoutRisk"],
            "trendDirection": scores[d]["score"]["trendDirection"],
        }
        for d in dates
    ]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _user_dir(data_root: Path, user_id: str) -> Path:
    return data_root / "history" / user_id


def _load_index(data_root: Path, user_id: str) -> dict:
    index_path = _user_dir(data_root, user_id) / "index.json"
    if index_path.exists():
        with open(index_path, encoding="utf-8") as f:
            return json.load(f)
    return {"user_id": user_id, "scores": {}, "updated_at": ""}


def _records_equal(existing: dict, new: dict) -> bool:
    """Compare records ignoring timestamps."""
    skip_keys = {"archived_at"}
    return all(
        existing.get(k) == new.get(k)
        for k in new
        if k not in skip_keys
    )
