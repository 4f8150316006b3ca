"""
ingestor.py — Phase 01: Entry Ingestion
-----------------------------------------
Primary entry point for the Entry Ingestion phase.

Called by the Phase 00 dispatcher as:
    run(run_label=..., config=..., logger=...)

Responsibilities:
  1. Read the caller-supplied entries file (config["input_path"]).
  2. Validate each record at the service boundary; drop and count bad ones.
  3. Keep entries inside the lookback window (created_at >= date_from).
  4. Write data/{run_label}/01-entries/entries.json (newest first) and
     ingestion_summary.json.

An empty result is NOT an error: the weather phase turns it into the
default score for users who have not written anything yet.
"""

import json
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Ensure both the project root and this phase directory are on sys.path
# so this file works when run directly AND when imported as a package.
_PHASE_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _PHASE_DIR.parent
for _p in [str(_PROJECT_ROOT), str(_PHASE_DIR)]:
    if _p not in sys.path:
        sys.path.insert(0, _p)

try:
    from phase_01_ingestion.entry_schema import JournalEntry, entries_to_json, parse_timestamp  # noqa: E402
except ImportError:
    from entry_schema import JournalEntry, entries_to_json, parse_timestamp  # noqa: E402


ENTRIES_RELPATH = Path("01-entries") / "entries.json"


# ---------------------------------------------------------------------------
# Phase entry point (called by Phase 00 dispatcher)
# ---------------------------------------------------------------------------

def run(run_label: str, config: dict[str, Any], logger: logging.Logger) -> None:
    """
    Execute the Entry Ingestion phase.

    Args:
        run_label: '<user_id>/<YYYY-MM-DD>'.
        config:    Run config dict (written by orchestrator).
        logger:    Bound logger for this run.

    Raises:
        RuntimeError: If the input file is missing or not a JSON list of entries.
    """
    logger.info("Phase 01 — Entry Ingestion: starting.")
    start = time.monotonic()

    data_root  = Path(config.get("data_root", "data"))
    input_path = Path(config.get("input_path", ""))
    output_dir = data_root / run_label / "01-entries"
    output_dir.mkdir(parents=True, exist_ok=True)

    # --- Load raw ---
    if not input_path.is_file():
        raise RuntimeError(f"Phase 01: input not found: {input_path}")

    try:
        with open(input_path, encoding="utf-8") as f:
            raw_doc = json.load(f)
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"Phase 01: input is not valid JSON: {input_path} ({exc})")

    raw_entries = raw_doc.get("entries") if isinstance(raw_doc, dict) else raw_doc
    if not isinstance(raw_entries, list):
        raise RuntimeError(
            "Phase 01: input must be a JSON list of entries or an object with an 'entries' list."
        )

    logger.info(f"  Loaded {len(raw_entries)} raw entries from {input_path}")

    # --- Validate + window ---
    date_from = parse_timestamp(config["date_from"]) if config.get("date_from") else None
    entries, stats = _clean(raw_entries, date_from, logger)

    # --- Write output ---
    entries_path = data_root / run_label / ENTRIES_RELPATH
    entries_to_json(entries, str(entries_path))
    logger.info(f"  Entries written → {entries_path}  ({len(entries)} records)")

    summary = {
        "run_label":          run_label,
        "ingested_at":        datetime.now(tz=timezone.utc).isoformat(),
        "date_from":          date_from.isoformat() if date_from else None,
        "input_count":        stats["input"],
        "output_count":       stats["kept"],
        "dropped_duplicate":  stats["dup"],
        "dropped_invalid":    stats["invalid"],
        "dropped_empty_text": stats["empty"],
        "dropped_outside_window": stats["outside_window"],
    }
    summary_path = output_dir / "ingestion_summary.json"
    with open(summary_path, "w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2)
    logger.info(f"  Ingestion summary written → {summary_path}")

    elapsed = time.monotonic() - start
    logger.info(f"Phase 01 — Entry Ingestion: complete in {elapsed:.1f}s. "
                f"({stats['input']} in → {stats['kept']} out, "
                f"{stats['input'] - stats['kept']} dropped)")


# ---------------------------------------------------------------------------
# Internal validation logic
# ---------------------------------------------------------------------------

def _clean(
    raw: list,
    date_from: datetime | None,
    logger: logging.Logger,
) -> tuple[list[JournalEntry], dict]:
    """Apply boundary validation and window filtering; return (entries, stats)."""
    stats: dict[str, int] = {
        "input": len(raw),
        "dup": 0,
        "invalid": 0,
        "empty": 0,
        "outside_window": 0,
        "kept": 0,
    }

    seen_ids: set[str] = set()
    kept: list[JournalEntry] = []

    for i, record in enumerate(raw):
        # 1. Deduplicate by id when the caller supplies one
        rid = record.get("id") if isinstance(record, dict) else None
        if rid is not None:
            if str(rid) in seen_ids:
                stats["dup"] += 1
                continue
            seen_ids.add(str(rid))

        # 2. Shape / type validation
        try:
            entry = JournalEntry.from_dict(record)
        except ValueError as exc:
            stats["invalid"] += 1
            logger.debug(f"  Dropping entry #{i}: {exc}")
            continue

        # 3. Drop whitespace-only reflections
        if not entry.text.strip():
            stats["empty"] += 1
            continue

        # 4. Lookback window
        if date_from is not None and entry.created_at < date_from:
            stats["outside_window"] += 1
            continue

        kept.append(entry)

    # Newest first
    kept.sort(key=lambda e: e.created_at, reverse=True)

    stats["kept"] = len(kept)
    if stats["invalid"]:
        logger.warning(f"  {stats['invalid']} malformed entries dropped at ingestion.")
    return kept, stats
