"""
guest_mind_weather.py — compute a Mind Weather score without storing it.

For guest users: reads entries (a JSON list, or an object with an "entries"
list, the same shapes Phase 01 accepts) and prints the score as JSON.
Nothing is written under data/ and no history is consulted.

Usage:
  python scripts/guest_mind_weather.py --input entries.json [--now 2026-10-18]
"""

import argparse
import json
import sys
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
for _d in ["phase-00-orchestration", "phase-01-ingestion", "phase-02-sentiment",
           "phase-03-patterns", "phase-04-weather"]:
    _p = str(_PROJECT_ROOT / _d)
    if _p not in sys.path:
        sys.path.insert(0, _p)

from entry_schema import JournalEntry               # noqa: E402
from weather_calculator import compute_mind_weather  # noqa: E402
from window_resolver import parse_instant            # noqa: E402


def _load_raw_entries(path: str) -> list:
    with open(path, encoding="utf-8") as f:
        raw_doc = json.load(f)
    raw_entries = raw_doc.get("entries") if isinstance(raw_doc, dict) else raw_doc
    if not isinstance(raw_entries, list):
        raise ValueError("input must be a JSON list of entries or an object with an 'entries' list")
    return raw_entries


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Guest Mind Weather (not persisted).")
    parser.add_argument("--input", required=True, help="JSON list of entries, or {\"entries\": [...]}")
    parser.add_argument("--now", default=None, help="Reference instant (YYYY-MM-DD or ISO datetime)")
    args = parser.parse_args(argv)

    try:
        entries = [JournalEntry.from_dict(r) for r in _load_raw_entries(args.input)]
        now = parse_instant(args.now) if args.now else None
    except (OSError, ValueError) as exc:
        print(f"[INPUT ERROR] {exc}", file=sys.stderr)
        return 2

    score = compute_mind_weather(entries, now=now)
    print(json.dumps(score.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
