"""
test_ingestor.py — Unit tests for Phase 01: Entry Ingestion
-------------------------------------------------------------
All tests are fully offline — input files are written to a temp directory.

Test coverage:
  JournalEntry / parse_timestamp:
    1. Field aliases (content, created_at, sentimentScore)
    2. Naive and offset timestamps normalised to UTC
    3. Invalid timestamp / non-string text / non-numeric or non-finite sentiment → ValueError
  run():
    4. Happy path — entries.json written newest first, summary counts correct
    5. Entries older than date_from dropped
    6. Duplicate ids and malformed records dropped
    7. {"entries": [...]} wrapper accepted
    8. Empty list → empty entries.json (not an error)
    9. Missing input / invalid JSON / wrong shape → RuntimeError
"""

import json
import logging
import sys
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

_TESTS_DIR    = Path(__file__).resolve().parent
_PHASE_DIR    = _TESTS_DIR.parent
_PROJECT_ROOT = _PHASE_DIR.parent
for _p in [str(_PROJECT_ROOT), str(_PHASE_DIR)]:
    if _p not in sys.path:
        sys.path.insert(0, _p)

from entry_schema import JournalEntry, entries_from_json, parse_timestamp  # noqa: E402
from ingestor import ENTRIES_RELPATH, run                                   # noqa: E402

NULL_LOGGER = logging.getLogger("test.null")
NULL_LOGGER.addHandler(logging.NullHandler())

LABEL = "ingest-user/2026-10-18"


# ── Fixture helpers ───────────────────────────────────────────────────────────

def _write_input(tmpdir: str, payload) -> Path:
    path = Path(tmpdir) / "input.json"
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


def _make_config(tmpdir: str, input_path: Path, date_from: str | None = "2026-09-18T23:59:59+00:00") -> dict:
    return {"data_root": tmpdir, "input_path": str(input_path), "date_from": date_from}


def _summary(tmpdir: str) -> dict:
    path = Path(tmpdir) / LABEL / "01-entries" / "ingestion_summary.json"
    return json.loads(path.read_text(encoding="utf-8"))


# ── Schema ────────────────────────────────────────────────────────────────────

class TestJournalEntry(unittest.TestCase):

    def test_canonical_fields(self):
        entry = JournalEntry.from_dict({"text": "오늘", "createdAt": "2026-10-18T09:00:00Z"})
        self.assertEqual(entry.text, "오늘")
        self.assertEqual(entry.created_at, datetime(2026, 10, 18, 9, tzinfo=timezone.utc))
        self.assertIsNone(entry.external_sentiment)

    def test_aliases(self):
        entry = JournalEntry.from_dict({
            "content": "내용", "created_at": "2026-10-18T09:00:00", "sentimentScore": "0.5",
        })
        self.assertEqual(entry.text, "내용")
        self.assertEqual(entry.external_sentiment, 0.5)
        self.assertEqual(entry.created_at.tzinfo, timezone.utc)

    def test_offset_converted_to_utc(self):
        parsed = parse_timestamp("2026-10-18T09:00:00+09:00")
        self.assertEqual(parsed, datetime(2026, 10, 18, 0, tzinfo=timezone.utc))

    def test_invalid_records(self):
        bad = [
            {"text": "a", "createdAt": "not-a-date"},
            {"text": "a"},
            {"text": 42, "createdAt": "2026-10-18"},
            {"text": "a", "createdAt": "2026-10-18", "externalSentiment": "high"},
            "just a string",
        ]
        for raw in bad:
            with self.assertRaises(ValueError):
                JournalEntry.from_dict(raw)

    def test_non_finite_sentiment_rejected(self):
        for value in [float("nan"), float("inf"), "NaN", "-Infinity"]:
            with self.assertRaises(ValueError):
                JournalEntry.from_dict({"text": "a", "createdAt": "2026-10-18", "externalSentiment": value})

    def test_to_dict_keys(self):
        entry = JournalEntry("오늘", datetime(2026, 10, 18, tzinfo=timezone.utc), 0.1)
        self.assertEqual(set(entry.to_dict()), {"text", "createdAt", "externalSentiment"})


# ── run() ─────────────────────────────────────────────────────────────────────

class TestIngestorRun(unittest.TestCase):

    def test_happy_path_sorted_newest_first(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, [
                {"id": "1", "text": "첫째 날", "createdAt": "2026-10-10T08:00:00Z"},
                {"id": "2", "text": "셋째 날", "createdAt": "2026-10-18T08:00:00Z"},
                {"id": "3", "text": "둘째 날", "createdAt": "2026-10-14T08:00:00Z"},
            ])
            run(LABEL, _make_config(tmpdir, path), NULL_LOGGER)

            entries = entries_from_json(str(Path(tmpdir) / LABEL / ENTRIES_RELPATH))
            self.assertEqual([e.text for e in entries], ["셋째 날", "둘째 날", "첫째 날"])

            summary = _summary(tmpdir)
            self.assertEqual(summary["input_count"], 3)
            self.assertEqual(summary["output_count"], 3)

    def test_window_filter(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, [
                {"text": "오래된 글", "createdAt": "2026-08-01T08:00:00Z"},
                {"text": "최근 글", "createdAt": "2026-10-17T08:00:00Z"},
            ])
            run(LABEL, _make_config(tmpdir, path), NULL_LOGGER)

            entries = entries_from_json(str(Path(tmpdir) / LABEL / ENTRIES_RELPATH))
            self.assertEqual([e.text for e in entries], ["최근 글"])
            self.assertEqual(_summary(tmpdir)["dropped_outside_window"], 1)

    def test_no_date_from_keeps_everything(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, [{"text": "오래된 글", "createdAt": "2020-01-01"}])
            run(LABEL, _make_config(tmpdir, path, date_from=None), NULL_LOGGER)
            self.assertEqual(_summary(tmpdir)["output_count"], 1)

    def test_duplicates_invalid_and_empty_dropped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, [
                {"id": "a", "text": "좋은 하루", "createdAt": "2026-10-17T08:00:00Z"},
                {"id": "a", "text": "좋은 하루", "createdAt": "2026-10-17T08:00:00Z"},
                {"id": "b", "text": "날짜 없음"},
                {"id": "c", "text": "   ", "createdAt": "2026-10-17T09:00:00Z"},
                None,
            ])
            run(LABEL, _make_config(tmpdir, path), NULL_LOGGER)

            summary = _summary(tmpdir)
            self.assertEqual(summary["output_count"], 1)
            self.assertEqual(summary["dropped_duplicate"], 1)
            self.assertEqual(summary["dropped_invalid"], 2)
            self.assertEqual(summary["dropped_empty_text"], 1)

    def test_nan_sentiment_dropped_as_invalid(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "input.json"
            # json.load accepts the bare NaN literal
            path.write_text(
                '[{"text": "좋은 하루", "createdAt": "2026-10-17T08:00:00Z", "externalSentiment": NaN},'
                ' {"text": "좋은 저녁", "createdAt": "2026-10-17T20:00:00Z", "externalSentiment": 0.4}]',
                encoding="utf-8",
            )
            run(LABEL, _make_config(tmpdir, path), NULL_LOGGER)

            summary = _summary(tmpdir)
            self.assertEqual(summary["output_count"], 1)
            self.assertEqual(summary["dropped_invalid"], 1)

    def test_entries_wrapper_accepted(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, {"entries": [
                {"text": "좋은 하루", "createdAt": "2026-10-17T08:00:00Z"},
            ]})
            run(LABEL, _make_config(tmpdir, path), NULL_LOGGER)
            self.assertEqual(_summary(tmpdir)["output_count"], 1)

    def test_empty_list_is_not_an_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, [])
            run(LABEL, _make_config(tmpdir, path), NULL_LOGGER)
            self.assertEqual(entries_from_json(str(Path(tmpdir) / LABEL / ENTRIES_RELPATH)), [])

    def test_missing_input_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(RuntimeError):
                run(LABEL, _make_config(tmpdir, Path(tmpdir) / "nope.json"), NULL_LOGGER)

    def test_invalid_json_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "input.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(RuntimeError):
                run(LABEL, _make_config(tmpdir, path), NULL_LOGGER)

    def test_wrong_shape_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, {"items": []})
            with self.assertRaises(RuntimeError):
                run(LABEL, _make_config(tmpdir, path), NULL_LOGGER)


if __name__ == "__main__":
    unittest.main(verbosity=2)
