"""
entry_schema.py — Phase 01: Entry Ingestion
---------------------------------------------
Defines the canonical, normalised JournalEntry dataclass.

Every caller-supplied entry is converted to this shape at the service
boundary. The engine consumes ONLY this shape and never mutates it.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional
import json
import math
import pathlib


@dataclass(frozen=True)
class JournalEntry:
    """One reflection text with its creation time."""

    text: str                   # Raw reflection text
    created_at: datetime        # Timezone-aware creation instant
    external_sentiment: Optional[float] = field(default=None)  # Score from an upstream analyzer, if any

    def to_dict(self) -> dict:
        return {
            "text":              self.text,
            "createdAt":         self.created_at.isoformat(),
            "externalSentiment": self.external_sentiment,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "JournalEntry":
        """
        Build an entry from a loosely-shaped dict.

        Accepts `text` or `content` for the body, `createdAt` or `created_at`
        for the timestamp, and `externalSentiment` / `sentimentScore` for an
        optional upstream sentiment value.

        Raises:
            ValueError: If the body is not a string, the timestamp is invalid or
                        the sentiment is not a finite number.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"entry must be an object, got {type(raw).__name__}")

        text = raw.get("text", raw.get("content"))
        if not isinstance(text, str):
            raise ValueError("entry text must be a string")

        created_at = parse_timestamp(raw.get("createdAt", raw.get("created_at")))

        sentiment = raw.get("externalSentiment", raw.get("sentimentScore"))
        if sentiment is not None:
            try:
                sentiment = float(sentiment)
            except (TypeError, ValueError):
                raise ValueError(f"externalSentiment must be numeric, got {sentiment!r}")
            if not math.isfinite(sentiment):
                raise ValueError(f"externalSentiment must be finite, got {sentiment!r}")

        return cls(text=text, created_at=created_at, external_sentiment=sentiment)


def parse_timestamp(value: Any) -> datetime:
    """
    Normalise an ISO-8601 string or datetime into an aware UTC datetime.
    Naive values are taken as UTC.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValueError(f"invalid timestamp {value!r}")
    else:
        raise ValueError(f"missing or invalid timestamp {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def entries_to_json(entries: list[JournalEntry], path: str) -> None:
    """
    Serialise a list of JournalEntry objects to a JSON file.

    Args:
        entries: List of JournalEntry dataclass instances.
        path:    Absolute or relative file path to write.
    """
    out_path = pathlib.Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with open(out_path, "w", encoding="utf-8") as f:
        json.dump([e.to_dict() for e in entries], f, indent=2, ensure_ascii=False)


def entries_from_json(path: str) -> list[JournalEntry]:
    """Load entries previously written by entries_to_json()."""
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    return [JournalEntry.from_dict(r) for r in raw]
