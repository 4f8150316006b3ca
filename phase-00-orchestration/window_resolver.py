"""
window_resolver.py — Phase 00: Orchestration
----------------------------------------------
Resolves the analysis window for a run.

Rules:
  - If --now is provided via CLI, validate and use it (ISO date or datetime).
    A bare date means the END of that day; naive datetimes are taken as UTC.
  - If not provided, use the current wall-clock time (UTC).

Returns a WindowContext dataclass with:
  - run_date:  date      the calendar day scores are stored under
  - now:       datetime  reference instant for the 7-day frequency window
  - date_from: datetime  start of the lookback window (now - lookback_days)
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone


# ---------------------------------------------------------------------------
# Data contract
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WindowContext:
    run_date: date
    now: datetime
    date_from: datetime
    lookback_days: int

    def run_label(self, user_id: str) -> str:
        return f"{user_id}/{self.run_date.isoformat()}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def resolve_window(now_arg: str | None = None, lookback_days: int = 30) -> WindowContext:
    """
    Resolve the analysis window.

    Args:
        now_arg:        Optional ISO date/datetime string passed from the CLI.
        lookback_days:  How many days of entries the run considers.

    Returns:
        WindowContext with the resolved window.

    Raises:
        ValueError: If now_arg is malformed or lookback_days is not positive.
    """
    if lookback_days < 1:
        raise ValueError(f"lookback_days must be >= 1, got {lookback_days}.")

    now = parse_instant(now_arg) if now_arg is not None else datetime.now(tz=timezone.utc)
    return WindowContext(
        run_date=now.date(),
        now=now,
        date_from=now - timedelta(days=lookback_days),
        lookback_days=lookback_days,
    )


def parse_instant(value: str) -> datetime:
    """
    Parse an ISO-8601 date or datetime into an aware UTC datetime.

    Raises:
        ValueError: If the value is not a valid ISO date/datetime.
    """
    raw = (value or "").strip()
    if not raw:
        raise ValueError("Empty --now value. Expected YYYY-MM-DD or an ISO datetime.")

    try:
        if len(raw) == 10:
            day = date.fromisoformat(raw)
            return datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(
            f"Invalid --now value '{value}'. "
            "Expected YYYY-MM-DD or an ISO datetime (e.g. 2026-10-18T21:00:00+09:00)."
        )

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
