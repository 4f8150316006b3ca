"""
run_state.py — Phase 00: Orchestration
-----------------------------------------
Manages the persisted run registry so the pipeline is idempotent.

Registry location: {data_root}/run_registry.json
Format:
  {
    "parent-042/2026-10-18": {
      "status": "success" | "failed" | "in_progress",
      "started_at": "<ISO datetime>",
      "completed_at": "<ISO datetime>",
      "phases_completed": [1, 4, 5],
      "failed_at_phase": null,
      "error": null
    },
    ...
  }

Re-runs upsert the existing entry — they never create duplicates.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

REGISTRY_FILENAME = "run_registry.json"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def is_processed(run_label: str, data_root: str = "data") -> bool:
    """
    Return True if the given run_label has a 'success' entry in the registry.
    """
    entry = _load_registry(data_root).get(run_label)
    return entry is not None and entry.get("status") == "success"


def mark_in_progress(run_label: str, data_root: str = "data") -> None:
    """
    Record that a run has started.
    Called by the orchestrator before dispatching any phase.
    """
    registry = _load_registry(data_root)
    registry[run_label] = _empty_entry()
    _save_registry(registry, data_root)


def mark_phase_complete(run_label: str, phase_num: int, data_root: str = "data") -> None:
    """Append a completed phase number to the run's registry entry."""
    registry = _load_registry(data_root)
    entry = registry.setdefault(run_label, _empty_entry())
    completed = entry.get("phases_completed") or []
    if phase_num not in completed:
        completed.append(phase_num)
    entry["phases_completed"] = completed
    _save_registry(registry, data_root)


def mark_processed(run_label: str, phases_completed: list[int], data_root: str = "data") -> None:
    """Record a fully successful run."""
    registry = _load_registry(data_root)
    entry = registry.get(run_label, _empty_entry())
    entry.update({
        "status": "success",
        "completed_at": _now(),
        "phases_completed": phases_completed,
        "failed_at_phase": None,
        "error": None,
    })
    registry[run_label] = entry
    _save_registry(registry, data_root)


def mark_failed(run_label: str, failed_at_phase: int, error: str, data_root: str = "data") -> None:
    """
    Record a failed run with context.

    Args:
        run_label:       '<user_id>/<YYYY-MM-DD>'.
        failed_at_phase: Phase number where the failure occurred (-1 if unknown).
        error:           Human-readable error description.
    """
    registry = _load_registry(data_root)
    entry = registry.get(run_label, _empty_entry())
    entry.update({
        "status": "failed",
        "completed_at": _now(),
        "failed_at_phase": failed_at_phase,
        "error": error,
    })
    registry[run_label] = entry
    _save_registry(registry, data_root)


def get_entry(run_label: str, data_root: str = "data") -> Optional[dict]:
    return _load_registry(data_root).get(run_label)


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _registry_file(data_root: str) -> Path:
    return Path(data_root) / REGISTRY_FILENAME


def _load_registry(data_root: str) -> dict:
    path = _registry_file(data_root)
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    return {}


def _save_registry(registry: dict, data_root: str) -> None:
    path = _registry_file(data_root)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(registry, f, indent=2, ensure_ascii=False)


def _now() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def _empty_entry() -> dict:
    return {
        "status": "in_progress",
        "started_at": _now(),
        "completed_at": None,
        "phases_completed": [],
        "failed_at_phase": None,
        "error": None,
    }
