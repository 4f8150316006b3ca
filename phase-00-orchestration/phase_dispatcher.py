"""
phase_dispatcher.py — Phase 00: Orchestration
-----------------------------------------------
Executes the pipeline phases in order on behalf of the orchestrator.

Design principles:
  - Each phase is a callable that accepts (run_label, config, logger).
  - Phases are executed sequentially; failure in any phase raises an
    exception and halts the pipeline.
  - Phases 02 (sentiment) and 03 (patterns) are pure libraries consumed
    by Phase 04 — they have no run() and are excluded here.
  - Phase modules are imported lazily from their hyphenated folders.
"""

import importlib
import logging
import sys
import time
from pathlib import Path
from typing import Any, Callable, Optional

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


# ---------------------------------------------------------------------------
# Phase registry
# Each entry: (phase_number, module_path, entry_function_name)
# ---------------------------------------------------------------------------

PHASE_REGISTRY = [
    (1, "phase-01-ingestion.ingestor",     "run"),
    (4, "phase-04-weather.weather_runner", "run"),
    (5, "phase-05-storage.score_history",  "run"),
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def dispatch_all(
    run_label: str,
    config: dict[str, Any],
    logger: logging.Logger,
    dry_run: bool = False,
    on_phase_complete: Optional[Callable[[int], None]] = None,
) -> list[int]:
    """
    Run all registered phases in sequence.

    Args:
        run_label:         '<user_id>/<YYYY-MM-DD>'.
        config:            Run configuration dict built by the orchestrator.
        logger:            Bound logger for the run.
        dry_run:           If True, phases are skipped entirely (no-op mode).
        on_phase_complete: Called with the phase number after each success.

    Returns:
        list[int]: Phase numbers that completed successfully.

    Raises:
        RuntimeError: When a phase fails or cannot be imported.
    """
    completed = []

    for phase_num, module_path, fn_name in PHASE_REGISTRY:
        phase_label = f"Phase {phase_num:02d}"

        if dry_run:
            logger.info(f"[DRY-RUN] Skipping {phase_label} ({module_path})")
            completed.append(phase_num)
            continue

        logger.info(f"[*] Starting {phase_label} ...")
        start = time.monotonic()

        try:
            # Add the phase directory to sys.path so modules inside
            # hyphenated folders can be imported by their flat name.
            phase_dir = _PROJECT_ROOT / module_path.split(".")[0]
            if str(phase_dir) not in sys.path:
                sys.path.insert(0, str(phase_dir))

            submodule_name = module_path.split(".")[1]
            phase_fn = _import_phase(submodule_name, fn_name, phase_num)

            phase_fn(run_label=run_label, config=config, logger=logger)
        except Exception as exc:
            elapsed = time.monotonic() - start
            logger.error(
                f"[X] {phase_label} FAILED after {elapsed:.1f}s: {exc}"
            )
            raise RuntimeError(f"{phase_label} failed: {exc}") from exc

        elapsed = time.monotonic() - start
        logger.info(f"[OK] {phase_label} completed in {elapsed:.1f}s")
        completed.append(phase_num)
        if on_phase_complete is not None:
            on_phase_complete(phase_num)

    return completed


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _import_phase(submodule_name: str, fn_name: str, phase_num: int):
    """
    Dynamically import a phase module and return its entry function.

    Raises:
        ImportError: If the module or function cannot be found.
    """
    try:
        module = importlib.import_module(submodule_name)
    except ModuleNotFoundError as exc:
        raise ImportError(
            f"Phase {phase_num:02d} submodule '{submodule_name}' not found ({exc})."
        )

    if not hasattr(module, fn_name):
        raise ImportError(
            f"Phase {phase_num:02d} submodule '{submodule_name}' has no '{fn_name}()' function."
        )

    return getattr(module, fn_name)
