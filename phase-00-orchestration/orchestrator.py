"""
orchestrator.py — Phase 00: Orchestration
-------------------------------------------
Main entry point for the Mind Weather pipeline.

Usage:
  # Score a user's entries as of now:
  python phase-00-orchestration/orchestrator.py --user parent-042 --input entries.json

  # Score as of a fixed instant (deterministic frequency window):
  python phase-00-orchestration/orchestrator.py --user parent-042 --input entries.json \
      --now 2026-10-18T21:00:00+09:00

  # Force re-run (overwrite the day's output):
  python phase-00-orchestration/orchestrator.py --user parent-042 --input entries.json --force

  # Dry run (resolve window and validate config, but run nothing):
  python phase-00-orchestration/orchestrator.py --user parent-042 --input entries.json --dry-run

Exit codes:
  0  — Success (or skipped because already processed)
  1  — Pipeline failure
  2  — Configuration or argument error
"""

import argparse
import json
import re
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Ensure the project root is on the Python path when run directly
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
PHASE_00_DIR = Path(__file__).resolve().parent

for _p in [str(PROJECT_ROOT), str(PHASE_00_DIR)]:
    if _p not in sys.path:
        sys.path.insert(0, _p)

from dotenv import load_dotenv               # noqa: E402

from config_loader import load_config        # noqa: E402
from window_resolver import resolve_window   # noqa: E402
from run_state import (                      # noqa: E402
    is_processed,
    mark_in_progress,
    mark_phase_complete,
    mark_processed,
    mark_failed,
)
from phase_dispatcher import dispatch_all    # noqa: E402
from logger import get_logger                # noqa: E402


_USER_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_\-]+$")


# ---------------------------------------------------------------------------
# CLI argument parsing
# ---------------------------------------------------------------------------

def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="orchestrator",
        description="Mind Weather — Pipeline Orchestrator",
    )
    parser.add_argument(
        "--user",
        required=True,
        dest="user_id",
        help="User identifier (letters, digits, '_' and '-').",
    )
    parser.add_argument(
        "--input",
        required=True,
        dest="input_path",
        help="Path to a JSON list of journal entries for the user.",
    )
    parser.add_argument(
        "--now",
        metavar="ISO",
        default=None,
        help="Reference instant (YYYY-MM-DD or ISO datetime). Defaults to the current time.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Force re-run even if this user/day was already processed.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        dest="dry_run",
        help="Resolve the window and validate config, but skip all phase execution.",
    )
    return parser.parse_args(argv)


# ---------------------------------------------------------------------------
# Main orchestration logic
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """
    Orchestrate the full pipeline run.

    Returns:
        int: Exit code (0 = success, 1 = failure, 2 = config/arg error).
    """
    args = _parse_args(argv)
    load_dotenv()

    # --- 1. Load and validate configuration ---
    try:
        config = load_config()
    except (FileNotFoundError, ValueError) as exc:
        print(f"[CONFIG ERROR] {exc}", file=sys.stderr)
        return 2

    data_root = config.get("data_root", "data")

    # --- 2. Validate arguments and resolve the analysis window ---
    if not _USER_ID_PATTERN.match(args.user_id):
        print(f"[ARGUMENT ERROR] Invalid --user '{args.user_id}'.", file=sys.stderr)
        return 2

    try:
        window = resolve_window(args.now, lookback_days=config["lookback_days"])
    except ValueError as exc:
        print(f"[ARGUMENT ERROR] {exc}", file=sys.stderr)
        return 2

    run_label = window.run_label(args.user_id)

    # --- 3. Initialise logger (creates data/{user}/{date}/ directory) ---
    logger = get_logger(run_label=run_label, data_root=data_root)
    logger.info("=" * 60)
    logger.info("Mind Weather — Orchestrator")
    logger.info(f"Run          : {run_label}")
    logger.info(f"Window       : {window.date_from.isoformat()} -> {window.now.isoformat()}")
    logger.info(f"Input        : {args.input_path}")
    logger.info(f"Force Re-run : {args.force}")
    logger.info(f"Dry Run      : {args.dry_run}")
    logger.info("=" * 60)

    # --- 4. Idempotency guard ---
    if not args.force and not args.dry_run and is_processed(run_label, data_root):
        logger.info(
            f"Run {run_label} has already been successfully processed. "
            "Use --force to re-run."
        )
        return 0

    # --- 5. Write run_config.json for downstream phases ---
    run_config = {
        "run_label":     run_label,
        "user_id":       args.user_id,
        "run_date":      window.run_date.isoformat(),
        "now":           window.now.isoformat(),
        "date_from":     window.date_from.isoformat(),
        "lookback_days": window.lookback_days,
        "input_path":    str(Path(args.input_path).resolve()),
        "force":         args.force,
        "dry_run":       args.dry_run,
        "lexicon_file":  config.get("lexicon_file"),
        "weather":       config.get("weather") or {},
        "data_root":     data_root,
    }

    run_config_path = Path(data_root) / run_label / "run_config.json"
    run_config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(run_config_path, "w", encoding="utf-8") as f:
        json.dump(run_config, f, indent=2, ensure_ascii=False)

    logger.info(f"Run config written -> {run_config_path}")

    # --- 6. Mark run as in-progress ---
    if not args.dry_run:
        mark_in_progress(run_label, data_root)

    # --- 7. Dispatch phases ---
    try:
        completed_phases = dispatch_all(
            run_label=run_label,
            config=run_config,
            logger=logger,
            dry_run=args.dry_run,
            on_phase_complete=lambda n: mark_phase_complete(run_label, n, data_root),
        )
    except RuntimeError as exc:
        failed_phase = _extract_phase_num(str(exc))
        logger.error(f"Pipeline aborted: {exc}")
        mark_failed(
            run_label=run_label,
            failed_at_phase=failed_phase,
            error=str(exc),
            data_root=data_root,
        )
        return 1

    # --- 8. Mark success ---
    if not args.dry_run:
        mark_processed(run_label=run_label, phases_completed=completed_phases, data_root=data_root)

    logger.info("=" * 60)
    logger.info(
        f"Pipeline complete for {run_label}. "
        f"Phases finished: {completed_phases}"
    )
    logger.info("=" * 60)
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _extract_phase_num(error_msg: str) -> int:
    """Attempt to parse a phase number from a RuntimeError message."""
    match = re.search(r"Phase\s+(\d+)", error_msg)
    return int(match.group(1)) if match else -1


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
