"""
logger.py — Phase 00: Orchestration
-------------------------------------
Per-run logger for the Mind Weather pipeline.

One logger per run label ('<user_id>/<YYYY-MM-DD>'), named
mindweather.<user_id>.<YYYY-MM-DD>, with two handlers:
  - data/{user_id}/{run_date}/run.log   DEBUG and above, appended
  - stdout                              INFO and above

The pure engine modules (phases 02–04 calculators) never log; only phase
run() functions and the orchestrator do.
"""

import logging
import sys
from pathlib import Path

LOGGER_NAMESPACE = "mindweather"
LOG_FORMAT       = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT  = "%Y-%m-%dT%H:%M:%S"


def get_logger(run_label: str, data_root: str = "data") -> logging.Logger:
    """
    Return the configured logger for a run, creating data/{run_label}/run.log.

    Args:
        run_label:  '<user_id>/<YYYY-MM-DD>', e.g. 'parent-042/2026-10-18'.
        data_root:  Root data directory.
    """
    log_dir = Path(data_root) / run_label
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{run_label.replace('/', '.')}")
    logger.setLevel(logging.DEBUG)

    # Same label twice in one process (e.g. --force re-run): reuse handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    file_handler = logging.FileHandler(log_dir / "run.log", mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
    return logger
