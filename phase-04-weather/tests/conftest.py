"""
conftest.py — adds phase-04-weather and the phases it consumes to sys.path for pytest.
"""
import sys
from pathlib import Path

_ROOT  = Path(__file__).resolve().parent.parent.parent   # project root
_PHASE = Path(__file__).resolve().parent.parent           # phase-04-weather

_DEPS = [
    "phase-00-orchestration",
    "phase-01-ingestion",
    "phase-02-sentiment",
    "phase-03-patterns",
    "phase-05-storage",
]

for _p in [str(_ROOT), str(_PHASE)] + [str(_ROOT / d) for d in _DEPS]:
    if _p not in sys.path:
        sys.path.insert(0, _p)
