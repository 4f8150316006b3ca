"""
conftest.py — adds scripts/ and the engine phases to sys.path for pytest.
"""
import sys
from pathlib import Path

_ROOT    = Path(__file__).resolve().parent.parent.parent   # project root
_SCRIPTS = Path(__file__).resolve().parent.parent           # scripts

for _p in [str(_ROOT), str(_SCRIPTS)] + [
    str(_ROOT / d) for d in ["phase-00-orchestration", "phase-01-ingestion",
                             "phase-02-sentiment", "phase-03-patterns", "phase-04-weather"]
]:
    if _p not in sys.path:
        sys.path.insert(0, _p)
