"""
conftest.py — adds phase-05-storage and the weather schema to sys.path for pytest.
"""
import sys
from pathlib import Path

_ROOT  = Path(__file__).resolve().parent.parent.parent   # project root
_PHASE = Path(__file__).resolve().parent.parent           # phase-05-storage

for _p in [str(_ROOT), str(_PHASE), str(_ROOT / "phase-04-weather")]:
    if _p not in sys.path:
        sys.path.insert(0, _p)
