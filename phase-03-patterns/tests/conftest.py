"""
conftest.py — adds phase-03-patterns (and the config loader it reads) to sys.path for pytest.
"""
import sys
from pathlib import Path

_ROOT  = Path(__file__).resolve().parent.parent.parent   # project root
_PHASE = Path(__file__).resolve().parent.parent           # phase-03-patterns

for _p in [str(_ROOT), str(_PHASE), str(_ROOT / "phase-00-orchestration")]:
    if _p not in sys.path:
        sys.path.insert(0, _p)
