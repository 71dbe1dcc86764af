import pathlib
import sys

import numpy as np
import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

pytest.importorskip("matplotlib")

from pcouple import AitkenRelaxation
from scripts import interface_relaxation_demo as demo


def test_demo_coupling_respects_factor_bound():
    engine = AitkenRelaxation({"initialFactor": 0.5, "factorMax": 0.6})
    rows, error = demo.run_coupling(engine, npoints=8, iterations=12, ratio=1.5, tol=1e-12)

    assert 1 < len(rows) <= 12
    assert all(abs(row["factor"]) <= 0.6 for row in rows)
    assert np.isfinite(error)
    assert len(engine.time_levels()) == len(rows)
