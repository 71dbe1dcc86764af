import math
import pathlib
import sys

import numpy as np
import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pcouple import AitkenRelaxation, load_relaxation, make_relaxation, relaxation_from_dict
from pcouple.core.tolerance import MACHINE_EPS
from pcouple.relaxation import AitkenSettings, relaxation_registry
from pcouple.utils.io import read_yaml_file, write_yaml_file
from pcouple.utils.logging import RelaxationLogger
from pcouple.utils.registry import Registry

CASE = ROOT / "tests" / "cases" / "aitken.yaml"


def test_defaults_from_empty_dict():
    settings = AitkenSettings.from_dict({})
    assert settings.initial_factor == 1.0
    assert settings.factor_max == 1.0
    assert settings.time_epsilon == MACHINE_EPS
    assert settings.retain_levels is None
    assert settings.warm_start_values == []
    assert settings.warm_start_residual_norm is None


def test_camel_case_keys():
    settings = AitkenSettings.from_dict(
        {
            "initialFactor": 0.3,
            "factorMax": 2,
            "pointEpsilon": 1e-10,
            "retainLevels": 5,
            "warmStart": {"points": [[0.0, 1.0]], "values": [[1.0, 2.0]]},
        }
    )
    assert settings.initial_factor == 0.3
    assert settings.factor_max == 2.0
    assert settings.tolerance.point_epsilon == 1e-10
    assert settings.retain_levels == 5
    point, value = settings.warm_start_values[0]
    assert np.array_equal(point, [0.0, 1.0])
    assert np.array_equal(value, [1.0, 2.0])


@pytest.mark.parametrize(
    "data",
    [
        {"factorMax": -1.0},
        {"retainLevels": 2},
        {"warmStart": {"points": [[0.0]], "values": []}},
        {"timeEpsilon": -1e-9},
    ],
)
def test_invalid_settings_rejected(data):
    with pytest.raises(ValueError):
        AitkenRelaxation(data)


def test_load_relaxation_from_yaml():
    engine = load_relaxation(CASE)
    assert isinstance(engine, AitkenRelaxation)
    assert engine.settings.initial_factor == 0.5
    assert engine.settings.factor_max == 0.9
    assert engine.settings.retain_levels == 4
    assert engine.time_levels() == [-math.inf]
    assert engine.residual_norm_at(-math.inf) == 0.8
    # two warm-start points, query halfway between them
    assert np.isclose(engine.relax(0.0, [0.5, 0.0], 4.0), 0.5 * 4.0 + 0.5 * 2.0)


def test_relaxation_from_dict_defaults_to_aitken():
    engine = relaxation_from_dict({"aitken": {"initialFactor": 0.25}})
    assert isinstance(engine, AitkenRelaxation)
    assert engine.settings.initial_factor == 0.25


def test_unknown_relaxation_name():
    assert "Aitken" in relaxation_registry
    with pytest.raises(KeyError):
        make_relaxation("IQN-ILS")


def test_registry_rejects_duplicates():
    registry = Registry("demo")
    registry.register("Fixed")(dict)
    with pytest.raises(ValueError):
        registry.register("fixed")(dict)
    assert registry.keys() == ["fixed"]
    assert registry.create("FIXED", a=1) == {"a": 1}


def test_logger_prints_only_when_verbose(capsys):
    quiet = RelaxationLogger("quiet")
    quiet.log(1.0, "factor", factor=0.5)
    assert capsys.readouterr().out == ""
    assert quiet.events("factor") == [{"time": 1.0, "event": "factor", "factor": 0.5}]

    loud = RelaxationLogger("loud", verbose=True)
    loud.log(2.0, "norm", count=3, norm=0.25)
    out = capsys.readouterr().out
    assert "loud t = 2" in out
    assert "count = 3" in out
    assert "norm = 2.500e-01" in out

    loud.warn("stagnated", time=2.0)
    assert "loud: stagnated" in capsys.readouterr().err


def test_verbose_engine_reports_factor_updates(capsys):
    engine = AitkenRelaxation({"initialFactor": 0.5, "verbose": True})
    engine.relax(0.0, [0.0], 1.0)
    assert "factor" in capsys.readouterr().out


def test_yaml_helpers(tmp_path):
    path = write_yaml_file(tmp_path / "out" / "history.yaml", {"events": [{"time": 0.0}]})
    assert read_yaml_file(path) == {"events": [{"time": 0.0}]}

    bad = tmp_path / "list.yaml"
    bad.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_yaml_file(bad)
