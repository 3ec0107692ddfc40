"""Tests for S02: Attribute normalization step."""

import numpy as np
import pytest

from splatasset.steps.s02_normalize.config import NormalizeConfig
from splatasset.steps.s02_normalize.contracts import NormalizeInput
from splatasset.steps.s02_normalize.step import NormalizeStep
from splatasset.utils.geometry import SH_C0
from splatasset.utils.io import INPUT_RECORD_DTYPE


def _records(n: int = 1) -> np.ndarray:
    records = np.zeros(n, dtype=INPUT_RECORD_DTYPE)
    records["rot"] = [1.0, 0.0, 0.0, 0.0]
    return records


def _normalize(records: np.ndarray, **config) -> np.ndarray:
    step = NormalizeStep(config=NormalizeConfig(**config))
    return step.execute(NormalizeInput(records=records)).records


class TestNormalizeStep:
    def test_identity_rotation(self):
        out = _normalize(_records())
        np.testing.assert_allclose(out["rot"][0], [0.5, 0.5, 0.5, 1.0])

    def test_scale_exponentiated(self):
        records = _records(2)
        records["scale"] = [[0.0, 0.0, 0.0], [np.log(2.0), -np.log(4.0), 1.0]]
        out = _normalize(records)
        np.testing.assert_allclose(out["scale"], [[1, 1, 1], [2.0, 0.25, np.e]], rtol=1e-6)
        assert np.all(out["scale"] > 0)

    def test_color_and_opacity(self):
        records = _records(2)
        records["dc0"] = [[0.0, 0.0, 0.0], [1.0, -1.0, 2.0]]
        records["opacity"] = [0.0, 50.0]
        out = _normalize(records)
        np.testing.assert_allclose(out["dc0"][0], [0.5, 0.5, 0.5])
        np.testing.assert_allclose(out["dc0"][1], [0.5 + SH_C0, 0.5 - SH_C0, 0.5 + 2 * SH_C0], rtol=1e-6)
        assert out["opacity"][0] == pytest.approx(0.5)
        assert out["opacity"][1] == pytest.approx(1.0)

    def test_custom_sh_c0(self):
        records = _records()
        records["dc0"] = [1.0, 1.0, 1.0]
        out = _normalize(records, sh_c0=0.25)
        np.testing.assert_allclose(out["dc0"][0], [0.75, 0.75, 0.75])

    def test_positions_and_sh_untouched(self):
        rng = np.random.default_rng(11)
        records = _records(10)
        records["pos"] = rng.standard_normal((10, 3))
        records["sh"] = rng.standard_normal((10, 15, 3))
        before = records.copy()
        out = _normalize(records)
        np.testing.assert_array_equal(out["pos"], before["pos"])
        np.testing.assert_array_equal(out["sh"], before["sh"])

    def test_zero_quaternion_passes_through(self, caplog):
        records = _records()
        records["rot"] = [0.0, 0.0, 0.0, 0.0]
        out = _normalize(records)
        assert not np.isfinite(out["rot"]).all()
        assert "non-finite rotations" in caplog.text

    def test_missing_fields_rejected(self):
        step = NormalizeStep(config=NormalizeConfig())
        records = np.zeros(1, dtype=[("pos", "<f4", (3,))])
        with pytest.raises(ValueError):
            step.execute(NormalizeInput(records=records))
