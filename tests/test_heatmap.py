import numpy as np
import pytest

from fcn_data.config import GeometryParams
from fcn_data.utils.heatmap import (
    CalibrationTable, build_reference_template, impulse_position, stack_label, synthesize_heatmap,
)

PARAMS = GeometryParams()
HEATMAP_SIZE = PARAMS.target_heatmap_size


def test_reference_template_centre_is_one():
    template = build_reference_template(PARAMS)
    assert template.shape == (7, 7)
    assert template[3, 3] == pytest.approx(1.0)
    # border rows pick up the reflected impulse
    assert template[0, 3] == pytest.approx(template[6, 3])
    assert template[0, 3] > template[1, 3]


def test_calibration_reads_vertical_decay():
    table = CalibrationTable.from_params(PARAMS)
    template = build_reference_template(PARAMS)
    assert len(table) == 5
    for s in PARAMS.scale_indices:
        assert table.ideal_peak(s) == pytest.approx(float(template[3 + s, 3]))
    assert table.ideal_peak(0) == pytest.approx(1.0)
    assert table.ideal_peak(1) == pytest.approx(table.ideal_peak(-1))
    assert 0 < table.ideal_peak(2) < table.ideal_peak(1) < 1.0
    np.testing.assert_allclose(table.as_array()[::-1], table.as_array(), rtol=1e-6)


def test_impulse_position_rounds_and_clamps():
    assert impulse_position((32.4, 32.6), HEATMAP_SIZE) == (32, 33)
    assert impulse_position((-5.0, 100.0), HEATMAP_SIZE) == (0, 64)


@pytest.mark.parametrize("point", [(32.0, 32.0), (0.2, 10.7), (64.0, 64.0), (-3.0, 70.0)])
def test_peak_matches_calibration(point):
    table = CalibrationTable.from_params(PARAMS)
    for s in PARAMS.scale_indices:
        confidence, _ = synthesize_heatmap(point, HEATMAP_SIZE, table.ideal_peak(s), PARAMS)
        assert confidence.shape == (65, 65)
        assert confidence.dtype == np.float32
        assert confidence.max() == pytest.approx(table.ideal_peak(s), rel=1e-5)


def test_peak_sits_on_impulse():
    confidence, _ = synthesize_heatmap((20.0, 40.0), HEATMAP_SIZE, 0.8, PARAMS)
    row, col = np.unravel_index(confidence.argmax(), confidence.shape)
    assert (col, row) == (20, 40)


def test_weight_complements_confidence():
    confidence, weight = synthesize_heatmap((32.0, 32.0), HEATMAP_SIZE, 1.0, PARAMS)
    positive = confidence > 0
    assert positive.sum() == 49
    np.testing.assert_array_equal(weight[positive], 1.0)
    np.testing.assert_allclose(weight[~positive], 49.0 / (65 * 65), rtol=1e-6)


def test_stack_label():
    confidence, weight = synthesize_heatmap((10.0, 10.0), HEATMAP_SIZE, 1.0, PARAMS)
    label = stack_label(confidence, weight)
    assert label.shape == (2, 65, 65)
    np.testing.assert_array_equal(label[1], weight)
