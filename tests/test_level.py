from __future__ import annotations

import numpy as np
import pytest

from levelgen.world.level import (
    BLACK,
    RED,
    RULE_BOULDER,
    RULE_OPEN,
    RULE_PORTAL,
    RULE_RIDGE,
    RULE_SEAM,
    RULE_SOLID,
    WHITE,
    classify,
    classify_detail,
    level,
)


def _pixels(n: int):
    xs = np.arange(n, dtype=np.float32) / np.float32(n)
    return np.meshgrid(xs, xs)


def test_palette_only():
    x, y = _pixels(64)
    rgb = classify(x, y, 69)
    assert rgb.shape == (64, 64, 3)
    assert rgb.dtype == np.float32
    colors = {tuple(c) for c in rgb.reshape(-1, 3).tolist()}
    assert colors <= {RED, WHITE, BLACK}


def test_scalar_wrapper_matches_grid():
    x, y = _pixels(16)
    rgb = classify(x, y, 70)
    for j in range(0, 16, 5):
        for i in range(0, 16, 3):
            assert level(float(x[j, i]), float(y[j, i]), 70) == tuple(float(v) for v in rgb[j, i])


def test_seed_sensitivity_at_fixed_coordinate():
    outputs = {level(0.3125, 0.6875, seed) for seed in range(69, 119)}
    assert len(outputs) > 1


def test_portal_rule_paints_red():
    x, y = _pixels(256)
    for seed in range(69, 89):
        d = classify_detail(x, y, seed)
        portal = (d.nearest_dist < 0.05) & d.nearest_open
        if portal.any():
            break
    else:
        pytest.fail("no open site within 0.05 of any pixel in 20 seeds")
    assert np.all(d.rule[portal] == RULE_PORTAL)
    assert np.all(d.rgb[portal] == np.array(RED, dtype=np.float32))
    # and red never shows up anywhere else
    red = np.all(d.rgb == np.array(RED, dtype=np.float32), axis=-1)
    np.testing.assert_array_equal(red, portal)


def test_ridge_rule():
    x, y = _pixels(128)
    d = classify_detail(x, y, 69)
    not_portal = d.rule != RULE_PORTAL
    low = (d.ridge < 0.2) & not_portal
    high = (d.ridge >= 0.2) & not_portal
    assert low.any() and high.any()
    assert np.all(d.rgb[low] == np.array(WHITE, dtype=np.float32))
    assert np.all(d.rule[low] == RULE_RIDGE)
    red = np.all(d.rgb == np.array(RED, dtype=np.float32), axis=-1)
    assert not red[high].any()


def test_rule_order_consistent_with_signals():
    x, y = _pixels(128)
    d = classify_detail(x, y, 4242)
    rest = (d.rule != RULE_PORTAL) & (d.rule != RULE_RIDGE)
    # open cells are floor or boulder, closed cells are seam or solid
    assert np.all(np.isin(d.rule[rest & d.nearest_open], [RULE_BOULDER, RULE_OPEN]))
    assert np.all(np.isin(d.rule[rest & ~d.nearest_open], [RULE_SEAM, RULE_SOLID]))
    assert np.all(d.seam[d.rule == RULE_SEAM] > 0)
    assert np.all(d.seam[d.rule == RULE_SOLID] == 0)


def test_thickness_range():
    x, y = _pixels(64)
    d = classify_detail(x, y, 123)
    assert d.thickness.min() >= 0.05
    assert d.thickness.max() <= 0.25 + 1e-6
    assert np.all(np.isfinite(d.x)) and np.all(np.isfinite(d.y))


def test_deterministic():
    x, y = _pixels(48)
    a = classify(x, y, 69)
    b = classify(x.copy(), y.copy(), 69)
    assert a.tobytes() == b.tobytes()
