from __future__ import annotations

import numpy as np

from levelgen.world.hashing import khash, khash2i, rand
from levelgen.world.sites import (
    NEIGHBOUR_OFFSETS,
    SiteField,
    pair_hits,
    seam_field,
    site_field,
    worley3,
)


def _grid(n: int, lo: float, hi: float):
    xs = np.linspace(lo, hi, n, dtype=np.float32)
    return np.meshgrid(xs, xs[::-1])


def test_neighbourhood_order():
    expected = [(-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 0), (0, 1), (1, -1), (1, 0), (1, 1)]
    assert [tuple(int(v) for v in o) for o in NEIGHBOUR_OFFSETS] == expected


def test_site_field_matches_definition_for_one_point():
    seed = 69
    sf = site_field(np.float32(-0.25), np.float32(2.75), seed)
    assert sf.dist.shape == (9, 1)
    for k, (ox, oy) in enumerate(NEIGHBOUR_OFFSETS):
        lx, ly = int(-1 + ox), int(2 + oy)
        assert int(sf.lattice_x[k, 0]) == lx
        assert int(sf.lattice_y[k, 0]) == ly
        h = khash2i(lx, ly, seed)
        assert float(sf.px[k, 0]) == float(np.float32(lx) + rand(h)[0])
        assert float(sf.py[k, 0]) == float(np.float32(ly) + rand(h * np.uint32(1234125417))[0])
        assert bool(sf.open[k, 0]) == (int(khash(h)[0]) % 6 == 0)


def test_sites_stay_inside_their_cell():
    x, y = _grid(64, -6.0, 6.0)
    sf = site_field(x, y, 1234)
    assert np.all(sf.px >= sf.lattice_x) and np.all(sf.px <= sf.lattice_x + 1)
    assert np.all(sf.py >= sf.lattice_y) and np.all(sf.py <= sf.lattice_y + 1)
    assert np.all(np.isfinite(sf.dist))


def test_open_sites_are_about_one_in_six():
    x, y = _grid(200, -100.0, 100.0)
    sf = site_field(x, y, 69)
    frac = float(sf.open[4].mean())
    assert 0.10 < frac < 0.23


def test_ranking_is_stable_on_ties():
    dist = np.array([0.9, 0.2, 0.5, 0.2, 0.7, 0.2, 0.3, 0.8, 0.4], dtype=np.float32)[:, None]
    zeros = np.zeros_like(dist)
    sf = SiteField(
        lattice_x=zeros.astype(np.int32), lattice_y=zeros.astype(np.int32),
        px=zeros, py=zeros, open=np.zeros(dist.shape, dtype=bool), dist=dist,
    )
    assert sf.ranked()[:, 0].tolist() == [1, 3, 5, 6, 8, 2, 4, 7, 0]
    assert int(sf.nearest[0]) == 1


def test_nearest_is_minimum_distance():
    x, y = _grid(50, 0.0, 8.0)
    sf = site_field(x, y, 777)
    np.testing.assert_array_equal(sf.take(sf.dist, sf.nearest), sf.dist.min(axis=0))


def test_pair_hits_counts_ordered_pairs_with_nearest():
    d = np.array([0.30, 0.10, 0.15, 0.50, 0.12, 0.9, 0.9, 0.9, 0.9], dtype=np.float32)[:, None]
    nearest = np.array([1])
    # sites 2 and 4 are within 0.06 of the nearest; each counts as (n,k) and (k,n)
    assert int(pair_hits(d, nearest, np.float32(0.06))[0]) == 4
    assert int(pair_hits(d, nearest, np.float32(0.01))[0]) == 0


def test_worley3_sorted_squared_distances():
    x, y = _grid(40, -3.0, 5.0)
    w = worley3(x, y, 99)
    sf = site_field(x, y, 99)
    assert w.shape == (3,) + x.shape
    assert np.all(w[0] <= w[1]) and np.all(w[1] <= w[2])
    np.testing.assert_allclose(np.sqrt(w[0]), sf.dist.min(axis=0), rtol=1e-5, atol=1e-6)


def test_seam_field_marks_some_edges_only():
    x, y = _grid(128, 0.0, 8.0)
    s = seam_field(x, y, 69)
    assert s.min() >= 0.0
    assert 0.0 < float((s > 0).mean()) < 0.9
