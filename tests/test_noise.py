from __future__ import annotations

import numpy as np

from levelgen.world.hashing import khash2i, rand, wrapping_mul
from levelgen.world.noise import frac_noise, noise2d, noise2d_value, ridge_noise
from levelgen.world.salts import OCTAVE_SALTS


def test_noise2d_equals_corner_value_on_lattice():
    for seed in [1, 69, 1057917, 0xFFFFFFFF]:
        for ix, iy in [(0, 0), (3, 5), (-2, 7), (-4, -9), (11, -1)]:
            expected = float(rand(khash2i(ix, iy, seed))[0])
            assert noise2d_value(float(ix), float(iy), seed) == expected


def test_noise2d_continuous_across_cell_edges():
    seed = 69
    for edge in [-3.0, 0.0, 1.0, 5.0]:
        y = np.full(3, 0.37, dtype=np.float32)
        x = np.array([edge - 1e-4, edge, edge + 1e-4], dtype=np.float32)
        n = noise2d(x, y, seed)
        assert abs(float(n[0]) - float(n[1])) < 1e-3
        assert abs(float(n[2]) - float(n[1])) < 1e-3


def test_noise2d_deterministic_and_seeded():
    xs = np.linspace(-4.0, 4.0, 97, dtype=np.float32)
    a = noise2d(xs, xs[::-1], 69)
    b = noise2d(xs, xs[::-1], 69)
    c = noise2d(xs, xs[::-1], 70)
    assert a.dtype == np.float32
    np.testing.assert_array_equal(a, b)
    assert not np.array_equal(a, c)
    assert a.min() >= 0.0 and a.max() <= 1.0 + 1e-6


def test_frac_noise_divides_only_last_octave():
    seed = 1515177 * 69
    x = np.linspace(0.1, 7.9, 33, dtype=np.float32)
    y = np.linspace(3.3, -2.1, 33, dtype=np.float32)
    s1, s2, s3 = (wrapping_mul(seed, k) for k in OCTAVE_SALTS)
    f32 = np.float32
    expected = (
        f32(1.0) * noise2d(x, y, seed)
        + f32(0.5) * noise2d(x * f32(2.0), y * f32(2.0), s1)
        + f32(0.25) * noise2d(x * f32(4.0), y * f32(4.0), s2)
        + f32(0.125) * noise2d(x * f32(8.0), y * f32(8.0), s3) / f32(1.875)
    )
    np.testing.assert_array_equal(frac_noise(x, y, seed), expected)


def test_ridge_noise_folds_frac_noise():
    seed = 4242
    x = np.linspace(-2.0, 2.0, 41, dtype=np.float32)
    y = np.linspace(0.0, 6.0, 41, dtype=np.float32)
    r = ridge_noise(x, y, seed)
    f = frac_noise(x, y, seed)
    np.testing.assert_allclose(r, np.abs(f - 0.5) * 2.0, rtol=0, atol=1e-6)
    assert r.min() >= 0.0


def test_noise2d_just_below_lattice_line_is_the_corner_value():
    # floorfrac(-1e-8) == (-1, 1.0), and smoothstep(1) == 1 picks the x=0 corner
    for seed in [69, 4242]:
        expected = float(rand(khash2i(0, 0, seed))[0])
        assert noise2d_value(-1e-8, 0.0, seed) == expected
