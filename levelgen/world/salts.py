from __future__ import annotations

# Seed salt table. Each sampling site multiplies the base seed (wrapping, u32)
# by its own constant. Changing any value changes every generated level, so
# bump SALT_TABLE_VERSION together with the golden values in tests/test_surface.py.
SALT_TABLE_VERSION = 1

# Large-scale domain warp, sampled at 8x
WARP1_X_SALT = 1057917
WARP1_Y_SALT = 15735697

# Fine warp, sampled at the warped 32x coordinates
WARP2_X_SALT = 1541577
WARP2_Y_SALT = 1561317

# Ridge walls (ridge_noise at the warped 8x coordinates)
RIDGE_SALT = 1515177

# Boulder masks on the un-warped coordinates
BOULDER_FINE_SALT = 151591714  # 96x, > 0.8
BOULDER_COARSE_SALT = 1571577  # 16x, > 0.6

# frac_noise octaves 1..3 (octave 0 uses the seed as given)
OCTAVE_SALTS = (1238715, 9148167, 2442347)

# Second jitter axis of a cellular site
SITE_JITTER_Y_SALT = 1234125417
