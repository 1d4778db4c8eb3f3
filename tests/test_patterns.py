"""Tests for built-in grid and bar patterns."""

import numpy as np
import pytest

from led_applet.patterns import (
    BAR_PATTERNS,
    GRID_PATTERNS,
    create_bar_pattern,
    create_test_pattern,
)


def test_grid_patterns_shape_and_dtype():
    for name in GRID_PATTERNS:
        grid = create_test_pattern(name)
        assert grid.shape == (10, 9), name
        assert grid.dtype == np.uint8, name


def test_grid_pattern_contents():
    checks = {
        "ramp": lambda g: g.reshape(-1).tolist() == list(range(1, 91)),
        "checkerboard": lambda g: g[0, 0] == 255 and g[0, 1] == 0 and g[1, 0] == 0,
        "border": lambda g: np.all(g[0, :] == 255) and np.all(g[:, -1] == 255) and g[5, 4] == 0,
        "solid": lambda g: np.all(g == 255),
        "clear": lambda g: not g.any(),
        "gradient": lambda g: g[0, 0] == 255 and g[-1, 0] == 0 and np.all(np.diff(g[:, 0].astype(int)) <= 0),
    }
    for name, check in checks.items():
        assert check(create_test_pattern(name)), f"Pattern {name} failed validation"


def test_bar_patterns():
    for name in BAR_PATTERNS:
        bar = create_bar_pattern(name)
        assert bar.shape == (9,)
        assert bar.dtype == np.uint8
    assert create_bar_pattern("vee").tolist() == [255, 150, 50, 10, 0, 10, 50, 150, 255]
    ramp = create_bar_pattern("ramp")
    assert ramp[0] == 0 and ramp[-1] == 255


def test_unknown_patterns():
    with pytest.raises(ValueError):
        create_test_pattern("plaid")
    with pytest.raises(ValueError):
        create_bar_pattern("plaid")
