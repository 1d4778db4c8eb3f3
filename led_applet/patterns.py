"""Built-in test patterns for the applet grid and separator bar."""

from __future__ import annotations

import numpy as np

from .protocol_config import BAR_CELLS, GRID_CELLS, GRID_COLS, GRID_ROWS, MAX_INTENSITY

GRID_PATTERNS = ("ramp", "checkerboard", "border", "solid", "clear", "gradient")
BAR_PATTERNS = ("vee", "ramp", "solid", "clear")


def create_test_pattern(pattern: str) -> np.ndarray:
    """
    Create a test pattern for the applet grid.

    Args:
        pattern: Pattern type ("ramp", "checkerboard", "border", "solid",
            "clear", "gradient")

    Returns:
        np.ndarray: uint8 array of shape (GRID_ROWS, GRID_COLS)

    Raises:
        ValueError: If pattern type is unknown
    """
    grid = np.zeros((GRID_ROWS, GRID_COLS), dtype=np.uint8)

    if pattern == "ramp":
        # 1..90 row-major
        grid[:, :] = np.arange(1, GRID_CELLS + 1).reshape(GRID_ROWS, GRID_COLS)
    elif pattern == "checkerboard":
        for y in range(GRID_ROWS):
            for x in range(GRID_COLS):
                grid[y, x] = MAX_INTENSITY if (x + y) % 2 == 0 else 0
    elif pattern == "border":
        grid[0, :] = MAX_INTENSITY
        grid[-1, :] = MAX_INTENSITY
        grid[:, 0] = MAX_INTENSITY
        grid[:, -1] = MAX_INTENSITY
    elif pattern == "solid":
        grid[:, :] = MAX_INTENSITY
    elif pattern == "clear":
        grid[:, :] = 0
    elif pattern == "gradient":
        # brightest at the top row
        levels = np.linspace(MAX_INTENSITY, 0, GRID_ROWS).round().astype(np.uint8)
        grid[:, :] = levels[:, np.newaxis]
    else:
        raise ValueError(f"Unknown test pattern: {pattern}")

    return grid


def create_bar_pattern(pattern: str) -> np.ndarray:
    """Create a test pattern for the separator bar (uint8, BAR_CELLS long)."""
    if pattern == "vee":
        return np.array([255, 150, 50, 10, 0, 10, 50, 150, 255], dtype=np.uint8)
    if pattern == "ramp":
        return np.linspace(0, MAX_INTENSITY, BAR_CELLS).round().astype(np.uint8)
    if pattern == "solid":
        return np.full(BAR_CELLS, MAX_INTENSITY, dtype=np.uint8)
    if pattern == "clear":
        return np.zeros(BAR_CELLS, dtype=np.uint8)
    raise ValueError(f"Unknown bar pattern: {pattern}")
