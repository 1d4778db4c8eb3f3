"""
Local validation for applet arguments and buffers.

These checks run before any I/O. Capabilities that depend on the server's
state (slot ownership, grid on applet 0, bar writes outside variable mode)
are left to the server to reject.
"""

import numbers

import numpy as np

from .errors import (
    AppNumberError,
    BarShapeError,
    GridShapeError,
    IndexOutOfBoundsError,
    IntensityError,
)
from .protocol_config import (
    BAR_CELLS,
    GRID_COLS,
    GRID_ROWS,
    MAX_APP_NUM,
    MAX_INTENSITY,
    MIN_INTENSITY,
)


def validate_app_num(app_num: int) -> int:
    """
    Validate an applet number.

    Args:
        app_num: Applet slot, 0 for the status bar or 1-3 for a grid slot

    Returns:
        int: The applet number

    Raises:
        AppNumberError: If app_num is not an integer in [0, MAX_APP_NUM]
    """
    if isinstance(app_num, bool) or not isinstance(app_num, numbers.Integral):
        raise AppNumberError(f"app_num must be an integer, got {app_num!r}")
    if not (0 <= app_num <= MAX_APP_NUM):
        raise AppNumberError(f"app_num must be 0-{MAX_APP_NUM}, got {app_num}")
    return int(app_num)


def validate_intensity(value: int) -> int:
    """Validate a single LED intensity and return it as an int."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise IntensityError(f"Intensity must be an integer, got {value!r}")
    if not (MIN_INTENSITY <= value <= MAX_INTENSITY):
        raise IntensityError(
            f"Intensity must be {MIN_INTENSITY}-{MAX_INTENSITY}, got {value}"
        )
    return int(value)


def validate_point(x: int, y: int) -> None:
    """
    Validate a grid coordinate.

    Args:
        x: Column, 0 is the left edge
        y: Row, 0 is the top edge

    Raises:
        IndexOutOfBoundsError: If the coordinate lies outside the grid
    """
    for name, index, limit in (("x", x, GRID_COLS), ("y", y, GRID_ROWS)):
        if isinstance(index, bool) or not isinstance(index, numbers.Integral):
            raise IndexOutOfBoundsError(f"{name} must be an integer, got {index!r}")
        if not (0 <= index < limit):
            raise IndexOutOfBoundsError(
                f"{name}={index} out of bounds for {GRID_COLS}x{GRID_ROWS} grid"
            )


def _as_intensity_array(values, shape: tuple, shape_error: type) -> np.ndarray:
    try:
        arr = np.asarray(values)
    except ValueError as e:
        # ragged nested sequences
        raise shape_error(f"Expected shape {shape}: {e}") from e
    if arr.shape != shape:
        raise shape_error(f"Expected shape {shape}, got {arr.shape}")
    if arr.dtype.kind not in "iu":
        raise IntensityError(f"Intensities must be integers, got dtype {arr.dtype}")
    if arr.size and (arr.min() < MIN_INTENSITY or arr.max() > MAX_INTENSITY):
        raise IntensityError(
            f"Intensities must be {MIN_INTENSITY}-{MAX_INTENSITY}, "
            f"got range {arr.min()}..{arr.max()}"
        )
    return arr.astype(np.uint8)


def validate_grid(matrix) -> np.ndarray:
    """
    Validate a full grid and return it as a fresh uint8 array.

    Args:
        matrix: Array-like of GRID_ROWS rows by GRID_COLS columns

    Returns:
        np.ndarray: uint8 copy of shape (GRID_ROWS, GRID_COLS)

    Raises:
        GridShapeError: If the dimensions are wrong
        IntensityError: If any value is not an integer in 0-255
    """
    return _as_intensity_array(matrix, (GRID_ROWS, GRID_COLS), GridShapeError)


def validate_bar(array) -> np.ndarray:
    """Validate a full separator bar and return it as a fresh uint8 array."""
    return _as_intensity_array(array, (BAR_CELLS,), BarShapeError)
