"""
Color constants and gradient helpers.

Colors are RGBA. The ``*_F32`` constants hold channels in 0-1 for float
drawing APIs; the ``*_U8`` constants hold 8-bit channels for image buffers.
"""

import logging
from typing import Sequence

import numpy as np

from ..errors import PreconditionError

logger = logging.getLogger(__name__)

BLACK_F32 = (0.0, 0.0, 0.0, 1.0)
GREY_F32 = (0.5, 0.5, 0.5, 1.0)
WHITE_F32 = (1.0, 1.0, 1.0, 1.0)

AEBLUE_U8 = (0, 0, 48, 255)
BLACK_U8 = (0, 0, 0, 255)
WHITE_U8 = (255, 255, 255, 255)


def _as_rgba_u8(color: Sequence[int], name: str) -> np.ndarray:
    channels = np.asarray(color)
    if channels.shape != (4,):
        raise PreconditionError(f"{name} must have 4 channels, got {tuple(color)!r}")
    if np.any(channels < 0) or np.any(channels > 255):
        raise PreconditionError(f"{name} channels must be between 0 and 255")
    return channels.astype(np.float64)


def color_range_linear(first: Sequence[int], last: Sequence[int], count: int) -> np.ndarray:
    """
    Generate a linear range of RGBA colors from ``first`` to ``last``.

    Each channel is interpolated in floating point and truncated back to
    8 bits. The first and last rows equal the endpoints exactly.

    Example, a spectrum from black to white:

        >>> black, white = (0, 0, 0, 255), (255, 255, 255, 255)
        >>> colors = color_range_linear(black, white, 256)
        >>> colors[10].tolist()
        [10, 10, 10, 255]

    Args:
        first: Starting RGBA color
        last: Final RGBA color
        count: Number of colors, at least 2

    Returns:
        uint8 array of shape (count, 4)

    Raises:
        PreconditionError: If count is less than 2
    """
    if count < 2:
        raise PreconditionError(f"Count must be 2 or more: {count}")

    start = _as_rgba_u8(first, "first")
    stop = _as_rgba_u8(last, "last")

    # float64 linspace lands on ``stop`` exactly; stepping by a float32 delta
    # can truncate the last row one below it.
    steps = np.linspace(start, stop, num=count, endpoint=True)
    return np.floor(steps).astype(np.uint8)


def segment_colors(segment_count: int, first: Sequence[int], last: Sequence[int],
                   gradient_count: int = 256) -> np.ndarray:
    """
    Assign a gradient color to every path segment in drawing order.

    Args:
        segment_count: Number of segments to color
        first: Color of the first segment
        last: Color of the last segment
        gradient_count: Number of distinct colors in the gradient

    Returns:
        uint8 array of shape (segment_count, 4)
    """
    gradient = color_range_linear(first, last, gradient_count)
    if segment_count == 0:
        return np.empty((0, 4), dtype=np.uint8)
    if segment_count == 1:
        return gradient[:1].copy()

    positions = np.arange(segment_count) * (gradient_count - 1) // (segment_count - 1)
    return gradient[positions]
