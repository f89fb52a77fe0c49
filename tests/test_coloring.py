import numpy as np
import pytest

from lsystem_fractal.errors import PreconditionError
from lsystem_fractal.rendering.coloring import (
    BLACK_U8,
    WHITE_U8,
    color_range_linear,
    segment_colors,
)

BLACK = [0, 0, 0, 255]
WHITE = [255, 255, 255, 255]


class TestColorRangeLinear:
    def test_black_to_white(self) -> None:
        colors = color_range_linear(BLACK, WHITE, 256)
        assert colors.shape == (256, 4)
        assert colors.dtype == np.uint8
        assert colors[0].tolist() == BLACK
        assert colors[255].tolist() == WHITE
        assert colors[10].tolist() == [10, 10, 10, 255]

    def test_saturating_gradient(self) -> None:
        count = 128
        colors = color_range_linear(BLACK, WHITE, count)
        assert colors[min(count - 1, 0)].tolist() == BLACK
        assert colors[min(count - 1, count - 1)].tolist() == WHITE
        assert colors[min(count - 1, 255)].tolist() == WHITE
        assert colors[min(count - 1, 10)].tolist() == [20, 20, 20, 255]

    def test_two_colors(self) -> None:
        colors = color_range_linear(BLACK, WHITE, 2)
        assert colors.tolist() == [BLACK, WHITE]

    @pytest.mark.parametrize("count", [0, 1, -5])
    def test_count_floor(self, count) -> None:
        with pytest.raises(PreconditionError, match="Count must be 2 or more"):
            color_range_linear(BLACK, WHITE, count)

    @pytest.mark.parametrize("count", [3, 7, 8, 13, 100, 255, 1000])
    def test_last_row_is_last_color(self, count) -> None:
        colors = color_range_linear(BLACK, WHITE, count)
        assert colors[-1].tolist() == WHITE
        assert np.all(np.diff(colors[:, 0].astype(int)) >= 0)

    def test_descending_endpoints_exact(self) -> None:
        first, last = (200, 17, 99, 255), (3, 240, 99, 0)
        colors = color_range_linear(first, last, 37)
        assert tuple(colors[0]) == first
        assert tuple(colors[-1]) == last

    def test_channels_monotonic(self) -> None:
        colors = color_range_linear((200, 17, 99, 255), (3, 240, 99, 0), 50).astype(int)
        diffs = np.diff(colors, axis=0)
        assert np.all(diffs[:, 0] <= 0)
        assert np.all(diffs[:, 1] >= 0)
        assert np.all(diffs[:, 2] == 0)
        assert np.all(diffs[:, 3] <= 0)

    def test_truncates(self) -> None:
        # 255 / 2 = 127.5 in the middle; truncated, not rounded.
        colors = color_range_linear(BLACK, WHITE, 3)
        assert colors[1].tolist() == [127, 127, 127, 255]

    def test_rejects_bad_channels(self) -> None:
        with pytest.raises(PreconditionError):
            color_range_linear((0, 0, 0), WHITE, 4)
        with pytest.raises(PreconditionError):
            color_range_linear((0, 0, 0, 300), WHITE, 4)


class TestSegmentColors:
    def test_endpoints(self) -> None:
        colors = segment_colors(10, BLACK_U8, WHITE_U8, 256)
        assert colors.shape == (10, 4)
        assert colors[0].tolist() == list(BLACK_U8)
        assert colors[-1].tolist() == list(WHITE_U8)

    def test_more_segments_than_colors(self) -> None:
        colors = segment_colors(1000, BLACK_U8, WHITE_U8, 4)
        assert len(np.unique(colors, axis=0)) == 4

    def test_degenerate_counts(self) -> None:
        assert segment_colors(0, BLACK_U8, WHITE_U8).shape == (0, 4)
        assert segment_colors(1, BLACK_U8, WHITE_U8).tolist() == [list(BLACK_U8)]
