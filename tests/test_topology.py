"""Tests for fragment detection, labelling, holes and canvases."""

from __future__ import annotations

import numpy as np
import pytest
from skimage.measure import label as sklabel

from tilemorph.matrix import ValidationError
from tilemorph.morphology import dilate, erode
from tilemorph.topology import (
    Fragment,
    FragmentStatistics,
    calculate_statistics,
    canvas_summary,
    count_holes,
    create_labeled_matrix,
    detect_canvases,
    detect_fragments,
)


def _fragment(fid: int, size: int) -> Fragment:
    return Fragment(id=fid, pixel_count=size, pixels=(), min_x=0, max_x=0, min_y=0, max_y=0)


class TestDetectFragments:
    def test_none_rejected(self):
        with pytest.raises(ValidationError):
            detect_fragments(None)

    def test_ragged_rows_rejected(self):
        with pytest.raises(ValidationError):
            detect_fragments([[1, 0], [1]])

    def test_float_values_rejected(self):
        with pytest.raises(ValidationError):
            detect_fragments([[0.6, 1.7]])

    def test_bool_matrix_accepted(self):
        frags = detect_fragments(np.array([[True, False], [False, True]]))
        assert len(frags) == 1

    def test_diagonal_pixels_are_one_fragment(self):
        frags = detect_fragments([[1, 0], [0, 1]])
        assert len(frags) == 1
        assert frags[0].pixel_count == 2

    def test_ids_follow_raster_order(self):
        frags = detect_fragments([[0, 0, 1], [1, 0, 0]])
        assert [f.id for f in frags] == [1, 2]
        assert frags[0].pixels == ((2, 0),)
        assert frags[1].pixels == ((0, 1),)

    def test_bounding_box(self):
        m = [
            [0, 0, 0, 0],
            [0, 1, 0, 0],
            [0, 1, 1, 1],
        ]
        (frag,) = detect_fragments(m)
        assert (frag.min_x, frag.max_x, frag.min_y, frag.max_y) == (1, 3, 1, 2)
        assert frag.width == 3 and frag.height == 2
        assert str(frag) == "Fragment 1: 4 pixels, BBox: (1,1)-(3,2)"

    def test_only_ones_are_foreground(self):
        frags = detect_fragments([[2, 1, 3]])
        assert len(frags) == 1
        assert frags[0].pixels == ((1, 0),)

    def test_empty_matrix(self):
        assert detect_fragments(np.zeros((3, 3), dtype=int)) == []

    def test_large_region_without_recursion(self):
        frags = detect_fragments(np.ones((200, 200), dtype=int))
        assert len(frags) == 1
        assert frags[0].pixel_count == 40000

    def test_matches_skimage_labelling(self, random_binary):
        assert len(detect_fragments(random_binary)) == sklabel(random_binary, connectivity=2).max()


class TestLabeledMatrix:
    def test_ids_written_per_pixel(self):
        m = [
            [1, 0, 1],
            [0, 0, 1],
            [1, 0, 0],
        ]
        assert create_labeled_matrix(m).tolist() == [
            [1, 0, 2],
            [0, 0, 2],
            [3, 0, 0],
        ]

    def test_consistent_with_fragments(self, random_binary):
        labeled = create_labeled_matrix(random_binary)
        for frag in detect_fragments(random_binary):
            for x, y in frag.pixels:
                assert labeled[y, x] == frag.id
        assert labeled.shape == random_binary.shape


class TestStatistics:
    def test_three_fragments(self):
        stats = calculate_statistics([_fragment(1, 10), _fragment(2, 20), _fragment(3, 30)])
        assert stats == FragmentStatistics(
            fragment_count=3, average_size=20.0, largest_size=30, smallest_size=10, total_pixels=60
        )

    def test_empty_list_is_all_zero(self):
        assert calculate_statistics([]) == FragmentStatistics()

    def test_none_rejected(self):
        with pytest.raises(ValidationError):
            calculate_statistics(None)


class TestHoles:
    def test_ring_has_one_hole(self, ring_5x5):
        assert count_holes(ring_5x5) == 1

    def test_block_has_no_hole(self, square_3x3):
        assert count_holes(square_3x3) == 0


class TestCanvases:
    def test_diagonal_is_two_canvases(self):
        canvases = detect_canvases([[1, 0], [0, 1]])
        assert [c.size for c in canvases] == [1, 1]
        assert all(c.filled for c in canvases)

    def test_empty_regions(self, ring_5x5):
        canvases = detect_canvases(ring_5x5, filled=False)
        assert sorted(c.size for c in canvases) == [1, 16]
        assert not any(c.filled for c in canvases)

    def test_bounding_box(self, ring_5x5):
        (canvas,) = detect_canvases(ring_5x5)
        assert canvas.bounding_box() == (1, 3, 1, 3)
        assert str(canvas) == "Canvas #1: 8 cells (Filled)"

    def test_summary(self, ring_5x5):
        assert canvas_summary([]) == "No canvases detected"
        text = canvas_summary(detect_canvases(ring_5x5) + detect_canvases(ring_5x5, filled=False))
        assert "Total Canvases: 3" in text
        assert "Filled Regions: 1 (8 cells)" in text
        assert "Empty Regions: 2 (17 cells)" in text


class TestMorphology:
    def test_dilate_grows_pixel(self):
        m = np.zeros((5, 5), dtype=int)
        m[2, 2] = 1
        out = dilate(m)
        assert out[1:4, 1:4].sum() == 9
        assert out.sum() == 9

    def test_erode_keeps_core(self, square_3x3):
        out = erode(square_3x3)
        assert out.sum() == 1
        assert out[2, 2] == 1

    def test_border_untouched(self):
        m = np.ones((3, 3), dtype=int)
        m[0, 0] = 0
        assert np.array_equal(dilate(m)[0], m[0])
