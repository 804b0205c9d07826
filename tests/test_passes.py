"""Tests for the binning, filling, correction and merge passes."""

import copy

import pytest

from binmarkers.exceptions import ConfigurationError
from binmarkers.models import Genotype, Marker
from binmarkers.passes import (
    Binner, BreakpointFiller, Corrector, Filler, Merger, aggregate_markers
)


class TestBinner:
    """Block binning with majority rules."""

    def test_aggregate_coordinates(self):
        markers = [
            Marker("scf1", 10, 5, 2, [Genotype.A]),
            Marker("scf1", 20, 5, 3, [Genotype.A]),
            Marker("scf1", 30, 5, 4, [Genotype.B]),
        ]
        binned = Binner(window=10_000).process(markers)

        assert len(binned) == 1
        assert binned[0].start == 10
        assert binned[0].width == 25
        assert binned[0].source_count == 9
        assert binned[0].genotypes == [Genotype.A]
        assert binned[0].name == "scf1_10:25:9"

    def test_window_splits_runs(self, make_markers, as_codes):
        markers = make_markers(["aa", "ab", "bb"], starts=[1, 5000, 12000])
        binned = Binner(window=10_000).process(markers)

        assert [(m.start, m.width, m.source_count) for m in binned] == [
            (1, 5000, 2),
            (12000, 1, 1),
        ]
        assert as_codes(binned) == ["a-", "bb"]

    def test_window_compares_end_of_marker(self, make_markers):
        markers = make_markers(["a", "a"], starts=[1, 95], width=10)
        # second marker ends at 104, 103 bp past the first start
        assert len(Binner(window=103).process(markers)) == 1
        assert len(Binner(window=102).process(markers)) == 2

    def test_consensus_per_sample(self, make_markers, as_codes):
        markers = make_markers(["ab-", "a-h", "bbh"], starts=[1, 2, 3])
        binned = Binner(window=100).process(markers)
        assert as_codes(binned) == ["abh"]

    def test_empty_scaffold(self):
        assert Binner().process([]) == []


class TestMerger:
    """Merging of identical adjacent markers."""

    def test_identical_markers_merge(self, make_markers, as_codes):
        markers = make_markers(["abh", "abh", "abb"], starts=[100, 200, 300])
        merged = Merger().process(markers)

        assert [m.name for m in merged] == ["scf1_100:101:2", "scf1_300:1:1"]
        assert as_codes(merged) == ["abh", "abb"]

    def test_missing_is_compared_literally(self, make_markers):
        markers = make_markers(["a-", "a-", "aa"])
        assert [m.source_count for m in Merger().process(markers)] == [2, 1]

    def test_merge_is_idempotent(self, make_markers):
        markers = make_markers(["ab", "ab", "bb", "bb", "bb", "ab", "hh"])
        once = Merger().process(markers)
        twice = Merger().process(once)
        assert [m.to_dict() for m in twice] == [m.to_dict() for m in once]

    def test_aggregate_keeps_first_vector(self, make_markers):
        markers = make_markers(["ab", "ab"], starts=[5, 7], width=3, count=2)
        marker = aggregate_markers(markers, list(markers[0].genotypes))
        assert (marker.start, marker.width, marker.source_count) == (5, 5, 4)


class TestFiller:
    """Majority-rule gap filling."""

    def test_fills_from_surroundings(self, make_markers, as_codes):
        markers = make_markers(["a", "a", "a", "-", "a", "b", "a"])
        filled = Filler(half_width=3).process(markers)

        assert filled == 1
        assert as_codes(markers) == ["a", "a", "a", "a", "a", "b", "a"]

    def test_tie_stays_missing(self, make_markers, as_codes):
        markers = make_markers(["a", "a", "a", "-", "b", "b", "b"])
        assert Filler(half_width=3).process(markers) == 0
        assert as_codes(markers)[3] == "-"

    def test_minimum_evidence_gate(self, make_markers, as_codes):
        rows = ["a", "a", "-", "a", "a"]
        # five markers give four evidence markers, fewer than 2 * 3
        markers = make_markers(rows)
        assert Filler(half_width=3).process(markers) == 0
        assert as_codes(markers) == rows

        markers = make_markers(rows)
        assert Filler(half_width=3, minimum=5).process(markers) == 1
        assert as_codes(markers) == ["a"] * 5

    def test_skip_edges(self, make_markers, as_codes):
        markers = make_markers(["-", "a", "a", "a", "a", "a", "-"])
        assert Filler(half_width=2, skip_edges=True).process(markers) == 0

        markers = make_markers(["-", "a", "a", "a", "a", "a", "-"])
        assert Filler(half_width=2).process(markers) == 2
        assert as_codes(markers) == ["a"] * 7

    def test_earlier_fills_are_visible_later(self, make_markers, as_codes):
        markers = make_markers(["a", "-", "-", "-"])
        assert Filler(half_width=1).process(markers) == 3
        assert as_codes(markers) == ["a", "a", "a", "a"]

    def test_called_cells_never_change(self, make_markers, as_codes):
        rows = ["ab-", "-bb", "aab", "b-h", "abh", "--a", "hab", "a-b", "bba"]
        markers = make_markers(rows)
        Filler(half_width=2, minimum=3).process(markers)
        once = as_codes(markers)
        Filler(half_width=2, minimum=3).process(markers)
        twice = as_codes(markers)

        for before, after, row in zip(once, twice, rows):
            for original, first, second in zip(row, before, after):
                if original != "-":
                    assert first == second == original
                if first != "-":
                    assert second == first

    def test_single_marker_scaffold(self, make_markers):
        assert Filler().process(make_markers(["-"])) == 0


class TestBreakpointFiller:
    """Breakpoint filling from other samples' patterns."""

    def test_fills_with_preferred_side(self, make_markers, as_codes):
        markers = make_markers(["aab", "-ab", "bba"])
        assert BreakpointFiller(half_width=1).process(markers) == 1
        assert as_codes(markers)[1] == "aab"

    def test_fills_below_side(self, make_markers, as_codes):
        markers = make_markers(["aab", "-ba", "bba"])
        assert BreakpointFiller(half_width=1).process(markers) == 1
        assert as_codes(markers)[1] == "bba"

    def test_tie_stays_missing(self, make_markers, as_codes):
        markers = make_markers(["aab", "-aa", "bba"])
        assert BreakpointFiller(half_width=1).process(markers) == 0
        assert as_codes(markers)[1] == "-aa"

    def test_samples_without_breakpoint_do_not_vote(self, make_markers, as_codes):
        # third and fourth samples are constant, only the second one votes
        markers = make_markers(["aaaa", "-abb", "bbaa"])
        BreakpointFiller(half_width=1).process(markers)
        assert as_codes(markers)[1] == "aabb"

    def test_requires_uniform_blocks(self, make_markers, as_codes):
        rows = ["aa", "ba", "-a", "bb", "bb"]
        markers = make_markers(rows)
        assert BreakpointFiller(half_width=2).process(markers) == 0
        assert as_codes(markers) == rows

    def test_requires_uniform_block_below(self, make_markers, as_codes):
        # only the nearest marker below switches, the next one switches back
        rows = ["aa", "aa", "-b", "bb", "ab"]
        markers = make_markers(rows)
        assert BreakpointFiller(half_width=2).process(markers) == 0
        assert as_codes(markers) == rows

    def test_fills_between_wide_blocks(self, make_markers, as_codes):
        markers = make_markers(["aab", "aab", "-ab", "bba", "bba"])
        assert BreakpointFiller(half_width=2).process(markers) == 1
        assert as_codes(markers)[2] == "aab"

    def test_requires_different_blocks(self, make_markers, as_codes):
        markers = make_markers(["aa", "-a", "ab"])
        assert BreakpointFiller(half_width=1).process(markers) == 0
        assert as_codes(markers)[1] == "-a"

    def test_edges_are_not_eligible(self, make_markers, as_codes):
        rows = ["-a", "ab", "bb", "bb"]
        markers = make_markers(rows)
        BreakpointFiller(half_width=1).process(markers)
        assert as_codes(markers)[0] == "-a"


class TestCorrector:
    """Strict miscall correction."""

    def test_corrects_isolated_call(self, make_markers, as_codes):
        markers = make_markers(["a", "b", "a"])
        assert Corrector(half_width=1).process(markers) == 1
        assert as_codes(markers) == ["a", "a", "a"]

    def test_missing_neighbour_blocks_correction(self, make_markers, as_codes):
        markers = make_markers(["a", "b", "-"])
        assert Corrector(half_width=1).process(markers) == 0
        assert as_codes(markers) == ["a", "b", "-"]

    def test_mixed_neighbours_block_correction(self, make_markers, as_codes):
        rows = ["a", "a", "h", "b", "a"]
        markers = make_markers(rows)
        assert Corrector(half_width=2).process(markers) == 0
        assert as_codes(markers) == rows

    def test_corrects_edge_marker(self, make_markers, as_codes):
        markers = make_markers(["h", "b", "b", "b", "b"])
        assert Corrector(half_width=2).process(markers) == 1
        assert as_codes(markers) == ["b"] * 5

    def test_skip_edges(self, make_markers, as_codes):
        markers = make_markers(["h", "b", "b", "b", "b"])
        assert Corrector(half_width=2, skip_edges=True).process(markers) == 0
        assert as_codes(markers)[0] == "h"

    def test_columns_are_independent(self, make_markers, as_codes):
        markers = make_markers(["ab", "bb", "ab"])
        Corrector(half_width=1).process(markers)
        assert as_codes(markers) == ["ab", "ab", "ab"]

    def test_does_not_touch_missing(self, make_markers):
        markers = make_markers(["a", "-", "a"])
        before = copy.deepcopy(markers)
        Corrector(half_width=1).process(markers)
        assert markers == before


@pytest.mark.parametrize("build", [
    lambda: Binner(window=0),
    lambda: Binner(window=-5),
    lambda: Filler(half_width=0),
    lambda: Filler(half_width=3, minimum=1),
    lambda: BreakpointFiller(half_width=0),
    lambda: Corrector(half_width=-1),
    lambda: Corrector(half_width=5, minimum=1),
])
def test_invalid_pass_parameters(build):
    with pytest.raises(ConfigurationError):
        build()
