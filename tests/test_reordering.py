"""Tests for position reconciliation within and between scopes."""

import copy

import pytest

pytestmark = pytest.mark.unit

from recipe_sections.exceptions import InvalidIndexError
from recipe_sections.services.section.reordering import (
    auto_correct_positions,
    detect_position_conflicts,
    find_position_problems,
    is_rank,
    move_between_scopes,
    next_position,
    reindex_positions,
    reorder_within_scope,
    sort_by_rank,
)
from tests.conftest import ids, positions


def make_items(*pairs):
    """Build items from (id, position) pairs."""
    return [{"id": item_id, "position": position} for item_id, position in pairs]


class TestReorderWithinScope:
    """Tests for moving an item inside one scope."""

    def test_move_first_to_last(self):
        """Test the first item moved to the end is renumbered with its siblings."""
        items = make_items(("a", 0), ("b", 1), ("c", 2))
        result = reorder_within_scope(items, 0, 2)
        assert ids(result) == ["b", "c", "a"]
        assert positions(result) == [0, 1, 2]

    def test_move_last_to_first(self):
        """Test moving the last item to the front."""
        items = make_items(("a", 0), ("b", 1), ("c", 2), ("d", 3))
        result = reorder_within_scope(items, 3, 0)
        assert ids(result) == ["d", "a", "b", "c"]
        assert positions(result) == [0, 1, 2, 3]

    def test_only_items_between_indices_shift(self):
        """Test items outside the moved range keep their order and rank."""
        items = make_items(("a", 0), ("b", 1), ("c", 2), ("d", 3), ("e", 4))
        result = reorder_within_scope(items, 1, 3)
        assert ids(result) == ["a", "c", "d", "b", "e"]
        assert result[0]["position"] == 0
        assert result[4]["position"] == 4

    def test_same_index_is_noop(self):
        """Test moving an item onto itself leaves the order unchanged."""
        items = make_items(("a", 0), ("b", 1))
        result = reorder_within_scope(items, 1, 1)
        assert result == items

    def test_empty_scope(self):
        """Test an empty scope returns an empty list."""
        assert reorder_within_scope([], 0, 0) == []

    def test_single_item_scope(self):
        """Test a one-item scope is trivially valid."""
        result = reorder_within_scope(make_items(("a", 5)), 0, 0)
        assert ids(result) == ["a"]

    def test_out_of_range_source_raises(self):
        """Test an out-of-range source index is a hard failure."""
        items = make_items(("a", 0), ("b", 1))
        with pytest.raises(InvalidIndexError) as exc_info:
            reorder_within_scope(items, 5, 0)
        assert exc_info.value.index == 5
        assert exc_info.value.length == 2

    def test_out_of_range_destination_raises(self):
        """Test destination indices are not clamped."""
        items = make_items(("a", 0), ("b", 1))
        with pytest.raises(InvalidIndexError):
            reorder_within_scope(items, 0, 2)
        with pytest.raises(IndexError):
            reorder_within_scope(items, -1, 0)

    def test_input_not_mutated(self):
        """Test the input list and its items are left untouched."""
        items = make_items(("a", 0), ("b", 1), ("c", 2))
        snapshot = copy.deepcopy(items)
        reorder_within_scope(items, 0, 2)
        assert items == snapshot

    def test_preserves_domain_fields(self):
        """Test fields other than position are carried through."""
        items = [
            {"id": "a", "position": 0, "name": "Flour", "amount": 2},
            {"id": "b", "position": 1, "name": "Sugar", "amount": 1},
        ]
        result = reorder_within_scope(items, 1, 0)
        assert result[0] == {"id": "b", "position": 0, "name": "Sugar", "amount": 1}

    def test_order_key_for_sections(self):
        """Test section lists are renumbered on their order field."""
        sections = [{"id": "s1", "order": 0}, {"id": "s2", "order": 1}]
        result = reorder_within_scope(sections, 0, 1, key="order")
        assert ids(result) == ["s2", "s1"]
        assert positions(result, "order") == [0, 1]
        assert "position" not in result[0]

    @pytest.mark.parametrize("size", [2, 3, 7])
    def test_every_move_keeps_ids_and_contiguity(self, size):
        """Test all index pairs preserve the id set and yield 0..n-1."""
        items = make_items(*[(f"i{n}", n) for n in range(size)])
        for source in range(size):
            for dest in range(size):
                result = reorder_within_scope(items, source, dest)
                assert sorted(ids(result)) == sorted(ids(items))
                assert positions(result) == list(range(size))


class TestMoveBetweenScopes:
    """Tests for moving an item across scopes."""

    def test_move_to_end_of_destination(self):
        """Test moving the first source item to the end of the destination."""
        source = make_items(("a", 0), ("b", 1))
        dest = make_items(("c", 0))
        result = move_between_scopes(source, dest, 0, 1)
        assert result.source_items == [{"id": "b", "position": 0}]
        assert result.dest_items == [{"id": "c", "position": 0}, {"id": "a", "position": 1}]
        assert result.moved_item == {"id": "a", "position": 1}

    def test_move_into_empty_destination(self):
        """Test moving into an empty scope."""
        result = move_between_scopes(make_items(("a", 0)), [], 0, 0)
        assert result.source_items == []
        assert result.dest_items == [{"id": "a", "position": 0}]

    def test_destination_index_is_clamped(self):
        """Test destination indices beyond either end are clamped, not rejected."""
        source = make_items(("a", 0), ("b", 1))
        dest = make_items(("c", 0), ("d", 1))

        high = move_between_scopes(source, dest, 0, 99)
        assert ids(high.dest_items) == ["c", "d", "a"]

        low = move_between_scopes(source, dest, 1, -4)
        assert ids(low.dest_items) == ["b", "c", "d"]

    def test_source_index_is_range_checked(self):
        """Test an invalid source index still fails."""
        with pytest.raises(InvalidIndexError):
            move_between_scopes(make_items(("a", 0)), [], 1, 0)
        with pytest.raises(InvalidIndexError):
            move_between_scopes([], make_items(("a", 0)), 0, 0)

    def test_destination_ranks_are_local(self):
        """Test destination positions reflect rank in the destination only."""
        source = make_items(("a", 0), ("b", 1), ("c", 2))
        dest = make_items(("x", 0))
        result = move_between_scopes(source, dest, 2, 0)
        assert result.dest_items == [{"id": "c", "position": 0}, {"id": "x", "position": 1}]
        assert positions(result.source_items) == [0, 1]

    def test_lengths_change_by_one(self):
        """Test source shrinks by one and destination grows by one."""
        source = make_items(*[(f"s{n}", n) for n in range(4)])
        dest = make_items(*[(f"d{n}", n) for n in range(3)])
        for source_index in range(4):
            for dest_index in range(4):
                result = move_between_scopes(source, dest, source_index, dest_index)
                assert len(result.source_items) == 3
                assert len(result.dest_items) == 4
                assert positions(result.source_items) == [0, 1, 2]
                assert positions(result.dest_items) == [0, 1, 2, 3]

    def test_inputs_not_mutated(self):
        """Test neither input list is changed."""
        source = make_items(("a", 0), ("b", 1))
        dest = make_items(("c", 0))
        source_snapshot, dest_snapshot = copy.deepcopy(source), copy.deepcopy(dest)
        move_between_scopes(source, dest, 0, 0)
        assert source == source_snapshot
        assert dest == dest_snapshot


class TestDetectPositionConflicts:
    """Tests for duplicate position detection."""

    def test_reports_duplicate_position(self):
        """Test a shared position is reported with every holder."""
        items = make_items(("a", 0), ("b", 1), ("c", 1))
        report = detect_position_conflicts(items)
        assert report.has_conflicts
        assert len(report.conflicts) == 1
        assert report.conflicts[0].position == 1
        assert report.conflicts[0].ids == ["b", "c"]

    def test_clean_scope(self):
        """Test contiguous positions have no conflicts."""
        report = detect_position_conflicts(make_items(("a", 0), ("b", 1)))
        assert not report.has_conflicts
        assert report.to_dict() == {"has_conflicts": False, "conflicts": []}

    def test_missing_positions_are_not_conflicts(self):
        """Test items without a position are ignored."""
        items = [{"id": "a"}, {"id": "b"}, {"id": "c", "position": None}, {"id": "d", "position": 0}]
        assert not detect_position_conflicts(items).has_conflicts

    def test_multiple_conflicts_sorted(self):
        """Test several conflicts are listed by ascending position."""
        items = make_items(("a", 3), ("b", 3), ("c", 0), ("d", 0), ("e", 0))
        report = detect_position_conflicts(items)
        assert report.to_dict() == {
            "has_conflicts": True,
            "conflicts": [
                {"position": 0, "ids": ["c", "d", "e"]},
                {"position": 3, "ids": ["a", "b"]},
            ],
        }

    def test_does_not_mutate(self):
        """Test detection leaves the input untouched."""
        items = make_items(("a", 1), ("b", 1))
        snapshot = copy.deepcopy(items)
        detect_position_conflicts(items)
        assert items == snapshot


class TestAutoCorrectPositions:
    """Tests for position repair."""

    def test_fixes_duplicates_in_array_order(self):
        """Test duplicates are renumbered following the array order."""
        items = make_items(("a", 0), ("b", 1), ("c", 1))
        result = auto_correct_positions(items)
        assert ids(result) == ["a", "b", "c"]
        assert positions(result) == [0, 1, 2]

    def test_ignores_stored_positions_for_ordering(self):
        """Test stored positions never reorder items."""
        items = make_items(("a", 9), ("b", -3), ("c", 4))
        result = auto_correct_positions(items)
        assert ids(result) == ["a", "b", "c"]
        assert positions(result) == [0, 1, 2]

    def test_fills_missing_positions(self):
        """Test items without a position receive one."""
        result = auto_correct_positions([{"id": "a"}, {"id": "b", "position": 7}])
        assert positions(result) == [0, 1]

    def test_idempotent(self):
        """Test correcting twice equals correcting once."""
        items = make_items(("a", 2), ("b", 2), ("c", -1), ("d", 10))
        once = auto_correct_positions(items)
        assert auto_correct_positions(once) == once

    def test_output_has_no_conflicts(self):
        """Test corrected output never reports conflicts."""
        items = make_items(("a", 0), ("b", 0), ("c", 0))
        assert not detect_position_conflicts(auto_correct_positions(items)).has_conflicts

    def test_empty(self):
        """Test an empty scope stays empty."""
        assert auto_correct_positions([]) == []


class TestPositionHelpers:
    """Tests for rank-sorted reindexing and auditing helpers."""

    def test_reindex_sorts_by_stored_rank(self):
        """Test reindexing orders by stored position, then id."""
        items = make_items(("b", 5), ("a", 2), ("c", 5))
        result = reindex_positions(items)
        assert ids(result) == ["a", "b", "c"]
        assert positions(result) == [0, 1, 2]

    def test_reindex_puts_unranked_last(self):
        """Test items without a rank follow ranked ones in their original order."""
        items = [{"id": "x"}, {"id": "a", "position": 1}, {"id": "y"}]
        assert ids(reindex_positions(items)) == ["a", "x", "y"]

    def test_next_position(self):
        """Test the next position is max + 1, or 0 for an empty scope."""
        assert next_position([]) == 0
        assert next_position(make_items(("a", 0), ("b", 4))) == 5

    def test_find_position_problems(self):
        """Test the audit reports invalid values, duplicates, and gaps."""
        items = make_items(("a", 0), ("b", 0), ("c", -1), ("d", 5))
        audit = find_position_problems(items)
        assert not audit.is_valid
        assert audit.invalid == [-1]
        assert audit.duplicates == [0]
        assert audit.gaps == [1, 2, 3]
        assert len(audit.errors) == 5

    def test_find_position_problems_clean(self):
        """Test a contiguous scope passes the audit."""
        assert find_position_problems(make_items(("a", 0), ("b", 1))).is_valid

    def test_sort_by_rank_falls_back_to_index(self):
        """Test unusable ranks sort at their array index instead of raising."""
        items = [
            {"id": "a", "position": 2},
            {"id": "b", "position": None},
            {"id": "c", "position": "x"},
            {"id": "d", "position": 0},
            {"id": "e"},
        ]
        result = sort_by_rank(items)
        assert ids(result) == ["d", "b", "a", "c", "e"]
        assert [item.get("position") for item in result] == [0, None, 2, "x", None]

    def test_sort_by_rank_section_order(self):
        """Test sections are sorted on the order key."""
        sections = [{"id": "s1", "order": 1}, {"id": "s2", "order": -4}, {"id": "s3", "order": 0}]
        assert ids(sort_by_rank(sections, key="order")) == ["s3", "s1", "s2"]

    @pytest.mark.parametrize("value,expected", [(0, True), (3, True), (-1, False), (1.0, False), (True, False), (None, False)])
    def test_is_rank(self, value, expected):
        """Test only non-negative integers count as ranks."""
        assert is_rank(value) is expected
