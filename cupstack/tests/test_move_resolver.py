"""
Tests for the move resolver.

Tests:
- Moves onto empty and larger cups
- Link recomputation and link events
- Merges
- Rejections (and that they change nothing)
- Overflow and wins caused by a move
"""

import pytest

from cupstack.engine_core.event import EventType, Outcome
from cupstack.engine_core.move_resolver import resolve_move
from cupstack.engine_core.state import IdSource
from cupstack.tests.conftest import build_board, links, sizes


def event_types(result):
    return [e.event_type for e in result.events]


class TestPlacement:
    """Moves that stack a group without merging."""

    def test_move_to_empty_lane(self):
        """The group arrives unchanged on an empty lane."""
        board = build_board([3, (2, True)])
        result = resolve_move(board, 0, 1)

        assert result.accepted
        assert result.next_board[0] == ()
        assert sizes(result.next_board[1]) == [3, 2]
        assert links(result.next_board[1]) == [False, True]
        assert event_types(result) == [EventType.MOVE, EventType.MOVE]
        assert [e.index for e in result.events] == [0, 1]
        assert all(e.from_lane == 0 and e.lane == 1 for e in result.events)

    def test_move_onto_larger_links(self):
        """A cup one size smaller links to its new neighbor."""
        board = build_board([2], [3])
        result = resolve_move(board, 0, 1)

        assert sizes(result.next_board[1]) == [3, 2]
        assert links(result.next_board[1]) == [False, True]
        assert event_types(result) == [EventType.MOVE, EventType.LINK]
        link = result.events[1]
        assert link.cup_id == board[0][0].id
        assert (link.lane, link.index) == (1, 1)

    def test_move_onto_much_larger_does_not_link(self):
        board = build_board([1], [4])
        result = resolve_move(board, 0, 1)

        assert links(result.next_board[1]) == [False, False]
        assert event_types(result) == [EventType.MOVE]

    def test_group_links_only_base(self):
        """Cups already linked inside the group produce no link event."""
        board = build_board([2, (1, True)], [3])
        result = resolve_move(board, 0, 1)

        assert sizes(result.next_board[1]) == [3, 2, 1]
        assert links(result.next_board[1]) == [False, True, True]
        assert event_types(result) == [EventType.MOVE, EventType.MOVE, EventType.LINK]

    def test_only_group_leaves_source(self):
        board = build_board([5, 3, (2, True), (1, True)], [4])
        result = resolve_move(board, 0, 1)

        assert sizes(result.next_board[0]) == [5]
        assert sizes(result.next_board[1]) == [4, 3, 2, 1]
        assert links(result.next_board[1]) == [False, True, True, True]

    def test_input_board_untouched(self):
        board = build_board([2], [3])
        before = board.signature()
        result = resolve_move(board, 0, 1)

        assert board.signature() == before
        assert result.next_board is not board


class TestMerge:
    """Equal-size merges."""

    def test_merge_creates_new_cup(self):
        board = build_board([2], [2])
        result = resolve_move(board, 0, 1, IdSource())

        assert result.accepted
        assert result.next_board[0] == ()
        assert sizes(result.next_board[1]) == [3]
        merged = result.next_board[1][0]
        assert merged.id == "cup-1"
        assert merged.id not in board.all_ids()
        assert result.ids.next_value == 2
        assert event_types(result) == [EventType.MERGE]
        merge = result.events[0]
        assert merge.size == 3
        assert set(merge.consumed) == {board[0][0].id, board[1][0].id}

    def test_merge_links_against_new_neighbor(self):
        """Exactly one cup of size+1 and a single link event."""
        board = build_board([2], [4, 2])
        result = resolve_move(board, 0, 1)

        assert sizes(result.next_board[1]) == [4, 3]
        assert links(result.next_board[1]) == [False, True]
        assert event_types(result) == [EventType.MERGE, EventType.LINK]
        assert result.events[1].cup_id == result.events[0].cup_id

    def test_merge_to_five(self):
        board = build_board([4], [4])
        result = resolve_move(board, 1, 0)
        assert sizes(result.next_board[0]) == [5]


class TestRejection:
    """Illegal moves return the input unchanged."""

    @pytest.mark.parametrize("board_lanes,from_lane,to_lane,fragment", [
        (([], [2]), 0, 1, "no cups"),
        (([2], [3]), 0, 0, "different"),
        (([2], [3]), 0, 4, "numbered"),
        (([2], [3]), -1, 1, "numbered"),
        (([2], [3]), False, True, "numbered"),
        (([3], [2]), 0, 1, "larger"),
        (([3, (2, True)], [2]), 0, 1, "larger"),
        (([3, (2, True)], [3]), 0, 1, "Linked groups"),
        (([5], [5]), 0, 1, "Size 5"),
        (([2], [3, (2, True)]), 0, 1, "Locked"),
        (([2, (1, True)], [1]), 1, 0, "Locked"),
    ])
    def test_rejected(self, board_lanes, from_lane, to_lane, fragment):
        board = build_board(*board_lanes)
        ids = IdSource(next_value=10)
        result = resolve_move(board, from_lane, to_lane, ids)

        assert not result.accepted
        assert result.events == []
        assert result.next_board is board
        assert result.ids == ids
        assert fragment in result.message

    def test_rejection_is_idempotent(self):
        board = build_board([3], [2])
        first = resolve_move(board, 0, 1)
        second = resolve_move(first.next_board, 0, 1)

        assert first.message == second.message
        assert second.next_board.signature() == board.signature()


class TestOutcomes:
    """Overflow and wins caused by moves."""

    def test_overflow_loses(self):
        board = build_board([2, (1, True)], [5, 5, 5, 5, 5])
        result = resolve_move(board, 0, 1)

        assert result.accepted
        assert result.lost
        assert result.next_board.height(1) == 7
        assert result.events[-1].event_type == EventType.GAME_OVER
        assert result.events[-1].outcome == Outcome.LOST

    def test_move_completes_win(self):
        board = build_board([5, (4, True), (3, True)], [2, (1, True)])
        result = resolve_move(board, 1, 0)

        assert result.won
        assert not result.lost

    def test_ordinary_move_not_won(self):
        result = resolve_move(build_board([2], [3]), 0, 1)
        assert not result.won
        assert not result.lost
