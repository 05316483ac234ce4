"""
Tests for the pydantic snapshot models.
"""

import pytest
from pydantic import ValidationError

from cupstack.config import GameConfig
from cupstack.engine_core.errors import BoardValidationError
from cupstack.engine_core.event import Event, EventType, Outcome
from cupstack.schemas import (
    BoardSnapshot,
    CupRecord,
    EventKind,
    EventRecord,
    GameRecord,
    TurnInputRecord,
)
from cupstack.session import GameLoop, TurnInput, new_game, replay


class TestBoardSnapshot:

    def test_json_round_trip(self, winning_board):
        snapshot = BoardSnapshot.from_board(winning_board)
        restored = BoardSnapshot.model_validate_json(snapshot.model_dump_json()).to_board()
        assert restored == winning_board

    def test_default_is_four_empty_lanes(self):
        board = BoardSnapshot().to_board()
        assert len(board) == 4
        assert board.cup_count() == 0

    def test_size_out_of_range(self):
        with pytest.raises(ValidationError):
            CupRecord(id="x", size=6)

    def test_bad_link_fails_validation(self):
        snapshot = BoardSnapshot(lanes=[
            [{"id": "a", "size": 4}, {"id": "b", "size": 2, "linked": True}],
            [], [], [],
        ])
        with pytest.raises(BoardValidationError) as exc_info:
            snapshot.to_board()
        assert any("linked" in err for err in exc_info.value.errors)

    def test_validation_can_be_skipped(self):
        snapshot = BoardSnapshot(lanes=[[{"id": "a", "size": 1}, {"id": "a", "size": 1}], [], [], []])
        board = snapshot.to_board(validate=False)
        assert board.height(0) == 2

    def test_wrong_lane_count(self):
        snapshot = BoardSnapshot(lanes=[[], []])
        with pytest.raises(BoardValidationError):
            snapshot.to_board()


class TestEventRecord:

    def test_merge_event(self):
        event = Event.merge("cup-9", lane=1, index=2, size=3, consumed=("cup-4", "cup-5"))
        record = EventRecord.from_event(event)

        assert record.type == EventKind.MERGE
        assert record.consumed == ["cup-4", "cup-5"]
        assert record.to_event() == event

    def test_game_over_event(self):
        event = Event.game_over("Victory!", Outcome.WON)
        data = EventRecord.from_event(event).model_dump()

        assert data["type"] == "game_over"
        assert data["outcome"] == "won"
        assert data["cup_id"] is None

    def test_event_types_match(self):
        assert {k.value for k in EventKind} == {t.value for t in EventType}


class TestGameRecord:

    def test_from_loop(self):
        loop, _ = new_game(GameConfig(seed=8))
        loop.skip()
        record = GameRecord.from_loop(loop)

        assert record.seed == 8
        assert record.turn_inputs() == loop.history
        assert record.phase == loop.phase.value
        assert record.board.to_board() == loop.board

    def test_unstarted_loop(self):
        with pytest.raises(ValueError):
            GameRecord.from_loop(GameLoop(GameConfig(seed=1)))

    def test_record_replays(self):
        loop, _ = new_game(GameConfig(seed=42))
        for _ in range(3):
            if loop.phase.is_terminal:
                break
            loop.skip()

        text = GameRecord.from_loop(loop).model_dump_json()
        record = GameRecord.model_validate_json(text)
        replayed = replay(record.seed, record.turn_inputs())
        assert replayed.board == loop.board

    def test_input_lane_range(self):
        with pytest.raises(ValidationError):
            TurnInputRecord(kind="move", from_lane=0, to_lane=4)

    def test_move_input(self):
        record = TurnInputRecord.from_input(TurnInput.move(2, 3))
        assert record.to_input() == TurnInput.move(2, 3)

    def test_settings_are_recorded(self):
        loop, _ = new_game(GameConfig(seed=8, detect_forced_loss=False, initial_drops=3))
        record = GameRecord.model_validate_json(GameRecord.from_loop(loop).model_dump_json())

        assert record.detect_forced_loss is False
        assert record.initial_drops == 3
        restored = record.apply_settings(GameConfig(seed=99))
        assert restored.detect_forced_loss is False
        assert restored.initial_drops == 3
        assert restored.seed == 99

    def test_old_records_use_default_settings(self):
        record = GameRecord.model_validate_json('{"seed": 4}')
        assert record.detect_forced_loss is True
        assert record.initial_drops == 2
