"""
Pytest fixtures for Cup Stack tests.
"""

import itertools

import pytest

from cupstack.config import GameConfig
from cupstack.engine_core.oracle import detect_forced_loss
from cupstack.engine_core.state import Board, Cup, LANE_COUNT
from cupstack.session import GameLoop


def build_board(*lanes, prefix="t"):
    """
    Build a board from lane specs.

    Each cup is a size, or a (size, linked) pair. Missing lanes are empty.
    """
    counter = itertools.count(1)
    built = []
    for lane in lanes:
        cups = []
        for spec in lane:
            size, linked = (spec, False) if isinstance(spec, int) else spec
            cups.append(Cup(id=f"{prefix}-{next(counter)}", size=size, linked=linked))
        built.append(cups)
    while len(built) < LANE_COUNT:
        built.append([])
    return Board.from_lanes(built)


def sizes(lane):
    return [cup.size for cup in lane]


def links(lane):
    return [cup.linked for cup in lane]


@pytest.fixture
def make_board():
    """Factory fixture for boards."""
    return build_board


@pytest.fixture
def empty_board() -> Board:
    return Board.empty()


@pytest.fixture
def winning_board() -> Board:
    """A completed linked 5-4-3-2-1 in lane 1."""
    return build_board([5, (4, True), (3, True), (2, True), (1, True)])


@pytest.fixture
def stuck_board() -> Board:
    """
    Lane 1 tops out in a locked 1 that nothing can rescue.

    Its moving group has a size-3 base and every other top is smaller.
    """
    return build_board([5, 3, (2, True), (1, True)], [2], [2], [1])


@pytest.fixture
def started_loop() -> GameLoop:
    """A seeded game after its opening drops."""
    loop = GameLoop(GameConfig(seed=1234))
    loop.start()
    return loop


def play_past_forced_loss(max_seeds=50, max_turns=60):
    """
    Skip through games with the forced-loss check off until one plays
    a turn from a position the check would have ended.

    Returns that loop, or None.
    """
    for seed in range(max_seeds):
        loop = GameLoop(GameConfig(seed=seed, detect_forced_loss=False))
        loop.start()
        for _ in range(max_turns):
            if loop.phase.is_terminal:
                break
            threatened = detect_forced_loss(loop.board, loop.next_drop_lane) is not None
            loop.skip()
            if threatened:
                return loop
    return None
