"""
Board State - Cups, lanes and the board they live on.

Design principles:
- Immutable: all changes return a new Board
- Serializable: plain ids, sizes and flags only
- Linkage is a derived cache, recomputed whenever a neighbor changes
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum

from .errors import EngineContractError


LANE_COUNT = 4
MAX_HEIGHT = 6
MIN_SIZE = 1
MAX_SIZE = 5

# Bottom-to-top sizes of a winning window.
WIN_PATTERN = (5, 4, 3, 2, 1)


class TurnPhase(Enum):
    """Phases of a turn, from lane selection to a terminal outcome."""
    SELECT_SOURCE = "select_source"
    SELECT_DESTINATION = "select_destination"
    RESOLVING = "resolving"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in (TurnPhase.WON, TurnPhase.LOST)


@dataclass(frozen=True)
class Cup:
    """
    A sized token.

    `linked` means the cup is chained to the cup directly below it
    and moves together with it.
    """
    id: str
    size: int
    linked: bool = False

    def with_linked(self, linked: bool) -> Cup:
        if linked == self.linked:
            return self
        return replace(self, linked=linked)


Lane = tuple[Cup, ...]


def should_link(below: Cup | None, cup: Cup) -> bool:
    """A cup links to the cup below when it is exactly one size smaller."""
    if below is None:
        return False
    return below.size - cup.size == 1


def moving_group_start(lane: Lane) -> int:
    """
    Index of the bottom cup of the lane's moving group.

    The top cup is always included; walk down while cups stay linked.
    Returns -1 for an empty lane.
    """
    if not lane:
        return -1
    idx = len(lane) - 1
    while idx > 0 and lane[idx].linked:
        idx -= 1
    return idx


def moving_group(lane: Lane) -> Lane:
    """The topmost maximal linked run of a lane."""
    start = moving_group_start(lane)
    if start < 0:
        return ()
    return lane[start:]


@dataclass(frozen=True)
class IdSource:
    """
    Issues cup ids.

    A value object: issue() returns the id and the next source, the
    caller threads it along. Simulations use their own prefix.
    """
    next_value: int = 1
    prefix: str = "cup"

    def issue(self) -> tuple[str, IdSource]:
        cup_id = f"{self.prefix}-{self.next_value}"
        return cup_id, IdSource(next_value=self.next_value + 1, prefix=self.prefix)


@dataclass(frozen=True)
class Board:
    """
    The four lanes, bottom of each lane first.

    Boards are values. Resolvers build new boards with with_lane().
    """
    lanes: tuple[Lane, ...] = field(
        default_factory=lambda: tuple(() for _ in range(LANE_COUNT))
    )

    @classmethod
    def empty(cls) -> Board:
        return cls()

    @classmethod
    def from_lanes(cls, lanes) -> Board:
        """Build a board from any nested sequence of cups."""
        return cls(lanes=tuple(tuple(lane) for lane in lanes))

    def __getitem__(self, index: int) -> Lane:
        return self.lanes[index]

    def __len__(self) -> int:
        return len(self.lanes)

    def __iter__(self):
        return iter(self.lanes)

    def top(self, index: int) -> Cup | None:
        lane = self.lanes[index]
        return lane[-1] if lane else None

    def height(self, index: int) -> int:
        return len(self.lanes[index])

    def with_lane(self, index: int, lane: Lane) -> Board:
        """Return new board with one lane replaced."""
        new_lanes = list(self.lanes)
        new_lanes[index] = tuple(lane)
        return Board(lanes=tuple(new_lanes))

    def cup_count(self) -> int:
        return sum(len(lane) for lane in self.lanes)

    def all_ids(self) -> list[str]:
        return [cup.id for lane in self.lanes for cup in lane]

    def signature(self) -> tuple:
        """Sizes and links only; two boards equal up to id renaming share it."""
        return tuple(
            tuple((cup.size, cup.linked) for cup in lane) for lane in self.lanes
        )

    def render(self) -> str:
        """Plain text picture of the board, top row first."""
        rows = []
        for row in range(MAX_HEIGHT - 1, -1, -1):
            cells = []
            for lane in self.lanes:
                if row < len(lane):
                    cup = lane[row]
                    cells.append(f"{'=' if cup.linked else ' '}{cup.size} ")
                else:
                    cells.append(" . ")
            rows.append(" ".join(cells))
        rows.append(" ".join(f"L{i + 1} " for i in range(len(self.lanes))))
        return "\n".join(rows)


def is_lane_index(board: Board, index) -> bool:
    """True for a plain int naming one of the board's lanes. Bools are not lanes."""
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(board.lanes)


def check_lane_index(board: Board, index: int, role: str = "lane") -> None:
    """Raise when a caller passes a lane index outside the board."""
    if not is_lane_index(board, index):
        raise EngineContractError(f"{role} index {index!r} is outside 0..{len(board.lanes) - 1}")


def validate_board(board: Board) -> list[str]:
    """
    Check a board against the rule invariants.

    Returns a list of problems, empty when the board is a legal
    resting position.
    """
    errors: list[str] = []
    if len(board.lanes) != LANE_COUNT:
        errors.append(f"board must have {LANE_COUNT} lanes, got {len(board.lanes)}")

    seen: set[str] = set()
    for lane_idx, lane in enumerate(board.lanes):
        if len(lane) > MAX_HEIGHT:
            errors.append(f"lane {lane_idx} has height {len(lane)} (max {MAX_HEIGHT})")
        for cup_idx, cup in enumerate(lane):
            where = f"lane {lane_idx} index {cup_idx}"
            if not MIN_SIZE <= cup.size <= MAX_SIZE:
                errors.append(f"{where}: size {cup.size} outside {MIN_SIZE}..{MAX_SIZE}")
            if cup.id in seen:
                errors.append(f"{where}: duplicate cup id {cup.id}")
            seen.add(cup.id)
            if cup.linked:
                below = lane[cup_idx - 1] if cup_idx > 0 else None
                if not should_link(below, cup):
                    errors.append(f"{where}: linked cup does not sit on a cup one size larger")
    return errors
