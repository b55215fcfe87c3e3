"""Rules of the game as pure functions of a board, plus the per-match state they act on.

Every function accepts any `Board`, the authoritative one or a private search clone,
so turn order and outcome can always be recovered from the cells alone.
"""

from dataclasses import dataclass, field
from typing import Final, Literal

from py_tic_tac_toe_core.board import FIRST_MARK, SECOND_MARK, Board, Cell, Mark, other_mark
from py_tic_tac_toe_core.player import Difficulty, Player

type GameMode = Literal["pvp", "vs-computer"]
type MatchStatus = Literal["idle", "in-progress", "over"]

# Scan order matters: rows, then columns, then the two diagonals.
WINNING_LINES: Final[tuple[tuple[Cell, Cell, Cell], ...]] = (
    ((0, 0), (0, 1), (0, 2)),
    ((1, 0), (1, 1), (1, 2)),
    ((2, 0), (2, 1), (2, 2)),
    ((0, 0), (1, 0), (2, 0)),
    ((0, 1), (1, 1), (2, 1)),
    ((0, 2), (1, 2), (2, 2)),
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
)


@dataclass(frozen=True)
class MatchOptions:
    mode: GameMode = "vs-computer"
    human_mark: Mark = FIRST_MARK
    difficulty: Difficulty = "easy"
    player_names: list[str] = field(default_factory=list)
    first_seat_mark: Mark | None = None  # pvp only, None means seat 1 plays first


@dataclass
class MatchState:
    players: dict[Mark, Player] = field(default_factory=dict)
    board: Board = field(default_factory=Board)
    status: MatchStatus = "idle"

    def reset(self) -> None:
        self.players.clear()
        self.board.clear()
        self.status = "idle"


def next_mark(board: Board) -> Mark:
    """The first mark never trails the second, so equal counts mean the first mark moves."""
    return FIRST_MARK if board.count(FIRST_MARK) == board.count(SECOND_MARK) else SECOND_MARK


def winning_mark(board: Board) -> Mark | None:
    cells = board.snapshot()
    for (r0, c0), (r1, c1), (r2, c2) in WINNING_LINES:
        mark = cells[r0][c0]
        if mark is not None and mark == cells[r1][c1] == cells[r2][c2]:
            return mark
    return None


def is_terminal(board: Board) -> bool:
    return board.is_full() or winning_mark(board) is not None


def seat_players(options: MatchOptions) -> dict[Mark, Player]:
    names = options.player_names

    def _name(index: int, mark: Mark) -> str:
        if index < len(names) and names[index].strip():
            return names[index].strip()
        return mark

    match options.mode:
        case "vs-computer":
            human_mark = options.human_mark
            computer_mark = other_mark(human_mark)
            return {
                human_mark: Player(human_mark, "human", _name(0, human_mark)),
                computer_mark: Player(computer_mark, "computer", f"{options.difficulty} bot", options.difficulty),
            }
        case "pvp":
            seat1_mark = options.first_seat_mark or FIRST_MARK
            seat2_mark = other_mark(seat1_mark)
            return {
                seat1_mark: Player(seat1_mark, "human", _name(0, seat1_mark)),
                seat2_mark: Player(seat2_mark, "human", _name(1, seat2_mark)),
            }
        case _:
            msg = f"Unknown game mode: {options.mode}. Choose from 'pvp', 'vs-computer'."
            raise ValueError(msg)
