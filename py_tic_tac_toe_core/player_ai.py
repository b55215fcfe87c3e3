import logging
import math
import random
from collections.abc import Callable
from typing import Final

from py_tic_tac_toe_core.board import FIRST_MARK, Board, Cell, Mark, other_mark
from py_tic_tac_toe_core.event_bus import EventBus, NewMatch, PlayerSelects, TurnChange
from py_tic_tac_toe_core.exception import LogicError
from py_tic_tac_toe_core.game import WINNING_LINES, is_terminal, next_mark, winning_mark
from py_tic_tac_toe_core.player import Difficulty

logger = logging.getLogger(__name__)

type Strategy = Callable[[Board, Mark], Cell]


def find_random_move(board: Board, mark: Mark) -> Cell:
    choices = board.open_cells()
    if not choices:
        msg = f"No moves available for player {mark}, but game not over."
        raise LogicError(msg)
    return random.choice(choices)


def find_completing_cell(board: Board, mark: Mark) -> Cell | None:
    """Return the empty cell of the first line whose other two cells both hold `mark`."""
    cells = board.snapshot()
    for line in WINNING_LINES:
        empty = [(r, c) for r, c in line if cells[r][c] is None]
        if len(empty) != 1:
            continue
        if all(cells[r][c] == mark for r, c in line if (r, c) != empty[0]):
            return empty[0]
    return None


def find_win_or_block_move(board: Board, mark: Mark) -> Cell:
    winning = find_completing_cell(board, mark)
    if winning is not None:
        return winning

    blocking = find_completing_cell(board, other_mark(mark))
    if blocking is not None:
        return blocking

    return find_random_move(board, mark)


def find_minimax_move(board: Board, mark: Mark) -> Cell:
    """Exhaustive minimax: the first mark maximizes, the second minimizes.

    Each candidate is played on a fresh clone, so the board passed in is never touched.
    """
    if is_terminal(board):
        msg = f"Player {mark} asked to move on a finished board."
        raise LogicError(msg)
    if next_mark(board) != mark:
        msg = f"Player {mark} asked to move out of turn."
        raise LogicError(msg)

    _, move = _minimax(board.clone())
    if move is None:
        msg = f"Search found no move for player {mark} on a non-terminal board."
        raise LogicError(msg)
    return move


def _utility(board: Board) -> int:
    mark = winning_mark(board)
    if mark is None:
        return 0
    return 1 if mark == FIRST_MARK else -1


def _minimax(board: Board) -> tuple[float, Cell | None]:
    if is_terminal(board):
        return _utility(board), None

    mover = next_mark(board)
    is_maximizing = mover == FIRST_MARK
    best_value = -math.inf if is_maximizing else math.inf
    best_move: Cell | None = None

    for cell in board.open_cells():
        child = board.clone()
        child.fill_cell(mover, cell)
        value, _ = _minimax(child)

        # Strict comparison keeps the first of equally good moves.
        if (is_maximizing and value > best_value) or (not is_maximizing and value < best_value):
            best_value = value
            best_move = cell

    return best_value, best_move


STRATEGIES: Final[dict[Difficulty, Strategy]] = {
    "easy": find_random_move,
    "medium": find_win_or_block_move,
    "hard": find_minimax_move,
}


class ComputerOpponent:
    """A computer-controlled seat.

    Answers every `TurnChange` for its own mark with a `PlayerSelects` and stops listening
    once a `NewMatch` is published.
    """

    def __init__(self, event_bus: EventBus, mark: Mark, difficulty: Difficulty, board: Board) -> None:
        try:
            self._strategy = STRATEGIES[difficulty]
        except KeyError as e:
            msg = f"Unknown difficulty: {difficulty}. Choose from 'easy', 'medium', 'hard'."
            raise ValueError(msg) from e

        self._event_bus = event_bus
        self._mark = mark
        self._difficulty = difficulty
        self._board = board
        self._unsubscribers = [
            self._event_bus.subscribe(TurnChange, self._on_turn_change),
            self._event_bus.subscribe(NewMatch, self._on_new_match),
        ]

    @property
    def active(self) -> bool:
        return bool(self._unsubscribers)

    def choose_move(self) -> Cell:
        return self._strategy(self._board, self._mark)

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_turn_change(self, event: TurnChange) -> None:
        if self._mark != event.mark:
            return

        row, col = self.choose_move()
        logger.debug("%s bot (%s) selects (%d, %d)", self._difficulty, self._mark, row, col)
        self._event_bus.publish(PlayerSelects(self._mark, row, col))

    def _on_new_match(self, _event: NewMatch) -> None:
        self.close()
