from typing import Final, Literal

BOARD_SIZE: Final = 3
type Mark = Literal["X", "O"]
type Cell = tuple[int, int]
type Grid = list[list[Mark | None]]

FIRST_MARK: Final[Mark] = "X"
SECOND_MARK: Final[Mark] = "O"


def other_mark(mark: Mark) -> Mark:
    return SECOND_MARK if mark == FIRST_MARK else FIRST_MARK


class Board:
    def __init__(self) -> None:
        self._cells: Grid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]

    def snapshot(self) -> Grid:
        """Return the live grid. Copy it before mutating."""
        return self._cells

    def clone(self) -> "Board":
        copied = Board()
        copied._cells = [row[:] for row in self._cells]
        return copied

    def fill_cell(self, mark: Mark, cell: Cell) -> bool:
        """Place `mark` on `cell`. Returns False, leaving the board untouched, if the cell is taken."""
        row, col = cell
        if not (0 <= row < BOARD_SIZE) or not (0 <= col < BOARD_SIZE):
            raise IndexError("Move out of bounds.")

        if self._cells[row][col] is not None:
            return False

        self._cells[row][col] = mark
        return True

    def open_cells(self) -> list[Cell]:
        return [(r, c) for r in range(BOARD_SIZE) for c in range(BOARD_SIZE) if self._cells[r][c] is None]

    def clear(self) -> None:
        for row in self._cells:
            for col in range(BOARD_SIZE):
                row[col] = None

    def is_full(self) -> bool:
        return all(all(cell is not None for cell in row) for row in self._cells)

    def count(self, mark: Mark) -> int:
        return sum(row.count(mark) for row in self._cells)
