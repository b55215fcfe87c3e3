from collections.abc import Callable

from py_tic_tac_toe_core.board import BOARD_SIZE
from py_tic_tac_toe_core.event_bus import (
    EventBus,
    GameOver,
    MoveApplied,
    NewMatch,
    PlayerSelects,
    Restart,
    StartMatch,
    TurnChange,
)
from py_tic_tac_toe_core.game import MatchOptions
from py_tic_tac_toe_core.game_engine import RulesEngine


class TerminalUi:
    """Text front end: renders the board from events and turns typed cell numbers into moves."""

    def __init__(
        self,
        event_bus: EventBus,
        game_engine: RulesEngine,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ) -> None:
        self._event_bus = event_bus
        self._game_engine = game_engine
        self._input = input_fn
        self._output = output_fn
        self._running = False
        self._game_over = False
        self._event_bus.subscribe(TurnChange, self._on_turn_change)
        self._event_bus.subscribe(MoveApplied, self._on_move_applied)
        self._event_bus.subscribe(GameOver, self._on_game_over)

    @property
    def running(self) -> bool:
        return self._running

    def run(self, options: MatchOptions) -> None:
        self._running = True
        self._start_match(options)
        while self._running:
            if self._game_over:
                self._ask_what_next(options)
            else:
                self._get_move()
        self._output("Terminal UI stopped")

    def _stop(self) -> None:
        self._running = False

    def _start_match(self, options: MatchOptions) -> None:
        self._game_over = False
        self._event_bus.publish(NewMatch())
        self._event_bus.publish(StartMatch(options))

    def _read(self, prompt: str) -> str | None:
        try:
            input_str = self._input(prompt).strip()
        except (KeyboardInterrupt, EOFError):
            self._stop()
            return None

        if input_str == "exit":
            self._stop()
            return None
        return input_str

    def _get_move(self) -> None:
        mark = self._game_engine.turn()
        player = self._game_engine.player(mark)
        name = player.name if player else mark
        max_move = BOARD_SIZE * BOARD_SIZE

        input_str = self._read(f"{name} ({mark})'s move (1-{max_move}): ")
        if input_str is None:
            return

        try:
            board_position = int(input_str)
        except ValueError:
            self._output("Not an integer")
            return

        if not (1 <= board_position <= max_move):
            self._output(f"Not between 1 and {max_move}")
            return

        row, col = divmod(board_position - 1, BOARD_SIZE)
        if self._game_engine.board.snapshot()[row][col] is not None:
            self._output("Cell occupied")
            return

        self._event_bus.publish(PlayerSelects(mark, row, col))

    def _ask_what_next(self, options: MatchOptions) -> None:
        choice = self._read("[r]estart, [n]ew match or [q]uit: ")
        match choice:
            case None:
                return
            case "r":
                self._game_over = False
                self._event_bus.publish(Restart())
            case "n":
                self._start_match(options)
            case "q":
                self._stop()
            case _:
                self._output(f"Unknown choice: {choice}")

    def _render_board(self) -> None:
        board = self._game_engine.board.snapshot()

        def _cell_value(index: int) -> str:
            row, col = divmod(index, BOARD_SIZE)
            value = board[row][col]
            return value if value is not None else str(index + 1)

        rows = []
        for r in range(BOARD_SIZE):
            start = r * BOARD_SIZE
            row = " | ".join(_cell_value(start + i) for i in range(BOARD_SIZE))
            rows.append(f" {row} ")

        separator = "\n-----------\n"
        output = separator.join(rows)
        self._output(f"\n{output}\n")

    def _on_turn_change(self, _event: TurnChange) -> None:
        self._game_over = False
        # Only an empty board needs drawing here; moves are drawn as they are applied.
        if len(self._game_engine.board.open_cells()) == BOARD_SIZE * BOARD_SIZE:
            self._render_board()

    def _on_move_applied(self, event: MoveApplied) -> None:
        player = self._game_engine.player(event.mark)
        name = player.name if player else event.mark
        self._output(f"{name} ({event.mark}) plays {event.row * BOARD_SIZE + event.col + 1}")
        self._render_board()

    def _on_game_over(self, event: GameOver) -> None:
        self._game_over = True
        if event.winner:
            self._output(f"Winner: {event.winner.name} ({event.winner.mark})")
        else:
            self._output("It's a draw")
