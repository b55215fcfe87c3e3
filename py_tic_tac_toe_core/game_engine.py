import logging

from py_tic_tac_toe_core.board import FIRST_MARK, Board, Mark
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
from py_tic_tac_toe_core.game import MatchState, MatchStatus, is_terminal, next_mark, seat_players, winning_mark
from py_tic_tac_toe_core.player import Player
from py_tic_tac_toe_core.player_ai import ComputerOpponent

logger = logging.getLogger(__name__)


class RulesEngine:
    """Owns the match state and applies the rules in response to events.

    States go idle -> in-progress -> over. Moves for the wrong mark or onto an occupied
    cell are dropped without any event, so stale or duplicated selections are harmless.
    """

    def __init__(self, event_bus: EventBus) -> None:
        self._state = MatchState()
        self._event_bus = event_bus
        self._event_bus.subscribe(NewMatch, self._on_new_match)
        self._event_bus.subscribe(StartMatch, self._on_start_match)
        self._event_bus.subscribe(Restart, self._on_restart)
        self._event_bus.subscribe(PlayerSelects, self._on_player_selects)

    @property
    def board(self) -> Board:
        return self._state.board

    @property
    def status(self) -> MatchStatus:
        return self._state.status

    @property
    def players(self) -> dict[Mark, Player]:
        return dict(self._state.players)

    def player(self, mark: Mark) -> Player | None:
        return self._state.players.get(mark)

    def turn(self, board: Board | None = None) -> Mark:
        return next_mark(self._state.board if board is None else board)

    def winner(self, board: Board | None = None) -> Player | None:
        mark = winning_mark(self._state.board if board is None else board)
        if mark is None:
            return None
        return self._state.players.get(mark)

    def is_terminal(self, board: Board | None = None) -> bool:
        return is_terminal(self._state.board if board is None else board)

    def _on_new_match(self, _event: NewMatch) -> None:
        self._state.reset()
        logger.info("Match reset")

    def _on_start_match(self, event: StartMatch) -> None:
        if self._state.status != "idle":
            logger.warning("Ignoring start while match is %s; publish NewMatch first", self._state.status)
            return

        options = event.options
        self._state.players = seat_players(options)
        self._state.board.clear()
        for player in self._state.players.values():
            if player.is_computer and player.difficulty is not None:
                ComputerOpponent(self._event_bus, player.mark, player.difficulty, self._state.board)

        self._state.status = "in-progress"
        logger.info(
            "Match started (%s): %s",
            options.mode,
            ", ".join(f"{p.name} as {p.mark}" for p in self._state.players.values()),
        )
        self._event_bus.publish(TurnChange(self.turn()))

    def _on_restart(self, _event: Restart) -> None:
        if self._state.status == "idle":
            logger.warning("Ignoring restart: no match has been started")
            return

        self._state.board.clear()
        self._state.status = "in-progress"
        logger.info("Match restarted")
        self._event_bus.publish(TurnChange(FIRST_MARK))

    def _on_player_selects(self, event: PlayerSelects) -> None:
        if self._state.status != "in-progress":
            logger.debug("Ignoring move by %s at (%d, %d): match is %s", event.mark, event.row, event.col, self.status)
            return

        if event.mark != self.turn():
            logger.debug("Ignoring move by %s at (%d, %d): not their turn", event.mark, event.row, event.col)
            return

        if not self._state.board.fill_cell(event.mark, (event.row, event.col)):
            logger.debug("Ignoring move by %s at (%d, %d): cell occupied", event.mark, event.row, event.col)
            return

        self._event_bus.publish(MoveApplied(event.mark, event.row, event.col))

        if self.is_terminal():
            self._state.status = "over"
            winner = self.winner()
            logger.info("Game over: %s", f"{winner.name} ({winner.mark}) wins" if winner else "draw")
            self._event_bus.publish(GameOver(winner))
        else:
            self._event_bus.publish(TurnChange(self.turn()))
