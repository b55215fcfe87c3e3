from dataclasses import dataclass
from typing import Literal

from py_tic_tac_toe_core.board import Mark

type PlayerKind = Literal["human", "computer"]
type Difficulty = Literal["easy", "medium", "hard"]


@dataclass(frozen=True, slots=True)
class Player:
    mark: Mark
    kind: PlayerKind
    name: str
    difficulty: Difficulty | None = None

    @property
    def is_computer(self) -> bool:
        return self.kind == "computer"
