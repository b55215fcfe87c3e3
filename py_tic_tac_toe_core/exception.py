class GameError(Exception):
    pass


class LogicError(GameError):
    pass
