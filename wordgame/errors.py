class GameError(Exception):
    """Base class for every rejected game action. State is never modified when one is raised."""

    def __init__(self, reason: str = ""):
        super().__init__(reason)
        self.reason = reason or self.__class__.__name__


class InvalidPlacement(GameError):
    pass


class NotYourTurn(GameError):
    pass


class NoActiveChallenge(GameError):
    pass


class ChallengeAlreadyResolved(NoActiveChallenge):
    pass


class OracleUnavailable(GameError):
    pass


class ConcurrencyConflict(GameError):
    pass


class GameNotFound(GameError):
    pass


class GameOver(GameError):
    pass
