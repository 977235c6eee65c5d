class RoundError(ValueError):
    """Base class for rejected round operations."""


class InvalidRoundConfig(RoundError):
    pass


class UnknownPlayer(RoundError):
    pass


class InvalidHole(RoundError):
    pass


class InvalidScore(RoundError):
    pass


class InvalidWolfDecision(RoundError):
    pass


class WolfEditError(RoundError):
    pass
