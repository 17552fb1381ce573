"""Game exceptions.

Rule violations by clients are not exceptions: they are dropped by the
session. These classes cover configuration problems and programming errors.
"""


class GeoQuizError(Exception):
    """Base class for all game errors."""
    pass


class ConfigError(GeoQuizError):
    """Unknown game mode or empty dataset; a session cannot start with it."""
    def __init__(self, message, mode_key=None):
        self.mode_key = mode_key
        super().__init__(message)


class InvariantViolation(GeoQuizError):
    """Internal state broke an invariant. Never expected in correct operation."""
    pass


class DuplicateConnection(GeoQuizError):
    def __init__(self, connection_id):
        self.connection_id = connection_id
        super().__init__(f"Connection {connection_id} already joined")
