"""
Custom exceptions.

Everything derives from GameError, so the layers above the domain can catch a single type.
IllegalMoveError and InvalidRemovalError are user-facing rejections: the Game recovers from them locally.
OutOfBoundsError signals a caller contract violation and is never caught.
"""


class GameError(Exception):
    """Base class of all errors raised by the application."""


class IllegalMoveError(GameError):
    """Destination not in the legal set, or the move leaves your own king in check."""


class InvalidRemovalError(GameError):
    """Square is occupied, already removed, or the removal quota is exhausted."""


class OutOfBoundsError(GameError, IndexError):
    """Square outside of the 8x8 grid. A programming error, not a user mistake."""


class GameStateError(GameError):
    """Action does not fit the current state of the game (ex. the game has ended)."""


class InvalidFENError(GameError):
    """String cannot be interpreted as a position record."""


class InvalidRequestError(GameError):
    """Boundary request that does not pass validation.

    NOTE: not a ValueError, pydantic validators re-raise it unchanged.
    """


class RepositoryError(GameError):
    """Persistence layer could not find / store a record."""
