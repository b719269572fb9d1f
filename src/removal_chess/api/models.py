"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from removal_chess.chess.fen import is_valid_fen
from removal_chess.core.exceptions import InvalidRequestError
from removal_chess.core.shared_types import Color, Status

PieceColor = str


def validate_algebraic_square(value: str) -> str:
    """'a1' - 'h8'"""

    def _is_algebraic_notation(value: str) -> bool:
        if len(value) != 2:
            return False

        file_character, rank_character = value[0], value[1]
        return file_character in "abcdefgh" and rank_character in "12345678"

    if not _is_algebraic_notation(value):
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        )
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    """Quota configuration is optional: the service falls back to its settings"""

    removals_per_player: Optional[int] = Field(default=None, ge=0)
    time_limit_seconds: Optional[int] = Field(default=None, gt=0)
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        value = value.strip()
        if not is_valid_fen(value):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a position.")
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return validate_algebraic_square(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return validate_algebraic_square(value)


class RemoveSquareRequest(BaseModel):
    game_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return validate_algebraic_square(value)


class TimeoutRequest(BaseModel):
    """Sent by the shell's clock: the player with `color` ran out of time"""

    game_id: UUID
    color: Color


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    fen_state: str
    current_player: Color
    removed_squares: list[str]
    removals_left: dict[PieceColor, Optional[int]]
    status: Status
    winner: Optional[Color]
    action_history: list[str]
    time_limit_seconds: Optional[int]
    accepted: bool = True
    message: str = ""
    is_castling: bool = False


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: str
    destinations: list[str]
