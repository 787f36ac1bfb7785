"""Requests and Response models"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import BingoSize, GameStatus


def _not_blank(value: str, field_name: str) -> str:
    value = value.strip()
    if not value:
        raise InvalidRequestError(f"{field_name} cannot be empty.")
    return value


# --- REQUEST MODELS ---
class SongInput(BaseModel):
    title: str
    artist: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _not_blank(value, "Song title")

    @field_validator("artist")
    @classmethod
    def validate_artist(cls, value: Optional[str]) -> Optional[str]:
        # An empty artist is the same as no artist
        if value is None or not value.strip():
            return None
        return value.strip()


class CreateGameRequest(BaseModel):
    title: str
    size: BingoSize
    songs: list[SongInput] = []

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _not_blank(value, "Title")


class DuplicateGameRequest(BaseModel):
    game_id: UUID


class UpdateTitleRequest(BaseModel):
    game_id: UUID
    title: str

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _not_blank(value, "Title")


class UpdateSizeRequest(BaseModel):
    game_id: UUID
    size: BingoSize


class UpdateSongsRequest(BaseModel):
    game_id: UUID
    songs: list[SongInput]


class ChangeStatusRequest(BaseModel):
    game_id: UUID
    new_status: GameStatus
    preserve_played_songs: Optional[bool] = None
    preserve_participants: Optional[bool] = None


class JoinGameRequest(BaseModel):
    game_id: UUID
    name: str
    session_token: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _not_blank(value, "Name")

    @field_validator("session_token")
    @classmethod
    def validate_session_token(cls, value: str) -> str:
        return _not_blank(value, "Session token")


class SongAssignment(BaseModel):
    song_id: UUID
    position: int

    @field_validator("position")
    @classmethod
    def validate_position(cls, value: int) -> int:
        if value < 0:
            raise InvalidRequestError(f"Grid position cannot be negative: {value}")
        return value


class AssignSongsRequest(BaseModel):
    game_id: UUID
    session_token: str
    assignments: list[SongAssignment]

    @field_validator("assignments")
    @classmethod
    def validate_assignments(cls, value: list[SongAssignment]) -> list[SongAssignment]:
        positions = [assignment.position for assignment in value]
        if len(set(positions)) != len(positions):
            raise InvalidRequestError("A grid position can only hold one song.")
        song_ids = [assignment.song_id for assignment in value]
        if len(set(song_ids)) != len(song_ids):
            raise InvalidRequestError("Each song can only be used once per grid.")
        return value


class MarkSongRequest(BaseModel):
    game_id: UUID
    song_id: UUID
    is_played: bool


class GetGameRequest(BaseModel):
    game_id: UUID


class GetBingoStatusRequest(BaseModel):
    game_id: UUID
    session_token: str


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class SongResponse(BaseModel):
    id: UUID
    title: str
    artist: Optional[str]
    is_played: bool
    played_at: Optional[datetime]


class ParticipantResponse(BaseModel):
    id: UUID
    name: str
    created_at: datetime
    is_grid_complete: bool
    has_won: bool
    won_at: Optional[datetime]


class GameResponse(BaseModel):
    game_id: UUID
    title: str
    size: BingoSize
    grid_size: int
    required_song_count: int
    status: GameStatus
    is_active: bool
    songs: list[SongResponse]
    participants: list[ParticipantResponse]
    winners: list[ParticipantResponse]


class MarkSongResponse(BaseModel):
    song: SongResponse
    new_winners: list[ParticipantResponse]
    revoked_winners: list[ParticipantResponse]


class GridCellResponse(BaseModel):
    position: int
    song: SongResponse
    is_played: bool


class BingoStatusResponse(BaseModel):
    participant: ParticipantResponse
    grid_size: int
    grid: list[Optional[GridCellResponse]]
    has_won: bool
    won_at: Optional[datetime]
