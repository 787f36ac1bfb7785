"""
Boundary layer data model(s).

These objects are used to communicate with the Service.
Both the API layer (higher) and domain/db layers (lower) use the models defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

# Type aliases to make the models easier to read
Position = int
SongId = UUID


@dataclass
class SongModel:
    id: SongId
    title: str
    artist: Optional[str] = None
    is_played: bool = False
    played_at: Optional[datetime] = None


@dataclass
class ParticipantModel:
    id: UUID
    name: str
    session_token: str
    created_at: datetime
    assignments: dict[Position, SongId] = field(default_factory=dict)
    is_grid_complete: bool = False
    has_won: bool = False
    won_at: Optional[datetime] = None


@dataclass
class GameModel:
    """Transport-safe representation of a bingo game used between API, Service, DB, and domain layers."""

    title: str
    size: str
    status: str
    created_at: datetime
    is_active: bool = True
    songs: list[SongModel] = field(default_factory=list)
    participants: list[ParticipantModel] = field(default_factory=list)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
