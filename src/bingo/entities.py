"""
Songs and participants of a bingo game.

(placed in their own module as the grid, reconciler and game modules all need to import them)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Self
from uuid import UUID, uuid4

from src.core.models import ParticipantModel, SongModel, utc_now


@dataclass
class Song:
    id: UUID
    title: str
    artist: Optional[str] = None
    is_played: bool = False
    played_at: Optional[datetime] = None

    @classmethod
    def new(cls, title: str, artist: Optional[str] = None) -> Self:
        return cls(id=uuid4(), title=title, artist=artist)

    @classmethod
    def from_model(cls, model: SongModel) -> Self:
        return cls(
            id=model.id,
            title=model.title,
            artist=model.artist,
            is_played=model.is_played,
            played_at=model.played_at,
        )

    def to_model(self) -> SongModel:
        return SongModel(
            id=self.id,
            title=self.title,
            artist=self.artist,
            is_played=self.is_played,
            played_at=self.played_at,
        )

    def mark(self, is_played: bool, now: datetime) -> None:
        """Played songs carry the moment they were marked, unplayed songs carry none."""
        self.is_played = is_played
        self.played_at = now if is_played else None

    def reset(self) -> None:
        self.is_played = False
        self.played_at = None

    @property
    def label(self) -> str:
        return f"{self.artist} - {self.title}" if self.artist else self.title


@dataclass
class Participant:
    id: UUID
    name: str
    session_token: str
    created_at: datetime
    assignments: dict[int, UUID] = field(default_factory=dict)
    is_grid_complete: bool = False
    has_won: bool = False
    won_at: Optional[datetime] = None

    @classmethod
    def new(
        cls, name: str, session_token: str, now: Optional[datetime] = None
    ) -> Self:
        return cls(
            id=uuid4(),
            name=name,
            session_token=session_token,
            created_at=now or utc_now(),
        )

    @classmethod
    def from_model(cls, model: ParticipantModel) -> Self:
        return cls(
            id=model.id,
            name=model.name,
            session_token=model.session_token,
            created_at=model.created_at,
            assignments=dict(model.assignments),
            is_grid_complete=model.is_grid_complete,
            has_won=model.has_won,
            won_at=model.won_at,
        )

    def to_model(self) -> ParticipantModel:
        return ParticipantModel(
            id=self.id,
            name=self.name,
            session_token=self.session_token,
            created_at=self.created_at,
            assignments=dict(self.assignments),
            is_grid_complete=self.is_grid_complete,
            has_won=self.has_won,
            won_at=self.won_at,
        )
