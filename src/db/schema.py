"""Database tables / schema"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from src.core.models import utc_now


class Base(DeclarativeBase):
    type_annotation_map = {datetime: DateTime(timezone=True)}


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    title: Mapped[str]
    size: Mapped[str]
    status: Mapped[str]
    is_active: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)

    songs: Mapped[list["DBSong"]] = relationship(
        back_populates="game", cascade="all, delete-orphan", order_by="DBSong.position"
    )
    participants: Mapped[list["DBParticipant"]] = relationship(
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="DBParticipant.created_at",
    )


class DBSong(Base):
    __tablename__ = "songs"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    game_id: Mapped[UUID] = mapped_column(ForeignKey("games.id", ondelete="CASCADE"))
    # Order in which the admin entered the songs
    position: Mapped[int]
    title: Mapped[str]
    artist: Mapped[Optional[str]]
    is_played: Mapped[bool] = mapped_column(default=False)
    played_at: Mapped[Optional[datetime]]

    game: Mapped[DBGame] = relationship(back_populates="songs")


class DBParticipant(Base):
    __tablename__ = "participants"
    __table_args__ = (UniqueConstraint("game_id", "session_token"),)
    id: Mapped[UUID] = mapped_column(primary_key=True)
    game_id: Mapped[UUID] = mapped_column(ForeignKey("games.id", ondelete="CASCADE"))
    name: Mapped[str]
    session_token: Mapped[str]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    # grid position (as string, JSON keys) -> song id (as string)
    assignments: Mapped[dict[str, str]] = mapped_column(JSON, default=dict)
    is_grid_complete: Mapped[bool] = mapped_column(default=False)
    has_won: Mapped[bool] = mapped_column(default=False)
    won_at: Mapped[Optional[datetime]]

    game: Mapped[DBGame] = relationship(back_populates="participants")
