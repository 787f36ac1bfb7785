"""Implementation of (Game)Repository using SQLAlchemy"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.models import GameModel, ParticipantModel, SongModel
from src.db.schema import DBGame, DBParticipant, DBSong


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Some backends (SQLite) hand back naive datetimes. Everything is stored in UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID, for_update: bool = False) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id, for_update=for_update)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        new_id = uuid4()
        game_db = DBGame(id=new_id, created_at=game.created_at)
        self._write(game_db, game)
        self.db.add(game_db)
        self._commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Store the game together with all of its songs and participants, in a single commit."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        self._write(game_db, game)
        self._commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self._commit()
        return game_model

    def _fetch_game(self, game_id: UUID, for_update: bool = False) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        return self.db.scalar(query)

    def _commit(self) -> None:
        """Either everything that was written goes in, or nothing does."""
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise RepositoryError(f"Could not store game: {exc}") from exc

    def _write(self, game_db: DBGame, game: GameModel) -> None:
        """Copy the GameModel onto the SQLAlchemy model, reusing rows of songs / participants that already exist."""
        game_db.title = game.title
        game_db.size = game.size
        game_db.status = game.status
        game_db.is_active = game.is_active

        existing_songs = {song.id: song for song in game_db.songs}
        songs = []
        for index, song in enumerate(game.songs):
            song_db = existing_songs.get(song.id) or DBSong(id=song.id)
            song_db.position = index
            song_db.title = song.title
            song_db.artist = song.artist
            song_db.is_played = song.is_played
            song_db.played_at = song.played_at
            songs.append(song_db)
        game_db.songs = songs

        existing_participants = {p.id: p for p in game_db.participants}
        participants = []
        for participant in game.participants:
            participant_db = existing_participants.get(participant.id) or DBParticipant(
                id=participant.id
            )
            participant_db.name = participant.name
            participant_db.session_token = participant.session_token
            participant_db.created_at = participant.created_at
            participant_db.assignments = {
                str(position): str(song_id)
                for position, song_id in participant.assignments.items()
            }
            participant_db.is_grid_complete = participant.is_grid_complete
            participant_db.has_won = participant.has_won
            participant_db.won_at = participant.won_at
            participants.append(participant_db)
        game_db.participants = participants

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            title=game_db.title,
            size=game_db.size,
            status=game_db.status,
            created_at=_as_utc(game_db.created_at),
            is_active=game_db.is_active,
            songs=[
                SongModel(
                    id=song.id,
                    title=song.title,
                    artist=song.artist,
                    is_played=song.is_played,
                    played_at=_as_utc(song.played_at),
                )
                for song in game_db.songs
            ],
            participants=[
                ParticipantModel(
                    id=p.id,
                    name=p.name,
                    session_token=p.session_token,
                    created_at=_as_utc(p.created_at),
                    assignments={
                        int(position): UUID(song_id)
                        for position, song_id in p.assignments.items()
                    },
                    is_grid_complete=p.is_grid_complete,
                    has_won=p.has_won,
                    won_at=_as_utc(p.won_at),
                )
                for p in game_db.participants
            ],
        )
