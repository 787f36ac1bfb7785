"""Unit tests for src/db/sql_repository.py"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.models import GameModel, ParticipantModel, SongModel
from src.core.shared_types import BingoSize, GameStatus
from src.db.sql_repository import SQLGameRepository

CREATED = datetime(2025, 6, 1, 20, 0, tzinfo=timezone.utc)
PLAYED = datetime(2025, 6, 1, 21, 15, 30, 123456, tzinfo=timezone.utc)


@pytest.fixture
def model() -> GameModel:
    """Game in PLAYING with 9 songs (first one played) and one participant with a full grid."""
    songs = [
        SongModel(id=uuid4(), title=f"Track {i}", artist=f"DJ {i}" if i % 2 else None)
        for i in range(9)
    ]
    songs[0].is_played = True
    songs[0].played_at = PLAYED
    participant = ParticipantModel(
        id=uuid4(),
        name="Dancer",
        session_token="token",
        created_at=CREATED,
        assignments={position: song.id for position, song in enumerate(songs)},
        is_grid_complete=True,
    )
    return GameModel(
        title="Friday night",
        size=BingoSize.THREE_BY_THREE,
        status=GameStatus.PLAYING,
        created_at=CREATED,
        songs=songs,
        participants=[participant],
    )


def test_create_game(db_session_repo: Session, model: GameModel) -> None:
    """Conversion from a GameModel to DBGame (+ songs and participants) for a new entry to the database."""
    repo = SQLGameRepository(db_session_repo)
    record_in_db, _ = repo.create_game(model)
    assert isinstance(record_in_db, GameModel)
    assert record_in_db == model


def test_get_game_by_id(db_session_repo: Session, model: GameModel) -> None:
    """Create a game, then fetch it from db."""
    repo = SQLGameRepository(db_session_repo)
    expected_game, game_id = repo.create_game(model)
    assert repo.get_game(game_id) == expected_game
    assert repo.get_game(game_id, for_update=True) == expected_game


def test_get_unknown_game(db_session_repo: Session, model: GameModel) -> None:
    """Should return None if ID does not match anything in database."""
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_game(uuid4()) is None

    repo.create_game(model)
    assert repo.get_game(uuid4()) is None


def test_assignments_survive_round_trip(db_session_repo: Session, model: GameModel) -> None:
    """Positions are stored as JSON keys, so they have to come back as ints (and song ids as UUIDs)."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(model)
    stored = repo.get_game(game_id)
    assert stored is not None
    assignments = stored.participants[0].assignments
    assert assignments == model.participants[0].assignments
    assert all(isinstance(position, int) for position in assignments)


def test_update_game_with_children(db_session_repo: Session, model: GameModel) -> None:
    """Songs / participants are updated, added and removed in a single update."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(model)

    model.status = GameStatus.FINISHED
    model.songs[1].is_played = True
    model.songs[1].played_at = PLAYED
    model.songs.pop()
    model.participants[0].has_won = True
    model.participants[0].won_at = PLAYED
    model.participants.append(
        ParticipantModel(
            id=uuid4(), name="Late", session_token="late", created_at=PLAYED
        )
    )

    updated_game = repo.update_game(game_id, model)
    assert updated_game == model
    assert repo.get_game(game_id) == model


def test_replace_all_songs(db_session_repo: Session, model: GameModel) -> None:
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(model)

    model.songs = [SongModel(id=uuid4(), title="Brand new")]
    model.participants = []
    repo.update_game(game_id, model)

    stored = repo.get_game(game_id)
    assert stored is not None
    assert [song.title for song in stored.songs] == ["Brand new"]
    assert stored.participants == []


def test_consecutive_game_updates(db_session_repo: Session, model: GameModel) -> None:
    """Tests that we can successfully make multiple updates to the same game."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(model)

    for index in range(1, 4):
        model.songs[index].is_played = True
        model.songs[index].played_at = PLAYED
        repo.update_game(game_id, model)

    after_all_updates = repo.get_game(game_id)
    assert after_all_updates is not None
    assert [song.is_played for song in after_all_updates.songs[:5]] == [
        True,
        True,
        True,
        True,
        False,
    ]


def test_update_visible_to_other_session(
    db_session_repo: Session, db_session_shared: Session, model: GameModel
) -> None:
    """A committed update is seen as a whole by a second connection."""
    writer = SQLGameRepository(db_session_repo)
    reader = SQLGameRepository(db_session_shared)
    _, game_id = writer.create_game(model)

    model.status = GameStatus.ENTRY
    for song in model.songs:
        song.is_played = False
        song.played_at = None
    writer.update_game(game_id, model)

    seen = reader.get_game(game_id)
    assert seen is not None
    assert seen.status == GameStatus.ENTRY
    assert not any(song.is_played for song in seen.songs)


def test_failed_update_leaves_stored_game_untouched(
    db_session_repo: Session, model: GameModel
) -> None:
    """A reset to ENTRY that cannot be committed is rolled back as a whole: status, songs and participants."""
    repo = SQLGameRepository(db_session_repo)
    stored_before, game_id = repo.create_game(model)

    model.status = GameStatus.ENTRY
    for song in model.songs:
        song.is_played = False
        song.played_at = None
    # same session token as the existing participant: violates the unique constraint
    model.participants.append(
        ParticipantModel(
            id=uuid4(), name="Impostor", session_token="token", created_at=PLAYED
        )
    )
    with pytest.raises(RepositoryError):
        repo.update_game(game_id, model)

    assert repo.get_game(game_id) == stored_before

    # the session is usable again after the rollback
    model.participants.pop()
    assert repo.update_game(game_id, model) == model
    assert repo.get_game(game_id) == model


def test_attempt_updating_unknown_game(db_session_repo: Session, model: GameModel) -> None:
    """the update_game() method should break early and return None"""
    repo = SQLGameRepository(db_session_repo)
    assert repo.update_game(uuid4(), model) is None


def test_delete_game(db_session_repo: Session, model: GameModel) -> None:
    """Record of the game should no longer exist after deletion"""
    repo = SQLGameRepository(db_session_repo)
    created_game, game_id = repo.create_game(model)
    deleted_game = repo.delete_game(game_id)

    # the correct game should be deleted
    assert deleted_game == created_game

    # The game should no longer be available in db
    assert repo.get_game(game_id) is None


def test_attempt_deleting_unknown_game(db_session_repo: Session) -> None:
    """the delete_game() method should break early and return None"""
    repo = SQLGameRepository(db_session_repo)
    assert repo.delete_game(uuid4()) is None
