"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from src.api.models import (
    AssignSongsRequest,
    BingoStatusResponse,
    ChangeStatusRequest,
    CreateGameRequest,
    DeleteGameRequest,
    DuplicateGameRequest,
    GameResponse,
    GetBingoStatusRequest,
    GetGameRequest,
    GridCellResponse,
    JoinGameRequest,
    MarkSongRequest,
    MarkSongResponse,
    ParticipantResponse,
    SongResponse,
    UpdateSizeRequest,
    UpdateSongsRequest,
    UpdateTitleRequest,
)
from src.bingo.entities import Participant, Song
from src.bingo.game import BingoGame
from src.bingo.status import TransitionOptions
from src.core.exceptions import ParticipantError, RepositoryError
from src.core.models import GameModel
from src.core.settings import get_settings
from src.core.shared_types import required_song_count
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class BingoService:
    """Orchestration of layers for a DJ bingo game."""

    def __init__(
        self, repository: GameRepository, recent_songs_limit: Optional[int] = None
    ) -> None:
        self.repo = repository
        self.recent_songs_limit = (
            recent_songs_limit or get_settings().recent_songs_limit
        )

    # -- Admin: game setup --
    def create_game(self, request: CreateGameRequest) -> GameResponse:
        """Admin creates a new game (optionally with an initial song list)."""
        game = BingoGame.new_game(
            title=request.title,
            size=request.size,
            songs=[(song.title, song.artist) for song in request.songs],
        )
        stored_game, game_id = self.repo.create_game(game.to_model())
        logger.info("Created game %s (%s)", game_id, game.size)
        return self._create_game_response(game_id, stored_game)

    def duplicate_game(self, request: DuplicateGameRequest) -> GameResponse:
        """Copy title, size and songs of an existing game into a new game."""
        original = BingoGame.from_model(self._fetch_game(request.game_id))
        copy = original.duplicate()
        stored_game, game_id = self.repo.create_game(copy.to_model())
        logger.info("Duplicated game %s into %s", request.game_id, game_id)
        return self._create_game_response(game_id, stored_game)

    def update_title(self, request: UpdateTitleRequest) -> GameResponse:
        game = BingoGame.from_model(self._fetch_game(request.game_id, for_update=True))
        game.rename(request.title)
        return self._store(request.game_id, game)

    def update_size(self, request: UpdateSizeRequest) -> GameResponse:
        game = BingoGame.from_model(self._fetch_game(request.game_id, for_update=True))
        game.resize(request.size)
        return self._store(request.game_id, game)

    def update_songs(self, request: UpdateSongsRequest) -> GameResponse:
        """Replace the whole song list (EDITING only)."""
        game = BingoGame.from_model(self._fetch_game(request.game_id, for_update=True))
        game.replace_songs([(song.title, song.artist) for song in request.songs])
        return self._store(request.game_id, game)

    def change_status(self, request: ChangeStatusRequest) -> GameResponse:
        """Move the game through its lifecycle. Side effects are stored together with the new status."""
        game = BingoGame.from_model(self._fetch_game(request.game_id, for_update=True))
        game.change_status(
            request.new_status,
            TransitionOptions(
                preserve_played_songs=request.preserve_played_songs,
                preserve_participants=request.preserve_participants,
            ),
        )
        return self._store(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record (songs and participants go with it)."""
        self.repo.delete_game(request.game_id)

    # -- Participants --
    def join_game(self, request: JoinGameRequest) -> ParticipantResponse:
        game = BingoGame.from_model(self._fetch_game(request.game_id, for_update=True))
        participant = game.add_participant(request.name, request.session_token)
        self._save(request.game_id, game)
        logger.info("Participant %s joined game %s", participant.id, request.game_id)
        return self._participant_response(participant)

    def assign_songs(self, request: AssignSongsRequest) -> BingoStatusResponse:
        """Participant stores the songs of their grid."""
        game = BingoGame.from_model(self._fetch_game(request.game_id, for_update=True))
        participant = self._find_participant(game, request.session_token)
        game.assign_songs(
            participant.id,
            {assignment.position: assignment.song_id for assignment in request.assignments},
        )
        self._save(request.game_id, game)
        return self._bingo_status_response(game, participant)

    def get_bingo_status(self, request: GetBingoStatusRequest) -> BingoStatusResponse:
        """
        Participant's own view of the game.
        ----
        Used in "polling" loop by the participant's page to see which songs were played.
        """
        game = BingoGame.from_model(self._fetch_game(request.game_id))
        participant = self._find_participant(game, request.session_token)
        return self._bingo_status_response(game, participant)

    # -- Playing --
    def mark_song(self, request: MarkSongRequest) -> MarkSongResponse:
        """Toggle a song and store the resulting wins / lost wins in the same write."""
        game = BingoGame.from_model(self._fetch_game(request.game_id, for_update=True))
        song, result = game.mark_song(request.song_id, request.is_played)
        self._save(request.game_id, game)
        return MarkSongResponse(
            song=self._song_response(song),
            new_winners=[self._participant_response(p) for p in result.new_winners],
            revoked_winners=[self._participant_response(p) for p in result.revoked],
        )

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by the admin page to pick up new winners.
        """
        return self._create_game_response(
            request.game_id, self._fetch_game(request.game_id)
        )

    def get_participants(self, request: GetGameRequest) -> list[ParticipantResponse]:
        game = BingoGame.from_model(self._fetch_game(request.game_id))
        return [self._participant_response(p) for p in game.participants]

    def get_incomplete_participants(
        self, request: GetGameRequest
    ) -> list[ParticipantResponse]:
        """Shown as a warning before the admin starts the game."""
        game = BingoGame.from_model(self._fetch_game(request.game_id))
        return [self._participant_response(p) for p in game.incomplete_participants()]

    def get_recently_played(self, request: GetGameRequest) -> list[SongResponse]:
        game = BingoGame.from_model(self._fetch_game(request.game_id))
        return [
            self._song_response(song)
            for song in game.recently_played(self.recent_songs_limit)
        ]

    # -- Internal helpers --
    def _store(self, game_id: UUID, game: BingoGame) -> GameResponse:
        return self._create_game_response(game_id, self._save(game_id, game))

    def _save(self, game_id: UUID, game: BingoGame) -> GameModel:
        stored = self.repo.update_game(game_id, game.to_model())
        if stored is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return stored

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        game = BingoGame.from_model(model)
        return GameResponse(
            game_id=game_id,
            title=game.title,
            size=game.size,
            grid_size=game.grid_size,
            required_song_count=required_song_count(game.size),
            status=game.status,
            is_active=game.is_active,
            songs=[self._song_response(song) for song in game.songs],
            participants=[self._participant_response(p) for p in game.participants],
            winners=[self._participant_response(p) for p in game.winners()],
        )

    def _bingo_status_response(
        self, game: BingoGame, participant: Participant
    ) -> BingoStatusResponse:
        return BingoStatusResponse(
            participant=self._participant_response(participant),
            grid_size=game.grid_size,
            grid=[
                GridCellResponse(
                    position=cell.position,
                    song=self._song_response(cell.song),
                    is_played=cell.is_played,
                )
                if cell is not None
                else None
                for cell in game.bingo_status(participant.id)
            ],
            has_won=participant.has_won,
            won_at=participant.won_at,
        )

    @staticmethod
    def _song_response(song: Song) -> SongResponse:
        return SongResponse(
            id=song.id,
            title=song.title,
            artist=song.artist,
            is_played=song.is_played,
            played_at=song.played_at,
        )

    @staticmethod
    def _participant_response(participant: Participant) -> ParticipantResponse:
        return ParticipantResponse(
            id=participant.id,
            name=participant.name,
            created_at=participant.created_at,
            is_grid_complete=participant.is_grid_complete,
            has_won=participant.has_won,
            won_at=participant.won_at,
        )

    @staticmethod
    def _find_participant(game: BingoGame, session_token: str) -> Participant:
        participant = game.find_participant_by_token(session_token)
        if participant is None:
            raise ParticipantError("Participant not found for this game.")
        return participant

    def _fetch_game(self, game_id: UUID, for_update: bool = False) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id, for_update=for_update)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
