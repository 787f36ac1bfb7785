"""
The BingoGame class is the entrypoint into the domain layer for the service layer.
It is responsible for enforcing the lifecycle rules (which operation is allowed in which status),
applying the side effects of status changes, and keeping the win state of participants consistent.
All changes are made in memory: the service persists the whole game afterwards in one go.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Optional, Self
from uuid import UUID

from src.bingo.entities import Participant, Song
from src.bingo.grid import is_complete_assignment
from src.bingo.reconciler import ReconcileResult, reconcile, reset_wins
from src.bingo.status import TransitionOptions, require_status, validate_transition
from src.core.exceptions import (
    GameStateError,
    GridAssignmentError,
    ParticipantError,
    RepositoryError,
)
from src.core.models import GameModel, utc_now
from src.core.shared_types import BingoSize, GameStatus, grid_size

logger = logging.getLogger(__name__)

DUPLICATE_SUFFIX = " (copy)"

# (title, artist) as supplied by the admin
NewSong = tuple[str, Optional[str]]


@dataclass(frozen=True)
class GridCell:
    """A filled cell of a participant's grid, as shown to the participant."""

    position: int
    song: Song

    @property
    def is_played(self) -> bool:
        return self.song.is_played


@dataclass
class BingoGame:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    title: str
    size: BingoSize
    status: GameStatus
    created_at: datetime
    is_active: bool
    songs: list[Song]
    participants: list[Participant]

    @classmethod
    def new_game(
        cls,
        title: str,
        size: BingoSize,
        songs: Iterable[NewSong] = (),
        now: Optional[datetime] = None,
    ) -> Self:
        """Games always start in EDITING."""
        return cls(
            title=title,
            size=BingoSize(size),
            status=GameStatus.EDITING,
            created_at=now or utc_now(),
            is_active=True,
            songs=[Song.new(song_title, artist) for song_title, artist in songs],
            participants=[],
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a BingoGame from the information the Service layer actually has"""
        if model.status not in GameStatus.__members__:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(GameStatus)}"
            )
        if model.size not in BingoSize.__members__:
            raise GameStateError(
                f"Invalid size: {model.size!r}. \nPick one from {','.join(BingoSize)}"
            )
        return cls(
            title=model.title,
            size=BingoSize(model.size),
            status=GameStatus(model.status),
            created_at=model.created_at,
            is_active=model.is_active,
            songs=[Song.from_model(song) for song in model.songs],
            participants=[Participant.from_model(p) for p in model.participants],
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            title=self.title,
            size=self.size.value,
            status=self.status.value,
            created_at=self.created_at,
            is_active=self.is_active,
            songs=[song.to_model() for song in self.songs],
            participants=[participant.to_model() for participant in self.participants],
        )

    @property
    def grid_size(self) -> int:
        return grid_size(self.size)

    # --- EDITING ---
    def rename(self, title: str) -> None:
        self.title = title

    def resize(self, size: BingoSize) -> None:
        """Participants kept from ENTRY keep their assignments, but completeness is judged on the new size."""
        require_status(self.status, GameStatus.EDITING, "change grid size")
        self.size = BingoSize(size)
        for participant in self.participants:
            participant.is_grid_complete = is_complete_assignment(
                participant.assignments, self.grid_size
            )

    def replace_songs(self, songs: Iterable[NewSong]) -> None:
        """The song list is always replaced as a whole."""
        require_status(self.status, GameStatus.EDITING, "edit songs")
        self.songs = [Song.new(title, artist) for title, artist in songs]
        logger.info("Song list replaced: %d songs", len(self.songs))

    def duplicate(self, now: Optional[datetime] = None) -> Self:
        """Fresh game in EDITING with the same size and (unplayed) songs. Participants are not copied."""
        return type(self).new_game(
            title=f"{self.title}{DUPLICATE_SUFFIX}",
            size=self.size,
            songs=[(song.title, song.artist) for song in self.songs],
            now=now,
        )

    # --- STATUS ---
    def change_status(
        self, target: GameStatus, options: Optional[TransitionOptions] = None
    ) -> None:
        """Validate the transition and apply its side effects. On error, nothing is modified."""
        options = options or TransitionOptions()
        current = self.status
        validate_transition(current, target, self.size, len(self.songs), options)

        if (current, target) == (GameStatus.ENTRY, GameStatus.EDITING):
            if not options.preserve_participants:
                logger.info("Removing %d participant(s)", len(self.participants))
                self.participants = []

        elif (current, target) == (GameStatus.PLAYING, GameStatus.ENTRY):
            if not options.preserve_played_songs:
                logger.info("Resetting played songs and wins")
                for song in self.songs:
                    song.reset()
                reset_wins(self.participants)

        elif (current, target) == (GameStatus.ENTRY, GameStatus.PLAYING):
            incomplete = self.incomplete_participants()
            if incomplete:
                # Not blocking: these participants simply cannot win this game.
                logger.warning(
                    "Starting game with %d incomplete grid(s): %s",
                    len(incomplete),
                    ", ".join(p.name for p in incomplete),
                )

        self.status = target
        logger.info("Status changed from %s to %s", current, target)

    # --- ENTRY ---
    def add_participant(
        self, name: str, session_token: str, now: Optional[datetime] = None
    ) -> Participant:
        require_status(self.status, GameStatus.ENTRY, "join game")
        if not self.is_active:
            raise GameStateError("Game is not active.")
        if self.find_participant_by_token(session_token) is not None:
            raise ParticipantError("Already joined this game.")

        participant = Participant.new(name, session_token, now=now)
        self.participants.append(participant)
        return participant

    def assign_songs(
        self, participant_id: UUID, assignments: Mapping[int, UUID]
    ) -> Participant:
        """
        (Re)write the grid of a participant. Previous assignments are discarded.

        A partially filled grid is accepted (and stays incomplete), a grid with every
        position filled is marked complete.
        """
        require_status(self.status, GameStatus.ENTRY, "edit grid")
        participant = self.get_participant(participant_id)

        cell_count = self.grid_size**2
        song_ids = {song.id for song in self.songs}
        for position, song_id in assignments.items():
            if not 0 <= position < cell_count:
                raise GridAssignmentError(
                    f"Position {position} is outside of the {self.grid_size}x{self.grid_size} grid."
                )
            if song_id not in song_ids:
                raise GridAssignmentError(f"Song {song_id} is not part of this game.")
        if len(set(assignments.values())) != len(assignments):
            raise GridAssignmentError("Each song can only be used once per grid.")

        participant.assignments = dict(assignments)
        participant.is_grid_complete = is_complete_assignment(
            participant.assignments, self.grid_size
        )
        return participant

    def incomplete_participants(self) -> list[Participant]:
        return [p for p in self.participants if not p.is_grid_complete]

    # --- PLAYING ---
    def mark_song(
        self, song_id: UUID, is_played: bool, now: Optional[datetime] = None
    ) -> tuple[Song, ReconcileResult]:
        """Toggle a song, then bring the win state of every participant up to date."""
        require_status(self.status, GameStatus.PLAYING, "mark songs as played")
        now = now or utc_now()
        song = self.get_song(song_id)
        song.mark(is_played, now)
        logger.info("Song %r marked as %s", song.label, "played" if is_played else "not played")
        return song, reconcile(self, self.participants, now=now)

    def recently_played(self, limit: int) -> list[Song]:
        """Most recently played songs first."""
        played = [song for song in self.songs if song.played_at is not None]
        played.sort(key=lambda song: song.played_at, reverse=True)
        return played[:limit]

    def winners(self) -> list[Participant]:
        return [p for p in self.participants if p.has_won]

    def bingo_status(self, participant_id: UUID) -> list[Optional[GridCell]]:
        """The participant's grid, flattened row by row. Empty cells are None."""
        participant = self.get_participant(participant_id)
        songs = {song.id: song for song in self.songs}
        grid: list[Optional[GridCell]] = [None] * (self.grid_size**2)
        for position, song_id in participant.assignments.items():
            song = songs.get(song_id)
            if song is not None and 0 <= position < len(grid):
                grid[position] = GridCell(position=position, song=song)
        return grid

    # --- LOOKUPS ---
    def get_song(self, song_id: UUID) -> Song:
        song = next((s for s in self.songs if s.id == song_id), None)
        if song is None:
            raise RepositoryError(f"Song with {song_id=} not found in this game.")
        return song

    def get_participant(self, participant_id: UUID) -> Participant:
        participant = next(
            (p for p in self.participants if p.id == participant_id), None
        )
        if participant is None:
            raise ParticipantError(f"Participant with {participant_id=} not found.")
        return participant

    def find_participant_by_token(self, session_token: str) -> Optional[Participant]:
        return next(
            (p for p in self.participants if p.session_token == session_token), None
        )
