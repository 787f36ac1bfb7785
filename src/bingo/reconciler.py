"""
Keep the persisted win state of participants in line with the played songs.

`has_won` / `won_at` are a cache of `has_bingo` over the participant's grid.
This module is the only place that writes them.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence
from uuid import UUID

from src.bingo.entities import Participant, Song
from src.bingo.grid import build_played_cells, has_bingo
from src.core.models import utc_now
from src.core.shared_types import BingoSize, grid_size

logger = logging.getLogger(__name__)


class SongPool(Protocol):
    """Anything with a size and the songs that can be placed on a grid (i.e. a BingoGame)."""

    size: BingoSize
    songs: list[Song]


class WinSnapshot(Protocol):
    """What the admin client sees of a participant when polling."""

    @property
    def id(self) -> UUID: ...

    @property
    def has_won(self) -> bool: ...


@dataclass
class ReconcileResult:
    """Participants whose win state changed. `updated` = `new_winners` + `revoked`."""

    new_winners: list[Participant] = field(default_factory=list)
    revoked: list[Participant] = field(default_factory=list)

    @property
    def updated(self) -> list[Participant]:
        return self.new_winners + self.revoked


def reconcile(
    game: SongPool,
    participants: Iterable[Participant],
    now: Optional[datetime] = None,
) -> ReconcileResult:
    """
    Re-evaluate every participant's grid against the current played flags.

    Participants with an incomplete grid are skipped: they can never win.
    A song that no longer exists counts as not played.
    """
    now = now or utc_now()
    size = grid_size(game.size)
    played_by_song = {song.id: song.is_played for song in game.songs}
    result = ReconcileResult()

    for participant in participants:
        if not participant.is_grid_complete:
            continue

        dangling = [
            song_id
            for song_id in participant.assignments.values()
            if song_id not in played_by_song
        ]
        if dangling:
            logger.warning(
                "Participant %s references %d unknown song(s). Counting them as not played.",
                participant.id,
                len(dangling),
            )

        cells = build_played_cells(participant.assignments, played_by_song, size)
        currently_won = has_bingo(cells, size)

        if currently_won and not participant.has_won:
            participant.has_won = True
            participant.won_at = now
            result.new_winners.append(participant)
            logger.info("Participant %s (%s) got bingo", participant.id, participant.name)
        elif not currently_won and participant.has_won:
            participant.has_won = False
            participant.won_at = None
            result.revoked.append(participant)
            logger.info("Participant %s (%s) lost bingo", participant.id, participant.name)

    return result


def reset_wins(participants: Iterable[Participant]) -> None:
    """Forget all wins (used when a game is replayed from scratch)."""
    for participant in participants:
        participant.has_won = False
        participant.won_at = None


def detect_new_winners(
    previous: Sequence[WinSnapshot], current: Sequence[WinSnapshot]
) -> list[UUID]:
    """
    IDs of participants that had not won in `previous` but have won in `current`.

    Participants missing from `previous` are not reported, so the very first poll does not
    announce winners that already existed.
    """
    previously_won = {snapshot.id: snapshot.has_won for snapshot in previous}
    return [
        snapshot.id
        for snapshot in current
        if snapshot.has_won and previously_won.get(snapshot.id) is False
    ]
