"""Unit tests for src/bingo/reconciler.py"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from src.bingo.entities import Participant, Song
from src.bingo.reconciler import detect_new_winners, reconcile, reset_wins
from src.core.shared_types import BingoSize

NOW = datetime(2025, 6, 1, 21, 30, tzinfo=timezone.utc)
EARLIER = NOW - timedelta(minutes=10)


@dataclass
class SongPool:
    size: BingoSize
    songs: list[Song] = field(default_factory=list)


@dataclass
class Snapshot:
    id: UUID
    has_won: bool


@pytest.fixture
def pool() -> SongPool:
    """3x3 game with 12 songs, none played."""
    return SongPool(
        size=BingoSize.THREE_BY_THREE,
        songs=[Song.new(f"Song {i}", f"Artist {i}") for i in range(12)],
    )


def make_participant(songs: list[Song], complete: bool = True) -> Participant:
    """Participant with song i on position i for the first 9 songs."""
    participant = Participant.new("Dancer", session_token=str(uuid4()), now=EARLIER)
    participant.assignments = {position: songs[position].id for position in range(9)}
    participant.is_grid_complete = complete
    return participant


def play(pool: SongPool, *indices: int) -> None:
    for index in indices:
        pool.songs[index].mark(True, NOW)


def test_new_win(pool: SongPool) -> None:
    participant = make_participant(pool.songs)
    play(pool, 0, 1, 2)

    result = reconcile(pool, [participant], now=NOW)

    assert participant.has_won
    assert participant.won_at == NOW
    assert result.new_winners == [participant]
    assert result.revoked == []
    assert result.updated == [participant]


def test_no_win_no_change(pool: SongPool) -> None:
    participant = make_participant(pool.songs)
    play(pool, 0, 1, 5)

    result = reconcile(pool, [participant], now=NOW)

    assert not participant.has_won
    assert participant.won_at is None
    assert result.updated == []


def test_existing_win_is_left_untouched(pool: SongPool) -> None:
    """won_at keeps the moment of the original win."""
    participant = make_participant(pool.songs)
    participant.has_won = True
    participant.won_at = EARLIER
    play(pool, 0, 4, 8)

    result = reconcile(pool, [participant], now=NOW)

    assert participant.has_won
    assert participant.won_at == EARLIER
    assert result.updated == []


def test_revocation(pool: SongPool) -> None:
    """Un-marking a song of the winning line takes the win away again."""
    participant = make_participant(pool.songs)
    play(pool, 2, 4, 6)
    reconcile(pool, [participant], now=NOW)
    assert participant.has_won

    pool.songs[4].mark(False, NOW)
    result = reconcile(pool, [participant], now=NOW)

    assert not participant.has_won
    assert participant.won_at is None
    assert result.revoked == [participant]
    assert result.new_winners == []


def test_incomplete_grid_never_wins(pool: SongPool) -> None:
    participant = make_participant(pool.songs, complete=False)
    play(pool, *range(12))

    result = reconcile(pool, [participant], now=NOW)

    assert not participant.has_won
    assert result.updated == []


def test_incomplete_grid_is_not_revoked_either(pool: SongPool) -> None:
    """Skipped means skipped: the stored state of an incomplete participant is not touched."""
    participant = make_participant(pool.songs, complete=False)
    participant.has_won = True
    participant.won_at = EARLIER

    result = reconcile(pool, [participant], now=NOW)

    assert participant.has_won
    assert result.updated == []


def test_unknown_song_counts_as_not_played(pool: SongPool) -> None:
    """A grid pointing to a removed song does not break reconciliation of the others."""
    broken = make_participant(pool.songs)
    broken.assignments[1] = uuid4()
    healthy = make_participant(pool.songs)
    play(pool, 0, 1, 2)

    result = reconcile(pool, [broken, healthy], now=NOW)

    assert not broken.has_won
    assert healthy.has_won
    assert result.new_winners == [healthy]


def test_sparse_complete_grid_is_tolerated(pool: SongPool) -> None:
    participant = make_participant(pool.songs)
    del participant.assignments[8]
    play(pool, 0, 1, 2)

    result = reconcile(pool, [participant], now=NOW)

    assert participant.has_won
    assert result.new_winners == [participant]


def test_multiple_winners_at_once(pool: SongPool) -> None:
    first = make_participant(pool.songs)
    second = make_participant(pool.songs)
    second.assignments = {position: pool.songs[position + 3].id for position in range(9)}
    third = make_participant(pool.songs)
    third.assignments = {
        0: pool.songs[9].id,
        1: pool.songs[10].id,
        2: pool.songs[11].id,
        **{position: pool.songs[position].id for position in range(3, 9)},
    }
    # first: row 0. second: row 0 (songs 3, 4, 5). third: row 1 (songs 3, 4, 5)
    play(pool, 0, 1, 2, 3, 4, 5)

    result = reconcile(pool, [first, second, third], now=NOW)

    assert result.new_winners == [first, second, third]


def test_reset_wins(pool: SongPool) -> None:
    participant = make_participant(pool.songs)
    participant.has_won = True
    participant.won_at = NOW

    reset_wins([participant])

    assert not participant.has_won
    assert participant.won_at is None


# --- detect_new_winners ---
def test_detect_new_winners() -> None:
    one, two = uuid4(), uuid4()
    previous = [Snapshot(one, False), Snapshot(two, True)]
    current = [Snapshot(one, True), Snapshot(two, True)]
    assert detect_new_winners(previous, current) == [one]


def test_detect_multiple_new_winners() -> None:
    ids = [uuid4() for _ in range(3)]
    previous = [Snapshot(i, False) for i in ids]
    current = [Snapshot(i, True) for i in ids]
    assert detect_new_winners(previous, current) == ids


def test_revoked_win_is_not_a_new_winner() -> None:
    one = uuid4()
    assert detect_new_winners([Snapshot(one, True)], [Snapshot(one, False)]) == []


def test_first_snapshot_reports_nobody() -> None:
    one = uuid4()
    assert detect_new_winners([], [Snapshot(one, True)]) == []
