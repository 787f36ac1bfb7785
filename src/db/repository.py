"""Protocol repository (implemented with SQLAlchemy, mocked with a dictionary in the tests)"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID, for_update: bool = False) -> GameModel | None:
        """
        Get game by ID, if record exists.
        With for_update, concurrent writers of the same game wait until the current one has stored its changes.
        """
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Store the game together with all of its songs and participants, as a single unit."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record (and its songs / participants)."""
        ...
