from __future__ import annotations

import logging
from typing import List

from tale.application.mappers.save_mapper import game_from_document, game_to_document
from tale.application.services.game_service import GameService
from tale.domain.errors import SaveError
from tale.domain.events import GameLoaded, GameSaved
from tale.domain.repositories import SaveRepository


logger = logging.getLogger(__name__)


class SaveService:
    def __init__(self, repository: SaveRepository) -> None:
        self.repository = repository

    def save(self, game: GameService, slot: str) -> None:
        self.repository.save(slot, game_to_document(game.state))
        logger.info("Saved game to slot %s", slot)
        game.event_bus.publish(GameSaved(slot=slot, time=game.time))

    def load(self, game: GameService, slot: str) -> None:
        """Replace the session state with a stored one.

        The current state is left untouched when the document fails to load.
        """
        document = self.repository.load(slot)
        if document is None:
            raise SaveError(f"No saved game in slot {slot}")
        game.state = game_from_document(document, game.definitions)
        game.recalculate()
        game.update_npcs_present()
        logger.info("Loaded game from slot %s", slot)
        game.event_bus.publish(GameLoaded(slot=slot, time=game.time))

    def list_slots(self) -> List[str]:
        return self.repository.list_slots()

    def delete(self, slot: str) -> bool:
        return self.repository.delete(slot)
