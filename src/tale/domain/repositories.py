from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar

from tale.domain.errors import DefinitionNotFoundError
from tale.domain.models.card import CardDefinition
from tale.domain.models.faction import FactionDefinition
from tale.domain.models.item import ItemDefinition
from tale.domain.models.location import LocationDefinition
from tale.domain.models.npc import NPCDefinition


T = TypeVar("T")


class DefinitionRepository(ABC, Generic[T]):
    kind: str = "Definition"

    @abstractmethod
    def get(self, definition_id: str) -> Optional[T]:
        raise NotImplementedError

    @abstractmethod
    def list_ids(self) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def register(self, definition_id: str, definition: T) -> None:
        raise NotImplementedError

    def require(self, definition_id: str) -> T:
        definition = self.get(definition_id)
        if definition is None:
            raise DefinitionNotFoundError(self.kind, str(definition_id))
        return definition

    def __contains__(self, definition_id: object) -> bool:
        return isinstance(definition_id, str) and self.get(definition_id) is not None


@dataclass
class Definitions:
    """The static content a session is played against."""

    locations: DefinitionRepository[LocationDefinition]
    npcs: DefinitionRepository[NPCDefinition]
    cards: DefinitionRepository[CardDefinition]
    items: DefinitionRepository[ItemDefinition]
    factions: DefinitionRepository[FactionDefinition]


class SaveRepository(ABC):
    @abstractmethod
    def save(self, slot: str, document: Dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def load(self, slot: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def list_slots(self) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, slot: str) -> bool:
        raise NotImplementedError
