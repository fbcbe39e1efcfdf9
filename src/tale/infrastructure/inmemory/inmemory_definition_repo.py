from typing import Dict, Generic, List, Optional, TypeVar

from tale.domain.errors import ConfigurationError
from tale.domain.models.card import CardDefinition
from tale.domain.models.faction import FactionDefinition
from tale.domain.models.item import ItemDefinition
from tale.domain.models.location import LocationDefinition
from tale.domain.models.npc import NPCDefinition
from tale.domain.repositories import DefinitionRepository, Definitions


T = TypeVar("T")


class InMemoryDefinitionRepository(DefinitionRepository[T], Generic[T]):
    def __init__(self, kind: str, definitions: Optional[Dict[str, T]] = None) -> None:
        self.kind = kind
        self._definitions: Dict[str, T] = {}
        for definition_id, definition in (definitions or {}).items():
            self.register(definition_id, definition)

    def get(self, definition_id: str) -> Optional[T]:
        return self._definitions.get(definition_id)

    def list_ids(self) -> List[str]:
        return sorted(self._definitions)

    def register(self, definition_id: str, definition: T) -> None:
        key = str(definition_id or "").strip()
        if not key:
            raise ConfigurationError(f"{self.kind} definition id must be a non-empty string")
        if key in self._definitions:
            raise ConfigurationError(f"Duplicate {self.kind} definition: {key}")
        self._definitions[key] = definition


def empty_definitions() -> Definitions:
    return Definitions(
        locations=InMemoryDefinitionRepository[LocationDefinition]("Location"),
        npcs=InMemoryDefinitionRepository[NPCDefinition]("NPC"),
        cards=InMemoryDefinitionRepository[CardDefinition]("Card"),
        items=InMemoryDefinitionRepository[ItemDefinition]("Item"),
        factions=InMemoryDefinitionRepository[FactionDefinition]("Faction"),
    )
