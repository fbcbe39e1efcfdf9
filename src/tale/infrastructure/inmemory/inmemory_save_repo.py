import copy
import logging
from typing import Any, Dict, List, Optional

from tale.domain.repositories import SaveRepository


logger = logging.getLogger(__name__)


class InMemorySaveRepository(SaveRepository):
    """Process-local save slots. Documents are deep-copied in and out."""

    def __init__(self) -> None:
        self._slots: Dict[str, Dict[str, Any]] = {}

    def save(self, slot: str, document: Dict[str, Any]) -> None:
        self._slots[slot] = copy.deepcopy(document)
        logger.info("Stored save slot %s in memory", slot)

    def load(self, slot: str) -> Optional[Dict[str, Any]]:
        document = self._slots.get(slot)
        return copy.deepcopy(document) if document is not None else None

    def list_slots(self) -> List[str]:
        return sorted(self._slots)

    def delete(self, slot: str) -> bool:
        return self._slots.pop(slot, None) is not None
