from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from tale.domain.models.card import Card, CardType
from tale.domain.models.item import InventoryEntry


METER_NAMES = ("Energy", "Mood", "Hunger", "Stress")
MAIN_STAT_NAMES = ("Agility", "Wits", "Charm", "Strength")
SKILL_NAMES = ("Dancing", "Etiquette", "Perception", "Haggling")
STAT_NAMES = METER_NAMES + MAIN_STAT_NAMES + SKILL_NAMES

DEFAULT_BASESTATS: Dict[str, float] = {
    "Energy": 80,
    "Mood": 50,
    "Hunger": 0,
    "Stress": 0,
    "Agility": 30,
    "Wits": 30,
    "Charm": 30,
    "Strength": 30,
}


@dataclass
class Player:
    name: str = "Elise"
    basestats: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_BASESTATS))
    stats: Dict[str, float] = field(default_factory=dict)
    inventory: List[InventoryEntry] = field(default_factory=list)
    worn: Dict[str, str] = field(default_factory=dict)
    cards: List[Card] = field(default_factory=list)
    timers: Dict[str, int] = field(default_factory=dict)
    reputation: Dict[str, int] = field(default_factory=dict)
    # Transient: never persisted, suppresses passive depletion while set.
    sleeping: bool = False

    def item_count(self, item_id: str) -> int:
        return sum(entry.number for entry in self.inventory if entry.id == item_id)

    def has_item(self, item_id: str, count: int = 1) -> bool:
        return self.item_count(item_id) >= max(int(count), 1)

    def add_item(self, item_id: str, number: int = 1) -> None:
        if number <= 0:
            return
        for entry in self.inventory:
            if entry.id == item_id:
                entry.number += int(number)
                return
        self.inventory.append(InventoryEntry(id=item_id, number=int(number)))

    def remove_item(self, item_id: str, number: int = 1) -> int:
        """Remove up to `number` of an item. Returns how many were removed."""
        for entry in list(self.inventory):
            if entry.id != item_id:
                continue
            removed = min(entry.number, max(int(number), 0))
            entry.number -= removed
            if entry.number <= 0:
                self.inventory.remove(entry)
                for slot, worn_id in list(self.worn.items()):
                    if worn_id == item_id:
                        del self.worn[slot]
            return removed
        return 0

    def get_card(self, card_id: str, card_type: Optional[CardType] = None) -> Optional[Card]:
        for card in self.cards:
            if card.id == card_id and (card_type is None or card.type == card_type):
                return card
        return None

    def has_card(self, card_id: str) -> bool:
        return self.get_card(card_id) is not None

    def remove_card(self, card_id: str, card_type: Optional[CardType] = None) -> bool:
        card = self.get_card(card_id, card_type)
        if card is None:
            return False
        self.cards.remove(card)
        return True

    def stat(self, name: str) -> float:
        if name in self.stats:
            return self.stats[name]
        return self.basestats.get(name, 0)

    def skill_test(self, skill: str, difficulty: float = 0) -> bool:
        target = self.stat(skill) - float(difficulty)
        return random.random() * 100 < target
