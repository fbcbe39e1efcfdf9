from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional


class CardType(str, Enum):
    QUEST = "Quest"
    EFFECT = "Effect"
    TRAIT = "Trait"
    TASK = "Task"


@dataclass
class CardDefinition:
    """Quest or effect definition.

    `on_tick(game, card, seconds)` runs on every clock advance while the card
    is active. `calc_stats(game, card, stats)` adjusts derived stats during
    recalculation. `after_update` runs after each player action.
    """

    name: str
    type: CardType = CardType.EFFECT
    description: str = ""
    color: Optional[str] = None
    on_tick: Optional[Callable[[Any, "Card", int], None]] = None
    calc_stats: Optional[Callable[[Any, "Card", Dict[str, float]], None]] = None
    after_update: Any = None


@dataclass
class Card:
    id: str
    type: CardType
    completed: bool = False
    fields: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.fields[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.fields[key] = value
