from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


@dataclass
class ItemDefinition:
    name: str
    description: str = ""
    slot: Optional[str] = None
    value: int = 0
    on_consume: Any = None
    on_examine: Any = None
    calc_stats: Optional[Callable[[Any, str, Dict[str, float]], None]] = None


@dataclass
class InventoryEntry:
    id: str
    number: int = 1
