from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional


@dataclass(frozen=True)
class Pronouns:
    subject: str
    object: str
    possessive: str


PRONOUNS = {
    "he": Pronouns("he", "him", "his"),
    "she": Pronouns("she", "her", "her"),
    "they": Pronouns("they", "them", "their"),
}


@dataclass
class NPCDefinition:
    """Static description of a non-player character.

    Hooks are scripts: a callable `(game, params)`, an `Instruction`, a
    `[name, params]` pair or an expression string.

    - `on_move` runs once per hour boundary crossed. When it is absent and a
      `schedule` is given, the schedule is followed instead.
    - `on_wait` runs per wait chunk while the NPC shares the player's
      location and may interrupt the wait by adding options.
    - `on_leave_player` runs right before a schedule moves the NPC away
      from the player.
    """

    name: Optional[str] = None
    uname: Optional[str] = None
    description: str = ""
    speech_color: Optional[str] = None
    pronouns: Pronouns = PRONOUNS["they"]
    faction: Optional[str] = None
    schedule: List[Any] = field(default_factory=list)
    generate: Optional[Callable[[Any, "NPCState"], None]] = None
    on_first_approach: Any = None
    on_approach: Any = None
    on_move: Any = None
    on_wait: Any = None
    on_leave_player: Any = None
    after_update: Any = None
    scripts: Dict[str, Any] = field(default_factory=dict)


def default_npc_stats() -> Dict[str, int]:
    return {"approachCount": 0, "nameKnown": 0, "affection": 0}


@dataclass
class NPCState:
    id: str
    stats: Dict[str, int] = field(default_factory=default_npc_stats)
    location: Optional[str] = None

    @property
    def approach_count(self) -> int:
        return int(self.stats.get("approachCount", 0))

    @approach_count.setter
    def approach_count(self, value: int) -> None:
        self.stats["approachCount"] = int(value)

    @property
    def name_known(self) -> int:
        return int(self.stats.get("nameKnown", 0))

    @name_known.setter
    def name_known(self, value: int) -> None:
        self.stats["nameKnown"] = int(value)


def display_name(definition: NPCDefinition, state: NPCState) -> str:
    name = definition.name if state.name_known > 0 else definition.uname
    return name or "someone"
