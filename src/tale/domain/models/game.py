from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List

from tale.domain.models.location import LocationState
from tale.domain.models.npc import NPCState
from tale.domain.models.player import Player
from tale.domain.models.scene import SceneFrame


SAVE_VERSION = 1
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
START_DATE = datetime(1902, 1, 5, 12, 0, 0, tzinfo=timezone.utc)
START_TIME = int((START_DATE - EPOCH).total_seconds())
DEFAULT_LOCATION = "station"


@dataclass
class GameState:
    """Everything a save captures, plus the transient `npcs_present` list."""

    time: int = START_TIME
    current_location: str = DEFAULT_LOCATION
    scene: SceneFrame = field(default_factory=SceneFrame)
    player: Player = field(default_factory=Player)
    locations: Dict[str, LocationState] = field(default_factory=dict)
    npcs: Dict[str, NPCState] = field(default_factory=dict)
    score: int = 0
    version: int = SAVE_VERSION
    npcs_present: List[str] = field(default_factory=list)
