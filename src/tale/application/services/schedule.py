from __future__ import annotations

import logging
from typing import Any, Iterable

from tale.domain.models.npc import NPCState
from tale.domain.models.schedule import coerce_schedule, resolve_location, scheduled_locations


logger = logging.getLogger(__name__)


def follow_schedule(game: Any, npc: NPCState, entries: Iterable[Any]) -> None:
    """Place `npc` according to its weekly time-table.

    Uses the whole hour and day of week from the game clock. With no
    matching entry the NPC is cleared only when it currently stands in one
    of the schedule's own locations. An NPC about to leave the player runs
    its `on_leave_player` hook first, if the player is awake and free.
    """
    schedule = coerce_schedule(entries)
    hour = int(game.hour_of_day)
    day = game.day_of_week

    target = resolve_location(schedule, hour, day)
    if target is None:
        target = None if npc.location in scheduled_locations(schedule) else npc.location

    if npc.location == game.current_location and target != npc.location:
        hook = game.definitions.npcs.require(npc.id).on_leave_player
        if hook is not None and not game.player.sleeping and not game.in_scene:
            game.scene.npc = npc.id
            game.execute(hook, {"npc": npc.id})

    if target != npc.location:
        logger.debug("NPC %s moves %s -> %s", npc.id, npc.location, target)
    npc.location = target
