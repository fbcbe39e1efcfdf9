from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from tale.application.services.schedule import follow_schedule
from tale.domain.errors import ScriptValidationError
from tale.domain.events import HourChanged, TimeAdvanced, WaitInterrupted
from tale.domain.models.game import EPOCH


SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
DEPLETION_INTERVAL_SECONDS = 15 * 60
WAIT_CHUNK_MINUTES = 10

PASSIVE_DEPLETION_SCRIPT = "passiveDepletion"
TIME_EFFECTS_SCRIPT = "timeEffects"

logger = logging.getLogger(__name__)


def hour_of_day(time: int) -> float:
    return (time % SECONDS_PER_DAY) / SECONDS_PER_HOUR


def day_of_week(time: int) -> int:
    # 1970-01-01 was a Thursday; 0 is Sunday.
    return (time // SECONDS_PER_DAY + 4) % 7


def to_datetime(time: int) -> datetime:
    return EPOCH + timedelta(seconds=time)


def intervals_crossed(previous: int, current: int, interval: int) -> int:
    return current // interval - previous // interval


def calc_ticks(game: Any, seconds: int, interval: int) -> int:
    return intervals_crossed(game.time - seconds, game.time, interval)


def _validate_duration(value: Any, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScriptValidationError(f"{label} must be a number, got {value!r}")
    if value < 0:
        raise ScriptValidationError(f"{label} must be non-negative, got {value!r}")


def move_npcs(game: Any) -> None:
    """One movement pass: every known NPC runs `on_move` or follows its schedule."""
    for npc_id, npc in list(game.npcs.items()):
        definition = game.definitions.npcs.require(npc_id)
        if definition.on_move is not None:
            game.execute(definition.on_move, {"npc": npc_id})
        elif definition.schedule:
            follow_schedule(game, npc, definition.schedule)


def advance_clock(game: Any, seconds: Any) -> None:
    """Move the clock forward and fire the time hooks in a fixed order.

    Passive depletion runs once per 15-minute boundary unless the player
    is asleep; `timeEffects` runs once; each card active before the advance
    and still held afterwards ticks once; NPCs move once if any hour
    boundary was crossed.

    `seconds` must be a whole number; fractional values are rejected
    rather than truncated.
    """
    _validate_duration(seconds, "seconds")
    if seconds != int(seconds):
        raise ScriptValidationError(f"seconds must be a whole number, got {seconds!r}")
    seconds = int(seconds)
    if seconds == 0:
        return

    previous = game.time
    game.time = previous + seconds
    current = game.time
    logger.debug("Clock advanced %ds to %d", seconds, current)

    if not game.player.sleeping and game.registry.lookup(PASSIVE_DEPLETION_SCRIPT) is not None:
        for _ in range(intervals_crossed(previous, current, DEPLETION_INTERVAL_SECONDS)):
            game.run(PASSIVE_DEPLETION_SCRIPT, {})

    cards = list(game.player.cards)
    if game.registry.lookup(TIME_EFFECTS_SCRIPT) is not None:
        game.run(TIME_EFFECTS_SCRIPT, {"seconds": seconds})
    for card in cards:
        # Cards dropped by timeEffects have expired.
        if not any(held is card for held in game.player.cards):
            continue
        definition = game.definitions.cards.require(card.id)
        if definition.on_tick is not None:
            definition.on_tick(game, card, seconds)

    hours_crossed = intervals_crossed(previous, current, SECONDS_PER_HOUR)
    if hours_crossed > 0:
        move_npcs(game)
        game.update_npcs_present()

    game.event_bus.publish(TimeAdvanced(seconds=seconds, time_after=current))
    if hours_crossed > 0:
        game.event_bus.publish(HourChanged(hours_crossed=hours_crossed, hour_after=int(hour_of_day(current))))


def wait(game: Any, minutes: Any, then: Optional[Any] = None) -> bool:
    """Wait in 10-minute chunks, letting present NPCs and the location interrupt.

    Returns True when the wait ran to completion and `then` was run, False
    when a hook put options on the frame.
    """
    _validate_duration(minutes, "minutes")
    remaining = minutes
    waited = 0
    while remaining > 0:
        chunk = min(remaining, WAIT_CHUNK_MINUTES)
        advance_clock(game, int(round(chunk * 60)))
        remaining -= chunk
        waited += chunk

        for npc_id in list(game.npcs_present):
            definition = game.definitions.npcs.require(npc_id)
            if definition.on_wait is not None:
                game.execute(definition.on_wait, {"npc": npc_id, "minutes": chunk})
            if game.in_scene:
                _interrupted(game, waited, minutes, npc_id)
                return False

        on_wait = game.location_definition.on_wait
        if on_wait is not None:
            game.execute(on_wait, {"minutes": chunk})
        if game.in_scene:
            _interrupted(game, waited, minutes, game.current_location)
            return False

    if then is not None:
        game.execute(then)
    return True


def _interrupted(game: Any, waited: Any, requested: Any, source: str) -> None:
    logger.debug("Wait interrupted by %s after %s of %s minutes", source, waited, requested)
    game.event_bus.publish(WaitInterrupted(minutes_waited=waited, minutes_requested=requested, source=source))
