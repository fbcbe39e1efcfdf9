from __future__ import annotations

from typing import Any, Dict

from tale.application.scripts.params import optional_number, require_str
from tale.application.services.clock import SECONDS_PER_DAY, SECONDS_PER_HOUR
from tale.domain.errors import ScriptValidationError
from tale.domain.models.instruction import Instruction


def _time_lapse(game: Any, params: Dict[str, Any]) -> None:
    """Advance the clock by `seconds` plus `minutes`, or up to `untilTime`.

    `untilTime` is an hour of day (10.25 is 10:15) and only moves the clock
    if that hour is still ahead today.
    """
    seconds = optional_number(params, "seconds", "timeLapse", default=0, non_negative=True)
    minutes = optional_number(params, "minutes", "timeLapse", default=0, non_negative=True)
    if params.get("untilTime") is not None:
        target = int(round(optional_number(params, "untilTime", "timeLapse") * SECONDS_PER_HOUR))
        current = game.time % SECONDS_PER_DAY
        seconds = target - current if current < target else 0
        minutes = 0
    game.advance_clock(int(round(seconds + minutes * 60)))


def _wait(game: Any, params: Dict[str, Any]) -> bool:
    minutes = params.get("minutes", 15)
    if params.get("text"):
        game.add(params["text"])
    then = params.get("then")
    if isinstance(then, dict) and "script" in then:
        then = Instruction(then["script"], then.get("params") or {})
    return game.wait(minutes, then)


def _record_time(game: Any, params: Dict[str, Any]) -> None:
    timer = require_str(params, "timer", "recordTime")
    game.player.timers[timer] = game.time


def _sleep(game: Any, params: Dict[str, Any]) -> None:
    """Sleep for `minutes`; passive depletion is suspended meanwhile."""
    minutes = optional_number(params, "minutes", "sleep", default=480, non_negative=True)
    if game.in_scene:
        raise ScriptValidationError("sleep cannot start during a scene")
    game.player.sleeping = True
    try:
        game.advance_clock(int(round(minutes * 60)))
    finally:
        game.player.sleeping = False
    game.run("addStat", {"stat": "Energy", "change": int(minutes // 10), "hidden": True})
    game.add(params.get("text") or "You sleep soundly.")


SCRIPTS = {
    "timeLapse": _time_lapse,
    "wait": _wait,
    "recordTime": _record_time,
    "sleep": _sleep,
}
