from __future__ import annotations

from typing import Any, Dict

from tale.application.scripts.params import in_range, require_number, require_str


def _has_item(game: Any, params: Dict[str, Any]) -> bool:
    item = params.get("item")
    if not item:
        return False
    return game.player.has_item(item, params.get("count") or 1)


def _has_stat(game: Any, params: Dict[str, Any]) -> bool:
    stat = params.get("stat")
    if not stat:
        return False
    return in_range(game.player.stat(stat), params) is not False


def _has_reputation(game: Any, params: Dict[str, Any]) -> bool:
    name = params.get("reputation")
    if not name:
        return False
    value = game.player.reputation.get(name, 0)
    bounded = in_range(value, params)
    return value > 0 if bounded is None else bounded


def _in_location(game: Any, params: Dict[str, Any]) -> bool:
    return game.current_location == params.get("location")


def _in_scene(game: Any, params: Dict[str, Any]) -> bool:
    return game.in_scene


def _npc_stat(game: Any, params: Dict[str, Any]) -> bool:
    npc_id = params.get("npc") or game.scene.npc
    stat = params.get("stat")
    if not npc_id or not stat:
        return False
    npc = game.npcs.get(npc_id)
    if npc is None:
        return False
    value = npc.stats.get(stat, 0)
    bounded = in_range(value, params)
    return value > 0 if bounded is None else bounded


def _has_card(game: Any, params: Dict[str, Any]) -> bool:
    card_id = params.get("cardId")
    return bool(card_id) and game.player.has_card(card_id)


def _card_completed(game: Any, params: Dict[str, Any]) -> bool:
    card_id = params.get("cardId")
    if not card_id:
        return False
    card = game.player.get_card(card_id)
    return card is not None and card.completed


def _location_discovered(game: Any, params: Dict[str, Any]) -> bool:
    location = game.locations.get(params.get("location") or "")
    return location is not None and location.discovered


def _hour_between(game: Any, params: Dict[str, Any]) -> bool:
    start = params.get("from", 0)
    end = params.get("to", 24)
    hour = game.hour_of_day
    if start < end:
        return start <= hour < end
    return hour >= start or hour < end


def _not(game: Any, params: Dict[str, Any]) -> bool:
    predicate = params.get("predicate")
    if not predicate:
        return True
    return not game.execute(predicate)


def _and(game: Any, params: Dict[str, Any]) -> bool:
    return all(game.execute(predicate) for predicate in params.get("predicates") or [])


def _or(game: Any, params: Dict[str, Any]) -> bool:
    return any(game.execute(predicate) for predicate in params.get("predicates") or [])


def _debug(game: Any, params: Dict[str, Any]) -> bool:
    return game.is_debug


def _time_elapsed(game: Any, params: Dict[str, Any]) -> bool:
    timer = require_str(params, "timer", "timeElapsed")
    minutes = require_number(params, "minutes", "timeElapsed")
    recorded = game.player.timers.get(timer)
    if recorded is None:
        return True
    return game.time - recorded >= minutes * 60


SCRIPTS = {
    "hasItem": _has_item,
    "hasStat": _has_stat,
    "hasReputation": _has_reputation,
    "inLocation": _in_location,
    "inScene": _in_scene,
    "npcStat": _npc_stat,
    "hasCard": _has_card,
    "cardCompleted": _card_completed,
    "locationDiscovered": _location_discovered,
    "hourBetween": _hour_between,
    "not": _not,
    "and": _and,
    "or": _or,
    "debug": _debug,
    "timeElapsed": _time_elapsed,
}
