from __future__ import annotations

import random
from typing import Any, Dict

from tale.application.scripts.params import (
    chance_passes,
    optional_number,
    optional_str,
    require_number,
    require_str,
)
from tale.domain.errors import ScriptValidationError
from tale.domain.models.content import COLOURS, colour, speech
from tale.domain.models.player import STAT_NAMES


def _move(game: Any, params: Dict[str, Any]) -> None:
    location_id = require_str(params, "location", "move")
    game.move_to_location(location_id)
    minutes = optional_number(params, "minutes", "move", default=0, non_negative=True)
    if minutes > 0:
        game.time_lapse(minutes)


def _go(game: Any, params: Dict[str, Any]) -> None:
    """Travel along a link from the current location.

    Access checks and `on_follow` may stop the journey. Time passes before
    arrival; first-arrival and arrival hooks run after the move.
    """
    location_id = require_str(params, "location", "go")
    target = game.definitions.locations.require(location_id)
    link = game.location_definition.link_to(location_id)
    if link is None:
        game.add(f"You can't see a way to {target.name or location_id}.")
        return
    if link.check_access is not None:
        reason = link.check_access(game)
        if reason:
            game.add(reason)
            return
    if link.on_follow is not None:
        game.execute(link.on_follow)
        if game.in_scene:
            return

    location = game.get_location(location_id)
    first_visit = location.num_visits == 0
    location.num_visits += 1
    minutes = optional_number(params, "minutes", "go", default=link.time, non_negative=True)
    game.time_lapse(minutes)
    game.run("move", {"location": location_id})
    location.discovered = True
    if first_visit and target.on_first_arrive is not None:
        game.execute(target.on_first_arrive)
    if target.on_arrive is not None:
        game.execute(target.on_arrive)


def _discover_location(game: Any, params: Dict[str, Any]) -> None:
    location = game.get_location(require_str(params, "location", "discoverLocation"))
    if location.discovered:
        return
    location.discovered = True
    if params.get("text"):
        game.add(colour(params["text"], params.get("colour") or COLOURS["discovery"]))


def _gain_item(game: Any, params: Dict[str, Any]) -> None:
    item_id = require_str(params, "item", "gainItem")
    game.definitions.items.require(item_id)
    number = optional_number(params, "number", "gainItem", default=1, non_negative=True)
    if params.get("text"):
        game.add(colour(params["text"], COLOURS["item"]))
    game.player.add_item(item_id, int(number))
    game.recalculate()


def _lose_item(game: Any, params: Dict[str, Any]) -> None:
    item_id = require_str(params, "item", "loseItem")
    number = optional_number(params, "number", "loseItem", default=1, non_negative=True)
    game.player.remove_item(item_id, int(number))
    game.recalculate()


def _wear_item(game: Any, params: Dict[str, Any]) -> None:
    item_id = require_str(params, "item", "wearItem")
    definition = game.definitions.items.require(item_id)
    if not definition.slot:
        raise ScriptValidationError(f"wearItem: {item_id} cannot be worn")
    if not game.player.has_item(item_id):
        game.add("You don't have that item.")
        return
    game.player.worn[definition.slot] = item_id
    game.recalculate()


def _add_stat(game: Any, params: Dict[str, Any]) -> None:
    stat = require_str(params, "stat", "addStat")
    if stat not in STAT_NAMES:
        raise ScriptValidationError(f"addStat: unknown stat '{stat}'")
    change = require_number(params, "change", "addStat")
    if not chance_passes(params, "addStat", random.random()):
        return

    current = game.player.basestats.get(stat, 0)
    low = optional_number(params, "min", "addStat", default=0)
    high = optional_number(params, "max", "addStat", default=100)
    value = max(low, min(high, current + change))
    actual = value - current
    # Clamping may push the value the other way; that counts as no change.
    if actual == 0 or (actual > 0) != (change > 0):
        return
    game.player.basestats[stat] = value
    game.recalculate()

    if params.get("hidden"):
        return
    color = params.get("colour") or (COLOURS["positive"] if change > 0 else COLOURS["negative"])
    sign = "+" if change > 0 else ""
    game.add(colour(params.get("text") or f"{stat} {sign}{change}", color))


def _calc_stats(game: Any, params: Dict[str, Any]) -> None:
    game.recalculate()


def _add_npc_stat(game: Any, params: Dict[str, Any]) -> None:
    npc_id = params.get("npc") or game.scene.npc
    if not npc_id:
        raise ScriptValidationError("addNpcStat requires an npc parameter or an active scene NPC")
    stat = require_str(params, "stat", "addNpcStat")
    change = require_number(params, "change", "addNpcStat")
    npc = game.npcs.get(npc_id)
    if npc is None:
        raise ScriptValidationError(f"addNpcStat: NPC not found '{npc_id}'")

    current = npc.stats.get(stat, 0)
    value = current + change
    if params.get("max") is not None:
        value = min(value, params["max"])
    if params.get("min") is not None:
        value = max(value, params["min"])
    actual = value - current
    if actual == 0:
        return
    npc.stats[stat] = value
    if not params.get("hidden"):
        sign = "+" if actual > 0 else ""
        game.add(colour(f"{stat[:1].upper()}{stat[1:]} {sign}{actual}", COLOURS["positive"] if actual > 0 else COLOURS["negative"]))


def _set_npc_location(game: Any, params: Dict[str, Any]) -> None:
    npc_id = params.get("npc") or game.scene.npc
    if not npc_id:
        raise ScriptValidationError("setNpcLocation requires an npc parameter or an active scene NPC")
    npc = game.npcs.get(npc_id)
    if npc is None:
        raise ScriptValidationError(f"setNpcLocation: NPC not found '{npc_id}'")
    npc.location = optional_str(params, "location", "setNpcLocation")


def _add_reputation(game: Any, params: Dict[str, Any]) -> None:
    name = require_str(params, "reputation", "addReputation")
    change = require_number(params, "change", "addReputation")
    if not chance_passes(params, "addReputation", random.random()):
        return
    current = game.player.reputation.get(name, 0)
    low = optional_number(params, "min", "addReputation", default=0)
    high = optional_number(params, "max", "addReputation", default=100)
    value = max(low, min(high, current + change))
    actual = value - current
    if actual == 0 or (actual > 0) != (change > 0):
        return
    game.player.reputation[name] = value
    if not params.get("hidden"):
        sign = "+" if change > 0 else ""
        color = COLOURS["positive"] if change > 0 else COLOURS["negative"]
        game.add(colour(f"{name[:1].upper()}{name[1:]} {sign}{change}", color))


def _set_npc(game: Any, params: Dict[str, Any]) -> None:
    game.scene.npc = require_str(params, "npc", "setNpc")


def _hide_npc_image(game: Any, params: Dict[str, Any]) -> None:
    game.scene.hide_npc_image = True


def _show_npc_image(game: Any, params: Dict[str, Any]) -> None:
    game.scene.hide_npc_image = False


def _learn_npc_name(game: Any, params: Dict[str, Any]) -> None:
    if game.scene.npc:
        game.get_npc(game.scene.npc).name_known = 1


def _approach(game: Any, params: Dict[str, Any]) -> None:
    npc_id = require_str(params, "npc", "approach")
    npc = game.get_npc(npc_id)
    npc.approach_count += 1
    definition = game.npc_definition(npc_id)
    game.scene.npc = npc_id
    game.scene.hide_npc_image = False

    script = definition.on_approach
    if npc.approach_count == 1 and definition.on_first_approach is not None:
        script = definition.on_first_approach
    if script is not None:
        game.execute(script, {"npc": npc_id})
        return
    if npc.name_known and definition.name:
        name = definition.name
    else:
        name = definition.uname or definition.description or definition.name or "The NPC"
    game.add(f"{name} isn't interested in talking to you.")


def _interact(game: Any, params: Dict[str, Any]) -> None:
    npc_id = params.get("npc") or game.scene.npc
    if not npc_id:
        raise ScriptValidationError("interact requires an npc parameter or an active scene NPC")
    name = require_str(params, "script", "interact")
    game.get_npc(npc_id)
    script = game.npc_definition(npc_id).scripts.get(name)
    if script is None:
        raise ScriptValidationError(f"NPC {npc_id} has no script '{name}'")
    game.time_lapse(1)
    game.execute(script, params.get("params") or {})


def _end_conversation(game: Any, params: Dict[str, Any]) -> None:
    game.add(params.get("text") or "You politely end the conversation.")
    reply = params.get("reply")
    if not reply:
        return
    if game.scene.npc:
        game.run("say", {"parts": [reply]})
    else:
        game.add(speech(reply, COLOURS["speech"]))


def _end_scene(game: Any, params: Dict[str, Any]) -> None:
    if params.get("text"):
        game.add(params["text"])


def _run_activity(game: Any, params: Dict[str, Any]) -> None:
    name = require_str(params, "activity", "runActivity")
    activity = next((row for row in game.location_definition.activities if row.name == name), None)
    if activity is None:
        game.add("Activity not found.")
        return
    game.execute(activity.script)


def _relax_at_location(game: Any, params: Dict[str, Any]) -> None:
    on_relax = game.location_definition.on_relax
    if on_relax is None:
        game.add("There's nothing particularly relaxing to do here.")
        return
    game.execute(on_relax)


def _examine_item(game: Any, params: Dict[str, Any]) -> None:
    definition = game.definitions.items.require(require_str(params, "item", "examineItem"))
    if definition.on_examine is None:
        game.add(definition.description or "Nothing happens.")
        return
    game.execute(definition.on_examine)


def _consume_item(game: Any, params: Dict[str, Any]) -> None:
    item_id = require_str(params, "item", "consumeItem")
    definition = game.definitions.items.require(item_id)
    if definition.on_consume is None:
        game.add("You cannot use that.")
        return
    if not game.player.has_item(item_id):
        game.add("You don't have that item.")
        return
    game.player.remove_item(item_id, 1)
    game.recalculate()
    game.execute(definition.on_consume)


def _add_quest(game: Any, params: Dict[str, Any]) -> None:
    if params.get("questId"):
        game.add_quest(params["questId"], params.get("args") or {})


def _complete_quest(game: Any, params: Dict[str, Any]) -> None:
    if params.get("questId"):
        game.complete_quest(params["questId"])


def _add_effect(game: Any, params: Dict[str, Any]) -> None:
    if params.get("effectId"):
        game.add_effect(params["effectId"], params.get("args") or {})


def _passive_depletion(game: Any, params: Dict[str, Any]) -> None:
    # One 15-minute tick of tiredness.
    energy = game.player.basestats.get("Energy", 0)
    game.player.basestats["Energy"] = max(0, energy - 1)


SCRIPTS = {
    "move": _move,
    "go": _go,
    "discoverLocation": _discover_location,
    "gainItem": _gain_item,
    "loseItem": _lose_item,
    "wearItem": _wear_item,
    "addStat": _add_stat,
    "calcStats": _calc_stats,
    "addNpcStat": _add_npc_stat,
    "setNpcLocation": _set_npc_location,
    "addReputation": _add_reputation,
    "setNpc": _set_npc,
    "hideNpcImage": _hide_npc_image,
    "showNpcImage": _show_npc_image,
    "learnNpcName": _learn_npc_name,
    "approach": _approach,
    "interact": _interact,
    "endConversation": _end_conversation,
    "endScene": _end_scene,
    "runActivity": _run_activity,
    "relaxAtLocation": _relax_at_location,
    "examineItem": _examine_item,
    "consumeItem": _consume_item,
    "addQuest": _add_quest,
    "completeQuest": _complete_quest,
    "addEffect": _add_effect,
    "passiveDepletion": _passive_depletion,
}
