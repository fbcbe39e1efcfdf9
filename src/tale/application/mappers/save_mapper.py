from __future__ import annotations

from typing import Any, Dict, Mapping

from tale.domain.errors import SaveError
from tale.domain.models.card import Card, CardType
from tale.domain.models.content import content_from_dict, option_from_dict
from tale.domain.models.game import DEFAULT_LOCATION, SAVE_VERSION, GameState
from tale.domain.models.instruction import Instruction, to_plain
from tale.domain.models.item import InventoryEntry
from tale.domain.models.location import LocationState
from tale.domain.models.npc import NPCState
from tale.domain.models.player import Player
from tale.domain.models.scene import SceneFrame
from tale.domain.repositories import Definitions


def game_to_document(state: GameState) -> Dict[str, Any]:
    """JSON-ready save document. `npcs_present` and `sleeping` are not saved."""
    scene = state.scene
    player = state.player
    return {
        "version": state.version,
        "score": state.score,
        "time": state.time,
        "currentLocation": state.current_location,
        "scene": {
            "type": "story",
            "content": [item.to_dict() for item in scene.content],
            "options": [option.to_dict() for option in scene.options],
            "stack": [instruction.to_pair() for instruction in scene.stack],
            "npc": scene.npc,
            "hideNpcImage": scene.hide_npc_image,
        },
        "player": {
            "name": player.name,
            "basestats": dict(player.basestats),
            "inventory": [{"id": entry.id, "number": entry.number} for entry in player.inventory],
            "worn": dict(player.worn),
            "cards": [
                {**to_plain(card.fields), "id": card.id, "type": card.type.value, "completed": card.completed}
                for card in player.cards
            ],
            "timers": dict(player.timers),
            "reputation": dict(player.reputation),
        },
        "locations": {
            location_id: {"numVisits": location.num_visits, "discovered": location.discovered}
            for location_id, location in state.locations.items()
        },
        "npcs": {npc_id: {"stats": dict(npc.stats), "location": npc.location} for npc_id, npc in state.npcs.items()},
    }


def _mapping(value: Any, label: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise SaveError(f"Save document field {label} must be an object")
    return value


def _card_from_row(row: Mapping[str, Any], definitions: Definitions) -> Card:
    card_id = row.get("id")
    if not isinstance(card_id, str):
        raise SaveError(f"Card without id in save: {row!r}")
    definitions.cards.require(card_id)
    try:
        card_type = CardType(row.get("type", CardType.EFFECT.value))
    except ValueError as exc:
        raise SaveError(f"Unknown card type for {card_id}: {row.get('type')!r}") from exc
    fields = {key: value for key, value in row.items() if key not in {"id", "type", "completed"}}
    return Card(id=card_id, type=card_type, completed=bool(row.get("completed", False)), fields=fields)


def _player_from_row(row: Mapping[str, Any], definitions: Definitions) -> Player:
    player = Player()
    if row.get("name"):
        player.name = str(row["name"])
    player.basestats.update({str(key): value for key, value in _mapping(row.get("basestats"), "basestats").items()})
    for entry in row.get("inventory") or []:
        item_id = entry.get("id") if isinstance(entry, Mapping) else None
        if not isinstance(item_id, str):
            raise SaveError(f"Inventory entry without id: {entry!r}")
        definitions.items.require(item_id)
        player.inventory.append(InventoryEntry(id=item_id, number=int(entry.get("number", 1))))
    for slot, item_id in _mapping(row.get("worn"), "worn").items():
        definitions.items.require(item_id)
        player.worn[str(slot)] = item_id
    player.cards = [_card_from_row(_mapping(card, "card"), definitions) for card in row.get("cards") or []]
    player.timers = {str(key): int(value) for key, value in _mapping(row.get("timers"), "timers").items()}
    player.reputation = dict(_mapping(row.get("reputation"), "reputation"))
    return player


def _scene_from_row(row: Mapping[str, Any]) -> SceneFrame:
    try:
        return SceneFrame(
            content=[content_from_dict(item) for item in row.get("content") or []],
            options=[option_from_dict(item) for item in row.get("options") or []],
            stack=[Instruction.coerce(item) for item in row.get("stack") or []],
            npc=row.get("npc"),
            hide_npc_image=row.get("hideNpcImage"),
        )
    except (TypeError, ValueError) as exc:
        raise SaveError(f"Malformed scene in save: {exc}") from exc


def game_from_document(document: Mapping[str, Any], definitions: Definitions) -> GameState:
    """Rebuild game state from a save document.

    Every stored location, NPC, card and item id must still have a live
    definition; a missing one raises `DefinitionNotFoundError` rather than
    being dropped.
    """
    if not isinstance(document, Mapping):
        raise SaveError("Save document must be an object")
    if "player" not in document:
        raise SaveError("Save document has no player")
    time = document.get("time")
    if time is not None and (isinstance(time, bool) or not isinstance(time, int)):
        raise SaveError(f"Save document time must be an integer, got {time!r}")

    state = GameState()
    state.version = int(document.get("version", SAVE_VERSION))
    state.score = int(document.get("score", 0))
    if time is not None:
        state.time = time
    state.current_location = document.get("currentLocation") or DEFAULT_LOCATION
    definitions.locations.require(state.current_location)
    state.player = _player_from_row(_mapping(document["player"], "player"), definitions)
    state.scene = _scene_from_row(_mapping(document.get("scene"), "scene"))

    for location_id, row in _mapping(document.get("locations"), "locations").items():
        definitions.locations.require(location_id)
        row = _mapping(row, f"locations.{location_id}")
        state.locations[location_id] = LocationState(
            id=location_id,
            num_visits=int(row.get("numVisits", 0)),
            discovered=bool(row.get("discovered", False)),
        )

    for npc_id, row in _mapping(document.get("npcs"), "npcs").items():
        definitions.npcs.require(npc_id)
        row = _mapping(row, f"npcs.{npc_id}")
        stats = {str(key): value for key, value in _mapping(row.get("stats"), "stats").items() if isinstance(value, (int, float))}
        state.npcs[npc_id] = NPCState(id=npc_id, stats=stats, location=row.get("location"))

    if state.scene.npc and state.scene.npc not in state.npcs:
        definitions.npcs.require(state.scene.npc)
    return state
