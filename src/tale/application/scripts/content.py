from __future__ import annotations

import re
from typing import Any, Dict, Optional

from tale.application.services.interpolation import resolve_parts
from tale.application.services.resolver import Accessor, parse_args
from tale.domain.errors import ExpressionError
from tale.domain.models.content import COLOURS, InlineContent, fragment_text, highlight, p, speech
from tale.domain.models.npc import NPCState, display_name


def _parts(params: Dict[str, Any]) -> list:
    parts = params.get("parts")
    if parts is None and params.get("text"):
        parts = [params["text"]]
    return list(parts or [])


def _text(game: Any, params: Dict[str, Any]) -> None:
    resolved = resolve_parts(game, _parts(params))
    if resolved:
        game.add(p(*resolved))


def _paragraph(game: Any, params: Dict[str, Any]) -> None:
    content = params.get("content")
    if not content:
        return
    parts = []
    for item in content:
        if isinstance(item, str):
            parts.append(item)
        else:
            parts.append(highlight(item["text"], item["color"], item.get("hoverText")))
    game.add(p(*parts))


def _say(game: Any, params: Dict[str, Any]) -> None:
    resolved = resolve_parts(game, _parts(params))
    if not resolved:
        return
    color = params.get("color")
    npc_id = params.get("npc") or game.scene.npc
    if color is None and npc_id:
        color = game.npc_definition(npc_id).speech_color
    game.add(speech("".join(fragment_text(part) for part in resolved), color))


def _player_name(game: Any, params: Dict[str, Any]) -> InlineContent:
    return InlineContent(text=game.player.name or "Elise", color=COLOURS["player"])


def _npc_name_content(game: Any, npc: NPCState) -> InlineContent:
    definition = game.npc_definition(npc.id)
    return InlineContent(text=display_name(definition, npc), color=definition.speech_color or COLOURS["npc"])


def _npc_name(game: Any, params: Dict[str, Any]) -> InlineContent:
    npc_id = params.get("npc") or game.scene.npc
    if not npc_id:
        return InlineContent(text="someone")
    return _npc_name_content(game, game.get_npc(npc_id))


def _option(game: Any, params: Dict[str, Any]) -> None:
    """Add an option button.

    `npc:name` always targets the scene NPC's own script, `global:name`
    always the registry. A bare name prefers the scene NPC's script when it
    has one. Without `script` the name is derived from the label.
    """
    label = params.get("label")
    if not label:
        return
    raw = params.get("script") or re.sub(r"[^a-z0-9]", "", label.lower())
    script_params = dict(params.get("params") or {})

    if raw.startswith("npc:"):
        game.add_option(["interact", {"script": raw[4:], "params": script_params}], label)
        return
    if raw.startswith("global:"):
        game.add_option(raw[7:], label, script_params)
        return
    npc_id = game.scene.npc
    if npc_id and raw in game.npc_definition(npc_id).scripts:
        game.add_option(["interact", {"script": raw, "params": script_params}], label)
        return
    game.add_option(raw, label, script_params)


def _npc_leave_option(game: Any, params: Dict[str, Any]) -> None:
    game.add_option(
        ["endConversation", {"text": params.get("text"), "reply": params.get("reply")}],
        params.get("label") or "Leave",
    )


def _capitalise(text: str) -> str:
    return text[:1].upper() + text[1:]


class NPCAccessor(Accessor):
    """`{npc}`, `{npc:he}`, `{npc(rob):faction}` and NPC-defined scripts."""

    def __init__(self, npc: Optional[NPCState]) -> None:
        self.npc = npc

    def _require(self) -> NPCState:
        if self.npc is None:
            raise ExpressionError("npc accessor: no NPC specified")
        return self.npc

    def default(self, game: Any) -> InlineContent:
        return _npc_name_content(game, self._require())

    def resolve(self, game: Any, rest: str) -> Any:
        args = parse_args(rest)
        if args is not None:
            argline, tail = args
            accessor = NPCAccessor(game.get_npc(argline.strip()))
            return accessor.resolve(game, tail) if tail else accessor.default(game)

        npc = self._require()
        definition = game.npc_definition(npc.id)
        pronouns = definition.pronouns
        properties = {
            "he": pronouns.subject,
            "him": pronouns.object,
            "his": pronouns.possessive,
        }
        if rest == "name":
            return self.default(game)
        if rest in properties:
            return properties[rest]
        if rest.lower() in properties and rest[:1].isupper():
            return _capitalise(properties[rest.lower()])
        if rest == "faction":
            if not definition.faction:
                return "unaffiliated"
            faction = game.definitions.factions.require(definition.faction)
            return InlineContent(text=faction.name, color=faction.color or COLOURS["faction"])
        script = definition.scripts.get(rest)
        if script is None:
            raise ExpressionError(f"Unknown NPC accessor property: {rest}")
        return script


def _npc(game: Any, params: Dict[str, Any]) -> NPCAccessor:
    npc_id = game.scene.npc
    return NPCAccessor(game.get_npc(npc_id) if npc_id else None)


SCRIPTS = {
    "text": _text,
    "paragraph": _paragraph,
    "say": _say,
    "playerName": _player_name,
    "pc": _player_name,
    "npcName": _npc_name,
    "option": _option,
    "npcLeaveOption": _npc_leave_option,
    "npc": _npc,
}
