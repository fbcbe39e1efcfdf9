from __future__ import annotations

from typing import Any, Dict

from tale.application.services.scene_stack import ADVANCE_SCRIPT
from tale.domain.errors import ScriptValidationError
from tale.domain.models.instruction import Instruction


def _push_scene_pages(game: Any, params: Dict[str, Any]) -> None:
    game.push_pages(params.get("pages"))


def _advance_scene(game: Any, params: Dict[str, Any]) -> None:
    game.advance(params.get("push"))


def _menu(game: Any, params: Dict[str, Any]) -> None:
    """Repeating choice menu, rebuilt from its own params on every display.

    Each entry is `{label, content, exit?, condition?}`. A gated entry is
    offered only while its condition holds. Choosing a loop entry pushes
    its content and then this menu again; an exit entry pushes only its
    content.
    """
    entries = params.get("entries") or []
    if not entries:
        return
    menu_self = Instruction("menu", params)
    for entry in entries:
        label = entry.get("label")
        content = entry.get("content")
        if not label or content is None:
            raise ScriptValidationError(f"menu entry needs a label and content: {entry!r}")
        condition = entry.get("condition")
        if condition and not game.execute(condition):
            continue
        if entry.get("exit") or entry.get("isExit"):
            push = [content]
        else:
            push = [content, menu_self]
        game.add_option(Instruction(ADVANCE_SCRIPT, {"push": push}), label)


SCRIPTS = {
    "pushScenePages": _push_scene_pages,
    "advanceScene": _advance_scene,
    "menu": _menu,
}
