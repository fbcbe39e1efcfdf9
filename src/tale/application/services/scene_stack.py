from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from tale.domain.events import SceneAdvanced
from tale.domain.errors import ScriptValidationError
from tale.domain.models.instruction import Instruction, is_instruction


CONTINUE_LABEL = "Continue"
ADVANCE_SCRIPT = "advanceScene"

logger = logging.getLogger(__name__)


def coerce_page(page: Any) -> Instruction:
    """A page is one instruction or a list of instructions run as a `seq`."""
    if isinstance(page, Instruction) or is_instruction(page):
        return Instruction.coerce(page)
    if isinstance(page, (list, tuple)):
        return Instruction("seq", {"instructions": [coerce_page(item) for item in page]})
    raise ScriptValidationError(f"Not a scene page: {page!r}")


def coerce_pages(pages: Any) -> List[Instruction]:
    if not pages:
        return []
    if isinstance(pages, Instruction) or is_instruction(pages):
        return [Instruction.coerce(pages)]
    return [coerce_page(page) for page in pages]


def continue_instruction() -> Instruction:
    return Instruction(ADVANCE_SCRIPT, {})


def _offer_continue(game: Any) -> None:
    game.add_option(continue_instruction(), CONTINUE_LABEL)


def push_pages(game: Any, pages: Optional[Iterable[Any]]) -> None:
    """Queue pages ahead of anything already pending.

    The first of `pages` runs first. A frame without options gets a
    Continue option so the queue can drain.
    """
    queued = coerce_pages(pages)
    if not queued:
        return
    scene = game.scene
    scene.stack[0:0] = queued
    if not scene.options:
        _offer_continue(game)


def advance(game: Any, push: Optional[Iterable[Any]] = None) -> int:
    """Run pending pages until one of them is visible.

    A page is visible when it grows the content list or leaves any option
    on the frame. Invisible pages are skipped silently. Returns the number
    of pages run.
    """
    scene = game.scene
    queued = coerce_pages(push)
    if queued:
        scene.stack[0:0] = queued
    pages_run = 0
    while scene.stack:
        content_before = len(scene.content)
        page = scene.stack.pop(0)
        game.execute(page)
        pages_run += 1
        if len(scene.content) > content_before or scene.options:
            break
    if not scene.options and scene.stack:
        _offer_continue(game)
    logger.debug("Scene advanced %d page(s), %d pending", pages_run, len(scene.stack))
    game.event_bus.publish(SceneAdvanced(pages_run=pages_run, remaining=len(scene.stack)))
    return pages_run
