from __future__ import annotations

import random
from typing import Any, Dict

from tale.application.scripts.params import require_str
from tale.domain.models.instruction import Instruction, is_instruction


def _seq(game: Any, params: Dict[str, Any]) -> None:
    game.execute_all(params.get("instructions") or [])


def _when(game: Any, params: Dict[str, Any]) -> None:
    """Run `then` when `condition` holds, otherwise the optional `else`."""
    condition = params.get("condition")
    if not condition:
        return
    if game.execute(condition):
        game.execute_all(params.get("then") or [])
    elif params.get("else"):
        game.execute_all(params["else"])


def _cond(game: Any, params: Dict[str, Any]) -> None:
    for branch in params.get("branches") or []:
        if game.execute(branch["condition"]):
            game.execute(branch["then"])
            return
    default = params.get("default")
    if default:
        game.execute(default)


def _random(game: Any, params: Dict[str, Any]) -> None:
    """Run one child picked uniformly from the eligible pool.

    A `when` child joins the pool only if its condition holds now; falsy
    children are skipped.
    """
    pool = []
    for child in params.get("children") or []:
        if not child:
            continue
        if isinstance(child, Instruction) or is_instruction(child):
            instruction = Instruction.coerce(child)
            if instruction.name == "when":
                condition = instruction.params.get("condition")
                then = instruction.params.get("then")
                if condition and then and game.execute(condition):
                    pool.append(then)
                continue
        pool.append([child])
    if not pool:
        return
    game.execute_all(random.choice(pool))


def _skill_check(game: Any, params: Dict[str, Any]) -> bool:
    skill = require_str(params, "skill", "skillCheck")
    success = game.player.skill_test(skill, params.get("difficulty") or 0)
    on_success = params.get("onSuccess")
    on_failure = params.get("onFailure")
    if success and on_success:
        game.execute(on_success)
    elif not success and on_failure:
        game.execute(on_failure)
    return success


SCRIPTS = {
    "seq": _seq,
    "when": _when,
    "cond": _cond,
    "random": _random,
    "skillCheck": _skill_check,
}
