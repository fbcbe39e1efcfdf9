"""Builders for authoring story content as plain instructions.

Every builder returns an `Instruction` and has no side effects, so the
result can be stored at import time and replayed in any session:

    greet = [
        text("The barkeep looks up."),
        when(has_item("crown", 5), say("A paying customer!")),
        option("Leave", "endScene"),
    ]
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

from tale.domain.errors import ScriptValidationError
from tale.domain.models.instruction import Instruction, is_instruction


Part = Union[str, Instruction]


def run(script: str, params: Optional[Dict[str, Any]] = None) -> Instruction:
    return Instruction(script, dict(params or {}))


def _compact(**params: Any) -> Dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


# Content


def text(*parts: Part) -> Instruction:
    return run("text", {"parts": list(parts)})


def hl(text_: str, color: str, hover_text: Optional[str] = None) -> Dict[str, Any]:
    return _compact(text=text_, color=color, hoverText=hover_text)


def paragraph(*content: Union[str, Dict[str, Any]]) -> Instruction:
    return run("paragraph", {"content": list(content)})


def say(*parts: Part) -> Instruction:
    return run("say", {"parts": list(parts)})


def player_name() -> Instruction:
    return run("playerName")


def npc_name(npc: Optional[str] = None) -> Instruction:
    return run("npcName", _compact(npc=npc))


def option(label: str, script: Optional[str] = None, params: Optional[Dict[str, Any]] = None) -> Instruction:
    return run("option", _compact(label=label, script=script, params=dict(params or {})))


def npc_leave_option(text_: Optional[str] = None, reply: Optional[str] = None, label: str = "Leave") -> Instruction:
    return run("npcLeaveOption", _compact(text=text_, reply=reply, label=label))


# Control flow


def seq(*instructions: Instruction) -> Instruction:
    return run("seq", {"instructions": list(instructions)})


def when(condition: Instruction, *then: Instruction, otherwise: Optional[List[Instruction]] = None) -> Instruction:
    params: Dict[str, Any] = {"condition": condition, "then": list(then)}
    if otherwise:
        params["else"] = list(otherwise)
    return run("when", params)


def unless(condition: Instruction, *then: Instruction) -> Instruction:
    return when(not_(condition), *then)


def cond(*args: Instruction) -> Instruction:
    """Lisp-style conditional: `(condition, expression)` pairs, odd last arg is the default."""
    if len(args) < 2:
        raise ScriptValidationError("cond requires at least 2 arguments")
    pairs = args[:-1] if len(args) % 2 else args
    branches = [{"condition": pairs[index], "then": pairs[index + 1]} for index in range(0, len(pairs), 2)]
    params: Dict[str, Any] = {"branches": branches}
    if len(args) % 2:
        params["default"] = args[-1]
    return run("cond", params)


def random_choice(*children: Optional[Instruction]) -> Instruction:
    return run("random", {"children": [child for child in children if child]})


def skill_check(
    skill: str,
    difficulty: float = 0,
    on_success: Optional[Instruction] = None,
    on_failure: Optional[Instruction] = None,
) -> Instruction:
    return run("skillCheck", _compact(skill=skill, difficulty=difficulty, onSuccess=on_success, onFailure=on_failure))


# Scenes


Page = List[Instruction]


def _is_page_list(content: Sequence[Any]) -> bool:
    return len(content) == 1 and isinstance(content[0], list) and all(
        isinstance(page, list) and not is_instruction(page) for page in content[0]
    )


def scene(*content: Instruction) -> Page:
    return list(content)


def scenes(*pages: Page) -> Instruction:
    """Run the first page now and queue the rest behind a Continue option."""
    if not pages:
        raise ScriptValidationError("scenes requires at least one page")
    first = list(pages[0])
    if len(pages) > 1:
        first.append(run("pushScenePages", {"pages": [scenes(*pages[1:])]}))
    return seq(*first)


def branch(label: str, *content: Any) -> Instruction:
    """Option that plays its content, then resumes whatever was pending.

    `content` is either inline instructions (one page) or a single list of
    pages.
    """
    if _is_page_list(content):
        push = [list(page) for page in content[0]]
    else:
        push = [list(content)]
    return option(label, "global:advanceScene", {"push": push})


def gated_branch(condition: Instruction, label: str, *content: Any) -> Instruction:
    return when(condition, branch(label, *content))


def _with_epilogue(instruction: Instruction, epilogue: List[Instruction]) -> Instruction:
    if instruction.name == "when":
        then = [_with_epilogue(Instruction.coerce(item), epilogue) for item in instruction.params["then"]]
        return instruction.with_params(then=then)
    if instruction.name == "option" and instruction.params.get("script") == "global:advanceScene":
        push = [list(page) for page in instruction.params["params"]["push"]]
        push[-1] = push[-1] + epilogue
        inner = dict(instruction.params["params"], push=push)
        return instruction.with_params(params=inner)
    return instruction


def _is_branch(instruction: Instruction) -> bool:
    if instruction.name == "when":
        return any(_is_branch(Instruction.coerce(item)) for item in instruction.params.get("then") or [])
    return instruction.name == "option" and instruction.params.get("script") == "global:advanceScene"


def choice(*items: Instruction) -> Instruction:
    """Group branches; trailing non-branch instructions are appended to each branch's last page."""
    branches = [item for item in items if _is_branch(item)]
    epilogue = [item for item in items if not _is_branch(item)]
    if not epilogue:
        return seq(*branches)
    return seq(*[_with_epilogue(item, epilogue) for item in branches])


def menu_item(
    label: str,
    content: Any,
    exit: bool = False,
    condition: Optional[Instruction] = None,
) -> Dict[str, Any]:
    return _compact(label=label, content=content, exit=exit or None, condition=condition)


def menu(*entries: Dict[str, Any]) -> Instruction:
    return run("menu", {"entries": list(entries)})


def push_pages(*pages: Any) -> Instruction:
    return run("pushScenePages", {"pages": list(pages)})


# Actions


def add_item(item: str, number: int = 1) -> Instruction:
    return run("gainItem", {"item": item, "number": number})


def remove_item(item: str, number: int = 1) -> Instruction:
    return run("loseItem", {"item": item, "number": number})


def move(location: str) -> Instruction:
    return run("move", {"location": location})


def go(location: str, minutes: Optional[float] = None) -> Instruction:
    return run("go", _compact(location=location, minutes=minutes))


def time_lapse(minutes: float) -> Instruction:
    return run("timeLapse", {"minutes": minutes})


def wait(minutes: float = 15, text_: Optional[str] = None, then: Optional[Instruction] = None) -> Instruction:
    return run("wait", _compact(minutes=minutes, text=text_, then=then))


def add_stat(stat: str, change: float, **options: Any) -> Instruction:
    return run("addStat", {"stat": stat, "change": change, **options})


def add_npc_stat(stat: str, change: float, npc: Optional[str] = None, **options: Any) -> Instruction:
    return run("addNpcStat", {**_compact(npc=npc), "stat": stat, "change": change, **options})


def add_quest(quest_id: str, args: Optional[Dict[str, Any]] = None) -> Instruction:
    return run("addQuest", _compact(questId=quest_id, args=args))


def complete_quest(quest_id: str) -> Instruction:
    return run("completeQuest", {"questId": quest_id})


def add_effect(effect_id: str, args: Optional[Dict[str, Any]] = None) -> Instruction:
    return run("addEffect", _compact(effectId=effect_id, args=args))


def learn_npc_name() -> Instruction:
    return run("learnNpcName")


# Predicates


def has_item(item: str, count: int = 1) -> Instruction:
    return run("hasItem", {"item": item, "count": count})


def has_stat(stat: str, min: Optional[float] = None, max: Optional[float] = None) -> Instruction:
    return run("hasStat", _compact(stat=stat, min=min, max=max))


def has_reputation(reputation: str, min: Optional[float] = None, max: Optional[float] = None) -> Instruction:
    return run("hasReputation", _compact(reputation=reputation, min=min, max=max))


def in_location(location: str) -> Instruction:
    return run("inLocation", {"location": location})


def in_scene() -> Instruction:
    return run("inScene")


def npc_stat(npc: Optional[str], stat: str, min: Optional[float] = None, max: Optional[float] = None) -> Instruction:
    return run("npcStat", _compact(npc=npc, stat=stat, min=min, max=max))


def has_card(card_id: str) -> Instruction:
    return run("hasCard", {"cardId": card_id})


def card_completed(card_id: str) -> Instruction:
    return run("cardCompleted", {"cardId": card_id})


def hour_between(start: float, end: float) -> Instruction:
    return run("hourBetween", {"from": start, "to": end})


def time_elapsed(timer: str, minutes: float) -> Instruction:
    return run("timeElapsed", {"timer": timer, "minutes": minutes})


def not_(predicate: Instruction) -> Instruction:
    return run("not", {"predicate": predicate})


def and_(*predicates: Instruction) -> Instruction:
    return run("and", {"predicates": list(predicates)})


def or_(*predicates: Instruction) -> Instruction:
    return run("or", {"predicates": list(predicates)})
