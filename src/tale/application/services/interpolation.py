from __future__ import annotations

import logging
from typing import Any, Iterable, List

from tale.application.services.resolver import is_accessor
from tale.domain.models.content import ERROR_COLOUR, Fragment, InlineContent, fragment_text
from tale.domain.models.instruction import Instruction, is_instruction


logger = logging.getLogger(__name__)


def error_marker(expression: str) -> InlineContent:
    return InlineContent(text="{" + expression + "}", color=ERROR_COLOUR)


def _resolve_placeholder(game: Any, expression: str) -> Fragment:
    if not expression:
        return error_marker(expression)
    try:
        resolved = game.run_expression(expression)
        if is_accessor(resolved):
            resolved = resolved.default(game)
    except Exception:
        logger.debug("Placeholder {%s} failed to resolve", expression, exc_info=True)
        return error_marker(expression)
    if isinstance(resolved, (str, InlineContent)):
        return resolved
    logger.debug("Placeholder {%s} resolved to unsupported %s", expression, type(resolved).__name__)
    return error_marker(expression)


def interpolate(game: Any, template: str) -> List[Fragment]:
    """Expand `{expression}` placeholders into an ordered fragment list.

    `{{` and `}}` are literal braces and an unterminated `{` is literal
    text. Failed placeholders become an error-marker fragment; this never
    raises for content reasons.
    """
    fragments: List[Fragment] = []
    literal: List[str] = []
    index = 0
    length = len(template)
    while index < length:
        char = template[index]
        pair = template[index : index + 2]
        if pair == "{{":
            literal.append("{")
            index += 2
            continue
        if pair == "}}":
            literal.append("}")
            index += 2
            continue
        if char == "{":
            end = template.find("}", index + 1)
            if end == -1:
                literal.append(char)
                index += 1
                continue
            if literal:
                fragments.append("".join(literal))
                literal = []
            fragments.append(_resolve_placeholder(game, template[index + 1 : end].strip()))
            index = end + 1
            continue
        literal.append(char)
        index += 1
    if literal:
        fragments.append("".join(literal))
    return fragments


def interpolate_text(game: Any, template: str) -> str:
    if "{" not in template and "}" not in template:
        return template
    return "".join(fragment_text(fragment) for fragment in interpolate(game, template))


def resolve_parts(game: Any, parts: Iterable[Any]) -> List[Fragment]:
    """Resolve authored parts: strings are interpolated, instructions are run.

    Instruction results other than text content are dropped.
    """
    resolved: List[Fragment] = []
    for part in parts or ():
        if isinstance(part, str):
            if "{" in part or "}" in part:
                resolved.extend(interpolate(game, part))
            else:
                resolved.append(part)
        elif isinstance(part, InlineContent):
            resolved.append(part)
        elif isinstance(part, Instruction) or is_instruction(part):
            value = game.execute(part)
            if isinstance(value, (str, InlineContent)):
                resolved.append(value)
    return resolved
