from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Tuple

from tale.application.services.script_registry import ScriptRegistry
from tale.domain.errors import ScriptNotFoundError, ScriptValidationError
from tale.domain.models.instruction import Instruction, is_instruction


class Accessor(ABC):
    """Chainable result of a script.

    `{npc}` resolves to `default(game)`; `{npc:he}` and `{npc(rob):faction}`
    hand the remainder to `resolve(game, rest)`. Accessors are built fresh
    per resolution and never persisted.
    """

    @abstractmethod
    def default(self, game: Any) -> Any:
        raise NotImplementedError

    @abstractmethod
    def resolve(self, game: Any, rest: str) -> Any:
        raise NotImplementedError


def is_accessor(value: object) -> bool:
    if isinstance(value, Accessor):
        return True
    return callable(getattr(value, "resolve", None)) and callable(getattr(value, "default", None))


def parse_args(rest: str) -> Optional[Tuple[str, str]]:
    """Split `"(argline)tail"` into `(argline, tail)`.

    One leading ':' is dropped from the tail. No nested parentheses.
    """
    if not rest.startswith("("):
        return None
    close = rest.find(")")
    if close == -1:
        return None
    tail = rest[close + 1 :]
    if tail.startswith(":"):
        tail = tail[1:]
    return rest[1:close], tail


def split_expression(expression: str) -> Tuple[str, str]:
    text = str(expression or "").strip()
    for index, char in enumerate(text):
        if char in ":(":
            return text[:index].strip(), text[index:]
    return text, ""


def _has_chain(expression: str) -> bool:
    return ":" in expression or "(" in expression


class InstructionResolver:
    def __init__(self, registry: ScriptRegistry) -> None:
        self.registry = registry

    def run(self, game: Any, name: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        fn = self.registry.lookup(name)
        if fn is None:
            raise ScriptNotFoundError(name)
        return fn(game, dict(params or {}))

    def run_expression(self, game: Any, expression: str) -> Any:
        name, rest = split_expression(expression)
        if not name:
            raise ScriptValidationError(f"Expression has no script name: {expression!r}")
        result = self.run(game, name, {})
        if not is_accessor(result):
            return result
        if rest:
            if rest.startswith(":"):
                rest = rest[1:]
            return result.resolve(game, rest)
        return result.default(game)

    def execute(self, game: Any, script: Any, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Run any script form: callable, instruction, pair or expression string.

        An instruction's own params win over `params` when both name a key.
        """
        if script is None:
            return None
        if callable(script) and not isinstance(script, Instruction):
            return script(game, dict(params or {}))
        if isinstance(script, str):
            if _has_chain(script):
                return self.run_expression(game, script)
            return self.run(game, script.strip(), params)
        if isinstance(script, Instruction) or is_instruction(script):
            instruction = Instruction.coerce(script)
            merged = dict(params or {})
            merged.update(instruction.params)
            return self.run(game, instruction.name, merged)
        raise ScriptValidationError(f"Cannot execute {script!r}")

    def execute_all(self, game: Any, scripts: Any) -> None:
        if scripts is None:
            return
        if isinstance(scripts, (str, Instruction)) or is_instruction(scripts) or callable(scripts):
            self.execute(game, scripts)
            return
        for script in scripts:
            self.execute(game, script)
