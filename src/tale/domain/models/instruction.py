from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from tale.domain.errors import ScriptValidationError


@dataclass(frozen=True)
class Instruction:
    """A deferred script call: the script name plus its parameter record.

    Instructions are plain data. The same value can be queued on the scene
    stack, attached to several options or replayed without side effects on
    the instruction itself.
    """

    name: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ScriptValidationError("Instruction requires a script name")
        object.__setattr__(self, "params", dict(self.params or {}))

    @classmethod
    def coerce(cls, value: object) -> "Instruction":
        if isinstance(value, Instruction):
            return value
        if isinstance(value, (list, tuple)) and value and isinstance(value[0], str):
            if len(value) == 1:
                return cls(value[0], {})
            if len(value) == 2 and (value[1] is None or isinstance(value[1], Mapping)):
                return cls(value[0], dict(value[1] or {}))
        if isinstance(value, Mapping) and isinstance(value.get("name"), str):
            return cls(str(value["name"]), dict(value.get("params") or {}))
        raise ScriptValidationError(f"Not an instruction: {value!r}")

    def to_pair(self) -> list:
        return [self.name, to_plain(self.params)]

    def with_params(self, **overrides: Any) -> "Instruction":
        merged = dict(self.params)
        merged.update(overrides)
        return Instruction(self.name, merged)


def is_instruction(value: object) -> bool:
    if isinstance(value, Instruction):
        return True
    return (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and isinstance(value[0], str)
        and (value[1] is None or isinstance(value[1], Mapping))
    )


def to_plain(value: Any) -> Any:
    """Convert nested instructions and containers into JSON-ready data."""
    if isinstance(value, Instruction):
        return value.to_pair()
    if isinstance(value, Mapping):
        return {str(key): to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value
