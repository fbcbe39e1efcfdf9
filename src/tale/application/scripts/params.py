from __future__ import annotations

from typing import Any, Mapping, Optional

from tale.domain.errors import ScriptValidationError


def require_str(params: Mapping[str, Any], key: str, script: str) -> str:
    value = params.get(key)
    if not isinstance(value, str) or not value:
        raise ScriptValidationError(f"{script} requires a {key} parameter")
    return value


def optional_str(params: Mapping[str, Any], key: str, script: str) -> Optional[str]:
    value = params.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ScriptValidationError(f"{script}: {key} must be a string")
    return value


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def require_number(params: Mapping[str, Any], key: str, script: str) -> float:
    value = params.get(key)
    if not is_number(value):
        raise ScriptValidationError(f"{script} requires a {key} parameter")
    return value


def optional_number(
    params: Mapping[str, Any],
    key: str,
    script: str,
    default: Any = None,
    non_negative: bool = False,
) -> Any:
    value = params.get(key)
    if value is None:
        return default
    if not is_number(value):
        raise ScriptValidationError(f"{script}: {key} must be a number")
    if non_negative and value < 0:
        raise ScriptValidationError(f"{script}: {key} must be non-negative")
    return value


def chance_passes(params: Mapping[str, Any], script: str, roll: float) -> bool:
    chance = optional_number(params, "chance", script, default=1.0)
    if chance < 0 or chance > 1:
        raise ScriptValidationError(f"{script}: chance must be between 0 and 1")
    return roll <= chance


def in_range(value: float, params: Mapping[str, Any]) -> Optional[bool]:
    """Check `min`/`max` bounds. None when neither bound is given."""
    low = params.get("min")
    high = params.get("max")
    if low is None and high is None:
        return None
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True
