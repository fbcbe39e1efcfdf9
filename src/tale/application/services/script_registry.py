from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from tale.domain.errors import ConfigurationError, DuplicateNameError


ScriptFn = Callable[[Any, Dict[str, Any]], Any]

logger = logging.getLogger(__name__)


class ScriptRegistry:
    """Name-keyed table of script callables.

    Write-once per name: a second registration under the same name raises
    `DuplicateNameError` and leaves the first callable in place. There is
    no unregistration.
    """

    def __init__(self) -> None:
        self._scripts: Dict[str, ScriptFn] = {}

    def register(self, name: str, fn: ScriptFn) -> None:
        key = str(name or "").strip()
        if not key:
            raise ConfigurationError("Script name must be a non-empty string")
        if not callable(fn):
            raise ConfigurationError(f"Script {key} is not callable")
        if key in self._scripts:
            raise DuplicateNameError(key)
        self._scripts[key] = fn
        logger.debug("Registered script %s", key)

    def register_all(self, scripts: Mapping[str, ScriptFn]) -> None:
        # Entries registered before a duplicate stay registered.
        for name, fn in scripts.items():
            self.register(name, fn)

    def lookup(self, name: str) -> Optional[ScriptFn]:
        return self._scripts.get(name)

    def names(self) -> list[str]:
        return sorted(self._scripts)

    def __contains__(self, name: object) -> bool:
        return name in self._scripts

    def __len__(self) -> int:
        return len(self._scripts)


def default_script_registry() -> ScriptRegistry:
    from tale.application.scripts import actions, content, control, predicates, scene, timing

    registry = ScriptRegistry()
    registry.register_all(control.SCRIPTS)
    registry.register_all(predicates.SCRIPTS)
    registry.register_all(content.SCRIPTS)
    registry.register_all(actions.SCRIPTS)
    registry.register_all(scene.SCRIPTS)
    registry.register_all(timing.SCRIPTS)
    return registry
