class TaleError(Exception):
    """Base class for every error raised by the narrative runtime."""


class ConfigurationError(TaleError):
    """Content or wiring mistake detected at startup or load time."""


class DuplicateNameError(ConfigurationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Duplicate script name: {name}")
        self.name = name


class DefinitionNotFoundError(ConfigurationError, LookupError):
    def __init__(self, kind: str, definition_id: str) -> None:
        super().__init__(f"{kind} definition not found: {definition_id}")
        self.kind = kind
        self.definition_id = definition_id


class ScriptNotFoundError(TaleError, LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Script not found: {name}")
        self.name = name


class ExpressionError(TaleError, ValueError):
    """An expression or accessor chain could not be resolved."""


class ScriptValidationError(TaleError, ValueError):
    """A script received missing or invalid parameters."""


class SaveError(TaleError):
    """A save document is malformed or cannot be stored."""
