from collections import defaultdict
import logging
from typing import Callable, DefaultDict, List, Type


EventHandler = Callable[[object], None]


class EventBus:
    """Observer fan-out for clock, scene and save notifications.

    Handlers run in (priority, subscription order). A failing handler is
    logged and isolated so the game turn that published the event carries on.
    Story hooks are not routed through here; they are called directly and
    their errors propagate.
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[Type[object], List[tuple[int, int, EventHandler]]] = defaultdict(list)
        self._sequence = 0
        self._errors: List[Exception] = []
        self._logger = logging.getLogger(__name__)

    def subscribe(self, event_type: Type[object], handler: EventHandler, *, priority: int = 100) -> None:
        rows = self._handlers[event_type]
        rows.append((int(priority), self._sequence, handler))
        self._sequence += 1
        rows.sort(key=lambda row: (row[0], row[1]))

    def publish(self, event: object) -> None:
        self._errors = []
        event_type = type(event)
        for priority, _, handler in list(self._handlers.get(event_type, [])):
            try:
                handler(event)
            except Exception as exc:
                self._errors.append(exc)
                self._logger.exception(
                    "Event handler failed and was isolated",
                    extra={
                        "event_type": event_type.__name__,
                        "handler": getattr(handler, "__qualname__", repr(handler)),
                        "priority": priority,
                    },
                )

    def last_publish_errors(self) -> List[Exception]:
        return list(self._errors)
