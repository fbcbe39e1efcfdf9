from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional


@dataclass(frozen=True)
class LocationLink:
    dest: str
    time: int = 1
    on_follow: Any = None
    check_access: Optional[Callable[[Any], Optional[str]]] = None


@dataclass(frozen=True)
class Activity:
    name: str
    script: Any


@dataclass
class LocationDefinition:
    name: str
    description: str = ""
    links: List[LocationLink] = field(default_factory=list)
    activities: List[Activity] = field(default_factory=list)
    on_first_arrive: Any = None
    on_arrive: Any = None
    on_wait: Any = None
    on_relax: Any = None

    def link_to(self, dest: str) -> Optional[LocationLink]:
        return next((link for link in self.links if link.dest == dest), None)


@dataclass
class LocationState:
    id: str
    num_visits: int = 0
    discovered: bool = False
