from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class FactionDefinition:
    name: str
    description: str = ""
    color: Optional[str] = None
