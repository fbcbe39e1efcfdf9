from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from tale.domain.models.content import Content, SceneOption
from tale.domain.models.instruction import Instruction


@dataclass
class SceneFrame:
    """The frame currently shown to the player.

    `content` and `options` are rebuilt every frame. `stack` holds the
    pending pages and survives `clear()`; it drains through `advanceScene`.
    """

    content: List[Content] = field(default_factory=list)
    options: List[SceneOption] = field(default_factory=list)
    stack: List[Instruction] = field(default_factory=list)
    npc: Optional[str] = None
    hide_npc_image: Optional[bool] = None

    @property
    def in_scene(self) -> bool:
        return len(self.options) > 0

    def clear(self) -> None:
        self.content = []
        self.options = []
