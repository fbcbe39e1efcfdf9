from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from tale.application.services import clock, scene_stack
from tale.application.services.event_bus import EventBus
from tale.application.services.resolver import InstructionResolver
from tale.application.services.schedule import follow_schedule
from tale.application.services.script_registry import ScriptRegistry
from tale.application.services.stats import recalculate_stats
from tale.domain.errors import ScriptValidationError
from tale.domain.models.card import Card, CardType
from tale.domain.models.content import COLOURS, InlineContent, Paragraph, SceneOption, colour, is_content
from tale.domain.models.game import GameState
from tale.domain.models.instruction import Instruction, is_instruction
from tale.domain.models.location import LocationDefinition, LocationState
from tale.domain.models.npc import NPCDefinition, NPCState
from tale.domain.models.player import Player
from tale.domain.models.scene import SceneFrame
from tale.domain.repositories import Definitions


logger = logging.getLogger(__name__)


class GameService:
    """The `game` every script receives.

    Wraps the persisted `GameState` with the script registry, the static
    definitions and the event bus. One instance per play session.

    Turn cycle: `before_action()` refreshes transient presence,
    `take_action()` clears the frame and runs the chosen instruction,
    `after_action()` runs card `after_update` hooks and drops the scene NPC
    once the frame has no options left.
    """

    def __init__(
        self,
        state: GameState,
        registry: ScriptRegistry,
        definitions: Definitions,
        event_bus: Optional[EventBus] = None,
        recalculate: Optional[Callable[[Any], Any]] = None,
        debug: bool = False,
    ) -> None:
        self.state = state
        self.registry = registry
        self.definitions = definitions
        self.event_bus = event_bus or EventBus()
        self.resolver = InstructionResolver(registry)
        self._recalculate = recalculate or recalculate_stats
        self.is_debug = bool(debug)

    # -- state passthrough -------------------------------------------------

    @property
    def time(self) -> int:
        return self.state.time

    @time.setter
    def time(self, value: int) -> None:
        if value < self.state.time:
            raise ScriptValidationError("The game clock never runs backwards")
        self.state.time = int(value)

    @property
    def player(self) -> Player:
        return self.state.player

    @property
    def scene(self) -> SceneFrame:
        return self.state.scene

    @property
    def npcs(self) -> Dict[str, NPCState]:
        return self.state.npcs

    @property
    def locations(self) -> Dict[str, LocationState]:
        return self.state.locations

    @property
    def current_location(self) -> str:
        return self.state.current_location

    @property
    def npcs_present(self) -> List[str]:
        return self.state.npcs_present

    # -- clock reads ---------------------------------------------------------

    def now(self) -> int:
        return self.state.time

    @property
    def hour_of_day(self) -> float:
        return clock.hour_of_day(self.state.time)

    @property
    def day_of_week(self) -> int:
        return clock.day_of_week(self.state.time)

    @property
    def date(self) -> datetime:
        return clock.to_datetime(self.state.time)

    def calc_ticks(self, seconds: int, interval: int) -> int:
        return clock.calc_ticks(self, seconds, interval)

    # -- script execution ----------------------------------------------------

    def run(self, name: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.resolver.run(self, name, params)

    def run_expression(self, expression: str) -> Any:
        return self.resolver.run_expression(self, expression)

    def execute(self, script: Any, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.resolver.execute(self, script, params)

    def execute_all(self, scripts: Any) -> None:
        self.resolver.execute_all(self, scripts)

    # -- scene frame ---------------------------------------------------------

    @property
    def in_scene(self) -> bool:
        return self.state.scene.in_scene

    def add(self, item: Any) -> "GameService":
        """Append to the frame: a string becomes a paragraph, options go to options."""
        scene = self.state.scene
        if isinstance(item, str):
            scene.content.append(Paragraph((InlineContent(text=item),)))
        elif isinstance(item, SceneOption):
            scene.options.append(item)
        elif is_content(item):
            scene.content.append(item)
        elif isinstance(item, (list, tuple)):
            for entry in item:
                self.add(entry)
        elif item is not None:
            raise ScriptValidationError(f"Cannot add {item!r} to the scene")
        return self

    def add_option(
        self,
        action: Any,
        label: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> "GameService":
        if isinstance(action, str):
            instruction = Instruction(action.strip(), dict(params or {}))
        elif isinstance(action, Instruction) or is_instruction(action):
            instruction = Instruction.coerce(action)
            if params:
                instruction = instruction.with_params(**params)
        else:
            raise ScriptValidationError(f"Option action must be a script name or instruction: {action!r}")
        self.state.scene.options.append(SceneOption(action=instruction, label=label))
        return self

    def clear_scene(self) -> None:
        self.state.scene.clear()

    def push_pages(self, pages: Any) -> None:
        scene_stack.push_pages(self, pages)

    def advance(self, push: Any = None) -> int:
        return scene_stack.advance(self, push)

    # -- locations and NPCs --------------------------------------------------

    @property
    def location(self) -> LocationState:
        return self.get_location(self.state.current_location)

    @property
    def location_definition(self) -> LocationDefinition:
        return self.definitions.locations.require(self.state.current_location)

    def get_location(self, location_id: str) -> LocationState:
        existing = self.state.locations.get(location_id)
        if existing is not None:
            return existing
        self.definitions.locations.require(location_id)
        location = LocationState(id=location_id)
        self.state.locations[location_id] = location
        return location

    def get_npc(self, npc_id: str) -> NPCState:
        existing = self.state.npcs.get(npc_id)
        if existing is not None:
            return existing
        definition = self.definitions.npcs.require(npc_id)
        npc = NPCState(id=npc_id)
        if definition.generate is not None:
            definition.generate(self, npc)
        # Stored before on_move so the hook can look the NPC up again.
        self.state.npcs[npc_id] = npc
        if definition.on_move is not None:
            self.execute(definition.on_move, {"npc": npc_id})
        elif definition.schedule:
            follow_schedule(self, npc, definition.schedule)
        return npc

    def npc_definition(self, npc_id: str) -> NPCDefinition:
        return self.definitions.npcs.require(npc_id)

    @property
    def npc(self) -> NPCState:
        npc_id = self.state.scene.npc
        if not npc_id:
            raise ScriptValidationError("No NPC in the current scene")
        return self.get_npc(npc_id)

    def move_to_location(self, location_id: str) -> None:
        self.get_location(location_id)
        self.state.current_location = location_id
        self.update_npcs_present()

    def update_npcs_present(self) -> None:
        # Only NPCs already generated count; presence never generates one.
        self.state.npcs_present = [
            npc_id for npc_id, npc in self.state.npcs.items() if npc.location == self.state.current_location
        ]

    # -- time ----------------------------------------------------------------

    def advance_clock(self, seconds: Any) -> None:
        clock.advance_clock(self, seconds)

    def wait(self, minutes: Any, then: Any = None) -> bool:
        return clock.wait(self, minutes, then)

    def time_lapse(self, minutes: Any = None) -> "GameService":
        self.run("timeLapse", {"minutes": minutes} if minutes is not None else {})
        return self

    # -- stats and cards -----------------------------------------------------

    def recalculate(self) -> None:
        self._recalculate(self)

    def add_quest(self, quest_id: str, args: Optional[Mapping[str, Any]] = None) -> "GameService":
        args = dict(args or {})
        if self.player.has_card(quest_id):
            return self
        definition = self.definitions.cards.require(quest_id)
        silent = bool(args.pop("silent", False))
        self.player.cards.append(Card(id=quest_id, type=CardType.QUEST, fields=args))
        if not silent:
            self.add(colour(f"Quest received: {definition.name}", COLOURS["quest"]))
        return self

    def complete_quest(self, quest_id: str) -> "GameService":
        quest = self.player.get_card(quest_id)
        if quest is not None and not quest.completed:
            quest.completed = True
            definition = self.definitions.cards.require(quest_id)
            self.add(colour(f"Quest completed: {definition.name}", COLOURS["positive"]))
        return self

    def add_effect(self, effect_id: str, args: Optional[Mapping[str, Any]] = None) -> "GameService":
        if self.player.get_card(effect_id, CardType.EFFECT) is not None:
            return self
        definition = self.definitions.cards.require(effect_id)
        self.player.cards.append(Card(id=effect_id, type=CardType.EFFECT, fields=dict(args or {})))
        self.add(colour(f"Effect: {definition.name}", COLOURS["effect"]))
        self.recalculate()
        return self

    # -- turn cycle ----------------------------------------------------------

    def before_action(self) -> None:
        self.update_npcs_present()

    def take_action(self, action: Any, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Run a player choice against a freshly cleared frame.

        Any choice other than advancing the scene abandons pending pages.
        """
        instruction = Instruction.coerce(action) if not isinstance(action, str) else Instruction(action, dict(params or {}))
        self.clear_scene()
        if instruction.name != scene_stack.ADVANCE_SCRIPT:
            self.state.scene.stack = []
        logger.debug("Player action %s", instruction.name)
        return self.execute(instruction)

    def after_action(self) -> None:
        for card in list(self.player.cards):
            definition = self.definitions.cards.require(card.id)
            if definition.after_update is not None:
                self.execute(definition.after_update, {"card": card.id})
        if not self.state.scene.options:
            self.state.scene.npc = None
            self.state.scene.hide_npc_image = None
