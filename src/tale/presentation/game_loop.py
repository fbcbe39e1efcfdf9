import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from rich.console import Console

from tale.application.services.game_service import GameService
from tale.application.services.save_service import SaveService
from tale.domain.errors import TaleError
from tale.domain.models.instruction import Instruction
from tale.presentation.render import option_label, render_choices, render_frame, render_message, render_status


logger = logging.getLogger(__name__)

_BORDER_ERROR = "red"
_BORDER_SYSTEM = "magenta"
WAIT_MINUTES = 15


@dataclass(frozen=True)
class Choice:
    label: str
    action: Optional[Instruction] = None
    command: Optional[str] = None
    disabled: bool = False


def default_choices(game: GameService) -> List[Choice]:
    """Free-roam choices offered when the frame has no options of its own."""
    rows: List[Choice] = []
    for npc_id in game.npcs_present:
        definition = game.npc_definition(npc_id)
        npc = game.get_npc(npc_id)
        name = (definition.name if npc.name_known else definition.uname) or npc_id
        rows.append(Choice(f"Approach {name}", Instruction("approach", {"npc": npc_id})))
    location = game.location_definition
    for link in location.links:
        destination = game.definitions.locations.require(link.dest)
        rows.append(Choice(f"Go to {destination.name} ({link.time} min)", Instruction("go", {"location": link.dest})))
    for activity in location.activities:
        rows.append(Choice(activity.name, Instruction("runActivity", {"activity": activity.name})))
    if location.on_relax is not None:
        rows.append(Choice("Relax", Instruction("relaxAtLocation")))
    for entry in game.player.inventory:
        item = game.definitions.items.require(entry.id)
        if item.on_consume is not None:
            rows.append(Choice(f"Use {item.name} (x{entry.number})", Instruction("consumeItem", {"item": entry.id})))
    rows.append(Choice(f"Wait {WAIT_MINUTES} minutes", Instruction("wait", {"minutes": WAIT_MINUTES})))
    rows.append(Choice("Save", command="save"))
    rows.append(Choice("Load", command="load"))
    rows.append(Choice("Quit", command="quit"))
    return rows


def frame_choices(game: GameService) -> List[Choice]:
    if game.scene.options:
        return [
            Choice(option_label(option), option.action, disabled=option.disabled)
            for option in game.scene.options
        ]
    return default_choices(game)


def play_turn(game: GameService, action: Instruction) -> Optional[str]:
    """Run one player action through the turn cycle.

    Returns an error message when a script failed; the session stays usable.
    """
    action = Instruction.coerce(action)
    game.before_action()
    try:
        game.take_action(action)
    except TaleError as exc:
        logger.warning("Action %s failed: %s", action.name, exc)
        game.after_action()
        return str(exc)
    game.after_action()
    return None


def _read_choice(console: Console, choices: List[Choice], reader: Callable[[str], str]) -> Optional[Choice]:
    raw = reader("[bold cyan]Choose[/bold cyan] > ").strip().lower()
    if raw in {"q", "quit"}:
        return Choice("Quit", command="quit")
    try:
        index = int(raw) - 1
    except ValueError:
        return None
    if index < 0 or index >= len(choices) or choices[index].disabled:
        return None
    return choices[index]


def run_game_loop(
    game: GameService,
    saves: SaveService,
    slot: str,
    console: Optional[Console] = None,
    reader: Optional[Callable[[str], str]] = None,
) -> None:
    console = console or Console()
    reader = reader or console.input
    while True:
        render_status(console, game)
        render_frame(console, game)
        choices = frame_choices(game)
        render_choices(console, [choice.label for choice in choices], disabled={i for i, c in enumerate(choices) if c.disabled})
        choice = _read_choice(console, choices, reader)
        if choice is None:
            render_message(console, "Hmm", ["Pick one of the numbered choices."], border_style=_BORDER_SYSTEM)
            continue
        if choice.command == "quit":
            render_message(console, "Farewell", ["Session ended."], border_style=_BORDER_SYSTEM)
            return
        if choice.command == "save":
            saves.save(game, slot)
            game.clear_scene()
            game.add(f"Game saved to slot {slot}.")
            continue
        if choice.command == "load":
            try:
                saves.load(game, slot)
            except TaleError as exc:
                render_message(console, "Load failed", [str(exc)], border_style=_BORDER_ERROR)
                continue
            game.add(f"Game loaded from slot {slot}.")
            continue
        error = play_turn(game, choice.action)
        if error:
            render_message(console, "Something went wrong", [error], border_style=_BORDER_ERROR)
