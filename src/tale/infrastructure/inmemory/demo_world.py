"""A small harbour town used by the CLI and the smoke tests."""

from __future__ import annotations

import random
from typing import Any, Dict

from tale.application.scripts.dsl import (
    add_effect,
    add_item,
    add_npc_stat,
    add_quest,
    add_stat,
    branch,
    complete_quest,
    has_item,
    learn_npc_name,
    menu,
    menu_item,
    npc_leave_option,
    npc_stat,
    option,
    remove_item,
    run,
    say,
    scenes,
    seq,
    text,
    time_lapse,
    when,
)
from tale.application.services.clock import SECONDS_PER_HOUR
from tale.application.services.script_registry import ScriptRegistry
from tale.domain.models.card import Card, CardDefinition, CardType
from tale.domain.models.faction import FactionDefinition
from tale.domain.models.item import ItemDefinition
from tale.domain.models.location import Activity, LocationDefinition, LocationLink
from tale.domain.models.npc import PRONOUNS, NPCDefinition, NPCState
from tale.domain.repositories import Definitions
from tale.infrastructure.inmemory.inmemory_definition_repo import empty_definitions


def _hunger_and_fatigue(game: Any, params: Dict[str, Any]) -> None:
    hours = game.calc_ticks(int(params.get("seconds", 0)), SECONDS_PER_HOUR)
    if hours <= 0:
        return
    hunger = game.player.basestats.get("Hunger", 0)
    game.player.basestats["Hunger"] = min(100, hunger + hours * 2)
    if game.player.basestats.get("Energy", 0) < 20:
        game.add_effect("tired")


def _tired_tick(game: Any, card: Card, seconds: int) -> None:
    if game.player.basestats.get("Energy", 0) >= 40:
        game.player.remove_card(card.id, CardType.EFFECT)
        game.recalculate()


def _tired_stats(game: Any, card: Card, stats: Dict[str, float]) -> None:
    stats["Wits"] = stats.get("Wits", 0) - 10


def _hat_stats(game: Any, item_id: str, stats: Dict[str, float]) -> None:
    stats["Charm"] = stats.get("Charm", 0) + 5


def _lodgings_check(game: Any, params: Dict[str, Any]) -> None:
    quest = game.player.get_card("findLodgings")
    if quest is not None and not quest.completed and game.current_location == "lodgings":
        game.complete_quest("findLodgings")


def _dock_ambience(game: Any, params: Dict[str, Any]) -> None:
    if random.random() < 0.1:
        game.add("A gull lands beside you and eyes your pockets.")
        game.add_option("endScene", "Shoo it away")


def _generate_rob(game: Any, npc: NPCState) -> None:
    npc.stats["affection"] = random.randint(0, 5)


def _rob_wait(game: Any, params: Dict[str, Any]) -> None:
    npc = game.get_npc("rob")
    if npc.approach_count == 0 and random.random() < 0.5:
        game.scene.npc = "rob"
        game.run("say", {"parts": ["Oi, {pc}! Over here."]})
        game.add_option(["approach", {"npc": "rob"}], "Go over")
        game.add_option("endScene", "Ignore him")


LOCATIONS = {
    "station": LocationDefinition(
        name="Station",
        description="Steam hisses from the last train of the day.",
        links=[LocationLink(dest="plaza", time=5)],
        on_first_arrive=seq(text("Welcome to Aldermouth, {pc}."), add_quest("findLodgings")),
    ),
    "plaza": LocationDefinition(
        name="Plaza",
        description="Lamps and cobbles. Everything in town starts here.",
        links=[
            LocationLink(dest="station", time=5),
            LocationLink(dest="tavern", time=3),
            LocationLink(dest="docks", time=10),
            LocationLink(dest="lodgings", time=4),
        ],
        activities=[Activity(name="Feed the pigeons", script=text("The pigeons mob you."))],
    ),
    "tavern": LocationDefinition(
        name="The Copper Kettle",
        description="A low room of brass fittings and loud opinions.",
        links=[LocationLink(dest="plaza", time=3)],
        on_arrive=when(has_item("crown", 5), text("The barkeep perks up at the jingle of your purse.")),
        on_relax=seq(text("You nurse a drink by the fire."), add_stat("Mood", 5), time_lapse(30)),
    ),
    "docks": LocationDefinition(
        name="Docks",
        description="Cranes, rope and the smell of tar.",
        links=[LocationLink(dest="plaza", time=10)],
        on_wait=_dock_ambience,
    ),
    "lodgings": LocationDefinition(
        name="Lodgings",
        description="A narrow boarding house with a stern landlady.",
        links=[LocationLink(dest="plaza", time=4)],
        on_arrive=_lodgings_check,
        activities=[Activity(name="Sleep", script=run("sleep", {"minutes": 480}))],
    ),
}

NPCS = {
    "barkeep": NPCDefinition(
        name="Mabel",
        uname="the barkeep",
        description="A broad woman polishing a tankard.",
        speech_color="#d4a373",
        pronouns=PRONOUNS["she"],
        faction="merchants",
        schedule=[[10, 2, "tavern"]],
        on_approach=seq(
            say("What'll it be?"),
            menu(
                menu_item("Ask her name", seq(learn_npc_name(), say("Mabel. Don't wear it out."))),
                menu_item("Buy bread", seq(remove_item("crown"), add_item("bread"), say("Fresh this morning."))),
                menu_item("Leave", text("You step back from the bar."), exit=True),
            ),
        ),
    ),
    "rob": NPCDefinition(
        name="Rob",
        uname="a dockhand",
        description="A wiry dockhand with tar on his sleeves.",
        speech_color="#8ecae6",
        pronouns=PRONOUNS["he"],
        faction="dockers",
        schedule=[[6, 18, "docks", [1, 2, 3, 4, 5, 6]], [19, 23, "tavern"]],
        generate=_generate_rob,
        on_wait=_rob_wait,
        on_leave_player=say("Shift's over. See you around, {pc}."),
        on_first_approach=scenes(
            [say("New in town? I'm Rob."), learn_npc_name()],
            [
                text("{npc} looks you over. A {npc:faction} badge is pinned to his coat."),
                branch("Ask about work", say("Docks always need hands."), add_npc_stat("affection", 1)),
                branch("Ask about lodgings", say("Try the boarding house off the plaza.")),
            ],
            [npc_leave_option("You nod and move on.", "Mind the gulls.")],
        ),
        on_approach=seq(
            say("Back again?"),
            when(npc_stat(None, "affection", min=3), say("Good to see you, {pc}.")),
            option("Chat", "chat"),
            npc_leave_option(),
        ),
        scripts={"chat": seq(text("You trade stories about the sea."), add_npc_stat("affection", 1))},
    ),
}

FACTIONS = {
    "merchants": FactionDefinition(name="Harbour Merchants", description="Shopkeepers and publicans.", color="#d4a373"),
    "dockers": FactionDefinition(name="Dockers' Union", description="The men who work the cranes.", color="#8ecae6"),
}

CARDS = {
    "findLodgings": CardDefinition(
        name="Find Lodgings",
        type=CardType.QUEST,
        description="Find a bed for the night.",
    ),
    "tired": CardDefinition(
        name="Tired",
        type=CardType.EFFECT,
        description="Your thoughts drag.",
        on_tick=_tired_tick,
        calc_stats=_tired_stats,
    ),
}

ITEMS = {
    "crown": ItemDefinition(name="Crown", description="A brass coin.", value=1),
    "bread": ItemDefinition(
        name="Bread",
        description="A crusty loaf.",
        value=1,
        on_consume=seq(text("You eat the bread."), add_stat("Hunger", -20)),
    ),
    "hat": ItemDefinition(name="Felt hat", description="Slightly battered.", slot="head", value=4, calc_stats=_hat_stats),
}

STORY_SCRIPTS = {
    "timeEffects": _hunger_and_fatigue,
    "startGame": seq(
        text("The train wheezes into the station."),
        add_item("crown", 10),
        add_item("hat"),
        run("wearItem", {"item": "hat"}),
        add_quest("findLodgings"),
    ),
    "finishLodgings": complete_quest("findLodgings"),
    "getTired": add_effect("tired"),
}


def build_demo_definitions() -> Definitions:
    definitions = empty_definitions()
    for location_id, definition in LOCATIONS.items():
        definitions.locations.register(location_id, definition)
    for npc_id, definition in NPCS.items():
        definitions.npcs.register(npc_id, definition)
    for card_id, definition in CARDS.items():
        definitions.cards.register(card_id, definition)
    for faction_id, definition in FACTIONS.items():
        definitions.factions.register(faction_id, definition)
    for item_id, definition in ITEMS.items():
        definitions.items.register(item_id, definition)
    return definitions


def register_demo_scripts(registry: ScriptRegistry) -> None:
    for name, script in STORY_SCRIPTS.items():
        if callable(script):
            registry.register(name, script)
        else:
            registry.register(name, _instruction_script(script))


def _instruction_script(instruction: Any):
    def _script(game: Any, params: Dict[str, Any]) -> Any:
        return game.execute(instruction, params)

    return _script
