import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from tale_fixtures import make_game

from tale.application.services.interpolation import (
    error_marker,
    interpolate,
    interpolate_text,
    resolve_parts,
)
from tale.domain.models.content import COLOURS, ERROR_COLOUR, InlineContent
from tale.domain.models.faction import FactionDefinition
from tale.domain.models.instruction import Instruction
from tale.domain.models.npc import PRONOUNS, NPCDefinition


def _explode(game, params):
    raise RuntimeError("boom")


def _game():
    npcs = {
        "rob": NPCDefinition(
            name="Rob",
            uname="a dockhand",
            speech_color="#8ecae6",
            pronouns=PRONOUNS["he"],
            faction="dockers",
            scripts={"motto": "Mind the gulls."},
        ),
        "mabel": NPCDefinition(name="Mabel", uname="the barkeep", pronouns=PRONOUNS["she"]),
    }
    scripts = {
        "explode": _explode,
        "weather": lambda game, params: "drizzle",
        "flag": lambda game, params: True,
    }
    factions = {"dockers": FactionDefinition(name="Dockers' Guild", color="#1d4ed8")}
    game = make_game(npcs=npcs, factions=factions, scripts=scripts)
    game.player.name = "Elise"
    return game


class InterpolateTests(unittest.TestCase):
    def test_plain_text_is_one_fragment(self) -> None:
        self.assertEqual(["Rain again."], interpolate(_game(), "Rain again."))

    def test_placeholders_split_literals(self) -> None:
        fragments = interpolate(_game(), "It is {weather} today.")

        self.assertEqual(["It is ", "drizzle", " today."], fragments)

    def test_double_braces_are_literal(self) -> None:
        self.assertEqual(["{weather} and }"], interpolate(_game(), "{{weather}} and }}"))

    def test_unterminated_brace_is_literal(self) -> None:
        self.assertEqual(["Price: {10"], interpolate(_game(), "Price: {10"))

    def test_player_name_resolves_to_coloured_content(self) -> None:
        fragments = interpolate(_game(), "Hello {pc}!")

        self.assertEqual(["Hello ", InlineContent(text="Elise", color=COLOURS["player"]), "!"], fragments)

    def test_unknown_script_becomes_error_marker(self) -> None:
        fragments = interpolate(_game(), "{nothing}")

        self.assertEqual([error_marker("nothing")], fragments)
        self.assertEqual("{nothing}", fragments[0].text)
        self.assertEqual(ERROR_COLOUR, fragments[0].color)

    def test_empty_placeholder_and_failing_script_become_markers(self) -> None:
        self.assertEqual([error_marker("")], interpolate(_game(), "{}"))
        self.assertEqual([error_marker("explode")], interpolate(_game(), "{ explode }"))

    def test_unsupported_result_types_become_markers(self) -> None:
        self.assertEqual([error_marker("flag")], interpolate(_game(), "{flag}"))

    def test_npc_accessor_properties(self) -> None:
        game = _game()
        game.scene.npc = "rob"

        self.assertEqual("a dockhand", interpolate(game, "{npc}")[0].text)
        self.assertEqual(["he"], interpolate(game, "{npc:he}"))
        self.assertEqual(["His"], interpolate(game, "{npc:His}"))
        self.assertEqual([InlineContent(text="Dockers' Guild", color="#1d4ed8")], interpolate(game, "{npc:faction}"))
        self.assertEqual(["Mind the gulls."], interpolate(game, "{npc:motto}"))

    def test_npc_accessor_with_argument_targets_other_npc(self) -> None:
        game = _game()
        game.scene.npc = "rob"

        self.assertEqual(["She"], interpolate(game, "{npc(mabel):He}"))
        self.assertEqual(["unaffiliated"], interpolate(game, "{npc(mabel):faction}"))
        self.assertEqual("the barkeep", interpolate(game, "{npc(mabel)}")[0].text)

    def test_npc_faction_uses_faction_definition(self) -> None:
        npcs = {
            "ada": NPCDefinition(name="Ada", faction="merchants"),
            "lost": NPCDefinition(name="Lost", faction="pirates"),
        }
        game = make_game(npcs=npcs, factions={"merchants": FactionDefinition(name="Merchant Guild")})

        self.assertEqual(
            [InlineContent(text="Merchant Guild", color=COLOURS["faction"])],
            interpolate(game, "{npc(ada):faction}"),
        )
        self.assertEqual([error_marker("npc(lost):faction")], interpolate(game, "{npc(lost):faction}"))

    def test_npc_name_follows_learned_name(self) -> None:
        game = _game()
        game.scene.npc = "rob"
        game.get_npc("rob").name_known = 1

        self.assertEqual("Rob", interpolate(game, "{npc:name}")[0].text)

    def test_npc_accessor_errors_become_markers(self) -> None:
        game = _game()

        self.assertEqual([error_marker("npc:he")], interpolate(game, "{npc:he}"))
        game.scene.npc = "rob"
        self.assertEqual([error_marker("npc:shoe")], interpolate(game, "{npc:shoe}"))

    def test_interpolate_text_flattens_fragments(self) -> None:
        game = _game()

        self.assertEqual("Hi Elise, {oops}", interpolate_text(game, "Hi {pc}, {oops}"))
        self.assertEqual("no braces", interpolate_text(game, "no braces"))


class ResolvePartsTests(unittest.TestCase):
    def test_mixes_strings_content_and_instructions(self) -> None:
        game = _game()
        marker = InlineContent(text="!", color="#fff")

        parts = resolve_parts(game, ["Dear ", Instruction("playerName"), marker, ["weather", {}], "{weather}"])

        self.assertEqual(
            ["Dear ", InlineContent(text="Elise", color=COLOURS["player"]), marker, "drizzle", "drizzle"],
            parts,
        )

    def test_drops_non_text_instruction_results(self) -> None:
        self.assertEqual(["a"], resolve_parts(_game(), ["a", Instruction("flag")]))


if __name__ == "__main__":
    unittest.main()
