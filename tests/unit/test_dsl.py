import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from tale_fixtures import content_texts, make_game

from tale.application.scripts import dsl
from tale.domain.errors import ScriptValidationError
from tale.domain.models.instruction import Instruction


class DslBuilderTests(unittest.TestCase):
    def test_builders_produce_plain_instructions(self) -> None:
        self.assertEqual(Instruction("gainItem", {"item": "crown", "number": 2}), dsl.add_item("crown", 2))
        self.assertEqual(Instruction("npcName", {}), dsl.npc_name())
        self.assertEqual(Instruction("hourBetween", {"from": 22, "to": 6}), dsl.hour_between(22, 6))
        self.assertEqual({"text": "gold", "color": "#ffd700"}, dsl.hl("gold", "#ffd700"))

    def test_unless_negates(self) -> None:
        game = make_game()

        game.execute(dsl.unless(dsl.in_location("station"), dsl.text("away")))
        game.execute(dsl.unless(dsl.in_location("docks"), dsl.text("home")))

        self.assertEqual(["home"], content_texts(game))

    def test_cond_without_default(self) -> None:
        program = dsl.cond(dsl.in_location("docks"), dsl.text("docks"))

        self.assertNotIn("default", program.params)
        self.assertEqual(1, len(program.params["branches"]))

    def test_scenes_requires_pages(self) -> None:
        with self.assertRaises(ScriptValidationError):
            dsl.scenes()

    def test_single_page_scene_is_a_plain_seq(self) -> None:
        program = dsl.scenes(dsl.scene(dsl.text("only")))

        self.assertEqual("seq", program.name)
        self.assertEqual([dsl.text("only")], program.params["instructions"])

    def test_choice_without_epilogue_keeps_branches(self) -> None:
        left = dsl.branch("Left", dsl.text("l"))

        self.assertEqual(dsl.seq(left), dsl.choice(left))

    def test_choice_reaches_into_gated_branches(self) -> None:
        gated = dsl.gated_branch(dsl.in_location("station"), "Look", dsl.text("You look."))
        game = make_game()

        game.execute(dsl.choice(gated, dsl.text("Then you leave.")))
        game.take_action(game.scene.options[0].action)

        self.assertEqual(["You look.", "Then you leave."], content_texts(game))

    def test_wait_and_go_builders_drop_missing_params(self) -> None:
        self.assertEqual(Instruction("wait", {"minutes": 15}), dsl.wait())
        self.assertEqual(Instruction("go", {"location": "docks"}), dsl.go("docks"))
        self.assertEqual(Instruction("go", {"location": "docks", "minutes": 3}), dsl.go("docks", 3))


if __name__ == "__main__":
    unittest.main()
