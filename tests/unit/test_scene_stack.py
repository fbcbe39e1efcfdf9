import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from tale_fixtures import choose, content_texts, make_game, option_labels, record_events

from tale.application.scripts.dsl import (
    branch,
    choice,
    has_item,
    menu,
    menu_item,
    push_pages,
    run,
    scenes,
    text,
    when,
)
from tale.application.services import scene_stack
from tale.domain.errors import ScriptValidationError
from tale.domain.events import SceneAdvanced
from tale.domain.models.instruction import Instruction
from tale.domain.models.item import ItemDefinition


def _noop(game, params):
    return None


class ScenePrimitivesTests(unittest.TestCase):
    def test_coerce_page_turns_lists_into_seq(self) -> None:
        page = scene_stack.coerce_page([text("a"), ["text", {"parts": ["b"]}]])

        self.assertEqual("seq", page.name)
        self.assertEqual(2, len(page.params["instructions"]))

    def test_coerce_page_rejects_garbage(self) -> None:
        with self.assertRaises(ScriptValidationError):
            scene_stack.coerce_page(12)

    def test_push_pages_prepends_and_offers_continue(self) -> None:
        game = make_game()

        game.push_pages([text("a"), text("b")])
        game.push_pages([text("c")])

        self.assertEqual(["c", "a", "b"], [page.params["parts"][0] for page in game.scene.stack])
        self.assertEqual([scene_stack.CONTINUE_LABEL], option_labels(game))
        self.assertEqual(Instruction(scene_stack.ADVANCE_SCRIPT), game.scene.options[0].action)

    def test_push_pages_keeps_existing_options(self) -> None:
        game = make_game()
        game.add_option("endScene", "Leave")

        game.push_pages([text("later")])

        self.assertEqual(["Leave"], option_labels(game))

    def test_push_of_nothing_changes_nothing(self) -> None:
        game = make_game()

        game.push_pages([])

        self.assertEqual([], game.scene.stack)
        self.assertFalse(game.in_scene)

    def test_advance_skips_invisible_pages(self) -> None:
        game = make_game(scripts={"noop": _noop})
        seen = record_events(game, SceneAdvanced)
        game.scene.stack = [Instruction("noop"), Instruction("noop"), text("shown"), text("later")]

        pages_run = game.advance()

        self.assertEqual(3, pages_run)
        self.assertEqual(["shown"], content_texts(game))
        self.assertEqual([scene_stack.CONTINUE_LABEL], option_labels(game))
        self.assertEqual([SceneAdvanced(pages_run=3, remaining=1)], seen)

    def test_advance_stops_on_options_without_content(self) -> None:
        game = make_game()
        game.scene.stack = [run("option", {"label": "Pick me", "script": "endScene"}), text("after")]

        game.advance()

        self.assertEqual(["Pick me"], option_labels(game))
        self.assertEqual(1, len(game.scene.stack))

    def test_advance_with_push_runs_pushed_pages_first(self) -> None:
        game = make_game()
        game.scene.stack = [text("pending")]

        game.advance([[text("pushed")]])

        self.assertEqual(["pushed"], content_texts(game))
        self.assertEqual([scene_stack.CONTINUE_LABEL], option_labels(game))

    def test_advance_on_empty_stack_leaves_frame_without_options(self) -> None:
        game = make_game()

        self.assertEqual(0, game.advance())
        self.assertFalse(game.in_scene)


class SceneFlowTests(unittest.TestCase):
    def test_scenes_play_page_by_page(self) -> None:
        game = make_game()

        game.execute(scenes([text("one")], [text("two")], [text("three")]))
        self.assertEqual(["one"], content_texts(game))

        choose(game, "Continue")
        self.assertEqual(["two"], content_texts(game))

        choose(game, "Continue")
        self.assertEqual(["three"], content_texts(game))
        self.assertEqual([], option_labels(game))
        self.assertEqual([], game.scene.stack)

    def test_other_action_abandons_pending_pages(self) -> None:
        game = make_game()
        game.execute(scenes([text("one"), run("option", {"label": "Walk away", "script": "endScene"})], [text("two")]))

        choose(game, "Walk away")

        self.assertEqual([], game.scene.stack)
        self.assertEqual([], content_texts(game))

    def test_branch_plays_then_resumes_pending_pages(self) -> None:
        game = make_game()
        game.execute(
            scenes(
                [text("Rob looks up."), branch("Ask about work", text("Docks need hands.")), branch("Nod", text("He nods."))],
                [text("The whistle blows.")],
            )
        )
        self.assertEqual(["Ask about work", "Nod"], option_labels(game))

        choose(game, "Ask about work")
        self.assertEqual(["Docks need hands."], content_texts(game))

        choose(game, "Continue")
        self.assertEqual(["The whistle blows."], content_texts(game))

    def test_branch_with_several_pages(self) -> None:
        game = make_game()
        game.execute(branch("Story", [[text("first")], [text("second")]]))

        choose(game, "Story")
        self.assertEqual(["first"], content_texts(game))
        choose(game, "Continue")
        self.assertEqual(["second"], content_texts(game))

    def test_choice_appends_epilogue_to_each_branch(self) -> None:
        game = make_game()
        game.execute(choice(branch("Left", text("You go left.")), branch("Right", text("You go right.")), text("The road ends.")))

        choose(game, "Right")

        self.assertEqual(["You go right.", "The road ends."], content_texts(game))

    def test_menu_loops_until_exit(self) -> None:
        items = {"crown": ItemDefinition(name="Crown")}
        game = make_game(items=items)
        game.execute(
            menu(
                menu_item("Chat", text("You chat.")),
                menu_item("Pay", text("You pay."), condition=has_item("crown")),
                menu_item("Leave", text("Bye."), exit=True),
            )
        )
        self.assertEqual(["Chat", "Leave"], option_labels(game))

        choose(game, "Chat")
        self.assertEqual(["You chat."], content_texts(game))
        choose(game, "Continue")
        self.assertEqual(["Chat", "Leave"], option_labels(game))

        game.player.add_item("crown")
        choose(game, "Leave")
        self.assertEqual(["Bye."], content_texts(game))
        self.assertEqual([], option_labels(game))
        self.assertEqual([], game.scene.stack)

    def test_menu_gating_is_evaluated_on_every_display(self) -> None:
        items = {"crown": ItemDefinition(name="Crown")}
        game = make_game(items=items)
        game.execute(menu(menu_item("Chat", text("You chat.")), menu_item("Pay", text("You pay."), condition=has_item("crown"))))

        game.player.add_item("crown")
        choose(game, "Chat")
        choose(game, "Continue")

        self.assertEqual(["Chat", "Pay"], option_labels(game))

    def test_push_pages_builder_queues_pages(self) -> None:
        game = make_game()

        game.execute(push_pages([text("later")]))

        self.assertEqual([], content_texts(game))
        self.assertEqual([scene_stack.CONTINUE_LABEL], option_labels(game))

    def test_after_action_drops_npc_once_the_scene_ends(self) -> None:
        game = make_game()
        game.scene.npc = "rob"
        game.execute(scenes([text("one")], [text("two")]))

        choose(game, "Continue")

        self.assertIsNone(game.scene.npc)

    def test_gated_branch_is_hidden_while_condition_fails(self) -> None:
        items = {"key": ItemDefinition(name="Key")}
        game = make_game(items=items)

        game.execute(when(has_item("key"), branch("Unlock", text("Click."))))

        self.assertEqual([], option_labels(game))


if __name__ == "__main__":
    unittest.main()
