import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from tale_fixtures import content_texts, make_game, record_events

from tale.application.services import clock
from tale.domain.errors import ScriptValidationError
from tale.domain.events import HourChanged, TimeAdvanced, WaitInterrupted
from tale.domain.models.card import Card, CardDefinition, CardType
from tale.domain.models.game import START_DATE, START_TIME
from tale.domain.models.location import LocationDefinition
from tale.domain.models.npc import NPCDefinition


class ClockReadTests(unittest.TestCase):
    def test_start_time_is_a_sunday_noon(self) -> None:
        self.assertEqual(12.0, clock.hour_of_day(START_TIME))
        self.assertEqual(0, clock.day_of_week(START_TIME))
        self.assertEqual(START_DATE, clock.to_datetime(START_TIME))

    def test_day_of_week_rolls_forward(self) -> None:
        self.assertEqual(1, clock.day_of_week(START_TIME + clock.SECONDS_PER_DAY))
        self.assertEqual(6, clock.day_of_week(START_TIME - clock.SECONDS_PER_DAY))
        self.assertEqual(4, clock.day_of_week(0))

    def test_intervals_crossed_counts_boundaries(self) -> None:
        self.assertEqual(1, clock.intervals_crossed(0, 900, 900))
        self.assertEqual(1, clock.intervals_crossed(899, 900, 900))
        self.assertEqual(0, clock.intervals_crossed(0, 899, 900))
        self.assertEqual(4, clock.intervals_crossed(START_TIME, START_TIME + 3600, 900))

    def test_game_exposes_clock_reads(self) -> None:
        game = make_game()

        self.assertEqual(START_TIME, game.now())
        self.assertEqual(12.0, game.hour_of_day)
        self.assertEqual(0, game.day_of_week)
        self.assertEqual(1902, game.date.year)

    def test_clock_never_runs_backwards(self) -> None:
        game = make_game()

        with self.assertRaises(ScriptValidationError):
            game.time = START_TIME - 1


class AdvanceClockTests(unittest.TestCase):
    def _recording_game(self, **kwargs):
        calls = []

        def _depletion(game, params):
            calls.append("deplete")

        def _time_effects(game, params):
            calls.append(("effects", params["seconds"]))

        scripts = {"passiveDepletion": _depletion, "timeEffects": _time_effects}
        scripts.update(kwargs.pop("scripts", {}))
        game = make_game(core=False, scripts=scripts, **kwargs)
        return game, calls

    def test_rejects_negative_and_non_numeric_durations(self) -> None:
        game, _ = self._recording_game()

        for bad in (-1, "10", None, True):
            with self.assertRaises(ScriptValidationError):
                game.advance_clock(bad)
        self.assertEqual(START_TIME, game.time)

    def test_zero_is_a_no_op(self) -> None:
        game, calls = self._recording_game()
        seen = record_events(game, TimeAdvanced)

        game.advance_clock(0)

        self.assertEqual([], calls)
        self.assertEqual([], seen)

    def test_depletion_runs_per_quarter_hour_then_time_effects_once(self) -> None:
        game, calls = self._recording_game()

        game.advance_clock(3600)

        self.assertEqual(["deplete"] * 4 + [("effects", 3600)], calls)
        self.assertEqual(START_TIME + 3600, game.time)

    def test_sleeping_player_skips_depletion(self) -> None:
        game, calls = self._recording_game()
        game.player.sleeping = True

        game.advance_clock(3600)

        self.assertEqual([("effects", 3600)], calls)

    def test_short_advance_inside_a_quarter_does_not_deplete(self) -> None:
        game, calls = self._recording_game()

        game.advance_clock(600)

        self.assertEqual([("effects", 600)], calls)

    def test_cards_tick_once_and_only_if_active_before_time_effects(self) -> None:
        ticks = []

        def _tick(game, card, seconds):
            ticks.append((card.id, seconds))

        cards = {
            "tired": CardDefinition(name="Tired", on_tick=_tick),
            "late": CardDefinition(name="Late", on_tick=_tick),
        }

        def _add_late(game, params):
            game.player.cards.append(Card(id="late", type=CardType.EFFECT))

        game = make_game(core=False, cards=cards, scripts={"timeEffects": _add_late})
        game.player.cards.append(Card(id="tired", type=CardType.EFFECT))

        game.advance_clock(120)
        self.assertEqual([("tired", 120)], ticks)

        game.advance_clock(60)
        self.assertEqual([("tired", 120), ("tired", 60), ("late", 60)], ticks)

    def test_cards_dropped_by_time_effects_do_not_tick(self) -> None:
        ticks = []
        cards = {"tired": CardDefinition(name="Tired", on_tick=lambda game, card, seconds: ticks.append(card.id))}

        def _expire(game, params):
            game.player.remove_card("tired", CardType.EFFECT)

        game = make_game(core=False, cards=cards, scripts={"timeEffects": _expire})
        game.player.cards.append(Card(id="tired", type=CardType.EFFECT))

        game.advance_clock(300)

        self.assertEqual([], game.player.cards)
        self.assertEqual([], ticks)

    def test_fractional_seconds_are_rejected(self) -> None:
        game, calls = self._recording_game()

        with self.assertRaises(ScriptValidationError):
            game.advance_clock(0.5)
        game.advance_clock(120.0)

        self.assertEqual([("effects", 120)], calls)
        self.assertEqual(START_TIME + 120, game.time)

    def test_hook_order_is_depletion_effects_ticks_then_npcs(self) -> None:
        order = []
        cards = {"watch": CardDefinition(name="Watch", on_tick=lambda game, card, seconds: order.append("tick"))}
        npcs = {"rob": NPCDefinition(name="Rob", on_move=lambda game, params: order.append(("move", params["npc"])))}
        scripts = {
            "passiveDepletion": lambda game, params: order.append("deplete"),
            "timeEffects": lambda game, params: order.append("effects"),
        }
        game = make_game(core=False, cards=cards, npcs=npcs, scripts=scripts)
        game.get_npc("rob")
        order.clear()
        game.player.cards.append(Card(id="watch", type=CardType.EFFECT))

        game.advance_clock(3600)

        self.assertEqual(["deplete"] * 4 + ["effects", "tick", ("move", "rob")], order)

    def test_npcs_move_once_per_advance_when_an_hour_is_crossed(self) -> None:
        moves = []
        npcs = {"rob": NPCDefinition(name="Rob", on_move=lambda game, params: moves.append(game.hour_of_day))}
        game = make_game(core=False, npcs=npcs)
        game.get_npc("rob")
        moves.clear()
        seen = record_events(game, TimeAdvanced, HourChanged)

        game.advance_clock(1800)
        game.advance_clock(3 * 3600)

        self.assertEqual([15.5], moves)
        self.assertEqual(
            [
                TimeAdvanced(seconds=1800, time_after=START_TIME + 1800),
                TimeAdvanced(seconds=10800, time_after=START_TIME + 12600),
                HourChanged(hours_crossed=3, hour_after=15),
            ],
            seen,
        )

    def test_scheduled_npcs_follow_the_clock(self) -> None:
        npcs = {"mabel": NPCDefinition(name="Mabel", schedule=[[10, 14, "tavern"], [14, 20, "market"]])}
        locations = {"tavern": LocationDefinition(name="Tavern"), "market": LocationDefinition(name="Market")}
        game = make_game(npcs=npcs, locations=locations)

        self.assertEqual("tavern", game.get_npc("mabel").location)
        game.advance_clock(2 * 3600)
        self.assertEqual("market", game.get_npc("mabel").location)

    def test_presence_is_recomputed_after_movement(self) -> None:
        npcs = {"mabel": NPCDefinition(name="Mabel", schedule=[[10, 13, "station"]])}
        game = make_game(npcs=npcs)
        game.get_npc("mabel")
        game.update_npcs_present()
        self.assertEqual(["mabel"], game.npcs_present)

        game.advance_clock(3600)

        self.assertEqual([], game.npcs_present)

    def test_default_passive_depletion_drains_energy(self) -> None:
        game = make_game()
        game.player.basestats["Energy"] = 2

        game.advance_clock(3 * 900)

        self.assertEqual(0, game.player.basestats["Energy"])

    def test_time_lapse_script_variants(self) -> None:
        game = make_game()

        game.run("timeLapse", {"minutes": 5, "seconds": 30})
        self.assertEqual(START_TIME + 330, game.time)

        game.run("timeLapse", {"untilTime": 14.5})
        self.assertEqual(14.5, game.hour_of_day)

        game.run("timeLapse", {"untilTime": 9})
        self.assertEqual(14.5, game.hour_of_day)

        with self.assertRaises(ScriptValidationError):
            game.run("timeLapse", {"minutes": -5})

    def test_calc_ticks_counts_boundaries_of_the_last_advance(self) -> None:
        game = make_game()
        game.advance_clock(5400)

        self.assertEqual(1, game.calc_ticks(5400, 3600))
        self.assertEqual(6, game.calc_ticks(5400, 900))


class WaitTests(unittest.TestCase):
    def _game_with_rob(self, rob_wait=None, location_wait=None):
        npcs = {"rob": NPCDefinition(name="Rob", on_wait=rob_wait)}
        locations = {"station": LocationDefinition(name="Station", on_wait=location_wait)}
        game = make_game(npcs=npcs, locations=locations)
        game.get_npc("rob").location = "station"
        game.update_npcs_present()
        return game

    def test_wait_runs_in_ten_minute_chunks(self) -> None:
        game = self._game_with_rob()
        seen = record_events(game, TimeAdvanced)

        finished = game.wait(25, ["text", {"parts": ["Done waiting."]}])

        self.assertTrue(finished)
        self.assertEqual([600, 600, 300], [event.seconds for event in seen])
        self.assertEqual(["Done waiting."], content_texts(game))

    def test_npc_hook_interrupts_and_skips_then(self) -> None:
        calls = []

        def _rob_wait(game, params):
            calls.append(params)
            game.add_option("endScene", "Talk")

        game = self._game_with_rob(rob_wait=_rob_wait)
        interrupted = record_events(game, WaitInterrupted)

        finished = game.wait(60, ["text", {"parts": ["Never shown."]}])

        self.assertFalse(finished)
        self.assertEqual(START_TIME + 600, game.time)
        self.assertEqual([{"npc": "rob", "minutes": 10}], calls)
        self.assertEqual([WaitInterrupted(minutes_waited=10, minutes_requested=60, source="rob")], interrupted)
        self.assertEqual([], content_texts(game))

    def test_npc_hooks_run_before_the_location_hook(self) -> None:
        order = []

        def _location_wait(game, params):
            order.append(("location", params["minutes"]))
            if len(order) > 2:
                game.add_option("endScene", "Look")

        game = self._game_with_rob(rob_wait=lambda game, params: order.append(("rob", params["minutes"])), location_wait=_location_wait)
        interrupted = record_events(game, WaitInterrupted)

        self.assertFalse(game.wait(30))

        self.assertEqual([("rob", 10), ("location", 10), ("rob", 10), ("location", 10)], order)
        self.assertEqual("station", interrupted[0].source)
        self.assertEqual(START_TIME + 1200, game.time)

    def test_zero_minute_wait_runs_no_chunks_and_goes_straight_to_then(self) -> None:
        calls = []
        game = self._game_with_rob(
            rob_wait=lambda game, params: calls.append("rob"),
            location_wait=lambda game, params: calls.append("loc"),
        )
        seen = record_events(game, TimeAdvanced)

        self.assertTrue(game.wait(0, ["text", {"parts": ["Straight on."]}]))

        self.assertEqual([], calls)
        self.assertEqual([], seen)
        self.assertEqual(START_TIME, game.time)
        self.assertEqual(["Straight on."], content_texts(game))

    def test_npc_interrupt_on_second_chunk_stops_before_location_hook(self) -> None:
        calls = []

        def _rob_wait(game, params):
            calls.append(("rob", params["minutes"]))
            if len(calls) > 2:
                game.add_option("endScene", "Talk")

        game = self._game_with_rob(
            rob_wait=_rob_wait,
            location_wait=lambda game, params: calls.append(("loc", params["minutes"])),
        )

        self.assertFalse(game.wait(30, ["text", {"parts": ["Never shown."]}]))

        self.assertEqual([("rob", 10), ("loc", 10), ("rob", 10)], calls)
        self.assertEqual(START_TIME + 1200, game.time)
        self.assertEqual([], content_texts(game))

    def test_wait_rejects_negative_minutes(self) -> None:
        with self.assertRaises(ScriptValidationError):
            make_game().wait(-5)

    def test_wait_script_with_text_and_dict_then(self) -> None:
        game = make_game()

        finished = game.run("wait", {"minutes": 10, "text": "You wait.", "then": {"script": "text", "params": {"parts": ["Ding."]}}})

        self.assertTrue(finished)
        self.assertEqual(["You wait.", "Ding."], content_texts(game))
        self.assertEqual(START_TIME + 600, game.time)

    def test_wait_defaults_to_fifteen_minutes(self) -> None:
        game = make_game()

        game.run("wait", {})

        self.assertEqual(START_TIME + 900, game.time)

    def test_record_time_and_time_elapsed(self) -> None:
        game = make_game()

        self.assertTrue(game.run("timeElapsed", {"timer": "lastMeal", "minutes": 60}))
        game.run("recordTime", {"timer": "lastMeal"})
        game.advance_clock(1800)
        self.assertFalse(game.run("timeElapsed", {"timer": "lastMeal", "minutes": 60}))
        game.advance_clock(1800)
        self.assertTrue(game.run("timeElapsed", {"timer": "lastMeal", "minutes": 60}))


if __name__ == "__main__":
    unittest.main()
