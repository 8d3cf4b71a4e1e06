"""
Tests for upkeep.py functionality
"""

import unittest
from models import FactionState, Owner, TileType
from upkeep import (
    apply_faction_upkeep,
    calculate_income,
    calculate_upkeep,
    check_victory,
    get_upkeep_summary,
    perform_upkeep,
    reinforce_fortresses
)
from tests.builders import make_config, make_state


class TestUpkeep(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures."""
        self.config = make_config()
        # Player: capital (5) + mine (4) + fortress (0). AI: capital (5) + village (2)
        self.game_state = make_state(
            types={1: TileType.MINE, 5: TileType.FORTRESS},
            owners={1: Owner.PLAYER, 5: Owner.PLAYER, 23: Owner.AI}
        )

    def test_calculate_income(self):
        """Income is the sum of owned tiles' yields."""
        self.assertEqual(calculate_income(self.game_state, Owner.PLAYER), 9)
        self.assertEqual(calculate_income(self.game_state, Owner.AI), 7)
        self.assertEqual(calculate_income(self.game_state, Owner.NONE),
                         sum(tile.resource_value for tile in self.game_state.tiles_owned_by(Owner.NONE)))

    def test_calculate_upkeep_rounds_down(self):
        self.assertEqual(calculate_upkeep(10), 5)
        self.assertEqual(calculate_upkeep(13), 6)
        self.assertEqual(calculate_upkeep(1), 0)
        self.assertEqual(calculate_upkeep(0), 0)

    def test_reinforce_fortresses(self):
        reinforced = reinforce_fortresses(self.game_state, Owner.PLAYER)
        self.assertEqual(reinforced, [5])
        self.assertEqual(self.game_state.get_tile(5).defense, 4)

    def test_unowned_fortress_not_reinforced(self):
        state = make_state(types={7: TileType.FORTRESS})
        reinforce_fortresses(state, Owner.PLAYER)
        reinforce_fortresses(state, Owner.AI)
        self.assertEqual(state.get_tile(7).defense, 3)

    def test_faction_upkeep_with_surplus(self):
        report = apply_faction_upkeep(self.game_state, Owner.PLAYER, self.config)
        # 25 + 9 income - 5 upkeep
        self.assertEqual(self.game_state.player.gold, 29)
        self.assertEqual(self.game_state.player.army, 10)
        self.assertEqual(report.income, 9)
        self.assertEqual(report.upkeep, 5)
        self.assertEqual(report.deserters, 0)
        self.assertFalse(report.bankrupt)

    def test_fortress_only_faction_goes_bankrupt(self):
        """One fortress, army 20, gold 5: upkeep 10 costs 5 deserters."""
        state = make_state(
            ai=FactionState(gold=5, army=20, tiles_controlled=1),
            types={12: TileType.FORTRESS},
            owners={12: Owner.AI, 24: Owner.NONE}
        )
        report = apply_faction_upkeep(state, Owner.AI, self.config)

        self.assertEqual(report.income, 0)
        self.assertEqual(report.upkeep, 10)
        self.assertEqual(state.ai.gold, 0)
        self.assertEqual(state.ai.army, 15)
        self.assertEqual(report.deserters, 5)
        self.assertTrue(report.bankrupt)
        self.assertEqual(state.get_tile(12).defense, 4)

    def test_desertion_floors_army_at_zero(self):
        state = make_state(
            ai=FactionState(gold=0, army=4, tiles_controlled=1),
            owners={24: Owner.NONE, 12: Owner.AI},
            types={12: TileType.FORTRESS}
        )
        report = apply_faction_upkeep(state, Owner.AI, self.config)
        self.assertEqual(state.ai.gold, 0)
        self.assertEqual(state.ai.army, 2)
        self.assertEqual(report.deserters, 2)

    def test_perform_upkeep_advances_round(self):
        self.game_state.turn = Owner.AI
        reports = perform_upkeep(self.game_state, self.config)

        self.assertEqual(self.game_state.turn_count, 2)
        self.assertEqual(self.game_state.turn, Owner.PLAYER)
        self.assertEqual(set(reports), {'PLAYER', 'AI'})
        self.assertEqual(self.game_state.ai.gold, 27)
        self.assertEqual(self.game_state.log[-1]['event'],
                         "Income: Player +9, upkeep -5 | AI +7, upkeep -5")
        self.assertEqual(self.game_state.log[-1]['turn'], 2)

    def test_perform_upkeep_logs_bankruptcy(self):
        state = make_state(
            player=FactionState(gold=0, army=30, tiles_controlled=1),
            turn=Owner.AI
        )
        perform_upkeep(state, self.config)
        # 0 + 5 income - 15 upkeep
        self.assertEqual(state.player.army, 20)
        self.assertEqual(state.log[-1]['event'], "BANKRUPTCY: 10 Player soldiers desert!")
        self.assertEqual(state.log[-1]['deficit'], 10)
        self.assertEqual(state.log[-1]['deserters'], 10)

    def test_bankruptcy_reports_deficit_not_deserters(self):
        """Army 4 at three gold a head owes 12; only 4 can desert, the log keeps the 12."""
        state = make_state(
            ai=FactionState(gold=0, army=4, tiles_controlled=1),
            owners={24: Owner.NONE, 12: Owner.AI},
            types={12: TileType.FORTRESS},
            turn=Owner.AI
        )
        reports = perform_upkeep(state, make_config(upkeep_rate=3.0))
        self.assertFalse(reports['PLAYER'].bankrupt)
        self.assertEqual(reports['AI'].deficit, 12)
        self.assertEqual(state.ai.army, 0)
        bankruptcy = state.log[-1]
        self.assertEqual(bankruptcy['actor'], 'AI')
        self.assertEqual(bankruptcy['deficit'], reports['AI'].deficit)
        self.assertEqual(bankruptcy['deserters'], 4)
        self.assertEqual(bankruptcy['event'], "BANKRUPTCY: 12 AI soldiers desert!")

    def test_get_upkeep_summary_does_not_mutate(self):
        before = self.game_state.snapshot()
        summary = get_upkeep_summary(self.game_state, self.config)
        self.assertEqual(self.game_state, before)
        self.assertEqual(summary['factions']['PLAYER'],
                         {'gold': 25, 'army': 10, 'income': 9, 'upkeep': 5, 'net': 4})


class TestVictory(unittest.TestCase):

    def test_no_winner_at_start(self):
        self.assertIsNone(check_victory(make_state()))

    def test_player_annihilated(self):
        state = make_state(owners={0: Owner.NONE})
        self.assertEqual(check_victory(state), Owner.AI)

    def test_ai_annihilated(self):
        state = make_state(owners={24: Owner.NONE})
        self.assertEqual(check_victory(state), Owner.PLAYER)

    def test_domination_needs_more_than_half(self):
        state = make_state(owners={tile_id: Owner.AI for tile_id in range(12, 24)})
        self.assertEqual(state.ai.tiles_controlled, 13)
        self.assertEqual(check_victory(state), Owner.AI)

        state = make_state(owners={tile_id: Owner.AI for tile_id in range(13, 24)})
        self.assertIsNone(check_victory(state))


if __name__ == '__main__':
    unittest.main()
