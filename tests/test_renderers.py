"""Tests for the prompt and terminal renderers."""

from models import FactionState, Owner, TileType
from opponent.renderers import render_board, render_factions, render_grid, render_rules_reference
from tests.builders import make_config, make_state


class TestRenderRules:
    def test_parameterized_by_config(self):
        text = render_rules_reference(make_config(recruit_cost=7, recruit_amount=4))
        assert "pay 7 gold for +4 army" in text
        assert "5x5 grid of 25 tiles" in text
        assert "more than 12 tiles" in text


class TestRenderBoard:
    def test_one_line_per_tile(self):
        state = make_state(types={6: TileType.MINE}, owners={6: Owner.PLAYER})
        lines = render_board(state).splitlines()

        assert len(lines) == 25
        assert lines[0] == "Tile 0 [CAPITAL] (row 0, col 0): Owner=PLAYER, Def=8, Gold+=5"
        assert lines[6] == "Tile 6 [MINE] (row 1, col 1): Owner=PLAYER, Def=0, Gold+=4"
        assert lines[7] == "Tile 7 [VILLAGE] (row 1, col 2): Owner=NONE, Def=1, Gold+=2"

    def test_factions_from_each_side(self):
        state = make_state(player=FactionState(gold=30, army=4, tiles_controlled=1))
        ai_view = render_factions(state).splitlines()
        assert ai_view[0].startswith("- YOU (AI)")
        assert ai_view[1] == "- ENEMY (Player): Gold=30, Army=4, Tiles=1"

        player_view = render_factions(state, Owner.PLAYER).splitlines()
        assert player_view[0] == "- YOU (Player): Gold=30, Army=4, Tiles=1"


class TestRenderGrid:
    def test_marks_owners_and_terrain(self):
        state = make_state(types={12: TileType.FORTRESS}, owners={12: Owner.AI})
        grid = render_grid(state)

        assert "+C d8" in grid
        assert "xC d8" in grid
        assert "xF d3" in grid
        assert "#24" in grid

    def test_row_count(self):
        lines = render_grid(make_state()).splitlines()
        # Header and separator, then id row, cell row and separator per grid row
        assert len(lines) == 2 + 3 * 5
