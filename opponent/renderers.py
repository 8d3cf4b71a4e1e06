"""
State renderers for the LLM opponent and the terminal.

Deterministic functions that turn a GameState into text: the rules
reference and board listing embedded in the opponent's prompt, and the
ASCII grid used by the CLI.
"""

from __future__ import annotations

from models import ACTOR_NAMES, Owner, TileType
from state import GameState

TERRAIN_CHAR = {
    TileType.CAPITAL: "C",
    TileType.MINE: "M",
    TileType.FORTRESS: "F",
    TileType.VILLAGE: "v",
}

OWNER_MARK = {
    Owner.NONE: " ",
    Owner.PLAYER: "+",
    Owner.AI: "x",
}


def render_rules_reference(config: dict) -> str:
    """Concise rules summary parameterized by config."""
    grid_size = config.get("grid_size", 5)
    total_tiles = grid_size * grid_size
    return (
        f"RULES:\n"
        f"- {grid_size}x{grid_size} grid of {total_tiles} tiles. Any tile can be attacked.\n"
        f"- Terrain:\n"
        f"  * MINE (gold++, defense-): top economic target, conquering one plunders "
        f"+{config.get('plunder_bonus', 3)} gold.\n"
        f"  * FORTRESS (defense++, gold--): hard to take, gains +1 defense each round for its owner.\n"
        f"  * VILLAGE: balanced.\n"
        f"  * CAPITAL: lose it and suffer the humiliation.\n"
        f"- Actions (one per turn):\n"
        f"  * RECRUIT: pay {config.get('recruit_cost', 5)} gold for +{config.get('recruit_amount', 3)} army.\n"
        f"  * HARVEST: +{config.get('harvest_bonus', 3)} gold.\n"
        f"  * ATTACK a tile: needs army >= tile defense + {config.get('attack_cost', 2)}, all of which is spent. "
        f"A failed attack costs 1 soldier and 1 defense of the tile.\n"
        f"  * PASS.\n"
        f"- Each round: gold from every owned tile, minus upkeep of "
        f"{config.get('upkeep_rate', 0.5)} gold per soldier. Soldiers desert when the treasury runs dry.\n"
        f"- Victory: control more than {total_tiles // 2} tiles or wipe the enemy off the map."
    )


def render_board(game_state: GameState) -> str:
    """One line per tile, in id order."""
    lines = []
    for tile in game_state.tiles:
        lines.append(
            f"Tile {tile.id} [{tile.type.value}] (row {tile.row}, col {tile.col}): "
            f"Owner={tile.owner.value}, Def={tile.defense}, Gold+={tile.resource_value}"
        )
    return "\n".join(lines)


def render_factions(game_state: GameState, perspective: Owner = Owner.AI) -> str:
    """Economy of both sides, 'YOU' first from the given perspective."""
    lines = []
    for owner, label in ((perspective, "YOU"), (Owner.PLAYER if perspective == Owner.AI else Owner.AI, "ENEMY")):
        faction = game_state.get_faction(owner)
        lines.append(
            f"- {label} ({ACTOR_NAMES[owner]}): Gold={faction.gold}, Army={faction.army}, "
            f"Tiles={faction.tiles_controlled}"
        )
    return "\n".join(lines)


def render_grid(game_state: GameState) -> str:
    """ASCII grid: terrain letter, owner mark and defense per cell.

    '+' marks player tiles, 'x' AI tiles.
    """
    size = game_state.grid_size
    cell_width = 7
    header = "     " + "".join(f"{col:^{cell_width}}" for col in range(size))
    separator = "    +" + ("-" * (cell_width - 1) + "+") * size
    rows = [header, separator]
    for row in range(size):
        ids = []
        cells = []
        for col in range(size):
            tile = game_state.tiles[row * size + col]
            ids.append(f"#{tile.id:<{cell_width - 2}}")
            cells.append(f"{OWNER_MARK[tile.owner]}{TERRAIN_CHAR[tile.type]} d{tile.defense:<2}")
        rows.append("    |" + "|".join(ids) + "|")
        rows.append(f"  {row} |" + "|".join(cells) + "|")
        rows.append(separator)
    return "\n".join(rows)
