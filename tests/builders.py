"""Hand-built boards and configs for rules tests."""

from models import FactionState, Owner, Tile, TileType
from state import DEFAULT_CONFIG, GameState

# Default rules without cosmetic delays or countdown
FAST_CONFIG = dict(DEFAULT_CONFIG, think_delay=0, attack_reveal_delay=0, turn_duration=0)


def make_config(**overrides):
    """FAST_CONFIG plus overrides."""
    return dict(FAST_CONFIG, **overrides)


def make_tiles(types=None, owners=None, defenses=None, grid_size=5):
    """Build a board of villages with capitals in the corners.

    types, owners and defenses map tile id to an override.
    """
    types = types or {}
    owners = owners or {}
    defenses = defenses or {}
    total = grid_size * grid_size
    tiles = []
    for tile_id in range(total):
        tile = Tile(id=tile_id, row=tile_id // grid_size, col=tile_id % grid_size,
                    owner=Owner.NONE, defense=1, resource_value=2, type=TileType.VILLAGE)
        if tile_id == 0:
            tile.owner, tile.type, tile.defense, tile.resource_value = Owner.PLAYER, TileType.CAPITAL, 8, 5
        elif tile_id == total - 1:
            tile.owner, tile.type, tile.defense, tile.resource_value = Owner.AI, TileType.CAPITAL, 8, 5
        if tile_id in types:
            tile.type = types[tile_id]
            if tile.type == TileType.MINE:
                tile.resource_value, tile.defense = 4, 0
            elif tile.type == TileType.FORTRESS:
                tile.resource_value, tile.defense = 0, 3
        if tile_id in owners:
            tile.owner = owners[tile_id]
        if tile_id in defenses:
            tile.defense = defenses[tile_id]
        tiles.append(tile)
    return tiles


def make_state(player=None, ai=None, turn=Owner.PLAYER, turn_count=1, **tile_kwargs):
    """Create a game state with a hand-built board for rules testing.

    tiles_controlled is derived from the board unless the faction is given.
    """
    tiles = make_tiles(**tile_kwargs)
    if player is None:
        player = FactionState(25, 10, sum(1 for t in tiles if t.owner == Owner.PLAYER))
    if ai is None:
        ai = FactionState(25, 10, sum(1 for t in tiles if t.owner == Owner.AI))
    return GameState(
        game_id="test",
        tiles=tiles,
        player=player,
        ai=ai,
        turn=turn,
        turn_count=turn_count,
        log=[],
    )


def create_api_game(client, seed=42):
    """Create a new game via API, return game_id."""
    resp = client.post("/api/game/new", json={"seed": seed})
    assert resp.status_code == 200
    return resp.json["game_id"]
