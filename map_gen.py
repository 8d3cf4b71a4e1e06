"""
Board generation module for Strategia: 25 Kingdoms
Builds the square grid of territories with randomized terrain and the two
fixed capitals in opposite corners.
"""

import numpy as np
from typing import Dict, List, Optional, Tuple
from models import Owner, Tile, TileType


# Terrain stats: (resource_value, defense)
TERRAIN_STATS = {
    TileType.MINE: (4, 0),
    TileType.FORTRESS: (0, 3),
    TileType.VILLAGE: (2, 1),
}


def tile_position(tile_id: int, grid_size: int) -> Tuple[int, int]:
    """Return (row, col) for a tile id on a grid of the given width."""
    return tile_id // grid_size, tile_id % grid_size


def get_tile_neighbors(tile_id: int, grid_size: int) -> List[int]:
    """
    Get the orthogonally adjacent tile ids.

    Args:
        tile_id: Tile to look around
        grid_size: Width of the square grid

    Returns:
        List of neighbouring tile ids inside the grid
    """
    row, col = tile_position(tile_id, grid_size)
    neighbors = []
    for dr, dc in [(-1, 0), (1, 0), (0, -1), (0, 1)]:
        r, c = row + dr, col + dc
        if 0 <= r < grid_size and 0 <= c < grid_size:
            neighbors.append(r * grid_size + c)
    return neighbors


def validate_board_config(grid_size: int, total_tiles: int) -> None:
    """Raise ValueError unless the grid is square and has two distinct corners."""
    if grid_size < 2:
        raise ValueError(f"Grid size must be at least 2, got {grid_size}")
    if total_tiles != grid_size * grid_size:
        raise ValueError(
            f"Total tiles ({total_tiles}) must equal grid size squared ({grid_size * grid_size})")


def draw_terrain(draw: float, mine_probability: float = 0.3,
                 fortress_probability: float = 0.2) -> TileType:
    """Map a uniform draw in [0, 1) to a terrain type."""
    if draw < mine_probability:
        return TileType.MINE
    if draw < mine_probability + fortress_probability:
        return TileType.FORTRESS
    return TileType.VILLAGE


def generate_board(seed: Optional[int] = None, grid_size: int = 5,
                   total_tiles: Optional[int] = None,
                   config: Optional[Dict] = None) -> List[Tile]:
    """
    Generate the tiles of a new board.

    Every tile gets an independent terrain draw; tile 0 and the last tile are
    then overridden to capitals owned by the player and the AI.

    Args:
        seed: Random seed (None draws a fresh board)
        grid_size: Width of the square grid
        total_tiles: Tile count, defaults to grid_size squared
        config: Optional config dict with terrain probabilities and capital stats

    Returns:
        Tiles ordered by id

    Raises:
        ValueError: If grid_size and total_tiles are inconsistent
    """
    config = config or {}
    if total_tiles is None:
        total_tiles = grid_size * grid_size
    validate_board_config(grid_size, total_tiles)

    mine_probability = config.get('mine_probability', 0.3)
    fortress_probability = config.get('fortress_probability', 0.2)
    capital_defense = config.get('capital_defense', 8)
    capital_yield = config.get('capital_yield', 5)

    rng = np.random.default_rng(seed)
    draws = rng.random(total_tiles)

    tiles = []
    for tile_id in range(total_tiles):
        terrain = draw_terrain(float(draws[tile_id]), mine_probability, fortress_probability)
        resource_value, defense = TERRAIN_STATS[terrain]
        row, col = tile_position(tile_id, grid_size)
        tiles.append(Tile(id=tile_id, row=row, col=col, owner=Owner.NONE,
                          defense=defense, resource_value=resource_value, type=terrain))

    # Capitals: top-left for the player, bottom-right for the AI
    for tile, owner in ((tiles[0], Owner.PLAYER), (tiles[-1], Owner.AI)):
        tile.owner = owner
        tile.type = TileType.CAPITAL
        tile.defense = capital_defense
        tile.resource_value = capital_yield

    return tiles
