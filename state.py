"""
Game state management for Strategia: 25 Kingdoms
Implements the game state, faction bookkeeping and configuration loading.

Economy: gold (starts 25) and army (starts 10) per faction
Board: 5x5 tiles, capitals in opposite corners
"""

from __future__ import annotations
import copy
import uuid
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from map_gen import generate_board
from models import ACTOR_NAMES, FactionState, Owner, Tile

DEFAULT_CONFIG: Dict[str, Any] = {
    'grid_size': 5,
    'initial_gold': 25,
    'initial_army': 10,
    'recruit_cost': 5,
    'recruit_amount': 3,
    'attack_cost': 2,
    'harvest_bonus': 3,
    'plunder_bonus': 3,
    'conquest_defense': 2,
    'upkeep_rate': 0.5,
    'mine_probability': 0.3,
    'fortress_probability': 0.2,
    'capital_defense': 8,
    'capital_yield': 5,
    'turn_duration': 30,
    'think_delay': 1.0,
    'attack_reveal_delay': 0.6,
    'llm_model': 'claude-sonnet-4-20250514',
    'llm_max_tokens': 512,
}

OPENING_LINE = "The world is vast. The war for the 25 Kingdoms begins."


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load config.json, falling back to defaults for missing keys.

    Args:
        path: Optional explicit path (defaults to config.json beside this module)

    Returns:
        Config dict with every known key present
    """
    config_path = path or os.path.join(os.path.dirname(__file__), 'config.json')
    config = dict(DEFAULT_CONFIG)
    try:
        with open(config_path, 'r') as f:
            config.update(json.load(f))
    except (FileNotFoundError, json.JSONDecodeError):
        # Use defaults if config file is missing or invalid
        pass
    return config


@dataclass
class GameState:
    """
    Complete game state for one match.

    A state is never mutated once handed out: resolution works on a
    snapshot() and returns it as the next state.
    """
    game_id: str
    tiles: List[Tile] = field(default_factory=list)
    player: FactionState = field(default_factory=FactionState)
    ai: FactionState = field(default_factory=FactionState)
    turn: Owner = Owner.PLAYER  # Whose turn it is
    turn_count: int = 1
    log: List[Dict[str, Any]] = field(default_factory=list)
    game_over: bool = False
    winner: Optional[Owner] = None
    grid_size: int = 5

    @property
    def total_tiles(self) -> int:
        return len(self.tiles)

    def get_faction(self, owner: Owner) -> FactionState:
        """Get the faction state for PLAYER or AI."""
        if owner == Owner.PLAYER:
            return self.player
        if owner == Owner.AI:
            return self.ai
        raise ValueError("Unclaimed tiles have no faction state")

    def get_tile(self, tile_id: Any) -> Optional[Tile]:
        """Get a tile by id, or None if the id is not on the board."""
        for tile in self.tiles:
            if tile.id == tile_id:
                return tile
        return None

    def tiles_owned_by(self, owner: Owner) -> List[Tile]:
        return [tile for tile in self.tiles if tile.owner == owner]

    def snapshot(self) -> GameState:
        """Return a fully independent copy of this state."""
        return GameState(
            game_id=self.game_id,
            tiles=[tile.copy() for tile in self.tiles],
            player=self.player.copy(),
            ai=self.ai.copy(),
            turn=self.turn,
            turn_count=self.turn_count,
            log=copy.deepcopy(self.log),
            game_over=self.game_over,
            winner=self.winner,
            grid_size=self.grid_size,
        )


def log_event(game_state: GameState, event: str, actor: Optional[Owner] = None,
              turn: Optional[int] = None, **kwargs) -> None:
    """
    Add an event to the game state log.

    Args:
        game_state: State being built by the current resolution step
        event: Human-readable description of the event
        actor: Faction the event concerns, if any
        turn: Turn number to stamp, defaults to the current turn_count
        **kwargs: Additional event data to include
    """
    log_entry = {
        'turn': game_state.turn_count if turn is None else turn,
        'actor': actor.value if actor else None,
        'event': event,
        **kwargs
    }
    game_state.log.append(log_entry)


def format_log_entry(entry: Dict[str, Any]) -> str:
    """Render a log entry as a battle-log line, e.g. 'T3: Player harvests (+3 gold).'"""
    return f"T{entry['turn']}: {entry['event']}"


def create_faction(config: Dict[str, Any]) -> FactionState:
    """Create a faction with the configured starting gold and army and its capital."""
    return FactionState(
        gold=config['initial_gold'],
        army=config['initial_army'],
        tiles_controlled=1
    )


def initialize_game(seed: Optional[int] = None, config: Optional[Dict[str, Any]] = None) -> GameState:
    """
    Initialize a new game state with two factions and a generated board.

    The player holds the top-left capital, the AI the bottom-right one, and
    the player moves first.

    Args:
        seed: Random seed for board generation (None for a fresh board)
        config: Optional config dict (defaults to load_config())

    Returns:
        New GameState instance ready for gameplay
    """
    config = config or load_config()
    grid_size = config['grid_size']

    tiles = generate_board(seed, grid_size=grid_size, config=config)

    game_state = GameState(
        game_id=str(uuid.uuid4()),
        tiles=tiles,
        player=create_faction(config),
        ai=create_faction(config),
        turn=Owner.PLAYER,
        turn_count=1,
        grid_size=grid_size
    )
    log_event(game_state, OPENING_LINE)

    return game_state


def get_game_summary(game_state: GameState) -> Dict[str, Any]:
    """
    Get a JSON-ready summary of the game state for API responses.

    Args:
        game_state: Current game state

    Returns:
        Dictionary with board, factions, turn and outcome
    """
    return {
        'game_id': game_state.game_id,
        'turn': game_state.turn.value,
        'turn_count': game_state.turn_count,
        'game_over': game_state.game_over,
        'winner': game_state.winner.value if game_state.winner else None,
        'factions': {
            owner.value: {
                'name': ACTOR_NAMES[owner],
                'gold': faction.gold,
                'army': faction.army,
                'tiles_controlled': faction.tiles_controlled
            }
            for owner, faction in ((Owner.PLAYER, game_state.player), (Owner.AI, game_state.ai))
        },
        'tiles': [
            {
                'id': tile.id,
                'row': tile.row,
                'col': tile.col,
                'owner': tile.owner.value,
                'defense': tile.defense,
                'resource_value': tile.resource_value,
                'type': tile.type.value
            }
            for tile in game_state.tiles
        ],
        'grid_size': game_state.grid_size
    }
