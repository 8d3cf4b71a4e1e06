"""
Move-decision interface for the AI side of Strategia.

The session calls decide_move() once per AI turn. Implementations must
always return a structurally valid Order; whether the army can actually
pay for an attack is the resolver's business, not the decider's.

Usage:
    opponent = GreedyOpponent()
    order = opponent.decide_move(game_state)

To plug in a new opponent:
    1. Subclass MoveDecider
    2. Implement decide_move() and the name property
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from map_gen import get_tile_neighbors
from models import ActionType, Owner, TileType
from orders import Order, get_valid_targets
from state import GameState, load_config


class MoveDecider(ABC):
    """Abstract interface for the AI side's move selection."""

    @abstractmethod
    def decide_move(self, game_state: GameState) -> Order:
        """
        Choose the AI's action for the current turn.

        Args:
            game_state: Current game state (must not be mutated)

        Returns:
            Order with action type, optional target tile and reasoning text
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Opponent name for logs and API responses."""
        ...


class ScriptedOpponent(MoveDecider):
    """Deterministic stub that replays a fixed list of orders, then passes.

    Records every state it was shown in seen_states.
    """

    def __init__(self, orders: Optional[Iterable[Order]] = None):
        self._orders = list(orders) if orders else []
        self.seen_states: list = []

    @property
    def name(self) -> str:
        return "scripted"

    def decide_move(self, game_state: GameState) -> Order:
        self.seen_states.append(game_state)
        if self._orders:
            return self._orders.pop(0)
        return Order(ActionType.PASS, None, "I bide my time.")


class GreedyOpponent(MoveDecider):
    """Rule-of-thumb opponent that needs no network access.

    Recruits whenever affordable, otherwise attacks the cheapest tile it
    can take (mines first, then tiles bordering its land), otherwise
    harvests.
    """

    def __init__(self, config: Optional[dict] = None):
        self._config = config or load_config()

    @property
    def name(self) -> str:
        return "greedy"

    def decide_move(self, game_state: GameState) -> Order:
        faction = game_state.get_faction(Owner.AI)

        if faction.gold >= self._config['recruit_cost']:
            return Order(ActionType.RECRUIT, None, "More peasants for the grinder!")

        targets = get_valid_targets(game_state, Owner.AI, self._config)
        if targets:
            owned = {tile.id for tile in game_state.tiles_owned_by(Owner.AI)}
            frontier = set()
            for tile_id in owned:
                frontier.update(get_tile_neighbors(tile_id, game_state.grid_size))

            def priority(tile):
                return (
                    tile.defense,
                    tile.type != TileType.MINE,
                    tile.id not in frontier,
                    tile.id,
                )

            target = min(targets, key=priority)
            if target.type == TileType.MINE:
                taunt = "My goblins adore this mine!"
            elif target.type == TileType.FORTRESS:
                taunt = "This fortress shall be my summer residence."
            else:
                taunt = "Kneel, peasants, your new lord has arrived."
            return Order(ActionType.ATTACK, target.id, taunt)

        return Order(ActionType.HARVEST, None, "The coffers must be filled, patience is a virtue.")
