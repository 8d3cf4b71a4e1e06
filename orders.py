from typing import Any, Dict, Optional
from models import ActionType, Owner
from state import GameState, load_config


class Order:
    def __init__(self, action_type: ActionType, target_tile_id: Optional[int] = None, reasoning: str = ""):
        """Initialize an order for one side's turn."""
        self.action_type = action_type
        self.target_tile_id = target_tile_id  # For Attack; None for the others
        self.reasoning = reasoning  # The AI's taunt, shown in the battle log

    def __repr__(self) -> str:
        return f"Order({self.action_type.value}, target={self.target_tile_id})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Order):
            return NotImplemented
        return (self.action_type == other.action_type
                and self.target_tile_id == other.target_tile_id
                and self.reasoning == other.reasoning)


class OrderValidationError(Exception):
    """Exception raised when an order fails validation."""
    pass


def parse_action_type(value: Any) -> ActionType:
    """
    Parse an action name such as 'attack' or 'RECRUIT' into an ActionType.

    Raises:
        OrderValidationError: If the value names no known action
    """
    if isinstance(value, ActionType):
        return value
    if not isinstance(value, str):
        raise OrderValidationError(f"Action must be a string, got {type(value).__name__}")
    try:
        return ActionType(value.strip().upper())
    except ValueError:
        raise OrderValidationError(f"Invalid action type: {value}")


def get_attack_cost(defense: int, config: Optional[Dict[str, Any]] = None) -> int:
    """Army needed to take a tile: its defense plus the fixed attack surcharge."""
    config = config or load_config()
    return defense + config['attack_cost']


def validate_order(order: Order, game_state: GameState, actor: Owner = Owner.PLAYER,
                   config: Optional[Dict[str, Any]] = None) -> bool:
    """
    Validate an order before it is submitted for resolution.

    Used by the human-facing surfaces so that insufficient resources are
    reported instead of being resolved as a wasted turn.

    Raises:
        OrderValidationError: With a message suitable for the player
    """
    config = config or load_config()

    if game_state.game_over:
        raise OrderValidationError("The game is over")

    if game_state.turn != actor:
        raise OrderValidationError(f"It is not {actor.value}'s turn")

    faction = game_state.get_faction(actor)

    if order.action_type == ActionType.RECRUIT:
        if faction.gold < config['recruit_cost']:
            raise OrderValidationError(
                f"Not enough gold! Need {config['recruit_cost']}, have {faction.gold}")

    elif order.action_type == ActionType.ATTACK:
        tile = game_state.get_tile(order.target_tile_id)
        if tile is None:
            # Missing or unknown targets resolve as a pass
            return True

        if tile.owner == actor:
            raise OrderValidationError(f"Tile {tile.id} is already yours")

        cost = get_attack_cost(tile.defense, config)
        if faction.army < cost:
            raise OrderValidationError(
                f"Army too small! Need {cost} (defense {tile.defense} + cost {config['attack_cost']})")

    elif order.target_tile_id is not None:
        raise OrderValidationError(f"{order.action_type.value} order takes no target tile")

    return True


def get_valid_targets(game_state: GameState, actor: Owner,
                      config: Optional[Dict[str, Any]] = None) -> list:
    """Tiles the actor could attack successfully right now."""
    config = config or load_config()
    army = game_state.get_faction(actor).army
    return [tile for tile in game_state.tiles
            if tile.owner != actor and army >= get_attack_cost(tile.defense, config)]


def get_order_summary(order: Order) -> Dict[str, Any]:
    """Get a summary of an order for API responses."""
    summary = {
        "action": order.action_type.value,
    }

    if order.target_tile_id is not None:
        summary["target_tile_id"] = order.target_tile_id

    if order.reasoning:
        summary["reasoning"] = order.reasoning

    return summary
