from typing import Any, Dict, Optional
from models import ACTOR_NAMES, ActionType, Owner, TileType, opponent_of
from orders import Order, get_attack_cost
from state import GameState, load_config, log_event
from upkeep import check_victory, perform_upkeep


class ResolutionError(Exception):
    """Exception raised when an action cannot be resolved in the current state."""
    pass


def resolve_action(game_state: GameState, actor: Owner, order: Order,
                   config: Optional[Dict[str, Any]] = None) -> GameState:
    """Resolve one side's action and return the next game state.

    The incoming state is left untouched. The AI's action closes the round:
    turn counter, income and upkeep for both factions. The victory check
    runs after every action.
    """
    config = config or load_config()

    if game_state.game_over:
        raise ResolutionError("The game is over, no further actions are accepted")
    if actor not in (Owner.PLAYER, Owner.AI):
        raise ResolutionError(f"{actor.value} cannot take a turn")
    if game_state.turn != actor:
        raise ResolutionError(f"It is {game_state.turn.value}'s turn, not {actor.value}'s")

    new_state = game_state.snapshot()
    faction = new_state.get_faction(actor)
    actor_name = ACTOR_NAMES[actor]

    if order.action_type == ActionType.RECRUIT:
        if faction.gold >= config['recruit_cost']:
            faction.update_gold(-config['recruit_cost'])
            faction.update_army(config['recruit_amount'])
            message = f"{actor_name} recruits (+{config['recruit_amount']} soldiers)."
            outcome = 'recruited'
        else:
            message = f"{actor_name} lacks the gold to recruit (insufficient funds)."
            outcome = 'insufficient_funds'

    elif order.action_type == ActionType.HARVEST:
        faction.update_gold(config['harvest_bonus'])
        message = f"{actor_name} harvests (+{config['harvest_bonus']} gold)."
        outcome = 'harvested'

    elif order.action_type == ActionType.ATTACK and new_state.get_tile(order.target_tile_id) is not None:
        message, outcome = resolve_attack(new_state, actor, order.target_tile_id, config)

    else:
        # Pass, or an attack on a tile that doesn't exist
        message = f"{actor_name} passes."
        outcome = 'passed'

    if actor == Owner.AI and order.reasoning:
        message += f' "{order.reasoning}"'

    # The AI move closes the round, so it is stamped with the round it opens
    turn = new_state.turn_count + 1 if actor == Owner.AI else new_state.turn_count
    log_event(new_state, message, actor=actor, turn=turn, action=order.action_type.value,
              target_tile_id=order.target_tile_id, outcome=outcome)

    if actor == Owner.AI:
        perform_upkeep(new_state, config)
    else:
        new_state.turn = Owner.AI

    winner = check_victory(new_state)
    if winner:
        new_state.game_over = True
        new_state.winner = winner
        log_event(new_state, f"GAME OVER: {ACTOR_NAMES[winner]} is victorious!", actor=winner)

    return new_state


def resolve_attack(game_state: GameState, actor: Owner, target_tile_id: int,
                   config: Dict[str, Any]) -> tuple:
    """Resolve an attack on a tile of game_state, which the caller owns.

    Success needs an army of at least the tile's defense plus the attack
    surcharge, all of which is spent. A failed attack costs one soldier and
    wears the tile's defense down by one.

    Returns:
        (log message, outcome) where outcome is 'conquered', 'plundered' or 'failed'
    """
    faction = game_state.get_faction(actor)
    tile = game_state.get_tile(target_tile_id)
    actor_name = ACTOR_NAMES[actor]
    total_cost = get_attack_cost(tile.defense, config)

    if faction.army < total_cost:
        faction.update_army(-1)
        tile.defense = max(0, tile.defense - 1)
        return f"{actor_name} fails to take #{tile.id}.", 'failed'

    faction.update_army(-total_cost)

    previous_owner = tile.owner
    if previous_owner == opponent_of(actor):
        game_state.get_faction(previous_owner).tiles_controlled -= 1

    tile.owner = actor
    tile.defense = config['conquest_defense']
    # Retaking one's own tile leaves the counters in sync with ownership
    if previous_owner != actor:
        faction.tiles_controlled += 1

    if tile.type == TileType.MINE:
        faction.update_gold(config['plunder_bonus'])
        return f"{actor_name} plunders Mine #{tile.id} (+{config['plunder_bonus']} gold)!", 'plundered'

    return f"{actor_name} conquers #{tile.id}.", 'conquered'


def preview_attack(game_state: GameState, actor: Owner, target_tile_id: Any,
                   config: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    """Predict an attack's outcome for the combat reveal, without resolving it.

    Returns:
        {'tile_id', 'success', 'damage'} or None if the tile doesn't exist
    """
    config = config or load_config()
    tile = game_state.get_tile(target_tile_id)
    if tile is None:
        return None

    army = game_state.get_faction(actor).army
    success = army >= get_attack_cost(tile.defense, config)
    return {
        'tile_id': tile.id,
        'success': success,
        'damage': tile.defense if success else 1
    }
