"""
Upkeep phase management for Strategia: 25 Kingdoms
Handles round finalization, the economy and victory condition checking.

Once per round, after the AI has moved, both factions:
- Collect income from every owned tile
- Pay upkeep of half a gold piece per soldier (rounded down)
- Reinforce owned fortresses (+1 defense each)
- Lose deserters if the treasury would go negative
"""

import math
from typing import Any, Dict, Optional
from models import ACTOR_NAMES, Owner, TileType, UpkeepReport
from state import GameState, load_config, log_event


def calculate_income(game_state: GameState, owner: Owner) -> int:
    """
    Calculate the gold a faction earns from its territory.

    Args:
        game_state: Current game state
        owner: Faction to calculate income for

    Returns:
        Sum of resource values over the faction's tiles
    """
    return sum(tile.resource_value for tile in game_state.tiles_owned_by(owner))


def calculate_upkeep(army: int, upkeep_rate: float = 0.5) -> int:
    """Gold owed for an army of the given size, rounded down."""
    return math.floor(army * upkeep_rate)


def reinforce_fortresses(game_state: GameState, owner: Owner) -> list:
    """Add one point of defense to every fortress the faction holds. Returns their ids."""
    reinforced = []
    for tile in game_state.tiles_owned_by(owner):
        if tile.type == TileType.FORTRESS:
            tile.defense += 1
            reinforced.append(tile.id)
    return reinforced


def apply_faction_upkeep(game_state: GameState, owner: Owner,
                         config: Optional[Dict[str, Any]] = None) -> UpkeepReport:
    """
    Run the income, upkeep and desertion pass for one faction.

    Mutates game_state, which must be a snapshot owned by the caller.

    Args:
        game_state: State being built by the current resolution step
        owner: Faction to process
        config: Optional config dict

    Returns:
        UpkeepReport with the figures applied
    """
    config = config or load_config()
    faction = game_state.get_faction(owner)

    income = calculate_income(game_state, owner)
    upkeep = calculate_upkeep(faction.army, config['upkeep_rate'])
    reinforced = reinforce_fortresses(game_state, owner)

    gold_before = faction.gold
    faction.update_gold(income - upkeep)

    deserters = 0
    if faction.gold < 0:
        # One soldier deserts per missing gold piece
        deficit = abs(faction.gold)
        army_before = faction.army
        faction.update_army(-deficit)
        deserters = army_before - faction.army
        faction.gold = 0

    return UpkeepReport(
        owner=owner,
        income=income,
        upkeep=upkeep,
        gold_before=gold_before,
        gold_after=faction.gold,
        deserters=deserters,
        reinforced_fortresses=reinforced
    )


def check_victory(game_state: GameState) -> Optional[Owner]:
    """
    Check for victory conditions and return the winner if any.

    Victory conditions, first match wins:
    - Annihilation: the enemy controls no tiles
    - Domination: a faction controls more than half of the board

    Args:
        game_state: Current game state

    Returns:
        Winning faction, or None while the game goes on
    """
    half_board = game_state.total_tiles / 2

    if game_state.player.tiles_controlled == 0:
        return Owner.AI
    if game_state.ai.tiles_controlled == 0:
        return Owner.PLAYER
    if game_state.player.tiles_controlled > half_board:
        return Owner.PLAYER
    if game_state.ai.tiles_controlled > half_board:
        return Owner.AI

    return None


def perform_upkeep(game_state: GameState, config: Optional[Dict[str, Any]] = None) -> Dict[str, UpkeepReport]:
    """
    Perform the end-of-round upkeep for both factions.

    Advances the turn counter, hands the turn back to the player and runs
    the economy pass for each faction independently.

    Args:
        game_state: State being built by the current resolution step
        config: Optional config dict

    Returns:
        Dictionary of UpkeepReport keyed by faction value
    """
    config = config or load_config()

    game_state.turn_count += 1
    game_state.turn = Owner.PLAYER

    reports = {}
    for owner in (Owner.PLAYER, Owner.AI):
        reports[owner.value] = apply_faction_upkeep(game_state, owner, config)

    player_report = reports[Owner.PLAYER.value]
    ai_report = reports[Owner.AI.value]
    log_event(game_state,
              f"Income: Player +{player_report.income}, upkeep -{player_report.upkeep} | "
              f"AI +{ai_report.income}, upkeep -{ai_report.upkeep}",
              upkeep={key: report.gold_after for key, report in reports.items()})

    for owner in (Owner.PLAYER, Owner.AI):
        report = reports[owner.value]
        if report.bankrupt:
            log_event(game_state, f"BANKRUPTCY: {report.deficit} {ACTOR_NAMES[owner]} soldiers desert!",
                      actor=owner, deficit=report.deficit, deserters=report.deserters)

    return reports


def get_upkeep_summary(game_state: GameState, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Preview the next round's economy without changing the state.

    Args:
        game_state: Current game state
        config: Optional config dict

    Returns:
        Dictionary with expected income and upkeep per faction
    """
    config = config or load_config()
    summary = {
        'turn_count': game_state.turn_count,
        'factions': {}
    }

    for owner in (Owner.PLAYER, Owner.AI):
        faction = game_state.get_faction(owner)
        income = calculate_income(game_state, owner)
        upkeep = calculate_upkeep(faction.army, config['upkeep_rate'])
        summary['factions'][owner.value] = {
            'gold': faction.gold,
            'army': faction.army,
            'income': income,
            'upkeep': upkeep,
            'net': income - upkeep
        }

    return summary
