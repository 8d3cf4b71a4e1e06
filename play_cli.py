"""
CLI play mode for Strategia: 25 Kingdoms.

Human vs AI on the 5x5 grid. ASCII renderer, status panel, command
entry and the battle log as it grows.

The opponent is picked the same way as for the web API: STRATEGIA_PROVIDER,
then whichever API key is set, then the offline greedy opponent. There is
no turn countdown in the terminal.

Usage: python play_cli.py [seed]
"""

import sys

from models import ActionType, Owner
from opponent.llm_agent import create_opponent
from opponent.renderers import render_grid
from orders import OrderValidationError, get_attack_cost
from session import CHEATS, GameSession, describe_outcomes
from state import format_log_entry, load_config
from upkeep import get_upkeep_summary

HELP_TEXT = """Commands:
  recruit          Pay gold for soldiers
  harvest          Collect extra gold
  attack <id>      Attack the tile with that id
  pass             Skip your turn
  cheat <kind>     Black magic: GOLD, ARMY or PLAGUE
  log              Show the full battle log
  help             Show this text
  quit             Leave the game"""


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------


def show_status(session: GameSession):
    """Print the grid, both treasuries and next round's economy."""
    game = session.state
    economy = get_upkeep_summary(game, session.config)['factions']

    print()
    print(f"=== TURN {game.turn_count} ===")
    print(render_grid(game))
    print("  Legend: C capital, M mine, F fortress, v village | + yours, x enemy | dN defense")
    print()
    for owner, label in ((Owner.PLAYER, "You"), (Owner.AI, "AI ")):
        faction = game.get_faction(owner)
        figures = economy[owner.value]
        print(f"  {label}  gold {faction.gold:>3}  army {faction.army:>3}  "
              f"tiles {faction.tiles_controlled:>2}  "
              f"(next round: +{figures['income']} income, -{figures['upkeep']} upkeep)")
    print()


def show_tile_costs(session: GameSession):
    """List the army each unowned or enemy tile would cost to take."""
    game = session.state
    army = game.player.army
    affordable = []
    for tile in game.tiles:
        if tile.owner == Owner.PLAYER:
            continue
        cost = get_attack_cost(tile.defense, session.config)
        if army >= cost:
            affordable.append(f"#{tile.id}({cost})")
    if affordable:
        print("  Within reach (army needed): " + ", ".join(affordable))
    else:
        print("  No tile is within reach of your army.")


def show_outcomes(outcomes):
    for line in describe_outcomes(outcomes):
        print(f"  > {line}")


# ---------------------------------------------------------------------------
# Command Handling
# ---------------------------------------------------------------------------


def handle_command(session: GameSession, raw: str) -> bool:
    """Run one command line. Returns False when the player wants to quit."""
    parts = raw.split()
    if not parts:
        return True
    command = parts[0].lower()

    if command in ("quit", "exit", "q"):
        return False

    if command in ("help", "?"):
        print(HELP_TEXT)
        return True

    if command == "log":
        for entry in session.state.log:
            print(f"  {format_log_entry(entry)}")
        return True

    if command == "cheat":
        if len(parts) != 2:
            print(f"  Usage: cheat <{'|'.join(CHEATS)}>")
            return True
        try:
            session.apply_cheat(parts[1])
        except OrderValidationError as e:
            print(f"  {e}")
            return True
        print(f"  > {format_log_entry(session.state.log[-1])}")
        return True

    actions = {
        "recruit": ActionType.RECRUIT,
        "harvest": ActionType.HARVEST,
        "attack": ActionType.ATTACK,
        "pass": ActionType.PASS,
    }
    if command not in actions:
        print(f"  Unknown command: {command}. Type 'help' for the list.")
        return True

    target = None
    if actions[command] == ActionType.ATTACK:
        if len(parts) != 2:
            print("  Usage: attack <tile id>")
            return True
        try:
            target = int(parts[1].lstrip("#"))
        except ValueError:
            print(f"  Not a tile id: {parts[1]}")
            return True

    try:
        outcomes = session.submit_player_action(actions[command], target)
    except OrderValidationError as e:
        print(f"  {e}")
        return True

    if len(outcomes) > 1:
        print(f"  {session.opponent.name} is thinking...")
    show_outcomes(outcomes)
    return True


# ---------------------------------------------------------------------------
# Main Game Loop
# ---------------------------------------------------------------------------


def main():
    print("=" * 50)
    print("  STRATEGIA: 25 KINGDOMS  -  CLI Play Mode")
    print("=" * 50)

    seed = None
    if len(sys.argv) > 1:
        try:
            seed = int(sys.argv[1])
        except ValueError:
            print(f"Seed must be an integer, got {sys.argv[1]}")
            sys.exit(2)

    config = load_config()
    opponent = create_opponent(config=config)
    session = GameSession(opponent, seed=seed, config=config, use_timer=False)

    print(f"\nOpponent: {opponent.name}")
    print(format_log_entry(session.state.log[0]))
    print(HELP_TEXT)

    playing = True
    while playing and not session.state.game_over:
        show_status(session)
        show_tile_costs(session)
        raw = input("> ").strip()
        playing = handle_command(session, raw)

    # --- End ---
    game = session.state
    print("\n" + "=" * 50)
    if game.winner == Owner.PLAYER:
        print("  VICTORY! The 25 Kingdoms bow to you.")
    elif game.winner == Owner.AI:
        print(f"  DEFEAT. {opponent.name} rules the land.")
    else:
        print("  You left the field. No winner.")
    print(f"  Final turn: {game.turn_count}")
    print("=" * 50)
    session.close()


if __name__ == "__main__":
    main()
