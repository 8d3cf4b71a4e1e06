"""
Game session for Strategia: 25 Kingdoms
The single point through which a match's state changes.

A session owns the current (immutable) GameState and replaces it wholesale
after every resolved action. All transitions, including the forced pass of
an expired turn timer, go through one re-entrant lock, so turn resolutions
never interleave. The cosmetic delays and the opponent's decision are run
one after another while the lock is held.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
from models import ActionType, Owner
from opponent.agent_interface import MoveDecider
from orders import Order, OrderValidationError, get_order_summary, validate_order
from resolution import preview_attack, resolve_action
from state import GameState, initialize_game, load_config, log_event
from timers import CancellationToken, TurnTimer

CHEATS = ('GOLD', 'ARMY', 'PLAGUE')


@dataclass
class TurnOutcome:
    """What one resolved action did, for API responses and the CLI."""
    actor: Owner
    order: Order
    outcome: str
    message: str
    combat: Optional[Dict[str, Any]] = None
    forced: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'actor': self.actor.value,
            'order': get_order_summary(self.order),
            'outcome': self.outcome,
            'message': self.message,
            'combat': self.combat,
            'forced': self.forced
        }


class GameSession:
    """One match between the human player and an opponent."""

    def __init__(self, opponent: MoveDecider, seed: Optional[int] = None,
                 config: Optional[Dict[str, Any]] = None,
                 game_state: Optional[GameState] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 use_timer: bool = True,
                 timer_tick: float = 1.0):
        self.config = config or load_config()
        self.opponent = opponent
        self._state = game_state or initialize_game(seed, self.config)
        self._sleep = sleep
        self._use_timer = use_timer and self.config.get('turn_duration', 0) > 0
        self._timer_tick = timer_tick
        self._lock = threading.RLock()
        self._timer: Optional[TurnTimer] = None
        self._listeners: List[Callable[[GameState], None]] = []
        self.history: List[TurnOutcome] = []

    @property
    def game_id(self) -> str:
        return self._state.game_id

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def time_left(self) -> Optional[int]:
        """Seconds left on the player's countdown, or None if none is running."""
        timer = self._timer
        if timer is None or timer.token.cancelled:
            return None
        return timer.time_left

    def subscribe(self, listener: Callable[[GameState], None]) -> None:
        """Call listener with every new state."""
        self._listeners.append(listener)

    def start(self) -> None:
        """Arm the countdown for the player's first turn."""
        with self._lock:
            self._arm_timer()

    def close(self) -> None:
        with self._lock:
            self._cancel_timer()

    def submit_player_action(self, action_type: ActionType, target_tile_id: Optional[int] = None) -> List[TurnOutcome]:
        """
        Validate and resolve the player's action, then play the opponent's turn.

        Raises:
            OrderValidationError: If the order is not affordable or not allowed now
        """
        order = Order(action_type, target_tile_id)
        with self._lock:
            validate_order(order, self._state, Owner.PLAYER, self.config)
            outcomes = [self._resolve(Owner.PLAYER, order)]
            if not self._state.game_over and self._state.turn == Owner.AI:
                outcomes.append(self.run_opponent_turn())
            return outcomes

    def run_opponent_turn(self) -> TurnOutcome:
        """Let the opponent think, decide and act."""
        with self._lock:
            if self._state.game_over or self._state.turn != Owner.AI:
                raise OrderValidationError("It is not the AI's turn")
            self._sleep(self.config.get('think_delay', 0))
            order = self.opponent.decide_move(self._state)
            return self._resolve(Owner.AI, order)

    def apply_cheat(self, kind: str) -> GameState:
        """
        Black magic: GOLD (+50 player gold), ARMY (+20 player army) or
        PLAGUE (halves the AI's army).
        """
        kind = (kind or '').upper()
        if kind not in CHEATS:
            raise OrderValidationError(f"Unknown cheat: {kind}. Choose from {', '.join(CHEATS)}")

        with self._lock:
            if self._state.game_over:
                raise OrderValidationError("The game is over")
            new_state = self._state.snapshot()
            if kind == 'GOLD':
                new_state.player.update_gold(50)
                message = "Black magic: +50 gold for the Player."
            elif kind == 'ARMY':
                new_state.player.update_army(20)
                message = "Black magic: +20 soldiers for the Player."
            else:
                new_state.ai.army = max(0, new_state.ai.army // 2)
                message = "Black magic: the plague halves the AI's army."
            log_event(new_state, message, actor=Owner.PLAYER, cheat=kind)
            self._replace_state(new_state)
            return new_state

    def _resolve(self, actor: Owner, order: Order, forced: bool = False) -> TurnOutcome:
        combat = None
        if order.action_type == ActionType.ATTACK:
            combat = preview_attack(self._state, actor, order.target_tile_id, self.config)
            if combat:
                self._sleep(self.config.get('attack_reveal_delay', 0))

        log_length = len(self._state.log)
        new_state = resolve_action(self._state, actor, order, self.config)
        primary = new_state.log[log_length]

        outcome = TurnOutcome(
            actor=actor,
            order=order,
            outcome=primary.get('outcome', 'passed'),
            message=primary['event'],
            combat=combat,
            forced=forced
        )
        self.history.append(outcome)
        self._replace_state(new_state)
        return outcome

    def _replace_state(self, new_state: GameState) -> None:
        previous = self._state
        self._state = new_state
        if (previous.turn != new_state.turn or previous.turn_count != new_state.turn_count
                or previous.game_over != new_state.game_over):
            self._cancel_timer()
            self._arm_timer()
        for listener in self._listeners:
            listener(new_state)

    def _arm_timer(self) -> None:
        if not self._use_timer or self._state.game_over or self._state.turn != Owner.PLAYER:
            return
        if self._timer is not None and not self._timer.token.cancelled:
            return
        armed_turn = self._state.turn_count
        token = CancellationToken()
        self._timer = TurnTimer(
            self.config['turn_duration'],
            lambda: self._on_timer_expired(armed_turn, token),
            token=token,
            tick_interval=self._timer_tick
        )
        self._timer.start()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer_expired(self, armed_turn: int, token: CancellationToken) -> None:
        with self._lock:
            # A stale timer must not act on a turn that has already moved on
            if (token.cancelled or self._state.game_over
                    or self._state.turn != Owner.PLAYER
                    or self._state.turn_count != armed_turn):
                return
            self._timer = None
            self._resolve(Owner.PLAYER, Order(ActionType.PASS, None, "Time ran out."), forced=True)
            if not self._state.game_over and self._state.turn == Owner.AI:
                self.run_opponent_turn()


def describe_outcomes(outcomes: List[TurnOutcome]) -> List[str]:
    """One line per outcome, as shown in the battle log."""
    lines = []
    for outcome in outcomes:
        prefix = "(timeout) " if outcome.forced else ""
        lines.append(f"{prefix}{outcome.message}")
    return lines
