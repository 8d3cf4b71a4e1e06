"""
LLM-driven opponent for Strategia.

Serializes the board and rules into a prompt, asks the hosted model for a
JSON move and extracts it. The model plays a theatrical medieval tyrant;
its taunt travels with the order into the battle log.

Any failure along the way (request error, empty reply, malformed JSON)
is absorbed here: the opponent passes with a fixed apology and the error
is kept on last_extraction for inspection. A move that parses but does not
fit the board is still played (the resolver treats an unknown target as a
pass); its problems are noted on last_extraction as well.
"""

from __future__ import annotations

import json
import os

from opponent.agent_interface import GreedyOpponent, MoveDecider
from opponent.extraction import MOVE_SCHEMA, ExtractionResult, extract_order, fallback_order, validate_move
from opponent.providers import LLMProvider, create_provider
from opponent.renderers import render_board, render_factions, render_rules_reference
from orders import Order
from state import GameState, load_config

PERSONA = (
    'You are "Lord Gemini", an arrogant, theatrical medieval tyrant who is '
    "secretly a little worried about losing his throne. You play against a "
    "human (the Player)."
)


class LLMOpponent(MoveDecider):
    """Opponent whose moves come from a hosted language model."""

    def __init__(
        self,
        provider: LLMProvider,
        config: dict | None = None,
        temperature: float = 0.7,
        agent_name: str | None = None,
    ):
        self._provider = provider
        self._config = config or load_config()
        self._temperature = temperature
        self._agent_name = agent_name or f"llm_{provider.model_id}"
        self.last_extraction: ExtractionResult | None = None
        self.error_count = 0
        self._total_input_tokens = 0
        self._total_output_tokens = 0

    @property
    def name(self) -> str:
        return self._agent_name

    @property
    def total_tokens(self) -> int:
        return self._total_input_tokens + self._total_output_tokens

    def decide_move(self, game_state: GameState) -> Order:
        """Ask the model for a move; never raises."""
        system_prompt = self._build_system_prompt()
        user_prompt = self._build_user_prompt(game_state)

        try:
            response = self._provider.complete(
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
                temperature=self._temperature,
                max_tokens=self._config.get("llm_max_tokens", 512),
                response_schema=MOVE_SCHEMA,
            )
        except Exception as e:
            self.error_count += 1
            self.last_extraction = ExtractionResult(
                order=fallback_order(),
                extraction_success=False,
                extraction_errors=[f"Request failed: {e}"],
            )
            return self.last_extraction.order

        self._total_input_tokens += response.input_tokens
        self._total_output_tokens += response.output_tokens

        extraction = extract_order(response.content)
        if not extraction.extraction_success:
            self.error_count += 1
        else:
            tile_ids = {tile.id for tile in game_state.tiles}
            extraction.extraction_errors.extend(
                f"Move check: {violation}" for violation in validate_move(extraction.order, tile_ids)
            )
        self.last_extraction = extraction
        return extraction.order

    def _build_system_prompt(self) -> str:
        """Fixed system prompt: persona, rules and strategic guidance."""
        recruit_cost = self._config.get("recruit_cost", 5)
        return (
            f"{PERSONA}\n\n"
            f"{render_rules_reference(self._config)}\n\n"
            f"STRATEGY:\n"
            f"1. With {recruit_cost}+ gold you should almost always RECRUIT. Don't hoard like a stupid dragon.\n"
            f"2. Target MINES first to starve the enemy.\n"
            f"3. With a big army, ATTACK! Be aggressive!\n\n"
            f"PERSONALITY (CRUCIAL):\n"
            f"- Your 'reasoning' field must be one short, cutting, funny sentence.\n"
            f'- Comment on the terrain you take (e.g. "My goblins adore this mine!", '
            f'"This fortress shall be my summer residence.").\n'
            f"- Use over-the-top medieval vocabulary (peasants, thunder, unacceptable, inevitable)."
        )

    def _build_user_prompt(self, game_state: GameState) -> str:
        """Per-turn prompt with the full board and the answer format."""
        return (
            f"CURRENT STATE (Turn {game_state.turn_count}):\n"
            f"{render_factions(game_state)}\n\n"
            f"BOARD:\n"
            f"{render_board(game_state)}\n\n"
            f"Return ONLY a JSON object matching this schema:\n"
            f"{json.dumps(MOVE_SCHEMA)}\n"
            f'Example: {{"actionType": "ATTACK", "targetTileId": 7, "reasoning": "Your villages are mine, peasant!"}}'
        )


def create_opponent(provider_name: str | None = None, config: dict | None = None) -> MoveDecider:
    """Build the AI side from a provider name.

    The name defaults to STRATEGIA_PROVIDER, then to whichever API key is
    present, then to the offline 'greedy' opponent.
    """
    config = config or load_config()
    name = provider_name or os.environ.get("STRATEGIA_PROVIDER")
    if not name:
        if os.environ.get("ANTHROPIC_API_KEY"):
            name = "anthropic"
        elif os.environ.get("OPENAI_API_KEY"):
            name = "openai"
        else:
            name = "greedy"

    if name.lower() == "greedy":
        return GreedyOpponent(config)

    model = os.environ.get("STRATEGIA_MODEL")
    if not model and name.lower() == "anthropic":
        model = config.get("llm_model")
    return LLMOpponent(create_provider(name, model), config)
