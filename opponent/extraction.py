"""
Extraction pipeline: LLM reply text → structured move.

The model is asked for a single JSON object
{"actionType": ..., "targetTileId": ..., "reasoning": ...}. Replies are
parsed tolerantly (bare object, fenced code block, or the first {...} span
in surrounding prose). Anything that still fails to yield a structurally
valid move produces the fallback Pass, never an exception.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from models import ActionType
from orders import Order, OrderValidationError, parse_action_type

FALLBACK_REASONING = "My scribes spilled the inkwell... I pass my turn."

MOVE_SCHEMA = {
    "type": "object",
    "properties": {
        "actionType": {"type": "string", "enum": [a.value for a in ActionType]},
        "targetTileId": {"type": ["integer", "null"], "description": "Target tile id for ATTACK"},
        "reasoning": {"type": "string", "description": "A short, arrogant medieval taunt"},
    },
    "required": ["actionType", "reasoning"],
}

_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)
_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


@dataclass
class ExtractionResult:
    """Result of extracting a move from an LLM reply."""

    order: Order = field(default_factory=lambda: fallback_order())
    raw_response: str = ""
    extraction_success: bool = True
    extraction_errors: list[str] = field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        return not self.extraction_success


def fallback_order() -> Order:
    """The deterministic move used whenever the opponent cannot decide."""
    return Order(ActionType.PASS, None, FALLBACK_REASONING)


def parse_json_object(text: str) -> dict[str, Any]:
    """Parse the first JSON object out of a reply.

    Raises:
        ValueError: If the text is empty or holds no JSON object
    """
    content = (text or "").strip()
    if not content:
        raise ValueError("Empty response")

    candidates = [content]
    fenced = _FENCE.search(content)
    if fenced:
        candidates.append(fenced.group(1).strip())
    braces = _OBJECT.search(content)
    if braces:
        candidates.append(braces.group(0))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    raise ValueError("No JSON object found in response")


def coerce_target(value: Any) -> int | None:
    """Accept an int, an integral float or a numeric string; None stays None.

    Raises:
        ValueError: If the value cannot be read as a tile id
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid target tile id: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError(f"Invalid target tile id: {value!r}")


def extract_order(text: str) -> ExtractionResult:
    """Convert an LLM reply into an Order, falling back to Pass on any defect."""
    result = ExtractionResult(raw_response=text or "")

    try:
        data = parse_json_object(text)
        action_type = parse_action_type(data.get("actionType"))
        target = coerce_target(data.get("targetTileId"))
        reasoning = data.get("reasoning") or ""
        if not isinstance(reasoning, str):
            reasoning = str(reasoning)
        if action_type != ActionType.ATTACK:
            target = None
        result.order = Order(action_type, target, reasoning.strip())
    except (ValueError, OrderValidationError) as e:
        result.extraction_success = False
        result.extraction_errors.append(f"Extraction failed: {e}")
        result.order = fallback_order()

    return result


def validate_move(order: Order, tile_ids: set[int]) -> list[str]:
    """Check an extracted move against the board.

    Returns list of violations (empty = valid). Violations are informational:
    the resolver treats an unknown target as a pass.
    """
    violations = []
    if order.action_type == ActionType.ATTACK:
        if order.target_tile_id is None:
            violations.append("ATTACK without a target tile")
        elif order.target_tile_id not in tile_ids:
            violations.append(f"Target tile {order.target_tile_id} is not on the board")
    if not order.reasoning:
        violations.append("Missing reasoning")
    return violations
