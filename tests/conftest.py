"""Shared test fixtures."""

import pytest

from state import initialize_game
from tests.builders import make_config


# --- Fixtures ---


@pytest.fixture
def config():
    """Default rules with all delays switched off."""
    return make_config()


@pytest.fixture
def game(config):
    """Fresh game on the board of seed 42."""
    return initialize_game(seed=42, config=config)


@pytest.fixture
def api_client():
    """Flask test client playing against a scripted opponent, with no countdown."""
    from app import app, games
    from opponent.agent_interface import ScriptedOpponent

    app.config["TESTING"] = True
    app.config["GAME_CONFIG"] = make_config()
    app.config["OPPONENT_FACTORY"] = lambda config: ScriptedOpponent()
    app.config["USE_TURN_TIMER"] = False
    with app.test_client() as client:
        yield client
    for session in games.values():
        session.close()
    games.clear()
