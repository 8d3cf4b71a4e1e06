from flask import Flask, request, jsonify
from flask_cors import CORS
from opponent.llm_agent import create_opponent
from orders import OrderValidationError, parse_action_type
from session import GameSession
from state import format_log_entry, get_game_summary, load_config
from upkeep import get_upkeep_summary
from typing import Dict

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes
app.config['GAME_CONFIG'] = load_config()
app.config['OPPONENT_FACTORY'] = lambda config: create_opponent(config=config)
app.config['USE_TURN_TIMER'] = True
games: Dict[str, GameSession] = {}  # In-memory storage for game sessions


def serialize_session(session: GameSession) -> Dict:
    """Game summary plus the player's remaining time."""
    state_json = get_game_summary(session.state)
    state_json['time_left'] = session.time_left
    state_json['opponent'] = session.opponent.name
    return state_json


@app.route('/api/game/new', methods=['POST'])
def new_game():
    """Create a new game, optionally from a seed."""
    try:
        data = request.get_json(silent=True) or {}

        seed = data.get('seed')
        if seed is not None:
            # Validate seed is an integer
            try:
                seed = int(seed)
            except (ValueError, TypeError):
                return jsonify({'error': 'Seed must be an integer'}), 400

        config = app.config['GAME_CONFIG']
        session = GameSession(
            app.config['OPPONENT_FACTORY'](config),
            seed=seed,
            config=config,
            use_timer=app.config['USE_TURN_TIMER']
        )
        games[session.game_id] = session
        session.start()

        return jsonify({'game_id': session.game_id})

    except Exception as e:
        return jsonify({'error': f'Failed to create game: {str(e)}'}), 500


@app.route('/api/game/<game_id>/state', methods=['GET'])
def get_game_state(game_id: str):
    """Retrieve the current game state for the given game ID."""
    if game_id not in games:
        return jsonify({'error': 'Game not found'}), 404

    session = games[game_id]
    state_json = serialize_session(session)
    state_json['economy'] = get_upkeep_summary(session.state, session.config)['factions']
    return jsonify(state_json)


@app.route('/api/game/<game_id>/action', methods=['POST'])
def submit_action(game_id: str):
    """Submit the player's action; the AI replies within the same request."""
    if game_id not in games:
        return jsonify({'error': 'Game not found'}), 404

    session = games[game_id]

    data = request.get_json(silent=True)
    if data is None:
        return jsonify({'error': 'Invalid JSON data'}), 400

    if session.state.game_over:
        return jsonify({'error': 'The game is over', 'winner': session.state.winner.value}), 409

    try:
        action_type = parse_action_type(data.get('action'))

        target_tile_id = data.get('target_tile_id')
        if target_tile_id is not None and (isinstance(target_tile_id, bool) or not isinstance(target_tile_id, int)):
            return jsonify({'error': 'target_tile_id must be an integer'}), 400

        outcomes = session.submit_player_action(action_type, target_tile_id)
    except OrderValidationError as e:
        return jsonify({'error': str(e)}), 400

    return jsonify({
        'game_id': game_id,
        'outcomes': [outcome.to_dict() for outcome in outcomes],
        'state': serialize_session(session)
    })


@app.route('/api/game/<game_id>/cheat', methods=['POST'])
def apply_cheat(game_id: str):
    """Black magic menu: GOLD, ARMY or PLAGUE."""
    if game_id not in games:
        return jsonify({'error': 'Game not found'}), 404

    session = games[game_id]
    data = request.get_json(silent=True) or {}

    try:
        session.apply_cheat(data.get('cheat', ''))
    except OrderValidationError as e:
        return jsonify({'error': str(e)}), 400

    return jsonify({'game_id': game_id, 'state': serialize_session(session)})


@app.route('/api/game/<game_id>/log', methods=['GET'])
def get_game_log(game_id: str):
    """Retrieve the full battle log."""
    if game_id not in games:
        return jsonify({'error': 'Game not found'}), 404

    game_state = games[game_id].state

    return jsonify({
        'game_id': game_id,
        'turn_count': game_state.turn_count,
        'log': [format_log_entry(entry) for entry in game_state.log],
        'events': game_state.log
    })


@app.route('/api/game/<game_id>', methods=['DELETE'])
def end_game(game_id: str):
    """Drop a game and cancel its countdown."""
    session = games.pop(game_id, None)
    if session is None:
        return jsonify({'error': 'Game not found'}), 404
    session.close()
    return jsonify({'game_id': game_id, 'deleted': True})


if __name__ == '__main__':
    app.run(debug=True)
