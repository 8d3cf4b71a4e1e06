import re

from app import games
from models import Owner
from tests.builders import create_api_game, make_state


def test_new_game(api_client):
    """Test POST /api/game/new creates a game with a valid game_id."""
    response = api_client.post('/api/game/new', json={'seed': 42})
    assert response.status_code == 200
    uuid_pattern = r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$'
    assert re.match(uuid_pattern, response.json['game_id']) is not None


def test_new_game_without_body(api_client):
    response = api_client.post('/api/game/new')
    assert response.status_code == 200
    assert response.json['game_id'] in games


def test_new_game_rejects_bad_seed(api_client):
    response = api_client.post('/api/game/new', json={'seed': 'north'})
    assert response.status_code == 400
    assert 'Seed' in response.json['error']


def test_get_game_state(api_client):
    """Test GET /api/game/<game_id>/state returns the initial state."""
    game_id = create_api_game(api_client)

    response = api_client.get(f'/api/game/{game_id}/state')
    assert response.status_code == 200
    data = response.json

    assert data['game_id'] == game_id
    assert data['turn'] == 'PLAYER'
    assert data['turn_count'] == 1
    assert data['game_over'] is False
    assert data['winner'] is None
    assert len(data['tiles']) == 25
    assert data['tiles'][0]['owner'] == 'PLAYER'
    assert data['tiles'][24]['owner'] == 'AI'
    assert data['factions']['PLAYER']['gold'] == 25
    assert data['factions']['AI']['army'] == 10
    assert data['opponent'] == 'scripted'
    assert data['time_left'] is None
    assert data['economy']['PLAYER']['upkeep'] == 5


def test_unknown_game(api_client):
    assert api_client.get('/api/game/nope/state').status_code == 404
    assert api_client.get('/api/game/nope/log').status_code == 404
    assert api_client.post('/api/game/nope/action', json={'action': 'PASS'}).status_code == 404
    assert api_client.post('/api/game/nope/cheat', json={'cheat': 'GOLD'}).status_code == 404
    assert api_client.delete('/api/game/nope').status_code == 404


def test_recruit_action(api_client):
    game_id = create_api_game(api_client)

    response = api_client.post(f'/api/game/{game_id}/action', json={'action': 'recruit'})
    assert response.status_code == 200
    data = response.json

    assert [o['actor'] for o in data['outcomes']] == ['PLAYER', 'AI']
    assert data['outcomes'][0]['outcome'] == 'recruited'
    assert data['outcomes'][1]['order'] == {'action': 'PASS', 'reasoning': 'I bide my time.'}
    assert data['state']['turn'] == 'PLAYER'
    assert data['state']['turn_count'] == 2
    assert data['state']['factions']['PLAYER']['army'] == 13


def test_attack_action(api_client):
    game_id = create_api_game(api_client)
    # Swap in a known board so the target is a plain village
    games[game_id]._state = make_state()
    games[game_id]._state.game_id = game_id

    response = api_client.post(f'/api/game/{game_id}/action',
                               json={'action': 'ATTACK', 'target_tile_id': 6})
    assert response.status_code == 200
    first = response.json['outcomes'][0]
    assert first['outcome'] == 'conquered'
    assert first['combat'] == {'tile_id': 6, 'success': True, 'damage': 1}
    assert response.json['state']['tiles'][6]['owner'] == 'PLAYER'


def test_action_validation_errors(api_client):
    game_id = create_api_game(api_client)
    url = f'/api/game/{game_id}/action'

    assert api_client.post(url, data='not json', content_type='application/json').status_code == 400
    assert api_client.post(url, json={'action': 'MEDITATE'}).status_code == 400
    assert api_client.post(url, json={'action': 'ATTACK', 'target_tile_id': '6'}).status_code == 400
    assert api_client.post(url, json={'action': 'ATTACK', 'target_tile_id': 0}).status_code == 400

    # Nothing was resolved
    assert api_client.get(f'/api/game/{game_id}/state').json['turn_count'] == 1


def test_action_after_game_over(api_client):
    game_id = create_api_game(api_client)
    state = games[game_id].state.snapshot()
    state.game_over = True
    state.winner = Owner.AI
    games[game_id]._state = state

    response = api_client.post(f'/api/game/{game_id}/action', json={'action': 'PASS'})
    assert response.status_code == 409
    assert response.json['winner'] == 'AI'


def test_cheat(api_client):
    game_id = create_api_game(api_client)

    response = api_client.post(f'/api/game/{game_id}/cheat', json={'cheat': 'GOLD'})
    assert response.status_code == 200
    assert response.json['state']['factions']['PLAYER']['gold'] == 75

    response = api_client.post(f'/api/game/{game_id}/cheat', json={'cheat': 'DRAGON'})
    assert response.status_code == 400


def test_game_log(api_client):
    game_id = create_api_game(api_client)
    api_client.post(f'/api/game/{game_id}/action', json={'action': 'HARVEST'})

    response = api_client.get(f'/api/game/{game_id}/log')
    assert response.status_code == 200
    log = response.json['log']

    assert log[0] == "T1: The world is vast. The war for the 25 Kingdoms begins."
    assert log[1] == "T1: Player harvests (+3 gold)."
    assert log[2] == 'T2: AI passes. "I bide my time."'
    assert log[3].startswith("T2: Income:")
    assert response.json['events'][1]['actor'] == 'PLAYER'


def test_delete_game(api_client):
    game_id = create_api_game(api_client)
    response = api_client.delete(f'/api/game/{game_id}')
    assert response.status_code == 200
    assert game_id not in games
    assert api_client.get(f'/api/game/{game_id}/state').status_code == 404


def test_attack_on_unknown_tile_is_a_pass(api_client):
    game_id = create_api_game(api_client)

    response = api_client.post(f'/api/game/{game_id}/action',
                               json={'action': 'ATTACK', 'target_tile_id': 99})
    assert response.status_code == 200
    first = response.json['outcomes'][0]
    assert first['outcome'] == 'passed'
    assert first['combat'] is None
    assert first['message'] == "Player passes."
    assert response.json['state']['factions']['PLAYER']['army'] == 10
    assert response.json['state']['turn_count'] == 2


def test_attack_without_target_is_a_pass(api_client):
    game_id = create_api_game(api_client)

    response = api_client.post(f'/api/game/{game_id}/action', json={'action': 'ATTACK'})
    assert response.status_code == 200
    assert response.json['outcomes'][0]['outcome'] == 'passed'
