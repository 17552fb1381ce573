import pytest

from geoquiz import socketio


def names(packets):
    return [pkt['name'] for pkt in packets]


def payloads(packets, event):
    return [pkt['args'][0] for pkt in packets if pkt['name'] == event]


@pytest.fixture()
def second_client(flask_app):
    test_client = socketio.test_client(flask_app, namespace='/ws')
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


def join(test_client, code, name):
    test_client.emit('join_game', {'game_code': code, 'player_name': name}, namespace='/ws')
    return test_client.get_received('/ws')


def test_socket_connect_and_join(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')

    received = join(sio_client, 'ABCD', 'Alice')
    assert 'connected' in names(received)
    welcome = payloads(received, 'welcome')[0]
    assert welcome['player_name'] == 'Alice'
    assert welcome['phase'] == 'lobby'
    assert welcome['game_mode']['key'] == 'europe'
    roster = payloads(received, 'roster_update')[-1]
    assert [p['name'] for p in roster['players']] == ['Alice']


def test_join_requires_game_code(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_game', {}, namespace='/ws')
    errors = payloads(sio_client.get_received('/ws'), 'error')
    assert errors == [{'message': 'game_code is required'}]


def test_join_unknown_mode_reports_error(flask_app, sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_game', {'game_code': 'ABCD', 'game_mode': 'atlantis'}, namespace='/ws')
    errors = payloads(sio_client.get_received('/ws'), 'error')
    assert errors[0]['game_mode'] == 'atlantis'
    assert flask_app.extensions['geoquiz'].get('ABCD') is None


def test_game_flow_over_socket(flask_app, sio_client, second_client):
    join(sio_client, 'ABCD', 'Alice')
    join(second_client, 'ABCD', 'Bob')
    sio_client.get_received('/ws')

    sio_client.emit('ready', namespace='/ws')
    second_client.emit('ready', namespace='/ws')
    received = second_client.get_received('/ws')
    assert payloads(received, 'game_started')[0]['first_player_name'] == 'Alice'
    # europe dataset in declaration order: Allemagne first
    assert payloads(received, 'new_entity')[0]['entity_id'] == 'DEU'

    # Bob is not on turn: ignored
    second_client.emit('guess', {'text': 'Allemagne'}, namespace='/ws')
    assert second_client.get_received('/ws') == []

    sio_client.emit('guess', {'text': 'allemagne'}, namespace='/ws')
    received = second_client.get_received('/ws')
    correct = payloads(received, 'correct')[0]
    assert (correct['player_name'], correct['entity_name'], correct['score']) == ('Alice', 'Allemagne', 10)
    assert payloads(received, 'new_entity')[0]['entity_id'] == 'FRA'

    sio_client.emit('skip', namespace='/ws')
    received = second_client.get_received('/ws')
    assert payloads(received, 'skipped')[0]['player_name'] == 'Alice'
    changed = payloads(received, 'turn_changed')[0]
    assert (changed['next_player_name'], changed['turn_number']) == ('Bob', 2)

    second_client.emit('request_state', namespace='/ws')
    state = payloads(second_client.get_received('/ws'), 'state_update')[0]
    assert state['phase'] == 'playing'
    assert state['current_entity_id'] == 'FRA'
    assert state['guessed'] == ['DEU']


def test_chat_reaches_everyone(sio_client, second_client):
    join(sio_client, 'ABCD', 'Alice')
    join(second_client, 'ABCD', 'Bob')
    sio_client.emit('chat', {'text': 'Salut !'}, namespace='/ws')
    msg = payloads(second_client.get_received('/ws'), 'chat_message')[0]
    assert (msg['player_name'], msg['text']) == ('Alice', 'Salut !')


def test_disconnect_is_implicit_leave(flask_app, sio_client, second_client):
    join(sio_client, 'ABCD', 'Alice')
    join(second_client, 'ABCD', 'Bob')
    sio_client.get_received('/ws')

    second_client.disconnect(namespace='/ws')
    left = payloads(sio_client.get_received('/ws'), 'player_left')[0]
    assert left['player_name'] == 'Bob'
    assert left['remaining_players'] == 1

    sio_client.emit('leave_game', namespace='/ws')
    assert 'left' in names(sio_client.get_received('/ws'))
    assert flask_app.extensions['geoquiz'].get('ABCD') is None


def test_ping(sio_client):
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    assert payloads(sio_client.get_received('/ws'), 'pong') == [{'n': 1}]
