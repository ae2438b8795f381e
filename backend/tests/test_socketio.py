def _events(sio_client, name):
    return [pkt for pkt in sio_client.get_received('/ws') if pkt['name'] == name]


def test_socket_connect(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'connected' for pkt in received)


def test_ping(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    pongs = _events(sio_client, 'pong')
    assert pongs and pongs[0]['args'][0] == {'n': 1}


def test_watch_unknown_room(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('watch_room', {'room_code': 'ZZZZZZ'}, namespace='/ws')
    errors = _events(sio_client, 'error')
    assert errors and errors[0]['args'][0]['reason'] == 'room_not_found'


def test_watch_and_leave_reject_malformed_payloads(sio_client):
    sio_client.get_received('/ws')
    for payload in ('ABC123', ['ABC123'], {'room_code': 123}, {}):
        sio_client.emit('watch_room', payload, namespace='/ws')
        sio_client.emit('leave_room', payload, namespace='/ws')
        errors = _events(sio_client, 'error')
        assert len(errors) == 2
        assert all(e['args'][0]['reason'] == 'bad_request' for e in errors)
    assert sio_client.is_connected('/ws')


def test_watch_room_gets_current_state_then_updates(sio_client, client):
    code = client.post('/api/rooms/create', json={'username': 'Ann'}).get_json()['room_code']
    sio_client.get_received('/ws')  # flush

    sio_client.emit('watch_room', {'room_code': code.lower()}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'joined' for pkt in received)
    snapshots = [pkt['args'][0] for pkt in received if pkt['name'] == 'state_update']
    assert snapshots and snapshots[0]['state'] == 'awaiting_second_player'

    client.post('/api/rooms/join', json={'room_code': code, 'username': 'Bo'})
    client.post(f'/api/rooms/{code}/moves', json={'player': 1, 'column': 3})
    # rejected moves are not broadcast
    client.post(f'/api/rooms/{code}/moves', json={'player': 1, 'column': 3})

    updates = [pkt['args'][0] for pkt in _events(sio_client, 'state_update')]
    assert len(updates) == 2
    assert updates[0]['player2_username'] == 'Bo'
    assert updates[1]['board'][5][3] == 1
    assert updates[1]['current_turn'] == 2


def test_leave_room_stops_updates(sio_client, client):
    code = client.post('/api/rooms/create', json={'username': 'Ann'}).get_json()['room_code']
    sio_client.emit('watch_room', {'room_code': code}, namespace='/ws')
    sio_client.emit('leave_room', {'room_code': code}, namespace='/ws')
    assert _events(sio_client, 'left')

    client.post('/api/rooms/join', json={'room_code': code, 'username': 'Bo'})
    assert _events(sio_client, 'state_update') == []


def test_handlers_only_on_ws_namespace(flask_app):
    from dropfour import socketio
    default_client = socketio.test_client(flask_app, namespace='/')
    try:
        default_client.get_received('/')
        default_client.emit('ping', {'n': 1}, namespace='/')
        assert [pkt for pkt in default_client.get_received('/') if pkt['name'] == 'pong'] == []
    finally:
        default_client.disconnect(namespace='/')
