from flask import Blueprint, current_app, jsonify, request
from geoquiz.exceptions import ConfigError

games = Blueprint('games', __name__)


def _manager():
    return current_app.extensions['geoquiz']


@games.route('/modes', methods=['GET'])
def list_modes():
    """
    Lists the game modes a new session can be created with.
    """
    manager = _manager()
    return jsonify({
        'default': manager.default_mode,
        'modes': manager.catalog.list_modes(),
    }), 200

@games.route('/create', methods=['POST'])
def create_game():
    """
    Reserves a game code for a new session. The session itself is created
    when the first player joins the room over Socket.IO.
    """
    data = request.get_json(silent=True) or {}
    manager = _manager()
    mode_key = data.get('game_mode') or manager.default_mode
    try:
        mode = manager.catalog.get(mode_key)
    except ConfigError as exc:
        return jsonify({'error': str(exc)}), 400

    return jsonify({
        'message': 'New game created!',
        'code': manager.generate_code(),
        'game_mode': mode.to_dict(),
    }), 201

@games.route('/<string:game_code>/state', methods=['GET'])
def get_game_state(game_code):
    """
    Returns the public state of a live session.
    """
    session = _manager().get(game_code)
    if session is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(session.to_dict()), 200

@games.route('/active', methods=['GET'])
def get_active_games():
    """
    Returns the live sessions with their phase and player count.
    """
    return jsonify(_manager().active()), 200
