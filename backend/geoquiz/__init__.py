from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Session directory: modes and timers are injected, nothing is process-wide
    from geoquiz.services.games import SessionManager, default_catalog
    from geoquiz.services.games.scheduler import make_clock_factory
    from geoquiz.socketio_events import SocketIOBroadcaster

    max_turns = int(flask_app.config.get('MAX_TURNS', 0)) or None
    flask_app.extensions['geoquiz'] = SessionManager(
        catalog=default_catalog(),
        broadcaster_factory=lambda code: SocketIOBroadcaster(socketio, code),
        clock_factory=make_clock_factory(socketio, float(flask_app.config.get('TIMER_TICK_SEC', 1))),
        default_mode=flask_app.config.get('DEFAULT_GAME_MODE', 'europe'),
        session_options={
            'turn_duration': int(flask_app.config.get('TURN_DURATION_SEC', 30)),
            'points_per_correct': int(flask_app.config.get('POINTS_PER_CORRECT', 10)),
            'min_players': int(flask_app.config.get('MIN_PLAYERS', 2)),
            'max_players': int(flask_app.config.get('MAX_PLAYERS', 10)),
            'max_turns': max_turns,
        },
    )

    # Import and register blueprints here
    from geoquiz.main import main
    flask_app.register_blueprint(main)

    from geoquiz.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    # Register Socket.IO event handlers
    from geoquiz.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('list-modes')
    def list_modes_command():
        """Lists the available game modes."""
        for mode in flask_app.extensions['geoquiz'].catalog.list_modes():
            click.echo(f"{mode['key']}: {mode['label']} ({mode['entity_count']} {mode['unit_label']})")

    flask_app.cli.add_command(list_modes_command)

    return flask_app
