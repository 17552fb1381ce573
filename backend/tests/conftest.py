import os
import sys
import pytest

# Ensure the backend root (containing the `geoquiz` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from geoquiz import create_app, socketio
from geoquiz.models import Entity, GameMode
from geoquiz.services.games.session import GameSession


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = []
    LOG_LEVEL = 'DEBUG'
    TURN_DURATION_SEC = 30
    TIMER_TICK_SEC = 1
    POINTS_PER_CORRECT = 10
    MIN_PLAYERS = 2
    MAX_PLAYERS = 4
    MAX_TURNS = 0
    DEFAULT_GAME_MODE = 'europe'


class ManualClock:
    """Turn clock driven by the test instead of a background task."""

    def __init__(self, lock, label=''):
        self.lock = lock
        self.label = label
        self.running = False
        self.cancelled = False
        self.expired = False
        self.remaining = None
        self._on_tick = None
        self._on_expire = None

    def start(self, duration, on_tick, on_expire):
        self.remaining = duration
        self._on_tick = on_tick
        self._on_expire = on_expire
        self.running = True

    def cancel(self):
        if self.running:
            self.running = False
            self.cancelled = True

    def tick(self):
        with self.lock:
            if not self.running:
                return
            self.remaining -= 1
            self._on_tick(self.remaining)
            if self.remaining == 0 and self.running:
                self.running = False
                self.expired = True
                self._on_expire()

    def expire(self):
        while self.running:
            self.tick()


class ManualClockFactory:
    def __init__(self):
        self.clocks = []

    def __call__(self, lock, label=''):
        clock = ManualClock(lock, label)
        self.clocks.append(clock)
        return clock

    @property
    def current(self):
        return self.clocks[-1] if self.clocks else None

    def live(self):
        return [c for c in self.clocks if c.running]


class RecordingBroadcaster:
    def __init__(self):
        self.events = []

    def emit(self, event, payload, to=None):
        self.events.append((event, payload, to))

    def names(self):
        return [e for e, _, _ in self.events]

    def of(self, event):
        return [p for e, p, _ in self.events if e == event]

    def last(self, event):
        payloads = self.of(event)
        return payloads[-1] if payloads else None

    def clear(self):
        self.events.clear()


ENTITIES = (
    Entity('France', 'FRA'),
    Entity('Espagne', 'ESP'),
    Entity('Italie', 'ITA'),
)


@pytest.fixture()
def clocks():
    return ManualClockFactory()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def mode():
    return GameMode(key='test', label='Test countries', entities=ENTITIES, unit_label='pays')


@pytest.fixture()
def make_session(mode, broadcaster, clocks):
    def _make(**kwargs):
        kwargs.setdefault('shuffle_fn', list)
        kwargs.setdefault('now', lambda: 1700000000.0)
        return GameSession('ABCD', kwargs.pop('mode', mode), broadcaster, clocks, **kwargs)
    return _make


@pytest.fixture()
def session(make_session):
    return make_session()


@pytest.fixture()
def playing(session):
    """Session with players A and B, both ready, A on turn with France."""
    session.join('A', 'Alice')
    session.join('B', 'Bob')
    session.set_ready('A')
    session.set_ready('B')
    return session


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    manager = application.extensions['geoquiz']
    manager.clock_factory = ManualClockFactory()
    manager.shuffle_fn = list
    with application.app_context():
        yield application
    manager.dispose_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
