import logging
import random
import string
import threading
from typing import Callable, Dict, List, Optional, Tuple

from geoquiz.models import Player
from .modes import ModeCatalog
from .pool import fisher_yates
from .session import GameSession

logger = logging.getLogger(__name__)


class SessionManager:
    """Directory of live sessions keyed by game code.

    A session is created when its first player joins and disposed when its
    last player leaves. Each connection belongs to at most one session.
    Lock order is manager then session; clock callbacks only take the
    session lock.
    """

    def __init__(self, catalog: ModeCatalog, broadcaster_factory: Callable,
                 clock_factory: Callable, default_mode: str = 'europe',
                 session_options: Optional[dict] = None, shuffle_fn=fisher_yates):
        self.catalog = catalog
        self.broadcaster_factory = broadcaster_factory
        self.clock_factory = clock_factory
        self.default_mode = default_mode
        self.session_options = dict(session_options or {})
        self.shuffle_fn = shuffle_fn
        self._lock = threading.RLock()
        self._sessions: Dict[str, GameSession] = {}
        self._connections: Dict[str, str] = {}

    def join(self, game_code: str, connection_id: str, display_name: Optional[str] = None,
             mode_key: Optional[str] = None) -> Tuple[GameSession, Optional[Player]]:
        """Add a connection to a session, creating the session if needed.

        Raises ConfigError when a new session is requested for an unknown mode.
        The mode of an existing session always wins over `mode_key`.
        """
        code = game_code.upper()
        with self._lock:
            previous = self._connections.get(connection_id)
            if previous is not None and previous != code:
                self.leave(connection_id)
            session = self._sessions.get(code)
            if session is None:
                session = self._create(code, mode_key or self.default_mode)
            player = session.join(connection_id, display_name)
            if player is not None:
                self._connections[connection_id] = code
            elif not session.registry:
                self._discard(code, session)
            return session, player

    def leave(self, connection_id: str) -> Optional[GameSession]:
        with self._lock:
            code = self._connections.pop(connection_id, None)
            session = self._sessions.get(code) if code else None
            if session is None:
                return None
            session.leave(connection_id)
            if not session.registry:
                self._discard(code, session)
            return session

    def session_for(self, connection_id: str) -> Optional[GameSession]:
        with self._lock:
            code = self._connections.get(connection_id)
            return self._sessions.get(code) if code else None

    def get(self, game_code: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(game_code.upper())

    def generate_code(self, length: int = 4) -> str:
        """Generate a short game code not used by any live session."""
        with self._lock:
            while True:
                code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
                if code not in self._sessions:
                    return code

    def active(self) -> List[dict]:
        with self._lock:
            sessions = list(self._sessions.values())
        return [
            {
                'game_code': s.code,
                'phase': s.phase.value,
                'game_mode': s.mode.key,
                'player_count': len(s.registry),
            }
            for s in sessions
        ]

    def dispose_all(self) -> None:
        with self._lock:
            for code, session in list(self._sessions.items()):
                self._discard(code, session)
            self._connections.clear()

    def _create(self, code: str, mode_key: str) -> GameSession:
        mode = self.catalog.get(mode_key)
        session = GameSession(
            code,
            mode,
            self.broadcaster_factory(code),
            self.clock_factory,
            shuffle_fn=self.shuffle_fn,
            **self.session_options,
        )
        self._sessions[code] = session
        logger.info(f"[session-create] game={code} mode={mode.key} entities={len(mode.entities)}")
        return session

    def _discard(self, code: str, session: GameSession) -> None:
        if self._sessions.get(code) is session:
            del self._sessions[code]
        session.dispose()
        logger.info(f"[session-dispose] game={code}")
