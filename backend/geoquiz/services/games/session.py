import functools
import logging
import threading
import time
from typing import Callable, Optional

from geoquiz.exceptions import InvariantViolation
from geoquiz.models import GameMode, Phase, Player
from .matching import is_match
from .pool import EntityPool, fisher_yates
from .registry import PlayerRegistry

logger = logging.getLogger(__name__)


def serialized(method):
    """Run the method while holding the session lock."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.lock:
            return method(self, *args, **kwargs)
    return wrapper


class GameSession:
    """Server-authoritative state of one multiplayer game.

    - Sole owner of the player registry, the entity pool and the turn clock
    - Every public operation runs under `lock`; clock ticks take the same lock,
      so events are applied one at a time in arrival order
    - Actions from players who are not on turn, or in the wrong phase, are
      dropped without any broadcast
    - Outbound events go through `broadcaster.emit(event, payload, to=None)`;
      `to` targets a single connection, otherwise the whole session
    """

    def __init__(self, code: str, mode: GameMode, broadcaster, clock_factory: Callable,
                 turn_duration: int = 30, points_per_correct: int = 10,
                 min_players: int = 2, max_players: int = 10,
                 max_turns: Optional[int] = None,
                 shuffle_fn=fisher_yates, now: Callable[[], float] = time.time):
        self.code = code
        self.mode = mode
        self.turn_duration = mode.turn_duration or turn_duration
        self.points_per_correct = mode.points_per_correct or points_per_correct
        self.min_players = min_players
        self.max_players = max_players
        self.max_turns = mode.max_turns or max_turns or None
        self.lock = threading.RLock()
        self.registry = PlayerRegistry()
        self.pool = EntityPool()
        self.phase = Phase.LOBBY
        self.current_turn_player_id: Optional[str] = None
        self.turn_number = 1
        self.turn_time_left = self.turn_duration
        self._broadcaster = broadcaster
        self._clock_factory = clock_factory
        self._clock = None
        self._shuffle_fn = shuffle_fn
        self._now = now
        self.pool.initialize(mode.entities, shuffle_fn)

    # ---- inbound events ----

    @serialized
    def join(self, connection_id: str, display_name: Optional[str] = None) -> Optional[Player]:
        if connection_id in self.registry:
            logger.debug(f"[ignored] game={self.code} duplicate join from {connection_id}")
            return None
        if len(self.registry) >= self.max_players:
            self._emit('action_rejected', {'action': 'join', 'reason': 'session full'}, to=connection_id)
            return None
        name = (display_name or '').strip() or f"Player {len(self.registry) + 1}"
        player = self.registry.add(connection_id, name)
        logger.info(f"[join] game={self.code} player={connection_id} name={name!r} phase={self.phase.value}")

        welcome = {
            'player_id': connection_id,
            'player_name': name,
            'phase': self.phase.value,
            'game_mode': self.mode.to_dict(),
            'turn_duration': self.turn_duration,
            'total_entities': self.pool.total,
        }
        if self.phase is Phase.PLAYING:
            current = self.pool.current()
            welcome.update({
                'current_turn_player_id': self.current_turn_player_id,
                'turn_number': self.turn_number,
                'turn_time_left': self.turn_time_left,
                'entity_id': current.id if current else None,
                'guessed': self.pool.guessed_ids(),
            })
        self._emit('welcome', welcome, to=connection_id)
        self._emit('player_joined', {'player_id': connection_id, 'player_name': name})
        self._broadcast_roster()
        return player

    @serialized
    def leave(self, connection_id: str) -> Optional[Player]:
        if connection_id not in self.registry:
            return None
        held_turn = self.phase is Phase.PLAYING and self.current_turn_player_id == connection_id
        successor = self.registry.next_after(connection_id) if held_turn else None
        player = self.registry.remove(connection_id)
        logger.info(f"[leave] game={self.code} player={connection_id} held_turn={held_turn}")
        self._emit('player_left', {
            'player_id': connection_id,
            'player_name': player.display_name,
            'remaining_players': len(self.registry),
        })
        self._broadcast_roster()

        if self.phase is Phase.PLAYING:
            if not self.registry:
                self.end_game('player left')
            elif held_turn:
                self._pass_turn_to(successor)
        elif self.phase is Phase.LOBBY:
            self._maybe_start()
        return player

    @serialized
    def set_ready(self, connection_id: str) -> None:
        player = self.registry.get(connection_id)
        if self.phase is not Phase.LOBBY or player is None or player.is_ready:
            return
        player.is_ready = True
        self._emit('player_ready', {'player_id': connection_id, 'player_name': player.display_name})
        self._broadcast_roster()
        self._maybe_start()

    @serialized
    def guess(self, connection_id: str, text: Optional[str]) -> Optional[bool]:
        """Check `text` against the current entity.

        Returns True/False for a correct/wrong answer, None when ignored.
        """
        if not self._is_on_turn(connection_id):
            logger.debug(f"[ignored] game={self.code} guess from {connection_id} off turn")
            return None
        text = text or ''
        entity = self.pool.current()
        if entity is None:
            raise InvariantViolation(f"Game {self.code} is playing with an empty entity pool")
        player = self.registry.get(connection_id)

        if is_match(text, entity):
            player.score += self.points_per_correct
            player.correct_answers += 1
            self.pool.mark_current_guessed()
            self._emit('correct', {
                'player_id': connection_id,
                'player_name': player.display_name,
                'entity_id': entity.id,
                'entity_name': entity.canonical_name,
                'score': player.score,
            })
            self.advance_to_next_entity()
            return True

        player.total_attempts += 1
        self._emit('wrong', {
            'player_id': connection_id,
            'player_name': player.display_name,
            'guess': text,
        })
        self.switch_turn()
        return False

    @serialized
    def skip(self, connection_id: str) -> bool:
        if not self._is_on_turn(connection_id):
            logger.debug(f"[ignored] game={self.code} skip from {connection_id} off turn")
            return False
        player = self.registry.get(connection_id)
        self._emit('skipped', {'player_id': connection_id, 'player_name': player.display_name})
        self.switch_turn()
        return True

    @serialized
    def restart(self, connection_id: Optional[str] = None) -> bool:
        """Reset scores and the pool and go back to the lobby.

        Allowed in every phase; restarting a running game discards it.
        """
        if connection_id is not None and connection_id not in self.registry:
            return False
        self._cancel_clock()
        self.registry.reset_for_restart()
        self.pool.initialize(self.mode.entities, self._shuffle_fn)
        self.phase = Phase.LOBBY
        self.current_turn_player_id = None
        self.turn_number = 1
        self.turn_time_left = self.turn_duration
        logger.info(f"[restart] game={self.code} by={connection_id}")
        self._emit('game_restarted', {'requested_by': connection_id})
        self._broadcast_roster()
        return True

    @serialized
    def chat(self, connection_id: str, text: Optional[str]) -> None:
        player = self.registry.get(connection_id)
        if player is None or text is None:
            return
        self._emit('chat_message', {
            'player_id': connection_id,
            'player_name': player.display_name,
            'text': text,
            'timestamp': self._now(),
        })

    # ---- transitions ----

    @serialized
    def start_game(self) -> None:
        first = self.registry.first()
        if first is None:
            raise InvariantViolation(f"Game {self.code} cannot start without players")
        self.pool.initialize(self.mode.entities, self._shuffle_fn)
        self.phase = Phase.PLAYING
        self.turn_number = 1
        self.current_turn_player_id = first.connection_id
        logger.info(f"[start] game={self.code} players={len(self.registry)} entities={self.pool.total}")
        self._emit('game_started', {
            'first_player_id': first.connection_id,
            'first_player_name': first.display_name,
            'turn_number': self.turn_number,
            'turn_duration': self.turn_duration,
            'total_entities': self.pool.total,
        })
        self.advance_to_next_entity()

    @serialized
    def advance_to_next_entity(self) -> None:
        if self.pool.is_exhausted():
            self.end_game('all entities guessed')
            return
        entity = self.pool.current()
        # only the id: the name is the answer
        self._emit('new_entity', {
            'entity_id': entity.id,
            'current_turn_player_id': self.current_turn_player_id,
            'turn_number': self.turn_number,
            'remaining_count': self.pool.remaining_count,
        })
        self._start_clock()

    @serialized
    def switch_turn(self) -> None:
        self._cancel_clock()
        if not self.registry:
            self.end_game('player left')
            return
        self._pass_turn_to(self.registry.next_after(self.current_turn_player_id))

    @serialized
    def end_game(self, reason: str) -> None:
        self._cancel_clock()
        self._clock = None
        self.phase = Phase.ENDED
        self.current_turn_player_id = None
        self.turn_time_left = 0
        # sorted() is stable, ties keep join order
        ranked = sorted(self.registry.all(), key=lambda p: p.score, reverse=True)
        winner = None
        if ranked and (len(ranked) == 1 or ranked[0].score > ranked[1].score):
            winner = ranked[0].display_name
        logger.info(f"[end] game={self.code} reason={reason!r} winner={winner!r}")
        self._emit('game_ended', {
            'reason': reason,
            'winner': winner,
            'scores': [p.stats() for p in ranked],
            'guessed_count': len(self.pool.guessed),
            'total_entities': self.pool.total,
        })

    @serialized
    def dispose(self) -> None:
        self._cancel_clock()
        self._clock = None

    # ---- helpers ----

    def _is_on_turn(self, connection_id: str) -> bool:
        return self.phase is Phase.PLAYING and connection_id == self.current_turn_player_id

    def _maybe_start(self) -> None:
        if len(self.registry) >= self.min_players and self.registry.all_ready():
            self.start_game()

    def _pass_turn_to(self, player: Player) -> None:
        self._cancel_clock()
        if self.max_turns and self.turn_number >= self.max_turns:
            self.end_game('maximum turns reached')
            return
        self.turn_number += 1
        self.current_turn_player_id = player.connection_id
        self._emit('turn_changed', {
            'next_player_id': player.connection_id,
            'next_player_name': player.display_name,
            'turn_number': self.turn_number,
        })
        self._start_clock()

    def _start_clock(self) -> None:
        self._cancel_clock()
        self.turn_time_left = self.turn_duration
        clock = self._clock_factory(self.lock, f"game={self.code} turn={self.turn_number}")
        self._clock = clock
        clock.start(
            self.turn_duration,
            functools.partial(self._on_tick, clock),
            functools.partial(self._on_turn_timeout, clock),
        )

    def _cancel_clock(self) -> None:
        if self._clock is not None:
            self._clock.cancel()

    def _on_tick(self, clock, remaining: int) -> None:
        if clock is not self._clock or self.phase is not Phase.PLAYING:
            return
        self.turn_time_left = remaining
        self._emit('tick', {'turn_time_left': remaining, 'turn_number': self.turn_number})

    def _on_turn_timeout(self, clock) -> None:
        if clock is not self._clock or self.phase is not Phase.PLAYING:
            return
        logger.info(f"[timeout] game={self.code} turn={self.turn_number} player={self.current_turn_player_id}")
        self.switch_turn()

    def _broadcast_roster(self) -> None:
        self._emit('roster_update', {'players': self.registry.to_list(), 'phase': self.phase.value})

    def _emit(self, event: str, payload: dict, to: Optional[str] = None) -> None:
        payload = dict(payload, game_code=self.code)
        self._broadcaster.emit(event, payload, to=to)

    @serialized
    def to_dict(self):
        current = self.pool.current() if self.phase is Phase.PLAYING else None
        return {
            'game_code': self.code,
            'phase': self.phase.value,
            'game_mode': self.mode.to_dict(),
            'players': self.registry.to_list(),
            'current_turn_player_id': self.current_turn_player_id,
            'turn_number': self.turn_number,
            'turn_time_left': self.turn_time_left,
            'turn_duration': self.turn_duration,
            'current_entity_id': current.id if current else None,
            'remaining_count': self.pool.remaining_count,
            'guessed': self.pool.guessed_ids(),
            'total_entities': self.pool.total,
        }
