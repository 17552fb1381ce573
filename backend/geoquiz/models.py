import enum
from dataclasses import dataclass
from typing import Optional, Tuple


class Phase(str, enum.Enum):
    LOBBY = 'lobby'
    PLAYING = 'playing'
    ENDED = 'ended'


@dataclass(frozen=True)
class Entity:
    """A country or region to identify; `id` is the mode-specific map code."""
    canonical_name: str
    id: str
    alt_names: Tuple[str, ...] = ()


@dataclass
class Player:
    connection_id: str
    display_name: str
    score: int = 0
    is_ready: bool = False
    correct_answers: int = 0
    total_attempts: int = 0

    def reset(self):
        self.score = 0
        self.is_ready = False
        self.correct_answers = 0
        self.total_attempts = 0

    def stats(self):
        return {
            'name': self.display_name,
            'score': self.score,
            'correct_answers': self.correct_answers,
            'total_attempts': self.total_attempts,
        }

    def to_dict(self):
        return {
            'id': self.connection_id,
            'name': self.display_name,
            'score': self.score,
            'is_ready': self.is_ready,
            'correct_answers': self.correct_answers,
            'total_attempts': self.total_attempts,
        }


@dataclass(frozen=True)
class GameMode:
    key: str
    label: str
    entities: Tuple[Entity, ...]
    unit_label: str = 'entities'
    # None falls back to the app configuration
    turn_duration: Optional[int] = None
    points_per_correct: Optional[int] = None
    max_turns: Optional[int] = None
    id_property: str = 'id'

    def to_dict(self):
        return {
            'key': self.key,
            'label': self.label,
            'unit_label': self.unit_label,
            'id_property': self.id_property,
            'entity_count': len(self.entities),
        }
