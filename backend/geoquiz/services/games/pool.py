import random
from collections import deque
from typing import Callable, List, Optional, Sequence

from geoquiz.exceptions import ConfigError, InvariantViolation
from geoquiz.models import Entity


def fisher_yates(entities: Sequence[Entity], rng=random) -> List[Entity]:
    """Return a uniformly shuffled copy; the input is left untouched."""
    shuffled = list(entities)
    rng.shuffle(shuffled)
    return shuffled


class EntityPool:
    """Entities still to guess (head is the current one) and those already found."""

    def __init__(self):
        self._remaining = deque()
        self._guessed: List[Entity] = []
        self.total = 0

    def initialize(self, entities: Sequence[Entity],
                   shuffle_fn: Callable[[Sequence[Entity]], List[Entity]] = fisher_yates) -> None:
        if not entities:
            raise ConfigError('Cannot start a game without entities')
        self._remaining = deque(shuffle_fn(entities))
        self._guessed = []
        self.total = len(self._remaining)

    def current(self) -> Optional[Entity]:
        return self._remaining[0] if self._remaining else None

    def mark_current_guessed(self) -> Entity:
        if not self._remaining:
            raise InvariantViolation('No current entity to mark as guessed')
        entity = self._remaining.popleft()
        self._guessed.append(entity)
        return entity

    def skip_current(self) -> None:
        # rotating a single entity would change nothing
        if len(self._remaining) > 1:
            self._remaining.rotate(-1)

    def is_exhausted(self) -> bool:
        return not self._remaining

    @property
    def remaining(self) -> List[Entity]:
        return list(self._remaining)

    @property
    def guessed(self) -> List[Entity]:
        return list(self._guessed)

    @property
    def remaining_count(self) -> int:
        return len(self._remaining)

    def guessed_ids(self) -> List[str]:
        return [e.id for e in self._guessed]
