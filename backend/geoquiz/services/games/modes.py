from typing import Dict, Iterable, List

from geoquiz.exceptions import ConfigError
from geoquiz.models import Entity, GameMode


class ModeCatalog:
    """Game modes available to sessions, passed in at construction."""

    def __init__(self, modes: Iterable[GameMode] = ()):
        self._modes: Dict[str, GameMode] = {m.key: m for m in modes}

    @classmethod
    def from_config(cls, config: Dict[str, dict]) -> 'ModeCatalog':
        """Build from {key: {label, unit_label, id_property, rows, ...}}.

        `rows` are (canonical name, id, alt names) tuples.
        """
        modes = []
        for key, spec in config.items():
            entities = tuple(
                Entity(canonical_name=name, id=entity_id, alt_names=tuple(alt_names or ()))
                for name, entity_id, alt_names in spec.get('rows', ())
            )
            modes.append(GameMode(
                key=key,
                label=spec.get('label', key),
                entities=entities,
                unit_label=spec.get('unit_label', 'entities'),
                turn_duration=spec.get('turn_duration'),
                points_per_correct=spec.get('points_per_correct'),
                max_turns=spec.get('max_turns'),
                id_property=spec.get('id_property', 'id'),
            ))
        return cls(modes)

    def get(self, key: str) -> GameMode:
        mode = self._modes.get(key)
        if mode is None:
            raise ConfigError(f"Unknown game mode '{key}'", mode_key=key)
        if not mode.entities:
            raise ConfigError(f"Game mode '{key}' has no entities", mode_key=key)
        return mode

    def has_mode(self, key: str) -> bool:
        return key in self._modes

    def list_modes(self) -> List[dict]:
        return [m.to_dict() for m in self._modes.values()]


def default_catalog() -> ModeCatalog:
    from geoquiz.datasets import GAME_MODES
    return ModeCatalog.from_config(GAME_MODES)
