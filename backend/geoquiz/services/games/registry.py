from typing import Dict, List, Optional

from geoquiz.exceptions import DuplicateConnection
from geoquiz.models import Player


class PlayerRegistry:
    """Connected players keyed by connection id.

    Insertion order is the turn order: dicts keep it, and late joiners are
    appended at the end.
    """

    def __init__(self):
        self._players: Dict[str, Player] = {}

    def add(self, connection_id: str, display_name: str) -> Player:
        if connection_id in self._players:
            raise DuplicateConnection(connection_id)
        player = Player(connection_id=connection_id, display_name=display_name)
        self._players[connection_id] = player
        return player

    def remove(self, connection_id: str) -> Optional[Player]:
        return self._players.pop(connection_id, None)

    def get(self, connection_id: str) -> Optional[Player]:
        return self._players.get(connection_id)

    def all(self) -> List[Player]:
        return list(self._players.values())

    def ids(self) -> List[str]:
        return list(self._players.keys())

    def first(self) -> Optional[Player]:
        return next(iter(self._players.values()), None)

    def all_ready(self) -> bool:
        return bool(self._players) and all(p.is_ready for p in self._players.values())

    def next_after(self, connection_id: str) -> Optional[Player]:
        """Player following `connection_id` in turn order, wrapping around.

        Falls back to the first player when `connection_id` is unknown.
        """
        ids = self.ids()
        if not ids:
            return None
        if connection_id not in self._players:
            return self._players[ids[0]]
        idx = ids.index(connection_id)
        return self._players[ids[(idx + 1) % len(ids)]]

    def reset_for_restart(self) -> None:
        for player in self._players.values():
            player.reset()

    def to_list(self):
        return [p.to_dict() for p in self._players.values()]

    def __len__(self):
        return len(self._players)

    def __contains__(self, connection_id):
        return connection_id in self._players
