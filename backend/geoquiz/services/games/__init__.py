"""Game domain services: answer matching, entity pool, players, turn timer
and the session state machine.

This package contains pure(ish) domain logic that is driven by socket
handlers and HTTP routes, keeping transport concerns separated from core
game mechanics.
"""
from .manager import SessionManager
from .modes import ModeCatalog, default_catalog
from .session import GameSession

__all__ = ['GameSession', 'ModeCatalog', 'SessionManager', 'default_catalog']
