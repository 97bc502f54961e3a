from .manager import GameManager
from .status import player_status
from .store import InMemorySnapshotStore, SnapshotStore

__all__ = ["GameManager", "InMemorySnapshotStore", "SnapshotStore", "player_status"]
