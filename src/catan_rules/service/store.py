from __future__ import annotations

import pickle
import threading
import time
from typing import Callable, Dict, Optional, Protocol, Tuple

from ..engine.game import Game


class SnapshotStore(Protocol):
    def load(self, game_id: str) -> Optional[Game]:
        ...

    def store(self, game_id: str, game: Game, ttl: float) -> None:
        ...


class InMemorySnapshotStore:
    """Keeps pickled games so every load hands back an independent copy.

    Reads and writes of the dictionary are locked; a load-mutate-store
    sequence on one game is not, callers must serialise those per game id.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[float, bytes]] = {}

    def load(self, game_id: str) -> Optional[Game]:
        with self._lock:
            entry = self._entries.get(game_id)
            if entry is None:
                return None
            expires_at, payload = entry
            if self._clock() >= expires_at:
                del self._entries[game_id]
                return None
        return pickle.loads(payload)

    def store(self, game_id: str, game: Game, ttl: float) -> None:
        payload = pickle.dumps(game, protocol=pickle.HIGHEST_PROTOCOL)
        with self._lock:
            now = self._clock()
            expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
            for key in expired:
                del self._entries[key]
            self._entries[game_id] = (now + ttl, payload)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
