from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .engine.constants import MAX_PLAYERS, MIN_PLAYERS

DEFAULT_SNAPSHOT_TTL_SECONDS = 900.0


@dataclass(frozen=True)
class EngineConfig:
    snapshot_ttl_seconds: float = DEFAULT_SNAPSHOT_TTL_SECONDS
    min_players: int = MIN_PLAYERS
    max_players: int = MAX_PLAYERS
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.snapshot_ttl_seconds <= 0:
            raise ValueError("snapshot_ttl_seconds must be positive")
        if not MIN_PLAYERS <= self.min_players <= self.max_players <= MAX_PLAYERS:
            raise ValueError(f"Player bounds must lie within {MIN_PLAYERS}..{MAX_PLAYERS}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        env = os.environ if environ is None else environ
        ttl = env.get("CATAN_SNAPSHOT_TTL_SECONDS")
        return cls(
            snapshot_ttl_seconds=float(ttl) if ttl else DEFAULT_SNAPSHOT_TTL_SECONDS,
            log_level=env.get("CATAN_LOG_LEVEL", "INFO").upper(),
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "snapshot_ttl_seconds": self.snapshot_ttl_seconds,
            "min_players": self.min_players,
            "max_players": self.max_players,
            "log_level": self.log_level,
        }
