"""In-memory key pools: pick a live credential, park failing ones for an hour."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Sequence

from personachat.domain.chat import now_ms
from personachat.domain.config import KeyPoolCfg

logger = logging.getLogger(__name__)

DEAD_KEY_COOLDOWN_MS = 3_600_000


@dataclass
class KeyPool:
    name: str
    provider: str
    keys: Sequence[str] = field(repr=False)
    dead_keys: Dict[str, int] = field(default_factory=dict, repr=False)
    clock: Callable[[], int] = field(default=now_ms, repr=False, compare=False)
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    @classmethod
    def from_config(cls, cfg: KeyPoolCfg) -> KeyPool:
        return cls(name=cfg.name, provider=cfg.provider, keys=list(cfg.keys))

    def live_keys(self) -> list[str]:
        now = self.clock()
        return [
            key
            for key in self.keys
            if key not in self.dead_keys or now - self.dead_keys[key] > DEAD_KEY_COOLDOWN_MS
        ]

    def get_valid_key(self) -> str | None:
        """Return a random key that has not failed within the last hour."""

        candidates = self.live_keys()
        if not candidates:
            logger.warning("Key pool '%s' has no live keys.", self.name)
            return None
        return self.rng.choice(candidates)

    def report_failure(self, key: str) -> None:
        if key not in self.keys:
            return
        self.dead_keys[key] = self.clock()
        logger.info("Key pool '%s': parked a key (%d/%d live).", self.name, len(self.live_keys()), len(self.keys))


def build_key_pools(configs: Mapping[str, KeyPoolCfg]) -> dict[str, KeyPool]:
    return {name: KeyPool.from_config(cfg) for name, cfg in configs.items()}


__all__ = ["DEAD_KEY_COOLDOWN_MS", "KeyPool", "build_key_pools"]
