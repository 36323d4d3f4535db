"""Application-wide context for dependency resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from rich.console import Console

from personachat.domain.config import ClientSettings, KeyPoolCfg
from personachat.infrastructure.config.settings import load_settings

from .conversation import ConversationService
from .exchanger import MessageExchanger
from .key_pools import build_key_pools


@dataclass
class ApplicationContext:
    """Simple container that wires application services."""

    console: Console
    settings: ClientSettings
    conversations: ConversationService

    @classmethod
    def create(
        cls,
        console: Optional[Console] = None,
        settings: Optional[ClientSettings] = None,
        key_pools: Optional[Mapping[str, KeyPoolCfg]] = None,
    ) -> ApplicationContext:
        console = console or Console()
        settings = settings or load_settings()
        service = ConversationService(
            settings=settings,
            exchanger=MessageExchanger(timeout_s=settings.timeout_s),
            key_pools=build_key_pools(key_pools or {}),
        )
        return cls(console=console, settings=settings, conversations=service)


__all__ = ["ApplicationContext"]
