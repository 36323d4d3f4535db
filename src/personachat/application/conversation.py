"""Conversation service: the caller-side wrapper around build and send."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from personachat.domain.chat import ConversationMessage, SessionDescriptor
from personachat.domain.config import ClientSettings, PersonaCfg
from personachat.infrastructure.adapters.base import AdapterError, AdapterProviderError

from .exchanger import MessageExchanger
from .key_pools import KeyPool
from .session_builder import build_session

logger = logging.getLogger(__name__)


@dataclass
class Conversation:
    """One open conversation view between a user and a persona.

    ``history`` is the caller-owned record (what a history store would
    persist); the session keeps its own provider-facing transcript.
    """

    persona: PersonaCfg
    session: SessionDescriptor
    exchanger: MessageExchanger = field(repr=False)
    history: list[ConversationMessage] = field(default_factory=list)
    key_pool: KeyPool | None = field(default=None, repr=False)
    pool_key: str | None = field(default=None, repr=False)
    last_error: AdapterError | None = field(default=None, repr=False)

    def reply(self, text: str) -> ConversationMessage:
        """Send *text* and return the model turn.

        Exchange failures come back as a model-role message carrying the error
        text, ready to be shown in the transcript; the user may simply send
        again. ``last_error`` holds the failure of the most recent turn.
        """

        self.history.append(ConversationMessage(role="user", text=text))
        self.last_error = None
        try:
            reply_text = self.exchanger.send(self.session, text)
        except AdapterError as exc:
            if isinstance(exc, AdapterProviderError):
                self._park_pool_key(exc)
            self.last_error = exc
            reply_text = str(exc)
        message = ConversationMessage(role="model", text=reply_text)
        self.history.append(message)
        return message

    def _park_pool_key(self, exc: AdapterProviderError) -> None:
        if self.key_pool is None or self.pool_key is None:
            return
        if exc.is_auth_failure or exc.is_quota_exceeded:
            self.key_pool.report_failure(self.pool_key)


@dataclass
class ConversationService:
    settings: ClientSettings
    exchanger: MessageExchanger
    key_pools: Mapping[str, KeyPool] = field(default_factory=dict)

    def resolve_credential(self, persona: PersonaCfg) -> tuple[str, KeyPool | None, str | None]:
        """Pick the persona's credential: a live pool key first, then its own key.

        The process-wide default is applied later by the session builder.
        """

        pool = self.key_pools.get(persona.key_pool) if persona.key_pool else None
        if pool is not None:
            key = pool.get_valid_key()
            if key:
                return key, pool, key
        elif persona.key_pool:
            logger.warning("Persona '%s' references unknown key pool '%s'.", persona.name, persona.key_pool)
        return persona.api_key, pool, None

    def open(self, persona: PersonaCfg, history: Iterable[ConversationMessage] = ()) -> Conversation:
        prior = list(history)
        credential, pool, pool_key = self.resolve_credential(persona)
        session = build_session(
            persona.model,
            persona.system_prompt,
            prior,
            persona.base_url,
            credential,
            default_credential=self.settings.default_credential,
        )
        return Conversation(
            persona=persona,
            session=session,
            exchanger=self.exchanger,
            history=prior,
            key_pool=pool,
            pool_key=pool_key,
        )


__all__ = ["Conversation", "ConversationService"]
