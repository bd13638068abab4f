# storefront/repos/chat_store.py
from typing import Dict

import redis

from storefront.domain.chat import ChatState
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CHAT_SESSION_TTL_SECONDS, CHAT_STORE_BACKEND
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class InMemoryChatStore:
    """Stan czatu w slowniku procesu. Dev i testy."""

    def __init__(self):
        self._states: Dict[str, str] = {}

    def load(self, session_key: str) -> ChatState | None:
        raw = self._states.get(session_key)
        return ChatState.model_validate_json(raw) if raw else None

    def save(self, session_key: str, state: ChatState):
        self._states[session_key] = state.model_dump_json()

    def delete(self, session_key: str):
        self._states.pop(session_key, None)


class RedisChatStore:
    """
    -stan czatu jako JSON pod kluczem chat:{session}
    -TTL odnawiany przy kazdym zapisie
    """

    def __init__(self, url: str | None = None, ttl: int = CHAT_SESSION_TTL_SECONDS, client=None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def _key(session_key: str) -> str:
        return f"chat:{session_key}"

    @redis_retry()
    def load(self, session_key: str) -> ChatState | None:
        raw = self.redis.get(self._key(session_key))
        if raw is None:
            return None
        return ChatState.model_validate_json(raw)

    @redis_retry()
    def save(self, session_key: str, state: ChatState):
        self.redis.set(name=self._key(session_key), value=state.model_dump_json(), ex=self.ttl)

    @redis_retry()
    def delete(self, session_key: str):
        self.redis.delete(self._key(session_key))


def build_chat_store(backend: str = CHAT_STORE_BACKEND):
    if backend == "memory":
        return InMemoryChatStore()
    if backend == "redis":
        return RedisChatStore()
    raise ValueError(f"Nieznany backend czatu: {backend}")
