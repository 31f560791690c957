"""Chat adapter capability interface, the in-memory webhook registry and the no-op adapter."""

from collections.abc import Awaitable, Callable
from typing import Literal, Protocol, runtime_checkable

import structlog

from sage.schemas.message import Message

logger = structlog.get_logger(__name__)

AdapterName = Literal["github", "none"]

MessageCallback = Callable[[str, Message], Awaitable[None]]


async def noop_callback(chat_id: str, message: Message) -> None:
    return None


@runtime_checkable
class ChatAdapter(Protocol):
    """What any chat backend exposes to the message processor."""

    async def initialize(self) -> None: ...

    async def send_response(self, chat_id: str, message: Message) -> None: ...

    def on_message_received(self, callback: MessageCallback) -> None: ...

    def store_webhook(self, chat_id: str, webhook_url: str) -> None: ...

    def get_webhook(self, chat_id: str) -> str | None: ...

    async def close(self) -> None: ...


class WebhookRegistry:
    """Plain chat id → webhook URL map shared by adapters that need no durable storage."""

    def __init__(self) -> None:
        self._webhooks: dict[str, str] = {}

    def store(self, chat_id: str, webhook_url: str) -> None:
        self._webhooks[chat_id] = webhook_url
        logger.info("webhook_stored", chat_id=chat_id)

    def get(self, chat_id: str) -> str | None:
        return self._webhooks.get(chat_id)


class NoAdapter:
    """Placeholder adapter used when no backend is configured."""

    def __init__(self) -> None:
        self._callback: MessageCallback = noop_callback
        self._webhooks = WebhookRegistry()

    async def initialize(self) -> None:
        pass

    async def send_response(self, chat_id: str, message: Message) -> None:
        pass

    def on_message_received(self, callback: MessageCallback) -> None:
        self._callback = callback

    def store_webhook(self, chat_id: str, webhook_url: str) -> None:
        self._webhooks.store(chat_id, webhook_url)

    def get_webhook(self, chat_id: str) -> str | None:
        return self._webhooks.get(chat_id)

    async def close(self) -> None:
        pass


def empty_adapters() -> dict[AdapterName, ChatAdapter]:
    return {
        "github": NoAdapter(),
        "none": NoAdapter(),
    }
