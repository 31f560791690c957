"""Pydantic schema for messages exchanged with the downstream processor."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """A single chat message.

    ``codespace_url`` is only set when a Codespaces link was found in the issue
    body. Leave it unset otherwise so that it is absent from ``to_payload()``
    rather than serialised as ``null``. The payload key is ``codespaceUrl``.
    """

    model_config = ConfigDict(populate_by_name=True)

    role: Literal["user", "assistant"] = "user"
    content: str
    codespace_url: str | None = Field(default=None, alias="codespaceUrl")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, by_alias=True)
