"""Model client protocol and base types."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


class Role(Enum):
    """Message role in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True, slots=True)
class Message:
    """A message sent to the model."""

    role: Role
    content: str


def build_messages(prompt: str, system_prompt: str | None) -> list[Message]:
    """Build the system + user message pair for one feedback request."""
    messages: list[Message] = []
    if system_prompt:
        messages.append(Message(Role.SYSTEM, system_prompt))
    messages.append(Message(Role.USER, prompt))
    return messages


@runtime_checkable
class ModelClient(Protocol):
    """Streaming model invocation used by the feedback pipeline.

    Failures surface as exceptions, either when the stream is opened or
    while iterating it.
    """

    @property
    def model(self) -> str:
        """The model identifier being used."""
        ...

    def stream(
        self,
        prompt: str,
        *,
        system_prompt: str,
        max_tokens: int = 4096,
    ) -> AsyncIterator[str]:
        """Stream the model's reply as text chunks, in order.

        Args:
            prompt: The rendered feedback prompt
            system_prompt: Persona/instructions for the model
            max_tokens: Maximum tokens to generate

        Yields:
            Text chunks as they arrive
        """
        ...
