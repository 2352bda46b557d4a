"""Model client abstraction."""

from hedgehog.core.llm.litellm_provider import LiteLLMProvider
from hedgehog.core.llm.provider import Message, ModelClient, Role, build_messages

__all__ = [
    "LiteLLMProvider",
    "Message",
    "ModelClient",
    "Role",
    "build_messages",
]
