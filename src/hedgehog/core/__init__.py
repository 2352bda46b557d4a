"""Core: model clients and prompt rendering."""

from hedgehog.core.llm import LiteLLMProvider, Message, ModelClient, Role
from hedgehog.core.prompts import FeedbackRequest, render_feedback_prompt

__all__ = [
    "FeedbackRequest",
    "LiteLLMProvider",
    "Message",
    "ModelClient",
    "Role",
    "render_feedback_prompt",
]
