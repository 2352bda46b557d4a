"""Feedback prompt rendering."""

from __future__ import annotations

import re
from dataclasses import dataclass

FEEDBACK_REQUEST = """Please provide feedback on this code, including:
1. Potential bugs or issues
2. Optimization suggestions
3. Best practices recommendations
4. Any other helpful insights
"""

_BACKTICK_RUN = re.compile(r"`{3,}")


def choose_fence(content: str) -> str:
    """Pick a backtick fence longer than any backtick run of 3+ in ``content``.

    Content with no such run gets the plain triple-backtick fence.
    """
    longest = max((len(m.group(0)) for m in _BACKTICK_RUN.finditer(content)), default=0)
    return "`" * max(3, longest + 1)


def language_tag(extension: str) -> str:
    """Fence language tag for a file extension (".py" -> "py")."""
    return extension.replace(".", "", 1)


def render_feedback_prompt(relative_path: str, tag: str, content: str) -> str:
    """Render the prompt sent to the model for one file."""
    fence = choose_fence(content)
    return (
        f"\nFile: {relative_path}\n"
        f"Content:\n"
        f"{fence}{tag}\n"
        f"{content}\n"
        f"{fence}\n"
        f"\n"
        f"{FEEDBACK_REQUEST}"
    )


@dataclass(frozen=True)
class FeedbackRequest:
    """Everything sent to the model for one dispatch."""

    relative_path: str
    language_tag: str
    file_content: str
    rendered_prompt: str

    @classmethod
    def build(cls, relative_path: str, extension: str, content: str) -> FeedbackRequest:
        tag = language_tag(extension)
        return cls(
            relative_path=relative_path,
            language_tag=tag,
            file_content=content,
            rendered_prompt=render_feedback_prompt(relative_path, tag, content),
        )
