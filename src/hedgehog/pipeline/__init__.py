"""Change-to-feedback pipeline: debounced coordination and model dispatch."""

from hedgehog.pipeline.coordinator import ChangeCoordinator, Dispatcher, PendingDispatch
from hedgehog.pipeline.feedback import (
    Dispatch,
    DispatchState,
    FeedbackPipeline,
    relative_display_path,
)

__all__ = [
    "ChangeCoordinator",
    "Dispatch",
    "DispatchState",
    "Dispatcher",
    "FeedbackPipeline",
    "PendingDispatch",
    "relative_display_path",
]
