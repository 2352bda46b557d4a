"""ai-hedgehog: streamed AI feedback on source files as you save them."""

__version__ = "0.1.0"

# Public API
from hedgehog.config import (
    Config,
    DebouncePolicy,
    WatchConfiguration,
    build_watch_configuration,
    load_config,
)
from hedgehog.core import FeedbackRequest, LiteLLMProvider, ModelClient
from hedgehog.errors import (
    ConfigurationError,
    HedgehogError,
    InvocationError,
    ReadError,
    WatchError,
)
from hedgehog.output import ConsoleSink, OutputSink
from hedgehog.pipeline import ChangeCoordinator, DispatchState, FeedbackPipeline
from hedgehog.watching import ChangeEvent, ChangeKind, PathFilter, TreeWatcher, WatchEvent

__all__ = [
    # Config
    "Config",
    "DebouncePolicy",
    "WatchConfiguration",
    "build_watch_configuration",
    "load_config",
    # Errors
    "ConfigurationError",
    "HedgehogError",
    "InvocationError",
    "ReadError",
    "WatchError",
    # Model
    "FeedbackRequest",
    "LiteLLMProvider",
    "ModelClient",
    # Output
    "ConsoleSink",
    "OutputSink",
    # Pipeline
    "ChangeCoordinator",
    "DispatchState",
    "FeedbackPipeline",
    # Watching
    "ChangeEvent",
    "ChangeKind",
    "PathFilter",
    "TreeWatcher",
    "WatchEvent",
]
