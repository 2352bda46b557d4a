"""Wires the watcher, coordinator and feedback pipeline together."""

from __future__ import annotations

from hedgehog.config.schema import WatchConfiguration
from hedgehog.core.llm.provider import ModelClient
from hedgehog.logging import get_logger
from hedgehog.output import OutputSink
from hedgehog.pipeline.coordinator import ChangeCoordinator
from hedgehog.pipeline.feedback import FeedbackPipeline
from hedgehog.watching.filter import PathFilter
from hedgehog.watching.watcher import TreeWatcher

log = get_logger("app")


class HedgehogApp:
    """One watch session over a directory tree.

    Construction validates the ignore patterns, so a ConfigurationError
    surfaces before any watching starts.
    """

    def __init__(
        self,
        config: WatchConfiguration,
        client: ModelClient,
        sink: OutputSink,
        *,
        watcher: TreeWatcher | None = None,
    ) -> None:
        self.config = config
        self.path_filter = PathFilter.from_config(config)
        self.watcher = watcher or TreeWatcher(
            config.root_directory,
            ignore=self.path_filter.ignores,
            poll_interval=config.poll_interval_ms / 1000.0,
            stability_threshold=config.stability_threshold_ms / 1000.0,
        )
        self.pipeline = FeedbackPipeline(config, client, sink)
        self.coordinator = ChangeCoordinator(config, self.path_filter, self.pipeline, sink)

    async def run(self) -> None:
        """Watch until cancelled or the watcher stops."""
        log.info(
            "Watching %s (policy=%s, serialize=%s)",
            self.config.root_directory,
            self.config.debounce_policy.value,
            self.config.serialize_dispatches,
        )
        try:
            await self.coordinator.run(self.watcher.events())
        finally:
            self.stop()

    def stop(self) -> None:
        """Stop watching and drop pending dispatches.

        In-flight model calls are abandoned, not awaited.
        """
        self.watcher.stop()
        self.coordinator.close()
