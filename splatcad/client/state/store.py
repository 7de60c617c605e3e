"""Session Store - explicit context for client state.

Holds the state objects of one application session. It is constructed at
startup and passed to whatever needs it; there is no process-wide
instance, so tests and multiple sessions can each build their own.
"""

from __future__ import annotations

import logging
from typing import Optional

from splatcad.shared.core.configuration import LocalProviderConfig, SystemConfig
from splatcad.shared.core.event_bus import EventBus
from splatcad.shared.domain.projects import CloudFetchError, LocalDataProvider, ProviderError
from splatcad.shared.infrastructure.providers import (
    CommandInventoryProvider,
    JsonCloudSnapshot,
    JsonInventoryProvider,
)

from .project_state import ProjectState

logger = logging.getLogger(__name__)


def build_local_provider(config: LocalProviderConfig) -> LocalDataProvider:
    """Pick the local provider adapter named by the configuration.

    Raises:
        ValueError: If neither a command nor an inventory path is configured
    """
    if config.command:
        return CommandInventoryProvider(config.command)
    if config.inventory_path:
        return JsonInventoryProvider(config.inventory_path)
    raise ValueError("No local provider configured: set local_provider.command or local_provider.inventory_path")


class Store:
    """State context for one client session.

    Usage:
        async with Store.create(config) as store:
            store.projects.select(1)
            print(store.projects.current.value)
    """

    def __init__(
        self,
        event_bus: EventBus,
        provider: LocalDataProvider,
        config: Optional[SystemConfig] = None,
    ) -> None:
        """Initialize store with its collaborators.

        Args:
            event_bus: The shared event bus instance
            provider: Source of the local file inventory
            config: System configuration; defaults apply when omitted
        """
        self.bus = event_bus
        self.config = config or SystemConfig()
        self.projects = ProjectState(event_bus, provider)
        self._running = False

    @classmethod
    def create(cls, config: SystemConfig, event_bus: Optional[EventBus] = None) -> "Store":
        """Build a store whose provider comes from ``config``."""
        return cls(event_bus or EventBus(), build_local_provider(config.local_provider), config)

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Bind state to the bus and perform the configured initial loads.

        Initial load failures are logged and reflected in the state; they do
        not abort startup.
        """
        if self._running:
            return
        await self.projects.initialize()
        self._running = True

        if self.config.local_provider.refresh_on_start:
            try:
                await self.projects.refresh_local_files()
            except ProviderError as exc:
                logger.warning(f"Initial local files refresh failed: {exc}")

        snapshot_path = self.config.cloud.snapshot_path
        if snapshot_path:
            try:
                await self.projects.reload_cloud_metadata(JsonCloudSnapshot(snapshot_path))
            except CloudFetchError as exc:
                logger.warning(f"Initial cloud metadata load failed: {exc}")

    async def shutdown(self) -> None:
        """Tear down state and drain pending bus handlers."""
        if not self._running:
            return
        await self.projects.shutdown()
        await self.bus.wait_until_idle()
        self.bus.clear()
        self._running = False

    async def __aenter__(self) -> "Store":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.shutdown()
