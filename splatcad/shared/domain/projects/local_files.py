"""Local File Provider Bridge.

Owns the asynchronous handshake with the local data provider and exposes
its inventory as a reactive :data:`ProjectFileMapping`.

Lifecycle::

    uninitialized ──refresh()──▶ loading ──ok──▶ ready
          ▲                         │              │
          └──────fail (never ok)────┘◀──refresh()──┘
                                    └──fail (stale)──▶ ready

Each provider request carries a generation number. Only the latest issued
generation may publish; an older request that completes afterwards is
discarded rather than cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Protocol, Set

from pydantic import ValidationError

from splatcad.shared.core import events
from splatcad.shared.core.event_bus import EventBus, EventPayload
from splatcad.shared.core.reactive import Readable, Subscription, Writable

from .errors import MalformedResponse, ProviderError, ProviderUnavailable
from .models import (
    EMPTY_PROJECT_FILE_MAPPING,
    PROJECT_FILE_MAPPING_ADAPTER,
    FileMapping,
    ProjectFileMapping,
    ProjectId,
    freeze_project_file_mapping,
    project_key,
)

logger = logging.getLogger(__name__)


class RefreshStage(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class LocalDataProvider(Protocol):
    """Anything able to return the full local inventory."""

    async def fetch_all_local_files(self) -> Mapping[Any, Any]:
        ...


def parse_inventory(raw: Any) -> ProjectFileMapping:
    """Validate a provider reply and freeze it.

    Raises:
        MalformedResponse: If the reply is not a project -> path -> file mapping
    """
    if not isinstance(raw, Mapping):
        raise MalformedResponse(f"Expected a mapping of projects, got {type(raw).__name__}")
    try:
        validated = PROJECT_FILE_MAPPING_ADAPTER.validate_python(dict(raw))
    except ValidationError as exc:
        raise MalformedResponse(f"Local inventory failed validation: {exc}") from exc
    return freeze_project_file_mapping(validated)


def find_files(mapping: ProjectFileMapping, project_id: ProjectId) -> Optional[FileMapping]:
    """Look up the files of ``project_id``, matching ids by canonical key."""
    files = mapping.get(project_id)
    if files is not None:
        return files
    key = project_key(project_id)
    for candidate, files in mapping.items():
        if project_key(candidate) == key:
            return files
    return None


class LocalFilesBridge(Readable[ProjectFileMapping]):
    """Reactive view of the local inventory with a coalescing refresh.

    Usage:
        bridge = LocalFilesBridge(provider)
        await bridge.refresh()
        bridge.subscribe(render_files)
    """

    def __init__(
        self,
        provider: LocalDataProvider,
        event_bus: Optional[EventBus] = None,
        name: str = "local_files",
    ) -> None:
        self.name = name
        self.provider = provider
        self.bus = event_bus
        self.stage: Writable[RefreshStage] = Writable(RefreshStage.UNINITIALIZED, name=f"{name}.stage")
        self.last_error: Optional[ProviderError] = None
        self.last_refreshed_at: Optional[datetime] = None

        self._files: Writable[ProjectFileMapping] = Writable(EMPTY_PROJECT_FILE_MAPPING, name=name)
        self._has_loaded = False
        self._issued = 0
        self._pending: Optional[asyncio.Future] = None
        self._tasks: Set[asyncio.Task] = set()

    # --- Construction helpers ---

    @classmethod
    def from_initial(
        cls,
        mapping: Mapping[Any, Any],
        provider: LocalDataProvider,
        event_bus: Optional[EventBus] = None,
    ) -> "LocalFilesBridge":
        """Create a bridge seeded with an already known inventory (stage ``ready``)."""
        bridge = cls(provider, event_bus=event_bus)
        bridge._files.set(parse_inventory(mapping))
        bridge._has_loaded = True
        bridge.stage.set(RefreshStage.READY)
        return bridge

    @classmethod
    async def create_loaded(
        cls,
        provider: LocalDataProvider,
        event_bus: Optional[EventBus] = None,
    ) -> "LocalFilesBridge":
        """Create a bridge and wait for its first successful refresh."""
        bridge = cls(provider, event_bus=event_bus)
        await bridge.refresh()
        return bridge

    # --- Readable ---

    @property
    def value(self) -> ProjectFileMapping:
        return self._files.value

    def subscribe(self, callback: Callable[[ProjectFileMapping], None]) -> Subscription:
        return self._files.subscribe(callback)

    # --- State ---

    @property
    def has_loaded(self) -> bool:
        """True once any refresh has succeeded."""
        return self._has_loaded

    @property
    def is_loading(self) -> bool:
        return self.stage.value is RefreshStage.LOADING

    @property
    def is_stale(self) -> bool:
        """Showing earlier data because the most recent refresh failed."""
        return self._has_loaded and self.last_error is not None

    @property
    def generation(self) -> int:
        """Number of provider requests issued so far."""
        return self._issued

    def files_for(self, project_id: ProjectId) -> Optional[FileMapping]:
        return find_files(self.value, project_id)

    # --- Refresh ---

    async def refresh(self, force: bool = False) -> ProjectFileMapping:
        """Request the full inventory from the provider.

        While a request is outstanding, further calls join it instead of
        asking the provider again. ``force=True`` issues a new request that
        supersedes the outstanding one; everyone waiting receives the
        outcome of the newest request.

        Returns:
            The inventory now held by the bridge

        Raises:
            ProviderUnavailable: The provider could not be reached
            MalformedResponse: The provider reply failed validation
        """
        if self._pending is not None and not force:
            logger.debug(f"Joining in-flight local files refresh #{self._issued}")
            return await asyncio.shield(self._pending)

        if self._pending is None:
            self._pending = asyncio.get_running_loop().create_future()
        pending = self._pending
        self._issue(forced=force)
        return await asyncio.shield(pending)

    def _issue(self, forced: bool) -> None:
        self._issued += 1
        generation = self._issued
        if forced and generation > 1:
            logger.info(f"Local files refresh #{generation} supersedes #{generation - 1}")
        else:
            logger.debug(f"Issuing local files refresh #{generation}")

        self.stage.set(RefreshStage.LOADING)
        task = asyncio.create_task(self._run(generation, forced))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, generation: int, forced: bool) -> None:
        await self._publish(
            events.TOPIC_LOCAL_FILES_REFRESH_START,
            events.create_refresh_start_event(generation, forced),
        )

        error: Optional[ProviderError] = None
        mapping: ProjectFileMapping = EMPTY_PROJECT_FILE_MAPPING
        try:
            mapping = parse_inventory(await self.provider.fetch_all_local_files())
        except ProviderError as exc:
            error = exc
        except Exception as exc:
            error = ProviderUnavailable(f"Local provider failed: {exc}")
            error.__cause__ = exc

        if generation != self._issued:
            logger.debug(f"Discarding superseded local files refresh #{generation} (latest #{self._issued})")
            return

        pending, self._pending = self._pending, None

        if error is None:
            self._files.set(mapping)
            self._has_loaded = True
            self.last_error = None
            self.last_refreshed_at = datetime.now(timezone.utc)
            self.stage.set(RefreshStage.READY)
            logger.info(f"Local files refresh #{generation} loaded {len(mapping)} project(s)")
            if pending is not None and not pending.done():
                pending.set_result(mapping)
            await self._publish(
                events.TOPIC_LOCAL_FILES_REFRESH_END,
                events.create_refresh_end_event(generation, len(mapping)),
            )
            return

        self.last_error = error
        self.stage.set(RefreshStage.READY if self._has_loaded else RefreshStage.UNINITIALIZED)
        logger.warning(
            f"Local files refresh #{generation} failed ({error.kind}): {error}"
            + (" - keeping previous inventory" if self._has_loaded else "")
        )
        if pending is not None and not pending.done():
            pending.set_exception(error)
        await self._publish(
            events.TOPIC_LOCAL_FILES_REFRESH_FAILED,
            events.create_refresh_failed_event(generation, error.kind, str(error), self._has_loaded),
        )

    async def _publish(self, topic: str, payload: EventPayload) -> None:
        if self.bus is not None:
            await self.bus.publish(topic, payload)

    async def close(self) -> None:
        """Abandon outstanding provider requests; waiters are cancelled."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
