"""Project Synchronization State.

Owns the project stores of one client session and wires them to the
EventBus. UI code reads ``current`` and ``status_text`` and calls the
public actions; nothing here renders anything.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from splatcad.shared.core import events
from splatcad.shared.core.event_bus import EventBus, EventPayload
from splatcad.shared.core.reactive import Subscription, Writable
from splatcad.shared.domain.projects import (
    CloudMetadataStore,
    CloudRecords,
    CurrentProjectView,
    LocalDataProvider,
    LocalFilesBridge,
    MalformedCloudData,
    ProjectFileMapping,
    ProjectId,
    RefreshStage,
    SelectionStore,
    project_key,
)
from splatcad.shared.domain.projects.cloud_metadata import CloudFetch

logger = logging.getLogger(__name__)


class ProjectState:
    """Reactive state for the selected project.

    Attributes:
        cloud: Cloud project records, replaced wholesale
        local_files: Local inventory bridge with its refresh stage
        selection: Selected project id
        current: Merged current project (read-only)
        status_text: Human-readable sync status
    """

    def __init__(self, event_bus: EventBus, provider: LocalDataProvider) -> None:
        """Initialize project state.

        Args:
            event_bus: The shared event bus
            provider: Source of the local file inventory
        """
        self.bus = event_bus

        self.cloud = CloudMetadataStore()
        self.local_files = LocalFilesBridge(provider, event_bus=event_bus)
        self.selection = SelectionStore()
        self.current = CurrentProjectView(self.cloud, self.local_files, self.selection)

        self.is_ready: Writable[bool] = Writable(False, name="is_ready")
        self.status_text: Writable[str] = Writable("Local files not loaded", name="status_text")

        self._stage_subscription: Optional[Subscription] = None
        self._bus_handlers = [
            (events.TOPIC_PROJECT_SELECT, self._handle_project_select),
            (events.TOPIC_PROJECT_CLEAR, self._handle_project_clear),
            (events.TOPIC_CLOUD_METADATA_REPLACE, self._handle_cloud_metadata_replace),
            (events.TOPIC_STATUS_TEXT, self._handle_status_text),
        ]
        self._started = False

    async def initialize(self) -> None:
        """Bind to EventBus topics and start mirroring the refresh stage.

        Safe to call more than once.
        """
        if self._started:
            return

        for topic, handler in self._bus_handlers:
            await self.bus.subscribe(topic, handler)
        self._stage_subscription = self.local_files.stage.subscribe(self._on_stage_change)

        self._started = True
        self.is_ready.set(True)

    async def shutdown(self) -> None:
        """Detach from the bus and abandon outstanding refreshes.

        The stores and the current-project view stay wired to each other, so
        a later ``initialize`` resumes with the same state.
        """
        if not self._started:
            return

        for topic, handler in self._bus_handlers:
            await self.bus.unsubscribe(topic, handler)
        if self._stage_subscription is not None:
            self._stage_subscription.unsubscribe()
            self._stage_subscription = None
        await self.local_files.close()

        self._started = False
        self.is_ready.set(False)

    # --- Public Actions ---

    def select(self, project_id: ProjectId) -> None:
        self.selection.select(project_id)

    def clear(self) -> None:
        self.selection.clear()

    async def refresh_local_files(self, force: bool = False) -> ProjectFileMapping:
        """Refresh the local inventory; provider errors propagate to the caller."""
        return await self.local_files.refresh(force=force)

    def replace_cloud_metadata(self, records: Iterable[Any]) -> CloudRecords:
        return self.cloud.replace_all(records)

    async def reload_cloud_metadata(self, fetch: CloudFetch) -> CloudRecords:
        """Fetch cloud records and replace the store; failures keep the old ones."""
        return await self.cloud.reload(fetch)

    async def publish(self, topic: str, payload: EventPayload) -> None:
        await self.bus.publish(topic, payload)

    async def request_select(self, project_id: ProjectId) -> None:
        """Push a selection through the bus, as UI components do."""
        await self.publish(events.TOPIC_PROJECT_SELECT, events.create_project_select_event(project_id))

    async def push_status(self, text: str) -> None:
        await self.publish(events.TOPIC_STATUS_TEXT, events.create_status_text_event(text))

    def known_project_ids(self) -> List[ProjectId]:
        """Ids present on either side, cloud first."""
        ids: List[ProjectId] = [record.id for record in self.cloud.value]
        seen = {project_key(project_id) for project_id in ids}
        for project_id in self.local_files.value:
            key = project_key(project_id)
            if key not in seen:
                ids.append(project_id)
                seen.add(key)
        return ids

    # --- Store Observers ---

    def _on_stage_change(self, stage: RefreshStage) -> None:
        bridge = self.local_files
        if stage is RefreshStage.LOADING:
            text = "Refreshing local files..." if bridge.has_loaded else "Loading local files..."
        elif stage is RefreshStage.READY and bridge.is_stale:
            text = f"Showing cached local files (refresh failed: {bridge.last_error})"
        elif stage is RefreshStage.READY:
            text = "Local files up to date"
        elif bridge.last_error is not None:
            text = f"Local files unavailable: {bridge.last_error}"
        else:
            text = "Local files not loaded"
        self.status_text.set(text)

    # --- Event Handlers ---

    async def _handle_project_select(self, payload: EventPayload) -> None:
        """Handle project selection events; a missing id clears the selection."""
        project_id = payload.get("project_id")
        if project_id is None:
            self.selection.clear()
        else:
            self.selection.select(project_id)

    async def _handle_project_clear(self, payload: EventPayload) -> None:
        self.selection.clear()

    async def _handle_cloud_metadata_replace(self, payload: EventPayload) -> None:
        """Handle a full cloud metadata push."""
        records = payload.get("records")
        if records is None:
            logger.warning("Ignoring cloud metadata event without records")
            return
        try:
            self.cloud.replace_all(records)
        except MalformedCloudData as exc:
            logger.warning(f"Rejected cloud metadata push, keeping previous records: {exc}")
            self.status_text.set("Cloud metadata rejected")

    async def _handle_status_text(self, payload: EventPayload) -> None:
        """Handle status text updates."""
        text = payload.get("text")
        if text:
            self.status_text.set(str(text))
