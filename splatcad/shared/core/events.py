"""Canonical event definitions for splatcad project synchronization."""

from __future__ import annotations

import time
from typing import Any, Dict, List

from .event_bus import EventPayload

# Inbound: user intent and cloud data
TOPIC_PROJECT_SELECT = "project.select"
TOPIC_PROJECT_CLEAR = "project.clear"
TOPIC_CLOUD_METADATA_REPLACE = "cloud.metadata.replace"

# Outbound: local inventory refresh lifecycle
TOPIC_LOCAL_FILES_REFRESH_START = "local_files.refresh.start"
TOPIC_LOCAL_FILES_REFRESH_END = "local_files.refresh.end"
TOPIC_LOCAL_FILES_REFRESH_FAILED = "local_files.refresh.failed"

# Informational
TOPIC_STATUS_TEXT = "status.text"


def create_project_select_event(project_id: int | str) -> EventPayload:
    """Create a project selection event."""
    return {"project_id": project_id}


def create_project_clear_event() -> EventPayload:
    return {}


def create_cloud_metadata_replace_event(records: List[Dict[str, Any]]) -> EventPayload:
    """Create a cloud metadata replacement event.

    Args:
        records: Full sequence of cloud project records (wire format)
    """
    return {"records": records}


def create_refresh_start_event(generation: int, forced: bool = False) -> EventPayload:
    return {"generation": generation, "forced": forced, "ts": time.time()}


def create_refresh_end_event(generation: int, project_count: int) -> EventPayload:
    """Create a refresh completion event.

    Args:
        generation: Request generation that published its result
        project_count: Number of projects with local files after the refresh
    """
    return {
        "generation": generation,
        "project_count": project_count,
        "ts": time.time(),
    }


def create_refresh_failed_event(
    generation: int,
    error_kind: str,
    message: str,
    stale: bool,
) -> EventPayload:
    """Create a refresh failure event.

    Args:
        generation: Request generation that failed
        error_kind: Failure category reported by the bridge
        message: Human-readable error description
        stale: True when previously loaded data is still being shown
    """
    return {
        "generation": generation,
        "error_kind": error_kind,
        "message": message,
        "stale": stale,
        "ts": time.time(),
    }


def create_status_text_event(text: str) -> EventPayload:
    """Create a status text update event."""
    return {"text": text}
