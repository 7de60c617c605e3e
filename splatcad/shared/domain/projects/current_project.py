"""Current Project View.

Joins the selected id with the cloud records and the local inventory. The
join never performs I/O and never yields a half-filled project: either
both sides are present and a :class:`WholeProject` comes out, or the
result is an :class:`Unavailable` naming what is missing.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from splatcad.shared.core.reactive import Derived, Readable, Subscription

from .cloud_metadata import find_record
from .local_files import find_files
from .models import (
    NOT_SELECTED,
    CloudProjectRecord,
    CurrentProject,
    ProjectFileMapping,
    ProjectId,
    Unavailable,
    UnavailableReason,
    WholeProject,
)

logger = logging.getLogger(__name__)


def resolve_current_project(
    records: Iterable[CloudProjectRecord],
    local_mapping: ProjectFileMapping,
    selected_id: Optional[ProjectId],
) -> CurrentProject:
    """Merge both sources for ``selected_id``."""
    if selected_id is None:
        return NOT_SELECTED

    metadata = find_record(records, selected_id)
    files = find_files(local_mapping, selected_id)

    if metadata is None and files is None:
        return Unavailable(UnavailableReason.MISSING_BOTH, selected_id)
    if metadata is None:
        return Unavailable(UnavailableReason.MISSING_CLOUD, selected_id)
    if files is None:
        return Unavailable(UnavailableReason.MISSING_LOCAL, selected_id)
    return WholeProject(metadata=metadata, local_files=files)


class CurrentProjectView(Readable[CurrentProject]):
    """Read-only store tracking the merged current project."""

    def __init__(
        self,
        cloud_records: Readable,
        local_files: Readable,
        selection: Readable,
        name: str = "current_project",
    ) -> None:
        self.name = name
        self._derived: Derived[CurrentProject] = Derived(
            (cloud_records, local_files, selection),
            resolve_current_project,
            name=name,
        )

    @property
    def value(self) -> CurrentProject:
        return self._derived.value

    @property
    def is_available(self) -> bool:
        return isinstance(self.value, WholeProject)

    def subscribe(self, callback: Callable[[CurrentProject], None]) -> Subscription:
        return self._derived.subscribe(callback)

    def close(self) -> None:
        self._derived.close()
