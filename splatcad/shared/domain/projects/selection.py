"""Selection Store: which project is active, if any."""

import logging
from typing import Callable, Optional

from splatcad.shared.core.reactive import Readable, Subscription, Writable

from .models import ProjectId

logger = logging.getLogger(__name__)


class SelectionStore(Readable[Optional[ProjectId]]):
    """Holds the selected project id or ``None``.

    Ids are not checked against known projects; an unknown id simply
    resolves to an unavailable current project.
    """

    def __init__(self, name: str = "selected_project_id") -> None:
        self.name = name
        self._store: Writable[Optional[ProjectId]] = Writable(None, name=name)

    @property
    def value(self) -> Optional[ProjectId]:
        return self._store.value

    selected = value

    def subscribe(self, callback: Callable[[Optional[ProjectId]], None]) -> Subscription:
        return self._store.subscribe(callback)

    def select(self, project_id: ProjectId) -> None:
        logger.debug(f"Selecting project {project_id!r}")
        self._store.set(project_id)

    def clear(self) -> None:
        logger.debug("Clearing project selection")
        self._store.set(None)
