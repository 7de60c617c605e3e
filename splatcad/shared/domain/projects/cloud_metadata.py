"""Cloud Metadata Store.

Holds the full sequence of cloud project records. The only mutation is a
wholesale replace; a refetch that fails keeps the previous records.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Tuple

from pydantic import ValidationError

from splatcad.shared.core.reactive import Readable, Subscription, Writable

from .errors import CloudFetchError, MalformedCloudData
from .models import CLOUD_RECORDS_ADAPTER, CloudProjectRecord, ProjectId, project_key

logger = logging.getLogger(__name__)

CloudRecords = Tuple[CloudProjectRecord, ...]
CloudFetch = Callable[[], Awaitable[Iterable[Any]]]


class CloudMetadataStore(Readable[CloudRecords]):
    """Reactive holder of every :class:`CloudProjectRecord` known to the client."""

    def __init__(self, records: Iterable[Any] = (), name: str = "cloud_metadata") -> None:
        self.name = name
        self._store: Writable[CloudRecords] = Writable(self._validate(records), name=name)

    @property
    def value(self) -> CloudRecords:
        return self._store.value

    def subscribe(self, callback: Callable[[CloudRecords], None]) -> Subscription:
        return self._store.subscribe(callback)

    def replace_all(self, records: Iterable[Any]) -> CloudRecords:
        """Swap in a new record sequence in one step.

        Args:
            records: Records or their wire-format dicts

        Returns:
            The stored immutable sequence

        Raises:
            MalformedCloudData: If any record is invalid; nothing is replaced
        """
        snapshot = self._validate(records)
        self._store.set(snapshot)
        logger.info(f"Cloud metadata replaced: {len(snapshot)} project(s)")
        return snapshot

    async def reload(self, fetch: CloudFetch) -> CloudRecords:
        """Fetch the full record sequence and replace the store with it.

        Raises:
            CloudFetchError: If the fetch or validation fails; the current
                records stay in place
        """
        try:
            fetched = await fetch()
        except CloudFetchError:
            logger.warning(f"Cloud metadata fetch failed, keeping {len(self.value)} record(s)")
            raise
        except Exception as exc:
            logger.warning(f"Cloud metadata fetch failed, keeping {len(self.value)} record(s): {exc}")
            raise CloudFetchError(f"Cloud metadata fetch failed: {exc}") from exc
        return self.replace_all(fetched)

    def find(self, project_id: ProjectId) -> Optional[CloudProjectRecord]:
        return find_record(self.value, project_id)

    def by_id(self) -> Dict[str, CloudProjectRecord]:
        """Index the current records by canonical project key."""
        return {project_key(record.id): record for record in self.value}

    @staticmethod
    def _validate(records: Iterable[Any]) -> CloudRecords:
        try:
            parsed = CLOUD_RECORDS_ADAPTER.validate_python(list(records))
        except TypeError as exc:
            raise MalformedCloudData(f"Cloud project records must be a sequence, got {type(records).__name__}") from exc
        except ValidationError as exc:
            raise MalformedCloudData(f"Invalid cloud project records: {exc}") from exc

        seen = set()
        for record in parsed:
            key = project_key(record.id)
            if key in seen:
                raise MalformedCloudData(f"Duplicate cloud project id {record.id!r}")
            seen.add(key)
        return tuple(parsed)


def find_record(records: Iterable[CloudProjectRecord], project_id: ProjectId) -> Optional[CloudProjectRecord]:
    key = project_key(project_id)
    for record in records:
        if project_key(record.id) == key:
            return record
    return None
