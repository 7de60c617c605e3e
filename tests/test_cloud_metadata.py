"""Tests for the cloud metadata store."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from splatcad.shared.domain.projects import (
    CloudFetchError,
    CloudMetadataStore,
    CloudProjectRecord,
    MalformedCloudData,
)

from helpers import cloud_wire, file_wire


def test_replace_all_parses_wire_records(cloud_records):
    store = CloudMetadataStore()

    snapshot = store.replace_all(cloud_records)

    assert isinstance(snapshot, tuple)
    assert [record.name for record in store.value] == ["Proj1", "Proj2", "CloudOnly"]
    assert store.value[0].created_at == datetime(2023, 6, 1, 12, 0, tzinfo=timezone.utc)


def test_records_keep_cloud_files():
    store = CloudMetadataStore([cloud_wire(1, "P", cloudFiles={"/r.txt": file_wire("/r.txt", "rrr")})])
    assert store.find(1).cloud_files["/r.txt"].content_hash == "rrr"


def test_record_instances_are_stored_by_reference():
    record = CloudProjectRecord(id=5, name="Five", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
    store = CloudMetadataStore([record])
    assert store.find(5) is record


def test_records_are_immutable(cloud_records):
    store = CloudMetadataStore(cloud_records)
    with pytest.raises(ValidationError):
        store.value[0].name = "changed"


def test_invalid_records_leave_previous_sequence(cloud_records):
    store = CloudMetadataStore(cloud_records)
    before = store.value
    seen = []
    store.subscribe(seen.append)

    with pytest.raises(MalformedCloudData):
        store.replace_all([cloud_wire(1, "ok"), {"id": 2}])

    assert store.value is before
    assert len(seen) == 1


def test_duplicate_ids_are_rejected():
    store = CloudMetadataStore()
    with pytest.raises(MalformedCloudData, match="Duplicate"):
        store.replace_all([cloud_wire(1, "a"), cloud_wire("1", "b")])
    assert store.value == ()


def test_by_id_indexes_current_records(cloud_records):
    store = CloudMetadataStore(cloud_records)
    index = store.by_id()
    assert set(index) == {"1", "2", "3"}
    assert index["2"].name == "Proj2"
    assert store.find(99) is None


@pytest.mark.asyncio
async def test_reload_replaces_on_success(cloud_records):
    store = CloudMetadataStore()

    async def fetch():
        return cloud_records

    await store.reload(fetch)

    assert len(store.value) == 3


@pytest.mark.asyncio
async def test_failed_reload_keeps_stale_records(cloud_records):
    store = CloudMetadataStore(cloud_records)
    before = store.value

    async def fetch():
        raise ConnectionError("offline")

    with pytest.raises(CloudFetchError) as excinfo:
        await store.reload(fetch)

    assert isinstance(excinfo.value.__cause__, ConnectionError)
    assert store.value is before


def test_non_sequence_payload_is_malformed(cloud_records):
    store = CloudMetadataStore(cloud_records)
    before = store.value

    with pytest.raises(MalformedCloudData, match="NoneType"):
        store.replace_all(None)

    assert store.value is before


@pytest.mark.asyncio
async def test_reload_of_non_sequence_keeps_stale_records(cloud_records):
    store = CloudMetadataStore(cloud_records)
    before = store.value

    async def fetch():
        return None

    with pytest.raises(CloudFetchError):
        await store.reload(fetch)

    assert store.value is before
