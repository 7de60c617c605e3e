"""Tests for the local provider and cloud snapshot adapters."""

import asyncio
import json
import os
import sys

import pytest

from splatcad.shared.domain.projects import (
    CloudFetchError,
    LocalFilesBridge,
    MalformedCloudData,
    MalformedResponse,
    ProviderUnavailable,
)
from splatcad.shared.infrastructure.providers import (
    CommandInventoryProvider,
    JsonCloudSnapshot,
    JsonInventoryProvider,
)

from helpers import cloud_wire, file_wire


@pytest.mark.asyncio
async def test_json_inventory_feeds_the_bridge(tmp_path):
    path = tmp_path / "inventory.json"
    path.write_text(json.dumps({"1": {"/a.txt": file_wire("/a.txt")}}), encoding="utf-8")

    bridge = await LocalFilesBridge.create_loaded(JsonInventoryProvider(path))

    assert bridge.files_for(1)["/a.txt"].name == "a.txt"


@pytest.mark.asyncio
async def test_missing_inventory_is_unavailable(tmp_path):
    provider = JsonInventoryProvider(tmp_path / "absent.json")
    with pytest.raises(ProviderUnavailable):
        await provider.fetch_all_local_files()


@pytest.mark.asyncio
async def test_corrupt_inventory_is_malformed(tmp_path):
    path = tmp_path / "inventory.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(MalformedResponse):
        await JsonInventoryProvider(path).fetch_all_local_files()


@pytest.mark.asyncio
async def test_command_provider_parses_stdout():
    payload = json.dumps({"4": {"/d.txt": file_wire("/d.txt", "ddd")}})
    provider = CommandInventoryProvider([sys.executable, "-c", f"print({payload!r})"])

    reply = await provider.fetch_all_local_files()

    assert reply["4"]["/d.txt"]["contentHash"] == "ddd"


@pytest.mark.asyncio
async def test_command_provider_failure_exit_is_unavailable():
    provider = CommandInventoryProvider([sys.executable, "-c", "import sys; sys.stderr.write('db locked'); sys.exit(3)"])

    with pytest.raises(ProviderUnavailable, match="db locked"):
        await provider.fetch_all_local_files()


@pytest.mark.asyncio
async def test_command_provider_missing_executable_is_unavailable(tmp_path):
    provider = CommandInventoryProvider([str(tmp_path / "no-such-helper")])
    with pytest.raises(ProviderUnavailable):
        await provider.fetch_all_local_files()


@pytest.mark.asyncio
async def test_command_provider_garbage_output_is_malformed():
    provider = CommandInventoryProvider([sys.executable, "-c", "print('hello')"])
    with pytest.raises(MalformedResponse):
        await provider.fetch_all_local_files()


def test_command_provider_requires_a_command():
    with pytest.raises(ValueError):
        CommandInventoryProvider([])


@pytest.mark.asyncio
async def test_cloud_snapshot_accepts_list_or_wrapped(tmp_path):
    listed = tmp_path / "list.json"
    listed.write_text(json.dumps([cloud_wire(1, "A")]), encoding="utf-8")
    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text(json.dumps({"projects": [cloud_wire(2, "B")]}), encoding="utf-8")

    assert (await JsonCloudSnapshot(listed)())[0]["name"] == "A"
    assert (await JsonCloudSnapshot(wrapped)())[0]["name"] == "B"


@pytest.mark.asyncio
async def test_cloud_snapshot_errors(tmp_path):
    with pytest.raises(CloudFetchError):
        await JsonCloudSnapshot(tmp_path / "absent.json")()

    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"items": []}), encoding="utf-8")
    with pytest.raises(MalformedCloudData):
        await JsonCloudSnapshot(bad)()


@pytest.mark.asyncio
async def test_closing_the_bridge_kills_a_running_helper(tmp_path):
    pid_file = tmp_path / "helper.pid"
    script = f"import os, time; open({str(pid_file)!r}, 'w').write(str(os.getpid())); time.sleep(60)"
    bridge = LocalFilesBridge(CommandInventoryProvider([sys.executable, "-c", script]))
    waiter = asyncio.create_task(bridge.refresh())

    for _ in range(200):
        if pid_file.exists() and pid_file.read_text():
            break
        await asyncio.sleep(0.05)
    pid = int(pid_file.read_text())

    await bridge.close()

    with pytest.raises(ProcessLookupError):
        os.kill(pid, 0)
    with pytest.raises(asyncio.CancelledError):
        await waiter
