"""Fake local providers and record builders used across the tests."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterable, List


def file_wire(path: str, content_hash: str = "aaa", updated: str = "2024-01-01T00:00:00Z") -> Dict[str, Any]:
    """A local file record as the local helper sends it."""
    return {
        "path": path,
        "name": path.rsplit("/", 1)[-1],
        "updatedAt": updated,
        "contentHash": content_hash,
    }


def cloud_wire(project_id: Any, name: str, **extra: Any) -> Dict[str, Any]:
    """A cloud project record as the cloud service sends it."""
    record = {"id": project_id, "name": name, "createdAt": "2023-06-01T12:00:00Z"}
    record.update(extra)
    return record


async def settle(rounds: int = 10) -> None:
    """Let scheduled tasks run up to their next real suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class SequenceProvider:
    """Returns (or raises) the given outcomes in order, one per call."""

    def __init__(self, outcomes: Iterable[Any]):
        self.outcomes: List[Any] = list(outcomes)
        self.calls = 0

    async def fetch_all_local_files(self) -> Any:
        outcome = self.outcomes[min(self.calls, len(self.outcomes) - 1)]
        self.calls += 1
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class ControlledProvider:
    """Each call blocks until the test resolves or fails it by call index."""

    def __init__(self) -> None:
        self.calls = 0
        self._replies: List[asyncio.Future] = []

    async def fetch_all_local_files(self) -> Any:
        self.calls += 1
        reply = asyncio.get_running_loop().create_future()
        self._replies.append(reply)
        return await reply

    def resolve(self, index: int, value: Any) -> None:
        self._replies[index].set_result(value)

    def fail(self, index: int, exc: BaseException) -> None:
        self._replies[index].set_exception(exc)


