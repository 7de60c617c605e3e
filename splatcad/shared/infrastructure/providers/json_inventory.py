"""Local data provider backed by an inventory file.

The local indexing process writes its full inventory as JSON::

    {"<project id>": {"<file path>": {"path": ..., "name": ...,
                                      "updatedAt": ..., "contentHash": ...}}}
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Union

from splatcad.shared.domain.projects.errors import MalformedResponse, ProviderUnavailable

logger = logging.getLogger(__name__)


def decode_json_payload(raw: Union[str, bytes], source: str) -> Any:
    """Decode a provider reply, mapping decode failures to ``MalformedResponse``."""
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedResponse(f"{source} did not return valid JSON: {exc}") from exc


class JsonInventoryProvider:
    """Reads the inventory file off the event loop on every request."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> bytes:
        return self.path.read_bytes()

    async def fetch_all_local_files(self) -> Any:
        loop = asyncio.get_running_loop()
        try:
            raw = await loop.run_in_executor(None, self._read)
        except OSError as exc:
            raise ProviderUnavailable(f"Cannot read local inventory {self.path}: {exc}") from exc

        logger.debug(f"Read {len(raw)} bytes of local inventory from {self.path}")
        return decode_json_payload(raw, str(self.path))

    def __repr__(self) -> str:
        return f"JsonInventoryProvider({str(self.path)!r})"
