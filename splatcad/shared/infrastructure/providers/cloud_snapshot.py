"""Cloud metadata read from an exported snapshot file.

Accepts either a list of project records or ``{"projects": [...]}``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, List, Union

from splatcad.shared.domain.projects.errors import CloudFetchError, MalformedCloudData

logger = logging.getLogger(__name__)


class JsonCloudSnapshot:
    """Async callable usable with ``CloudMetadataStore.reload``."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Any:
        with open(self.path, 'r', encoding='utf-8') as f:
            return json.load(f)

    async def __call__(self) -> List[Any]:
        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(None, self._load)
        except OSError as exc:
            raise CloudFetchError(f"Cannot read cloud snapshot {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise MalformedCloudData(f"Cloud snapshot {self.path} is not valid JSON: {exc}") from exc

        if isinstance(data, dict):
            data = data.get("projects")
        if not isinstance(data, list):
            raise MalformedCloudData(f"Cloud snapshot {self.path} has no project list")

        logger.debug(f"Loaded {len(data)} cloud record(s) from {self.path}")
        return data
