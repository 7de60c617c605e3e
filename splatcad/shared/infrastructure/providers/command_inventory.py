"""Local data provider running an out-of-process helper.

The helper prints the full inventory as JSON on stdout and exits 0.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Sequence

from splatcad.shared.domain.projects.errors import ProviderUnavailable

from .json_inventory import decode_json_payload

logger = logging.getLogger(__name__)


class CommandInventoryProvider:
    """Runs ``argv`` once per request and parses its output."""

    def __init__(self, argv: Sequence[str], cwd: Optional[str] = None):
        if not argv:
            raise ValueError("CommandInventoryProvider needs a command to run")
        self.argv = list(argv)
        self.cwd = cwd

    async def fetch_all_local_files(self) -> Any:
        try:
            process = await asyncio.create_subprocess_exec(
                *self.argv,
                cwd=self.cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ProviderUnavailable(f"Cannot start local provider {self.argv[0]!r}: {exc}") from exc

        try:
            stdout, stderr = await process.communicate()
        except BaseException:
            # Cancelled request: the helper must not outlive it
            if process.returncode is None:
                logger.debug(f"Killing local provider {self.argv[0]!r} (pid {process.pid})")
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()
            raise

        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise ProviderUnavailable(
                f"Local provider {self.argv[0]!r} exited with status {process.returncode}"
                + (f": {detail}" if detail else "")
            )

        logger.debug(f"Local provider {self.argv[0]!r} returned {len(stdout)} bytes")
        return decode_json_payload(stdout, self.argv[0])
