"""Shared fixtures."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest

from splatcad.shared.core.configuration import ENV_OVERRIDES

from helpers import cloud_wire, file_wire


@pytest.fixture
def clean_env(monkeypatch):
    """Remove configuration environment overrides for the test."""
    for key in ENV_OVERRIDES:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def inventory() -> Dict[Any, Any]:
    return {
        1: {"/a.txt": file_wire("/a.txt", "aaa")},
        2: {"/b.txt": file_wire("/b.txt", "bbb"), "/c.txt": file_wire("/c.txt", "ccc")},
    }


@pytest.fixture
def cloud_records() -> List[Dict[str, Any]]:
    return [
        cloud_wire(1, "Proj1", description="first"),
        cloud_wire(2, "Proj2"),
        cloud_wire(3, "CloudOnly"),
    ]
