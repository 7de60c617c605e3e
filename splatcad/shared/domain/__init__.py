"""
Shared Domain Module
====================

Business logic for merging cloud project metadata with local file state.
"""

from splatcad.shared.domain.projects import (
    CloudMetadataStore,
    CurrentProjectView,
    LocalFilesBridge,
    SelectionStore,
)

__all__ = [
    "CloudMetadataStore",
    "CurrentProjectView",
    "LocalFilesBridge",
    "SelectionStore",
]
