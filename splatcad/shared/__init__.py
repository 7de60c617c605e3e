"""
splatcad Shared Kernel
======================

Architecture:
- core: reactive stores, EventBus, configuration, logging
- domain: project synchronization (cloud metadata, local files, selection)
- infrastructure: adapters for the local data provider and cloud snapshots
"""

__all__ = []
