"""Reactive client state.

Architecture:
- ProjectState: project stores, current project view, sync status
- Store: explicitly constructed session context owning the state
"""

from .project_state import ProjectState
from .store import Store, build_local_provider

__all__ = ["ProjectState", "Store", "build_local_provider"]
