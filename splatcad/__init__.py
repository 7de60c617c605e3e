"""splatcad project state synchronization package."""

from .shared.core.event_bus import EventBus
from .shared.core.reactive import Readable, Writable, derived, get

__all__ = ["EventBus", "Readable", "Writable", "derived", "get"]
