"""
Shared Core Module
==================

Reactive stores, event system and configuration.
"""

# Event System
from .event_bus import EventBus, EventPayload
from . import events

# Reactive primitives
from .reactive import Derived, Readable, ReadonlyView, Subscription, Writable, derived, get

# Configuration
from .configuration import (
    CloudConfig,
    ConfigManager,
    LocalProviderConfig,
    LoggingConfig,
    SystemConfig,
    ValidationLevel,
)
from .logging_setup import configure_logging

__all__ = [
    # Event System
    "EventBus",
    "EventPayload",
    "events",
    # Reactive
    "Readable",
    "Writable",
    "ReadonlyView",
    "Derived",
    "Subscription",
    "derived",
    "get",
    # Configuration
    "ConfigManager",
    "SystemConfig",
    "LocalProviderConfig",
    "CloudConfig",
    "LoggingConfig",
    "ValidationLevel",
    "configure_logging",
]
