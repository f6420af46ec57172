"""
Observability record for a reconciliation pass.

ReconcileState collects what operators should see about a pass: events
(normal or warning) and the cluster phase. It is pass-scoped; the caller
decides where to publish it.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Event severity."""

    NORMAL = "Normal"
    WARNING = "Warning"


class ClusterPhase(str, Enum):
    """Phase of the cluster as seen by the controller."""

    READY = "Ready"
    MIGRATING_DATA = "MigratingData"


EVENT_REASON_UNHEALTHY = "Unhealthy"


@dataclass
class Event:
    """
    An observability event raised during a pass.

    Attributes:
        type: Normal or Warning.
        reason: Short machine-readable reason (e.g. "Unhealthy").
        message: Human-readable description.
        timestamp: When the event was recorded.
    """

    type: EventType
    reason: str
    message: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON serialization."""
        d = asdict(self)
        d["type"] = self.type.value
        return d


@dataclass
class ReconcileState:
    """Events and phase recorded during one reconciliation pass."""

    phase: ClusterPhase = ClusterPhase.READY
    events: list[Event] = field(default_factory=list)

    def add_event(self, event_type: EventType, reason: str, message: str) -> Event:
        """Record an event, logging warnings as they happen."""
        event = Event(type=event_type, reason=reason, message=message)
        self.events.append(event)
        if event_type == EventType.WARNING:
            logger.warning(f"{reason}: {message}")
        else:
            logger.info(f"{reason}: {message}")
        return event

    def update_migrating(self) -> None:
        """Flag the cluster as waiting for shards to move off leaving nodes."""
        self.phase = ClusterPhase.MIGRATING_DATA

    def warnings(self) -> list[Event]:
        return [e for e in self.events if e.type == EventType.WARNING]
