"""
Domain event base classes and the event bus port.

Events are published after a command's writes succeed. Handlers are side
effects (audit log, metrics) and never influence the command's result.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Type

_ENVELOPE = ("event_id", "occurred_at", "aggregate_id", "event_type")


def _jsonable(value: Any) -> Any:
    if isinstance(value, (uuid.UUID, Enum)):
        return str(value.value if isinstance(value, Enum) else value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(item) for item in value]
    return value


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Something that happened to an account or a license.

    The envelope (id, time, aggregate id, type name) is fixed here.
    Subclasses call ``super().__init__(aggregate_id)`` and then assign
    their payload as plain attributes; ``to_dict`` picks those up.
    """

    event_id: uuid.UUID
    occurred_at: datetime
    aggregate_id: str
    event_type: str

    def __init__(self, aggregate_id: Any, occurred_at: Optional[datetime] = None):
        object.__setattr__(self, "event_id", uuid.uuid4())
        object.__setattr__(self, "occurred_at", occurred_at or datetime.now(timezone.utc))
        object.__setattr__(self, "aggregate_id", str(aggregate_id))
        object.__setattr__(self, "event_type", type(self).__name__)

    def payload(self) -> Dict[str, Any]:
        """Subclass attributes, JSON-ready."""
        return {
            name: _jsonable(value)
            for name, value in vars(self).items()
            if name not in _ENVELOPE and not name.startswith("_")
        }

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "aggregate_id": self.aggregate_id,
            "event_type": self.event_type,
        }
        data.update(self.payload())
        return data


class EventHandler(ABC):
    """Side effect run for every published event it is subscribed to."""

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        raise NotImplementedError


class EventBus(ABC):
    """Port for publishing domain events."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """Deliver ``event`` to every handler subscribed to its exact type."""
        raise NotImplementedError

    @abstractmethod
    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        raise NotImplementedError

    @abstractmethod
    def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        raise NotImplementedError
