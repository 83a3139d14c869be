"""Application events published to the notification collaborator."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


class EventType(str, Enum):
    """Kinds of application events."""

    STATUS_CHANGED = "status_changed"
    NTB_CALCULATED = "ntb_calculated"
    ELIGIBILITY_VERIFIED = "eligibility_verified"


@dataclass(frozen=True)
class ApplicationEvent:
    """A fire-and-forget notification about an application."""

    event_type: EventType
    application_id: UUID
    payload: dict[str, Any] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "event_id": str(self.id),
            "event": self.event_type.value,
            "application_id": str(self.application_id),
            "payload": self.payload,
            "occurred_at": self.occurred_at.isoformat() + "Z",
        }
