"""Session event model."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from boomtrade.models.session import SessionState


@dataclass(frozen=True)
class SessionEvent:
    """Emitted after every session state transition."""
    previous: SessionState
    current: SessionState
    reason: str | None = None          # Failure cause, set for FAILED
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def type(self) -> str:
        """Event type used for routing: the new state's value."""
        return self.current.value

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type,
            "previous": self.previous.value,
            "current": self.current.value,
            "reason": self.reason,
            "timestamp": self.timestamp.isoformat(),
        }
