"""Session and connection models."""
from dataclasses import dataclass, field
from enum import Enum


class SessionState(Enum):
    """Connection/authentication state of a gateway session."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    AUTHENTICATING = "authenticating"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class Credentials:
    """Login for the cloud gateway. Never persisted."""
    username: str
    password: str = field(repr=False)
    account: str | None = None


@dataclass(frozen=True)
class ConnectionConfig:
    """TWS socket the local gateway should attach to."""
    host: str = "127.0.0.1"
    port: int = 7497      # 7497 paper, 7496 live
    client_id: int = 1

    @property
    def is_paper(self) -> bool:
        return self.port == 7497


@dataclass(frozen=True)
class GatewayStatus:
    """Status reply of the start-session endpoints."""
    status: str           # "ready", "connected", "pending", ...
    message: str | None = None
