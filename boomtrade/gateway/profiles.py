"""Backend profiles describing the cloud and local gateway contracts."""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping
from urllib.parse import quote

from boomtrade.core.errors import UnsupportedOperationError

# Logical operations
START = "start"
END = "end"
ACCOUNT = "account"
POSITIONS = "positions"
QUOTE = "quote"
OPTION_SEARCH = "option_search"
OPTION_CHAIN = "option_chain"
STOCK_ORDER = "stock_order"
OPTION_ORDER = "option_order"
OPEN_ORDERS = "open_orders"

# How a profile starts a session
AUTHENTICATE = "authenticate"
CONNECT = "connect"

_SHARED_PATHS = {
    ACCOUNT: "/account",
    POSITIONS: "/positions",
    OPTION_SEARCH: "/options/search/{symbol}",
    OPTION_CHAIN: "/options/chain/{symbol}/{expiry}",
    STOCK_ORDER: "/order/stock",
    OPTION_ORDER: "/order/option",
}


@dataclass(frozen=True)
class BackendProfile:
    """Endpoint table and session-start behaviour of one gateway variant.

    Attributes:
        name: Variant name ("cloud" or "local")
        start_mode: AUTHENTICATE (credentials) or CONNECT (TWS socket)
        ready_status: Wire status that means the session is usable
        paths: Operation name -> path template
    """

    name: str
    start_mode: str
    ready_status: str
    paths: Mapping[str, str] = field(default_factory=dict)

    def supports(self, operation: str) -> bool:
        return operation in self.paths

    def path(self, operation: str, **params: str) -> str:
        """Resolve the request path for an operation.

        Args:
            operation: Logical operation name
            **params: Path parameters (symbol, expiry); URL-quoted

        Raises:
            UnsupportedOperationError: If this variant has no such endpoint
        """
        if operation not in self.paths:
            raise UnsupportedOperationError(
                f"Operation '{operation}' is not available on the {self.name} gateway"
            )
        quoted = {key: quote(str(value), safe="") for key, value in params.items()}
        return self.paths[operation].format(**quoted)


CLOUD_PROFILE = BackendProfile(
    name="cloud",
    start_mode=AUTHENTICATE,
    ready_status="ready",
    paths=MappingProxyType({
        **_SHARED_PATHS,
        START: "/gateway/start",
        QUOTE: "/marketdata/{symbol}",
    }),
)

LOCAL_PROFILE = BackendProfile(
    name="local",
    start_mode=CONNECT,
    ready_status="connected",
    paths=MappingProxyType({
        **_SHARED_PATHS,
        START: "/connect",
        END: "/disconnect",
        QUOTE: "/market-data/{symbol}",
        OPEN_ORDERS: "/orders",
    }),
)

PROFILES = {
    CLOUD_PROFILE.name: CLOUD_PROFILE,
    LOCAL_PROFILE.name: LOCAL_PROFILE,
}


def get_profile(name: str) -> BackendProfile:
    """Look up a profile by variant name."""
    try:
        return PROFILES[name]
    except KeyError:
        raise ValueError(f"Unknown gateway variant: {name}") from None
