"""Data models for the boomtrade gateway client."""

from boomtrade.models.account import Account, Portfolio, Position
from boomtrade.models.events import SessionEvent
from boomtrade.models.market_data import MarketQuote, OptionChain, OptionContract, format_expiry
from boomtrade.models.orders import (
    OpenOrder,
    OptionOrder,
    OptionRight,
    OrderRequest,
    OrderResponse,
    OrderSide,
    OrderType,
    StockOrder,
    TimeInForce,
)
from boomtrade.models.session import ConnectionConfig, Credentials, GatewayStatus, SessionState

__all__ = [
    "Account",
    "Portfolio",
    "Position",
    "SessionEvent",
    "MarketQuote",
    "OptionChain",
    "OptionContract",
    "format_expiry",
    "OpenOrder",
    "OptionOrder",
    "OptionRight",
    "OrderRequest",
    "OrderResponse",
    "OrderSide",
    "OrderType",
    "StockOrder",
    "TimeInForce",
    "ConnectionConfig",
    "Credentials",
    "GatewayStatus",
    "SessionState",
]
