"""Order models for the gateway client."""
import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from boomtrade.core.errors import ValidationError


class OrderType(Enum):
    """Order type codes accepted by the gateway."""
    MARKET = "MKT"
    LIMIT = "LMT"
    STOP = "STP"
    STOP_LIMIT = "STP_LMT"
    TRAILING = "TRAIL"
    MARKET_IF_TOUCHED = "MIT"
    LIMIT_IF_TOUCHED = "LIT"

    @property
    def display_name(self) -> str:
        return _ORDER_TYPE_NAMES[self]

    @property
    def requires_limit_price(self) -> bool:
        return self in (OrderType.LIMIT, OrderType.STOP_LIMIT, OrderType.LIMIT_IF_TOUCHED)

    @property
    def requires_stop_price(self) -> bool:
        """Stop-class types carry a stop (or trail amount) price."""
        return self in (OrderType.STOP, OrderType.STOP_LIMIT, OrderType.TRAILING)


_ORDER_TYPE_NAMES = {
    OrderType.MARKET: "Market",
    OrderType.LIMIT: "Limit",
    OrderType.STOP: "Stop",
    OrderType.STOP_LIMIT: "Stop Limit",
    OrderType.TRAILING: "Trailing Stop",
    OrderType.MARKET_IF_TOUCHED: "Market if Touched",
    OrderType.LIMIT_IF_TOUCHED: "Limit if Touched",
}


class TimeInForce(Enum):
    """Order lifetime policy."""
    DAY = "DAY"
    GOOD_TILL_CANCELED = "GTC"
    IMMEDIATE_OR_CANCEL = "IOC"
    FILL_OR_KILL = "FOK"

    @property
    def display_name(self) -> str:
        return _TIME_IN_FORCE_NAMES[self]


_TIME_IN_FORCE_NAMES = {
    TimeInForce.DAY: "Day",
    TimeInForce.GOOD_TILL_CANCELED: "Good Till Canceled",
    TimeInForce.IMMEDIATE_OR_CANCEL: "Immediate or Cancel",
    TimeInForce.FILL_OR_KILL: "Fill or Kill",
}


class OrderSide(Enum):
    """Order side. Option "Buy to Open"/"Sell to Close" map onto these."""
    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def from_flag(cls, is_buy: bool) -> "OrderSide":
        return cls.BUY if is_buy else cls.SELL


class OptionRight(Enum):
    """Option contract class."""
    CALL = "C"
    PUT = "P"

    @classmethod
    def from_flag(cls, is_call: bool) -> "OptionRight":
        return cls.CALL if is_call else cls.PUT


def _is_positive_price(value: float | None) -> bool:
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def _check_order_invariants(
    symbol: str,
    quantity: int,
    order_type: OrderType,
    limit_price: float | None,
    stop_price: float | None,
) -> None:
    if not isinstance(symbol, str) or not symbol or symbol != symbol.strip().upper():
        raise ValidationError("symbol", f"must be a non-empty upper-case ticker without spaces, got {symbol!r}")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("quantity", f"must be a positive integer, got {quantity!r}")
    if order_type.requires_limit_price and not _is_positive_price(limit_price):
        raise ValidationError("limit price", f"required and positive for {order_type.value} orders")
    if order_type.requires_stop_price and not _is_positive_price(stop_price):
        raise ValidationError("stop price", f"required and positive for {order_type.value} orders")


@dataclass(frozen=True)
class StockOrder:
    """Stock order ready for submission."""
    kind: ClassVar[str] = "stock"

    symbol: str
    quantity: int
    order_type: OrderType
    side: OrderSide
    limit_price: float | None = None
    stop_price: float | None = None
    time_in_force: TimeInForce = TimeInForce.DAY

    def __post_init__(self):
        _check_order_invariants(
            self.symbol, self.quantity, self.order_type, self.limit_price, self.stop_price
        )


@dataclass(frozen=True)
class OptionOrder:
    """Single-leg option order ready for submission."""
    kind: ClassVar[str] = "option"

    symbol: str           # Underlying
    expiry: str           # YYYYMMDD
    strike: float
    right: OptionRight
    quantity: int
    order_type: OrderType
    side: OrderSide
    limit_price: float | None = None

    def __post_init__(self):
        if self.order_type.requires_stop_price:
            raise ValidationError("order type", f"{self.order_type.value} is not supported for option orders")
        if not _is_positive_price(self.strike):
            raise ValidationError("strike", f"must be a positive finite number, got {self.strike!r}")
        _check_order_invariants(self.symbol, self.quantity, self.order_type, self.limit_price, None)


OrderRequest = Union[StockOrder, OptionOrder]


@dataclass(frozen=True)
class OrderResponse:
    """Gateway acknowledgement of an order submission."""
    order_id: str
    status: str
    message: str | None = None

    @property
    def is_rejected(self) -> bool:
        return self.status.lower() in ("rejected", "error")


@dataclass(frozen=True)
class OpenOrder:
    """Working order reported by the local gateway."""
    order_id: str
    symbol: str
    side: str
    quantity: int
    order_type: str
    status: str
    limit_price: float | None = None
    stop_price: float | None = None
    filled: int | None = None
