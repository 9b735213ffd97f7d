"""Order construction and validation from raw user input.

Turns the text and selections a front-end collects (symbol field, quantity
field, order-type picker, price fields, buy/sell toggle) into a typed order.
Invalid input is reported as ValidationError with the offending value; no
defaults are guessed and nothing is corrected.
"""
import logging
import math

from boomtrade.core.errors import ValidationError
from boomtrade.models import (
    OptionOrder,
    OptionRight,
    OrderSide,
    OrderType,
    StockOrder,
    TimeInForce,
)
from boomtrade.models.market_data import parse_expiry

logger = logging.getLogger(__name__)

_SIDE_ALIASES = {
    "buy": OrderSide.BUY,
    "sell": OrderSide.SELL,
    "buy to open": OrderSide.BUY,
    "sell to close": OrderSide.SELL,
}


def normalize_symbol(symbol: str) -> str:
    """Strip and upper-case a ticker, rejecting blanks."""
    if not isinstance(symbol, str) or not symbol.strip():
        raise ValidationError("symbol", f"must not be empty, got {symbol!r}")
    return symbol.strip().upper()


def parse_quantity(text: str | int) -> int:
    """Parse a positive whole-number quantity."""
    if isinstance(text, bool):
        raise ValidationError("quantity", f"must be a positive integer, got {text!r}")
    if isinstance(text, int):
        value = text
    else:
        try:
            value = int(str(text).strip())
        except ValueError:
            raise ValidationError("quantity", f"must be a positive integer, got {text!r}") from None
    if value <= 0:
        raise ValidationError("quantity", f"must be a positive integer, got {text!r}")
    return value


def parse_price(text: str | float | None, field: str) -> float:
    """Parse a required positive price.

    Args:
        text: Raw price input
        field: Field name used in the error message

    Raises:
        ValidationError: If missing, non-numeric, non-finite or not positive
    """
    if text is None or (isinstance(text, str) and not text.strip()):
        raise ValidationError(field, "is required for this order type")
    if isinstance(text, bool):
        raise ValidationError(field, f"must be a positive number, got {text!r}")
    try:
        value = float(text.strip() if isinstance(text, str) else text)
    except (TypeError, ValueError):
        raise ValidationError(field, f"must be a positive number, got {text!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(field, f"must be a positive number, got {text!r}")
    return value


def parse_order_type(value: OrderType | str) -> OrderType:
    """Accept an OrderType, its wire code ("STP_LMT") or display name ("Stop Limit")."""
    if isinstance(value, OrderType):
        return value
    key = str(value).strip().lower()
    for order_type in OrderType:
        if key in (order_type.value.lower(), order_type.display_name.lower()):
            return order_type
    raise ValidationError("order type", f"unknown order type {value!r}")


def parse_time_in_force(value: TimeInForce | str) -> TimeInForce:
    """Accept a TimeInForce, its wire code ("GTC") or display name ("Good Till Canceled")."""
    if isinstance(value, TimeInForce):
        return value
    key = str(value).strip().lower()
    for tif in TimeInForce:
        if key in (tif.value.lower(), tif.display_name.lower()):
            return tif
    raise ValidationError("time in force", f"unknown time in force {value!r}")


def parse_side(value: OrderSide | str | bool) -> OrderSide:
    """Accept BUY/SELL, the option wording "Buy to Open"/"Sell to Close", or a buy toggle (True = BUY)."""
    if isinstance(value, OrderSide):
        return value
    if isinstance(value, bool):
        return OrderSide.from_flag(value)
    side = _SIDE_ALIASES.get(str(value).strip().lower())
    if side is None:
        raise ValidationError("side", f"must be BUY or SELL, got {value!r}")
    return side


def build_stock_order(
    symbol: str,
    quantity: str | int,
    order_type: OrderType | str,
    side: OrderSide | str | bool,
    limit_price: str | float | None = None,
    stop_price: str | float | None = None,
    time_in_force: TimeInForce | str = TimeInForce.DAY,
) -> StockOrder:
    """Build a validated stock order.

    Prices the order type does not use are ignored.

    Args:
        symbol: Ticker text
        quantity: Quantity text
        order_type: Order type selection
        side: Buy/sell selection
        limit_price: Limit price text (LMT, STP_LMT, LIT)
        stop_price: Stop or trail price text (STP, STP_LMT, TRAIL)
        time_in_force: Time in force selection

    Returns:
        StockOrder ready for submission

    Raises:
        ValidationError: On any malformed input
    """
    parsed_type = parse_order_type(order_type)
    order = StockOrder(
        symbol=normalize_symbol(symbol),
        quantity=parse_quantity(quantity),
        order_type=parsed_type,
        side=parse_side(side),
        limit_price=parse_price(limit_price, "limit price") if parsed_type.requires_limit_price else None,
        stop_price=parse_price(stop_price, "stop price") if parsed_type.requires_stop_price else None,
        time_in_force=parse_time_in_force(time_in_force),
    )
    logger.debug(f"Built stock order: {order}")
    return order


def build_option_order(
    symbol: str,
    expiry: str,
    strike: float | str,
    is_call: bool,
    quantity: str | int,
    side: OrderSide | str | bool,
    order_type: OrderType | str = OrderType.LIMIT,
    limit_price: str | float | None = None,
) -> OptionOrder:
    """Build a validated single-leg option order.

    Args:
        symbol: Underlying ticker text
        expiry: YYYYMMDD expiry code
        strike: Strike of the selected contract
        is_call: Call/put toggle; True selects the call
        quantity: Contract quantity text
        side: Buy/sell selection ("Buy to Open"/"Sell to Close" accepted)
        order_type: Order type selection (stop-class types are not supported)
        limit_price: Limit price text

    Returns:
        OptionOrder ready for submission

    Raises:
        ValidationError: On any malformed input
    """
    parsed_type = parse_order_type(order_type)
    if parsed_type.requires_stop_price:
        raise ValidationError("order type", f"{parsed_type.value} is not supported for option orders")

    order = OptionOrder(
        symbol=normalize_symbol(symbol),
        expiry=parse_expiry_code(expiry),
        strike=parse_price(strike, "strike"),
        right=OptionRight.from_flag(bool(is_call)),
        quantity=parse_quantity(quantity),
        order_type=parsed_type,
        side=parse_side(side),
        limit_price=parse_price(limit_price, "limit price") if parsed_type.requires_limit_price else None,
    )
    logger.debug(f"Built option order: {order}")
    return order


def parse_expiry_code(expiry: str) -> str:
    """Validate an 8-digit YYYYMMDD expiry code."""
    code = str(expiry).strip()
    if parse_expiry(code) is None:
        raise ValidationError("expiry", f"must be a YYYYMMDD date, got {expiry!r}")
    return code
