"""Wire codec between domain models and the gateway JSON schema.

Field names follow the gateway contract: most payloads are snake_case,
while account, order acknowledgement and connect payloads use camelCase
keys. Optional fields are omitted when unset on encode, and missing, null
or empty-string values decode to None.
"""
from typing import Any, Callable

from boomtrade.core.errors import DecodeError
from boomtrade.models import (
    Account,
    ConnectionConfig,
    Credentials,
    GatewayStatus,
    MarketQuote,
    OpenOrder,
    OptionChain,
    OptionContract,
    OptionOrder,
    OrderResponse,
    Portfolio,
    Position,
    StockOrder,
)

_GREEKS = ("delta", "gamma", "theta", "vega")


# =========================================================================
# Field helpers
# =========================================================================

def _mapping(payload: Any, what: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise DecodeError(f"Expected JSON object for {what}, got {type(payload).__name__}")
    return payload


def _sequence(payload: Any, what: str) -> list[Any]:
    if not isinstance(payload, list):
        raise DecodeError(f"Expected JSON array for {what}, got {type(payload).__name__}")
    return payload


def _missing(payload: dict[str, Any], key: str) -> bool:
    value = payload.get(key)
    return value is None or (isinstance(value, str) and not value.strip())


def _str(payload: dict[str, Any], key: str, what: str) -> str:
    if _missing(payload, key):
        raise DecodeError(f"Missing field '{key}' in {what}")
    value = payload[key]
    # Identifiers sometimes arrive as numbers
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        raise DecodeError(f"Field '{key}' in {what} must be a string, got {value!r}")
    return value


def _float(payload: dict[str, Any], key: str, what: str) -> float:
    if key not in payload or payload[key] is None:
        raise DecodeError(f"Missing field '{key}' in {what}")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"Field '{key}' in {what} must be a number, got {value!r}")
    return float(value)


def _int(payload: dict[str, Any], key: str, what: str) -> int:
    value = _float(payload, key, what)
    if not value.is_integer():
        raise DecodeError(f"Field '{key}' in {what} must be an integer, got {payload[key]!r}")
    return int(value)


def _optional_str(payload: dict[str, Any], key: str, what: str) -> str | None:
    if _missing(payload, key):
        return None
    return _str(payload, key, what)


def _optional_float(payload: dict[str, Any], key: str, what: str) -> float | None:
    if _missing(payload, key):
        return None
    return _float(payload, key, what)


def _optional_int(payload: dict[str, Any], key: str, what: str) -> int | None:
    if _missing(payload, key):
        return None
    return _int(payload, key, what)


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop unset optional fields."""
    return {k: v for k, v in data.items() if v is not None}


# =========================================================================
# Session
# =========================================================================

def encode_credentials(credentials: Credentials) -> dict[str, Any]:
    return _compact({
        "username": credentials.username,
        "password": credentials.password,
        "account": credentials.account,
    })


def encode_connection_config(config: ConnectionConfig) -> dict[str, Any]:
    return {
        "host": config.host,
        "port": config.port,
        "clientId": config.client_id,
    }


def decode_gateway_status(payload: Any) -> GatewayStatus:
    data = _mapping(payload, "gateway status")
    return GatewayStatus(
        status=_str(data, "status", "gateway status"),
        message=_optional_str(data, "message", "gateway status"),
    )


# =========================================================================
# Account & positions
# =========================================================================

def decode_account(payload: Any) -> Account:
    data = _mapping(payload, "account")
    return Account(
        id=_str(data, "id", "account"),
        account_type=_str(data, "accountType", "account"),
        currency=_str(data, "currency", "account"),
    )


def encode_account(account: Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "accountType": account.account_type,
        "currency": account.currency,
    }


def decode_position(payload: Any) -> Position:
    data = _mapping(payload, "position")
    return Position(
        symbol=_str(data, "symbol", "position"),
        quantity=_int(data, "quantity", "position"),
        average_price=_float(data, "average_price", "position"),
        current_price=_float(data, "current_price", "position"),
        unrealized_pnl=_float(data, "unrealized_pnl", "position"),
        realized_pnl=_float(data, "realized_pnl", "position"),
    )


def decode_positions(payload: Any) -> list[Position]:
    return [decode_position(item) for item in _sequence(payload, "positions")]


def encode_position(position: Position) -> dict[str, Any]:
    return {
        "symbol": position.symbol,
        "quantity": position.quantity,
        "average_price": position.average_price,
        "current_price": position.current_price,
        "unrealized_pnl": position.unrealized_pnl,
        "realized_pnl": position.realized_pnl,
    }


def encode_portfolio(portfolio: Portfolio) -> dict[str, Any]:
    return {
        "positions": [encode_position(p) for p in portfolio.positions],
        "total_value": portfolio.total_value,
        "unrealized_pnl": portfolio.unrealized_pnl,
        "realized_pnl": portfolio.realized_pnl,
    }


# =========================================================================
# Market data & options
# =========================================================================

def decode_market_quote(payload: Any) -> MarketQuote:
    data = _mapping(payload, "market data")
    return MarketQuote(
        symbol=_str(data, "symbol", "market data"),
        last=_float(data, "last", "market data"),
        bid=_float(data, "bid", "market data"),
        ask=_float(data, "ask", "market data"),
        volume=_int(data, "volume", "market data"),
        open=_float(data, "open", "market data"),
        high=_float(data, "high", "market data"),
        low=_float(data, "low", "market data"),
        close=_float(data, "close", "market data"),
    )


def encode_market_quote(quote: MarketQuote) -> dict[str, Any]:
    return {
        "symbol": quote.symbol,
        "last": quote.last,
        "bid": quote.bid,
        "ask": quote.ask,
        "volume": quote.volume,
        "open": quote.open,
        "high": quote.high,
        "low": quote.low,
        "close": quote.close,
    }


def decode_option_contract(payload: Any) -> OptionContract:
    data = _mapping(payload, "option contract")
    what = "option contract"
    greeks = {name: _optional_float(data, name, what) for name in _GREEKS}
    return OptionContract(
        strike=_float(data, "strike", what),
        bid=_float(data, "bid", what),
        ask=_float(data, "ask", what),
        last=_float(data, "last", what),
        volume=_int(data, "volume", what),
        open_interest=_int(data, "open_interest", what),
        implied_volatility=_float(data, "implied_volatility", what),
        **greeks,
    )


def encode_option_contract(contract: OptionContract) -> dict[str, Any]:
    return _compact({
        "strike": contract.strike,
        "bid": contract.bid,
        "ask": contract.ask,
        "last": contract.last,
        "volume": contract.volume,
        "open_interest": contract.open_interest,
        "implied_volatility": contract.implied_volatility,
        "delta": contract.delta,
        "gamma": contract.gamma,
        "theta": contract.theta,
        "vega": contract.vega,
    })


def decode_option_chain(payload: Any) -> OptionChain:
    data = _mapping(payload, "option chain")
    return OptionChain(
        symbol=_str(data, "symbol", "option chain"),
        expiry=_str(data, "expiry", "option chain"),
        calls=tuple(decode_option_contract(c) for c in _sequence(data.get("calls"), "calls")),
        puts=tuple(decode_option_contract(p) for p in _sequence(data.get("puts"), "puts")),
    )


def decode_option_chains(payload: Any) -> list[OptionChain]:
    return [decode_option_chain(item) for item in _sequence(payload, "option chains")]


def encode_option_chain(chain: OptionChain) -> dict[str, Any]:
    return {
        "symbol": chain.symbol,
        "expiry": chain.expiry,
        "calls": [encode_option_contract(c) for c in chain.calls],
        "puts": [encode_option_contract(p) for p in chain.puts],
    }


# =========================================================================
# Orders
# =========================================================================

def encode_stock_order(order: StockOrder) -> dict[str, Any]:
    return _compact({
        "symbol": order.symbol,
        "quantity": order.quantity,
        "order_type": order.order_type.value,
        "side": order.side.value,
        "limit_price": order.limit_price,
        "stop_price": order.stop_price,
        "time_in_force": order.time_in_force.value,
    })


def encode_option_order(order: OptionOrder) -> dict[str, Any]:
    return _compact({
        "symbol": order.symbol,
        "expiry": order.expiry,
        "strike": order.strike,
        "right": order.right.value,
        "quantity": order.quantity,
        "order_type": order.order_type.value,
        "side": order.side.value,
        "limit_price": order.limit_price,
    })


def decode_order_response(payload: Any) -> OrderResponse:
    data = _mapping(payload, "order response")
    return OrderResponse(
        order_id=_str(data, "orderId", "order response"),
        status=_str(data, "status", "order response"),
        message=_optional_str(data, "message", "order response"),
    )


def encode_order_response(response: OrderResponse) -> dict[str, Any]:
    return _compact({
        "orderId": response.order_id,
        "status": response.status,
        "message": response.message,
    })


def decode_open_order(payload: Any) -> OpenOrder:
    data = _mapping(payload, "open order")
    what = "open order"
    return OpenOrder(
        order_id=_str(data, "orderId", what),
        symbol=_str(data, "symbol", what),
        side=_str(data, "side", what),
        quantity=_int(data, "quantity", what),
        order_type=_str(data, "order_type", what),
        status=_str(data, "status", what),
        limit_price=_optional_float(data, "limit_price", what),
        stop_price=_optional_float(data, "stop_price", what),
        filled=_optional_int(data, "filled", what),
    )


def decode_open_orders(payload: Any) -> list[OpenOrder]:
    return [decode_open_order(item) for item in _sequence(payload, "open orders")]


def encode_open_order(order: OpenOrder) -> dict[str, Any]:
    return _compact({
        "orderId": order.order_id,
        "symbol": order.symbol,
        "side": order.side,
        "quantity": order.quantity,
        "order_type": order.order_type,
        "status": order.status,
        "limit_price": order.limit_price,
        "stop_price": order.stop_price,
        "filled": order.filled,
    })


_ENCODERS: dict[type, Callable[[Any], dict[str, Any]]] = {
    Account: encode_account,
    Position: encode_position,
    Portfolio: encode_portfolio,
    MarketQuote: encode_market_quote,
    OptionContract: encode_option_contract,
    OptionChain: encode_option_chain,
    StockOrder: encode_stock_order,
    OptionOrder: encode_option_order,
    OrderResponse: encode_order_response,
    OpenOrder: encode_open_order,
}


def to_wire(value: Any) -> Any:
    """Encode a model (or list of models) into its gateway JSON shape."""
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    encoder = _ENCODERS.get(type(value))
    if encoder is None:
        raise TypeError(f"No wire encoding for {type(value).__name__}")
    return encoder(value)
