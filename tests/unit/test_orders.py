"""Tests for order models."""
import pytest


def test_order_type_codes():
    from boomtrade.models import OrderType

    assert [t.value for t in OrderType] == ["MKT", "LMT", "STP", "STP_LMT", "TRAIL", "MIT", "LIT"]


def test_order_type_price_requirements():
    from boomtrade.models import OrderType

    assert {t for t in OrderType if t.requires_limit_price} == {
        OrderType.LIMIT, OrderType.STOP_LIMIT, OrderType.LIMIT_IF_TOUCHED,
    }
    assert {t for t in OrderType if t.requires_stop_price} == {
        OrderType.STOP, OrderType.STOP_LIMIT, OrderType.TRAILING,
    }


def test_display_names():
    from boomtrade.models import OrderType, TimeInForce

    assert OrderType.MARKET_IF_TOUCHED.display_name == "Market if Touched"
    assert OrderType.TRAILING.display_name == "Trailing Stop"
    assert TimeInForce.GOOD_TILL_CANCELED.display_name == "Good Till Canceled"
    assert [t.value for t in TimeInForce] == ["DAY", "GTC", "IOC", "FOK"]


def test_side_and_right_from_flags():
    from boomtrade.models import OptionRight, OrderSide

    assert OrderSide.from_flag(True) == OrderSide.BUY
    assert OrderSide.from_flag(False) == OrderSide.SELL
    assert OptionRight.from_flag(True).value == "C"
    assert OptionRight.from_flag(False).value == "P"


def test_stock_order_creation():
    from boomtrade.models import OrderSide, OrderType, StockOrder, TimeInForce

    order = StockOrder(
        symbol="AAPL",
        quantity=100,
        order_type=OrderType.MARKET,
        side=OrderSide.BUY,
    )

    assert order.kind == "stock"
    assert order.limit_price is None
    assert order.time_in_force == TimeInForce.DAY


@pytest.mark.parametrize("kwargs, field", [
    ({"quantity": 0}, "quantity"),
    ({"quantity": -10}, "quantity"),
    ({"symbol": ""}, "symbol"),
    ({"symbol": "aapl"}, "symbol"),
    ({"order_type": "LMT"}, "limit price"),
    ({"order_type": "STP", "limit_price": None}, "stop price"),
    ({"order_type": "LMT", "limit_price": -1.0}, "limit price"),
    ({"order_type": "LMT", "limit_price": float("nan")}, "limit price"),
    ({"order_type": "LMT", "limit_price": float("inf")}, "limit price"),
    ({"order_type": "STP", "stop_price": float("nan")}, "stop price"),
    ({"symbol": " AAPL"}, "symbol"),
    ({"symbol": "AAPL "}, "symbol"),
])
def test_stock_order_invariants(kwargs, field):
    from boomtrade.core.errors import ValidationError
    from boomtrade.models import OrderSide, OrderType, StockOrder

    params = {
        "symbol": "AAPL",
        "quantity": 1,
        "order_type": OrderType.MARKET,
        "side": OrderSide.BUY,
    }
    params.update(kwargs)
    if isinstance(params["order_type"], str):
        params["order_type"] = OrderType(params["order_type"])

    with pytest.raises(ValidationError) as exc_info:
        StockOrder(**params)

    assert exc_info.value.field == field


def test_option_order_rejects_stop_types():
    from boomtrade.core.errors import ValidationError
    from boomtrade.models import OptionOrder, OptionRight, OrderSide, OrderType

    with pytest.raises(ValidationError, match="not supported"):
        OptionOrder(
            symbol="AAPL",
            expiry="20260320",
            strike=150.0,
            right=OptionRight.CALL,
            quantity=1,
            order_type=OrderType.STOP,
            side=OrderSide.BUY,
        )


@pytest.mark.parametrize("strike", [0.0, -5.0, float("nan"), float("inf")])
def test_option_order_rejects_non_finite_or_non_positive_strike(strike):
    from boomtrade.core.errors import ValidationError
    from boomtrade.models import OptionOrder, OptionRight, OrderSide, OrderType

    with pytest.raises(ValidationError) as exc_info:
        OptionOrder(
            symbol="AAPL",
            expiry="20260320",
            strike=strike,
            right=OptionRight.PUT,
            quantity=1,
            order_type=OrderType.MARKET,
            side=OrderSide.SELL,
        )

    assert exc_info.value.field == "strike"


def test_option_order_kind():
    from boomtrade.models import OptionOrder, OptionRight, OrderSide, OrderType

    order = OptionOrder("AAPL", "20260320", 150.0, OptionRight.CALL, 1, OrderType.MARKET, OrderSide.BUY)

    assert order.kind == "option"


def test_orders_are_immutable():
    from dataclasses import FrozenInstanceError
    from boomtrade.models import OrderSide, OrderType, StockOrder

    order = StockOrder("AAPL", 1, OrderType.MARKET, OrderSide.BUY)

    with pytest.raises(FrozenInstanceError):
        order.quantity = 2


def test_order_response():
    from boomtrade.models import OrderResponse

    response = OrderResponse(order_id="123", status="Submitted")

    assert response.order_id == "123"
    assert response.message is None
    assert not response.is_rejected
    assert OrderResponse(order_id="124", status="REJECTED").is_rejected
