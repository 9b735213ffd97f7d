"""Tests for the gateway wire codec."""
import pytest


SAMPLE_CONTRACT = {
    "strike": 150.0,
    "bid": 2.45,
    "ask": 2.55,
    "last": 2.5,
    "volume": 1200,
    "open_interest": 8400,
    "implied_volatility": 0.27,
    "delta": 0.52,
    "gamma": 0.04,
    "theta": -0.08,
    "vega": 0.15,
}


def make_chain():
    from boomtrade.models import OptionChain, OptionContract

    return OptionChain(
        symbol="AAPL",
        expiry="20260320",
        calls=(
            OptionContract(strike=150.0, bid=2.45, ask=2.55, last=2.5, volume=1200,
                           open_interest=8400, implied_volatility=0.27, delta=0.52,
                           gamma=0.04, theta=-0.08, vega=0.15),
            OptionContract(strike=155.0, bid=1.1, ask=1.2, last=1.15, volume=300,
                           open_interest=2100, implied_volatility=0.25),
        ),
        puts=(
            OptionContract(strike=150.0, bid=3.0, ask=3.2, last=3.1, volume=800,
                           open_interest=5000, implied_volatility=0.29, delta=-0.48),
        ),
    )


def test_position_round_trip():
    from boomtrade.gateway import codec
    from boomtrade.models import Position

    for position in [
        Position("AAPL", 100, 145.5, 150.25, 475.0, 0.0),
        Position("TSLA", -20, 250.0, 240.0, 200.0, -35.5),
    ]:
        assert codec.decode_position(codec.encode_position(position)) == position


def test_option_chain_round_trip():
    from boomtrade.gateway import codec

    chain = make_chain()

    assert codec.decode_option_chain(codec.encode_option_chain(chain)) == chain


def test_order_response_round_trip():
    from boomtrade.gateway import codec
    from boomtrade.models import OrderResponse

    for response in [
        OrderResponse(order_id="42", status="Submitted"),
        OrderResponse(order_id="43", status="rejected", message="Insufficient buying power"),
    ]:
        assert codec.decode_order_response(codec.encode_order_response(response)) == response


def test_position_uses_snake_case_wire_names():
    from boomtrade.gateway import codec

    position = codec.decode_position({
        "symbol": "MSFT",
        "quantity": 10,
        "average_price": 300,
        "current_price": 310.5,
        "unrealized_pnl": 105.0,
        "realized_pnl": 0,
    })

    assert position.average_price == 300.0
    assert isinstance(position.average_price, float)
    assert position.current_price == 310.5


def test_account_uses_camel_case_wire_names():
    from boomtrade.gateway import codec

    account = codec.decode_account({"id": "DU123", "accountType": "INDIVIDUAL", "currency": "USD"})

    assert account.account_type == "INDIVIDUAL"
    assert codec.encode_account(account)["accountType"] == "INDIVIDUAL"


def test_missing_greeks_decode_to_none():
    from boomtrade.gateway import codec

    payload = dict(SAMPLE_CONTRACT)
    del payload["delta"]
    payload["gamma"] = None
    payload["theta"] = ""

    contract = codec.decode_option_contract(payload)

    assert contract.delta is None
    assert contract.gamma is None
    assert contract.theta is None
    assert contract.vega == 0.15


def test_unset_greeks_are_omitted_on_encode():
    from boomtrade.gateway import codec
    from boomtrade.models import OptionContract

    contract = OptionContract(strike=100.0, bid=1.0, ask=1.1, last=1.05, volume=1,
                              open_interest=2, implied_volatility=0.3)

    encoded = codec.encode_option_contract(contract)

    for greek in ("delta", "gamma", "theta", "vega"):
        assert greek not in encoded


def test_order_response_empty_message_is_none():
    from boomtrade.gateway import codec

    response = codec.decode_order_response({"orderId": 17, "status": "Submitted", "message": ""})

    assert response.order_id == "17"
    assert response.message is None


def test_encode_stock_order_omits_unset_prices():
    from boomtrade.gateway import codec
    from boomtrade.models import OrderSide, OrderType, StockOrder, TimeInForce

    order = StockOrder(
        symbol="AAPL",
        quantity=100,
        order_type=OrderType.LIMIT,
        side=OrderSide.BUY,
        limit_price=150.25,
        time_in_force=TimeInForce.GOOD_TILL_CANCELED,
    )

    assert codec.encode_stock_order(order) == {
        "symbol": "AAPL",
        "quantity": 100,
        "order_type": "LMT",
        "side": "BUY",
        "limit_price": 150.25,
        "time_in_force": "GTC",
    }


def test_encode_option_order():
    from boomtrade.gateway import codec
    from boomtrade.models import OptionOrder, OptionRight, OrderSide, OrderType

    order = OptionOrder(
        symbol="AAPL",
        expiry="20260320",
        strike=150.0,
        right=OptionRight.PUT,
        quantity=2,
        order_type=OrderType.LIMIT,
        side=OrderSide.SELL,
        limit_price=3.1,
    )

    assert codec.encode_option_order(order) == {
        "symbol": "AAPL",
        "expiry": "20260320",
        "strike": 150.0,
        "right": "P",
        "quantity": 2,
        "order_type": "LMT",
        "side": "SELL",
        "limit_price": 3.1,
    }


def test_encode_credentials_omits_missing_account():
    from boomtrade.gateway import codec
    from boomtrade.models import Credentials

    assert codec.encode_credentials(Credentials("trader", "secret")) == {
        "username": "trader",
        "password": "secret",
    }


def test_encode_connection_config():
    from boomtrade.gateway import codec
    from boomtrade.models import ConnectionConfig

    encoded = codec.encode_connection_config(ConnectionConfig(host="10.0.0.5", port=7496, client_id=3))

    assert encoded == {"host": "10.0.0.5", "port": 7496, "clientId": 3}


def test_decode_gateway_status():
    from boomtrade.gateway import codec

    status = codec.decode_gateway_status({"status": "ready", "message": "Gateway started"})

    assert status.status == "ready"
    assert status.message == "Gateway started"


@pytest.mark.parametrize("payload", [
    None,
    [],
    {"symbol": "AAPL"},
    {"symbol": "AAPL", "quantity": "100", "average_price": 1.0, "current_price": 1.0,
     "unrealized_pnl": 0.0, "realized_pnl": 0.0},
    {"symbol": "AAPL", "quantity": 10.5, "average_price": 1.0, "current_price": 1.0,
     "unrealized_pnl": 0.0, "realized_pnl": 0.0},
    {"symbol": "", "quantity": 10, "average_price": 1.0, "current_price": 1.0,
     "unrealized_pnl": 0.0, "realized_pnl": 0.0},
])
def test_malformed_position_raises_decode_error(payload):
    from boomtrade.core.errors import DecodeError
    from boomtrade.gateway import codec

    with pytest.raises(DecodeError):
        codec.decode_position(payload)


def test_positions_must_be_a_list():
    from boomtrade.core.errors import DecodeError
    from boomtrade.gateway import codec

    with pytest.raises(DecodeError, match="array"):
        codec.decode_positions({"positions": []})


def test_option_chain_without_puts_raises_decode_error():
    from boomtrade.core.errors import DecodeError
    from boomtrade.gateway import codec

    with pytest.raises(DecodeError, match="puts"):
        codec.decode_option_chain({"symbol": "AAPL", "expiry": "20260320", "calls": []})


def test_boolean_is_not_a_number():
    from boomtrade.core.errors import DecodeError
    from boomtrade.gateway import codec

    payload = dict(SAMPLE_CONTRACT, strike=True)

    with pytest.raises(DecodeError, match="strike"):
        codec.decode_option_contract(payload)


def test_decode_open_orders():
    from boomtrade.gateway import codec

    orders = codec.decode_open_orders([
        {"orderId": 5, "symbol": "AAPL", "side": "BUY", "quantity": 100,
         "order_type": "LMT", "status": "Submitted", "limit_price": 149.0, "filled": 0},
        {"orderId": "6", "symbol": "MSFT", "side": "SELL", "quantity": 5,
         "order_type": "STP", "status": "PreSubmitted", "stop_price": 290.0},
    ])

    assert orders[0].order_id == "5"
    assert orders[0].limit_price == 149.0
    assert orders[0].filled == 0
    assert orders[1].limit_price is None
    assert orders[1].stop_price == 290.0


def test_to_wire_handles_lists_and_rejects_unknown_types():
    from boomtrade.gateway import codec
    from boomtrade.models import Position

    encoded = codec.to_wire([Position("AAPL", 1, 1.0, 2.0, 1.0, 0.0)])

    assert encoded[0]["current_price"] == 2.0

    with pytest.raises(TypeError):
        codec.to_wire(object())


def test_encode_portfolio_includes_totals():
    from boomtrade.gateway import codec
    from boomtrade.models import Portfolio, Position

    portfolio = Portfolio.from_positions([
        Position("AAPL", 100, 145.0, 150.0, 500.0, 0.0),
        Position("MSFT", 10, 410.0, 400.0, -100.0, 25.0),
    ])

    encoded = codec.to_wire(portfolio)

    assert [p["symbol"] for p in encoded["positions"]] == ["AAPL", "MSFT"]
    assert encoded["total_value"] == 19000.0
    assert encoded["unrealized_pnl"] == 400.0
    assert encoded["realized_pnl"] == 25.0
