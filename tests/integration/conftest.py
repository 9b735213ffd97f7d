"""Fixtures for integration tests against a running local gateway."""
import socket

import pytest
import pytest_asyncio

GATEWAY_HOST = "127.0.0.1"
GATEWAY_PORT = 8000


def is_gateway_available(host: str = GATEWAY_HOST, port: int = GATEWAY_PORT) -> bool:
    """Check if the local gateway HTTP port accepts connections."""
    try:
        with socket.create_connection((host, port), timeout=1):
            return True
    except OSError:
        return False


def pytest_collection_modifyitems(config, items):
    if is_gateway_available():
        return
    skip = pytest.mark.skip(reason=f"Gateway not available on {GATEWAY_HOST}:{GATEWAY_PORT}")
    for item in items:
        if item.path.parent.name == "integration":
            item.add_marker(skip)


@pytest_asyncio.fixture
async def gateway_session():
    """Provide a connected local-gateway session (TWS paper port)."""
    from boomtrade.gateway.profiles import LOCAL_PROFILE
    from boomtrade.gateway.session import GatewaySession
    from boomtrade.models import ConnectionConfig

    session = GatewaySession(LOCAL_PROFILE, f"http://{GATEWAY_HOST}:{GATEWAY_PORT}")
    await session.connect(ConnectionConfig(port=7497, client_id=99))
    yield session
    await session.disconnect()
    await session.close()
