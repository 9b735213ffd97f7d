"""Gateway session: connection state machine and typed domain operations."""
import asyncio
import logging
from typing import Iterable

from boomtrade.core.config import Config
from boomtrade.core.errors import (
    BackendRejectedError,
    GatewayError,
    GatewayTimeoutError,
    NotReadyError,
    OrderRejectedError,
    SessionBusyError,
    UnsupportedOperationError,
)
from boomtrade.core.notifier import SessionCallback, StateNotifier
from boomtrade.core.order_builder import normalize_symbol, parse_expiry_code
from boomtrade.gateway import codec
from boomtrade.gateway import profiles
from boomtrade.gateway.executor import GatewayExecutor
from boomtrade.gateway.profiles import BackendProfile
from boomtrade.models import (
    Account,
    ConnectionConfig,
    Credentials,
    GatewayStatus,
    MarketQuote,
    OpenOrder,
    OptionChain,
    OptionOrder,
    OrderRequest,
    OrderResponse,
    Portfolio,
    Position,
    SessionEvent,
    SessionState,
    StockOrder,
)

logger = logging.getLogger(__name__)

# Start-session statuses meaning the gateway did not finish booting in time
_BOOTSTRAP_PENDING = ("pending", "starting", "timeout")

_STARTABLE = (SessionState.DISCONNECTED, SessionState.FAILED)


class GatewaySession:
    """Client session against one gateway backend.

    Owns the connection/authentication state and guards every domain
    operation behind the READY state. State transitions are serialized
    by a single asyncio lock and published on the event bus after the
    state has been updated.

    Typical use:

        async with GatewaySession.from_config(config) as session:
            await session.connect(config.connection_config())
            positions = await session.get_positions()

    Attributes:
        profile: Backend profile (cloud or local endpoint table)
        executor: HTTP request executor
        notifier: Delivers SessionEvent state changes to subscribers
    """

    def __init__(
        self,
        profile: BackendProfile,
        base_url: str,
        connect_timeout: float = 10.0,
        authenticate_timeout: float = 120.0,
        request_timeout: float = 30.0,
        executor: GatewayExecutor | None = None,
        notifier: StateNotifier | None = None,
    ):
        """Initialize a disconnected session.

        Args:
            profile: Backend profile selecting endpoint paths and start mode
            base_url: Gateway base URL
            connect_timeout: Timeout for the local socket connect
            authenticate_timeout: Timeout for cloud gateway bootstrap
            request_timeout: Default timeout for every other call
            executor: Request executor (default: GatewayExecutor(base_url))
            notifier: State notifier to publish transitions on
        """
        self.profile = profile
        self.base_url = base_url
        self.connect_timeout = connect_timeout
        self.authenticate_timeout = authenticate_timeout
        self.executor = executor or GatewayExecutor(base_url, default_timeout=request_timeout)
        self.notifier = notifier if notifier is not None else StateNotifier()

        self._state = SessionState.DISCONNECTED
        self._failure_reason: str | None = None
        self._account: Account | None = None
        self._transition_lock = asyncio.Lock()

        logger.debug(
            "INIT: GatewaySession initialized",
            extra={
                "extra_data": {
                    "action": "session_init",
                    "variant": profile.name,
                    "base_url": base_url,
                }
            },
        )

    @classmethod
    def from_config(cls, config: Config) -> "GatewaySession":
        """Create a session for the configured gateway variant."""
        return cls(
            profile=profiles.get_profile(config.gateway.variant),
            base_url=config.gateway.base_url,
            connect_timeout=config.timeouts.connect,
            authenticate_timeout=config.timeouts.authenticate,
            request_timeout=config.timeouts.request,
        )

    async def __aenter__(self) -> "GatewaySession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()
        await self.close()

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def failure_reason(self) -> str | None:
        """Cause of the last failure while in FAILED, else None."""
        return self._failure_reason

    @property
    def is_ready(self) -> bool:
        return self._state is SessionState.READY

    @property
    def account(self) -> Account | None:
        """Account cached by the last refresh; cleared on disconnect."""
        return self._account

    def subscribe(self, callback: SessionCallback, states: Iterable[SessionState] | None = None) -> None:
        """Subscribe to state changes.

        Args:
            callback: Called with a SessionEvent after each transition
            states: Only deliver transitions into these states (default: all).
                Subscribing an already registered callback widens its filter.
        """
        self.notifier.subscribe(callback, states)

    def unsubscribe(self, callback: SessionCallback) -> None:
        self.notifier.unsubscribe(callback)

    def _transition(self, new_state: SessionState, reason: str | None = None) -> None:
        previous = self._state
        self._state = new_state
        self._failure_reason = reason if new_state is SessionState.FAILED else None

        if previous is new_state:
            return

        logger.debug(
            "TRANSITION: Session state changed",
            extra={
                "extra_data": {
                    "action": "state_change",
                    "previous": previous.value,
                    "current": new_state.value,
                    "reason": reason,
                }
            },
        )
        self.notifier.publish(SessionEvent(previous=previous, current=new_state, reason=reason))

    def _check_startable(self, mode: str) -> None:
        if self.profile.start_mode != mode:
            raise UnsupportedOperationError(
                f"The {self.profile.name} gateway does not support {mode}; "
                f"use {self.profile.start_mode} instead"
            )
        if self._transition_lock.locked():
            raise SessionBusyError(f"Cannot {mode}: another session transition is in progress")
        self._check_state_startable(mode)

    def _check_state_startable(self, mode: str) -> None:
        if self._state not in _STARTABLE:
            raise SessionBusyError(f"Cannot {mode} from state {self._state.value}; disconnect first")

    def _require_ready(self) -> None:
        if self._state is not SessionState.READY:
            raise NotReadyError(self._state.value)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def connect(self, config: ConnectionConfig) -> GatewayStatus:
        """Attach the local gateway to a running TWS.

        On success the account is refreshed as a best-effort side effect.

        Args:
            config: TWS host, port and client id

        Returns:
            GatewayStatus reported by the gateway

        Raises:
            UnsupportedOperationError: If this is not a local-gateway session
            SessionBusyError: If not DISCONNECTED/FAILED or a transition is in flight
            GatewayError: Any classified failure; the session is then FAILED
        """
        self._check_startable(profiles.CONNECT)

        async with self._transition_lock:
            self._check_state_startable(profiles.CONNECT)
            logger.info(
                f"Connecting gateway to TWS at {config.host}:{config.port} "
                f"({'paper' if config.is_paper else 'live'}, client_id={config.client_id})..."
            )
            self._transition(SessionState.CONNECTING)

            status = await self._start_session(
                codec.encode_connection_config(config), self.connect_timeout
            )

            logger.info(f"Connected to gateway (client_id={config.client_id})")
            await self._refresh_account_best_effort()
            return status

    async def authenticate(self, credentials: Credentials) -> GatewayStatus:
        """Start the cloud gateway with the user's credentials.

        Bootstrap plus two-factor approval can take 60-90s, hence the long
        authenticate timeout.

        Args:
            credentials: Username, password and optional account

        Returns:
            GatewayStatus reported by the gateway

        Raises:
            UnsupportedOperationError: If this is not a cloud-gateway session
            SessionBusyError: If not DISCONNECTED/FAILED or a transition is in flight
            GatewayError: Any classified failure; the session is then FAILED
        """
        self._check_startable(profiles.AUTHENTICATE)

        async with self._transition_lock:
            self._check_state_startable(profiles.AUTHENTICATE)
            logger.info(f"Starting cloud gateway for user {credentials.username}...")
            self._transition(SessionState.AUTHENTICATING)

            status = await self._start_session(
                codec.encode_credentials(credentials), self.authenticate_timeout
            )

            logger.info("Cloud gateway ready")
            return status

    async def _start_session(self, body: dict, timeout: float) -> GatewayStatus:
        """POST the start-session request and move to READY or FAILED."""
        try:
            payload = await self.executor.post(self.profile.path(profiles.START), body, timeout=timeout)
            status = codec.decode_gateway_status(payload)

            if status.status != self.profile.ready_status:
                detail = status.message or f"gateway status '{status.status}'"
                if status.status.lower() in _BOOTSTRAP_PENDING:
                    raise GatewayTimeoutError(f"Gateway did not become ready: {detail}")
                raise BackendRejectedError(detail)

        except GatewayError as e:
            logger.error(f"Failed to start gateway session: {e}")
            self._transition(SessionState.FAILED, reason=str(e))
            raise
        except (Exception, asyncio.CancelledError) as e:
            self._transition(SessionState.FAILED, reason=f"{type(e).__name__}: {e}")
            raise

        self._transition(SessionState.READY)
        return status

    async def disconnect(self) -> None:
        """Tear the session down.

        Notifies the backend when it has a disconnect endpoint (failures are
        logged and ignored), then always ends DISCONNECTED with the cached
        account cleared. Waits for an in-flight transition to finish first.
        """
        async with self._transition_lock:
            if self._state is not SessionState.DISCONNECTED and self.profile.supports(profiles.END):
                try:
                    await self.executor.post(self.profile.path(profiles.END), timeout=self.connect_timeout)
                except GatewayError as e:
                    logger.warning(f"Gateway disconnect notification failed: {e}")

            self._account = None
            self._transition(SessionState.DISCONNECTED)
            logger.info("Disconnected from gateway")

    async def close(self) -> None:
        """Release HTTP resources. Does not change session state."""
        await self.executor.close()

    # =========================================================================
    # Account
    # =========================================================================

    async def get_account(self) -> Account:
        self._require_ready()
        payload = await self.executor.get(self.profile.path(profiles.ACCOUNT))
        return codec.decode_account(payload)

    async def refresh_account(self) -> Account:
        """Fetch the account and replace the cached copy."""
        async with self._transition_lock:
            account = await self.get_account()
            self._account = account
            return account

    async def _refresh_account_best_effort(self) -> None:
        try:
            self._account = await self.get_account()
            logger.info(f"Account loaded: {self._account.id} ({self._account.currency})")
        except GatewayError as e:
            logger.warning(f"Post-connect account refresh failed: {e}")

    async def get_positions(self) -> list[Position]:
        self._require_ready()
        payload = await self.executor.get(self.profile.path(profiles.POSITIONS))
        positions = codec.decode_positions(payload)
        logger.debug(f"Fetched {len(positions)} positions")
        return positions

    async def get_portfolio(self) -> Portfolio:
        """Fetch positions along with their combined value and unrealized P&L."""
        portfolio = Portfolio.from_positions(await self.get_positions())
        logger.info(
            f"Portfolio: {len(portfolio)} positions, value {portfolio.total_value:.2f}, "
            f"unrealized P&L {portfolio.unrealized_pnl:.2f}"
        )
        return portfolio

    # =========================================================================
    # Market data
    # =========================================================================

    async def get_market_quote(self, symbol: str) -> MarketQuote:
        self._require_ready()
        path = self.profile.path(profiles.QUOTE, symbol=normalize_symbol(symbol))
        return codec.decode_market_quote(await self.executor.get(path))

    async def search_option_chains(self, symbol: str) -> list[OptionChain]:
        """List the option chains (one per expiry) available for an underlying."""
        self._require_ready()
        path = self.profile.path(profiles.OPTION_SEARCH, symbol=normalize_symbol(symbol))
        return codec.decode_option_chains(await self.executor.get(path))

    async def get_option_expiries(self, symbol: str) -> list[str]:
        """Sorted unique expiry codes for an underlying."""
        chains = await self.search_option_chains(symbol)
        return sorted({chain.expiry for chain in chains})

    async def get_option_chain(self, symbol: str, expiry: str) -> OptionChain:
        self._require_ready()
        path = self.profile.path(
            profiles.OPTION_CHAIN,
            symbol=normalize_symbol(symbol),
            expiry=parse_expiry_code(expiry),
        )
        return codec.decode_option_chain(await self.executor.get(path))

    # =========================================================================
    # Orders
    # =========================================================================

    async def place_stock_order(self, order: StockOrder) -> OrderResponse:
        """Submit a stock order. Not idempotent: every call creates a new order."""
        self._require_ready()
        limit = f" limit {order.limit_price}" if order.limit_price is not None else ""
        stop = f" stop {order.stop_price}" if order.stop_price is not None else ""
        logger.info(
            f"Placing stock order: {order.side.value} {order.quantity} {order.symbol} "
            f"@ {order.order_type.value}{limit}{stop} ({order.time_in_force.value})"
        )
        return await self._submit_order(order.kind, profiles.STOCK_ORDER, codec.encode_stock_order(order))

    async def place_option_order(self, order: OptionOrder) -> OrderResponse:
        """Submit an option order. Not idempotent: every call creates a new order."""
        self._require_ready()
        logger.info(
            f"Placing option order: {order.side.value} {order.quantity} {order.symbol} "
            f"{order.expiry} {order.strike}{order.right.value} @ {order.order_type.value}"
            f"{f' limit {order.limit_price}' if order.limit_price is not None else ''}"
        )
        return await self._submit_order(order.kind, profiles.OPTION_ORDER, codec.encode_option_order(order))

    async def place_order(self, order: OrderRequest) -> OrderResponse:
        """Submit either order variant."""
        if isinstance(order, StockOrder):
            return await self.place_stock_order(order)
        if isinstance(order, OptionOrder):
            return await self.place_option_order(order)
        raise TypeError(f"Unsupported order type: {type(order).__name__}")

    async def _submit_order(self, kind: str, operation: str, body: dict) -> OrderResponse:
        try:
            payload = await self.executor.post(self.profile.path(operation), body)
        except BackendRejectedError as e:
            logger.error(f"{kind.capitalize()} order rejected by gateway: {e.message}")
            raise OrderRejectedError(e.message, status_code=e.status_code) from e

        response = codec.decode_order_response(payload)
        if response.is_rejected:
            logger.error(f"{kind.capitalize()} order {response.order_id} {response.status}: {response.message}")
            raise OrderRejectedError(
                response.message or f"Order {response.order_id} {response.status}",
                response=response,
            )

        logger.info(f"{kind.capitalize()} order {response.order_id} accepted: {response.status}")
        return response

    async def list_open_orders(self) -> list[OpenOrder]:
        """Working orders (local gateway only)."""
        self._require_ready()
        path = self.profile.path(profiles.OPEN_ORDERS)
        return codec.decode_open_orders(await self.executor.get(path))
