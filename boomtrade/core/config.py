"""Configuration loading and validation."""
import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from boomtrade.models import ConnectionConfig

logger = logging.getLogger(__name__)

VARIANTS = ("local", "cloud")
MIN_AUTHENTICATE_TIMEOUT = 120.0


class ConfigError(Exception):
    """Raised when configuration is invalid."""

    pass


@dataclass
class GatewayConfig:
    """Gateway endpoint and TWS socket configuration."""

    variant: str
    base_url: str
    host: str = "127.0.0.1"
    port: int = 7497
    client_id: int = 1

    @property
    def is_paper(self) -> bool:
        return self.port == 7497


@dataclass
class TimeoutConfig:
    """Per-operation timeouts in seconds."""

    connect: float = 10.0
    authenticate: float = 120.0
    request: float = 30.0


@dataclass
class Config:
    """Main configuration container."""

    gateway: GatewayConfig
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)

    def connection_config(self) -> ConnectionConfig:
        """Build the socket parameters sent on connect."""
        return ConnectionConfig(
            host=self.gateway.host,
            port=self.gateway.port,
            client_id=self.gateway.client_id,
        )


def load_config(path: str) -> Config:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        Config object with validated configuration

    Raises:
        ConfigError: If file not found, invalid YAML, or missing/invalid fields
    """
    config_path = Path(path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML: {e}") from e

    if raw is None:
        raise ConfigError("Configuration file is empty")

    if "gateway" not in raw:
        raise ConfigError("Missing required configuration section: gateway")

    # Parse gateway config
    gw_raw = raw["gateway"] or {}
    if "base_url" not in gw_raw:
        raise ConfigError("Missing required gateway setting: base_url")

    gateway = GatewayConfig(
        variant=gw_raw.get("variant", "local"),
        base_url=str(gw_raw["base_url"]),
        host=gw_raw.get("host", "127.0.0.1"),
        port=gw_raw.get("port", 7497),
        client_id=gw_raw.get("client_id", 1),
    )

    if gateway.variant not in VARIANTS:
        raise ConfigError(f"Unknown gateway variant: {gateway.variant} (expected one of {VARIANTS})")
    if isinstance(gateway.port, bool) or not isinstance(gateway.port, int) or not 0 < gateway.port < 65536:
        raise ConfigError(f"Invalid port: {gateway.port}")
    if isinstance(gateway.client_id, bool) or not isinstance(gateway.client_id, int):
        raise ConfigError(f"Invalid client_id: {gateway.client_id}")

    # Parse timeouts
    to_raw = raw.get("timeouts") or {}
    try:
        timeouts = TimeoutConfig(
            connect=float(to_raw.get("connect", 10.0)),
            authenticate=float(to_raw.get("authenticate", 120.0)),
            request=float(to_raw.get("request", 30.0)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid timeout value: {e}") from e

    for name in ("connect", "authenticate", "request"):
        if getattr(timeouts, name) <= 0:
            raise ConfigError(f"Timeout '{name}' must be positive")
    if timeouts.authenticate < MIN_AUTHENTICATE_TIMEOUT:
        raise ConfigError(
            f"Timeout 'authenticate' must be at least {MIN_AUTHENTICATE_TIMEOUT:.0f}s "
            "(gateway bootstrap and two-factor approval can take 90s)"
        )

    config = Config(gateway=gateway, timeouts=timeouts)

    logger.info(f"Loaded configuration from {path}")
    logger.debug(f"Gateway: {gateway.variant} at {gateway.base_url}")
    logger.debug(f"TWS: {gateway.host}:{gateway.port} ({'paper' if gateway.is_paper else 'live'})")

    return config
