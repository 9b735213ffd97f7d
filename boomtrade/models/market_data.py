"""Market data models for the gateway client."""
from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class MarketQuote:
    """Point-in-time quote snapshot."""
    symbol: str
    last: float
    bid: float
    ask: float
    volume: int
    open: float
    high: float
    low: float
    close: float


@dataclass(frozen=True)
class OptionContract:
    """One strike of an option chain. Greeks are None when the gateway did not compute them."""
    strike: float
    bid: float
    ask: float
    last: float
    volume: int
    open_interest: int
    implied_volatility: float
    delta: float | None = None
    gamma: float | None = None
    theta: float | None = None
    vega: float | None = None


@dataclass(frozen=True)
class OptionChain:
    """Calls and puts for one underlying and expiry."""
    symbol: str
    expiry: str           # YYYYMMDD
    calls: tuple[OptionContract, ...] = field(default_factory=tuple)
    puts: tuple[OptionContract, ...] = field(default_factory=tuple)

    @property
    def expiry_date(self) -> date | None:
        return parse_expiry(self.expiry)


def parse_expiry(expiry: str) -> date | None:
    """Parse an 8-digit YYYYMMDD expiry code, returning None if it is not a real date."""
    if len(expiry) != 8 or not expiry.isdigit():
        return None
    try:
        return datetime.strptime(expiry, "%Y%m%d").date()
    except ValueError:
        return None


def format_expiry(expiry: str, style: str = "long") -> str:
    """Format an expiry code for display.

    Args:
        expiry: YYYYMMDD expiry code
        style: "long" for "Mar 15, 2026", "short" for "03/15"

    Returns:
        Formatted expiry, or the input unchanged if it is not a valid date
    """
    parsed = parse_expiry(expiry)
    if parsed is None:
        return expiry
    if style == "short":
        return parsed.strftime("%m/%d")
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"
