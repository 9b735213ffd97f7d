"""Account and position models."""
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Account:
    """Brokerage account summary."""
    id: str
    account_type: str
    currency: str


@dataclass(frozen=True)
class Position:
    """Holding in a single symbol. Negative quantity means short."""
    symbol: str
    quantity: int
    average_price: float
    current_price: float
    unrealized_pnl: float
    realized_pnl: float

    @property
    def total_value(self) -> float:
        return self.quantity * self.current_price

    @property
    def percent_change(self) -> float:
        """Percent move of the current price against the average cost."""
        if self.average_price == 0:
            return 0.0
        return (self.current_price - self.average_price) / self.average_price * 100


@dataclass(frozen=True)
class Portfolio:
    """Positions held in an account, with their combined value and P&L."""
    positions: tuple[Position, ...] = ()

    @classmethod
    def from_positions(cls, positions: Iterable[Position]) -> "Portfolio":
        return cls(positions=tuple(positions))

    @property
    def total_value(self) -> float:
        """Market value of all positions (shorts count negative)."""
        return sum(p.total_value for p in self.positions)

    @property
    def unrealized_pnl(self) -> float:
        return sum(p.unrealized_pnl for p in self.positions)

    @property
    def realized_pnl(self) -> float:
        return sum(p.realized_pnl for p in self.positions)

    def __len__(self) -> int:
        return len(self.positions)
