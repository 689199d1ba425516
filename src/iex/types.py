from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Order:
    price: float
    quantity: float
    # Cumulative quote amount at this level, as reported by the exchange.
    sum: float


@dataclass(frozen=True)
class OrderBook:
    symbol: str
    # Exchange ordering is kept as received: asks ascending, bids descending.
    asks: tuple[Order, ...] = ()
    bids: tuple[Order, ...] = ()


@dataclass(frozen=True)
class FeeRate:
    symbol: str
    maker_fee_rate: float
    taker_fee_rate: float
    recent_days_sum: Optional[float] = None


@dataclass(frozen=True)
class Balance:
    asset: str
    fa_name: str
    fiat: bool
    value: float
    locked: float

    @property
    def available(self) -> float:
        return self.value - self.locked
