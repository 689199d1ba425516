from __future__ import annotations

from typing import Protocol, runtime_checkable

from iex.types import Balance, FeeRate, OrderBook


@runtime_checkable
class MarketDataSource(Protocol):
    """Read-side market and account snapshot provider for one exchange."""

    async def order_book(self, symbol: str, *, api_key: str) -> OrderBook: ...
    async def all_order_books(self, *, api_key: str) -> dict[str, OrderBook]: ...
    async def fee_rate(self, symbol: str, *, api_key: str) -> FeeRate: ...
    async def fee_rates(self, *, api_key: str) -> dict[str, FeeRate]: ...
    async def balance(self, asset: str, *, api_key: str) -> Balance: ...
    async def balances(self, *, api_key: str) -> dict[str, Balance]: ...
    async def aclose(self) -> None: ...
