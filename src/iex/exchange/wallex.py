from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from iex.errors import ExchangeRejectedError, NotFoundError, RequestFailedError
from iex.exchange.decoding import (
    decode_balance_collection,
    decode_envelope,
    decode_fee_rate_collection,
    decode_order_book,
    decode_order_book_collection,
)
from iex.exchange.transport import WallexTransport
from iex.types import Balance, FeeRate, OrderBook

DEFAULT_BASE_URL = "https://api.wallex.ir"

_ORDER_BOOK_PATH = "/v1/depth"
_ALL_ORDER_BOOKS_PATH = "/v2/depth/all"
_FEE_RATES_PATH = "/v1/account/fee"
_BALANCES_PATH = "/v1/account/balances"


class WallexClient:
    def __init__(
        self,
        *,
        transport: WallexTransport | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self._transport = transport or WallexTransport(timeout_seconds=timeout_seconds)
        self._base_url = base_url.rstrip("/")

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def order_book(self, symbol: str, *, api_key: str) -> OrderBook:
        if not symbol:
            raise ValueError("symbol is required")
        result = await self._get(_ORDER_BOOK_PATH, api_key=api_key, params={"symbol": symbol})
        return decode_order_book(result, symbol)

    async def all_order_books(self, *, api_key: str) -> dict[str, OrderBook]:
        result = await self._get(_ALL_ORDER_BOOKS_PATH, api_key=api_key)
        return decode_order_book_collection(result)

    async def fee_rate(self, symbol: str, *, api_key: str) -> FeeRate:
        # No per-symbol fee endpoint is used; the full table is fetched every time.
        rates = await self.fee_rates(api_key=api_key)
        try:
            return rates[symbol]
        except KeyError:
            raise NotFoundError(key=symbol) from None

    async def fee_rates(self, *, api_key: str) -> dict[str, FeeRate]:
        result = await self._get(_FEE_RATES_PATH, api_key=api_key)
        return decode_fee_rate_collection(result)

    async def balance(self, asset: str, *, api_key: str) -> Balance:
        balances = await self.balances(api_key=api_key)
        try:
            return balances[asset]
        except KeyError:
            raise NotFoundError(key=asset) from None

    async def balances(self, *, api_key: str) -> dict[str, Balance]:
        result = await self._get(_BALANCES_PATH, api_key=api_key)
        return decode_balance_collection(result)

    def _url(self, path: str, params: Optional[dict[str, str]] = None) -> str:
        url = f"{self._base_url}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    async def _get(
        self,
        path: str,
        *,
        api_key: str,
        params: Optional[dict[str, str]] = None,
    ) -> Any:
        url = self._url(path, params)
        response = await self._transport.send("GET", url, api_key=api_key)
        if response.status_code != httpx.codes.OK:
            raise RequestFailedError(status_code=response.status_code, url=url)

        envelope = decode_envelope(response.content)
        if not envelope.success:
            raise ExchangeRejectedError(message=envelope.message)
        return envelope.result
