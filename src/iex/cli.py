from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import asdict
from typing import Any, TypeVar

import httpx
import typer

from iex.errors import DecodeError, IexError, RequestFailedError
from iex.exchange import MarketDataSource, WallexClient, WallexTransport
from iex.logging_utils import configure_logging
from iex.settings import Settings
from iex.types import Balance, OrderBook

app = typer.Typer(no_args_is_help=True, add_completion=False)
logger = logging.getLogger("iex")

T = TypeVar("T")


def _build_client(
    settings: Settings,
    *,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> WallexClient:
    transport = WallexTransport(
        timeout_seconds=settings.http_timeout_seconds,
        transport=http_transport,
    )
    return WallexClient(transport=transport, base_url=settings.wallex_base_url)


def _execute(
    settings: Settings,
    *,
    endpoint: str,
    call: Callable[[MarketDataSource, str], Awaitable[T]],
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> T:
    if not settings.api_key_configured():
        raise typer.BadParameter("WALLEX_API_KEY is not set")

    async def _run() -> T:
        client = _build_client(settings, http_transport=http_transport)
        try:
            return await call(client, settings.wallex_api_key)
        finally:
            await client.aclose()

    try:
        return asyncio.run(_run())
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    except IexError as e:
        extra: dict[str, Any] = {"endpoint": endpoint, "error": str(e)}
        if isinstance(e, RequestFailedError):
            extra["status_code"] = e.status_code
        event = "decode_failed" if isinstance(e, DecodeError) else "request_failed"
        logger.error(event, extra=extra)
        raise typer.Exit(code=1) from e


def _book_summary(book: OrderBook) -> dict[str, Any]:
    return {
        "asks": len(book.asks),
        "bids": len(book.bids),
        "best_ask": book.asks[0].price if book.asks else None,
        "best_bid": book.bids[0].price if book.bids else None,
    }


def _balance_row(balance: Balance) -> dict[str, Any]:
    row = asdict(balance)
    row["available"] = balance.available
    return row


def _redacted_config(settings: Settings) -> dict[str, Any]:
    redacted = settings.model_dump()
    redacted["wallex_api_key"] = "***" if redacted["wallex_api_key"] else ""
    return redacted


@app.command()
def show_config() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    logger.info("loaded_config", extra={"symbol": settings.symbol, "asset": settings.asset})
    typer.echo(_redacted_config(settings))


@app.command()
def order_book(
    symbol: str | None = typer.Option(None, help="Trading pair, e.g. BTCUSDT. Defaults to SYMBOL."),
) -> None:
    """
    Print the full order book of one trading pair.
    """
    settings = Settings()
    configure_logging(settings.log_level)
    effective_symbol = (symbol or settings.symbol).strip().upper()

    book = _execute(
        settings,
        endpoint="order_book",
        call=lambda client, key: client.order_book(effective_symbol, api_key=key),
    )
    typer.echo(asdict(book))


@app.command()
def order_books() -> None:
    """
    Print depth and top of book for every trading pair.
    """
    settings = Settings()
    configure_logging(settings.log_level)

    books = _execute(
        settings,
        endpoint="all_order_books",
        call=lambda client, key: client.all_order_books(api_key=key),
    )
    typer.echo({symbol: _book_summary(books[symbol]) for symbol in sorted(books)})


@app.command()
def fee_rate(
    symbol: str | None = typer.Option(None, help="Trading pair, e.g. BTCUSDT. Defaults to SYMBOL."),
) -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    effective_symbol = (symbol or settings.symbol).strip().upper()

    rate = _execute(
        settings,
        endpoint="fee_rate",
        call=lambda client, key: client.fee_rate(effective_symbol, api_key=key),
    )
    typer.echo(asdict(rate))


@app.command()
def fee_rates() -> None:
    settings = Settings()
    configure_logging(settings.log_level)

    rates = _execute(
        settings,
        endpoint="fee_rates",
        call=lambda client, key: client.fee_rates(api_key=key),
    )
    typer.echo({symbol: asdict(rates[symbol]) for symbol in sorted(rates)})


@app.command()
def balance(
    asset: str | None = typer.Option(None, help="Asset symbol, e.g. USDT. Defaults to ASSET."),
) -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    effective_asset = (asset or settings.asset).strip().upper()

    result = _execute(
        settings,
        endpoint="balance",
        call=lambda client, key: client.balance(effective_asset, api_key=key),
    )
    typer.echo(_balance_row(result))


@app.command()
def balances() -> None:
    """
    Print every asset balance held on the account.
    """
    settings = Settings()
    configure_logging(settings.log_level)

    result = _execute(
        settings,
        endpoint="balances",
        call=lambda client, key: client.balances(api_key=key),
    )
    typer.echo({asset: _balance_row(result[asset]) for asset in sorted(result)})
