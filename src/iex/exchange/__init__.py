__all__ = ["DEFAULT_BASE_URL", "MarketDataSource", "WallexClient", "WallexTransport"]

from iex.exchange.base import MarketDataSource
from iex.exchange.transport import WallexTransport
from iex.exchange.wallex import DEFAULT_BASE_URL, WallexClient
