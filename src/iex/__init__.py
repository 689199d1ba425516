__all__ = ["Balance", "FeeRate", "IexError", "Order", "OrderBook", "WallexClient"]

from iex.errors import IexError
from iex.exchange import WallexClient
from iex.types import Balance, FeeRate, Order, OrderBook
