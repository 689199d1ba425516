from __future__ import annotations

import math
import re
from typing import Annotated, Any, Optional, TypeVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

from iex.errors import FieldFormatError, MalformedResponseError
from iex.types import Balance, FeeRate, Order, OrderBook

T = TypeVar("T")

# Keys of the fee payload that are not per-symbol entries.
_RESERVED_FEE_KEYS = frozenset({"default", "metaData"})

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _numeric_string(value: Any) -> float:
    if not isinstance(value, str):
        raise PydanticCustomError("numeric_string_type", "expected a numeric string")
    if _DECIMAL_RE.fullmatch(value) is None:
        raise PydanticCustomError("numeric_string_parsing", "not a decimal number")
    parsed = float(value)
    if not math.isfinite(parsed):
        raise PydanticCustomError("numeric_string_range", "decimal number out of range")
    return parsed


def _native_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PydanticCustomError("native_number_type", "expected a JSON number")
    try:
        return float(value)
    except OverflowError:
        raise PydanticCustomError("native_number_range", "number out of range") from None


# Non-negative amounts the exchange sends as strings, e.g. "42000.50".
NumericString = Annotated[float, BeforeValidator(_numeric_string), Field(ge=0)]
# Non-negative amounts the exchange sends as bare JSON numbers.
NativeNumber = Annotated[float, BeforeValidator(_native_number), Field(ge=0)]


class Envelope(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: StrictBool
    message: str = ""
    result: Any = None

    @field_validator("message", mode="before")
    @classmethod
    def _null_message(cls, value: Any) -> Any:
        return "" if value is None else value


class _Schema(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)


class RawOrder(_Schema):
    price: NumericString
    quantity: NativeNumber
    sum: NumericString


class RawOrderBook(_Schema):
    ask: list[RawOrder]
    bid: list[RawOrder]


class RawFeeRate(_Schema):
    maker_fee_rate: NumericString = Field(alias="makerFeeRate")
    taker_fee_rate: NumericString = Field(alias="takerFeeRate")
    recent_days_sum: Optional[NativeNumber] = None


class RawBalance(_Schema):
    asset: StrictStr
    fa_name: StrictStr = Field(alias="faName")
    fiat: StrictBool
    value: NumericString
    locked: NumericString

    @field_validator("locked")
    @classmethod
    def _locked_within_value(cls, locked: float, info: ValidationInfo) -> float:
        value = info.data.get("value")
        if value is not None and locked > value:
            raise PydanticCustomError("locked_exceeds_value", "locked exceeds value")
        return locked


class RawBalances(_Schema):
    balances: dict[str, RawBalance]


_ORDER = TypeAdapter(RawOrder)
_ORDER_BOOK = TypeAdapter(RawOrderBook)
_ORDER_BOOKS = TypeAdapter(dict[str, RawOrderBook])
_FEE_RATE = TypeAdapter(RawFeeRate)
_FEE_RATES = TypeAdapter(dict[str, RawFeeRate])
_BALANCE = TypeAdapter(RawBalance)
_BALANCES = TypeAdapter(RawBalances)


def _first_error(exc: ValidationError) -> tuple[str, str, Any]:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"])
    raw_value = None if first["type"] == "missing" else first.get("input")
    return field, first["msg"], raw_value


def _validate(adapter: TypeAdapter[T], raw: Any) -> T:
    try:
        return adapter.validate_python(raw)
    except ValidationError as e:
        field, _, raw_value = _first_error(e)
        raise FieldFormatError(field=field or "result", raw_value=raw_value) from e


def decode_envelope(body: bytes | str) -> Envelope:
    try:
        return Envelope.model_validate_json(body)
    except ValidationError as e:
        field, msg, _ = _first_error(e)
        reason = f"{field}: {msg}" if field else msg
        raise MalformedResponseError(reason=reason) from e


def _to_order(raw: RawOrder) -> Order:
    return Order(price=raw.price, quantity=raw.quantity, sum=raw.sum)


def _to_order_book(raw: RawOrderBook, symbol: str) -> OrderBook:
    return OrderBook(
        symbol=symbol,
        asks=tuple(_to_order(o) for o in raw.ask),
        bids=tuple(_to_order(o) for o in raw.bid),
    )


def _to_fee_rate(raw: RawFeeRate, symbol: str) -> FeeRate:
    return FeeRate(
        symbol=symbol,
        maker_fee_rate=raw.maker_fee_rate,
        taker_fee_rate=raw.taker_fee_rate,
        recent_days_sum=raw.recent_days_sum,
    )


def _to_balance(raw: RawBalance) -> Balance:
    return Balance(
        asset=raw.asset,
        fa_name=raw.fa_name,
        fiat=raw.fiat,
        value=raw.value,
        locked=raw.locked,
    )


def decode_order(raw: Any) -> Order:
    return _to_order(_validate(_ORDER, raw))


def decode_order_book(raw: Any, symbol: str) -> OrderBook:
    return _to_order_book(_validate(_ORDER_BOOK, raw), symbol)


def decode_order_book_collection(raw: Any) -> dict[str, OrderBook]:
    books = _validate(_ORDER_BOOKS, raw)
    return {symbol: _to_order_book(book, symbol) for symbol, book in books.items()}


def decode_fee_rate(raw: Any, symbol: str) -> FeeRate:
    return _to_fee_rate(_validate(_FEE_RATE, raw), symbol)


def decode_fee_rate_collection(raw: Any) -> dict[str, FeeRate]:
    if not isinstance(raw, dict):
        raise FieldFormatError(field="result", raw_value=raw)
    entries = {k: v for k, v in raw.items() if k not in _RESERVED_FEE_KEYS}
    rates = _validate(_FEE_RATES, entries)
    return {symbol: _to_fee_rate(rate, symbol) for symbol, rate in rates.items()}


def decode_balance(raw: Any) -> Balance:
    return _to_balance(_validate(_BALANCE, raw))


def decode_balance_collection(raw: Any) -> dict[str, Balance]:
    payload = _validate(_BALANCES, raw)
    return {asset: _to_balance(b) for asset, b in payload.balances.items()}
