from __future__ import annotations

from typing import Any


class IexError(RuntimeError):
    """Base class for every failure raised by the exchange client."""


class TransportError(IexError):
    def __init__(self, *, method: str, url: str, reason: str):
        super().__init__(f"{method} {url} failed: {reason}")
        self.method = method
        self.url = url


class RequestFailedError(IexError):
    def __init__(self, *, status_code: int, url: str):
        super().__init__(f"Wallex request failed: status={status_code} url={url}")
        self.status_code = status_code
        self.url = url


class ExchangeRejectedError(IexError):
    def __init__(self, *, message: str):
        super().__init__(f"Wallex rejected the request: {message!r}")
        self.message = message


class DecodeError(IexError):
    pass


class MalformedResponseError(DecodeError):
    def __init__(self, *, reason: str):
        super().__init__(f"malformed response envelope: {reason}")
        self.reason = reason


class FieldFormatError(DecodeError):
    def __init__(self, *, field: str, raw_value: Any):
        super().__init__(f"invalid field {field!r}: raw={raw_value!r}")
        self.field = field
        self.raw_value = raw_value


class NotFoundError(IexError, LookupError):
    def __init__(self, *, key: str):
        super().__init__(f"{key} not found")
        self.key = key
