# -*- coding: utf-8 -*-
"""Exception types shared by the market-data, reasoning and scan layers."""

from __future__ import annotations

from typing import Optional


class ScannerError(Exception):
    """Base class for every error raised by the scanner."""


class ConfigurationError(ScannerError):
    """Missing credential or invalid settings; raised before any network call."""


class TransportError(ScannerError):
    """An external service could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ServiceError(TransportError):
    """The reasoning service call itself failed."""


class MalformedResponseError(ScannerError):
    """The reasoning service answered, but without a parseable ```json block."""


__all__ = [
    "ScannerError",
    "ConfigurationError",
    "TransportError",
    "ServiceError",
    "MalformedResponseError",
]
