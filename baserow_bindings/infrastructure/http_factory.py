"""
HTTP client factory for Baserow Bindings.

Centralizes construction of the httpx client shared by the schema fetcher and
the record client: token header, JSON accept header, timeout and an optional
transport override (tests pass an `httpx.MockTransport`).
"""

from __future__ import annotations

from typing import Optional

import httpx

from baserow_bindings.config import Settings


def build_headers(token: str) -> dict:
    return {
        "Authorization": f"Token {token}",
        "Accept": "application/json",
    }


def build_http_client(
    token: str,
    timeout_seconds: float = 30.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """
    Create an httpx client carrying the Baserow token.

    Parameters
    ----------
    token : str
        Database token.
    timeout_seconds : float
        Per-request timeout.
    transport : httpx.BaseTransport | None
        Transport override; None uses the default network transport.

    Returns
    -------
    httpx.Client
        Caller owns the client and must close it.
    """
    return httpx.Client(
        headers=build_headers(token),
        timeout=timeout_seconds,
        transport=transport,
    )


def http_client_from_settings(
    settings: Settings, transport: Optional[httpx.BaseTransport] = None
) -> httpx.Client:
    return build_http_client(
        settings.token,
        timeout_seconds=settings.http_timeout_seconds,
        transport=transport,
    )


__all__ = ["build_headers", "build_http_client", "http_client_from_settings"]
