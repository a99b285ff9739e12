"""Resilient HTTP"""
from .resilient_fetcher import (
    FetchFailedError,
    FetchStrategy,
    ResilientFetcher,
    TlsProfile,
    build_ssl_context,
    build_strategies,
    resolve_ipv4,
)

__all__ = [
    "FetchFailedError",
    "FetchStrategy",
    "ResilientFetcher",
    "TlsProfile",
    "build_ssl_context",
    "build_strategies",
    "resolve_ipv4",
]
