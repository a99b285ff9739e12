"""Resilient HTTP Fetcher"""
from __future__ import annotations

import asyncio
import socket
import ssl
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable

import httpx
import structlog

logger = structlog.get_logger()

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "*/*",
    "Accept-Encoding": "gzip, deflate",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "Pragma": "no-cache",
}

# 404 / 403 はリトライしても結果が変わらない
DEFINITIVE_STATUS_CODES = frozenset([403, 404])

Resolver = Callable[[str], Awaitable[list[str]]]
Sleep = Callable[[float], Awaitable[None]]


class FetchFailedError(Exception):
    """全戦略での取得失敗エラー"""

    def __init__(self, message: str, last_error: Exception | None = None):
        super().__init__(message)
        self.last_error = last_error


class TlsProfile(str, Enum):
    """TLS 接続プロファイル"""

    MODERN = "modern"  # TLS 1.2 - 1.3
    LEGACY = "legacy"  # 旧端末向けに TLS 1.0 以上を許容
    DEFAULT = "default"  # ライブラリ既定


def build_ssl_context(profile: TlsProfile) -> ssl.SSLContext:
    """
    TLS プロファイルから SSLContext を構築

    照会サービスの証明書は信頼できないことがあるため、検証は行わない。
    """
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE

    if profile == TlsProfile.MODERN:
        context.minimum_version = ssl.TLSVersion.TLSv1_2
        context.maximum_version = ssl.TLSVersion.TLSv1_3
    elif profile == TlsProfile.LEGACY:
        context.minimum_version = ssl.TLSVersion.TLSv1
        context.set_ciphers("DEFAULT:@SECLEVEL=0")

    return context


@dataclass(frozen=True)
class FetchStrategy:
    """1 回の接続試行の設定"""

    url: str
    description: str
    tls_profile: TlsProfile | None = None
    headers: dict[str, str] = field(default_factory=dict)
    sni_hostname: str | None = None


async def resolve_ipv4(host: str) -> list[str]:
    """ホスト名を IPv4 アドレスに解決（解決順を保持し重複除去）"""
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(host, None, family=socket.AF_INET, type=socket.SOCK_STREAM)
    addresses: list[str] = []
    for *_, sockaddr in infos:
        if sockaddr[0] not in addresses:
            addresses.append(sockaddr[0])
    return addresses


def build_strategies(url: str, resolved_ip: str | None = None) -> list[FetchStrategy]:
    """
    接続戦略を構築

    1. 元の URL を各 TLS プロファイルで
    2. DNS 解決済み IP を直接指定（Host ヘッダと SNI は元のホスト名）
    3. HTTP へのフォールバック

    2 と 3 は https の URL の場合のみ。
    """
    parsed = httpx.URL(url)
    is_https = parsed.scheme == "https"
    strategies: list[FetchStrategy] = []

    if is_https:
        for index, profile in enumerate(TlsProfile, start=1):
            strategies.append(
                FetchStrategy(url=url, description=f"HTTPS Agent {index}", tls_profile=profile)
            )
    else:
        strategies.append(FetchStrategy(url=url, description="Plain HTTP"))

    if is_https and resolved_ip:
        host_header = parsed.host if parsed.port is None else f"{parsed.host}:{parsed.port}"
        ip_url = str(parsed.copy_with(host=resolved_ip))
        for index, profile in enumerate(TlsProfile, start=1):
            strategies.append(
                FetchStrategy(
                    url=ip_url,
                    description=f"Direct IP {resolved_ip} with Agent {index}",
                    tls_profile=profile,
                    headers={"Host": host_header},
                    sni_hostname=parsed.host,
                )
            )

    if is_https:
        strategies.append(
            FetchStrategy(
                url=str(parsed.copy_with(scheme="http")),
                description="HTTP Fallback",
            )
        )

    return strategies


class ResilientFetcher:
    """
    Resilient Fetcher

    不安定な外部 HTTP サービス向けに、複数の接続戦略を順に試し、
    試行ごとに指数バックオフで再試行する。

    - 2xx は即座に返す
    - 404 / 403 は確定的なレスポンスとして即座に返す
    - それ以外のステータスと通信エラーは次の戦略へ
    """

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        strategy_delay_ms: int = 100,
        backoff_base_ms: int = 1000,
        backoff_max_ms: int = 5000,
        resolver: Resolver | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep | None = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.strategy_delay_ms = strategy_delay_ms
        self.backoff_base_ms = backoff_base_ms
        self.backoff_max_ms = backoff_max_ms
        self._resolver = resolver or resolve_ipv4
        self._transport = transport
        self._sleep = sleep or asyncio.sleep

    def backoff_ms(self, attempt: int) -> int:
        """attempt 回目（0 始まり）の後の待機時間"""
        return min(self.backoff_base_ms * (2**attempt), self.backoff_max_ms)

    async def _resolve(self, url: str) -> str | None:
        parsed = httpx.URL(url)
        if parsed.scheme != "https":
            return None

        try:
            addresses = await self._resolver(parsed.host)
        except OSError as e:
            logger.warning("dns_resolution_failed", host=parsed.host, error=str(e))
            return None

        if not addresses:
            return None

        logger.info("dns_resolved", host=parsed.host, address=addresses[0])
        return addresses[0]

    def _client_for(self, strategy: FetchStrategy) -> httpx.AsyncClient:
        if self._transport is not None:
            return httpx.AsyncClient(transport=self._transport, timeout=self.timeout_seconds)

        verify: ssl.SSLContext | bool = False
        if strategy.tls_profile is not None:
            verify = build_ssl_context(strategy.tls_profile)
        return httpx.AsyncClient(verify=verify, timeout=self.timeout_seconds)

    async def _attempt(
        self,
        strategy: FetchStrategy,
        method: str,
        headers: dict[str, str] | None,
    ) -> httpx.Response:
        merged = {**DEFAULT_HEADERS, **strategy.headers, **(headers or {})}
        extensions = {"sni_hostname": strategy.sni_hostname} if strategy.sni_hostname else None

        async with self._client_for(strategy) as client:
            return await client.request(
                method,
                strategy.url,
                headers=merged,
                extensions=extensions,
            )

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        max_retries: int = 3,
    ) -> httpx.Response:
        """
        URL を取得

        Args:
            url: 取得する URL
            method: HTTP メソッド
            headers: 追加ヘッダ（既定ヘッダを上書き）
            max_retries: 全戦略を一巡する試行回数

        Returns:
            httpx.Response: 2xx または 404 / 403 のレスポンス

        Raises:
            FetchFailedError: すべての試行が失敗した場合
        """
        log = logger.bind(url=url, method=method)
        strategies = build_strategies(url, await self._resolve(url))
        last_error: Exception | None = None

        for attempt in range(max_retries):
            for strategy in strategies:
                log.info(
                    "fetch_attempt",
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    strategy=strategy.description,
                    target=strategy.url,
                )

                try:
                    response = await self._attempt(strategy, method, headers)
                except httpx.HTTPError as e:
                    log.warning(
                        "fetch_strategy_failed",
                        strategy=strategy.description,
                        error_type=type(e).__name__,
                        error=str(e),
                    )
                    last_error = e
                else:
                    if response.is_success or response.status_code in DEFINITIVE_STATUS_CODES:
                        log.info(
                            "fetch_completed",
                            strategy=strategy.description,
                            status_code=response.status_code,
                        )
                        return response

                    log.warning(
                        "fetch_unexpected_status",
                        strategy=strategy.description,
                        status_code=response.status_code,
                    )

                await self._sleep(self.strategy_delay_ms / 1000)

            if attempt < max_retries - 1:
                delay_ms = self.backoff_ms(attempt)
                log.info("fetch_backoff", delay_ms=delay_ms)
                await self._sleep(delay_ms / 1000)

        if last_error is not None:
            raise FetchFailedError(str(last_error) or type(last_error).__name__, last_error)
        raise FetchFailedError("All fetch strategies failed")
