"""Diagnose Use Case"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

import structlog

from face_matcher.application.ports.gateways import ICandidateGateway

logger = structlog.get_logger()


@dataclass
class DiagnoseOutput:
    """診断結果出力DTO"""

    dns: dict[str, Any] = field(default_factory=dict)
    external_api_test: dict[str, Any] = field(default_factory=dict)


class DiagnoseUseCase:
    """
    接続診断 ユースケース

    Aadhaar 照会サービスの DNS 解決と疎通を確認する。
    失敗は例外にせず、結果として返す。
    """

    def __init__(
        self,
        candidate_gateway: ICandidateGateway,
        resolver: Callable[[str], Awaitable[list[str]]],
        host: str,
    ):
        self._candidate_gateway = candidate_gateway
        self._resolver = resolver
        self.host = host

    async def execute(self) -> DiagnoseOutput:
        output = DiagnoseOutput()

        try:
            addresses = await self._resolver(self.host)
            output.dns = {"resolved": True, "addresses": addresses}
        except OSError as e:
            logger.warning("diagnose_dns_failed", host=self.host, error=str(e))
            output.dns = {"resolved": False, "error": str(e)}

        probe = await self._candidate_gateway.probe()
        if probe.reachable:
            output.external_api_test = {
                "reachable": True,
                "status": probe.status_code,
                "statusText": probe.reason,
            }
        else:
            output.external_api_test = {"reachable": False, "error": probe.error}

        logger.info("diagnose_completed", dns_resolved=output.dns["resolved"], reachable=probe.reachable)
        return output
