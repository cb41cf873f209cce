"""Soroban RPC Probe — JSON-RPC getHealth ping for the readiness endpoint.

Invariants:
    - Exactly one POST per probe, bounded by an explicit timeout (default 5s)
    - Never raises: every failure is reported as reachable=False with an error string
    - No retries

Design Decisions:
    - httpx.AsyncClient per probe: readiness checks are rare, pooling buys nothing
    - Optional transport parameter: tests inject httpx.MockTransport
"""

import logging
import time
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

HEALTH_REQUEST = {"jsonrpc": "2.0", "id": 1, "method": "getHealth", "params": []}


@dataclass(frozen=True)
class RpcHealth:
    reachable: bool
    latency_ms: int | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {"reachable": self.reachable}
        if self.latency_ms is not None:
            result["latencyMs"] = self.latency_ms
        if self.error is not None:
            result["error"] = self.error
        return result


async def check_soroban_rpc(
    url: str,
    timeout_seconds: float = 5.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RpcHealth:
    """Ping the RPC endpoint with getHealth and report reachability."""
    start = time.monotonic()
    try:
        async with httpx.AsyncClient(
            timeout=timeout_seconds, transport=transport,
        ) as client:
            response = await client.post(url, json=HEALTH_REQUEST)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(
            f"Soroban RPC connectivity check failed: {e!r}",
            extra={"path": url},
        )
        return RpcHealth(reachable=False, error=str(e) or type(e).__name__)

    latency_ms = int((time.monotonic() - start) * 1000)
    if response.is_error:
        logger.warning(
            f"Soroban RPC responded with HTTP {response.status_code}",
            extra={"status_code": response.status_code, "latency_ms": latency_ms},
        )
        return RpcHealth(
            reachable=False,
            latency_ms=latency_ms,
            error=f"RPC responded with HTTP {response.status_code}",
        )

    logger.debug("Soroban RPC reachable", extra={"latency_ms": latency_ms})
    return RpcHealth(reachable=True, latency_ms=latency_ms)
