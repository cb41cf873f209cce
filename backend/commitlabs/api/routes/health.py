"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /api/health always returns 200 if the process is up (liveness)
    - GET /api/ready returns 503 when a configured Soroban RPC is unreachable
    - An unconfigured RPC URL is reported but does not make the service not-ready

Design Decisions:
    - Probe bodies are not wrapped in the success envelope: load balancers and
      uptime checks read `status` at the top level
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from commitlabs.api.dependencies import get_backend_config, utcnow
from commitlabs.config import BackendConfig
from commitlabs.core.dto import format_iso
from commitlabs.infrastructure.soroban_rpc import check_soroban_rpc

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Basic liveness probe."""
    logger.info("Healthcheck requested", extra={"path": request.url.path})
    return {"status": "ok", "timestamp": format_iso(utcnow())}


@router.get("/ready")
async def readiness_check(config: BackendConfig = Depends(get_backend_config)):
    """Readiness probe — includes Soroban RPC connectivity."""
    logger.info("Readiness check requested")

    if not config.soroban_rpc_url:
        logger.warning("SOROBAN_RPC_URL not configured, skipping RPC connectivity check")
        ready = True
        rpc_check: dict = {"reachable": None, "note": "not configured"}
    else:
        rpc = await check_soroban_rpc(
            config.soroban_rpc_url, config.rpc_timeout_seconds,
        )
        ready = rpc.reachable
        rpc_check = rpc.to_dict()

    logger.info(f"Readiness check complete: ready={ready}")
    return JSONResponse(
        status_code=(
            status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE
        ),
        content={
            "status": "ready" if ready else "not_ready",
            "timestamp": format_iso(utcnow()),
            "checks": {"sorobanRpc": rpc_check},
        },
    )
