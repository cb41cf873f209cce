"""Commitment Routes — list, create, detail, early exit and settle.

Invariants:
    - Mutating routes are rate limited per (client, route) before anything else
    - Bodies go through parse_json_body → command parser; no route reads raw
      fields itself
    - Settle parses its body best-effort only (analytics), never rejecting it
    - Every response is an envelope (with_api_handler)
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from commitlabs.api.dependencies import (
    enforce_rate_limit, get_backend_config, get_mock_store, utcnow,
)
from commitlabs.api.handler import with_api_handler
from commitlabs.config import BackendConfig
from commitlabs.core.domain_types import normalize_commitment_status
from commitlabs.core.dto import map_commitment_from_chain
from commitlabs.core.errors import NotFoundError, ValidationError
from commitlabs.core.validation import (
    parse_create_commitment_input,
    parse_early_exit_input,
    parse_json_body,
    validate_address,
    validate_filters,
    validate_pagination,
)
from commitlabs.infrastructure import analytics
from commitlabs.infrastructure.mock_store import MockDataStore
from commitlabs.schemas.envelope import ok
from commitlabs.services.commitment_reads import (
    build_commitment_detail, get_commitment_from_chain, list_commitments,
)
from commitlabs.services.contracts import (
    create_commitment_on_chain, early_exit_commitment_on_chain,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/commitments", tags=["commitments"])


@router.get("")
@with_api_handler
async def list_commitments_route(
    request: Request, store: MockDataStore = Depends(get_mock_store),
):
    """List commitments with pagination and status/owner filters."""
    params = request.query_params
    limit_field = "pageSize" if "pageSize" in params else "limit"
    pagination = validate_pagination(
        params.get("page"), params.get(limit_field), limit_field,
    )
    filters = validate_filters({
        "status": params.get("status"),
        "ownerAddress": params.get("ownerAddress") or params.get("creator"),
    })

    status_filter = None
    if "status" in filters:
        status_filter = normalize_commitment_status(str(filters["status"]))
        if status_filter is None:
            raise ValidationError(
                "status must be one of: active, settled, violated, early_exit.",
                field="status",
            )
    owner_filter = None
    if "ownerAddress" in filters:
        owner_filter = validate_address(filters["ownerAddress"], "ownerAddress")

    commitments = await list_commitments(store, status_filter, owner_filter)
    page = commitments[pagination.offset:pagination.offset + pagination.limit]
    return ok({
        "commitments": [c.to_wire() for c in page],
        "pagination": {"page": pagination.page, "limit": pagination.limit},
        "filters": filters,
        "total": len(commitments),
    })


@router.post("")
@with_api_handler
async def create_commitment(
    request: Request, config: BackendConfig = Depends(get_backend_config),
):
    """Validate a commitment and submit it to the (simulated) chain."""
    client = await enforce_rate_limit(request, "api/commitments")

    command = parse_create_commitment_input(parse_json_body(await request.body()))
    result = await create_commitment_on_chain(config, command)
    commitment = map_commitment_from_chain(result.commitment)

    analytics.log_commitment_created(
        client=client,
        commitmentId=result.commitment_id,
        ownerAddress=command.owner_address,
        amount=command.amount,
        assetCode=command.asset_code,
    )
    return ok(
        {
            "commitmentId": result.commitment_id,
            "nftTokenId": result.nft_token_id,
            "txHash": result.tx_hash,
            "reference": result.reference,
            "commitment": commitment.to_wire(),
        },
        status.HTTP_201_CREATED,
    )


@router.get("/{commitment_id}")
@with_api_handler
async def get_commitment(
    request: Request,
    commitment_id: str,
    config: BackendConfig = Depends(get_backend_config),
):
    """Commitment detail with daysRemaining and NFT metadata link."""
    commitment = await get_commitment_from_chain(commitment_id)
    if commitment is None:
        raise NotFoundError("Commitment", {"commitmentId": commitment_id})
    return ok(build_commitment_detail(
        commitment, config.commitment_nft_contract, utcnow(),
    ))


@router.post("/{commitment_id}/early-exit")
@with_api_handler
async def early_exit_commitment(
    request: Request,
    commitment_id: str,
    config: BackendConfig = Depends(get_backend_config),
):
    """Exit a commitment before expiry (simulated on-chain)."""
    client = await enforce_rate_limit(request, "api/commitments/early-exit")

    command = parse_early_exit_input(parse_json_body(await request.body()))
    result = await early_exit_commitment_on_chain(config, commitment_id, command)

    analytics.log_early_exit(
        client=client,
        commitmentId=commitment_id,
        ownerAddress=command.owner_address,
        penaltyAmount=result.penalty_amount,
    )
    return ok({
        "commitmentId": commitment_id,
        "penaltyAmount": result.penalty_amount,
        "returnedAmount": result.returned_amount,
        "txHash": result.tx_hash,
        "reference": result.reference,
    })


@router.post("/{commitment_id}/settle")
@with_api_handler
async def settle_commitment(request: Request, commitment_id: str):
    """Settlement stub — records the request for analytics only."""
    client = await enforce_rate_limit(request, "api/commitments/settle")

    # TODO: settle through commitmentCore once chain writes are implemented
    try:
        body = parse_json_body(await request.body())
    except ValidationError:
        analytics.log_commitment_settled(
            client=client, commitmentId=commitment_id,
            error="failed to parse request body",
        )
    else:
        extra = body if isinstance(body, dict) else {}
        analytics.log_commitment_settled(
            **{**extra, "client": client, "commitmentId": commitment_id},
        )

    return ok({
        "message": f"Stub settlement endpoint for commitment {commitment_id}",
        "commitmentId": commitment_id,
    })
