"""Attestation Routes — list and submit compliance observations."""

from fastapi import APIRouter, Depends, Request, status

from commitlabs.api.dependencies import client_key, get_mock_store, utcnow
from commitlabs.api.handler import with_api_handler
from commitlabs.core.validation import (
    parse_attestation_input, parse_json_body, validate_filters, validate_pagination,
)
from commitlabs.infrastructure import analytics
from commitlabs.infrastructure.mock_store import MockDataStore
from commitlabs.schemas.envelope import ok
from commitlabs.services.commitment_reads import list_attestations, record_attestation

router = APIRouter(prefix="/api/attestations", tags=["attestations"])


@router.get("")
@with_api_handler
async def list_attestations_route(
    request: Request, store: MockDataStore = Depends(get_mock_store),
):
    params = request.query_params
    pagination = validate_pagination(params.get("page"), params.get("limit"))
    filters = validate_filters({"commitmentId": params.get("commitmentId")})

    attestations = await list_attestations(
        store, utcnow(), commitment_id=filters.get("commitmentId"),
    )
    page = attestations[pagination.offset:pagination.offset + pagination.limit]
    return ok({
        "attestations": [a.to_wire() for a in page],
        "pagination": {"page": pagination.page, "limit": pagination.limit},
        "filters": filters,
        "total": len(attestations),
    })


@router.post("")
@with_api_handler
async def create_attestation(
    request: Request, store: MockDataStore = Depends(get_mock_store),
):
    command = parse_attestation_input(parse_json_body(await request.body()))
    attestation = await record_attestation(store, command, utcnow())
    analytics.log_attestation(
        client=client_key(request),
        attestationId=attestation.attestation_id,
        commitmentId=attestation.commitment_id,
        verdict=attestation.verdict.value,
    )
    return ok(attestation.to_wire(), status.HTTP_201_CREATED)
