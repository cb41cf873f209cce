"""Marketplace Routes — browse, create, fetch and cancel Commitment NFT listings.

Invariants:
    - POST /listings → 201 {listing}; 409 when the commitment is already listed
    - DELETE /listings/{id} requires the sellerAddress query parameter
    - Validation and state-machine rules live in the service/core, not here
"""

from fastapi import APIRouter, Depends, Request, status

from commitlabs.api.dependencies import get_marketplace_service
from commitlabs.api.handler import with_api_handler
from commitlabs.core.domain_types import ListingStatus
from commitlabs.core.errors import NotFoundError, ValidationError
from commitlabs.core.validation import (
    parse_json_body,
    require_object,
    validate_amount,
    validate_filters,
    validate_pagination,
)
from commitlabs.schemas.envelope import ok
from commitlabs.schemas.marketplace import CancelListingResponse
from commitlabs.services.marketplace import MarketplaceService

router = APIRouter(prefix="/api/marketplace", tags=["marketplace"])


def _parse_listing_status(value: str) -> ListingStatus:
    for member in ListingStatus:
        if member.value.lower() == value.strip().lower():
            return member
    choices = ", ".join(m.value for m in ListingStatus)
    raise ValidationError(f"status must be one of: {choices}.", field="status")


@router.get("")
@with_api_handler
async def browse_listings(
    request: Request,
    service: MarketplaceService = Depends(get_marketplace_service),
):
    """Paginated listing browse with status, currency and price-range filters."""
    params = request.query_params
    pagination = validate_pagination(params.get("page"), params.get("limit"))
    filters = validate_filters({
        "status": params.get("status"),
        "currencyAsset": params.get("currencyAsset"),
        "minPrice": params.get("minPrice"),
        "maxPrice": params.get("maxPrice"),
    })

    listings = await service.list_listings(
        status=(
            _parse_listing_status(filters["status"]) if "status" in filters else None
        ),
        currency_asset=filters.get("currencyAsset"),
        min_price=(
            validate_amount(filters["minPrice"], "minPrice")
            if "minPrice" in filters else None
        ),
        max_price=(
            validate_amount(filters["maxPrice"], "maxPrice")
            if "maxPrice" in filters else None
        ),
    )
    page = listings[pagination.offset:pagination.offset + pagination.limit]
    return ok({
        "listings": [listing.to_wire() for listing in page],
        "pagination": {"page": pagination.page, "limit": pagination.limit},
        "filters": filters,
        "total": len(listings),
    })


@router.post("/listings")
@with_api_handler
async def create_listing(
    request: Request,
    service: MarketplaceService = Depends(get_marketplace_service),
):
    """Create a marketplace listing for a Commitment NFT."""
    body = require_object(parse_json_body(await request.body()))
    listing = await service.create_listing(body)
    return ok({"listing": listing.to_wire()}, status.HTTP_201_CREATED)


@router.get("/listings/{listing_id}")
@with_api_handler
async def get_listing(
    request: Request,
    listing_id: str,
    service: MarketplaceService = Depends(get_marketplace_service),
):
    listing = await service.get_listing(listing_id)
    if listing is None:
        raise NotFoundError("Listing", {"listingId": listing_id})
    return ok({"listing": listing.to_wire()})


@router.delete("/listings/{listing_id}")
@with_api_handler
async def cancel_listing(
    request: Request,
    listing_id: str,
    service: MarketplaceService = Depends(get_marketplace_service),
):
    """Cancel an Active listing. Only the original seller may cancel."""
    seller_address = request.query_params.get("sellerAddress")
    if not seller_address:
        raise ValidationError("sellerAddress query parameter is required")

    await service.cancel_listing(listing_id, seller_address)
    return ok(CancelListingResponse(
        listing_id=listing_id,
        cancelled=True,
        message="Listing cancelled successfully",
    ).to_wire())
