"""Marketplace Schemas — listing entity and route response shapes.

Invariants:
    - MarketplaceListing.status is a ListingStatus (Active/Sold/Cancelled)
    - created_at/updated_at are ISO-8601 strings
    - Listings are replaced with model_copy(), never mutated while stored
"""

from commitlabs.core.domain_types import ListingStatus
from commitlabs.schemas.commitment import WireModel


class MarketplaceListing(WireModel):
    id: str
    commitment_id: str
    price: str
    currency_asset: str
    seller_address: str
    status: ListingStatus
    created_at: str
    updated_at: str


class CancelListingResponse(WireModel):
    listing_id: str
    cancelled: bool
    message: str
