"""Listing Rules — pure state-machine checks for marketplace listings.

Invariants:
    - Transitions: Active → Cancelled, Active → Sold. Sold and Cancelled are terminal
    - At most one Active listing per commitment_id
    - Only the original seller (exact match) may cancel
    - Check order for cancel: seller identity first, then status

Design Decisions:
    - Raise taxonomy errors (not return dicts): the handler wrapper is the single
      place that turns failures into responses
"""

from datetime import datetime

from commitlabs.core.domain_types import ListingStatus
from commitlabs.core.errors import ConflictError, ValidationError
from commitlabs.schemas.marketplace import MarketplaceListing


def make_listing_id(counter: int, now: datetime) -> str:
    """listing_<counter>_<epoch millis>."""
    return f"listing_{counter}_{int(now.timestamp() * 1000)}"


def check_no_active_listing(
    commitment_id: str, active: list[MarketplaceListing],
) -> None:
    """Reject a new listing when the commitment is already listed."""
    if active:
        raise ConflictError(
            "Commitment is already listed on the marketplace.",
            {"commitmentId": commitment_id, "existingListingId": active[0].id},
        )


def check_can_cancel(listing: MarketplaceListing, seller_address: str) -> None:
    """Seller must match and the listing must still be Active."""
    if listing.seller_address != seller_address:
        raise ValidationError(
            "Only the seller can cancel this listing.",
            {
                "listingId": listing.id,
                "expectedSeller": listing.seller_address,
                "providedSeller": seller_address,
            },
        )
    if listing.status != ListingStatus.ACTIVE:
        raise ConflictError(
            "Only active listings can be cancelled.",
            {"listingId": listing.id, "currentStatus": listing.status.value},
        )
