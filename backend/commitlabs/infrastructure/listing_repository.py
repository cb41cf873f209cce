"""In-Memory Listing Repository — dict-backed ListingRepository implementation.

Invariants:
    - Keyed by listing id; put() replaces the stored object
    - Nothing is ever deleted — cancelled listings stay queryable
    - Insertion order preserved for list_all()

Design Decisions:
    - ADR: in-memory, single-process uvicorn; state lost on restart.
      A durable store implements the same ListingRepository protocol
"""

from commitlabs.core.domain_types import ListingId, ListingStatus
from commitlabs.schemas.marketplace import MarketplaceListing


class InMemoryListingRepository:

    def __init__(self) -> None:
        self._listings: dict[str, MarketplaceListing] = {}

    async def get(self, listing_id: ListingId) -> MarketplaceListing | None:
        return self._listings.get(listing_id)

    async def put(self, listing: MarketplaceListing) -> None:
        self._listings[listing.id] = listing

    async def list_active_by_commitment(
        self, commitment_id: str,
    ) -> list[MarketplaceListing]:
        return [
            listing for listing in self._listings.values()
            if listing.commitment_id == commitment_id
            and listing.status == ListingStatus.ACTIVE
        ]

    async def list_all(self) -> list[MarketplaceListing]:
        return list(self._listings.values())
