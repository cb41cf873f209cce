"""Marketplace Service — listing creation, cancellation and lookup for Commitment NFTs.

Invariants:
    - The service exclusively owns its repository; no other write path exists
    - create_listing validates all fields in one pass (aggregated ValidationError)
    - Duplicate check + insert for a commitment run under that commitment's lock,
      so two concurrent creates cannot both see "no active listing"
    - A commitment's lock exists only while some create holds or awaits it
    - cancel_listing mutates nothing when it raises
    - get_listing never raises for an unknown id

Design Decisions:
    - Repository injected (ListingRepository protocol): storage swappable without
      touching the invariants
    - Per-commitment asyncio.Lock over a global lock: unrelated commitments never
      wait on each other
    - Injectable clock for deterministic ids/timestamps in tests
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from commitlabs.core.domain_types import ListingId, ListingStatus
from commitlabs.core.dto import format_iso
from commitlabs.core.errors import NotFoundError
from commitlabs.core.listing_rules import (
    check_can_cancel, check_no_active_listing, make_listing_id,
)
from commitlabs.core.repository_protocols import ListingRepository
from commitlabs.core.validation import validate_create_listing_request
from commitlabs.schemas.marketplace import MarketplaceListing

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MarketplaceService:
    """Marketplace operations over an injected listing repository."""

    def __init__(
        self,
        repository: ListingRepository,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._repository = repository
        self._clock = clock
        self._listing_counter = 0
        self._commitment_locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @asynccontextmanager
    async def _commitment_lock(self, commitment_id: str) -> AsyncIterator[None]:
        """Hold the commitment's lock; drop it once no task holds or awaits it."""
        lock = self._commitment_locks.setdefault(commitment_id, asyncio.Lock())
        self._lock_users[commitment_id] = self._lock_users.get(commitment_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[commitment_id] -= 1
            if self._lock_users[commitment_id] == 0:
                del self._lock_users[commitment_id]
                del self._commitment_locks[commitment_id]

    async def create_listing(self, request: Mapping[str, Any]) -> MarketplaceListing:
        """Create an Active listing. ConflictError if the commitment is already listed."""
        logger.info(
            "Creating listing",
            extra={"commitment_id": request.get("commitmentId")},
        )
        command = validate_create_listing_request(request)

        async with self._commitment_lock(command.commitment_id):
            active = await self._repository.list_active_by_commitment(
                command.commitment_id,
            )
            check_no_active_listing(command.commitment_id, active)

            self._listing_counter += 1
            now = self._clock()
            timestamp = format_iso(now)
            listing = MarketplaceListing(
                id=make_listing_id(self._listing_counter, now),
                commitment_id=command.commitment_id,
                price=command.price,
                currency_asset=command.currency_asset,
                seller_address=command.seller_address,
                status=ListingStatus.ACTIVE,
                created_at=timestamp,
                updated_at=timestamp,
            )
            await self._repository.put(listing)

        logger.info("Listing created", extra={"listing_id": listing.id})
        return listing

    async def cancel_listing(
        self, listing_id: str, seller_address: str,
    ) -> MarketplaceListing:
        """Cancel an Active listing on behalf of its seller."""
        logger.info("Cancelling listing", extra={"listing_id": listing_id})

        listing = await self._repository.get(ListingId(listing_id))
        if listing is None:
            raise NotFoundError("Listing", {"listingId": listing_id})

        check_can_cancel(listing, seller_address)

        cancelled = listing.model_copy(update={
            "status": ListingStatus.CANCELLED,
            "updated_at": format_iso(self._clock()),
        })
        await self._repository.put(cancelled)

        logger.info("Listing cancelled", extra={"listing_id": listing_id})
        return cancelled

    async def get_listing(self, listing_id: str) -> MarketplaceListing | None:
        return await self._repository.get(ListingId(listing_id))

    async def list_listings(
        self,
        status: ListingStatus | None = None,
        currency_asset: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> list[MarketplaceListing]:
        """All listings matching every given filter, in creation order."""
        listings = await self._repository.list_all()
        if status is not None:
            listings = [item for item in listings if item.status == status]
        if currency_asset is not None:
            wanted = currency_asset.upper()
            listings = [
                item for item in listings if item.currency_asset.upper() == wanted
            ]
        if min_price is not None:
            listings = [item for item in listings if Decimal(item.price) >= min_price]
        if max_price is not None:
            listings = [item for item in listings if Decimal(item.price) <= max_price]
        return listings
