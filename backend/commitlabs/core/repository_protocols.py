"""Boundary Protocols — contracts between core/services and storage.

Invariants:
    - Services depend on these Protocols, never on a concrete store
    - Implementations provided by infrastructure via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async methods: implementations may do IO even though the in-memory one doesn't
"""

from typing import Protocol

from commitlabs.core.domain_types import ListingId
from commitlabs.schemas.marketplace import MarketplaceListing


class ListingRepository(Protocol):
    """Contract for marketplace listing storage."""
    async def get(self, listing_id: ListingId) -> MarketplaceListing | None: ...
    async def put(self, listing: MarketplaceListing) -> None: ...
    async def list_active_by_commitment(
        self, commitment_id: str,
    ) -> list[MarketplaceListing]: ...
    async def list_all(self) -> list[MarketplaceListing]: ...


class RateLimiter(Protocol):
    """Contract for request rate limiting keyed by client and route."""
    async def check(self, client_key: str, route: str) -> bool: ...
    def retry_after(self, client_key: str, route: str) -> int: ...