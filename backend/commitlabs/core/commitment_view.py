"""Commitment View — derived fields for the commitment detail endpoint."""

import math
from datetime import datetime

MS_PER_DAY = 24 * 60 * 60 * 1000


def days_remaining(expires_at: datetime, now: datetime) -> int:
    """ceil((expires_at - now) / 1 day), floored at 0."""
    remaining_ms = (expires_at - now).total_seconds() * 1000
    return max(0, math.ceil(remaining_ms / MS_PER_DAY))


def nft_metadata_link(token_id: str | None, nft_contract: str | None) -> str | None:
    if not token_id or not nft_contract:
        return None
    return f"{nft_contract}/metadata/{token_id}"
