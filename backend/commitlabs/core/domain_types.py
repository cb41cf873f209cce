"""Domain Types — identifiers and closed enumerations shared across the codebase.

Invariants:
    - CommitmentType, CommitmentStatus, AttestationVerdict values are lowercase
      wire strings
    - ListingStatus values are capitalized wire strings (Active/Sold/Cancelled)
    - All valid states encoded as Enums — no raw string matching outside core/

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

import re
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CommitmentId = NewType("CommitmentId", str)
ListingId = NewType("ListingId", str)
AttestationId = NewType("AttestationId", str)


# ─── Constants ───────────────────────────────────────────────────

DEFAULT_ASSET_CODE = "XLM"

# Stellar account (G...) or contract (C...) strkey: 56 base32 characters
STELLAR_ADDRESS_PATTERN = re.compile(r"^[GC][A-Z2-7]{55}$")

MIN_DURATION_DAYS = 1
MAX_DURATION_DAYS = 3650
MIN_MAX_LOSS_PERCENT = 0
MAX_MAX_LOSS_PERCENT = 100

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


# ─── Enums ───────────────────────────────────────────────────────

class CommitmentType(str, Enum):
    """Risk profile of a commitment."""
    SAFE = "safe"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"


class CommitmentStatus(str, Enum):
    """Commitment lifecycle states as exposed to clients."""
    ACTIVE = "active"
    SETTLED = "settled"
    VIOLATED = "violated"
    EARLY_EXIT = "early_exit"


class AttestationVerdict(str, Enum):
    """Outcome of a compliance observation."""
    PASS = "pass"
    FAIL = "fail"
    UNKNOWN = "unknown"


class ListingStatus(str, Enum):
    """Marketplace listing states. Sold and Cancelled are terminal."""
    ACTIVE = "Active"
    SOLD = "Sold"
    CANCELLED = "Cancelled"


# "early exit" arrives spelled three ways from the chain layer
EARLY_EXIT_SPELLINGS = frozenset({"early exit", "early_exit", "early-exit"})


def normalize_commitment_status(value: str | None) -> CommitmentStatus | None:
    """Map a raw status string onto CommitmentStatus. None when unrecognized."""
    if not isinstance(value, str):
        return None
    normalized = value.strip().lower()
    if normalized in EARLY_EXIT_SPELLINGS:
        return CommitmentStatus.EARLY_EXIT
    try:
        return CommitmentStatus(normalized)
    except ValueError:
        return None
