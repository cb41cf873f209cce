"""Domain Commands — typed results of parsing untrusted request input.

Invariants:
    - Commands are immutable (frozen dataclasses)
    - A command only exists if every validation rule passed
    - CreateCommitmentInput.asset_issuer is None iff asset_code == "XLM"

Design Decisions:
    - Dataclasses over Pydantic here: commands are produced by hand-written parsers
      with a fixed rule order and field-specific messages
"""

from dataclasses import dataclass

from commitlabs.core.domain_types import (
    CommitmentStatus, CommitmentType, AttestationVerdict,
)


@dataclass(frozen=True)
class SignatureContext:
    """Optional wallet signature attached to a mutating request."""
    nonce: str | None = None
    signature: str | None = None
    signer_address: str | None = None


@dataclass(frozen=True)
class CreateCommitmentInput:
    owner_address: str
    amount: str
    asset_code: str
    asset_issuer: str | None
    duration_days: int
    max_loss_percent: int
    commitment_type: CommitmentType
    signature_context: SignatureContext | None = None


@dataclass(frozen=True)
class EarlyExitInput:
    owner_address: str
    current_status: CommitmentStatus | None = None
    signature_context: SignatureContext | None = None


@dataclass(frozen=True)
class AttestationInput:
    commitment_id: str
    owner_address: str
    kind: str
    verdict: AttestationVerdict | None = None
    details: dict | None = None


@dataclass(frozen=True)
class CreateListingRequest:
    commitment_id: str
    price: str
    currency_asset: str
    seller_address: str


@dataclass(frozen=True)
class PaginationParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
