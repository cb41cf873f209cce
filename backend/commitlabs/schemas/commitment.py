"""Commitment & Attestation Schemas — client-facing DTOs.

Invariants:
    - CommitmentDto.asset_issuer is None when asset_code == "XLM"
    - AttestationDto.details is serialized only when it was set by the mapper
    - Wire keys are camelCase (commitmentId, ownerAddress, ...)
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from commitlabs.core.domain_types import (
    AttestationVerdict, CommitmentStatus, CommitmentType,
)


class WireModel(BaseModel):
    """Base for camelCase wire models."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class CommitmentDto(WireModel):
    commitment_id: str
    owner_address: str
    amount: str
    asset_code: str
    asset_issuer: str | None
    duration_days: int | float
    max_loss_percent: int | float
    commitment_type: CommitmentType
    status: CommitmentStatus
    nft_token_id: str | None


class AttestationDto(WireModel):
    attestation_id: str
    commitment_id: str
    owner_address: str
    kind: str
    verdict: AttestationVerdict
    observed_at: str
    details: Any = None

    def to_wire(self) -> dict:
        # details omitted when absent, never defaulted to {} or null
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
