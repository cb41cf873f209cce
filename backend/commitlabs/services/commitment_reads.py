"""Commitment Reads — simulated chain reads for commitments and attestations.

Invariants:
    - Detail reads come from a fixed in-process table until commitmentCore /
      commitmentNFT reads exist
    - List reads come from the mock data store and are always mapped through
      the DTO mappers before leaving this module
    - Unknown ids return None (the route decides on 404)
    - A malformed store record is skipped with a warning; the rest still list

Design Decisions:
    - Detail view keeps the chain's own shape (rules, currentValue, expiresAt);
      the list view uses the normalized CommitmentDto
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from commitlabs.core.commitment_view import days_remaining, nft_metadata_link
from commitlabs.core.commands import AttestationInput
from commitlabs.core.domain_types import CommitmentStatus
from commitlabs.core.dto import (
    ChainAttestationModel,
    ChainCommitmentModel,
    format_iso,
    map_attestation_from_chain,
    map_commitment_from_chain,
    parse_timestamp,
)
from commitlabs.infrastructure.mock_store import MockDataStore
from commitlabs.schemas.commitment import AttestationDto, CommitmentDto

logger = logging.getLogger(__name__)

# Missing keys, non-dict rows, bad numbers, DTO validation (a ValueError)
UNMAPPABLE_RECORD_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


def _record_id(raw: Any) -> str:
    return repr(raw.get("id")) if isinstance(raw, dict) else "(not an object)"


@dataclass(frozen=True)
class ChainCommitmentDetail:
    commitment_id: str
    owner: str
    rules: dict[str, Any]
    amount: str
    asset: str
    created_at: str
    expires_at: str
    current_value: str
    status: str
    drawdown_percent: float | None = None
    token_id: str | None = None


MOCK_CHAIN_COMMITMENTS: dict[str, ChainCommitmentDetail] = {
    "1": ChainCommitmentDetail(
        commitment_id="1",
        owner="GBRPYHIL2CI3FNQ4BXLFMNDLFJUNPU2HY3ZMFSHONUCEOASW7QC7OX2H",
        rules={
            "strategy": "balanced",
            "maxLossPercent": 8,
            "earlyExitPenaltyPercent": 3,
        },
        amount="100000",
        asset="USDC",
        created_at="2026-01-10T00:00:00.000Z",
        expires_at="2026-03-11T00:00:00.000Z",
        current_value="112500",
        status="Active",
        drawdown_percent=3.2,
        token_id="123456789",
    ),
    "2": ChainCommitmentDetail(
        commitment_id="2",
        owner="GCEZWKCA5VLDNRLN3RPRJMRZOX3Z6G5CHCGSNFHEYVXM3XOJMDS674JZ",
        rules={
            "strategy": "safe",
            "maxLossPercent": 2,
            "earlyExitPenaltyPercent": 2,
        },
        amount="50000",
        asset="XLM",
        created_at="2026-02-01T00:00:00.000Z",
        expires_at="2026-03-03T00:00:00.000Z",
        current_value="52600",
        status="Active",
        token_id="987654321",
    ),
}


async def get_commitment_from_chain(commitment_id: str) -> ChainCommitmentDetail | None:
    # TODO: replace with contract reads from commitmentCore + commitmentNFT
    return MOCK_CHAIN_COMMITMENTS.get(commitment_id)


def build_commitment_detail(
    commitment: ChainCommitmentDetail, nft_contract: str | None, now: datetime,
) -> dict[str, Any]:
    """Client-facing detail view with derived daysRemaining and NFT link."""
    expires_at = parse_timestamp(commitment.expires_at)
    max_loss = commitment.rules.get("maxLossPercent")
    return {
        "commitmentId": commitment.commitment_id,
        "owner": commitment.owner,
        "rules": commitment.rules,
        "amount": commitment.amount,
        "asset": commitment.asset,
        "createdAt": commitment.created_at,
        "expiresAt": commitment.expires_at,
        "currentValue": commitment.current_value,
        "status": commitment.status,
        "daysRemaining": days_remaining(expires_at, now) if expires_at else 0,
        "drawdownPercent": commitment.drawdown_percent,
        "maxLossPercent": (
            max_loss
            if isinstance(max_loss, (int, float)) and not isinstance(max_loss, bool)
            else None
        ),
        "tokenId": commitment.token_id,
        "nftMetadataLink": nft_metadata_link(commitment.token_id, nft_contract),
    }


async def list_commitments(
    store: MockDataStore,
    status: CommitmentStatus | None = None,
    owner_address: str | None = None,
) -> list[CommitmentDto]:
    """Commitments from the mock store, normalized and filtered."""
    data = await store.load()
    commitments = []
    for raw in data.commitments:
        try:
            commitments.append(
                map_commitment_from_chain(ChainCommitmentModel.from_mapping(raw)),
            )
        except UNMAPPABLE_RECORD_ERRORS as e:
            logger.warning(f"Skipping unmappable commitment record {_record_id(raw)}: {e!r}")
    if status is not None:
        commitments = [c for c in commitments if c.status == status]
    if owner_address is not None:
        wanted = owner_address.casefold()
        commitments = [
            c for c in commitments if c.owner_address.casefold() == wanted
        ]
    return commitments


async def list_attestations(
    store: MockDataStore, now: datetime, commitment_id: str | None = None,
) -> list[AttestationDto]:
    data = await store.load()
    attestations = []
    for raw in data.attestations:
        try:
            attestations.append(
                map_attestation_from_chain(ChainAttestationModel.from_mapping(raw), now=now),
            )
        except UNMAPPABLE_RECORD_ERRORS as e:
            logger.warning(f"Skipping unmappable attestation record {_record_id(raw)}: {e!r}")
    if commitment_id is not None:
        attestations = [a for a in attestations if a.commitment_id == commitment_id]
    return attestations


async def record_attestation(
    store: MockDataStore, command: AttestationInput, now: datetime,
) -> AttestationDto:
    """Append an attestation to the mock store and return its DTO."""
    raw: dict[str, Any] = {
        "id": f"att_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:12]}",
        "commitmentId": command.commitment_id,
        "ownerAddress": command.owner_address,
        "kind": command.kind,
        "observedAt": format_iso(now),
    }
    if command.verdict is not None:
        raw["verdict"] = command.verdict.value
    if command.details is not None:
        raw["details"] = command.details
    async with store.mutate() as data:
        data.attestations.append(raw)
    logger.info(
        "Attestation recorded",
        extra={"commitment_id": command.commitment_id},
    )
    return map_attestation_from_chain(ChainAttestationModel.from_mapping(raw), now=now)
