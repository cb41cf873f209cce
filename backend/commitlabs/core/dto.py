"""DTO Mappers — normalize chain-sourced models into client-facing DTOs.

Invariants:
    - Pure apart from the clock: `now` is passed in, or read once when omitted
    - Identifier and amount fields are always strings in the DTO
    - Missing asset code defaults to XLM; XLM always has a None issuer
    - Missing or unrecognized commitment type → balanced; same for status → active
    - Unrecognized or missing verdict → unknown
    - Missing or unparseable observedAt → `now`
    - Attestation details pass through only when present

Design Decisions:
    - Chain models as dataclasses with from_mapping(): the mock store and the
      (future) RPC layer both hand us camelCase dicts
    - Fallbacks over errors: chain data is trusted but loosely typed
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from commitlabs.core.domain_types import (
    AttestationVerdict,
    CommitmentStatus,
    CommitmentType,
    DEFAULT_ASSET_CODE,
    normalize_commitment_status,
)
from commitlabs.schemas.commitment import AttestationDto, CommitmentDto


@dataclass
class ChainCommitmentModel:
    id: str | int
    owner_address: str
    amount: str | int | float
    duration_days: int | str
    max_loss_percent: int | str
    commitment_type: str | None = None
    asset_code: str | None = None
    asset_issuer: str | None = None
    status: str | None = None
    nft_token_id: str | int | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ChainCommitmentModel":
        return cls(
            id=data["id"],
            owner_address=data["ownerAddress"],
            amount=data["amount"],
            duration_days=data["durationDays"],
            max_loss_percent=data["maxLossPercent"],
            commitment_type=data.get("commitmentType"),
            asset_code=data.get("assetCode"),
            asset_issuer=data.get("assetIssuer"),
            status=data.get("status"),
            nft_token_id=data.get("nftTokenId"),
        )


@dataclass
class ChainAttestationModel:
    id: str | int
    commitment_id: str | int
    owner_address: str
    kind: str
    verdict: str | None = None
    observed_at: str | int | float | datetime | None = None
    details: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ChainAttestationModel":
        return cls(
            id=data["id"],
            commitment_id=data["commitmentId"],
            owner_address=data["ownerAddress"],
            kind=data["kind"],
            verdict=data.get("verdict"),
            observed_at=data.get("observedAt"),
            details=data.get("details"),
        )


# ─── Coercions ───────────────────────────────────────────────────

def to_commitment_type(value: str | None) -> CommitmentType:
    if not isinstance(value, str):
        return CommitmentType.BALANCED
    try:
        return CommitmentType(value.strip().lower())
    except ValueError:
        return CommitmentType.BALANCED


def to_commitment_status(value: str | None) -> CommitmentStatus:
    return normalize_commitment_status(value) or CommitmentStatus.ACTIVE


def to_attestation_verdict(value: str | None) -> AttestationVerdict:
    if not isinstance(value, str):
        return AttestationVerdict.UNKNOWN
    normalized = value.strip().lower()
    if normalized in (AttestationVerdict.PASS.value, AttestationVerdict.FAIL.value):
        return AttestationVerdict(normalized)
    return AttestationVerdict.UNKNOWN


def format_iso(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(value: str | int | float | datetime | None) -> datetime | None:
    """Datetime, epoch milliseconds or ISO date string → aware datetime. None if unparseable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, datetime):
            moment = value
        elif isinstance(value, (int, float)):
            moment = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        else:
            moment = datetime.fromisoformat(value.strip())
    except (ValueError, OverflowError, OSError, AttributeError):
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def to_iso_date(value: str | int | float | datetime | None, now: datetime) -> str:
    return format_iso(parse_timestamp(value) or now)


def _to_number(value: int | float | str) -> int | float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


# ─── Mappers ─────────────────────────────────────────────────────

def map_commitment_from_chain(model: ChainCommitmentModel) -> CommitmentDto:
    asset_code = model.asset_code or DEFAULT_ASSET_CODE
    return CommitmentDto(
        commitment_id=str(model.id),
        owner_address=model.owner_address,
        amount=str(model.amount),
        asset_code=asset_code,
        asset_issuer=None if asset_code == DEFAULT_ASSET_CODE else model.asset_issuer,
        duration_days=_to_number(model.duration_days),
        max_loss_percent=_to_number(model.max_loss_percent),
        commitment_type=to_commitment_type(model.commitment_type),
        status=to_commitment_status(model.status),
        nft_token_id=None if model.nft_token_id is None else str(model.nft_token_id),
    )


def map_attestation_from_chain(
    model: ChainAttestationModel, *, now: datetime | None = None,
) -> AttestationDto:
    fields: dict[str, Any] = {
        "attestation_id": str(model.id),
        "commitment_id": str(model.commitment_id),
        "owner_address": model.owner_address,
        "kind": model.kind,
        "verdict": to_attestation_verdict(model.verdict),
        "observed_at": to_iso_date(model.observed_at, now or datetime.now(timezone.utc)),
    }
    if model.details is not None:
        fields["details"] = model.details
    return AttestationDto(**fields)
