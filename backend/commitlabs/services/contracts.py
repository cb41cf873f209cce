"""Chain Operation Stubs — simulated Soroban calls for commitment create/early-exit.

Invariants:
    - No network IO: every path returns a mock result shaped like the real one
    - Writes disabled → mock result immediately, no config checks
    - Writes enabled → required contract addresses must be configured
      (ValidationError otherwise), then the same mock result
    - Early exit only from an active commitment (ConflictError otherwise)

Design Decisions:
    - Explicit simulation boundary: reference "TODO_CHAIN_CALL_<ACTION>" marks
      every result as simulated until the signing flow exists
    - Config passed in (BackendConfig), never read from the environment here
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from commitlabs.config import BackendConfig
from commitlabs.core.commands import CreateCommitmentInput, EarlyExitInput
from commitlabs.core.domain_types import CommitmentStatus
from commitlabs.core.dto import ChainCommitmentModel
from commitlabs.core.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateCommitmentOnChainResult:
    commitment: ChainCommitmentModel
    commitment_id: str
    nft_token_id: str
    tx_hash: str | None = None
    reference: str | None = None


@dataclass(frozen=True)
class EarlyExitOnChainResult:
    penalty_amount: str
    returned_amount: str
    tx_hash: str | None = None
    reference: str | None = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_mock_reference(action: str) -> str:
    return f"TODO_CHAIN_CALL_{action.upper()}"


async def create_commitment_on_chain(
    config: BackendConfig,
    command: CreateCommitmentInput,
    clock: Callable[[], datetime] = _utcnow,
) -> CreateCommitmentOnChainResult:
    """Simulate commitment creation and NFT mint."""
    millis = int(clock().timestamp() * 1000)
    commitment_id = f"cm_{millis}"
    nft_token_id = f"nft_{millis}"

    commitment = ChainCommitmentModel(
        id=commitment_id,
        owner_address=command.owner_address,
        amount=command.amount,
        asset_code=command.asset_code,
        asset_issuer=command.asset_issuer,
        duration_days=command.duration_days,
        max_loss_percent=command.max_loss_percent,
        commitment_type=command.commitment_type.value,
        status=CommitmentStatus.ACTIVE.value,
        nft_token_id=nft_token_id,
    )

    if config.chain_writes_enabled and not (
        config.commitment_core_contract and config.commitment_nft_contract
    ):
        raise ValidationError(
            "Missing COMMITMENT_CORE_CONTRACT or COMMITMENT_NFT_CONTRACT "
            "for on-chain create.",
        )

    # TODO: submit a real Soroban transaction once the backend signing flow exists
    logger.info(
        "Simulated on-chain commitment creation",
        extra={"commitment_id": commitment_id},
    )
    return CreateCommitmentOnChainResult(
        commitment=commitment,
        commitment_id=commitment_id,
        nft_token_id=nft_token_id,
        reference=build_mock_reference("create_commitment"),
    )


async def early_exit_commitment_on_chain(
    config: BackendConfig,
    commitment_id: str,
    command: EarlyExitInput,
) -> EarlyExitOnChainResult:
    """Simulate an early exit. Penalty and returned amounts are "0" until real."""
    if not commitment_id.strip():
        raise ValidationError("Commitment id is required.")
    if (
        command.current_status is not None
        and command.current_status != CommitmentStatus.ACTIVE
    ):
        raise ConflictError(
            "Commitment cannot be early-exited from its current state.",
            {"commitmentId": commitment_id, "currentStatus": command.current_status.value},
        )

    if config.chain_writes_enabled and not config.commitment_core_contract:
        raise ValidationError(
            "Missing COMMITMENT_CORE_CONTRACT for on-chain early exit.",
        )

    logger.info(
        "Simulated on-chain early exit",
        extra={"commitment_id": commitment_id},
    )
    return EarlyExitOnChainResult(
        penalty_amount="0",
        returned_amount="0",
        reference=build_mock_reference("early_exit"),
    )
