"""Chain Operation Stub tests — simulated create and early exit.

Tests cover:
    - Writes disabled: mock result without contract checks
    - Writes enabled: missing contract addresses → ValidationError
    - Early exit: blank id, non-active current status, penalty placeholders
"""

from datetime import datetime, timezone

import pytest

from commitlabs.config import BackendConfig
from commitlabs.core.commands import EarlyExitInput
from commitlabs.core.domain_types import CommitmentStatus
from commitlabs.core.errors import ConflictError, ValidationError
from commitlabs.core.validation import parse_create_commitment_input
from commitlabs.services.contracts import (
    build_mock_reference,
    create_commitment_on_chain,
    early_exit_commitment_on_chain,
)
from tests.sample_data import OWNER, commitment_body

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _config(writes: bool, **contracts) -> BackendConfig:
    return BackendConfig(
        soroban_rpc_url=None,
        rpc_timeout_seconds=5.0,
        network_passphrase="Test SDF Network ; September 2015",
        chain_writes_enabled=writes,
        active_contract_version="v1",
        contracts=contracts,
    )


def test_mock_reference_format():
    assert build_mock_reference("early_exit") == "TODO_CHAIN_CALL_EARLY_EXIT"


async def test_create_with_writes_disabled_returns_mock_ids():
    command = parse_create_commitment_input(commitment_body())
    result = await create_commitment_on_chain(_config(False), command, clock=lambda: NOW)
    assert result.commitment_id == "cm_1767225600000"
    assert result.nft_token_id == "nft_1767225600000"
    assert result.tx_hash is None
    assert result.reference == "TODO_CHAIN_CALL_CREATE_COMMITMENT"
    assert result.commitment.status == CommitmentStatus.ACTIVE.value
    assert result.commitment.owner_address == OWNER


async def test_create_with_writes_enabled_requires_contracts():
    command = parse_create_commitment_input(commitment_body())
    with pytest.raises(ValidationError, match="Missing COMMITMENT_CORE_CONTRACT"):
        await create_commitment_on_chain(
            _config(True, commitmentCore="CCORE"), command,
        )


async def test_create_with_writes_enabled_and_contracts_configured():
    command = parse_create_commitment_input(commitment_body())
    result = await create_commitment_on_chain(
        _config(True, commitmentCore="CCORE", commitmentNFT="CNFT"), command,
    )
    assert result.reference == "TODO_CHAIN_CALL_CREATE_COMMITMENT"


async def test_early_exit_returns_zero_amounts():
    result = await early_exit_commitment_on_chain(
        _config(False), "cm_1", EarlyExitInput(owner_address=OWNER),
    )
    assert result.penalty_amount == "0"
    assert result.returned_amount == "0"
    assert result.reference == "TODO_CHAIN_CALL_EARLY_EXIT"


async def test_early_exit_blank_id_rejected():
    with pytest.raises(ValidationError, match="Commitment id is required."):
        await early_exit_commitment_on_chain(
            _config(False), "  ", EarlyExitInput(owner_address=OWNER),
        )


@pytest.mark.parametrize("status", [
    CommitmentStatus.SETTLED, CommitmentStatus.VIOLATED, CommitmentStatus.EARLY_EXIT,
])
async def test_early_exit_from_terminal_state_conflicts(status):
    with pytest.raises(ConflictError):
        await early_exit_commitment_on_chain(
            _config(False), "cm_1",
            EarlyExitInput(owner_address=OWNER, current_status=status),
        )


async def test_early_exit_with_writes_enabled_requires_core_contract():
    with pytest.raises(ValidationError, match="early exit"):
        await early_exit_commitment_on_chain(
            _config(True, commitmentNFT="CNFT"), "cm_1",
            EarlyExitInput(owner_address=OWNER),
        )
