"""Seed Data — deterministic sample commitments, attestations and listings for development."""

import logging

from commitlabs.infrastructure.mock_store import MockData, MockDataStore

logger = logging.getLogger(__name__)

SAMPLE_OWNERS = (
    "GBRPYHIL2CI3FNQ4BXLFMNDLFJUNPU2HY3ZMFSHONUCEOASW7QC7OX2H",
    "GCEZWKCA5VLDNRLN3RPRJMRZOX3Z6G5CHCGSNFHEYVXM3XOJMDS674JZ",
    "GDQNY3PBOJOKYZSRMK2S7LHHGWZIUISD4QORETLMXEWXBI7KFZZMKTL3",
)
USDC_ISSUER = "GA5ZSEJYB37JRC5AVCIA5MOP4RHTM335X2KGX3IHOJAPP5RE34K4KZVN"


def build_seed_data() -> MockData:
    commitments = [
        {
            "id": "cm_seed_1",
            "ownerAddress": SAMPLE_OWNERS[0],
            "amount": "1000",
            "assetCode": "XLM",
            "durationDays": 30,
            "maxLossPercent": 10,
            "commitmentType": "safe",
            "status": "active",
            "nftTokenId": "nft_seed_1",
        },
        {
            "id": "cm_seed_2",
            "ownerAddress": SAMPLE_OWNERS[1],
            "amount": "2500.50",
            "assetCode": "USDC",
            "assetIssuer": USDC_ISSUER,
            "durationDays": 90,
            "maxLossPercent": 25,
            "commitmentType": "balanced",
            "status": "settled",
            "nftTokenId": "nft_seed_2",
        },
        {
            "id": "cm_seed_3",
            "ownerAddress": SAMPLE_OWNERS[2],
            "amount": 750,
            "durationDays": "180",
            "maxLossPercent": "50",
            "commitmentType": "Aggressive",
            "status": "Early Exit",
        },
    ]
    attestations = [
        {
            "id": "att_seed_1",
            "commitmentId": "cm_seed_1",
            "ownerAddress": SAMPLE_OWNERS[0],
            "kind": "drawdown_check",
            "verdict": "pass",
            "observedAt": "2026-02-01T12:00:00.000Z",
            "details": {"drawdownPercent": 2.1},
        },
        {
            "id": "att_seed_2",
            "commitmentId": "cm_seed_2",
            "ownerAddress": SAMPLE_OWNERS[1],
            "kind": "settlement_check",
            "verdict": "fail",
            "observedAt": 1767225600000,
        },
    ]
    return MockData(commitments=commitments, attestations=attestations)


async def seed_mock_data(store: MockDataStore) -> MockData:
    """Overwrite the mock store with the sample data set."""
    data = build_seed_data()
    await store.save(data)
    logger.info(
        f"Seeded mock data: {len(data.commitments)} commitments, "
        f"{len(data.attestations)} attestations",
    )
    return data
