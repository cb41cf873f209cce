"""Commitment Routes — HTTP behavior of list, create, detail, early exit and settle.

Invariants:
    - Every response is an envelope with `success`
    - POST /api/commitments → 201 with simulated ids and the normalized DTO
    - Validation failures → 400, signer mismatch → 403, unknown id → 404
"""

import json

from commitlabs.main import create_app
from commitlabs.services.seed import SAMPLE_OWNERS, seed_mock_data
from tests.sample_data import OTHER_OWNER, OWNER, client_for, commitment_body, make_settings


# -- POST /api/commitments ----------------------------------------------------

async def test_create_commitment_returns_201(client):
    res = await client.post("/api/commitments", json=commitment_body())
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    data = body["data"]
    assert data["commitmentId"].startswith("cm_")
    assert data["nftTokenId"].startswith("nft_")
    assert data["txHash"] is None
    assert data["reference"] == "TODO_CHAIN_CALL_CREATE_COMMITMENT"
    assert data["commitment"]["ownerAddress"] == OWNER
    assert data["commitment"]["assetCode"] == "XLM"
    assert data["commitment"]["status"] == "active"


async def test_create_commitment_invalid_json(client):
    res = await client.post(
        "/api/commitments", content=b"{oops",
        headers={"content-type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json() == {
        "success": False,
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Request body must be valid JSON.",
        },
    }


async def test_create_commitment_field_error_names_field(client):
    res = await client.post("/api/commitments", json=commitment_body(durationDays=0))
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["message"] == "durationDays must be an integer between 1 and 3650."
    assert error["details"] == {"field": "durationDays"}


async def test_create_commitment_signer_mismatch_forbidden(client):
    res = await client.post("/api/commitments", json=commitment_body(
        signatureContext={"signerAddress": OTHER_OWNER},
    ))
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FORBIDDEN"


async def test_create_commitment_writes_enabled_without_contracts(tmp_path):
    app = create_app(make_settings(tmp_path, chain_writes_enabled=True))
    async with client_for(app) as client:
        res = await client.post("/api/commitments", json=commitment_body())
    assert res.status_code == 400
    assert "COMMITMENT_CORE_CONTRACT" in res.json()["error"]["message"]


# -- GET /api/commitments/{id} ------------------------------------------------

async def test_get_commitment_detail(client):
    res = await client.get("/api/commitments/1")
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["commitmentId"] == "1"
    assert data["asset"] == "USDC"
    assert data["maxLossPercent"] == 8
    assert isinstance(data["daysRemaining"], int)
    assert data["nftMetadataLink"] is None


async def test_get_commitment_detail_with_nft_contract(tmp_path):
    app = create_app(make_settings(tmp_path, commitment_nft_contract="CNFT"))
    async with client_for(app) as client:
        res = await client.get("/api/commitments/1")
    assert res.json()["data"]["nftMetadataLink"] == "CNFT/metadata/123456789"


async def test_get_unknown_commitment_404(client):
    res = await client.get("/api/commitments/404404")
    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["message"] == "Commitment not found."


# -- GET /api/commitments -----------------------------------------------------

async def test_list_commitments_empty(client):
    res = await client.get("/api/commitments")
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["commitments"] == []
    assert data["total"] == 0
    assert data["pagination"] == {"page": 1, "limit": 10}


async def test_list_commitments_survives_hand_edited_store(client, app):
    app.state.mock_store.path.write_text(json.dumps({
        "commitments": [
            {"id": "cm_no_type", "ownerAddress": OWNER, "amount": "10",
             "durationDays": 30, "maxLossPercent": 5},
            {"id": "cm_null_type", "ownerAddress": OWNER, "amount": "10",
             "durationDays": 30, "maxLossPercent": 5, "commitmentType": None,
             "status": 7},
            {"id": "cm_bad_days", "ownerAddress": OWNER, "amount": "10",
             "durationDays": "thirty", "maxLossPercent": 5,
             "commitmentType": "safe"},
        ],
    }), encoding="utf-8")

    res = await client.get("/api/commitments")
    assert res.status_code == 200
    data = res.json()["data"]
    assert [c["commitmentId"] for c in data["commitments"]] == [
        "cm_no_type", "cm_null_type",
    ]
    assert {c["commitmentType"] for c in data["commitments"]} == {"balanced"}
    assert data["commitments"][1]["status"] == "active"
    assert data["total"] == 2


async def test_list_commitments_filtered_by_status(client, app):
    await seed_mock_data(app.state.mock_store)
    res = await client.get("/api/commitments", params={"status": "Early Exit"})
    data = res.json()["data"]
    assert [c["commitmentId"] for c in data["commitments"]] == ["cm_seed_3"]
    assert data["commitments"][0]["status"] == "early_exit"


async def test_list_commitments_filtered_by_creator(client, app):
    await seed_mock_data(app.state.mock_store)
    res = await client.get("/api/commitments", params={"creator": SAMPLE_OWNERS[1]})
    data = res.json()["data"]
    assert [c["commitmentId"] for c in data["commitments"]] == ["cm_seed_2"]
    assert data["filters"] == {"ownerAddress": SAMPLE_OWNERS[1]}


async def test_list_commitments_paginates(client, app):
    await seed_mock_data(app.state.mock_store)
    res = await client.get("/api/commitments", params={"page": 2, "pageSize": 2})
    data = res.json()["data"]
    assert [c["commitmentId"] for c in data["commitments"]] == ["cm_seed_3"]
    assert data["total"] == 3


async def test_list_commitments_bad_page_size(client):
    res = await client.get("/api/commitments", params={"pageSize": 500})
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "pageSize must be an integer between 1 and 100."


async def test_list_commitments_bad_status(client):
    res = await client.get("/api/commitments", params={"status": "paused"})
    assert res.status_code == 400


# -- Early exit / settle ------------------------------------------------------

async def test_early_exit_returns_amounts(client):
    res = await client.post(
        "/api/commitments/1/early-exit", json={"ownerAddress": OWNER},
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data == {
        "commitmentId": "1",
        "penaltyAmount": "0",
        "returnedAmount": "0",
        "txHash": None,
        "reference": "TODO_CHAIN_CALL_EARLY_EXIT",
    }


async def test_early_exit_from_settled_conflicts(client):
    res = await client.post("/api/commitments/1/early-exit", json={
        "ownerAddress": OWNER, "currentStatus": "settled",
    })
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"


async def test_early_exit_requires_owner(client):
    res = await client.post("/api/commitments/1/early-exit", json={})
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "ownerAddress is required."


async def test_settle_stub(client):
    res = await client.post("/api/commitments/7/settle", json={"note": "done"})
    assert res.status_code == 200
    assert res.json()["data"] == {
        "message": "Stub settlement endpoint for commitment 7",
        "commitmentId": "7",
    }


async def test_settle_accepts_unparseable_body(client):
    res = await client.post("/api/commitments/7/settle", content=b"not json")
    assert res.status_code == 200
    assert res.json()["success"] is True
