"""Input Validation tests — pure parsers, rule order and exact messages.

Tests cover:
    - Body-level rules: invalid JSON, non-object bodies
    - Field rules: required strings, addresses, amounts, integer ranges, enums
    - parse_create_commitment_input rule order and asset/issuer handling
    - Signature context: signer mismatch → ForbiddenError
    - Early exit and attestation parsers
    - Pagination defaults and bounds, aggregated filters and listing form errors
"""

from decimal import Decimal

import pytest

from commitlabs.core.domain_types import (
    AttestationVerdict, CommitmentStatus, CommitmentType,
)
from commitlabs.core.errors import ForbiddenError, ValidationError
from commitlabs.core.validation import (
    parse_attestation_input,
    parse_create_commitment_input,
    parse_early_exit_input,
    parse_json_body,
    require_object,
    require_string,
    validate_address,
    validate_amount,
    validate_create_listing_request,
    validate_enum,
    validate_filters,
    validate_int_range,
    validate_pagination,
)
from tests.sample_data import ISSUER, OTHER_OWNER, OWNER, commitment_body, listing_body


# -- Body-level rules ---------------------------------------------------------

def test_parse_json_body_rejects_invalid_json():
    with pytest.raises(ValidationError) as exc_info:
        parse_json_body(b"{not json")
    assert exc_info.value.message == "Request body must be valid JSON."
    assert exc_info.value.http_status == 400


def test_parse_json_body_rejects_empty_body():
    with pytest.raises(ValidationError):
        parse_json_body(b"")


@pytest.mark.parametrize("body", [None, [], "text", 42])
def test_require_object_rejects_non_objects(body):
    with pytest.raises(ValidationError) as exc_info:
        require_object(body)
    assert exc_info.value.message == "Request body must be a JSON object."


# -- Field rules --------------------------------------------------------------

def test_require_string_distinguishes_missing_wrong_type_and_blank():
    with pytest.raises(ValidationError, match="ownerAddress is required."):
        require_string({}, "ownerAddress")
    with pytest.raises(ValidationError, match="ownerAddress must be a string."):
        require_string({"ownerAddress": 5}, "ownerAddress")
    with pytest.raises(ValidationError, match="ownerAddress must not be empty."):
        require_string({"ownerAddress": "   "}, "ownerAddress")


def test_require_string_returns_stripped_value():
    assert require_string({"kind": "  drawdown  "}, "kind") == "drawdown"


def test_validate_address_accepts_account_and_contract_keys():
    assert validate_address(OWNER) == OWNER
    contract = "C" + OWNER[1:]
    assert validate_address(contract) == contract


@pytest.mark.parametrize("value", [
    "GABC",
    OWNER.lower(),
    OWNER + "A",
    "X" + OWNER[1:],
    OWNER[:-1] + "1",
])
def test_validate_address_rejects_malformed_keys(value):
    with pytest.raises(ValidationError) as exc_info:
        validate_address(value, "ownerAddress")
    assert exc_info.value.message == "ownerAddress must be a valid Stellar address."
    assert exc_info.value.details == {"field": "ownerAddress"}


@pytest.mark.parametrize("value, expected", [
    ("1000", Decimal("1000")),
    (" 12.5 ", Decimal("12.5")),
    (3, Decimal("3")),
    (0.25, Decimal("0.25")),
])
def test_validate_amount_accepts_positive_numbers(value, expected):
    assert validate_amount(value) == expected


@pytest.mark.parametrize("value", ["0", "-5", "abc", "1_000", "NaN", "Infinity", ""])
def test_validate_amount_rejects_non_positive_or_non_numeric(value):
    with pytest.raises(ValidationError, match="amount must be a positive number."):
        validate_amount(value)


def test_validate_amount_rejects_booleans_and_objects():
    with pytest.raises(ValidationError, match="must be a number or numeric string"):
        validate_amount(True)
    with pytest.raises(ValidationError, match="must be a number or numeric string"):
        validate_amount({"value": 1})


def test_validate_amount_requires_a_value():
    with pytest.raises(ValidationError, match="amount is required."):
        validate_amount(None)


def test_validate_int_range_bounds_are_inclusive():
    assert validate_int_range(1, "durationDays", 1, 3650) == 1
    assert validate_int_range(3650, "durationDays", 1, 3650) == 3650
    assert validate_int_range(30.0, "durationDays", 1, 3650) == 30


@pytest.mark.parametrize("value", [0, 3651, 1.5, "30", True, None])
def test_validate_int_range_rejects_out_of_range_and_non_integers(value):
    with pytest.raises(ValidationError) as exc_info:
        validate_int_range(value, "durationDays", 1, 3650)
    assert exc_info.value.message == "durationDays must be an integer between 1 and 3650."


def test_validate_enum_is_case_insensitive():
    assert validate_enum(" Aggressive ", "commitmentType", CommitmentType) == (
        CommitmentType.AGGRESSIVE
    )


def test_validate_enum_lists_allowed_values():
    with pytest.raises(ValidationError) as exc_info:
        validate_enum("reckless", "commitmentType", CommitmentType)
    assert exc_info.value.message == (
        "commitmentType must be one of: safe, balanced, aggressive."
    )


# -- parse_create_commitment_input --------------------------------------------

def test_create_commitment_minimal_body_defaults_to_xlm():
    command = parse_create_commitment_input(commitment_body())
    assert command.owner_address == OWNER
    assert command.amount == "1000"
    assert command.asset_code == "XLM"
    assert command.asset_issuer is None
    assert command.duration_days == 30
    assert command.max_loss_percent == 10
    assert command.commitment_type == CommitmentType.SAFE
    assert command.signature_context is None


def test_create_commitment_numeric_amount_kept_as_text():
    command = parse_create_commitment_input(commitment_body(amount=12.5))
    assert command.amount == "12.5"


def test_create_commitment_xlm_drops_supplied_issuer():
    command = parse_create_commitment_input(
        commitment_body(assetCode="xlm", assetIssuer=ISSUER),
    )
    assert command.asset_code == "XLM"
    assert command.asset_issuer is None


def test_create_commitment_custom_asset_requires_issuer():
    with pytest.raises(ValidationError) as exc_info:
        parse_create_commitment_input(commitment_body(assetCode="USDC"))
    assert exc_info.value.message == "assetIssuer is required when assetCode is not XLM."


def test_create_commitment_custom_asset_with_issuer():
    command = parse_create_commitment_input(
        commitment_body(assetCode="usdc", assetIssuer=ISSUER),
    )
    assert command.asset_code == "USDC"
    assert command.asset_issuer == ISSUER


def test_create_commitment_rejects_bad_asset_code():
    with pytest.raises(ValidationError, match="assetCode must be 1-12"):
        parse_create_commitment_input(
            commitment_body(assetCode="TOO-LONG-CODE!", assetIssuer=ISSUER),
        )


def test_create_commitment_missing_owner_reported_before_other_fields():
    """Required strings are checked before addresses and amounts."""
    body = commitment_body(amount="-1")
    del body["ownerAddress"]
    with pytest.raises(ValidationError, match="ownerAddress is required."):
        parse_create_commitment_input(body)


def test_create_commitment_missing_type_reported_before_bad_address():
    body = commitment_body(ownerAddress="not-an-address")
    del body["commitmentType"]
    with pytest.raises(ValidationError, match="commitmentType is required."):
        parse_create_commitment_input(body)


def test_create_commitment_bad_address_reported_before_bad_amount():
    with pytest.raises(ValidationError, match="valid Stellar address"):
        parse_create_commitment_input(
            commitment_body(ownerAddress="GBAD", amount="0"),
        )


def test_create_commitment_bad_amount_reported_before_bad_duration():
    with pytest.raises(ValidationError, match="amount must be a positive number."):
        parse_create_commitment_input(commitment_body(amount="0", durationDays=0))


def test_create_commitment_bad_duration_reported_before_bad_type():
    with pytest.raises(ValidationError, match="durationDays"):
        parse_create_commitment_input(
            commitment_body(durationDays=0, commitmentType="reckless"),
        )


def test_create_commitment_max_loss_bounds():
    assert parse_create_commitment_input(
        commitment_body(maxLossPercent=0),
    ).max_loss_percent == 0
    with pytest.raises(ValidationError, match="maxLossPercent must be an integer between 0 and 100."):
        parse_create_commitment_input(commitment_body(maxLossPercent=101))


def test_create_commitment_rejects_unknown_type():
    with pytest.raises(ValidationError, match="commitmentType must be one of"):
        parse_create_commitment_input(commitment_body(commitmentType="reckless"))


# -- Signature context --------------------------------------------------------

def test_signature_context_matching_signer_accepted():
    command = parse_create_commitment_input(commitment_body(signatureContext={
        "nonce": "n-1", "signature": "sig", "signerAddress": OWNER,
    }))
    assert command.signature_context.signer_address == OWNER
    assert command.signature_context.nonce == "n-1"


def test_signature_context_mismatched_signer_is_forbidden():
    with pytest.raises(ForbiddenError) as exc_info:
        parse_create_commitment_input(commitment_body(
            signatureContext={"signerAddress": OTHER_OWNER},
        ))
    assert exc_info.value.http_status == 403
    assert exc_info.value.message == (
        "signatureContext.signerAddress must match ownerAddress."
    )


def test_signature_context_must_be_object():
    with pytest.raises(ValidationError, match="signatureContext must be an object."):
        parse_create_commitment_input(commitment_body(signatureContext="sig"))


def test_signer_mismatch_reported_before_missing_issuer():
    """Signature context is checked before the asset issuer."""
    with pytest.raises(ForbiddenError):
        parse_create_commitment_input(commitment_body(
            assetCode="USDC",
            signatureContext={"signerAddress": OTHER_OWNER},
        ))


# -- Early exit / attestation -------------------------------------------------

@pytest.mark.parametrize("raw", ["Early Exit", "early-exit", "EARLY_EXIT"])
def test_early_exit_accepts_every_early_exit_spelling(raw):
    command = parse_early_exit_input({"ownerAddress": OWNER, "currentStatus": raw})
    assert command.current_status == CommitmentStatus.EARLY_EXIT


def test_early_exit_rejects_unknown_status():
    with pytest.raises(ValidationError, match="currentStatus must be one of"):
        parse_early_exit_input({"ownerAddress": OWNER, "currentStatus": "paused"})


def test_early_exit_requires_owner():
    with pytest.raises(ValidationError, match="ownerAddress is required."):
        parse_early_exit_input({})


def test_attestation_input_parses_verdict_and_details():
    command = parse_attestation_input({
        "commitmentId": "cm_1",
        "ownerAddress": OWNER,
        "kind": "drawdown_check",
        "verdict": "PASS",
        "details": {"drawdownPercent": 1.2},
    })
    assert command.verdict == AttestationVerdict.PASS
    assert command.details == {"drawdownPercent": 1.2}


def test_attestation_input_rejects_unknown_verdict():
    with pytest.raises(ValidationError, match="verdict must be one of: pass, fail."):
        parse_attestation_input({
            "commitmentId": "cm_1", "ownerAddress": OWNER,
            "kind": "check", "verdict": "unknown",
        })


def test_attestation_input_rejects_non_object_details():
    with pytest.raises(ValidationError, match="details must be an object."):
        parse_attestation_input({
            "commitmentId": "cm_1", "ownerAddress": OWNER,
            "kind": "check", "details": ["a"],
        })


# -- Pagination / filters -----------------------------------------------------

def test_pagination_defaults():
    params = validate_pagination()
    assert (params.page, params.limit, params.offset) == (1, 10, 0)


def test_pagination_parses_query_strings():
    params = validate_pagination("3", "20")
    assert (params.page, params.limit, params.offset) == (3, 20, 40)


@pytest.mark.parametrize("page", ["0", "-1", "1.5", "abc"])
def test_pagination_rejects_bad_page(page):
    with pytest.raises(ValidationError, match="page must be an integer"):
        validate_pagination(page, None)


@pytest.mark.parametrize("limit", ["0", "101", "ten"])
def test_pagination_rejects_bad_limit(limit):
    with pytest.raises(ValidationError, match="limit must be an integer between 1 and 100."):
        validate_pagination(None, limit)


def test_pagination_uses_given_limit_field_name():
    with pytest.raises(ValidationError, match="pageSize must be an integer"):
        validate_pagination(None, "500", "pageSize")


def test_filters_drop_none_and_keep_scalars():
    assert validate_filters({"status": "active", "owner": None, "min": 5}) == {
        "status": "active", "min": 5,
    }


def test_filters_aggregate_every_bad_value():
    with pytest.raises(ValidationError) as exc_info:
        validate_filters({"a": ["x"], "b": {"y": 1}, "c": "ok"})
    assert exc_info.value.message == "Invalid filters"
    assert exc_info.value.details["errors"] == [
        "Filter a must be a string, number, or boolean.",
        "Filter b must be a string, number, or boolean.",
    ]


# -- Listing form -------------------------------------------------------------

def test_listing_request_valid():
    command = validate_create_listing_request(listing_body())
    assert command.commitment_id == "cm_1"
    assert command.price == "250.5"
    assert command.currency_asset == "USDC"
    assert command.seller_address == OWNER


def test_listing_request_collects_all_errors():
    with pytest.raises(ValidationError) as exc_info:
        validate_create_listing_request({"price": "-3"})
    assert exc_info.value.message == "Invalid listing request"
    assert exc_info.value.details["errors"] == [
        "commitmentId is required and must be a string",
        "price must be a positive number",
        "currencyAsset is required and must be a string",
        "sellerAddress is required and must be a string",
    ]


def test_listing_request_numeric_price_is_not_a_string():
    with pytest.raises(ValidationError) as exc_info:
        validate_create_listing_request(listing_body(price=100))
    assert exc_info.value.details["errors"] == [
        "price is required and must be a string",
    ]
