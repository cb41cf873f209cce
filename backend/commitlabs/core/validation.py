"""Input Validation — pure parsers from untrusted JSON into typed domain commands.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - Strict parsers fail fast: the first violated rule raises ValidationError
    - Rule order for command parsing: JSON → object → required strings → addresses
      → amounts → integer ranges → enums → signature context → asset issuer
    - A signerAddress that differs from ownerAddress raises ForbiddenError, not
      ValidationError
    - validate_filters and validate_create_listing_request aggregate every
      violation into one ValidationError with details["errors"]

Design Decisions:
    - Hand-written parsers over Pydantic request models: rule order and
      field-specific messages are part of the API contract
    - Fail-fast for chained command parsing, aggregated errors for form-like
      submissions (listing creation, filters)
    - Decimal for amounts: no float rounding on user-supplied money values
"""

import json
import re
from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

from commitlabs.core.commands import (
    AttestationInput,
    CreateCommitmentInput,
    CreateListingRequest,
    EarlyExitInput,
    PaginationParams,
    SignatureContext,
)
from commitlabs.core.domain_types import (
    AttestationVerdict,
    CommitmentType,
    DEFAULT_ASSET_CODE,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_DURATION_DAYS,
    MAX_MAX_LOSS_PERCENT,
    MAX_PAGE_SIZE,
    MIN_DURATION_DAYS,
    MIN_MAX_LOSS_PERCENT,
    STELLAR_ADDRESS_PATTERN,
    normalize_commitment_status,
)
from commitlabs.core.errors import ForbiddenError, ValidationError

E = TypeVar("E", bound=Enum)

_ASSET_CODE_PATTERN = re.compile(r"^[A-Z0-9]{1,12}$")
_INTEGER_TEXT_PATTERN = re.compile(r"^[+-]?\d+$")


# ─── Body-level rules ────────────────────────────────────────────

def parse_json_body(raw: bytes | str) -> Any:
    """Rule 1: body must parse as JSON."""
    try:
        return json.loads(raw)
    except ValueError:
        raise ValidationError("Request body must be valid JSON.")


def require_object(body: Any) -> dict[str, Any]:
    """Rule 2: body must be a JSON object (not null, array or scalar)."""
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")
    return body


# ─── Field-level rules ───────────────────────────────────────────

def require_string(body: Mapping[str, Any], field: str) -> str:
    """Rule 3: required string field, non-empty after trimming. Returns stripped value."""
    value = body.get(field)
    if value is None:
        raise ValidationError(f"{field} is required.", field=field)
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string.", field=field)
    stripped = value.strip()
    if not stripped:
        raise ValidationError(f"{field} must not be empty.", field=field)
    return stripped


def optional_string(body: Mapping[str, Any], field: str, label: str | None = None) -> str | None:
    """Optional string field. None when absent; must be a string when present."""
    value = body.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        name = label or field
        raise ValidationError(f"{name} must be a string.", field=name)
    return value.strip() or None


def validate_address(value: Any, field: str = "address") -> str:
    """Rule 4: Stellar strkey — G or C followed by 55 base32 characters."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"{field} is required and must be a string.", field=field,
        )
    address = value.strip()
    if not STELLAR_ADDRESS_PATTERN.fullmatch(address):
        raise ValidationError(
            f"{field} must be a valid Stellar address.", field=field,
        )
    return address


def validate_amount(value: Any, field: str = "amount") -> Decimal:
    """Rule 5: number or numeric string, finite and strictly positive."""
    if value is None:
        raise ValidationError(f"{field} is required.", field=field)
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError(
            f"{field} must be a number or numeric string.", field=field,
        )
    text = value.strip() if isinstance(value, str) else str(value)
    try:
        if "_" in text:
            raise InvalidOperation
        amount = Decimal(text)
    except InvalidOperation:
        raise ValidationError(f"{field} must be a positive number.", field=field)
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field} must be a positive number.", field=field)
    return amount


def validate_int_range(value: Any, field: str, minimum: int, maximum: int) -> int:
    """Rule 6: true integer within [minimum, maximum]. Integral floats accepted."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if (
        isinstance(value, bool)
        or not isinstance(value, int)
        or not minimum <= value <= maximum
    ):
        raise ValidationError(
            f"{field} must be an integer between {minimum} and {maximum}.",
            field=field,
        )
    return value


def validate_enum(value: Any, field: str, allowed: Iterable[E]) -> E:
    """Rule 7: case-insensitive match against a fixed set, lowercase canonical form."""
    members = list(allowed)
    if isinstance(value, str):
        normalized = value.strip().lower()
        for member in members:
            if member.value == normalized:
                return member
    choices = ", ".join(str(m.value) for m in members)
    raise ValidationError(f"{field} must be one of: {choices}.", field=field)


def _amount_text(value: int | float | str) -> str:
    return value.strip() if isinstance(value, str) else str(value)


def _parse_signature_context(raw: Any, owner_address: str) -> SignatureContext | None:
    """Rule 8: optional signature context; signer must be the owner."""
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValidationError(
            "signatureContext must be an object.", field="signatureContext",
        )
    nonce = optional_string(raw, "nonce", "signatureContext.nonce")
    signature = optional_string(raw, "signature", "signatureContext.signature")
    signer_address = None
    if raw.get("signerAddress") is not None:
        signer_address = validate_address(
            raw["signerAddress"], "signatureContext.signerAddress",
        )
        if signer_address.casefold() != owner_address.casefold():
            raise ForbiddenError(
                "signatureContext.signerAddress must match ownerAddress.",
            )
    return SignatureContext(
        nonce=nonce, signature=signature, signer_address=signer_address,
    )


def _parse_asset(body: Mapping[str, Any]) -> tuple[str, str | None]:
    """Rule 9: non-default asset requires an issuer; XLM forces issuer to None."""
    raw_code = body.get("assetCode")
    if raw_code is None:
        asset_code = DEFAULT_ASSET_CODE
    elif not isinstance(raw_code, str) or not raw_code.strip():
        raise ValidationError(
            "assetCode must be a non-empty string.", field="assetCode",
        )
    else:
        asset_code = raw_code.strip().upper()
        if not _ASSET_CODE_PATTERN.fullmatch(asset_code):
            raise ValidationError(
                "assetCode must be 1-12 alphanumeric characters.",
                field="assetCode",
            )

    if asset_code == DEFAULT_ASSET_CODE:
        return asset_code, None

    raw_issuer = body.get("assetIssuer")
    if raw_issuer is None or (isinstance(raw_issuer, str) and not raw_issuer.strip()):
        raise ValidationError(
            f"assetIssuer is required when assetCode is not {DEFAULT_ASSET_CODE}.",
            field="assetIssuer",
        )
    return asset_code, validate_address(raw_issuer, "assetIssuer")


# ─── Command parsers ─────────────────────────────────────────────

def parse_create_commitment_input(body: Any) -> CreateCommitmentInput:
    """Parse a create-commitment body. Fails fast on the first violated rule."""
    data = require_object(body)

    owner_raw = require_string(data, "ownerAddress")
    type_raw = require_string(data, "commitmentType")

    owner_address = validate_address(owner_raw, "ownerAddress")

    validate_amount(data.get("amount"))
    amount = _amount_text(data["amount"])

    duration_days = validate_int_range(
        data.get("durationDays"), "durationDays",
        MIN_DURATION_DAYS, MAX_DURATION_DAYS,
    )
    max_loss_percent = validate_int_range(
        data.get("maxLossPercent"), "maxLossPercent",
        MIN_MAX_LOSS_PERCENT, MAX_MAX_LOSS_PERCENT,
    )

    commitment_type = validate_enum(type_raw, "commitmentType", CommitmentType)

    signature_context = _parse_signature_context(
        data.get("signatureContext"), owner_address,
    )

    asset_code, asset_issuer = _parse_asset(data)

    return CreateCommitmentInput(
        owner_address=owner_address,
        amount=amount,
        asset_code=asset_code,
        asset_issuer=asset_issuer,
        duration_days=duration_days,
        max_loss_percent=max_loss_percent,
        commitment_type=commitment_type,
        signature_context=signature_context,
    )


def parse_early_exit_input(body: Any) -> EarlyExitInput:
    """Parse an early-exit body: owner, optional current status, optional signature."""
    data = require_object(body)
    owner_address = validate_address(
        require_string(data, "ownerAddress"), "ownerAddress",
    )

    current_status = None
    raw_status = data.get("currentStatus")
    if raw_status is not None:
        if isinstance(raw_status, str):
            current_status = normalize_commitment_status(raw_status)
        if current_status is None:
            raise ValidationError(
                "currentStatus must be one of: active, settled, violated, early_exit.",
                field="currentStatus",
            )

    signature_context = _parse_signature_context(
        data.get("signatureContext"), owner_address,
    )
    return EarlyExitInput(
        owner_address=owner_address,
        current_status=current_status,
        signature_context=signature_context,
    )


def parse_attestation_input(body: Any) -> AttestationInput:
    """Parse an attestation submission."""
    data = require_object(body)
    commitment_id = require_string(data, "commitmentId")
    owner_address = validate_address(
        require_string(data, "ownerAddress"), "ownerAddress",
    )
    kind = require_string(data, "kind")

    verdict = None
    if data.get("verdict") is not None:
        verdict = validate_enum(
            data["verdict"], "verdict",
            (AttestationVerdict.PASS, AttestationVerdict.FAIL),
        )

    details = data.get("details")
    if details is not None and not isinstance(details, dict):
        raise ValidationError("details must be an object.", field="details")

    return AttestationInput(
        commitment_id=commitment_id,
        owner_address=owner_address,
        kind=kind,
        verdict=verdict,
        details=details,
    )


# ─── Query parameters ────────────────────────────────────────────

def _coerce_int(value: Any, message: str, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(message, field=field)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER_TEXT_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    raise ValidationError(message, field=field)


def validate_pagination(
    page: Any = None, limit: Any = None, limit_field: str = "limit",
) -> PaginationParams:
    """page defaults to 1 (integer >= 1); limit defaults to 10 (integer in [1, 100])."""
    page_num = DEFAULT_PAGE
    limit_num = DEFAULT_PAGE_SIZE

    if page is not None:
        message = "page must be an integer greater than or equal to 1."
        page_num = _coerce_int(page, message, "page")
        if page_num < 1:
            raise ValidationError(message, field="page")

    if limit is not None:
        message = f"{limit_field} must be an integer between 1 and {MAX_PAGE_SIZE}."
        limit_num = _coerce_int(limit, message, limit_field)
        if not 1 <= limit_num <= MAX_PAGE_SIZE:
            raise ValidationError(message, field=limit_field)

    return PaginationParams(page=page_num, limit=limit_num)


def validate_filters(filters: Mapping[str, Any]) -> dict[str, str | int | float | bool]:
    """Keep scalar filters, drop None. Collects every type error before raising."""
    validated: dict[str, str | int | float | bool] = {}
    errors: list[str] = []
    for key, value in filters.items():
        if value is None:
            continue
        if isinstance(value, (str, int, float, bool)):
            validated[key] = value
        else:
            errors.append(f"Filter {key} must be a string, number, or boolean.")
    if errors:
        raise ValidationError("Invalid filters", details={"errors": errors})
    return validated


# ─── Marketplace form ────────────────────────────────────────────

def _is_present_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_create_listing_request(body: Mapping[str, Any]) -> CreateListingRequest:
    """Validate all four listing fields in one pass, aggregating every violation."""
    errors: list[str] = []

    if not _is_present_string(body.get("commitmentId")):
        errors.append("commitmentId is required and must be a string")

    price = body.get("price")
    if not _is_present_string(price):
        errors.append("price is required and must be a string")
    else:
        try:
            validate_amount(price, "price")
        except ValidationError:
            errors.append("price must be a positive number")

    if not _is_present_string(body.get("currencyAsset")):
        errors.append("currencyAsset is required and must be a string")

    if not _is_present_string(body.get("sellerAddress")):
        errors.append("sellerAddress is required and must be a string")

    if errors:
        raise ValidationError("Invalid listing request", details={"errors": errors})

    return CreateListingRequest(
        commitment_id=body["commitmentId"],
        price=price,
        currency_asset=body["currencyAsset"],
        seller_address=body["sellerAddress"],
    )
