"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All contract addresses and endpoints come from environment variables
    - get_settings() is cached (lru_cache) — single Settings instance per process
    - BackendConfig is built once in create_app() and passed explicitly; request
      code never reads the environment
    - CONTRACTS_JSON, when set, wins over the per-contract legacy variables and
      must contain the active version with an address for every entry

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Frozen BackendConfig over lazily memoized globals: load-once-at-startup
      lifecycle, trivially swapped in tests
"""

import json
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Legacy per-contract variables, keyed by the contract name used in CONTRACTS_JSON
LEGACY_CONTRACT_FIELDS = {
    "commitmentNFT": "commitment_nft_contract",
    "commitmentCore": "commitment_core_contract",
    "attestationEngine": "attestation_engine_contract",
}


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, populate_by_name=True,
    )

    # Runtime
    environment: str = "production"

    # Soroban
    soroban_rpc_url: str | None = None
    soroban_rpc_timeout_seconds: float = 5.0
    network_passphrase: str = "Test SDF Network ; September 2015"

    # Contracts
    commitment_core_contract: str = ""
    commitment_nft_contract: str = ""
    attestation_engine_contract: str = ""
    contracts_json: str | None = None
    active_contract_version: str = "v1"
    chain_writes_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "commitlabs_enable_chain_writes", "chain_writes_enabled",
        ),
    )

    # Rate limiting
    rate_limit_max_requests: int = 10
    rate_limit_window_seconds: int = 60
    # Only honor X-Forwarded-For when running behind a trusted reverse proxy
    trust_forwarded_for: bool = False

    # Mock data store
    mock_db_path: str = ".mock-db.json"

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()


@dataclass(frozen=True)
class BackendConfig:
    """Immutable backend configuration, constructed once at startup."""
    soroban_rpc_url: str | None
    rpc_timeout_seconds: float
    network_passphrase: str
    chain_writes_enabled: bool
    active_contract_version: str
    contracts: dict[str, str] = field(default_factory=dict)

    @property
    def commitment_core_contract(self) -> str | None:
        return self.contracts.get("commitmentCore")

    @property
    def commitment_nft_contract(self) -> str | None:
        return self.contracts.get("commitmentNFT")

    @property
    def attestation_engine_contract(self) -> str | None:
        return self.contracts.get("attestationEngine")

    @classmethod
    def from_settings(cls, settings: Settings) -> "BackendConfig":
        return cls(
            soroban_rpc_url=settings.soroban_rpc_url or None,
            rpc_timeout_seconds=settings.soroban_rpc_timeout_seconds,
            network_passphrase=settings.network_passphrase,
            chain_writes_enabled=settings.chain_writes_enabled,
            active_contract_version=settings.active_contract_version,
            contracts=load_contract_addresses(settings),
        )


def _parse_contracts_json(raw: str) -> dict[str, Any]:
    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise ValueError(f"Failed to parse CONTRACTS_JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ValueError(
            "CONTRACTS_JSON must be a JSON object mapping versions to contract entries",
        )
    return parsed


def load_contract_addresses(settings: Settings) -> dict[str, str]:
    """Resolve contract name → address for the active version.

    CONTRACTS_JSON shape: {"v1": {"commitmentCore": {"address": "C..."}, ...}, ...}
    Without it, falls back to the per-contract variables (unset ones omitted).
    """
    if not settings.contracts_json:
        return {
            name: getattr(settings, attr)
            for name, attr in LEGACY_CONTRACT_FIELDS.items()
            if getattr(settings, attr)
        }

    config = _parse_contracts_json(settings.contracts_json)
    version = settings.active_contract_version
    entries = config.get(version)
    if not isinstance(entries, dict):
        available = ", ".join(config) or "<none>"
        raise ValueError(
            f'Active contract version "{version}" not found. '
            f"Available versions: {available}",
        )

    addresses: dict[str, str] = {}
    for name, entry in entries.items():
        address = entry.get("address") if isinstance(entry, dict) else None
        if not address:
            raise ValueError(
                f'Contract entry for key "{name}" in version "{version}" '
                f"is missing or has no address.",
            )
        addresses[name] = address
    return addresses
