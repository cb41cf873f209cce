"""Analytics Hooks — structured business events emitted as log records.

Invariants:
    - One INFO record per event on the "commitlabs.analytics" logger
    - Record carries `event` (name) and `payload` (dict) extras for JSONFormatter

Design Decisions:
    - Log records over a dedicated analytics client: a log shipper can forward
      the analytics logger to any sink without code changes
"""

import logging
from typing import Any

logger = logging.getLogger("commitlabs.analytics")

COMMITMENT_CREATED = "CommitmentCreated"
COMMITMENT_SETTLED = "CommitmentSettled"
COMMITMENT_EARLY_EXIT = "CommitmentEarlyExit"
ATTESTATION_RECEIVED = "AttestationReceived"


def emit(event: str, payload: dict[str, Any] | None = None) -> None:
    logger.info(event, extra={"event": event, "payload": payload or {}})


def log_commitment_created(**payload: Any) -> None:
    emit(COMMITMENT_CREATED, payload)


def log_commitment_settled(**payload: Any) -> None:
    emit(COMMITMENT_SETTLED, payload)


def log_early_exit(**payload: Any) -> None:
    emit(COMMITMENT_EARLY_EXIT, payload)


def log_attestation(**payload: Any) -> None:
    emit(ATTESTATION_RECEIVED, payload)
