"""
Use-case: rotate an application's client secret in response to an expiration event.
Depends only on Domain ports and entities — no infrastructure imports.

Business decisions owned here:
  - Ordering: read store → decode correlation id → rotate directory → write store.
  - The store is never written unless a complete new credential was obtained.
  - A failed store write after a successful directory rotation is reported,
    not retried and not rolled back.
"""

import logging

from src.application.config import RotationConfig
from src.application.use_cases.rotate_directory_credential import (
    RotateDirectoryCredentialUseCase,
)
from src.domain.correlation import decode_correlation_id, encode_correlation_id
from src.domain.entities.expiration_event import ExpirationEvent
from src.domain.entities.rotation_result import (
    AbortReason,
    DirectoryRotationStatus,
    RotationOutcome,
)
from src.domain.entities.stored_secret import StoredSecret
from src.domain.errors import (
    MalformedCorrelationIdError,
    RotationInProgressError,
    SecretNotFoundError,
    SecretStoreError,
    StoreWriteError,
)
from src.domain.ports.rotation_lock_port import IRotationLock
from src.domain.ports.secret_store_port import ISecretStore

logger = logging.getLogger(__name__)

_ABORT_REASONS = {
    DirectoryRotationStatus.APPLICATION_NOT_FOUND: AbortReason.APPLICATION_NOT_FOUND,
    DirectoryRotationStatus.ADD_FAILED: AbortReason.DIRECTORY_CALL_FAILURE,
}


class HandleExpirationEventUseCase:
    def __init__(
        self,
        config: RotationConfig,
        secret_store: ISecretStore,
        rotator: RotateDirectoryCredentialUseCase,
        lock: IRotationLock,
    ) -> None:
        self._config = config
        self._secret_store = secret_store
        self._rotator = rotator
        self._lock = lock

    def execute(self, event: ExpirationEvent) -> RotationOutcome:
        """Handle one expiration event and report the resulting state.

        Every contained failure becomes a RotationOutcome; no domain error
        escapes to the caller.
        """
        logger.info(
            "Event Input Detail - Id: %s Topic: %s Subject: %s EventType: %s",
            event.id,
            event.topic,
            event.subject,
            event.event_type,
        )

        application_id = (event.subject or "").strip()

        if not self._config.secret_store_endpoint:
            logger.error("Secret store endpoint is not configured; aborting rotation")
            return RotationOutcome.aborted(
                application_id,
                AbortReason.CONFIGURATION_MISSING,
                "secret store endpoint is not configured",
            )

        if not application_id:
            logger.error("Event %s carries no application identifier", event.id)
            return RotationOutcome.aborted(
                application_id, AbortReason.INVALID_EVENT, "event subject is empty"
            )

        try:
            with self._lock.hold(application_id):
                outcome = self._rotate(application_id)
        except RotationInProgressError as exc:
            logger.warning("Skipping event %s: %s", event.id, exc)
            return RotationOutcome.aborted(
                application_id, AbortReason.ROTATION_IN_PROGRESS, str(exc)
            )

        log = logger.warning if outcome.needs_reconciliation else logger.info
        log("Rotation outcome for %s: %s", application_id, outcome.to_dict())
        return outcome

    def _rotate(self, application_id: str) -> RotationOutcome:
        try:
            previous = self._secret_store.get_secret(application_id)
        except SecretNotFoundError as exc:
            logger.error("No stored secret for %s: %s", application_id, exc)
            return RotationOutcome.aborted(
                application_id, AbortReason.SECRET_NOT_FOUND, str(exc)
            )
        except SecretStoreError as exc:
            logger.error("Error reading stored secret for %s: %s", application_id, exc)
            return RotationOutcome.aborted(
                application_id, AbortReason.STORE_READ_FAILURE, str(exc)
            )

        try:
            previous_key_id = decode_correlation_id(previous.correlation_id)
        except MalformedCorrelationIdError as exc:
            logger.error("Stored secret for %s is not correlated: %s", application_id, exc)
            return RotationOutcome.aborted(
                application_id, AbortReason.MALFORMED_CORRELATION_ID, str(exc)
            )

        logger.info(
            "Previous secret for app registration: %s - Secret ID: %s",
            application_id,
            previous_key_id,
        )

        result = self._rotator.execute(application_id, previous_key_id)

        if result.status in _ABORT_REASONS:
            return RotationOutcome.aborted(
                application_id,
                _ABORT_REASONS[result.status],
                result.error,
                previous_key_id=previous_key_id,
            )
        if result.partially_applied:
            return RotationOutcome.partial_orphan(
                application_id, previous_key_id, result.credential.key_id, result.error
            )

        credential = result.credential
        try:
            new_secret = StoredSecret(
                name=application_id,
                value=credential.secret_text,
                correlation_id=encode_correlation_id(credential.key_id),
                expires_on=credential.end_date_time,
            )
            logger.info("Setting new secret for app registration: %s", application_id)
            self._secret_store.set_secret(new_secret)
        except (StoreWriteError, MalformedCorrelationIdError) as exc:
            logger.error(
                "Error setting new secret for app registration: %s: %s", application_id, exc
            )
            return RotationOutcome.inconsistent(
                application_id, previous_key_id, credential, str(exc)
            )

        return RotationOutcome.rotated(application_id, previous_key_id, new_secret)
