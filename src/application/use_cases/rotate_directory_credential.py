"""
Use-case: swap an application's password credential in the identity directory.
Depends only on Domain ports and entities — no infrastructure imports.

Add-before-remove: once the add succeeds the application briefly has two live
credentials, so anything still using the old secret keeps working while the
new one propagates. The remove must never run before the add has succeeded.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from src.application.config import RotationConfig
from src.domain.entities.directory_credential import PasswordCredentialRequest
from src.domain.entities.rotation_result import (
    DirectoryRotationResult,
    DirectoryRotationStatus,
)
from src.domain.errors import ApplicationNotFoundError, DirectoryCallError
from src.domain.ports.directory_port import IApplicationDirectory

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RotateDirectoryCredentialUseCase:
    def __init__(
        self,
        directory: IApplicationDirectory,
        config: RotationConfig,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._directory = directory
        self._config = config
        self._clock = clock or _utcnow

    def execute(self, application_id: str, previous_key_id: str) -> DirectoryRotationResult:
        """Add a new credential to *application_id*, then revoke *previous_key_id*.

        Never raises for directory failures; the returned status tells the
        caller whether the directory was left untouched (APPLICATION_NOT_FOUND,
        ADD_FAILED), fully rotated (ROTATED) or left with an extra,
        unreferenced credential (REMOVE_FAILED).
        """
        try:
            application = self._directory.get_application(application_id)
        except ApplicationNotFoundError as exc:
            logger.error("Application %s not found in directory: %s", application_id, exc)
            return DirectoryRotationResult(
                status=DirectoryRotationStatus.APPLICATION_NOT_FOUND,
                application_id=application_id,
                previous_key_id=previous_key_id,
                error=str(exc),
            )
        except DirectoryCallError as exc:
            logger.error("Error resolving application %s: %s", application_id, exc)
            return DirectoryRotationResult(
                status=DirectoryRotationStatus.ADD_FAILED,
                application_id=application_id,
                previous_key_id=previous_key_id,
                error=str(exc),
            )

        logger.info(
            "Found application %s (%s) with %d password credential(s)",
            application.display_name,
            application_id,
            len(application.password_credentials),
        )

        request = PasswordCredentialRequest(
            display_name=self._config.credential_display_name,
            end_date_time=self._clock()
            + timedelta(days=self._config.credential_validity_days),
        )

        try:
            credential = self._directory.add_password_credential(application_id, request)
        except DirectoryCallError as exc:
            logger.error("Error adding client secret to %s: %s", application_id, exc)
            return DirectoryRotationResult(
                status=DirectoryRotationStatus.ADD_FAILED,
                application_id=application_id,
                previous_key_id=previous_key_id,
                error=str(exc),
            )

        logger.info("Added client secret %s to %s", credential.key_id, application_id)

        if not application.has_credential(previous_key_id):
            # Deleted out of band: the stored secret already matched nothing live.
            logger.warning(
                "Previous client secret %s is no longer on %s; skipping removal",
                previous_key_id,
                application_id,
            )
            return DirectoryRotationResult(
                status=DirectoryRotationStatus.ROTATED,
                application_id=application_id,
                previous_key_id=previous_key_id,
                credential=credential,
                previous_credential_removed=False,
            )

        try:
            self._directory.remove_password_credential(application_id, previous_key_id)
        except DirectoryCallError as exc:
            logger.error(
                "Error removing client secret %s from %s; new client secret %s is orphaned: %s",
                previous_key_id,
                application_id,
                credential.key_id,
                exc,
            )
            return DirectoryRotationResult(
                status=DirectoryRotationStatus.REMOVE_FAILED,
                application_id=application_id,
                previous_key_id=previous_key_id,
                credential=credential,
                error=str(exc),
            )

        logger.info("Removed client secret %s from %s", previous_key_id, application_id)
        return DirectoryRotationResult(
            status=DirectoryRotationStatus.ROTATED,
            application_id=application_id,
            previous_key_id=previous_key_id,
            credential=credential,
            previous_credential_removed=True,
        )
