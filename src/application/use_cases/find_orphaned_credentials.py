"""
Use-case: list directory credentials added by rotation that nothing references.
Depends only on Domain ports and entities — no infrastructure imports.

A PARTIAL_ORPHAN or INCONSISTENT rotation outcome leaves a credential in the
directory whose key id is not the store's correlation id. Operators use this
to find and revoke them.
"""

import logging
from typing import Optional

from src.application.config import RotationConfig
from src.domain.correlation import decode_correlation_id
from src.domain.entities.directory_credential import DirectoryCredential
from src.domain.errors import MalformedCorrelationIdError, SecretNotFoundError
from src.domain.ports.directory_port import IApplicationDirectory
from src.domain.ports.secret_store_port import ISecretStore

logger = logging.getLogger(__name__)


class FindOrphanedCredentialsUseCase:
    def __init__(
        self,
        config: RotationConfig,
        secret_store: ISecretStore,
        directory: IApplicationDirectory,
    ) -> None:
        self._config = config
        self._secret_store = secret_store
        self._directory = directory

    def execute(self, application_id: str) -> list[DirectoryCredential]:
        """Return the rotation-created credentials on *application_id* that the
        stored secret does not point at.

        Credentials with another display name were created by someone else and
        are never reported. If no secret is stored, or its correlation id is
        unreadable, every rotation-created credential counts as orphaned.

        Raises:
            ApplicationNotFoundError, DirectoryCallError, SecretStoreError:
                propagated unchanged; there is nothing to contain here.
        """
        referenced = self._referenced_key_id(application_id)
        application = self._directory.get_application(application_id)
        orphans = [
            c
            for c in application.password_credentials
            if c.display_name == self._config.credential_display_name
            and (referenced is None or c.key_id.lower() != referenced.lower())
        ]
        logger.info(
            "Found %d orphaned credential(s) on %s (referenced key id: %s)",
            len(orphans),
            application_id,
            referenced,
        )
        return orphans

    def _referenced_key_id(self, application_id: str) -> Optional[str]:
        try:
            stored = self._secret_store.get_secret(application_id)
            return decode_correlation_id(stored.correlation_id)
        except SecretNotFoundError:
            logger.warning("No stored secret for %s", application_id)
        except MalformedCorrelationIdError as exc:
            logger.warning("Stored secret for %s is not correlated: %s", application_id, exc)
        return None
