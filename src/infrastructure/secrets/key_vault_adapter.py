"""
Infrastructure adapter: Azure Key Vault → ISecretStore.

The directory key id is kept in the secret's content_type and the credential
expiry in expires_on. The SecretClient is built on first use so a missing
vault URI surfaces as a contained ConfigurationMissing outcome instead of a
crash at startup.
"""

from typing import Any, Optional

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient

from src.domain.entities.stored_secret import StoredSecret
from src.domain.errors import (
    ConfigurationMissingError,
    SecretNotFoundError,
    SecretStoreError,
    StoreWriteError,
)
from src.domain.ports.secret_store_port import ISecretStore


class KeyVaultSecretStore(ISecretStore):
    """Reads and writes application secrets in one Key Vault."""

    def __init__(
        self,
        vault_url: Optional[str],
        credential: Any = None,
        client: Optional[SecretClient] = None,
    ) -> None:
        """
        Args:
            vault_url:  e.g. 'https://<vault-name>.vault.azure.net'.
            credential: azure-identity credential; DefaultAzureCredential when omitted.
            client:     Pre-built SecretClient (tests, custom pipelines).
        """
        self._vault_url = vault_url
        self._credential = credential
        self._client = client

    def _get_client(self) -> SecretClient:
        if self._client is None:
            if not self._vault_url:
                raise ConfigurationMissingError("KEY_VAULT_URI is not configured")
            self._client = SecretClient(
                vault_url=self._vault_url,
                credential=self._credential or DefaultAzureCredential(),
            )
        return self._client

    def get_secret(self, name: str) -> StoredSecret:
        try:
            secret = self._get_client().get_secret(name)
        except ResourceNotFoundError as exc:
            raise SecretNotFoundError(name) from exc
        except AzureError as exc:
            raise SecretStoreError(f"Key Vault read of {name!r} failed: {exc}") from exc

        return StoredSecret(
            name=name,
            value=secret.value,
            correlation_id=secret.properties.content_type,
            expires_on=secret.properties.expires_on,
        )

    def set_secret(self, secret: StoredSecret) -> None:
        try:
            self._get_client().set_secret(
                secret.name,
                secret.value,
                content_type=secret.correlation_id,
                expires_on=secret.expires_on,
            )
        except AzureError as exc:
            raise StoreWriteError(
                f"Key Vault write of {secret.name!r} failed: {exc}"
            ) from exc
