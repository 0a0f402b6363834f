"""
Port (interface) for secret stores.
Infrastructure adapters (e.g. KeyVaultSecretStore, SecretsManagerSecretStore)
must implement this interface and translate SDK errors into domain errors.
"""

from abc import ABC, abstractmethod

from src.domain.entities.stored_secret import StoredSecret


class ISecretStore(ABC):
    @abstractmethod
    def get_secret(self, name: str) -> StoredSecret:
        """Fetch the current version of the secret called *name*.

        Raises:
            SecretNotFoundError: if the store has no such secret.
            SecretStoreError:    on any other read failure.
        """
        ...

    @abstractmethod
    def set_secret(self, secret: StoredSecret) -> None:
        """Write *secret* as the new current version, including its metadata.

        Raises:
            StoreWriteError: on transport, auth or service failure.
        """
        ...
