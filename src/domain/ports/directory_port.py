"""
Port (interface) for the identity directory holding application credentials.
Infrastructure adapters (e.g. MicrosoftGraphDirectory) must implement this interface.
"""

from abc import ABC, abstractmethod

from src.domain.entities.directory_credential import (
    DirectoryApplication,
    DirectoryCredential,
    PasswordCredentialRequest,
)


class IApplicationDirectory(ABC):
    @abstractmethod
    def get_application(self, application_id: str) -> DirectoryApplication:
        """Resolve an application and its live password credentials.

        Raises:
            ApplicationNotFoundError: if no such application exists.
            DirectoryCallError:       on any other failure.
        """
        ...

    @abstractmethod
    def add_password_credential(
        self, application_id: str, request: PasswordCredentialRequest
    ) -> DirectoryCredential:
        """Add a password credential; the directory assigns key_id and secret_text.

        Raises:
            DirectoryCallError: if the credential could not be added.
        """
        ...

    @abstractmethod
    def remove_password_credential(self, application_id: str, key_id: str) -> None:
        """Revoke the password credential *key_id*.

        Raises:
            DirectoryCallError: if the credential could not be removed.
        """
        ...
