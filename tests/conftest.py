"""Shared fixtures: in-memory fakes for the secret store and directory ports."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from src.application.config import RotationConfig
from src.application.use_cases.handle_expiration_event import HandleExpirationEventUseCase
from src.application.use_cases.rotate_directory_credential import (
    RotateDirectoryCredentialUseCase,
)
from src.domain.entities.directory_credential import (
    DirectoryApplication,
    DirectoryCredential,
    PasswordCredentialRequest,
)
from src.domain.entities.stored_secret import StoredSecret
from src.domain.errors import (
    ApplicationNotFoundError,
    DirectoryCallError,
    SecretNotFoundError,
    StoreWriteError,
)
from src.domain.ports.directory_port import IApplicationDirectory
from src.domain.ports.secret_store_port import ISecretStore
from src.infrastructure.locking.in_process_lock import InProcessRotationLock

FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class InMemorySecretStore(ISecretStore):
    def __init__(self) -> None:
        self.secrets: dict[str, StoredSecret] = {}
        self.writes: list[StoredSecret] = []
        self.fail_writes = False

    def get_secret(self, name: str) -> StoredSecret:
        try:
            return self.secrets[name]
        except KeyError:
            raise SecretNotFoundError(name) from None

    def set_secret(self, secret: StoredSecret) -> None:
        if self.fail_writes:
            raise StoreWriteError("vault unavailable")
        self.writes.append(secret)
        self.secrets[secret.name] = secret


class FakeDirectory(IApplicationDirectory):
    """Holds applications and their credentials.

    Added credentials take the next (key_id, secret_text) pair from issued,
    falling back to key-N / secret-N.
    """

    def __init__(self) -> None:
        self.applications: dict[str, DirectoryApplication] = {}
        self.calls: list[tuple] = []
        self.fail_lookup = False
        self.fail_add = False
        self.fail_remove = False
        self._ids = itertools.count(1)
        self.issued: list[tuple[str, str]] = []

    def add_application(self, object_id: str, *credentials: DirectoryCredential) -> None:
        self.applications[object_id] = DirectoryApplication(
            object_id=object_id,
            display_name=f"App {object_id}",
            password_credentials=tuple(credentials),
        )

    def key_ids(self, object_id: str) -> list[str]:
        return [c.key_id for c in self.applications[object_id].password_credentials]

    def _replace(self, object_id: str, credentials) -> None:
        app = self.applications[object_id]
        self.applications[object_id] = DirectoryApplication(
            object_id=app.object_id,
            display_name=app.display_name,
            password_credentials=tuple(credentials),
        )

    def get_application(self, application_id: str) -> DirectoryApplication:
        self.calls.append(("get", application_id))
        if self.fail_lookup:
            raise DirectoryCallError("graph timeout")
        if application_id not in self.applications:
            raise ApplicationNotFoundError(application_id)
        return self.applications[application_id]

    def add_password_credential(
        self, application_id: str, request: PasswordCredentialRequest
    ) -> DirectoryCredential:
        self.calls.append(("add", application_id, request))
        if self.fail_add:
            raise DirectoryCallError("addPassword failed", status_code=500)
        if self.issued:
            key_id, secret_text = self.issued.pop(0)
        else:
            n = next(self._ids)
            key_id, secret_text = f"key-{n}", f"secret-{n}"
        credential = DirectoryCredential(
            key_id=key_id,
            secret_text=secret_text,
            display_name=request.display_name,
            start_date_time=FIXED_NOW,
            end_date_time=request.end_date_time,
        )
        stored = DirectoryCredential(
            key_id=credential.key_id,
            display_name=credential.display_name,
            start_date_time=credential.start_date_time,
            end_date_time=credential.end_date_time,
        )
        self._replace(
            application_id,
            self.applications[application_id].password_credentials + (stored,),
        )
        return credential

    def remove_password_credential(self, application_id: str, key_id: str) -> None:
        self.calls.append(("remove", application_id, key_id))
        if self.fail_remove:
            raise DirectoryCallError("removePassword failed", status_code=503)
        remaining = [
            c
            for c in self.applications[application_id].password_credentials
            if c.key_id != key_id
        ]
        self._replace(application_id, remaining)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> RotationConfig:
    return RotationConfig(secret_store_endpoint="https://kv-test.vault.azure.net")


@pytest.fixture()
def secret_store() -> InMemorySecretStore:
    return InMemorySecretStore()


@pytest.fixture()
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture()
def lock() -> InProcessRotationLock:
    return InProcessRotationLock()


@pytest.fixture()
def rotator(directory: FakeDirectory, config: RotationConfig) -> RotateDirectoryCredentialUseCase:
    return RotateDirectoryCredentialUseCase(directory, config, clock=lambda: FIXED_NOW)


@pytest.fixture()
def handler(
    config: RotationConfig,
    secret_store: InMemorySecretStore,
    rotator: RotateDirectoryCredentialUseCase,
    lock: InProcessRotationLock,
) -> HandleExpirationEventUseCase:
    return HandleExpirationEventUseCase(config, secret_store, rotator, lock)


@pytest.fixture()
def seeded(secret_store: InMemorySecretStore, directory: FakeDirectory) -> str:
    """app-123 with live credential key-A, stored with correlation id key-A."""
    directory.add_application(
        "app-123",
        DirectoryCredential(key_id="key-A", display_name="Set via automation"),
    )
    secret_store.secrets["app-123"] = StoredSecret(
        name="app-123",
        value="old-secret",
        correlation_id="key-A",
        expires_on=FIXED_NOW + timedelta(days=2),
    )
    return "app-123"


@pytest.fixture()
def now() -> datetime:
    return FIXED_NOW
