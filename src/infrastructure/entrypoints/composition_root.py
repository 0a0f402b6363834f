"""
Composition Root shared by every entrypoint.

Wires infrastructure adapters to the application use cases once per process.
Entrypoints call these builders; no other module constructs an adapter.
"""

from dataclasses import dataclass

from azure.identity import DefaultAzureCredential

from src.application.use_cases.find_orphaned_credentials import (
    FindOrphanedCredentialsUseCase,
)
from src.application.use_cases.handle_expiration_event import HandleExpirationEventUseCase
from src.application.use_cases.rotate_directory_credential import (
    RotateDirectoryCredentialUseCase,
)
from src.domain.ports.secret_store_port import ISecretStore
from src.infrastructure.config.settings import RotationSettings
from src.infrastructure.directory.graph_adapter import MicrosoftGraphDirectory
from src.infrastructure.locking.in_process_lock import InProcessRotationLock
from src.infrastructure.secrets.key_vault_adapter import KeyVaultSecretStore
from src.infrastructure.secrets.secrets_manager_adapter import SecretsManagerSecretStore


@dataclass(frozen=True)
class Container:
    rotate: HandleExpirationEventUseCase
    find_orphans: FindOrphanedCredentialsUseCase


def build_secret_store(settings: RotationSettings, credential) -> ISecretStore:
    if settings.secret_store_backend == "secretsmanager":
        return SecretsManagerSecretStore(
            region=settings.aws_region,
            endpoint_url=settings.secrets_manager_endpoint,
        )
    return KeyVaultSecretStore(settings.key_vault_uri, credential=credential)


def build_container(settings: RotationSettings) -> Container:
    """Build every use case from *settings*.

    One DefaultAzureCredential is shared by the Graph and Key Vault adapters
    so tokens are cached once per process.
    """
    config = settings.to_rotation_config()
    credential = DefaultAzureCredential(
        managed_identity_client_id=settings.managed_identity_client_id
    )
    secret_store = build_secret_store(settings, credential)
    directory = MicrosoftGraphDirectory(
        credential=credential,
        base_url=settings.graph_base_url,
        timeout=settings.http_timeout_seconds,
    )
    rotator = RotateDirectoryCredentialUseCase(directory, config)
    return Container(
        rotate=HandleExpirationEventUseCase(
            config=config,
            secret_store=secret_store,
            rotator=rotator,
            lock=InProcessRotationLock(),
        ),
        find_orphans=FindOrphanedCredentialsUseCase(config, secret_store, directory),
    )
