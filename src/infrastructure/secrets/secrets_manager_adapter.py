"""
Infrastructure adapter: AWS Secrets Manager → ISecretStore.

Secrets Manager has no content type, so the directory key id lives in the
secret's Description and the credential expiry in an ``expires-on`` tag.
The secret must already exist: the value and its Description are committed
together in one ``update_secret`` call, after the expiry tag, so a failed
write never pairs a new value with a stale correlation id.
"""

import os
from datetime import datetime
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.domain.entities.stored_secret import StoredSecret
from src.domain.errors import SecretNotFoundError, SecretStoreError, StoreWriteError
from src.domain.ports.secret_store_port import ISecretStore

EXPIRES_ON_TAG = "expires-on"


def _is_not_found(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") == "ResourceNotFoundException"


class SecretsManagerSecretStore(ISecretStore):
    """Reads and writes application secrets in AWS Secrets Manager."""

    def __init__(
        self,
        region: str | None = None,
        endpoint_url: str | None = None,
        client: Any = None,
    ) -> None:
        self._client = client or boto3.client(
            "secretsmanager",
            region_name=region or os.environ.get("AWS_DEFAULT_REGION", "us-east-1"),
            endpoint_url=endpoint_url,
        )

    def get_secret(self, name: str) -> StoredSecret:
        try:
            value = self._client.get_secret_value(SecretId=name)
            description = self._client.describe_secret(SecretId=name)
        except ClientError as exc:
            if _is_not_found(exc):
                raise SecretNotFoundError(name) from exc
            raise SecretStoreError(f"Secrets Manager read of {name!r} failed: {exc}") from exc
        except BotoCoreError as exc:
            raise SecretStoreError(f"Secrets Manager read of {name!r} failed: {exc}") from exc

        if "SecretString" not in value:
            raise SecretStoreError(f"Secrets Manager secret {name!r} has no string value")

        tags = {t["Key"]: t["Value"] for t in description.get("Tags", [])}
        return StoredSecret(
            name=name,
            value=value["SecretString"],
            correlation_id=description.get("Description"),
            expires_on=_parse_expiry(tags.get(EXPIRES_ON_TAG)),
        )

    def set_secret(self, secret: StoredSecret) -> None:
        description = secret.correlation_id or ""
        tags = []
        if secret.expires_on is not None:
            tags.append({"Key": EXPIRES_ON_TAG, "Value": secret.expires_on.isoformat()})

        try:
            if tags:
                self._client.tag_resource(SecretId=secret.name, Tags=tags)
            self._client.update_secret(
                SecretId=secret.name,
                SecretString=secret.value,
                Description=description,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StoreWriteError(
                f"Secrets Manager write of {secret.name!r} failed: {exc}"
            ) from exc


def _parse_expiry(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
