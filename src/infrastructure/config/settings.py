"""
Process configuration, read once from the environment at startup.

load_dotenv() lets local runs keep settings in a .env file. Values are
validated by pydantic, so a malformed NUMBER_OF_DAYS_UNTIL_EXPIRY fails the
process at startup rather than every rotation. A missing KEY_VAULT_URI is
deliberately NOT a startup error: it is reported per invocation as
ConfigurationMissing.
"""

import os
from typing import Literal, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from src.application.config import (
    DEFAULT_CREDENTIAL_DISPLAY_NAME,
    DEFAULT_CREDENTIAL_VALIDITY_DAYS,
    RotationConfig,
)

# env var → RotationSettings field
_ENV_FIELDS = {
    "KEY_VAULT_URI": "key_vault_uri",
    "SECRET_STORE_BACKEND": "secret_store_backend",
    "AWS_DEFAULT_REGION": "aws_region",
    "SECRETS_MANAGER_ENDPOINT": "secrets_manager_endpoint",
    "NUMBER_OF_DAYS_UNTIL_EXPIRY": "credential_validity_days",
    "CREDENTIAL_DISPLAY_NAME": "credential_display_name",
    "AZURE_CLIENT_ID": "managed_identity_client_id",
    "GRAPH_BASE_URL": "graph_base_url",
    "HTTP_TIMEOUT_SECONDS": "http_timeout_seconds",
    "LOG_LEVEL": "log_level",
}


class RotationSettings(BaseModel):
    key_vault_uri: Optional[str] = None
    secret_store_backend: Literal["keyvault", "secretsmanager"] = "keyvault"
    aws_region: str = "us-east-1"
    secrets_manager_endpoint: Optional[str] = None
    credential_validity_days: int = Field(
        default=DEFAULT_CREDENTIAL_VALIDITY_DAYS, ge=1, le=730
    )
    credential_display_name: str = Field(
        default=DEFAULT_CREDENTIAL_DISPLAY_NAME, min_length=1
    )
    managed_identity_client_id: Optional[str] = None
    graph_base_url: str = "https://graph.microsoft.com/v1.0"
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RotationSettings":
        """Build settings from *environ* (os.environ after load_dotenv() by default).

        Empty values are treated as unset.

        Raises:
            pydantic.ValidationError: if a value is present but invalid.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ
        values = {
            field: environ[name]
            for name, field in _ENV_FIELDS.items()
            if environ.get(name, "").strip()
        }
        return cls(**values)

    @property
    def secret_store_endpoint(self) -> Optional[str]:
        if self.secret_store_backend == "secretsmanager":
            return (
                self.secrets_manager_endpoint
                or f"https://secretsmanager.{self.aws_region}.amazonaws.com"
            )
        return self.key_vault_uri

    def to_rotation_config(self) -> RotationConfig:
        return RotationConfig(
            secret_store_endpoint=self.secret_store_endpoint,
            credential_validity_days=self.credential_validity_days,
            credential_display_name=self.credential_display_name,
        )
