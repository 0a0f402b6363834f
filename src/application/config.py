"""
Application configuration value object.
Built once at process start by the composition root and passed by reference
into the use cases; nothing below this layer reads the environment.
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_CREDENTIAL_VALIDITY_DAYS = 30
DEFAULT_CREDENTIAL_DISPLAY_NAME = "Set via automation"


@dataclass(frozen=True)
class RotationConfig:
    """
    Args:
        secret_store_endpoint:    Vault URI (or store endpoint). Absence is fatal per
                                  invocation, not at startup.
        credential_validity_days: Lifetime of every credential the rotation adds.
        credential_display_name:  Display name stamped on added credentials; also
                                  how orphan detection recognises them.
    """

    secret_store_endpoint: Optional[str] = None
    credential_validity_days: int = DEFAULT_CREDENTIAL_VALIDITY_DAYS
    credential_display_name: str = DEFAULT_CREDENTIAL_DISPLAY_NAME

    def __post_init__(self) -> None:
        if self.credential_validity_days < 1:
            raise ValueError("credential_validity_days must be at least 1")
