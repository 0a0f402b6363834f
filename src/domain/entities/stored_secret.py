"""
Domain entity for the secret record held in the external secret store.
Zero external dependencies — pure Python dataclass only.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class StoredSecret:
    """A secret store record keyed by application identifier.

    correlation_id is the raw content of the store's free-text metadata field
    (Key Vault content type, Secrets Manager description). It is decoded with
    src.domain.correlation before being trusted as a directory keyId.
    """

    name: str
    value: str = field(repr=False)
    correlation_id: Optional[str] = None
    expires_on: Optional[datetime] = None
