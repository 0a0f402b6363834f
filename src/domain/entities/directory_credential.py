"""
Domain entities for identity directory applications and their password credentials.
Zero external dependencies — pure Python dataclasses only.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class DirectoryCredential:
    """One password credential attached to an application.

    key_id and secret_text are always assigned by the directory. secret_text
    is only returned by the add call and is never retrievable afterwards, so
    it is None for credentials read back from an application.
    """

    key_id: str
    secret_text: Optional[str] = field(default=None, repr=False)
    display_name: Optional[str] = None
    start_date_time: Optional[datetime] = None
    end_date_time: Optional[datetime] = None
    hint: Optional[str] = None

    def to_dict(self) -> dict:
        """Serialise without the secret text."""
        return {
            "key_id": self.key_id,
            "display_name": self.display_name,
            "start_date_time": (
                self.start_date_time.isoformat() if self.start_date_time else None
            ),
            "end_date_time": (
                self.end_date_time.isoformat() if self.end_date_time else None
            ),
            "hint": self.hint,
        }


@dataclass(frozen=True)
class PasswordCredentialRequest:
    display_name: str
    end_date_time: datetime


@dataclass(frozen=True)
class DirectoryApplication:
    """An application registration; may carry any number of live credentials.

    Key ids are GUIDs in practice, so membership is checked case-insensitively.
    """

    object_id: str
    display_name: str
    app_id: Optional[str] = None
    password_credentials: tuple[DirectoryCredential, ...] = ()

    def has_credential(self, key_id: str) -> bool:
        wanted = key_id.lower()
        return any(c.key_id.lower() == wanted for c in self.password_credentials)
