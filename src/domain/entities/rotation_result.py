"""
Domain entities for the tagged results of a rotation attempt.
Zero external dependencies — pure Python dataclasses and enums only.

DirectoryRotationResult describes what happened in the directory;
RotationOutcome describes the final state across directory and secret store,
so operators can tell "nothing happened" from "something irreversible
happened and needs reconciling".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.domain.entities.directory_credential import DirectoryCredential
from src.domain.entities.stored_secret import StoredSecret


class DirectoryRotationStatus(str, Enum):
    ROTATED = "rotated"
    APPLICATION_NOT_FOUND = "application_not_found"
    # Nothing was added; the directory is unchanged.
    ADD_FAILED = "add_failed"
    # The new credential was added but the previous one is still live.
    REMOVE_FAILED = "remove_failed"


@dataclass(frozen=True)
class DirectoryRotationResult:
    status: DirectoryRotationStatus
    application_id: str
    previous_key_id: str
    credential: Optional[DirectoryCredential] = None
    previous_credential_removed: bool = False
    error: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is DirectoryRotationStatus.ROTATED

    @property
    def partially_applied(self) -> bool:
        """True when the directory was mutated even though rotation failed."""
        return self.status is DirectoryRotationStatus.REMOVE_FAILED


class RotationOutcomeStatus(str, Enum):
    ROTATED = "rotated"
    ABORTED = "aborted"
    PARTIAL_ORPHAN = "partial_orphan"
    INCONSISTENT = "inconsistent"


class AbortReason(str, Enum):
    CONFIGURATION_MISSING = "configuration_missing"
    INVALID_EVENT = "invalid_event"
    ROTATION_IN_PROGRESS = "rotation_in_progress"
    SECRET_NOT_FOUND = "secret_not_found"
    STORE_READ_FAILURE = "store_read_failure"
    MALFORMED_CORRELATION_ID = "malformed_correlation_id"
    APPLICATION_NOT_FOUND = "application_not_found"
    DIRECTORY_CALL_FAILURE = "directory_call_failure"


@dataclass(frozen=True)
class RotationOutcome:
    """Final state of one handled expiration event.

    ROTATED         directory and store both hold the new credential.
    ABORTED         nothing was mutated; reason says why.
    PARTIAL_ORPHAN  a new credential (new_key_id) exists in the directory but
                    nothing references it; the previous one is still live and
                    still stored.
    INCONSISTENT    the directory rotated but the store write failed, so the
                    store holds a revoked secret; new_credential is the only
                    remaining copy of the new secret text.
    """

    status: RotationOutcomeStatus
    application_id: str
    reason: Optional[AbortReason] = None
    previous_key_id: Optional[str] = None
    new_key_id: Optional[str] = None
    new_credential: Optional[DirectoryCredential] = None
    stored_secret: Optional[StoredSecret] = None
    detail: str = ""

    @classmethod
    def rotated(
        cls, application_id: str, previous_key_id: str, stored_secret: StoredSecret
    ) -> "RotationOutcome":
        return cls(
            status=RotationOutcomeStatus.ROTATED,
            application_id=application_id,
            previous_key_id=previous_key_id,
            new_key_id=stored_secret.correlation_id,
            stored_secret=stored_secret,
        )

    @classmethod
    def aborted(
        cls,
        application_id: str,
        reason: AbortReason,
        detail: str = "",
        previous_key_id: Optional[str] = None,
    ) -> "RotationOutcome":
        return cls(
            status=RotationOutcomeStatus.ABORTED,
            application_id=application_id,
            reason=reason,
            previous_key_id=previous_key_id,
            detail=detail,
        )

    @classmethod
    def partial_orphan(
        cls, application_id: str, previous_key_id: str, new_key_id: str, detail: str = ""
    ) -> "RotationOutcome":
        return cls(
            status=RotationOutcomeStatus.PARTIAL_ORPHAN,
            application_id=application_id,
            previous_key_id=previous_key_id,
            new_key_id=new_key_id,
            detail=detail,
        )

    @classmethod
    def inconsistent(
        cls,
        application_id: str,
        previous_key_id: str,
        new_credential: DirectoryCredential,
        detail: str = "",
    ) -> "RotationOutcome":
        return cls(
            status=RotationOutcomeStatus.INCONSISTENT,
            application_id=application_id,
            previous_key_id=previous_key_id,
            new_key_id=new_credential.key_id,
            new_credential=new_credential,
            detail=detail,
        )

    @property
    def needs_reconciliation(self) -> bool:
        return self.status in (
            RotationOutcomeStatus.PARTIAL_ORPHAN,
            RotationOutcomeStatus.INCONSISTENT,
        )

    def to_dict(self) -> dict:
        """Serialise for logs and HTTP responses; secret values are never included."""
        return {
            "status": self.status.value,
            "application_id": self.application_id,
            "reason": self.reason.value if self.reason else None,
            "previous_key_id": self.previous_key_id,
            "new_key_id": self.new_key_id,
            "expires_on": (
                self.stored_secret.expires_on.isoformat()
                if self.stored_secret and self.stored_secret.expires_on
                else None
            ),
            "needs_reconciliation": self.needs_reconciliation,
            "detail": self.detail,
        }
