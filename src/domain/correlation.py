"""
Encoding and decoding of the correlation id that ties a stored secret to a
directory credential.

Neither secret store has a native "which credential" attribute, so the
directory keyId is written verbatim into the store's free-text metadata field
(Key Vault content type, Secrets Manager description). Existing records
written that way must keep decoding, so the encoding stays the bare key id;
decoding validates it and fails loudly instead of passing junk to the
directory.
"""

import re
from typing import Optional

from src.domain.errors import MalformedCorrelationIdError

# Key Vault caps content_type at 255 characters.
MAX_CORRELATION_ID_LENGTH = 255

_VALID_KEY_ID = re.compile(r"^[A-Za-z0-9._:-]+$")


def encode_correlation_id(key_id: str) -> str:
    """Return the metadata field value for a directory *key_id*.

    Raises:
        MalformedCorrelationIdError: if *key_id* could not be decoded back.
    """
    return _validate(key_id)


def decode_correlation_id(raw: Optional[str]) -> str:
    """Recover the directory key id from a stored metadata field value.

    Surrounding whitespace is tolerated; anything else that is not a plain
    identifier token is rejected.

    Raises:
        MalformedCorrelationIdError: if *raw* is missing, blank, too long or
            contains characters a directory key id never has.
    """
    if raw is None:
        raise MalformedCorrelationIdError("Stored secret carries no correlation id.")
    return _validate(raw.strip())


def _validate(value: str) -> str:
    if not value:
        raise MalformedCorrelationIdError("Correlation id is blank.")
    if len(value) > MAX_CORRELATION_ID_LENGTH:
        raise MalformedCorrelationIdError(
            f"Correlation id is {len(value)} characters long "
            f"(max {MAX_CORRELATION_ID_LENGTH})."
        )
    if not _VALID_KEY_ID.match(value):
        raise MalformedCorrelationIdError(
            f"Correlation id {value!r} is not a directory key id."
        )
    return value
