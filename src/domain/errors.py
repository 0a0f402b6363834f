"""
Domain exception taxonomy for secret rotation.
Zero external dependencies.

Infrastructure adapters translate SDK and transport exceptions into these so
the application layer never has to know about azure-core, botocore or httpx.
"""


class RotationError(Exception):
    """Base class for every failure the rotation flow knows how to contain."""


class ConfigurationMissingError(RotationError):
    """A required configuration value (e.g. the secret store endpoint) is absent."""


class SecretNotFoundError(RotationError):
    """The secret store holds no record for the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Secret {name!r} not found in the secret store.")
        self.name = name


class SecretStoreError(RotationError):
    """The secret store could not be read (transport, auth or throttling)."""


class StoreWriteError(SecretStoreError):
    """The secret store rejected or failed a write."""


class MalformedCorrelationIdError(RotationError):
    """The stored correlation metadata cannot be decoded into a directory key id."""


class ApplicationNotFoundError(RotationError):
    """The directory has no application with the requested identifier."""

    def __init__(self, application_id: str) -> None:
        super().__init__(f"Application {application_id!r} not found in the directory.")
        self.application_id = application_id


class DirectoryCallError(RotationError):
    """A directory call (lookup, add or remove) failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RotationInProgressError(RotationError):
    """Another rotation for the same application currently holds the lock."""

    def __init__(self, application_id: str) -> None:
        super().__init__(f"A rotation for {application_id!r} is already in progress.")
        self.application_id = application_id
