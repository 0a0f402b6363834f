"""
Port (interface) for the per-application rotation lock.
Infrastructure adapters (e.g. InProcessRotationLock) must implement this interface.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager


class IRotationLock(ABC):
    @abstractmethod
    def hold(self, application_id: str) -> AbstractContextManager[None]:
        """Hold the lock for *application_id* for the duration of a with-block.

        Never blocks: if another rotation already holds it, raise instead.
        The lock is released on every exit path of the with-block.

        Raises:
            RotationInProgressError: if the lock is already held.
        """
        ...
