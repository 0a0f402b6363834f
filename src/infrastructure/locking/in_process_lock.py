"""
Infrastructure adapter: in-process, per-application lock → IRotationLock.

Sufficient while one worker process handles all events for a function app;
deployments that scale out need a shared lock behind the same port.
"""

import threading
from contextlib import contextmanager
from typing import Iterator

from src.domain.errors import RotationInProgressError
from src.domain.ports.rotation_lock_port import IRotationLock


class InProcessRotationLock(IRotationLock):
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._held: set[str] = set()

    @contextmanager
    def hold(self, application_id: str) -> Iterator[None]:
        key = application_id.lower()
        with self._guard:
            if key in self._held:
                raise RotationInProgressError(application_id)
            self._held.add(key)
        try:
            yield
        finally:
            with self._guard:
                self._held.discard(key)

    def is_held(self, application_id: str) -> bool:
        with self._guard:
            return application_id.lower() in self._held
