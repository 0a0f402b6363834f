"""
Domain entity for the near-expiration notification that triggers a rotation.
Zero external dependencies — pure Python dataclass only.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class ExpirationEvent:
    """One notification, received once per rotation attempt.

    subject carries the application (object) identifier, which is also the
    name of the secret held in the secret store.
    """

    id: str
    topic: str
    subject: str
    event_type: str
    event_time: Optional[datetime] = None
    data: Any = None
