"""
Event Grid schema for inbound notifications, shared by the webhook and the
Azure Functions trigger.

Only the Key Vault expiry event types start a rotation; the subject of those
events is the secret name, which is the application object id.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities.expiration_event import ExpirationEvent

SUBSCRIPTION_VALIDATION_EVENT = "Microsoft.EventGrid.SubscriptionValidationEvent"
ROTATION_EVENT_TYPES = frozenset(
    {
        "Microsoft.KeyVault.SecretNearExpiry",
        "Microsoft.KeyVault.SecretExpired",
    }
)


class EventGridEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    topic: str = ""
    subject: str
    event_type: str = Field(alias="eventType")
    event_time: Optional[datetime] = Field(default=None, alias="eventTime")
    data: Any = None
    data_version: str = Field(default="", alias="dataVersion")

    def triggers_rotation(self) -> bool:
        return self.event_type in ROTATION_EVENT_TYPES

    def to_domain(self) -> ExpirationEvent:
        return ExpirationEvent(
            id=self.id,
            topic=self.topic,
            subject=self.subject,
            event_type=self.event_type,
            event_time=self.event_time,
            data=self.data,
        )
