"""
Azure Functions entry point — cloud deployment (Python v2 programming model).

The Functions host discovers ``app`` from a ``function_app.py`` at the root of
the deployed folder, which only needs to re-export it:

    from src.infrastructure.entrypoints.function_app import app  # noqa: F401

Deploy with the Event Grid subscription on the Key Vault filtered to
Microsoft.KeyVault.SecretNearExpiry and KEY_VAULT_URI set in app settings.
The function never raises for a contained rotation failure, so Event Grid
does not redeliver; outcomes needing reconciliation are logged at WARNING.
"""

import logging

import azure.functions as func

from src.application.use_cases.handle_expiration_event import HandleExpirationEventUseCase
from src.domain.entities.expiration_event import ExpirationEvent
from src.domain.entities.rotation_result import RotationOutcome
from src.infrastructure.config.settings import RotationSettings
from src.infrastructure.entrypoints.composition_root import build_container
from src.infrastructure.entrypoints.event_grid import ROTATION_EVENT_TYPES
from src.infrastructure.observability.logging_setup import configure_logging

logger = logging.getLogger(__name__)

_container = None


def _get_rotation_use_case() -> HandleExpirationEventUseCase:
    global _container
    if _container is None:
        settings = RotationSettings.from_env()
        configure_logging(settings.log_level)
        _container = build_container(settings)
    return _container.rotate


def to_expiration_event(event: func.EventGridEvent) -> ExpirationEvent:
    return ExpirationEvent(
        id=event.id,
        topic=event.topic,
        subject=event.subject,
        event_type=event.event_type,
        event_time=event.event_time,
        data=event.get_json(),
    )


def handle_event_grid_event(
    event: func.EventGridEvent, use_case: HandleExpirationEventUseCase
) -> RotationOutcome | None:
    """Rotate for a Key Vault expiry event; return None for any other type."""
    if event.event_type not in ROTATION_EVENT_TYPES:
        logger.info("Ignoring event %s of type %s", event.id, event.event_type)
        return None
    return use_case.execute(to_expiration_event(event))


app = func.FunctionApp()


@app.function_name(name="RotateAppRegSecretFunction")
@app.event_grid_trigger(arg_name="event")
def rotate_app_registration_secret(event: func.EventGridEvent) -> None:
    handle_event_grid_event(event, _get_rotation_use_case())
