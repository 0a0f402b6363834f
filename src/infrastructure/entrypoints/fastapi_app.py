"""
FastAPI entry point — Event Grid webhook and local development server.

Event Grid posts a JSON array of events. A subscription validation event is
answered with its validation code; Key Vault expiry events are handed to the
rotation use case one by one; anything else is acknowledged and ignored.
Outcomes are returned for visibility only: delivery is fire-and-forget, so
every handled batch answers 200, including aborted rotations.

Run locally:
    uvicorn src.infrastructure.entrypoints.fastapi_app:app --reload --port 7071
"""

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from pydantic import ValidationError

from src.infrastructure.config.settings import RotationSettings
from src.infrastructure.entrypoints.composition_root import Container, build_container
from src.infrastructure.entrypoints.event_grid import (
    SUBSCRIPTION_VALIDATION_EVENT,
    EventGridEvent,
)
from src.infrastructure.observability.logging_setup import configure_logging

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Composition Root — wired lazily on the first request, once per process
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_container() -> Container:
    settings = RotationSettings.from_env()
    configure_logging(settings.log_level)
    return build_container(settings)


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(title="Client Secret Rotation")


@app.post("/api/events")
def receive_events(
    events: list[dict],
    container: Container = Depends(get_container),
):
    """Handle one Event Grid delivery batch."""
    try:
        parsed = [EventGridEvent.model_validate(e) for e in events]
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.errors()) from exc

    outcomes = []
    for event in parsed:
        if event.event_type == SUBSCRIPTION_VALIDATION_EVENT:
            if not isinstance(event.data, dict):
                raise HTTPException(
                    status_code=400, detail="validation event data must be an object"
                )
            code = event.data.get("validationCode")
            logger.info("Answering Event Grid subscription validation %s", event.id)
            return {"validationResponse": code}
        if not event.triggers_rotation():
            logger.info("Ignoring event %s of type %s", event.id, event.event_type)
            continue
        outcome = container.rotate.execute(event.to_domain())
        outcomes.append(outcome.to_dict())

    return {"outcomes": outcomes}


@app.get("/health")
async def health():
    return {"status": "ok"}
