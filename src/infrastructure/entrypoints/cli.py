"""
CLI entry point for operators.

Invoked as::

    secret-rotation [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m src.infrastructure.entrypoints.cli

Commands
--------
rotate   Rotate one application's client secret now, outside of Event Grid
orphans  List rotation-created credentials nothing references any more
"""

import json
import sys
import uuid
from datetime import datetime, timezone

import click

from src.domain.entities.expiration_event import ExpirationEvent
from src.domain.entities.rotation_result import RotationOutcomeStatus
from src.domain.errors import RotationError
from src.infrastructure.config.settings import RotationSettings
from src.infrastructure.entrypoints.composition_root import Container, build_container
from src.infrastructure.observability.logging_setup import configure_logging

MANUAL_EVENT_TYPE = "Manual.RotationRequested"


def _load_container() -> Container:
    settings = RotationSettings.from_env()
    configure_logging(settings.log_level)
    return build_container(settings)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Rotate directory application client secrets stored in a secret vault."""
    ctx.ensure_object(dict)


def _container(ctx: click.Context) -> Container:
    if "container" not in ctx.obj:
        ctx.obj["container"] = _load_container()
    return ctx.obj["container"]


@cli.command(name="rotate")
@click.argument("application_id")
@click.pass_context
def rotate_command(ctx: click.Context, application_id: str) -> None:
    """Rotate APPLICATION_ID's client secret immediately.

    Prints the outcome as JSON and exits non-zero unless the rotation
    completed in both the directory and the secret store.
    """
    event = ExpirationEvent(
        id=str(uuid.uuid4()),
        topic="cli",
        subject=application_id,
        event_type=MANUAL_EVENT_TYPE,
        event_time=datetime.now(timezone.utc),
    )
    outcome = _container(ctx).rotate.execute(event)
    click.echo(json.dumps(outcome.to_dict(), indent=2))
    if outcome.status is not RotationOutcomeStatus.ROTATED:
        sys.exit(1)


@cli.command(name="orphans")
@click.argument("application_id")
@click.pass_context
def orphans_command(ctx: click.Context, application_id: str) -> None:
    """List credentials on APPLICATION_ID added by rotation but not stored."""
    try:
        orphans = _container(ctx).find_orphans.execute(application_id)
    except RotationError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)
    click.echo(json.dumps([c.to_dict() for c in orphans], indent=2))


if __name__ == "__main__":
    cli()
