"""CLI entry point for trackplan.

The reconstruction and scheduling algorithms are not part of trackplan. The
``serve`` command loads them from a backend factory given as
``module:callable``; the callable takes no arguments and returns the tuple
``(reconstructor, scheduler, merger)``.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import Any

import click

from trackplan.logging import LEVELS, configure_logging
from trackplan.settings import ExternalContributor, SettingsError, load_settings


def load_backend(target: str) -> tuple[Any, Any, Any]:
    """Import a backend factory and call it.

    Args:
        target: Factory location in the form ``package.module:callable``.

    Returns:
        The (reconstructor, scheduler, merger) tuple produced by the factory.

    Raises:
        click.BadParameter: If the target is malformed or cannot be imported.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise click.BadParameter(f"Expected 'module:callable', got {target!r}")
    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise click.BadParameter(f"Cannot load backend {target!r}: {e}") from e

    backend = factory()
    if not isinstance(backend, tuple) or len(backend) != 3:
        raise click.BadParameter(
            f"Backend {target!r} must return (reconstructor, scheduler, merger)"
        )
    return backend


@click.group()
@click.version_option(package_name="trackplan")
def main() -> None:
    """trackplan - project plans from YouTrack issues."""
    pass


@main.command()
@click.argument("settings_path", type=click.Path(exists=True, path_type=Path))
def check(settings_path: Path) -> None:
    """Validate a settings file and show the normalized settings."""
    try:
        snapshot = load_settings(settings_path).snapshot()
    except SettingsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"YouTrack: {snapshot.base_url or '(not set)'}")
    click.echo(f"Saved query: {snapshot.saved_query_id or '(not set)'}")
    click.echo(f"Overlay query: {snapshot.overlay_saved_query_id or '(not set)'}")
    click.echo(f"Splittable types: {', '.join(snapshot.splittable_type_ids) or '(none)'}")
    click.echo(f"Contributors: {len(snapshot.contributors)}")
    for contributor in snapshot.contributors:
        if isinstance(contributor, ExternalContributor):
            click.echo(
                f"  - {contributor.name} (external, {contributor.num_members} person(s), "
                f"{contributor.hours_per_week:g} h/week)"
            )
        else:
            click.echo(f"  - {contributor.id} ({contributor.hours_per_week:g} h/week)")


@main.command()
@click.argument("settings_path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--backend",
    "backend_target",
    required=True,
    help="Planning backend factory, e.g. 'mypackage.backend:create'",
)
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=8000, show_default=True, type=int, help="Bind port")
@click.option(
    "--redirect-uri",
    default=None,
    help="OAuth redirect URI (default: http://HOST:PORT/)",
)
@click.option("--log-dir", type=click.Path(path_type=Path), default=None, help="Log directory")
@click.option(
    "--log-level",
    type=click.Choice(LEVELS, case_sensitive=False),
    default=None,
    help="Log level for trackplan and uvicorn (default: INFO)",
)
def serve(
    settings_path: Path,
    backend_target: str,
    host: str,
    port: int,
    redirect_uri: str | None,
    log_dir: Path | None,
    log_level: str | None,
) -> None:
    """Serve the REST API for the plan described by SETTINGS_PATH."""
    import uvicorn  # noqa: PLC0415

    from trackplan.api import EventManager, create_app  # noqa: PLC0415
    from trackplan.orchestrator import Orchestrator  # noqa: PLC0415
    from trackplan.planner import PipelineRunner  # noqa: PLC0415
    from trackplan.tracker import YouTrackClient  # noqa: PLC0415

    configure_logging(log_dir=log_dir, level=log_level, include_server=True)

    try:
        settings = load_settings(settings_path)
    except SettingsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    reconstructor, scheduler, merger = load_backend(backend_target)

    tracker = YouTrackClient(redirect_uri=redirect_uri or f"http://{host}:{port}/")
    event_manager = EventManager()
    orchestrator = Orchestrator(
        settings=settings,
        runner=PipelineRunner(reconstructor, scheduler, merger),
        connector=tracker,
        alerts=event_manager,
    )
    app = create_app(orchestrator, event_manager, tracker)
    # log_config=None keeps the handlers installed above.
    uvicorn.run(app, host=host, port=port, log_config=None)
