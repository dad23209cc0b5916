"""Command line interface for the relief store.

Every command opens the backend named by ``StoreSettings`` (``RELIEF_*``
environment variables), optionally overridden with ``--backend`` and
``--database``. The memory backend starts empty on each invocation unless
``RELIEF_SEED_SAMPLE_DATA`` is set.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from relief.context import StoreContext, open_context
from relief.settings import StoreSettings
from relief.storage.errors import StorageFailure
from relief.storage.seed import seed_sample_data
from relief.storage.stats import collect_stats
from relief.utils.logging_config import setup_logging

app = typer.Typer(
    name="relief",
    help="Inspect and maintain the disaster relief record store",
    no_args_is_help=True,
)


def run_in_context(ctx: typer.Context, operation):
    """Run `operation(context)` inside a freshly opened store context."""
    settings: StoreSettings = ctx.obj

    async def runner():
        async with open_context(settings, start_sweeper=False) as context:
            return await operation(context)

    try:
        return asyncio.run(runner())
    except StorageFailure as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    backend: Optional[str] = typer.Option(
        None, "--backend", "-b", help="Storage backend: memory or database."
    ),
    database: Optional[Path] = typer.Option(
        None, "--database", "-d", help="SQLite file for the database backend."
    ),
) -> None:
    overrides = {}
    if backend is not None:
        overrides["backend"] = backend
    if database is not None:
        overrides["database_path"] = database
    try:
        settings = StoreSettings(**overrides)
    except ValueError as e:
        typer.echo(f"Invalid settings: {e}", err=True)
        raise typer.Exit(2)

    setup_logging(settings.log_dir, settings.log_file_prefix)
    ctx.obj = settings


@app.command()
def init(ctx: typer.Context) -> None:
    """Create the schema (database backend) and verify its version."""

    async def operation(context: StoreContext):
        return None

    run_in_context(ctx, operation)
    settings: StoreSettings = ctx.obj
    if settings.backend == "database":
        typer.echo(f"✓ Database ready at {settings.database_path}")
    else:
        typer.echo("✓ In-memory store ready (nothing to initialize)")


@app.command()
def seed(ctx: typer.Context) -> None:
    """Load the sample users, disasters, resources and reports."""

    async def operation(context: StoreContext):
        loaded = await seed_sample_data(context.store)
        return loaded, await collect_stats(context.store)

    loaded, stats = run_in_context(ctx, operation)
    if not loaded:
        typer.echo("Sample data already present, nothing to do")
    typer.echo(
        f"✓ Store holds: {stats.active_disasters} disasters, "
        f"{stats.total_resources} resources, {stats.total_reports} reports"
    )


@app.command()
def disasters(
    ctx: typer.Context,
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Only disasters with this tag."),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Only disasters owned by this user."),
) -> None:
    """List disasters, newest first."""

    async def operation(context: StoreContext):
        return await context.store.get_disasters(tag=tag, owner_id=owner)

    found = run_in_context(ctx, operation)
    if not found:
        typer.echo("No disasters found.")
        return
    for disaster in found:
        tags = ", ".join(disaster.tags)
        typer.echo(f"{disaster.id}\t{disaster.title}\t{disaster.location_name}\t[{tags}]")


@app.command()
def near(
    ctx: typer.Context,
    latitude: float = typer.Argument(..., help="Latitude of the center point."),
    longitude: float = typer.Argument(
        ..., help="Longitude of the center point (put -- before negative values)."
    ),
    radius: float = typer.Option(10.0, "--radius", "-r", help="Radius in kilometers."),
) -> None:
    """List resources within RADIUS km of a point."""

    async def operation(context: StoreContext):
        return await context.store.get_resources_near(latitude, longitude, radius)

    found = run_in_context(ctx, operation)
    typer.echo(f"Found {len(found)} resources within {radius}km of ({latitude}, {longitude})")
    for resource in found:
        typer.echo(f"{resource.id}\t{resource.name}\t{resource.type}\t{resource.location_name}")


@app.command("sweep-cache")
def sweep_cache(ctx: typer.Context) -> None:
    """Remove expired cache entries once."""

    async def operation(context: StoreContext):
        return await context.sweeper.run_once()

    removed = run_in_context(ctx, operation)
    typer.echo(f"Removed {removed} expired cache entries")


@app.command()
def stats(ctx: typer.Context) -> None:
    """Print dashboard counts."""

    async def operation(context: StoreContext):
        return await collect_stats(context.store)

    result = run_in_context(ctx, operation)
    typer.echo(result.model_dump_json(by_alias=True, indent=2))


if __name__ == "__main__":
    app()
