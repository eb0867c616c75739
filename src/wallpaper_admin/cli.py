"""Command line interface for the packaged services."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
import uvicorn

from . import crud
from .config import Settings, get_settings
from .database import Database
from .errors import DuplicateKeyError, ModelValidationError

app = typer.Typer(help="Manage and run the wallpaper admin backend.")


def _print_header(title: str) -> None:
    typer.secho(title, bold=True, fg=typer.colors.CYAN)


def _resolve_settings() -> Settings:
    settings = get_settings()
    settings.ensure_storage()
    return settings


async def _with_database(settings: Settings, operation):
    database = Database(settings.database_url)
    try:
        await database.create_all()
        async with database.session() as session:
            return await operation(session)
    finally:
        await database.dispose()


@app.command()
def run(
    host: Optional[str] = typer.Option(None, help="Hostname to bind"),
    port: Optional[int] = typer.Option(None, help="Port to expose"),
    reload: Optional[bool] = typer.Option(None, help="Enable auto-reload"),
    log_level: Optional[str] = typer.Option(None, help="Uvicorn log level"),
) -> None:
    """Start the admin API using Uvicorn."""

    settings = _resolve_settings()

    uvicorn.run(
        "wallpaper_admin.app:create_app",
        host=host or settings.host,
        port=port or settings.port,
        reload=settings.reload if reload is None else reload,
        log_level=log_level or settings.log_level,
        factory=True,
    )


@app.command("run-service")
def run_service(
    host: Optional[str] = typer.Option(None, help="Hostname to bind"),
    port: Optional[int] = typer.Option(None, help="Port to expose"),
    log_level: Optional[str] = typer.Option(None, help="Uvicorn log level"),
) -> None:
    """Start the public wallpaper service."""

    settings = _resolve_settings()

    uvicorn.run(
        "wallpaper_admin.service:create_service_app",
        host=host or settings.host,
        port=port or settings.service_port,
        log_level=log_level or settings.log_level,
        factory=True,
    )


@app.command()
def init_db() -> None:
    """Create the database tables."""

    settings = _resolve_settings()

    async def _noop(_session) -> None:
        return None

    asyncio.run(_with_database(settings, _noop))
    typer.echo(f"Database initialised at {settings.database_path or settings.database_url}")


@app.command()
def create_admin(
    email: str = typer.Argument(..., help="Login email"),
    first_name: str = typer.Option(..., "--first-name", help="Given name"),
    last_name: str = typer.Option(..., "--last-name", help="Family name"),
    password: Optional[str] = typer.Option(
        None,
        "--password",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Password for the new administrator",
    ),
) -> None:
    """Create an administrator account in the database."""

    settings = _resolve_settings()
    if not password:
        typer.secho("Password is required", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    async def _create(session):
        if await crud.get_admin_by_email(session, email):
            return None
        return await crud.create_admin(
            session,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
        )

    try:
        admin = asyncio.run(_with_database(settings, _create))
    except (DuplicateKeyError, ModelValidationError) as exc:
        typer.secho(exc.message, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc
    if admin is None:
        typer.secho("Email already exists", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.secho(f"Created administrator {admin.email} (id={admin.id})", fg=typer.colors.GREEN)


@app.command("list-admins")
def list_admins_cmd(
    limit: int = typer.Option(50, help="Maximum number of admins to show"),
) -> None:
    """Display administrators stored in the database, newest first."""

    settings = _resolve_settings()
    admins = asyncio.run(
        _with_database(settings, lambda session: crud.list_admins(session, limit=limit))
    )
    if not admins:
        typer.echo("No admins found.")
        return
    _print_header("Existing admins")
    for admin in admins:
        typer.echo(f"- {admin.id} {admin.email} | {admin.first_name} {admin.last_name} | role={admin.role}")


@app.command()
def show_config() -> None:
    """Print out the effective configuration."""

    settings = _resolve_settings()
    typer.echo(f"Database: {settings.database_url}")
    typer.echo(f"Admin API: http://{settings.host}:{settings.port}{settings.api_prefix}")
    typer.echo(f"Service: http://{settings.host}:{settings.service_port}/api/v1/test")
    typer.echo(f"Secure cookies: {settings.cookie_secure}")
    typer.echo(f"CORS origins: {', '.join(settings.cors_origins)}")


def main() -> None:
    """Entry-point for console scripts."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
