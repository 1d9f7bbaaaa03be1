"""Operational CLI.

``warden sweep-reset-tokens`` is meant to be run from cron or a scheduled job.
"""

import asyncio
from datetime import timedelta
from typing import Optional

import typer
from rich.console import Console

from warden.core.config.settings import settings
from warden.core.logging import configure_logging
from warden.domain.services.auth.reset_tokens import ResetTokenService
from warden.infrastructure.database import AsyncSessionFactory, engine
from warden.infrastructure.dependency_injection.auth_dependencies import get_identity_provider_registry
from warden.infrastructure.repositories import PasswordResetTokenRepository
from warden.utils.time import utcnow

console = Console()

app = typer.Typer(help="Warden maintenance commands", no_args_is_help=True)


async def _sweep(older_than_minutes: int) -> int:
    cutoff = utcnow() - timedelta(minutes=older_than_minutes)
    try:
        async with AsyncSessionFactory() as session:
            service = ResetTokenService(PasswordResetTokenRepository(session))
            return await service.sweep(cutoff)
    finally:
        await engine.dispose()


@app.command("sweep-reset-tokens")
def sweep_reset_tokens(
    older_than_minutes: Optional[int] = typer.Option(
        None,
        "--older-than-minutes",
        "-m",
        min=1,
        help="Delete tokens created more than this many minutes ago "
        "(default: PASSWORD_RESET_SWEEP_AFTER_MINUTES).",
    ),
) -> None:
    """Delete password reset tokens older than the cutoff."""
    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
    minutes = older_than_minutes or settings.PASSWORD_RESET_SWEEP_AFTER_MINUTES
    deleted = asyncio.run(_sweep(minutes))
    console.print(f"[green]Deleted {deleted} reset token(s) older than {minutes} minute(s)[/green]")


@app.command("providers")
def list_providers() -> None:
    """List the identity providers enabled by the current configuration."""
    providers = get_identity_provider_registry().supported_providers()
    if not providers:
        console.print("[yellow]No identity providers configured[/yellow]")
        return
    for name in providers:
        console.print(f"[cyan]{name}[/cyan]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
