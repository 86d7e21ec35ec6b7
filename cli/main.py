"""SupportSpark CLI — entry-point for server and data-directory operations.

Usage:
    supportspark --help

Command groups:
    serve          → run the HTTP API
    data           → initialise / seed the data directory
    users          → inspect and create accounts
    conversations  → list and print update threads
    supporters     → inspect supporter relationships
"""

from __future__ import annotations

from typing import Optional

import typer

from supportspark.config import configure_logging, settings

from cli.commands.conversations import conversations_app
from cli.commands.data import data_app
from cli.commands.supporters import supporters_app
from cli.commands.users import users_app

app = typer.Typer(
    name="supportspark",
    help="SupportSpark server CLI.",
    no_args_is_help=True,
)
app.add_typer(data_app, name="data")
app.add_typer(users_app, name="users")
app.add_typer(conversations_app, name="conversations")
app.add_typer(supporters_app, name="supporters")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL."),
) -> None:
    configure_logging(log_level)


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (defaults to HOST)."),
    port: Optional[int] = typer.Option(None, help="Port (defaults to PORT)."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "supportspark.api.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
