"""Data-directory commands."""

import typer

from supportspark.config import settings
from supportspark.storage import FileStorage, ensure_demo_data

data_app = typer.Typer(help="Initialise and seed the data directory.", no_args_is_help=True)


@data_app.command("init")
def data_init(
    demo: bool = typer.Option(True, "--demo/--no-demo", help="Seed the demo accounts."),
) -> None:
    """Create the data files (if missing) and optionally seed demo data."""
    storage = FileStorage(settings.data_dir).init()
    typer.echo(f"[data init] Storage ready at {settings.data_dir}")
    typer.echo(
        f"[data init] users={len(storage.users)} supporters={len(storage.supporters)} "
        f"conversations={len(storage.index)}"
    )
    if not demo:
        return

    result = ensure_demo_data(storage)
    if result.created_anything:
        typer.echo(
            f"[data init] Demo data seeded: users={result.users} "
            f"link={'yes' if result.supporter_link else 'no'} "
            f"conversations={result.conversations}"
        )
    else:
        typer.echo("[data init] Demo data already present.")
