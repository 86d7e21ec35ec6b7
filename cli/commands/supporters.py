"""Supporter relationship commands."""

import typer

from supportspark.config import settings
from supportspark.storage import FileStorage

supporters_app = typer.Typer(help="Inspect supporter relationships.", no_args_is_help=True)


@supporters_app.command("list")
def supporters_list(
    member: str = typer.Option(..., "--member", help="Member id."),
) -> None:
    """Show who supports *member* and whom *member* supports."""
    storage = FileStorage(settings.data_dir).init()

    mine = storage.get_supporters_for_member(member)
    theirs = storage.get_supporting_members(member)
    if not mine and not theirs:
        typer.echo("No supporter relationships found.")
        return

    typer.echo("Supporters:")
    for s in mine:
        typer.echo(f"  #{s.id}  {s.supporter_id}  ({s.status})")
    typer.echo("Supporting:")
    for s in theirs:
        typer.echo(f"  #{s.id}  {s.member_id}  ({s.status})")
