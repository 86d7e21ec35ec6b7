"""Conversation commands."""

import typer

from supportspark.config import settings
from supportspark.storage import FileStorage

from cli.rendering import render_thread

conversations_app = typer.Typer(help="List and print update threads.", no_args_is_help=True)


@conversations_app.command("list")
def conversations_list(
    user: str = typer.Option(..., "--user", help="User id whose visible conversations to list."),
) -> None:
    """List the conversations a user can see (own + accepted supporting)."""
    storage = FileStorage(settings.data_dir).init()
    if storage.get_user(user) is None:
        typer.echo(f"❌ User not found: {user}")
        raise typer.Exit(code=1)

    conversations = storage.get_conversations_for_user(user)
    if not conversations:
        typer.echo("No conversations found.")
        return
    for c in conversations:
        marker = "*" if c.member_id == user else " "
        typer.echo(f"{marker} #{c.id}  {c.title}  [{c.member_id}]  {len(c.messages)} update(s)")


@conversations_app.command("show")
def conversations_show(
    conversation_id: int = typer.Argument(..., help="Conversation id."),
) -> None:
    """Print a conversation as a reply tree."""
    storage = FileStorage(settings.data_dir).init()
    conversation = storage.get_conversation(conversation_id)
    if conversation is None:
        typer.echo(f"❌ Conversation not found: {conversation_id}")
        raise typer.Exit(code=1)
    typer.echo(render_thread(conversation))
