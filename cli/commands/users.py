"""Account commands."""

from typing import Optional

import typer

from supportspark.auth import hash_password, normalize_email
from supportspark.config import settings
from supportspark.storage import FileStorage

users_app = typer.Typer(help="Inspect and create user accounts.", no_args_is_help=True)


@users_app.command("list")
def users_list() -> None:
    """List every account."""
    storage = FileStorage(settings.data_dir).init()
    users = storage.list_users()
    if not users:
        typer.echo("No users found.")
        return
    for u in users:
        typer.echo(f"  {u.id}  {u.email}  {u.display_name!r}")


@users_app.command("create")
def users_create(
    email: str = typer.Option(..., help="Login email (must be unused)."),
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Plain-text password."),
    first_name: Optional[str] = typer.Option(None, help="First name."),
    last_name: Optional[str] = typer.Option(None, help="Last name."),
) -> None:
    """Register an account from the command line."""
    try:
        email = normalize_email(email)
    except ValueError:
        typer.echo(f"❌ Invalid email address: {email}")
        raise typer.Exit(code=1)

    storage = FileStorage(settings.data_dir).init()
    if storage.get_user_by_email(email) is not None:
        typer.echo(f"❌ Email already registered: {email}")
        raise typer.Exit(code=1)

    user = storage.create_user(
        email=email,
        password=hash_password(password),
        first_name=first_name,
        last_name=last_name,
    )
    typer.echo(f"✅ User created: {user.email} ({user.id})")
