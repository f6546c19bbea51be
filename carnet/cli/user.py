"""CLI commands for provisioning users."""

from __future__ import annotations

import datetime

from sqlalchemy.orm import Session

import carnet.lib.cli as click
from carnet.auth.jwt import JWTManager
from carnet.core import di
from carnet.model import Role
from carnet.storage import user as user_storage


@click.group("user")
def user():
    """Manage users."""
    ...


@user.command("create")
@click.argument("email")
@click.argument("name")
@click.option("--role", "-r", type=click.EnumType(Role), required=True, help="role the user acts as")
@click.option("--token", "-t", "print_token", is_flag=True, default=False, help="print an access token for the user")
@click.option("--token-days", type=click.IntRange(min=1), default=None, help="lifetime of the printed token")
@di.inject
def user_create(
    email: str,
    name: str,
    role: Role,
    print_token: bool,
    token_days: int | None,
    session: Session = di.Provide["storage.persistent.session"],
    jwt_manager: JWTManager = di.Provide["auth.jwt_manager"],
) -> None:
    """Create a new user.

    EMAIL is the user's email address.
    NAME is the user's display name.
    """
    with session.begin():
        existing = user_storage.get(email=email, session=session)
        if existing:
            raise click.ClickException(f"user with email '{email}' already exists")

        new_user = user_storage.create(email=email, name=name, role=role, session=session)

    click.echo(f"Created {new_user.role.value} {new_user.name} <{new_user.email}>")
    click.echo(f"  user_id: {new_user.user_id}")

    if print_token:
        expires = datetime.timedelta(days=token_days) if token_days else None
        click.echo(f"  token: {jwt_manager.create_access_token(new_user.user_id, new_user.role, expires)}")


@user.command("list")
@click.option("--role", "-r", type=click.EnumType(Role), default=None)
@di.inject
def user_list(
    role: Role | None,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """List users, optionally only those with ROLE."""
    with session.begin():
        users = user_storage.find(role=role, session=session)

    for u in users:
        click.echo(f"{u.user_id}  {u.role.value:<8}  {u.name} <{u.email}>")
