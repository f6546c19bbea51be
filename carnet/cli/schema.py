"""Alembic migrations for the carnet database."""

from __future__ import annotations

import alembic.command
from alembic.config import Config

import carnet.lib.cli as click
from carnet.core import di

AlembicConfig = di.Provide["storage.persistent.alembic_config"]


@click.group("schema")
def schema():
    """Manage the database schema."""
    ...


@schema.command()
@click.option("--verbose", "-v", is_flag=True, default=False)
@di.inject
def current(verbose: bool, conf: Config = AlembicConfig):
    """Show the revision the database is at."""
    alembic.command.current(conf, verbose=verbose)


@schema.command()
@click.option("--verbose", "-v", is_flag=True, default=False)
@di.inject
def history(verbose: bool, conf: Config = AlembicConfig):
    alembic.command.history(conf, verbose=verbose, indicate_current=True)


@schema.command()
@click.argument("message")
@click.option("--autogenerate/--empty", default=True, help="diff carnet.storage.table against the database")
@di.inject
def generate(message: str, autogenerate: bool, conf: Config = AlembicConfig):
    """Write a new revision described by MESSAGE."""
    alembic.command.revision(conf, message, autogenerate=autogenerate)


@schema.command()
@click.argument("revision", default="head")
@di.inject
def up(revision: str, conf: Config = AlembicConfig):
    """Upgrade to REVISION, by default the latest."""
    alembic.command.upgrade(conf, revision)


@schema.command()
@click.argument("revision")
@di.inject
def down(revision: str, conf: Config = AlembicConfig):
    """Downgrade to REVISION, e.g. -1 or base."""
    alembic.command.downgrade(conf, revision)


@schema.command()
@click.argument("revision")
@di.inject
def stamp(revision: str, conf: Config = AlembicConfig):
    """Record REVISION as applied without running it."""
    alembic.command.stamp(conf, revision)
