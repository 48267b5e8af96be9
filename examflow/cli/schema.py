"""Database schema migrations (alembic)."""

from __future__ import annotations

import alembic.command
from alembic.config import Config

import examflow.lib.cli as click
from examflow.core import di

AlembicConfig = di.Provide["storage.persistent.alembic_config"]

verbose_flag = click.option("--verbose", "-v", is_flag=True, default=False)
offline_flag = click.option("--sql", "offline", is_flag=True, default=False, help="print the SQL instead of running it")


@click.group("schema")
def schema():
    """Inspect and migrate the database schema."""


@schema.command("current")
@verbose_flag
@di.inject
def show_current(verbose: bool, ac: Config = AlembicConfig):
    """Show the revision the database is at."""
    alembic.command.current(ac, verbose=verbose)


@schema.command("history")
@verbose_flag
@di.inject
def show_history(verbose: bool, ac: Config = AlembicConfig):
    alembic.command.history(ac, verbose=verbose, indicate_current=True)


@schema.command("revision")
@click.argument("message")
@click.option("--autogenerate/--empty", default=True, help="diff the table metadata against the database")
@di.inject
def write_revision(message: str, autogenerate: bool, ac: Config = AlembicConfig):
    """Write a new migration script."""
    alembic.command.revision(ac, message, autogenerate=autogenerate)


@schema.command("upgrade")
@click.argument("target", default="head")
@offline_flag
@di.inject
def migrate_up(target: str, offline: bool, ac: Config = AlembicConfig):
    alembic.command.upgrade(ac, target, sql=offline)


@schema.command("downgrade")
@click.argument("target")
@offline_flag
@di.inject
def migrate_down(target: str, offline: bool, ac: Config = AlembicConfig):
    alembic.command.downgrade(ac, target, sql=offline)


@schema.command("stamp")
@click.argument("target")
@di.inject
def mark_revision(target: str, ac: Config = AlembicConfig):
    """Mark the database as being at TARGET without running migrations."""
    alembic.command.stamp(ac, target)
