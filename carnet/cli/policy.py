"""Inspect the edit-permission policy from the command line."""

from __future__ import annotations

import datetime

import carnet.lib.cli as click
from carnet.core import di, TimestampProvider
from carnet.lib.util import format_duration
from carnet.model import Role
from carnet.policy import ActorContext, describe_denial, describe_remaining, EditableEntity, EntityKind, evaluate, \
    Locale, POLICY


@click.group("policy")
def policy():
    """Inspect edit windows."""
    ...


@policy.command("show")
def show() -> None:
    """Print the role-policy table."""
    click.echo(f"{'role':<10}{'kind':<20}{'window':<16}{'from':<16}")
    for (role, kind), rule in sorted(POLICY.items(), key=lambda i: (i[0][0].value, i[0][1].value)):
        if rule.can_override:
            window, reference = "override", "-"
        else:
            window = "unlimited" if rule.unlimited else format_duration(rule.window)
            reference = rule.reference.value
        click.echo(f"{role.value:<10}{kind.value:<20}{window:<16}{reference:<16}")


@policy.command("check")
@click.option("--role", "-r", type=click.EnumType(Role), required=True)
@click.option("--kind", "-k", type=click.EnumType(EntityKind), required=True)
@click.option("--created", "create_time", type=click.DateTimeParamType(), default=None)
@click.option("--session-start", type=click.DateTimeParamType(), default=None)
@click.option("--due", "due_time", type=click.DateTimeParamType(), default=None)
@click.option("--at", "at", type=click.DateTimeParamType(), default=None, help="evaluation time; defaults to now")
@click.option("--locale", "-l", type=click.EnumType(Locale), default=Locale.French)
@di.inject
def check(
    role: Role,
    kind: EntityKind,
    create_time: datetime.datetime | None,
    session_start: datetime.datetime | None,
    due_time: datetime.datetime | None,
    at: datetime.datetime | None,
    locale: Locale,
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> None:
    """Decide whether ROLE may edit a record of KIND with the given timestamps."""
    entity = EditableEntity(
        id="cli",
        kind=kind,
        create_time=create_time,
        session_start=session_start,
        due_time=due_time,
    )
    decision = evaluate(entity, ActorContext(role=role, current_time=at or utcnow()))

    if decision.allowed:
        click.echo(click.style("allowed", fg="green") + f"  {describe_remaining(decision, locale)}")
    else:
        assert decision.reason is not None
        click.echo(click.style(f"denied ({decision.reason.value})", fg="red") + f"  {describe_denial(decision, locale)}")
    if decision.locks_at is not None:
        click.echo(f"  locks at: {decision.locks_at.isoformat()}")
    if decision.remaining is not None:
        click.echo(f"  remaining: {format_duration(decision.remaining)}")
    if decision.elapsed_over_by is not None:
        click.echo(f"  elapsed over by: {format_duration(decision.elapsed_over_by)}")
