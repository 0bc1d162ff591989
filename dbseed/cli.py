#!/usr/bin/env python3
"""
dbseed – render the account/schema seeding script for a MySQL node.

• ``dbseed render``     write the SQL script (stdout or ``-o``)
• ``dbseed validate``   check the properties document only
• ``dbseed plan``       show what would be provisioned, in render order

The properties document defaults to *dbseed.yml*; ``-f -`` reads it from
stdin, which is how the boot scripts pipe the rendered job properties in.
"""
from __future__ import annotations

import pathlib
import sys
import typing as t

import click

from dbseed import __version__
from dbseed.assemble import build_plan
from dbseed.config import ConfigError, load
from dbseed.constants import DEFAULT_PROPERTIES_FILE, KNOWN_LINKS, HOSTS
from dbseed.emit import emit
from dbseed.generate import generate, write_script
from dbseed.plan import ProvisioningPlan
from dbseed.utils import split_sql
from dbseed.validate import validate


def _fail(exc: ConfigError) -> t.NoReturn:
    click.echo(f"Config error: {exc}", err=True)
    sys.exit(1)


def _load_props(ctx) -> dict[str, t.Any]:
    try:
        return load(ctx.obj["props_path"])
    except ConfigError as exc:
        _fail(exc)


def _parse_links(_ctx, _param, values) -> dict[str, dict[str, str]]:
    links: dict[str, dict[str, str]] = {}
    for raw in values:
        name, sep, password = raw.partition("=")
        if not sep:
            raise click.BadParameter(f"expected NAME=PASSWORD, got {raw!r}")
        if name not in KNOWN_LINKS:
            raise click.BadParameter(
                f"unknown link {name!r}; choose from {', '.join(KNOWN_LINKS)}"
            )
        links[name] = {"db_password": password}
    return links


def _link_option(fn):
    return click.option(
        "-l", "--link", "links",
        multiple=True,
        callback=_parse_links,
        help="link credentials as NAME=PASSWORD (repeatable)",
    )(fn)


def _validated_plan(ctx, links=None) -> ProvisioningPlan:
    props = _load_props(ctx)
    try:
        return validate(build_plan(props, links or None))
    except ConfigError as exc:
        _fail(exc)


@click.group()
@click.option(
    "-f", "--file", "props_path",
    default=DEFAULT_PROPERTIES_FILE,
    show_default=True,
    help="properties document (YAML, JSON or TOML); '-' reads stdin",
)
@click.pass_context
def main(ctx, props_path):
    ctx.obj = {"props_path": props_path}


@main.command()
def version():
    click.echo(__version__)


@main.command()
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="write the script here")
@_link_option
@click.pass_context
def render(ctx, output, links):
    props = _load_props(ctx)
    try:
        if output:
            path = write_script(props, pathlib.Path(output), links=links or None)
            click.echo(f"✅  Wrote {path}", err=True)
        else:
            click.echo(generate(props, links or None), nl=False)
    except ConfigError as exc:
        _fail(exc)


@main.command("validate")
@_link_option
@click.pass_context
def validate_cmd(ctx, links):
    plan = _validated_plan(ctx, links)
    users = sum(1 for _ in plan.declared_users())
    click.echo(f"✅  OK – {users} seeded account(s), {len(plan.databases)} database(s)")


@main.command()
@_link_option
@click.pass_context
def plan(ctx, links):
    p = _validated_plan(ctx, links)
    click.echo(f"admin         {p.admin.username}@{','.join(HOSTS[h] for h in p.admin.hosts)}")
    if p.read_only_admin is not None:
        ro = p.read_only_admin
        click.echo(f"read-only     {ro.username}@{','.join(ro.hosts)}")
    if p.backup is not None:
        click.echo(f"backup        {p.backup.username}@{p.backup.host}")
    for user in p.link_accounts:
        click.echo(f"link          {user.username}@{HOSTS[user.host]}  ({user.role})")
    for db in p.databases:
        click.echo(f"database      {db.name}")
        if db.owner is not None:
            click.echo(f"  owner       {db.owner.username}@{HOSTS[db.owner.host]}  ({db.owner.role})")
    for user in p.users:
        scope = f" on {user.schema}" if user.schema else ""
        click.echo(f"user          {user.username}@{HOSTS[user.host]}  ({user.role}{scope})")
    click.echo(f"-- {len(split_sql(emit(p)))} statements")


if __name__ == "__main__":
    main()
