"""Flask CLI commands seeding the feature catalog."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from pos_backoffice.core.extensions import db
from pos_backoffice.models import Feature
from pos_backoffice.seeds import features as feature_seed
from pos_backoffice.services.roles.feature_tree import build_feature_tree

LOGGER = logging.getLogger(__name__)


def _echo_summary(summary: dict[str, dict[str, int]]) -> None:
    click.echo("Seed summary:")
    for table, counters in sorted(summary.items()):
        click.echo(
            f"  {table}  created={counters.get('created', 0):>2}"
            f"  existing={counters.get('existing', 0):>2}"
        )


def _refuse_in_production() -> None:
    if str(current_app.config.get("APP_ENV", "")).lower() == "production":
        raise click.UsageError("'flask seed fresh' is disabled when APP_ENV=production.")


def _seed(verbose: bool) -> None:
    try:
        summary = feature_seed.run_all(db, verbose=verbose)
    except Exception as exc:  # pragma: no cover - CLI safeguard
        raise click.ClickException(f"Seeding failed: {exc}") from exc
    _echo_summary(summary)


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Log every seeded row.")
@click.pass_context
def seed_cli(ctx: click.Context, verbose: bool) -> None:
    """Feature catalog seeding commands."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger(feature_seed.__name__).setLevel(level)


@seed_cli.command("run")
@click.pass_context
@with_appcontext
def run_command(ctx: click.Context) -> None:
    """Insert or update the feature catalog (safe to re-run)."""
    _seed(bool(ctx.obj.get("verbose", False)))


@seed_cli.command("fresh")
@click.option("--yes", is_flag=True, help="Skip the destructive confirmation prompt.")
@click.pass_context
@with_appcontext
def fresh_command(ctx: click.Context, yes: bool) -> None:
    """Drop all tables, recreate the schema and seed the feature catalog."""
    _refuse_in_production()
    if not yes:
        click.confirm("This will DROP every table and recreate it. Continue?", abort=True)
    LOGGER.info("recreating database schema")
    db.session.remove()
    db.drop_all()
    db.create_all()
    _seed(bool(ctx.obj.get("verbose", False)))


@seed_cli.command("show")
@with_appcontext
def show_command() -> None:
    """Print the seeded feature tree with each leaf's actions."""
    features = db.session.query(Feature).order_by(Feature.sort_order, Feature.name).all()

    def echo(nodes, depth: int = 0) -> None:
        for node in nodes:
            actions = f"  [{', '.join(node.actions)}]" if node.actions else ""
            click.echo(f"{'  ' * depth}{node.slug}{actions}")
            echo(node.children, depth + 1)

    echo(build_feature_tree(features))
