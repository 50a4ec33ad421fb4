"""RuleForge command-line interface.

``serve`` and ``init-db`` run the service; ``parse``, ``evaluate`` and
``combine`` drive the rule engine directly without touching the database.
"""

import json
from typing import NoReturn

import click

from ruleforge import __version__
from ruleforge.core.config import get_settings
from ruleforge.core.logging import configure_logging, get_logger
from ruleforge.core.rules import ParseError, RuleError, combine_rules, evaluate_rule, parse_rule

APP_IMPORT_PATH = "ruleforge.infrastructure.api.app:app"


@click.group()
@click.version_option(version=__version__, prog_name="RuleForge")
def cli() -> None:
    """RuleForge - define, combine and evaluate business rules.

    Settings are read from RULEFORGE_* environment variables and .env files.
    """


@cli.command()
@click.option("--host", default=None, help="Bind address (default: RULEFORGE_HOST)")
@click.option("--port", type=int, default=None, help="Bind port (default: RULEFORGE_PORT)")
@click.option("--workers", type=int, default=None, help="Worker processes (default: RULEFORGE_WORKERS)")
@click.option("--reload", is_flag=True, help="Restart on code changes (single worker)")
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    workers = workers or settings.workers

    if workers > 1 and settings.database_url.startswith("sqlite"):
        click.echo(
            "Error: SQLite does not support multiple worker processes. "
            "Run a single worker or point RULEFORGE_DATABASE_URL at PostgreSQL.",
            err=True,
        )
        raise SystemExit(1)

    configure_logging(settings)
    options = {
        "host": host or settings.host,
        "port": port or settings.port,
        "workers": 1 if reload else workers,
        "reload": reload,
    }
    get_logger(__name__).info("Starting server", environment=settings.environment, **options)

    uvicorn.run(
        APP_IMPORT_PATH,
        log_level=settings.log_level.lower(),
        access_log=True,
        **options,
    )


@cli.command("init-db")
@click.option("--force", is_flag=True, help="Do not ask for confirmation")
def init_db(force: bool) -> None:
    """Create the database tables.

    Intended for development; deployed databases are managed with
    ``alembic upgrade head``.
    """
    import asyncio

    from ruleforge.infrastructure.persistence.database import (
        get_db_manager,
        init_database,
    )

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo("Error: refusing to create tables in production. Use migrations instead.", err=True)
        raise SystemExit(1)

    if not force:
        click.confirm("Create all database tables?", abort=True)

    async def run() -> None:
        db = get_db_manager()
        try:
            await init_database()
            if not settings.is_development:
                await db.create_tables()
        finally:
            await db.disconnect()

    asyncio.run(run())
    click.echo("Database initialized.")


def _fail(exc: RuleError) -> NoReturn:
    message = f"Error: {exc}"
    if isinstance(exc, ParseError) and exc.fragment:
        message += f" (near {exc.fragment!r})"
    click.echo(message, err=True)
    raise SystemExit(1)


def _echo_tree(tree, pretty: bool) -> None:
    click.echo(json.dumps(tree.to_dict(), indent=2 if pretty else None))


@cli.command()
@click.argument("rule_string")
@click.option("--pretty/--compact", default=True, help="Indent the JSON output")
def parse(rule_string: str, pretty: bool) -> None:
    """Print the tree of RULE_STRING as JSON."""
    try:
        tree = parse_rule(rule_string, max_depth=get_settings().max_rule_depth)
    except RuleError as exc:
        _fail(exc)
    _echo_tree(tree, pretty)


@cli.command()
@click.argument("rule_string")
@click.option(
    "--data",
    "data_json",
    required=True,
    help="Data record as a JSON object, e.g. '{\"age\": 35}'",
)
def evaluate(rule_string: str, data_json: str) -> None:
    """Evaluate RULE_STRING against a data record and print the result."""
    try:
        data = json.loads(data_json)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Invalid JSON: {exc}", param_hint="--data")
    if not isinstance(data, dict):
        raise click.BadParameter("Data must be a JSON object", param_hint="--data")

    try:
        tree = parse_rule(rule_string, max_depth=get_settings().max_rule_depth)
        result = evaluate_rule(tree, data)
    except RuleError as exc:
        _fail(exc)
    click.echo(json.dumps(result))


@cli.command()
@click.argument("rule_strings", nargs=-1)
@click.option("--pretty/--compact", default=True, help="Indent the JSON output")
def combine(rule_strings: tuple[str, ...], pretty: bool) -> None:
    """Combine RULE_STRINGS into one tree and print it as JSON."""
    try:
        tree = combine_rules(list(rule_strings), max_depth=get_settings().max_rule_depth)
    except RuleError as exc:
        _fail(exc)
    _echo_tree(tree, pretty)


def main() -> None:
    """Entry point of the ``ruleforge`` console script and ``python -m ruleforge``."""
    cli()
