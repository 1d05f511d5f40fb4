"""Command-line entry point: ``amq-topics <command> [options]``.

Commands live in an explicit table (``COMMANDS``); each entry carries its
option schema, its handler and an availability predicate that the
dispatcher checks before invoking the handler.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

import click

from amq_admin.core.config import Settings, get_settings
from amq_admin.core.exceptions import AdminError, CommandUnavailableError, ConfirmationDeclined
from amq_admin.domain.services.topic_service import TopicService
from amq_admin.infra.activemq.session import BrokerSession, broker_connected
from amq_admin.services.console import Console

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    name: str
    help: str
    handler: Callable[..., str]
    params: Tuple[click.Parameter, ...] = ()
    available: Callable[[BrokerSession], bool] = broker_connected


def _name_option() -> click.Option:
    return click.Option(["--name"], required=True, help="The name of the topic")


def _force_option() -> click.Option:
    return click.Option(["--force"], is_flag=True, default=False, help="No prompt")


def _filter_option() -> click.Option:
    return click.Option(["--filter"], default=None, help="Only topics whose name contains this text")


def _threshold_option(field: str) -> click.Option:
    return click.Option(
        [f"--{field}"], default=None, help=f"Only topics that meet the {field} filter, e.g. '>100'"
    )


COMMANDS: Dict[str, Command] = {
    cmd.name: cmd
    for cmd in (
        Command(
            "add-topic",
            "Adds a topic",
            lambda svc, name: svc.add_topic(name),
            (_name_option(),),
        ),
        Command(
            "remove-topic",
            "Removes a topic",
            lambda svc, name, force: svc.remove_topic(name, force=force),
            (_name_option(), _force_option()),
        ),
        Command(
            "remove-all-topics",
            "Removes all topics",
            lambda svc, force, filter, dry_run, enqueued, dequeued: svc.remove_all_topics(
                force=force, filter=filter, dry_run=dry_run, enqueued=enqueued, dequeued=dequeued
            ),
            (
                _force_option(),
                _filter_option(),
                click.Option(["--dry-run"], is_flag=True, default=False, help="Dry run"),
                _threshold_option("enqueued"),
                _threshold_option("dequeued"),
            ),
        ),
        Command(
            "list-topics",
            "Displays topics",
            lambda svc, filter, enqueued, dequeued: svc.list_topics(
                filter=filter, enqueued=enqueued, dequeued=dequeued
            ),
            (_filter_option(), _threshold_option("enqueued"), _threshold_option("dequeued")),
        ),
    )
}


def dispatch(session: BrokerSession, console: Console, command_name: str, /, **options) -> str:
    """Run *command_name* against *session* and return its textual result."""
    command = COMMANDS[command_name]
    if not command.available(session):
        raise CommandUnavailableError(f"Command '{command_name}' is not available: no broker connected")
    service = TopicService(
        session.broker,
        console,
        order_field=session.settings.topics_order_field,
        max_workers=session.settings.max_workers,
    )
    return command.handler(service, **options)


def _settings_from(ctx: click.Context) -> Settings:
    overrides = {k: v for k, v in (ctx.obj or {}).items() if v is not None}
    if not overrides:
        return get_settings()
    return get_settings().model_copy(update=overrides)


def _make_click_command(command: Command) -> click.Command:
    @click.pass_context
    def _callback(ctx: click.Context, **options) -> None:
        settings = _settings_from(ctx)
        console = Console(table_format=settings.table_format)
        try:
            with BrokerSession(settings) as session:
                click.echo(dispatch(session, console, command.name, **options))
        except ConfirmationDeclined as exc:
            log.info("%s: %s", command.name, exc)
        except AdminError as exc:
            click.echo(f"Error: {exc.message}", err=True)
            ctx.exit(1)

    return click.Command(command.name, callback=_callback, params=list(command.params), help=command.help)


@click.group()
@click.option("--url", "jolokia_url", default=None, help="Jolokia endpoint of the broker")
@click.option("--broker-name", default=None, help="brokerName key of the broker bean")
@click.option("--user", "username", default=None)
@click.option("--password", default=None)
@click.option(
    "--order-field",
    "topics_order_field",
    type=click.Choice(["Enqueued", "Dequeued"]),
    default=None,
    help="Sort list-topics by this counter instead of the name",
)
@click.option("--log-level", default=None, help="Logging level, e.g. INFO")
@click.pass_context
def main(ctx: click.Context, **overrides: Optional[str]) -> None:
    """Manage topics on an ActiveMQ broker."""
    ctx.obj = overrides
    level = overrides.get("log_level") or get_settings().log_level
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )


for _command in COMMANDS.values():
    main.add_command(_make_click_command(_command))


if __name__ == "__main__":
    main()
