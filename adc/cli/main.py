"""adc command-line interface.

Commands:
    ping -- check the admin API is reachable with the configured key.
    dump -- write the remote configuration as YAML.
    diff -- show the changes a sync would make.
    sync -- show and apply the changes, stopping at the first failure.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click
import structlog

from adc import __version__
from adc.changes import ApplyError, Configuration, apply, compute_changes, describe
from adc.cluster import ApisixCluster, Cluster, ClusterError
from adc.config import load_config
from adc.loader import ConfigFileError, dump_configuration, load_configuration
from adc.models.config import ADCConfig
from adc.models.events import ChangeEvent
from adc.observability.logging import setup_logging

_log = structlog.get_logger(component="cli")


@contextmanager
def _cluster(ctx: click.Context) -> Iterator[Cluster]:
    """Yield the cluster from ``ctx.obj`` or open an ApisixCluster for the run."""
    injected = ctx.obj.get("cluster")
    if injected is not None:
        yield injected
        return
    config: ADCConfig = ctx.obj["config"]
    with ApisixCluster(
        server=config.server.url,
        token=config.server.token,
        timeout=config.server.timeout_seconds,
    ) as cluster:
        yield cluster


@contextmanager
def _user_errors() -> Iterator[None]:
    """Turn expected failures into click errors (exit code 1)."""
    try:
        yield
    except ClusterError as exc:
        raise click.ClickException(f"admin API error: {exc}") from exc
    except ConfigFileError as exc:
        raise click.ClickException(str(exc)) from exc
    except ApplyError as exc:
        raise click.ClickException(f"{exc}: {exc.__cause__}") from exc
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc


def _remote_configuration(cluster: Cluster) -> Configuration:
    return Configuration(services=cluster.services.list(), routes=cluster.routes.list())


def _plan(cluster: Cluster, file: Path) -> list[ChangeEvent]:
    local = load_configuration(file)
    remote = _remote_configuration(cluster)
    events = compute_changes(local, remote)
    _log.info("changes_computed", file=str(file), count=len(events))
    return events


@click.group()
@click.version_option(__version__, prog_name="adc")
@click.option("--server", help="APISIX admin API URL.")
@click.option("--token", help="APISIX admin API key.")
@click.option("--timeout", type=click.IntRange(1, 120), help="Request timeout in seconds.")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    help="Log level for diagnostics written to stderr.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    server: str | None,
    token: str | None,
    timeout: int | None,
    log_level: str | None,
) -> None:
    """Declarative configuration for the APISIX gateway."""
    obj: dict[str, Any] = ctx.ensure_object(dict)
    try:
        config = load_config()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    if server:
        config.server.url = server.rstrip("/")
    if token:
        config.server.token = token
    if timeout is not None:
        config.server.timeout_seconds = timeout
    if log_level:
        config.log.level = log_level.lower()
    obj["config"] = config
    setup_logging(config.log.level)


@cli.command()
@click.pass_context
def ping(ctx: click.Context) -> None:
    """Check connectivity to the admin API."""
    with _user_errors(), _cluster(ctx) as cluster:
        cluster.ping()
    click.echo(f"connected to {ctx.obj['config'].server.url}")


@cli.command()
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Write to a file.")
@click.pass_context
def dump(ctx: click.Context, output: Path | None) -> None:
    """Dump the remote configuration as YAML."""
    with _user_errors(), _cluster(ctx) as cluster:
        text = dump_configuration(_remote_configuration(cluster))
    if output is None:
        click.echo(text, nl=False)
        return
    output.write_text(text, encoding="utf-8")
    click.echo(f"configuration written to {output}")


@cli.command()
@click.option("-f", "--file", "file", required=True, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def diff(ctx: click.Context, file: Path) -> None:
    """Show the differences between FILE and the remote gateway."""
    context_lines = ctx.obj["config"].diff.context_lines
    with _user_errors(), _cluster(ctx) as cluster:
        events = _plan(cluster, file)
        for event in events:
            click.echo(describe(event, context_lines))
    click.echo(f"{len(events)} change(s)" if events else "no changes")


@cli.command()
@click.option("-f", "--file", "file", required=True, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--dry-run", is_flag=True, help="Show the changes without applying them.")
@click.pass_context
def sync(ctx: click.Context, file: Path, dry_run: bool) -> None:
    """Make the remote gateway match FILE."""
    context_lines = ctx.obj["config"].diff.context_lines
    applied = 0
    with _user_errors(), _cluster(ctx) as cluster:
        events = _plan(cluster, file)
        for event in events:
            click.echo(describe(event, context_lines))
            if dry_run:
                continue
            apply(event, cluster)
            applied += 1
    if dry_run:
        click.echo(f"dry run: {len(events)} change(s) not applied")
    else:
        click.echo(f"applied {applied} change(s)" if applied else "no changes")
