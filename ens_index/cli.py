#!/usr/bin/env python3
"""CLI commands for the indexer and verifier pipelines."""

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import click

from ens_index.core.config import Settings, settings
from ens_index.core.logging import configure_logging, get_logger
from ens_index.indexer import run_indexer
from ens_index.models import VerifiedPointer
from ens_index.snapshot import SnapshotStore
from ens_index.verifier import run_verifier
from ens_index.verifier.report import status_counts

logger = get_logger().bind(module="cli")


def _settings_with(**overrides: Any) -> Settings:
    update = {key: value for key, value in overrides.items() if value is not None}
    return settings.model_copy(update=update)


def _run_pipeline(
    name: str, pipeline: Callable[[Settings], Awaitable[int]], config: Settings
) -> None:
    configure_logging(level=config.LOG_LEVEL, json_logs=config.JSON_LOGS)
    try:
        count = asyncio.run(pipeline(config))
    except KeyboardInterrupt:
        logger.warning("Interrupted", pipeline=name)
        sys.exit(130)
    except Exception as e:
        logger.exception("Pipeline failed", pipeline=name, error=str(e))
        click.echo(f"{name} failed: {e}", err=True)
        sys.exit(1)

    click.echo(f"{name} complete: {count} entries")


@click.group()
def cli():
    """ENS content-hash index commands."""
    pass


@cli.command()
@click.option("--index-path", type=click.Path(path_type=Path), help="Index snapshot")
@click.option("--registry-url", help="Registry GraphQL endpoint")
@click.option("--page-delay", type=float, help="Seconds between registry pages")
def crawl(index_path, registry_url, page_delay):
    """Crawl the registry into the index, resuming from the last snapshot."""
    config = _settings_with(
        INDEX_PATH=index_path,
        REGISTRY_URL=registry_url,
        REGISTRY_PAGE_DELAY=page_delay,
    )
    _run_pipeline("crawl", run_indexer, config)


@cli.command()
@click.option("--index-path", type=click.Path(path_type=Path), help="Index snapshot")
@click.option(
    "--output", "resolved_path", type=click.Path(path_type=Path), help="Results snapshot"
)
@click.option(
    "--gateway",
    "gateways",
    multiple=True,
    help="Gateway base URL, repeat to probe several in order",
)
@click.option("--timeout", type=float, help="Per-gateway timeout in seconds")
def verify(index_path, resolved_path, gateways, timeout):
    """Probe every indexed IPFS pointer across the configured gateways."""
    config = _settings_with(
        INDEX_PATH=index_path,
        RESOLVED_PATH=resolved_path,
        GATEWAYS=list(gateways) or None,
        GATEWAY_TIMEOUT=timeout,
    )
    _run_pipeline("verify", run_verifier, config)


@cli.command()
@click.option(
    "--input", "resolved_path", type=click.Path(path_type=Path), help="Results snapshot"
)
@click.option("--json", "as_json", is_flag=True, help="Print counts as JSON")
def report(resolved_path, as_json):
    """Show status counts from the verification results."""
    path = resolved_path or settings.RESOLVED_PATH
    entries = SnapshotStore(path, VerifiedPointer).load()
    if entries is None:
        click.echo(f"No verification results at {path}", err=True)
        sys.exit(1)

    counts = status_counts(entries)
    if as_json:
        click.echo(json.dumps(counts, indent=2))
        return

    click.echo("Verification Status:")
    for status, count in counts.items():
        click.echo(f"  {status}: {count}")


if __name__ == "__main__":
    cli()
