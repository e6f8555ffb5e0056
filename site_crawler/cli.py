#!/usr/bin/env python3
"""
Command line entry point of site_crawler.

Commands:
  crawl     Recursively crawl the seed URLs until interrupted (Ctrl+C)
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config file (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only if omitted)
  --log-format FORMAT Logging format string

crawl options:
  --urls URLS               Comma separated seed URL(s)
  --crawlers, -c N          Number of concurrent workers
  --timeout SEC             HTTP request timeout
  --whitelisted-hosts HOSTS Comma separated hosts that may be crawled
  --max-depth N             Maximum link depth
  --proxy URL               HTTP proxy for all requests
  --mock-db                 Send results to a no-op store

Also:
  --version, -v       Show the site_crawler version

Example:
  site-crawler crawl --urls https://example.com -c 8 --max-depth 3 --mock-db
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from site_crawler import __version__
from site_crawler.config import load_config, merge_overrides
from site_crawler.engine import start_crawl
from site_crawler.exceptions import StoreConnectionError
from site_crawler.logger import DEFAULT_FORMAT, configure
from site_crawler.utils import redact_password

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg="red", err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "--version", "-v", message="site_crawler, version %(version)s")
@click.option(
    "--config", "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML or JSON config file.",
)
@click.option(
    "--log-level", "log_level",
    default="INFO", show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Logging level",
)
@click.option(
    "--log-file", "log_file",
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help="Log file (stdout only if omitted)",
)
@click.option(
    "--log-format", "log_format",
    default=DEFAULT_FORMAT,
    show_default=True,
    help="Logging format string",
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Recursively crawl websites and write their contents to a database."""
    configure(level=log_level, log_file=log_file, log_format=log_format)
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, TypeError) as e:
        print_error(f"Could not load configuration: {e}")
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


@cli.command("crawl", context_settings=CONTEXT_SETTINGS)
@click.option("--urls", "--url", "urls", default=None, help="Comma separated URL(s) to crawl recursively")
@click.option("--crawlers", "-c", "crawlers", type=int, default=None, help="Number of concurrent crawlers")
@click.option("--timeout", "timeout", type=float, default=None, help="HTTP timeout in seconds")
@click.option("--whitelisted-hosts", "whitelisted_hosts", default=None, help="Comma separated hosts allowed to be crawled")
@click.option("--max-depth", "max_depth", type=int, default=None, help="Maximum crawl depth")
@click.option("--proxy", "proxy", default=None, help="Proxy URL used for crawling")
@click.option("--mock-db", "mock_db", is_flag=True, help="Send results to a mock database")
@click.pass_context
def crawl(ctx, urls, crawlers, timeout, whitelisted_hosts, max_depth, proxy, mock_db):
    """Crawl until interrupted."""
    try:
        cfg = merge_overrides(
            ctx.obj["config"],
            seed_urls=urls,
            crawlers=crawlers,
            timeout=timeout,
            whitelisted_hosts=whitelisted_hosts,
            max_depth=max_depth,
            proxy=proxy,
            mock_db=True if mock_db else None,
        )
    except ValidationError as e:
        print_error(f"Invalid configuration: {e}")
    if not cfg.seed_urls:
        print_error("No seed URL given: use --urls or set seed_urls in the config")

    try:
        scraped = asyncio.run(start_crawl(cfg))
    except StoreConnectionError as e:
        print_error(f"Could not connect to the database: {e}")
    click.echo(f"Scraped {scraped} sites")


@cli.command("config", context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj["config"]
    data = cfg.model_dump(mode="json")
    if data.get("mongodb_uri"):
        data["mongodb_uri"] = redact_password(data["mongodb_uri"])
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()
