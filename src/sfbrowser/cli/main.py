"""
sfbrowser CLI - Command Line Interface for Salesforce browser control.
"""
import asyncio
import json
import logging
import sys
from typing import Optional

import click
from rich.logging import RichHandler

from . import SFBrowserCLI, console, print_org_table, print_tool_table
from ..core.config import BROWSERS
from ..native import host
from ..tools import list_tools

# Configure logging; stderr only, stdout carries protocol frames in `serve`
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(console=console, rich_tracebacks=True)]
)
logger = logging.getLogger("sfbrowser")


@click.group(invoke_without_command=True)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug output",
    show_default=True
)
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """sfbrowser - Drive Salesforce Lightning in a real browser."""
    ctx.obj = SFBrowserCLI(debug=debug)

    # If no command is provided, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON instead of a table")
@click.pass_obj
def orgs(cli: SFBrowserCLI, as_json: bool) -> None:
    """List orgs authenticated with the sf CLI."""
    summaries = cli.list_orgs()
    if as_json:
        click.echo(json.dumps([org.to_dict() for org in summaries], indent=2))
        return
    print_org_table(summaries)


@cli.command()
@click.option("--group", "-g", default=None, help="Only show operations in this group")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the JSON descriptions")
def tools(group: Optional[str], as_json: bool) -> None:
    """List the operations served by `sfbrowser serve`."""
    specs = list_tools(group)
    if not specs:
        raise click.ClickException(f"No operations in group: {group}")
    if as_json:
        click.echo(json.dumps([spec.describe() for spec in specs], indent=2))
        return
    print_tool_table(specs)


@cli.command()
@click.argument("org_alias")
@click.option("--browser", type=click.Choice(BROWSERS), default=None, help="Browser engine")
@click.option("--headless/--headed", default=True, help="Run the browser headless", show_default=True)
@click.pass_obj
def check(cli: SFBrowserCLI, org_alias: str, browser: Optional[str], headless: bool) -> None:
    """Start a session for ORG_ALIAS, print its status and close it."""
    status = cli.check(org_alias, browser=browser, headless=headless)
    org_info = status["org_info"]

    console.print(f"[green]✓[/] Connected to {status['instance_url']}")
    console.print(f"[bold]Org:[/bold] {org_info.org_name or status['org_alias']}")
    console.print(f"[bold]Username:[/bold] {org_info.username}")
    console.print(f"[bold]Org ID:[/bold] {org_info.id}")
    console.print(f"[dim]Landed on: {status['current_url']}")


@cli.command()
@click.pass_obj
def serve(cli: SFBrowserCLI) -> None:
    """Serve operations over stdin/stdout using length-prefixed JSON frames."""
    logger.info("Serving on stdio")
    try:
        asyncio.run(host.serve(cli.config))
    except Exception as e:
        logger.exception("Host stopped")
        console.print(f"[red]✗[/] Host stopped: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
