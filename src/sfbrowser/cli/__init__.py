"""
sfbrowser CLI - inspect orgs and operations, and check that a session can start.
"""
from typing import Any, Dict, List, Optional
import asyncio
import logging

import click
from rich.console import Console
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn

from ..automation.playwright_engine import PlaywrightEngine
from ..automation.session import SessionConfig, SessionManager
from ..core.config import ServerConfig
from ..core.errors import SalesforceError
from ..core.models import OrgSummary
from ..core.org_manager import OrgManager
from ..integrations import get_source
from ..tools.registry import ToolSpec

logger = logging.getLogger(__name__)

# stdout belongs to protocol frames when serving
console = Console(stderr=True)


class SFBrowserCLI:
    """Main CLI application for sfbrowser."""

    def __init__(self, config: Optional[ServerConfig] = None, debug: bool = False):
        self.config = config or ServerConfig.from_env()
        self.debug = debug

        if debug:
            logging.getLogger().setLevel(logging.DEBUG)
            logger.debug("Debug mode enabled")

    def _progress_spinner(self):
        """Create a progress spinner context manager."""
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        )

    def org_manager(self) -> OrgManager:
        source = get_source("sf", sf_path=self.config.sf_cli_path)
        return OrgManager(source, ttl_s=self.config.credential_ttl_s)

    def list_orgs(self) -> List[OrgSummary]:
        """List orgs known to the sf CLI."""
        try:
            with self._progress_spinner() as progress:
                progress.add_task("Reading authenticated orgs...", total=None)
                return asyncio.run(self.org_manager().list_orgs())
        except SalesforceError as e:
            raise click.ClickException(e.message)
        except Exception as e:
            if self.debug:
                logger.exception("Error listing orgs")
            raise click.ClickException(f"Failed to list orgs: {e}")

    def check(self, org_alias: str, browser: Optional[str] = None, headless: bool = True) -> Dict[str, Any]:
        """Start a session against ``org_alias``, report its status and close it again."""
        async def run() -> Dict[str, Any]:
            session = SessionManager(self.org_manager(), PlaywrightEngine(), self.config)
            try:
                await session.start_session(
                    SessionConfig(org_alias=org_alias, browser=browser, headless=headless)
                )
                status = session.status()
                status["current_url"] = await session.current_url()
                return status
            finally:
                await session.close_session()

        try:
            with self._progress_spinner() as progress:
                progress.add_task(f"Starting session for {org_alias}...", total=None)
                return asyncio.run(run())
        except SalesforceError as e:
            if self.debug:
                logger.exception(f"Session check failed for {org_alias}")
            message = e.message
            if e.suggestion:
                message = f"{message}\n{e.suggestion}"
            raise click.ClickException(message)


def print_org_table(orgs: List[OrgSummary]) -> None:
    """Print a table of authenticated orgs."""
    if not orgs:
        console.print("[yellow]No authenticated orgs found.[/]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Alias")
    table.add_column("Username")
    table.add_column("Org ID", style="dim")
    table.add_column("Active", justify="center")

    for org in orgs:
        table.add_row(
            org.alias or "",
            org.username,
            org.org_id or "",
            "[green]✓[/]" if org.is_active else "",
        )

    console.print(table)


def print_tool_table(specs: List[ToolSpec]) -> None:
    """Print the registered operations grouped by their group name."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Group", style="dim")
    table.add_column("Operation")
    table.add_column("Arguments")
    table.add_column("Description")

    for spec in specs:
        fields = spec.args_model.model_fields
        args = ", ".join(
            f"{field.alias or name}{'' if field.is_required() else '?'}"
            for name, field in fields.items()
        )
        table.add_row(spec.group, spec.name, args, spec.description)

    console.print(table)
