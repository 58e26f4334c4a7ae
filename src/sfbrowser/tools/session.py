from typing import Literal, Optional

from pydantic import Field

from ..automation.session import SessionConfig
from ..automation.types import ToolResult
from .registry import NoArgs, ToolArgs, tool


class SessionStartArgs(ToolArgs):
    org_alias: str = Field(description="SF CLI org alias or username")
    browser: Optional[Literal["chromium", "firefox", "webkit"]] = Field(
        default=None, description="Browser engine to use (default: chromium)"
    )
    headless: Optional[bool] = Field(default=None, description="Run in headless mode (default: false)")
    viewport_width: Optional[int] = Field(default=None, gt=0, description="Viewport width in pixels (default: 1920)")
    viewport_height: Optional[int] = Field(default=None, gt=0, description="Viewport height in pixels (default: 1080)")


@tool(
    "sf_session_start",
    SessionStartArgs,
    description=(
        "Launch an authenticated browser session for a Salesforce org using SF CLI credentials. "
        "This must be called before using any other SF tools."
    ),
    group="session",
    action="start session",
)
async def session_start(toolbox, args: SessionStartArgs) -> ToolResult:
    viewport = None
    if args.viewport_width and args.viewport_height:
        viewport = (args.viewport_width, args.viewport_height)

    session = toolbox.session
    await session.start_session(
        SessionConfig(
            org_alias=args.org_alias,
            browser=args.browser,
            headless=args.headless,
            viewport=viewport,
        )
    )
    org_info = session.org_info
    return ToolResult.ok(
        f"Session started for org: {org_info.org_name or args.org_alias}",
        instanceUrl=session.instance_url,
        username=org_info.username,
        orgId=org_info.id,
    )


@tool(
    "sf_session_status",
    description="Get the current browser session status and org information.",
    group="session",
    action="get session status",
)
async def session_status(toolbox, args: NoArgs) -> ToolResult:
    status = toolbox.session.status()
    org_info = status["org_info"]
    last_activity = status["last_activity"]
    return ToolResult.ok(
        status=status["status"],
        orgAlias=status["org_alias"],
        instanceUrl=status["instance_url"],
        username=org_info.username if org_info else None,
        orgId=org_info.id if org_info else None,
        orgName=org_info.org_name if org_info else None,
        lastActivity=last_activity.isoformat() if last_activity else None,
    )


@tool(
    "sf_session_refresh",
    description="Refresh the access token if the session has expired or is about to expire.",
    group="session",
    action="refresh session",
)
async def session_refresh(toolbox, args: NoArgs) -> ToolResult:
    reauthenticated = await toolbox.session.refresh_token()
    return ToolResult.ok("Session token refreshed successfully", reauthenticated=reauthenticated)


@tool(
    "sf_session_close",
    description="Close the browser session and clean up resources.",
    group="session",
    action="close session",
)
async def session_close(toolbox, args: NoArgs) -> ToolResult:
    await toolbox.session.close_session()
    return ToolResult.ok("Session closed successfully")


@tool(
    "sf_list_orgs",
    description="List all Salesforce orgs authenticated with SF CLI.",
    group="session",
    action="list orgs",
)
async def list_orgs(toolbox, args: NoArgs) -> ToolResult:
    orgs = await toolbox.session.list_orgs()
    return ToolResult.ok(orgs=[org.to_dict() for org in orgs], count=len(orgs))
