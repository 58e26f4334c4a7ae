from functools import partial
from typing import Optional

from pydantic import Field

from ..automation.types import ToolResult
from ..automation.urls import setup_section
from ..core.errors import ErrorCode
from .registry import NoArgs, ToolArgs, tool

navigation_tool = partial(tool, group="navigation", timeout_code=ErrorCode.NAVIGATION_TIMEOUT)


class NavigateSetupArgs(ToolArgs):
    section: Optional[str] = Field(
        default=None,
        description='Optional setup section to navigate to (e.g., "Users", "Profiles", "PermSets")',
    )


class NavigateSetupSearchArgs(ToolArgs):
    search_term: str = Field(description="The term to search for in Setup Quick Find")


class NavigateObjectArgs(ToolArgs):
    object_api_name: str = Field(description='API name of the object (e.g., "Account", "Contact", "Custom__c")')
    record_id: Optional[str] = Field(default=None, description="Record ID to view a specific record")
    list_view_name: Optional[str] = Field(default=None, description="List view API name or ID")


class NavigateAppArgs(ToolArgs):
    app_name: str = Field(description="Name of the app to open via App Launcher")


class NavigateUrlArgs(ToolArgs):
    path: str = Field(description='Relative path to navigate to (e.g., "/lightning/setup/Users/home")')


class NavigateRecordArgs(ToolArgs):
    record_id: str = Field(description="The 15 or 18 character Salesforce record ID")


class NavigateTabArgs(ToolArgs):
    tab_name: str = Field(description="Name of the tab to navigate to")


async def ensure_setup_page(toolbox, page) -> None:
    """Move to Setup home unless already somewhere in Setup."""
    session = toolbox.session
    if "/lightning/setup/" not in page.url:
        await session.navigate(session.url_builder.setup_home())


@navigation_tool(
    "sf_navigate_home",
    description="Navigate to the Salesforce home page.",
    action="navigate home",
)
async def navigate_home(toolbox, args: NoArgs) -> ToolResult:
    session = toolbox.session
    await session.navigate(session.url_builder.home())
    return ToolResult.ok(navigatedTo="Home", currentUrl=await session.current_url())


@navigation_tool(
    "sf_navigate_setup",
    NavigateSetupArgs,
    description=(
        'Navigate to Salesforce Setup. Optionally specify a section like "Users", '
        '"Profiles", "PermSets", "ObjectManager", etc.'
    ),
    action="navigate to Setup",
)
async def navigate_setup(toolbox, args: NavigateSetupArgs) -> ToolResult:
    session = toolbox.session
    urls = session.url_builder
    if args.section:
        path = urls.setup_page(setup_section(args.section))
    else:
        path = urls.setup_home()
    await session.navigate(path)
    return ToolResult.ok(
        navigatedTo=f"Setup - {args.section}" if args.section else "Setup Home",
        currentUrl=await session.current_url(),
    )


@navigation_tool(
    "sf_navigate_setup_search",
    NavigateSetupSearchArgs,
    description="Search in Setup using Quick Find and navigate to the result.",
    action="search Setup",
)
async def navigate_setup_search(toolbox, args: NavigateSetupSearchArgs) -> ToolResult:
    page = await toolbox.page()
    await ensure_setup_page(toolbox, page)
    await toolbox.patterns(page).setup_quick_find(args.search_term, click_result=True)
    return ToolResult.ok(searchTerm=args.search_term, currentUrl=await toolbox.session.current_url())


@navigation_tool(
    "sf_navigate_object",
    NavigateObjectArgs,
    description=(
        "Navigate to an object list view or a specific record. Use objectApiName for the "
        'object (e.g., "Account", "Contact", "MyObject__c").'
    ),
    action="navigate to object",
)
async def navigate_object(toolbox, args: NavigateObjectArgs) -> ToolResult:
    session = toolbox.session
    urls = session.url_builder
    if args.record_id:
        path = urls.record_view(args.record_id)
    else:
        path = urls.object_home(args.object_api_name, args.list_view_name)
    await session.navigate(path)
    return ToolResult.ok(
        object=args.object_api_name,
        recordId=args.record_id,
        listView=args.list_view_name,
        currentUrl=await session.current_url(),
    )


@navigation_tool(
    "sf_navigate_app",
    NavigateAppArgs,
    description="Open the App Launcher and navigate to a specific app by name.",
    action="open app",
)
async def navigate_app(toolbox, args: NavigateAppArgs) -> ToolResult:
    page = await toolbox.page()
    await toolbox.patterns(page).open_app(args.app_name)
    return ToolResult.ok(app=args.app_name, currentUrl=await toolbox.session.current_url())


@navigation_tool(
    "sf_navigate_url",
    NavigateUrlArgs,
    description="Navigate to a specific Salesforce URL path (relative path after the instance URL).",
    action="navigate to URL",
)
async def navigate_url(toolbox, args: NavigateUrlArgs) -> ToolResult:
    session = toolbox.session
    await session.navigate(args.path)
    return ToolResult.ok(path=args.path, currentUrl=await session.current_url())


@navigation_tool(
    "sf_navigate_record",
    NavigateRecordArgs,
    description="Navigate directly to a record by its ID.",
    action="navigate to record",
)
async def navigate_record(toolbox, args: NavigateRecordArgs) -> ToolResult:
    session = toolbox.session
    await session.navigate(session.url_builder.record_view(args.record_id))
    return ToolResult.ok(recordId=args.record_id, currentUrl=await session.current_url())


@navigation_tool(
    "sf_navigate_tab",
    NavigateTabArgs,
    description="Navigate to a specific tab in the current app.",
    action="navigate to tab",
)
async def navigate_tab(toolbox, args: NavigateTabArgs) -> ToolResult:
    page = await toolbox.page()
    await toolbox.patterns(page).click_tab(args.tab_name)
    return ToolResult.ok(tab=args.tab_name, currentUrl=await toolbox.session.current_url())
