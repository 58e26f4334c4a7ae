import logging
from functools import partial
from typing import Literal, Optional

from pydantic import Field

from ..automation import selectors as sel
from ..automation.polling import Deadline
from ..automation.types import ToolResult
from .navigation import ensure_setup_page
from .registry import NoArgs, ToolArgs, tool

logger = logging.getLogger(__name__)

setup_tool = partial(tool, group="setup")

ObjectManagerSection = Literal["Fields", "PageLayouts", "ValidationRules", "Triggers", "LightningPages", "Buttons"]


class SetupQuickFindArgs(ToolArgs):
    search_term: str = Field(description="Search term for Setup Quick Find")


class SetupPermissionSetArgs(ToolArgs):
    perm_set_name: str = Field(description="Name of the permission set to navigate to")


class SetupProfileArgs(ToolArgs):
    profile_name: str = Field(description="Name of the profile to navigate to")


class SetupObjectManagerArgs(ToolArgs):
    object_api_name: str = Field(description="API name of the object")
    section: Optional[ObjectManagerSection] = Field(default=None, description="Object Manager section to navigate to")


class SetupFlowArgs(ToolArgs):
    flow_api_name: Optional[str] = Field(default=None, description="API name of the flow to open in Flow Builder")


async def open_setup_entry(toolbox, list_path: str, name: str, action: str) -> str:
    """Open a setup list page, filter it with Quick Find and follow the entry named ``name``."""
    session = toolbox.session
    await session.navigate(list_path)
    page = await toolbox.page()
    patterns = toolbox.patterns(page)

    await patterns.setup_quick_find(name)
    link = await patterns.resolve(sel.link_by_text(name), action, name)
    await link.click()
    await patterns.waits.wait_for_setup_page()
    return await session.current_url()


@setup_tool(
    "sf_setup_quick_find",
    SetupQuickFindArgs,
    description="Use Setup Quick Find to search for setup items. Navigates to Setup first if not already there.",
    action="use Quick Find",
)
async def setup_quick_find(toolbox, args: SetupQuickFindArgs) -> ToolResult:
    page = await toolbox.page()
    await ensure_setup_page(toolbox, page)
    await toolbox.patterns(page).setup_quick_find(args.search_term)
    return ToolResult.ok(
        "Quick Find search completed. Click on a result to navigate.",
        searchTerm=args.search_term,
    )


@setup_tool(
    "sf_setup_create_user",
    description="Navigate to the Create User form in Setup.",
    action="navigate to create user",
)
async def setup_create_user(toolbox, args: NoArgs) -> ToolResult:
    session = toolbox.session
    await session.navigate(session.url_builder.users())
    page = await toolbox.page()
    patterns = toolbox.patterns(page)
    new_user = await patterns.resolve(sel.NEW_USER_BUTTON, "create user", "New User")
    await new_user.click()
    await patterns.waits.wait_for_form_ready()
    return ToolResult.ok("New user form is ready", currentUrl=await session.current_url())


@setup_tool(
    "sf_setup_permission_set",
    SetupPermissionSetArgs,
    description="Navigate to a specific permission set in Setup.",
    action="navigate to permission set",
)
async def setup_permission_set(toolbox, args: SetupPermissionSetArgs) -> ToolResult:
    url = await open_setup_entry(
        toolbox, toolbox.session.url_builder.permission_sets(), args.perm_set_name, "open permission set"
    )
    return ToolResult.ok(permissionSet=args.perm_set_name, currentUrl=url)


@setup_tool(
    "sf_setup_profile",
    SetupProfileArgs,
    description="Navigate to a specific profile in Setup.",
    action="navigate to profile",
)
async def setup_profile(toolbox, args: SetupProfileArgs) -> ToolResult:
    url = await open_setup_entry(toolbox, toolbox.session.url_builder.profiles(), args.profile_name, "open profile")
    return ToolResult.ok(profile=args.profile_name, currentUrl=url)


@setup_tool(
    "sf_setup_object_manager",
    SetupObjectManagerArgs,
    description=(
        "Navigate to Object Manager for a specific object. Optionally go to a specific section "
        "like Fields, PageLayouts, ValidationRules, Triggers, etc."
    ),
    action="navigate to Object Manager",
)
async def setup_object_manager(toolbox, args: SetupObjectManagerArgs) -> ToolResult:
    session = toolbox.session
    await session.navigate(session.url_builder.object_manager(args.object_api_name, args.section))
    return ToolResult.ok(
        object=args.object_api_name,
        section=args.section or "Details",
        currentUrl=await session.current_url(),
    )


@setup_tool(
    "sf_setup_flow",
    SetupFlowArgs,
    description="Navigate to Flow Builder. Optionally open a specific flow by its API name.",
    action="navigate to Flow",
)
async def setup_flow(toolbox, args: SetupFlowArgs) -> ToolResult:
    session = toolbox.session
    path = session.url_builder.flow_builder(args.flow_api_name)
    if not args.flow_api_name:
        await session.navigate(path)
        return ToolResult.ok(flow="Flow list", currentUrl=await session.current_url())

    # Flow Builder is a standalone app without the Lightning shell
    await session.navigate(path, smart_wait=False)
    page = await toolbox.page()
    waits = toolbox.waits(page)
    deadline = Deadline(toolbox.config.navigation_timeout_ms)
    if not await waits.poll_visible(sel.FLOW_BUILDER_CANVAS, deadline):
        logger.warning(f"Flow Builder canvas for {args.flow_api_name} not detected")
    return ToolResult.ok(flow=args.flow_api_name, currentUrl=await session.current_url())
