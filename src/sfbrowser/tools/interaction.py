from functools import partial
from typing import Literal, Optional

from pydantic import Field

from ..automation.patterns import FieldType
from ..automation.types import ToolResult
from ..core.errors import ErrorCode
from .registry import ToolArgs, tool

interaction_tool = partial(tool, group="interaction", timeout_code=ErrorCode.ELEMENT_NOT_FOUND)

# Short spinner wait after a click, best effort
POST_CLICK_SPINNER_MS = 5000
DEFAULT_SCROLL_PX = 300

SCROLL_VECTORS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

SCROLL_BY_SCRIPT = "(el, delta) => el.scrollBy(delta.dx, delta.dy)"


class ClickArgs(ToolArgs):
    selector: str = Field(description="CSS selector of the element to click")
    timeout: Optional[int] = Field(default=None, ge=0, description="Timeout in milliseconds (default: 10000)")
    force: bool = Field(default=False, description="Force click even if element is not visible")


class ClickButtonArgs(ToolArgs):
    label: str = Field(description="The visible label text of the button to click")
    timeout: Optional[int] = Field(default=None, ge=0, description="Timeout in milliseconds (default: 10000)")


class FillArgs(ToolArgs):
    selector: str = Field(description="CSS selector of the input element")
    value: str = Field(description="Value to enter")
    clear: bool = Field(default=True, description="Clear existing value before filling (default: true)")


class FillFieldArgs(ToolArgs):
    field_label: str = Field(description="The visible label of the Lightning field")
    value: str = Field(description="Value to enter")
    field_type: FieldType = Field(default=FieldType.TEXT, description="Type of field for proper handling (default: text)")


class SelectPicklistArgs(ToolArgs):
    field_label: str = Field(description="The visible label of the picklist field")
    value: str = Field(description="The value to select")


class SelectLookupArgs(ToolArgs):
    field_label: str = Field(description="The visible label of the lookup field")
    search_term: str = Field(description="Search term to find the record")
    select_index: int = Field(default=0, ge=0, description="Index of result to select (default: 0, first result)")


class CheckCheckboxArgs(ToolArgs):
    field_label: str = Field(description="The visible label of the checkbox field")
    checked: bool = Field(description="Whether the checkbox should be checked")


class FillDateArgs(ToolArgs):
    field_label: str = Field(description="The visible label of the date field")
    date: str = Field(description="Date value in format MM/DD/YYYY or YYYY-MM-DD")
    include_time: bool = Field(default=False, description="Whether to include time (for datetime fields)")
    time: Optional[str] = Field(default=None, description="Time value in format HH:MM AM/PM")


class HoverArgs(ToolArgs):
    selector: str = Field(description="CSS selector of the element to hover over")


class PressKeyArgs(ToolArgs):
    key: str = Field(description='Key to press (e.g., "Enter", "Tab", "Escape", "ArrowDown")')
    selector: Optional[str] = Field(default=None, description="Optional selector to focus before pressing key")


class ScrollArgs(ToolArgs):
    direction: Literal["up", "down", "left", "right"] = Field(description="Direction to scroll")
    amount: int = Field(default=DEFAULT_SCROLL_PX, ge=0, description="Amount to scroll in pixels (default: 300)")
    selector: Optional[str] = Field(default=None, description="Optional selector of element to scroll within")


class WaitForElementArgs(ToolArgs):
    selector: str = Field(description="CSS selector of the element to wait for")
    state: Literal["visible", "hidden", "attached", "detached"] = Field(
        default="visible", description="State to wait for (default: visible)"
    )
    timeout: Optional[int] = Field(default=None, ge=0, description="Timeout in milliseconds (default: 10000)")


@interaction_tool(
    "sf_click",
    ClickArgs,
    description="Click an element by CSS selector.",
    action="click",
)
async def click(toolbox, args: ClickArgs) -> ToolResult:
    page = await toolbox.page()
    timeout = toolbox.config.element_timeout_ms if args.timeout is None else args.timeout
    await page.locator(args.selector).first.click(timeout=timeout, force=args.force)
    await toolbox.waits(page).wait_for_no_spinners(POST_CLICK_SPINNER_MS)
    return ToolResult.ok(clicked=args.selector)


@interaction_tool(
    "sf_click_button",
    ClickButtonArgs,
    description="Click a Lightning button by its visible label text.",
    action="click button",
)
async def click_button(toolbox, args: ClickButtonArgs) -> ToolResult:
    page = await toolbox.page()
    await toolbox.patterns(page).click_button(args.label, args.timeout)
    await toolbox.waits(page).wait_for_no_spinners(POST_CLICK_SPINNER_MS)
    return ToolResult.ok(clickedButton=args.label)


@interaction_tool(
    "sf_fill",
    FillArgs,
    description="Fill an input element by CSS selector.",
    action="fill",
)
async def fill(toolbox, args: FillArgs) -> ToolResult:
    page = await toolbox.page()
    locator = page.locator(args.selector).first
    if args.clear:
        await locator.clear()
    await locator.fill(args.value)
    return ToolResult.ok(filled=args.selector, value=args.value)


@interaction_tool(
    "sf_fill_field",
    FillFieldArgs,
    description=(
        "Fill a Lightning form field by its label. Supports text, textarea, picklist, lookup, "
        "date, datetime, checkbox, and number fields."
    ),
    action="fill field",
)
async def fill_field(toolbox, args: FillFieldArgs) -> ToolResult:
    page = await toolbox.page()
    await toolbox.patterns(page).fill_form_field(args.field_label, args.value, args.field_type)
    return ToolResult.ok(field=args.field_label, value=args.value, fieldType=args.field_type.value)


@interaction_tool(
    "sf_select_picklist",
    SelectPicklistArgs,
    description="Select a value from a Lightning picklist field.",
    action="select picklist",
)
async def select_picklist(toolbox, args: SelectPicklistArgs) -> ToolResult:
    page = await toolbox.page()
    chosen = await toolbox.patterns(page).select_picklist_value(args.field_label, args.value)
    return ToolResult.ok(field=args.field_label, selectedValue=chosen)


@interaction_tool(
    "sf_select_lookup",
    SelectLookupArgs,
    description="Search and select a value in a Lightning lookup field.",
    action="select lookup",
)
async def select_lookup(toolbox, args: SelectLookupArgs) -> ToolResult:
    page = await toolbox.page()
    index = await toolbox.patterns(page).select_lookup_value(args.field_label, args.search_term, args.select_index)
    return ToolResult.ok(field=args.field_label, searchTerm=args.search_term, selectedIndex=index)


@interaction_tool(
    "sf_check_checkbox",
    CheckCheckboxArgs,
    description="Check or uncheck a Lightning checkbox field.",
    action="check checkbox",
)
async def check_checkbox(toolbox, args: CheckCheckboxArgs) -> ToolResult:
    page = await toolbox.page()
    changed = await toolbox.patterns(page).set_checkbox(args.field_label, args.checked)
    return ToolResult.ok(field=args.field_label, checked=args.checked, changed=changed)


@interaction_tool(
    "sf_fill_date",
    FillDateArgs,
    description="Fill a Lightning date or datetime field.",
    action="fill date",
)
async def fill_date(toolbox, args: FillDateArgs) -> ToolResult:
    page = await toolbox.page()
    patterns = toolbox.patterns(page)
    if args.include_time and args.time:
        await patterns.fill_datetime_field(args.field_label, args.date, args.time)
    else:
        await patterns.fill_date_field(args.field_label, args.date)
    return ToolResult.ok(field=args.field_label, date=args.date, time=args.time)


@interaction_tool(
    "sf_hover",
    HoverArgs,
    description="Hover over an element to reveal tooltips or dropdowns.",
    action="hover",
)
async def hover(toolbox, args: HoverArgs) -> ToolResult:
    page = await toolbox.page()
    await page.locator(args.selector).first.hover()
    return ToolResult.ok(hoveredOver=args.selector)


@interaction_tool(
    "sf_press_key",
    PressKeyArgs,
    description="Press a keyboard key, optionally on a specific element.",
    action="press key",
)
async def press_key(toolbox, args: PressKeyArgs) -> ToolResult:
    page = await toolbox.page()
    if args.selector:
        await page.locator(args.selector).first.press(args.key)
    else:
        await page.keyboard.press(args.key)
    return ToolResult.ok(pressed=args.key, onElement=args.selector or "page")


@interaction_tool(
    "sf_scroll",
    ScrollArgs,
    description="Scroll the page or a specific element.",
    action="scroll",
)
async def scroll(toolbox, args: ScrollArgs) -> ToolResult:
    page = await toolbox.page()
    x, y = SCROLL_VECTORS[args.direction]
    dx, dy = x * args.amount, y * args.amount
    if args.selector:
        await page.locator(args.selector).first.evaluate(SCROLL_BY_SCRIPT, {"dx": dx, "dy": dy})
    else:
        await page.mouse.wheel(dx, dy)
    return ToolResult.ok(direction=args.direction, amount=args.amount, element=args.selector or "page")


@interaction_tool(
    "sf_wait_for_element",
    WaitForElementArgs,
    description="Wait for an element to reach a specific state (visible, hidden, attached, detached).",
    action="wait for element",
)
async def wait_for_element(toolbox, args: WaitForElementArgs) -> ToolResult:
    page = await toolbox.page()
    timeout = toolbox.config.element_timeout_ms if args.timeout is None else args.timeout
    await page.locator(args.selector).first.wait_for(state=args.state, timeout=timeout)
    return ToolResult.ok(selector=args.selector, state=args.state)
