import base64
from functools import partial
from typing import Optional

from pydantic import Field

from ..automation.types import ImagePayload, TimedOut, ToolResult
from .registry import NoArgs, ToolArgs, tool

capture_tool = partial(tool, group="capture")

MAX_PAGE_TEXT = 10000


class ScreenshotArgs(ToolArgs):
    full_page: bool = Field(default=False, description="Capture the full scrollable page (default: false)")
    selector: Optional[str] = Field(default=None, description="CSS selector of specific element to capture")


class GetPageTextArgs(ToolArgs):
    selector: Optional[str] = Field(default=None, description="CSS selector to get text from specific element")


class GetElementTextArgs(ToolArgs):
    selector: str = Field(description="CSS selector of the element")


class GetFieldValueArgs(ToolArgs):
    field_label: str = Field(description="The visible label of the form field")


class GetToastMessageArgs(ToolArgs):
    timeout: Optional[int] = Field(
        default=None, ge=0, description="Timeout in milliseconds to wait for toast (default: 10000)"
    )


class EvaluateJsArgs(ToolArgs):
    script: str = Field(description="JavaScript code to execute in the page context")


class WaitTimeoutArgs(ToolArgs):
    timeout: Optional[int] = Field(default=None, ge=0, description="Timeout in milliseconds")


@capture_tool(
    "sf_screenshot",
    ScreenshotArgs,
    description="Take a screenshot of the current page or a specific element.",
    action="take screenshot",
)
async def screenshot(toolbox, args: ScreenshotArgs) -> ToolResult:
    data = await toolbox.session.screenshot(full_page=args.full_page, selector=args.selector)
    return ToolResult(
        success=True,
        image=ImagePayload(base64.b64encode(data).decode("ascii")),
    )


@capture_tool(
    "sf_get_page_text",
    GetPageTextArgs,
    description="Get all visible text content from the page or a specific element.",
    action="get page text",
)
async def get_page_text(toolbox, args: GetPageTextArgs) -> ToolResult:
    page = await toolbox.page()
    text = await toolbox.patterns(page).get_page_text(args.selector)
    return ToolResult.ok(text=text[:MAX_PAGE_TEXT], truncated=len(text) > MAX_PAGE_TEXT)


@capture_tool(
    "sf_get_element_text",
    GetElementTextArgs,
    description="Get the text content of a specific element by selector.",
    action="get element text",
)
async def get_element_text(toolbox, args: GetElementTextArgs) -> ToolResult:
    page = await toolbox.page()
    text = await page.locator(args.selector).first.text_content()
    return ToolResult.ok(selector=args.selector, text=(text or "").strip())


@capture_tool(
    "sf_get_field_value",
    GetFieldValueArgs,
    description="Get the current value of a form field by its label.",
    action="get field value",
)
async def get_field_value(toolbox, args: GetFieldValueArgs) -> ToolResult:
    page = await toolbox.page()
    value = await toolbox.patterns(page).get_field_value(args.field_label)
    return ToolResult.ok(field=args.field_label, value=value)


@capture_tool(
    "sf_get_record_details",
    description="Get all visible record details from the current record page.",
    action="get record details",
)
async def get_record_details(toolbox, args: NoArgs) -> ToolResult:
    page = await toolbox.page()
    details = await toolbox.patterns(page).get_record_details()
    return ToolResult.ok(details=details)


@capture_tool(
    "sf_get_toast_message",
    GetToastMessageArgs,
    description="Get the current toast notification message. Waits for a toast to appear if none is visible.",
    action="get toast message",
)
async def get_toast_message(toolbox, args: GetToastMessageArgs) -> ToolResult:
    page = await toolbox.page()
    outcome = await toolbox.waits(page).toast_outcome(args.timeout)
    if isinstance(outcome, TimedOut):
        return ToolResult.ok("No toast message found within timeout", found=False)
    return ToolResult.ok(outcome.message, found=True, type=outcome.type.value)


@capture_tool(
    "sf_get_current_url",
    description="Get the current page URL.",
    action="get current URL",
)
async def get_current_url(toolbox, args: NoArgs) -> ToolResult:
    return ToolResult.ok(url=await toolbox.session.current_url())


@capture_tool(
    "sf_evaluate_js",
    EvaluateJsArgs,
    description="Execute JavaScript code in the page context and return the result.",
    action="evaluate JavaScript",
)
async def evaluate_js(toolbox, args: EvaluateJsArgs) -> ToolResult:
    result = await toolbox.session.evaluate(args.script)
    return ToolResult.ok(result=result)


@capture_tool(
    "sf_wait_for_spinner",
    WaitTimeoutArgs,
    description="Wait for all Lightning spinners to disappear.",
    action="wait for spinners",
)
async def wait_for_spinner(toolbox, args: WaitTimeoutArgs) -> ToolResult:
    page = await toolbox.page()
    cleared = await toolbox.waits(page).wait_for_no_spinners(args.timeout)
    message = "Spinners have disappeared" if cleared else "Spinners still visible after timeout"
    return ToolResult.ok(message, cleared=cleared)


@capture_tool(
    "sf_wait_for_navigation",
    WaitTimeoutArgs,
    description="Wait for page navigation to complete.",
    action="wait for navigation",
)
async def wait_for_navigation(toolbox, args: WaitTimeoutArgs) -> ToolResult:
    page = await toolbox.page()
    await toolbox.waits(page).wait_for_navigation(args.timeout)
    return ToolResult.ok("Navigation completed", currentUrl=page.url)
