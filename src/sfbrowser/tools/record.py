from functools import partial
from typing import Optional

from pydantic import Field

from ..automation import selectors as sel
from ..automation.types import SaveStatus, Toast, ToastType, ToolResult
from ..automation.waits import PageKind
from .registry import NoArgs, ToolArgs, tool

record_tool = partial(tool, group="record")


class RecordNewArgs(ToolArgs):
    object_api_name: str = Field(description='API name of the object (e.g., "Account", "Contact", "Custom__c")')
    record_type_id: Optional[str] = Field(default=None, description="Record Type ID if applicable")


class RecordEditArgs(ToolArgs):
    record_id: Optional[str] = Field(
        default=None,
        description="Record ID to edit. If not provided, edits the current record on the page",
    )


class RecordSaveArgs(ToolArgs):
    wait_for_save: bool = Field(default=True, description="Wait for save to complete and return result (default: true)")


class RecordDeleteArgs(ToolArgs):
    confirm: bool = Field(
        default=False,
        description="Confirm the delete operation (default: false, will not auto-confirm)",
    )


@record_tool(
    "sf_record_new",
    RecordNewArgs,
    description="Open a new record form for creating a record of the specified object type.",
    action="create new record",
)
async def record_new(toolbox, args: RecordNewArgs) -> ToolResult:
    session = toolbox.session
    kind = await session.navigate(session.url_builder.new_record(args.object_api_name, args.record_type_id))
    if kind != PageKind.FORM:
        page = await toolbox.page()
        await toolbox.waits(page).wait_for_form_ready()
    return ToolResult.ok(
        "New record form is ready for input",
        object=args.object_api_name,
        recordTypeId=args.record_type_id,
        currentUrl=await session.current_url(),
    )


@record_tool(
    "sf_record_edit",
    RecordEditArgs,
    description="Open a record in edit mode. If recordId is not provided, edits the current record on the page.",
    action="edit record",
)
async def record_edit(toolbox, args: RecordEditArgs) -> ToolResult:
    session = toolbox.session
    if args.record_id:
        kind = await session.navigate(session.url_builder.record_edit(args.record_id))
    else:
        page = await toolbox.page()
        edit = await toolbox.patterns(page).resolve(sel.EDIT_BUTTON, "edit record", "Edit")
        await edit.click()
        kind = None
    if kind != PageKind.FORM:
        await toolbox.waits(await toolbox.page()).wait_for_form_ready()
    return ToolResult.ok(
        "Record is now in edit mode",
        recordId=args.record_id or "current",
        currentUrl=await session.current_url(),
    )


@record_tool(
    "sf_record_save",
    RecordSaveArgs,
    description="Save the current record form. Returns success/failure status and any toast messages.",
    action="save record",
)
async def record_save(toolbox, args: RecordSaveArgs) -> ToolResult:
    page = await toolbox.page()
    patterns = toolbox.patterns(page)
    if not args.wait_for_save:
        await patterns.click_save()
        return ToolResult.ok("Save initiated")

    outcome = await patterns.save_record()
    data = {
        "verified": outcome.status != SaveStatus.UNVERIFIED,
        "currentUrl": page.url,
    }
    if outcome.toast is not None:
        data["toastType"] = outcome.toast.type.value
    return ToolResult(success=outcome.success, message=outcome.message, data=data)


@record_tool(
    "sf_record_cancel",
    description="Cancel the current record edit and return to view mode.",
    action="cancel edit",
)
async def record_cancel(toolbox, args: NoArgs) -> ToolResult:
    page = await toolbox.page()
    await toolbox.patterns(page).cancel_edit()
    return ToolResult.ok("Edit cancelled", currentUrl=page.url)


@record_tool(
    "sf_record_delete",
    RecordDeleteArgs,
    description="Delete the current record. Set confirm=true to confirm the deletion.",
    action="delete record",
)
async def record_delete(toolbox, args: RecordDeleteArgs) -> ToolResult:
    page = await toolbox.page()
    patterns = toolbox.patterns(page)
    waits = patterns.waits

    delete = await patterns.resolve(sel.DELETE_BUTTON, "delete record", "Delete")
    await delete.click()
    await waits.wait_for_modal()

    if not args.confirm:
        return ToolResult.ok(
            "Delete confirmation dialog is open. Set confirm=true to proceed with deletion.",
            warning="This action cannot be undone.",
        )

    modal = page.locator(sel.MODAL.css).first
    await modal.locator(sel.MODAL_CONFIRM_DELETE.css).last.click()

    outcome = await waits.toast_outcome(toolbox.config.toast_timeout_ms)
    if isinstance(outcome, Toast):
        return ToolResult(
            success=outcome.type == ToastType.SUCCESS,
            message=outcome.message,
            data={"toastType": outcome.type.value},
        )
    return ToolResult.ok("Delete operation completed")


@record_tool(
    "sf_record_clone",
    description="Clone the current record by opening a pre-filled new record form.",
    action="clone record",
)
async def record_clone(toolbox, args: NoArgs) -> ToolResult:
    page = await toolbox.page()
    patterns = toolbox.patterns(page)
    clone = await patterns.resolve(sel.CLONE_BUTTON, "clone record", "Clone")
    await clone.click()
    await patterns.waits.wait_for_form_ready()
    return ToolResult.ok("Record clone form is ready", currentUrl=page.url)
