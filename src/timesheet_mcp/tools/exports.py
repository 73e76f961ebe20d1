"""
Export tools: generate, email and template-driven timesheet exports.

Exports are built upstream; these tools pass the parameters through and
summarize the result.
"""

from __future__ import annotations

import logging

from mcp import types

from timesheet_mcp.tools.context import ToolContext
from timesheet_mcp.tools.formatting import (
    TEMPLATE_LINES_LIMIT,
    format_export_template_list_response,
    handle_api_error,
    success_result,
    tool_result,
)
from timesheet_mcp.tools.inputs import (
    EmptyInput,
    ExportFieldsInput,
    ExportFromTemplateInput,
    ExportGenerateInput,
    ExportSendInput,
    ExportTemplateCreateInput,
    ExportTemplateListInput,
    ExportTemplateUpdateInput,
    TemplateIdInput,
)
from timesheet_mcp.tools.outputs import (
    DeletedOutput,
    ExportFieldsOutput,
    ExportFileOutput,
    ExportSentOutput,
    ReportTypesOutput,
    TemplateExportOutput,
    TemplateListOutput,
    TemplateOutput,
)
from timesheet_mcp.tools.registry import tool

logger = logging.getLogger(__name__)


# =============================================================================
# Export Generation
# =============================================================================


@tool(
    name="export_generate",
    annotations={
        "title": "Generate Export",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=ExportFileOutput,
)
async def export_generate(params: ExportGenerateInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Generate a timesheet export file and return its download URL.

    Args:
        params:
            - report (int): Report type ID from export_report_types (required)
            - startDate / endDate (str): Date range, YYYY-MM-DD (required)
            - format (str): 'xlsx', 'xlsx1904', 'csv' or 'pdf'
            - teamIds / projectIds / userIds / tagIds: Scope filters
            - type / filter: Entry type and billing filters
            - splitTask / summarize (bool): Layout options
            - filename (str): File name

    Examples:
        - Last month as Excel: report=0, startDate="2025-01-01", endDate="2025-01-31", format="xlsx"
    """
    client = ctx.get_client()
    try:
        result = await client.generate_export(params.to_api())
        return tool_result(
            "Export generated successfully!\n"
            f"Download URL: {result.url}\n"
            f"Filename: {result.filename or 'export'}",
            {
                "url": result.url,
                "filename": result.filename,
                "contentType": result.content_type,
            },
        )
    except Exception as e:
        return handle_api_error(e, "export_generate")


@tool(
    name="export_send",
    annotations={
        "title": "Email Export",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
    output=ExportSentOutput,
)
async def export_send(params: ExportSendInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Generate a timesheet export and email it.

    Args:
        params:
            - email (str): Recipient (required)
            - startDate / endDate (str): Date range, YYYY-MM-DD (required)
            - report (int): Report type ID
            - format (str): 'xlsx', 'xlsx1904', 'csv' or 'pdf'
            - teamIds / projectIds: Scope filters
            - filename (str): File name
    """
    client = ctx.get_client()
    try:
        await client.send_export(params.to_api())
        return success_result(f"Export sent successfully to {params.email}", email=params.email)
    except Exception as e:
        return handle_api_error(e, "export_send")


@tool(
    name="export_from_template",
    annotations={
        "title": "Export From Template",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=TemplateExportOutput,
)
async def export_from_template(
    params: ExportFromTemplateInput, ctx: ToolContext
) -> types.CallToolResult:
    """Generate an export from a saved template for an optional date range."""
    client = ctx.get_client()
    try:
        data = await client.export_from_template(
            params.template_id, params.start_date, params.end_date
        )
        return success_result(
            f"Export generated from template {params.template_id} ({len(data)} bytes)",
            templateId=params.template_id,
            size=len(data),
        )
    except Exception as e:
        return handle_api_error(e, "export_from_template")


# =============================================================================
# Export Configuration
# =============================================================================


@tool(
    name="export_fields",
    annotations={
        "title": "List Export Fields",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=ExportFieldsOutput,
)
async def export_fields(params: ExportFieldsInput, ctx: ToolContext) -> types.CallToolResult:
    """List the fields that can be included in an export."""
    client = ctx.get_client()
    try:
        result = await client.get_export_fields(params.scope)
        fields = result.fields
        lines = [f"- {f.name} ({f.field_id})" for f in fields[:TEMPLATE_LINES_LIMIT]]
        text = f"Available export fields ({len(fields)} total):\n" + "\n".join(lines)
        if len(fields) > TEMPLATE_LINES_LIMIT:
            text += "\n...and more"
        return tool_result(text, {"fields": [f.to_dict() for f in fields]})
    except Exception as e:
        return handle_api_error(e, "export_fields")


@tool(
    name="export_report_types",
    annotations={
        "title": "List Report Types",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=ReportTypesOutput,
)
async def export_report_types(params: EmptyInput, ctx: ToolContext) -> types.CallToolResult:
    """List the report types available for exports."""
    client = ctx.get_client()
    try:
        result = await client.get_report_types()
        lines = []
        for r in result.reports:
            line = f"- {r.id}: {r.name or 'Unnamed'}"
            if r.description:
                line += f" - {r.description}"
            lines.append(line)
        return tool_result(
            "Available report types:\n" + "\n".join(lines),
            {"reports": [r.to_dict() for r in result.reports]},
        )
    except Exception as e:
        return handle_api_error(e, "export_report_types")


# =============================================================================
# Export Templates
# =============================================================================


@tool(
    name="export_template_list",
    annotations={
        "title": "List Export Templates",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=TemplateListOutput,
    widget="ExportWidget",
)
async def export_template_list(
    params: ExportTemplateListInput, ctx: ToolContext
) -> types.CallToolResult:
    """
    List saved export templates.

    Args:
        params:
            - limit (int): Maximum templates, default 20
            - page (int): Page number
            - search (str): Match template names
            - sort (str): 'alpha', 'name', 'created' or 'lastUpdate'
            - order (str): 'asc' or 'desc'
    """
    client = ctx.get_client()
    try:
        page = await client.list_export_templates(params.to_api())
        return format_export_template_list_response(page.items, len(page.items))
    except Exception as e:
        return handle_api_error(e, "export_template_list")


@tool(
    name="export_template_get",
    annotations={
        "title": "Get Export Template",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=TemplateOutput,
)
async def export_template_get(params: TemplateIdInput, ctx: ToolContext) -> types.CallToolResult:
    """Get a saved export template by ID."""
    client = ctx.get_client()
    try:
        template = await client.get_export_template(params.template_id)
        text = (
            f"Template: {template.name or 'Untitled'}\n"
            f"Format: {template.format or 'N/A'}\n"
            f"Report Type: {template.report if template.report is not None else 'N/A'}"
        )
        return tool_result(text, template.to_dict())
    except Exception as e:
        return handle_api_error(e, "export_template_get")


@tool(
    name="export_template_create",
    annotations={
        "title": "Create Export Template",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
    output=TemplateOutput,
)
async def export_template_create(
    params: ExportTemplateCreateInput, ctx: ToolContext
) -> types.CallToolResult:
    """
    Save an export configuration as a reusable template.

    Args:
        params:
            - name (str): Template name (required)
            - report (int): Report type ID
            - format (str): 'xlsx', 'xlsx1904', 'csv' or 'pdf'
            - teamIds / projectIds / userIds: Scope filters
            - type / filter: Entry type and billing filters
            - splitTask / summarize (bool): Layout options
            - email (str): Default recipient
            - filename (str): File name
    """
    client = ctx.get_client()
    try:
        template = await client.create_export_template(params.to_api())
        return tool_result(
            f'Template "{template.name or params.name}" created successfully with ID: {template.id}',
            {"id": template.id, "name": template.name or params.name},
        )
    except Exception as e:
        return handle_api_error(e, "export_template_create")


@tool(
    name="export_template_update",
    annotations={
        "title": "Update Export Template",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=TemplateOutput,
)
async def export_template_update(
    params: ExportTemplateUpdateInput, ctx: ToolContext
) -> types.CallToolResult:
    """Update a saved export template. Only the fields provided are changed."""
    client = ctx.get_client()
    try:
        template = await client.update_export_template(
            params.template_id, params.to_api(exclude={"template_id"})
        )
        return tool_result(
            f'Template "{template.name or "Untitled"}" updated successfully',
            {"id": template.id or params.template_id, "name": template.name},
        )
    except Exception as e:
        return handle_api_error(e, "export_template_update")


@tool(
    name="export_template_delete",
    annotations={
        "title": "Delete Export Template",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
    output=DeletedOutput,
)
async def export_template_delete(params: TemplateIdInput, ctx: ToolContext) -> types.CallToolResult:
    """
    Permanently delete an export template.

    WARNING: This cannot be undone.
    """
    client = ctx.get_client()
    try:
        await client.delete_export_template(params.template_id)
        return success_result(
            f"Template {params.template_id} deleted successfully",
            deletedId=params.template_id,
        )
    except Exception as e:
        return handle_api_error(e, "export_template_delete")
