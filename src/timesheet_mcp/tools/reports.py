"""
Report tools: printable views of documents (invoices), tasks, expenses and notes.

PDF tools do not return the file itself; they confirm generation and report
the size so the user can download it from the Timesheet app.
"""

from __future__ import annotations

import logging
from typing import Any

from mcp import types

from timesheet_mcp.tools.context import ToolContext
from timesheet_mcp.tools.formatting import handle_api_error, success_result, tool_result
from timesheet_mcp.tools.inputs import (
    DocumentIdInput,
    ExpenseIdInput,
    NoteIdInput,
    TaskReportInput,
)
from timesheet_mcp.tools.outputs import PdfOutput, ReportOutput, XmlOutput
from timesheet_mcp.tools.registry import tool

logger = logging.getLogger(__name__)

READ_ONLY = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": True,
}


def _value(report: dict[str, Any], key: str, default: str) -> Any:
    value = report.get(key)
    return default if value in (None, "") else value


# =============================================================================
# Document Reports
# =============================================================================


@tool(
    name="report_document_get",
    annotations={"title": "Get Document Report", **READ_ONLY},
    output=ReportOutput,
)
async def report_document_get(params: DocumentIdInput, ctx: ToolContext) -> types.CallToolResult:
    """Get the report data for a document (invoice), including totals and line items."""
    client = ctx.get_client()
    try:
        report = await client.get_report("documents", params.document_id)
        text = (
            f"Document Report: {_value(report, 'documentTitle', 'Untitled')}\n"
            f"Invoice #{_value(report, 'invoiceNumber', 'N/A')}\n"
            f"Total: {_value(report, 'totalAmount', 'N/A')}"
        )
        return tool_result(text, report)
    except Exception as e:
        return handle_api_error(e, "report_document_get")


@tool(
    name="report_document_pdf",
    annotations={"title": "Generate Document PDF", **READ_ONLY},
    output=PdfOutput,
)
async def report_document_pdf(params: DocumentIdInput, ctx: ToolContext) -> types.CallToolResult:
    """Generate the PDF for a document (invoice)."""
    client = ctx.get_client()
    try:
        pdf = await client.get_report_pdf("documents", params.document_id)
        message = "Use the Timesheet app or API to download."
        return success_result(
            f"PDF generated successfully for document {params.document_id} "
            f"({len(pdf)} bytes). {message}",
            documentId=params.document_id,
            size=len(pdf),
            message=message,
        )
    except Exception as e:
        return handle_api_error(e, "report_document_pdf")


@tool(
    name="report_document_xml",
    annotations={"title": "Generate E-Invoice XML", **READ_ONLY},
    output=XmlOutput,
)
async def report_document_xml(params: DocumentIdInput, ctx: ToolContext) -> types.CallToolResult:
    """Generate the e-invoice XML for a document."""
    client = ctx.get_client()
    try:
        xml = await client.get_document_xml(params.document_id)
        return success_result(
            f"E-Invoice XML generated successfully for document {params.document_id}",
            documentId=params.document_id,
            xml=xml,
        )
    except Exception as e:
        return handle_api_error(e, "report_document_xml")


# =============================================================================
# Task Reports
# =============================================================================


@tool(
    name="report_task_get",
    annotations={"title": "Get Task Report", **READ_ONLY},
    output=ReportOutput,
)
async def report_task_get(params: TaskReportInput, ctx: ToolContext) -> types.CallToolResult:
    """Get the report data for a single time entry."""
    client = ctx.get_client()
    try:
        report = await client.get_report("tasks", params.task_id)
        text = (
            f"Task Report: {_value(report, 'projectName', 'No Project')}\n"
            f"Date: {_value(report, 'taskDate', 'N/A')}\n"
            f"Duration: {_value(report, 'taskDuration', 'N/A')}\n"
            f"Total: {_value(report, 'taskTotal', 'N/A')}"
        )
        return tool_result(text, report)
    except Exception as e:
        return handle_api_error(e, "report_task_get")


@tool(
    name="report_task_pdf",
    annotations={"title": "Generate Task PDF", **READ_ONLY},
    output=PdfOutput,
)
async def report_task_pdf(params: TaskReportInput, ctx: ToolContext) -> types.CallToolResult:
    """Generate the PDF for a single time entry."""
    client = ctx.get_client()
    try:
        pdf = await client.get_report_pdf("tasks", params.task_id)
        return success_result(
            f"PDF generated successfully for task {params.task_id} ({len(pdf)} bytes)",
            taskId=params.task_id,
            size=len(pdf),
        )
    except Exception as e:
        return handle_api_error(e, "report_task_pdf")


# =============================================================================
# Expense Reports
# =============================================================================


@tool(
    name="report_expense_get",
    annotations={"title": "Get Expense Report", **READ_ONLY},
    output=ReportOutput,
)
async def report_expense_get(params: ExpenseIdInput, ctx: ToolContext) -> types.CallToolResult:
    """Get the report data for an expense."""
    client = ctx.get_client()
    try:
        report = await client.get_report("expenses", params.expense_id)
        text = (
            "Expense Report:\n"
            f"Date: {_value(report, 'expenseDate', 'N/A')}\n"
            f"Amount: {_value(report, 'expenseAmount', 'N/A')}\n"
            f"Description: {_value(report, 'expenseDescription', 'No description')}"
        )
        return tool_result(text, report)
    except Exception as e:
        return handle_api_error(e, "report_expense_get")


@tool(
    name="report_expense_pdf",
    annotations={"title": "Generate Expense PDF", **READ_ONLY},
    output=PdfOutput,
)
async def report_expense_pdf(params: ExpenseIdInput, ctx: ToolContext) -> types.CallToolResult:
    """Generate the PDF for an expense."""
    client = ctx.get_client()
    try:
        pdf = await client.get_report_pdf("expenses", params.expense_id)
        return success_result(
            f"PDF generated successfully for expense {params.expense_id} ({len(pdf)} bytes)",
            expenseId=params.expense_id,
            size=len(pdf),
        )
    except Exception as e:
        return handle_api_error(e, "report_expense_pdf")


# =============================================================================
# Note Reports
# =============================================================================


@tool(
    name="report_note_get",
    annotations={"title": "Get Note Report", **READ_ONLY},
    output=ReportOutput,
)
async def report_note_get(params: NoteIdInput, ctx: ToolContext) -> types.CallToolResult:
    """Get the report data for a note."""
    client = ctx.get_client()
    try:
        report = await client.get_report("notes", params.note_id)
        text = (
            "Note Report:\n"
            f"Date: {_value(report, 'noteDate', 'N/A')}\n"
            f"Author: {_value(report, 'noteAuthor', 'Unknown')}\n"
            f"Content: {_value(report, 'noteContent', 'No content')}"
        )
        return tool_result(text, report)
    except Exception as e:
        return handle_api_error(e, "report_note_get")


@tool(
    name="report_note_pdf",
    annotations={"title": "Generate Note PDF", **READ_ONLY},
    output=PdfOutput,
)
async def report_note_pdf(params: NoteIdInput, ctx: ToolContext) -> types.CallToolResult:
    """Generate the PDF for a note."""
    client = ctx.get_client()
    try:
        pdf = await client.get_report_pdf("notes", params.note_id)
        return success_result(
            f"PDF generated successfully for note {params.note_id} ({len(pdf)} bytes)",
            noteId=params.note_id,
            size=len(pdf),
        )
    except Exception as e:
        return handle_api_error(e, "report_note_pdf")
