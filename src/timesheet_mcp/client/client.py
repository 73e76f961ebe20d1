"""
Timesheet API client.

TimesheetClient exposes one async method per upstream operation used by
the MCP tools and returns typed models. Filter and payload dictionaries are
passed through with the API's camelCase keys; None values are dropped.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Optional

import httpx

from timesheet_mcp.api import TimesheetTransport, compact
from timesheet_mcp.client.auth import Credentials, resolve_credentials
from timesheet_mcp.models import (
    Expense,
    ExportFields,
    ExportResult,
    ExportTemplate,
    Note,
    Page,
    Pause,
    Project,
    ReportTypes,
    Task,
    Team,
    Timer,
)
from timesheet_mcp.settings import DEFAULT_API_URL, Settings

logger = logging.getLogger(__name__)

REPORT_KINDS = ("documents", "tasks", "expenses", "notes")


class TimesheetClient:
    """
    Async client for the Timesheet REST API.

    Usage:
        async with TimesheetClient(Credentials(api_key="ts_abc.def")) as client:
            timer = await client.get_timer()
            projects = await client.list_projects({"status": "active"})
    """

    def __init__(
        self,
        credentials: Credentials,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self._http = TimesheetTransport(
            self.base_url,
            credentials.authorization,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        oauth_token: Optional[str] = None,
    ) -> "TimesheetClient":
        """Build a client from settings, preferring a forwarded bearer token."""
        credentials = resolve_credentials(oauth_token, settings)
        logger.debug("Creating Timesheet client using %s credentials", credentials.source)
        return cls(
            credentials,
            base_url=settings.timesheet_api_url,
            timeout=settings.request_timeout,
        )

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> "TimesheetClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Timer
    # -------------------------------------------------------------------------

    async def get_timer(self) -> Timer:
        data = await self._http.request("GET", "/v1/timer")
        return Timer.model_validate(data or {})

    async def start_timer(self, project_id: str, start_date_time: Optional[str] = None) -> Timer:
        data = await self._http.request(
            "POST",
            "/v1/timer/start",
            json=compact({"projectId": project_id, "startDateTime": start_date_time}),
        )
        return Timer.model_validate(data or {})

    async def stop_timer(self, end_date_time: Optional[str] = None) -> Timer:
        data = await self._http.request(
            "POST", "/v1/timer/stop", json=compact({"endDateTime": end_date_time})
        )
        return Timer.model_validate(data or {})

    async def pause_timer(self, start_date_time: Optional[str] = None) -> Timer:
        data = await self._http.request(
            "POST", "/v1/timer/pause", json=compact({"startDateTime": start_date_time})
        )
        return Timer.model_validate(data or {})

    async def resume_timer(self, end_date_time: Optional[str] = None) -> Timer:
        data = await self._http.request(
            "POST", "/v1/timer/resume", json=compact({"endDateTime": end_date_time})
        )
        return Timer.model_validate(data or {})

    async def update_timer(self, fields: dict[str, Any]) -> Timer:
        data = await self._http.request("PUT", "/v1/timer/update", json=compact(fields))
        return Timer.model_validate(data or {})

    # -------------------------------------------------------------------------
    # Task Items (notes, expenses, pauses)
    # -------------------------------------------------------------------------

    async def create_note(self, task_id: str, text: str, date_time: Optional[str] = None) -> Note:
        data = await self._http.request(
            "POST",
            "/v1/notes",
            json=compact({"taskId": task_id, "text": text, "dateTime": date_time}),
        )
        return Note.model_validate(data or {})

    async def create_expense(
        self,
        task_id: str,
        description: str,
        amount: float,
        date_time: Optional[str] = None,
    ) -> Expense:
        data = await self._http.request(
            "POST",
            "/v1/expenses",
            json=compact({
                "taskId": task_id,
                "description": description,
                "amount": amount,
                "dateTime": date_time,
            }),
        )
        return Expense.model_validate(data or {})

    async def create_pause(
        self,
        task_id: str,
        start_date_time: str,
        end_date_time: str,
        description: Optional[str] = None,
    ) -> Pause:
        data = await self._http.request(
            "POST",
            "/v1/pauses",
            json=compact({
                "taskId": task_id,
                "description": description,
                "startDateTime": start_date_time,
                "endDateTime": end_date_time,
            }),
        )
        return Pause.model_validate(data or {})

    # -------------------------------------------------------------------------
    # Teams
    # -------------------------------------------------------------------------

    async def list_teams(self, filters: Optional[dict[str, Any]] = None) -> Page[Team]:
        data = await self._http.request("POST", "/v1/teams/search", json=compact(filters))
        return Page[Team].model_validate(data or {})

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    async def list_projects(self, filters: Optional[dict[str, Any]] = None) -> Page[Project]:
        data = await self._http.request("POST", "/v1/projects/search", json=compact(filters))
        return Page[Project].model_validate(data or {})

    async def get_project(self, project_id: str) -> Project:
        data = await self._http.request("GET", f"/v1/projects/{project_id}")
        return Project.model_validate(data)

    async def create_project(self, payload: dict[str, Any]) -> Project:
        data = await self._http.request("POST", "/v1/projects", json=compact(payload))
        return Project.model_validate(data)

    async def update_project(self, project_id: str, payload: dict[str, Any]) -> Project:
        data = await self._http.request("PUT", f"/v1/projects/{project_id}", json=compact(payload))
        return Project.model_validate(data)

    async def delete_project(self, project_id: str) -> None:
        await self._http.request("DELETE", f"/v1/projects/{project_id}")

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    async def search_tasks(self, filters: Optional[dict[str, Any]] = None) -> Page[Task]:
        data = await self._http.request("POST", "/v1/tasks/search", json=compact(filters))
        return Page[Task].model_validate(data or {})

    async def get_task(self, task_id: str) -> Task:
        data = await self._http.request("GET", f"/v1/tasks/{task_id}")
        return Task.model_validate(data)

    async def create_task(self, payload: dict[str, Any]) -> Task:
        data = await self._http.request("POST", "/v1/tasks", json=compact(payload))
        return Task.model_validate(data)

    async def update_task(self, task_id: str, payload: dict[str, Any]) -> Task:
        data = await self._http.request("PUT", f"/v1/tasks/{task_id}", json=compact(payload))
        return Task.model_validate(data)

    async def delete_task(self, task_id: str) -> None:
        await self._http.request("DELETE", f"/v1/tasks/{task_id}")

    # -------------------------------------------------------------------------
    # Profile & Settings
    # -------------------------------------------------------------------------

    async def get_profile(self) -> dict[str, Any]:
        return await self._http.request("GET", "/v1/profiles/me") or {}

    async def get_settings(self) -> dict[str, Any]:
        return await self._http.request("GET", "/v1/settings") or {}

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    async def get_report(self, kind: str, item_id: str) -> dict[str, Any]:
        """Fetch the report data for a document, task, expense or note."""
        if kind not in REPORT_KINDS:
            raise ValueError(f"Unknown report kind: {kind}")
        return await self._http.request("GET", f"/v1/reports/{kind}/{item_id}") or {}

    async def get_report_pdf(self, kind: str, item_id: str) -> bytes:
        if kind not in REPORT_KINDS:
            raise ValueError(f"Unknown report kind: {kind}")
        return await self._http.request_bytes("GET", f"/v1/reports/{kind}/{item_id}/pdf")

    async def get_document_xml(self, document_id: str) -> str:
        """Fetch the e-invoice XML for a document."""
        return await self._http.request_text("GET", f"/v1/reports/documents/{document_id}/xml")

    # -------------------------------------------------------------------------
    # Exports
    # -------------------------------------------------------------------------

    async def generate_export(self, payload: dict[str, Any]) -> ExportResult:
        data = await self._http.request("POST", "/v1/reports/export", json=compact(payload))
        return ExportResult.model_validate(data or {})

    async def send_export(self, payload: dict[str, Any]) -> None:
        await self._http.request("POST", "/v1/reports/export/send", json=compact(payload))

    async def export_from_template(
        self,
        template_id: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> bytes:
        return await self._http.request_bytes(
            "POST",
            "/v1/reports/export/template",
            json=compact({"templateId": template_id, "startDate": start_date, "endDate": end_date}),
        )

    async def get_export_fields(self, scope: Optional[str] = None) -> ExportFields:
        data = await self._http.request(
            "GET", "/v1/reports/export/fields", params={"scope": scope}
        )
        return ExportFields.model_validate(data or {})

    async def get_report_types(self) -> ReportTypes:
        data = await self._http.request("GET", "/v1/reports/export/reports")
        return ReportTypes.model_validate(data or {})

    async def list_export_templates(
        self, filters: Optional[dict[str, Any]] = None
    ) -> Page[ExportTemplate]:
        data = await self._http.request(
            "GET", "/v1/reports/export/templates", params=filters
        )
        return Page[ExportTemplate].model_validate(data or {})

    async def get_export_template(self, template_id: str) -> ExportTemplate:
        data = await self._http.request("GET", f"/v1/reports/export/templates/{template_id}")
        return ExportTemplate.model_validate(data)

    async def create_export_template(self, payload: dict[str, Any]) -> ExportTemplate:
        data = await self._http.request(
            "POST", "/v1/reports/export/templates", json=compact(payload)
        )
        return ExportTemplate.model_validate(data)

    async def update_export_template(
        self, template_id: str, payload: dict[str, Any]
    ) -> ExportTemplate:
        data = await self._http.request(
            "PUT", f"/v1/reports/export/templates/{template_id}", json=compact(payload)
        )
        return ExportTemplate.model_validate(data)

    async def delete_export_template(self, template_id: str) -> None:
        await self._http.request("DELETE", f"/v1/reports/export/templates/{template_id}")
