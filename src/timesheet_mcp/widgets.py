"""
Widget catalogue.

Each widget is a self-contained HTML document bundled under ``web/dist``
and exposed as an MCP resource at ``ui://timesheet/<Component>.html``.
Tool responses point hosts at the matching widget through ``_meta``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

RESOURCE_MIME_TYPE = "text/html;profile=mcp-app"
RESOURCE_URI_PREFIX = "ui://timesheet"
WIDGET_VISIBILITY = ["model", "app"]

PACKAGE_WEB_DIR = Path(__file__).parent / "web"
DEFAULT_WIDGETS_DIR = PACKAGE_WEB_DIR / "dist"

WIDGET_DESCRIPTIONS: dict[str, str] = {
    "TimerWidget": (
        "Interactive timer widget displaying current timer status, elapsed duration, "
        "and controls to pause, resume, or stop time tracking"
    ),
    "ProjectList": (
        "Interactive list of projects with color-coded indicators, descriptions, "
        "and clickable start buttons to begin time tracking"
    ),
    "ProjectCard": "Detailed project card showing project information, description, team, and status",
    "TaskList": (
        "Comprehensive time entries list grouped by date, showing project details, "
        "descriptions, durations, tags, and billable status"
    ),
    "TaskCard": (
        "Individual time entry card displaying task details, duration, project association, "
        "and billing information"
    ),
    "Statistics": (
        "Time tracking statistics dashboard with total hours, billable hours, project "
        "breakdowns with progress bars, and daily time charts"
    ),
    "ExportWidget": (
        "Interactive export widget with template selector, date range inputs, quick date "
        "presets, and generate button to create timesheet exports"
    ),
}

COMPONENTS: tuple[str, ...] = tuple(WIDGET_DESCRIPTIONS)

_URI_PATTERN = re.compile(r"^ui://timesheet/([A-Za-z][A-Za-z0-9]*)\.html$")


class WidgetNotFoundError(LookupError):
    """Raised for a malformed widget URI or an unknown component name."""


def resource_uri(component: str) -> str:
    return f"{RESOURCE_URI_PREFIX}/{component}.html"


def parse_resource_uri(uri: str) -> str:
    """
    Return the component name addressed by ``uri``.

    Raises:
        WidgetNotFoundError: The URI is malformed or names no known component.
    """
    match = _URI_PATTERN.match(uri)
    if not match:
        raise WidgetNotFoundError(f"Invalid resource URI: {uri}")
    component = match.group(1)
    if component not in WIDGET_DESCRIPTIONS:
        raise WidgetNotFoundError(f"Unknown component: {component}")
    return component


def widget_description(component: str) -> str:
    return WIDGET_DESCRIPTIONS.get(component, f"Interactive {component} widget for time tracking")


@dataclass
class WidgetMetadata:
    """Descriptive pointer from a tool response to the widget that renders it."""

    component: str
    widget_description: str
    csp: dict[str, list[str]] = field(
        default_factory=lambda: {"connectDomains": [], "resourceDomains": []}
    )
    visibility: list[str] = field(default_factory=lambda: list(WIDGET_VISIBILITY))

    @property
    def resource_uri(self) -> str:
        return resource_uri(self.component)

    def to_meta(self) -> dict[str, Any]:
        """Serialize as a tool response ``_meta`` block."""
        return {
            "ui": {
                "resourceUri": self.resource_uri,
                "csp": self.csp,
                "prefersBorder": False,
                "visibility": self.visibility,
            },
            "openai/widgetDescription": self.widget_description,
            "openai/toolInvocation/invoking": self.component,
            "openai/toolInvocation/invoked": self.component,
        }


def tool_meta(component: str) -> dict[str, Any]:
    """``_meta`` block for a tool definition that renders with ``component``."""
    return {
        "ui": {
            "resourceUri": resource_uri(component),
            "visibility": list(WIDGET_VISIBILITY),
        },
    }


def widgets_dir(override: Optional[Path] = None) -> Path:
    return Path(override) if override else DEFAULT_WIDGETS_DIR


def load_widget_html(component: str, directory: Optional[Path] = None) -> str:
    """
    Read the bundled HTML for ``component``.

    Raises:
        WidgetNotFoundError: Unknown component.
        OSError: The widget file is missing or unreadable.
    """
    if component not in WIDGET_DESCRIPTIONS:
        raise WidgetNotFoundError(f"Unknown component: {component}")
    path = widgets_dir(directory) / f"{component}.html"
    logger.debug("Loading widget %s from %s", component, path)
    return path.read_text(encoding="utf-8")


def load_landing_page() -> str:
    return (PACKAGE_WEB_DIR / "landing.html").read_text(encoding="utf-8")
