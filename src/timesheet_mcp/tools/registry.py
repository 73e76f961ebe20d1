"""
Tool registry.

Handlers declare themselves with ``@tool(...)``; the input model is taken
from the handler's ``params`` annotation and the description from its
docstring. The server lists and dispatches tools through the registry.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, get_type_hints

from mcp import types
from pydantic import BaseModel

from timesheet_mcp.widgets import tool_meta

if TYPE_CHECKING:
    from timesheet_mcp.tools.context import ToolContext

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Any, "ToolContext"], Awaitable[types.CallToolResult]]

DEFAULT_ANNOTATIONS = {
    "readOnlyHint": False,
    "destructiveHint": False,
    "idempotentHint": False,
    "openWorldHint": True,
}


@dataclass
class ToolDefinition:
    """A registered tool: its MCP declaration plus the coroutine that runs it."""

    name: str
    description: str
    handler: ToolHandler
    input_model: type[BaseModel]
    output_model: Optional[type[BaseModel]]
    annotations: dict[str, Any]
    widget: Optional[str] = None

    @property
    def title(self) -> Optional[str]:
        return self.annotations.get("title")

    @property
    def read_only(self) -> bool:
        return bool(self.annotations.get("readOnlyHint"))

    @property
    def destructive(self) -> bool:
        return bool(self.annotations.get("destructiveHint"))

    def to_tool(self) -> types.Tool:
        output_schema = None
        if self.output_model is not None:
            output_schema = self.output_model.model_json_schema(by_alias=True)
        return types.Tool(
            name=self.name,
            title=self.title,
            description=self.description,
            inputSchema=self.input_model.model_json_schema(by_alias=True),
            outputSchema=output_schema,
            annotations=types.ToolAnnotations(**self.annotations),
            _meta=tool_meta(self.widget) if self.widget else None,
        )


class ToolRegistry:
    """Name to ToolDefinition mapping, populated at import time by ``@tool``."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}

    def tool(
        self,
        name: str,
        annotations: dict[str, Any],
        output: Optional[type[BaseModel]] = None,
        widget: Optional[str] = None,
    ) -> Callable[[ToolHandler], ToolHandler]:
        """
        Register an async handler ``(params, ctx) -> CallToolResult``.

        Args:
            name: Tool name as seen by MCP clients.
            annotations: MCP tool annotations (title and behaviour hints).
            output: Model describing the structured content.
            widget: Component that renders the result, if any.
        """

        def decorator(handler: ToolHandler) -> ToolHandler:
            if name in self._tools:
                raise ValueError(f"Tool already registered: {name}")
            hints = get_type_hints(handler)
            input_model = hints.get("params")
            if input_model is None or not issubclass(input_model, BaseModel):
                raise TypeError(f"Tool {name} must annotate 'params' with a pydantic model")

            self._tools[name] = ToolDefinition(
                name=name,
                description=inspect.getdoc(handler) or "",
                handler=handler,
                input_model=input_model,
                output_model=output,
                annotations={**DEFAULT_ANNOTATIONS, **annotations},
                widget=widget,
            )
            return handler

        return decorator

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def list_tools(self) -> list[types.Tool]:
        return [definition.to_tool() for definition in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


registry = ToolRegistry()
tool = registry.tool
