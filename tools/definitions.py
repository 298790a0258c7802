"""Tool definitions for the company information tools, formatted for Claude's tool-use API.

These definitions can be passed directly to ``anthropic.Anthropic().messages.create(tools=…)``
so Claude can call the same tools the MCP server exposes.
"""

from __future__ import annotations

from typing import Iterable

from src.dispatcher import BRIGHT_DATA_TOOLS, SCRAPINGDOG_TOOLS, VARIANTS, ToolSpec


def to_anthropic_tool(tool: ToolSpec) -> dict:
    return {
        "name": tool.name,
        "description": tool.description,
        "input_schema": tool.input_schema,
    }


def anthropic_tools(tools: Iterable[ToolSpec]) -> list[dict]:
    return [to_anthropic_tool(tool) for tool in tools]


def tools_for_variant(variant: str) -> list[dict]:
    return anthropic_tools(VARIANTS[variant])


# Ready to pass to ``tools=`` in the API call.
BRIGHT_DATA_TOOL_DEFINITIONS = anthropic_tools(BRIGHT_DATA_TOOLS)
SCRAPINGDOG_TOOL_DEFINITIONS = anthropic_tools(SCRAPINGDOG_TOOLS)
