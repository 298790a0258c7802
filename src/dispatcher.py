"""Tool registry and dispatch.

A :class:`ToolDispatcher` resolves a tool name against a fixed registry,
validates the argument bag with the tool's pydantic model, runs the matching
operation and wraps its result as a single pretty-printed JSON text item.
Every failure leaves as an ``McpError`` carrying an MCP error code and a
message, never a traceback.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Literal, Optional

import httpx
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, ErrorData, TextContent, Tool
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src import datasets, email_finder, linkedin_jobs
from src.config import Settings
from src.errors import InvalidParamsError, MethodNotFoundError, ToolError
from src.models import ToolRequest
from src.providers import Providers

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Argument models
# ---------------------------------------------------------------------------


class ToolArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CompanyJobPostingsArgs(ToolArguments):
    company: str = Field(min_length=1, description="Company name")
    country: Literal["Belgium", "Netherlands"] = Field(
        description="Country (Belgium or Netherlands)"
    )
    company_id: str = Field(alias="companyId", min_length=1, description="LinkedIn Company ID")


class JobPostingDetailsArgs(ToolArguments):
    job_id: str = Field(alias="jobId", min_length=1, description="LinkedIn Job ID")


class CompanyInformationArgs(ToolArguments):
    company_name: str = Field(
        alias="companyName", min_length=1, description="Company name to search for"
    )
    linkedin_id: Optional[str] = Field(
        default=None,
        alias="linkedInId",
        description=(
            'LinkedIn Company ID (from URL, e.g., "rtl-nederland" from '
            '"https://www.linkedin.com/company/rtl-nederland")'
        ),
    )


class EmployeeEmailArgs(ToolArguments):
    domain: str = Field(min_length=1, description='Company domain (e.g., "example.com")')
    first_name: str = Field(alias="firstName", min_length=1, description="First name of the employee")
    last_name: str = Field(alias="lastName", min_length=1, description="Last name of the employee")
    company_name: str = Field(alias="companyName", min_length=1, description="Company name")


class CompanyUrlsArgs(ToolArguments):
    urls: list[str] = Field(
        min_length=1,
        description=(
            "An array of LinkedIn company URLs to fetch information for "
            '(e.g., "https://www.linkedin.com/company/eneco")'
        ),
    )


class CompanyPostsArgs(ToolArguments):
    url: str = Field(
        min_length=1,
        description='LinkedIn company URL (e.g., "https://www.linkedin.com/company/eneco")',
    )


class SnapshotArgs(ToolArguments):
    snapshot_id: str = Field(
        min_length=1, description="The snapshot ID returned by the matching initiate tool"
    )
    wait: bool = Field(
        default=False,
        description=(
            "Block until the collection is ready (bounded polling) instead of "
            "returning the current progress"
        ),
    )


class JobSearchArgs(ToolArguments):
    location: Literal["The Netherlands", "Belgium"] = Field(
        description="Location to search for jobs"
    )
    country: Literal["NL", "BE"] = Field(description="Country code for the location")
    time_range: Literal["Past 24 hours", "Past week", "Past month", "Any time"] = Field(
        description="How recent the job postings should be"
    )
    company: str = Field(min_length=1, description="Specific company to search for jobs at")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ToolContext:
    """Everything a tool handler may use: configuration and provider clients."""

    settings: Settings
    providers: Providers


Handler = Callable[[ToolContext, Any], Awaitable[dict[str, Any]]]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    arguments: type[ToolArguments]
    handler: Handler

    @property
    def input_schema(self) -> dict[str, Any]:
        return self.arguments.model_json_schema()

    def to_mcp_tool(self) -> Tool:
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema)


async def _company_job_postings(ctx: ToolContext, args: CompanyJobPostingsArgs) -> dict:
    return await linkedin_jobs.fetch_company_job_postings(
        ctx.providers.scrapingdog,
        args.company,
        args.country,
        args.company_id,
        max_pages=ctx.settings.max_job_pages,
    )


async def _job_posting_details(ctx: ToolContext, args: JobPostingDetailsArgs) -> dict:
    return await linkedin_jobs.fetch_job_posting_details(ctx.providers.scrapingdog, args.job_id)


async def _company_information(ctx: ToolContext, args: CompanyInformationArgs) -> dict:
    return await linkedin_jobs.fetch_company_information(
        ctx.providers.scrapingdog, args.company_name, args.linkedin_id
    )


async def _employee_work_email(ctx: ToolContext, args: EmployeeEmailArgs) -> dict:
    return await email_finder.find_employee_email(
        ctx.providers.anymail,
        args.domain,
        args.first_name,
        args.last_name,
        args.company_name,
    )


async def _initiate_companies(ctx: ToolContext, args: CompanyUrlsArgs) -> dict:
    return await datasets.initiate_companies_data_collection(
        ctx.providers.bright_data, ctx.settings, args.urls
    )


async def _companies_data(ctx: ToolContext, args: SnapshotArgs) -> dict:
    return await datasets.get_companies_data(
        ctx.providers.bright_data, ctx.settings, args.snapshot_id, wait=args.wait
    )


async def _initiate_posts(ctx: ToolContext, args: CompanyPostsArgs) -> dict:
    return await datasets.initiate_company_posts_collection(
        ctx.providers.bright_data, ctx.settings, args.url
    )


async def _company_posts(ctx: ToolContext, args: SnapshotArgs) -> dict:
    return await datasets.get_company_posts(
        ctx.providers.bright_data, ctx.settings, args.snapshot_id, wait=args.wait
    )


async def _initiate_job_search(ctx: ToolContext, args: JobSearchArgs) -> dict:
    return await datasets.initiate_company_job_postings_collection(
        ctx.providers.bright_data,
        ctx.settings,
        args.location,
        args.country,
        args.time_range,
        args.company,
    )


async def _job_search_results(ctx: ToolContext, args: SnapshotArgs) -> dict:
    return await datasets.get_company_job_postings_snapshot(
        ctx.providers.bright_data, ctx.settings, args.snapshot_id, wait=args.wait
    )


EMPLOYEE_EMAIL_TOOL = ToolSpec(
    name="get_employee_work_email",
    description="Find work email address for an employee at a specific company",
    arguments=EmployeeEmailArgs,
    handler=_employee_work_email,
)

SCRAPINGDOG_TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="get_company_job_postings",
        description="Get technical job postings for a specified company",
        arguments=CompanyJobPostingsArgs,
        handler=_company_job_postings,
    ),
    ToolSpec(
        name="get_job_posting_details",
        description="Get detailed information about a specific job posting",
        arguments=JobPostingDetailsArgs,
        handler=_job_posting_details,
    ),
    ToolSpec(
        name="get_company_information",
        description=(
            "Get detailed profile information about a company from LinkedIn, "
            "including company details, employees, and recent updates"
        ),
        arguments=CompanyInformationArgs,
        handler=_company_information,
    ),
    EMPLOYEE_EMAIL_TOOL,
)

BRIGHT_DATA_TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="initiate_companies_data_collection",
        description=(
            "Start collecting LinkedIn company profiles for one or more company "
            "URLs.  Returns a snapshot_id to pass to get_companies_data."
        ),
        arguments=CompanyUrlsArgs,
        handler=_initiate_companies,
    ),
    ToolSpec(
        name="get_companies_data",
        description=(
            "Check a companies data collection and return the company profiles "
            "once it is ready"
        ),
        arguments=SnapshotArgs,
        handler=_companies_data,
    ),
    ToolSpec(
        name="initiate_company_posts_collection",
        description=(
            "Start collecting recent LinkedIn posts of a company.  Returns a "
            "snapshot_id to pass to get_company_posts."
        ),
        arguments=CompanyPostsArgs,
        handler=_initiate_posts,
    ),
    ToolSpec(
        name="get_company_posts",
        description="Check a company posts collection and return the posts grouped by company",
        arguments=SnapshotArgs,
        handler=_company_posts,
    ),
    ToolSpec(
        name="initiate_company_job_postings_collection",
        description=(
            "Start a LinkedIn job search for a company in Belgium or the "
            "Netherlands.  Returns a snapshot_id to pass to get_company_job_postings."
        ),
        arguments=JobSearchArgs,
        handler=_initiate_job_search,
    ),
    ToolSpec(
        name="get_company_job_postings",
        description=(
            "Check a job search collection and return the technical job "
            "postings once it is ready"
        ),
        arguments=SnapshotArgs,
        handler=_job_search_results,
    ),
    EMPLOYEE_EMAIL_TOOL,
)

VARIANTS: dict[str, tuple[ToolSpec, ...]] = {
    "brightdata": BRIGHT_DATA_TOOLS,
    "scrapingdog": SCRAPINGDOG_TOOLS,
}
DEFAULT_VARIANT = "brightdata"


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


def _describe_validation_error(exc: ValidationError) -> str:
    """Name the first missing or invalid field."""
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"]) or "arguments"
    if error["type"] in ("missing", "string_too_short") or (
        error["type"] == "string_type" and error.get("input") is None
    ):
        return f"Missing required parameter: {field}"
    return f"Invalid parameter {field}: {error['msg']}"


def _error_message(exc: ToolError) -> str:
    if exc.code == INTERNAL_ERROR:
        return f"Failed to process request: {exc}"
    return str(exc)


class ToolDispatcher:
    """Routes tool calls to their handlers."""

    def __init__(self, context: ToolContext, tools: Iterable[ToolSpec]):
        self.context = context
        self._tools: dict[str, ToolSpec] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            self._tools[tool.name] = tool

    @classmethod
    def for_variant(
        cls,
        variant: str = DEFAULT_VARIANT,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ToolDispatcher":
        if variant not in VARIANTS:
            raise ValueError(
                f"Unknown variant {variant!r}; choose from {', '.join(sorted(VARIANTS))}"
            )
        settings = settings or Settings.from_env()
        context = ToolContext(settings=settings, providers=Providers.from_settings(settings, transport))
        return cls(context, VARIANTS[variant])

    @property
    def tools(self) -> list[ToolSpec]:
        return list(self._tools.values())

    def list_tools(self) -> list[Tool]:
        return [tool.to_mcp_tool() for tool in self._tools.values()]

    async def execute(self, request: ToolRequest) -> dict[str, Any]:
        """Validate and run one request.  Raises :class:`ToolError` subclasses."""
        tool = self._tools.get(request.name)
        if tool is None:
            raise MethodNotFoundError(f"Unknown tool: {request.name}")

        try:
            args = tool.arguments.model_validate(request.arguments)
        except ValidationError as exc:
            raise InvalidParamsError(_describe_validation_error(exc)) from exc

        return await tool.handler(self.context, args)

    async def dispatch(self, name: str, arguments: Optional[dict[str, Any]]) -> list[TextContent]:
        """Run a tool call from the MCP client and wrap the result."""
        logger.info("Tool call: %s(%s)", name, json.dumps(arguments or {}, default=str)[:200])

        try:
            request = ToolRequest(name=name, arguments=arguments or {})
        except ValidationError as exc:
            raise McpError(
                ErrorData(code=InvalidParamsError.code, message="Tool arguments must be an object")
            ) from exc

        try:
            result = await self.execute(request)
        except ToolError as exc:
            logger.warning("Tool %s failed: %s", name, exc)
            raise McpError(ErrorData(code=exc.code, message=_error_message(exc))) from exc
        except Exception as exc:
            logger.exception("Tool %s failed", name)
            raise McpError(
                ErrorData(code=INTERNAL_ERROR, message=f"Failed to process request: {exc}")
            ) from exc

        return [TextContent(type="text", text=json.dumps(result, indent=2, ensure_ascii=False))]
