"""Tests for tool registration, argument validation and error mapping."""

import json

import httpx
import pytest
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND

from src.dispatcher import (
    BRIGHT_DATA_TOOLS,
    DEFAULT_VARIANT,
    SCRAPINGDOG_TOOLS,
    CompanyPostsArgs,
    ToolDispatcher,
    ToolSpec,
)
from src.errors import InvalidParamsError, MethodNotFoundError
from src.models import ToolRequest
from tests.helpers import ScriptedTransport, json_response

EMAIL_ARGS = {
    "domain": "eneco.nl",
    "firstName": "Jan",
    "lastName": "Jansen",
    "companyName": "Eneco",
}


def _dispatcher(settings, handler=None, variant="scrapingdog"):
    transport = ScriptedTransport(handler or (lambda r: json_response(500, {})))
    return ToolDispatcher.for_variant(variant, settings=settings, transport=transport), transport


class TestRegistry:
    def test_variants_have_distinct_tool_sets(self):
        scrapingdog = {tool.name for tool in SCRAPINGDOG_TOOLS}
        bright_data = {tool.name for tool in BRIGHT_DATA_TOOLS}

        assert scrapingdog == {
            "get_company_job_postings",
            "get_job_posting_details",
            "get_company_information",
            "get_employee_work_email",
        }
        assert bright_data == {
            "initiate_companies_data_collection",
            "get_companies_data",
            "initiate_company_posts_collection",
            "get_company_posts",
            "initiate_company_job_postings_collection",
            "get_company_job_postings",
            "get_employee_work_email",
        }

    def test_default_variant(self, settings):
        dispatcher = ToolDispatcher.for_variant(settings=settings)
        assert DEFAULT_VARIANT == "brightdata"
        assert len(dispatcher.tools) == len(BRIGHT_DATA_TOOLS)

    def test_unknown_variant(self, settings):
        with pytest.raises(ValueError, match="Unknown variant"):
            ToolDispatcher.for_variant("clearbit", settings=settings)

    def test_duplicate_names_rejected(self, settings):
        dispatcher, _ = _dispatcher(settings)
        tool = SCRAPINGDOG_TOOLS[0]
        with pytest.raises(ValueError, match="Duplicate tool name"):
            ToolDispatcher(dispatcher.context, [tool, tool])

    def test_list_tools_schemas(self, settings):
        dispatcher, _ = _dispatcher(settings)
        tools = {tool.name: tool for tool in dispatcher.list_tools()}

        schema = tools["get_employee_work_email"].inputSchema
        assert set(schema["required"]) == {"domain", "firstName", "lastName", "companyName"}

        info = tools["get_company_information"].inputSchema
        assert info["required"] == ["companyName"]
        assert "linkedInId" in info["properties"]

        postings = tools["get_company_job_postings"].inputSchema
        assert postings["properties"]["country"]["enum"] == ["Belgium", "Netherlands"]

    def test_snapshot_tools_accept_wait(self, settings):
        dispatcher, _ = _dispatcher(settings, variant="brightdata")
        tools = {tool.name: tool for tool in dispatcher.list_tools()}
        schema = tools["get_companies_data"].inputSchema
        assert schema["required"] == ["snapshot_id"]
        assert schema["properties"]["wait"]["default"] is False


class TestExecute:
    @pytest.mark.asyncio
    async def test_unknown_tool(self, settings):
        dispatcher, transport = _dispatcher(settings)
        with pytest.raises(MethodNotFoundError, match="Unknown tool: get_weather"):
            await dispatcher.execute(ToolRequest(name="get_weather"))
        assert transport.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["domain", "firstName", "lastName", "companyName"])
    async def test_missing_argument_named(self, settings, missing):
        dispatcher, transport = _dispatcher(settings)
        arguments = {k: v for k, v in EMAIL_ARGS.items() if k != missing}

        with pytest.raises(InvalidParamsError, match=f"Missing required parameter: {missing}"):
            await dispatcher.execute(ToolRequest(name="get_employee_work_email", arguments=arguments))
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_empty_string_counts_as_missing(self, settings):
        dispatcher, _ = _dispatcher(settings)
        arguments = dict(EMAIL_ARGS, domain="")
        with pytest.raises(InvalidParamsError, match="Missing required parameter: domain"):
            await dispatcher.execute(ToolRequest(name="get_employee_work_email", arguments=arguments))

    @pytest.mark.asyncio
    async def test_null_counts_as_missing(self, settings):
        dispatcher, transport = _dispatcher(settings)
        arguments = dict(EMAIL_ARGS, companyName=None)
        with pytest.raises(InvalidParamsError, match="Missing required parameter: companyName"):
            await dispatcher.execute(ToolRequest(name="get_employee_work_email", arguments=arguments))
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_invalid_enum_value(self, settings):
        dispatcher, transport = _dispatcher(settings)
        arguments = {"company": "Proximus", "country": "France", "companyId": "1"}
        with pytest.raises(InvalidParamsError, match="Invalid parameter country"):
            await dispatcher.execute(ToolRequest(name="get_company_job_postings", arguments=arguments))
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_empty_url_list(self, settings):
        dispatcher, _ = _dispatcher(settings, variant="brightdata")
        with pytest.raises(InvalidParamsError, match="urls"):
            await dispatcher.execute(
                ToolRequest(name="initiate_companies_data_collection", arguments={"urls": []})
            )


class TestDispatch:
    @pytest.mark.asyncio
    async def test_success_is_pretty_json(self, settings):
        body = {"success": True, "results": {"email": "jan@eneco.nl", "validation": "valid"}}
        dispatcher, _ = _dispatcher(settings, lambda r: json_response(200, body))

        content = await dispatcher.dispatch("get_employee_work_email", EMAIL_ARGS)

        assert len(content) == 1
        assert content[0].type == "text"
        assert "\n  " in content[0].text
        assert json.loads(content[0].text)["email"] == "jan@eneco.nl"

    @pytest.mark.asyncio
    async def test_unknown_tool_code(self, settings):
        dispatcher, _ = _dispatcher(settings)
        with pytest.raises(McpError) as exc_info:
            await dispatcher.dispatch("nope", {})
        assert exc_info.value.error.code == METHOD_NOT_FOUND
        assert exc_info.value.error.message == "Unknown tool: nope"

    @pytest.mark.asyncio
    async def test_missing_argument_code(self, settings):
        dispatcher, transport = _dispatcher(settings)
        with pytest.raises(McpError) as exc_info:
            await dispatcher.dispatch("get_job_posting_details", None)
        assert exc_info.value.error.code == INVALID_PARAMS
        assert exc_info.value.error.message == "Missing required parameter: jobId"
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_not_found_is_invalid_params(self, settings):
        dispatcher, _ = _dispatcher(settings, lambda r: json_response(404, {}))
        with pytest.raises(McpError) as exc_info:
            await dispatcher.dispatch("get_job_posting_details", {"jobId": "42"})
        assert exc_info.value.error.code == INVALID_PARAMS
        assert "Job posting with ID 42 not found" in exc_info.value.error.message

    @pytest.mark.asyncio
    async def test_insufficient_credits_is_internal(self, settings):
        dispatcher, _ = _dispatcher(settings, lambda r: json_response(402, {}))
        with pytest.raises(McpError) as exc_info:
            await dispatcher.dispatch("get_employee_work_email", EMAIL_ARGS)
        assert exc_info.value.error.code == INTERNAL_ERROR
        assert exc_info.value.error.message.startswith("Failed to process request: ")
        assert "insufficient credits" in exc_info.value.error.message.lower()

    @pytest.mark.asyncio
    async def test_missing_credential_is_internal(self, unconfigured_settings):
        dispatcher, transport = _dispatcher(unconfigured_settings)
        with pytest.raises(McpError) as exc_info:
            await dispatcher.dispatch("get_employee_work_email", EMAIL_ARGS)
        assert exc_info.value.error.code == INTERNAL_ERROR
        assert "Missing AnymailFinder API key" in exc_info.value.error.message
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_internal(self, settings):
        async def broken(ctx, args):
            raise RuntimeError("kaboom")

        base, _ = _dispatcher(settings)
        dispatcher = ToolDispatcher(
            base.context,
            [ToolSpec(name="broken", description="", arguments=CompanyPostsArgs, handler=broken)],
        )

        with pytest.raises(McpError) as exc_info:
            await dispatcher.dispatch("broken", {"url": "x"})
        assert exc_info.value.error.code == INTERNAL_ERROR
        assert exc_info.value.error.message == "Failed to process request: kaboom"

    @pytest.mark.asyncio
    async def test_transport_failure_is_internal(self, settings):
        def boom(request):
            raise httpx.ConnectError("no route", request=request)

        dispatcher, _ = _dispatcher(settings, boom)
        with pytest.raises(McpError) as exc_info:
            await dispatcher.dispatch("get_company_information", {"companyName": "Eneco"})
        assert exc_info.value.error.code == INTERNAL_ERROR

    @pytest.mark.asyncio
    async def test_bright_data_pending_round_trip(self, settings):
        def handler(request):
            if request.url.path.endswith("/trigger"):
                return json_response(200, {"snapshot_id": "s_1"})
            return json_response(200, {"status": "running"})

        dispatcher, transport = _dispatcher(settings, handler, variant="brightdata")

        started = await dispatcher.dispatch(
            "initiate_company_posts_collection", {"url": "https://www.linkedin.com/company/eneco"}
        )
        snapshot_id = json.loads(started[0].text)["snapshot_id"]
        pending = await dispatcher.dispatch("get_company_posts", {"snapshot_id": snapshot_id})

        assert json.loads(pending[0].text)["status"] == "running"
        assert transport.count("/trigger") == 1
        assert transport.count("/snapshot/") == 0
