"""Tests for the ScrapingDog job and company lookups."""

import httpx
import pytest

from src.errors import InvalidParamsError, NotFoundError, ProviderError
from src.linkedin_jobs import (
    fetch_company_information,
    fetch_company_job_postings,
    fetch_job_posting_details,
)
from src.providers import scrapingdog_client
from tests.helpers import ScriptedTransport, json_response


def _job(job_id, position):
    return {
        "job_id": job_id,
        "job_position": position,
        "job_link": f"https://www.linkedin.com/jobs/view/{job_id}",
        "company_name": "Proximus",
        "company_profile": "https://www.linkedin.com/company/proximus",
        "job_location": "Brussels",
        "job_posting_date": "2025-01-20",
    }


def _pages(pages, end_status=200):
    """Serve *pages* in order, then an empty page (or *end_status*)."""

    def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["page"])
        if page <= len(pages):
            return json_response(200, pages[page - 1])
        if end_status == 200:
            return json_response(200, [])
        return json_response(end_status, {"message": "No more jobs"})

    return ScriptedTransport(handler)


class TestCompanyJobPostings:
    @pytest.mark.asyncio
    async def test_paginates_until_empty_page(self, settings):
        transport = _pages(
            [
                [_job("1", "Senior Java Developer"), _job("2", "Receptionist")],
                [_job("3", "Data Engineer")],
            ]
        )
        client = scrapingdog_client(settings, transport)

        result = await fetch_company_job_postings(client, "Proximus", "Belgium", "2525")

        assert len(transport.requests) == 3
        assert result["totalCount"] == 2
        assert [job["jobId"] for job in result["filteredJobPostings"]] == ["1", "3"]
        assert result["company"] == "Proximus"
        assert result["country"] == "Belgium"

    @pytest.mark.asyncio
    async def test_not_found_ends_pagination(self, settings):
        transport = _pages([[_job("1", "DevOps Engineer")]], end_status=404)
        client = scrapingdog_client(settings, transport)

        result = await fetch_company_job_postings(client, "Proximus", "Belgium", "2525")

        assert result["totalCount"] == 1
        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_query_parameters(self, settings):
        transport = _pages([])
        client = scrapingdog_client(settings, transport)

        await fetch_company_job_postings(client, "Eneco", "Netherlands", "8888")

        params = transport.requests[0].url.params
        assert params["geoid"] == "102890719"
        assert params["field"] == "Eneco"
        assert params["filter_by_company"] == "8888"
        assert params["sort_by"] == "month"
        assert params["page"] == "1"
        assert params["api_key"] == "dog-key"

    @pytest.mark.asyncio
    async def test_page_cap(self, settings):
        transport = ScriptedTransport(lambda r: json_response(200, [_job("1", "Cloud Architect")]))
        client = scrapingdog_client(settings, transport)

        result = await fetch_company_job_postings(
            client, "Proximus", "Belgium", "2525", max_pages=3
        )

        assert len(transport.requests) == 3
        assert result["totalCount"] == 3

    @pytest.mark.asyncio
    async def test_unknown_country(self, settings):
        transport = _pages([])
        client = scrapingdog_client(settings, transport)

        with pytest.raises(InvalidParamsError, match="geoid not found"):
            await fetch_company_job_postings(client, "Proximus", "France", "2525")
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_unexpected_payload(self, settings):
        transport = ScriptedTransport(lambda r: json_response(200, {"error": "quota"}))
        client = scrapingdog_client(settings, transport)

        with pytest.raises(ProviderError):
            await fetch_company_job_postings(client, "Proximus", "Belgium", "2525")


class TestJobPostingDetails:
    @pytest.mark.asyncio
    async def test_details(self, settings):
        body = [
            {
                "job_position": "Platform Engineer",
                "job_location": "Ghent",
                "company_name": "Proximus",
                "Seniority_level": "Mid-Senior level",
                "Employment_type": "Full-time",
                "Job_function": "Engineering",
                "Industries": "Telecommunications",
            }
        ]
        transport = ScriptedTransport(lambda r: json_response(200, body))
        client = scrapingdog_client(settings, transport)

        result = await fetch_job_posting_details(client, "4100")

        assert result["jobId"] == "4100"
        details = result["jobDetails"]
        assert details["jobPosition"] == "Platform Engineer"
        assert details["seniorityLevel"] == "Mid-Senior level"
        assert details["employmentType"] == "Full-time"
        assert details["industries"] == "Telecommunications"
        assert transport.requests[0].url.params["job_id"] == "4100"

    @pytest.mark.asyncio
    async def test_not_found(self, settings):
        transport = ScriptedTransport(lambda r: json_response(404, {}))
        client = scrapingdog_client(settings, transport)

        with pytest.raises(NotFoundError, match="Job posting with ID 4100 not found"):
            await fetch_job_posting_details(client, "4100")

    @pytest.mark.asyncio
    async def test_empty_details(self, settings):
        transport = ScriptedTransport(lambda r: json_response(200, []))
        client = scrapingdog_client(settings, transport)

        with pytest.raises(NotFoundError, match="No details found for job ID: 4100"):
            await fetch_job_posting_details(client, "4100")


class TestCompanyInformation:
    PROFILE = {
        "company_name": "RTL Nederland",
        "linkedin_internal_id": "12345",
        "industry": "Broadcast Media",
        "company_size_on_linkedin": 1500,
        "type": "Privately Held",
        "updates": [
            {"text": f"post {i}", "article_posted_date": "1w", "total_likes": i}
            for i in range(5)
        ],
    }

    @pytest.mark.asyncio
    async def test_generates_linkedin_id(self, settings):
        transport = ScriptedTransport(lambda r: json_response(200, [self.PROFILE]))
        client = scrapingdog_client(settings, transport)

        result = await fetch_company_information(client, "RTL Nederland")

        params = transport.requests[0].url.params
        assert params["type"] == "company"
        assert params["linkId"] == "rtl-nederland"
        assert result["linkedInId"] == "rtl-nederland"
        data = result["companyData"]
        assert data["name"] == "RTL Nederland"
        assert data["companyId"] == "12345"
        assert data["companySizeOnLinkedIn"] == 1500
        assert data["companyType"] == "Privately Held"
        assert len(data["recentUpdates"]) == 3
        assert data["recentUpdates"][0]["postedDate"] == "1w"

    @pytest.mark.asyncio
    async def test_explicit_linkedin_id_wins(self, settings):
        transport = ScriptedTransport(lambda r: json_response(200, self.PROFILE))
        client = scrapingdog_client(settings, transport)

        result = await fetch_company_information(client, "RTL Nederland", "rtl-group")

        assert transport.requests[0].url.params["linkId"] == "rtl-group"
        assert result["linkedInId"] == "rtl-group"

    @pytest.mark.asyncio
    async def test_not_found_names_tried_id(self, settings):
        transport = ScriptedTransport(lambda r: json_response(404, {}))
        client = scrapingdog_client(settings, transport)

        with pytest.raises(NotFoundError) as exc_info:
            await fetch_company_information(client, "Acme Labs")

        assert str(exc_info.value) == (
            "Company profile not found for: Acme Labs. LinkedIn ID tried: acme-labs"
        )

    @pytest.mark.asyncio
    async def test_empty_profile(self, settings):
        transport = ScriptedTransport(lambda r: json_response(200, []))
        client = scrapingdog_client(settings, transport)

        with pytest.raises(NotFoundError, match="No information found for company: Acme"):
            await fetch_company_information(client, "Acme")
