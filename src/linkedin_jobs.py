"""LinkedIn job and company lookups through the ScrapingDog API."""

from __future__ import annotations

import logging
from typing import Any, Optional

from src.errors import InvalidParamsError, NotFoundError, ProviderError
from src.identifiers import generate_linkedin_id
from src.keywords import is_technical_job
from src.models import (
    CompanyProfile,
    JobPostingDetails,
    JobPostingSummary,
    ProfileUpdate,
    utc_timestamp,
)
from src.providers import ProviderClient

logger = logging.getLogger(__name__)

JOBS_PATH = "linkedinjobs"
PROFILE_PATH = "linkedin"

# LinkedIn geo ids used to scope job searches.
COUNTRY_GEO_IDS = {
    "Belgium": "100565514",
    "Netherlands": "102890719",
}

MAX_RECENT_UPDATES = 3


def _first_record(data: Any) -> Optional[dict]:
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


# ---------------------------------------------------------------------------
# Job postings
# ---------------------------------------------------------------------------


def normalize_job_posting(job: dict[str, Any]) -> JobPostingSummary:
    return JobPostingSummary(
        job_id=job.get("job_id"),
        job_position=job.get("job_position"),
        job_link=job.get("job_link"),
        company_name=job.get("company_name"),
        company_profile=job.get("company_profile"),
        job_location=job.get("job_location"),
        job_posting_date=job.get("job_posting_date"),
    )


async def fetch_company_job_postings(
    client: ProviderClient,
    company: str,
    country: str,
    company_id: str,
    max_pages: int = 50,
) -> dict[str, Any]:
    """Collect technical job postings for *company* across all result pages.

    Pages are requested from 1 upwards until the provider returns an empty page
    or answers "not found", which is how ScrapingDog signals the end of the
    results.
    """
    geoid = COUNTRY_GEO_IDS.get(country)
    if not geoid:
        raise InvalidParamsError(f"LinkedIn geoid not found for country: {country}")

    postings: list[JobPostingSummary] = []
    for page in range(1, max_pages + 1):
        logger.info("Fetching page %d for company %s", page, company)
        result = await client.get(
            JOBS_PATH,
            params={
                "field": company,
                "geoid": geoid,
                "page": page,
                "sort_by": "month",
                "filter_by_company": company_id,
            },
        )
        if not result.found:
            logger.info("Reached the end of available data at page %d", page)
            break
        if not result.data:
            logger.info("No more data returned on page %d", page)
            break
        if not isinstance(result.data, list):
            raise ProviderError(
                f"Unexpected job postings payload on page {page}: {result.data!r}"[:500],
                status_code=result.status_code,
            )

        technical = [
            posting
            for posting in (normalize_job_posting(job) for job in result.data)
            if is_technical_job(posting.job_position)
        ]
        logger.info("Found %d technical jobs on page %d", len(technical), page)
        postings.extend(technical)
    else:
        logger.warning("Stopped after %d pages for company %s", max_pages, company)

    return {
        "company": company,
        "country": country,
        "filteredJobPostings": [posting.to_dict() for posting in postings],
        "totalCount": len(postings),
        "timestamp": utc_timestamp(),
    }


async def fetch_job_posting_details(client: ProviderClient, job_id: str) -> dict[str, Any]:
    logger.info("Fetching details for job ID: %s", job_id)
    result = await client.get(JOBS_PATH, params={"job_id": job_id})
    if not result.found:
        raise NotFoundError(f"Job posting with ID {job_id} not found")

    job = _first_record(result.data)
    if not job:
        raise NotFoundError(f"No details found for job ID: {job_id}")

    details = JobPostingDetails(
        job_position=job.get("job_position"),
        job_location=job.get("job_location"),
        company_name=job.get("company_name"),
        company_linkedin_id=job.get("company_linkedin_id"),
        job_posting_time=job.get("job_posting_time"),
        job_description=job.get("job_description"),
        seniority_level=job.get("Seniority_level"),
        employment_type=job.get("Employment_type"),
        job_function=job.get("Job_function"),
        industries=job.get("Industries"),
    )
    return {
        "jobId": job_id,
        "jobDetails": details.to_dict(),
        "timestamp": utc_timestamp(),
    }


# ---------------------------------------------------------------------------
# Company profile
# ---------------------------------------------------------------------------


def normalize_company_profile(data: dict[str, Any]) -> CompanyProfile:
    updates = [
        ProfileUpdate(
            text=update.get("text"),
            posted_date=update.get("article_posted_date"),
            likes=update.get("total_likes"),
            title=update.get("article_title"),
            link=update.get("article_link"),
        )
        for update in (data.get("updates") or [])[:MAX_RECENT_UPDATES]
    ]
    return CompanyProfile(
        name=data.get("company_name"),
        company_id=data.get("linkedin_internal_id"),
        industry=data.get("industry"),
        specialties=data.get("specialties"),
        founded=data.get("founded"),
        company_size=data.get("company_size"),
        company_size_on_linkedin=data.get("company_size_on_linkedin"),
        company_type=data.get("type"),
        website=data.get("website"),
        headquarters=data.get("headquarters"),
        locations=data.get("locations"),
        about=data.get("about"),
        employees=data.get("employees"),
        recent_updates=updates,
    )


async def fetch_company_information(
    client: ProviderClient, company_name: str, linkedin_id: Optional[str] = None
) -> dict[str, Any]:
    link_id = linkedin_id
    if not link_id:
        link_id = generate_linkedin_id(company_name)
        logger.info("Generated LinkedIn ID: %s", link_id)

    result = await client.get(PROFILE_PATH, params={"type": "company", "linkId": link_id})
    if not result.found:
        raise NotFoundError(
            f"Company profile not found for: {company_name}. LinkedIn ID tried: {link_id}"
        )

    company = _first_record(result.data)
    if not company:
        raise NotFoundError(f"No information found for company: {company_name}")

    return {
        "companyName": company_name,
        "linkedInId": link_id,
        "companyData": normalize_company_profile(company).to_dict(),
        "timestamp": utc_timestamp(),
    }
