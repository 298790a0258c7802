"""Bright Data dataset tools: companies, company posts and job postings.

Each dataset has an ``initiate_*`` coroutine that only submits the collection
and a ``get_*`` coroutine that checks progress and, once the snapshot is ready,
fetches and reshapes it.  ``get_*`` with ``wait=True`` blocks in the bounded
poll loop instead of returning a "still processing" answer.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable

from src.collection import (
    COMPANIES_DATASET,
    COMPANY_POSTS_DATASET,
    JOB_POSTINGS_DATASET,
    AsyncCollectionJob,
    DatasetSpec,
)
from src.config import Settings
from src.errors import CollectionFailedError, InvalidParamsError
from src.keywords import is_technical_job
from src.models import (
    CollectedJob,
    CollectionJob,
    CompanyPost,
    CompanyPostsGroup,
    CompanyUpdate,
    EmployeeSummary,
    JobCompany,
    JobDescription,
    NormalizedCompany,
    PostAuthorCompany,
    PostedAt,
    utc_timestamp,
)
from src.providers import ProviderClient

logger = logging.getLogger(__name__)

_COMPANY_SLUG = re.compile(r"company/([^/]+)")
NEXT_CHECK = "Please check again in a few moments"


def _collection(client: ProviderClient, dataset: DatasetSpec, settings: Settings) -> AsyncCollectionJob:
    return AsyncCollectionJob.from_settings(client, dataset, settings)


async def _check_and_fetch(
    job: AsyncCollectionJob,
    snapshot_id: str,
    wait: bool,
    pending_message: str,
) -> tuple[dict[str, Any] | None, list[dict[str, Any]]]:
    """Return ``(pending_response, [])`` while running, ``(None, records)`` when ready."""
    if wait:
        handle = CollectionJob(snapshot_id=snapshot_id, dataset_id=job.dataset.dataset_id)
        await job.wait_until_ready(handle)
    else:
        report = await job.check(snapshot_id)
        if report.is_error:
            raise CollectionFailedError(
                f"Collection {snapshot_id} failed: {report.payload}. "
                "Initiate a new collection to retry.",
                snapshot_id,
                report.payload,
            )
        if not report.is_ready:
            return (
                {
                    "status": report.status,
                    "message": pending_message,
                    "progress": report.payload,
                    "snapshot_id": snapshot_id,
                    "next_step": NEXT_CHECK,
                },
                [],
            )
    return None, await job.fetch(snapshot_id)


def _initiated(message: str, snapshot_id: str, tool: str, estimate: str, **extra: Any) -> dict:
    response: dict[str, Any] = {"message": message, **extra}
    response.update(
        {
            "snapshot_id": snapshot_id,
            "status": "processing",
            "next_step": f"Use the {tool} tool with this snapshot_id to retrieve results",
            "estimated_time": estimate,
        }
    )
    return response


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------


def normalize_company(raw: dict[str, Any]) -> NormalizedCompany:
    updates = [
        CompanyUpdate(
            text=update.get("text") or None,
            likes=update.get("likes_count") or 0,
            comments=update.get("comments_count") or 0,
            date=update.get("date") or update.get("time") or None,
            post_url=update.get("post_url") or None,
            images=update.get("images") or [],
        )
        for update in (raw.get("updates") or [])[:3]
    ]
    return NormalizedCompany(
        url=raw.get("url") or None,
        name=raw.get("name") or None,
        industry=raw.get("industries") or raw.get("industry") or None,
        description=raw.get("about") or None,
        website=raw.get("website") or None,
        headquarters=raw.get("headquarters") or None,
        founded_year=raw.get("founded") or None,
        company_size=raw.get("company_size") or None,
        specialties=raw.get("specialties") or None,
        followers=raw.get("followers") or None,
        company_id=raw.get("company_id") or None,
        organization_type=raw.get("organization_type") or None,
        locations=raw.get("locations") or raw.get("formatted_locations") or None,
        employees=EmployeeSummary(
            count=raw.get("employees_in_linkedin") or None,
            profiles=raw.get("employees") or [],
        ),
        updates=updates,
        similar=raw.get("similar") or [],
        affiliated=raw.get("affiliated") or [],
        logo=raw.get("logo") or None,
    )


async def initiate_companies_data_collection(
    client: ProviderClient, settings: Settings, urls: list[str]
) -> dict[str, Any]:
    if not urls:
        raise InvalidParamsError("You must provide at least one company URL")

    job = _collection(client, COMPANIES_DATASET, settings)
    handle = await job.submit([{"url": url} for url in urls])
    return _initiated(
        "Data collection has been initiated successfully",
        handle.snapshot_id,
        "get_companies_data",
        "This process typically takes 1-5 minutes depending on the number of companies",
    )


async def get_companies_data(
    client: ProviderClient, settings: Settings, snapshot_id: str, wait: bool = False
) -> dict[str, Any]:
    job = _collection(client, COMPANIES_DATASET, settings)
    pending, records = await _check_and_fetch(
        job, snapshot_id, wait, "Data collection is still in progress"
    )
    if pending:
        return pending
    return companies_response(snapshot_id, records)


async def collect_companies_data(
    client: ProviderClient, settings: Settings, urls: list[str]
) -> dict[str, Any]:
    """Blocking variant: submit, poll until ready and return the companies."""
    if not urls:
        raise InvalidParamsError("You must provide at least one company URL")
    job = _collection(client, COMPANIES_DATASET, settings)
    handle, records = await job.run([{"url": url} for url in urls])
    return companies_response(handle.snapshot_id, records)


def companies_response(snapshot_id: str, records: list[dict[str, Any]]) -> dict[str, Any]:
    companies = [normalize_company(record).to_dict() for record in records]
    return {
        "status": "ready",
        "message": "Data collection completed successfully",
        "companies": companies,
        "count": len(companies),
        "snapshot_id": snapshot_id,
        "timestamp": utc_timestamp(),
    }


# ---------------------------------------------------------------------------
# Company posts
# ---------------------------------------------------------------------------


def _post_company_id(post: dict[str, Any]) -> str:
    if post.get("user_id"):
        return str(post["user_id"])
    discovery_url = (post.get("discovery_input") or {}).get("url") or ""
    match = _COMPANY_SLUG.search(discovery_url)
    return match.group(1) if match else "unknown"


def _post_company_name(post: dict[str, Any], fallback: str) -> str:
    parts = (post.get("title") or "").split("|")
    name = parts[1].strip() if len(parts) > 1 else ""
    return name or fallback


def group_posts_by_company(posts: list[dict[str, Any]]) -> list[CompanyPostsGroup]:
    """Group raw post records by the company that published them.

    Companies keep the order in which they first appear.
    """
    companies: dict[str, PostAuthorCompany] = {}
    grouped: dict[str, list[CompanyPost]] = {}

    for post in posts:
        company_id = _post_company_id(post)
        if company_id not in companies:
            companies[company_id] = PostAuthorCompany(
                id=company_id,
                name=_post_company_name(post, company_id),
                url=post.get("use_url") or (post.get("discovery_input") or {}).get("url") or None,
                followers=post.get("user_followers") or 0,
                profile_picture=post.get("author_profile_pic") or None,
            )
            grouped[company_id] = []

        grouped[company_id].append(
            CompanyPost(
                id=post.get("id"),
                url=post.get("url"),
                text=post.get("post_text"),
                html_text=post.get("post_text_html"),
                date_posted=post.get("date_posted"),
                comments=post.get("num_comments"),
            )
        )

    return [
        CompanyPostsGroup(
            company=company,
            posts=grouped[company_id],
            posts_count=len(grouped[company_id]),
        )
        for company_id, company in companies.items()
    ]


async def initiate_company_posts_collection(
    client: ProviderClient, settings: Settings, url: str
) -> dict[str, Any]:
    if not url or "linkedin.com/company/" not in url:
        raise InvalidParamsError("You must provide a valid LinkedIn company URL")

    job = _collection(client, COMPANY_POSTS_DATASET, settings)
    handle = await job.submit([{"url": url}])
    return _initiated(
        "LinkedIn posts collection has been initiated successfully",
        handle.snapshot_id,
        "get_company_posts",
        "This process typically takes 2-6 minutes",
        company_url=url,
    )


async def get_company_posts(
    client: ProviderClient, settings: Settings, snapshot_id: str, wait: bool = False
) -> dict[str, Any]:
    job = _collection(client, COMPANY_POSTS_DATASET, settings)
    pending, records = await _check_and_fetch(
        job, snapshot_id, wait, "LinkedIn posts collection is still in progress"
    )
    if pending:
        return pending
    return company_posts_response(snapshot_id, records)


async def collect_company_posts(
    client: ProviderClient, settings: Settings, url: str
) -> dict[str, Any]:
    """Blocking variant: submit, poll until ready and return the grouped posts."""
    if not url or "linkedin.com/company/" not in url:
        raise InvalidParamsError("You must provide a valid LinkedIn company URL")
    job = _collection(client, COMPANY_POSTS_DATASET, settings)
    handle, records = await job.run([{"url": url}])
    return company_posts_response(handle.snapshot_id, records)


def company_posts_response(snapshot_id: str, records: list[dict[str, Any]]) -> dict[str, Any]:
    groups = group_posts_by_company(records)
    return {
        "status": "ready",
        "message": "LinkedIn posts collection completed successfully",
        "companyPosts": [group.to_dict() for group in groups],
        "companiesCount": len(groups),
        "totalPostsCount": sum(group.posts_count for group in groups),
        "snapshot_id": snapshot_id,
        "timestamp": utc_timestamp(),
    }


# ---------------------------------------------------------------------------
# Job postings
# ---------------------------------------------------------------------------


def normalize_collected_job(
    raw: dict[str, Any], classify: Callable[[str], bool] = is_technical_job
) -> CollectedJob:
    return CollectedJob(
        id=raw.get("job_posting_id"),
        title=raw.get("job_title"),
        company=JobCompany(
            name=raw.get("company_name"),
            id=raw.get("company_id"),
            url=raw.get("company_url"),
        ),
        location=raw.get("job_location"),
        country=raw.get("country_code"),
        url=raw.get("url"),
        posted=PostedAt(
            date=raw.get("job_posted_date"),
            relative_time=raw.get("job_posted_time"),
        ),
        applicants=raw.get("job_num_applicants"),
        description=JobDescription(
            summary=raw.get("job_summary"),
            formatted=raw.get("job_description_formatted"),
        ),
        is_technical=classify(raw.get("job_title") or ""),
    )


async def initiate_company_job_postings_collection(
    client: ProviderClient,
    settings: Settings,
    location: str,
    country: str,
    time_range: str,
    company: str,
) -> dict[str, Any]:
    search_params = {
        "location": location,
        "country": country,
        "time_range": time_range,
        "company": company,
    }
    job = _collection(client, JOB_POSTINGS_DATASET, settings)
    handle = await job.submit(_job_search_payload(**search_params))
    return _initiated(
        "Job search has been initiated successfully",
        handle.snapshot_id,
        "get_company_job_postings",
        "This process typically takes 2-5 minutes",
        search_params=search_params,
    )


def _job_search_payload(location: str, country: str, time_range: str, company: str) -> list[dict]:
    return [
        {
            "keyword": "",
            "location": location,
            "country": country,
            "time_range": time_range,
            "job_type": "",
            "experience_level": "",
            "remote": "",
            "company": company,
        }
    ]


async def collect_company_job_postings(
    client: ProviderClient,
    settings: Settings,
    location: str,
    country: str,
    time_range: str,
    company: str,
) -> dict[str, Any]:
    """Blocking variant: run the job search and return the technical postings."""
    job = _collection(client, JOB_POSTINGS_DATASET, settings)
    handle, records = await job.run(_job_search_payload(location, country, time_range, company))
    return job_postings_response(handle.snapshot_id, records)


async def get_company_job_postings_snapshot(
    client: ProviderClient, settings: Settings, snapshot_id: str, wait: bool = False
) -> dict[str, Any]:
    job = _collection(client, JOB_POSTINGS_DATASET, settings)
    pending, records = await _check_and_fetch(
        job, snapshot_id, wait, "Get company job postings is still in progress"
    )
    if pending:
        return pending
    return job_postings_response(snapshot_id, records)


def job_postings_response(snapshot_id: str, records: list[dict[str, Any]]) -> dict[str, Any]:
    technical = [
        posting
        for posting in (normalize_collected_job(record) for record in records)
        if posting.is_technical
    ]
    logger.info(
        "Snapshot %s: %d of %d job(s) are technical", snapshot_id, len(technical), len(records)
    )
    search = (records[0].get("discovery_input") if records else None) or {}
    return {
        "status": "ready",
        "message": "Get company job postings completed successfully",
        "jobs": [posting.to_dict() for posting in technical],
        "jobCount": len(technical),
        "searchParameters": {
            "location": search.get("location"),
            "country": search.get("country"),
            "timeRange": search.get("time_range"),
            "company": search.get("company"),
        },
        "snapshot_id": snapshot_id,
        "timestamp": utc_timestamp(),
    }
