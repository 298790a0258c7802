"""Work-email lookup through AnymailFinder."""

from __future__ import annotations

import logging
from typing import Any

from src.errors import ProviderError
from src.models import EmailNotFound, EmailResult
from src.providers import ProviderClient

logger = logging.getLogger(__name__)

SEARCH_PERSON_PATH = "search/person.json"


async def find_employee_email(
    client: ProviderClient,
    domain: str,
    first_name: str,
    last_name: str,
    company_name: str,
) -> dict[str, Any]:
    """Find the work email of one person at *domain*.

    "Not found" (HTTP 404 / 451) is a normal answer, not an error.
    """
    body = {
        "domain": domain,
        "first_name": first_name,
        "last_name": last_name,
        "full_name": f"{first_name} {last_name}",
        "company": company_name,
    }
    logger.info("Looking up work email for %s %s at %s", first_name, last_name, domain)

    result = await client.post(SEARCH_PERSON_PATH, json_body=body)
    if not result.found:
        return EmailNotFound().to_dict()

    data = result.data if isinstance(result.data, dict) else {}
    if not data.get("success"):
        raise ProviderError(
            f"Unknown error: {result.status_code} {data or 'empty response'}",
            status_code=result.status_code,
        )

    results = data.get("results") or {}
    return EmailResult(
        email=results.get("email"),
        valid=results.get("validation") == "valid",
        success=bool(data["success"]),
    ).to_dict()
