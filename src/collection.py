"""Asynchronous dataset collection: trigger, poll for completion, fetch.

Bright Data collections run for minutes, so the workflow is exposed in two
shapes:

* **split**: :meth:`AsyncCollectionJob.submit` returns a snapshot handle at
  once, and :meth:`~AsyncCollectionJob.check` / :meth:`~AsyncCollectionJob.fetch`
  can be called later (and repeatedly) with that handle;
* **blocking**: :meth:`~AsyncCollectionJob.run` submits and then waits inside a
  bounded poll loop before fetching.

State transitions of a :class:`~src.models.CollectionJob`::

    submitted -> polling -> ready
                        \\-> error       (provider reported "error")
                        \\-> timed_out   (poll budget exhausted)

``error`` and ``timed_out`` are final; the caller has to submit a new job.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

from src.config import Settings
from src.errors import (
    CollectionError,
    CollectionFailedError,
    CollectionTimeoutError,
    NotFoundError,
)
from src.models import CollectionJob, CollectionStatus, ProgressReport
from src.providers import ProviderClient

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 10.0
DEFAULT_MAX_ATTEMPTS = 30


@dataclass(frozen=True)
class DatasetSpec:
    """A provider dataset and how its trigger call discovers records."""

    dataset_id: str
    label: str
    discover_by: Optional[str] = None

    def trigger_params(self) -> dict[str, str]:
        params = {"dataset_id": self.dataset_id, "include_errors": "true"}
        if self.discover_by:
            params["type"] = "discover_new"
            params["discover_by"] = self.discover_by
        return params


COMPANIES_DATASET = DatasetSpec("gd_l1vikfnt1wgvvqz95w", "companies data")
COMPANY_POSTS_DATASET = DatasetSpec(
    "gd_lyy3tktm25m4avu764", "LinkedIn posts", discover_by="company_url"
)
JOB_POSTINGS_DATASET = DatasetSpec(
    "gd_lpfll7v5hcqtkxl6l", "job postings", discover_by="keyword"
)


class AsyncCollectionJob:
    """Trigger / poll / fetch workflow for one dataset."""

    def __init__(
        self,
        client: ProviderClient,
        dataset: DatasetSpec,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.client = client
        self.dataset = dataset
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts

    @classmethod
    def from_settings(
        cls, client: ProviderClient, dataset: DatasetSpec, settings: Settings
    ) -> "AsyncCollectionJob":
        return cls(
            client,
            dataset,
            poll_interval=settings.poll_interval,
            max_attempts=settings.max_poll_attempts,
        )

    # ----- split workflow -----

    async def submit(self, records: list[dict[str, Any]]) -> CollectionJob:
        """Trigger a collection for *records* and return its handle."""
        logger.info(
            "Triggering %s collection for %d input record(s)",
            self.dataset.label,
            len(records),
        )
        result = await self.client.post(
            "trigger", params=self.dataset.trigger_params(), json_body=records
        )
        data = result.data
        snapshot_id = data.get("snapshot_id") if isinstance(data, dict) else None
        if not result.found or not snapshot_id:
            raise CollectionError(
                f"Failed to trigger {self.dataset.label} collection: Invalid response"
            )

        logger.info("Collection %s submitted for %s", snapshot_id, self.dataset.label)
        return CollectionJob(snapshot_id=snapshot_id, dataset_id=self.dataset.dataset_id)

    async def check(self, snapshot_id: str) -> ProgressReport:
        """Poll progress once.  Safe to repeat; never restarts the collection."""
        result = await self.client.get(f"progress/{snapshot_id}")
        if not result.found:
            raise NotFoundError(f"Snapshot {snapshot_id} not found")
        if result.data is None:
            raise CollectionError(
                "Failed to check dataset progress: Empty response", snapshot_id
            )

        payload = result.data if isinstance(result.data, dict) else {"raw": result.data}
        status = str(payload.get("status") or "processing").lower()
        logger.debug("Snapshot %s status: %s", snapshot_id, status)
        return ProgressReport(snapshot_id=snapshot_id, status=status, payload=payload)

    async def fetch(self, snapshot_id: str) -> list[dict[str, Any]]:
        """Download the finished snapshot as a list of records."""
        logger.info("Fetching %s snapshot %s", self.dataset.label, snapshot_id)
        result = await self.client.get(f"snapshot/{snapshot_id}", params={"format": "json"})
        if not result.found:
            raise NotFoundError(f"Snapshot {snapshot_id} not found")
        if result.data is None:
            raise CollectionError(
                f"Failed to fetch {self.dataset.label} snapshot: Empty response",
                snapshot_id,
            )

        records = result.data if isinstance(result.data, list) else [result.data]
        logger.info("Snapshot %s returned %d record(s)", snapshot_id, len(records))
        return records

    # ----- blocking workflow -----

    async def wait_until_ready(self, job: CollectionJob) -> CollectionJob:
        """Poll *job* until it is ready, failed, or out of attempts."""
        if job.status is CollectionStatus.READY:
            return job
        if job.is_terminal:
            raise CollectionError(
                f"Collection {job.snapshot_id} already ended with status "
                f"{job.status.value}; submit a new collection",
                job.snapshot_id,
            )

        job.status = CollectionStatus.POLLING
        for attempt in range(1, self.max_attempts + 1):
            report = await self.check(job.snapshot_id)
            job.attempts += 1
            job.last_progress = report.payload

            if report.is_ready:
                job.status = CollectionStatus.READY
                logger.info(
                    "Collection %s ready after %d poll(s)", job.snapshot_id, attempt
                )
                return job

            if report.is_error:
                job.status = CollectionStatus.ERROR
                logger.error(
                    "Collection %s failed: %s", job.snapshot_id, report.payload
                )
                raise CollectionFailedError(
                    f"Collection {job.snapshot_id} failed: {report.payload}",
                    job.snapshot_id,
                    report.payload,
                )

            logger.info(
                "Collection %s still %s (poll %d/%d)",
                job.snapshot_id,
                report.status,
                attempt,
                self.max_attempts,
            )
            if attempt < self.max_attempts:
                await asyncio.sleep(self.poll_interval)

        job.status = CollectionStatus.TIMED_OUT
        raise CollectionTimeoutError(
            f"Collection {job.snapshot_id} not ready after {self.max_attempts} polls",
            job.snapshot_id,
            self.max_attempts,
        )

    async def run(
        self, records: list[dict[str, Any]]
    ) -> tuple[CollectionJob, list[dict[str, Any]]]:
        """Submit, wait for completion and fetch in one call."""
        job = await self.submit(records)
        await self.wait_until_ready(job)
        return job, await self.fetch(job.snapshot_id)
