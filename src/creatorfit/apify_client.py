"""Apify actor-run client: submit a scrape, poll until it settles, fetch the dataset."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

import requests

logger = logging.getLogger(__name__)

# Fixed actor input; profile details plus up to 10 posts.
_RUN_INPUT: dict[str, Any] = {
    "resultsType": "details",
    "resultsLimit": 10,
    "searchType": "user",
    "addParentData": False,
    "searchLimit": 10,
    "includeNestedItems": True,
    "scrapeAbout": True,
    "scrapePosts": True,
    "postsLimit": 10,
    "scrapeUserPosts": True,
    "userPostsLimit": 10,
}

_REQUEST_TIMEOUT = 30


class ScrapeError(Exception):
    """Base class for every way a scrape run can fail."""


class SubmissionInvalidError(ScrapeError):
    """The run submission was not acknowledged with a run id."""


class MissingDatasetError(ScrapeError):
    """The run succeeded but did not expose a dataset id."""


class ProviderFailureError(ScrapeError):
    """Apify reported the run as FAILED."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Instagram scraping failed: {message}")
        self.provider_message = message


class ScrapeTimeoutError(ScrapeError):
    """No terminal status within the allowed number of checks."""


class ScrapeCancelledError(ScrapeError):
    """The caller's deadline passed or its cancel event fired."""


class ProviderHTTPError(ScrapeError):
    """Transport failure or non-2xx response from the Apify API."""


class ApifyScraper:
    """Runs the Instagram scraper actor and returns its raw dataset items."""

    def __init__(
        self,
        token: str,
        actor_id: str = "apify~instagram-scraper",
        base_url: str = "https://api.apify.com/v2",
        poll_interval: float = 10.0,
        max_attempts: int = 60,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not token:
            raise ValueError("APIFY_TOKEN is required but was empty.")
        self._runs_url = f"{base_url.rstrip('/')}/acts/{actor_id}/runs"
        self._datasets_url = f"{base_url.rstrip('/')}/datasets"
        self._poll_interval = poll_interval
        self._max_attempts = max_attempts
        self._sleep = sleep
        self._clock = clock
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {token}"})

    # ── public ──────────────────────────────────────────────────────────
    def scrape(
        self,
        profile_url: str,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> list[dict[str, Any]]:
        """Submit a run for *profile_url* and block until its dataset is ready.

        ``timeout`` is an overall deadline in seconds and ``cancel`` an event
        the caller may set; either one stops polling with
        :class:`ScrapeCancelledError`. Without them the run is bounded by
        ``max_attempts`` checks spaced ``poll_interval`` seconds apart.
        """
        started = self._clock()
        if cancel is not None and cancel.is_set():
            raise ScrapeCancelledError("Scrape cancelled before submission")

        run_id = self._submit(profile_url)
        logger.info("Submitted scrape run %s for %s", run_id, profile_url)

        for attempt in range(1, self._max_attempts + 1):
            self._pause(started, timeout, cancel)

            run = self._run_status(run_id)
            status = run.get("status")
            logger.debug("Run %s check %d/%d: %s", run_id, attempt, self._max_attempts, status)

            if status == "SUCCEEDED":
                dataset_id = run.get("defaultDatasetId")
                if not dataset_id:
                    raise MissingDatasetError(
                        f"Apify run {run_id} succeeded but dataset id missing"
                    )
                items = self._dataset_items(dataset_id)
                logger.info(
                    "Run %s succeeded after %d checks; %d records", run_id, attempt, len(items)
                )
                return items

            if status == "FAILED":
                message = run.get("statusMessage") or "Unknown error"
                logger.warning("Run %s failed: %s", run_id, message)
                raise ProviderFailureError(message)

        logger.warning("Run %s still not finished after %d checks", run_id, self._max_attempts)
        raise ScrapeTimeoutError("Scraping timeout - please try again")

    # ── private ─────────────────────────────────────────────────────────
    def _pause(
        self,
        started: float,
        timeout: float | None,
        cancel: threading.Event | None,
    ) -> None:
        """Wait one poll interval, honouring the caller's deadline and cancel event."""
        if timeout is not None:
            remaining = timeout - (self._clock() - started)
            if remaining < self._poll_interval:
                raise ScrapeCancelledError(
                    f"Scrape deadline of {timeout:g}s reached before the run finished"
                )
        if cancel is None:
            self._sleep(self._poll_interval)
        elif cancel.wait(self._poll_interval):
            raise ScrapeCancelledError("Scrape cancelled by caller")

    def _submit(self, profile_url: str) -> str:
        body = {"directUrls": [profile_url], **_RUN_INPUT}
        resp = self._request("POST", self._runs_url, json=body)
        try:
            data = resp.json()
        except ValueError as exc:
            raise SubmissionInvalidError("Apify run submission returned non-JSON body") from exc

        run = _run_object(data)
        run_id = run.get("id") if run is not None else None
        if not run_id:
            raise SubmissionInvalidError("Apify run did not return an id")
        return str(run_id)

    def _run_status(self, run_id: str) -> dict[str, Any]:
        resp = self._request("GET", f"{self._runs_url}/{run_id}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderHTTPError(f"Run {run_id} status was not JSON") from exc
        run = _run_object(data)
        if run is None:
            raise ProviderHTTPError(f"Run {run_id} status had no run object")
        return run

    def _dataset_items(self, dataset_id: str) -> list[dict[str, Any]]:
        resp = self._request(
            "GET", f"{self._datasets_url}/{dataset_id}/items", params={"format": "json"}
        )
        try:
            items = resp.json()
        except ValueError as exc:
            raise ProviderHTTPError(f"Dataset {dataset_id} items were not JSON") from exc
        if isinstance(items, dict):
            return [items]
        if not isinstance(items, list):
            raise ProviderHTTPError(f"Dataset {dataset_id} did not return a JSON array")
        return items

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            resp = self._session.request(method, url, timeout=_REQUEST_TIMEOUT, **kwargs)
        except requests.RequestException as exc:
            raise ProviderHTTPError(f"Apify request failed: {exc}") from exc
        if not resp.ok:
            raise ProviderHTTPError(
                f"Apify API returned {resp.status_code}: {resp.text[:500]}"
            )
        return resp


def _run_object(payload: Any) -> dict[str, Any] | None:
    """The ``data`` object of an actor-run response, or None if it is not a mapping."""
    if not isinstance(payload, dict):
        return None
    run = payload.get("data")
    return run if isinstance(run, dict) else None
