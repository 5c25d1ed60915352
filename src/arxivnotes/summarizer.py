"""Remote summarization job: precheck, submit, then poll with backoff."""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING, Any

import requests

from .exceptions import (
    ConfigError,
    InvalidUrlError,
    PollError,
    SubmissionError,
    SummaryTimeoutError,
)
from .identifiers import is_valid_arxiv_url, normalize_arxiv_url
from .logger import get_logger
from .models import JobState, SummarizationJob, SummaryResult
from .summarization_client import SummarizationClient

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

logger = get_logger(__name__)

ACCEPTED_STATUS_CODE = 202
BACKOFF_MULTIPLIER = 1.5
AI_DISCLAIMER = (
    "This summary was generated by AI and may be inaccurate. "
    "Please refer to the original paper for details."
)
SUMMARY_TEMPLATE = """## Arxiv Paper Summary

Source URL: {url}

### Summary
{summary}

---
{disclaimer}"""


def next_interval(interval: float, max_interval: float) -> float:
    return min(interval * BACKOFF_MULTIPLIER, max_interval)


def backoff_intervals(initial_interval: float, max_interval: float) -> Iterator[float]:
    """Yield the capped exponential sleep sequence used between polls."""

    interval = initial_interval
    while True:
        yield interval
        interval = next_interval(interval, max_interval)


def format_summary(result: Any, url: str) -> str:
    try:
        summary = result["summary"].replace("\\n", "\n").replace('\\"', '"')
    except (KeyError, TypeError, AttributeError) as exc:
        logger.warning("Summary field could not be decoded, embedding raw result: %s", exc)
        summary = json.dumps(result, ensure_ascii=False)

    return SUMMARY_TEMPLATE.format(url=url, summary=summary, disclaimer=AI_DISCLAIMER)


def render_summary(result: SummaryResult) -> str:
    return format_summary(result.raw_result, result.source_url)


class ArxivSummarizer:
    """Drive one summarization job through the remote service."""

    def __init__(
        self,
        client: SummarizationClient,
        api_key: str | None,
        target_language: str,
        translate: bool = False,
        max_attempts: int = 60,
        initial_interval_sec: float = 1.0,
        max_interval_sec: float = 10.0,
        initial_delay_sec: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        progress_callback: Callable[[str, str], None] | None = None,
    ) -> None:
        self.client = client
        self.api_key = api_key
        self.target_language = target_language
        self.translate = translate
        self.max_attempts = max_attempts
        self.initial_interval_sec = initial_interval_sec
        self.max_interval_sec = max_interval_sec
        self.initial_delay_sec = initial_delay_sec
        self._sleep = sleep
        self.progress_callback = progress_callback

    def _transition(self, job: SummarizationJob, state: JobState, details: str = "") -> None:
        job.state = state
        logger.info("Job %s -> %s %s", job.source_url, state.value, details)
        if self.progress_callback:
            self.progress_callback(state.value, details)

    def summarize(self, url: str) -> str:
        url = normalize_arxiv_url(url)
        if not is_valid_arxiv_url(url):
            raise InvalidUrlError(f"Not a valid arXiv URL: {url}")

        job = SummarizationJob(
            source_url=url,
            target_language=self.target_language,
            current_interval_sec=self.initial_interval_sec,
        )

        self._transition(job, JobState.PRECHECK)
        cached = self._precheck(job)
        if cached is not None:
            self._transition(job, JobState.CACHED_HIT, "server-side result reused")
            return render_summary(cached)

        self._transition(job, JobState.SUBMIT)
        job.request_id = self._submit(job)
        self._transition(job, JobState.ACCEPTED, f"request_id={job.request_id}")

        self._sleep(self.initial_delay_sec)
        return render_summary(self._poll(job))

    def _precheck(self, job: SummarizationJob) -> SummaryResult | None:
        try:
            response = self.client.check(job.source_url, job.target_language)
        except requests.RequestException as exc:
            logger.warning("Precheck request failed, treating as a miss: %s", exc)
            return None

        if response.status_code != 200 or not response.text:
            logger.info("Precheck miss: HTTP %s", response.status_code)
            return None

        try:
            envelope = json.loads(response.text)
            if not isinstance(envelope, dict) or not envelope.get("result"):
                return None
            parsed = json.loads(envelope["result"])
        except (ValueError, TypeError) as exc:
            logger.warning("Precheck result could not be decoded: %s", exc)
            return None

        if not parsed:
            return None
        return SummaryResult(raw_result=parsed, source_url=job.source_url)

    def _submit(self, job: SummarizationJob) -> str:
        if not self.api_key:
            self._transition(job, JobState.FAILED, "missing API key")
            raise ConfigError(
                "Missing required environment variables: OPENAI_API_KEY (or API_KEY)"
            )

        try:
            response = self.client.submit(
                url=job.source_url,
                api_key=self.api_key,
                translate=self.translate,
                target_language=job.target_language,
            )
        except requests.RequestException as exc:
            self._transition(job, JobState.FAILED, str(exc))
            raise SubmissionError(f"Summary request failed: {exc}") from exc

        if response.status_code != ACCEPTED_STATUS_CODE:
            self._transition(job, JobState.FAILED, f"HTTP {response.status_code}")
            raise SubmissionError(
                f"Summary request failed: {response.status_code} - {response.text[:500]}"
            )

        try:
            request_id = json.loads(response.text).get("request_id")
        except (ValueError, AttributeError) as exc:
            self._transition(job, JobState.FAILED, "malformed response")
            raise SubmissionError("Summary request returned a non-JSON body") from exc

        if not request_id:
            self._transition(job, JobState.FAILED, "missing request_id")
            raise SubmissionError("Summarization service did not return request_id")
        return str(request_id)

    def _poll(self, job: SummarizationJob) -> SummaryResult:
        self._transition(job, JobState.POLLING)
        intervals = backoff_intervals(self.initial_interval_sec, self.max_interval_sec)

        for attempt in range(self.max_attempts):
            job.attempt_count = attempt + 1
            payload = self._fetch_status(job)
            status = payload.get("status")

            if status == "COMPLETED":
                try:
                    parsed = json.loads(payload["result"])
                except (KeyError, ValueError, TypeError) as exc:
                    self._transition(job, JobState.ERROR, "malformed result")
                    raise PollError("Completed job returned a malformed result") from exc
                self._transition(job, JobState.COMPLETED, f"attempt {job.attempt_count}")
                return SummaryResult(
                    raw_result=parsed,
                    source_url=payload.get("url") or job.source_url,
                )

            if status == "ERROR":
                error = payload.get("error")
                self._transition(job, JobState.ERROR, str(error))
                raise PollError(f"Error while processing summary: {error}")

            if self.progress_callback:
                self.progress_callback(
                    JobState.POLLING.value,
                    f"Attempt {job.attempt_count}/{self.max_attempts} | Status: {status}",
                )

            if attempt < self.max_attempts - 1:
                job.current_interval_sec = next(intervals)
                self._sleep(job.current_interval_sec)

        self._transition(job, JobState.TIMEOUT, f"{self.max_attempts} attempts")
        raise SummaryTimeoutError(
            f"Summary timed out after {self.max_attempts} status requests"
        )

    def _fetch_status(self, job: SummarizationJob) -> dict[str, Any]:
        try:
            response = self.client.status(job.request_id or "")
        except requests.RequestException as exc:
            self._transition(job, JobState.ERROR, str(exc))
            raise PollError(f"Status request failed: {exc}") from exc

        if response.status_code != 200:
            self._transition(job, JobState.ERROR, f"HTTP {response.status_code}")
            raise PollError(
                f"Unexpected response status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = json.loads(response.text)
        except ValueError as exc:
            self._transition(job, JobState.ERROR, "malformed status")
            raise PollError("Status endpoint returned a non-JSON body") from exc
        if not isinstance(payload, dict):
            self._transition(job, JobState.ERROR, "malformed status")
            raise PollError("Status endpoint returned a non-object body")
        return payload
