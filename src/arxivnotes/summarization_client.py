"""Summarization service API client."""

from __future__ import annotations

from urllib.parse import urljoin

import requests

from .logger import get_logger

logger = get_logger(__name__)


class SummarizationClient:
    """Thin API wrapper for the /check, /service and /status endpoints.

    Every method returns the raw response; status handling belongs to the caller.
    """

    def __init__(
        self,
        base_url: str,
        timeout_sec: int = 30,
        trust_env: bool = False,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_sec = timeout_sec
        self.session = session or requests.Session()
        self.session.trust_env = trust_env
        self.session.headers.update({"Content-Type": "application/json"})

    def _build_url(self, path: str) -> str:
        return urljoin(f"{self.base_url}/", path.lstrip("/"))

    def _post(self, path: str, payload: dict[str, object]) -> requests.Response:
        url = self._build_url(path)
        response = self.session.request(
            method="POST",
            url=url,
            json=payload,
            timeout=self.timeout_sec,
        )
        logger.debug("POST %s -> %s", path, response.status_code)
        return response

    def check(self, url: str, target_language: str) -> requests.Response:
        return self._post(
            "/check",
            {"url": url, "target_language": target_language, "status": "COMPLETED"},
        )

    def submit(
        self,
        url: str,
        api_key: str,
        translate: bool,
        target_language: str,
    ) -> requests.Response:
        return self._post(
            "/service",
            {
                "url": url,
                "api_key": api_key,
                "translate": translate,
                "target_language": target_language,
            },
        )

    def status(self, request_id: str) -> requests.Response:
        return self._post("/status", {"requestId": request_id})
