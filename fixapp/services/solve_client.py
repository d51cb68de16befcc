#fixapp\services\solve_client.py
import json
import logging
import threading
from typing import Optional

import requests

from fixapp.core.config import settings
from fixapp.core.errors import SolveError

logger = logging.getLogger(__name__)

IMAGE_FIELD = "image"
IMAGE_FILENAME = "math_problem.jpg"
IMAGE_CONTENT_TYPE = "image/jpeg"


class SolveClient:
    """Forwards one image to the remote solve API. Single attempt, no retry."""

    def __init__(self, url: str, api_key: Optional[str], api_host: str,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.url = url
        self.api_key = api_key
        self.api_host = api_host
        self.timeout = timeout
        self.http = session or requests
        self._in_flight = threading.Lock()

    @classmethod
    def from_settings(cls) -> "SolveClient":
        return cls(
            url=settings.solve_api_url,
            api_key=settings.solve_api_key,
            api_host=settings.solve_api_host,
            timeout=settings.solve_api_timeout,
        )

    def _headers(self) -> dict:
        return {
            "x-rapidapi-key": self.api_key,
            "x-rapidapi-host": self.api_host,
        }

    def solve(self, image: bytes) -> str:
        if not self.api_key:
            raise SolveError.not_configured()
        if not image:
            raise SolveError.image_processing()
        if not self._in_flight.acquire(blocking=False):
            raise SolveError.busy()
        try:
            return self._post(image)
        finally:
            self._in_flight.release()

    def _post(self, image: bytes) -> str:
        files = {IMAGE_FIELD: (IMAGE_FILENAME, image, IMAGE_CONTENT_TYPE)}
        try:
            r = self.http.post(self.url, headers=self._headers(), files=files, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Solve request failed: %s", e)
            raise SolveError.transport(str(e)) from e

        if not r.ok:
            logger.warning("Solve API answered %s", r.status_code)
            raise SolveError.transport(f"Solve API returned HTTP {r.status_code}")
        if not r.content:
            raise SolveError.no_data()

        try:
            payload = r.json()
        except (ValueError, json.JSONDecodeError) as e:
            logger.warning("Solve API returned non-JSON body")
            raise SolveError.unparseable("Failed to parse response") from e

        solution = payload.get("solution") if isinstance(payload, dict) else None
        if not isinstance(solution, str) or not solution.strip():
            logger.warning("Solve API response has no solution field: %.200s", r.text)
            raise SolveError.unparseable()
        return solution
