"""
HTTP client for the locations API.

Handles session setup with retries and maps the JSON envelope to return
values or ApiError.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from app.client.forms import LocationForm

DEFAULT_API_URL = "http://localhost:8000/api"


class ApiError(Exception):
    """Non-2xx answer from the API, with the server's violation list."""

    def __init__(self, status: int, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.errors = errors or []

    def __str__(self) -> str:
        if self.errors:
            return f"{self.message} ({self.status}): " + "; ".join(self.errors)
        return f"{self.message} ({self.status})"


class LocationsClient:
    """Client for the ``/locations`` endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 3,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root (``.../api``); defaults to TOILET_API_URL
            timeout: Request timeout in seconds
            max_retries: Retries for idempotent requests
            logger: Logger instance
        """
        self.base_url = (base_url or os.getenv("TOILET_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

        self.session = requests.Session()
        # creates are never retried: a lost response would duplicate the entry
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=1,
            status_forcelist=[502, 503, 504],
            allowed_methods=["GET", "DELETE"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self._url(path)
        self.logger.debug("%s %s", method, url)
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            self.logger.error("Request to %s failed: %s", url, e)
            raise ApiError(0, "Could not reach the server, please retry") from e

    @staticmethod
    def _payload(response: requests.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not response.ok:
            raise ApiError(
                response.status_code,
                body.get("message") or response.reason or "Request failed",
                body.get("errors"),
            )
        return body

    def list_locations(self) -> List[Dict[str, Any]]:
        return self._payload(self._request("GET", "locations")).get("data", [])

    def get_location(self, location_id: str) -> Optional[Dict[str, Any]]:
        response = self._request("GET", f"locations/{location_id}")
        if response.status_code == 404:
            return None
        return self._payload(response)["data"]

    def create_location(self, form: LocationForm, validate: bool = True) -> Dict[str, Any]:
        if validate:
            result = form.validate()
            if not result.ok:
                raise ApiError(400, "Validation error", result.violations)
        data, files = form.to_multipart()
        response = self._request("POST", "locations", data=data, files=files or None)
        return self._payload(response)["data"]

    def delete_location(self, location_id: str) -> bool:
        response = self._request("DELETE", f"locations/{location_id}")
        if response.status_code == 404:
            return False
        self._payload(response)
        return True

    def summary(self) -> Dict[str, Any]:
        return self._payload(self._request("GET", "locations/stats/summary"))["data"]

    def categories(self) -> List[str]:
        return self._payload(self._request("GET", "locations/meta"))["data"]["categories"]
