"""
Thin HTTP client for the projects API.

The base URL comes from ClientSettings (PROJECTDESK_API_BASE_URL) so that
deployments never depend on a hardcoded origin.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from projectdesk.core.config import get_client_settings

logger = logging.getLogger(__name__)

PROJECTS_PATH = "/api/projects"


class ApiError(Exception):
    """A failed API call. `message` is the server-supplied text, if any."""

    def __init__(self, status_code: Optional[int], message: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        super().__init__(message or f"API request failed with status {status_code}")


def _server_message(response: requests.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return None


class ProjectApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        user_id: Optional[str] = None,
    ):
        settings = get_client_settings()
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if user_id:
            self.session.headers["X-User-Id"] = user_id

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise ApiError(None) from e

        if not response.ok:
            message = _server_message(response)
            logger.warning(f"{method} {url} returned {response.status_code}: {message}")
            raise ApiError(response.status_code, message)
        try:
            return response.json()
        except ValueError:
            # 2xx with an empty or non-JSON body (e.g. an HTML page from a proxy)
            logger.warning(f"{method} {url} returned a non-JSON body")
            return None

    def list_projects(self) -> List[Dict[str, Any]]:
        return self._request("GET", PROJECTS_PATH)

    def get_project(self, project_id: str) -> Dict[str, Any]:
        return self._request("GET", f"{PROJECTS_PATH}/{project_id}")

    def create_project(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", PROJECTS_PATH, json=data)

    def update_project(self, project_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"{PROJECTS_PATH}/{project_id}", json=data)

    def delete_project(self, project_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"{PROJECTS_PATH}/{project_id}")
