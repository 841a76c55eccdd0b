from typing import Any, Dict, List, Optional

import requests
from loguru import logger

from task_manager.core.config import settings


class ClientRequestError(Exception):
    """Any transport failure or non-2xx answer from the task service."""


class TaskApiClient:
    """Thin ``requests`` wrapper around the task service REST API.

    Error bodies are never inspected: every failure is a ClientRequestError.
    Records are returned as plain dicts keyed by their wire names.
    """

    def __init__(self, base_url: str = None, timeout: float = None, session: requests.Session = None):
        self.base_url = (base_url or settings.TASKS_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.TASKS_API_TIMEOUT
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"❌ {method} {url} failed: {e}")
            raise ClientRequestError(str(e)) from e

        if not response.ok:
            logger.error(f"❌ {method} {url} returned {response.status_code}")
            raise ClientRequestError(f"{method} {path} returned {response.status_code}")
        try:
            return response.json()
        except ValueError as e:
            raise ClientRequestError(f"{method} {path} returned invalid JSON") from e

    def list_tasks(self, filter: str = "all", search: str = "") -> List[Dict[str, Any]]:
        params = {}
        if filter and filter != "all":
            params["filter"] = filter
        if search:
            params["search"] = search
        return self._request("GET", "/tasks", params=params)

    def create_task(self, text: str, important: bool = False) -> Dict[str, Any]:
        payload = {"text": text}
        if important:
            payload["important"] = True
        return self._request("POST", "/tasks", json=payload)

    def update_task(
        self,
        task_id: str,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
        important: Optional[bool] = None,
    ) -> Dict[str, Any]:
        changes = {"text": text, "completed": completed, "important": important}
        payload = {k: v for k, v in changes.items() if v is not None}
        return self._request("PUT", f"/tasks/{task_id}", json=payload)

    def delete_task(self, task_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/tasks/{task_id}")

    def get_stats(self) -> Dict[str, int]:
        return self._request("GET", "/tasks/stats")

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")

    def close(self):
        self.session.close()
