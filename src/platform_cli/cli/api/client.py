"""HTTP client for the Platform API."""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from .auth import get_credentials
from .cache import ResponseCache, request_signature
from .config import DEFAULT_TIMEOUT, PLATFORM_API_URL, USER_AGENT
from .types import Account, Environment, Integration, Project

logger = logging.getLogger(__name__)


class PlatformAPIError(Exception):
    """Platform API error with status code and message."""

    def __init__(
        self, status_code: int, message: str, details: dict | None = None
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{status_code}] {message}")


class PlatformClient:
    """HTTP client for the Platform API.

    Successful GET responses are kept in a file-backed ``ResponseCache``
    unless the client is created with ``use_cache=False``.
    """

    def __init__(
        self,
        base_url: str = PLATFORM_API_URL,
        timeout: int = DEFAULT_TIMEOUT,
        cache: ResponseCache | None = None,
        use_cache: bool = True,
    ) -> None:
        """Initialize the Platform API client.

        Args:
            base_url: Base URL for the Platform API.
            timeout: Request timeout in seconds.
            cache: Response cache to use (defaults to the user cache directory).
            use_cache: Whether GET responses are read from and written to the cache.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()
        if cache is None and use_cache:
            cache = ResponseCache()
        self.cache = cache if use_cache else None

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/v1{endpoint}"

    def _get_headers(self, authenticated: bool = True) -> dict[str, str]:
        """Get request headers.

        Raises:
            PlatformAPIError: If authenticated=True but no credentials found.
        """
        headers = {
            "User-Agent": USER_AGENT,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if authenticated:
            creds = get_credentials()
            if not creds:
                raise PlatformAPIError(
                    401, "Not authenticated. Run 'platform login' first."
                )
            headers["Authorization"] = f"{creds.token_type} {creds.token}"
        return headers

    def _request(
        self,
        method: str,
        endpoint: str,
        json_data: dict | None = None,
        params: dict | None = None,
        authenticated: bool = True,
    ) -> requests.Response:
        """Make request to Platform API.

        Args:
            method: HTTP method.
            endpoint: API endpoint (without /v1 prefix).
            json_data: JSON body data.
            params: URL query parameters.
            authenticated: Whether to include auth header.

        Returns:
            Response object.

        Raises:
            PlatformAPIError: On API errors or connection issues.
        """
        url = self._url(endpoint)
        headers = self._get_headers(authenticated)
        logger.debug("%s %s", method, url)

        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                json=json_data,
                params=params,
                timeout=self.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            raise PlatformAPIError(0, "Cannot connect to the Platform API") from e
        except requests.exceptions.Timeout as e:
            raise PlatformAPIError(0, "Request timed out") from e
        except requests.exceptions.RequestException as e:
            raise PlatformAPIError(0, "Network request failed") from e

        if response.status_code >= 400:
            try:
                error_data = response.json() if response.content else {}
            except (json.JSONDecodeError, ValueError):
                error_data = {}
            if not isinstance(error_data, dict):
                error_data = {}
            detail = (
                error_data.get("detail")
                or error_data.get("message")
                or error_data.get("title")
            )
            if detail and not isinstance(detail, str):
                detail = json.dumps(detail)
            raise PlatformAPIError(
                response.status_code,
                detail or response.reason,
                error_data.get("details"),
            )
        return response

    @staticmethod
    def _safe_json(resp: requests.Response) -> Any:
        """Parse JSON from response, raising PlatformAPIError on failure."""
        if not resp.content:
            return {}
        try:
            return resp.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise PlatformAPIError(
                resp.status_code,
                "Unexpected response from server. Please try again.",
            ) from e

    _T = TypeVar("_T", bound=BaseModel)

    @staticmethod
    def _safe_validate(model_cls: type[_T], data: Any) -> _T:
        """Validate data against a Pydantic model, raising PlatformAPIError on failure."""
        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            raise PlatformAPIError(
                0,
                "Unexpected response format from server. "
                "Try updating: pip install -U platform-cli",
            ) from e

    @staticmethod
    def _items(data: Any, key: str) -> list[Any]:
        """Extract a resource list from a bare array or a wrapped collection."""
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return list(data.get(key) or [])
        return []

    def _get_json(self, endpoint: str, params: dict | None = None) -> Any:
        """GET an endpoint, going through the response cache when enabled."""
        url = self._url(endpoint)
        key = None
        if self.cache is not None:
            creds = get_credentials()
            key = request_signature("GET", url, params, creds.token if creds else None)
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        data = self._safe_json(self._request("GET", endpoint, params=params))
        if key is not None and self.cache is not None:
            self.cache.set(key, url, data)
        return data

    def _invalidate(self, endpoint: str) -> None:
        if self.cache is not None:
            removed = self.cache.invalidate(self._url(endpoint))
            logger.debug("Invalidated %d cache entries for %s", removed, endpoint)

    def clear_cache(self) -> int:
        """Remove every cached response.

        Returns:
            Number of entries removed.
        """
        cache = self.cache if self.cache is not None else ResponseCache()
        return cache.clear()

    # ==================== AUTH ====================

    def get_account(self) -> Account:
        """Return the authenticated account (never cached)."""
        resp = self._request("GET", "/me")
        return self._safe_validate(Account, self._safe_json(resp))

    def validate_token(self) -> bool:
        """Validate current credentials.

        Returns:
            True if token is valid, False otherwise.
        """
        try:
            self.get_account()
        except PlatformAPIError:
            return False
        return True

    # ==================== PROJECTS ====================

    def list_projects(self) -> list[Project]:
        """List projects the account can access."""
        data = self._get_json("/projects")
        return [self._safe_validate(Project, p) for p in self._items(data, "projects")]

    def get_project(self, project_id: str) -> Project:
        """Get a project by ID."""
        data = self._get_json(f"/projects/{project_id}")
        return self._safe_validate(Project, data)

    # ==================== ENVIRONMENTS ====================

    def list_environments(self, project_id: str) -> list[Environment]:
        """List the environments of a project."""
        data = self._get_json(f"/projects/{project_id}/environments")
        return [
            self._safe_validate(Environment, e)
            for e in self._items(data, "environments")
        ]

    def get_environment(self, project_id: str, environment_id: str) -> Environment:
        """Get a single environment."""
        data = self._get_json(f"/projects/{project_id}/environments/{environment_id}")
        return self._safe_validate(Environment, data)

    # ==================== INTEGRATIONS ====================

    def list_integrations(self, project_id: str) -> list[Integration]:
        """List the integrations of a project."""
        data = self._get_json(f"/projects/{project_id}/integrations")
        return [
            self._safe_validate(Integration, i)
            for i in self._items(data, "integrations")
        ]

    def get_integration(self, project_id: str, integration_id: str) -> Integration:
        """Get a single integration."""
        data = self._get_json(f"/projects/{project_id}/integrations/{integration_id}")
        return self._safe_validate(Integration, data)

    def create_integration(
        self, project_id: str, values: dict[str, Any]
    ) -> Integration:
        """Create an integration from already validated form values.

        Args:
            project_id: Project ID.
            values: Integration properties, including ``type``.

        Returns:
            The created integration.
        """
        resp = self._request(
            "POST", f"/projects/{project_id}/integrations", json_data=values
        )
        self._invalidate(f"/projects/{project_id}/integrations")
        return self._safe_validate(Integration, self._unwrap(self._safe_json(resp)))

    def update_integration(
        self, project_id: str, integration_id: str, values: dict[str, Any]
    ) -> Integration:
        """Update the given properties of an integration."""
        resp = self._request(
            "PATCH",
            f"/projects/{project_id}/integrations/{integration_id}",
            json_data=values,
        )
        self._invalidate(f"/projects/{project_id}/integrations")
        return self._safe_validate(Integration, self._unwrap(self._safe_json(resp)))

    def delete_integration(self, project_id: str, integration_id: str) -> None:
        """Delete an integration."""
        self._request("DELETE", f"/projects/{project_id}/integrations/{integration_id}")
        self._invalidate(f"/projects/{project_id}/integrations")

    @staticmethod
    def _unwrap(data: Any) -> Any:
        """Return the resource from a mutation response.

        Mutations answer either with the resource itself or with an activity
        wrapper of the form ``{"_embedded": {"entity": {...}}}``.
        """
        if isinstance(data, dict) and "_embedded" in data:
            return data["_embedded"].get("entity", data)
        return data
