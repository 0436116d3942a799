from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import requests

from . import __version__
from .models import ItemRef
from .retry import RetryConfig, run_with_retries

DEFAULT_API_URL = "https://api.github.com"
USER_AGENT = f"labelcycle-rest/{__version__}"
HTTP_ERROR_STATUS = 400
PER_PAGE = 100


class GitHubAPIError(RuntimeError):
    """Raised when the GitHub REST API returns an error."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        response_text: str | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.response_text = response_text


@dataclass
class GitHubRestClient:
    """Label operations for issues and pull requests over the REST API.

    Pull requests share the issue label endpoints, so ``ItemRef.is_pr`` does
    not change the request path.
    """

    token: str
    base_url: str = DEFAULT_API_URL
    session: requests.Session | None = None
    timeout: float = 30
    retry: RetryConfig | None = None
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:  # pragma: no cover - simple wiring
        self._session = self.session or requests.Session()
        self._session.headers.setdefault("Authorization", f"Bearer {self.token}")
        self._session.headers.setdefault("Accept", "application/vnd.github+json")
        self._session.headers.setdefault("User-Agent", USER_AGENT)

    # ---- REST helpers -------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Any:
        url = (
            path
            if path.startswith("http")
            else f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        )

        def _run() -> Any:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=self._session.headers,
                timeout=self.timeout,
            )
            if response.status_code >= HTTP_ERROR_STATUS:
                message = f"GitHub API {method} {url} failed with {response.status_code}"
                retry_after = (getattr(response, "headers", None) or {}).get("Retry-After")
                if retry_after:
                    message += f" (retry after {retry_after})"
                raise GitHubAPIError(
                    message,
                    status=response.status_code,
                    response_text=response.text,
                )
            return response

        response = run_with_retries(_run, cfg=self.retry)
        if response.text:
            try:
                return response.json()
            except ValueError:  # pragma: no cover - non-JSON body
                return response.text
        return None

    def _paginate(
        self, path: str, *, params: dict[str, Any] | None = None
    ) -> list[Any]:
        params = dict(params or {})
        per_page = params.setdefault("per_page", PER_PAGE)
        params.setdefault("page", 1)
        results: list[Any] = []
        while True:
            data = self._request("GET", path, params=params)
            if not isinstance(data, list):
                break
            results.extend(data)
            if len(data) < per_page:
                break
            params["page"] = params.get("page", 1) + 1
        return results

    @staticmethod
    def _labels_path(item: ItemRef) -> str:
        return f"/repos/{item.owner}/{item.repo}/issues/{item.number}/labels"

    # ---- Label operations --------------------------------------------
    def fetch_labels(self, item: ItemRef) -> set[str]:
        data = self._paginate(self._labels_path(item))
        names: set[str] = set()
        for entry in data:
            if isinstance(entry, dict):
                name = entry.get("name")
                if isinstance(name, str):
                    names.add(name)
        return names

    def add_label(self, item: ItemRef, label: str) -> None:
        self._request("POST", self._labels_path(item), json_body={"labels": [label]})

    def remove_label(self, item: ItemRef, label: str) -> None:
        self._request("DELETE", f"{self._labels_path(item)}/{quote(label, safe='')}")


# Errors a label store call can surface to callers of handle_comment
LABEL_STORE_ERRORS = (GitHubAPIError, requests.RequestException)


__all__ = [
    "LABEL_STORE_ERRORS",
    "DEFAULT_API_URL",
    "GitHubAPIError",
    "GitHubRestClient",
]
