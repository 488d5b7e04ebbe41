"""GitHub API adapter."""

from typing import Any, Callable, Dict, List, TypeVar

import requests
from pydantic import ValidationError

from autobase.adapters.base import GitPlatformError, PlatformAdapter
from autobase.models import BranchUpdateResult, PullRequestDetail, PullRequestSummary, Repository, Review

PER_PAGE = 100

T = TypeVar("T")


def _label_names(data: Dict[str, Any]) -> List[str]:
    return [lb["name"] for lb in (data.get("labels") or []) if isinstance(lb, dict) and "name" in lb]


def _next_page_url(resp: requests.Response) -> str | None:
    links = getattr(resp, "links", None)
    if not isinstance(links, dict):
        return None
    return (links.get("next") or {}).get("url")


def _json(resp: requests.Response) -> Any:
    """Decode a successful response body; a non-JSON body is a platform error."""
    try:
        return resp.json()
    except ValueError as e:
        raise GitPlatformError(f"GitHub API returned invalid JSON: {e}") from e


def _convert(converter: Callable[[Dict[str, Any]], T], data: Any) -> T:
    """Build a model from one API object, mapping malformed data to GitPlatformError."""
    try:
        return converter(data)
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise GitPlatformError(f"Unexpected GitHub API response: {e!r}") from e


def _summary_from_api(data: Dict[str, Any]) -> PullRequestSummary:
    head = data.get("head") or {}
    base = data.get("base") or {}
    return PullRequestSummary(
        number=data["number"],
        labels=_label_names(data),
        draft=bool(data.get("draft")),
        base_branch=base.get("ref", ""),
        head_sha=head.get("sha", ""),
        state=data.get("state", "open"),
    )


def _detail_from_api(data: Dict[str, Any]) -> PullRequestDetail:
    return PullRequestDetail(
        number=data["number"],
        mergeable_state=data.get("mergeable_state"),
        rebaseable=data.get("rebaseable"),
        labels=_label_names(data),
    )


def _review_from_api(data: Dict[str, Any]) -> Review:
    user = data.get("user") or {}
    return Review(
        id=data.get("id"),
        state=data.get("state") or "",
        author=user.get("login", ""),
    )


class GitHubAdapter(PlatformAdapter):
    """GitHub REST API implementation of PlatformAdapter."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str = "https://api.github.com",
    ) -> None:
        self.token = token
        self.api_url = api_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = path if path.startswith("http") else f"{self.api_url}{path}"
        try:
            resp = self._session.request(method, url, timeout=30, **kwargs)
        except requests.RequestException as e:
            raise GitPlatformError(f"GitHub API request failed: {e}") from e
        if resp.status_code == 404:
            raise GitPlatformError(f"Not found: {path}")
        if resp.status_code >= 400:
            msg = resp.text
            try:
                data = resp.json()
                if "message" in data:
                    msg = data["message"]
            except (ValueError, TypeError):
                pass
            raise GitPlatformError(f"GitHub API error {resp.status_code}: {msg}")
        return resp

    def _get_paginated(self, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """GET every page of a list endpoint by following Link rel=next."""
        items: List[Dict[str, Any]] = []
        resp = self._request("GET", path, params={**params, "per_page": PER_PAGE})
        while True:
            page = _json(resp) or []
            if not isinstance(page, list):
                raise GitPlatformError(f"Expected a list from {path}, got {type(page).__name__}")
            items.extend(page)
            next_url = _next_page_url(resp)
            if not next_url:
                return items
            # next URL already carries the query string
            resp = self._request("GET", next_url)

    def get_repository(self, repo: str) -> Repository:
        """Fetch repository metadata.

        Args:
            repo: Repository in format owner/repo

        Returns:
            Repository with its default branch

        Raises:
            GitPlatformError: If the API call fails or repo not found
        """
        data = _json(self._request("GET", f"/repos/{repo}"))
        return _convert(
            lambda d: Repository(
                full_name=d.get("full_name") or repo,
                default_branch=d.get("default_branch") or "main",
            ),
            data,
        )

    def list_open_pull_requests(self, repo: str, base_branch: str) -> List[PullRequestSummary]:
        """List open PRs into base_branch sorted by creation time, oldest first."""
        data = self._get_paginated(
            f"/repos/{repo}/pulls",
            {"state": "open", "base": base_branch, "sort": "created", "direction": "asc"},
        )
        return [_convert(_summary_from_api, d) for d in data]

    def get_pull_request(self, repo: str, pr_number: int) -> PullRequestDetail:
        resp = self._request("GET", f"/repos/{repo}/pulls/{pr_number}")
        return _convert(_detail_from_api, _json(resp))

    def list_reviews(self, repo: str, pr_number: int) -> List[Review]:
        data = self._get_paginated(f"/repos/{repo}/pulls/{pr_number}/reviews", {})
        return [_convert(_review_from_api, d) for d in data]

    def update_branch(self, repo: str, pr_number: int, expected_head_sha: str) -> BranchUpdateResult:
        """Ask GitHub to rebase the PR branch onto its base.

        GitHub rejects the request with 422 when the head is no longer
        expected_head_sha; that surfaces as GitPlatformError like any other
        API failure.
        """
        resp = self._request(
            "PUT",
            f"/repos/{repo}/pulls/{pr_number}/update-branch",
            json={"expected_head_sha": expected_head_sha, "update_method": "rebase"},
        )
        return _convert(
            lambda d: BranchUpdateResult(message=d.get("message") or "", url=d.get("url") or ""),
            _json(resp) or {},
        )
