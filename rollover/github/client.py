"""GitHub API client."""

import logging
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from rollover.config import DEFAULT_API_URL, RepoRef
from rollover.errors import AlreadyExists, RemoteFailure
from rollover.github.models import CheckMilestoneData, Milestone, MilestoneIssuesData
from rollover.github.queries import CHECK_MILESTONE_QUERY, MILESTONE_ISSUES_QUERY

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"

ModelT = TypeVar("ModelT", bound=BaseModel)


class GitHubClient:
    """Lightweight GitHub API client.

    Queries go through the GraphQL endpoint, mutations through REST. Calls are
    made one at a time and never retried; any failure raises RemoteFailure.
    """

    def __init__(self, token: str, base_url: str = DEFAULT_API_URL, timeout: float = 30):
        """Initialize GitHub client.

        Args:
            token: GitHub access token used for every call.
            base_url: REST API root. GraphQL is served at <base_url>/graphql.
            timeout: Per-request transport timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"token {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
            }
        )

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """Make a single API request.

        Args:
            method: HTTP method.
            url: Request URL.
            **kwargs: Additional request arguments.

        Returns:
            Response object with a 2xx status.

        Raises:
            RemoteFailure: On transport errors or a non-2xx status.
        """
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise RemoteFailure(f"{method} {url} failed: {e}") from e

        if response.status_code >= 400:
            message, codes = _error_details(response)
            raise RemoteFailure(
                f"{method} {url} returned {response.status_code}: {message}",
                status=response.status_code,
                codes=codes,
            )
        return response

    def graphql(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """Run a GraphQL query and return its `data` object.

        Raises:
            RemoteFailure: On HTTP failure, a non-JSON body, or GraphQL errors.
        """
        response = self._request(
            "POST", f"{self.base_url}/graphql", json={"query": query, "variables": variables}
        )
        try:
            body = response.json()
        except ValueError as e:
            raise RemoteFailure("GraphQL response is not JSON", status=response.status_code) from e

        if not isinstance(body, dict):
            raise RemoteFailure("GraphQL response is not an object", status=response.status_code)
        if body.get("errors"):
            messages = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err) for err in body["errors"]
            )
            raise RemoteFailure(f"GraphQL errors: {messages}", status=response.status_code)
        data = body.get("data")
        if not isinstance(data, dict):
            raise RemoteFailure("GraphQL response has no data", status=response.status_code)
        return data

    def _query(self, query: str, variables: Dict[str, Any], schema: Type[ModelT]) -> ModelT:
        data = self.graphql(query, variables)
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            raise RemoteFailure(f"Unexpected milestone response: {e}") from e

    def milestone_exists(self, repo: RepoRef, number: int) -> bool:
        """Check whether a milestone exists.

        Args:
            repo: Repository reference.
            number: Milestone number.

        Returns:
            True if the repository has a milestone with this number.
        """
        parsed = self._query(
            CHECK_MILESTONE_QUERY,
            {"owner": repo.owner, "name": repo.name, "milestone": number},
            CheckMilestoneData,
        )
        return parsed.repository.milestone is not None

    def get_milestone(self, repo: RepoRef, number: int, issues_count: int) -> Optional[Milestone]:
        """Get a milestone's title and open issues.

        Args:
            repo: Repository reference.
            number: Milestone number.
            issues_count: Maximum number of open issues to fetch.

        Returns:
            Milestone with up to issues_count open issues, or None if absent.

        Raises:
            RemoteFailure: If the title, issues or labels are missing from the response.
        """
        parsed = self._query(
            MILESTONE_ISSUES_QUERY,
            {"owner": repo.owner, "name": repo.name, "milestone": number, "first": issues_count},
            MilestoneIssuesData,
        )
        return parsed.repository.milestone

    def create_label(self, repo: RepoRef, name: str, color: str) -> Dict:
        """Create a repository label.

        Args:
            repo: Repository reference.
            name: Label name.
            color: Six-digit hex color without the leading '#'.

        Returns:
            Created label dict.

        Raises:
            AlreadyExists: If a label with this name is already defined.
        """
        url = f"{self.base_url}/repos/{repo.full_name}/labels"
        try:
            response = self._request("POST", url, json={"name": name, "color": color})
        except RemoteFailure as e:
            if e.status == 422 and "already_exists" in e.codes:
                raise AlreadyExists(
                    f"Label '{name}' already exists in {repo.full_name}", status=422, codes=e.codes
                ) from e
            raise
        return response.json()

    def add_labels(self, repo: RepoRef, issue_number: int, labels: List[str]) -> List[Dict]:
        """Add labels to an issue, keeping the ones it already has.

        Returns:
            The issue's label list after the addition.
        """
        url = f"{self.base_url}/repos/{repo.full_name}/issues/{issue_number}/labels"
        response = self._request("POST", url, json={"labels": labels})
        return response.json()

    def set_milestone(self, repo: RepoRef, issue_number: int, milestone: Optional[int]) -> Dict:
        """Assign an issue to a milestone, or clear it when milestone is None.

        Returns:
            Updated issue dict.
        """
        url = f"{self.base_url}/repos/{repo.full_name}/issues/{issue_number}"
        response = self._request("PATCH", url, json={"milestone": milestone})
        return response.json()


def _error_details(response: requests.Response) -> Tuple[str, List[str]]:
    """Extract the message and validation error codes from an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200], []
    if not isinstance(body, dict):
        return str(body), []
    message = str(body.get("message", ""))
    errors = body.get("errors")
    codes: List[str] = []
    if isinstance(errors, list):
        codes = [err["code"] for err in errors if isinstance(err, dict) and isinstance(err.get("code"), str)]
    if codes:
        message = f"{message} ({', '.join(codes)})"
    return message, codes
