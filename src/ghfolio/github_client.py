"""Async GitHub REST and GraphQL client."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any, Self

import httpx

from ghfolio.models import (
    ContributionCalendar,
    ContributionDay,
    Profile,
    RateLimitStatus,
    Repository,
)
from ghfolio.normalize import profile_from_rest, repository_from_graphql, repository_from_rest


class ErrorKind(StrEnum):
    """Classification of GitHub API failures."""

    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    UNAUTHENTICATED = "unauthenticated"
    NETWORK_UNREACHABLE = "network_unreachable"
    UNKNOWN = "unknown"


ERROR_MESSAGES = {
    ErrorKind.RATE_LIMITED: "API rate limit exceeded. Please try again later.",
    ErrorKind.NOT_FOUND: "Resource not found. Please check the URL.",
    ErrorKind.UNAUTHENTICATED: "Authentication failed. Please check your GitHub token.",
    ErrorKind.NETWORK_UNREACHABLE: "Unable to reach GitHub. Please check your connection.",
    ErrorKind.UNKNOWN: "An error occurred while fetching data from GitHub.",
}


def error_message(kind: ErrorKind) -> str:
    """Return the user-facing message for an error kind."""
    return ERROR_MESSAGES[kind]


class GitHubAPIError(Exception):
    """Base exception for GitHub API errors."""

    kind = ErrorKind.UNKNOWN

    @property
    def user_message(self) -> str:
        """Human-readable message for this error's kind."""
        return error_message(self.kind)


class RateLimitError(GitHubAPIError):
    """Raised when the API answers 403 (rate limit exceeded)."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(self, message: str, reset_at: datetime | None = None):
        """Initialize with reset time.

        Args:
            message: Error message.
            reset_at: When rate limit resets (UTC).
        """
        super().__init__(message)
        self.reset_at = reset_at


class AuthenticationError(GitHubAPIError):
    """Raised for authentication failures."""

    kind = ErrorKind.UNAUTHENTICATED


class NotFoundError(GitHubAPIError):
    """Raised when a user or resource doesn't exist."""

    kind = ErrorKind.NOT_FOUND


class NetworkError(GitHubAPIError):
    """Raised when GitHub could not be reached at all."""

    kind = ErrorKind.NETWORK_UNREACHABLE


PINNED_REPOS_QUERY = """
query($username: String!) {
  user(login: $username) {
    pinnedItems(first: 6, types: REPOSITORY) {
      nodes {
        ... on Repository {
          id
          name
          description
          url
          homepageUrl
          stargazerCount
          forkCount
          createdAt
          updatedAt
          primaryLanguage {
            name
            color
          }
          languages(first: 5, orderBy: {field: SIZE, direction: DESC}) {
            nodes {
              name
              color
            }
          }
          openGraphImageUrl
          repositoryTopics(first: 10) {
            nodes {
              topic {
                name
              }
            }
          }
        }
      }
    }
  }
}
"""

CONTRIBUTIONS_QUERY = """
query($username: String!, $from: DateTime!) {
  user(login: $username) {
    contributionsCollection(from: $from) {
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            contributionCount
            date
          }
        }
      }
      contributionYears
    }
  }
}
"""


@contextmanager
def _parsing(what: str) -> Iterator[None]:
    """Reclassify errors raised while reading a response body as GitHubAPIError."""
    try:
        yield
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise GitHubAPIError(f"Unexpected response shape for {what}: {e!r}") from e


class GitHubClient:
    """Async client for the GitHub REST and GraphQL APIs.

    Translates every failure into a GitHubAPIError subclass; raw httpx
    exceptions never escape. Performs no retries.

    Attributes:
        BASE_URL: GitHub API base URL.
    """

    BASE_URL = "https://api.github.com"

    def __init__(self, token: str = "", user_agent: str = "ghfolio", timeout: float = 30.0):
        """Initialize client.

        Args:
            token: Optional GitHub token; unauthenticated calls get lower
                rate limits and no GraphQL access.
            user_agent: User-Agent header value.
            timeout: Request timeout in seconds.
        """
        self.token = token
        self.user_agent = user_agent
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        """Enter async context manager."""
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self.user_agent,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers=headers,
            timeout=self.timeout,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        if self._client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        json: dict | None = None,
    ) -> Any:
        """Execute a single request and classify failures.

        Args:
            method: HTTP method.
            path: API endpoint path.
            params: Query string parameters.
            json: JSON request body.

        Returns:
            Decoded JSON response.

        Raises:
            RateLimitError: On HTTP 403.
            AuthenticationError: On HTTP 401.
            NotFoundError: On HTTP 404.
            NetworkError: When the request could not be sent or answered.
            GitHubAPIError: For any other failure.
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.RequestError as e:
            raise NetworkError(f"Request failed: {e}") from e

        if response.status_code == 200:
            try:
                return response.json()
            except ValueError as e:
                raise GitHubAPIError(f"Invalid JSON from {path}") from e

        if response.status_code == 401:
            raise AuthenticationError("Invalid or expired token")

        if response.status_code == 403:
            reset_at = None
            reset_header = response.headers.get("X-RateLimit-Reset")
            if reset_header and reset_header.isdigit():
                reset_at = datetime.fromtimestamp(int(reset_header), tz=UTC)
            raise RateLimitError("API rate limit exceeded", reset_at=reset_at)

        if response.status_code == 404:
            raise NotFoundError(f"Not found: {path}")

        raise GitHubAPIError(f"API error {response.status_code}: {response.text}")

    async def _graphql(self, query: str, variables: dict) -> dict:
        """Execute a GraphQL query and return its ``data`` block.

        Raises:
            NotFoundError: When GraphQL reports a NOT_FOUND error.
            GitHubAPIError: For any other GraphQL error.
        """
        payload = await self._request("POST", "/graphql", json={"query": query, "variables": variables})
        with _parsing("/graphql"):
            errors = payload.get("errors") or []
            if errors:
                if any(err.get("type") == "NOT_FOUND" for err in errors):
                    raise NotFoundError(errors[0].get("message", "Not found"))
                raise GitHubAPIError(f"GraphQL errors: {errors[:3]}")
            data = payload.get("data") or {}
            if not isinstance(data, dict):
                raise TypeError(f"data is {type(data).__name__}")
        return data

    async def get_user(self, username: str) -> Profile:
        """Fetch a user's public profile.

        Args:
            username: GitHub login.

        Returns:
            Profile snapshot.
        """
        data = await self._request("GET", f"/users/{username}")
        with _parsing(f"/users/{username}"):
            return profile_from_rest(data)

    async def list_repos(
        self,
        username: str,
        sort: str = "updated",
        per_page: int = 100,
        repo_type: str = "owner",
        max_pages: int = 10,
    ) -> list[Repository]:
        """List a user's public repositories, following pagination.

        Args:
            username: GitHub login.
            sort: Sort field (e.g. "updated", "pushed", "full_name").
            per_page: Page size (max 100).
            repo_type: Repository type filter ("owner", "all", "member").
            max_pages: Stop after this many pages.

        Returns:
            Normalized repositories in API order.
        """
        repos: list[Repository] = []
        for page in range(1, max_pages + 1):
            data = await self._request(
                "GET",
                f"/users/{username}/repos",
                params={"sort": sort, "per_page": per_page, "type": repo_type, "page": page},
            )
            with _parsing(f"/users/{username}/repos"):
                repos.extend(repository_from_rest(item, owner=username) for item in data)
                if len(data) < per_page:
                    break
        return repos

    async def get_pinned_repos(self, username: str) -> list[Repository]:
        """Fetch the first six repositories pinned on a user's profile.

        Args:
            username: GitHub login.

        Returns:
            Normalized pinned repositories; empty when nothing is pinned.
        """
        data = await self._graphql(PINNED_REPOS_QUERY, {"username": username})
        with _parsing("pinned items"):
            user = data.get("user") or {}
            nodes = (user.get("pinnedItems") or {}).get("nodes") or []
            # Non-repository pinned items come back as empty objects
            return [repository_from_graphql(node) for node in nodes if node.get("id")]

    async def get_contribution_calendar(
        self, username: str, year: int | None = None
    ) -> ContributionCalendar:
        """Fetch a user's contribution calendar from January 1 of a year.

        Args:
            username: GitHub login.
            year: Calendar year (defaults to the current year).

        Returns:
            Daily contribution counts, yearly total and contribution years.
        """
        year = year or date.today().year
        data = await self._graphql(
            CONTRIBUTIONS_QUERY,
            {"username": username, "from": f"{year}-01-01T00:00:00Z"},
        )
        with _parsing("contribution calendar"):
            collection = (data.get("user") or {}).get("contributionsCollection")
            if not collection:
                raise NotFoundError(f"No contribution data for {username}")

            calendar = collection["contributionCalendar"]
            days = [
                ContributionDay(date=day["date"], contribution_count=day["contributionCount"])
                for week in calendar.get("weeks") or []
                for day in week.get("contributionDays") or []
            ]
            return ContributionCalendar(
                total_contributions=calendar.get("totalContributions") or 0,
                days=days,
                contribution_years=list(collection.get("contributionYears") or []),
            )

    async def get_rate_limit(self) -> RateLimitStatus:
        """Fetch the core API rate limit status."""
        data = await self._request("GET", "/rate_limit")
        with _parsing("/rate_limit"):
            rate = data["rate"]
            return RateLimitStatus(
                remaining=rate["remaining"],
                limit=rate["limit"],
                reset=datetime.fromtimestamp(rate["reset"], tz=UTC),
            )
