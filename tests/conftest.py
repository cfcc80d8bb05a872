"""Shared test fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
import respx

from ghfolio.cache import CacheStore
from ghfolio.config import Settings


class FakeClock:
    """Controllable replacement for time.time."""

    def __init__(self, now: float = 1_735_689_600.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock starting at 2025-01-01T00:00:00Z."""
    return FakeClock()


@pytest.fixture
def cache_store(tmp_path: Path, clock: FakeClock) -> CacheStore:
    """Cache store in a temporary directory driven by the fake clock."""
    return CacheStore(tmp_path / "cache", clock=clock)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at temporary directories, with no retry delay."""
    return Settings(
        github_username="octocat",
        github_token="test_token",
        cache_dir=tmp_path / "cache",
        config_dir=tmp_path / "config",
        retry_base_delay=0,
    )


@pytest.fixture
def mock_github_api():
    """Mock GitHub API responses."""
    with respx.mock(base_url="https://api.github.com", assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
def make_rest_repo() -> Callable[..., dict]:
    """Factory for REST repository objects."""

    def _make(
        repo_id: int,
        name: str,
        stars: int = 0,
        forks: int = 0,
        fork: bool = False,
        language: str | None = "Python",
        topics: list[str] | None = None,
    ) -> dict:
        return {
            "id": repo_id,
            "name": name,
            "full_name": f"octocat/{name}",
            "owner": {"login": "octocat"},
            "description": f"The {name} project",
            "html_url": f"https://github.com/octocat/{name}",
            "homepage": "",
            "fork": fork,
            "stargazers_count": stars,
            "forks_count": forks,
            "language": language,
            "topics": topics or [],
            "created_at": "2023-05-01T10:00:00Z",
            "updated_at": "2024-12-20T10:00:00Z",
        }

    return _make


@pytest.fixture
def rest_user() -> dict:
    """REST /users/octocat response."""
    return {
        "login": "octocat",
        "name": "The Octocat",
        "bio": None,
        "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
        "location": "San Francisco",
        "email": None,
        "blog": "https://github.blog",
        "html_url": "https://github.com/octocat",
        "public_repos": 8,
        "public_gists": 8,
        "followers": 12000,
        "following": 9,
        "created_at": "2011-01-25T18:44:36Z",
    }


@pytest.fixture
def graphql_repo_node() -> dict:
    """GraphQL pinned repository node."""
    return {
        "id": "MDEwOlJlcG9zaXRvcnkxMjk2MjY5",
        "name": "Hello-World",
        "description": "My first repository on GitHub!",
        "url": "https://github.com/octocat/Hello-World",
        "homepageUrl": "",
        "stargazerCount": 2500,
        "forkCount": 2100,
        "createdAt": "2011-01-26T19:01:12Z",
        "updatedAt": "2024-12-01T08:00:00Z",
        "primaryLanguage": {"name": "Python", "color": "#3572A5"},
        "languages": {
            "nodes": [
                {"name": "Python", "color": "#3572A5"},
                {"name": "Shell", "color": "#89e051"},
            ]
        },
        "openGraphImageUrl": "https://opengraph.githubassets.com/abc/octocat/Hello-World",
        "repositoryTopics": {
            "nodes": [{"topic": {"name": "demo"}}, {"topic": {"name": "tutorial"}}]
        },
    }
