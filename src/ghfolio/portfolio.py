"""Portfolio data access: one entry point over all portfolio queries."""

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Callable, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass, replace
from datetime import date

from ghfolio.cache import CacheStore
from ghfolio.config import Settings
from ghfolio.github_client import GitHubAPIError, GitHubClient
from ghfolio.models import Profile, RateLimitStatus, Repository, Statistics
from ghfolio.queries import PINNED_LIMIT, build_queries, featured_repos, top_repos
from ghfolio.query import QueryClient, QueryResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Results of all portfolio queries fetched together."""

    profile: QueryResult[Profile]
    pinned: QueryResult[list[Repository]]
    repos: QueryResult[list[Repository]]
    stats: QueryResult[Statistics]


class Portfolio:
    """Read-only query interface for the portfolio owner's GitHub data.

    Attributes:
        settings: Application settings.
        client: Open GitHub client.
        cache: Persisted payload cache.
        query_client: In-memory query results.
        queries: Query definitions for the configured user.
    """

    def __init__(
        self,
        client: GitHubClient,
        settings: Settings,
        clock: Callable[[], float] = time.time,
        today: Callable[[], date] = date.today,
    ):
        """Initialize with an open client.

        Args:
            client: GitHub client inside its async context.
            settings: Application settings.
            clock: Returns the current time in epoch seconds.
            today: Returns the current date.
        """
        self.settings = settings
        self.client = client
        self.cache = CacheStore(settings.cache_dir, clock=clock)
        self.query_client = QueryClient(self.cache, clock=clock)
        self.queries = build_queries(
            client,
            settings.github_username,
            retry_base_delay=settings.retry_base_delay,
            today=today,
        )

    async def profile(self) -> QueryResult[Profile]:
        return await self.query_client.fetch(self.queries.user)

    async def pinned(self) -> QueryResult[list[Repository]]:
        return await self.query_client.fetch(self.queries.pinned)

    async def repos(self) -> QueryResult[list[Repository]]:
        return await self.query_client.fetch(self.queries.repos)

    async def stats(self) -> QueryResult[Statistics]:
        return await self.query_client.fetch(self.queries.stats)

    async def top_repos(self, limit: int = PINNED_LIMIT) -> QueryResult[list[Repository]]:
        """Repositories with the most stars, derived from the repos query."""
        result = await self.repos()
        if result.data is None:
            return result
        return replace(result, data=top_repos(result.data, limit))

    async def featured_repos(
        self, names: Iterable[str] | None = None
    ) -> QueryResult[list[Repository]]:
        """Repositories picked by name, derived from the repos query.

        Args:
            names: Repository names; defaults to config/featured.yaml.
        """
        if names is None:
            names = self.settings.load_featured()
        names = list(names)
        result = await self.repos()
        if result.data is None:
            return result
        return replace(result, data=featured_repos(result.data, names))

    async def snapshot(self) -> PortfolioSnapshot:
        """Fetch every dataset concurrently."""
        profile, pinned, repos, stats = await asyncio.gather(
            self.profile(), self.pinned(), self.repos(), self.stats()
        )
        return PortfolioSnapshot(profile=profile, pinned=pinned, repos=repos, stats=stats)

    async def rate_limit(self) -> RateLimitStatus | None:
        """Current API rate limit, or None if it could not be fetched."""
        try:
            return await self.client.get_rate_limit()
        except GitHubAPIError as e:
            logger.error("Error checking rate limit: %s", e)
            return None


@asynccontextmanager
async def open_portfolio(
    settings: Settings,
    clock: Callable[[], float] = time.time,
    today: Callable[[], date] = date.today,
) -> AsyncIterator[Portfolio]:
    """Open a GitHub client and yield a Portfolio bound to it.

    Args:
        settings: Application settings.
        clock: Returns the current time in epoch seconds.
        today: Returns the current date.

    Yields:
        Portfolio ready for queries.
    """
    async with GitHubClient(
        token=settings.github_token,
        user_agent=settings.user_agent,
        timeout=settings.request_timeout,
    ) as client:
        yield Portfolio(client, settings, clock=clock, today=today)
