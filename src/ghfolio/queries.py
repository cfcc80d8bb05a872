"""Query definitions for the portfolio datasets."""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from functools import partial

from ghfolio.github_client import GitHubClient
from ghfolio.models import Profile, Repository, Statistics
from ghfolio.normalize import normalize_repository
from ghfolio.query import Query
from ghfolio.retry import RetryPolicy
from ghfolio.streaks import calculate_streaks

logger = logging.getLogger(__name__)

USER_KEY = "github_user"
PINNED_KEY = "github_pinned"
REPOS_KEY = "github_repos"
STATS_KEY = "github_stats"

PINNED_LIMIT = 6
MINUTE = 60


def top_repos(repos: Iterable[Repository], limit: int = PINNED_LIMIT) -> list[Repository]:
    """Return the ``limit`` most-starred repositories, most stars first."""
    return sorted(repos, key=lambda r: r.stargazer_count, reverse=True)[:limit]


def featured_repos(repos: Iterable[Repository], names: Iterable[str]) -> list[Repository]:
    """Return repositories whose name matches one of ``names``, ignoring case."""
    wanted = {name.lower() for name in names}
    return [r for r in repos if r.name.lower() in wanted]


async def fetch_user(client: GitHubClient, username: str) -> Profile:
    return await client.get_user(username)


async def fetch_pinned(client: GitHubClient, username: str) -> list[Repository]:
    """Fetch pinned repositories, substituting top repositories when none are pinned.

    The substitution happens only when the pinned lookup succeeds with zero
    items; errors propagate to the query's retry and fallback handling.
    """
    pinned = await client.get_pinned_repos(username)
    if pinned:
        return pinned

    logger.info("No pinned repositories for %s, using top repositories by stars", username)
    repos = await client.list_repos(username, sort="updated")
    return top_repos((r for r in repos if not r.is_fork), PINNED_LIMIT)


async def fetch_repos(client: GitHubClient, username: str) -> list[Repository]:
    """Fetch the user's own repositories, most recently updated first, forks excluded."""
    repos = await client.list_repos(username, sort="updated", repo_type="owner")
    return [r for r in repos if not r.is_fork]


async def fetch_stats(
    client: GitHubClient,
    username: str,
    today: Callable[[], date] = date.today,
) -> Statistics:
    """Aggregate profile, repository and contribution data into Statistics.

    Stars and forks are summed over every listed repository, forks included.
    """
    current = today()
    user, repos, calendar = await asyncio.gather(
        client.get_user(username),
        client.list_repos(username, sort="updated"),
        client.get_contribution_calendar(username, year=current.year),
    )
    streaks = calculate_streaks(calendar.days, today=current)

    return Statistics(
        total_contributions=calendar.total_contributions,
        total_repos=user.public_repos,
        total_stars=sum(r.stargazer_count for r in repos),
        total_forks=sum(r.fork_count for r in repos),
        current_streak=streaks.current_streak,
        longest_streak=streaks.longest_streak,
        contribution_years=calendar.contribution_years,
    )


def _encode_repos(repos: list[Repository]) -> list[dict]:
    return [r.to_dict() for r in repos]


def _decode_repos(payload: list[dict]) -> list[Repository]:
    return [normalize_repository(item) for item in payload]


@dataclass(frozen=True)
class PortfolioQueries:
    """The four portfolio datasets bound to one client and user."""

    user: Query[Profile]
    pinned: Query[list[Repository]]
    repos: Query[list[Repository]]
    stats: Query[Statistics]


def build_queries(
    client: GitHubClient,
    username: str,
    retry_base_delay: float = 1.0,
    today: Callable[[], date] = date.today,
) -> PortfolioQueries:
    """Build the query definitions for a user.

    Args:
        client: Open GitHub client.
        username: Portfolio owner's login.
        retry_base_delay: Delay before the first retry, in seconds.
        today: Returns the current date (used for the contribution year
            and current streak).

    Returns:
        PortfolioQueries ready for a QueryClient.
    """
    return PortfolioQueries(
        user=Query(
            key=USER_KEY,
            fetch=partial(fetch_user, client, username),
            encode=Profile.to_dict,
            decode=Profile.from_dict,
            stale_time=15 * MINUTE,
            gc_time=30 * MINUTE,
            retry=RetryPolicy(base_delay=retry_base_delay, max_delay=10),
        ),
        pinned=Query(
            key=PINNED_KEY,
            fetch=partial(fetch_pinned, client, username),
            encode=_encode_repos,
            decode=_decode_repos,
            # Pinned repos rarely change
            stale_time=30 * MINUTE,
            gc_time=60 * MINUTE,
            retry=RetryPolicy(base_delay=retry_base_delay, max_delay=30),
        ),
        repos=Query(
            key=REPOS_KEY,
            fetch=partial(fetch_repos, client, username),
            encode=_encode_repos,
            decode=_decode_repos,
            stale_time=10 * MINUTE,
            gc_time=20 * MINUTE,
            retry=RetryPolicy(base_delay=retry_base_delay, max_delay=30),
        ),
        stats=Query(
            key=STATS_KEY,
            fetch=partial(fetch_stats, client, username, today=today),
            encode=Statistics.to_dict,
            decode=Statistics.from_dict,
            stale_time=15 * MINUTE,
            gc_time=30 * MINUTE,
            retry=RetryPolicy(base_delay=retry_base_delay, max_delay=30),
        ),
    )
