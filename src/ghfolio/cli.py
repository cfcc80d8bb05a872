"""Command-line interface for ghfolio."""

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ghfolio.cache import CacheStore
from ghfolio.config import get_settings
from ghfolio.models import Profile, Repository, Statistics
from ghfolio.portfolio import open_portfolio
from ghfolio.queries import PINNED_KEY, REPOS_KEY, STATS_KEY, USER_KEY
from ghfolio.query import QueryResult
from ghfolio.storage import EXPORT_FORMATS, RepositoryExporter

console = Console()

CACHE_KEYS = (USER_KEY, PINNED_KEY, REPOS_KEY, STATS_KEY)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _check(result: QueryResult) -> None:
    """Exit with status 1 when a query ended in error."""
    if result.is_error:
        console.print(f"[red]Error: {result.error}[/red]")
        raise SystemExit(1)


def _print_profile(profile: Profile) -> None:
    table = Table(title=f"{profile.name or profile.login} (@{profile.login})", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    for label, value in [
        ("Bio", profile.bio),
        ("Location", profile.location),
        ("Email", profile.email),
        ("Blog", profile.blog),
        ("Profile", profile.html_url),
        ("Repositories", profile.public_repos),
        ("Gists", profile.public_gists),
        ("Followers", profile.followers),
        ("Following", profile.following),
        ("Joined", (profile.created_at or "")[:10]),
    ]:
        if value not in (None, ""):
            table.add_row(label, str(value))

    console.print(table)


def _print_repos(repos: list[Repository], title: str) -> None:
    if not repos:
        console.print(f"[yellow]{title}: no repositories found[/yellow]")
        return

    table = Table(title=title)
    table.add_column("Repository", style="cyan")
    table.add_column("Language", style="green")
    table.add_column("Stars", justify="right")
    table.add_column("Forks", justify="right")
    table.add_column("Topics")
    table.add_column("Description")

    for repo in repos:
        table.add_row(
            repo.name,
            repo.primary_language.name if repo.primary_language else "",
            str(repo.stargazer_count),
            str(repo.fork_count),
            ", ".join(repo.topics),
            repo.description or "",
        )

    console.print(table)


def _print_stats(stats: Statistics) -> None:
    table = Table(title="GitHub Statistics", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Contributions this year", str(stats.total_contributions))
    table.add_row("Public repositories", str(stats.total_repos))
    table.add_row("Total stars", str(stats.total_stars))
    table.add_row("Total forks", str(stats.total_forks))
    table.add_row("Current streak (days)", str(stats.current_streak))
    table.add_row("Longest streak (days)", str(stats.longest_streak))
    table.add_row("Contribution years", ", ".join(str(y) for y in stats.contribution_years))

    console.print(table)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """GitHub portfolio data: profile, projects and contribution statistics."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _setup_logging(verbose)


@main.command()
def profile() -> None:
    """Show the portfolio owner's GitHub profile."""

    async def run() -> QueryResult:
        async with open_portfolio(get_settings()) as portfolio:
            return await portfolio.profile()

    result = asyncio.run(run())
    _check(result)
    _print_profile(result.data)


@main.command()
def projects() -> None:
    """Show pinned repositories (top repositories when none are pinned)."""

    async def run() -> QueryResult:
        async with open_portfolio(get_settings()) as portfolio:
            return await portfolio.pinned()

    result = asyncio.run(run())
    _check(result)
    _print_repos(result.data, "Pinned Repositories")


@main.command()
@click.option("--top", "-t", type=int, help="Show only the N most-starred repositories")
@click.option("--featured", "-f", multiple=True, help="Repository name(s) to feature")
@click.option("--use-featured-config", is_flag=True, help="Feature repos from config/featured.yaml")
def repos(top: int | None, featured: tuple[str, ...], use_featured_config: bool) -> None:
    """List public repositories (forks excluded).

    Examples:
        ghfolio repos                         # All repositories
        ghfolio repos -t 6                    # Six most-starred
        ghfolio repos -f ghfolio -f dotfiles  # Selected by name
    """

    async def run() -> QueryResult:
        async with open_portfolio(get_settings()) as portfolio:
            if featured:
                return await portfolio.featured_repos(featured)
            if use_featured_config:
                return await portfolio.featured_repos()
            if top:
                return await portfolio.top_repos(top)
            return await portfolio.repos()

    result = asyncio.run(run())
    _check(result)
    _print_repos(result.data, "Repositories")


@main.command()
def stats() -> None:
    """Show aggregate statistics and contribution streaks."""

    async def run() -> QueryResult:
        async with open_portfolio(get_settings()) as portfolio:
            return await portfolio.stats()

    result = asyncio.run(run())
    _check(result)
    _print_stats(result.data)


@main.command()
def show() -> None:
    """Fetch and show every dataset at once."""

    async def run():
        async with open_portfolio(get_settings()) as portfolio:
            return await portfolio.snapshot()

    snapshot = asyncio.run(run())
    failed = False

    for result, render in [
        (snapshot.profile, _print_profile),
        (snapshot.pinned, lambda data: _print_repos(data, "Pinned Repositories")),
        (snapshot.stats, _print_stats),
    ]:
        if result.is_error:
            console.print(f"[red]Error: {result.error}[/red]")
            failed = True
        else:
            render(result.data)

    if failed:
        raise SystemExit(1)


@main.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(EXPORT_FORMATS),
    default="csv",
)
@click.option("--output", "-o", type=click.Path(), help="Output file path")
@click.option("--top", "-t", type=int, help="Export only the N most-starred repositories")
def export(output_format: str, output: str | None, top: int | None) -> None:
    """Export repositories to a file.

    Examples:
        ghfolio export                            # CSV to exports/repos.csv
        ghfolio export -f parquet -o repos.pq     # Parquet
        ghfolio export -t 6 -f json               # Top six as JSON
    """

    async def run() -> QueryResult:
        async with open_portfolio(get_settings()) as portfolio:
            if top:
                return await portfolio.top_repos(top)
            return await portfolio.repos()

    result = asyncio.run(run())
    _check(result)

    output_path = Path(output or f"exports/repos.{output_format}")
    count = RepositoryExporter(output_path).write(result.data, output_format)
    console.print(f"[green]Exported {count} repositories to {output_path}[/green]")


@main.command("rate-limit")
def rate_limit() -> None:
    """Show the remaining GitHub API quota."""

    async def run():
        async with open_portfolio(get_settings()) as portfolio:
            return await portfolio.rate_limit()

    status = asyncio.run(run())
    if status is None:
        console.print("[red]Could not fetch rate limit status[/red]")
        raise SystemExit(1)

    console.print(
        f"[cyan]{status.remaining}[/cyan]/{status.limit} requests remaining, "
        f"resets at {status.reset.isoformat()}"
    )


@main.group()
def cache() -> None:
    """Manage the local response cache."""


@cache.command("clear")
@click.option("--key", "-k", type=click.Choice(CACHE_KEYS), help="Clear a single dataset")
def cache_clear(key: str | None) -> None:
    """Delete cached GitHub responses."""
    settings = get_settings()
    CacheStore(settings.cache_dir).clear(key)
    console.print(f"[green]Cleared {key or 'all cached data'}[/green]")


if __name__ == "__main__":
    main()
