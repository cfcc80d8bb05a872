"""Data models for ghfolio."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Profile:
    """Public GitHub identity of the portfolio owner.

    Attributes:
        login: GitHub username.
        name: Display name (falls back to the login upstream).
        bio: Profile bio text.
        avatar_url: Avatar image URL.
        location: Free-form location.
        email: Public email address.
        blog: Personal website URL.
        html_url: Profile page URL.
        public_repos: Number of public repositories.
        public_gists: Number of public gists.
        followers: Follower count.
        following: Following count.
        created_at: Account creation timestamp (ISO format).
    """

    login: str
    name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    location: str | None = None
    email: str | None = None
    blog: str | None = None
    html_url: str | None = None
    public_repos: int = 0
    public_gists: int = 0
    followers: int = 0
    following: int = 0
    created_at: str | None = None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "login": self.login,
            "name": self.name,
            "bio": self.bio,
            "avatar_url": self.avatar_url,
            "location": self.location,
            "email": self.email,
            "blog": self.blog,
            "html_url": self.html_url,
            "public_repos": self.public_repos,
            "public_gists": self.public_gists,
            "followers": self.followers,
            "following": self.following,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Profile":
        """Rebuild a profile from its to_dict() form."""
        return cls(**data)


@dataclass(frozen=True)
class Language:
    """Programming language with its GitHub display color."""

    name: str
    color: str | None = None

    def to_dict(self) -> dict:
        return {"name": self.name, "color": self.color}


@dataclass(frozen=True)
class Repository:
    """Repository view model shared by the REST and GraphQL shapes.

    Absent upstream values are always None or an empty list.

    Attributes:
        id: Repository id as a string (REST numeric id or GraphQL node id).
        name: Repository name.
        description: Short description.
        url: Canonical GitHub URL.
        homepage_url: Project homepage, if set.
        stargazer_count: Number of stars.
        fork_count: Number of forks.
        created_at: Creation timestamp (ISO format).
        updated_at: Last update timestamp (ISO format).
        primary_language: Main language.
        languages: Languages ordered by size, largest first.
        open_graph_image_url: Social preview image URL.
        topics: Topic tags.
        is_fork: Whether the repository is a fork.
    """

    id: str
    name: str
    description: str | None = None
    url: str | None = None
    homepage_url: str | None = None
    stargazer_count: int = 0
    fork_count: int = 0
    created_at: str | None = None
    updated_at: str | None = None
    primary_language: Language | None = None
    languages: list[Language] = field(default_factory=list)
    open_graph_image_url: str | None = None
    topics: list[str] = field(default_factory=list)
    is_fork: bool = False

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "homepage_url": self.homepage_url,
            "stargazer_count": self.stargazer_count,
            "fork_count": self.fork_count,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "primary_language": (
                self.primary_language.to_dict() if self.primary_language else None
            ),
            "languages": [lang.to_dict() for lang in self.languages],
            "open_graph_image_url": self.open_graph_image_url,
            "topics": list(self.topics),
            "is_fork": self.is_fork,
        }


@dataclass(frozen=True)
class ContributionDay:
    """Contribution count for a single calendar day.

    Attributes:
        date: Day in ISO format (YYYY-MM-DD).
        contribution_count: Number of contributions made that day.
    """

    date: str
    contribution_count: int


@dataclass(frozen=True)
class ContributionCalendar:
    """Contribution calendar for one year.

    Attributes:
        total_contributions: Sum reported by GitHub for the period.
        days: Daily breakdown in calendar order.
        contribution_years: Years in which the user has any contributions.
    """

    total_contributions: int
    days: list[ContributionDay] = field(default_factory=list)
    contribution_years: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class Statistics:
    """Aggregate statistics for the portfolio owner.

    Attributes:
        total_contributions: Contributions in the current year.
        total_repos: Public repository count from the profile.
        total_stars: Stars summed over all listed repositories.
        total_forks: Forks summed over all listed repositories.
        current_streak: Consecutive contribution days ending today.
        longest_streak: Longest run of contribution days this year.
        contribution_years: Years with contribution history.
    """

    total_contributions: int = 0
    total_repos: int = 0
    total_stars: int = 0
    total_forks: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    contribution_years: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "total_contributions": self.total_contributions,
            "total_repos": self.total_repos,
            "total_stars": self.total_stars,
            "total_forks": self.total_forks,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "contribution_years": list(self.contribution_years),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Statistics":
        """Rebuild statistics from their to_dict() form."""
        return cls(**data)


@dataclass(frozen=True)
class RateLimitStatus:
    """Core API rate limit as reported by /rate_limit."""

    remaining: int
    limit: int
    reset: datetime
