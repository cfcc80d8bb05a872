"""Adapters from GitHub response shapes to ghfolio view models.

GitHub describes a repository in two shapes: the REST ``repo`` object
(snake_case, ``stargazers_count``, a single ``language`` string) and the
GraphQL ``Repository`` node (camelCase, nested ``languages`` and
``repositoryTopics`` connections). Each shape has one mapping function and
both converge on :class:`~ghfolio.models.Repository`.
"""

from ghfolio.models import Language, Profile, Repository

# REST only reports the language name; GitHub's colors come from GraphQL.
DEFAULT_LANGUAGE_COLOR = "#000000"
OPEN_GRAPH_URL_TEMPLATE = "https://opengraph.githubassets.com/1/{owner}/{name}"


def _unique(names) -> list[str]:
    return list(dict.fromkeys(n for n in names if n))


def _language_from_dict(data: dict | None) -> Language | None:
    if not data or not data.get("name"):
        return None
    return Language(name=data["name"], color=data.get("color"))


def profile_from_rest(data: dict) -> Profile:
    """Map a REST ``/users/{username}`` response to a Profile.

    Args:
        data: Decoded JSON user object.

    Returns:
        Profile with missing optional fields set to None.
    """
    return Profile(
        login=data["login"],
        name=data.get("name") or None,
        bio=data.get("bio") or None,
        avatar_url=data.get("avatar_url"),
        location=data.get("location") or None,
        email=data.get("email") or None,
        blog=data.get("blog") or None,
        html_url=data.get("html_url"),
        public_repos=data.get("public_repos") or 0,
        public_gists=data.get("public_gists") or 0,
        followers=data.get("followers") or 0,
        following=data.get("following") or 0,
        created_at=data.get("created_at"),
    )


def repository_from_rest(data: dict, owner: str | None = None) -> Repository:
    """Map a REST repository object to a Repository.

    Args:
        data: Decoded JSON repository object.
        owner: Login used to build the social preview URL when the
            object carries no ``owner`` block.

    Returns:
        Normalized repository.
    """
    owner_login = (data.get("owner") or {}).get("login") or owner or ""
    language = data.get("language")
    primary = Language(name=language, color=DEFAULT_LANGUAGE_COLOR) if language else None

    return Repository(
        id=str(data["id"]),
        name=data["name"],
        description=data.get("description"),
        url=data.get("html_url"),
        homepage_url=data.get("homepage") or None,
        stargazer_count=data.get("stargazers_count") or 0,
        fork_count=data.get("forks_count") or 0,
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at"),
        primary_language=primary,
        languages=[primary] if primary else [],
        open_graph_image_url=OPEN_GRAPH_URL_TEMPLATE.format(
            owner=owner_login, name=data["name"]
        ),
        topics=_unique(data.get("topics") or []),
        is_fork=bool(data.get("fork", False)),
    )


def repository_from_graphql(node: dict) -> Repository:
    """Map a GraphQL ``Repository`` node to a Repository.

    Args:
        node: Repository node from a pinnedItems connection.

    Returns:
        Normalized repository.
    """
    languages = [
        lang
        for lang in (
            _language_from_dict(n) for n in (node.get("languages") or {}).get("nodes") or []
        )
        if lang is not None
    ]
    topic_nodes = (node.get("repositoryTopics") or {}).get("nodes") or []

    return Repository(
        id=str(node["id"]),
        name=node["name"],
        description=node.get("description"),
        url=node.get("url"),
        homepage_url=node.get("homepageUrl") or None,
        stargazer_count=node.get("stargazerCount") or 0,
        fork_count=node.get("forkCount") or 0,
        created_at=node.get("createdAt"),
        updated_at=node.get("updatedAt"),
        primary_language=_language_from_dict(node.get("primaryLanguage")),
        languages=languages,
        open_graph_image_url=node.get("openGraphImageUrl"),
        topics=_unique((t.get("topic") or {}).get("name") for t in topic_nodes),
        is_fork=bool(node.get("isFork", False)),
    )


def repository_from_dict(data: dict) -> Repository:
    """Rebuild a Repository from its to_dict() form."""
    return Repository(
        id=str(data["id"]),
        name=data["name"],
        description=data.get("description"),
        url=data.get("url"),
        homepage_url=data.get("homepage_url"),
        stargazer_count=data.get("stargazer_count") or 0,
        fork_count=data.get("fork_count") or 0,
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at"),
        primary_language=_language_from_dict(data.get("primary_language")),
        languages=[
            lang
            for lang in (_language_from_dict(d) for d in data.get("languages") or [])
            if lang is not None
        ],
        open_graph_image_url=data.get("open_graph_image_url"),
        topics=_unique(data.get("topics") or []),
        is_fork=bool(data.get("is_fork", False)),
    )


def normalize_repository(obj: Repository | dict, owner: str | None = None) -> Repository:
    """Normalize any known repository shape.

    Already-normalized input comes back unchanged, so applying this twice
    equals applying it once.

    Args:
        obj: A Repository, its to_dict() form, a REST object or a GraphQL node.
        owner: Owner login for REST objects without an ``owner`` block.

    Returns:
        Normalized repository.

    Raises:
        ValueError: If the dictionary matches no known shape.
    """
    if isinstance(obj, Repository):
        return obj
    if "stargazer_count" in obj:
        return repository_from_dict(obj)
    if "stargazers_count" in obj or "html_url" in obj:
        return repository_from_rest(obj, owner=owner)
    if "stargazerCount" in obj:
        return repository_from_graphql(obj)
    raise ValueError(f"Unrecognized repository shape: {sorted(obj)}")
