"""GitHub portfolio data layer: cached, retrying queries over the GitHub API."""

__version__ = "0.1.0"
