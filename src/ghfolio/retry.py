"""Retry policy for query fetches."""

from dataclasses import dataclass

from ghfolio.github_client import ErrorKind, GitHubAPIError


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff with a retryable-error predicate.

    Attributes:
        max_retries: Retries after the first failed attempt.
        base_delay: Delay before the first retry, in seconds.
        max_delay: Upper bound for any single delay, in seconds.
    """

    max_retries: int = 2
    base_delay: float = 1.0
    max_delay: float = 30.0

    def delay(self, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt`` (0-based)."""
        return min(self.base_delay * 2**attempt, self.max_delay)

    def is_retryable(self, error: GitHubAPIError) -> bool:
        """Whether an error is worth retrying at all.

        A dead connection is not retried; the cached copy is used instead.
        """
        return error.kind != ErrorKind.NETWORK_UNREACHABLE

    def should_retry(self, failure_count: int, error: GitHubAPIError) -> bool:
        """Whether to retry after ``failure_count`` failed attempts."""
        return failure_count <= self.max_retries and self.is_retryable(error)
