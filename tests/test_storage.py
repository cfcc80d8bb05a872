"""Tests for storage module."""

from pathlib import Path

import polars as pl
import pytest

from ghfolio.models import Language, Repository
from ghfolio.storage import REPO_SCHEMA, RepositoryExporter


@pytest.fixture
def sample_repos() -> list[Repository]:
    """Sample normalized repositories for testing."""
    return [
        Repository(
            id="1",
            name="ghfolio",
            stargazer_count=100,
            fork_count=20,
            primary_language=Language("Python", "#3572A5"),
            topics=["github", "cli"],
        ),
        Repository(id="2", name="dotfiles", stargazer_count=50, fork_count=10),
        Repository(id="3", name="aaa", stargazer_count=50),
    ]


class TestRepositoryExporter:
    """Tests for RepositoryExporter class."""

    def test_to_frame(self, sample_repos: list[Repository]) -> None:
        """Test rows are sorted by stars, then name."""
        df = RepositoryExporter.to_frame(sample_repos)

        assert df.columns == list(REPO_SCHEMA)
        assert df["name"].to_list() == ["ghfolio", "aaa", "dotfiles"]
        assert df["language"].to_list() == ["Python", None, None]
        assert df["topics"][0] == "cli,github"

    def test_to_frame_empty(self) -> None:
        """Test an empty list still yields the schema."""
        df = RepositoryExporter.to_frame([])

        assert df.is_empty()
        assert "stars" in df.columns

    def test_write_csv(self, tmp_path: Path, sample_repos: list[Repository]) -> None:
        """Test CSV export round-trips through polars."""
        path = tmp_path / "out" / "repos.csv"

        count = RepositoryExporter(path).write(sample_repos)

        assert count == 3
        df = pl.read_csv(path)
        assert df["stars"].to_list() == [100, 50, 50]

    def test_write_parquet(self, tmp_path: Path, sample_repos: list[Repository]) -> None:
        """Test Parquet export with an explicit format."""
        path = tmp_path / "repos.data"

        RepositoryExporter(path).write(sample_repos, "parquet")

        assert len(pl.read_parquet(path)) == 3

    def test_unsupported_format(self, tmp_path: Path, sample_repos: list[Repository]) -> None:
        """Test unknown formats are rejected."""
        with pytest.raises(ValueError):
            RepositoryExporter(tmp_path / "repos.xlsx").write(sample_repos)
