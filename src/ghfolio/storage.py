"""Tabular export of repositories using polars."""

from pathlib import Path

import polars as pl

from ghfolio.models import Repository

EXPORT_FORMATS = ("csv", "json", "parquet")

REPO_SCHEMA = {
    "id": pl.Utf8,
    "name": pl.Utf8,
    "description": pl.Utf8,
    "url": pl.Utf8,
    "homepage_url": pl.Utf8,
    "language": pl.Utf8,
    "stars": pl.Int64,
    "forks": pl.Int64,
    "topics": pl.Utf8,
    "created_at": pl.Utf8,
    "updated_at": pl.Utf8,
}


class RepositoryExporter:
    """Writes normalized repositories to CSV, JSON or Parquet.

    Rows are sorted by star count, most stars first. Topics are joined
    into one comma-separated column so every format shares the schema.

    Attributes:
        output_path: Destination file.
    """

    def __init__(self, output_path: Path):
        """Initialize exporter with the destination file.

        Args:
            output_path: File to write; parent directories are created.
        """
        self.output_path = output_path

    @staticmethod
    def to_frame(repos: list[Repository]) -> pl.DataFrame:
        """Build a DataFrame with one row per repository.

        Args:
            repos: Normalized repositories.

        Returns:
            DataFrame following REPO_SCHEMA.
        """
        rows = [
            {
                "id": r.id,
                "name": r.name,
                "description": r.description,
                "url": r.url,
                "homepage_url": r.homepage_url,
                "language": r.primary_language.name if r.primary_language else None,
                "stars": r.stargazer_count,
                "forks": r.fork_count,
                "topics": ",".join(sorted(r.topics)),
                "created_at": r.created_at,
                "updated_at": r.updated_at,
            }
            for r in repos
        ]
        df = pl.DataFrame(rows, schema=REPO_SCHEMA)
        return df.sort(["stars", "name"], descending=[True, False])

    def write(self, repos: list[Repository], output_format: str | None = None) -> int:
        """Export repositories.

        Args:
            repos: Normalized repositories.
            output_format: One of EXPORT_FORMATS; inferred from the file
                suffix when omitted.

        Returns:
            Number of rows written.

        Raises:
            ValueError: For an unsupported format.
        """
        output_format = output_format or self.output_path.suffix.lstrip(".")
        if output_format not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {output_format!r}")

        df = self.to_frame(repos)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)

        if output_format == "csv":
            df.write_csv(self.output_path)
        elif output_format == "json":
            df.write_json(self.output_path)
        else:
            df.write_parquet(self.output_path)

        return len(df)
