"""Tests for CLI commands."""

from pathlib import Path

from click.testing import CliRunner

from ghfolio.cli import main


class TestCLI:
    """Tests for CLI commands."""

    def test_main_help(self) -> None:
        """Test main help output."""
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "GitHub portfolio data" in result.output

    def test_repos_help(self) -> None:
        """Test repos command help."""
        runner = CliRunner()
        result = runner.invoke(main, ["repos", "--help"])

        assert result.exit_code == 0
        assert "--top" in result.output
        assert "--featured" in result.output

    def test_export_help(self) -> None:
        """Test export command help."""
        runner = CliRunner()
        result = runner.invoke(main, ["export", "--help"])

        assert result.exit_code == 0
        assert "--format" in result.output

    def test_cache_clear(self, tmp_path: Path, monkeypatch) -> None:
        """Test cache clear removes cached datasets."""
        cache_dir = tmp_path / "cache"
        cache_dir.mkdir()
        (cache_dir / "github_user.json").write_text("{}")
        (cache_dir / "github_stats.json").write_text("{}")
        monkeypatch.setenv("GHFOLIO_CACHE_DIR", str(cache_dir))

        runner = CliRunner()
        result = runner.invoke(main, ["cache", "clear", "--key", "github_user"])

        assert result.exit_code == 0
        assert not (cache_dir / "github_user.json").exists()
        assert (cache_dir / "github_stats.json").exists()

        result = runner.invoke(main, ["cache", "clear"])

        assert result.exit_code == 0
        assert not (cache_dir / "github_stats.json").exists()

    def test_cache_clear_rejects_unknown_key(self) -> None:
        """Test only known datasets can be cleared individually."""
        runner = CliRunner()
        result = runner.invoke(main, ["cache", "clear", "--key", "other"])

        assert result.exit_code != 0
