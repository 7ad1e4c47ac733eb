"""Tests for the command-line interface."""

import json

import yaml
from typer.testing import CliRunner

from songrank import __version__
from songrank.cli import app, parse_positions

runner = CliRunner()


def write_catalog(tmp_path, ids=("A", "B")) -> str:
    data = {
        "title": "CLI Test",
        "output_dir": str(tmp_path / "sessions"),
        "songs": [{"id": i, "name": f"Song {i}"} for i in ids],
    }
    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.dump(data))
    return str(path)


class TestParsePositions:
    """Tests for parse_positions."""

    def test_converts_to_zero_based(self):
        """Test 1-based positions become 0-based indices."""
        assert parse_positions(["1", "3"], 2) == [0, 2]

    def test_rejects_wrong_count(self):
        """Test the argument count must match."""
        assert parse_positions(["1"], 2) is None

    def test_rejects_non_numbers(self):
        """Test non-numeric input is refused."""
        assert parse_positions(["x"], 1) is None


class TestCli:
    """Tests for CLI commands."""

    def test_version(self):
        """Test --version prints the version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_validate(self, tmp_path):
        """Test validate reports catalog stats."""
        result = runner.invoke(app, ["validate", write_catalog(tmp_path, ("A", "B", "C"))])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "Matchups: 3" in result.output

    def test_validate_missing_file(self, tmp_path):
        """Test a missing catalog exits with an error."""
        result = runner.invoke(app, ["validate", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1

    def test_rank_two_songs(self, tmp_path):
        """Test one vote finishes a two-song session and saves reports."""
        catalog = write_catalog(tmp_path)
        result = runner.invoke(
            app, ["rank", catalog, "--session-id", "s1", "--seed", "1"], input="1\n"
        )
        assert result.exit_code == 0, result.output
        assert "All matchups complete" in result.output
        assert (tmp_path / "sessions" / "s1" / "reports" / "ranking.md").exists()

    def test_rank_quit_without_persisting(self, tmp_path):
        """Test quitting early with --no-persist writes nothing."""
        catalog = write_catalog(tmp_path, ("A", "B", "C"))
        result = runner.invoke(app, ["rank", catalog, "--no-persist"], input="r\nl 1\nq\n")
        assert result.exit_code == 0, result.output
        assert "locked" in result.output
        assert not (tmp_path / "sessions").exists()

    def test_resume_requires_session_id(self, tmp_path):
        """Test --resume without --session-id is refused."""
        result = runner.invoke(app, ["rank", write_catalog(tmp_path), "--resume"])
        assert result.exit_code == 1

    def test_show_replays_session(self, tmp_path):
        """Test show prints the ranking of a stored session."""
        catalog = write_catalog(tmp_path)
        runner.invoke(app, ["rank", catalog, "--session-id", "s1"], input="2\n")
        result = runner.invoke(app, ["show", catalog, "--session-id", "s1"])
        assert result.exit_code == 0, result.output
        assert "1/1" in result.output

    def test_show_unknown_session(self, tmp_path):
        """Test show refuses a session that does not exist."""
        result = runner.invoke(app, ["show", write_catalog(tmp_path), "--session-id", "ghost"])
        assert result.exit_code == 1

    def test_rank_refuses_existing_session_without_resume(self, tmp_path):
        """Test a second run on a stored session must resume it."""
        catalog = write_catalog(tmp_path, ("A", "B", "C"))
        runner.invoke(app, ["rank", catalog, "--session-id", "s1"], input="1\nq\n")

        result = runner.invoke(app, ["rank", catalog, "--session-id", "s1"], input="2\nq\n")
        assert result.exit_code == 1
        assert "already has 1 votes" in result.output
        assert "--resume" in result.output

        lines = (tmp_path / "sessions" / "s1" / "matchups.jsonl").read_text().splitlines()
        assert len(lines) == 1

    def test_resume_continues_sequence(self, tmp_path):
        """Test resumed votes extend the stored log with fresh indices."""
        catalog = write_catalog(tmp_path, ("A", "B", "C"))
        runner.invoke(app, ["rank", catalog, "--session-id", "s1"], input="1\nq\n")
        result = runner.invoke(
            app, ["rank", catalog, "--session-id", "s1", "--resume"], input="2\nq\n"
        )
        assert result.exit_code == 0, result.output
        assert "Replayed 1 votes" in result.output

        lines = (tmp_path / "sessions" / "s1" / "matchups.jsonl").read_text().splitlines()
        indices = [json.loads(line)["sequence_index"] for line in lines]
        assert indices == [0, 1]
