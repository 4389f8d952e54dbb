"""Tests for the devdash command-line interface."""

import json
from datetime import datetime
from unittest.mock import patch

import pytest

from devdash import cli
from devdash.database import InMemoryAnalysisStore
from devdash.models import FileType, RepoFile, RepoInfo


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch("devdash.cli.setup_logging"):
        yield


@pytest.fixture
def shared_store():
    """One in-memory store reused by every get_store call in a test."""
    store = InMemoryAnalysisStore()
    with patch("devdash.cli.get_store", return_value=store):
        yield store


class TestParser:
    """Tests for argument parsing."""

    def test_global_flags(self):
        args = cli.build_parser().parse_args(
            ["--log-level", "DEBUG", "--backend", "memory", "history", "alice", "--limit", "3"]
        )

        assert args.log_level == "DEBUG"
        assert args.backend == "memory"
        assert args.username == "alice"
        assert args.limit == 3
        assert args.func is cli.history_command

    def test_no_command_prints_help(self, capsys):
        cli.main([])
        assert "usage" in capsys.readouterr().out.lower()


class TestInsightsCommand:
    """Tests for `devdash insights`."""

    def test_no_data(self, capsys):
        cli.main(["--backend", "memory", "insights", "alice"])
        assert "No analysis data found." in capsys.readouterr().out

    def test_json_output(self, capsys, shared_store, make_record, add_session):
        add_session(shared_store, "alice", [make_record(semantic_elements_count=30)])

        cli.main(["insights", "alice", "--output", "json"])

        data = json.loads(capsys.readouterr().out)
        assert data["username"] == "alice"
        assert data["total_html_files"] == 1
        assert data["avg_semantic_ratio"] == 30.0
        assert data["trend_insights"]["overall_trend"] == "No data"

    def test_text_output(self, capsys, shared_store, make_record, add_session):
        add_session(shared_store, "alice", [make_record(semantic_elements_count=30)])

        cli.main(["insights", "alice"])

        out = capsys.readouterr().out
        assert "HTML Portfolio Insights for: alice" in out
        assert "Average semantic ratio: 30.0%" in out

    def test_output_file(self, capsys, tmp_path, shared_store, make_record, add_session):
        add_session(shared_store, "alice", [make_record()])
        output_file = tmp_path / "insights.json"

        cli.main(["insights", "alice", "-o", "json", "-f", str(output_file)])

        assert json.loads(output_file.read_text())["total_html_files"] == 1
        assert f"Results written to {output_file}" in capsys.readouterr().out

    def test_text_output_file(self, capsys, tmp_path, shared_store, make_record, add_session):
        add_session(shared_store, "alice", [make_record(semantic_elements_count=30)])
        output_file = tmp_path / "insights.txt"

        cli.main(["insights", "alice", "-f", str(output_file)])

        written = output_file.read_text(encoding="utf-8")
        assert "HTML Portfolio Insights for: alice" in written
        assert "Average semantic ratio: 30.0%" in written
        out = capsys.readouterr().out
        assert "HTML Portfolio Insights" not in out
        assert f"Results written to {output_file}" in out


class TestHistoryCommand:
    """Tests for `devdash history`."""

    def test_no_history(self, capsys):
        cli.main(["--backend", "memory", "history", "alice"])
        assert "No analysis history found for: alice" in capsys.readouterr().out

    def test_json_rows(self, capsys, shared_store, make_record, add_session):
        add_session(shared_store, "alice", [make_record(semantic_elements_count=10)], days_offset=0)
        add_session(
            shared_store,
            "alice",
            [make_record(semantic_elements_count=20, total_images=2, images_without_alt=1)],
            days_offset=1,
        )

        cli.main(["history", "alice", "--limit", "1", "-o", "json"])

        rows = json.loads(capsys.readouterr().out)
        assert len(rows) == 1
        assert rows[0]["avg_semantic_ratio"] == 20.0
        assert rows[0]["avg_alt_coverage"] == 50.0
        assert rows[0]["total_html_files"] == 1

    def test_text_to_file(self, capsys, tmp_path, shared_store, make_record, add_session):
        add_session(shared_store, "alice", [make_record(semantic_elements_count=10)])
        output_file = tmp_path / "history.txt"

        cli.main(["history", "alice", "--output-file", str(output_file)])

        written = output_file.read_text(encoding="utf-8")
        assert "Analysis History for: alice" in written
        assert "Avg Semantic Ratio: 10.0%" in written
        assert "Analysis History" not in capsys.readouterr().out


class TestAnalyzeCommand:
    """Tests for `devdash analyze`."""

    def test_requires_token(self, monkeypatch, capsys):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)

        with pytest.raises(SystemExit) as excinfo:
            cli.main(["--backend", "memory", "analyze", "alice"])

        assert excinfo.value.code == 1
        assert "GITHUB_TOKEN" in capsys.readouterr().out

    def test_analyze_json(self, monkeypatch, capsys, shared_store, portfolio_page):
        monkeypatch.setenv("GITHUB_TOKEN", "token")

        with patch("devdash.cli.GitHubClient") as client_cls:
            client = client_cls.return_value
            client.username = "alice"
            client.get_public_repositories.return_value = [
                RepoInfo(name="site", is_static=True, updated_at=datetime(2024, 1, 1))
            ]
            client.get_web_files.return_value = [
                RepoFile("index.html", "index.html", portfolio_page, "site", FileType.HTML)
            ]

            cli.main(["analyze", "alice", "-o", "json"])

        data = json.loads(capsys.readouterr().out)
        assert data["total_html_files"] == 1
        assert data["total_repositories"] == 1
        assert len(shared_store.query_recent_sessions("alice", 5)) == 1

    def test_analyze_text(self, monkeypatch, capsys, shared_store, portfolio_page):
        monkeypatch.setenv("GITHUB_TOKEN", "token")

        with patch("devdash.cli.GitHubClient") as client_cls:
            client = client_cls.return_value
            client.get_public_repositories.return_value = [RepoInfo(name="site", is_static=True)]
            client.get_web_files.return_value = [
                RepoFile("index.html", "index.html", portfolio_page, "site", FileType.HTML)
            ]

            cli.main(["analyze", "alice"])

        out = capsys.readouterr().out
        assert "site/index.html" in out
        assert "2 image(s) missing alt attributes" in out
        assert "main: used in 1 files" in out

    def test_failure_exits_nonzero(self, monkeypatch, capsys, shared_store):
        monkeypatch.setenv("GITHUB_TOKEN", "token")

        with patch("devdash.cli.GitHubClient") as client_cls:
            client_cls.return_value.get_public_repositories.side_effect = RuntimeError("boom")
            with pytest.raises(SystemExit):
                cli.main(["analyze", "alice"])

        assert "Error: boom" in capsys.readouterr().out
