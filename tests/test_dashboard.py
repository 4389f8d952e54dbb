"""Tests for DevDashboard runs with a stubbed repository client."""

from datetime import datetime
from unittest.mock import Mock

import pytest

from devdash.dashboard import DevDashboard
from devdash.database import InMemoryAnalysisStore
from devdash.models import FileType, RepoFile, RepoInfo


def repo(name, is_static=False, day=1):
    return RepoInfo(name=name, is_static=is_static, updated_at=datetime(2024, 1, day))


@pytest.fixture
def client():
    client = Mock()
    client.username = "alice"
    return client


class TestSelectRepositories:
    """Tests for repository selection."""

    def test_prefers_static(self, client):
        dashboard = DevDashboard(client, InMemoryAnalysisStore())
        repos = [repo("api"), repo("site", True), repo("blog", True)]

        assert [r.name for r in dashboard.select_repositories(repos)] == ["site", "blog"]

    def test_caps_static(self, client):
        dashboard = DevDashboard(client, InMemoryAnalysisStore())
        repos = [repo(f"site{i}", True) for i in range(5)]

        assert len(dashboard.select_repositories(repos)) == 3

    def test_falls_back_to_most_recent(self, client):
        dashboard = DevDashboard(client, InMemoryAnalysisStore())
        repos = [repo("a"), repo("b"), repo("c")]

        assert [r.name for r in dashboard.select_repositories(repos)] == ["a", "b"]


class TestRun:
    """Tests for DevDashboard.run."""

    def test_run_records_session_and_insights(self, client, portfolio_page):
        client.get_public_repositories.return_value = [repo("site", True), repo("empty", True)]
        client.get_web_files.side_effect = lambda owner, name: {
            "site": [
                RepoFile("index.html", "index.html", portfolio_page, "site", FileType.HTML),
                RepoFile("style.css", "style.css", "body {}", "site", FileType.CSS),
            ],
            "empty": [],
        }[name]
        store = InMemoryAnalysisStore()

        run = DevDashboard(client, store, max_workers=2).run()

        assert run.username == "alice"
        assert [r.name for r in run.repositories] == ["site", "empty"]
        assert [r.file_path for r in run.results] == ["index.html"]
        assert run.insights.total_repositories == 2
        assert run.insights.total_html_files == 1
        assert run.insights.semantic_insights.semantic_adoption_trend == "Insufficient data"

        snapshot = store.query_recent_sessions("alice", 1)[0]
        assert snapshot.session.id == run.session_id
        assert len(snapshot.files) == 1

    def test_second_run_reports_trend(self, client, portfolio_page):
        client.get_public_repositories.return_value = [repo("site", True)]
        store = InMemoryAnalysisStore()
        dashboard = DevDashboard(client, store)

        client.get_web_files.return_value = [
            RepoFile("index.html", "index.html", "<div><div><p>x</p></div></div>", "site", FileType.HTML)
        ]
        dashboard.run("alice")

        client.get_web_files.return_value = [
            RepoFile("index.html", "index.html", portfolio_page, "site", FileType.HTML)
        ]
        run = dashboard.run("alice")

        assert run.insights.semantic_insights.semantic_adoption_trend == "📈 Improving"
        assert run.insights.trend_insights.sessions_compared == 2
