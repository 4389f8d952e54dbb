"""End-to-end analysis run: fetch, analyze, persist, summarize."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from devdash.aggregator import PortfolioAggregator
from devdash.analyzer import HtmlAnalyzer
from devdash.config import AnalysisThresholds, default_thresholds
from devdash.constants import DEFAULT_MAX_WORKERS
from devdash.database import AbstractAnalysisStore
from devdash.github import GitHubClient
from devdash.models import HtmlAnalysisResult, PortfolioInsights, RepoInfo
from devdash.persistence import save_analysis_session

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of one dashboard run."""

    username: str
    session_id: int
    repositories: list[RepoInfo] = field(default_factory=list)
    results: list[HtmlAnalysisResult] = field(default_factory=list)
    insights: PortfolioInsights = field(default_factory=PortfolioInsights)


class DevDashboard:
    """Coordinates the repository client, file analyzer and history store."""

    def __init__(
        self,
        client: GitHubClient,
        store: AbstractAnalysisStore,
        analyzer: Optional[HtmlAnalyzer] = None,
        thresholds: Optional[AnalysisThresholds] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self.client = client
        self.store = store
        self.thresholds = thresholds or default_thresholds
        self.analyzer = analyzer or HtmlAnalyzer(self.thresholds)
        self.aggregator = PortfolioAggregator(store, self.thresholds)
        self.max_workers = max_workers

    def select_repositories(self, repositories: list[RepoInfo]) -> list[RepoInfo]:
        """Prefer static-site repositories; fall back to the most recent ones."""
        static_repos = [r for r in repositories if r.is_static][:self.thresholds.max_static_repos]
        if static_repos:
            return static_repos
        return repositories[:self.thresholds.fallback_repos]

    def run(self, username: Optional[str] = None) -> RunResult:
        """Analyze a user's repositories and record the session.

        Args:
            username: Account to analyze (defaults to the client's username)

        Returns:
            RunResult with per-file results and the refreshed insights
        """
        username = username or self.client.username
        repositories = self.select_repositories(self.client.get_public_repositories(username))

        results: list[HtmlAnalysisResult] = []
        for repo in repositories:
            logger.info(f"Analyzing HTML in {repo.name}...")
            files = self.client.get_web_files(username, repo.name)
            repo_results = self.analyzer.analyze_files(files, self.max_workers)

            if not repo_results:
                logger.warning(f"No HTML files found in {repo.name}")
                continue

            logger.info(f"Analyzed {len(repo_results)} HTML file(s) in {repo.name}")
            results.extend(repo_results)

        session_id = save_analysis_session(self.store, username, repositories, results)
        insights = self.aggregator.generate_portfolio_insights(username)

        return RunResult(
            username=username,
            session_id=session_id,
            repositories=repositories,
            results=results,
            insights=insights,
        )
