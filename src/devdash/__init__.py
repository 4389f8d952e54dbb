"""HTML quality analysis and trend tracking for developer portfolios."""

__version__ = "0.1.0"

from devdash.analyzer import HtmlAnalyzer
from devdash.aggregator import PortfolioAggregator, most_used_semantic_elements
from devdash.dashboard import DevDashboard, RunResult
from devdash.database import (
    AbstractAnalysisStore,
    InMemoryAnalysisStore,
    LocalSqliteStore,
    get_store,
)
from devdash.document import HtmlDocument, ParseError, parse_document
from devdash.extractor import MetricExtractor
from devdash.github import GitHubClient, get_file_type
from devdash.headings import check_heading_hierarchy
from devdash.issues import IssueDetector, find_issues
from devdash.models import (
    FileMetrics,
    FileType,
    HtmlIssue,
    HtmlRecommendation,
    HtmlAnalysisResult,
    IssueSeverity,
    RecommendationPriority,
    RepoFile,
    RepoInfo,
    FileAnalysisRecord,
    PortfolioInsights,
    TrendInsights,
)
from devdash.persistence import save_analysis_session
from devdash.recommendations import RecommendationSynthesizer, generate_portfolio_recommendations
from devdash.trends import TrendEngine
from devdash.config import settings

__all__ = [
    # Core
    "HtmlAnalyzer",
    "MetricExtractor",
    "IssueDetector",
    "RecommendationSynthesizer",
    "PortfolioAggregator",
    "TrendEngine",
    "DevDashboard",
    "RunResult",
    "check_heading_hierarchy",
    "find_issues",
    "generate_portfolio_recommendations",
    "most_used_semantic_elements",
    # Ports and adapters
    "HtmlDocument",
    "ParseError",
    "parse_document",
    "GitHubClient",
    "get_file_type",
    "AbstractAnalysisStore",
    "InMemoryAnalysisStore",
    "LocalSqliteStore",
    "get_store",
    "save_analysis_session",
    # Models
    "FileMetrics",
    "FileType",
    "HtmlIssue",
    "HtmlRecommendation",
    "HtmlAnalysisResult",
    "IssueSeverity",
    "RecommendationPriority",
    "RepoFile",
    "RepoInfo",
    "FileAnalysisRecord",
    "PortfolioInsights",
    "TrendInsights",
    "settings",
]
