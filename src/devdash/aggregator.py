"""Portfolio-level insights over the latest analysis session."""

import logging
from collections import Counter
from datetime import datetime
from typing import Optional, Sequence

from devdash.config import AnalysisThresholds, default_thresholds
from devdash.constants import (
    COMBINED_TREND_HISTORY,
    NO_ANALYSIS_DATA_MESSAGE,
    TOP_SEMANTIC_ELEMENTS_COUNT,
)
from devdash.database import AbstractAnalysisStore
from devdash.models import (
    AccessibilityInsights,
    FileAnalysisRecord,
    HtmlAnalysisResult,
    PortfolioInsights,
    SemanticInsights,
    SessionSnapshot,
    StructureInsights,
)
from devdash.recommendations import generate_portfolio_recommendations
from devdash.scoring import (
    average_semantic_ratio,
    calculate_accessibility_score,
    calculate_consistency_score,
    calculate_overall_quality_score,
    overview_alt_coverage,
)
from devdash.trends import TrendEngine

logger = logging.getLogger(__name__)


class PortfolioAggregator:
    """Builds PortfolioInsights for a user from stored history.

    Each call reads the history once and never writes.
    """

    def __init__(
        self,
        store: AbstractAnalysisStore,
        thresholds: Optional[AnalysisThresholds] = None,
    ):
        self.store = store
        self.thresholds = thresholds or default_thresholds
        self.trend_engine = TrendEngine(self.thresholds)

    def generate_portfolio_insights(self, username: str) -> PortfolioInsights:
        """Generate insights from the user's most recent session.

        Args:
            username: Account whose history is read

        Returns:
            PortfolioInsights; only `message` is set when no session exists
        """
        sessions = self.store.query_recent_sessions(username, COMBINED_TREND_HISTORY)
        if not sessions:
            logger.info(f"No analysis sessions found for {username}")
            return PortfolioInsights(username=username, message=NO_ANALYSIS_DATA_MESSAGE)

        latest = sessions[0]
        files = latest.files

        insights = PortfolioInsights(
            username=username,
            generated_at=datetime.now(),
            analysis_date=latest.session.created_at,
        )

        self._generate_overview(insights, latest, files)
        insights.semantic_insights = self._generate_semantic_insights(sessions, files)
        insights.accessibility_insights = self._generate_accessibility_insights(files)
        insights.structure_insights = self._generate_structure_insights(files)
        insights.trend_insights = self.trend_engine.calculate_trend_insights(sessions)
        insights.top_recommendations = generate_portfolio_recommendations(
            insights, files, self.thresholds
        )

        logger.debug(
            f"Generated insights for {username}: {len(files)} files, "
            f"quality {insights.overall_quality_score:.1f}"
        )
        return insights

    def _generate_overview(
        self,
        insights: PortfolioInsights,
        snapshot: SessionSnapshot,
        files: Sequence[FileAnalysisRecord],
    ) -> None:
        insights.total_repositories = snapshot.session.total_repositories
        insights.total_html_files = len(files)
        insights.avg_semantic_ratio = average_semantic_ratio(files)
        insights.avg_alt_coverage = overview_alt_coverage(files)
        insights.overall_quality_score = calculate_overall_quality_score(files)

    def _generate_semantic_insights(
        self,
        sessions: Sequence[SessionSnapshot],
        files: Sequence[FileAnalysisRecord],
    ) -> SemanticInsights:
        return SemanticInsights(
            files_using_main_element=sum(1 for f in files if f.uses_main_element),
            files_using_nav_element=sum(1 for f in files if f.uses_nav_element),
            files_using_header_element=sum(1 for f in files if f.uses_header_element),
            files_using_footer_element=sum(1 for f in files if f.uses_footer_element),
            avg_semantic_elements_per_file=(
                sum(f.semantic_elements_count for f in files) / len(files) if files else 0.0
            ),
            semantic_adoption_trend=self.trend_engine.calculate_semantic_trend(sessions),
        )

    def _generate_accessibility_insights(
        self, files: Sequence[FileAnalysisRecord]
    ) -> AccessibilityInsights:
        files_with_images = [f for f in files if f.total_images > 0]
        return AccessibilityInsights(
            total_images=sum(f.total_images for f in files),
            images_with_alt_text=sum(f.total_images - f.images_without_alt for f in files),
            files_with_perfect_alt_coverage=sum(
                1 for f in files_with_images if f.alt_tag_coverage >= 100
            ),
            files_with_proper_headings=sum(1 for f in files if f.has_proper_heading_hierarchy),
            accessibility_score=calculate_accessibility_score(files),
        )

    def _generate_structure_insights(
        self, files: Sequence[FileAnalysisRecord]
    ) -> StructureInsights:
        return StructureInsights(
            files_with_doctype=sum(1 for f in files if f.has_doctype),
            files_with_lang_attribute=sum(1 for f in files if f.has_lang_attribute),
            files_with_meta_viewport=sum(1 for f in files if f.has_meta_viewport),
            files_with_meta_description=sum(1 for f in files if f.has_meta_description),
            files_with_title=sum(1 for f in files if f.has_title),
            structural_consistency_score=calculate_consistency_score(files),
        )


def most_used_semantic_elements(
    results: Sequence[HtmlAnalysisResult],
    limit: int = TOP_SEMANTIC_ELEMENTS_COUNT,
) -> list[tuple[str, int]]:
    """Rank semantic elements by the number of files that use them.

    Args:
        results: In-memory analysis results of a run
        limit: Number of entries to return

    Returns:
        (element, file count) pairs, most used first
    """
    counts = Counter(
        element
        for result in results
        for element in result.metrics.semantic_elements_used
    )
    return counts.most_common(limit)
