"""Session-over-session trend classification."""

import logging
from typing import Optional, Sequence

from devdash.config import AnalysisThresholds, default_thresholds
from devdash.constants import (
    COMBINED_TREND_HISTORY,
    MIN_SESSIONS_FOR_TREND,
    SEMANTIC_TREND_DECLINING,
    SEMANTIC_TREND_HISTORY,
    SEMANTIC_TREND_IMPROVING,
    SEMANTIC_TREND_INSUFFICIENT,
    SEMANTIC_TREND_STABLE,
    TREND_DECLINING,
    TREND_IMPROVING,
    TREND_STABLE,
)
from devdash.models import SessionSnapshot, TrendInsights
from devdash.scoring import average_semantic_ratio, overview_alt_coverage

logger = logging.getLogger(__name__)


def classify_semantic_change(change: float, threshold: float = 5.0) -> str:
    """Label a semantic ratio delta. Both boundaries are exclusive."""
    if change > threshold:
        return SEMANTIC_TREND_IMPROVING
    if change < -threshold:
        return SEMANTIC_TREND_DECLINING
    return SEMANTIC_TREND_STABLE


def classify_combined_change(
    semantic_change: float, accessibility_change: float, threshold: float = 10.0
) -> str:
    """Label the sum of the semantic and accessibility deltas."""
    total = semantic_change + accessibility_change
    if total > threshold:
        return TREND_IMPROVING
    if total < -threshold:
        return TREND_DECLINING
    return TREND_STABLE


class TrendEngine:
    """Compares the latest session of a user with the one before it.

    The semantic trend and the combined trend use different history
    depths, inputs and thresholds and are computed independently. Both
    work on sessions already read from a store, newest first.
    """

    def __init__(self, thresholds: Optional[AnalysisThresholds] = None):
        self.thresholds = thresholds or default_thresholds

    def calculate_semantic_trend(self, sessions: Sequence[SessionSnapshot]) -> str:
        """Classify the change in mean semantic ratio.

        Args:
            sessions: Recent sessions, newest first; only the first
                SEMANTIC_TREND_HISTORY are considered

        Returns:
            A trend label, or "Insufficient data" with fewer than two sessions
        """
        sessions = sessions[:SEMANTIC_TREND_HISTORY]
        if len(sessions) < MIN_SESSIONS_FOR_TREND:
            return SEMANTIC_TREND_INSUFFICIENT

        latest = average_semantic_ratio(sessions[0].files)
        previous = average_semantic_ratio(sessions[1].files)
        change = latest - previous

        logger.debug(
            f"Semantic ratio change for {sessions[0].session.username}: {change:+.2f}"
        )
        return classify_semantic_change(change, self.thresholds.semantic_trend_delta)

    def calculate_trend_insights(self, sessions: Sequence[SessionSnapshot]) -> TrendInsights:
        """Compute semantic and accessibility deltas and the combined trend.

        Args:
            sessions: Recent sessions, newest first; only the first
                COMBINED_TREND_HISTORY are counted

        Returns:
            TrendInsights; left at its "No data" defaults with fewer than
            two sessions
        """
        sessions = sessions[:COMBINED_TREND_HISTORY]
        trend = TrendInsights(sessions_compared=len(sessions))

        if len(sessions) < MIN_SESSIONS_FOR_TREND:
            return trend

        latest_files = sessions[0].files
        previous_files = sessions[1].files

        trend.semantic_ratio_change = (
            average_semantic_ratio(latest_files) - average_semantic_ratio(previous_files)
        )
        trend.accessibility_change = (
            overview_alt_coverage(latest_files) - overview_alt_coverage(previous_files)
        )
        trend.overall_trend = classify_combined_change(
            trend.semantic_ratio_change,
            trend.accessibility_change,
            self.thresholds.combined_trend_delta,
        )
        return trend
