"""Threshold-driven recommendations at file and portfolio scope."""

from typing import Optional, Sequence

from devdash.config import AnalysisThresholds, default_thresholds
from devdash.models import (
    FileAnalysisRecord,
    FileMetrics,
    HtmlIssue,
    HtmlRecommendation,
    PortfolioInsights,
    RecommendationPriority,
)

SEMANTIC_EXAMPLE = (
    "<main>\n"
    "  <article>\n"
    "    <header><h1>Title</h1></header>\n"
    "    <section>Content</section>\n"
    "  </article>\n"
    "</main>"
)

ALT_TEXT_EXAMPLE = '<img src="photo.jpg" alt="A sunset over the mountains with orange and pink clouds">'

META_DESCRIPTION_EXAMPLE = '<meta name="description" content="A brief description of your page content">'


class RecommendationSynthesizer:
    """Builds prioritized recommendations for a single file."""

    def __init__(self, thresholds: Optional[AnalysisThresholds] = None):
        self.thresholds = thresholds or default_thresholds

    def generate(
        self, metrics: FileMetrics, issues: Sequence[HtmlIssue]
    ) -> list[HtmlRecommendation]:
        """Generate recommendations for one file.

        Args:
            metrics: Extracted file metrics
            issues: Issues already detected for the file

        Returns:
            Recommendations in a fixed order
        """
        recommendations: list[HtmlRecommendation] = []

        if metrics.semantic_ratio < self.thresholds.file_semantic_ratio_min:
            recommendations.append(HtmlRecommendation(
                category="Semantic HTML",
                title="Increase semantic HTML usage",
                description=(
                    f"Only {metrics.semantic_ratio:.1f}% of your elements are semantic. "
                    "Consider replacing generic divs with semantic elements."
                ),
                example_code=SEMANTIC_EXAMPLE,
                priority=RecommendationPriority.MEDIUM,
            ))

        if (
            metrics.total_images > 0
            and metrics.alt_tag_coverage < self.thresholds.file_alt_coverage_target
        ):
            recommendations.append(HtmlRecommendation(
                category="Accessibility",
                title="Improve image accessibility",
                description=(
                    f"Alt text coverage: {metrics.alt_tag_coverage:.1f}%. "
                    "Add descriptive alt attributes to all images."
                ),
                example_code=ALT_TEXT_EXAMPLE,
                priority=RecommendationPriority.HIGH,
            ))

        # IssueDetector never emits MissingMetaDescription, so this rule only
        # fires for issue lists built elsewhere.
        if any(issue.type == "MissingMetaDescription" for issue in issues):
            recommendations.append(HtmlRecommendation(
                category="SEO",
                title="Add meta description",
                description="Meta descriptions improve SEO and social sharing.",
                example_code=META_DESCRIPTION_EXAMPLE,
                priority=RecommendationPriority.MEDIUM,
            ))

        return recommendations


def generate_portfolio_recommendations(
    insights: PortfolioInsights,
    files: Sequence[FileAnalysisRecord],
    thresholds: Optional[AnalysisThresholds] = None,
) -> list[str]:
    """Rank portfolio-wide recommendations using aggregate counts.

    Args:
        insights: Insights with the overview numbers already filled in
        files: File records of the latest session
        thresholds: Recommendation thresholds

    Returns:
        Recommendation strings, closing with an overall verdict
    """
    thresholds = thresholds or default_thresholds
    recommendations = []

    if insights.avg_semantic_ratio < thresholds.portfolio_semantic_ratio_min:
        recommendations.append(
            f"🎯 Priority: Increase semantic HTML usage (currently "
            f"{insights.avg_semantic_ratio:.1f}%, target: "
            f"{thresholds.portfolio_semantic_ratio_target:.0f}%+)"
        )

    if insights.avg_alt_coverage < thresholds.portfolio_alt_coverage_min:
        recommendations.append(
            f"♿ Priority: Improve alt text coverage (currently "
            f"{insights.avg_alt_coverage:.1f}%, target: "
            f"{thresholds.portfolio_alt_coverage_target:.0f}%)"
        )

    files_without_main = sum(1 for f in files if not f.uses_main_element)
    if files_without_main > 0:
        recommendations.append(
            f"📝 Add <main> elements to {files_without_main} files for better structure"
        )

    files_without_meta = sum(1 for f in files if not f.has_meta_description)
    if files_without_meta > 0:
        recommendations.append(
            f"🔍 Add meta descriptions to {files_without_meta} files for SEO"
        )

    files_with_heading_issues = sum(1 for f in files if not f.has_proper_heading_hierarchy)
    if files_with_heading_issues > 0:
        recommendations.append(
            f"📚 Fix heading hierarchy in {files_with_heading_issues} files"
        )

    if insights.overall_quality_score >= thresholds.quality_excellent:
        recommendations.append("🏆 Excellent work! Your HTML quality is above average")
    elif insights.overall_quality_score >= thresholds.quality_good:
        recommendations.append(
            "👍 Good progress! Focus on the recommendations above to reach excellence"
        )
    else:
        recommendations.append(
            "📈 Room for improvement! Start with semantic HTML and accessibility basics"
        )

    return recommendations
