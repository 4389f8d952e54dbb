"""Tests for file and portfolio recommendations."""

import pytest

from devdash.config import AnalysisThresholds
from devdash.models import (
    FileMetrics,
    HtmlIssue,
    IssueSeverity,
    PortfolioInsights,
    RecommendationPriority,
)
from devdash.recommendations import (
    RecommendationSynthesizer,
    generate_portfolio_recommendations,
)


@pytest.fixture
def synthesizer():
    return RecommendationSynthesizer()


class TestRecommendationSynthesizer:
    """Tests for per-file recommendations."""

    def test_low_semantic_ratio(self, synthesizer):
        metrics = FileMetrics(semantic_elements_count=1, total_elements=10)
        recs = synthesizer.generate(metrics, [])

        assert len(recs) == 1
        assert recs[0].title == "Increase semantic HTML usage"
        assert recs[0].category == "Semantic HTML"
        assert recs[0].priority == RecommendationPriority.MEDIUM
        assert "10.0%" in recs[0].description
        assert "<main>" in recs[0].example_code

    def test_semantic_ratio_at_threshold(self, synthesizer):
        metrics = FileMetrics(semantic_elements_count=2, total_elements=10)
        assert synthesizer.generate(metrics, []) == []

    def test_incomplete_alt_coverage(self, synthesizer):
        metrics = FileMetrics(
            semantic_elements_count=5,
            total_elements=10,
            total_images=4,
            images_without_alt=1,
        )
        recs = synthesizer.generate(metrics, [])

        assert [r.title for r in recs] == ["Improve image accessibility"]
        assert recs[0].priority == RecommendationPriority.HIGH
        assert "75.0%" in recs[0].description

    def test_no_images_no_alt_recommendation(self, synthesizer):
        metrics = FileMetrics(semantic_elements_count=5, total_elements=10)
        assert synthesizer.generate(metrics, []) == []

    def test_meta_description_issue(self, synthesizer):
        metrics = FileMetrics(semantic_elements_count=5, total_elements=10)
        issue = HtmlIssue(
            type="MissingMetaDescription",
            description="Missing meta description",
            severity=IssueSeverity.WARNING,
        )
        recs = synthesizer.generate(metrics, [issue])

        assert [r.category for r in recs] == ["SEO"]
        assert recs[0].priority == RecommendationPriority.MEDIUM

    def test_order(self, synthesizer):
        metrics = FileMetrics(total_elements=10, total_images=2, images_without_alt=2)
        issue = HtmlIssue("MissingMetaDescription", "x", IssueSeverity.WARNING)
        recs = synthesizer.generate(metrics, [issue])

        assert [r.category for r in recs] == ["Semantic HTML", "Accessibility", "SEO"]

    def test_custom_threshold(self):
        synthesizer = RecommendationSynthesizer(AnalysisThresholds(file_semantic_ratio_min=60.0))
        metrics = FileMetrics(semantic_elements_count=5, total_elements=10)

        assert [r.category for r in synthesizer.generate(metrics, [])] == ["Semantic HTML"]


class TestPortfolioRecommendations:
    """Tests for generate_portfolio_recommendations."""

    def test_excellent_portfolio(self, make_record):
        insights = PortfolioInsights(
            avg_semantic_ratio=45.0, avg_alt_coverage=100.0, overall_quality_score=92.0
        )
        recs = generate_portfolio_recommendations(insights, [make_record()])

        assert recs == ["🏆 Excellent work! Your HTML quality is above average"]

    def test_all_recommendations(self, make_record):
        insights = PortfolioInsights(
            avg_semantic_ratio=12.5, avg_alt_coverage=50.0, overall_quality_score=40.0
        )
        files = [
            make_record(
                uses_main_element=False,
                has_meta_description=False,
                has_proper_heading_hierarchy=False,
            ),
            make_record(uses_main_element=False),
        ]
        recs = generate_portfolio_recommendations(insights, files)

        assert recs == [
            "🎯 Priority: Increase semantic HTML usage (currently 12.5%, target: 40%+)",
            "♿ Priority: Improve alt text coverage (currently 50.0%, target: 100%)",
            "📝 Add <main> elements to 2 files for better structure",
            "🔍 Add meta descriptions to 1 files for SEO",
            "📚 Fix heading hierarchy in 1 files",
            "📈 Room for improvement! Start with semantic HTML and accessibility basics",
        ]

    @pytest.mark.parametrize("score,expected_prefix", [
        (80.0, "🏆"),
        (79.9, "👍"),
        (60.0, "👍"),
        (59.9, "📈"),
    ])
    def test_verdict_boundaries(self, make_record, score, expected_prefix):
        insights = PortfolioInsights(
            avg_semantic_ratio=50.0, avg_alt_coverage=100.0, overall_quality_score=score
        )
        recs = generate_portfolio_recommendations(insights, [make_record()])

        assert recs[-1].startswith(expected_prefix)
