"""File-level issue detection from extracted metrics."""

from devdash.models import FileMetrics, HtmlIssue, IssueSeverity


class IssueDetector:
    """Maps a FileMetrics record to an ordered list of issues.

    Each check is independent. Checks run in a fixed order so output is
    reproducible. Meta description absence is not reported
    per file; it only surfaces in portfolio recommendations.
    """

    def detect(self, metrics: FileMetrics) -> list[HtmlIssue]:
        """Detect issues for one file.

        Args:
            metrics: Extracted file metrics

        Returns:
            Issues in emission order
        """
        issues: list[HtmlIssue] = []

        self._check_document_structure(metrics, issues)
        self._check_accessibility(metrics, issues)
        self._check_semantic_structure(metrics, issues)
        self._check_heading_hierarchy(metrics, issues)

        return issues

    def _check_document_structure(self, metrics: FileMetrics, issues: list[HtmlIssue]) -> None:
        if not metrics.has_doctype:
            issues.append(HtmlIssue(
                type="MissingDoctype",
                description="Missing DOCTYPE declaration",
                severity=IssueSeverity.WARNING,
            ))

        if not metrics.has_lang_attribute:
            issues.append(HtmlIssue(
                type="MissingLangAttribute",
                description="Missing lang attribute on <html> element",
                severity=IssueSeverity.WARNING,
            ))

        if not metrics.has_meta_charset:
            issues.append(HtmlIssue(
                type="MissingCharset",
                description="Missing charset meta tag",
                severity=IssueSeverity.ERROR,
            ))

        if not metrics.has_meta_viewport:
            issues.append(HtmlIssue(
                type="MissingViewport",
                description="Missing viewport meta tag for responsive design",
                severity=IssueSeverity.WARNING,
            ))

        if not metrics.has_title:
            issues.append(HtmlIssue(
                type="MissingTitle",
                description="Missing <title> element",
                severity=IssueSeverity.ERROR,
            ))

    def _check_accessibility(self, metrics: FileMetrics, issues: list[HtmlIssue]) -> None:
        if metrics.images_without_alt > 0:
            issues.append(HtmlIssue(
                type="MissingAltText",
                description=f"{metrics.images_without_alt} image(s) missing alt attributes",
                severity=IssueSeverity.WARNING,
            ))

    def _check_semantic_structure(self, metrics: FileMetrics, issues: list[HtmlIssue]) -> None:
        if not metrics.uses_main_element:
            issues.append(HtmlIssue(
                type="MissingMainElement",
                description="Consider using <main> element for primary content",
                severity=IssueSeverity.INFO,
            ))

    def _check_heading_hierarchy(self, metrics: FileMetrics, issues: list[HtmlIssue]) -> None:
        if not metrics.has_proper_heading_hierarchy:
            issues.append(HtmlIssue(
                type="ImproperHeadingHierarchy",
                description="Heading hierarchy has gaps or doesn't start with h1",
                severity=IssueSeverity.WARNING,
            ))


def find_issues(metrics: FileMetrics) -> list[HtmlIssue]:
    """Convenience wrapper around IssueDetector.detect."""
    return IssueDetector().detect(metrics)
