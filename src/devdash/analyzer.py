"""Per-file HTML analysis: extraction, issues and recommendations."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from devdash.config import AnalysisThresholds, settings
from devdash.constants import DEFAULT_MAX_WORKERS, SEMANTIC_ELEMENTS
from devdash.document import ParseError, parse_document
from devdash.extractor import MetricExtractor
from devdash.issues import IssueDetector
from devdash.models import (
    FileType,
    HtmlAnalysisResult,
    HtmlIssue,
    IssueSeverity,
    RepoFile,
)
from devdash.recommendations import RecommendationSynthesizer

logger = logging.getLogger(__name__)


def _parse_error_issue(message: str) -> HtmlIssue:
    return HtmlIssue(
        type="ParseError",
        description=f"Failed to parse HTML: {message}",
        severity=IssueSeverity.ERROR,
    )


class HtmlAnalyzer:
    """Analyzes HTML files independently of each other.

    Holds no per-file state, so files can be analyzed concurrently.
    """

    def __init__(
        self,
        thresholds: Optional[AnalysisThresholds] = None,
        semantic_elements: Sequence[str] = SEMANTIC_ELEMENTS,
        parser: Optional[str] = None,
    ):
        """Initialize the analyzer.

        Args:
            thresholds: Recommendation thresholds
            semantic_elements: Tag vocabulary counted as semantic
            parser: BeautifulSoup tree builder (defaults to settings.HTML_PARSER)
        """
        self.parser = parser or settings.HTML_PARSER
        self.extractor = MetricExtractor(semantic_elements)
        self.issue_detector = IssueDetector()
        self.recommender = RecommendationSynthesizer(thresholds)

    def analyze_file(self, html_file: RepoFile) -> HtmlAnalysisResult:
        """Analyze one HTML file.

        Empty content and unparsable markup are reported as issues on an
        otherwise zero-valued result; they never raise.

        Args:
            html_file: File with its downloaded content

        Returns:
            HtmlAnalysisResult for the file
        """
        result = HtmlAnalysisResult(
            repository=html_file.repository,
            file_path=html_file.path,
            file_size=html_file.size,
        )

        if not html_file.content:
            result.issues.append(HtmlIssue(
                type="EmptyFile",
                description="HTML file is empty or could not be read",
                severity=IssueSeverity.ERROR,
            ))
            return result

        try:
            document = parse_document(html_file.content, self.parser)
        except ParseError as e:
            logger.warning(f"Could not parse {html_file.repository}/{html_file.path}: {e}")
            result.issues.append(_parse_error_issue(str(e)))
            return result

        result.metrics = self.extractor.extract(document, html_file.content)
        result.issues = self.issue_detector.detect(result.metrics)
        result.recommendations = self.recommender.generate(result.metrics, result.issues)

        logger.debug(
            f"Analyzed {html_file.repository}/{html_file.path}: "
            f"{len(result.issues)} issue(s), semantic ratio {result.metrics.semantic_ratio:.1f}%"
        )
        return result

    def analyze_files(
        self,
        files: Sequence[RepoFile],
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> list[HtmlAnalysisResult]:
        """Analyze the HTML files among `files` in parallel.

        Non-HTML files are ignored. Results keep the input order. An
        unexpected failure in one file is recorded on that file's result
        and does not stop the others.

        Args:
            files: Downloaded repository files
            max_workers: Thread pool size

        Returns:
            One HtmlAnalysisResult per HTML file
        """
        html_files = [f for f in files if f.type == FileType.HTML]
        if not html_files:
            return []

        with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
            futures = [executor.submit(self.analyze_file, f) for f in html_files]

            results = []
            for html_file, future in zip(html_files, futures):
                try:
                    results.append(future.result())
                except Exception as e:
                    logger.exception(f"Analysis failed for {html_file.repository}/{html_file.path}")
                    results.append(HtmlAnalysisResult(
                        repository=html_file.repository,
                        file_path=html_file.path,
                        file_size=html_file.size,
                        issues=[_parse_error_issue(str(e))],
                    ))

        return results
