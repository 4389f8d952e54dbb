"""Data models for HTML portfolio analysis."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from devdash.constants import TREND_NO_DATA


class FileType(Enum):
    """Web file classification by extension."""
    HTML = "Html"
    CSS = "Css"
    JAVASCRIPT = "JavaScript"
    OTHER = "Other"


class IssueSeverity(Enum):
    """Severity of a file-level issue."""
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"
    CRITICAL = "Critical"


class RecommendationPriority(Enum):
    """Priority of a file-level recommendation."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


def _alt_coverage(total_images: int, images_without_alt: int) -> float:
    if total_images > 0:
        return (total_images - images_without_alt) / total_images * 100
    return 0.0


def _semantic_ratio(semantic_elements_count: int, total_elements: int) -> float:
    if total_elements > 0:
        return semantic_elements_count / total_elements * 100
    return 0.0


# ============================================================================
# Repository Models
# ============================================================================

@dataclass
class RepoInfo:
    """A public repository owned by the analyzed user."""

    name: str
    full_name: str = ""
    language: Optional[str] = None
    description: Optional[str] = None
    updated_at: datetime = field(default_factory=datetime.now)
    size: int = 0
    is_static: bool = False
    html_url: str = ""


@dataclass
class RepoFile:
    """A downloaded web file."""

    name: str
    path: str
    content: str = ""
    repository: str = ""
    type: FileType = FileType.OTHER
    size: int = 0


# ============================================================================
# File Analysis Models
# ============================================================================

@dataclass
class FileMetrics:
    """Quality profile of one markup document."""

    # Document structure
    has_doctype: bool = False
    has_lang_attribute: bool = False
    has_meta_charset: bool = False
    has_meta_viewport: bool = False
    has_meta_description: bool = False
    has_title: bool = False

    # Semantic HTML
    semantic_elements_used: list[str] = field(default_factory=list)
    semantic_elements_count: int = 0
    uses_main_element: bool = False
    uses_nav_element: bool = False
    uses_header_element: bool = False
    uses_footer_element: bool = False
    uses_section_elements: bool = False
    uses_article_elements: bool = False

    # Accessibility
    total_images: int = 0
    images_without_alt: int = 0

    # Heading structure (ascending numeric order)
    heading_levels: list[int] = field(default_factory=list)
    total_headings: int = 0
    has_proper_heading_hierarchy: bool = False

    # General stats
    total_elements: int = 0
    div_elements: int = 0

    @property
    def alt_tag_coverage(self) -> float:
        return _alt_coverage(self.total_images, self.images_without_alt)

    @property
    def semantic_ratio(self) -> float:
        return _semantic_ratio(self.semantic_elements_count, self.total_elements)


@dataclass
class HtmlIssue:
    """A heuristic quality issue found in one file."""

    type: str
    description: str
    severity: IssueSeverity
    element_path: Optional[str] = None
    line_number: Optional[int] = None


@dataclass
class HtmlRecommendation:
    """An actionable suggestion for one file."""

    category: str
    title: str
    description: str
    priority: RecommendationPriority
    example_code: Optional[str] = None


@dataclass
class HtmlAnalysisResult:
    """Complete analysis of one HTML file."""

    repository: str
    file_path: str
    file_size: int = 0
    metrics: FileMetrics = field(default_factory=FileMetrics)
    issues: list[HtmlIssue] = field(default_factory=list)
    recommendations: list[HtmlRecommendation] = field(default_factory=list)
    analyzed_at: datetime = field(default_factory=datetime.now)


# ============================================================================
# Persisted History Models
# ============================================================================

@dataclass
class AnalysisSession:
    """One analysis run over a user's repositories."""

    id: int
    created_at: datetime
    username: str
    total_repositories: int = 0
    total_html_files: int = 0


@dataclass
class RepositoryAnalysis:
    """Per-repository summary within a session."""

    id: int
    session_id: int
    repository_name: str
    language: str = "Unknown"
    last_updated: Optional[datetime] = None
    is_static: bool = False
    html_files_count: int = 0


@dataclass
class FileAnalysisRecord:
    """Flattened, persisted form of FileMetrics plus issue counts.

    Coverage and semantic ratio are derived from the stored counts.
    """

    file_path: str = ""
    file_name: str = ""
    file_size: int = 0
    analyzed_at: datetime = field(default_factory=datetime.now)

    has_doctype: bool = False
    has_lang_attribute: bool = False
    has_meta_charset: bool = False
    has_meta_viewport: bool = False
    has_meta_description: bool = False
    has_title: bool = False

    semantic_elements_count: int = 0
    uses_main_element: bool = False
    uses_nav_element: bool = False
    uses_header_element: bool = False
    uses_footer_element: bool = False

    total_images: int = 0
    images_without_alt: int = 0

    total_headings: int = 0
    has_proper_heading_hierarchy: bool = False

    total_elements: int = 0
    issues_count: int = 0
    critical_issues: int = 0
    warning_issues: int = 0

    id: Optional[int] = None
    repository_analysis_id: Optional[int] = None

    @property
    def alt_tag_coverage(self) -> float:
        return _alt_coverage(self.total_images, self.images_without_alt)

    @property
    def semantic_ratio(self) -> float:
        return _semantic_ratio(self.semantic_elements_count, self.total_elements)

    @classmethod
    def from_result(cls, result: HtmlAnalysisResult) -> "FileAnalysisRecord":
        """Flatten an analysis result for storage."""
        metrics = result.metrics
        issues = result.issues
        return cls(
            file_path=result.file_path,
            file_name=result.file_path.replace("\\", "/").rsplit("/", 1)[-1],
            file_size=result.file_size,
            analyzed_at=result.analyzed_at,
            has_doctype=metrics.has_doctype,
            has_lang_attribute=metrics.has_lang_attribute,
            has_meta_charset=metrics.has_meta_charset,
            has_meta_viewport=metrics.has_meta_viewport,
            has_meta_description=metrics.has_meta_description,
            has_title=metrics.has_title,
            semantic_elements_count=metrics.semantic_elements_count,
            uses_main_element=metrics.uses_main_element,
            uses_nav_element=metrics.uses_nav_element,
            uses_header_element=metrics.uses_header_element,
            uses_footer_element=metrics.uses_footer_element,
            total_images=metrics.total_images,
            images_without_alt=metrics.images_without_alt,
            total_headings=metrics.total_headings,
            has_proper_heading_hierarchy=metrics.has_proper_heading_hierarchy,
            total_elements=metrics.total_elements,
            issues_count=len(issues),
            critical_issues=sum(1 for i in issues if i.severity == IssueSeverity.CRITICAL),
            warning_issues=sum(1 for i in issues if i.severity == IssueSeverity.WARNING),
        )


@dataclass
class SessionSnapshot:
    """A session read back from the store with its child records.

    Children are keyed by id; file records are grouped under the id of
    their repository analysis.
    """

    session: AnalysisSession
    repositories: dict[int, RepositoryAnalysis] = field(default_factory=dict)
    files_by_repository: dict[int, list[FileAnalysisRecord]] = field(default_factory=dict)

    @property
    def files(self) -> list[FileAnalysisRecord]:
        """All file records of the session, repository by repository."""
        return [
            record
            for repo_id in self.repositories
            for record in self.files_by_repository.get(repo_id, [])
        ]


# ============================================================================
# Portfolio Insight Models
# ============================================================================

@dataclass
class SemanticInsights:
    files_using_main_element: int = 0
    files_using_nav_element: int = 0
    files_using_header_element: int = 0
    files_using_footer_element: int = 0
    avg_semantic_elements_per_file: float = 0.0
    semantic_adoption_trend: str = ""


@dataclass
class AccessibilityInsights:
    total_images: int = 0
    images_with_alt_text: int = 0
    files_with_perfect_alt_coverage: int = 0
    files_with_proper_headings: int = 0
    accessibility_score: float = 0.0


@dataclass
class StructureInsights:
    files_with_doctype: int = 0
    files_with_lang_attribute: int = 0
    files_with_meta_viewport: int = 0
    files_with_meta_description: int = 0
    files_with_title: int = 0
    structural_consistency_score: float = 0.0


@dataclass
class TrendInsights:
    semantic_ratio_change: float = 0.0
    accessibility_change: float = 0.0
    overall_trend: str = TREND_NO_DATA
    sessions_compared: int = 0


@dataclass
class PortfolioInsights:
    """Session-scoped portfolio view. Recomputed on every request."""

    username: str = ""
    generated_at: Optional[datetime] = None
    analysis_date: Optional[datetime] = None
    message: str = ""

    # Overview
    total_repositories: int = 0
    total_html_files: int = 0
    avg_semantic_ratio: float = 0.0
    avg_alt_coverage: float = 0.0
    overall_quality_score: float = 0.0

    semantic_insights: SemanticInsights = field(default_factory=SemanticInsights)
    accessibility_insights: AccessibilityInsights = field(default_factory=AccessibilityInsights)
    structure_insights: StructureInsights = field(default_factory=StructureInsights)
    trend_insights: TrendInsights = field(default_factory=TrendInsights)

    top_recommendations: list[str] = field(default_factory=list)
