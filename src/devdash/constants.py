"""Centralized constants for the HTML portfolio analyzer.

This module contains fixed vocabularies, weights and labels that are used
across multiple modules. For user-configurable thresholds, see config.py
and AnalysisThresholds.
"""

# =============================================================================
# Metric Extraction Constants
# =============================================================================

# Elements that carry document meaning rather than generic grouping
SEMANTIC_ELEMENTS = (
    "article",
    "aside",
    "details",
    "figcaption",
    "figure",
    "footer",
    "header",
    "main",
    "mark",
    "nav",
    "section",
    "summary",
    "time",
)

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

DOCTYPE_TOKEN = "<!doctype"


# =============================================================================
# Scoring Constants
# =============================================================================

# Per-file structure score weights (sum to 100)
STRUCTURE_WEIGHTS = {
    "has_doctype": 10,
    "has_lang_attribute": 10,
    "has_meta_charset": 15,
    "has_meta_viewport": 10,
    "has_meta_description": 15,
    "has_title": 15,
    "has_proper_heading_hierarchy": 25,
}

# Raw semantic ratios rarely exceed 50%, so they are doubled and capped
SEMANTIC_SCORE_MULTIPLIER = 2
MAX_SCORE = 100.0

# Alt coverage used by the accessibility score when no file has images
ACCESSIBILITY_NO_IMAGES_ALT_SCORE = 100.0

# Alt coverage used by overview averages and trends when no file has images
OVERVIEW_NO_IMAGES_ALT_COVERAGE = 0.0

# Consistency of an empty file set
EMPTY_CONSISTENCY_SCORE = 100.0


# =============================================================================
# Trend Constants
# =============================================================================

MIN_SESSIONS_FOR_TREND = 2

# Sessions read for the semantic adoption trend and the combined trend
SEMANTIC_TREND_HISTORY = 3
COMBINED_TREND_HISTORY = 5

SEMANTIC_TREND_IMPROVING = "📈 Improving"
SEMANTIC_TREND_DECLINING = "📉 Declining"
SEMANTIC_TREND_STABLE = "➡️ Stable"
SEMANTIC_TREND_INSUFFICIENT = "Insufficient data"

TREND_IMPROVING = "Improving"
TREND_DECLINING = "Declining"
TREND_STABLE = "Stable"
TREND_NO_DATA = "No data"

NO_ANALYSIS_DATA_MESSAGE = "No analysis data found."

# Number of entries in the most-used semantic elements ranking
TOP_SEMANTIC_ELEMENTS_COUNT = 5


# =============================================================================
# Repository Fetching Constants
# =============================================================================

DEFAULT_GITHUB_API_URL = "https://api.github.com"

# Repositories requested per page when listing a user's repositories
REPOS_PER_PAGE = 100

# Files downloaded per repository
DEFAULT_MAX_FILES_PER_REPO = 10

# Static repositories analyzed per run, and the fallback when none are static
DEFAULT_MAX_STATIC_REPOS = 3
DEFAULT_FALLBACK_REPOS = 2

# Default request timeout in seconds
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30

# Default maximum retries for failed requests
DEFAULT_MAX_RETRIES = 3

# Base for exponential backoff calculation
EXPONENTIAL_BACKOFF_BASE = 2

# Pause between file downloads in seconds
DOWNLOAD_DELAY_SECONDS = 0.1

WEB_FILE_EXTENSIONS = (".html", ".htm", ".css", ".js", ".jsx", ".ts", ".tsx")

SKIPPED_DIRECTORIES = frozenset({
    "node_modules", ".git", "dist", "build", ".next", ".nuxt", "vendor",
})

STATIC_SITE_LANGUAGES = frozenset({"html", "css", "javascript", "typescript"})

STATIC_SITE_NAME_HINTS = ("website", "portfolio")


# =============================================================================
# Analysis Constants
# =============================================================================

# Default worker count for parallel file analysis
DEFAULT_MAX_WORKERS = 4
