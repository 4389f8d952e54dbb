"""Per-file metric extraction from a parsed markup document."""

from typing import Iterable, Optional

from devdash.constants import DOCTYPE_TOKEN, HEADING_TAGS, SEMANTIC_ELEMENTS
from devdash.document import HtmlDocument
from devdash.headings import check_heading_hierarchy
from devdash.models import FileMetrics


class MetricExtractor:
    """Turns a parsed document into a FileMetrics quality profile.

    The semantic vocabulary is supplied at construction and never mutated,
    so one extractor can be shared across worker threads.
    """

    # Semantic elements with a dedicated usage flag
    USAGE_FLAGS = {
        "main": "uses_main_element",
        "nav": "uses_nav_element",
        "header": "uses_header_element",
        "footer": "uses_footer_element",
        "section": "uses_section_elements",
        "article": "uses_article_elements",
    }

    def __init__(self, semantic_elements: Iterable[str] = SEMANTIC_ELEMENTS):
        self.semantic_elements = tuple(semantic_elements)

    def extract(self, document: HtmlDocument, raw_text: Optional[str] = None) -> FileMetrics:
        """Extract all metrics from a document.

        Args:
            document: Parsed document
            raw_text: Source markup, used only for DOCTYPE detection

        Returns:
            Fully populated FileMetrics
        """
        metrics = FileMetrics()

        self._analyze_document_structure(document, raw_text or "", metrics)
        self._analyze_semantic_structure(document, metrics)
        self._analyze_accessibility(document, metrics)
        self._analyze_heading_structure(document, metrics)
        self._analyze_general_stats(document, metrics)

        return metrics

    def _analyze_document_structure(
        self, document: HtmlDocument, raw_text: str, metrics: FileMetrics
    ) -> None:
        # Some tree builders fold the doctype into text, so check the source too
        metrics.has_doctype = (
            document.has_doctype_node()
            or raw_text.strip().lower().startswith(DOCTYPE_TOKEN)
        )

        html_node = document.find("html")
        if html_node is not None:
            metrics.has_lang_attribute = document.attribute(html_node, "lang") != ""

        head = document.find("head")
        if head is not None:
            metrics.has_meta_charset = document.select_one("meta[charset]", head) is not None
            metrics.has_meta_viewport = (
                document.select_one('meta[name="viewport"]', head) is not None
            )
            metrics.has_meta_description = (
                document.select_one('meta[name="description"]', head) is not None
            )
            metrics.has_title = document.select_one("title", head) is not None

    def _analyze_semantic_structure(self, document: HtmlDocument, metrics: FileMetrics) -> None:
        for element in self.semantic_elements:
            count = len(document.find_all(element))
            if count == 0:
                continue

            metrics.semantic_elements_used.append(element)
            metrics.semantic_elements_count += count

            flag = self.USAGE_FLAGS.get(element)
            if flag:
                setattr(metrics, flag, True)

    def _analyze_accessibility(self, document: HtmlDocument, metrics: FileMetrics) -> None:
        images = document.find_all("img")
        metrics.total_images = len(images)
        # A present but empty alt counts as missing
        metrics.images_without_alt = sum(
            1 for img in images if not document.attribute(img, "alt")
        )

    def _analyze_heading_structure(self, document: HtmlDocument, metrics: FileMetrics) -> None:
        headings = document.find_all(list(HEADING_TAGS))
        metrics.total_headings = len(headings)
        # Validation looks at which levels exist, not where they appear
        metrics.heading_levels = sorted(int(h.name[1]) for h in headings)
        metrics.has_proper_heading_hierarchy = check_heading_hierarchy(metrics.heading_levels)

    def _analyze_general_stats(self, document: HtmlDocument, metrics: FileMetrics) -> None:
        metrics.total_elements = document.count_elements()
        metrics.div_elements = len(document.find_all("div"))
