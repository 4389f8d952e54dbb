"""Tests for HtmlAnalyzer."""

from unittest.mock import patch

import pytest

from devdash.analyzer import HtmlAnalyzer
from devdash.document import ParseError
from devdash.models import FileType, IssueSeverity, RepoFile


@pytest.fixture
def analyzer():
    return HtmlAnalyzer(parser="html.parser")


def html_file(path, content, file_type=FileType.HTML):
    return RepoFile(
        name=path.rsplit("/", 1)[-1],
        path=path,
        content=content,
        repository="site",
        type=file_type,
        size=len(content),
    )


class TestAnalyzeFile:
    """Tests for single-file analysis."""

    def test_well_formed_page(self, analyzer, portfolio_page):
        result = analyzer.analyze_file(html_file("index.html", portfolio_page))

        assert result.repository == "site"
        assert result.file_path == "index.html"
        assert result.file_size == len(portfolio_page)
        assert result.metrics.has_doctype is True
        assert result.metrics.total_images == 3
        assert [i.type for i in result.issues] == ["MissingAltText"]
        assert [r.title for r in result.recommendations] == ["Improve image accessibility"]

    def test_empty_file(self, analyzer):
        result = analyzer.analyze_file(html_file("empty.html", ""))

        assert len(result.issues) == 1
        assert result.issues[0].type == "EmptyFile"
        assert result.issues[0].severity == IssueSeverity.ERROR
        assert result.recommendations == []
        assert result.metrics.total_elements == 0

    def test_parse_error(self, analyzer):
        with patch("devdash.analyzer.parse_document", side_effect=ParseError("bad markup")):
            result = analyzer.analyze_file(html_file("broken.html", "<html>"))

        assert len(result.issues) == 1
        assert result.issues[0].type == "ParseError"
        assert result.issues[0].description == "Failed to parse HTML: bad markup"
        assert result.issues[0].severity == IssueSeverity.ERROR

    def test_rejected_markup(self, analyzer):
        result = analyzer.analyze_file(html_file("broken.html", "<html><![a[ x"))

        assert len(result.issues) == 1
        assert result.issues[0].type == "ParseError"
        assert result.issues[0].description.startswith("Failed to parse HTML:")
        assert result.issues[0].severity == IssueSeverity.ERROR
        assert result.recommendations == []
        assert result.metrics.total_elements == 0
        assert result.metrics.semantic_ratio == 0.0

    def test_bare_fragment(self, analyzer):
        result = analyzer.analyze_file(html_file("frag.html", "<div><p>Hello</p></div>"))

        types = [i.type for i in result.issues]
        assert "MissingDoctype" in types
        assert "MissingMainElement" in types
        assert "ImproperHeadingHierarchy" not in types
        assert result.recommendations[0].title == "Increase semantic HTML usage"


class TestAnalyzeFiles:
    """Tests for batch analysis."""

    def test_skips_non_html(self, analyzer, portfolio_page):
        files = [
            html_file("index.html", portfolio_page),
            html_file("style.css", "body {}", FileType.CSS),
            html_file("app.js", "let x;", FileType.JAVASCRIPT),
        ]

        results = analyzer.analyze_files(files)

        assert [r.file_path for r in results] == ["index.html"]

    def test_preserves_input_order(self, analyzer, portfolio_page):
        paths = [f"page{i}.html" for i in range(12)]
        files = [html_file(path, portfolio_page) for path in paths]

        results = analyzer.analyze_files(files, max_workers=4)

        assert [r.file_path for r in results] == paths

    def test_no_html_files(self, analyzer):
        assert analyzer.analyze_files([html_file("a.css", "x", FileType.CSS)]) == []

    def test_unexpected_failure_is_isolated(self, analyzer, portfolio_page):
        files = [html_file("ok.html", portfolio_page), html_file("boom.html", portfolio_page)]
        real_analyze = analyzer.analyze_file

        def analyze(html):
            if html.path == "boom.html":
                raise RuntimeError("extractor exploded")
            return real_analyze(html)

        with patch.object(analyzer, "analyze_file", side_effect=analyze):
            results = analyzer.analyze_files(files, max_workers=2)

        assert [r.file_path for r in results] == ["ok.html", "boom.html"]
        assert results[0].issues[0].type == "MissingAltText"
        assert results[1].issues[0].type == "ParseError"
        assert results[1].issues[0].description == "Failed to parse HTML: extractor exploded"
