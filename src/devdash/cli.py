"""Command-line interface for the HTML portfolio analyzer."""

import io
import json
import sys
from contextlib import contextmanager, redirect_stdout
from dataclasses import asdict, is_dataclass
from enum import Enum

from devdash.aggregator import PortfolioAggregator, most_used_semantic_elements
from devdash.config import AnalysisThresholds, Config, settings
from devdash.dashboard import DevDashboard
from devdash.database import get_store
from devdash.github import GitHubClient
from devdash.logging_config import setup_logging
from devdash.models import IssueSeverity
from devdash.scoring import average_semantic_ratio, overview_alt_coverage

SEVERITY_ICONS = {
    IssueSeverity.CRITICAL: "🔴",
    IssueSeverity.ERROR: "🟠",
    IssueSeverity.WARNING: "🟡",
    IssueSeverity.INFO: "🔵",
}


def _json_default(value):
    if isinstance(value, Enum):
        return value.value
    return str(value)


def to_json(value) -> str:
    """Serialize dataclasses (or lists of them) to indented JSON."""
    if is_dataclass(value):
        value = asdict(value)
    elif isinstance(value, list):
        value = [asdict(v) if is_dataclass(v) else v for v in value]
    return json.dumps(value, indent=2, default=_json_default)


def write_output(output: str, output_file=None):
    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(output)
        print(f"Results written to {output_file}")
    else:
        print(output)


@contextmanager
def text_output(output_file=None):
    """Send everything printed inside the block to write_output."""
    if not output_file:
        yield
        return

    buffer = io.StringIO()
    with redirect_stdout(buffer):
        yield
    write_output(buffer.getvalue(), output_file)


def print_file_result(result):
    """Print key metrics and the first issues of one analyzed file."""
    m = result.metrics
    print(f"   📄 {result.repository}/{result.file_path}")
    print(f"      Semantic Elements: {len(m.semantic_elements_used)} types used "
          f"({', '.join(m.semantic_elements_used)})")
    print(f"      Semantic Ratio: {m.semantic_ratio:.1f}%")
    print(f"      Alt Text Coverage: {m.alt_tag_coverage:.1f}% "
          f"({m.total_images - m.images_without_alt}/{m.total_images} images)")
    print(f"      Has Main Element: {'✅' if m.uses_main_element else '❌'}")
    print(f"      Proper Heading Hierarchy: {'✅' if m.has_proper_heading_hierarchy else '❌'}")

    if result.issues:
        print(f"      Issues Found: {len(result.issues)}")
        for issue in result.issues[:3]:
            print(f"        {SEVERITY_ICONS[issue.severity]} {issue.description}")
    else:
        print("      Issues Found: 0 ✅")
    print()


def print_insights(insights):
    """Print portfolio insights in a formatted way."""
    if insights.message:
        print(f"\n{insights.message}")
        return

    print(f"\n{'=' * 60}")
    print(f"HTML Portfolio Insights for: {insights.username}")
    print(f"{'=' * 60}")
    print(f"\n📊 Overall Quality Score: {insights.overall_quality_score:.1f}/100")
    print(f"  • Repositories: {insights.total_repositories}")
    print(f"  • HTML files: {insights.total_html_files}")
    print(f"  • Average semantic ratio: {insights.avg_semantic_ratio:.1f}%")
    print(f"  • Average alt coverage: {insights.avg_alt_coverage:.1f}%")

    s = insights.semantic_insights
    print("\n🏷️  Semantic HTML:")
    print(f"  • Files using <main>: {s.files_using_main_element}")
    print(f"  • Files using <nav>: {s.files_using_nav_element}")
    print(f"  • Avg semantic elements per file: {s.avg_semantic_elements_per_file:.1f}")
    print(f"  • Adoption trend: {s.semantic_adoption_trend}")

    a = insights.accessibility_insights
    print("\n♿ Accessibility:")
    print(f"  • Images with alt text: {a.images_with_alt_text}/{a.total_images}")
    print(f"  • Files with proper headings: {a.files_with_proper_headings}")
    print(f"  • Accessibility score: {a.accessibility_score:.1f}/100")

    st = insights.structure_insights
    print("\n🧱 Structure:")
    print(f"  • Files with DOCTYPE: {st.files_with_doctype}")
    print(f"  • Files with lang attribute: {st.files_with_lang_attribute}")
    print(f"  • Files with viewport: {st.files_with_meta_viewport}")
    print(f"  • Consistency score: {st.structural_consistency_score:.1f}/100")

    t = insights.trend_insights
    print("\n📈 Trend:")
    print(f"  • Semantic ratio change: {t.semantic_ratio_change:+.1f}")
    print(f"  • Accessibility change: {t.accessibility_change:+.1f}")
    print(f"  • Overall: {t.overall_trend}")

    if insights.top_recommendations:
        print("\n💡 Recommendations:")
        for rec in insights.top_recommendations:
            print(f"  • {rec}")

    print(f"\n{'=' * 60}\n")


def analyze_command(args):
    """Analyze a user's repositories and record a new session."""
    config = Config.from_env()
    username = args.username or config.github_username
    if not config.github_token or not username:
        print("Error: Set GITHUB_TOKEN and GITHUB_USERNAME in .env or pass a username")
        sys.exit(1)

    client = GitHubClient(
        token=config.github_token,
        username=username,
        api_url=config.github_api_url,
        timeout=config.timeout,
        max_retries=config.max_retries,
        max_files_per_repo=config.max_files_per_repo,
    )
    store = get_store(args.backend)
    try:
        dashboard = DevDashboard(
            client,
            store,
            thresholds=AnalysisThresholds.from_env(),
            max_workers=config.max_workers,
        )
        run = dashboard.run(username)
    finally:
        store.close()

    if args.output == "json":
        write_output(to_json(run.insights), args.output_file)
        return

    with text_output(args.output_file):
        for result in run.results:
            print_file_result(result)

        top_elements = most_used_semantic_elements(run.results)
        if top_elements:
            print("🏷️  Most used semantic elements:")
            for element, count in top_elements:
                print(f"   • {element}: used in {count} files")

        print_insights(run.insights)


def insights_command(args):
    """Print insights for a user from stored history."""
    store = get_store(args.backend)
    try:
        insights = PortfolioAggregator(store, AnalysisThresholds.from_env()).generate_portfolio_insights(
            args.username
        )
    finally:
        store.close()

    if args.output == "json":
        write_output(to_json(insights), args.output_file)
    else:
        with text_output(args.output_file):
            print_insights(insights)


def history_command(args):
    """List a user's most recent sessions."""
    store = get_store(args.backend)
    try:
        snapshots = store.query_recent_sessions(args.username, args.limit)
    finally:
        store.close()

    if not snapshots:
        print(f"No analysis history found for: {args.username}")
        return

    rows = [
        {
            "session_id": snapshot.session.id,
            "created_at": snapshot.session.created_at,
            "total_repositories": snapshot.session.total_repositories,
            "total_html_files": len(snapshot.files),
            "avg_semantic_ratio": round(average_semantic_ratio(snapshot.files), 2),
            "avg_alt_coverage": round(overview_alt_coverage(snapshot.files), 2),
        }
        for snapshot in snapshots
    ]

    if args.output == "json":
        write_output(to_json(rows), args.output_file)
        return

    with text_output(args.output_file):
        print(f"\n{'=' * 60}")
        print(f"Analysis History for: {args.username}")
        print(f"{'=' * 60}\n")
        for row in rows:
            print(f"Session {row['session_id']} ({row['created_at']})")
            print(f"  Repositories: {row['total_repositories']}")
            print(f"  HTML files: {row['total_html_files']}")
            print(f"  Avg Semantic Ratio: {row['avg_semantic_ratio']:.1f}%")
            print(f"  Avg Alt Coverage: {row['avg_alt_coverage']:.1f}%")
            print("-" * 30)


def _add_output_arguments(parser):
    parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--output-file",
        "-f",
        help="Write output to file instead of stdout",
    )


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        description="DevDash - Score the HTML quality of a developer's public repositories"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )
    parser.add_argument(
        "--backend",
        choices=["local", "memory"],
        default=settings.DB_BACKEND,
        help="Storage backend for analysis history (default: from DB_BACKEND)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser(
        "analyze", help="Analyze a user's public repositories and record a session."
    )
    analyze_parser.add_argument(
        "username", nargs="?", help="GitHub username (default: GITHUB_USERNAME)"
    )
    _add_output_arguments(analyze_parser)
    analyze_parser.set_defaults(func=analyze_command)

    insights_parser = subparsers.add_parser(
        "insights", help="Show portfolio insights from stored history."
    )
    insights_parser.add_argument("username", help="GitHub username")
    _add_output_arguments(insights_parser)
    insights_parser.set_defaults(func=insights_command)

    history_parser = subparsers.add_parser(
        "history", help="List a user's most recent analysis sessions."
    )
    history_parser.add_argument("username", help="GitHub username")
    history_parser.add_argument(
        "--limit",
        type=int,
        default=5,
        help="Number of sessions to show (default: 5)",
    )
    _add_output_arguments(history_parser)
    history_parser.set_defaults(func=history_command)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level=args.log_level,
        log_file=getattr(args, 'log_file', None),
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return

    try:
        args.func(args)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
