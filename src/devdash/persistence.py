"""Storing a completed analysis run as session history."""

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from devdash.database import AbstractAnalysisStore
from devdash.models import FileAnalysisRecord, HtmlAnalysisResult, RepoInfo

logger = logging.getLogger(__name__)


def save_analysis_session(
    store: AbstractAnalysisStore,
    username: str,
    repositories: Sequence[RepoInfo],
    results: Sequence[HtmlAnalysisResult],
) -> int:
    """Persist one session with its repository summaries and file records.

    Results whose repository is not among `repositories` are skipped.

    Args:
        store: Persistence port
        username: Account the session belongs to
        repositories: Repositories analyzed in this run
        results: Per-file analysis results

    Returns:
        The new session id
    """
    session_id = store.append_session(
        username=username,
        total_repositories=len(repositories),
        total_html_files=len(results),
    )

    results_by_repo: Dict[str, List[HtmlAnalysisResult]] = defaultdict(list)
    for result in results:
        results_by_repo[result.repository].append(result)

    repos_by_name = {repo.name: repo for repo in repositories}

    for repo_name, repo_results in results_by_repo.items():
        repo_info = repos_by_name.get(repo_name)
        if repo_info is None:
            logger.warning(f"Skipping {len(repo_results)} result(s) for unknown repository: {repo_name}")
            continue

        repo_analysis_id = store.append_repository_analysis(
            session_id=session_id,
            repository_name=repo_info.name,
            language=repo_info.language or "Unknown",
            last_updated=repo_info.updated_at,
            is_static=repo_info.is_static,
            html_files_count=len(repo_results),
        )

        for result in repo_results:
            store.append_file_record(repo_analysis_id, FileAnalysisRecord.from_result(result))

    logger.info(
        f"Saved analysis data for {len(results)} files across "
        f"{len(repositories)} repositories (session {session_id})"
    )
    return session_id
